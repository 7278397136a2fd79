import logging

from loveslices.core.config import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    settings = get_settings()
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format=LOG_FORMAT,
    )
    # SQL echo is too chatty outside of debugging sessions
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
