"""Startup script for production deployment.

On a fresh database (no tables), creates all tables from models and stamps
Alembic to head. On an existing database, runs Alembic migrations normally.
"""

import logging
import subprocess
import sys

from sqlalchemy import inspect

from loveslices.core.logging import configure_logging
from loveslices.db.session import engine
from loveslices.db.base import Base
from loveslices.models import (  # noqa: F401
    Conversation, JournalEntry, Loveslice, Question, Response, SpokenLoveslice, User,
)

logger = logging.getLogger("loveslices.start")


def main():
    configure_logging()
    inspector = inspect(engine)
    tables = inspector.get_table_names()

    if "users" not in tables:
        logger.info("Fresh database detected, creating all tables...")
        Base.metadata.create_all(bind=engine)
        logger.info("Tables created. Stamping Alembic to head...")
        subprocess.check_call([sys.executable, "-m", "alembic", "stamp", "head"])
    else:
        logger.info("Existing database, running migrations...")
        subprocess.check_call([sys.executable, "-m", "alembic", "upgrade", "head"])
    logger.info("Database ready.")


if __name__ == "__main__":
    main()
