import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from loveslices.api import deps
from loveslices.core.exceptions import LoveslicesError
from loveslices.db.session import get_db
from loveslices.models.user import User
from loveslices.schemas.loveslice import ResponseCreate, ResponseSubmitted
from loveslices.services import loveslices as loveslice_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=ResponseSubmitted, status_code=status.HTTP_201_CREATED)
def submit_response(
    payload: ResponseCreate,
    db: Session = Depends(get_db),  # noqa: B008
    current_user: User = Depends(deps.get_current_user),  # noqa: B008
) -> ResponseSubmitted:
    """Answer a question; pairs with the partner's answer when there is one."""
    try:
        return loveslice_service.submit_response(
            db, current_user, payload.question_id, payload.content
        )
    except LoveslicesError as exc:
        logger.warning(f"Response rejected for user {current_user.id}: {exc}")
        raise deps.http_error(exc) from exc
