import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from loveslices.api import deps
from loveslices.core.exceptions import LoveslicesError
from loveslices.db.session import get_db
from loveslices.models.user import User
from loveslices.schemas.conversation import (
    ConversationCreate,
    ConversationEnd,
    ConversationEnded,
)
from loveslices.schemas.journal import ConversationPublic
from loveslices.services import conversations as conversation_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=ConversationPublic, status_code=status.HTTP_201_CREATED)
def start_conversation(
    payload: ConversationCreate,
    db: Session = Depends(get_db),  # noqa: B008
    current_user: User = Depends(deps.get_current_user),  # noqa: B008
) -> ConversationPublic:
    try:
        conversation = conversation_service.start_conversation(
            db, current_user, payload.loveslice_id
        )
    except LoveslicesError as exc:
        raise deps.http_error(exc) from exc
    return ConversationPublic.model_validate(conversation)


@router.get("/{conversation_id}", response_model=ConversationPublic)
def get_conversation(
    conversation_id: int,
    db: Session = Depends(get_db),  # noqa: B008
    current_user: User = Depends(deps.get_current_user),  # noqa: B008
) -> ConversationPublic:
    try:
        conversation = conversation_service.get_conversation_for_user(
            db, current_user, conversation_id
        )
    except LoveslicesError as exc:
        raise deps.http_error(exc) from exc
    return ConversationPublic.model_validate(conversation)


@router.patch("/{conversation_id}/end", response_model=ConversationEnded)
def end_conversation(
    conversation_id: int,
    payload: ConversationEnd,
    db: Session = Depends(get_db),  # noqa: B008
    current_user: User = Depends(deps.get_current_user),  # noqa: B008
) -> ConversationEnded:
    """Close a conversation, optionally saving it as a spoken loveslice."""
    try:
        return conversation_service.end_conversation(db, current_user, conversation_id, payload)
    except LoveslicesError as exc:
        logger.warning(f"Ending conversation {conversation_id} failed: {exc}")
        raise deps.http_error(exc) from exc
