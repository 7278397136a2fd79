"""Conversations started from a loveslice, and the spoken loveslices they leave.

Ending a conversation records its outcome and duration. When asked to, it
also saves a spoken loveslice for the couple and adds it to their journal.
"""
import logging
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from loveslices.core.exceptions import (
    NotFoundError,
    PermissionDeniedError,
    StorageError,
    ValidationError,
)
from loveslices.models import Conversation, SpokenLoveslice, User
from loveslices.schemas.conversation import ConversationEnd, ConversationEnded
from loveslices.schemas.journal import ConversationPublic
from loveslices.services import journal as journal_service
from loveslices.services import lookups
from loveslices.services.loveslices import get_loveslice_for_user

logger = logging.getLogger(__name__)


def _commit(db: Session, action: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(f"Failed to {action}: {exc}")
        raise StorageError(f"Failed to {action}") from exc


def start_conversation(db: Session, user: User, loveslice_id: int | None = None) -> Conversation:
    if loveslice_id is not None:
        loveslice = get_loveslice_for_user(db, user, loveslice_id)
        loveslice.has_started_conversation = True
        db.add(loveslice)

    conversation = Conversation(loveslice_id=loveslice_id, initiated_by_user_id=user.id)
    db.add(conversation)
    _commit(db, "start conversation")
    db.refresh(conversation)
    logger.info(f"Conversation started: {conversation.id} | loveslice={loveslice_id}")
    return conversation


def get_conversation_for_user(db: Session, user: User, conversation_id: int) -> Conversation:
    conversation = lookups.get_conversation(db, conversation_id)
    if conversation is None:
        raise NotFoundError("Conversation not found")
    initiator = conversation.initiated_by_user_id
    if initiator != user.id and (user.partner_id is None or initiator != user.partner_id):
        raise PermissionDeniedError("You do not have access to this conversation")
    return conversation


def _spoken_searchable_content(db: Session, conversation: Conversation, theme: str) -> str:
    parts = [theme]
    if conversation.loveslice_id is not None:
        loveslice = lookups.get_loveslice(db, conversation.loveslice_id)
        question = lookups.get_question(db, loveslice.question_id) if loveslice else None
        if question is not None:
            parts.append(question.content)
    return "\n".join(parts)


def end_conversation(
    db: Session,
    user: User,
    conversation_id: int,
    payload: ConversationEnd,
    now: datetime | None = None,
) -> ConversationEnded:
    conversation = get_conversation_for_user(db, user, conversation_id)
    if conversation.ended_at is not None:
        raise ValidationError("This conversation has already ended")

    wants_spoken = payload.create_spoken_loveslice or payload.continue_offline
    theme = (payload.theme or "").strip()
    if wants_spoken and not theme:
        raise ValidationError("Theme is required to create a spoken loveslice")
    if wants_spoken and user.partner_id is None:
        raise ValidationError("You need a partner to create a spoken loveslice")

    now = now or datetime.utcnow()
    conversation.ended_at = now
    conversation.duration_seconds = max(0, int((now - conversation.started_at).total_seconds()))
    conversation.outcome = payload.outcome
    db.add(conversation)

    spoken = None
    entry = None
    if wants_spoken:
        try:
            spoken = SpokenLoveslice(
                conversation_id=conversation.id,
                user1_id=user.id,
                user2_id=user.partner_id,
                outcome=payload.outcome,
                theme=theme,
                duration_seconds=conversation.duration_seconds,
                continued_offline=payload.continue_offline,
            )
            db.add(spoken)
            db.flush()
            conversation.created_spoken_loveslice = True
            entry = journal_service.record_entry(
                db,
                (spoken.user1_id, spoken.user2_id),
                theme,
                _spoken_searchable_content(db, conversation, theme),
                spoken_loveslice_id=spoken.id,
            )
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error(f"Failed to save spoken loveslice for conversation {conversation_id}: {exc}")
            raise StorageError("Failed to end conversation") from exc

    _commit(db, "end conversation")
    db.refresh(conversation)
    logger.info(
        f"Conversation ended: {conversation.id} | outcome={payload.outcome.value} "
        f"| spoken={spoken.id if spoken else None}"
    )
    return ConversationEnded(
        conversation=ConversationPublic.model_validate(conversation),
        spoken_loveslice=journal_service.spoken_loveslice_view(db, spoken) if spoken else None,
        journal_entry_id=entry.id if entry else None,
    )
