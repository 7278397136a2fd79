"""Answering questions and pairing answers into written loveslices.

A loveslice is formed the moment the second partner answers a question the
first one already answered. Forming it also adds the pair to the shared
journal.
"""
import logging

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from loveslices.core.exceptions import (
    NotFoundError,
    PermissionDeniedError,
    StorageError,
    ValidationError,
)
from loveslices.models import Loveslice, Question, Response, User
from loveslices.schemas.journal import ResponseView, WrittenLovesliceView
from loveslices.schemas.loveslice import ResponseSubmitted
from loveslices.services import journal as journal_service
from loveslices.services import lookups

logger = logging.getLogger(__name__)


def can_view(user: User, participants: tuple[int, int]) -> bool:
    """Participants and the current partner of a participant may look."""
    if user.id in participants:
        return True
    return user.partner_id is not None and user.partner_id in participants


def get_response_by_question_and_user(
    db: Session, question_id: int, user_id: int
) -> Response | None:
    return (
        db.query(Response)
        .filter(Response.question_id == question_id, Response.user_id == user_id)
        .first()
    )


def _existing_loveslice(db: Session, question_id: int, a: int, b: int) -> Loveslice | None:
    return (
        db.query(Loveslice)
        .filter(
            Loveslice.question_id == question_id,
            or_(
                (Loveslice.user1_id == a) & (Loveslice.user2_id == b),
                (Loveslice.user1_id == b) & (Loveslice.user2_id == a),
            ),
        )
        .first()
    )


def searchable_content(question: Question, *responses: Response) -> str:
    return "\n".join([question.content, *(response.content for response in responses)])


def submit_response(
    db: Session, user: User, question_id: int, content: str
) -> ResponseSubmitted:
    question = lookups.get_question(db, question_id)
    if question is None:
        raise NotFoundError("Question not found")
    if get_response_by_question_and_user(db, question_id, user.id) is not None:
        raise ValidationError("You have already answered this question")

    loveslice = None
    entry = None
    try:
        response = Response(user_id=user.id, question_id=question_id, content=content)
        db.add(response)
        db.flush()

        partner_response = None
        if user.partner_id is not None:
            partner_response = get_response_by_question_and_user(
                db, question_id, user.partner_id
            )
        if partner_response is not None and _existing_loveslice(
            db, question_id, user.id, user.partner_id
        ) is None:
            # The partner answered first, so they are the first participant
            loveslice = Loveslice(
                question_id=question_id,
                user1_id=user.partner_id,
                user2_id=user.id,
                response1_id=partner_response.id,
                response2_id=response.id,
            )
            db.add(loveslice)
            db.flush()
            entry = journal_service.record_entry(
                db,
                (loveslice.user1_id, loveslice.user2_id),
                question.theme,
                searchable_content(question, partner_response, response),
                written_loveslice_id=loveslice.id,
            )
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(f"Failed to store response of user {user.id}: {exc}")
        raise StorageError("Failed to submit response") from exc

    db.refresh(response)
    view = ResponseView.model_validate(response, from_attributes=True)
    view.user = journal_service.user_summary(user)
    if loveslice is None:
        return ResponseSubmitted(response=view)

    logger.info(f"Loveslice formed: {loveslice.id} | question={question_id}")
    return ResponseSubmitted(
        response=view,
        loveslice=journal_service.written_loveslice_view(db, loveslice),
        journal_entry_id=entry.id,
    )


def list_loveslices(db: Session, user: User) -> list[WrittenLovesliceView]:
    rows = (
        db.query(Loveslice)
        .filter(or_(Loveslice.user1_id == user.id, Loveslice.user2_id == user.id))
        .order_by(Loveslice.created_at.desc(), Loveslice.id.desc())
        .all()
    )
    return [journal_service.written_loveslice_view(db, row) for row in rows]


def get_loveslice_for_user(db: Session, user: User, loveslice_id: int) -> Loveslice:
    loveslice = lookups.get_loveslice(db, loveslice_id)
    if loveslice is None:
        raise NotFoundError("Loveslice not found")
    if not can_view(user, (loveslice.user1_id, loveslice.user2_id)):
        raise PermissionDeniedError("You do not have access to this loveslice")
    return loveslice


def update_private_note(
    db: Session, user: User, loveslice_id: int, note: str | None
) -> WrittenLovesliceView:
    loveslice = get_loveslice_for_user(db, user, loveslice_id)
    loveslice.private_note = note
    db.add(loveslice)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(f"Failed to update note on loveslice {loveslice_id}: {exc}")
        raise StorageError("Failed to update note") from exc
    db.refresh(loveslice)
    return journal_service.written_loveslice_view(db, loveslice)
