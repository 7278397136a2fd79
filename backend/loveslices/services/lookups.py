"""Lookup-by-id helpers used by the journal service.

Every single-row lookup returns ``None`` for a missing id rather than raising;
callers decide whether absence is an error.
"""
from __future__ import annotations

from typing import Iterable, TypeVar

from sqlalchemy.orm import Session

from loveslices.models import (
    Conversation,
    Loveslice,
    Question,
    Response,
    SpokenLoveslice,
    User,
)

ModelT = TypeVar("ModelT")


def _get_by_id(db: Session, model: type[ModelT], record_id: int | None) -> ModelT | None:
    if record_id is None:
        return None
    return db.query(model).filter(model.id == record_id).first()


def get_user(db: Session, user_id: int | None) -> User | None:
    return _get_by_id(db, User, user_id)


def get_question(db: Session, question_id: int | None) -> Question | None:
    return _get_by_id(db, Question, question_id)


def get_response(db: Session, response_id: int | None) -> Response | None:
    return _get_by_id(db, Response, response_id)


def get_loveslice(db: Session, loveslice_id: int | None) -> Loveslice | None:
    return _get_by_id(db, Loveslice, loveslice_id)


def get_spoken_loveslice(db: Session, spoken_loveslice_id: int | None) -> SpokenLoveslice | None:
    return _get_by_id(db, SpokenLoveslice, spoken_loveslice_id)


def get_conversation(db: Session, conversation_id: int | None) -> Conversation | None:
    return _get_by_id(db, Conversation, conversation_id)


def get_many(db: Session, model: type[ModelT], ids: Iterable[int | None]) -> dict[int, ModelT]:
    """Fetch all rows of ``model`` whose id is in ``ids`` with a single query."""
    wanted = {record_id for record_id in ids if record_id is not None}
    if not wanted:
        return {}
    rows = db.query(model).filter(model.id.in_(wanted)).all()
    return {row.id: row for row in rows}
