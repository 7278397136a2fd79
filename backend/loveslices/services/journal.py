"""Journal queries: who can see which entries, filtering, and enrichment.

Entries are visible to both participants, and partnered users additionally
see everything their partner can see. Each matching row is turned into a
``JournalEntryPublic`` carrying either the written loveslice (question, both
responses and both users) or the spoken loveslice (with its conversation).
A reference that no longer resolves is logged and skipped; it never fails
the rest of the journal.
"""
from __future__ import annotations

import logging
from typing import Iterable

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from loveslices.core.config import get_settings
from loveslices.core.exceptions import NotFoundError, StorageError, ValidationError
from loveslices.models import (
    Conversation,
    JournalEntry,
    Loveslice,
    Question,
    Response,
    SpokenLoveslice,
    SpokenRef,
    User,
    WrittenRef,
)
from loveslices.schemas.journal import (
    ConversationPublic,
    JournalEntryCreate,
    JournalEntryPublic,
    QuestionPublic,
    ResponseView,
    SpokenLovesliceView,
    WrittenLovesliceView,
)
from loveslices.schemas.user import UserSummary
from loveslices.services import lookups

logger = logging.getLogger(__name__)

LIKE_ESCAPE = "\\"


def profile_picture_path(value: str | None, prefix: str | None = None) -> str | None:
    """Turn a stored profile picture into a path the client can load.

    Absolute paths are kept as they are; bare filenames live in the upload
    directory.
    """
    if not value:
        return None
    if value.startswith("/"):
        return value
    if prefix is None:
        prefix = get_settings().profile_picture_prefix
    return f"{prefix.rstrip('/')}/{value}"


def user_summary(user: User | None) -> UserSummary | None:
    if user is None:
        return None
    summary = UserSummary.model_validate(user)
    summary.profile_picture = profile_picture_path(user.profile_picture)
    return summary


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------

def visibility_clause(db: Session, user_id: int):
    """Entries the user (and their partner, if any) takes part in."""
    user = lookups.get_user(db, user_id)
    if user is None:
        raise NotFoundError(f"User {user_id} not found")

    participants = [user_id]
    if user.partner_id is not None:
        participants.append(user.partner_id)
    return or_(
        JournalEntry.user1_id.in_(participants),
        JournalEntry.user2_id.in_(participants),
    )


def _escape_like(value: str) -> str:
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def search_clause(query: str):
    # Empty query becomes '%%' and matches every entry
    pattern = f"%{_escape_like(query)}%"
    return JournalEntry.searchable_content.ilike(pattern, escape=LIKE_ESCAPE)


def theme_clause(theme: str):
    return JournalEntry.theme == theme


def _fetch_entries(db: Session, user_id: int, *filters) -> list[JournalEntry]:
    try:
        clause = visibility_clause(db, user_id)
        return (
            db.query(JournalEntry)
            .filter(clause, *filters)
            .order_by(JournalEntry.created_at.desc(), JournalEntry.id.desc())
            .all()
        )
    except SQLAlchemyError as exc:
        logger.error(f"Journal query failed for user {user_id}: {exc}")
        raise StorageError("Failed to fetch journal entries") from exc


# ---------------------------------------------------------------------------
# Enrichment
# ---------------------------------------------------------------------------

class _LookupResolver:
    """Resolves references one query at a time."""

    def __init__(self, db: Session):
        self.db = db

    def loveslice(self, record_id: int) -> Loveslice | None:
        return lookups.get_loveslice(self.db, record_id)

    def spoken_loveslice(self, record_id: int) -> SpokenLoveslice | None:
        return lookups.get_spoken_loveslice(self.db, record_id)

    def question(self, record_id: int) -> Question | None:
        return lookups.get_question(self.db, record_id)

    def response(self, record_id: int) -> Response | None:
        return lookups.get_response(self.db, record_id)

    def user(self, record_id: int) -> User | None:
        return lookups.get_user(self.db, record_id)

    def conversation(self, record_id: int) -> Conversation | None:
        return lookups.get_conversation(self.db, record_id)


class _PrefetchedResolver:
    """Resolves references from rows fetched up front, one query per table."""

    def __init__(self, db: Session, entries: Iterable[JournalEntry]):
        refs = [entry.loveslice_ref for entry in entries]
        self.loveslices = lookups.get_many(
            db, Loveslice, (ref.loveslice_id for ref in refs if isinstance(ref, WrittenRef))
        )
        self.spoken_loveslices = lookups.get_many(
            db,
            SpokenLoveslice,
            (ref.spoken_loveslice_id for ref in refs if isinstance(ref, SpokenRef)),
        )
        written = list(self.loveslices.values())
        self.questions = lookups.get_many(db, Question, (ls.question_id for ls in written))
        self.responses = lookups.get_many(
            db,
            Response,
            [ls.response1_id for ls in written] + [ls.response2_id for ls in written],
        )
        self.users = lookups.get_many(
            db,
            User,
            [ls.user1_id for ls in written] + [ls.user2_id for ls in written],
        )
        self.conversations = lookups.get_many(
            db,
            Conversation,
            (spoken.conversation_id for spoken in self.spoken_loveslices.values()),
        )

    def loveslice(self, record_id: int) -> Loveslice | None:
        return self.loveslices.get(record_id)

    def spoken_loveslice(self, record_id: int) -> SpokenLoveslice | None:
        return self.spoken_loveslices.get(record_id)

    def question(self, record_id: int) -> Question | None:
        return self.questions.get(record_id)

    def response(self, record_id: int) -> Response | None:
        return self.responses.get(record_id)

    def user(self, record_id: int) -> User | None:
        return self.users.get(record_id)

    def conversation(self, record_id: int) -> Conversation | None:
        return self.conversations.get(record_id)


def _response_view(response: Response | None, user: User | None) -> ResponseView:
    view = ResponseView.model_validate(response, from_attributes=True) if response else ResponseView()
    view.user = user_summary(user)
    return view


def _written_view(loveslice: Loveslice, resolver) -> WrittenLovesliceView:
    view = WrittenLovesliceView.model_validate(loveslice, from_attributes=True)
    question = resolver.question(loveslice.question_id)
    view.question = QuestionPublic.model_validate(question) if question else None
    view.responses = [
        _response_view(resolver.response(loveslice.response1_id), resolver.user(loveslice.user1_id)),
        _response_view(resolver.response(loveslice.response2_id), resolver.user(loveslice.user2_id)),
    ]
    return view


def _spoken_view(spoken: SpokenLoveslice, resolver) -> SpokenLovesliceView:
    view = SpokenLovesliceView.model_validate(spoken, from_attributes=True)
    conversation = resolver.conversation(spoken.conversation_id)
    view.conversation = ConversationPublic.model_validate(conversation) if conversation else None
    return view


def _enrich(entry: JournalEntry, resolver) -> JournalEntryPublic:
    view = JournalEntryPublic.model_validate(entry)
    ref = entry.loveslice_ref

    if isinstance(ref, WrittenRef):
        loveslice = resolver.loveslice(ref.loveslice_id)
        if loveslice is None:
            logger.warning(
                f"Journal entry {entry.id} references missing loveslice {ref.loveslice_id}"
            )
        else:
            view.written_loveslice = _written_view(loveslice, resolver)
    elif isinstance(ref, SpokenRef):
        spoken = resolver.spoken_loveslice(ref.spoken_loveslice_id)
        if spoken is None:
            logger.warning(
                f"Journal entry {entry.id} references missing spoken loveslice "
                f"{ref.spoken_loveslice_id}"
            )
        else:
            view.spoken_loveslice = _spoken_view(spoken, resolver)

    return view


def enrich_entry(db: Session, entry: JournalEntry) -> JournalEntryPublic:
    try:
        return _enrich(entry, _LookupResolver(db))
    except SQLAlchemyError as exc:
        logger.error(f"Failed to enrich journal entry {entry.id}: {exc}")
        raise StorageError("Failed to load journal entry details") from exc


def enrich_entries(
    db: Session,
    entries: list[JournalEntry],
    batched: bool | None = None,
) -> list[JournalEntryPublic]:
    """Enrich entries in order.

    ``batched=True`` prefetches every referenced row with one query per table
    instead of issuing a round of lookups per entry. Output is identical.
    """
    if batched is None:
        batched = get_settings().journal_batch_enrichment
    if not batched:
        return [enrich_entry(db, entry) for entry in entries]

    try:
        resolver = _PrefetchedResolver(db, entries)
        return [_enrich(entry, resolver) for entry in entries]
    except SQLAlchemyError as exc:
        logger.error(f"Batched journal enrichment failed: {exc}")
        raise StorageError("Failed to load journal entry details") from exc


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------

def search_journal_entries(
    db: Session, user_id: int, query: str, batched: bool | None = None
) -> list[JournalEntryPublic]:
    """Visible entries whose searchable content contains ``query``, any case."""
    entries = _fetch_entries(db, user_id, search_clause(query))
    return enrich_entries(db, entries, batched=batched)


def get_journal_entries_by_theme(
    db: Session, user_id: int, theme: str, batched: bool | None = None
) -> list[JournalEntryPublic]:
    """Visible entries whose theme is exactly ``theme``."""
    entries = _fetch_entries(db, user_id, theme_clause(theme))
    return enrich_entries(db, entries, batched=batched)


def get_journal_entries_by_user_id(
    db: Session, user_id: int, batched: bool | None = None
) -> list[JournalEntryPublic]:
    entries = _fetch_entries(db, user_id)
    return enrich_entries(db, entries, batched=batched)


def list_journal_themes(db: Session, user_id: int) -> list[str]:
    try:
        clause = visibility_clause(db, user_id)
        rows = (
            db.query(JournalEntry.theme)
            .filter(clause)
            .distinct()
            .order_by(JournalEntry.theme)
            .all()
        )
    except SQLAlchemyError as exc:
        logger.error(f"Theme listing failed for user {user_id}: {exc}")
        raise StorageError("Failed to fetch journal themes") from exc
    return [theme for (theme,) in rows]


def written_loveslice_view(db: Session, loveslice: Loveslice) -> WrittenLovesliceView:
    return _written_view(loveslice, _LookupResolver(db))


def spoken_loveslice_view(db: Session, spoken: SpokenLoveslice) -> SpokenLovesliceView:
    return _spoken_view(spoken, _LookupResolver(db))


def record_entry(
    db: Session,
    participants: tuple[int, int],
    theme: str,
    searchable_content: str,
    *,
    written_loveslice_id: int | None = None,
    spoken_loveslice_id: int | None = None,
) -> JournalEntry:
    """Add a journal row for a loveslice; the caller commits."""
    user1_id, user2_id = participants
    entry = JournalEntry(
        user1_id=user1_id,
        user2_id=user2_id,
        written_loveslice_id=written_loveslice_id,
        spoken_loveslice_id=spoken_loveslice_id,
        theme=theme,
        searchable_content=searchable_content,
    )
    db.add(entry)
    db.flush()
    return entry


def _check_participant(user: User, participants: tuple[int, int], label: str) -> None:
    if user.id not in participants:
        raise ValidationError(f"You are not a participant in this {label}")


def create_journal_entry(
    db: Session, user: User, payload: JournalEntryCreate
) -> JournalEntryPublic:
    """Record a loveslice the user took part in.

    The entry is stamped with the loveslice's own two participants, so both
    of them see it whoever the caller is partnered with today.
    """
    try:
        if payload.written_loveslice_id is not None:
            loveslice = lookups.get_loveslice(db, payload.written_loveslice_id)
            if loveslice is None:
                raise NotFoundError(f"Loveslice {payload.written_loveslice_id} not found")
            participants = (loveslice.user1_id, loveslice.user2_id)
            _check_participant(user, participants, "loveslice")
        else:
            spoken = lookups.get_spoken_loveslice(db, payload.spoken_loveslice_id)
            if spoken is None:
                raise NotFoundError(
                    f"Spoken loveslice {payload.spoken_loveslice_id} not found"
                )
            participants = (spoken.user1_id, spoken.user2_id)
            _check_participant(user, participants, "spoken loveslice")

        entry = record_entry(
            db,
            participants,
            payload.theme,
            payload.searchable_content,
            written_loveslice_id=payload.written_loveslice_id,
            spoken_loveslice_id=payload.spoken_loveslice_id,
        )
        db.commit()
        db.refresh(entry)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(f"Failed to create journal entry for user {user.id}: {exc}")
        raise StorageError("Failed to create journal entry") from exc

    logger.info(f"Journal entry created: {entry.id} | theme={entry.theme}")
    return enrich_entry(db, entry)
