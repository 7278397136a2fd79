import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from loveslices.api import deps
from loveslices.core.exceptions import LoveslicesError
from loveslices.db.session import get_db
from loveslices.models.user import User
from loveslices.schemas.journal import JournalEntryCreate, JournalEntryPublic
from loveslices.services import journal as journal_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=list[JournalEntryPublic])
def list_journal_entries(
    search: str | None = Query(default=None),
    theme: str | None = Query(default=None),
    db: Session = Depends(get_db),  # noqa: B008
    current_user: User = Depends(deps.get_current_user),  # noqa: B008
) -> list[JournalEntryPublic]:
    """Shared journal of the current user and their partner, newest first.

    ``search`` takes precedence over ``theme``; with neither, every visible
    entry is returned.
    """
    try:
        if search:
            return journal_service.search_journal_entries(db, current_user.id, search)
        if theme:
            return journal_service.get_journal_entries_by_theme(db, current_user.id, theme)
        return journal_service.get_journal_entries_by_user_id(db, current_user.id)
    except LoveslicesError as exc:
        logger.warning(f"Journal listing failed for user {current_user.id}: {exc}")
        raise deps.http_error(exc) from exc


@router.get("/themes", response_model=list[str])
def list_journal_themes(
    db: Session = Depends(get_db),  # noqa: B008
    current_user: User = Depends(deps.get_current_user),  # noqa: B008
) -> list[str]:
    try:
        return journal_service.list_journal_themes(db, current_user.id)
    except LoveslicesError as exc:
        raise deps.http_error(exc) from exc


@router.post("", response_model=JournalEntryPublic, status_code=status.HTTP_201_CREATED)
def create_journal_entry(
    payload: JournalEntryCreate,
    db: Session = Depends(get_db),  # noqa: B008
    current_user: User = Depends(deps.get_current_user),  # noqa: B008
) -> JournalEntryPublic:
    try:
        return journal_service.create_journal_entry(db, current_user, payload)
    except LoveslicesError as exc:
        logger.warning(f"Journal entry rejected for user {current_user.id}: {exc}")
        raise deps.http_error(exc) from exc
