from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from loveslices.api import deps
from loveslices.core.exceptions import LoveslicesError
from loveslices.db.session import get_db
from loveslices.models.user import User
from loveslices.schemas.journal import WrittenLovesliceView
from loveslices.schemas.loveslice import LovesliceNoteUpdate
from loveslices.services import journal as journal_service
from loveslices.services import loveslices as loveslice_service

router = APIRouter()


@router.get("", response_model=list[WrittenLovesliceView])
def list_loveslices(
    db: Session = Depends(get_db),  # noqa: B008
    current_user: User = Depends(deps.get_current_user),  # noqa: B008
) -> list[WrittenLovesliceView]:
    try:
        return loveslice_service.list_loveslices(db, current_user)
    except LoveslicesError as exc:
        raise deps.http_error(exc) from exc


@router.get("/{loveslice_id}", response_model=WrittenLovesliceView)
def get_loveslice(
    loveslice_id: int,
    db: Session = Depends(get_db),  # noqa: B008
    current_user: User = Depends(deps.get_current_user),  # noqa: B008
) -> WrittenLovesliceView:
    try:
        loveslice = loveslice_service.get_loveslice_for_user(db, current_user, loveslice_id)
        return journal_service.written_loveslice_view(db, loveslice)
    except LoveslicesError as exc:
        raise deps.http_error(exc) from exc


@router.patch("/{loveslice_id}/note", response_model=WrittenLovesliceView)
def update_note(
    loveslice_id: int,
    payload: LovesliceNoteUpdate,
    db: Session = Depends(get_db),  # noqa: B008
    current_user: User = Depends(deps.get_current_user),  # noqa: B008
) -> WrittenLovesliceView:
    try:
        return loveslice_service.update_private_note(db, current_user, loveslice_id, payload.note)
    except LoveslicesError as exc:
        raise deps.http_error(exc) from exc
