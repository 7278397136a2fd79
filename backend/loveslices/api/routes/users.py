from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from loveslices.api import deps
from loveslices.core.exceptions import LoveslicesError
from loveslices.db.session import get_db
from loveslices.models.user import User
from loveslices.schemas.user import (
    AcceptInvitationRequest,
    DisconnectPartnerRequest,
    InviteCodeResponse,
    UserPublic,
)
from loveslices.services import partners
from loveslices.services.journal import profile_picture_path

router = APIRouter()


def _serialize_user(user: User) -> UserPublic:
    public = UserPublic.model_validate(user)
    public.profile_picture = profile_picture_path(user.profile_picture)
    return public


@router.get("/me", response_model=UserPublic)
def get_profile(current_user: User = Depends(deps.get_current_user)) -> UserPublic:  # noqa: B008
    return _serialize_user(current_user)


@router.post("/me/invite-code", response_model=InviteCodeResponse)
def create_invite_code(
    db: Session = Depends(get_db),  # noqa: B008
    current_user: User = Depends(deps.get_current_user),  # noqa: B008
) -> InviteCodeResponse:
    try:
        code = partners.ensure_invite_code(db, current_user)
    except LoveslicesError as exc:
        raise deps.http_error(exc) from exc
    return InviteCodeResponse(invite_code=code)


@router.post("/me/accept-invitation", response_model=UserPublic)
def accept_invitation(
    payload: AcceptInvitationRequest,
    db: Session = Depends(get_db),  # noqa: B008
    current_user: User = Depends(deps.get_current_user),  # noqa: B008
) -> UserPublic:
    try:
        user = partners.accept_invitation(db, current_user, payload.invite_code)
    except LoveslicesError as exc:
        raise deps.http_error(exc) from exc
    return _serialize_user(user)


@router.post("/me/disconnect-partner", response_model=UserPublic)
def disconnect_partner(
    payload: DisconnectPartnerRequest,
    db: Session = Depends(get_db),  # noqa: B008
    current_user: User = Depends(deps.get_current_user),  # noqa: B008
) -> UserPublic:
    try:
        user = partners.disconnect_partner(db, current_user, payload.partner_id)
    except LoveslicesError as exc:
        raise deps.http_error(exc) from exc
    return _serialize_user(user)
