from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr

from loveslices.models.user import UserRole


class UserSummary(BaseModel):
    """What a partner gets to see: no email, no credentials."""
    id: int
    name: str
    partner_id: int | None = None
    profile_picture: str | None = None

    model_config = ConfigDict(from_attributes=True)


class UserPublic(UserSummary):
    email: EmailStr
    invite_code: str | None = None
    role: UserRole
    created_at: datetime


class InviteCodeResponse(BaseModel):
    invite_code: str


class AcceptInvitationRequest(BaseModel):
    invite_code: str


class DisconnectPartnerRequest(BaseModel):
    partner_id: int | None = None
