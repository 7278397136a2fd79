"""Partner linking: invite codes, accepting an invitation, disconnecting.

These are the only flows that write ``users.partner_id``. Links are kept
reciprocal: both rows are updated in the same commit.
"""
import logging
import secrets

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from loveslices.core.exceptions import NotFoundError, StorageError, ValidationError
from loveslices.models.user import User
from loveslices.services import lookups

logger = logging.getLogger(__name__)

INVITE_CODE_BYTES = 6


def _commit(db: Session, action: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(f"Failed to {action}: {exc}")
        raise StorageError(f"Failed to {action}") from exc


def ensure_invite_code(db: Session, user: User) -> str:
    """Return the user's invite code, generating one the first time."""
    if not user.invite_code:
        user.invite_code = secrets.token_hex(INVITE_CODE_BYTES)
        db.add(user)
        _commit(db, "store invite code")
        db.refresh(user)
    return user.invite_code


def accept_invitation(db: Session, user: User, invite_code: str) -> User:
    code = invite_code.strip()
    if not code:
        raise ValidationError("Invite code is required")

    inviter = db.query(User).filter(User.invite_code == code).first()
    if inviter is None:
        raise NotFoundError("Invalid invite code")
    if inviter.id == user.id:
        raise ValidationError("You cannot link with yourself")
    if inviter.partner_id is not None:
        raise ValidationError("This user is already linked with a partner")
    if user.partner_id is not None:
        raise ValidationError("You are already linked with a partner")

    inviter.partner_id = user.id
    user.partner_id = inviter.id
    db.add_all([inviter, user])
    _commit(db, "link partners")
    db.refresh(user)
    logger.info(f"Partners linked: {inviter.id} <-> {user.id}")
    return user


def disconnect_partner(db: Session, user: User, partner_id: int | None = None) -> User:
    if user.partner_id is None:
        raise ValidationError("You are not connected with a partner")
    if partner_id is not None and partner_id != user.partner_id:
        raise ValidationError("Invalid partner ID")

    partner = lookups.get_user(db, user.partner_id)
    if partner is None:
        raise NotFoundError("Partner not found")

    previous = partner.id
    user.partner_id = None
    if partner.partner_id == user.id:
        partner.partner_id = None
    db.add_all([user, partner])
    _commit(db, "disconnect partners")
    db.refresh(user)
    logger.info(f"Partners disconnected: {user.id} -x- {previous}")
    return user
