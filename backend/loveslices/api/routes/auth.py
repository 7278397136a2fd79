from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from loveslices.core.security import (
    REFRESH_TOKEN,
    create_access_token,
    create_refresh_token,
    get_password_hash,
    user_id_from_token,
    verify_password,
)
from loveslices.db.session import get_db
from loveslices.models.user import User
from loveslices.schemas import auth as auth_schema

router = APIRouter()


def _token_pair(user: User) -> auth_schema.TokenPair:
    return auth_schema.TokenPair(
        access_token=create_access_token(user.id),
        refresh_token=create_refresh_token(user.id),
    )


@router.post("/register", response_model=auth_schema.TokenPair)
def register_user(
    payload: auth_schema.RegisterRequest,
    db: Session = Depends(get_db),  # noqa: B008
) -> auth_schema.TokenPair:
    existing = db.query(User).filter(User.email == payload.email).first()
    if existing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered"
        )
    user = User(
        name=payload.name,
        email=payload.email,
        hashed_password=get_password_hash(payload.password),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return _token_pair(user)


@router.post("/login", response_model=auth_schema.TokenPair)
def login_user(
    payload: auth_schema.LoginRequest,
    db: Session = Depends(get_db),  # noqa: B008
) -> auth_schema.TokenPair:
    user = db.query(User).filter(User.email == payload.email).first()
    if not user or not verify_password(payload.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
        )
    return _token_pair(user)


@router.post("/refresh", response_model=auth_schema.TokenPair)
def refresh_token(
    payload: auth_schema.RefreshRequest,
    db: Session = Depends(get_db),  # noqa: B008
) -> auth_schema.TokenPair:
    try:
        user_id = user_id_from_token(payload.refresh_token, REFRESH_TOKEN)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid refresh token",
        ) from exc
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return _token_pair(user)

