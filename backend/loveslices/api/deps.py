from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from loveslices.core.exceptions import (
    LoveslicesError,
    NotFoundError,
    PermissionDeniedError,
    StorageError,
    ValidationError,
)
from loveslices.core.security import ACCESS_TOKEN, user_id_from_token
from loveslices.db.session import get_db
from loveslices.models.user import User
from loveslices.services import lookups

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),  # noqa: B008
    db: Session = Depends(get_db),  # noqa: B008
) -> User:
    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise unauthorized
    try:
        user_id = user_id_from_token(credentials.credentials, ACCESS_TOKEN)
    except ValueError as exc:
        raise unauthorized from exc
    user = lookups.get_user(db, user_id)
    if not user:
        raise unauthorized
    return user


def http_error(exc: LoveslicesError) -> HTTPException:
    """Map a service-layer error onto the HTTP response the client sees."""
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, PermissionDeniedError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc))
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    if isinstance(exc, StorageError):
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
