"""FastAPI dependency resolving the bearer token to the owning User."""

from __future__ import annotations

from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.user import User
from .auth_utils import decode_access_token
from .user_service import get_or_create_user

_bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Return the User named by the token's `sub` claim, or raise 401.

    A valid token for an identity seen for the first time creates the user.
    """
    if creds is None:
        raise _unauthorized("Authentication required")

    payload = decode_access_token(creds.credentials)
    if payload is None:
        raise _unauthorized("Invalid or expired token")

    try:
        user_id = UUID(str(payload.get("sub")))
    except ValueError:
        raise _unauthorized("Invalid token payload") from None

    return get_or_create_user(
        db,
        user_id,
        email=payload.get("email"),
        username=payload.get("username"),
    )
