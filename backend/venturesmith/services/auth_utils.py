"""Access-token utilities — JWT signing and verification.

Tokens are issued by the account service; this backend only needs to
verify them and read the user id from `sub`.

Rules
-----
- NO hardcoded secrets in production — JWT_SECRET comes from the environment
"""

from __future__ import annotations

import os
from datetime import datetime, timedelta
from typing import Optional

from jose import JWTError, jwt

_JWT_SECRET = os.getenv("JWT_SECRET", "venturesmith-dev-secret-change-in-production")
_JWT_ALGORITHM = "HS256"
_JWT_EXPIRE_MINUTES = int(os.getenv("JWT_EXPIRE_MINUTES", "1440"))  # 24h default


def create_dev_access_token(user_id: str, email: str, username: str = "") -> str:
    """Mint a signed JWT locally, for development and tests.

    Production tokens are issued by the account service with the same claims
    (sub, email, username) and the shared JWT_SECRET.
    """
    expire = datetime.utcnow() + timedelta(minutes=_JWT_EXPIRE_MINUTES)
    payload = {
        "sub": user_id,
        "email": email,
        "username": username,
        "exp": expire,
    }
    return jwt.encode(payload, _JWT_SECRET, algorithm=_JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[dict]:
    """Decode and validate a JWT. Returns payload dict or None."""
    try:
        return jwt.decode(token, _JWT_SECRET, algorithms=[_JWT_ALGORITHM])
    except JWTError:
        return None
