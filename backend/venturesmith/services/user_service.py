"""User service — resolve the founder behind a verified token.

Identities are owned by the account service that issues tokens. The first
request carrying a new `sub` creates the local User row; later requests keep
its email / username in sync with the token claims.
"""

from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..models.user import User

logger = logging.getLogger(__name__)


def _placeholder_email(user_id: UUID) -> str:
    return f"{user_id}@users.venturesmith.local"


def _fallback_username(user_id: UUID, email: str) -> str:
    local_part = email.split("@", 1)[0].strip()
    return local_part or f"founder-{str(user_id)[:8]}"


def _is_taken(db: Session, column, value: str, user_id: UUID) -> bool:
    return (
        db.query(User)
        .filter(column == value, User.id != str(user_id))
        .first()
        is not None
    )


def _unique(db: Session, column, value: str, user_id: UUID, fallback: str) -> str:
    """`value` if no other user holds it, else the per-user `fallback`."""
    if value and not _is_taken(db, column, value, user_id):
        return value
    return fallback


def get_or_create_user(
    db: Session,
    user_id: UUID,
    email: Optional[str] = None,
    username: Optional[str] = None,
) -> User:
    """Return the User for `user_id`, creating or updating it from token claims."""
    email = (email or "").strip().lower()
    username = (username or "").strip()

    user = db.query(User).filter(User.id == str(user_id)).first()
    if user is None:
        wanted_email = email or _placeholder_email(user_id)
        wanted_username = username or _fallback_username(user_id, wanted_email)
        user = User(
            id=user_id,
            email=_unique(db, User.email, wanted_email, user_id, _placeholder_email(user_id)),
            username=_unique(
                db, User.username, wanted_username, user_id, f"founder-{user_id}"
            ),
        )
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            # Another request created the same user first.
            db.rollback()
            user = db.query(User).filter(User.id == str(user_id)).first()
            if user is None:
                raise
            return user
        db.refresh(user)
        print(f"👤 [USER] Created user {user_id} ({user.email})")
        return user

    changed = False
    if email and email != user.email and not _is_taken(db, User.email, email, user_id):
        user.email = email
        changed = True
    if username and username != user.username and not _is_taken(db, User.username, username, user_id):
        user.username = username
        changed = True
    if changed:
        db.commit()
        db.refresh(user)
        logger.info("[USER] Updated profile for %s", user_id)
    return user
