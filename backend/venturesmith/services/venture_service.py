"""Venture document store — create, read, patch and delete venture records.

Ownership is enforced here: every lookup is scoped to the requesting user.
The journey graph only ever sees the plain snapshot from `venture_to_record`.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..journey import ARTIFACT_FIELDS
from ..models.venture import Venture
from ..schemas.venture_schema import VentureCreate

_DEFAULT_NAME = "Untitled Venture"

# Fields outside the artifact columns that callers may patch.
_PATCHABLE_META_FIELDS = ("name", "current_task")


def create_venture(db: Session, payload: VentureCreate, user_id: Any) -> Venture:
    """Persist a new venture for `user_id`. No artifact exists yet."""
    venture = Venture(
        user_id=user_id,
        name=payload.name or _DEFAULT_NAME,
        idea=payload.idea,
    )
    db.add(venture)
    db.commit()
    db.refresh(venture)
    return venture


def list_ventures(db: Session, user_id: Any) -> List[Venture]:
    return (
        db.query(Venture)
        .filter(Venture.user_id == str(user_id))
        .order_by(Venture.created_at.desc())
        .all()
    )


def get_venture(db: Session, venture_id: Any, user_id: Any) -> Optional[Venture]:
    """Return the venture if it exists and belongs to `user_id`, else None."""
    return (
        db.query(Venture)
        .filter(
            Venture.id == str(venture_id),
            Venture.user_id == str(user_id),
        )
        .first()
    )


def patch_venture_field(db: Session, venture: Venture, field_name: str, value: Optional[str]) -> Venture:
    """Set one field on the venture and commit.

    Raises
    ------
    ValueError
        If `field_name` is neither an artifact field nor a patchable meta field.
    """
    if field_name not in ARTIFACT_FIELDS and field_name not in _PATCHABLE_META_FIELDS:
        raise ValueError(f"Field '{field_name}' cannot be patched on a venture")
    setattr(venture, field_name, value)
    venture.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(venture)
    return venture


def delete_venture(db: Session, venture: Venture) -> None:
    db.delete(venture)
    db.commit()


def venture_to_record(venture: Venture) -> Dict[str, Optional[str]]:
    """Snapshot of the artifact fields, keyed by record field name."""
    return {field: getattr(venture, field) for field in ARTIFACT_FIELDS}
