"""Shared route dependencies and response builders."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..journey import UnknownTaskError, default_graph, task_key
from ..models.user import User
from ..models.venture import Venture
from ..schemas.venture_schema import VentureRecord
from ..services.auth_dependency import get_current_user
from ..services.venture_service import get_venture, venture_to_record


def get_owned_venture(
    venture_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Venture:
    """Resolve `venture_id` to a venture owned by the caller, or 404."""
    venture = get_venture(db, venture_id, current_user.id)
    if venture is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Venture {venture_id} not found",
        )
    return venture


def current_task_of(venture: Venture) -> str:
    """The stored wizard position, or the first task when unset or stale."""
    graph = default_graph()
    if venture.current_task:
        try:
            return task_key(graph.task(venture.current_task).id)
        except UnknownTaskError:
            pass
    return task_key(graph.first.id)


def venture_to_response(venture: Venture) -> VentureRecord:
    """Convert a Venture ORM instance to a VentureRecord response."""
    graph = default_graph()
    record = venture_to_record(venture)
    return VentureRecord(
        id=venture.id,
        name=venture.name or "Untitled Venture",
        idea=venture.idea,
        current_task=current_task_of(venture),
        completion_ratio=graph.completion_ratio(record),
        completed_tasks=[task_key(t.id) for t in graph.tasks if t.is_complete(record)],
        created_at=venture.created_at or datetime.utcnow(),
        updated_at=venture.updated_at,
    )
