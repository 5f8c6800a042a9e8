"""Journey routes — the phase table and the per-venture wizard.

Endpoints:
  GET  /journey/phases                        — Static phase / task table
  GET  /ventures/{venture_id}/journey         — Per-task gate states and progress
  POST /ventures/{venture_id}/journey/select  — Move the wizard to a task
"""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..journey import UnlockState, WizardSession, default_graph, task_key
from ..models.venture import Venture
from ..schemas.journey_schema import (
    JourneyResponse,
    PhaseDefinition,
    PhaseStatusOut,
    PhaseTableResponse,
    SelectTaskRequest,
    SelectTaskResponse,
    TaskDefinition,
    TaskStatusOut,
)
from ..services.venture_service import patch_venture_field, venture_to_record
from .deps import current_task_of, get_owned_venture

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Journey"])


def _build_journey(venture: Venture) -> JourneyResponse:
    graph = default_graph()
    record = venture_to_record(venture)
    current = current_task_of(venture)

    phases: List[PhaseStatusOut] = [
        PhaseStatusOut(id=p.id, name=p.name, index=i, tasks=[])
        for i, p in enumerate(graph.phases)
    ]
    for status in graph.statuses(record):
        key = task_key(status.task.id)
        phases[status.phase_index].tasks.append(
            TaskStatusOut(
                id=key,
                name=status.task.name,
                completed=bool(status.completed),
                state=status.state.value,
                can_generate=status.generation_state is UnlockState.UNLOCKED,
                is_current=key == current,
            )
        )

    next_task = graph.next(current)
    previous_task = graph.previous(current)
    return JourneyResponse(
        venture_id=str(venture.id),
        current_task=current,
        current_location=list(graph.locate(current)),
        next_task=task_key(next_task.id) if next_task else None,
        previous_task=task_key(previous_task.id) if previous_task else None,
        completion_ratio=graph.completion_ratio(record),
        phases=phases,
    )


@router.get(
    "/journey/phases",
    response_model=PhaseTableResponse,
    summary="Journey phase table",
    response_description="All phases and tasks in journey order",
)
def get_phase_table() -> PhaseTableResponse:
    """Return the static phase / task table with each task's prerequisites."""
    graph = default_graph()
    phases = [
        PhaseDefinition(
            id=phase.id,
            name=phase.name,
            tasks=[
                TaskDefinition(
                    id=task_key(task.id),
                    name=task.name,
                    field=task.field,
                    prerequisites=[task_key(t.id) for t in graph.prerequisites(task.id)],
                )
                for task in phase.tasks
            ],
        )
        for phase in graph.phases
    ]
    return PhaseTableResponse(phases=phases, total_tasks=len(graph.tasks))


@router.get(
    "/ventures/{venture_id}/journey",
    response_model=JourneyResponse,
    summary="Venture journey state",
    response_description="Gate state of every task plus the wizard position",
)
def get_journey(venture: Venture = Depends(get_owned_venture)) -> JourneyResponse:
    return _build_journey(venture)


@router.post(
    "/ventures/{venture_id}/journey/select",
    response_model=SelectTaskResponse,
    summary="Select a journey task",
    response_description="Whether the wizard moved, with a warning if it did not",
)
def select_task(
    body: SelectTaskRequest,
    venture: Venture = Depends(get_owned_venture),
    db: Session = Depends(get_db),
) -> SelectTaskResponse:
    """Move the wizard to `task_id`.

    A locked target is not an error: the response carries accepted=false and
    a warning, and the stored position is left unchanged.
    """
    session = WizardSession(
        current_task=current_task_of(venture),
        record=venture_to_record(venture),
    )
    result = session.select(body.task_id)

    if result.accepted and result.current_task != venture.current_task:
        patch_venture_field(db, venture, "current_task", result.current_task)
        print(f"🧭 [VENTURE] {venture.id} moved to task {result.current_task}")

    return SelectTaskResponse(
        accepted=result.accepted,
        current_task=result.current_task,
        warning=result.warning,
    )
