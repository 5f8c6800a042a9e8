"""Task routes — view and generate the artifact behind one journey task.

Endpoints:
  GET  /ventures/{venture_id}/tasks/{task_id}           — Gate state + decoded artifact
  POST /ventures/{venture_id}/tasks/{task_id}/generate  — Generate and store the artifact
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..agents.venture_agent.generator import ArtifactValidationError, generate_task_artifact
from ..database import get_db
from ..journey import TaskID, UnlockState, default_graph, task_key
from ..models.venture import Venture
from ..schemas.artifact_schema import ArtifactEnvelope
from ..schemas.journey_schema import TaskArtifactResponse
from ..services.artifact_codec import ArtifactDecodeError, decode_artifact, encode_artifact
from ..services.generation_guard import GenerationInProgressError, generation_registry
from ..services.openai_client import LLMError, is_openai_configured
from ..services.venture_service import get_venture, patch_venture_field, venture_to_record
from .deps import get_owned_venture

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/ventures/{venture_id}/tasks",
    tags=["Tasks"],
)


# ── Helpers ──────────────────────────────────────────────────────────────

def _decode_or_none(task_id: Any, raw: Optional[str]) -> Optional[ArtifactEnvelope]:
    """Decode a stored artifact; unreadable rows render as not-yet-generated."""
    try:
        return decode_artifact(task_id, raw)
    except ArtifactDecodeError as exc:
        logger.warning("Stored artifact for %s is unreadable: %s", task_key(task_id), exc)
        return None


def _prerequisite_context(venture: Venture, task_id: TaskID) -> Dict[str, Any]:
    """Decoded artifacts of the task's prerequisites, keyed by task id."""
    graph = default_graph()
    context: Dict[str, Any] = {}
    for prerequisite in graph.prerequisites(task_id):
        envelope = _decode_or_none(prerequisite.id, getattr(venture, prerequisite.field))
        if envelope is not None:
            context[task_key(prerequisite.id)] = envelope.data
    return context


def _task_response(venture: Venture, task_id: TaskID) -> TaskArtifactResponse:
    graph = default_graph()
    task = graph.task(task_id)
    record = venture_to_record(venture)
    missing = graph.missing_prerequisites(task_id, record) or ()
    envelope = _decode_or_none(task_id, record.get(task.field))

    return TaskArtifactResponse(
        venture_id=str(venture.id),
        task_id=task_key(task.id),
        name=task.name,
        field=task.field,
        state=graph.unlock_state(task_id, record).value,
        can_generate=graph.generation_state(task_id, record) is UnlockState.UNLOCKED,
        missing_prerequisites=[task_key(t.id) for t in missing],
        completed=bool(graph.is_complete(task_id, record)),
        schema_version=envelope.schema_version if envelope else None,
        generated_at=envelope.generated_at if envelope else None,
        legacy=envelope.legacy if envelope else False,
        data=envelope.data if envelope else None,
    )


# ── Routes ───────────────────────────────────────────────────────────────

@router.get(
    "/{task_id}",
    response_model=TaskArtifactResponse,
    summary="Get task artifact",
    response_description="Gate state and the decoded artifact, or null data if not generated",
)
def get_task(
    task_id: TaskID,
    venture: Venture = Depends(get_owned_venture),
) -> TaskArtifactResponse:
    return _task_response(venture, task_id)


@router.post(
    "/{task_id}/generate",
    response_model=TaskArtifactResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Generate task artifact",
    response_description="The stored artifact for the task",
)
async def generate_task(
    task_id: TaskID,
    venture: Venture = Depends(get_owned_venture),
    db: Session = Depends(get_db),
) -> TaskArtifactResponse:
    """Generate the artifact for one task and store it on the venture.

    1. Checks the generate gate (linear predecessor + declared prerequisites)
    2. Claims the (venture, task) slot so concurrent requests are refused
    3. Calls the generator with the prerequisite artifacts as context
    4. Stores the encoded envelope and returns the decoded view
    """
    graph = default_graph()
    key = task_key(task_id)
    print(f"➡️  [TASK] Generation START for {key} on venture {venture.id}")

    # 1. Gate
    record = venture_to_record(venture)
    if graph.generation_state(task_id, record) is not UnlockState.UNLOCKED:
        missing = [task_key(t.id) for t in graph.missing_prerequisites(task_id, record) or ()]
        print(f"🔒 [TASK] {key} is locked — missing {missing}")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "message": f"Task '{graph.task(task_id).name}' is locked",
                "missing_prerequisites": missing,
            },
        )

    if not is_openai_configured():
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Artifact generation is unavailable — OPENAI_API_KEY is not configured",
        )

    # 2. Claim + 3. Generate
    try:
        with generation_registry.claim(str(venture.id), key):
            data = await generate_task_artifact(
                task_id,
                venture_name=venture.name,
                idea=venture.idea,
                context=_prerequisite_context(venture, task_id),
            )
    except GenerationInProgressError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except EnvironmentError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc
    except (LLMError, ArtifactValidationError) as exc:
        print(f"❌ [TASK] {key} generation FAILED: {exc}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Artifact generation failed: {exc}",
        ) from exc

    # 4. Store, unless the venture was deleted while the generator ran
    venture_id, owner_id = venture.id, venture.user_id
    db.expire_all()
    venture = get_venture(db, venture_id, owner_id)
    if venture is None:
        print(f"🗑️  [TASK] Venture deleted during {key} generation; result discarded")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Venture was deleted during generation",
        )
    task = graph.task(task_id)
    patch_venture_field(db, venture, task.field, encode_artifact(key, data, datetime.utcnow()))
    print(f"✅ [TASK] Stored {key} on venture {venture.id}")

    return _task_response(venture, task_id)
