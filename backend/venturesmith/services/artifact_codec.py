"""Artifact codec — the single normalization step at the document-store boundary.

Writers call `encode_artifact`; readers call `decode_artifact`.  Nothing else
in the codebase parses artifact text, so render sites always see the current
envelope shape regardless of how old the stored row is.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from pydantic import ValidationError

from ..journey import TaskID, task_key
from ..schemas.artifact_schema import (
    CURRENT_SCHEMA_VERSION,
    LEGACY_SCHEMA_VERSION,
    ArtifactEnvelope,
)
from .openai_client import sanitize_json

logger = logging.getLogger(__name__)


class ArtifactDecodeError(ValueError):
    """Stored text claims to be an envelope but does not validate."""


def _normalize_market_research(data: Dict[str, Any]) -> Dict[str, Any]:
    # First releases stored a markdown summary, later ones a partial object.
    if "content" in data and len(data) == 1 and isinstance(data["content"], str):
        data = {"summary": data["content"]}
    normalized = dict(data)
    normalized.setdefault("summary", "")
    normalized.setdefault("competitors", [])
    normalized.setdefault("trends", [])
    return normalized


_LEGACY_NORMALIZERS: Dict[str, Callable[[Dict[str, Any]], Dict[str, Any]]] = {
    TaskID.MARKET_RESEARCH.value: _normalize_market_research,
}


def _migrate(envelope: ArtifactEnvelope) -> ArtifactEnvelope:
    if envelope.schema_version >= CURRENT_SCHEMA_VERSION:
        return envelope
    normalizer = _LEGACY_NORMALIZERS.get(envelope.task_id)
    data = normalizer(envelope.data) if normalizer else envelope.data
    return envelope.model_copy(
        update={
            "schema_version": CURRENT_SCHEMA_VERSION,
            "data": data,
            "legacy": True,
        }
    )


def _wrap_legacy(task_id: str, payload: Any) -> ArtifactEnvelope:
    if isinstance(payload, dict):
        data = payload
    elif isinstance(payload, list):
        data = {"items": payload}
    else:
        data = {"content": payload}
    return ArtifactEnvelope(
        schema_version=LEGACY_SCHEMA_VERSION,
        task_id=task_id,
        data=data,
    )


def encode_artifact(
    task_id: Any,
    data: Dict[str, Any],
    generated_at: Optional[datetime] = None,
) -> str:
    """Serialize generator output into the stored envelope text."""
    envelope = ArtifactEnvelope(
        task_id=task_key(task_id),
        generated_at=generated_at or datetime.utcnow(),
        data=data,
    )
    return envelope.model_dump_json(exclude={"legacy"})


def decode_artifact(task_id: Any, raw: Optional[str]) -> Optional[ArtifactEnvelope]:
    """Parse stored artifact text into a current-version envelope.

    Returns None for missing / blank text.  Raises ArtifactDecodeError when
    the text is a versioned envelope that fails validation, or belongs to a
    different task.
    """
    key = task_key(task_id)
    if raw is None or not raw.strip():
        return None

    text = raw.strip()
    try:
        parsed = json.loads(text)
    except ValueError:
        try:
            parsed = json.loads(sanitize_json(text))
        except ValueError:
            logger.info("Artifact for %s is plain text — wrapping as legacy content", key)
            return _migrate(_wrap_legacy(key, text))

    if isinstance(parsed, dict) and "schema_version" in parsed and "data" in parsed:
        try:
            envelope = ArtifactEnvelope.model_validate(parsed)
        except ValidationError as exc:
            raise ArtifactDecodeError(f"Invalid artifact envelope for {key}: {exc}") from exc
        if envelope.task_id != key:
            raise ArtifactDecodeError(
                f"Artifact envelope belongs to {envelope.task_id}, not {key}"
            )
        return _migrate(envelope)

    return _migrate(_wrap_legacy(key, parsed))
