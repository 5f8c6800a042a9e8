"""Versioned envelope for every artifact stored on a venture record.

Stored text is always:
  {"schema_version": 1, "task_id": "...", "generated_at": "...", "data": {...}}

Older rows (bare JSON, prose-wrapped JSON, plain text) are migrated into this
shape by services/artifact_codec.py when read.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

CURRENT_SCHEMA_VERSION = 1
LEGACY_SCHEMA_VERSION = 0


class ArtifactEnvelope(BaseModel):
    schema_version: int = Field(default=CURRENT_SCHEMA_VERSION, ge=0)
    task_id: str = Field(..., description="Journey task that produced the artifact")
    generated_at: Optional[datetime] = Field(
        default=None, description="UTC generation time (unknown for legacy rows)"
    )
    data: Dict[str, Any] = Field(default_factory=dict)
    legacy: bool = Field(
        default=False,
        description="True when the stored text predates the versioned envelope",
    )
