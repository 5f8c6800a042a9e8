from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


class VentureCreate(BaseModel):
    """Idea submission — creates the venture record the journey runs on."""

    idea: str = Field(
        ...,
        min_length=10,
        max_length=5000,
        description="The business idea in the founder's own words.",
    )
    name: Optional[str] = Field(default=None, max_length=255)

    @field_validator("idea")
    @classmethod
    def idea_not_trivial(cls, v: str) -> str:
        stripped = v.strip()
        if len(stripped.split()) < 3:
            raise ValueError("Describe the idea in at least a few words.")
        return stripped

    @field_validator("name")
    @classmethod
    def name_stripped(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None


class VentureRename(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Name cannot be blank.")
        return stripped


class VentureRecord(BaseModel):
    """Single venture summary — returned by all venture endpoints."""

    id: UUID
    name: str
    idea: str
    current_task: str = Field(..., description="Task selected in the wizard")
    completion_ratio: float = Field(..., ge=0.0, le=1.0)
    completed_tasks: List[str] = Field(
        default_factory=list, description="Task ids whose artifact exists"
    )
    created_at: datetime
    updated_at: Optional[datetime] = None


class VentureListResponse(BaseModel):
    ventures: List[VentureRecord] = Field(
        default_factory=list, description="Ventures sorted by created_at DESC"
    )
