"""Pydantic schemas for the journey (phase / task wizard) endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from ..journey import TaskID

GateState = Literal["loading", "locked", "unlocked"]


class TaskDefinition(BaseModel):
    id: TaskID
    name: str
    field: str = Field(..., description="Venture-record field backing the task")
    prerequisites: List[TaskID] = Field(
        default_factory=list, description="Tasks that must be complete before generating"
    )


class PhaseDefinition(BaseModel):
    id: str
    name: str
    tasks: List[TaskDefinition]


class PhaseTableResponse(BaseModel):
    phases: List[PhaseDefinition]
    total_tasks: int


class TaskStatusOut(BaseModel):
    id: TaskID
    name: str
    completed: bool
    state: GateState = Field(..., description="Whether the task can be viewed")
    can_generate: bool
    is_current: bool = False


class PhaseStatusOut(BaseModel):
    id: str
    name: str
    index: int
    tasks: List[TaskStatusOut]


class JourneyResponse(BaseModel):
    venture_id: str
    current_task: TaskID
    current_location: List[int] = Field(
        ..., description="[phase_index, task_index] of the current task"
    )
    next_task: Optional[TaskID] = None
    previous_task: Optional[TaskID] = None
    completion_ratio: float
    phases: List[PhaseStatusOut]


class SelectTaskRequest(BaseModel):
    task_id: TaskID


class SelectTaskResponse(BaseModel):
    accepted: bool
    current_task: TaskID
    warning: Optional[str] = None


class TaskArtifactResponse(BaseModel):
    """A task's view: its gate state and the decoded artifact, if any."""

    venture_id: str
    task_id: TaskID
    name: str
    field: str
    state: GateState
    can_generate: bool
    missing_prerequisites: List[TaskID] = Field(default_factory=list)
    completed: bool
    schema_version: Optional[int] = None
    generated_at: Optional[datetime] = None
    legacy: bool = False
    data: Optional[Dict[str, Any]] = None
