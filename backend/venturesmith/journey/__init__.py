from .graph import (
    PENDING,
    RecordPending,
    TaskGraph,
    TaskStatus,
    UnknownTaskError,
    UnlockState,
    default_graph,
    task_key,
)
from .tasks import ARTIFACT_FIELDS, PHASES, Phase, Task, TaskID
from .wizard import SelectionResult, WizardSession

__all__ = [
    "ARTIFACT_FIELDS",
    "PENDING",
    "PHASES",
    "Phase",
    "RecordPending",
    "SelectionResult",
    "Task",
    "TaskGraph",
    "TaskID",
    "TaskStatus",
    "UnknownTaskError",
    "UnlockState",
    "WizardSession",
    "default_graph",
    "task_key",
]
