"""Task dependency graph — gating, traversal and progress over the journey.

The phase/task table is flattened once into a single linear order.  Every
query is a pure function of that order and a venture-record snapshot:

  - a task is unlocked iff it is first, or its predecessor is complete
  - the generate action additionally needs every declared prerequisite
  - a PENDING snapshot (record still loading) answers "unknown", never "locked"

Unknown task ids are programmer errors and raise UnknownTaskError.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from .tasks import PHASES, Phase, Task


class UnknownTaskError(KeyError):
    """Raised when a task id is not part of the static journey table."""


class RecordPending:
    """Marker for a venture record whose first fetch has not resolved yet."""

    _instance: Optional["RecordPending"] = None

    def __new__(cls) -> "RecordPending":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "PENDING"

    def __bool__(self) -> bool:
        return False


PENDING = RecordPending()

VentureSnapshot = Union[Mapping[str, Any], RecordPending]


class UnlockState(str, Enum):
    LOADING = "loading"
    LOCKED = "locked"
    UNLOCKED = "unlocked"


@dataclass(frozen=True)
class TaskStatus:
    task: Task
    phase_index: int
    task_index: int
    completed: Optional[bool]
    state: UnlockState
    generation_state: UnlockState


def task_key(task_id: Any) -> str:
    if isinstance(task_id, Enum):
        task_id = task_id.value
    if not isinstance(task_id, str):
        raise UnknownTaskError(task_id)
    return task_id


def is_pending(record: Any) -> bool:
    return record is PENDING


class TaskGraph:
    """Flattened, read-only view over an ordered phase/task table."""

    def __init__(self, phases: Sequence[Phase]):
        self._phases: Tuple[Phase, ...] = tuple(phases)
        self._tasks: Tuple[Task, ...] = tuple(t for p in self._phases for t in p.tasks)
        if not self._tasks:
            raise ValueError("A journey needs at least one task")

        self._index: Dict[str, int] = {}
        self._location: Dict[str, Tuple[int, int]] = {}
        fields = set()
        for phase_index, phase in enumerate(self._phases):
            for task_index, task in enumerate(phase.tasks):
                key = task_key(task.id)
                if key in self._index:
                    raise ValueError(f"Duplicate task id: {key}")
                if task.field in fields:
                    raise ValueError(f"Duplicate record field: {task.field}")
                fields.add(task.field)
                self._index[key] = len(self._index)
                self._location[key] = (phase_index, task_index)

        self._prerequisites: Dict[str, Tuple[Task, ...]] = {}
        for position, task in enumerate(self._tasks):
            key = task_key(task.id)
            required: List[Task] = []
            if position > 0:
                required.append(self._tasks[position - 1])
            for dep in task.requires:
                dep_key = task_key(dep)
                dep_position = self._index.get(dep_key)
                if dep_position is None:
                    raise ValueError(f"Task {key} requires unknown task {dep_key}")
                if dep_position >= position:
                    raise ValueError(
                        f"Task {key} requires {dep_key}, which does not come before it"
                    )
                dep_task = self._tasks[dep_position]
                if dep_task not in required:
                    required.append(dep_task)
            self._prerequisites[key] = tuple(sorted(required, key=lambda t: self._index[task_key(t.id)]))

    # ── Lookup ───────────────────────────────────────────────────────────

    @property
    def phases(self) -> Tuple[Phase, ...]:
        return self._phases

    @property
    def tasks(self) -> Tuple[Task, ...]:
        return self._tasks

    @property
    def first(self) -> Task:
        return self._tasks[0]

    def index_of(self, task_id: Any) -> int:
        key = task_key(task_id)
        try:
            return self._index[key]
        except KeyError:
            raise UnknownTaskError(key) from None

    def task(self, task_id: Any) -> Task:
        return self._tasks[self.index_of(task_id)]

    def locate(self, task_id: Any) -> Tuple[int, int]:
        """Return (phase_index, task_index_within_phase)."""
        self.index_of(task_id)
        return self._location[task_key(task_id)]

    # ── Traversal ────────────────────────────────────────────────────────

    def next(self, task_id: Any) -> Optional[Task]:
        position = self.index_of(task_id)
        if position + 1 >= len(self._tasks):
            return None
        return self._tasks[position + 1]

    def previous(self, task_id: Any) -> Optional[Task]:
        position = self.index_of(task_id)
        if position == 0:
            return None
        return self._tasks[position - 1]

    def prerequisites(self, task_id: Any) -> Tuple[Task, ...]:
        """Effective prerequisites: declared ones plus the linear predecessor."""
        self.index_of(task_id)
        return self._prerequisites[task_key(task_id)]

    # ── Gating ───────────────────────────────────────────────────────────

    def is_complete(self, task_id: Any, record: VentureSnapshot) -> Optional[bool]:
        task = self.task(task_id)
        if is_pending(record):
            return None
        return task.is_complete(record)

    def unlock_state(self, task_id: Any, record: VentureSnapshot) -> UnlockState:
        position = self.index_of(task_id)
        if position == 0:
            return UnlockState.UNLOCKED
        if is_pending(record):
            return UnlockState.LOADING
        if self._tasks[position - 1].is_complete(record):
            return UnlockState.UNLOCKED
        return UnlockState.LOCKED

    def is_unlocked(self, task_id: Any, record: VentureSnapshot) -> Optional[bool]:
        """True / False, or None while the record is still loading."""
        state = self.unlock_state(task_id, record)
        if state is UnlockState.LOADING:
            return None
        return state is UnlockState.UNLOCKED

    def missing_prerequisites(
        self, task_id: Any, record: VentureSnapshot
    ) -> Optional[Tuple[Task, ...]]:
        required = self.prerequisites(task_id)
        if is_pending(record):
            return None
        return tuple(t for t in required if not t.is_complete(record))

    def generation_state(self, task_id: Any, record: VentureSnapshot) -> UnlockState:
        """Whether the generate action may run for this task."""
        state = self.unlock_state(task_id, record)
        if state is not UnlockState.UNLOCKED:
            return state
        missing = self.missing_prerequisites(task_id, record)
        if missing is None:
            return UnlockState.LOADING
        return UnlockState.LOCKED if missing else UnlockState.UNLOCKED

    # ── Progress ─────────────────────────────────────────────────────────

    def completion_ratio(self, record: VentureSnapshot) -> Optional[float]:
        if is_pending(record):
            return None
        done = sum(1 for t in self._tasks if t.is_complete(record))
        return done / len(self._tasks)

    def statuses(self, record: VentureSnapshot) -> List[TaskStatus]:
        result = []
        for task in self._tasks:
            phase_index, task_index = self._location[task_key(task.id)]
            result.append(
                TaskStatus(
                    task=task,
                    phase_index=phase_index,
                    task_index=task_index,
                    completed=self.is_complete(task.id, record),
                    state=self.unlock_state(task.id, record),
                    generation_state=self.generation_state(task.id, record),
                )
            )
        return result


@functools.lru_cache(maxsize=1)
def default_graph() -> TaskGraph:
    """The journey graph built from the static table (built once)."""
    return TaskGraph(PHASES)
