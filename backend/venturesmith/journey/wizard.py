"""Wizard session — the "current task" selection state over a journey graph.

Selecting a task is a request.  A locked (or still-loading) target is
rejected: the current task stays where it is and a warning is emitted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from .graph import PENDING, TaskGraph, UnlockState, VentureSnapshot, default_graph, task_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectionResult:
    accepted: bool
    current_task: str
    warning: Optional[str] = None


class WizardSession:
    def __init__(
        self,
        graph: Optional[TaskGraph] = None,
        current_task: Any = None,
        record: VentureSnapshot = PENDING,
        on_warning: Optional[Callable[[str], None]] = None,
    ):
        self._graph = graph or default_graph()
        if current_task is None:
            current_task = self._graph.first.id
        # Fail loud on ids outside the table.
        self._graph.index_of(current_task)
        self._current = task_key(current_task)
        self._record = record
        self._on_warning = on_warning

    @property
    def graph(self) -> TaskGraph:
        return self._graph

    @property
    def current_task(self) -> str:
        return self._current

    @property
    def record(self) -> VentureSnapshot:
        return self._record

    def update_record(self, record: VentureSnapshot) -> None:
        """Accept a new snapshot from the document store."""
        self._record = record

    def state_of(self, task_id: Any) -> UnlockState:
        return self._graph.unlock_state(task_id, self._record)

    def progress(self) -> Optional[float]:
        return self._graph.completion_ratio(self._record)

    def select(self, task_id: Any) -> SelectionResult:
        task = self._graph.task(task_id)
        state = self.state_of(task_id)

        if state is UnlockState.UNLOCKED:
            self._current = task_key(task.id)
            return SelectionResult(accepted=True, current_task=self._current)

        if state is UnlockState.LOADING:
            return self._reject(f"'{task.name}' is not available yet: venture data is still loading.")

        previous = self._graph.previous(task_id)
        return self._reject(
            f"'{task.name}' is locked. Complete '{previous.name}' first."
        )

    def next(self) -> SelectionResult:
        target = self._graph.next(self._current)
        if target is None:
            return self._reject("Already at the last step of the journey.")
        return self.select(target.id)

    def previous(self) -> SelectionResult:
        target = self._graph.previous(self._current)
        if target is None:
            return self._reject("Already at the first step of the journey.")
        return self.select(target.id)

    def _reject(self, message: str) -> SelectionResult:
        logger.warning("Task selection rejected: %s", message)
        if self._on_warning is not None:
            self._on_warning(message)
        return SelectionResult(accepted=False, current_task=self._current, warning=message)
