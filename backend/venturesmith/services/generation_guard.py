"""In-flight registry for artifact generations.

A second generate request for the same (venture, task) while the first is
still running is refused instead of racing it to the store.  The registry is
per process; it lives on the event loop thread, so a plain set is enough.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Set, Tuple

logger = logging.getLogger(__name__)


class GenerationInProgressError(RuntimeError):
    """Raised when the same task is already being generated for a venture."""


class InFlightRegistry:
    def __init__(self) -> None:
        self._active: Set[Tuple[str, str]] = set()

    def is_active(self, venture_id: str, task_id: str) -> bool:
        return (str(venture_id), str(task_id)) in self._active

    @contextmanager
    def claim(self, venture_id: str, task_id: str) -> Iterator[None]:
        key = (str(venture_id), str(task_id))
        if key in self._active:
            raise GenerationInProgressError(
                f"Generation of {task_id} for venture {venture_id} is already in progress"
            )
        self._active.add(key)
        logger.debug("Generation claimed: %s", key)
        try:
            yield
        finally:
            self._active.discard(key)
            logger.debug("Generation released: %s", key)


generation_registry = InFlightRegistry()
