"""Single-flight coordination for coroutine work shared by concurrent callers."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SingleFlight(Generic[T]):
    """At most one run of the guarded operation is outstanding at a time.

    Callers arriving while a run is in flight await that same run and get its
    result. The run lives in its own task and waiters await it through
    ``asyncio.shield``, so a cancelled waiter never cancels the work other
    callers depend on. The in-flight marker is dropped when the run settles,
    whatever the outcome, and the next caller starts a fresh run.
    """

    def __init__(self, name: str = "operation") -> None:
        self._name = name
        self._task: asyncio.Task[T] | None = None
        self.runs = 0
        self.waiting = 0

    @property
    def in_flight(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run_exclusive(self, fn: Callable[[], Awaitable[T]]) -> T:
        task = self._task
        if task is None or task.done():
            task = asyncio.ensure_future(fn())
            self._task = task
            self.runs += 1
            task.add_done_callback(self._settle)
            logger.debug("Started %s (run %d)", self._name, self.runs)
        else:
            logger.debug("Joining in-flight %s", self._name)
        self.waiting += 1
        try:
            return await asyncio.shield(task)
        finally:
            self.waiting -= 1

    def _settle(self, task: asyncio.Task[T]) -> None:
        if self._task is task:
            self._task = None
