"""Last-request-wins task slot."""

import asyncio
import logging
from collections.abc import Callable, Coroutine
from typing import Any

logger = logging.getLogger(__name__)


class LatestTaskRunner:
    """Holds at most one live task; starting a new one cancels its predecessor.

    Each task is tagged with a generation number. Work that mutates shared
    state checks ``is_current(generation)`` first, so a task that was
    superseded between two awaits still leaves its successor's state alone.
    """

    def __init__(self, name: str):
        self.name = name
        self._task: asyncio.Task | None = None
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    def is_current(self, generation: int) -> bool:
        return generation == self._generation

    def cancel(self) -> None:
        self._generation += 1
        if self._task is not None and not self._task.done():
            logger.debug("Cancelling in-flight %s task", self.name)
            self._task.cancel()
        self._task = None

    def start(self, factory: Callable[[int], Coroutine[Any, Any, None]]) -> asyncio.Task:
        """Cancel the running task and schedule ``factory(generation)``."""
        self.cancel()
        task = asyncio.create_task(factory(self._generation))
        self._task = task
        return task

    async def wait(self, task: asyncio.Task) -> None:
        """Await ``task``; being superseded is not an error for the caller."""
        try:
            await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
            logger.debug("%s task superseded", self.name)
