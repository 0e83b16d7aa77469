"""Recurring tick sources that drive the interval clock."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class TickSource(Protocol):
    """Schedules a callback every ``interval_seconds`` until canceled."""

    def schedule(self, interval_seconds: float, callback: Callable[[], Any]) -> Any:
        ...

    def cancel(self, handle: Any) -> None:
        ...


class AsyncioTickSource:
    """Tick source backed by asyncio tasks on the running event loop.

    The first callback fires one full interval after ``schedule``. Each
    callback runs to completion before the next sleep starts, so there is
    at most one callback in flight per handle.
    """

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task] = set()

    def schedule(self, interval_seconds: float, callback: Callable[[], Any]) -> asyncio.Task:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be greater than zero")

        task = asyncio.get_running_loop().create_task(
            self._tick_loop(interval_seconds, callback)
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        logger.debug(f"Tick source scheduled every {interval_seconds}s")
        return task

    def cancel(self, handle: asyncio.Task | None) -> None:
        if handle is None or handle.done():
            return
        handle.cancel()
        logger.debug("Tick source canceled")

    async def _tick_loop(self, interval_seconds: float, callback: Callable[[], Any]) -> None:
        """Main tick loop."""
        while True:
            await asyncio.sleep(interval_seconds)
            try:
                callback()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"Error in tick callback: {e}")
