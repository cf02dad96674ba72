"""
services/scheduler.py

Repeating callbacks behind a cancellable handle.
ExamSession uses this for its one-second countdown so the timer can be
started and stopped exactly on stage changes, and replaced in tests.
"""

import asyncio
import logging
from typing import Callable, Protocol

logger = logging.getLogger(__name__)


class IntervalHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_every(self, interval: float, callback: Callable[[], None]) -> IntervalHandle: ...


class AsyncioIntervalHandle:
    """Handle for a repeating task on an event loop. cancel() may be called from any thread."""

    def __init__(self, loop: asyncio.AbstractEventLoop, task: "asyncio.Task[None]") -> None:
        self._loop = loop
        self._task = task
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        if self._loop.is_closed():
            return
        self._loop.call_soon_threadsafe(self._task.cancel)


class AsyncioScheduler:
    """
    Runs callbacks on the running event loop.
    call_every() must be called from inside that loop (e.g. a FastAPI handler).
    """

    def call_every(self, interval: float, callback: Callable[[], None]) -> AsyncioIntervalHandle:
        loop = asyncio.get_running_loop()
        task = loop.create_task(self._run(interval, callback))
        return AsyncioIntervalHandle(loop, task)

    @staticmethod
    async def _run(interval: float, callback: Callable[[], None]) -> None:
        while True:
            await asyncio.sleep(interval)
            try:
                callback()
            except Exception:
                # one bad tick must not stop the countdown
                logger.exception("Interval callback failed")
