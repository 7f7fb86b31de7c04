"""Cancellable scheduled callbacks for the listing client.

Everything in :mod:`userlist.client` runs on one cooperative event loop:
timers are plain callbacks scheduled through a :class:`Scheduler`, so tests
can swap in a virtual clock and production code runs on asyncio. Blocking
work (HTTP calls) is handed to :meth:`Scheduler.run_in_background` and its
outcome is delivered back on the loop.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any, Protocol, TypeVar

T = TypeVar("T")

# Receives ``(result, None)`` on success and ``(None, exc)`` on failure
Completion = Callable[[Any, BaseException | None], None]


class TimerHandle(Protocol):
    """Handle returned by :meth:`Scheduler.call_later`."""

    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Schedules ``callback`` to run once after ``delay`` seconds."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...

    def run_in_background(self, func: Callable[[], T], done: Completion) -> TimerHandle:
        """Run ``func`` off the loop, then call ``done`` on the loop unless cancelled."""
        ...


class AsyncioScheduler:
    """:class:`Scheduler` backed by an asyncio event loop.

    :param loop: Loop to schedule on; defaults to the running loop at call
        time, so the scheduler can be built before the loop starts.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_later(max(delay, 0.0), callback)

    def run_in_background(self, func: Callable[[], T], done: Completion) -> asyncio.Future:
        future = self.loop.run_in_executor(None, func)

        def _complete(fut: asyncio.Future) -> None:
            if fut.cancelled():
                return
            error = fut.exception()
            done(None if error is not None else fut.result(), error)

        future.add_done_callback(_complete)
        return future
