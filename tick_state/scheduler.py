"""Delayed-callback schedulers used by StateManager.freeze."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Callable

# Absorbs float drift from summing a fixed dt (e.g. 100 * 0.05 != 5.0).
_EPSILON = 1e-9


@dataclass
class ScheduledTask:
    """One-shot countdown. Fires when remaining reaches 0, then is dropped."""

    remaining: float
    callback: Callable[[], None]
    cancelled: bool = False
    fired: bool = False

    def cancel(self) -> None:
        self.cancelled = True


class FrameScheduler:
    """Scheduler advanced by frame time instead of wall-clock time.

    Nothing fires on its own: the host (or a system made with
    ``make_scheduler_system``) calls ``advance(dt)`` once per frame.
    """

    def __init__(self) -> None:
        self._tasks: list[ScheduledTask] = []
        self._firing: list[ScheduledTask] = []

    def delay(self, seconds: float, callback: Callable[[], None]) -> ScheduledTask:
        if seconds < 0:
            raise ValueError("delay must be non-negative")
        task = ScheduledTask(remaining=seconds, callback=callback)
        self._tasks.append(task)
        return task

    def advance(self, dt: float) -> None:
        """Count every pending task down by dt and fire the expired ones.

        Tasks scheduled by a callback during this call wait for the next one.
        If a callback raises, the exception propagates; tasks it had not
        reached yet are still counted down and stay queued.
        """
        if not self._tasks:
            return
        snapshot = self._tasks
        self._tasks = []
        self._firing = snapshot
        kept: list[ScheduledTask] = []
        done = 0
        try:
            for task in snapshot:
                done += 1
                if task.cancelled:
                    continue
                task.remaining -= dt
                if task.remaining > _EPSILON:
                    kept.append(task)
                    continue
                task.fired = True
                task.callback()
        finally:
            self._firing = []
            unreached = snapshot[done:]
            for task in unreached:
                task.remaining -= dt
            # A callback may have cancelled a task that was already kept.
            self._tasks = [
                t for t in kept + unreached + self._tasks if not t.cancelled
            ]

    def pending(self) -> int:
        return sum(1 for t in self._tasks if not t.cancelled)

    def clear(self) -> None:
        for task in self._tasks + self._firing:
            task.cancel()
        self._tasks.clear()


class AsyncioScheduler:
    """Scheduler backed by an asyncio event loop's ``call_later``."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def delay(self, seconds: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        if seconds < 0:
            raise ValueError("delay must be non-negative")
        loop = self._loop if self._loop is not None else asyncio.get_running_loop()
        return loop.call_later(seconds, callback)
