"""Shared types and protocols for tick-state."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Protocol


@dataclass(frozen=True, slots=True)
class TickContext:
    tick_number: int
    dt: float
    elapsed: float
    request_stop: Callable[[], None]


System = Callable[[TickContext], None]


@dataclass
class State:
    """Bundle of optional callbacks registered under a state ID.

    Every field may be left as ``None``. A missing callback is a no-op and a
    missing guard always allows the transition. Guards veto by returning a
    falsy value.
    """

    enter: Callable[..., Any] | None = None
    exit: Callable[..., Any] | None = None
    update: Callable[[float], Any] | None = None
    can_enter: Callable[..., bool] | None = None
    can_exit: Callable[..., bool] | None = None


class TaskHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Anything that can run a callback after a delay in seconds."""

    def delay(self, seconds: float, callback: Callable[[], None]) -> TaskHandle: ...
