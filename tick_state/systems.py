"""System factories for FrameLoop."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tick_state.scheduler import FrameScheduler
    from tick_state.types import System, TickContext


def make_scheduler_system(scheduler: FrameScheduler) -> System:
    """Return a system that advances a shared FrameScheduler by ``ctx.dt``.

    Only needed when the scheduler was passed to a StateManager explicitly;
    a manager's own scheduler is advanced by its ``update``.
    """

    def scheduler_system(ctx: TickContext) -> None:
        scheduler.advance(ctx.dt)

    return scheduler_system
