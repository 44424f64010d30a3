"""tick-state - Named-state machine for per-frame game loops."""

from tick_state.loop import FrameLoop
from tick_state.manager import StateManager
from tick_state.scheduler import AsyncioScheduler, FrameScheduler, ScheduledTask
from tick_state.systems import make_scheduler_system
from tick_state.types import Scheduler, State, System, TaskHandle, TickContext

__all__ = [
    "StateManager",
    "State",
    "FrameLoop",
    "TickContext",
    "System",
    "Scheduler",
    "TaskHandle",
    "FrameScheduler",
    "AsyncioScheduler",
    "ScheduledTask",
    "make_scheduler_system",
]
