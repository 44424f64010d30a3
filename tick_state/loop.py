"""FrameLoop - feeds a StateManager fixed-size steps out of variable frame time."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Callable

from tick_state.types import System, TickContext

if TYPE_CHECKING:
    from tick_state.manager import StateManager

logger = logging.getLogger(__name__)

_EPSILON = 1e-9


class FrameLoop:
    """Turns whatever frame time the host measures into fixed update steps.

    Frame time handed to ``advance`` is banked and spent in steps of
    ``1 / tps`` seconds. Each step runs the registered systems in order
    (game logic that reacts to events and calls ``switch``), then
    ``manager.update(dt)``. A system calling ``ctx.request_stop()`` ends the
    step there, so the manager is not updated for that step.

    At most ``max_steps`` steps run per ``advance``. Time owed beyond that is
    dropped, so one long stall cannot make every following frame run a
    burst of catch-up steps.
    """

    def __init__(self, manager: StateManager, tps: int = 60, max_steps: int = 5) -> None:
        if tps <= 0:
            raise ValueError("tps must be positive")
        if max_steps <= 0:
            raise ValueError("max_steps must be positive")
        self._manager = manager
        self._tps = tps
        self._dt = 1.0 / tps
        self._max_steps = max_steps
        self._banked = 0.0
        self._tick_number = 0
        self._systems: list[System] = []
        self._stop_requested = False

    @property
    def manager(self) -> StateManager:
        return self._manager

    @property
    def tps(self) -> int:
        return self._tps

    @property
    def dt(self) -> float:
        return self._dt

    @property
    def tick_number(self) -> int:
        return self._tick_number

    @property
    def alpha(self) -> float:
        """Fraction of a step banked but not yet run, for render interpolation."""
        return self._banked / self._dt

    @property
    def stopped(self) -> bool:
        return self._stop_requested

    def add_system(self, system: System) -> None:
        self._systems.append(system)

    def stop(self) -> None:
        self._stop_requested = True

    def _step(self) -> None:
        self._tick_number += 1
        ctx = TickContext(
            tick_number=self._tick_number,
            dt=self._dt,
            elapsed=self._tick_number * self._dt,
            request_stop=self.stop,
        )
        for system in self._systems:
            system(ctx)
            if self._stop_requested:
                logger.debug("Stop requested during step %d", self._tick_number)
                return
        self._manager.update(self._dt)

    def advance(self, frame_dt: float) -> int:
        """Bank ``frame_dt`` seconds and run every whole step it pays for.

        Returns the number of steps run. Does nothing once stopped.
        """
        if frame_dt < 0:
            raise ValueError("frame_dt must be non-negative")
        if self._stop_requested:
            return 0
        self._banked += frame_dt
        steps = 0
        while self._banked + _EPSILON >= self._dt:
            if steps == self._max_steps:
                logger.debug(
                    "Dropping %.3fs of frame time after %d steps", self._banked, steps
                )
                self._banked = 0.0
                break
            self._banked = max(self._banked - self._dt, 0.0)
            self._step()
            steps += 1
            if self._stop_requested:
                break
        return steps

    def run(self, n: int) -> int:
        """Run up to ``n`` steps back to back, ignoring wall time.

        Clears an earlier stop first. Returns the number of steps run.
        """
        self._stop_requested = False
        steps = 0
        while steps < n and not self._stop_requested:
            self._step()
            steps += 1
        return steps

    def run_realtime(
        self,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Advance by measured wall time until a system requests a stop."""
        self._stop_requested = False
        last = clock()
        while not self._stop_requested:
            now = clock()
            self.advance(now - last)
            last = now
            if self._stop_requested:
                break
            wait = self._dt - self._banked
            if wait > 0:
                sleep(wait)
