"""StateManager - registry of named states with one active state."""

from __future__ import annotations

import logging
from typing import Any, Callable

from tick_state.scheduler import FrameScheduler
from tick_state.types import Scheduler, State, TaskHandle

logger = logging.getLogger(__name__)


def _normalize(state_id: object) -> str | None:
    # Anything but a string can never match a registered ID.
    if not isinstance(state_id, str):
        return None
    return state_id.lower()


class StateManager:
    """Finite state machine driven by a per-frame ``update(dt)`` call.

    States are registered under case-insensitive IDs. At most one state is
    active. ``switch`` runs the exit protocol on the active state, checks the
    target's ``can_enter`` guard, and only then commits the new state and
    calls its ``enter``. A veto at either step never leaves the manager
    half-way between two states.

    ``freeze`` blocks ``switch`` for a number of seconds, measured by
    ``scheduler``. When no scheduler is given the manager owns a
    ``FrameScheduler`` and advances it from ``update``.
    """

    def __init__(self, scheduler: Scheduler | None = None) -> None:
        self._states: dict[str, State] = {}
        self._current_id: str | None = None
        self._frozen: bool = False
        self._freeze_task: TaskHandle | None = None
        if scheduler is None:
            self._own_scheduler: FrameScheduler | None = FrameScheduler()
            self._scheduler: Scheduler = self._own_scheduler
        else:
            self._own_scheduler = None
            self._scheduler = scheduler

    # --- Queries ---

    @property
    def current_id(self) -> str | None:
        return self._current_id

    @property
    def current(self) -> State | None:
        """The active State, looked up from current_id on every access."""
        if self._current_id is None:
            return None
        return self._states.get(self._current_id)

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler

    def has(self, state_id: str) -> bool:
        """Check if a state is registered under this ID."""
        return _normalize(state_id) in self._states

    def get(self, state_id: str) -> State | None:
        """Look up a registered state. None if unknown."""
        return self._states.get(_normalize(state_id))

    def names(self) -> list[str]:
        """List all registered (normalized) state IDs."""
        return list(self._states)

    # --- Registration ---

    def add(self, state_id: str, state: State) -> None:
        """Register a state. An existing registration under the same ID wins."""
        if not isinstance(state_id, str) or not state_id:
            raise ValueError("state_id must be a non-empty string")
        key = state_id.lower()
        if key in self._states:
            logger.warning(
                "State %r is already registered; ignoring the new definition", key
            )
            return
        self._states[key] = state

    def remove(self, state_id: str, *args: Any) -> None:
        """Unregister a state, exiting it first if it is active.

        The exit callback receives ``args``. The ``can_exit`` guard is not
        consulted: the definition is going away regardless.
        """
        key = _normalize(state_id)
        if key not in self._states:
            return
        if key == self._current_id:
            self._exit(args, force=True)
        self._states.pop(key, None)

    # --- Transitions ---

    def switch(self, state_id: str, *args: Any) -> bool:
        """Make ``state_id`` the active state. Returns True if it was entered.

        ``args`` are forwarded to the old state's ``can_exit``/``exit`` and to
        the new state's ``can_enter``/``enter``.
        """
        key = _normalize(state_id)
        if self._frozen:
            logger.warning("Switch to %r ignored: state manager is frozen", state_id)
            return False
        if key is None:
            logger.debug("Switch to non-string state id %r ignored", state_id)
            return False
        if key == self._current_id:
            return False
        target = self._states.get(key)
        if target is None:
            logger.debug("Switch to unknown state %r ignored", key)
            return False

        old = self._current_id
        if not self._exit(args):
            return False

        if target.can_enter is not None and not target.can_enter(*args):
            logger.debug("Enter into %r vetoed by can_enter", key)
            return False

        # Commit before enter so a switch made from inside enter sees it.
        self._current_id = key
        logger.debug("State transition %r -> %r", old, key)
        if target.enter is not None:
            target.enter(*args)
        return True

    def exit(self, *args: Any) -> bool:
        """Leave the active state. Returns False if ``can_exit`` vetoed."""
        return self._exit(args)

    def _exit(self, args: tuple[Any, ...], force: bool = False) -> bool:
        state = self.current
        if state is None:
            return True
        if not force and state.can_exit is not None and not state.can_exit(*args):
            logger.debug("Exit from %r vetoed by can_exit", self._current_id)
            return False
        if state.exit is not None:
            state.exit(*args)
        self._current_id = None
        return True

    # --- Per-frame ---

    def update(self, dt: float) -> None:
        """Forward dt to the active state's update callback."""
        if self._current_id is not None:
            state = self._states.get(self._current_id)
            if state is not None and state.update is not None:
                state.update(dt)
        if self._own_scheduler is not None:
            self._own_scheduler.advance(dt)

    # --- Freeze ---

    def freeze(
        self, duration: float, after_freeze: Callable[[], None] | None = None
    ) -> None:
        """Block ``switch`` for ``duration`` seconds, then call ``after_freeze``.

        Freezing again while frozen cancels the pending timer and starts a
        new one; the earlier ``after_freeze`` never runs.
        """
        if duration < 0:
            raise ValueError("freeze duration must be non-negative")

        def thaw() -> None:
            self._frozen = False
            self._freeze_task = None
            logger.debug("State manager unfrozen")
            if after_freeze is not None:
                after_freeze()

        # Schedule first: if delay raises, any earlier freeze stays intact.
        task = self._scheduler.delay(duration, thaw)
        if self._freeze_task is not None:
            self._freeze_task.cancel()
        self._frozen = True
        self._freeze_task = task
        logger.debug("State manager frozen for %.3fs", duration)

    def unfreeze(self) -> None:
        """Lift a freeze now. The pending ``after_freeze`` is discarded."""
        if self._freeze_task is not None:
            self._freeze_task.cancel()
            self._freeze_task = None
        self._frozen = False

    # --- Teardown ---

    def shutdown(self, *args: Any) -> None:
        """Exit the active state unconditionally, lift any freeze, drop all states."""
        self._exit(args, force=True)
        self.unfreeze()
        self._states.clear()
