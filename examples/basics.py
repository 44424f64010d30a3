"""A guard patrolling, spotting the player, and getting stunned.

Demonstrates:
- Registering states with enter/exit/update callbacks
- can_enter / can_exit guards vetoing transitions
- Case-insensitive state IDs
- Driving the state manager with a fixed-step FrameLoop
- Freezing the manager for a few seconds after a stun

Run: python -m examples.basics
"""

import logging

from tick_state import FrameLoop, State, StateManager
from tick_state.types import TickContext

TPS = 10


def build_guard(log: list[str]) -> StateManager:
    sm = StateManager()
    patrol_distance = [0.0]

    def patrol_update(dt: float) -> None:
        patrol_distance[0] += 1.5 * dt

    sm.add("Patrol", State(
        enter=lambda *a: log.append("patrol: walking the wall"),
        exit=lambda *a: log.append(f"patrol: stopped after {patrol_distance[0]:.2f}m"),
        update=patrol_update,
    ))

    # Only chase targets that are actually visible.
    sm.add("Chase", State(
        enter=lambda target, *a: log.append(f"chase: after {target}"),
        can_enter=lambda target=None, *a: target is not None,
        # A guard never gives up the chase on its own.
        can_exit=lambda *a: "stun" in a,
    ))

    sm.add("Stunned", State(
        enter=lambda *a: log.append("stunned: seeing stars"),
        exit=lambda *a: log.append("stunned: back on my feet"),
    ))
    return sm


def main() -> None:
    logging.basicConfig(level=logging.DEBUG, format="    %(levelname)s %(name)s: %(message)s")
    print("=== Guard state machine ===\n")

    log: list[str] = []
    sm = build_guard(log)
    loop = FrameLoop(sm, tps=TPS)

    def story_system(ctx: TickContext) -> None:
        if ctx.tick_number == 1:
            sm.switch("PATROL")
        elif ctx.tick_number == 5:
            # Patrol exits, then can_enter refuses: nothing is active.
            sm.switch("chase")
            sm.switch("chase", "the player")
        elif ctx.tick_number == 10:
            sm.switch("patrol")                 # vetoed: can_exit wants a stun
        elif ctx.tick_number == 12:
            sm.switch("stunned", "stun")
            sm.freeze(2.0, lambda: log.append("freeze over"))
        elif ctx.tick_number == 20:
            sm.switch("patrol")                 # ignored: still frozen
        elif ctx.tick_number == 33:
            sm.switch("patrol")

    def print_system(ctx: TickContext) -> None:
        for line in log:
            print(f"  [tick {ctx.tick_number:>2}] {line}")
        log.clear()

    # Both run before the manager's update, so update output shows a tick late.
    loop.add_system(story_system)
    loop.add_system(print_system)

    loop.run(40)
    sm.shutdown()
    for line in log:
        print(f"  [end] {line}")
    print(f"\nDone at tick {loop.tick_number}, state={sm.current_id!r}.")


if __name__ == "__main__":
    main()
