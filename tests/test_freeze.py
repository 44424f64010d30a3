"""Tests for StateManager.freeze / unfreeze."""
import logging

import pytest

from tick_state import FrameScheduler, State, StateManager


def _manager(**kwargs) -> StateManager:
    sm = StateManager(**kwargs)
    sm.add("x", State())
    sm.add("y", State())
    sm.switch("x")
    return sm


class TestFreezeGating:
    def test_switch_blocked_while_frozen(self, caplog):
        sm = _manager()
        sm.freeze(5.0)
        with caplog.at_level(logging.WARNING, logger="tick_state.manager"):
            assert sm.switch("y") is False
        assert sm.current_id == "x"
        assert "frozen" in caplog.text

    def test_switch_allowed_after_timer(self):
        """Callback fires exactly once and switching works again."""
        fired = []
        sm = _manager()
        sm.freeze(5.0, lambda: fired.append(True))
        sm.update(2.5)
        assert sm.frozen is True
        assert sm.switch("y") is False

        sm.update(2.5)
        assert sm.frozen is False
        assert fired == [True]
        assert sm.switch("y") is True

        sm.update(10.0)
        assert fired == [True]

    def test_frozen_cleared_before_callback(self):
        """after_freeze may switch state immediately."""
        sm = _manager()
        sm.freeze(1.0, lambda: sm.switch("y"))
        sm.update(1.0)
        assert sm.current_id == "y"

    def test_freeze_without_callback(self):
        sm = _manager()
        sm.freeze(0.5)
        sm.update(0.5)
        assert sm.frozen is False

    def test_fixed_step_accumulation(self):
        """100 ticks of 0.05s release a 5s freeze on the 100th tick."""
        fired = []
        sm = _manager()
        sm.freeze(5.0, lambda: fired.append(True))
        for _ in range(99):
            sm.update(0.05)
        assert fired == []
        sm.update(0.05)
        assert fired == [True]

    def test_negative_duration_rejected(self):
        sm = _manager()
        with pytest.raises(ValueError):
            sm.freeze(-1.0)
        assert sm.frozen is False


class TestFreezeDoesNotBlock:
    def test_update_still_runs(self):
        ticks = []
        sm = StateManager()
        sm.add("x", State(update=lambda dt: ticks.append(dt)))
        sm.switch("x")
        sm.freeze(1.0)
        sm.update(0.1)
        assert ticks == [0.1]

    def test_exit_still_runs(self):
        sm = _manager()
        sm.freeze(1.0)
        assert sm.exit() is True
        assert sm.current_id is None

    def test_add_and_remove_still_run(self):
        sm = _manager()
        sm.freeze(1.0)
        sm.add("z", State())
        sm.remove("y")
        assert sm.names() == ["x", "z"]


class TestRefreeze:
    def test_refreeze_replaces_timer(self):
        """Last caller wins: the first callback never fires."""
        fired = []
        sm = _manager()
        sm.freeze(1.0, lambda: fired.append("first"))
        sm.update(0.5)
        sm.freeze(1.0, lambda: fired.append("second"))

        sm.update(0.5)
        assert fired == []
        assert sm.frozen is True

        sm.update(0.5)
        assert fired == ["second"]
        assert sm.frozen is False

    def test_refreeze_shorter_duration(self):
        fired = []
        sm = _manager()
        sm.freeze(10.0, lambda: fired.append("long"))
        sm.freeze(1.0, lambda: fired.append("short"))
        sm.update(1.0)
        assert fired == ["short"]
        sm.update(20.0)
        assert fired == ["short"]

    def test_freeze_again_from_callback(self):
        sm = _manager()
        sm.freeze(1.0, lambda: sm.freeze(2.0))
        sm.update(1.0)
        assert sm.frozen is True
        sm.update(2.0)
        assert sm.frozen is False


class TestUnfreeze:
    def test_unfreeze_discards_callback(self):
        fired = []
        sm = _manager()
        sm.freeze(1.0, lambda: fired.append(True))
        sm.unfreeze()
        assert sm.frozen is False
        assert sm.switch("y") is True
        sm.update(5.0)
        assert fired == []

    def test_unfreeze_when_not_frozen(self):
        sm = _manager()
        sm.unfreeze()
        assert sm.frozen is False


class TestExternalScheduler:
    def test_update_does_not_advance_external_scheduler(self):
        """A shared scheduler is advanced by its owner, not by update."""
        scheduler = FrameScheduler()
        sm = _manager(scheduler=scheduler)
        assert sm.scheduler is scheduler

        sm.freeze(1.0)
        sm.update(5.0)
        assert sm.frozen is True

        scheduler.advance(1.0)
        assert sm.frozen is False

    def test_freeze_uses_given_scheduler(self):
        calls = []

        class RecordingScheduler:
            def delay(self, seconds, callback):
                calls.append((seconds, callback))
                return FrameScheduler().delay(seconds, callback)

        sm = _manager(scheduler=RecordingScheduler())
        sm.freeze(3.0)
        assert len(calls) == 1
        assert calls[0][0] == 3.0

        calls[0][1]()
        assert sm.frozen is False


class TestSchedulerFailure:
    class FailingScheduler:
        def delay(self, seconds, callback):
            raise RuntimeError("scheduler is gone")

    def test_failed_schedule_leaves_manager_unfrozen(self):
        sm = _manager(scheduler=self.FailingScheduler())
        with pytest.raises(RuntimeError):
            sm.freeze(1.0)
        assert sm.frozen is False
        assert sm.switch("y") is True

    def test_failed_schedule_keeps_earlier_freeze(self):
        fired = []
        inner = FrameScheduler()

        class FlakyScheduler:
            fail = False

            def delay(self, seconds, callback):
                if self.fail:
                    raise RuntimeError("scheduler is gone")
                return inner.delay(seconds, callback)

        scheduler = FlakyScheduler()
        sm = _manager(scheduler=scheduler)
        sm.freeze(1.0, lambda: fired.append("first"))
        scheduler.fail = True
        with pytest.raises(RuntimeError):
            sm.freeze(5.0)

        assert sm.frozen is True
        inner.advance(1.0)
        assert fired == ["first"]
        assert sm.frozen is False
