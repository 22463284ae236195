"""
Tests for the lifecycle callback registry.
"""

import warnings

import pytest

from core.enums import LifecycleEvent
from core.exceptions import InvalidConfigException


@pytest.mark.unit
class TestRegisterCallback:

    def test_last_registration_wins(self, controller):
        first, second = [], []
        controller.register_callback(LifecycleEvent.KILL, first.append)
        controller.register_callback(LifecycleEvent.KILL, second.append)

        controller.events.fire(LifecycleEvent.KILL)

        assert first == []
        assert second == [1000]
        assert controller.events.get_callback(LifecycleEvent.KILL) == second.append

    def test_string_event_name(self, controller):
        calls = []
        controller.register_callback("fork_child", calls.append)

        controller.events.fire(LifecycleEvent.FORK_CHILD)

        assert calls == [1000]

    def test_non_callable_clears_binding(self, controller):
        calls = []
        controller.register_callback(LifecycleEvent.FORK, calls.append)
        controller.register_callback(LifecycleEvent.FORK, "nope")

        controller.events.fire(LifecycleEvent.FORK)

        assert calls == []
        assert controller.events.get_callback(LifecycleEvent.FORK) is None

    def test_default_callback_clears_binding(self, controller):
        controller.register_callback(LifecycleEvent.FORK, print)
        controller.register_callback(LifecycleEvent.FORK)

        assert controller.events.get_callback("fork") is None

    def test_unknown_event_name(self, controller):
        with pytest.raises(InvalidConfigException):
            controller.register_callback("no_such_event", print)


@pytest.mark.unit
class TestFire:

    def test_unbound_event_is_noop(self, controller):
        controller.events.fire(LifecycleEvent.DAEMONIZE)

    def test_callback_exception_is_suppressed(self, controller):
        def broken(pid):
            raise ValueError(pid)

        controller.register_callback(LifecycleEvent.KILL, broken)

        controller.events.fire(LifecycleEvent.KILL)

    def test_callback_warning_is_suppressed(self, controller):
        def noisy(pid):
            warnings.warn("noisy callback", UserWarning)

        controller.register_callback(LifecycleEvent.KILL, noisy)

        with warnings.catch_warnings():
            warnings.simplefilter("error")
            controller.events.fire(LifecycleEvent.KILL)
