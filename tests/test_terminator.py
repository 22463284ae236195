"""
Tests for ChildTerminator delivery and failure policy.
"""

import errno
import signal

import pytest

from core.exceptions import SignalDeliveryError


@pytest.mark.unit
class TestStopChildren:

    def test_signals_children_in_order(self, controller, ops, event_log):
        controller.state.children = [201, 202, 203]

        controller.stop_children()

        assert ops.kills == [
            (201, signal.SIGTERM),
            (202, signal.SIGTERM),
            (203, signal.SIGTERM),
        ]
        assert [name for name, _ in event_log] == [
            "stop_children",
            "killed_child",
            "killed_child",
            "killed_child",
        ]

    def test_custom_signal(self, controller, ops):
        controller.state.children = [201]

        controller.stop_children(signal.SIGKILL)

        assert ops.kills == [(201, signal.SIGKILL)]

    def test_no_children_still_fires_stop_children(self, controller, ops, event_log):
        controller.stop_children()

        assert ops.kills == []
        assert event_log == [("stop_children", 1000)]

    def test_failure_skipped_without_throw(self, controller, ops, event_log):
        controller.state.children = [201, 202]
        ops.failing_pids = {201: errno.ESRCH}

        controller.stop_children()

        assert ops.kills == [(202, signal.SIGTERM)]
        assert [name for name, _ in event_log] == ["stop_children", "killed_child"]

    def test_failure_stops_iteration_with_throw(self, controller, ops, event_log):
        controller.set_throw_on_error(True)
        controller.state.children = [201, 202]
        ops.failing_pids = {201: errno.ESRCH}

        with pytest.raises(SignalDeliveryError) as exc_info:
            controller.stop_children()

        error = exc_info.value
        assert error.pid == 201
        assert error.signum == signal.SIGTERM
        assert error.errno == errno.ESRCH
        assert "201" in str(error)
        assert ops.kills == []
        assert [name for name, _ in event_log] == ["stop_children"]
