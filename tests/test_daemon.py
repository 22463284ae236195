"""
Tests for daemonization and session detach.
"""

import errno

import pytest

from core.exceptions import SessionDetachError


@pytest.mark.unit
class TestDaemonize:

    def test_parent_side_exits_with_zero(self, controller, ops, event_log):
        ops.fork_results = [4242]

        with pytest.raises(SystemExit) as exc_info:
            controller.daemonize()

        assert exc_info.value.code == 0
        assert ops.exits == [0]
        assert ops.setsid_calls == 0
        assert "daemonize" not in [name for name, _ in event_log]

    def test_child_side_detaches(self, controller, ops, event_log):
        ops.fork_results = [0]
        ops.sid_after_setsid = 5000

        controller.daemonize()

        assert ops.setsid_calls == 1
        assert controller.get_session_id() == 5000
        assert ops.exits == []
        assert [name for name, _ in event_log].count("daemonize") == 1
        assert event_log[-1] == ("daemonize", 5000)

    def test_fork_failure_continues_in_foreground(self, controller, ops, event_log):
        ops.fork_results = [OSError(errno.EAGAIN, "Resource temporarily unavailable")]

        controller.daemonize()

        assert ops.exits == []
        assert ops.setsid_calls == 0
        assert controller.is_root()
        assert "daemonize" not in [name for name, _ in event_log]


@pytest.mark.unit
class TestDetach:

    def test_setsid_failure_is_logged(self, controller, ops):
        ops.setsid_error = PermissionError(errno.EPERM, "Operation not permitted")
        ops.sid = 777

        controller.detach()

        assert controller.get_session_id() == 777

    def test_setsid_failure_raises_with_throw(self, controller, ops):
        controller.set_throw_on_error(True)
        ops.setsid_error = PermissionError(errno.EPERM, "Operation not permitted")

        with pytest.raises(SessionDetachError):
            controller.detach()
