"""
Pytest configuration and shared fixtures.

Unit tests drive the controller through FakeProcessOps, so no real process
is forked, signalled or reaped.
"""

import errno
from typing import Callable, Dict, List, Optional, Tuple

import pytest

from core.config import Settings
from core.enums import LifecycleEvent
from proctree import ProcessController
from proctree.state import ProcessState


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, isolated, no real processes)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (fork real processes)"
    )


class FakeProcessOps:
    """Scriptable stand-in for proctree.process.ProcessOps."""

    def __init__(self, pid: int = 1000, sid: int = 1000):
        self.pid = pid
        self.sid = sid
        self.fork_results: List[object] = []
        self.child_pid_after_fork = 5000
        self.kills: List[Tuple[int, int]] = []
        self.failing_pids: Dict[int, int] = {}
        self.handlers: Dict[int, Callable] = {}
        self.failing_handler_signals: List[int] = []
        self.setsid_calls = 0
        self.setsid_error: Optional[OSError] = None
        self.sid_after_setsid: Optional[int] = None
        self.wait_results: List[object] = []
        self.on_sleep: Optional[Callable[[int], None]] = None
        self.sleeps: List[float] = []
        self.exits: List[int] = []

    def fork(self) -> int:
        result = self.fork_results.pop(0)
        if isinstance(result, BaseException):
            raise result
        if result == 0:
            self.pid = self.child_pid_after_fork
        return result

    def getpid(self) -> int:
        if isinstance(self.pid, BaseException):
            raise self.pid
        return self.pid

    def getsid(self) -> int:
        if isinstance(self.sid, BaseException):
            raise self.sid
        return self.sid

    def setsid(self) -> None:
        self.setsid_calls += 1
        if self.setsid_error is not None:
            raise self.setsid_error
        if self.sid_after_setsid is not None:
            self.sid = self.sid_after_setsid

    def kill(self, pid: int, signum: int) -> None:
        if pid in self.failing_pids:
            code = self.failing_pids[pid]
            raise OSError(code, "No such process" if code == errno.ESRCH else "Error")
        self.kills.append((pid, signum))

    def waitpid_nohang(self, pid: int) -> Tuple[int, int]:
        if not self.wait_results:
            return 0, 0
        result = self.wait_results.pop(0)
        if isinstance(result, BaseException):
            raise result
        return result

    def install_handler(self, signum: int, handler: Callable):
        if signum in self.failing_handler_signals:
            raise OSError(errno.EINVAL, "Invalid argument")
        previous = self.handlers.get(signum)
        self.handlers[signum] = handler
        return previous

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        if self.on_sleep is not None:
            self.on_sleep(len(self.sleeps))

    def exit(self, code: int = 0) -> None:
        self.exits.append(code)
        raise SystemExit(code)


@pytest.fixture
def ops() -> FakeProcessOps:
    return FakeProcessOps()


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def controller(settings: Settings, ops: FakeProcessOps) -> ProcessController:
    """Controller that has already resolved pid 1000 / sid 1000."""
    ctl = ProcessController(settings=settings, ops=ops, state=ProcessState())
    ctl.init()
    return ctl


@pytest.fixture
def event_log(controller: ProcessController) -> List[Tuple[str, int]]:
    """Records every lifecycle event fired by the controller."""
    fired: List[Tuple[str, int]] = []

    for event in LifecycleEvent:
        controller.register_callback(
            event, lambda pid, name=event.value: fired.append((name, pid))
        )
    return fired
