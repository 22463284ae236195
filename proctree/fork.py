"""
Fork Coordinator - fork 协调器

执行 fork，并把结果归类为子进程 / 父进程 / 错误三种状态转换
"""

from typing import Any, Optional

from loguru import logger

from core.enums import LifecycleEvent
from core.exceptions import ProcessCreationError
from proctree.events import EventHub, run_best_effort
from proctree.identity import IdentityResolver
from proctree.process import ProcessOps
from proctree.state import ProcessState
from proctree.terminator import ChildTerminator

# os.fork 失败时返回给调用方的结果
FORK_FAILED = -1


class ForkCoordinator:
    """
    fork 协调器

    状态转换：
    - 结果为 0：当前进程成为子进程，触发 FORK_CHILD
    - 结果 > 0：记录新子进程，触发 FORK_PARENT（根进程再触发 FORK_ROOT）
    - 结果 < 0：请求停止并终止已有子进程，触发 FORK_ERROR
    三种情况之后都会触发 FORK，再调用调用方传入的回调
    """

    def __init__(
        self,
        state: ProcessState,
        ops: ProcessOps,
        identity: IdentityResolver,
        events: EventHub,
        terminator: ChildTerminator,
    ):
        self.state = state
        self.ops = ops
        self.identity = identity
        self.events = events
        self.terminator = terminator

    def fork(self, callback: Optional[Any] = None) -> int:
        """
        fork 当前进程

        Args:
            callback: fork 完成后调用的函数，参数为当前 PID（可选）

        Returns:
            子进程中为 0，父进程中为子进程 PID，失败为 FORK_FAILED
        """
        self.state.waiting_for_signals = True
        # 子进程需要父进程的 PID 作为 parent_pid
        self.identity.get_pid()
        error: Optional[OSError] = None

        try:
            result = self.ops.fork()
        except OSError as e:
            error = e
            result = FORK_FAILED
        self.state.fork_result = result

        if result == 0:
            self._on_child()
        elif result > 0:
            self._on_parent(result)
        else:
            self._on_error(error)

        self.events.fire(LifecycleEvent.FORK)
        run_best_effort(callback, self.identity.get_pid())

        return result

    def _on_child(self) -> None:
        self.state.become_child(None)
        self.identity.refresh_pid()
        logger.debug(
            f"Forked child {self.state.pid} of {self.state.parent_pid} "
            f"(depth {self.state.depth})"
        )
        self.events.fire(LifecycleEvent.FORK_CHILD)

    def _on_parent(self, child_pid: int) -> None:
        self.state.add_child(child_pid)
        logger.info(
            f"🚀 Forked child process {child_pid} "
            f"({self.state.child_count} children)"
        )
        self.events.fire(LifecycleEvent.FORK_PARENT)
        if self.state.is_root:
            self.events.fire(LifecycleEvent.FORK_ROOT)

    def _on_error(self, error: Optional[OSError]) -> None:
        logger.error(f"❌ Could not fork: {error}")
        self.state.stop_requested = True
        self.terminator.terminate()
        self.events.fire(LifecycleEvent.FORK_ERROR)
        if self.state.throw_on_error:
            raise ProcessCreationError(
                f"Could not fork: {error}" if error else "Could not fork"
            ) from error
