"""
Child Waiter - 子进程等待器

阻塞轮询，直到收到 SIGCONT / SIGINT / SIGTERM，
或子进程以非零状态退出
"""

import os

from loguru import logger

from core.enums import ProcessRole
from proctree.fork import ForkCoordinator
from proctree.process import ProcessOps
from proctree.state import ProcessState


class ChildWaiter:
    """
    子进程等待器

    只在父进程中生效；循环期间信号处理器会在 sleep 中运行，
    通过修改 waiting_for_signals / stop_requested 结束循环
    """

    def __init__(
        self,
        state: ProcessState,
        ops: ProcessOps,
        forker: ForkCoordinator,
        interval: float = 0.005,
    ):
        """
        初始化等待器

        Args:
            state: 进程状态
            ops: 进程原语
            forker: fork 协调器（用于 wait_for_fork）
            interval: 轮询间隔（秒）
        """
        self.state = state
        self.ops = ops
        self.forker = forker
        self.interval = interval

    def wait_for_child(self, pid: int) -> None:
        """
        等待子进程

        子进程以非零状态退出时，当前（父）进程以退出码 1 退出

        Args:
            pid: 子进程 ID
        """
        if self.state.role is not ProcessRole.PARENT:
            return

        logger.debug(f"Waiting for child {pid}")
        while self.state.waiting_for_signals and not self.state.stop_requested:
            self.ops.sleep(self.interval)

            try:
                reaped, status = self.ops.waitpid_nohang(pid)
            except ChildProcessError:
                continue

            if reaped and os.WIFEXITED(status) and status:
                logger.error(
                    f"❌ Child {pid} exited with status {os.WEXITSTATUS(status)}"
                )
                self.ops.exit(1)

        logger.debug(f"Stopped waiting for child {pid}")

    def wait_for_fork(self) -> None:
        """fork 并等待新创建的子进程"""
        self.wait_for_child(self.forker.fork())
