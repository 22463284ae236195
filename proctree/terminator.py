"""
Child Terminator - 子进程终止器

按顺序向当前进程的直接子进程发送信号
"""

import signal

from loguru import logger

from core.enums import LifecycleEvent
from core.exceptions import SignalDeliveryError
from proctree.events import EventHub
from proctree.process import ProcessOps, signal_name
from proctree.state import ProcessState


class ChildTerminator:
    """
    子进程终止器

    发送失败时：
    - throw_on_error 打开：立即抛出 SignalDeliveryError，剩余子进程不再发送
    - throw_on_error 关闭：记录日志并继续处理下一个子进程
    """

    def __init__(self, state: ProcessState, ops: ProcessOps, events: EventHub):
        self.state = state
        self.ops = ops
        self.events = events

    def terminate(self, signum: int = signal.SIGTERM) -> None:
        """
        向所有子进程发送信号

        Args:
            signum: 要发送的信号（默认 SIGTERM）
        """
        self.events.fire(LifecycleEvent.STOP_CHILDREN)

        if self.state.children:
            logger.info(
                f"🛑 Sending {signal_name(signum)} to "
                f"{len(self.state.children)} children"
            )

        for pid in list(self.state.children):
            try:
                self.ops.kill(pid, signum)
            except OSError as e:
                if self.state.throw_on_error:
                    raise SignalDeliveryError(pid, signum, e.errno, e.strerror) from e
                logger.warning(f"⚠️  Could not signal child {pid}: {e}")
                continue

            self.events.fire(LifecycleEvent.KILLED_CHILD)
