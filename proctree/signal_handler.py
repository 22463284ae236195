"""
信号分发器

把异步到达的信号转换为进程状态变化和对子进程的级联信号
"""
import signal
import time
from typing import Callable, Dict, List, Optional

from loguru import logger

from core.enums import LifecycleEvent, ProcessRole, SignalClass, TermCountReset
from proctree.events import EventHub
from proctree.process import ProcessOps, signal_name
from proctree.state import ProcessState
from proctree.terminator import ChildTerminator

# 根进程默认处理的信号
ROOT_SIGNALS: List[int] = [
    signal.SIGTERM,
    signal.SIGINT,
    signal.SIGUSR1,
    signal.SIGUSR2,
    signal.SIGCONT,
    signal.SIGHUP,
]

_SIGNAL_CLASSES: Dict[int, SignalClass] = {
    signal.SIGUSR1: SignalClass.USER,
    signal.SIGUSR2: SignalClass.USER,
    signal.SIGCONT: SignalClass.RESUME,
    signal.SIGINT: SignalClass.TERMINATE,
    signal.SIGTERM: SignalClass.TERMINATE,
    signal.SIGHUP: SignalClass.RELOAD,
}


def classify_signal(signum: int) -> SignalClass:
    """
    信号分类

    Args:
        signum: 信号编号

    Returns:
        信号类别，未知信号为 SignalClass.OTHER
    """
    return _SIGNAL_CLASSES.get(signum, SignalClass.OTHER)


class SignalDispatcher:
    """
    信号分发器

    处理器只在 Python 解释器的信号检查点运行（例如 time.sleep 期间），
    只修改状态和发送信号，不做阻塞操作。

    使用示例:
        dispatcher = SignalDispatcher(state, ops, events, terminator)
        dispatcher.install()   # 注册 ROOT_SIGNALS
        ...
        dispatcher.restore()   # 恢复原始处理器
    """

    def __init__(
        self,
        state: ProcessState,
        ops: ProcessOps,
        events: EventHub,
        terminator: ChildTerminator,
        escalation_threshold: int = 5,
        term_count_reset: TermCountReset = TermCountReset.PER_SIGNAL,
        quiet_period: float = 10.0,
        clock: Callable[[], float] = time.time,
    ):
        self.state = state
        self.ops = ops
        self.events = events
        self.terminator = terminator
        self.escalation_threshold = escalation_threshold
        self.term_count_reset = term_count_reset
        self.quiet_period = quiet_period
        self.clock = clock
        self._original_handlers: Dict[int, Optional[Callable]] = {}
        self._role_handlers: Dict[ProcessRole, Callable[[int], None]] = {
            ProcessRole.PARENT: self._dispatch_parent,
            ProcessRole.CHILD: self._dispatch_child,
        }
        self._class_handlers: Dict[SignalClass, Callable[[], None]] = {
            SignalClass.USER: self._on_user,
            SignalClass.RESUME: self._on_resume,
            SignalClass.TERMINATE: self._on_terminate,
            SignalClass.RELOAD: self._on_reload,
            SignalClass.OTHER: self._on_other,
        }

    def handle(self, signum: int, frame=None) -> None:
        """
        处理一个信号

        可直接作为 signal.signal 的处理器使用

        Args:
            signum: 信号编号
            frame: 当前栈帧（未使用）
        """
        logger.debug(
            f"Received {signal_name(signum)} as {self.state.role.value}"
        )
        self._reset_term_count()
        self._role_handlers[self.state.role](signum)

        if signum == signal.SIGTERM:
            self.events.fire(LifecycleEvent.KILL)

    def install(self, signals: Optional[List[int]] = None) -> None:
        """
        注册信号处理器

        Args:
            signals: 要处理的信号列表（默认：ROOT_SIGNALS）

        Raises:
            OSError / ValueError: 注册失败时由 signal 模块抛出
        """
        if signals is None:
            signals = ROOT_SIGNALS

        for sig in signals:
            previous = self.ops.install_handler(sig, self.handle)
            self._original_handlers.setdefault(sig, previous)
            logger.debug(f"✅ Registered handler for {signal_name(sig)}")

    def restore(self) -> None:
        """恢复原始信号处理器"""
        for sig, original_handler in self._original_handlers.items():
            if original_handler is not None:
                self.ops.install_handler(sig, original_handler)
        self._original_handlers.clear()

    def _reset_term_count(self) -> None:
        if self.term_count_reset is TermCountReset.PER_SIGNAL:
            # 每次分发都会清零，term_count 最多为 1，升级到 SIGKILL 的分支不会触发
            self.state.term_count = 0
            return

        last = self.state.last_term_time
        if last is None or self.clock() - last > self.quiet_period:
            self.state.term_count = 0

    def _dispatch_child(self, signum: int) -> None:
        self.state.stop_requested = True

    def _dispatch_parent(self, signum: int) -> None:
        self._class_handlers[classify_signal(signum)]()

    def _on_user(self) -> None:
        pass

    def _on_resume(self) -> None:
        self.state.waiting_for_signals = False

    def _on_terminate(self) -> None:
        now = self.clock()
        self.state.stop_requested = True
        self.state.stop_time = now
        self.state.last_term_time = now
        self.state.term_count += 1

        if self.state.term_count < self.escalation_threshold:
            self.terminator.terminate(signal.SIGTERM)
        else:
            logger.warning(
                f"⚠️  Received {self.state.term_count} termination signals, "
                f"escalating to SIGKILL"
            )
            self.terminator.terminate(signal.SIGKILL)

    def _on_reload(self) -> None:
        self.terminator.terminate(signal.SIGTERM)

    def _on_other(self) -> None:
        pass
