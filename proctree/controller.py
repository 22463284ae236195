"""
Process Controller - 进程树控制器

对外暴露的统一入口，组合进程状态、事件中心、fork 协调器、
子进程终止器、信号分发器、守护进程化器和子进程等待器
"""

import signal
from typing import Any, List, Optional, Union

from loguru import logger

from core.config import Settings, get_settings
from core.enums import LifecycleEvent
from core.exceptions import InvalidConfigException
from core.utils import setup_logger
from proctree.daemon import Daemonizer
from proctree.events import EventCallback, EventHub
from proctree.fork import ForkCoordinator
from proctree.identity import IdentityResolver
from proctree.process import ProcessOps
from proctree.signal_handler import ROOT_SIGNALS, SignalDispatcher
from proctree.state import ProcessState
from proctree.terminator import ChildTerminator
from proctree.waiter import ChildWaiter


class ProcessController:
    """
    进程树控制器

    每个操作系统进程一个实例；fork 之后子进程沿用同一个对象的副本。
    支持依赖注入，便于测试。

    使用示例:
        controller = ProcessController()
        controller.init()
        controller.register_callback(LifecycleEvent.FORK_CHILD, on_child)

        if controller.fork() == 0:
            run_worker()
            controller.stop()
        controller.wait_for_child(controller.get_child_pids()[-1])
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        ops: Optional[ProcessOps] = None,
        state: Optional[ProcessState] = None,
    ):
        """
        初始化控制器

        Args:
            settings: 配置对象（可选，用于依赖注入）
            ops: 进程原语（可选，用于依赖注入）
            state: 进程状态（可选，用于依赖注入）
        """
        self.settings = settings or get_settings()
        self.ops = ops or ProcessOps()
        self.state = state or ProcessState(
            throw_on_error=self.settings.THROW_ON_ERROR
        )

        self.identity = IdentityResolver(self.state, self.ops)
        self.events = EventHub(self.identity)
        self.terminator = ChildTerminator(self.state, self.ops, self.events)
        self.forker = ForkCoordinator(
            self.state, self.ops, self.identity, self.events, self.terminator
        )
        self.dispatcher = SignalDispatcher(
            self.state,
            self.ops,
            self.events,
            self.terminator,
            escalation_threshold=self.settings.TERM_ESCALATION_THRESHOLD,
            term_count_reset=self.settings.TERM_COUNT_RESET,
            quiet_period=self.settings.TERM_QUIET_PERIOD,
        )
        self.daemonizer = Daemonizer(
            self.state, self.ops, self.identity, self.events, self.forker
        )
        self.waiter = ChildWaiter(
            self.state,
            self.ops,
            self.forker,
            interval=self.settings.wait_for_child_interval,
        )

    # ========== 初始化 ==========

    def init(self, is_root_process: bool = True) -> None:
        """
        初始化控制器

        获取 PID 和会话 ID（失败一律抛出 IdentityResolutionError），
        然后注册信号处理器：根进程处理 ROOT_SIGNALS，
        非根进程只处理 SIGTERM，注册失败时立即退出

        Args:
            is_root_process: 是否为根进程
        """
        self.identity.refresh_pid(strict=True)
        self.identity.refresh_session_id(strict=True)

        if is_root_process:
            self.dispatcher.install(ROOT_SIGNALS)
        else:
            try:
                self.dispatcher.install([signal.SIGTERM])
            except (OSError, ValueError) as e:
                logger.error(f"❌ Could not install SIGTERM handler: {e}")
                self.stop(1)

        logger.info(
            f"Process controller initialized "
            f"(pid={self.state.pid}, sid={self.state.session_id}, "
            f"root={is_root_process})"
        )

    def setup_logging(self) -> None:
        """按配置中的 LOG_LEVEL / LOG_FILE 配置 loguru"""
        setup_logger(self.settings.LOG_LEVEL, self.settings.LOG_FILE)

    def restore_signal_handlers(self) -> None:
        """恢复 init 之前的信号处理器"""
        self.dispatcher.restore()

    # ========== 查询 ==========

    def get_depth(self) -> int:
        """根进程返回 0，每 fork 一层加 1"""
        return self.state.depth

    def get_pid(self) -> Optional[int]:
        return self.identity.get_pid()

    def get_session_id(self) -> Optional[int]:
        return self.identity.get_session_id()

    def get_parent_pid(self) -> Optional[int]:
        return self.state.parent_pid

    def is_parent(self) -> bool:
        return self.state.is_parent

    def is_child(self) -> bool:
        return self.state.is_child

    def is_root(self) -> bool:
        return self.state.is_root

    def get_child_pids(self) -> List[int]:
        return list(self.state.children)

    def get_child_count(self) -> int:
        return self.state.child_count

    def is_stop_requested(self) -> bool:
        return self.state.stop_requested

    def get_stop_time(self) -> Optional[float]:
        return self.state.stop_time

    # ========== 生命周期 ==========

    def fork(self, callback: Optional[Any] = None) -> int:
        """
        fork 当前进程

        Args:
            callback: fork 完成后调用的函数，参数为当前 PID（可选）

        Returns:
            子进程中为 0，父进程中为子进程 PID，失败为 -1
        """
        return self.forker.fork(callback)

    def daemonize(self) -> None:
        self.daemonizer.daemonize()

    def detach(self) -> None:
        self.daemonizer.detach()

    def wait_for_child(self, pid: int) -> None:
        self.waiter.wait_for_child(pid)

    def wait_for_fork(self) -> None:
        self.waiter.wait_for_fork()

    def stop(self, exit_code: int = 0) -> None:
        """
        以给定退出码结束当前进程

        Args:
            exit_code: 退出码
        """
        logger.info(f"Process exiting with code {exit_code}")
        self.ops.exit(exit_code)

    def stop_children(self, signum: int = signal.SIGTERM) -> None:
        self.terminator.terminate(signum)

    # ========== 信号入口 ==========

    def signal(self, signum: int, frame=None) -> None:
        """
        信号处理入口，由信号机制调用

        Args:
            signum: 信号编号
            frame: 当前栈帧
        """
        self.dispatcher.handle(signum, frame)

    # ========== 配置 ==========

    def set_stop_process(self, value: bool) -> None:
        self.state.stop_requested = bool(value)

    def set_wait_for_signals(self, value: bool) -> None:
        self.state.waiting_for_signals = bool(value)

    def set_throw_on_error(self, value: bool) -> None:
        self.state.throw_on_error = bool(value)

    # ========== 事件 ==========

    def register_callback(
        self,
        event: Union[LifecycleEvent, str],
        callback: Optional[EventCallback] = None,
    ) -> None:
        """
        绑定事件回调，覆盖已有绑定

        Args:
            event: 事件枚举或其字符串值（如 "fork_child"）
            callback: 回调函数；不可调用的值会清除绑定

        Raises:
            InvalidConfigException: 未知事件名
        """
        try:
            self.events.register_callback(event, callback)
        except ValueError as e:
            raise InvalidConfigException("event", event, "unknown lifecycle event") from e


# ========== 全局控制器 ==========

_controller: Optional[ProcessController] = None


def get_controller() -> ProcessController:
    """
    获取当前进程的控制器实例（单例）

    fork 之后子进程得到的是父进程实例的副本

    Returns:
        ProcessController 实例
    """
    global _controller
    if _controller is None:
        _controller = ProcessController()
    return _controller


def set_controller(controller: Optional[ProcessController]) -> None:
    """
    设置（或清除）全局控制器实例

    Args:
        controller: ProcessController 实例，None 表示清除
    """
    global _controller
    _controller = controller
