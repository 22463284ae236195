"""
守护进程化

fork + 脱离会话 + 原进程退出
"""
from loguru import logger

from core.enums import LifecycleEvent
from core.exceptions import SessionDetachError
from proctree.events import EventHub
from proctree.fork import ForkCoordinator
from proctree.identity import IdentityResolver
from proctree.process import ProcessOps
from proctree.state import ProcessState


class Daemonizer:
    """
    守护进程化器

    流程：
    - fork 结果为 0：子进程脱离会话成为会话首进程，触发 DAEMONIZE，继续执行
    - fork 结果 > 0：原进程以退出码 0 立即退出
    - fork 失败：什么都不做，原进程作为普通进程继续执行
    """

    def __init__(
        self,
        state: ProcessState,
        ops: ProcessOps,
        identity: IdentityResolver,
        events: EventHub,
        forker: ForkCoordinator,
    ):
        self.state = state
        self.ops = ops
        self.identity = identity
        self.events = events
        self.forker = forker

    def daemonize(self) -> None:
        """把当前程序转为守护进程"""
        fork_result = self.forker.fork()

        if fork_result == 0:
            self.detach()
            logger.info(f"👻 Daemonized, session {self.state.session_id}")
            self.events.fire(LifecycleEvent.DAEMONIZE)
        elif fork_result > 0:
            logger.info(f"Daemon {fork_result} started, original process exiting")
            self.ops.exit(0)
        else:
            logger.warning("⚠️  Daemonization failed, continuing in foreground")

    def detach(self) -> None:
        """
        脱离当前会话

        成为新会话的首进程，并重新获取会话 ID
        """
        try:
            self.ops.setsid()
        except OSError as e:
            if self.state.throw_on_error:
                raise SessionDetachError(str(e)) from e
            logger.warning(f"⚠️  setsid failed: {e}")

        self.identity.refresh_session_id()
