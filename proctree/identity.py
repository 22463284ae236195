"""
Identity Resolver - 进程身份解析

延迟获取并缓存当前进程的 PID 和会话 ID
"""

from typing import Callable, Optional

from loguru import logger

from core.exceptions import IdentityResolutionError
from proctree.process import ProcessOps
from proctree.state import ProcessState


class IdentityResolver:
    """
    进程身份解析器

    解析失败时：strict 或 throw_on_error 打开时抛出
    IdentityResolutionError，否则记录错误并返回 None
    """

    def __init__(self, state: ProcessState, ops: ProcessOps):
        self.state = state
        self.ops = ops

    def get_pid(self, strict: bool = False) -> Optional[int]:
        """
        获取当前进程 PID（已缓存则直接返回）

        Args:
            strict: 为 True 时忽略 throw_on_error，失败一律抛出

        Returns:
            当前进程 PID，失败且未抛出时返回 None
        """
        if self.state.pid:
            return self.state.pid
        return self.refresh_pid(strict=strict)

    def refresh_pid(self, strict: bool = False) -> Optional[int]:
        """重新查询并缓存当前进程 PID"""
        self.state.pid = self._resolve("process ID", self.ops.getpid, strict)
        return self.state.pid

    def get_session_id(self, strict: bool = False) -> Optional[int]:
        if self.state.session_id is not None:
            return self.state.session_id
        return self.refresh_session_id(strict=strict)

    def refresh_session_id(self, strict: bool = False) -> Optional[int]:
        """重新查询并缓存当前会话 ID"""
        self.state.session_id = self._resolve("session ID", self.ops.getsid, strict)
        return self.state.session_id

    def _resolve(
        self, what: str, query: Callable[[], int], strict: bool
    ) -> Optional[int]:
        try:
            value = query()
        except OSError as e:
            return self._fail(what, e.strerror or str(e), strict, cause=e)

        if value is None or value < 0:
            return self._fail(what, f"invalid value {value!r}", strict)
        return value

    def _fail(
        self,
        what: str,
        detail: str,
        strict: bool,
        cause: Optional[BaseException] = None,
    ) -> None:
        if strict or self.state.throw_on_error:
            raise IdentityResolutionError(what, detail) from cause
        logger.error(f"❌ Could not receive current {what}: {detail}")
        return None
