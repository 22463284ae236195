"""
进程树控制器的自定义异常
"""
from typing import Any, Optional


class ProcTreeException(Exception):
    """proctree 基础异常类"""
    pass


# ========== 进程控制异常 ==========

class ProcessControlException(ProcTreeException):
    """进程控制相关异常基类"""
    pass


class ProcessCreationError(ProcessControlException):
    """fork 失败异常"""
    def __init__(self, detail: str = "Could not fork"):
        super().__init__(f"Process creation error: {detail}")


class IdentityResolutionError(ProcessControlException):
    """无法获取进程 ID 或会话 ID"""
    def __init__(self, what: str, detail: Optional[str] = None):
        self.what = what
        message = f"Could not receive current {what}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class SignalDeliveryError(ProcessControlException):
    """向进程发送信号失败"""
    def __init__(
        self,
        pid: int,
        signum: int,
        errno: Optional[int] = None,
        strerror: Optional[str] = None,
    ):
        self.pid = pid
        self.signum = signum
        self.errno = errno
        self.strerror = strerror
        super().__init__(
            f"Could not send signal {signum} to process {pid}: "
            f"[errno {errno}] {strerror}"
        )


class SessionDetachError(ProcessControlException):
    """无法成为新会话的首进程"""
    def __init__(self, detail: str):
        super().__init__(f"Could not detach from session: {detail}")


# ========== 配置异常 ==========

class ConfigurationException(ProcTreeException):
    """配置相关异常基类"""
    pass


class InvalidConfigException(ConfigurationException):
    """无效的配置异常"""
    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration: {key}={value} - {reason}"
        )
