"""
Process Operations - 操作系统进程原语

对 os / signal / time 的薄封装，控制器通过它访问操作系统，
测试时可以替换为假实现
"""

import os
import signal
import sys
import time
from typing import Callable, Optional, Tuple


class ProcessOps:
    """
    操作系统进程原语

    所有方法都直接抛出底层的 OSError，由调用方决定如何处理
    """

    def fork(self) -> int:
        """
        创建子进程

        Returns:
            子进程中返回 0，父进程中返回子进程 PID
        """
        return os.fork()

    def getpid(self) -> int:
        return os.getpid()

    def getsid(self) -> int:
        """获取当前进程的会话 ID"""
        return os.getsid(0)

    def setsid(self) -> None:
        """使当前进程成为新会话的首进程"""
        os.setsid()

    def kill(self, pid: int, signum: int) -> None:
        os.kill(pid, signum)

    def waitpid_nohang(self, pid: int) -> Tuple[int, int]:
        """
        非阻塞地查询子进程状态

        Args:
            pid: 子进程 ID

        Returns:
            (pid, status)，子进程仍在运行时 pid 为 0
        """
        return os.waitpid(pid, os.WNOHANG)

    def install_handler(
        self, signum: int, handler: Callable
    ) -> Optional[Callable]:
        """
        注册信号处理器

        Returns:
            原来的信号处理器
        """
        return signal.signal(signum, handler)

    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)

    def exit(self, code: int = 0) -> None:
        sys.exit(code)


def signal_name(signum: int) -> str:
    """返回信号名称，未知信号返回其编号"""
    try:
        return signal.Signals(signum).name
    except ValueError:
        return str(signum)
