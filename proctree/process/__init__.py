"""
Process Module - 进程原语模块

职责：
- 封装 fork / kill / waitpid / setsid 等系统调用
- 便于在测试中注入假实现
"""

from .ops import ProcessOps, signal_name

__all__ = [
    "ProcessOps",
    "signal_name",
]
