"""
proctree - 进程树控制器

职责：
- fork 子进程并跟踪父子关系和深度
- 处理终止 / 控制信号并向子进程级联
- 守护进程化
- 生命周期事件回调

架构：
- state.py: 进程状态
- events.py: 事件回调中心
- fork.py: fork 协调器
- terminator.py: 子进程终止器
- signal_handler.py: 信号分发器
- daemon.py: 守护进程化
- waiter.py: 子进程等待器
- process/: 操作系统进程原语
"""

__version__ = "1.0.0"

from core.enums import LifecycleEvent
from .controller import ProcessController, get_controller, set_controller
from .fork import FORK_FAILED

__all__ = [
    "FORK_FAILED",
    "LifecycleEvent",
    "ProcessController",
    "get_controller",
    "set_controller",
]
