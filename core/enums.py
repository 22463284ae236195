"""
进程树控制器的枚举类型定义
"""

from enum import Enum


class LifecycleEvent(str, Enum):
    """生命周期事件枚举"""

    FORK = "fork"  # 每次 fork 之后（无论结果）
    FORK_CHILD = "fork_child"  # 当前进程成为子进程
    FORK_PARENT = "fork_parent"  # 当前进程成功创建子进程
    FORK_ERROR = "fork_error"  # fork 失败
    FORK_ROOT = "fork_root"  # 根进程成功创建子进程
    DAEMONIZE = "daemonize"  # 守护进程化完成
    STOP_CHILDREN = "stop_children"  # 开始向子进程发送信号
    KILL = "kill"  # 收到 SIGTERM
    KILLED_CHILD = "killed_child"  # 成功向某个子进程发送信号


class ProcessRole(str, Enum):
    """进程角色枚举"""

    PARENT = "parent"
    CHILD = "child"


class SignalClass(str, Enum):
    """信号分类枚举"""

    USER = "user"  # SIGUSR1 / SIGUSR2，保留扩展点
    RESUME = "resume"  # SIGCONT
    TERMINATE = "terminate"  # SIGINT / SIGTERM
    RELOAD = "reload"  # SIGHUP
    OTHER = "other"  # 其他信号，忽略


class TermCountReset(str, Enum):
    """终止计数重置策略枚举"""

    PER_SIGNAL = "per_signal"  # 每次分发信号前都重置
    QUIET_PERIOD = "quiet_period"  # 仅在静默期之后重置
