"""
Process State - 进程状态

记录当前进程在进程树中的身份、角色和位置
"""

from dataclasses import dataclass, field
from typing import List, Optional

from core.enums import ProcessRole


@dataclass
class ProcessState:
    """
    进程状态

    每个操作系统进程持有一份。fork 之后父子进程各自拥有独立的副本，
    无需任何跨进程同步。

    包括：
    - 身份信息（pid、会话 ID、父进程 ID）
    - 树中位置（深度、直接子进程列表）
    - 停止与等待标志
    - 错误处理开关
    """

    pid: Optional[int] = None
    session_id: Optional[int] = None
    parent_pid: Optional[int] = None
    depth: int = 0
    is_parent: bool = True
    is_child: bool = False
    children: List[int] = field(default_factory=list)
    fork_result: Optional[int] = None
    term_count: int = 0
    last_term_time: Optional[float] = None
    stop_requested: bool = False
    stop_time: Optional[float] = None
    waiting_for_signals: bool = False
    throw_on_error: bool = False

    @property
    def role(self) -> ProcessRole:
        """
        当前进程的角色

        fork 得到的子进程在自己再次 fork 之前为 CHILD，其余情况为 PARENT
        """
        return ProcessRole.PARENT if self.is_parent else ProcessRole.CHILD

    @property
    def is_root(self) -> bool:
        return self.is_parent and not self.is_child

    @property
    def child_count(self) -> int:
        return len(self.children)

    def become_child(self, new_pid: Optional[int]) -> None:
        """
        切换为 fork 的子进程一侧

        Args:
            new_pid: 子进程自己的 PID
        """
        self.is_parent = False
        self.is_child = True
        self.parent_pid = self.pid
        self.pid = new_pid
        self.depth += 1
        self.children = []

    def add_child(self, pid: int) -> None:
        """
        切换为 fork 的父进程一侧并记录新子进程

        Args:
            pid: 新子进程的 PID
        """
        self.is_parent = True
        self.children.append(pid)
