"""
Event Hub - 生命周期事件回调

每个事件最多绑定一个回调，后注册的覆盖先注册的
"""

import warnings
from typing import Any, Callable, Dict, Optional, Union

from loguru import logger

from core.enums import LifecycleEvent
from proctree.identity import IdentityResolver

EventCallback = Callable[[Optional[int]], Any]


def run_best_effort(callback: Any, pid: Optional[int]) -> None:
    """
    尽力调用回调

    回调抛出的异常和产生的警告都会被吞掉，不影响调用方

    Args:
        callback: 回调对象（不可调用时直接忽略）
        pid: 传给回调的当前进程 PID
    """
    if not callable(callback):
        return

    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        try:
            callback(pid)
        except Exception as e:
            logger.debug(f"Callback {callback!r} raised {e!r}, ignored")


class EventHub:
    """
    生命周期事件中心

    使用示例:
        hub.register_callback(LifecycleEvent.FORK_CHILD, on_child)
        hub.register_callback("fork_child", None)  # 清除绑定
    """

    def __init__(self, identity: IdentityResolver):
        self.identity = identity
        self._callbacks: Dict[LifecycleEvent, Optional[EventCallback]] = {}

    def register_callback(
        self,
        event: Union[LifecycleEvent, str],
        callback: Optional[EventCallback] = None,
    ) -> None:
        """
        绑定事件回调

        Args:
            event: 事件枚举或其字符串值
            callback: 回调函数；不可调用的值会清除绑定
        """
        event = LifecycleEvent(event)
        self._callbacks[event] = callback if callable(callback) else None
        logger.debug(
            f"Callback for '{event.value}' "
            f"{'registered' if self._callbacks[event] else 'cleared'}"
        )

    def get_callback(
        self, event: Union[LifecycleEvent, str]
    ) -> Optional[EventCallback]:
        return self._callbacks.get(LifecycleEvent(event))

    def fire(self, event: LifecycleEvent) -> None:
        """
        触发事件

        Args:
            event: 事件枚举
        """
        callback = self._callbacks.get(event)
        if callback is None:
            return
        logger.debug(f"Firing '{event.value}'")
        run_best_effort(callback, self.identity.get_pid())
