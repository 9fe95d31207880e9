"""
UC 核心库 - 事件模块

监听器只会收到一种带标签的事件类型 (UCEvent)，
取代旧版客户端中重复定义的五方法回调接口。
"""

from collections.abc import Awaitable, Callable
from enum import Enum, auto
from typing import Any


class UCEvent(Enum):
    """推送给监听器的会话事件。"""

    PLAYER_REGISTERED = auto()
    """服务器已分配玩家编号。"""

    PLAYER_NOT_FOUND = auto()
    """服务器找不到该玩家。"""

    SERVER_DISCONNECTED = auto()
    """服务器关闭，或连接意外断开。"""

    SERVER_FULL = auto()
    """服务器已满，会话随后被拆除。"""

    INVALID_COMMAND = auto()
    """服务器拒绝了上一条命令。"""


# 定义回调函数类型别名：支持同步或异步函数
EventCallback = Callable[[UCEvent, str], Any | Awaitable[Any]]
