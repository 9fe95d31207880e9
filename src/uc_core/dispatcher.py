"""
UC 回调分发器 (Callback Dispatcher)

职责：
1. 将已解码的服务器响应映射为唯一一个 UCEvent。
2. 在接收任务上同步调用监听器 (异步监听器会被 await)。
3. 维护 PLAYER_ID 响应带来的会话状态变更。
"""

import inspect
import logging

from .events import EventCallback, UCEvent
from .exceptions import ProtocolError
from .protocols.replies import Reply, ReplyKind
from .state import ClientStatus, UCSession

logger = logging.getLogger(__name__)

# 响应 -> 事件 映射表 (PLAYER_ID 单独处理)
_REPLY_EVENTS = {
    ReplyKind.PLAYER_NOT_FOUND: (UCEvent.PLAYER_NOT_FOUND, "服务器找不到该玩家"),
    ReplyKind.SERVER_SHUTDOWN: (UCEvent.SERVER_DISCONNECTED, "服务器已关闭"),
    ReplyKind.SERVER_FULL: (UCEvent.SERVER_FULL, "服务器已满"),
    ReplyKind.INVALID_COMMAND: (UCEvent.INVALID_COMMAND, "服务器拒绝了无效命令"),
}


class CallbackDispatcher:
    """把服务器响应分发给已注册的监听器。"""

    def __init__(self, state: UCSession) -> None:
        """初始化分发器。

        Args:
            state: 共享会话对象。分发器只写入 player_id 与 status。
        """
        self.state = state
        self._listeners: list[EventCallback] = []

    def add_listener(self, callback: EventCallback) -> None:
        """注册事件监听器。"""
        if callback not in self._listeners:
            self._listeners.append(callback)

    def remove_listener(self, callback: EventCallback) -> None:
        """移除事件监听器。"""
        if callback in self._listeners:
            self._listeners.remove(callback)

    async def dispatch(self, reply: Reply) -> bool:
        """处理一条响应，最多触发一个事件。

        Args:
            reply: 已解码的响应。

        Returns:
            bool: 会话是否必须随之结束 (仅 SERVER_FULL 为 True)。

        Raises:
            ProtocolError: 响应无法识别 (UNKNOWN)。
        """
        if reply.kind is ReplyKind.UNKNOWN:
            raise ProtocolError(f"无法识别的服务器响应: {reply.raw!r}")

        if reply.kind is ReplyKind.PLAYER_ID:
            self.state.player_id = reply.player_id
            self.state.status = ClientStatus.REGISTERED
            logger.info(f"[{ClientStatus.REGISTERED.name}] 玩家编号: {reply.player_id}")
            await self.emit(UCEvent.PLAYER_REGISTERED, f"玩家已注册 (ID: {reply.player_id})")
            return False

        event, msg = _REPLY_EVENTS[reply.kind]
        await self.emit(event, msg)
        return reply.kind is ReplyKind.SERVER_FULL

    async def emit(self, event: UCEvent, msg: str) -> None:
        """依次调用所有监听器。

        监听器在接收任务上执行，会阻塞下一帧的读取，必须尽快返回。
        """
        logger.debug(f"事件: {event.name} | {msg}")
        for callback in list(self._listeners):
            try:
                result = callback(event, msg)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.error(f"回调执行异常: {e}")
