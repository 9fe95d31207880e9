# File: src/uc_core/core.py
"""
UC 核心客户端 (Core Client)

职责：
1. 资源组装：Session + Transport + Dispatcher + Config。
2. 状态机：Disconnected -> Connecting -> Connected -> Registered -> Disconnecting。
3. 生命周期：Connect -> Receive Loop -> Disconnect。
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import replace

from .config import UCConfig
from .dispatcher import CallbackDispatcher
from .events import EventCallback, UCEvent
from .exceptions import (
    ErrorKind,
    InvalidValueError,
    NetworkError,
    ProtocolError,
    StateError,
)
from .network import TcpTransport, Transport
from .protocols import constants
from .protocols.commands import (
    Deregister,
    Gyro,
    Joystick,
    KeyDown,
    Register,
    UCCommand,
    encode_command,
)
from .protocols.replies import ReplyKind, parse_reply
from .state import UNREGISTERED_PLAYER_ID, ClientStatus, UCSession

logger = logging.getLogger(__name__)

TransportFactory = Callable[[str, int, int], Transport]


class UCClient:
    """Universal Controller 客户端 (Async)。

    每个实例对应一条到服务器的会话，由调用方显式构造并持有。
    """

    def __init__(
        self,
        config: UCConfig,
        listener: EventCallback | None = None,
        transport_factory: TransportFactory | None = None,
    ) -> None:
        """初始化客户端。

        Args:
            config: 全局配置对象。
            listener: 初始事件监听器，也可稍后通过 add_listener 注册。
            transport_factory: 以 (address, port, buffer_size) 构造传输层的工厂，
                默认为 TcpTransport。
        """
        self.config = config
        self._transport_factory = transport_factory or TcpTransport
        self._transport: Transport | None = None

        self._state = UCSession(
            remote_address=config.server_address,
            remote_port=config.server_port,
            buffer_size=config.buffer_size,
        )
        self.dispatcher = CallbackDispatcher(self._state)
        if listener:
            self.add_listener(listener)

        self._stop_event = asyncio.Event()
        self._closed = asyncio.Event()
        self._closed.set()
        self._receive_task: asyncio.Task | None = None

        self._disconnecting = False
        self._connect_seq = 0
        self._connection_lost_handled = False
        self._shutdown_announced = False
        self._failure: ProtocolError | None = None

    @property
    def session(self) -> UCSession:
        """获取当前会话状态的只读副本。

        返回的是一个副本 (Copy)，修改它不会影响客户端内部状态。
        """
        return replace(self._state)

    @property
    def status(self) -> ClientStatus:
        return self._state.status

    @property
    def is_running(self) -> bool:
        return self._state.running

    @property
    def player_id(self) -> int:
        return self._state.player_id

    def add_listener(self, callback: EventCallback) -> None:
        """注册事件监听器。"""
        self.dispatcher.add_listener(callback)

    def remove_listener(self, callback: EventCallback) -> None:
        """移除事件监听器。"""
        self.dispatcher.remove_listener(callback)

    # =========================================================================
    # 连接管理
    # =========================================================================

    async def connect(self, address: str | None = None, port: int | None = None) -> None:
        """连接服务器并启动后台接收任务。

        已处于运行状态时直接返回。

        Args:
            address: 服务器地址，缺省使用配置中的 server_address。
            port: 服务器端口，缺省使用配置中的 server_port。

        Raises:
            NetworkError: 传输层连接失败，或连接期间已调用 disconnect()，
                会话已回滚为未运行。
            asyncio.CancelledError: 连接被取消，传输层已关闭。
        """
        if self._state.running:
            logger.warning("当前已连接，跳过连接")
            return

        address = address or self.config.server_address
        port = port or self.config.server_port

        self._connect_seq += 1
        seq = self._connect_seq
        self._reset_session(address, port, clear_error=True)
        self._state.running = True
        self._stop_event.clear()
        self._closed.clear()
        self._connection_lost_handled = False
        self._shutdown_announced = False
        self._failure = None
        self._set_status(ClientStatus.CONNECTING, f"正在连接 {address}:{port}...")

        transport = self._transport_factory(address, port, self._state.buffer_size)
        try:
            await transport.connect()
        except asyncio.CancelledError:
            await self._abort_connect(transport, seq, "连接已取消")
            raise
        except Exception as e:
            self._state.last_error = str(e)
            await self._abort_connect(transport, seq, f"连接失败: {e}")
            if isinstance(e, NetworkError):
                raise
            raise NetworkError(f"连接失败: {e}") from e

        # 等待连接期间调用方已经 disconnect() (或又发起了新的连接)
        stale = seq != self._connect_seq or self._stop_event.is_set()
        if stale or not self._state.running:
            await self._abort_connect(transport, seq, "连接过程中已请求断开")
            raise NetworkError("连接过程中已请求断开")

        self._transport = transport
        self._set_status(ClientStatus.CONNECTED, "连接成功")

        started_event = asyncio.Event()
        self._receive_task = asyncio.create_task(
            self._receive_loop(started_event), name="UCReceiveTask"
        )
        await started_event.wait()

    async def disconnect(self) -> None:
        """断开连接并重置会话。

        任意状态下均可调用，可重复调用；可以在调用方、监听器或接收任务内部调用。
        """
        if self._disconnecting:
            return
        if not self._state.running and self._transport is None:
            return

        self._disconnecting = True
        try:
            self._state.running = False
            self._set_status(ClientStatus.DISCONNECTING, "正在断开连接...")
            self._stop_event.set()

            task = self._receive_task
            if task and task is not asyncio.current_task() and not task.done():
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    pass

            transport, self._transport = self._transport, None
            if transport:
                try:
                    await transport.close()
                except NetworkError as e:
                    logger.warning(f"关闭连接异常: {e}")

            self._reset_session()
            self._set_status(ClientStatus.DISCONNECTED, "已断开连接")
        finally:
            self._disconnecting = False
            self._closed.set()

    async def wait_closed(self) -> None:
        """等待会话被拆除。

        Raises:
            ProtocolError: 会话因协议错误而终止。
        """
        await self._closed.wait()
        task = self._receive_task
        if task is not None and task is not asyncio.current_task():
            await asyncio.wait({task})
        if self._failure is not None:
            raise self._failure

    # =========================================================================
    # 玩家命令
    # =========================================================================

    async def register(self, name: str | None = None) -> None:
        """向服务器注册玩家。

        玩家编号由服务器异步下发 (PLAYER_ID)，届时会触发 PLAYER_REGISTERED 事件。

        Args:
            name: 玩家名，缺省使用配置中的 player_name。

        Raises:
            StateError: 已注册 (PLAYER_ALREADY_REGISTERED) 或未连接 (NOT_CONNECTED)。
            InvalidValueError: 没有可用的玩家名。
            NetworkError: 发送失败。
        """
        if self._state.is_registered:
            raise StateError(kind=ErrorKind.PLAYER_ALREADY_REGISTERED)
        self._ensure_connected()

        if name is None:
            name = self.config.player_name
        if not name:
            raise InvalidValueError("玩家名不能为空")

        self._state.player_name = name
        await self._send(Register(name))

    async def deregister(self) -> None:
        """注销当前玩家。发送成功后本地恢复为未注册状态。

        Raises:
            StateError: 玩家尚未注册。
            NetworkError: 发送失败。
        """
        player_id = self._require_player()
        await self._send(Deregister(player_id))
        self._state.player_id = UNREGISTERED_PLAYER_ID
        self._set_status(ClientStatus.CONNECTED, f"玩家已注销 (ID: {player_id})")

    async def key_down(self, key: str, extra: str | None = None) -> None:
        """发送一次按键事件。

        Args:
            key: 按键标识。
            extra: 可选的附加按键数据。
        """
        player_id = self._require_player()
        await self._send(KeyDown(player_id, key, extra))

    async def joystick(self, x: float, y: float) -> None:
        """发送摇杆向量，各分量必须位于开区间 (-1, 1)。

        Raises:
            StateError: 玩家尚未注册。
            InvalidValueError: 分量越界 (INVALID_JOYSTICK_VALUE)。
        """
        player_id = self._require_player()
        await self._send(Joystick(player_id, x, y))

    async def gyro(self, x: float, y: float, z: float) -> None:
        """发送陀螺仪向量，各分量必须位于开区间 (-1, 1)。

        Raises:
            StateError: 玩家尚未注册。
            InvalidValueError: 分量越界 (INVALID_GYRO_VALUE)。
        """
        player_id = self._require_player()
        await self._send(Gyro(player_id, x, y, z))

    # =========================================================================
    # 内部实现
    # =========================================================================

    def _ensure_connected(self) -> None:
        if not self._state.is_connected or self._transport is None:
            raise StateError(kind=ErrorKind.NOT_CONNECTED)

    def _require_player(self) -> int:
        if not self._state.is_registered:
            raise StateError(kind=ErrorKind.PLAYER_NOT_REGISTERED)
        self._ensure_connected()
        return self._state.player_id

    async def _send(self, command: UCCommand) -> None:
        """编码并同步写出一帧。发送失败时拆除会话，不做重试。"""
        frame = encode_command(command)
        transport = self._transport
        assert transport is not None

        try:
            await transport.write(frame)
        except NetworkError as e:
            logger.error(f"发送失败: {e}")
            await self._connection_lost(e)
            raise

    async def _receive_loop(self, started_event: asyncio.Event | None = None) -> None:
        """[Internal] 后台接收循环：读一帧、解码、分发，然后再读下一帧。"""
        if started_event:
            started_event.set()

        try:
            while self._state.running and not self._stop_event.is_set():
                transport = self._transport
                if transport is None:
                    break

                try:
                    data = await transport.read_frame(
                        self._state.buffer_size, constants.TERMINATOR_BYTES
                    )
                    if self._stop_event.is_set():
                        break
                    reply = parse_reply(data)
                    session_over = await self.dispatcher.dispatch(reply)
                except NetworkError as e:
                    if self._stop_event.is_set():
                        break
                    logger.warning(f"接收失败，连接已断开: {e}")
                    await self._connection_lost(e)
                    break
                except ProtocolError as e:
                    logger.error(f"协议错误，终止会话: {e}")
                    await self._connection_lost(e)
                    break

                if reply.kind is ReplyKind.SERVER_SHUTDOWN:
                    self._shutdown_announced = True
                if session_over:
                    await self.disconnect()
                    break

        except asyncio.CancelledError:
            logger.debug("接收任务被取消")
            raise

    async def _abort_connect(self, transport: Transport, seq: int, msg: str) -> None:
        """[Internal] 放弃一次未完成的连接：关闭传输层，并在它仍是当前连接时回滚会话。"""
        try:
            await transport.close()
        except NetworkError as e:
            logger.warning(f"关闭连接异常: {e}")

        if seq != self._connect_seq:
            return
        self._state.running = False
        self._set_status(ClientStatus.DISCONNECTED, msg)
        self._closed.set()

    async def _connection_lost(self, exc: NetworkError | ProtocolError) -> None:
        """[Internal] 会话异常终止：只拆除一次，只通知一次。"""
        if self._connection_lost_handled:
            return
        self._connection_lost_handled = True

        self._state.last_error = str(exc)
        if isinstance(exc, ProtocolError):
            self._failure = exc

        await self.disconnect()

        # 服务器已经通过 SERVER_SHUTDOWN 告知过断开，不再重复通知
        if not self._shutdown_announced:
            await self.dispatcher.emit(UCEvent.SERVER_DISCONNECTED, f"连接已断开: {exc}")

    def _reset_session(
        self,
        address: str | None = None,
        port: int | None = None,
        clear_error: bool = False,
    ) -> None:
        """重置本地会话状态 (原地修改，Dispatcher 持有同一对象)。"""
        if address is not None:
            self._state.remote_address = address
        if port is not None:
            self._state.remote_port = port
        self._state.buffer_size = self.config.buffer_size
        self._state.running = False
        self._state.player_name = None
        self._state.player_id = UNREGISTERED_PLAYER_ID
        if clear_error:
            self._state.last_error = ""

    def _set_status(self, status: ClientStatus, msg: str) -> None:
        """更新内部状态并记录日志。"""
        self._state.status = status
        logger.info(f"[{status.name}] {msg}")

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.disconnect()
