"""
UC 核心库 - 状态模块

负责定义和存储所有易变的会话状态。
本模块不包含业务逻辑，仅作为数据容器供 Core、接收循环和 Dispatcher 共享读写。
"""

from dataclasses import dataclass
from enum import Enum, auto

UNREGISTERED_PLAYER_ID = -1


class ClientStatus(Enum):
    """客户端连接的生命周期状态枚举。

    状态流转示意:
    DISCONNECTED -> CONNECTING -> CONNECTED -> REGISTERED
                        |             |            |
                        v             v            v
                  DISCONNECTED   DISCONNECTING  DISCONNECTING -> DISCONNECTED
    """

    DISCONNECTED = auto()
    """初始状态，或会话已被拆除。"""

    CONNECTING = auto()
    """正在建立传输层连接。"""

    CONNECTED = auto()
    """已连接，但尚未获得玩家编号。"""

    REGISTERED = auto()
    """已连接，且服务器已分配玩家编号。"""

    DISCONNECTING = auto()
    """正在拆除会话 (瞬态)。"""


@dataclass
class UCSession:
    """存储一次客户端-服务器连接的易变状态数据。

    该对象是非持久化的。每次 connect() 都会新建，disconnect() 时重置。

    Attributes:
        remote_address: 服务器地址。
        remote_port: 服务器端口。
        buffer_size: 单帧最大字节数。
        running: 会话是否处于运行中。
        player_name: 注册时使用的玩家名。
        player_id: 服务器分配的玩家编号，-1 表示未注册。
        status: 当前连接状态。
        last_error: 最近一次发生的错误信息描述，用于 UI 显示。
    """

    remote_address: str = ""
    remote_port: int = 0
    buffer_size: int = 1024

    running: bool = False
    player_name: str | None = None
    player_id: int = UNREGISTERED_PLAYER_ID

    status: ClientStatus = ClientStatus.DISCONNECTED
    last_error: str = ""

    @property
    def is_registered(self) -> bool:
        """判断服务器是否已为本设备分配玩家编号。"""
        return self.player_id != UNREGISTERED_PLAYER_ID

    @property
    def is_connected(self) -> bool:
        return self.status in (ClientStatus.CONNECTED, ClientStatus.REGISTERED)
