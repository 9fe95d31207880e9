# File: src/uc_core/exceptions.py
"""
UC 核心库 - 异常体系 (Exceptions)

定义库内统一使用的异常类，以便上层应用（如 UI/游戏手柄界面）能进行精细的错误处理。
所有异常都携带一个 ErrorKind，调用方可以只根据枚举值分支，而不必区分异常类型。
"""

from enum import Enum, auto


class ErrorKind(Enum):
    """UC 客户端错误种类枚举。"""

    PLAYER_ALREADY_REGISTERED = auto()  # 本设备已注册玩家
    PLAYER_NOT_REGISTERED = auto()  # 玩家尚未注册
    NOT_CONNECTED = auto()  # 尚未连接服务器
    INVALID_JOYSTICK_VALUE = auto()  # 摇杆分量超出 (-1, 1)
    INVALID_GYRO_VALUE = auto()  # 陀螺仪分量超出 (-1, 1)
    PROTOCOL_VIOLATION = auto()  # 对端发送了无法解析的帧
    TRANSPORT_FAILURE = auto()  # 连接/发送/接收 I/O 错误
    CONFIG_INVALID = auto()  # 配置缺失或非法

    @property
    def description(self) -> str:
        """获取错误种类对应的人类可读中文描述。

        Returns:
            str: 对应的中文错误提示。
        """
        _DESC_MAP = {
            ErrorKind.PLAYER_ALREADY_REGISTERED: "本设备已有玩家注册到服务器",
            ErrorKind.PLAYER_NOT_REGISTERED: "玩家尚未注册到服务器",
            ErrorKind.NOT_CONNECTED: "尚未连接到服务器",
            ErrorKind.INVALID_JOYSTICK_VALUE: "摇杆数值必须位于开区间 (-1, 1)",
            ErrorKind.INVALID_GYRO_VALUE: "陀螺仪数值必须位于开区间 (-1, 1)",
            ErrorKind.PROTOCOL_VIOLATION: "服务器响应不符合协议",
            ErrorKind.TRANSPORT_FAILURE: "网络传输失败",
            ErrorKind.CONFIG_INVALID: "配置无效",
        }
        return _DESC_MAP[self]


class UCError(Exception):
    """UC 核心库的所有内部异常的基类。

    上层应用可以通过捕获此异常来处理所有由 uc-core 抛出的已知错误。
    """

    default_kind: ErrorKind | None = None

    def __init__(self, message: str = "", kind: ErrorKind | None = None) -> None:
        """初始化异常。

        Args:
            message: 错误描述信息。为空时使用 kind 的标准描述。
            kind: 错误种类。缺省时使用子类的 default_kind。
        """
        self.kind = kind if kind is not None else self.default_kind
        if not message and self.kind is not None:
            message = self.kind.description
        super().__init__(message)


class ConfigError(UCError):
    """配置加载或校验失败。

    触发场景:
    1. 缺少必要字段 (如 server_address/server_port)。
    2. 字段格式错误 (如端口越界、缓冲区大小非正数)。
    3. 找不到配置文件或环境变量。
    """

    default_kind = ErrorKind.CONFIG_INVALID


class NetworkError(UCError):
    """网络层面的错误 (I/O 级别)，即 TransportFailure。

    触发场景:
    1. 连接服务器失败。
    2. 发送 (write) 或 接收 (read) 失败。
    3. 对端关闭连接。

    注意: 本库不做自动重连，是否重试由上层决定。
    """

    default_kind = ErrorKind.TRANSPORT_FAILURE


class ProtocolError(UCError):
    """协议交互错误 (逻辑级别)，即 ProtocolViolation。

    触发场景:
    1. 收到无法识别的响应标签。
    2. PLAYER_ID 的编号不是整数。
    3. 单帧长度超过接收缓冲区。
    4. 帧内容不是 ASCII。

    该错误对会话是致命的：它意味着对端并不使用本协议。
    """

    default_kind = ErrorKind.PROTOCOL_VIOLATION


class StateError(UCError):
    """状态机错误 (FSM Violation)。

    触发场景:
    1. 已注册状态下重复调用 register。
    2. 未注册状态下调用 deregister / key_down / joystick / gyro。
    3. 未连接状态下发送命令。
    """


class InvalidValueError(UCError):
    """数值越界：摇杆或陀螺仪分量不在开区间 (-1, 1) 内。"""
