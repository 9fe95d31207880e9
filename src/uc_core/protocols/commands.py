# File: src/uc_core/protocols/commands.py
"""
UC 协议命令构建器 (Command Builders)

负责将客户端命令转换为符合协议规范的文本帧 (bytes)。
本模块是无状态的 (Stateless)，不持有任何配置或会话信息。

帧格式:
    REGISTER:<name><EOC>
    DEREGISTER:<playerId><EOC>
    <playerId>:KEY_DOWN:<key>[:<extra>]<EOC>
    <playerId>:JOYSTICK:<x>:<y><EOC>
    <playerId>:GYRO:<x>:<y>:<z><EOC>
"""

import logging
import math
from dataclasses import dataclass

from ..exceptions import ErrorKind, InvalidValueError
from . import constants

logger = logging.getLogger(__name__)


def sanitize_field(text: str) -> str:
    """清洗调用方文本字段。

    先丢弃非 ASCII 字符，再移除所有分隔符，保证解码端按分隔符切分时不会产生歧义；
    最后反复移除结束符，直到文本中不再含有 <EOC>，防止一条命令被拆成多帧。
    """
    text = text.encode(constants.ENCODING, "ignore").decode(constants.ENCODING)
    text = text.replace(constants.SEPARATOR, "")
    while constants.TERMINATOR in text:
        text = text.replace(constants.TERMINATOR, "")
    return text


def check_axes(kind: ErrorKind, *values: float) -> None:
    """校验所有分量均位于开区间 (-1, 1)。

    Args:
        kind: 越界时使用的错误种类 (摇杆或陀螺仪)。
        values: 待校验的分量。

    Raises:
        InvalidValueError: 任一分量等于或超出 ±1.0，或不是有限数值。
    """
    for value in values:
        try:
            v = float(value)
        except (TypeError, ValueError):
            raise InvalidValueError(f"{kind.description}: {value!r}", kind) from None
        if math.isnan(v) or not (constants.AXIS_MIN < v < constants.AXIS_MAX):
            raise InvalidValueError(f"{kind.description}: {value!r}", kind)


# =========================================================================
# 命令类型 (Tagged Variants)
# =========================================================================


@dataclass(frozen=True)
class Register:
    name: str


@dataclass(frozen=True)
class Deregister:
    player_id: int


@dataclass(frozen=True)
class KeyDown:
    player_id: int
    key: str
    extra: str | None = None


@dataclass(frozen=True)
class Joystick:
    """摇杆向量，构造时即校验分量范围。"""

    player_id: int
    x: float
    y: float

    def __post_init__(self) -> None:
        check_axes(ErrorKind.INVALID_JOYSTICK_VALUE, self.x, self.y)


@dataclass(frozen=True)
class Gyro:
    """陀螺仪向量，构造时即校验分量范围。"""

    player_id: int
    x: float
    y: float
    z: float

    def __post_init__(self) -> None:
        check_axes(ErrorKind.INVALID_GYRO_VALUE, self.x, self.y, self.z)


UCCommand = Register | Deregister | KeyDown | Joystick | Gyro


# =========================================================================
# 编码 (Encode)
# =========================================================================


def _join(*fields: object) -> str:
    return constants.SEPARATOR.join(str(f) for f in fields)


def _frame(body: str) -> bytes:
    # 非 ASCII 字符直接丢弃，与主机名等非关键字段的处理方式一致
    return (body + constants.TERMINATOR).encode(constants.ENCODING, "ignore")


def build_register(name: str) -> bytes:
    return _frame(_join(constants.Command.REGISTER, sanitize_field(name)))


def build_deregister(player_id: int) -> bytes:
    return _frame(_join(constants.Command.DEREGISTER, player_id))


def build_key_down(player_id: int, key: str, extra: str | None = None) -> bytes:
    fields: list[object] = [player_id, constants.Command.KEY_DOWN, sanitize_field(key)]
    if extra is not None:
        fields.append(sanitize_field(extra))
    return _frame(_join(*fields))


def build_joystick(player_id: int, x: float, y: float) -> bytes:
    return _frame(_join(player_id, constants.Command.JOYSTICK, float(x), float(y)))


def build_gyro(player_id: int, x: float, y: float, z: float) -> bytes:
    return _frame(
        _join(player_id, constants.Command.GYRO, float(x), float(y), float(z))
    )


def encode_command(command: UCCommand) -> bytes:
    """将命令对象编码为一帧完整的协议数据。

    Args:
        command: Register / Deregister / KeyDown / Joystick / Gyro 之一。

    Returns:
        bytes: 以 <EOC> 结尾的 ASCII 帧。

    Raises:
        TypeError: 传入了未知的命令类型。
    """
    if isinstance(command, Register):
        frame = build_register(command.name)
    elif isinstance(command, Deregister):
        frame = build_deregister(command.player_id)
    elif isinstance(command, KeyDown):
        frame = build_key_down(command.player_id, command.key, command.extra)
    elif isinstance(command, Joystick):
        frame = build_joystick(command.player_id, command.x, command.y)
    elif isinstance(command, Gyro):
        frame = build_gyro(command.player_id, command.x, command.y, command.z)
    else:
        raise TypeError(f"未知的命令类型: {type(command).__name__}")

    logger.debug("encode_command: %r", frame)
    return frame
