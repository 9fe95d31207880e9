# src/uc_core/protocols/__init__.py
"""
UC 协议层 (Protocol Layer)

本包负责协议帧的纯粹构建 (Encode) 与解析 (Decode)。

- 不包含任何 socket 操作或网络 I/O。
- 不包含任何状态管理 (State)。
- 不依赖于 core 或 network 层。
"""

from . import constants
from .commands import (
    Deregister,
    Gyro,
    Joystick,
    KeyDown,
    Register,
    UCCommand,
    encode_command,
)
from .replies import Reply, ReplyKind, parse_reply

# 公共 API
__all__ = [
    "constants",
    "UCCommand",
    "Register",
    "Deregister",
    "KeyDown",
    "Joystick",
    "Gyro",
    "encode_command",
    "Reply",
    "ReplyKind",
    "parse_reply",
]
