# src/uc_core/protocols/constants.py
"""
UC 协议常量表 (Constants)

仅定义协议的结构性常量（分隔符、结束符、命令与响应标签）。
"""

# =========================================================================
# 帧结构 (Framing)
# =========================================================================
SEPARATOR = ":"  # 帧内字段分隔符
TERMINATOR = "<EOC>"  # 帧结束符 (End Of Command)
TERMINATOR_BYTES = TERMINATOR.encode("ascii")
ENCODING = "ascii"


# =========================================================================
# 命令标签 (Client -> Server)
# =========================================================================
class Command:
    REGISTER = "REGISTER"
    DEREGISTER = "DEREGISTER"
    KEY_DOWN = "KEY_DOWN"
    JOYSTICK = "JOYSTICK"
    GYRO = "GYRO"


# =========================================================================
# 响应标签 (Server -> Client)
# =========================================================================
class Reply:
    PLAYER_ID = "PLAYER_ID"
    PLAYER_NOT_FOUND = "PLAYER_NOT_FOUND"
    SERVER_SHUTDOWN = "SERVER_SHUTDOWN"
    SERVER_FULL = "SERVER_FULL"
    INVALID_COMMAND = "INVALID_COMMAND"


# 摇杆/陀螺仪分量的开区间边界
AXIS_MIN = -1.0
AXIS_MAX = 1.0
