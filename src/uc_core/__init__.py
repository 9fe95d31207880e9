"""
UC-Core v1.0.0
Universal Controller 遥控协议的异步客户端核心库。
"""

# 暴露核心配置
from .config import (
    UCConfig,
    create_config_from_dict,
    load_config_from_env,
    load_config_from_toml,
)

# 暴露客户端与事件
from .core import UCClient
from .events import EventCallback, UCEvent

# 暴露异常体系 (方便上层 try-except)
from .exceptions import (
    ConfigError,
    ErrorKind,
    InvalidValueError,
    NetworkError,
    ProtocolError,
    StateError,
    UCError,
)
from .network import TcpTransport, Transport
from .state import ClientStatus, UCSession

__version__ = "1.0.0"

__all__ = [
    "UCClient",
    "UCConfig",
    "UCSession",
    "ClientStatus",
    "UCEvent",
    "EventCallback",
    "Transport",
    "TcpTransport",
    "create_config_from_dict",
    "load_config_from_env",
    "load_config_from_toml",
    "UCError",
    "ErrorKind",
    "ConfigError",
    "NetworkError",
    "ProtocolError",
    "StateError",
    "InvalidValueError",
]
