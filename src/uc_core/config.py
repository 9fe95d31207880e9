"""
UC 核心库 - 配置模块

负责配置的加载、解析与强类型转换。
支持从 TOML 文件、环境变量 (.env) 或字典中加载配置。
"""

import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_BUFFER_SIZE = 1024


@dataclass(frozen=True)
class UCConfig:
    """UCClient 的强类型配置对象。

    所有字段均为只读 (frozen=True)，确保配置在运行时不可变。

    Attributes:
        server_address: 服务器地址 (IP 或主机名)。
        server_port: 服务器端口。
        buffer_size: 单帧最大字节数。
        player_name: register() 未传入名字时使用的默认玩家名。
    """

    server_address: str
    server_port: int
    buffer_size: int = DEFAULT_BUFFER_SIZE
    player_name: str | None = None


def create_config_from_dict(raw_data: dict[str, Any]) -> UCConfig:
    """通用工厂：将字典转换为强类型配置对象。

    负责字段的清洗、默认值注入和类型转换。

    Args:
        raw_data: 原始配置字典 (来自 TOML 或 Env)。

    Returns:
        UCConfig: 验证并转换后的配置对象。

    Raises:
        ConfigError: 当必要字段缺失或格式错误时抛出。
    """

    def _req(key: str) -> Any:
        """获取必要字段，缺失则报错"""
        if key not in raw_data or raw_data[key] in (None, ""):
            raise ConfigError(f"配置缺失: 缺少必要字段 '{key}'")
        return raw_data[key]

    def _to_int(key: str, value: Any) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ConfigError(f"整数格式无效 '{key}': {value}") from None

    address = str(_req("server_address")).strip()

    port = _to_int("server_port", _req("server_port"))
    if not 0 < port < 65536:
        raise ConfigError(f"端口超出范围 (1-65535): {port}")

    buffer_size = _to_int("buffer_size", raw_data.get("buffer_size", DEFAULT_BUFFER_SIZE))
    if buffer_size <= 0:
        raise ConfigError(f"缓冲区大小必须为正数: {buffer_size}")

    player_name = raw_data.get("player_name")
    return UCConfig(
        server_address=address,
        server_port=port,
        buffer_size=buffer_size,
        player_name=str(player_name) if player_name else None,
    )


def load_config_from_toml(file_path: Path, profile: str = "default") -> UCConfig:
    """从 TOML 文件加载配置。

    支持多层级查找策略:
    1. [profile.xxx]: 优先查找指定的 profile 块。
    2. [uc]: 单一配置块。
    3. Root: 兼容根目录直接配置。

    Args:
        file_path: TOML 文件路径。
        profile: 配置预设名。默认为 "default"。

    Raises:
        ConfigError: 文件读取失败或 Profile 不存在。
    """
    if not file_path.exists():
        raise ConfigError(f"配置文件未找到: {file_path}")

    try:
        with open(file_path, "rb") as f:
            data = tomllib.load(f)
    except Exception as e:
        raise ConfigError(f"读取 TOML 失败: {e}") from e

    if "profile" in data:
        if profile not in data["profile"]:
            raise ConfigError(f"未找到预设: [profile.{profile}]")
        raw_config = data["profile"][profile]
    elif "uc" in data:
        if profile != "default":
            logger.warning(f"配置仅包含 [uc] 节，忽略 profile='{profile}'。")
        raw_config = data["uc"]
    else:
        raw_config = data

    return create_config_from_dict(raw_config)


def load_config_from_env(env_file: Path | None = None) -> UCConfig:
    """从环境变量加载配置。

    如果给出 env_file 且文件存在，先用 python-dotenv 将其载入环境变量。
    随后读取所有以 `UC_` 开头的相关变量，例如 `UC_SERVER_ADDRESS` -> `server_address`。

    Raises:
        ConfigError: 未检测到任何相关环境变量。
    """
    if env_file is not None:
        if env_file.exists():
            load_dotenv(dotenv_path=env_file, override=True)
            logger.debug(f"已加载配置文件: {env_file}")
        else:
            logger.warning(f"未找到 .env 文件: {env_file}")

    env_map = {
        "server_address": "SERVER_ADDRESS",
        "server_port": "SERVER_PORT",
        "buffer_size": "BUFFER_SIZE",
        "player_name": "PLAYER_NAME",
    }

    raw_data = {}
    for cfg_key, env_suffix in env_map.items():
        val = os.environ.get(f"UC_{env_suffix}")
        if val is not None:
            raw_data[cfg_key] = val

    if not raw_data:
        raise ConfigError("未检测到 UC_ 前缀的环境变量")

    return create_config_from_dict(raw_data)
