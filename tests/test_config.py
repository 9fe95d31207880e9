# tests/test_config.py
from pathlib import Path

import pytest

from uc_core import ConfigError
from uc_core.config import (
    DEFAULT_BUFFER_SIZE,
    create_config_from_dict,
    load_config_from_env,
    load_config_from_toml,
)
from uc_core.exceptions import ErrorKind

ENV_KEYS = ["UC_SERVER_ADDRESS", "UC_SERVER_PORT", "UC_BUFFER_SIZE", "UC_PLAYER_NAME"]


# --- 辅助函数：生成有效字典 ---
def _get_valid_raw_dict():
    return {
        "server_address": "10.0.0.2",
        "server_port": 9000,
        "buffer_size": 512,
        "player_name": "Alice",
    }


@pytest.fixture
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


# --- Factory 测试 ---


def test_valid_dict():
    config = create_config_from_dict(_get_valid_raw_dict())

    assert config.server_address == "10.0.0.2"
    assert config.server_port == 9000
    assert config.buffer_size == 512
    assert config.player_name == "Alice"


def test_default_values():
    config = create_config_from_dict({"server_address": "h", "server_port": "9000"})

    assert config.server_port == 9000
    assert config.buffer_size == DEFAULT_BUFFER_SIZE
    assert config.player_name is None


def test_missing_field():
    with pytest.raises(ConfigError, match="配置缺失") as exc:
        create_config_from_dict({"server_address": "h"})
    assert exc.value.kind is ErrorKind.CONFIG_INVALID


@pytest.mark.parametrize("port", [0, 70000, "abc"])
def test_invalid_port(port):
    raw_data = _get_valid_raw_dict()
    raw_data["server_port"] = port
    with pytest.raises(ConfigError):
        create_config_from_dict(raw_data)


def test_invalid_buffer_size():
    raw_data = _get_valid_raw_dict()
    raw_data["buffer_size"] = 0
    with pytest.raises(ConfigError, match="缓冲区"):
        create_config_from_dict(raw_data)


# --- Loader 测试 (I/O) ---


def test_load_toml_section(tmp_path):
    f = tmp_path / "config.toml"
    f.write_text(
        """
        [uc]
        server_address = "toml_host"
        server_port = 9100
        """,
        encoding="utf-8",
    )

    config = load_config_from_toml(f)
    assert config.server_address == "toml_host"
    assert config.server_port == 9100


def test_load_toml_profile(tmp_path):
    f = tmp_path / "config.toml"
    f.write_text(
        """
        [profile.default]
        server_address = "a"
        server_port = 1

        [profile.lab]
        server_address = "b"
        server_port = 2
        player_name = "Bob"
        """,
        encoding="utf-8",
    )

    config = load_config_from_toml(f, profile="lab")
    assert config.server_address == "b"
    assert config.player_name == "Bob"

    with pytest.raises(ConfigError, match="未找到预设"):
        load_config_from_toml(f, profile="missing")


def test_load_toml_not_found():
    with pytest.raises(ConfigError, match="配置文件未找到"):
        load_config_from_toml(Path("non_existent.toml"))


def test_load_env(clean_env):
    clean_env.setenv("UC_SERVER_ADDRESS", "env_host")
    clean_env.setenv("UC_SERVER_PORT", "9200")
    clean_env.setenv("UC_PLAYER_NAME", "Carol")

    config = load_config_from_env()
    assert config.server_address == "env_host"
    assert config.server_port == 9200
    assert config.player_name == "Carol"


def test_load_env_file(clean_env, tmp_path):
    # 先登记这些变量，便于测试结束后由 monkeypatch 还原
    for key in ENV_KEYS:
        clean_env.setenv(key, "")
        clean_env.delenv(key)

    env_file = tmp_path / ".env"
    env_file.write_text("UC_SERVER_ADDRESS=dotenv_host\nUC_SERVER_PORT=9300\n", encoding="utf-8")

    config = load_config_from_env(env_file)
    assert config.server_address == "dotenv_host"
    assert config.server_port == 9300


def test_load_env_empty(clean_env):
    with pytest.raises(ConfigError, match="UC_"):
        load_config_from_env()
