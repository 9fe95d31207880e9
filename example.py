# example.py
"""
这是一个 UCClient API 的最小示例。

它演示了如何将 uc-core 作为一个库导入到你自己的项目中：
连接服务器 -> 注册玩家 -> 发送几次输入 -> 断开连接。

运行此示例：
1. 在根目录创建 .env 文件，至少包含 UC_SERVER_ADDRESS 与 UC_SERVER_PORT。
2. 安装依赖： pip install -e .
3. 从项目根目录运行： python example.py
"""

import asyncio
import logging
from pathlib import Path

from uc_core import UCClient, UCError, UCEvent, load_config_from_env

logging.basicConfig(
    level=logging.DEBUG, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("UCExample")


async def main() -> None:
    config = load_config_from_env(Path.cwd() / ".env")
    registered = asyncio.Event()

    def on_event(event: UCEvent, msg: str) -> None:
        logger.info(f">>> 事件: {event.name} | {msg}")
        if event is UCEvent.PLAYER_REGISTERED:
            registered.set()

    async with UCClient(config, listener=on_event) as client:
        await client.register(config.player_name or "example")
        await registered.wait()

        await client.key_down("A")
        await client.joystick(0.5, -0.25)
        await client.gyro(0.1, 0.2, -0.3)
        await client.deregister()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except UCError as e:
        logger.error(f"客户端异常: {e}")
    except KeyboardInterrupt:
        logger.info("收到用户中断信号 (Ctrl+C)，退出。")
