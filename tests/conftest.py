# tests/conftest.py
import asyncio
import sys
from pathlib import Path

import pytest

# 确保 src 目录在 sys.path 中
src_path = Path(__file__).resolve().parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from uc_core.config import UCConfig
from uc_core.core import UCClient
from uc_core.exceptions import NetworkError
from uc_core.network import Transport
from uc_core.protocols import constants


class FakeTransport(Transport):
    """内存传输层：测试通过 feed() 注入服务器帧，通过 written 检查发出的帧。"""

    def __init__(self, address: str, port: int, buffer_size: int):
        self.address = address
        self.port = port
        self.buffer_size = buffer_size
        self.frames: asyncio.Queue = asyncio.Queue()
        self.written: list[bytes] = []
        self.connect_error: Exception | None = None
        self.write_error: Exception | None = None
        self.connected = False
        self.close_calls = 0
        self.connect_gate: asyncio.Event | None = None

    async def connect(self) -> None:
        if self.connect_gate is not None:
            await self.connect_gate.wait()
        if self.connect_error:
            raise self.connect_error
        self.connected = True

    async def write(self, frame: bytes) -> None:
        if self.write_error:
            raise self.write_error
        self.written.append(frame)

    async def read_frame(self, max_bytes: int, terminator: bytes) -> bytes:
        item = await self.frames.get()
        if isinstance(item, Exception):
            raise item
        return item

    async def close(self) -> None:
        self.close_calls += 1
        self.connected = False

    def feed(self, body: str) -> None:
        self.frames.put_nowait(body.encode("ascii") + constants.TERMINATOR_BYTES)

    def fail_read(self, exc: Exception | None = None) -> None:
        self.frames.put_nowait(exc or NetworkError("连接已被对端关闭"))


class FakeTransportFactory:
    """记录所有创建过的 FakeTransport，并可预设连接失败。"""

    def __init__(self):
        self.created: list[FakeTransport] = []
        self.connect_error: Exception | None = None
        self.connect_gate: asyncio.Event | None = None

    def __call__(self, address: str, port: int, buffer_size: int) -> FakeTransport:
        transport = FakeTransport(address, port, buffer_size)
        transport.connect_error = self.connect_error
        transport.connect_gate = self.connect_gate
        self.created.append(transport)
        return transport

    @property
    def last(self) -> FakeTransport:
        return self.created[-1]


class EventRecorder:
    """同步监听器：按顺序记录收到的事件。"""

    def __init__(self):
        self.events = []
        self.messages = []

    def __call__(self, event, msg):
        self.events.append(event)
        self.messages.append(msg)


@pytest.fixture
def valid_config():
    """[Fixture] 返回一个合法的 UCConfig 对象。"""
    return UCConfig(
        server_address="10.0.0.2",
        server_port=9000,
        buffer_size=1024,
        player_name="Alice",
    )


@pytest.fixture
def transports():
    return FakeTransportFactory()


@pytest.fixture
def recorder():
    return EventRecorder()


@pytest.fixture
def client(valid_config, transports, recorder):
    return UCClient(valid_config, listener=recorder, transport_factory=transports)


@pytest.fixture
def wait_until():
    """返回一个协程函数：轮询直到条件成立，超时则断言失败。"""

    async def _wait_until(predicate, timeout: float = 1.0) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while not predicate():
            if loop.time() > deadline:
                raise AssertionError("等待条件超时")
            await asyncio.sleep(0.01)

    return _wait_until


@pytest.fixture
def registered(client, transports, wait_until):
    """返回一个协程函数：连接、注册并等待服务器分配玩家编号。"""

    async def _registered(player_id: int = 7) -> FakeTransport:
        await client.connect()
        await client.register()
        transports.last.feed(f"PLAYER_ID:{player_id}")
        await wait_until(lambda: client.player_id == player_id)
        transports.last.written.clear()
        return transports.last

    return _registered
