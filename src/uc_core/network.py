# src/uc_core/network.py
"""
UC 核心库 - 网络模块 (Network) [Asyncio Edition]

定义传输层契约 (Transport)，并提供基于 asyncio TCP Stream 的默认实现。
该模块屏蔽了底层 Socket 的复杂性，向 Core 提供纯粹的按帧 bytes 收发接口。
Core 自身从不直接打开 Socket。
"""

import abc
import asyncio
import logging
from typing import Optional

from .exceptions import NetworkError, ProtocolError

logger = logging.getLogger(__name__)


class Transport(abc.ABC):
    """传输层抽象基类。

    所有 I/O 错误都必须以 NetworkError 的形式抛出，
    Core 只认识 NetworkError / ProtocolError 两种传输层异常。
    """

    @abc.abstractmethod
    async def connect(self) -> None:
        """[Abstract] 建立连接。

        该协程返回即代表 "连接已建立" 的一次性通知。

        Raises:
            NetworkError: 连接失败。
        """
        raise NotImplementedError

    @abc.abstractmethod
    async def write(self, frame: bytes) -> None:
        """[Abstract] 发送一帧数据，不做缓冲。

        Raises:
            NetworkError: 发送失败或连接已关闭。
        """
        raise NotImplementedError

    @abc.abstractmethod
    async def read_frame(self, max_bytes: int, terminator: bytes) -> bytes:
        """[Abstract] 阻塞读取恰好一帧 (含结束符)。

        Args:
            max_bytes: 单帧允许的最大字节数。
            terminator: 帧结束符。

        Raises:
            NetworkError: 读取失败或对端关闭连接。
            ProtocolError: 单帧超过 max_bytes。
        """
        raise NotImplementedError

    @abc.abstractmethod
    async def close(self) -> None:
        """[Abstract] 释放连接资源，可重复调用。"""
        raise NotImplementedError


class TcpTransport(Transport):
    """
    封装 asyncio TCP Stream 操作的传输层。
    """

    def __init__(self, address: str, port: int, buffer_size: int = 1024):
        self.address = address
        self.port = port
        self.buffer_size = buffer_size
        self.reader: Optional[asyncio.StreamReader] = None
        self.writer: Optional[asyncio.StreamWriter] = None

    async def connect(self) -> None:
        target = (self.address, self.port)
        try:
            # limit 控制 readuntil 的最大缓冲，超出即视为超长帧
            self.reader, self.writer = await asyncio.open_connection(
                self.address, self.port, limit=self.buffer_size
            )
            logger.debug(f"TCP 连接已建立: {target}")
        except Exception as e:
            await self.close()
            raise NetworkError(f"连接服务器失败 {target}: {e}") from e

    async def write(self, frame: bytes) -> None:
        if not self.writer or self.writer.is_closing():
            raise NetworkError("Transport 已关闭")

        try:
            self.writer.write(frame)
            await self.writer.drain()
        except Exception as e:
            raise NetworkError(f"发送失败: {e}") from e

    async def read_frame(self, max_bytes: int, terminator: bytes) -> bytes:
        if not self.reader:
            raise NetworkError("Transport 未初始化")

        try:
            data = await self.reader.readuntil(terminator)
        except asyncio.IncompleteReadError:
            raise NetworkError("连接已被对端关闭") from None
        except asyncio.LimitOverrunError as e:
            raise ProtocolError(f"单帧超过接收缓冲区 ({self.buffer_size} 字节)") from e
        except asyncio.CancelledError:
            raise
        except Exception as e:
            raise NetworkError(f"接收错误: {e}") from e

        if len(data) > max_bytes:
            raise ProtocolError(f"单帧超过接收缓冲区 ({max_bytes} 字节)")
        return data

    async def close(self) -> None:
        """关闭 Stream"""
        writer, self.writer = self.writer, None
        self.reader = None
        if writer is None:
            return

        writer.close()
        try:
            await writer.wait_closed()
        except (ConnectionError, OSError) as e:
            logger.debug(f"关闭连接时忽略异常: {e}")
        logger.debug("TCP Transport 已关闭")

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
