# src/a2s_core/network.py
"""
A2S 查询核心库 - 网络模块 (Network) [Asyncio Edition]

封装 UDP Socket 的创建、地址解析、发送和接收逻辑。
该模块屏蔽了底层 Socket 的复杂性，向编排层提供纯粹的 bytes 收发接口。
"""

import asyncio
import logging
import socket
from typing import Optional, Tuple, Union, cast

from .config import QueryConfig
from .exceptions import TransportError, TransportErrorKind

logger = logging.getLogger(__name__)

Address = Tuple[str, int]


class A2SUdpProtocol(asyncio.DatagramProtocol):
    """
    asyncio UDP 协议适配器。
    将回调风格的 datagram_received 转换为 Queue 模式，供上层 await 使用。
    只接受来自目标地址的数据报，其余来源直接丢弃。
    """

    def __init__(self, peer: Address):
        self.peer = peer
        self.transport: Optional[asyncio.DatagramTransport] = None
        # 队列内容可以是数据元组，也可以是异常对象（用于快速失败）
        self.queue: asyncio.Queue[Union[Tuple[bytes, Address], Exception]] = (
            asyncio.Queue(maxsize=32)
        )

    def connection_made(self, transport: asyncio.BaseTransport) -> None:
        self.transport = cast(asyncio.DatagramTransport, transport)
        logger.debug("UDP Transport 已建立")

    def datagram_received(self, data: bytes, addr: Tuple[str, int]) -> None:
        """接收数据并放入队列"""
        if (addr[0], addr[1]) != self.peer:
            logger.warning(f"丢弃来自非目标地址的数据包: {addr[0]}:{addr[1]}")
            return
        try:
            self.queue.put_nowait((data, addr))
        except asyncio.QueueFull:
            logger.warning("UDP 接收队列已满，丢弃数据包")

    def error_received(self, exc: Exception) -> None:
        """处理 UDP 错误 (如 ICMP 端口不可达)"""
        logger.error(f"UDP 错误: {exc}")
        self._propagate_error(
            TransportError(str(exc), TransportErrorKind.RECEIVE_FAILED)
        )

    def connection_lost(self, exc: Optional[Exception]) -> None:
        """处理连接断开"""
        if exc:
            logger.warning(f"UDP 连接断开: {exc}")
            self._propagate_error(
                TransportError(str(exc), TransportErrorKind.RECEIVE_FAILED)
            )
        else:
            logger.debug("UDP 连接已正常关闭")
            self._propagate_error(
                TransportError("Transport 已释放", TransportErrorKind.CLOSED)
            )
        self.transport = None

    def _propagate_error(self, exc: Exception) -> None:
        """将底层错误立即传播给上层消费者"""
        try:
            self.queue.put_nowait(exc)
        except asyncio.QueueFull:
            # 队列已满时移除最旧的一项，保证错误能被传达
            self.queue.get_nowait()
            self.queue.put_nowait(exc)


class NetworkClient:
    """
    封装 asyncio UDP 操作的客户端，生命周期为单次查询。

    推荐通过 `async with NetworkClient(config) as net:` 使用，
    保证任何退出路径上 Socket 都会被释放。
    """

    def __init__(self, config: QueryConfig):
        self.config = config
        self.peer: Optional[Address] = None
        self.protocol: Optional[A2SUdpProtocol] = None
        self.transport: Optional[asyncio.DatagramTransport] = None

    async def _resolve(self) -> Address:
        loop = asyncio.get_running_loop()
        try:
            infos = await loop.getaddrinfo(
                self.config.host,
                self.config.port,
                family=socket.AF_INET,
                type=socket.SOCK_DGRAM,
            )
        except OSError as e:
            raise TransportError(
                f"{self.config.host}: {e}", TransportErrorKind.RESOLVE_FAILED
            ) from e

        if not infos:
            raise TransportError(
                f"{self.config.host}: 无可用地址", TransportErrorKind.RESOLVE_FAILED
            )
        sockaddr = infos[0][4]
        return (sockaddr[0], sockaddr[1])

    async def connect(self) -> None:
        """
        解析目标地址并初始化 UDP Endpoint。
        """
        self.peer = await self._resolve()
        loop = asyncio.get_running_loop()
        bind_addr = (self.config.bind_ip, 0)
        peer = self.peer

        try:
            transport, protocol = await loop.create_datagram_endpoint(
                lambda: A2SUdpProtocol(peer),
                local_addr=bind_addr,
                family=socket.AF_INET,
            )
            self.transport = cast(asyncio.DatagramTransport, transport)
            self.protocol = cast(A2SUdpProtocol, protocol)
            logger.debug(f"Async Socket 绑定成功: {bind_addr} -> {peer[0]}:{peer[1]}")

        except OSError as e:
            await self.close()
            raise TransportError(
                f"{bind_addr}: {e}", TransportErrorKind.BIND_FAILED
            ) from e

    @property
    def local_address(self) -> Optional[Address]:
        if not self.transport:
            return None
        return self.transport.get_extra_info("sockname")

    async def send(self, packet: bytes) -> None:
        """
        向目标地址发送 UDP 数据包。
        """
        if not self.transport or self.transport.is_closing():
            if not self.transport:
                await self.connect()
            else:
                raise TransportError("Transport 已关闭", TransportErrorKind.CLOSED)

        assert self.transport is not None
        assert self.peer is not None

        try:
            # sendto 是同步非阻塞的，直接调用
            self.transport.sendto(packet, self.peer)
        except Exception as e:
            raise TransportError(str(e), TransportErrorKind.SEND_FAILED) from e

    async def receive(self, timeout: float) -> Tuple[bytes, Address]:
        """
        接收一个来自目标地址的 UDP 数据包 (Async)。

        使用 asyncio.wait_for 实现超时控制。
        """
        if not self.protocol:
            raise TransportError("Protocol 未初始化", TransportErrorKind.CLOSED)

        try:
            item = await asyncio.wait_for(self.protocol.queue.get(), timeout=timeout)
        except asyncio.TimeoutError:
            raise TransportError(
                f"{timeout}s 内未收到响应", TransportErrorKind.TIMEOUT
            ) from None

        if isinstance(item, Exception):
            raise item
        return item

    async def close(self) -> None:
        """关闭 Transport"""
        if self.transport:
            self.transport.close()
            self.transport = None
            logger.debug("UDP Transport 已关闭")

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
