# File: src/a2s_core/core.py
"""
A2S 查询核心引擎 (Core Engine)

职责：
1. 资源组装：Config + Network，每次查询独占一个 Transport。
2. 流程编排：Challenge -> A2S_PLAYER -> 解析 -> 时长拆分。
3. 错误传播：首个错误即中止，不做任何隐式重试。
"""

import asyncio
import logging

from . import protocols
from .config import (
    DEFAULT_PORT,
    DEFAULT_TIMEOUT,
    QueryConfig,
    create_config_from_dict,
)
from .exceptions import A2SError
from .models import Player, PlayerListResponse
from .network import NetworkClient
from .state import QuerySession, QueryStatus
from .utils import format_duration, hex_bytes

logger = logging.getLogger(__name__)


class A2SClient:
    """A2S_PLAYER 查询客户端 (Async)。

    客户端本身不持有可变状态，可对同一目标并发发起多次查询，
    每次查询拥有独立的 Socket。
    """

    def __init__(self, config: QueryConfig) -> None:
        """初始化查询客户端。

        Args:
            config: 查询目标配置。
        """
        self.config = config

    async def get_players(self) -> PlayerListResponse[Player]:
        """查询玩家列表。

        Returns:
            PlayerListResponse: 附带时长拆分的玩家列表。

        Raises:
            TransportError: 发送失败或等待响应超时。
            ProtocolError: 响应 Header 不匹配或数据被截断。
            EncodingError: 玩家名无法按配置的编码解码。
        """
        session = await self.query()
        assert session.result is not None
        return session.result

    async def query(self) -> QuerySession:
        """执行完整的两轮往返查询，返回结束状态的会话对象。

        会话中保留 Challenge Token 与两份原始响应，便于调试或持久化。
        出错时异常直接向上冒泡，Socket 在 async with 退出时释放；
        异常的 session 属性指向 ERROR 状态的会话，其中保留已收到的原始响应。
        """
        session = QuerySession()
        host, port = self.config.target
        timeout = self.config.timeout

        try:
            async with NetworkClient(self.config) as net:
                # 1. Challenge 握手
                session.status = QueryStatus.CHALLENGING
                logger.info(f"向 {host}:{port} 申请 Challenge...")
                await net.send(protocols.build_challenge_request())
                session.raw_challenge, _ = await net.receive(timeout)
                logger.debug(f"Challenge 响应: {hex_bytes(session.raw_challenge)}")

                session.token = protocols.parse_challenge_response(
                    session.raw_challenge
                )

                # 2. 携带 Token 请求玩家列表
                session.status = QueryStatus.QUERYING
                await net.send(protocols.build_player_request(session.token))
                session.raw_players, _ = await net.receive(timeout)
                logger.debug(
                    f"A2S_PLAYER 响应 ({len(session.raw_players)} 字节): "
                    f"Header={hex_bytes(session.raw_players[4:5])} "
                    f"Count={hex_bytes(session.raw_players[5:6])}"
                )

            # 3. 解析并附加时长拆分
            response = protocols.parse_player_response(
                session.raw_players, encoding=self.config.name_encoding
            )

        except A2SError as e:
            session.status = QueryStatus.ERROR
            session.last_error = str(e)
            e.session = session
            logger.error(f"查询 {host}:{port} 失败: {e}")
            raise

        session.result = PlayerListResponse(
            count=response.count,
            players=[
                Player(
                    index=p.index,
                    name=p.name,
                    score=p.score,
                    duration=p.duration,
                    duration_clean=format_duration(p.duration),
                )
                for p in response.players
            ],
        )
        session.status = QueryStatus.DONE
        logger.info(f"查询完成: {host}:{port} 共 {response.count} 名玩家")
        return session


def query_players(
    host: str, port: int = DEFAULT_PORT, timeout: float = DEFAULT_TIMEOUT
) -> PlayerListResponse[Player]:
    """同步便捷接口：查询一次玩家列表。

    不能在已运行的事件循环中调用。
    """
    config = create_config_from_dict({"host": host, "port": port, "timeout": timeout})
    return asyncio.run(A2SClient(config).get_players())
