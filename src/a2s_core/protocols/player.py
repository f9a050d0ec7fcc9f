# src/a2s_core/protocols/player.py
"""
A2S_PLAYER 请求与响应

请求:  FF FF FF FF 55 <token:4>
响应:  FF FF FF FF 44 <count:u8> { <index:u8> <name:cstr> <score:i32> <duration:f32> } * count
"""

import logging
import math

from ..exceptions import ProtocolError, ProtocolErrorKind
from ..models import PlayerListResponse, PlayerRecord
from ..reader import ByteReader
from ..utils import hex_bytes
from .challenge import check_header
from .constants import SINGLE_PACKET, Header, Layout

logger = logging.getLogger(__name__)


def build_player_request(token: bytes) -> bytes:
    """构建携带 Challenge Token 的 A2S_PLAYER 请求包。

    Token 按接收顺序逐字节拷贝。

    Args:
        token: Challenge 阶段获取的 4 字节 Token。

    Returns:
        bytes: 9 字节请求包。
    """
    if len(token) != Layout.TOKEN_LEN:
        raise ValueError(f"Challenge Token 必须为 4 字节: {token!r}")

    return SINGLE_PACKET + bytes([Header.PLAYER_REQ]) + bytes(token)


def _truncated(declared: int, decoded: int) -> ProtocolError:
    return ProtocolError(
        f"声明 {declared} 名玩家，仅完整解析 {decoded} 条记录",
        ProtocolErrorKind.TRUNCATED,
    )


def parse_player_response(
    data: bytes, encoding: str = "utf-8"
) -> PlayerListResponse[PlayerRecord]:
    """解析 A2S_PLAYER 响应包。

    游标本身在数据不足时返回 0，这里逐条检查剩余长度，
    一旦记录不完整即报错，不会产出补零的记录。

    Args:
        data: 接收到的 UDP 数据包。
        encoding: 玩家名的文本编码。

    Returns:
        PlayerListResponse: 按线上顺序排列的玩家记录。

    Raises:
        ProtocolError: Header 不匹配 (UNEXPECTED_HEADER)、数据截断 (TRUNCATED)
            或在线时长为 NaN、无穷大、负数 (INVALID_FIELD)。
        EncodingError: 玩家名无法按 encoding 解码。
    """
    check_header(data, Header.PLAYER_RESP)

    reader = ByteReader(data[Layout.PREFIX_LEN :], encoding=encoding)
    if reader.done():
        raise ProtocolError("缺少玩家数量字段", ProtocolErrorKind.TRUNCATED)

    count = reader.read_uint(1)
    logger.debug("player_response: count=%d", count)

    players: list[PlayerRecord] = []
    for _ in range(count):
        if reader.done():
            raise _truncated(count, len(players))

        index = reader.read_uint(1)
        name = reader.read_delimited()
        score = reader.read_int(4)
        duration = reader.read_float()

        if reader.remaining() < 0:
            raise _truncated(count, len(players))

        if not math.isfinite(duration) or duration < 0:
            raise ProtocolError(
                f"第 {len(players) + 1} 条记录的在线时长无效: {duration}",
                ProtocolErrorKind.INVALID_FIELD,
            )

        players.append(
            PlayerRecord(index=index, name=name, score=score, duration=duration)
        )

    if not reader.done():
        logger.debug("player_response: 忽略尾部 %s", hex_bytes(reader.rest()))

    return PlayerListResponse(count=count, players=players)
