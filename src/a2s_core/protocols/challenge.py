# src/a2s_core/protocols/challenge.py
"""
Challenge 握手 (S2C_CHALLENGE)

请求:  FF FF FF FF 55 FF FF FF FF
响应:  FF FF FF FF 41 <token:4>
"""

import logging

from ..exceptions import ProtocolError, ProtocolErrorKind
from ..utils import hex_bytes
from .constants import (
    CHALLENGE_PLACEHOLDER,
    SINGLE_PACKET,
    SPLIT_PACKET,
    Header,
    Layout,
)

logger = logging.getLogger(__name__)


def build_challenge_request() -> bytes:
    """构建 Challenge 申请包 (A2S_PLAYER + 占位 Token)。"""
    return SINGLE_PACKET + bytes([Header.PLAYER_REQ]) + CHALLENGE_PLACEHOLDER


def check_header(data: bytes, expected: int) -> None:
    """校验单包前缀与 Header 字节。

    Raises:
        ProtocolError: 长度不足 5 字节 (TRUNCATED) 或前缀/Header 不匹配
            (UNEXPECTED_HEADER)。
    """
    if len(data) < Layout.PREFIX_LEN:
        raise ProtocolError(
            f"响应仅 {len(data)} 字节，不足以包含包头", ProtocolErrorKind.TRUNCATED
        )

    prefix = data[: Layout.HEADER_INDEX]
    if prefix == SPLIT_PACKET:
        raise ProtocolError(
            "收到分包响应，暂不支持重组", ProtocolErrorKind.UNEXPECTED_HEADER
        )
    if prefix != SINGLE_PACKET:
        raise ProtocolError(
            f"包前缀不匹配: {hex_bytes(prefix)}", ProtocolErrorKind.UNEXPECTED_HEADER
        )

    header = data[Layout.HEADER_INDEX]
    if header != expected:
        raise ProtocolError(
            f"Header 0x{header:02X}，期望 0x{expected:02X}",
            ProtocolErrorKind.UNEXPECTED_HEADER,
        )


def parse_challenge_response(data: bytes) -> bytes:
    """解析 Challenge 响应包，提取 4 字节 Token。

    Token 是不透明值，原样返回，不做字节序转换。

    Args:
        data: 接收到的 UDP 数据包。

    Returns:
        bytes: 4 字节 Challenge Token。

    Raises:
        ProtocolError: Header 不匹配或长度不足。
    """
    check_header(data, Header.CHALLENGE_RESP)

    if len(data) < Layout.TOKEN_END:
        raise ProtocolError(
            f"Challenge 响应仅 {len(data)} 字节，无法提取 Token",
            ProtocolErrorKind.TRUNCATED,
        )

    token = data[Layout.TOKEN_START : Layout.TOKEN_END]
    logger.debug("challenge_response: token=%s", hex_bytes(token))
    return token
