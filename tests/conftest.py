# tests/conftest.py
import sys
from pathlib import Path

import pytest

# 确保 src 目录在 sys.path 中
src_path = Path(__file__).resolve().parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from a2s_core.config import QueryConfig

# 来自真实 Garry's Mod 服务器的 A2S_PLAYER 响应 (2 名玩家)
PLAYER_RESPONSE = bytes.fromhex(
    "FF FF FF FF 44 02 01 5B 44 5D 2D 2D 2D 2D 3E 54"
    "2E 4E 2E 57 3C 2D 2D 2D 2D 00 0E 00 00 00 B4 97"
    "00 44 02 4B 69 6C 6C 65 72 20 21 21 21 00 05 00"
    "00 00 69 24 D9 43"
)


@pytest.fixture
def valid_config():
    """
    [Fixture] 返回一个指向本机的 QueryConfig 对象。
    """
    return QueryConfig(
        host="127.0.0.1",
        port=27015,
        bind_ip="127.0.0.1",
        timeout=0.5,
        name_encoding="utf-8",
        dump_path=None,
    )


@pytest.fixture
def token() -> bytes:
    """一个模拟的 4 字节 Challenge Token"""
    return b"\x4b\xa1\xd5\x22"


@pytest.fixture
def challenge_response(token) -> bytes:
    return b"\xff\xff\xff\xff\x41" + token


@pytest.fixture
def player_response() -> bytes:
    return PLAYER_RESPONSE
