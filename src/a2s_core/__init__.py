# src/a2s_core/__init__.py
"""
A2S-Core v0.3.0
Source 引擎 A2S_PLAYER 查询协议核心库：通用二进制游标 + Challenge/Player 两段式查询。
"""

# 暴露核心配置
from .config import (
    QueryConfig,
    create_config_from_dict,
    load_config_from_env,
    load_config_from_toml,
)

# 暴露引擎与会话状态
from .core import A2SClient, query_players

# 暴露异常体系 (方便上层 try-except)
from .exceptions import (
    A2SError,
    ConfigError,
    EncodingError,
    ProtocolError,
    ProtocolErrorKind,
    TransportError,
    TransportErrorKind,
)
from .models import DurationBreakdown, Player, PlayerListResponse, PlayerRecord
from .reader import ByteReader
from .state import QuerySession, QueryStatus
from .utils import format_duration

__version__ = "0.3.0"

__all__ = [
    "A2SClient",
    "query_players",
    "QueryConfig",
    "QuerySession",
    "QueryStatus",
    "create_config_from_dict",
    "load_config_from_env",
    "load_config_from_toml",
    "ByteReader",
    "format_duration",
    "DurationBreakdown",
    "Player",
    "PlayerRecord",
    "PlayerListResponse",
    "A2SError",
    "ConfigError",
    "TransportError",
    "TransportErrorKind",
    "ProtocolError",
    "ProtocolErrorKind",
    "EncodingError",
]
