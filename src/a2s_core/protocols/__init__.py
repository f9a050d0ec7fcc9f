# src/a2s_core/protocols/__init__.py
"""
A2S 协议层 (Protocol Layer)

本包负责协议数据包的纯粹构建 (Build) 与解析 (Parse)。

- 不包含任何 socket 操作或网络 I/O。
- 不包含任何状态管理 (State)。
- 不依赖于 core 或 network 层。
"""

from . import constants
from .challenge import build_challenge_request, parse_challenge_response
from .player import build_player_request, parse_player_response

# 公共 API
__all__ = [
    "constants",
    "build_challenge_request",
    "parse_challenge_response",
    "build_player_request",
    "parse_player_response",
]
