# File: src/a2s_core/state.py
"""
A2S 查询核心库 - 状态模块

定义单次查询会话的状态数据。每次查询创建新的 QuerySession，
查询之间不共享任何可变状态。
"""

from dataclasses import dataclass
from enum import Enum, auto

from .models import Player, PlayerListResponse


class QueryStatus(Enum):
    """单次查询的生命周期状态枚举。

    状态流转示意:
    IDLE -> CHALLENGING -> QUERYING -> DONE
                |              |
                v              v
              ERROR          ERROR
    """

    IDLE = auto()
    """会话已创建，尚未发送任何数据包。"""

    CHALLENGING = auto()
    """已发送 Challenge 申请，等待 Token。"""

    QUERYING = auto()
    """已发送 A2S_PLAYER 请求，等待玩家列表。"""

    DONE = auto()
    """玩家列表解析完成。"""

    ERROR = auto()
    """查询因传输或协议错误中止。"""


@dataclass
class QuerySession:
    """存储单次 A2S_PLAYER 查询的会话数据。

    Attributes:
        status: 当前阶段。
        token: Challenge 阶段获取的 4 字节 Token，只在两次往返之间有意义。
        raw_challenge: 原始 Challenge 响应。
        raw_players: 原始 A2S_PLAYER 响应 (可供持久化)。
        result: 解析完成的玩家列表。
        last_error: 中止原因描述。
    """

    status: QueryStatus = QueryStatus.IDLE
    token: bytes = b""
    raw_challenge: bytes = b""
    raw_players: bytes = b""
    result: PlayerListResponse[Player] | None = None
    last_error: str = ""

    @property
    def succeeded(self) -> bool:
        return self.status is QueryStatus.DONE
