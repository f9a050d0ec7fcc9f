# File: src/a2s_core/models.py
"""
A2S 查询核心库 - 数据模型

协议层解码产出 PlayerRecord，编排层为其附加时长拆分后得到 Player。
"""

from dataclasses import dataclass, field
from typing import Generic, TypeVar


@dataclass(frozen=True)
class DurationBreakdown:
    """在线时长的 时/分/秒 拆分 (均为非负整数，向下取整)。"""

    hours: int
    minutes: int
    seconds: int

    def __str__(self) -> str:
        return f"{self.hours}h {self.minutes}m {self.seconds}s"


@dataclass(frozen=True)
class PlayerRecord:
    """A2S_PLAYER 响应中的单条玩家记录 (按线上顺序)。

    Attributes:
        index: 服务器分配的序号。部分游戏 (如 Garry's Mod) 对所有玩家
            都返回同一个值，这是服务器行为而非解码错误。
        name: 玩家名。
        score: 得分 (通常为击杀数)，有符号 32 位。
        duration: 在线时长 (秒)，单精度浮点。
    """

    index: int
    name: str
    score: int
    duration: float


@dataclass(frozen=True)
class Player(PlayerRecord):
    """面向调用方的玩家记录，附带在线时长拆分。"""

    duration_clean: DurationBreakdown


RecordT = TypeVar("RecordT", bound=PlayerRecord)


@dataclass
class PlayerListResponse(Generic[RecordT]):
    """玩家列表响应。

    Attributes:
        count: 响应中声明的玩家数量。
        players: 实际解码出的记录，长度与 count 一致 (截断时协议层直接报错)。
    """

    count: int
    players: list[RecordT] = field(default_factory=list)
