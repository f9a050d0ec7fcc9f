# File: src/a2s_core/utils.py
"""
A2S 查询核心库 - 通用工具箱

与具体协议无关的纯函数：时长拆分、调试用十六进制格式化。
"""

import math

from .models import DurationBreakdown


def format_duration(seconds: float) -> DurationBreakdown:
    """将秒数拆分为 时/分/秒。

    A2S_PLAYER 中的在线时长以浮点秒发送。先对总秒数向下取整，
    之后全部使用整数除法，不做四舍五入。

    Args:
        seconds: 非负秒数。

    Returns:
        DurationBreakdown: 拆分结果，例如 3725.0 -> 1h 2m 5s。
    """
    assert seconds >= 0, f"在线时长不能为负数: {seconds}"

    total = math.floor(seconds)
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    return DurationBreakdown(hours=hours, minutes=minutes, seconds=secs)


def hex_bytes(data: bytes) -> str:
    """以大写、空格分隔的形式格式化字节 (如 'FF FF FF FF 41')。"""
    return data.hex(" ").upper()
