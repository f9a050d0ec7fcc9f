# src/a2s_core/protocols/constants.py
"""
A2S 协议层 - 常量定义

本模块定义了 Challenge 与 A2S_PLAYER 交互所需的魔法数字、偏移量和固定值。
采用命名空间 (Class Namespace) 组织。
参考: https://developer.valvesoftware.com/wiki/Server_queries
"""

# =========================================================================
# 1. 包前缀与 Header
# =========================================================================

# 单包响应前缀 (-1, little-endian int32)
SINGLE_PACKET = b"\xff\xff\xff\xff"
# 分包响应前缀 (-2)，当前不支持重组
SPLIT_PACKET = b"\xfe\xff\xff\xff"


class Header:
    """包前缀之后的 1 字节 Header"""

    PLAYER_REQ = 0x55  # 'U' A2S_PLAYER 请求 (同时用于申请 Challenge)
    CHALLENGE_RESP = 0x41  # 'A' S2C_CHALLENGE
    PLAYER_RESP = 0x44  # 'D' A2S_PLAYER 响应


# =========================================================================
# 2. 结构偏移量
# =========================================================================


class Layout:
    HEADER_INDEX = 4
    # 前缀 + Header
    PREFIX_LEN = 5

    # Challenge Token 在响应包中的位置 [5:9]
    TOKEN_START = 5
    TOKEN_END = 9
    TOKEN_LEN = 4


# 申请 Challenge 时占位用的 Token (-1)
CHALLENGE_PLACEHOLDER = b"\xff\xff\xff\xff"
