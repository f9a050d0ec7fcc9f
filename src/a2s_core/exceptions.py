# File: src/a2s_core/exceptions.py
"""
A2S 查询核心库 - 异常体系 (Exceptions)

定义库内统一使用的异常类，以便上层应用（如 CLI/Bot）能进行精细的错误处理。
"""

from enum import IntEnum


class A2SError(Exception):
    """A2S 查询核心库的所有内部异常的基类。

    上层应用可以通过捕获此异常来处理所有由 a2s-core 抛出的已知错误。
    """

    # 查询过程中抛出时，由 A2SClient.query 附上结束状态的 QuerySession
    session = None


class ConfigError(A2SError):
    """配置加载或校验失败。

    触发场景:
    1. 缺少必要字段 (如 host)。
    2. 字段格式错误 (如端口越界、超时非正数、编码名无效)。
    3. 找不到配置文件或 Profile。
    """

    pass


class TransportErrorKind(IntEnum):
    """传输层错误类型枚举。"""

    RESOLVE_FAILED = 1  # 目标地址解析失败
    BIND_FAILED = 2  # 本地 Socket 绑定失败
    SEND_FAILED = 3  # 发送失败
    TIMEOUT = 4  # 等待响应超时
    RECEIVE_FAILED = 5  # 接收过程中出现底层错误 (如 ICMP 端口不可达)
    CLOSED = 6  # Transport 已关闭

    @property
    def description(self) -> str:
        """获取错误类型对应的人类可读中文描述。"""
        _DESC_MAP = {
            1: "地址解析失败",
            2: "端口绑定失败",
            3: "发送失败",
            4: "接收超时",
            5: "接收错误",
            6: "连接已关闭",
        }
        return _DESC_MAP[self.value]


class TransportError(A2SError):
    """网络层面的错误 (I/O 级别)。

    触发场景:
    1. 目标主机名无法解析或 Socket 创建失败。
    2. 发送 (sendto) 失败。
    3. 在调用方给定的超时时间内未收到响应。

    注意: 核心库从不自动重试，重试策略由调用方决定。
    """

    def __init__(self, message: str, kind: TransportErrorKind) -> None:
        """初始化传输错误。

        Args:
            message: 错误描述信息。
            kind: 错误类型。
        """
        super().__init__(f"{kind.description}: {message}")
        self.kind = kind


class ProtocolErrorKind(IntEnum):
    """协议错误类型枚举。"""

    UNEXPECTED_HEADER = 1  # 包前缀或 Header 字节不匹配
    TRUNCATED = 2  # 数据长度不足以容纳声明的内容
    INVALID_FIELD = 3  # 字段值超出合法范围 (如在线时长为 NaN 或负数)

    @property
    def description(self) -> str:
        _DESC_MAP = {
            1: "非预期的包头",
            2: "数据包被截断",
            3: "字段值非法",
        }
        return _DESC_MAP[self.value]


class ProtocolError(A2SError):
    """协议交互错误 (逻辑级别)。

    触发场景:
    1. 收到非 A2S 单包格式的数据 (前缀不是 FF FF FF FF)。
    2. Header 字节与当前阶段期望的不一致 (如 Challenge 阶段收到 0x44)。
    3. 数据包长度不足以容纳 Challenge Token 或声明数量的玩家记录。
    4. 字段解码成功但取值非法，如在线时长为 NaN、无穷大或负数。
    """

    def __init__(self, message: str, kind: ProtocolErrorKind) -> None:
        super().__init__(f"{kind.description}: {message}")
        self.kind = kind


class EncodingError(A2SError):
    """字符串字段无法按指定编码解码。

    非 UTF-8 编码下的解码失败不会被替换字符掩盖，以便调用方察觉玩家名损坏。
    """

    def __init__(self, message: str, encoding: str) -> None:
        super().__init__(message)
        self.encoding = encoding
