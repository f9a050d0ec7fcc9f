# File: src/a2s_core/reader.py
"""
A2S 查询核心库 - 二进制游标 (Byte Reader)

对不可变字节流进行顺序、有状态的解码，覆盖 Source 引擎查询协议族常见的字段布局：
定宽整数 (大小端可选)、IEEE-754 单精度浮点、分隔符/定长/Pascal 字符串、
LEB128 变长整数以及原始字节切片。

截断策略 (宽松层):
    定宽读取在数据不足时返回 0，但偏移量依然前进完整宽度，因此 offset
    可以合法地超过缓冲区长度。字符串读取返回已有的部分内容 (或空串)。
    是否将耗尽视为错误由上层协议通过 remaining() / done() 自行决定。

本模块不了解任何具体协议。
"""

import codecs
import struct
from typing import Union

from .exceptions import EncodingError

BytesLike = Union[bytes, bytearray, memoryview]

_INT_FORMATS = {1: "b", 2: "h", 4: "i", 8: "q"}
_UINT_FORMATS = {1: "B", 2: "H", 4: "I"}

# 兼容游戏查询生态中常见的编码写法
# latin1 按 Windows-1252 处理，binary 为逐字节映射 (ISO-8859-1)
_ENCODING_ALIASES = {
    "utf8": "utf-8",
    "ucs2": "utf-16-le",
    "ucs-2": "utf-16-le",
    "utf16le": "utf-16-le",
    "utf-16le": "utf-16-le",
    "latin1": "cp1252",
    "win1252": "cp1252",
    "binary": "latin-1",
}


def resolve_encoding(name: str) -> str:
    """将编码名规范化为 Python codec 名称。

    Args:
        name: 编码名，支持 utf8 / ucs2 / latin1 / binary 等别名，
            其余名称交由 codec 注册表查找 (如 cp1251、gbk)。

    Returns:
        str: 规范化后的 codec 名称。

    Raises:
        EncodingError: 编码名无法识别。
    """
    key = name.strip().lower()
    try:
        return codecs.lookup(_ENCODING_ALIASES.get(key, key)).name
    except LookupError as e:
        raise EncodingError(f"未知的文本编码: {name}", name) from e


def _delimiter_byte(delimiter: Union[bytes, str, int]) -> int:
    if isinstance(delimiter, int):
        return delimiter
    if isinstance(delimiter, str):
        delimiter = delimiter.encode("latin-1")
    if len(delimiter) != 1:
        raise ValueError(f"分隔符必须为单字节: {delimiter!r}")
    return delimiter[0]


class ByteReader:
    """字节流顺序读取器。

    每次解码操作创建一个实例，用完即弃；读取器从不修改底层缓冲区。

    Attributes:
        byte_order: 定宽数值的字节序，"little" (默认) 或 "big"。
        encoding: 字符串读取的默认编码。
        delimiter: 分隔符字符串的默认终止字节。
    """

    def __init__(
        self,
        buffer: BytesLike,
        byte_order: str = "little",
        encoding: str = "utf-8",
        delimiter: Union[bytes, str, int] = b"\x00",
    ) -> None:
        if byte_order not in ("little", "big"):
            raise ValueError(f"不支持的字节序: {byte_order}")

        self._buffer = bytes(buffer)
        self._offset = 0
        self.byte_order = byte_order
        self.encoding = encoding
        self.delimiter = _delimiter_byte(delimiter)

    # =========================================================================
    # 位置管理
    # =========================================================================

    @property
    def offset(self) -> int:
        """当前读取位置 (可能大于缓冲区长度)。"""
        return self._offset

    def set_offset(self, offset: int) -> None:
        self._offset = offset

    def skip(self, count: int) -> None:
        self._offset += count

    def remaining(self) -> int:
        """剩余可读字节数。偏移越界后为负数。"""
        return len(self._buffer) - self._offset

    def done(self) -> bool:
        return self._offset >= len(self._buffer)

    def rest(self) -> bytes:
        """返回剩余的全部字节，不移动偏移量。"""
        return self._buffer[self._offset :]

    # =========================================================================
    # 数值读取
    # =========================================================================

    @property
    def _prefix(self) -> str:
        return "<" if self.byte_order == "little" else ">"

    def read_uint(self, size: int) -> int:
        """读取无符号整数。

        8 字节读取按当前字节序拆成两个 32 位半字再组合，结果为原生 int，
        在 2^53 以上不会丢失精度。

        Args:
            size: 字节宽度，取值 1 / 2 / 4 / 8。

        Returns:
            int: 解码值；数据不足时返回 0。
        """
        if size not in (1, 2, 4, 8):
            raise ValueError(f"不支持的整数宽度: {size}")

        value = 0
        if self.remaining() >= size:
            if size == 8:
                first, second = struct.unpack_from(
                    self._prefix + "II", self._buffer, self._offset
                )
                if self.byte_order == "little":
                    low, high = first, second
                else:
                    high, low = first, second
                value = (high << 32) | low
            else:
                value = struct.unpack_from(
                    self._prefix + _UINT_FORMATS[size], self._buffer, self._offset
                )[0]
        self._offset += size
        return value

    def read_int(self, size: int) -> int:
        """读取有符号整数 (补码)。数据不足时返回 0。"""
        if size not in _INT_FORMATS:
            raise ValueError(f"不支持的整数宽度: {size}")

        value = 0
        if self.remaining() >= size:
            value = struct.unpack_from(
                self._prefix + _INT_FORMATS[size], self._buffer, self._offset
            )[0]
        self._offset += size
        return value

    def read_float(self) -> float:
        """读取 IEEE-754 单精度浮点数。数据不足时返回 0.0。"""
        value = 0.0
        if self.remaining() >= 4:
            value = struct.unpack_from(self._prefix + "f", self._buffer, self._offset)[0]
        self._offset += 4
        return value

    def read_varint(self) -> int:
        """读取 LEB128 风格的无符号变长整数。

        每个字节低 7 位为数据，最高位表示后续是否还有字节。
        编码在缓冲区末尾前未结束时返回 0，并将偏移量停在缓冲区末尾。
        """
        value = 0
        shift = 0
        pos = self._offset
        while pos < len(self._buffer):
            byte = self._buffer[pos]
            pos += 1
            value |= (byte & 0x7F) << shift
            if not byte & 0x80:
                self._offset = pos
                return value
            shift += 7

        self._offset = max(self._offset, len(self._buffer))
        return 0

    def read_bytes(self, count: int) -> bytes:
        """读取原始字节切片。剩余不足 count 字节时返回空切片。"""
        data = b""
        if self.remaining() >= count:
            data = self._buffer[self._offset : self._offset + count]
        self._offset += count
        return data

    # =========================================================================
    # 字符串读取
    # =========================================================================

    def read_delimited(
        self,
        delimiter: Union[bytes, str, int, None] = None,
        encoding: str | None = None,
    ) -> str:
        """读取以分隔符结尾的字符串 (默认 0x00)。

        分隔符被消费但不包含在结果中。找不到分隔符时返回到缓冲区末尾的
        部分内容，偏移量停在缓冲区末尾。

        Args:
            delimiter: 终止字节，默认使用实例的 delimiter。
            encoding: 文本编码，默认使用实例的 encoding。

        Returns:
            str: 解码后的字符串。

        Raises:
            EncodingError: 非 UTF-8 编码下解码失败。
        """
        start = self._offset
        if start >= len(self._buffer):
            return ""

        delim = self.delimiter if delimiter is None else _delimiter_byte(delimiter)
        end = self._buffer.find(bytes([delim]), start)
        if end == -1:
            end = len(self._buffer)
            self._offset = end
        else:
            self._offset = end + 1

        return self._decode(self._buffer[start:end], encoding)

    def read_fixed_length(self, length: int, encoding: str | None = None) -> str:
        """读取定长字符串。

        length <= 0 时返回空串且不移动偏移量；数据不足时返回部分内容，
        偏移量停在缓冲区末尾。
        """
        if length <= 0:
            return ""

        start = self._offset
        if start >= len(self._buffer):
            return ""

        end = min(start + length, len(self._buffer))
        self._offset = end
        return self._decode(self._buffer[start:end], encoding)

    def read_pascal(
        self, bytes_for_size: int, adjustment: int = 0, encoding: str | None = None
    ) -> str:
        """读取带长度前缀的字符串。

        Args:
            bytes_for_size: 长度前缀的字节宽度。
            adjustment: 对长度前缀的修正值 (部分协议的前缀包含自身长度)。
            encoding: 文本编码。
        """
        length = self.read_uint(bytes_for_size) + adjustment
        return self.read_fixed_length(length, encoding)

    def _decode(self, raw: bytes, encoding: str | None) -> str:
        codec = resolve_encoding(encoding or self.encoding)

        # 服务器常在字符中间截断玩家名，UTF-8 保持宽松
        if codec == "utf-8":
            return raw.decode(codec, "replace")

        try:
            return raw.decode(codec, "strict")
        except UnicodeDecodeError as e:
            raise EncodingError(
                f"无法按 {codec} 解码字符串 ({raw.hex()}): {e.reason}", codec
            ) from e
