"""
A2S 查询核心库 - 配置模块

负责配置的加载、解析与强类型转换。
支持从 TOML 文件、环境变量或字典中加载配置。
"""

import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .exceptions import ConfigError, EncodingError
from .reader import resolve_encoding

logger = logging.getLogger(__name__)

DEFAULT_PORT = 27015
DEFAULT_TIMEOUT = 3.0


@dataclass(frozen=True)
class QueryConfig:
    """单个查询目标的强类型配置对象。

    所有字段均为只读 (frozen=True)，确保配置在运行时不可变。

    Attributes:
        host: 游戏服务器地址 (IPv4 或主机名)。
        port: 查询端口 (Source 引擎默认 27015)。
        bind_ip: 本地绑定 IP (通常为 0.0.0.0)，本地端口由系统分配。
        timeout: 每次等待响应的超时秒数。
        name_encoding: 玩家名的文本编码。
        dump_path: 若设置，将原始 A2S_PLAYER 响应写入该文件。
    """

    host: str
    port: int = DEFAULT_PORT
    bind_ip: str = "0.0.0.0"
    timeout: float = DEFAULT_TIMEOUT
    name_encoding: str = "utf-8"
    dump_path: Path | None = None

    @property
    def target(self) -> tuple[str, int]:
        return (self.host, self.port)


def create_config_from_dict(raw_data: dict[str, Any]) -> QueryConfig:
    """通用工厂：将字典转换为强类型配置对象。

    负责字段的清洗、默认值注入和类型转换。

    Args:
        raw_data: 原始配置字典 (来自 TOML、Env 或命令行)。

    Returns:
        QueryConfig: 验证并转换后的配置对象。

    Raises:
        ConfigError: 当必要字段缺失或格式错误时抛出。
    """
    try:
        # --- 内部辅助函数 ---
        def _req(key: str) -> Any:
            """获取必要字段，缺失则报错"""
            if raw_data.get(key) in (None, ""):
                raise ConfigError(f"配置缺失: 缺少必要字段 '{key}'")
            return raw_data[key]

        def _get(key: str, default: Any) -> Any:
            """获取可选字段，缺失则使用默认值"""
            val = raw_data.get(key)
            return default if val is None else val

        def _to_port(key: str) -> int:
            val = _get(key, DEFAULT_PORT)
            try:
                port = int(val)
            except (TypeError, ValueError):
                raise ConfigError(f"端口格式无效 '{key}': {val}")
            if not 0 < port < 65536:
                raise ConfigError(f"端口超出范围 '{key}': {port}")
            return port

        def _to_timeout(key: str) -> float:
            val = _get(key, DEFAULT_TIMEOUT)
            try:
                timeout = float(val)
            except (TypeError, ValueError):
                raise ConfigError(f"超时格式无效 '{key}': {val}")
            if timeout <= 0:
                raise ConfigError(f"超时必须为正数 '{key}': {timeout}")
            return timeout

        def _to_encoding(key: str) -> str:
            val = str(_get(key, "utf-8"))
            try:
                resolve_encoding(val)
            except EncodingError:
                raise ConfigError(f"编码无效 '{key}': {val}")
            return val

        dump = _get("dump_path", None)

        # --- 构建对象 ---
        return QueryConfig(
            host=str(_req("host")).strip(),
            port=_to_port("port"),
            bind_ip=str(_get("bind_ip", "0.0.0.0")),
            timeout=_to_timeout("timeout"),
            name_encoding=_to_encoding("name_encoding"),
            dump_path=Path(dump) if dump else None,
        )

    except Exception as e:
        if isinstance(e, ConfigError):
            raise
        raise ConfigError(f"配置生成失败: {e}") from e


def load_config_from_toml(file_path: Path, profile: str = "default") -> QueryConfig:
    """从 TOML 文件加载配置。

    支持多层级查找策略:
    1. [profile.xxx]: 优先查找指定的 profile 块。
    2. [a2s]: 单目标配置块。
    3. Root: 兼容根目录直接配置。

    Args:
        file_path: TOML 文件路径。
        profile: 配置预设名。默认为 "default"。

    Returns:
        QueryConfig: 配置对象。

    Raises:
        ConfigError: 文件读取失败或 Profile 不存在。
    """
    return create_config_from_dict(read_toml_section(file_path, profile))


def read_toml_section(file_path: Path, profile: str = "default") -> dict[str, Any]:
    """读取 TOML 文件中对应 profile 的原始字典 (不做校验)。"""
    if not file_path.exists():
        raise ConfigError(f"配置文件未找到: {file_path}")

    try:
        with open(file_path, "rb") as f:
            data = tomllib.load(f)
    except Exception as e:
        raise ConfigError(f"读取 TOML 失败: {e}") from e

    # 优先查找 profile
    if "profile" in data:
        if profile not in data["profile"]:
            raise ConfigError(f"未找到预设: [profile.{profile}]")
        return dict(data["profile"][profile])

    if "a2s" in data:
        if profile != "default":
            logger.warning(f"配置仅包含 [a2s] 节，忽略 profile='{profile}'。")
        return dict(data["a2s"])

    # 兼容根目录直接配置
    return dict(data)


# 字段映射表 (Config Field -> Env Suffix)
ENV_MAP = {
    "host": "HOST",
    "port": "PORT",
    "bind_ip": "BIND_IP",
    "timeout": "TIMEOUT",
    "name_encoding": "NAME_ENCODING",
    "dump_path": "DUMP_PATH",
}


def read_env() -> dict[str, Any]:
    """收集所有 `A2S_` 前缀的环境变量 (不做校验)。"""
    raw_data = {}
    for cfg_key, env_suffix in ENV_MAP.items():
        val = os.environ.get(f"A2S_{env_suffix}")
        if val is not None:
            raw_data[cfg_key] = val
    return raw_data


def load_config_from_env() -> QueryConfig:
    """从环境变量加载配置 (Docker/Cloud Friendly)。

    例如: `A2S_HOST` -> `host`，`A2S_TIMEOUT` -> `timeout`。

    Raises:
        ConfigError: 未检测到任何相关环境变量。
    """
    raw_data = read_env()
    if not raw_data:
        raise ConfigError("未检测到 A2S_ 前缀的环境变量")

    return create_config_from_dict(raw_data)
