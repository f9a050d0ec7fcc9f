# src/a2s_core/cli.py
"""
命令行入口 (a2s-players)

配置优先级: 命令行参数 > TOML 配置文件 > A2S_ 环境变量 (.env 会被自动加载)。
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

from dotenv import load_dotenv

from . import __version__
from .config import QueryConfig, create_config_from_dict, read_env, read_toml_section
from .core import A2SClient
from .exceptions import A2SError, ConfigError
from .models import Player, PlayerListResponse

logger = logging.getLogger("a2s_core.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="a2s-players",
        description="通过 A2S_PLAYER 协议查询 Source 引擎服务器的在线玩家。",
    )
    parser.add_argument("host", nargs="?", help="服务器地址")
    parser.add_argument("port", nargs="?", type=int, help="查询端口 (默认 27015)")
    parser.add_argument("-t", "--timeout", type=float, help="单次响应超时秒数")
    parser.add_argument("-c", "--config", type=Path, help="TOML 配置文件")
    parser.add_argument("-p", "--profile", default="default", help="TOML 预设名")
    parser.add_argument("-e", "--encoding", dest="name_encoding", help="玩家名编码")
    parser.add_argument(
        "-d", "--dump", dest="dump_path", type=Path, help="保存原始响应的文件"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="输出调试日志")
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser


def load_cli_config(args: argparse.Namespace) -> QueryConfig:
    """按优先级合并三个配置来源。"""
    # 优先从当前工作目录加载 .env，不覆盖已存在的环境变量
    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)

    raw: dict[str, Any] = read_env()
    if args.config is not None:
        raw.update(read_toml_section(args.config, args.profile))

    overrides = {
        "host": args.host,
        "port": args.port,
        "timeout": args.timeout,
        "name_encoding": args.name_encoding,
        "dump_path": args.dump_path,
    }
    raw.update({k: v for k, v in overrides.items() if v is not None})

    logger.debug(f"CLI: 合并后配置项 {sorted(raw)}")
    return create_config_from_dict(raw)


def render_players(response: PlayerListResponse[Player]) -> str:
    """将玩家列表格式化为终端表格。"""
    lines = [f"Players: {response.count}"]
    if not response.players:
        return lines[0]

    width = max(len(p.name) for p in response.players)
    for p in response.players:
        lines.append(
            f"  [{p.index:>3}] {p.name:<{width}}  score={p.score:<6} {p.duration_clean}"
        )
    return "\n".join(lines)


def dump_raw_response(path: Path, data: bytes) -> bool:
    try:
        path.write_bytes(data)
    except OSError as e:
        print(f"写入原始响应失败: {e}", file=sys.stderr)
        return False
    logger.info(f"原始响应已写入 {path}")
    return True


def main(argv: Optional[Sequence[str]] = None) -> int:
    """程序主入口点。"""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - [%(levelname)s] - %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        config = load_cli_config(args)
    except ConfigError as e:
        logger.error(f"配置错误: {e}")
        return 2

    try:
        session = asyncio.run(A2SClient(config).query())
    except A2SError as e:
        print(f"查询失败: {e}", file=sys.stderr)
        # 失败前已收到的玩家响应同样落盘
        if config.dump_path is not None and e.session and e.session.raw_players:
            dump_raw_response(config.dump_path, e.session.raw_players)
        return 1

    if config.dump_path is not None:
        if not dump_raw_response(config.dump_path, session.raw_players):
            return 1

    assert session.result is not None
    print(render_players(session.result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
