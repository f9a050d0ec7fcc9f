# tests/test_core.py
"""
测试 A2SClient 的两轮往返编排：发送顺序、Token 回填、错误传播与资源释放。
"""

import logging
import struct
from unittest.mock import AsyncMock, patch

import pytest

from a2s_core import core
from a2s_core.config import DEFAULT_PORT, DEFAULT_TIMEOUT
from a2s_core.exceptions import (
    ProtocolError,
    ProtocolErrorKind,
    TransportError,
    TransportErrorKind,
)
from a2s_core.models import DurationBreakdown, Player
from a2s_core.state import QueryStatus

SERVER = ("127.0.0.1", 27015)


@pytest.fixture
def mock_net():
    """替换 NetworkClient，返回 (类 Mock, async with 得到的实例)"""
    with patch("a2s_core.core.NetworkClient") as client_cls:
        net = client_cls.return_value.__aenter__.return_value
        # 不吞掉 async with 块内的异常
        client_cls.return_value.__aexit__.return_value = False
        net.send = AsyncMock()
        net.receive = AsyncMock()
        yield client_cls, net


@pytest.mark.asyncio
async def test_query_success_flow(valid_config, mock_net, challenge_response, player_response, token):
    client_cls, net = mock_net
    net.receive.side_effect = [
        (challenge_response, SERVER),
        (player_response, SERVER),
    ]

    session = await core.A2SClient(valid_config).query()

    assert session.status is QueryStatus.DONE
    assert session.succeeded
    assert session.token == token
    assert session.raw_players == player_response

    sent = [c.args[0] for c in net.send.await_args_list]
    assert sent == [
        bytes.fromhex("FF FF FF FF 55 FF FF FF FF"),
        b"\xff\xff\xff\xff\x55" + token,
    ]
    assert net.receive.await_count == 2
    net.receive.assert_awaited_with(valid_config.timeout)

    client_cls.assert_called_once_with(valid_config)
    client_cls.return_value.__aexit__.assert_awaited_once()


@pytest.mark.asyncio
async def test_get_players_attaches_duration(valid_config, mock_net, challenge_response, player_response):
    _, net = mock_net
    net.receive.side_effect = [
        (challenge_response, SERVER),
        (player_response, SERVER),
    ]

    result = await core.A2SClient(valid_config).get_players()

    assert result.count == 2
    assert all(isinstance(p, Player) for p in result.players)
    assert [p.name for p in result.players] == ["[D]---->T.N.W<----", "Killer !!!"]
    assert result.players[1].duration_clean == DurationBreakdown(0, 7, 14)
    assert str(result.players[0].duration_clean) == "0h 8m 34s"


@pytest.mark.asyncio
async def test_challenge_timeout_aborts(valid_config, mock_net):
    client_cls, net = mock_net
    net.receive.side_effect = TransportError("0.5s 内未收到响应", TransportErrorKind.TIMEOUT)

    with pytest.raises(TransportError) as exc:
        await core.A2SClient(valid_config).query()

    assert exc.value.kind is TransportErrorKind.TIMEOUT
    # 第二轮请求不会发出
    assert net.send.await_count == 1
    client_cls.return_value.__aexit__.assert_awaited_once()


@pytest.mark.asyncio
async def test_unexpected_challenge_header(valid_config, mock_net, player_response):
    client_cls, net = mock_net
    net.receive.return_value = (player_response, SERVER)

    with pytest.raises(ProtocolError) as exc:
        await core.A2SClient(valid_config).query()

    assert exc.value.kind is ProtocolErrorKind.UNEXPECTED_HEADER
    assert net.send.await_count == 1
    client_cls.return_value.__aexit__.assert_awaited_once()


@pytest.mark.asyncio
async def test_truncated_player_response(valid_config, mock_net, challenge_response, player_response):
    client_cls, net = mock_net
    net.receive.side_effect = [
        (challenge_response, SERVER),
        (player_response[:-3], SERVER),
    ]

    with pytest.raises(ProtocolError) as exc:
        await core.A2SClient(valid_config).get_players()

    assert exc.value.kind is ProtocolErrorKind.TRUNCATED
    client_cls.return_value.__aexit__.assert_awaited_once()

    # 失败的会话随异常一起返回，原始响应得以保留
    session = exc.value.session
    assert session.status is QueryStatus.ERROR
    assert not session.succeeded
    assert session.raw_players == player_response[:-3]
    assert session.result is None
    assert "数据包被截断" in session.last_error


@pytest.mark.asyncio
async def test_queries_do_not_share_transport(valid_config, mock_net, challenge_response, player_response):
    client_cls, net = mock_net
    net.receive.side_effect = [
        (challenge_response, SERVER),
        (player_response, SERVER),
    ] * 2

    client = core.A2SClient(valid_config)
    await client.get_players()
    await client.get_players()

    assert client_cls.call_count == 2
    assert client_cls.return_value.__aexit__.await_count == 2


def test_query_players_sync(mock_net, challenge_response, player_response):
    client_cls, net = mock_net
    net.receive.side_effect = [
        (challenge_response, SERVER),
        (player_response, SERVER),
    ]

    result = core.query_players("127.0.0.1", 27015, timeout=1.0)

    assert result.count == 2
    config = client_cls.call_args.args[0]
    assert config.target == ("127.0.0.1", 27015)
    assert config.timeout == 1.0


@pytest.mark.asyncio
@pytest.mark.parametrize("duration", [float("nan"), float("inf"), -1.0])
async def test_invalid_duration_is_protocol_error(valid_config, mock_net, challenge_response, duration):
    _, net = mock_net
    players = b"\xff\xff\xff\xff\x44\x01\x00bot\x00" + struct.pack("<if", 0, duration)
    net.receive.side_effect = [
        (challenge_response, SERVER),
        (players, SERVER),
    ]

    with pytest.raises(ProtocolError) as exc:
        await core.A2SClient(valid_config).get_players()

    assert exc.value.kind is ProtocolErrorKind.INVALID_FIELD
    assert exc.value.session.status is QueryStatus.ERROR


@pytest.mark.asyncio
async def test_challenge_failure_session(valid_config, mock_net):
    _, net = mock_net
    net.receive.side_effect = TransportError("0.5s 内未收到响应", TransportErrorKind.TIMEOUT)

    with pytest.raises(TransportError) as exc:
        await core.A2SClient(valid_config).query()

    session = exc.value.session
    assert session.status is QueryStatus.ERROR
    assert session.token == b""
    assert session.raw_players == b""


@pytest.mark.asyncio
async def test_player_response_debug_log(valid_config, mock_net, challenge_response, player_response, caplog):
    _, net = mock_net
    net.receive.side_effect = [
        (challenge_response, SERVER),
        (player_response, SERVER),
    ]

    with caplog.at_level(logging.DEBUG, logger="a2s_core.core"):
        await core.A2SClient(valid_config).query()

    assert "A2S_PLAYER 响应 (52 字节): Header=44 Count=02" in caplog.text


def test_query_players_defaults(mock_net, challenge_response, player_response):
    client_cls, net = mock_net
    net.receive.side_effect = [
        (challenge_response, SERVER),
        (player_response, SERVER),
    ]

    core.query_players("127.0.0.1")

    config = client_cls.call_args.args[0]
    assert config.port == DEFAULT_PORT
    assert config.timeout == DEFAULT_TIMEOUT
