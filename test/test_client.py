"""Tests for client connection, session and exit-code mapping."""

import asyncio

import pytest

import client.runner
from client.connect import client_connect
from client.runner import ExitCode, run_client, run_client_session
from common.connection import ConnectError, ReceiveError
from common.message import DecodeError, make_pong
from session.result import SessionResult

LOOPBACK = "127.0.0.1"
REPLY_DELAY_S = 0.2


async def _close_without_reply(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
    # Half-close so the client sees EOF, then drain its ping before closing
    writer.write_eof()
    await reader.read()
    writer.close()


async def _reply_garbage(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
    await reader.read(1024)
    writer.write(b"\xff\xfe\xfd")
    await writer.drain()
    await reader.read()
    writer.close()


async def _reply_after_delay(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
    data = await reader.read(1024)
    await asyncio.sleep(REPLY_DELAY_S)
    writer.write(make_pong(data))
    await writer.drain()
    await reader.read()
    writer.close()


@pytest.mark.integration
class TestClientConnect:
    """Tests for client_connect."""

    def test_refused(self, free_port: int) -> None:
        with pytest.raises(ConnectError, match=f"{LOOPBACK}:{free_port}"):
            asyncio.run(client_connect(LOOPBACK, free_port))

    @pytest.mark.parametrize("port", [0, -1, 65536])
    def test_invalid_port(self, port: int) -> None:
        with pytest.raises(ConnectError, match="Invalid port"):
            asyncio.run(client_connect(LOOPBACK, port))

    def test_unresolvable_host(self) -> None:
        with pytest.raises(ConnectError):
            asyncio.run(client_connect("host.invalid", 9000, timeout_s=5))


@pytest.mark.integration
class TestRunClientSession:
    """Tests for run_client_session against scripted servers."""

    def test_connect_error_propagates(self, free_port: int) -> None:
        with pytest.raises(ConnectError):
            asyncio.run(run_client_session(LOOPBACK, free_port))

    def test_closed_by_peer(self, raw_server) -> None:
        async def scenario():
            async with raw_server(_close_without_reply) as port:
                return await run_client_session(LOOPBACK, port)

        result = asyncio.run(scenario())
        assert result.closed_by_peer is True
        assert result.rtt_ms is None
        assert result.reply is None

    def test_undecodable_reply(self, raw_server) -> None:
        async def scenario():
            async with raw_server(_reply_garbage) as port:
                return await run_client_session(LOOPBACK, port)

        result = asyncio.run(scenario())
        assert result.success is False
        assert isinstance(result.error, DecodeError)
        assert result.measurement is None

    def test_rtt_includes_connection_setup(self, serving) -> None:
        ticks = iter([0.0, 1.0, 1.25])

        async def scenario():
            async with serving() as listener:
                return await run_client_session(
                    LOOPBACK, listener.port, clock=lambda: next(ticks)
                )

        result = asyncio.run(scenario())
        assert result.reply == "ping\npong!"
        assert result.rtt_ms == pytest.approx(1250.0)
        assert result.connect_ms == pytest.approx(1000.0)

    def test_rtt_reflects_reply_delay(self, raw_server) -> None:
        async def scenario():
            async with raw_server(_reply_after_delay) as port:
                return await run_client_session(LOOPBACK, port)

        result = asyncio.run(scenario())
        assert result.reply == "ping\npong!"
        assert result.rtt_ms is not None
        assert result.rtt_ms >= REPLY_DELAY_S * 1000 * 0.9
        assert result.connect_ms is not None
        assert result.connect_ms >= 0

    def test_receive_timeout(self, raw_server) -> None:
        async def never_reply(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
            await reader.read()
            writer.close()

        async def scenario():
            async with raw_server(never_reply) as port:
                return await run_client_session(LOOPBACK, port, receive_timeout_s=0.1)

        result = asyncio.run(scenario())
        assert isinstance(result.error, ReceiveError)


@pytest.mark.unit
class TestRunClientExitCodes:
    """Tests for run_client's report and exit-code mapping."""

    def _patch_session(self, monkeypatch: pytest.MonkeyPatch, result: SessionResult) -> None:
        async def fake_session(*_args, **_kwargs) -> SessionResult:
            return result

        monkeypatch.setattr(client.runner, "run_client_session", fake_session)

    def test_success(self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
        self._patch_session(
            monkeypatch,
            SessionResult(success=True, reply="ping\npong!", rtt_ms=1.0, connect_ms=0.5),
        )
        assert run_client(LOOPBACK, 9000) == ExitCode.SUCCESS
        out = capsys.readouterr().out
        assert "Connect: SUCCESS" in out
        assert "Session: SUCCESS" in out

    def test_closed_by_peer(self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
        self._patch_session(monkeypatch, SessionResult(success=False, closed_by_peer=True))
        assert run_client(LOOPBACK, 9000) == ExitCode.CLOSED_BY_PEER
        assert "closed by server" in capsys.readouterr().out

    def test_decode_error(self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
        self._patch_session(
            monkeypatch, SessionResult(success=False, error=DecodeError("not text"))
        )
        assert run_client(LOOPBACK, 9000) == ExitCode.FAILED
        assert "Session: FAILED (not text)" in capsys.readouterr().out

    def test_connect_error(self, free_port: int, capsys: pytest.CaptureFixture[str]) -> None:
        assert run_client(LOOPBACK, free_port) == ExitCode.FAILED
        assert "Connect: FAILED" in capsys.readouterr().out
