"""Client runner for tcp-pingpong.

Contains run_client_session(), which connects and performs one exchange,
and run_client(), which reports the result and returns an exit code.
"""

import asyncio
import logging
import time
from collections.abc import Callable
from enum import IntEnum

from client.connect import client_connect
from common.connection import ConnectError
from common.protocol import DEFAULT_CONNECT_TIMEOUT_S, DEFAULT_RECEIVE_TIMEOUT_S, PING_PAYLOAD
from common.report import ConnectReport
from session.exchange import client_exchange
from session.report import SessionReport
from session.result import SessionResult, SessionTiming

logger = logging.getLogger(__name__)


class ExitCode(IntEnum):
    """Exit codes for client operations."""

    SUCCESS = 0  # Reply received and timed
    FAILED = 1  # Connect, send, receive or decode error
    CLOSED_BY_PEER = 2  # Server closed without replying


async def run_client_session(
    host: str,
    port: int,
    payload: bytes = PING_PAYLOAD,
    connect_timeout_s: float | None = DEFAULT_CONNECT_TIMEOUT_S,
    receive_timeout_s: float | None = DEFAULT_RECEIVE_TIMEOUT_S,
    clock: Callable[[], float] = time.monotonic,
) -> SessionResult:
    """Connect to host:port, send payload, wait for one reply.

    The connection is closed before returning, whatever the outcome.

    Raises:
        ConnectError: If the server cannot be reached.
    """
    timing = SessionTiming(connect_start=clock())
    conn = await client_connect(host, port, timeout_s=connect_timeout_s)
    return await client_exchange(
        conn,
        timing,
        payload=payload,
        receive_timeout_s=receive_timeout_s,
        clock=clock,
    )


def run_client(
    host: str,
    port: int,
    connect_timeout_s: float | None = DEFAULT_CONNECT_TIMEOUT_S,
    receive_timeout_s: float | None = DEFAULT_RECEIVE_TIMEOUT_S,
) -> int:
    """Run one ping/pong exchange. Returns exit code."""
    try:
        result = asyncio.run(
            run_client_session(
                host,
                port,
                connect_timeout_s=connect_timeout_s,
                receive_timeout_s=receive_timeout_s,
            )
        )
    except ConnectError as e:
        logger.error(f"Connect failed: {e}")
        ConnectReport(connected=False, error=e).print()
        return ExitCode.FAILED

    ConnectReport(connected=True, peer=f"{host}:{port}", connect_ms=result.connect_ms).print()

    session_report = SessionReport(result=result)
    session_report.print()

    if result.closed_by_peer:
        return ExitCode.CLOSED_BY_PEER
    if not session_report.success():
        return ExitCode.FAILED
    return ExitCode.SUCCESS
