"""Single-shot ping/pong exchange for tcp-pingpong.

Contains:
- server_exchange: Server-side handler (one receive, one reply)
- client_exchange: Client-side ping with RTT measurement

Each function owns the Connection it is given and closes it before returning.
"""

import logging
import time
from collections.abc import Callable

from common.connection import Connection, ReceiveError, SendError
from common.io import receive_once, send_data
from common.message import DecodeError, decode_reply, make_pong
from common.protocol import PING_PAYLOAD
from session.result import HandlerState, SessionResult, SessionTiming

logger = logging.getLogger(__name__)


async def server_exchange(
    conn: Connection,
    receive_timeout_s: float | None = None,
) -> HandlerState:
    """Handle one accepted connection.

    Receives once, replies with the payload followed by b"pong!" without
    waiting for the write to complete, then releases the connection.

    Receive failures (reset, timeout) and send failures are logged and
    contained to this connection.

    Args:
        conn: Accepted connection, owned by this handler.
        receive_timeout_s: Maximum wait for the first bytes; None or 0
            waits forever.

    Returns:
        HandlerState.REPLIED or HandlerState.FAILED.
    """
    state = HandlerState.ACCEPTED
    peer = conn.peer
    try:
        state = HandlerState.RECEIVING
        logger.debug(f"Handler {peer}: {state.value}")
        try:
            msg = await receive_once(conn, timeout_s=receive_timeout_s)
        except ReceiveError as e:
            logger.warning(f"Handler {peer}: {e}")
            return HandlerState.FAILED

        logger.info(
            f"Handler {peer}: received {len(msg.payload)} bytes, complete={msg.is_complete}"
        )
        if msg.closed_by_peer:
            logger.info(f"Handler {peer}: closed by peer before sending data")
            return HandlerState.FAILED

        try:
            send_data(conn, make_pong(msg.payload))
        except SendError as e:
            logger.warning(f"Handler {peer}: {e}")
        return HandlerState.REPLIED
    finally:
        conn.close()


async def client_exchange(
    conn: Connection,
    timing: SessionTiming,
    payload: bytes = PING_PAYLOAD,
    receive_timeout_s: float | None = None,
    clock: Callable[[], float] = time.monotonic,
) -> SessionResult:
    """Send payload and wait for exactly one reply.

    Args:
        conn: Established client connection, owned by this exchange.
        timing: Session timestamps; send_start and reply_received are set here.
        payload: Bytes to send.
        receive_timeout_s: Maximum wait for the reply; None or 0 waits forever.
        clock: Monotonic clock in seconds.

    Returns:
        SessionResult. On success it carries the trimmed reply and RTT.
        closed_by_peer is set when the server closed without sending.
    """
    bytes_sent = 0
    try:
        timing.send_start = clock()
        try:
            logger.info("Sending ping...")
            bytes_sent = send_data(conn, payload)

            logger.info("Receiving pong...")
            msg = await receive_once(conn, timeout_s=receive_timeout_s)
        except (SendError, ReceiveError) as e:
            logger.warning(f"Exchange failed: {e}")
            return SessionResult(
                success=False,
                connect_ms=timing.connect_ms,
                bytes_sent=bytes_sent,
                error=e,
            )

        if msg.closed_by_peer:
            logger.info("Connection closed by server")
            return SessionResult(
                success=False,
                connect_ms=timing.connect_ms,
                bytes_sent=bytes_sent,
                closed_by_peer=True,
            )

        try:
            reply = decode_reply(msg.payload)
        except DecodeError as e:
            logger.warning(f"Exchange failed: {e}")
            return SessionResult(
                success=False,
                connect_ms=timing.connect_ms,
                bytes_sent=bytes_sent,
                bytes_received=len(msg.payload),
                error=e,
            )
        timing.reply_received = clock()

        return SessionResult(
            success=True,
            reply=reply,
            rtt_ms=timing.rtt_ms,
            connect_ms=timing.connect_ms,
            bytes_sent=bytes_sent,
            bytes_received=len(msg.payload),
        )
    finally:
        conn.close()
