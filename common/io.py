"""Stream I/O helpers for tcp-pingpong.

Contains:
- receive_once: Single-shot receive returning a Message
- send_data: Fire-and-forget send
"""

import asyncio
import logging

from common.connection import Connection, ReceiveError, SendError
from common.message import Message
from common.protocol import MAX_RECEIVE_SIZE, TRACE

logger = logging.getLogger(__name__)


async def receive_once(
    conn: Connection,
    max_size: int = MAX_RECEIVE_SIZE,
    timeout_s: float | None = None,
) -> Message:
    """Receive up to max_size bytes, returning as soon as any are available.

    Returns Message(payload, is_complete). An empty payload with
    is_complete=True means the peer closed without sending.

    Raises:
        ReceiveError: On peer reset, transport error or timeout.
    """
    try:
        if timeout_s:
            data = await asyncio.wait_for(conn.reader.read(max_size), timeout_s)
        else:
            data = await conn.reader.read(max_size)
    except asyncio.TimeoutError as e:
        raise ReceiveError(f"No data from {conn.peer} within {timeout_s}s") from e
    except OSError as e:
        raise ReceiveError(f"Receive from {conn.peer} failed: {e}") from e

    msg = Message(payload=data, is_complete=conn.reader.at_eof())
    logger.log(TRACE, f"Received {data!r} from {conn.peer} (complete={msg.is_complete})")
    return msg


def send_data(conn: Connection, data: bytes) -> int:
    """Queue data for sending without waiting for it to be written.

    Returns bytes queued.

    Raises:
        SendError: If the connection is already closed or the transport
            refuses the write.
    """
    if not conn.is_open or conn.writer.is_closing():
        raise SendError(f"Cannot send to {conn.peer}: connection closing")
    try:
        conn.writer.write(data)
    except (OSError, RuntimeError) as e:
        raise SendError(f"Send to {conn.peer} failed: {e}") from e
    logger.log(TRACE, f"Sent {data!r} to {conn.peer}")
    return len(data)
