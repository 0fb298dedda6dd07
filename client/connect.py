"""Client connection establishment for tcp-pingpong."""

import asyncio
import logging

from common.connection import ConnectError, Connection, Role
from common.protocol import DEFAULT_CONNECT_TIMEOUT_S, MAX_PORT

logger = logging.getLogger(__name__)


async def client_connect(
    host: str,
    port: int,
    timeout_s: float | None = DEFAULT_CONNECT_TIMEOUT_S,
) -> Connection:
    """Open one outbound TCP connection. No retry.

    Raises:
        ConnectError: On invalid port, resolution failure, refusal,
            unreachable host or timeout.
    """
    if not 0 < port <= MAX_PORT:
        raise ConnectError(f"Invalid port {port}: must be 1-{MAX_PORT}")

    logger.info(f"Connecting to {host}:{port}...")
    try:
        if timeout_s:
            reader, writer = await asyncio.wait_for(asyncio.open_connection(host, port), timeout_s)
        else:
            reader, writer = await asyncio.open_connection(host, port)
    except asyncio.TimeoutError as e:
        raise ConnectError(f"Timeout ({timeout_s}s) connecting to {host}:{port}") from e
    except OSError as e:
        raise ConnectError(f"Cannot connect to {host}:{port}: {e}") from e

    conn = Connection(reader=reader, writer=writer, role=Role.CLIENT)
    logger.info(f"Connected to {conn.peer}")
    return conn
