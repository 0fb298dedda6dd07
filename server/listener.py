"""TCP listener for tcp-pingpong.

Binds the server port and yields accepted connections as an async iterator.
"""

import asyncio
import errno
import logging
import socket
from collections.abc import AsyncIterator

from common.connection import AcceptError, BindError, Connection, Role
from common.protocol import ACCEPT_PAUSE_S, MAX_PORT

logger = logging.getLogger(__name__)

# Accept errors caused by resource exhaustion; accepting pauses instead of spinning
_RESOURCE_ERRNOS = frozenset({errno.EMFILE, errno.ENFILE, errno.ENOBUFS, errno.ENOMEM})


def _bind(port: int, host: str | None) -> socket.socket:
    """Create a listening socket. Raises OSError on failure, leaving nothing open."""
    if host is None:
        if socket.has_dualstack_ipv6():
            return socket.create_server(("", port), family=socket.AF_INET6, dualstack_ipv6=True)
        return socket.create_server(("", port))
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    return socket.create_server((host, port), family=family)


class Listener:
    """Listening TCP socket producing a lazy, endless stream of Connections."""

    def __init__(self, sock: socket.socket) -> None:
        self._sock = sock
        self._closed = False

    @classmethod
    def start(cls, port: int, host: str | None = None) -> "Listener":
        """Bind port on host (all interfaces if None) and start listening.

        Port 0 picks an ephemeral port, see Listener.port.

        Raises:
            BindError: If the port is invalid, in use, or not permitted.
        """
        if not 0 <= port <= MAX_PORT:
            raise BindError(f"Invalid port {port}: must be 0-{MAX_PORT}")
        try:
            sock = _bind(port, host)
        except OSError as e:
            raise BindError(f"Cannot listen on port {port}: {e}") from e
        sock.setblocking(False)

        listener = cls(sock)
        bound = "*" if host is None else host
        logger.info(f"Listening on {bound} port {listener.port}")
        return listener

    @property
    def port(self) -> int:
        """Bound port number."""
        return self._sock.getsockname()[1]

    @property
    def closed(self) -> bool:
        return self._closed

    async def accept(self) -> AsyncIterator[Connection]:
        """Yield accepted connections until the listener is closed.

        A failed accept is logged as AcceptError and accepting continues.
        """
        loop = asyncio.get_running_loop()
        while not self._closed:
            try:
                client_sock, addr = await loop.sock_accept(self._sock)
            except OSError as e:
                if self._closed:
                    return
                logger.warning(str(AcceptError(f"Accept failed: {e}")))
                if e.errno in _RESOURCE_ERRNOS:
                    await asyncio.sleep(ACCEPT_PAUSE_S)
                continue

            try:
                reader, writer = await asyncio.open_connection(sock=client_sock)
            except OSError as e:
                logger.warning(str(AcceptError(f"Cannot set up connection from {addr}: {e}")))
                client_sock.close()
                continue

            logger.debug(f"Accepted connection from {addr}")
            yield Connection(reader=reader, writer=writer, role=Role.SERVER)

    def close(self) -> None:
        """Stop listening.

        Cancel any task iterating accept() before calling this.
        """
        if self._closed:
            return
        self._closed = True
        self._sock.close()
        logger.info("Listener closed")
