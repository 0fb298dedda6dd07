"""Connection state for tcp-pingpong.

Contains:
- Role: Enum for client/server role
- ConnectionState: Enum for open/closed
- TransportError and its subclasses for bind/accept/connect/receive/send failures
- Connection: Established connection over an asyncio stream pair
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class Role(Enum):
    """Role in the client/server protocol."""

    CLIENT = "client"
    SERVER = "server"


class ConnectionState(Enum):
    """Lifecycle state of a Connection."""

    OPEN = "open"
    CLOSED = "closed"


class TransportError(Exception):
    """Raised when the stream transport fails."""

    pass


class BindError(TransportError):
    """Raised when the listener cannot acquire its port."""

    pass


class AcceptError(TransportError):
    """Raised when a single incoming connection cannot be accepted."""

    pass


class ConnectError(TransportError):
    """Raised when the client cannot reach the server."""

    pass


class ReceiveError(TransportError):
    """Raised when a receive fails (peer reset, transport error, timeout)."""

    pass


class SendError(TransportError):
    """Raised when a send cannot be issued."""

    pass


@dataclass
class Connection:
    """Established connection state.

    Owned by exactly one task. Closed exactly once; further close() calls
    are no-ops.
    """

    reader: asyncio.StreamReader
    writer: asyncio.StreamWriter
    role: Role
    state: ConnectionState = ConnectionState.OPEN

    @property
    def peer(self) -> Any:
        """Remote address as reported by the transport."""
        return self.writer.get_extra_info("peername")

    @property
    def is_open(self) -> bool:
        return self.state is ConnectionState.OPEN

    def close(self) -> None:
        """Release the connection without waiting for the close handshake.

        Buffered writes are flushed by the transport before the socket closes.
        """
        if not self.is_open:
            return
        self.state = ConnectionState.CLOSED
        self.writer.close()
        logger.debug(f"Closed {self.role.value} connection to {self.peer}")
