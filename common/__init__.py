"""Common modules for tcp-pingpong.

This package contains shared code used by both client and server:
- protocol: wire constants, timing defaults, TRACE log level
- connection: Role, Connection and transport exceptions
- message: Message type, reply construction and decoding
- io: single-shot receive and fire-and-forget send
- report: Reporting abstractions
"""

from common.connection import (
    AcceptError,
    BindError,
    ConnectError,
    Connection,
    ConnectionState,
    ReceiveError,
    Role,
    SendError,
    TransportError,
)
from common.message import DecodeError, Message, ProtocolError
from common.protocol import (
    DEFAULT_CONNECT_TIMEOUT_S,
    DEFAULT_MAX_HANDLERS,
    DEFAULT_RECEIVE_TIMEOUT_S,
    MAX_RECEIVE_SIZE,
    MIN_RECEIVE_SIZE,
    PING_PAYLOAD,
    PONG_SUFFIX,
)

__all__ = [
    # Protocol
    "MIN_RECEIVE_SIZE",
    "MAX_RECEIVE_SIZE",
    "PING_PAYLOAD",
    "PONG_SUFFIX",
    "DEFAULT_CONNECT_TIMEOUT_S",
    "DEFAULT_RECEIVE_TIMEOUT_S",
    "DEFAULT_MAX_HANDLERS",
    # Connection
    "Role",
    "ConnectionState",
    "Connection",
    "Message",
    # Exceptions
    "TransportError",
    "BindError",
    "AcceptError",
    "ConnectError",
    "ReceiveError",
    "SendError",
    "ProtocolError",
    "DecodeError",
]
