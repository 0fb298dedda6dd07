"""Message types and payload construction for tcp-pingpong.

The wire protocol is not self-describing: the server replies with the raw
bytes it received followed by the literal suffix b"pong!", with no delimiter
and no length prefix. The client expects that reply to decode as UTF-8.
"""

from dataclasses import dataclass

from common.protocol import PONG_SUFFIX, TEXT_ENCODING


class ProtocolError(Exception):
    """Raised when a peer's bytes do not follow the ping/pong protocol."""

    pass


class DecodeError(ProtocolError):
    """Raised when reply bytes are not valid text."""

    pass


@dataclass(frozen=True)
class Message:
    """Bytes produced by a single receive.

    is_complete is True when the peer has half-closed the stream and no
    more data will arrive.
    """

    payload: bytes
    is_complete: bool

    @property
    def closed_by_peer(self) -> bool:
        """True if the peer closed without sending anything."""
        return self.is_complete and not self.payload


def make_pong(payload: bytes) -> bytes:
    """Build the reply for a received payload."""
    return payload + PONG_SUFFIX


def decode_reply(payload: bytes) -> str:
    """Decode reply bytes and trim surrounding whitespace.

    Raises:
        DecodeError: If the bytes are not valid UTF-8.
    """
    try:
        text = payload.decode(TEXT_ENCODING)
    except UnicodeDecodeError as e:
        raise DecodeError(f"Reply is not valid {TEXT_ENCODING}: {e.reason} at byte {e.start}") from e
    return text.strip()
