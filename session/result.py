"""Session result types for tcp-pingpong.

Contains:
- HandlerState: Terminal and intermediate states of a server-side handler
- SessionTiming: Client timestamps for connect and round-trip time
- RttMeasurement: Reply text and round-trip time
- SessionResult: Result from a client exchange
- LatencyStats / compute_latency_stats: Statistics over many RTT samples
"""

from dataclasses import dataclass
from enum import Enum


class HandlerState(Enum):
    """Server-side handler states.

    ACCEPTED -> RECEIVING -> REPLIED, or ACCEPTED -> RECEIVING -> FAILED.
    """

    ACCEPTED = "accepted"
    RECEIVING = "receiving"
    REPLIED = "replied"
    FAILED = "failed"


@dataclass
class SessionTiming:
    """Monotonic timestamps (seconds) for one client run."""

    connect_start: float
    send_start: float | None = None
    reply_received: float | None = None

    @property
    def connect_ms(self) -> float | None:
        """Time from connect start to send start in milliseconds."""
        if self.send_start is None:
            return None
        return (self.send_start - self.connect_start) * 1000

    @property
    def rtt_ms(self) -> float | None:
        """Time from connect start to reply receipt in milliseconds.

        Includes connection setup; connect_ms is the setup share of it.
        """
        if self.reply_received is None:
            return None
        return max(0.0, (self.reply_received - self.connect_start) * 1000)


@dataclass(frozen=True)
class RttMeasurement:
    """A decoded reply and its round-trip time."""

    reply: str
    rtt_ms: float


@dataclass
class SessionResult:
    """Result from a client exchange.

    Attributes:
        success: True if a reply was received and decoded.
        reply: Decoded reply, trimmed of surrounding whitespace.
        rtt_ms: Round-trip time in milliseconds (success only).
        connect_ms: Connection establishment time in milliseconds.
        bytes_sent: Bytes queued for sending.
        bytes_received: Bytes received in the single receive.
        closed_by_peer: Server closed before sending any data.
        error: Exception if the exchange failed.
    """

    success: bool
    reply: str | None = None
    rtt_ms: float | None = None
    connect_ms: float | None = None
    bytes_sent: int = 0
    bytes_received: int = 0
    closed_by_peer: bool = False
    error: Exception | None = None

    @property
    def measurement(self) -> RttMeasurement | None:
        """Return the RTT measurement, or None if no reply was decoded."""
        if not self.success or self.reply is None or self.rtt_ms is None:
            return None
        return RttMeasurement(reply=self.reply, rtt_ms=self.rtt_ms)


@dataclass
class LatencyStats:
    """Computed latency statistics in milliseconds."""

    count: int
    min_ms: float
    max_ms: float
    avg_ms: float
    p50_ms: float
    p95_ms: float
    p99_ms: float


def compute_latency_stats(rtt_samples_ms: list[float]) -> LatencyStats | None:
    """Compute latency statistics from RTT samples (in milliseconds).

    Returns None if no samples available.
    """
    if not rtt_samples_ms:
        return None

    count = len(rtt_samples_ms)
    samples = sorted(rtt_samples_ms)

    def percentile(sorted_data: list[float], p: float) -> float:
        idx = int(p / 100 * (len(sorted_data) - 1))
        return sorted_data[idx]

    return LatencyStats(
        count=count,
        min_ms=samples[0],
        max_ms=samples[-1],
        avg_ms=sum(samples) / count,
        p50_ms=percentile(samples, 50),
        p95_ms=percentile(samples, 95),
        p99_ms=percentile(samples, 99),
    )
