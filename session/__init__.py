"""Session package for tcp-pingpong.

Contains the single-shot exchange and its results:
- exchange: server_exchange, client_exchange
- result: HandlerState, SessionTiming, RttMeasurement, SessionResult, LatencyStats
- report: SessionReport
"""

from session.exchange import client_exchange, server_exchange
from session.report import SessionReport
from session.result import (
    HandlerState,
    LatencyStats,
    RttMeasurement,
    SessionResult,
    SessionTiming,
    compute_latency_stats,
)

__all__ = [
    "client_exchange",
    "server_exchange",
    "SessionReport",
    "HandlerState",
    "LatencyStats",
    "RttMeasurement",
    "SessionResult",
    "SessionTiming",
    "compute_latency_stats",
]
