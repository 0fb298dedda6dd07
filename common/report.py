"""Reporting abstractions for tcp-pingpong.

Contains:
- Report ABC: Base class for all reports
- ListenReport: Report after the server tries to bind
- ConnectReport: Report after the client tries to connect
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


class Report(ABC):
    """Abstract base class for reports."""

    @abstractmethod
    def print(self) -> None:
        """Print the report to stdout."""
        pass

    @abstractmethod
    def success(self) -> bool:
        """Return True if the report indicates success."""
        pass


@dataclass
class ListenReport(Report):
    """Report after the listener binds (or fails to).

    When listening=True, port is required.
    When listening=False, error should be set.
    """

    listening: bool
    port: int | None = None
    error: Exception | None = None

    def __post_init__(self) -> None:
        """Validate invariants."""
        if self.listening and self.port is None:
            raise ValueError("port is required when listening=True")

    def print(self) -> None:
        """Print the listen report."""
        if self.listening:
            print(f"Listen: SUCCESS (port={self.port})")
        else:
            print(f"Listen: FAILED ({self.error})")

    def success(self) -> bool:
        """Return True if the listener is bound."""
        return self.listening


@dataclass
class ConnectReport(Report):
    """Report after the client connects (or fails to)."""

    connected: bool
    peer: Any = None
    error: Exception | None = None
    connect_ms: float | None = None

    def print(self) -> None:
        """Print the connect report."""
        if self.connected:
            timing = f", {self.connect_ms:.2f}ms" if self.connect_ms is not None else ""
            print(f"Connect: SUCCESS (peer={self.peer}{timing})")
        else:
            print(f"Connect: FAILED ({self.error})")

    def success(self) -> bool:
        """Return True if the connection was established."""
        return self.connected
