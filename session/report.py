"""Session reporting for tcp-pingpong.

Contains:
- SessionReport: Report after a client exchange completes
"""

from dataclasses import dataclass

from common.report import Report
from session.result import SessionResult


@dataclass
class SessionReport(Report):
    """Report after a client exchange completes."""

    result: SessionResult

    def print(self) -> None:
        """Print the session report."""
        r = self.result

        if r.closed_by_peer:
            print("Session: CLOSED (connection closed by server)")
            return

        if not r.success:
            print(f"Session: FAILED ({r.error})")
            if r.bytes_sent > 0 or r.bytes_received > 0:
                print(f"         ({r.bytes_sent} bytes sent, {r.bytes_received} bytes received)")
            return

        print(f"Session: SUCCESS (reply={r.reply!r}, RTT={r.rtt_ms:.2f}ms)")
        print(f"         ({r.bytes_sent} bytes sent, {r.bytes_received} bytes received)")

    def success(self) -> bool:
        """Return True if a reply was decoded and timed."""
        return self.result.measurement is not None
