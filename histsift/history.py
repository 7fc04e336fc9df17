"""History record type shared by the store, session, and batch paths."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

RUNNING_DURATION = -1


@dataclass(frozen=True)
class History:
    """One stored command invocation.

    ``duration`` is in nanoseconds; ``RUNNING_DURATION`` marks a command that
    is still running or whose duration was never recorded.
    """

    id: str
    timestamp: datetime
    duration: int
    exit: int
    command: str
    cwd: str
    session: str = ""
    hostname: str = ""

    @classmethod
    def from_row(cls, row) -> "History":
        """Build a record from a store row with a nanosecond epoch timestamp."""
        timestamp_ns = int(row["timestamp"])
        seconds, nanos = divmod(timestamp_ns, 1_000_000_000)
        timestamp = datetime.fromtimestamp(seconds, tz=timezone.utc).replace(microsecond=nanos // 1000)
        return cls(
            id=str(row["id"]),
            timestamp=timestamp,
            duration=int(row["duration"]),
            exit=int(row["exit"]),
            command=str(row["command"]),
            cwd=str(row["cwd"]),
            session=str(row["session"] or ""),
            hostname=str(row["hostname"] or ""),
        )

    @property
    def timestamp_nanos(self) -> int:
        delta = self.timestamp - datetime(1970, 1, 1, tzinfo=timezone.utc)
        return (delta.days * 86_400 + delta.seconds) * 1_000_000_000 + delta.microseconds * 1000
