"""Compact duration and "time ago" labels for result rows.

Only the largest unit survives: ``3 days 4 hours`` renders as ``3d``. Negative
inputs (still-running sentinel, clock skew) clamp to zero.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import datetime, timedelta, timezone

import humanize

from .history import History

_UNIT_ABBREVIATIONS = {
    "year": "y",
    "years": "y",
    "month": "mo",
    "months": "mo",
    "week": "w",
    "weeks": "w",
    "day": "d",
    "days": "d",
    "hour": "h",
    "hours": "h",
    "minute": "m",
    "minutes": "m",
    "second": "s",
    "seconds": "s",
    "millisecond": "ms",
    "milliseconds": "ms",
}
_PART_SEPARATOR_RE = re.compile(r", |\s+and\s+")


def _first_unit(delta: timedelta) -> str:
    if timedelta(0) < delta < timedelta(seconds=1):
        words = humanize.precisedelta(delta, minimum_unit="milliseconds", format="%d")
    else:
        whole = timedelta(seconds=int(delta.total_seconds()))
        words = humanize.precisedelta(whole, minimum_unit="seconds", format="%d")
    first = _PART_SEPARATOR_RE.split(words.strip(), maxsplit=1)[0]
    amount, _, unit = first.partition(" ")
    return f"{amount}{_UNIT_ABBREVIATIONS.get(unit, unit)}"


def format_duration(nanos: int) -> str:
    """Render a nanosecond duration as its largest compact unit."""
    millis = max(nanos, 0) // 1_000_000
    return _first_unit(timedelta(milliseconds=millis))


def format_ago(timestamp: datetime, now: datetime | None = None) -> str:
    """Render time elapsed since ``timestamp``; future timestamps show ``0s ago``."""
    if now is None:
        now = datetime.now(timezone.utc)
    elapsed = max(now - timestamp, timedelta(0))
    return f"{_first_unit(elapsed)} ago"


def format_durations(records: Iterable[History], now: datetime | None = None) -> list[tuple[str, str]]:
    """Return ``(duration, ago)`` label pairs for each record, in order."""
    if now is None:
        now = datetime.now(timezone.utc)
    return [(format_duration(record.duration), format_ago(record.timestamp, now)) for record in records]
