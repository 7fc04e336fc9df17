"""Non-interactive search: one store query narrowed by structured filters.

Filters combine with AND and keep the store's order. Time bounds are parsed
as natural-language dates in a fixed UK English dialect; a bound that does
not parse excludes every record rather than being ignored.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TextIO

import dateparser

from .history import History
from .output import format_history_list
from .settings import Settings
from .store import HistoryStore

logger = logging.getLogger(__name__)

DATE_LOCALES = ["en-GB"]
DATE_SETTINGS = {
    "TIMEZONE": "UTC",
    "TO_TIMEZONE": "UTC",
    "RETURN_AS_TIMEZONE_AWARE": True,
    "PARSERS": ["timestamp", "absolute-time"],
}


@dataclass(frozen=True)
class HistoryFilter:
    exit: int | None = None
    exclude_exit: int | None = None
    cwd: str | None = None
    exclude_cwd: str | None = None
    before: str | None = None
    after: str | None = None


def resolve_cwd(cwd: str | None) -> str | None:
    """Expand ``"."`` to the process working directory; other values pass through."""
    if cwd == ".":
        return os.getcwd()
    return cwd


def parse_time_bound(text: str, now: datetime) -> datetime | None:
    """Parse ``text`` relative to ``now``; ``None`` when it is not a date."""
    relative_base = now.astimezone(timezone.utc).replace(tzinfo=None)
    settings = dict(DATE_SETTINGS, RELATIVE_BASE=relative_base)
    parsed = dateparser.parse(text, locales=DATE_LOCALES, settings=settings)
    if parsed is None:
        logger.debug("time bound %r did not parse", text)
    return parsed


Predicate = Callable[[History], bool]


def _reject_all(_record: History) -> bool:
    return False


def _time_predicate(text: str, now: datetime, keep: Callable[[datetime, datetime], bool]) -> Predicate:
    bound = parse_time_bound(text, now)
    if bound is None:
        return _reject_all
    return lambda record: keep(record.timestamp, bound)


def build_predicates(filters: HistoryFilter, now: datetime) -> list[Predicate]:
    predicates: list[Predicate] = []
    if filters.exit is not None:
        predicates.append(lambda record: record.exit == filters.exit)
    if filters.exclude_exit is not None:
        predicates.append(lambda record: record.exit != filters.exclude_exit)
    if filters.exclude_cwd is not None:
        predicates.append(lambda record: record.cwd != filters.exclude_cwd)
    if filters.cwd is not None:
        predicates.append(lambda record: record.cwd == filters.cwd)
    if filters.before is not None:
        predicates.append(_time_predicate(filters.before, now, lambda ts, bound: ts <= bound))
    if filters.after is not None:
        predicates.append(_time_predicate(filters.after, now, lambda ts, bound: ts >= bound))
    return predicates


def filter_history(
    records: Iterable[History],
    filters: HistoryFilter,
    now: datetime | None = None,
) -> list[History]:
    """Keep records passing every filter, in their original order."""
    if now is None:
        now = datetime.now(timezone.utc)
    predicates = build_predicates(filters, now)
    return [record for record in records if all(predicate(record) for predicate in predicates)]


def run_batch(
    store: HistoryStore,
    settings: Settings,
    query: Sequence[str],
    filters: HistoryFilter,
    human: bool = False,
    cmd_only: bool = False,
    out: TextIO | None = None,
) -> list[History]:
    """Search, filter, and print matching history; returns the printed records."""
    results = store.search(None, settings.search_mode, " ".join(query))
    kept = filter_history(results, filters)
    logger.debug("batch search kept %d of %d records", len(kept), len(results))
    stream = out if out is not None else sys.stdout
    for line in format_history_list(kept, human=human, cmd_only=cmd_only):
        stream.write(line + "\n")
    return kept
