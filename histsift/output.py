"""Plain-text history listing for the batch path.

Rows print oldest first, so the most relevant match ends up nearest the
prompt. Columns are tab-delimited and padded to a common width.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import tzinfo

from .history import History
from .render.ansi import text_width
from .timefmt import format_duration

COLUMN_PADDING = 2
HUMAN_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def history_columns(record: History, human: bool, cmd_only: bool, tz: tzinfo | None = None) -> list[str]:
    command = record.command.strip()
    if cmd_only:
        return [command]
    if human:
        local_time = record.timestamp.astimezone(tz).strftime(HUMAN_TIME_FORMAT)
        return [local_time, command, format_duration(record.duration)]
    return [str(record.timestamp_nanos), command, str(record.duration)]


def align_columns(rows: Sequence[Sequence[str]], padding: int = COLUMN_PADDING) -> list[str]:
    """Pad every column but the last to its widest cell plus ``padding``."""
    widths: dict[int, int] = {}
    for row in rows:
        for idx, cell in enumerate(row[:-1]):
            widths[idx] = max(widths.get(idx, 0), text_width(cell))
    lines: list[str] = []
    for row in rows:
        cells = [cell + " " * (widths[idx] - text_width(cell) + padding) for idx, cell in enumerate(row[:-1])]
        cells.extend(row[-1:])
        lines.append("".join(cells))
    return lines


def format_history_list(
    records: Sequence[History],
    human: bool = False,
    cmd_only: bool = False,
    tz: tzinfo | None = None,
) -> list[str]:
    rows = [history_columns(record, human, cmd_only, tz) for record in reversed(records)]
    return align_columns(rows)
