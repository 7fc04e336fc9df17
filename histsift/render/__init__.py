"""Frame layout for the interactive picker.

``build_frame`` is a pure function of session state, viewport size, density
policy, and the current history count. ``draw_frame`` writes the result to
the terminal. The result list is bottom anchored: row 0 sits directly above
the input box and older rows stack upward.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime, timezone

from .. import __version__
from ..history import RUNNING_DURATION
from ..session.state import SessionState
from ..settings import Style
from ..timefmt import format_durations
from .ansi import text_width
from .canvas import Canvas, Rect
from .theme import DEFAULT_THEME, UITheme

COMPACT_HEIGHT_THRESHOLD = 14
HIGHLIGHT_SYMBOL = ">> "
TITLE = f"histsift v{__version__}"


@dataclass(frozen=True)
class Frame:
    lines: list[str]
    cursor: tuple[int, int]
    compact: bool


def use_compact(style: Style, height: int) -> bool:
    if style == Style.COMPACT:
        return True
    if style == Style.FULL:
        return False
    return height < COMPACT_HEIGHT_THRESHOLD


def jump_hint(index: int, selection: int | None) -> str:
    """Alt+digit label for rows 1-9 above the highlighted one."""
    if selection is None:
        return "   "
    offset = index - selection
    if 0 < offset < 10:
        return f" {offset} "
    return "   "


def collapse_whitespace(command: str) -> str:
    return command.replace("\n", " ").replace("\t", " ")


def visible_window(result_count: int, selection: int | None, rows: int) -> range:
    """Indices shown in a pane of ``rows`` rows, keeping the selection visible."""
    if rows <= 0 or result_count == 0:
        return range(0)
    offset = max(0, (selection or 0) - rows + 1)
    return range(offset, min(result_count, offset + rows))


def result_rows(
    state: SessionState,
    indices: range,
    theme: UITheme,
    now: datetime,
) -> list[list[tuple[str, str]]]:
    """Build styled spans for each visible result, in index order."""
    records = [state.results[i] for i in indices]
    labels = format_durations(records, now)
    widest = max((len(duration) + len(ago) for duration, ago in labels), default=0)

    rows: list[list[tuple[str, str]]] = []
    for index, record, (duration, ago) in zip(indices, records, labels):
        selected = index == state.selection
        ago = ago.rjust(widest - len(duration))
        succeeded = record.exit == 0 or record.duration == RUNNING_DURATION
        rows.append(
            [
                (HIGHLIGHT_SYMBOL if selected else " " * len(HIGHLIGHT_SYMBOL), ""),
                (jump_hint(index, state.selection), ""),
                (duration, theme.success if succeeded else theme.failure),
                (" ", ""),
                (ago, theme.ago),
                (" ", ""),
                (collapse_whitespace(record.command), theme.selected_command if selected else ""),
            ]
        )
    return rows


def _draw_results(canvas: Canvas, area: Rect, state: SessionState, theme: UITheme, now: datetime) -> None:
    indices = visible_window(len(state.results), state.selection, area.height)
    for offset, spans in enumerate(result_rows(state, indices, theme, now)):
        canvas.put_spans(area.x, area.bottom - offset, spans, area.width)


def _build_full(
    canvas: Canvas,
    state: SessionState,
    history_count: int,
    theme: UITheme,
    now: datetime,
) -> tuple[int, int]:
    inner = Rect(1, 1, max(0, canvas.width - 2), max(0, canvas.height - 2))
    header = Rect(inner.x, inner.y, inner.width, 2)
    query_box = Rect(inner.x, max(inner.y, inner.bottom - 2), inner.width, 3)
    results_box = Rect(inner.x, header.y + 2, inner.width, max(1, query_box.y - header.y - 2))

    left = Rect(header.x, header.y, header.width // 2, 2)
    right = Rect(header.x + left.width, header.y, header.width - left.width, 2)
    canvas.put(left.x, left.y, TITLE, theme.title, left.width)
    canvas.put_spans(
        left.x,
        left.y + 1,
        [("Press ", ""), ("Esc", theme.help_key), (" to exit.", "")],
        left.width,
    )
    canvas.put_aligned(right, right.y, [(f"history count: {history_count}", "")], "right")

    canvas.box(results_box, "History", theme.border)
    _draw_results(canvas, results_box.inner(), state, theme, now)

    canvas.box(query_box, "Query", theme.border)
    canvas.put(query_box.x + 1, query_box.y + 1, state.input, "", max(0, query_box.width - 2))

    return query_box.x + text_width(state.input) + 1, query_box.y + 1


def _build_compact(
    canvas: Canvas,
    state: SessionState,
    history_count: int,
    theme: UITheme,
    now: datetime,
) -> tuple[int, int]:
    inner = Rect(1, 0, max(0, canvas.width - 2), canvas.height)
    third = inner.width // 3
    title = Rect(inner.x, inner.y, third, 1)
    help_area = Rect(inner.x + third, inner.y, third, 1)
    stats = Rect(inner.x + 2 * third, inner.y, inner.width - 2 * third, 1)
    canvas.put(title.x, title.y, TITLE, theme.dim, title.width)
    canvas.put_aligned(
        help_area,
        help_area.y,
        [("Esc", f"{theme.dim};{theme.help_key}"), (" to exit", theme.dim)],
        "center",
    )
    canvas.put_aligned(stats, stats.y, [(f"history count: {history_count}", theme.dim)], "right")

    input_row = inner.bottom
    results = Rect(inner.x, inner.y + 1, inner.width, max(0, input_row - inner.y - 1))
    _draw_results(canvas, results, state, theme, now)

    prompt = "] "
    canvas.put(inner.x, input_row, prompt + state.input, "", inner.width)
    return inner.x + len(prompt) + text_width(state.input), input_row


def build_frame(
    state: SessionState,
    width: int,
    height: int,
    style: Style,
    history_count: int,
    theme: UITheme = DEFAULT_THEME,
    now: datetime | None = None,
) -> Frame:
    """Lay out one frame; the cursor sits one column past the typed input."""
    if now is None:
        now = datetime.now(timezone.utc)
    canvas = Canvas(width, height)
    compact = use_compact(style, height)
    if compact:
        cursor = _build_compact(canvas, state, history_count, theme, now)
    else:
        cursor = _build_full(canvas, state, history_count, theme, now)
    return Frame(lines=canvas.lines(), cursor=cursor, compact=compact)


def draw_frame(frame: Frame, fd: int) -> None:
    """Write a composed frame and park the cursor at the input position."""
    col, row = frame.cursor
    out = ["\033[?25l\033[H"]
    out.append("\r\n".join(frame.lines))
    out.append(f"\033[{row + 1};{col + 1}H\033[?25h")
    os.write(fd, "".join(out).encode("utf-8", errors="replace"))
