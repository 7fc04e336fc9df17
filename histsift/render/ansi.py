"""Display-width measurement for terminal cells.

Wide East Asian characters take two columns and combining marks take none,
so layout math works on columns rather than string length.
"""

from __future__ import annotations

import unicodedata


def char_display_width(ch: str) -> int:
    """Return the terminal column width of one character."""
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def text_width(text: str) -> int:
    return sum(char_display_width(ch) for ch in text)


def clip_text(text: str, max_cols: int) -> str:
    """Trim ``text`` to at most ``max_cols`` display columns."""
    if max_cols <= 0:
        return ""
    out: list[str] = []
    col = 0
    for ch in text:
        w = char_display_width(ch)
        if col + w > max_cols:
            break
        out.append(ch)
        col += w
    return "".join(out)
