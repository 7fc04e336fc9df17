"""Cell grid used to compose one frame before it is serialized to ANSI."""

from __future__ import annotations

from dataclasses import dataclass

from .ansi import char_display_width, clip_text, text_width

# Second half of a wide character.
_CONTINUATION = ""


@dataclass(frozen=True)
class Rect:
    x: int
    y: int
    width: int
    height: int

    @property
    def bottom(self) -> int:
        return self.y + self.height - 1

    def inner(self) -> "Rect":
        """Area inside a one-cell border."""
        return Rect(self.x + 1, self.y + 1, max(0, self.width - 2), max(0, self.height - 2))


class Canvas:
    def __init__(self, width: int, height: int) -> None:
        self.width = max(0, width)
        self.height = max(0, height)
        self._chars = [[" "] * self.width for _ in range(self.height)]
        self._styles = [[""] * self.width for _ in range(self.height)]

    def put(self, x: int, y: int, text: str, sgr: str = "", max_width: int | None = None) -> int:
        """Write ``text`` at ``(x, y)`` clipped to the canvas; return columns used."""
        if not 0 <= y < self.height or x >= self.width:
            return 0
        limit = self.width - x if max_width is None else min(max_width, self.width - x)
        col = x
        for ch in clip_text(text, limit):
            w = char_display_width(ch)
            if w == 0:
                continue
            if col >= 0:
                self._chars[y][col] = ch
                self._styles[y][col] = sgr
                if w == 2 and col + 1 < self.width:
                    self._chars[y][col + 1] = _CONTINUATION
                    self._styles[y][col + 1] = sgr
            col += w
        return col - x

    def put_spans(self, x: int, y: int, spans: list[tuple[str, str]], max_width: int) -> int:
        """Write consecutive ``(text, sgr)`` spans within ``max_width`` columns."""
        used = 0
        for text, sgr in spans:
            if used >= max_width:
                break
            used += self.put(x + used, y, text, sgr, max_width - used)
        return used

    def put_aligned(self, area: Rect, y: int, spans: list[tuple[str, str]], align: str) -> None:
        total = sum(text_width(text) for text, _ in spans)
        if align == "right":
            x = area.x + max(0, area.width - total)
        elif align == "center":
            x = area.x + max(0, (area.width - total) // 2)
        else:
            x = area.x
        self.put_spans(x, y, spans, area.x + area.width - x)

    def box(self, area: Rect, title: str = "", sgr: str = "") -> None:
        """Draw a plain single-line border with an optional title on the top edge."""
        if area.width < 2 or area.height < 2:
            return
        horizontal = "─" * (area.width - 2)
        self.put(area.x, area.y, f"┌{horizontal}┐", sgr)
        self.put(area.x, area.bottom, f"└{horizontal}┘", sgr)
        for row in range(area.y + 1, area.bottom):
            self.put(area.x, row, "│", sgr)
            self.put(area.x + area.width - 1, row, "│", sgr)
        if title:
            self.put(area.x + 1, area.y, title, sgr, area.width - 2)

    def lines(self) -> list[str]:
        """Serialize rows to ANSI strings, one SGR sequence per style run."""
        out: list[str] = []
        for chars, styles in zip(self._chars, self._styles):
            parts: list[str] = []
            current = ""
            for ch, sgr in zip(chars, styles):
                if sgr != current:
                    parts.append("\033[0m")
                    if sgr:
                        parts.append(f"\033[{sgr}m")
                    current = sgr
                parts.append(ch)
            if current:
                parts.append("\033[0m")
            out.append("".join(parts))
        return out
