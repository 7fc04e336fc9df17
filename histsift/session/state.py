"""Session state for the interactive picker.

The state is replaced, never mutated, by key handling and requery. Every
constructor path keeps ``selection`` inside ``results``.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from ..history import History


@dataclass(frozen=True)
class SessionState:
    input: str = ""
    results: tuple[History, ...] = ()
    selection: int | None = None

    def __post_init__(self) -> None:
        if self.selection is not None and not 0 <= self.selection < len(self.results):
            raise ValueError(f"selection {self.selection} outside {len(self.results)} results")

    def with_input(self, text: str) -> "SessionState":
        return replace(self, input=text)

    def with_results(self, results) -> "SessionState":
        """Replace results and reset the highlight to the first row."""
        results = tuple(results)
        return replace(self, results=results, selection=0 if results else None)

    def select_newer(self) -> "SessionState":
        """Move the highlight toward index 0 (the row nearest the input box)."""
        if not self.results:
            return self
        current = self.selection or 0
        return replace(self, selection=max(0, current - 1))

    def select_older(self) -> "SessionState":
        """Move the highlight toward the last row, stopping there."""
        if not self.results:
            return self
        if self.selection is None:
            return replace(self, selection=0)
        return replace(self, selection=min(len(self.results) - 1, self.selection + 1))

    def selected_record(self) -> History | None:
        if not self.results:
            return None
        return self.results[self.selection or 0]
