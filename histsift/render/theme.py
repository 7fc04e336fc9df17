"""ANSI palette for the picker.

Values are SGR parameter strings (``"1;31"``), combined into escape
sequences by the canvas when a frame is serialized.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by the renderer."""

    title: str
    help_key: str
    dim: str
    border: str
    success: str
    failure: str
    ago: str
    selected_command: str


DEFAULT_THEME = UITheme(
    title="1",
    help_key="1",
    dim="90",
    border="",
    success="32",
    failure="31",
    ago="34",
    selected_command="1;31",
)
