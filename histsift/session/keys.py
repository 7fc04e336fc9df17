"""Key interpretation for the interactive picker.

``handle_key`` is a pure transition: it returns the next state, an optional
output string that ends the session, and whether the input text changed and
the results must be fetched again.
"""

from __future__ import annotations

from dataclasses import dataclass

from .state import SessionState

CANCEL_KEYS = frozenset({"ESC", "CTRL_C", "CTRL_D", "CTRL_G"})
NEWER_KEYS = frozenset({"DOWN", "CTRL_N"})
OLDER_KEYS = frozenset({"UP", "CTRL_P"})
JUMP_KEYS = {f"ALT_{digit}": digit for digit in range(1, 10)}


@dataclass(frozen=True)
class KeyOutcome:
    state: SessionState
    output: str | None = None
    requery: bool = False


def _command_or_input(state: SessionState, index: int) -> str:
    if 0 <= index < len(state.results):
        return state.results[index].command
    return state.input


def drop_last_word(text: str) -> str:
    """Remove the last space-separated word; a single word leaves nothing."""
    words = text.split(" ")
    if len(words) <= 1:
        return ""
    return " ".join(words[:-1])


def is_printable_key(key: str) -> bool:
    return len(key) == 1 and key.isprintable()


def handle_key(key: str, state: SessionState) -> KeyOutcome:
    """Apply one key token to ``state``."""
    if key in CANCEL_KEYS:
        return KeyOutcome(state, output="")

    if key == "ENTER":
        return KeyOutcome(state, output=_command_or_input(state, state.selection or 0))

    if key in JUMP_KEYS:
        # Out-of-range jumps submit the typed text instead.
        return KeyOutcome(state, output=_command_or_input(state, (state.selection or 0) + JUMP_KEYS[key]))

    if is_printable_key(key):
        return KeyOutcome(state.with_input(state.input + key), requery=True)

    if key == "BACKSPACE":
        return KeyOutcome(state.with_input(state.input[:-1]), requery=True)

    if key == "ALT_BACKSPACE":
        return KeyOutcome(state.with_input(drop_last_word(state.input)), requery=True)

    if key == "CTRL_U":
        return KeyOutcome(state.with_input(""), requery=True)

    if key in NEWER_KEYS:
        return KeyOutcome(state.select_newer())

    if key in OLDER_KEYS:
        return KeyOutcome(state.select_older())

    return KeyOutcome(state)
