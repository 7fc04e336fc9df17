"""Interactive session loop.

Wires the terminal guard, the input event channel, key interpretation,
requery, and drawing. Each step finishes before the next starts: a key's
requery completes before the frame is drawn and before the next key is read.
"""

from __future__ import annotations

import logging
import shutil
import sys
from collections.abc import Callable, Sequence

from ..input import InputEvents
from ..render import build_frame, draw_frame
from ..settings import Settings
from ..store import HistoryStore
from ..terminal import TerminalController
from .keys import handle_key
from .query import requery
from .state import SessionState

logger = logging.getLogger(__name__)


def run_session(
    state: SessionState,
    settings: Settings,
    store: HistoryStore,
    next_event: Callable,
    draw: Callable,
    terminal_size: Callable[[], tuple[int, int]],
) -> str:
    """Drive the picker until a key emits output, and return that output."""
    state = requery(state, store, settings.search_mode)
    while True:
        history_count = store.count()
        columns, lines = terminal_size()
        draw(build_frame(state, columns, lines, settings.style, history_count))

        event = next_event()
        if event.kind != "key":
            continue
        outcome = handle_key(event.key, state)
        if outcome.output is not None:
            return outcome.output
        state = outcome.state
        if outcome.requery:
            state = requery(state, store, settings.search_mode)


def _terminal_size() -> tuple[int, int]:
    term = shutil.get_terminal_size((80, 24))
    return term.columns, term.lines


def select_history(query: Sequence[str], settings: Settings, store: HistoryStore) -> str:
    """Open the interactive picker and return the chosen command.

    Returns ``""`` when the user cancels. The terminal is restored before this
    returns or raises.
    """
    stdin_fd = sys.stdin.fileno()
    stdout_fd = sys.stdout.fileno()
    terminal = TerminalController(stdin_fd, stdout_fd)
    with terminal.raw_mode():
        events = InputEvents(stdin_fd)
        try:
            chosen = run_session(
                SessionState(input=" ".join(query)),
                settings,
                store,
                next_event=events.next,
                draw=lambda frame: draw_frame(frame, stdout_fd),
                terminal_size=_terminal_size,
            )
        finally:
            events.close()
    logger.debug("session finished with %r", chosen)
    return chosen
