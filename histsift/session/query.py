"""Fetch results for the current input text."""

from __future__ import annotations

import logging

from ..settings import SearchMode
from ..store import HistoryStore
from .state import SessionState

RESULT_LIMIT = 200

logger = logging.getLogger(__name__)


def requery(state: SessionState, store: HistoryStore, mode: SearchMode) -> SessionState:
    """Run list/search for ``state.input`` and reset the selection.

    Store errors are not caught here; they end the session.
    """
    if state.input == "":
        results = store.list(RESULT_LIMIT, True)
    else:
        results = store.search(RESULT_LIMIT, mode, state.input)
    logger.debug("requery %r -> %d results", state.input, len(results))
    return state.with_results(results)
