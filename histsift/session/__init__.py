"""Interactive picker: state, key handling, requery, and the session loop."""

from .keys import KeyOutcome, handle_key
from .query import RESULT_LIMIT, requery
from .state import SessionState

__all__ = ["KeyOutcome", "RESULT_LIMIT", "SessionState", "handle_key", "requery"]
