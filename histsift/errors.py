"""Exception types raised across histsift.

Only fatal conditions get an exception class. Recoverable problems such as
unparseable time bounds or a malformed config file are handled in place.
"""

from __future__ import annotations


class HistsiftError(Exception):
    """Base class for errors that end a histsift invocation."""


class StoreError(HistsiftError):
    """The history store failed to answer a list, search, or count call."""


class TerminalError(HistsiftError):
    """The controlling terminal could not be put into interactive mode."""
