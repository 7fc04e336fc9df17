"""Terminal control for the interactive session.

Owns raw-mode lifecycle, alternate-screen switching, and mouse capture.
The ``raw_mode`` guard restores the saved tty state on every exit path.
"""

from __future__ import annotations

import contextlib
import logging
import os
import termios
import tty

from .errors import TerminalError

logger = logging.getLogger(__name__)

ENTER_TUI_SEQUENCE = b"\x1b[?1049h\x1b[?1000h\x1b[?1006h"
EXIT_TUI_SEQUENCE = b"\x1b[?1000l\x1b[?1006l\x1b[?25h\x1b[?1049l"


class TerminalController:
    """Manage terminal mode transitions for one session."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        """Capture tty state and bind stdin/stdout file descriptors."""
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        try:
            self._saved_tty_state = termios.tcgetattr(stdin_fd)
        except termios.error as exc:
            raise TerminalError(f"interactive mode needs a terminal on stdin: {exc}") from exc

    def enable_tui_mode(self) -> None:
        """Enter raw alternate-screen mode with mouse capture enabled."""
        try:
            tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        except termios.error as exc:
            raise TerminalError(f"cannot enable raw mode: {exc}") from exc
        os.write(self.stdout_fd, ENTER_TUI_SEQUENCE)
        logger.debug("terminal entered raw mode")

    def disable_tui_mode(self) -> None:
        """Restore normal terminal state and the main screen buffer."""
        os.write(self.stdout_fd, EXIT_TUI_SEQUENCE)
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)
        logger.debug("terminal restored")

    @contextlib.contextmanager
    def raw_mode(self):
        """Context manager that brackets code with TUI enter/exit calls."""
        try:
            self.enable_tui_mode()
            yield self
        finally:
            self.disable_tui_mode()
