"""Terminal input decoding and the event channel feeding the session loop.

``read_key`` turns raw stdin bytes into normalized key tokens. ``InputEvents``
runs the blocking reads on a background thread and delivers keys, plus
periodic redraw ticks, through one ordered queue.
"""

from __future__ import annotations

import os
import queue
import select
import threading
from dataclasses import dataclass

ESC_SEQUENCE_TIMEOUT_MS = 25
TICK_SECONDS = 0.25
POLL_TIMEOUT_MS = 100
_PENDING_BYTES: list[bytes] = []

_CONTROL_KEYS = {
    b"\x03": "CTRL_C",
    b"\x04": "CTRL_D",
    b"\x07": "CTRL_G",
    b"\x0e": "CTRL_N",
    b"\x10": "CTRL_P",
    b"\x15": "CTRL_U",
    b"\t": "TAB",
    b"\r": "ENTER",
    b"\n": "ENTER",
    b"\x08": "BACKSPACE",
    b"\x7f": "BACKSPACE",
}
_ARROW_KEYS = {b"A": "UP", b"B": "DOWN", b"C": "RIGHT", b"D": "LEFT"}


def _read_ready_byte(fd: int, timeout_ms: int) -> bytes | None:
    ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
    if not ready:
        return None
    ch = os.read(fd, 1)
    if not ch:
        return None
    return ch


def _utf8_length(lead: int) -> int:
    if lead >= 0xF0:
        return 4
    if lead >= 0xE0:
        return 3
    if lead >= 0xC0:
        return 2
    return 1


def _read_utf8_char(fd: int, lead: bytes) -> str:
    data = lead
    for _ in range(_utf8_length(lead[0]) - 1):
        part = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if part is None:
            break
        data += part
    return data.decode("utf-8", errors="replace")


def _read_csi(fd: int) -> str:
    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return "ESC"
    if seq in _ARROW_KEYS:
        return _ARROW_KEYS[seq]
    # SGR mouse reports and other CSI sequences run until a final byte.
    payload = [seq]
    while not 0x40 <= payload[-1][0] <= 0x7E:
        part = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if part is None or len(payload) > 64:
            return "ESC"
        payload.append(part)
    if payload[0] == b"<":
        return "MOUSE"
    return "UNKNOWN"


def read_key(fd: int, timeout_ms: int | None = None) -> str:
    """Read one key token from ``fd``; returns ``""`` on timeout or EOF."""
    if _PENDING_BYTES:
        ch = _PENDING_BYTES.pop(0)
    else:
        if timeout_ms is not None:
            ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
            if not ready:
                return ""

        ch = os.read(fd, 1)
        if not ch:
            return ""

    if ch in _CONTROL_KEYS:
        return _CONTROL_KEYS[ch]

    if ch != b"\x1b":
        if ch[0] < 0x20:
            return f"CTRL_{chr(ch[0] + 0x40)}"
        return _read_utf8_char(fd, ch)

    # Escape, Alt-modified keys, and CSI/SS3 sequences.
    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return "ESC"
    if seq == b"[":
        return _read_csi(fd)
    if seq == b"O":
        final = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if final in _ARROW_KEYS:
            return _ARROW_KEYS[final]
        return "ESC"
    if seq in {b"\x7f", b"\x08"}:
        return "ALT_BACKSPACE"
    if seq == b"\x1b" or seq[0] < 0x20:
        _PENDING_BYTES.append(seq)
        return "ESC"
    return f"ALT_{_read_utf8_char(fd, seq)}"


@dataclass(frozen=True)
class Event:
    kind: str
    key: str = ""


class InputEvents:
    """Single ordered channel of key and tick events for the session loop.

    One thread performs blocking key reads; another posts a tick every
    ``tick_seconds`` so the foreground can redraw after resizes. The
    foreground consumes with ``next()`` and stops both threads via ``close()``.
    """

    def __init__(self, stdin_fd: int, tick_seconds: float = TICK_SECONDS) -> None:
        self.stdin_fd = stdin_fd
        self.tick_seconds = tick_seconds
        self._queue: queue.Queue[Event] = queue.Queue()
        self._stop = threading.Event()
        self._threads = [
            threading.Thread(target=self._read_keys, name="histsift-input", daemon=True),
            threading.Thread(target=self._post_ticks, name="histsift-tick", daemon=True),
        ]
        for thread in self._threads:
            thread.start()

    def _read_keys(self) -> None:
        while not self._stop.is_set():
            key = read_key(self.stdin_fd, timeout_ms=POLL_TIMEOUT_MS)
            if key:
                self._queue.put(Event("key", key))

    def _post_ticks(self) -> None:
        while not self._stop.wait(self.tick_seconds):
            if self._queue.empty():
                self._queue.put(Event("tick"))

    def next(self) -> Event:
        """Block until the next event is available."""
        return self._queue.get()

    def close(self) -> None:
        """Stop both threads and wait for them, so no later keystroke is consumed."""
        self._stop.set()
        for thread in self._threads:
            thread.join(timeout=2 * POLL_TIMEOUT_MS / 1000)
