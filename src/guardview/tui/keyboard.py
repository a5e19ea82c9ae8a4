"""
InputPoller for non-blocking terminal input in the render loop.

Called once after each draw. Never waits: a zero-timeout select() tells
whether input is pending, and os.read() takes whatever bytes are available.
Does NOT change terminal modes; TerminalSession puts the fd in raw input mode
so single keypresses and Ctrl+C arrive as bytes.

Recognized events:
- KeyEvent for keypresses (escape sequences such as arrows or mouse reports
  arrive as a single key starting with ESC, ending at the sequence terminator)
- ResizeEvent after notify_resize() was called from a SIGWINCH handler
"""

from __future__ import annotations

import os
import select
from dataclasses import dataclass

CTRL_C = "\x03"
ESCAPE = "\x1b"
QUIT_KEYS = frozenset({"q", "Q", CTRL_C})


@dataclass(frozen=True)
class KeyEvent:
    """A keypress; key is the raw character or escape sequence."""

    key: str

    @property
    def is_ctrl_c(self) -> bool:
        return self.key == CTRL_C


@dataclass(frozen=True)
class ResizeEvent:
    """The terminal was resized; the next draw picks up the new size."""


InputEvent = KeyEvent | ResizeEvent


def is_quit(event: InputEvent | None) -> bool:
    """True for q, Q and Ctrl+C."""
    return isinstance(event, KeyEvent) and event.key in QUIT_KEYS


def _key_length(buffer: str) -> int:
    """
    Length of the first key in buffer.

    Handles:
    - CSI sequences (ESC [ params final), including SGR mouse reports
      such as ESC [ < 0;10;5 M
    - X10 mouse reports (ESC [ M plus three raw bytes)
    - SS3 keys (ESC O x) and Alt+key (ESC x)

    A sequence cut off by the end of the buffer is taken whole.
    """
    if not buffer.startswith(ESCAPE) or len(buffer) == 1:
        return 1

    if buffer[1] == "O":
        return min(3, len(buffer))
    if buffer[1] != "[":
        return 2

    for i in range(2, len(buffer)):
        if "@" <= buffer[i] <= "~":
            if i == 2 and buffer[i] == "M":
                return min(6, len(buffer))
            return i + 1
    return len(buffer)


class InputPoller:
    """
    Zero-timeout terminal event check.

    Example:
        poller = InputPoller(sys.stdin.fileno())
        loop.add_signal_handler(signal.SIGWINCH, poller.notify_resize)
        ...
        if is_quit(poller.poll()):
            shutdown.fire()
    """

    def __init__(self, fd: int | None, read_size: int = 64) -> None:
        """
        Initialize poller.

        Args:
            fd: File descriptor to read keys from (None disables key input)
            read_size: Maximum bytes taken from the fd per read
        """
        self._fd = fd
        self._read_size = read_size
        self._pending = ""
        self._resized = False

    def notify_resize(self) -> None:
        """Record a resize; reported by the next poll()."""
        self._resized = True

    def poll(self) -> InputEvent | None:
        """
        Return the next pending event without blocking.

        Returns:
            ResizeEvent, KeyEvent, or None if nothing is pending
        """
        if self._resized:
            self._resized = False
            return ResizeEvent()

        if not self._pending:
            self._pending = self._read_available()
        if not self._pending:
            return None

        length = _key_length(self._pending)
        key, self._pending = self._pending[:length], self._pending[length:]
        return KeyEvent(key)

    def _read_available(self) -> str:
        if self._fd is None:
            return ""
        if not select.select([self._fd], [], [], 0)[0]:
            return ""
        try:
            data = os.read(self._fd, self._read_size)
        except BlockingIOError:
            return ""
        return data.decode("utf-8", errors="ignore")
