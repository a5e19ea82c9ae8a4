"""
TerminalSession: scoped ownership of the terminal for the dashboard.

On enter:
1. Input fd switched to raw input mode (no line buffering, no echo, Ctrl+C
   delivered as a byte instead of SIGINT). Output processing is left on so
   rich's line output still renders correctly.
2. Mouse capture enabled
3. Rich Live started on the alternate screen with the cursor hidden
4. Screen cleared

On exit, whatever was acquired is released exactly once, whether the block
returned normally or raised. Every teardown step is independent: a failing
step is logged and discarded so it can never replace the exception that
ended the block.
"""

from __future__ import annotations

import logging
import termios

from rich.console import Console, RenderableType
from rich.live import Live
from rich.text import Text

from guardview.exceptions import TerminalSetupError

logger = logging.getLogger(__name__)

# X10 press/release, button-motion tracking, SGR extended coordinates
MOUSE_CAPTURE_ON = "\x1b[?1000h\x1b[?1002h\x1b[?1006h"
MOUSE_CAPTURE_OFF = "\x1b[?1000l\x1b[?1002l\x1b[?1006l"


def _raw_input_attrs(attrs: list) -> list:
    """Terminal attributes for raw input, derived from the current ones."""
    attrs[0] &= ~(termios.BRKINT | termios.ICRNL | termios.INPCK | termios.ISTRIP | termios.IXON)
    attrs[3] &= ~(termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG)
    attrs[6][termios.VMIN] = 1
    attrs[6][termios.VTIME] = 0
    return attrs


class TerminalSession:
    """
    Context manager that owns raw mode, mouse capture and the alternate screen.

    Example:
        with TerminalSession(console, sys.stdin.fileno()) as session:
            session.draw(frame)
            session.show_cursor()
    """

    def __init__(self, console: Console, input_fd: int | None = None) -> None:
        """
        Initialize session.

        Args:
            console: Rich Console to draw on
            input_fd: Terminal input fd to put in raw mode (None skips raw mode)
        """
        self.console = console
        self._input_fd = input_fd
        self._saved_attrs: list | None = None
        self._mouse_enabled = False
        self._live: Live | None = None
        self._acquired = False
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    def __enter__(self) -> TerminalSession:
        self.acquire()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.release()
        return False

    def acquire(self) -> None:
        """
        Switch the terminal into dashboard mode.

        Raises:
            TerminalSetupError: If any step fails; earlier steps are undone
        """
        if self._acquired:
            return
        self._acquired = True
        step = "raw_mode"
        try:
            if self._input_fd is not None:
                self._saved_attrs = termios.tcgetattr(self._input_fd)
                termios.tcsetattr(
                    self._input_fd,
                    termios.TCSANOW,
                    _raw_input_attrs(termios.tcgetattr(self._input_fd)),
                )

            step = "mouse_capture"
            if self.console.is_terminal:
                self.console.file.write(MOUSE_CAPTURE_ON)
                self.console.file.flush()
                self._mouse_enabled = True

            step = "alternate_screen"
            self._live = Live(
                Text(""),
                console=self.console,
                screen=True,
                auto_refresh=False,
                redirect_stdout=False,
                redirect_stderr=False,
            )
            self._live.start()

            step = "clear"
            self.console.clear()
        except Exception as e:
            self.release()
            raise TerminalSetupError(step, e) from e

    def draw(self, renderable: RenderableType) -> None:
        """Replace the whole screen with renderable in one refresh."""
        if self._live is None:
            raise RuntimeError("TerminalSession is not acquired")
        self._live.update(renderable, refresh=True)

    def show_cursor(self) -> None:
        self.console.show_cursor(True)

    def release(self) -> None:
        """Restore the terminal. Only the first call has an effect."""
        if self._released:
            return
        self._released = True
        self._teardown()

    def _teardown(self) -> None:
        if self._live is not None:
            try:
                self._live.stop()
            except Exception as e:
                logger.debug("Leaving alternate screen failed: %s", e)
            self._live = None

        if self._mouse_enabled:
            try:
                self.console.file.write(MOUSE_CAPTURE_OFF)
                self.console.file.flush()
            except Exception as e:
                logger.debug("Disabling mouse capture failed: %s", e)
            self._mouse_enabled = False

        if self._saved_attrs is not None:
            try:
                termios.tcsetattr(self._input_fd, termios.TCSADRAIN, self._saved_attrs)
            except Exception as e:
                logger.debug("Restoring terminal mode failed: %s", e)
            self._saved_attrs = None
