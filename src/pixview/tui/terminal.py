"""Terminal abstraction for raw-mode stdin/stdout interaction.

Provides a ``Terminal`` protocol and a concrete ``ProcessTerminal``
implementation that manages raw mode, the alternate screen, mouse
reporting, cursor visibility, and screen clearing via ANSI escape sequences.
"""

from __future__ import annotations

import asyncio
import codecs
import logging
import os
import signal
import sys
import termios
import tty
from typing import Callable, Protocol

from pixview.tui.stdin_buffer import StdinBuffer

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

_ALT_SCREEN_ENABLE = "\x1b[?1049h"
_ALT_SCREEN_DISABLE = "\x1b[?1049l"

# Button-event tracking with SGR extended coordinates
_MOUSE_ENABLE = "\x1b[?1000h\x1b[?1006h"
_MOUSE_DISABLE = "\x1b[?1006l\x1b[?1000l"

_HIDE_CURSOR = "\x1b[?25l"
_SHOW_CURSOR = "\x1b[?25h"
_CLEAR_SCREEN = "\x1b[2J\x1b[H"
_CURSOR_HOME = "\x1b[H"

_SET_TITLE_FMT = "\x1b]0;{}\x07"


# ---------------------------------------------------------------------------
# Terminal protocol
# ---------------------------------------------------------------------------


class Terminal(Protocol):
    """Interface for terminal I/O operations."""

    def start(
        self,
        on_input: Callable[[str], None],
        on_resize: Callable[[], None],
    ) -> None: ...

    def stop(self) -> None: ...

    def write(self, data: str) -> None: ...

    @property
    def columns(self) -> int: ...

    @property
    def rows(self) -> int: ...

    def hide_cursor(self) -> None: ...

    def show_cursor(self) -> None: ...

    def move_home(self) -> None: ...

    def clear_screen(self) -> None: ...

    def set_title(self, title: str) -> None: ...


# ---------------------------------------------------------------------------
# ProcessTerminal implementation
# ---------------------------------------------------------------------------


class ProcessTerminal:
    """Concrete terminal implementation backed by ``sys.stdin``/``sys.stdout``.

    Manages raw mode via :mod:`tty` and :mod:`termios`, the alternate screen,
    SGR mouse reporting, and SIGWINCH-based resize detection.
    """

    def __init__(self) -> None:
        self._input_handler: Callable[[str], None] | None = None
        self._resize_handler: Callable[[], None] | None = None
        self._stdin_buffer: StdinBuffer | None = None
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._loop: asyncio.AbstractEventLoop | None = None
        self._original_termios: list | None = None
        self._write_log_path: str = os.environ.get("PIXVIEW_WRITE_LOG", "")

    # -- properties ---------------------------------------------------------

    @property
    def columns(self) -> int:
        try:
            return os.get_terminal_size(sys.stdout.fileno()).columns
        except (ValueError, OSError):
            return 80

    @property
    def rows(self) -> int:
        try:
            return os.get_terminal_size(sys.stdout.fileno()).lines
        except (ValueError, OSError):
            return 24

    # -- start / stop -------------------------------------------------------

    def start(
        self,
        on_input: Callable[[str], None],
        on_resize: Callable[[], None],
    ) -> None:
        """Enter raw mode and the alternate screen, and begin reading stdin.

        Input and resize callbacks are delivered on the running event loop;
        without one the terminal is set up but stdin is not read.
        """
        self._input_handler = on_input
        self._resize_handler = on_resize

        fd = sys.stdin.fileno()
        self._original_termios = termios.tcgetattr(fd)
        tty.setraw(fd)
        self._raw_write(_ALT_SCREEN_ENABLE + _MOUSE_ENABLE)

        self._stdin_buffer = StdinBuffer(timeout=0.01)
        self._stdin_buffer.on_data(self._on_buffer_data)

        try:
            self._loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No running event loop; stdin is not being read")
        else:
            self._loop.add_reader(fd, self._on_stdin_readable)
            self._loop.add_signal_handler(signal.SIGWINCH, self._on_sigwinch)
        logger.debug("Terminal started (%dx%d)", self.columns, self.rows)

    def stop(self) -> None:
        """Restore terminal state and detach from the event loop."""
        self._raw_write(_MOUSE_DISABLE + _SHOW_CURSOR + _ALT_SCREEN_DISABLE)

        if self._loop is not None:
            self._loop.remove_reader(sys.stdin.fileno())
            self._loop.remove_signal_handler(signal.SIGWINCH)
            self._loop = None

        if self._stdin_buffer is not None:
            self._stdin_buffer.destroy()
            self._stdin_buffer = None
        self._decoder.reset()

        if self._original_termios is not None:
            termios.tcsetattr(
                sys.stdin.fileno(), termios.TCSADRAIN, self._original_termios
            )
            self._original_termios = None

        self._input_handler = None
        self._resize_handler = None
        logger.debug("Terminal stopped")

    # -- output -------------------------------------------------------------

    def write(self, data: str) -> None:
        """Write *data* to stdout, mirroring it to ``PIXVIEW_WRITE_LOG`` if set."""
        self._raw_write(data)
        if not self._write_log_path:
            return
        try:
            with open(self._write_log_path, "a", encoding="utf-8") as f:
                f.write(data)
        except OSError:
            logger.warning("Cannot append to write log %s", self._write_log_path)
            self._write_log_path = ""

    def hide_cursor(self) -> None:
        self._raw_write(_HIDE_CURSOR)

    def show_cursor(self) -> None:
        self._raw_write(_SHOW_CURSOR)

    def move_home(self) -> None:
        self._raw_write(_CURSOR_HOME)

    def clear_screen(self) -> None:
        self._raw_write(_CLEAR_SCREEN)

    def set_title(self, title: str) -> None:
        self._raw_write(_SET_TITLE_FMT.format(title))

    def _raw_write(self, data: str) -> None:
        try:
            sys.stdout.write(data)
            sys.stdout.flush()
        except OSError:
            logger.debug("stdout write failed", exc_info=True)

    # -- event loop callbacks -----------------------------------------------

    def _on_stdin_readable(self) -> None:
        try:
            raw = os.read(sys.stdin.fileno(), 4096)
        except OSError:
            logger.debug("stdin read failed", exc_info=True)
            return
        # Multi-byte characters may be split across reads
        data = self._decoder.decode(raw)
        if data and self._stdin_buffer is not None:
            self._stdin_buffer.process(data)

    def _on_buffer_data(self, data: str) -> None:
        if self._input_handler is not None:
            self._input_handler(data)

    def _on_sigwinch(self) -> None:
        if self._resize_handler is not None:
            self._resize_handler()
