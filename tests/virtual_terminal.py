"""Virtual terminal and recording surface for testing.

``VirtualTerminal`` satisfies the ``pixview.tui.terminal.Terminal`` protocol
without performing any real I/O; all output is captured for assertions.
``RecordingSurface`` wraps a ``CellBuffer`` and counts drawing calls.
"""

from __future__ import annotations

from typing import Callable

from pixview.surface import RGB, CellBuffer, Style


class VirtualTerminal:
    """In-memory terminal that records all writes for test inspection.

    Parameters
    ----------
    rows:
        Number of terminal rows (height).
    columns:
        Number of terminal columns (width).
    """

    def __init__(self, rows: int = 24, columns: int = 80) -> None:
        self._rows = rows
        self._columns = columns
        self._buffer: list[str] = []
        self._started = False
        self._input_handler: Callable[[str], None] | None = None
        self._resize_handler: Callable[[], None] | None = None
        self._cursor_visible = True
        self._title: str = ""

    # -- Terminal protocol: properties --------------------------------------

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def columns(self) -> int:
        return self._columns

    @property
    def started(self) -> bool:
        return self._started

    @property
    def cursor_visible(self) -> bool:
        return self._cursor_visible

    @property
    def title(self) -> str:
        return self._title

    # -- Terminal protocol: lifecycle ---------------------------------------

    def start(
        self,
        on_input: Callable[[str], None],
        on_resize: Callable[[], None],
    ) -> None:
        self._input_handler = on_input
        self._resize_handler = on_resize
        self._started = True

    def stop(self) -> None:
        self._started = False
        self._input_handler = None
        self._resize_handler = None

    # -- Terminal protocol: output ------------------------------------------

    def write(self, data: str) -> None:
        self._buffer.append(data)

    def hide_cursor(self) -> None:
        self._cursor_visible = False
        self.write("\x1b[?25l")

    def show_cursor(self) -> None:
        self._cursor_visible = True
        self.write("\x1b[?25h")

    def move_home(self) -> None:
        self.write("\x1b[H")

    def clear_screen(self) -> None:
        self.write("\x1b[2J\x1b[H")

    def set_title(self, title: str) -> None:
        self._title = title
        self.write(f"\x1b]0;{title}\x07")

    # -- Test helpers -------------------------------------------------------

    @property
    def output(self) -> str:
        """Return everything written to the terminal as a single string."""
        return "".join(self._buffer)

    @property
    def write_count(self) -> int:
        return len(self._buffer)

    def clear_buffer(self) -> None:
        self._buffer.clear()

    def simulate_input(self, data: str) -> None:
        """Feed *data* into the registered input handler."""
        if self._input_handler is None:
            raise RuntimeError(
                "No input handler registered -- call start() first"
            )
        self._input_handler(data)

    def simulate_resize(self, rows: int | None = None, columns: int | None = None) -> None:
        if rows is not None:
            self._rows = rows
        if columns is not None:
            self._columns = columns
        if self._resize_handler is not None:
            self._resize_handler()


class RecordingSurface(CellBuffer):
    """``CellBuffer`` that records every drawing call."""

    def __init__(self, columns: int, rows: int) -> None:
        self.fills: list[tuple[int, int, RGB, str]] = []
        self.prints: list[tuple[int, int, str, Style | None]] = []
        self.clears = 0
        super().__init__(columns, rows)
        self.clears = 0

    def clear(self) -> None:
        self.clears += 1
        super().clear()

    def fill(self, col: int, row: int, color: RGB, glyphs: str) -> None:
        self.fills.append((col, row, color, glyphs))
        super().fill(col, row, color, glyphs)

    def print(self, col: int, row: int, text: str, style: Style | None = None) -> None:
        self.prints.append((col, row, text, style))
        super().print(col, row, text, style)

    @property
    def call_count(self) -> int:
        return len(self.fills) + len(self.prints) + self.clears

    def reset_calls(self) -> None:
        self.fills.clear()
        self.prints.clear()
        self.clears = 0
