"""Draw surface: the cell grid the view paints into.

The view never writes escape sequences itself.  It calls the two drawing
primitives of ``Surface`` -- ``fill`` for a colored glyph run and ``print``
for plain or highlighted text -- and the host turns the retained
``CellBuffer`` into terminal lines.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from pixview.tui.utils import iter_cells

RGB = tuple[int, int, int]

FULL_BLOCK = "█"

_RESET = "\x1b[0m"


@dataclass(frozen=True)
class Style:
    """Foreground/background pair; ``None`` keeps the terminal default."""

    fg: RGB | None = None
    bg: RGB | None = None

    def sgr(self) -> str:
        codes: list[str] = []
        if self.fg is not None:
            codes.append("38;2;{};{};{}".format(*self.fg))
        if self.bg is not None:
            codes.append("48;2;{};{};{}".format(*self.bg))
        if not codes:
            return ""
        return f"\x1b[{';'.join(codes)}m"


DEFAULT_STYLE = Style()

# Light red on black, never produced by ``fill``.
HIGHLIGHT_STYLE = Style(fg=(255, 85, 85), bg=(0, 0, 0))


class Surface(Protocol):
    """Drawing primitives offered to the view."""

    @property
    def size(self) -> tuple[int, int]:
        """``(columns, rows)`` of the drawable area."""
        ...

    def clear(self) -> None: ...

    def fill(self, col: int, row: int, color: RGB, glyphs: str) -> None:
        """Write *glyphs* starting at ``(col, row)`` in foreground *color*."""
        ...

    def print(self, col: int, row: int, text: str, style: Style | None = None) -> None:
        """Write *text* starting at ``(col, row)``."""
        ...


class CellBuffer:
    """Retained screen buffer implementing ``Surface``.

    Content survives between frames, so a draw pass that paints nothing
    leaves the previous picture in place.  Writes outside the buffer are
    clipped.
    """

    def __init__(self, columns: int, rows: int) -> None:
        self._columns = max(columns, 0)
        self._rows = max(rows, 0)
        self._chars: list[list[str]] = []
        self._styles: list[list[Style]] = []
        self.clear()

    @property
    def size(self) -> tuple[int, int]:
        return (self._columns, self._rows)

    def resize(self, columns: int, rows: int) -> None:
        """Change the buffer size, discarding its content."""
        self._columns = max(columns, 0)
        self._rows = max(rows, 0)
        self.clear()

    def clear(self) -> None:
        self._chars = [[" "] * self._columns for _ in range(self._rows)]
        self._styles = [[DEFAULT_STYLE] * self._columns for _ in range(self._rows)]

    def fill(self, col: int, row: int, color: RGB, glyphs: str) -> None:
        """Write single-width *glyphs*, one per cell."""
        if row < 0 or row >= self._rows:
            return
        style = Style(fg=color)
        start = max(col, 0)
        end = min(col + len(glyphs), self._columns)
        if start >= end:
            return
        self._chars[row][start:end] = glyphs[start - col : end - col]
        self._styles[row][start:end] = [style] * (end - start)

    def print(self, col: int, row: int, text: str, style: Style | None = None) -> None:
        """Write *text*; wide graphemes take two cells, the second left empty."""
        if row < 0 or row >= self._rows:
            return
        style = style or DEFAULT_STYLE
        chars = self._chars[row]
        styles = self._styles[row]
        x = col
        for g, width in iter_cells(text):
            if x + width > self._columns:
                break
            if x >= 0:
                chars[x] = g
                styles[x] = style
                for extra in range(1, width):
                    chars[x + extra] = ""
                    styles[x + extra] = style
            x += width

    # -- inspection ----------------------------------------------------------

    def char_at(self, col: int, row: int) -> str:
        return self._chars[row][col]

    def style_at(self, col: int, row: int) -> Style:
        return self._styles[row][col]

    def text_lines(self) -> list[str]:
        """Buffer content without any styling."""
        return ["".join(row) for row in self._chars]

    def to_lines(self) -> list[str]:
        """Serialise every row to a terminal line with 24-bit SGR colors.

        Adjacent cells sharing a style are emitted under a single SGR code.
        """
        lines: list[str] = []
        for chars, styles in zip(self._chars, self._styles):
            parts: list[str] = []
            current: Style | None = None
            for ch, style in zip(chars, styles):
                if style != current:
                    if current is not None and current != DEFAULT_STYLE:
                        parts.append(_RESET)
                    parts.append(style.sgr())
                    current = style
                parts.append(ch)
            if current is not None and current != DEFAULT_STYLE:
                parts.append(_RESET)
            lines.append("".join(parts))
        return lines
