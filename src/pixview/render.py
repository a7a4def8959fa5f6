"""Cell renderer: paint a resampled grid onto a draw surface.

Each grid row is scanned left to right and cut into runs of cells whose
color stays within a small distance of the run's first color.  A run is
drawn with a single ``Surface.fill`` call, so flat areas and anti-aliasing
noise cost one call instead of one per cell.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from pixview.geometry import Viewport, zoom_percent
from pixview.modes import CursorMode, Mode
from pixview.resample import RGB, PixelGrid
from pixview.surface import FULL_BLOCK, HIGHLIGHT_STYLE, Surface
from pixview.tui.utils import visible_width

MERGE_THRESHOLD = 3

CURSOR_MARKER = "X"

PLACEHOLDER_TEXT = "Error"


@dataclass(frozen=True)
class Run:
    start: int
    length: int
    color: RGB


def color_distance(a: RGB, b: RGB) -> int:
    """Sum of per-channel absolute differences, saturating at 255."""
    return min(255, abs(a[0] - b[0]) + abs(a[1] - b[1]) + abs(a[2] - b[2]))


def merge_runs(row: Sequence[RGB], threshold: int = MERGE_THRESHOLD) -> list[Run]:
    """Split *row* into runs anchored on their first color."""
    runs: list[Run] = []
    if not row:
        return runs

    anchor = row[0]
    start = 0
    for col in range(1, len(row)):
        color = row[col]
        if color_distance(anchor, color) > threshold:
            runs.append(Run(start, col - start, anchor))
            anchor = color
            start = col
    runs.append(Run(start, len(row) - start, anchor))
    return runs


def status_text(mode: Mode, viewport: Viewport) -> str:
    return f"{mode.name:8} {zoom_percent(viewport)}%"


class CellRenderer:
    """Draws grids, the cursor overlay and the status line."""

    def __init__(
        self,
        threshold: int = MERGE_THRESHOLD,
        placeholder: str = PLACEHOLDER_TEXT,
    ) -> None:
        self.threshold = threshold
        self.placeholder = placeholder

    def draw(
        self,
        surface: Surface,
        grid: PixelGrid | None,
        mode: Mode,
        viewport: Viewport,
    ) -> Viewport | None:
        """Paint a full frame.

        Returns the viewport the frame was drawn for, or ``None`` when only
        the placeholder could be drawn.
        """
        surface.clear()
        cols, rows = surface.size

        if grid is None:
            self._draw_placeholder(surface)
            self._draw_status(surface, mode, viewport)
            return None

        pad_x = (cols - grid.width) // 2
        pad_y = (rows - grid.height) // 2

        cursor = mode.position if isinstance(mode, CursorMode) else None
        cursor_color: RGB | None = None

        for y, row in enumerate(grid.rows):
            for run in merge_runs(row, self.threshold):
                surface.fill(
                    pad_x + run.start, pad_y + y, run.color, FULL_BLOCK * run.length
                )
            if cursor is not None and cursor[1] == y:
                cursor_color = row[cursor[0]]

        if cursor is not None and cursor_color is not None:
            x, y = pad_x + cursor[0], pad_y + cursor[1]
            surface.print(x, y, CURSOR_MARKER, HIGHLIGHT_STYLE)
            surface.print(
                x + 1, y + 1, "({}, {}, {})".format(*cursor_color), HIGHLIGHT_STYLE
            )

        self._draw_status(surface, mode, viewport)
        return viewport

    def _draw_placeholder(self, surface: Surface) -> None:
        cols, rows = surface.size
        text = self.placeholder
        surface.print(max(0, (cols - visible_width(text)) // 2), rows // 2, text)

    def _draw_status(self, surface: Surface, mode: Mode, viewport: Viewport) -> None:
        cols, rows = surface.size
        text = status_text(mode, viewport)
        surface.print(max(0, cols - 1 - visible_width(text)), rows - 1, text)
