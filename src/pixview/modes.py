"""Interaction modes of the image view.

Exactly one mode is active at a time.  Switching is driven by single
characters and is total: every switch succeeds, except entering cursor mode
before any grid exists, which is ignored.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from pixview.resample import PixelGrid


@dataclass(frozen=True)
class MoveMode:
    name = "MOVE"


@dataclass(frozen=True)
class ZoomMode:
    name = "ZOOM"


@dataclass(frozen=True)
class CursorMode:
    position: tuple[int, int]
    name = "CURSOR"


Mode = Union[MoveMode, ZoomMode, CursorMode]

MODE_KEYS = ("m", "z", "c")


def transition(mode: Mode, char: str, grid: PixelGrid | None) -> Mode | None:
    """Return the mode selected by *char*, or ``None`` if *char* selects nothing."""
    match char:
        case "m":
            return MoveMode()
        case "z":
            return ZoomMode()
        case "c":
            if grid is None:
                return None
            return CursorMode(position=grid.center())
        case _:
            return None


def move_cursor(
    mode: CursorMode, dx: int, dy: int, grid: PixelGrid | None
) -> CursorMode:
    """Step the cursor by ``(dx, dy)``; steps that leave *grid* are rejected."""
    col, row = mode.position
    target = (col + dx, row + dy)
    if grid is None or not grid.contains(*target):
        return mode
    return CursorMode(position=target)


def clamp_cursor(mode: CursorMode, grid: PixelGrid) -> CursorMode:
    """Pull the cursor back inside *grid* after a layout changed its size."""
    col, row = mode.position
    clamped = (
        min(max(col, 0), grid.width - 1),
        min(max(row, 0), grid.height - 1),
    )
    if clamped == mode.position:
        return mode
    return CursorMode(position=clamped)
