"""Viewport arithmetic over a normalized image rectangle.

A viewport is a sub-rectangle of the source image expressed in normalized
coordinates, ``0 <= x0 < x1 <= 1`` and ``0 <= y0 < y1 <= 1``.  Every function
here is pure: operations return a new ``Viewport`` (or the input unchanged
when the operation is rejected or has no effect).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Literal

Axis = Literal["x", "y"]


@dataclass(frozen=True)
class Viewport:
    x0: float = 0.0
    x1: float = 1.0
    y0: float = 0.0
    y1: float = 1.0

    @property
    def width(self) -> float:
        return self.x1 - self.x0

    @property
    def height(self) -> float:
        return self.y1 - self.y0


FULL_VIEWPORT = Viewport(0.0, 1.0, 0.0, 1.0)


def size(viewport: Viewport) -> tuple[float, float]:
    """Return ``(width, height)`` of *viewport*."""
    return (viewport.x1 - viewport.x0, viewport.y1 - viewport.y0)


def center(viewport: Viewport) -> tuple[float, float]:
    return ((viewport.x0 + viewport.x1) / 2, (viewport.y0 + viewport.y1) / 2)


def min_dimension(width: int, height: int) -> float:
    """Smallest viewport side that still covers one source pixel."""
    return 1.0 / min(width, height)


def reset() -> Viewport:
    return FULL_VIEWPORT


def pan(viewport: Viewport, axis: Axis, delta: float) -> Viewport:
    """Shift both bounds of *axis* by *delta*.

    The move is all-or-nothing: if either resulting bound would leave
    ``[0, 1]`` the original viewport is returned.
    """
    if axis == "x":
        lo, hi = viewport.x0 + delta, viewport.x1 + delta
    else:
        lo, hi = viewport.y0 + delta, viewport.y1 + delta

    if lo < 0.0 or hi > 1.0:
        return viewport

    if axis == "x":
        return Viewport(lo, hi, viewport.y0, viewport.y1)
    return Viewport(viewport.x0, viewport.x1, lo, hi)


def _fit_axis(mid: float, side: float) -> tuple[float, float]:
    """Place a span of *side* centered on *mid*, translated back into [0, 1]."""
    lo = mid - side / 2
    hi = mid + side / 2
    if lo < 0.0:
        lo, hi = 0.0, side
    elif hi > 1.0:
        lo, hi = 1.0 - side, 1.0
    return (lo, hi)


def zoom(viewport: Viewport, amount: float, min_side: float) -> Viewport:
    """Resize *viewport* to a square around its current center.

    Positive *amount* zooms in (the side shrinks by ``side * amount``),
    negative zooms out.  The new side is clamped to ``[min_side, 1]``.
    A zoomed-out square that would cross an image edge is translated back
    inside the image.
    """
    side = viewport.x1 - viewport.x0
    new_side = min(max(side - side * amount, min_side), 1.0)
    # Side unchanged: keep the stored bounds as they are
    if math.isclose(new_side, side) and math.isclose(viewport.height, side):
        return viewport

    cx, cy = center(viewport)
    x0, x1 = _fit_axis(cx, new_side)
    y0, y1 = _fit_axis(cy, new_side)

    zoomed = Viewport(x0, x1, y0, y1)
    if zoomed == viewport:
        return viewport
    return zoomed


def to_pixel_box(
    viewport: Viewport, width: int, height: int
) -> tuple[int, int, int, int]:
    """Map *viewport* onto a ``(left, top, right, bottom)`` source pixel box."""
    return (
        round(viewport.x0 * width),
        round(viewport.y0 * height),
        round(viewport.x1 * width),
        round(viewport.y1 * height),
    )


def zoom_percent(viewport: Viewport) -> int:
    return round(100 / (viewport.x1 - viewport.x0))
