"""Crop and resize the source image onto the terminal cell grid.

Terminal cells are taller than they are wide, so the target size is chosen
with an aspect correction constant ``K``: one cell covers ``K`` times more
image height than width.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from PIL import Image

from pixview.geometry import Viewport, to_pixel_box

logger = logging.getLogger(__name__)

RGB = tuple[int, int, int]

CELL_ASPECT = 2.5

FILTERS: dict[str, Image.Resampling] = {
    "nearest": Image.Resampling.NEAREST,
    "box": Image.Resampling.BOX,
    "bilinear": Image.Resampling.BILINEAR,
    "hamming": Image.Resampling.HAMMING,
    "bicubic": Image.Resampling.BICUBIC,
    "lanczos": Image.Resampling.LANCZOS,
}


@dataclass(frozen=True)
class PixelGrid:
    """Row-major grid of RGB triples produced by a layout pass."""

    width: int
    height: int
    rows: tuple[tuple[RGB, ...], ...]

    @classmethod
    def from_image(cls, image: Image.Image) -> PixelGrid:
        width, height = image.size
        data = image.convert("RGB").tobytes()
        stride = width * 3
        rows = tuple(
            tuple(
                (data[i], data[i + 1], data[i + 2])
                for i in range(y * stride, (y + 1) * stride, 3)
            )
            for y in range(height)
        )
        return cls(width=width, height=height, rows=rows)

    def pixel(self, col: int, row: int) -> RGB:
        return self.rows[row][col]

    def center(self) -> tuple[int, int]:
        return (self.width // 2, self.height // 2)

    def contains(self, col: int, row: int) -> bool:
        return 0 <= col < self.width and 0 <= row < self.height


def fit_size(
    crop_size: tuple[int, int],
    cell_size: tuple[int, int],
    aspect: float = CELL_ASPECT,
) -> tuple[int, int]:
    """Return the ``(width, height)`` in cells that fits *crop_size* into *cell_size*.

    When the crop is relatively taller than the cell area the row count is
    the constraint, otherwise the column count is.  Both results are clamped
    to the cell area.
    """
    crop_w, crop_h = crop_size
    cols, rows = cell_size

    image_aspect = crop_w / crop_h
    cell_aspect = cols / (rows * aspect)

    if image_aspect < cell_aspect:
        width = round(aspect * image_aspect * rows)
        height = rows
    else:
        width = cols
        height = round(cols / (aspect * image_aspect))

    return (min(max(width, 1), cols), min(max(height, 1), rows))


def resample(
    image: Image.Image,
    viewport: Viewport,
    cell_size: tuple[int, int],
    aspect: float = CELL_ASPECT,
    resample_filter: str = "nearest",
) -> PixelGrid | None:
    """Produce the grid for *viewport* sized to fit *cell_size*.

    Returns ``None`` when the source or the cell area has no pixels.
    """
    src_w, src_h = image.size
    cols, rows = cell_size
    if src_w <= 0 or src_h <= 0 or cols <= 0 or rows <= 0:
        logger.debug(
            "Layout failed: source %dx%d, cell area %dx%d", src_w, src_h, cols, rows
        )
        return None

    left, top, right, bottom = to_pixel_box(viewport, src_w, src_h)
    # Rounding can collapse a one-pixel viewport; keep at least one pixel.
    right = min(max(right, left + 1), src_w)
    bottom = min(max(bottom, top + 1), src_h)
    left = min(left, right - 1)
    top = min(top, bottom - 1)

    target = fit_size((right - left, bottom - top), cell_size, aspect)
    resized = image.resize(
        target,
        FILTERS[resample_filter],
        box=(left, top, right, bottom),
    )
    logger.debug(
        "Resampled box %s to %dx%d cells", (left, top, right, bottom), *target
    )
    return PixelGrid.from_image(resized)
