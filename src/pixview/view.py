"""Image view: the stateful component the host TUI drives.

``ImageView`` owns the viewport, the interaction mode, the resampled grid
and the render cache key.  The host calls four lifecycle methods:

* ``needs_relayout()`` -- whether ``layout`` must run before the next draw;
* ``layout(cell_size)`` -- resample the image for the available cell area;
* ``draw(surface)`` -- paint the frame, or nothing when it is unchanged;
* ``handle_event(event)`` -- apply an input event, reporting whether it was
  consumed.
"""

from __future__ import annotations

import logging

from PIL import Image

from pixview import geometry
from pixview.config import ViewerConfig
from pixview.events import CharEvent, Event, EventResult, KeyEvent, MouseEvent
from pixview.geometry import FULL_VIEWPORT, Viewport
from pixview.modes import (
    CursorMode,
    Mode,
    MoveMode,
    ZoomMode,
    clamp_cursor,
    move_cursor,
    transition,
)
from pixview.render import CellRenderer
from pixview.resample import PixelGrid, resample
from pixview.surface import Surface

logger = logging.getLogger(__name__)

_CURSOR_STEPS: dict[str, tuple[int, int]] = {
    "up": (0, -1),
    "down": (0, 1),
    "left": (-1, 0),
    "right": (1, 0),
    "wheel_up": (0, -1),
    "wheel_down": (0, 1),
}


class ImageView:
    """Pan/zoom/inspect view over a single RGB image."""

    def __init__(self, image: Image.Image, config: ViewerConfig | None = None) -> None:
        self._image = image if image.mode == "RGB" else image.convert("RGB")
        self._config = config or ViewerConfig()
        self._renderer = CellRenderer(
            threshold=self._config.merge_threshold,
            placeholder=self._config.placeholder,
        )
        width, height = self._image.size
        self._min_side = (
            geometry.min_dimension(width, height) if width > 0 and height > 0 else 1.0
        )

        self._viewport: Viewport = FULL_VIEWPORT
        self._mode: Mode = MoveMode()
        self._grid: PixelGrid | None = None
        self._relayout = True
        self._cache_key: Viewport | None = None

    # -- accessors -----------------------------------------------------------

    @property
    def viewport(self) -> Viewport:
        return self._viewport

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def grid(self) -> PixelGrid | None:
        return self._grid

    @property
    def zoom_percent(self) -> int:
        return geometry.zoom_percent(self._viewport)

    # -- lifecycle -----------------------------------------------------------

    def needs_relayout(self) -> bool:
        return self._relayout

    def layout(self, cell_size: tuple[int, int]) -> None:
        """Recompute the grid for *cell_size* and clear the relayout flag."""
        self._grid = resample(
            self._image,
            self._viewport,
            cell_size,
            aspect=self._config.aspect,
            resample_filter=self._config.resample_filter,
        )
        if self._grid is None:
            logger.warning("Layout failed for cell area %dx%d", *cell_size)
        elif isinstance(self._mode, CursorMode):
            self._mode = clamp_cursor(self._mode, self._grid)
        self._relayout = False
        self.invalidate()

    def invalidate(self) -> None:
        """Force the next ``draw`` to repaint."""
        self._cache_key = None

    def draw(self, surface: Surface) -> None:
        if self._cache_key is not None and self._cache_key == self._viewport:
            return
        self._cache_key = self._renderer.draw(
            surface, self._grid, self._mode, self._viewport
        )

    # -- input ---------------------------------------------------------------

    def handle_event(self, event: Event) -> EventResult:
        match event:
            case CharEvent(char=char):
                return self._on_char(char)
            case KeyEvent(key="backspace"):
                self._set_viewport(geometry.reset())
                return "consumed"
            case KeyEvent(key=key):
                return self._on_key(key)
            case MouseEvent(action=action) if action in ("wheel_up", "wheel_down"):
                return self._on_wheel(action)
            case _:
                return "ignored"

    def _on_char(self, char: str) -> EventResult:
        mode = transition(self._mode, char, self._grid)
        if mode is None:
            return "ignored"
        if mode != self._mode:
            logger.debug("Mode %s -> %s", self._mode.name, mode.name)
            self._mode = mode
            self.invalidate()
        return "consumed"

    def _on_key(self, key: str) -> EventResult:
        if key not in ("up", "down", "left", "right"):
            return "ignored"

        match self._mode:
            case MoveMode():
                width, height = geometry.size(self._viewport)
                if key in ("up", "down"):
                    step = height * self._config.pan_step_y
                    delta = -step if key == "up" else step
                    self._set_viewport(geometry.pan(self._viewport, "y", delta))
                else:
                    step = width * self._config.pan_step_x
                    delta = -step if key == "left" else step
                    self._set_viewport(geometry.pan(self._viewport, "x", delta))
            case ZoomMode():
                if key == "up":
                    self._zoom(self._config.zoom_step)
                elif key == "down":
                    self._zoom(-self._config.zoom_step)
                else:
                    self._mode = MoveMode()
                    self.invalidate()
            case CursorMode():
                self._move_cursor(key)
        return "consumed"

    def _on_wheel(self, action: str) -> EventResult:
        if isinstance(self._mode, CursorMode):
            self._move_cursor(action)
        elif action == "wheel_up":
            self._zoom(self._config.zoom_step)
        else:
            self._zoom(-self._config.zoom_step)
        return "consumed"

    def _move_cursor(self, direction: str) -> None:
        assert isinstance(self._mode, CursorMode)
        dx, dy = _CURSOR_STEPS[direction]
        moved = move_cursor(self._mode, dx, dy, self._grid)
        if moved != self._mode:
            self._mode = moved
            self.invalidate()

    def _zoom(self, amount: float) -> None:
        self._set_viewport(geometry.zoom(self._viewport, amount, self._min_side))

    def _set_viewport(self, viewport: Viewport) -> None:
        if viewport == self._viewport:
            return
        logger.debug("Viewport %s -> %s", self._viewport, viewport)
        self._viewport = viewport
        self._relayout = True
