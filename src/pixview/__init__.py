"""pixview: pan, zoom and inspect images in a character-cell terminal."""

__version__ = "0.1.0"

from pixview.config import ViewerConfig
from pixview.events import CharEvent, Event, EventResult, KeyEvent, MouseEvent, parse_event
from pixview.geometry import FULL_VIEWPORT, Viewport
from pixview.modes import CursorMode, Mode, MoveMode, ZoomMode
from pixview.render import CellRenderer, Run, color_distance, merge_runs
from pixview.resample import PixelGrid, fit_size, resample
from pixview.surface import CellBuffer, Style, Surface
from pixview.tui.tui import TUI, View
from pixview.view import ImageView

__all__ = [
    "__version__",
    # Config
    "ViewerConfig",
    # Events
    "CharEvent",
    "Event",
    "EventResult",
    "KeyEvent",
    "MouseEvent",
    "parse_event",
    # Geometry
    "FULL_VIEWPORT",
    "Viewport",
    # Modes
    "CursorMode",
    "Mode",
    "MoveMode",
    "ZoomMode",
    # Rendering
    "CellRenderer",
    "Run",
    "color_distance",
    "merge_runs",
    # Resampling
    "PixelGrid",
    "fit_size",
    "resample",
    # Surface
    "CellBuffer",
    "Style",
    "Surface",
    # Host
    "TUI",
    "View",
    # View
    "ImageView",
]
