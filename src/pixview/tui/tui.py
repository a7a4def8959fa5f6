"""Full-screen TUI driver with differential rendering.

Provides the ``View`` protocol implemented by the image view and the ``TUI``
class that drives it against a ``Terminal`` back-end: it decodes input into
events, runs layout passes when the view or the terminal size asks for one,
lets the view draw into a retained ``CellBuffer``, and writes only the
screen rows that changed since the previous frame.
"""

from __future__ import annotations

import asyncio
import logging
import os
import time
from typing import TYPE_CHECKING, Callable, Protocol

from pixview.events import Event, EventResult, parse_event
from pixview.surface import CellBuffer, Surface
from pixview.tui.keys import matches_key

if TYPE_CHECKING:
    from pixview.tui.terminal import Terminal

logger = logging.getLogger(__name__)

__all__ = [
    "View",
    "QUIT_KEYS",
    "TUI",
]

# ---------------------------------------------------------------------------
# Protocols
# ---------------------------------------------------------------------------


class View(Protocol):
    """A full-screen view hosted by ``TUI``."""

    def needs_relayout(self) -> bool:
        """Whether ``layout`` must run before the next ``draw``."""
        ...

    def layout(self, cell_size: tuple[int, int]) -> None:
        """Recompute derived state for a ``(columns, rows)`` cell area."""
        ...

    def draw(self, surface: Surface) -> None:
        """Paint into *surface*; may leave it untouched if nothing changed."""
        ...

    def handle_event(self, event: Event) -> EventResult:
        """Apply *event*, returning ``"consumed"`` or ``"ignored"``."""
        ...


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

QUIT_KEYS = ("q", "ctrl+c")

_CLEAR_TO_EOL = "\x1b[K"
_ROW_FMT = "\x1b[{};1H"


# ---------------------------------------------------------------------------
# TUI
# ---------------------------------------------------------------------------


class TUI:
    """Main TUI controller: rendering, input dispatch, lifecycle.

    * Layout -- ``view.layout`` runs when the view requests it or when the
      terminal size changed since the last layout.
    * Differential rendering -- only rows that differ from the previous
      frame are re-written.
    * Input -- each complete sequence is decoded and offered to the view;
      unconsumed quit keys stop the TUI.
    """

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def __init__(
        self,
        terminal: Terminal,
        view: View,
        on_quit: Callable[[], None] | None = None,
    ) -> None:
        self.terminal: Terminal = terminal
        self.view: View = view
        self.on_quit: Callable[[], None] | None = on_quit

        self._surface = CellBuffer(0, 0)
        self._layout_size: tuple[int, int] | None = None

        # Previous render state (for differential updates)
        self._previous_lines: list[str] = []

        self._render_requested: bool = False
        self._stopped: bool = True

        # Metrics
        self._full_redraw_count: int = 0
        self._render_count: int = 0

    # ------------------------------------------------------------------
    # Properties / accessors
    # ------------------------------------------------------------------

    @property
    def full_redraws(self) -> int:
        """Number of full (non-differential) redraws performed."""
        return self._full_redraw_count

    @property
    def render_count(self) -> int:
        return self._render_count

    @property
    def surface(self) -> CellBuffer:
        return self._surface

    @property
    def stopped(self) -> bool:
        return self._stopped

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the terminal and schedule the first frame."""
        self._stopped = False
        self.terminal.start(self.handle_input, self._on_resize)
        self.terminal.hide_cursor()
        self.terminal.clear_screen()
        self.request_render()

    def stop(self) -> None:
        """Stop rendering and hand the terminal back."""
        if self._stopped:
            return
        self._stopped = True
        self.terminal.show_cursor()
        self.terminal.stop()

    def quit(self) -> None:
        self.stop()
        if self.on_quit is not None:
            self.on_quit()

    # ------------------------------------------------------------------
    # Render scheduling
    # ------------------------------------------------------------------

    def request_render(self) -> None:
        """Schedule a render on the next event-loop tick.

        Multiple calls coalesce into a single render pass.
        """
        if self._render_requested:
            return
        self._render_requested = True
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No running event loop -- render synchronously
            self._do_render_tick()
            return
        loop.call_soon(self._do_render_tick)

    def _do_render_tick(self) -> None:
        self._render_requested = False
        if self._stopped:
            return
        self.do_render()

    def _on_resize(self) -> None:
        self.request_render()

    # ------------------------------------------------------------------
    # Input handling
    # ------------------------------------------------------------------

    def handle_input(self, data: str) -> None:
        """Dispatch one complete input sequence to the view."""
        if self._stopped:
            return

        event = parse_event(data)
        if event is not None and self.view.handle_event(event) == "consumed":
            self.request_render()
            return

        if any(matches_key(data, key) for key in QUIT_KEYS):
            logger.debug("Quit requested")
            self.quit()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def do_render(self) -> None:
        """Lay out if needed, draw the view, and write changed rows."""
        if self._stopped:
            return

        size = (self.terminal.columns, self.terminal.rows)
        if size[0] <= 0 or size[1] <= 0:
            return

        force_full = False
        if size != self._surface.size:
            self._surface.resize(*size)
            force_full = True

        if self.view.needs_relayout() or size != self._layout_size:
            started = time.perf_counter()
            self.view.layout(size)
            self._layout_size = size
            logger.debug(
                "Layout %dx%d took %.1f ms",
                *size,
                (time.perf_counter() - started) * 1000,
            )

        self.view.draw(self._surface)
        lines = self._surface.to_lines()
        self._render_count += 1

        out: list[str] = []
        if force_full:
            self._full_redraw_count += 1
            out.append("\x1b[2J")

        for i, line in enumerate(lines):
            old = self._previous_lines[i] if i < len(self._previous_lines) else None
            if force_full or line != old:
                out.append(_ROW_FMT.format(i + 1))
                out.append(line)
                out.append(_CLEAR_TO_EOL)

        self._previous_lines = lines

        if out:
            self.terminal.write("".join(out))

    # ------------------------------------------------------------------
    # Debug dump
    # ------------------------------------------------------------------

    def write_debug_dump(self, directory: str | None = None) -> str | None:
        """Write the current frame to ``~/.pixview/tui-debug/`` for inspection.

        Returns the dump path, or ``None`` if it could not be written.
        """
        debug_dir = directory or os.path.join(
            os.path.expanduser("~"), ".pixview", "tui-debug"
        )
        try:
            os.makedirs(debug_dir, exist_ok=True)
            ts = int(time.time() * 1000)
            dump_path = os.path.join(debug_dir, f"render-{ts}.txt")
            with open(dump_path, "w", encoding="utf-8") as f:
                f.write(
                    f"terminal: {self.terminal.columns}x{self.terminal.rows}\n"
                )
                f.write(f"layout_size: {self._layout_size}\n")
                f.write(f"full_redraws: {self._full_redraw_count}\n")
                f.write(f"renders: {self._render_count}\n")
                f.write(f"stopped: {self._stopped}\n")
                f.write(f"\nframe ({len(self._previous_lines)}):\n")
                for i, line in enumerate(self._surface.text_lines()):
                    f.write(f"  [{i:3d}] {line}\n")
        except OSError:
            logger.exception("Failed to write debug dump")
            return None
        return dump_path
