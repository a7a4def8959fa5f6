"""Run an ``ImageView`` full screen until the user quits."""

from __future__ import annotations

import asyncio
import logging

from PIL import Image

from pixview.config import ViewerConfig
from pixview.tui.terminal import ProcessTerminal, Terminal
from pixview.tui.tui import TUI
from pixview.view import ImageView

logger = logging.getLogger(__name__)


async def run(
    image: Image.Image,
    config: ViewerConfig | None = None,
    terminal: Terminal | None = None,
    title: str | None = None,
) -> None:
    """Show *image* and return once the TUI has been quit."""
    done = asyncio.Event()
    view = ImageView(image, config)
    tui = TUI(terminal or ProcessTerminal(), view, on_quit=done.set)

    try:
        tui.start()
        if title:
            tui.terminal.set_title(title)
        await done.wait()
    finally:
        tui.stop()
        logger.debug("Viewer closed after %d renders", tui.render_count)
