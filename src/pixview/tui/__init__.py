"""Host terminal runtime for pixview: raw terminal I/O, input parsing, text width.

The ``TUI`` driver lives in :mod:`pixview.tui.tui`.
"""

from pixview.tui.keys import Key, KeyId, matches_key, parse_key
from pixview.tui.stdin_buffer import StdinBuffer
from pixview.tui.terminal import ProcessTerminal, Terminal
from pixview.tui.utils import visible_width

__all__ = [
    # Keys
    "Key",
    "KeyId",
    "matches_key",
    "parse_key",
    # Stdin buffer
    "StdinBuffer",
    # Terminal
    "ProcessTerminal",
    "Terminal",
    # Utilities
    "visible_width",
]
