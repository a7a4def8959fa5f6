"""Input events consumed by the image view.

Raw terminal input arrives as complete escape sequences (see
``pixview.tui.stdin_buffer``).  ``parse_event`` turns one sequence into a
key, character or mouse event.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal, Union

from pixview.tui.keys import parse_key

EventResult = Literal["consumed", "ignored"]

MouseAction = Literal[
    "press", "release", "drag", "wheel_up", "wheel_down", "wheel_left", "wheel_right"
]


@dataclass(frozen=True)
class KeyEvent:
    """A named key such as ``"up"``, ``"backspace"`` or ``"ctrl+c"``."""

    key: str


@dataclass(frozen=True)
class CharEvent:
    """A single printable character."""

    char: str


@dataclass(frozen=True)
class MouseEvent:
    action: MouseAction
    col: int = 0
    row: int = 0
    button: int = 0


Event = Union[KeyEvent, CharEvent, MouseEvent]

# SGR mouse report: CSI < button ; x ; y (M = press, m = release)
_SGR_MOUSE_RE = re.compile(r"^\x1b\[<(\d+);(\d+);(\d+)([Mm])$")

_WHEEL_ACTIONS: dict[int, MouseAction] = {
    64: "wheel_up",
    65: "wheel_down",
    66: "wheel_left",
    67: "wheel_right",
}


def parse_mouse(data: str) -> MouseEvent | None:
    """Decode an SGR mouse report into a ``MouseEvent`` (0-based cells)."""
    m = _SGR_MOUSE_RE.match(data)
    if m is None:
        return None

    code = int(m.group(1))
    col = int(m.group(2)) - 1
    row = int(m.group(3)) - 1
    # Strip shift/alt/ctrl modifier bits.
    base = code & ~(4 | 8 | 16)

    wheel = _WHEEL_ACTIONS.get(base)
    if wheel is not None:
        return MouseEvent(wheel, col, row)
    if base & 32:
        return MouseEvent("drag", col, row, base & 3)
    if m.group(4) == "m":
        return MouseEvent("release", col, row, base & 3)
    return MouseEvent("press", col, row, base & 3)


def parse_event(data: str) -> Event | None:
    """Decode one complete input sequence, or return ``None`` if unknown."""
    if not data:
        return None

    mouse = parse_mouse(data)
    if mouse is not None:
        return mouse

    key = parse_key(data)
    if key is None:
        return None
    if len(key) == 1:
        return CharEvent(key)
    return KeyEvent(key)
