"""Keyboard input parsing for the viewer's host terminal.

Turns one complete input sequence into a key identifier such as ``"up"``,
``"backspace"``, ``"ctrl+c"``, ``"shift+left"`` or a plain printable
character.  Handles legacy xterm/VT sequences, including the
``CSI 1 ; <modifier> <final>`` form used for modified arrows.
"""

from __future__ import annotations

import re

KeyId = str

# ---------------------------------------------------------------------------
# Key helper object
# ---------------------------------------------------------------------------


class Key:
    """Named key constants and modifier combinators."""

    escape = "escape"
    enter = "enter"
    tab = "tab"
    space = "space"
    backspace = "backspace"
    delete = "delete"
    home = "home"
    end = "end"
    page_up = "pageUp"
    page_down = "pageDown"
    up = "up"
    down = "down"
    left = "left"
    right = "right"

    @staticmethod
    def ctrl(key: str) -> str:
        return f"ctrl+{key}"

    @staticmethod
    def shift(key: str) -> str:
        return f"shift+{key}"

    @staticmethod
    def alt(key: str) -> str:
        return f"alt+{key}"


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MODIFIERS: dict[str, int] = {
    "shift": 1,
    "alt": 2,
    "ctrl": 4,
}

# Final byte of ``CSI [1;mod] X`` / ``SS3 X`` -> key name
_FINAL_KEYS: dict[str, str] = {
    "A": "up",
    "B": "down",
    "C": "right",
    "D": "left",
    "H": "home",
    "F": "end",
    "E": "clear",
    "P": "f1",
    "Q": "f2",
    "R": "f3",
    "S": "f4",
}

# Number of ``CSI <n> [;mod] ~`` -> key name
_TILDE_KEYS: dict[int, str] = {
    1: "home",
    2: "insert",
    3: "delete",
    4: "end",
    5: "pageUp",
    6: "pageDown",
    7: "home",
    8: "end",
    15: "f5",
    17: "f6",
    18: "f7",
    19: "f8",
    20: "f9",
    21: "f10",
    23: "f11",
    24: "f12",
}

_CSI_FINAL_RE = re.compile(r"^\x1b\[(?:1;(\d+))?([ABCDHFEPQRS])$")
_SS3_RE = re.compile(r"^\x1bO(\d*)([ABCDHFPQRS])$")
_CSI_TILDE_RE = re.compile(r"^\x1b\[(\d+)(?:;(\d+))?~$")


def _modifier_prefix(modifier: int) -> str:
    """Translate an xterm modifier parameter (1 + bitmask) to a key prefix."""
    mod = max(modifier - 1, 0)
    prefix = ""
    if mod & MODIFIERS["ctrl"]:
        prefix += "ctrl+"
    if mod & MODIFIERS["shift"]:
        prefix += "shift+"
    if mod & MODIFIERS["alt"]:
        prefix += "alt+"
    return prefix


# ---------------------------------------------------------------------------
# parse_key
# ---------------------------------------------------------------------------


def parse_key(data: str) -> KeyId | None:  # noqa: C901
    """Parse raw terminal input and return the key identifier, or ``None``."""
    if not data:
        return None

    # --- Escape sequences ---
    m = _CSI_FINAL_RE.match(data)
    if m:
        return _modifier_prefix(int(m.group(1) or 1)) + _FINAL_KEYS[m.group(2)]

    m = _SS3_RE.match(data)
    if m:
        return _modifier_prefix(int(m.group(1) or 1)) + _FINAL_KEYS[m.group(2)]

    m = _CSI_TILDE_RE.match(data)
    if m:
        name = _TILDE_KEYS.get(int(m.group(1)))
        if name is None:
            return None
        return _modifier_prefix(int(m.group(2) or 1)) + name

    if data == "\x1b[Z":
        return "shift+tab"

    # --- Simple single-byte keys ---
    if data == "\x1b":
        return "escape"
    if data == "\r" or data == "\n":
        return "enter"
    if data == "\t":
        return "tab"
    if data == " ":
        return "space"
    if data == "\x7f" or data == "\x08":
        return "backspace"
    if data == "\x00":
        return "ctrl+space"

    # --- Ctrl + letter (0x01 - 0x1a) ---
    if len(data) == 1 and 1 <= ord(data) <= 26:
        return "ctrl+" + chr(ord(data) + ord("a") - 1)

    # --- Alt + key (ESC prefix) ---
    if len(data) == 2 and data[0] == "\x1b":
        inner = parse_key(data[1])
        if inner is None or inner.startswith("alt+"):
            return None
        return "alt+" + inner

    # --- Plain printable character ---
    if len(data) == 1 and data.isprintable():
        return data

    return None


def matches_key(data: str, key_id: KeyId) -> bool:
    """Return ``True`` if *data* is the key named by *key_id*.

    Modifier order in *key_id* does not matter (``"shift+ctrl+up"`` equals
    ``"ctrl+shift+up"``) and letters are compared case-insensitively.
    """
    parsed = parse_key(data)
    if parsed is None:
        return False
    return _normalize(parsed) == _normalize(key_id)


def _normalize(key_id: str) -> tuple[frozenset[str], str]:
    # "+" itself is a valid key
    if key_id.endswith("+"):
        head, base = key_id[:-1], "+"
    else:
        head, _, base = key_id.rpartition("+")
    if len(base) == 1:
        base = base.lower()
    return (frozenset(p.lower() for p in head.split("+") if p), base)
