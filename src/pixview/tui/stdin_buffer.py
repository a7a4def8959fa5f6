"""StdinBuffer buffers raw input and emits complete sequences.

Reads from stdin can split an escape sequence (an arrow key, a mouse report)
across chunks.  Without buffering the tail of a split sequence would be
misread as ordinary key presses.
"""

from __future__ import annotations

import asyncio
import re
from typing import Callable, Literal

ESC = "\x1b"

SequenceStatus = Literal["complete", "incomplete", "not-escape"]

_SGR_MOUSE_PAYLOAD_RE = re.compile(r"^<\d+;\d+;\d+[Mm]$")


def sequence_status(data: str) -> SequenceStatus:
    """Classify *data* as a complete or incomplete escape sequence."""
    if not data.startswith(ESC):
        return "not-escape"
    if len(data) == 1:
        return "incomplete"

    introducer = data[1]

    # CSI: ESC [ params final
    if introducer == "[":
        if data.startswith(f"{ESC}[M"):
            # X10 mouse: ESC [ M b x y
            return "complete" if len(data) >= 6 else "incomplete"
        if len(data) < 3:
            return "incomplete"
        payload = data[2:]
        if not 0x40 <= ord(payload[-1]) <= 0x7E:
            return "incomplete"
        if payload.startswith("<"):
            # SGR mouse reports contain the final bytes only at the end
            return "complete" if _SGR_MOUSE_PAYLOAD_RE.match(payload) else "incomplete"
        return "complete"

    # OSC / DCS / APC: terminated by ST or BEL
    if introducer in "]P_":
        if data.endswith(f"{ESC}\\") or (introducer == "]" and data.endswith("\x07")):
            return "complete"
        return "incomplete"

    # SS3: ESC O [mod] final
    if introducer == "O":
        if len(data) < 3:
            return "incomplete"
        return "complete" if data[-1].isalpha() else "incomplete"

    # Meta key: ESC followed by one character
    return "complete"


def split_sequences(buffer: str) -> tuple[list[str], str]:
    """Split *buffer* into complete sequences and an unfinished remainder."""
    sequences: list[str] = []
    pos = 0

    while pos < len(buffer):
        if buffer[pos] != ESC:
            sequences.append(buffer[pos])
            pos += 1
            continue

        end = pos + 1
        while True:
            if end > len(buffer):
                return sequences, buffer[pos:]
            if sequence_status(buffer[pos:end]) != "incomplete":
                break
            end += 1
        sequences.append(buffer[pos:end])
        pos = end

    return sequences, ""


class StdinBuffer:
    """Accumulates input chunks and emits complete sequences.

    An unfinished sequence is held back for *timeout* seconds; if nothing
    completes it, it is emitted as-is (a lone ``ESC`` is the Escape key).
    """

    def __init__(self, *, timeout: float = 0.01) -> None:
        self._buffer: str = ""
        self._timeout: float = timeout
        self._timeout_handle: asyncio.TimerHandle | None = None
        self._on_data: Callable[[str], None] | None = None

    def on_data(self, callback: Callable[[str], None]) -> None:
        """Set callback for complete sequences."""
        self._on_data = callback

    def _emit(self, data: str) -> None:
        if self._on_data is not None:
            self._on_data(data)

    def process(self, data: str) -> None:
        """Feed input data into the buffer."""
        self._cancel_timeout()

        sequences, self._buffer = split_sequences(self._buffer + data)
        for sequence in sequences:
            self._emit(sequence)

        if not self._buffer:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No event loop -- flush immediately
            for sequence in self.flush():
                self._emit(sequence)
            return
        self._timeout_handle = loop.call_later(self._timeout, self._flush_timeout)

    def _flush_timeout(self) -> None:
        self._timeout_handle = None
        for sequence in self.flush():
            self._emit(sequence)

    def _cancel_timeout(self) -> None:
        if self._timeout_handle is not None:
            self._timeout_handle.cancel()
            self._timeout_handle = None

    def flush(self) -> list[str]:
        """Return and drop whatever is buffered."""
        self._cancel_timeout()
        if not self._buffer:
            return []
        sequences = [self._buffer]
        self._buffer = ""
        return sequences

    def get_buffer(self) -> str:
        return self._buffer

    def destroy(self) -> None:
        self._cancel_timeout()
        self._buffer = ""
