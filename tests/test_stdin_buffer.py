"""Tests for pixview.tui.stdin_buffer.StdinBuffer."""

from __future__ import annotations

import asyncio

import pytest

from pixview.tui.stdin_buffer import (
    ESC,
    StdinBuffer,
    sequence_status,
    split_sequences,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class Collector:
    """Collects emitted sequences for assertions."""

    def __init__(self) -> None:
        self.data: list[str] = []

    def on_data(self, d: str) -> None:
        self.data.append(d)


def make_buffer(timeout: float = 0.01) -> tuple[StdinBuffer, Collector]:
    buf = StdinBuffer(timeout=timeout)
    col = Collector()
    buf.on_data(col.on_data)
    return buf, col


# ---------------------------------------------------------------------------
# sequence_status
# ---------------------------------------------------------------------------


class TestSequenceStatus:
    def test_plain_text_is_not_escape(self) -> None:
        assert sequence_status("x") == "not-escape"

    def test_lone_escape_is_incomplete(self) -> None:
        assert sequence_status(ESC) == "incomplete"

    @pytest.mark.parametrize(
        "data",
        [f"{ESC}[", f"{ESC}[1;5", f"{ESC}[<64;10", f"{ESC}[<64;10;5", f"{ESC}O", f"{ESC}]0;t"],
    )
    def test_incomplete(self, data: str) -> None:
        assert sequence_status(data) == "incomplete"

    @pytest.mark.parametrize(
        "data",
        [
            f"{ESC}[A",
            f"{ESC}[1;5C",
            f"{ESC}[3~",
            f"{ESC}[<64;10;5M",
            f"{ESC}[<0;1;1m",
            f"{ESC}OA",
            f"{ESC}]0;title\x07",
            f"{ESC}]0;title{ESC}\\",
            f"{ESC}x",
        ],
    )
    def test_complete(self, data: str) -> None:
        assert sequence_status(data) == "complete"

    def test_x10_mouse_needs_three_payload_bytes(self) -> None:
        assert sequence_status(f"{ESC}[M a") == "incomplete"
        assert sequence_status(f"{ESC}[M abc") == "complete"


class TestSplitSequences:
    def test_characters_are_split(self) -> None:
        assert split_sequences("ab") == (["a", "b"], "")

    def test_mixed_input(self) -> None:
        assert split_sequences(f"z{ESC}[Bq") == (["z", f"{ESC}[B", "q"], "")

    def test_unfinished_tail_is_kept(self) -> None:
        assert split_sequences(f"a{ESC}[<64;3") == (["a"], f"{ESC}[<64;3")

    def test_back_to_back_wheel_reports(self) -> None:
        report = f"{ESC}[<65;10;5M"
        assert split_sequences(report * 3) == ([report] * 3, "")


# ---------------------------------------------------------------------------
# StdinBuffer.process
# ---------------------------------------------------------------------------


class TestProcess:
    def test_complete_sequence_emitted(self) -> None:
        buf, col = make_buffer()
        buf.process(f"{ESC}[A")
        assert col.data == [f"{ESC}[A"]

    def test_chars_before_escape_emitted_first(self) -> None:
        buf, col = make_buffer()
        buf.process(f"ab{ESC}[A")
        assert col.data == ["a", "b", f"{ESC}[A"]

    def test_sgr_mouse_sequence(self) -> None:
        buf, col = make_buffer()
        buf.process(f"{ESC}[<64;50;25M")
        assert col.data == [f"{ESC}[<64;50;25M"]

    def test_without_event_loop_partial_is_flushed(self) -> None:
        buf, col = make_buffer()
        buf.process(ESC)
        assert col.data == [ESC]
        assert buf.get_buffer() == ""

    def test_no_callback_is_harmless(self) -> None:
        buf = StdinBuffer()
        buf.process("abc")
        assert buf.get_buffer() == ""

    @pytest.mark.asyncio
    async def test_partial_escape_buffered(self) -> None:
        buf, col = make_buffer()
        buf.process(ESC)
        assert col.data == []
        assert buf.get_buffer() == ESC

    @pytest.mark.asyncio
    async def test_split_mouse_report_across_chunks(self) -> None:
        buf, col = make_buffer()
        buf.process(f"{ESC}[<64;1")
        assert col.data == []
        buf.process("0;5M")
        assert col.data == [f"{ESC}[<64;10;5M"]


# ---------------------------------------------------------------------------
# flush / destroy
# ---------------------------------------------------------------------------


class TestFlush:
    def test_flush_empty(self) -> None:
        assert StdinBuffer().flush() == []

    @pytest.mark.asyncio
    async def test_flush_returns_pending(self) -> None:
        buf, col = make_buffer()
        buf.process(f"{ESC}[")
        assert buf.flush() == [f"{ESC}["]
        assert buf.get_buffer() == ""
        assert col.data == []

    @pytest.mark.asyncio
    async def test_destroy_drops_pending(self) -> None:
        buf, col = make_buffer(timeout=0.02)
        buf.process(ESC)
        buf.destroy()
        await asyncio.sleep(0.05)
        assert col.data == []
        assert buf.get_buffer() == ""


class TestTimeoutFlush:
    @pytest.mark.asyncio
    async def test_incomplete_sequence_flushed_on_timeout(self) -> None:
        buf, col = make_buffer(timeout=0.02)
        buf.process(ESC)
        assert col.data == []
        await asyncio.sleep(0.05)
        assert col.data == [ESC]

    @pytest.mark.asyncio
    async def test_timeout_cancelled_on_new_data(self) -> None:
        buf, col = make_buffer(timeout=0.05)
        buf.process(ESC)
        buf.process("[A")
        assert col.data == [f"{ESC}[A"]
        await asyncio.sleep(0.08)
        assert col.data == [f"{ESC}[A"]
