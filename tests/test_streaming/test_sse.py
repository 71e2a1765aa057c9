"""Tests for latitude_sdk.streaming.sse -- parse_sse, iter_sse_blocks, format_sse."""

from __future__ import annotations

import json

import httpx
import pytest

from latitude_sdk.streaming.sse import format_sse, iter_sse_blocks, parse_sse
from tests.conftest import byte_chunks

# ---------------------------------------------------------------------------
# parse_sse
# ---------------------------------------------------------------------------


class TestParseSse:
    def test_event_and_data(self) -> None:
        assert parse_sse('event: latitude-event\ndata: {"a":1}') == {
            "event": "latitude-event",
            "data": '{"a":1}',
        }

    @pytest.mark.parametrize("block", [None, "", "\n\n", ": keep-alive", ":comment\n:another"])
    def test_blocks_without_fields(self, block: str | None) -> None:
        assert parse_sse(block) is None

    def test_crlf_and_cr_line_breaks(self) -> None:
        assert parse_sse("event: x\r\ndata: 1\rid: 7") == {"event": "x", "data": "1", "id": "7"}

    def test_line_without_colon_is_empty_field(self) -> None:
        assert parse_sse("data: 1\nretry") == {"data": "1", "retry": ""}

    def test_values_are_stripped(self) -> None:
        assert parse_sse("data:    padded value   ") == {"data": "padded value"}

    def test_only_first_colon_splits(self) -> None:
        assert parse_sse('data: {"url": "http://x"}') == {"data": '{"url": "http://x"}'}

    def test_repeated_fields_are_joined(self) -> None:
        assert parse_sse("data: one\ndata: two\ndata: three") == {"data": "one\ntwo\nthree"}

    def test_comments_are_ignored(self) -> None:
        assert parse_sse(": ping\nevent: e\n:pong\ndata: d") == {"event": "e", "data": "d"}


class TestFormatRoundTrip:
    """Formatting then parsing a frame yields the original name and payload."""

    @pytest.mark.parametrize(
        "payload",
        [{"type": "chain-started"}, {"text": "line one\nline two"}, {"nested": {"list": [1, 2, 3]}}, []],
    )
    def test_round_trip(self, payload: object) -> None:
        frame = format_sse("provider-event", json.dumps(payload))
        parsed = parse_sse(frame)
        assert parsed is not None
        assert parsed["event"] == "provider-event"
        assert json.loads(parsed["data"]) == payload

    def test_frame_ends_with_blank_line(self) -> None:
        assert format_sse("e", "1").endswith("\n\n")


# ---------------------------------------------------------------------------
# iter_sse_blocks
# ---------------------------------------------------------------------------


async def _collect(text: str, chunk_size: int | None = None) -> list[str]:
    response = httpx.Response(200, content=byte_chunks(text, chunk_size))
    return [block async for block in iter_sse_blocks(response.aiter_lines())]


class TestIterSseBlocks:
    @pytest.mark.asyncio
    async def test_blocks_split_on_blank_lines(self) -> None:
        blocks = await _collect("event: a\ndata: 1\n\nevent: b\ndata: 2\n\n")
        assert blocks == ["event: a\ndata: 1", "event: b\ndata: 2"]

    @pytest.mark.asyncio
    async def test_crlf_stream(self) -> None:
        blocks = await _collect("event: a\r\ndata: 1\r\n\r\nevent: b\r\ndata: 2\r\n\r\n")
        assert [parse_sse(b) for b in blocks] == [
            {"event": "a", "data": "1"},
            {"event": "b", "data": "2"},
        ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("chunk_size", [1, 2, 3, 5])
    async def test_lines_split_across_network_chunks(self, chunk_size: int) -> None:
        text = "event: a\r\ndata: {\"k\": \"v\"}\r\n\r\nevent: b\ndata: 2\n\n"
        blocks = await _collect(text, chunk_size)
        assert [parse_sse(b) for b in blocks] == [
            {"event": "a", "data": '{"k": "v"}'},
            {"event": "b", "data": "2"},
        ]

    @pytest.mark.asyncio
    async def test_trailing_block_without_blank_line_is_flushed(self) -> None:
        blocks = await _collect("event: a\ndata: 1\n\nevent: b\ndata: 2")
        assert blocks[-1] == "event: b\ndata: 2"

    @pytest.mark.asyncio
    async def test_extra_blank_lines_do_not_create_blocks(self) -> None:
        assert await _collect("\n\n\nevent: a\ndata: 1\n\n\n\n") == ["event: a\ndata: 1"]
