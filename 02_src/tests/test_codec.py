"""Tests for the NDJSON stream codec."""

import json

import pytest

from conftest import collect
from multichat.models import StreamEvent, TranscriptKey
from multichat.streaming import (
    StreamDecoder,
    decode_events,
    decode_records,
    encode_event,
    encode_events,
)

KEY = TranscriptKey("claude-3.7", "Claude 3.7 Sonnet")

EVENTS = [
    StreamEvent.chunk(KEY, "Héllo, "),
    StreamEvent.chunk(KEY, "世界 🌍\nnew line"),
    StreamEvent.end(KEY),
    StreamEvent.failure(TranscriptKey("o3", "o3 (Analysis)"), "quota exceeded"),
]


async def _chunks(data: bytes, size: int):
    for start in range(0, len(data), size):
        yield data[start:start + size]


class TestEncode:
    """Tests for event encoding."""

    def test_one_record_per_line(self):
        encoded = encode_event(StreamEvent.chunk(KEY, "a\nb"))

        assert encoded.endswith(b"\n")
        assert encoded.count(b"\n") == 1
        assert json.loads(encoded) == {
            "type": "chunk",
            "agentId": "claude-3.7",
            "agentName": "Claude 3.7 Sonnet",
            "content": "a\nb",
            "error": None,
        }

    def test_without_agent_fields(self):
        record = json.loads(encode_event(StreamEvent.end(KEY), include_agent=False))
        assert record == {"type": "end", "content": None, "error": None}

    def test_non_ascii_is_utf8(self):
        encoded = encode_event(StreamEvent.chunk(KEY, "日本"))
        assert "日本".encode("utf-8") in encoded

    @pytest.mark.asyncio
    async def test_encode_events(self):
        records = await collect(encode_events(_aiter(EVENTS[:2]), include_agent=False))
        assert len(records) == 2
        assert all(b"agentId" not in record for record in records)


async def _aiter(items):
    for item in items:
        yield item


class TestDecode:
    """Tests for incremental decoding."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("size", [1, 2, 5, 64])
    async def test_arbitrary_byte_splits(self, size):
        data = b"".join(encode_event(event) for event in EVENTS)

        decoded = await collect(decode_events(_chunks(data, size)))

        assert decoded == EVENTS

    def test_feed_keeps_partial_record(self):
        decoder = StreamDecoder()
        data = encode_event(StreamEvent.chunk(KEY, "Paris"))

        assert decoder.feed(data[:10]) == []
        assert decoder.pending == data[:10]
        records = decoder.feed(data[10:])

        assert [r["content"] for r in records] == ["Paris"]
        assert decoder.pending == b""

    def test_flush_parses_trailing_record(self):
        decoder = StreamDecoder()
        decoder.feed(b'{"type": "end", "content": null, "error": null}')

        assert decoder.flush() == [{"type": "end", "content": None, "error": None}]
        assert decoder.flush() == []

    def test_malformed_records_are_dropped(self):
        decoder = StreamDecoder()
        data = (
            b"not json\n"
            b"\n"
            b"[1, 2]\n"
            b'{"content": "no type"}\n'
            b"\xff\xfe\n"
            b'{"type": "chunk", "content": "ok", "error": null}\n'
        )

        records = decoder.feed(data)

        assert records == [{"type": "chunk", "content": "ok", "error": None}]

    @pytest.mark.asyncio
    async def test_decode_events_drops_unknown_types(self):
        data = (
            b'{"type": "ping"}\n'
            b'{"type": "chunk", "content": "x"}\n'
            + encode_event(StreamEvent.end(KEY))
        )

        events = await collect(decode_events(_chunks(data, 7)))

        assert events == [StreamEvent.end(KEY)]

    @pytest.mark.asyncio
    async def test_decode_records_without_agent(self):
        data = b"".join(
            encode_event(event, include_agent=False)
            for event in (StreamEvent.chunk(KEY, "a"), StreamEvent.end(KEY))
        )

        records = await collect(decode_records(_chunks(data, 3)))

        assert [r["type"] for r in records] == ["chunk", "end"]
        assert StreamEvent.from_record(records[0], key=KEY) == StreamEvent.chunk(KEY, "a")
