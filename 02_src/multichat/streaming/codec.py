"""Newline-delimited JSON framing for stream events.

Each event is one JSON object followed by ``\\n``. The decoder works on raw
bytes so a UTF-8 sequence split across network chunks is rejoined before
decoding (``\\n`` never occurs inside a multi-byte sequence).
"""

import json
from collections.abc import AsyncIterable, AsyncIterator

from ..logging_config import get_logger
from ..models import StreamEvent

logger = get_logger(__name__)

DELIMITER = b"\n"
MEDIA_TYPE = "text/plain; charset=utf-8"


def encode_event(event: StreamEvent, include_agent: bool = True) -> bytes:
    """Serialize one event to a complete, delimited record."""
    record = json.dumps(event.to_record(include_agent), ensure_ascii=False)
    return record.encode("utf-8") + DELIMITER


async def encode_events(
    events: AsyncIterable[StreamEvent], include_agent: bool = True
) -> AsyncIterator[bytes]:
    """Encode an event stream record by record."""
    async for event in events:
        yield encode_event(event, include_agent)


class StreamDecoder:
    """Incremental decoder for a delimited record stream."""

    def __init__(self) -> None:
        self._buffer = b""

    @property
    def pending(self) -> bytes:
        """Bytes of an incomplete trailing record."""
        return self._buffer

    def feed(self, data: bytes) -> list[dict]:
        """Add received bytes and return every record completed by them."""
        self._buffer += data
        *lines, self._buffer = self._buffer.split(DELIMITER)
        return [record for record in map(self._parse, lines) if record is not None]

    def flush(self) -> list[dict]:
        """Parse a final unterminated record at end of stream."""
        tail, self._buffer = self._buffer, b""
        record = self._parse(tail)
        return [record] if record is not None else []

    def _parse(self, line: bytes) -> dict | None:
        if not line.strip():
            return None
        try:
            record = json.loads(line.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning("Failed to parse stream record %r: %s", line[:200], e)
            return None
        if not isinstance(record, dict) or "type" not in record:
            logger.warning("Dropping stream record without a type: %r", line[:200])
            return None
        return record


async def decode_records(chunks: AsyncIterable[bytes]) -> AsyncIterator[dict]:
    """Decode records from an async byte stream."""
    decoder = StreamDecoder()
    async for chunk in chunks:
        for record in decoder.feed(chunk):
            yield record
    for record in decoder.flush():
        yield record


async def decode_events(chunks: AsyncIterable[bytes]) -> AsyncIterator[StreamEvent]:
    """Decode tagged events, dropping records that do not form an event."""
    async for record in decode_records(chunks):
        try:
            yield StreamEvent.from_record(record)
        except (KeyError, ValueError) as e:
            logger.warning("Dropping malformed event record %r: %s", record, e)
