"""Streaming module: multiplexer, accumulator and transport codec."""

from .accumulator import TranscriptAccumulator
from .codec import (
    MEDIA_TYPE,
    StreamDecoder,
    decode_events,
    decode_records,
    encode_event,
    encode_events,
)
from .multiplexer import FragmentMultiplexer, StreamTask, describe_error
from .sink import EventSink

__all__ = [
    "EventSink",
    "FragmentMultiplexer",
    "StreamTask",
    "describe_error",
    "TranscriptAccumulator",
    "MEDIA_TYPE",
    "StreamDecoder",
    "decode_events",
    "decode_records",
    "encode_event",
    "encode_events",
]
