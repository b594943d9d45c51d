"""Streaming response helpers."""

from collections.abc import AsyncIterator
from contextlib import aclosing

from fastapi.responses import StreamingResponse

from ..logging_config import get_logger
from ..models import StreamEvent
from ..streaming import MEDIA_TYPE, encode_event

logger = get_logger(__name__)


async def encoded_stream(
    events: AsyncIterator[StreamEvent], include_agent: bool = True
) -> AsyncIterator[bytes]:
    """Encode events for the response body.

    Once the response has started an unexpected error can no longer become
    an HTTP status, so it is logged and the body is closed.
    """
    try:
        async with aclosing(events) as stream:
            async for event in stream:
                yield encode_event(event, include_agent)
    except Exception:
        logger.exception("Event stream aborted")


def event_stream_response(
    events: AsyncIterator[StreamEvent], include_agent: bool = True
) -> StreamingResponse:
    """Wrap an event stream as a newline-delimited JSON response."""
    return StreamingResponse(
        encoded_stream(events, include_agent),
        media_type=MEDIA_TYPE,
    )
