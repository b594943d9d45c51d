"""Shared per-request output channel for stream events."""

import asyncio
from collections.abc import AsyncIterator

from ..logging_config import get_logger
from ..models import StreamEvent

logger = get_logger(__name__)

_CLOSED = object()


class EventSink:
    """Many-producer, single-consumer queue of whole events.

    Producers enqueue complete ``StreamEvent`` objects, so records never
    interleave. ``put`` after ``close`` is a no-op that returns False.
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def put(self, event: StreamEvent) -> bool:
        """Enqueue an event. Returns False if the sink is already closed."""
        if self._closed:
            logger.debug("Dropping %s event for closed sink: %s", event.type.value, event.key)
            return False
        await self._queue.put(event)
        return True

    def close(self) -> None:
        """Signal the consumer that no more events will arrive."""
        if self._closed:
            return
        self._closed = True
        self._queue.put_nowait(_CLOSED)

    async def __aiter__(self) -> AsyncIterator[StreamEvent]:
        while True:
            item = await self._queue.get()
            if item is _CLOSED:
                return
            yield item
