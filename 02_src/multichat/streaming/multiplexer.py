"""Concurrent fan-out of fragment streams onto one event stream."""

import asyncio
from collections.abc import AsyncIterator, Callable, Sequence
from dataclasses import dataclass

from ..errors import ProviderError
from ..logging_config import get_logger
from ..models import StreamEvent, TranscriptKey
from .sink import EventSink

logger = get_logger(__name__)

FragmentSource = Callable[[], AsyncIterator[str]]


@dataclass
class StreamTask:
    """One transcript's fragment source.

    ``open`` is called inside the task, so exceptions raised while opening
    the stream are contained like any mid-stream failure. A task built with
    ``failed`` emits a single error event without opening anything.
    """

    key: TranscriptKey
    open: FragmentSource | None = None
    error: str | None = None

    @classmethod
    def failed(cls, key: TranscriptKey, error: str) -> "StreamTask":
        return cls(key=key, error=error)


def describe_error(exc: BaseException) -> str:
    """Human-readable message for an error event.

    Provider failures carry the vendor's own message; the ``producer:model``
    prefix is only for the logs.
    """
    message = exc.reason if isinstance(exc, ProviderError) else str(exc)
    return message if message else exc.__class__.__name__


class FragmentMultiplexer:
    """Runs stream tasks concurrently and merges their events.

    Per key the output is the task's fragments as ``chunk`` events in
    production order followed by exactly one ``end`` or ``error``. Keys
    interleave freely. The merged stream finishes once every task has
    emitted its terminal event.
    """

    async def run(self, tasks: Sequence[StreamTask]) -> AsyncIterator[StreamEvent]:
        """Yield the merged events of ``tasks``."""
        sink = EventSink()
        workers = [
            asyncio.create_task(self._pump(task, sink), name=f"stream:{task.key.agent_id}")
            for task in tasks
        ]

        async def join() -> None:
            try:
                await asyncio.gather(*workers)
            finally:
                sink.close()

        joiner = asyncio.create_task(join())
        try:
            async for event in sink:
                yield event
            # Surfaces anything unexpected raised outside the per-task boundary.
            await joiner
        finally:
            pending = [worker for worker in workers if not worker.done()]
            if pending or not joiner.done():
                logger.info("Stream consumer went away, cancelling %d task(s)", len(pending))
                sink.close()
                for worker in pending:
                    worker.cancel()
                joiner.cancel()
                await asyncio.gather(joiner, *workers, return_exceptions=True)

    async def _pump(self, task: StreamTask, sink: EventSink) -> None:
        """Drive one task to its terminal event."""
        key = task.key
        if task.error is not None or task.open is None:
            await sink.put(StreamEvent.failure(key, task.error or "No stream source"))
            return

        logger.debug("Stream started", extra={"agent_id": key.agent_id, "agent_name": key.agent_name})
        count = 0
        try:
            async for fragment in task.open():
                count += 1
                await sink.put(StreamEvent.chunk(key, fragment))
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning(
                "Stream failed after %d chunk(s): %s",
                count,
                e,
                extra={"agent_id": key.agent_id, "agent_name": key.agent_name},
            )
            await sink.put(StreamEvent.failure(key, describe_error(e)))
            return

        logger.debug(
            "Stream finished with %d chunk(s)",
            count,
            extra={"agent_id": key.agent_id, "agent_name": key.agent_name},
        )
        await sink.put(StreamEvent.end(key))
