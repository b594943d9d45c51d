"""Stream event models.

A ``StreamEvent`` is the unit flowing from the multiplexer to the transport.
Every event is tagged with a ``TranscriptKey``; for one key a stage emits
zero or more ``chunk`` events followed by exactly one terminal event
(``end`` or ``error``).
"""

from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple


class EventType(str, Enum):
    """Kinds of stream event."""

    CHUNK = "chunk"
    END = "end"
    ERROR = "error"


class TranscriptKey(NamedTuple):
    """(agent id, display name) pair identifying one transcript."""

    agent_id: str
    agent_name: str


@dataclass(frozen=True)
class StreamEvent:
    """A tagged chunk, end or error event."""

    type: EventType
    agent_id: str
    agent_name: str
    content: str | None = None
    error: str | None = None

    @property
    def key(self) -> TranscriptKey:
        return TranscriptKey(self.agent_id, self.agent_name)

    @property
    def is_terminal(self) -> bool:
        return self.type is not EventType.CHUNK

    @classmethod
    def chunk(cls, key: TranscriptKey, content: str) -> "StreamEvent":
        return cls(EventType.CHUNK, key.agent_id, key.agent_name, content=content)

    @classmethod
    def end(cls, key: TranscriptKey) -> "StreamEvent":
        return cls(EventType.END, key.agent_id, key.agent_name)

    @classmethod
    def failure(cls, key: TranscriptKey, error: str) -> "StreamEvent":
        return cls(EventType.ERROR, key.agent_id, key.agent_name, error=error)

    def to_record(self, include_agent: bool = True) -> dict:
        """Return the JSON record for this event."""
        record: dict = {"type": self.type.value}
        if include_agent:
            record["agentId"] = self.agent_id
            record["agentName"] = self.agent_name
        record["content"] = self.content
        record["error"] = self.error
        return record

    @classmethod
    def from_record(
        cls, record: dict, key: TranscriptKey | None = None
    ) -> "StreamEvent":
        """Build an event from a decoded record.

        Records from the single-agent endpoint carry no agent fields, so the
        caller supplies ``key``. Raises ValueError on an unknown type.
        """
        event_type = EventType(record["type"])
        if key is None:
            key = TranscriptKey(record["agentId"], record["agentName"])
        return cls(
            event_type,
            key.agent_id,
            key.agent_name,
            content=record.get("content"),
            error=record.get("error"),
        )
