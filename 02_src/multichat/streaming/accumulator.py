"""Per-transcript text accumulation."""

from ..logging_config import get_logger
from ..models import EventType, StreamEvent, TranscriptKey

logger = get_logger(__name__)


class TranscriptAccumulator:
    """Builds full texts from chunk events, keyed by transcript.

    A key's text is frozen when its terminal event is seen; only keys that
    ended with ``end`` count as completed.
    """

    def __init__(self) -> None:
        self._texts: dict[TranscriptKey, str] = {}
        self._outcomes: dict[TranscriptKey, EventType] = {}

    def apply(self, event: StreamEvent) -> None:
        """Fold one event into the transcript for its key."""
        key = event.key
        if key in self._outcomes:
            logger.warning("Ignoring %s event after terminal for %s", event.type.value, key)
            return

        if event.type is EventType.CHUNK:
            self._texts[key] = self._texts.get(key, "") + (event.content or "")
        else:
            self._texts.setdefault(key, "")
            self._outcomes[key] = event.type

    def text(self, key: TranscriptKey) -> str:
        return self._texts.get(key, "")

    def is_finished(self, key: TranscriptKey) -> bool:
        return key in self._outcomes

    def succeeded(self, key: TranscriptKey) -> bool:
        return self._outcomes.get(key) is EventType.END

    def completed(self) -> dict[TranscriptKey, str]:
        """Texts of every key that ended successfully, in first-seen order."""
        return {key: text for key, text in self._texts.items() if self.succeeded(key)}

    def keys(self) -> list[TranscriptKey]:
        return list(self._texts)
