"""Client-side conversation log driven by stream events."""

from multichat.models import (
    ERROR_SUFFIX,
    EventType,
    Message,
    StreamEvent,
    TranscriptKey,
    base_agent_name,
    stage_suffix,
)

COMPARISON_SEPARATOR = "-- Comparison Analysis --"


class Conversation:
    """Ordered message log.

    Assistant messages start as empty loading placeholders and are updated
    in place by the events for their transcript key. Messages are never
    removed.
    """

    def __init__(self, messages: list[Message] | None = None):
        self.messages: list[Message] = list(messages or [])

    def add_user_message(self, text: str) -> Message:
        message = Message(role="user", content=text)
        self.messages.append(message)
        return message

    def add_placeholder(self, agent_id: str, agent_name: str) -> Message:
        message = Message(
            role="assistant",
            content="",
            agent_id=agent_id,
            agent_name=agent_name,
            is_loading=True,
        )
        self.messages.append(message)
        return message

    def add_separator(self, text: str = COMPARISON_SEPARATOR) -> Message:
        message = Message(role="separator", content=text)
        self.messages.append(message)
        return message

    def add_notice(self, agent_name: str, content: str) -> Message:
        """Append a finished assistant message not tied to any agent."""
        message = Message(role="assistant", content=content, agent_name=agent_name)
        self.messages.append(message)
        return message

    @property
    def is_streaming(self) -> bool:
        return any(message.is_loading for message in self.messages)

    def history(self) -> list[Message]:
        """Messages to send with the next query.

        Separators, placeholders and assistant entries left empty (a skipped
        summary, an answer with no text) are not part of the history.
        """
        return [
            message
            for message in self.messages
            if message.role != "separator"
            and not message.is_loading
            and (message.role != "assistant" or message.content)
        ]

    def find_loading(self, key: TranscriptKey) -> Message | None:
        """The newest loading placeholder for ``key``.

        Falls back to a placeholder for the same agent and stage when the
        display names differ (the server names agents from its registry).
        """
        loading = [
            m for m in reversed(self.messages) if m.is_loading and m.agent_id == key.agent_id
        ]
        for message in loading:
            if message.agent_name == key.agent_name:
                return message
        suffix = stage_suffix(key.agent_name)
        for message in loading:
            if stage_suffix(message.agent_name or "") == suffix:
                return message
        return None

    def apply(self, event: StreamEvent) -> Message:
        """Update the placeholder for the event's key, creating it if needed."""
        message = self.find_loading(event.key)
        if message is None:
            message = self.add_placeholder(event.agent_id, event.agent_name)
        message.agent_name = event.agent_name

        if event.type is EventType.CHUNK:
            message.content += event.content or ""
        elif event.type is EventType.END:
            message.is_loading = False
        else:
            self.fail(message, event.error or "Unknown error")
        return message

    def fail(self, message: Message, error: str) -> None:
        """Mark a message as failed, keeping any partial text."""
        message.content = f"Error: {error}\n\n{message.content}"
        message.is_loading = False
        name = message.agent_name or message.agent_id or ""
        message.agent_name = base_agent_name(name) + ERROR_SUFFIX

    def last_user_index(self) -> int | None:
        for index in range(len(self.messages) - 1, -1, -1):
            if self.messages[index].role == "user":
                return index
        return None

    def last_user_message(self) -> Message | None:
        index = self.last_user_index()
        return None if index is None else self.messages[index]

    def comparable_responses(self) -> list[Message]:
        """Successful answers to the last user message."""
        index = self.last_user_index()
        if index is None:
            return []
        return [m for m in self.messages[index + 1 :] if m.is_usable_response]

    def can_compare(self) -> bool:
        """Whether the last turn has two or more answers and no comparison yet."""
        index = self.last_user_index()
        if index is None or self.is_streaming:
            return False
        if any(m.role == "separator" for m in self.messages[index + 1 :]):
            return False
        return len(self.comparable_responses()) > 1
