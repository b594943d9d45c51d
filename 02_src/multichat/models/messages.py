"""Conversation message models."""

from dataclasses import dataclass
from typing import Literal

Role = Literal["user", "assistant", "separator"]

ERROR_SUFFIX = " (Error)"
ANALYSIS_SUFFIX = " (Analysis)"
TABLE_SUFFIX = " (Table)"

# Display-name markers that exclude a message from later stages.
STAGE_MARKERS = ("(Error)", "(Analysis)", "(Table)")


@dataclass
class Message:
    """A single turn in a conversation."""

    role: Role
    content: str
    agent_id: str | None = None
    agent_name: str | None = None
    is_loading: bool = False  # client-side only, never serialized

    @property
    def is_usable_response(self) -> bool:
        """True for a finished assistant answer that later stages may quote."""
        if self.role != "assistant" or not self.agent_id or self.is_loading:
            return False
        name = self.agent_name or ""
        return not any(marker in name for marker in STAGE_MARKERS)

    def to_wire(self) -> dict:
        """Serialize to the JSON shape used by the HTTP API."""
        data: dict = {"role": self.role, "content": self.content}
        if self.agent_id is not None:
            data["agentId"] = self.agent_id
        if self.agent_name is not None:
            data["agentName"] = self.agent_name
        return data

    @classmethod
    def from_wire(cls, data: dict) -> "Message":
        """Build a Message from its JSON shape."""
        return cls(
            role=data["role"],
            content=data.get("content") or "",
            agent_id=data.get("agentId"),
            agent_name=data.get("agentName"),
        )


def stage_suffix(agent_name: str) -> str:
    """The trailing stage suffix of a display name, or ""."""
    for suffix in (ANALYSIS_SUFFIX, TABLE_SUFFIX, ERROR_SUFFIX):
        if agent_name.endswith(suffix):
            return suffix
    return ""


def base_agent_name(agent_name: str) -> str:
    """Strip a trailing stage suffix from a display name."""
    suffix = stage_suffix(agent_name)
    return agent_name[: -len(suffix)] if suffix else agent_name


def to_provider_messages(messages: list[Message]) -> list[dict]:
    """Convert a conversation to provider history, dropping separators."""
    return [
        {"role": msg.role, "content": msg.content}
        for msg in messages
        if msg.role != "separator"
    ]
