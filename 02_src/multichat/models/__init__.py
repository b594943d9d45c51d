"""Core data models for Multichat."""

from .agents import Agent, Producer
from .events import EventType, StreamEvent, TranscriptKey
from .messages import (
    ANALYSIS_SUFFIX,
    ERROR_SUFFIX,
    TABLE_SUFFIX,
    Message,
    Role,
    base_agent_name,
    stage_suffix,
    to_provider_messages,
)

__all__ = [
    # Messages
    "Message",
    "Role",
    "ANALYSIS_SUFFIX",
    "ERROR_SUFFIX",
    "TABLE_SUFFIX",
    "base_agent_name",
    "stage_suffix",
    "to_provider_messages",
    # Agents
    "Agent",
    "Producer",
    # Events
    "EventType",
    "StreamEvent",
    "TranscriptKey",
]
