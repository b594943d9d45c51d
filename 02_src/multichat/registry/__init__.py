"""Agent registry module."""

from .registry import (
    DEFAULT_AGENTS,
    SUMMARIZER_AGENT_ID,
    AgentRegistry,
    IAgentRegistry,
)

__all__ = ["AgentRegistry", "IAgentRegistry", "DEFAULT_AGENTS", "SUMMARIZER_AGENT_ID"]
