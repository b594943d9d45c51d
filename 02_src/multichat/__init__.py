"""Multichat: streaming multi-agent chat with comparison and summary."""

from .app import Application, IApplication
from .config import Settings
from .errors import ComparisonError, ConfigurationError, MultichatError, ProviderError
from .llm import (
    AnthropicProvider,
    GoogleProvider,
    IStreamingProvider,
    OpenAIProvider,
    ProviderSet,
)
from .models import (
    Agent,
    EventType,
    Message,
    Producer,
    StreamEvent,
    TranscriptKey,
)
from .orchestration import ComparisonPlan, IStageCoordinator, StageCoordinator
from .registry import AgentRegistry, IAgentRegistry
from .streaming import (
    FragmentMultiplexer,
    StreamDecoder,
    StreamTask,
    TranscriptAccumulator,
    encode_event,
)

__all__ = [
    # Application
    "Application",
    "IApplication",
    "Settings",
    # Errors
    "MultichatError",
    "ConfigurationError",
    "ProviderError",
    "ComparisonError",
    # Models
    "Agent",
    "Producer",
    "Message",
    "EventType",
    "StreamEvent",
    "TranscriptKey",
    # Components
    "IAgentRegistry",
    "AgentRegistry",
    "IStreamingProvider",
    "OpenAIProvider",
    "AnthropicProvider",
    "GoogleProvider",
    "ProviderSet",
    "FragmentMultiplexer",
    "StreamTask",
    "TranscriptAccumulator",
    "StreamDecoder",
    "encode_event",
    "IStageCoordinator",
    "StageCoordinator",
    "ComparisonPlan",
]
