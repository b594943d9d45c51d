"""LLM module."""

from .anthropic_provider import AnthropicProvider
from .google_provider import GoogleProvider, to_google_contents
from .llm_provider import IStreamingProvider, prompt_messages
from .openai_provider import OpenAIProvider
from .provider_set import PROVIDER_FACTORIES, ProviderSet

__all__ = [
    "IStreamingProvider",
    "prompt_messages",
    "AnthropicProvider",
    "GoogleProvider",
    "OpenAIProvider",
    "ProviderSet",
    "PROVIDER_FACTORIES",
    "to_google_contents",
]
