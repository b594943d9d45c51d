"""Producer to provider dispatch.

Providers are created lazily on first use so that a missing API key only
fails the agents that need that vendor, as a configuration error scoped to
their stream.
"""

from collections.abc import AsyncIterator, Callable

from ..config import Settings
from ..errors import ConfigurationError
from ..logging_config import get_logger
from ..models import Agent, Producer
from .anthropic_provider import AnthropicProvider
from .google_provider import GoogleProvider
from .llm_provider import IStreamingProvider
from .openai_provider import OpenAIProvider

logger = get_logger(__name__)

ProviderFactory = Callable[[Settings], IStreamingProvider]


PROVIDER_FACTORIES: dict[Producer, ProviderFactory] = {
    Producer.OPENAI: lambda s: OpenAIProvider(api_key=s.openai_api_key),
    Producer.ANTHROPIC: lambda s: AnthropicProvider(
        api_key=s.anthropic_api_key, max_tokens=s.anthropic_max_tokens
    ),
    Producer.GOOGLE: lambda s: GoogleProvider(api_key=s.google_api_key),
}


class ProviderSet:
    """Resolves an agent's producer to a streaming provider."""

    def __init__(
        self,
        settings: Settings | None = None,
        providers: dict[Producer, IStreamingProvider] | None = None,
        factories: dict[Producer, ProviderFactory] | None = None,
    ):
        self._settings = settings or Settings.from_env()
        self._providers: dict[Producer, IStreamingProvider] = dict(providers or {})
        self._factories = dict(PROVIDER_FACTORIES if factories is None else factories)

    def supports(self, producer: Producer) -> bool:
        """Whether an adapter exists for this producer."""
        return producer in self._providers or producer in self._factories

    def get(self, producer: Producer) -> IStreamingProvider:
        """Return the provider for ``producer``, creating it on first use."""
        provider = self._providers.get(producer)
        if provider is not None:
            return provider

        factory = self._factories.get(producer)
        if factory is None:
            raise ConfigurationError(f"Unsupported producer: {producer.value}")

        provider = factory(self._settings)
        self._providers[producer] = provider
        logger.info("Initialized %s provider", producer.value)
        return provider

    def stream(
        self,
        agent: Agent,
        messages: list[dict],
        system: str | None = None,
    ) -> AsyncIterator[str]:
        """Open ``agent``'s fragment stream."""
        return self.get(agent.producer).stream(agent.model, messages, system=system)
