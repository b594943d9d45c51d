"""Streaming provider for the Anthropic Messages API."""

import os
from collections.abc import AsyncIterator

import anthropic

from ..errors import ConfigurationError, ProviderError
from ..logging_config import get_logger
from ..models import Producer

logger = get_logger(__name__)


class AnthropicProvider:
    """Anthropic Claude API provider."""

    producer = Producer.ANTHROPIC

    def __init__(self, api_key: str | None = None, max_tokens: int = 1024):
        self._api_key = api_key or os.getenv("ANTHROPIC_API_KEY")
        if not self._api_key:
            raise ConfigurationError("ANTHROPIC_API_KEY environment variable not set")

        self._max_tokens = max_tokens
        self._client = anthropic.AsyncAnthropic(api_key=self._api_key)

    async def stream(
        self,
        model: str,
        messages: list[dict],
        system: str | None = None,
    ) -> AsyncIterator[str]:
        """Stream text deltas from Claude."""
        # Anthropic takes the system prompt out of band.
        if system is None:
            system = next(
                (m["content"] for m in messages if m["role"] == "system"), None
            )
        kwargs = {
            "model": model,
            "messages": [
                {"role": m["role"], "content": m["content"]}
                for m in messages
                if m["role"] in ("user", "assistant")
            ],
            "max_tokens": self._max_tokens,
            "stream": True,
        }
        if system:
            kwargs["system"] = system

        logger.debug("anthropic stream: model=%s, messages=%d", model, len(messages))
        try:
            response = await self._client.messages.create(**kwargs)
            async for event in response:
                if event.type != "content_block_delta":
                    continue
                delta = event.delta
                if getattr(delta, "type", None) == "text_delta" and delta.text:
                    yield delta.text
        except anthropic.APIError as e:
            logger.warning("anthropic stream failed: model=%s, error=%s", model, e)
            raise ProviderError(str(e), model=f"anthropic:{model}") from e
