"""Streaming provider for OpenAI chat completions."""

import os
from collections.abc import AsyncIterator

import openai
from openai import AsyncOpenAI

from ..errors import ConfigurationError, ProviderError
from ..logging_config import get_logger
from ..models import Producer

logger = get_logger(__name__)


class OpenAIProvider:
    """OpenAI chat completions provider."""

    producer = Producer.OPENAI

    def __init__(self, api_key: str | None = None):
        self._api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not self._api_key:
            raise ConfigurationError("OPENAI_API_KEY environment variable not set")

        self._client = AsyncOpenAI(api_key=self._api_key)

    async def stream(
        self,
        model: str,
        messages: list[dict],
        system: str | None = None,
    ) -> AsyncIterator[str]:
        """Stream content deltas from a chat completion."""
        payload = [{"role": m["role"], "content": m["content"]} for m in messages]
        if system:
            payload.insert(0, {"role": "system", "content": system})

        logger.debug("openai stream: model=%s, messages=%d", model, len(payload))
        try:
            response = await self._client.chat.completions.create(
                model=model,
                messages=payload,
                stream=True,
            )
            async for chunk in response:
                if not chunk.choices:
                    continue
                content = chunk.choices[0].delta.content
                if content:
                    yield content
        except openai.APIError as e:
            logger.warning("openai stream failed: model=%s, error=%s", model, e)
            raise ProviderError(str(e), model=f"openai:{model}") from e
