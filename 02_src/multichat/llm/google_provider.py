"""Streaming provider for Google Gemini via google-genai."""

import os
from collections.abc import AsyncIterator

from google import genai
from google.genai import types

from ..errors import ConfigurationError, ProviderError
from ..logging_config import get_logger
from ..models import Producer

logger = get_logger(__name__)


def to_google_contents(messages: list[dict]) -> list[dict]:
    """Adapt a chat history to Gemini contents.

    Only ``user`` and ``assistant`` turns are kept; ``assistant`` becomes
    ``model`` and content is wrapped in a single text part.
    """
    return [
        {
            "role": "user" if m["role"] == "user" else "model",
            "parts": [{"text": m["content"]}],
        }
        for m in messages
        if m["role"] in ("user", "assistant")
    ]


class GoogleProvider:
    """Google Gemini provider."""

    producer = Producer.GOOGLE

    def __init__(self, api_key: str | None = None):
        self._api_key = api_key or os.getenv("GOOGLE_AI_API_KEY")
        if not self._api_key:
            raise ConfigurationError("Google AI client not initialized.")

        self._client = genai.Client(api_key=self._api_key)

    async def stream(
        self,
        model: str,
        messages: list[dict],
        system: str | None = None,
    ) -> AsyncIterator[str]:
        """Stream text from ``generate_content_stream``."""
        contents = to_google_contents(messages)
        config = types.GenerateContentConfig(system_instruction=system) if system else None

        logger.debug("gemini stream: model=%s, contents=%d", model, len(contents))
        try:
            response = await self._client.aio.models.generate_content_stream(
                model=model,
                contents=contents,
                config=config,
            )
            async for chunk in response:
                text = chunk.text
                if text:
                    yield text
        except ProviderError:
            raise
        except Exception as e:
            # google-genai raises several unrelated exception families.
            logger.warning("gemini stream failed: model=%s, error=%s", model, e)
            raise ProviderError(str(e), model=f"gemini:{model}") from e
