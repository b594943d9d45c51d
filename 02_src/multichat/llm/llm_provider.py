"""Streaming LLM provider abstraction."""

from collections.abc import AsyncIterator
from typing import Protocol

from ..models import Producer


class IStreamingProvider(Protocol):
    """One vendor's streaming chat capability.

    ``messages`` is an ordered history of ``{"role": ..., "content": ...}``
    dicts using the ``user``/``assistant`` vocabulary. Implementations remap
    roles to the vendor's vocabulary and raise ``ProviderError`` on failure,
    possibly after some fragments were already yielded.
    """

    producer: Producer

    def stream(
        self,
        model: str,
        messages: list[dict],
        system: str | None = None,
    ) -> AsyncIterator[str]:
        """Yield text fragments as the model produces them."""
        ...


def prompt_messages(prompt: str) -> list[dict]:
    """Wrap a single prompt as a one-turn history."""
    return [{"role": "user", "content": prompt}]
