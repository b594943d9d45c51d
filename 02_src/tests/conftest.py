"""Pytest configuration and fixtures."""

import asyncio
import sys
from dataclasses import dataclass, field
from pathlib import Path

import pytest
import pytest_asyncio

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from multichat.errors import ProviderError  # noqa: E402
from multichat.models import Agent, Producer  # noqa: E402


@dataclass
class Script:
    """What a fake model streams: fragments, then optionally a failure."""

    fragments: list[str] = field(default_factory=list)
    error: str | None = None
    delay: float = 0.0


class FakeProvider:
    """Streaming provider that plays back a Script per model id."""

    def __init__(self, scripts: dict[str, Script]):
        self.scripts = scripts
        self.calls: list[dict] = []

    async def stream(self, model, messages, system=None):
        self.calls.append({"model": model, "messages": messages, "system": system})
        script = self.scripts.get(model, Script(["ok"]))
        for fragment in script.fragments:
            if script.delay:
                await asyncio.sleep(script.delay)
            yield fragment
        if script.error is not None:
            raise ProviderError(script.error)


TEST_AGENTS = (
    Agent(id="agent-a", producer=Producer.OPENAI, model="model-a", name="Agent A"),
    Agent(id="agent-b", producer=Producer.ANTHROPIC, model="model-b", name="Agent B"),
    Agent(id="agent-c", producer=Producer.GOOGLE, model="model-c", name="Agent C"),
    Agent(id="summarizer", producer=Producer.OPENAI, model="model-summary", name="Summary Agent"),
)


@pytest.fixture
def scripts():
    """Per-test scripts keyed by model id."""
    return {}


@pytest.fixture
def fake_provider(scripts):
    """One fake provider serving every producer."""
    return FakeProvider(scripts)


@pytest.fixture
def registry():
    """Registry with three answering agents and a summarizer."""
    from multichat.registry import AgentRegistry

    return AgentRegistry(TEST_AGENTS)


@pytest.fixture
def settings():
    """Settings with no provider keys."""
    from multichat.config import Settings

    return Settings()


@pytest.fixture
def providers(settings, fake_provider):
    """ProviderSet backed by the fake provider."""
    from multichat.llm import ProviderSet

    return ProviderSet(
        settings,
        providers={producer: fake_provider for producer in Producer},
        factories={},
    )


@pytest.fixture
def coordinator(registry, providers):
    """StageCoordinator over the fake provider."""
    from multichat.orchestration import StageCoordinator

    return StageCoordinator(registry, providers)


@pytest_asyncio.fixture
async def application(settings, registry, providers):
    """Started Application wired to the fakes."""
    from multichat.app import Application

    app = Application(settings, registry=registry, providers=providers)
    await app.start()
    yield app
    await app.stop()


async def collect(events):
    """Drain an async iterator into a list."""
    return [event async for event in events]
