"""Static agent registry.

The registry is immutable process-wide configuration: agent id to
producer, model and display metadata. Exactly one entry carries the
reserved ``summarizer`` id; it reduces comparison results to a table and is
never offered as an answering agent.
"""

from collections.abc import Iterable
from typing import Protocol

from ..errors import ConfigurationError
from ..models import Agent, Producer

SUMMARIZER_AGENT_ID = "summarizer"


DEFAULT_AGENTS: tuple[Agent, ...] = (
    Agent(
        id="o3",
        producer=Producer.OPENAI,
        model="o3",
        name="o3",
        description="Advanced thinking language model by OpenAI.",
        image="ai-logos/openai.png",
    ),
    Agent(
        id="gpt-4.1",
        producer=Producer.OPENAI,
        model="gpt-4.1",
        name="GPT-4.1",
        description="Advanced language model by OpenAI.",
        image="ai-logos/openai.png",
    ),
    Agent(
        id="claude-3.7",
        producer=Producer.ANTHROPIC,
        model="claude-3-7-sonnet-latest",
        name="Claude 3.7",
        description="Advanced thinking language model by Anthropic.",
        image="ai-logos/anthropic.png",
    ),
    Agent(
        id="gemini-2.5-pro",
        producer=Producer.GOOGLE,
        model="gemini-2.5-pro-exp-03-25",
        name="Gemini 2.5 Pro",
        description="Advanced thinking language model by Google.",
        image="ai-logos/gemini.png",
    ),
    Agent(
        id=SUMMARIZER_AGENT_ID,
        producer=Producer.OPENAI,
        model="gpt-4.1-mini",
        name="Summary Agent",
        description="Summarizes and tabulates comparison results.",
        image="ai-logos/openai.png",
    ),
)


class IAgentRegistry(Protocol):
    """Lookup of agent descriptors by id."""

    def find(self, agent_id: str) -> Agent | None:
        """Return the agent with this id, or None."""
        ...

    def get(self, agent_id: str) -> Agent:
        """Return the agent with this id or raise ConfigurationError."""
        ...

    def selectable(self) -> list[Agent]:
        """Agents that may answer a user query."""
        ...

    @property
    def summarizer(self) -> Agent | None:
        """The summarizer agent, if configured."""
        ...


class AgentRegistry:
    """In-memory, read-only agent registry."""

    def __init__(self, agents: Iterable[Agent] = DEFAULT_AGENTS):
        self._agents: dict[str, Agent] = {}
        for agent in agents:
            if agent.id in self._agents:
                raise ValueError(f"Duplicate agent id: {agent.id}")
            self._agents[agent.id] = agent

    def __contains__(self, agent_id: object) -> bool:
        return agent_id in self._agents

    def __len__(self) -> int:
        return len(self._agents)

    def find(self, agent_id: str) -> Agent | None:
        """Return the agent with this id, or None."""
        return self._agents.get(agent_id)

    def get(self, agent_id: str) -> Agent:
        """Return the agent with this id or raise ConfigurationError."""
        agent = self._agents.get(agent_id)
        if agent is None:
            raise ConfigurationError(f"Agent with ID {agent_id} not found")
        return agent

    def selectable(self) -> list[Agent]:
        """Agents that may answer a user query (summarizer excluded)."""
        return [
            agent for agent in self._agents.values() if agent.id != SUMMARIZER_AGENT_ID
        ]

    @property
    def summarizer(self) -> Agent | None:
        """The summarizer agent, if configured."""
        return self._agents.get(SUMMARIZER_AGENT_ID)
