"""Stage coordinator for the answer, comparison and summary phases.

Phase A streams every selected agent's answer to the conversation. Phase B
asks each answering agent to compare all usable answers, and Phase C, once
every Phase B stream is terminal, asks the summarizer to reduce the
successful analyses to one Markdown table. Each phase runs through the
fragment multiplexer and is exposed to the caller as one event stream.
"""

from collections.abc import AsyncIterator, Sequence
from contextlib import aclosing
from dataclasses import dataclass
from typing import Protocol

from ..errors import ComparisonError
from ..llm import ProviderSet, prompt_messages
from ..logging_config import get_logger
from ..models import (
    ANALYSIS_SUFFIX,
    TABLE_SUFFIX,
    Agent,
    Message,
    StreamEvent,
    TranscriptKey,
    to_provider_messages,
)
from ..registry import IAgentRegistry
from ..streaming import FragmentMultiplexer, StreamTask, TranscriptAccumulator
from .prompts import (
    COMPARISON_SYSTEM_PROMPT,
    SUMMARY_SYSTEM_PROMPT,
    build_comparison_prompt,
    build_summary_prompt,
)

logger = get_logger(__name__)

UNKNOWN_AGENT_ERROR = "Agent configuration not found."


def unknown_agent_key(agent_id: str, suffix: str = "") -> TranscriptKey:
    """Placeholder key for an id with no registry entry."""
    return TranscriptKey(agent_id, f"Unknown Agent ({agent_id}){suffix}")


@dataclass
class ComparisonPlan:
    """A validated comparison request."""

    user_query: Message
    responses: list[Message]
    agent_ids: list[str]


class IStageCoordinator(Protocol):
    """Drives the multi-agent stages."""

    def generate(self, messages: list[Message], agent_id: str) -> AsyncIterator[StreamEvent]:
        """Stream one agent's answer."""
        ...

    def answer(
        self,
        messages: list[Message],
        agent_ids: Sequence[str],
        accumulator: TranscriptAccumulator | None = None,
    ) -> AsyncIterator[StreamEvent]:
        """Stream every selected agent's answer (Phase A)."""
        ...

    def prepare_comparison(
        self, user_query: Message | None, responses: list[Message] | None
    ) -> ComparisonPlan:
        """Validate a comparison request before any stream opens."""
        ...

    def compare(
        self, plan: ComparisonPlan, accumulator: TranscriptAccumulator | None = None
    ) -> AsyncIterator[StreamEvent]:
        """Stream the analyses (Phase B) then the summary table (Phase C)."""
        ...


class StageCoordinator:
    """Sequences the streaming stages over one multiplexer."""

    def __init__(
        self,
        registry: IAgentRegistry,
        providers: ProviderSet,
        multiplexer: FragmentMultiplexer | None = None,
    ):
        self._registry = registry
        self._providers = providers
        self._multiplexer = multiplexer or FragmentMultiplexer()

    def _task(
        self,
        agent: Agent,
        messages: list[dict],
        system: str | None = None,
        suffix: str = "",
    ) -> StreamTask:
        key = TranscriptKey(agent.id, agent.name + suffix)
        return StreamTask(
            key=key,
            open=lambda: self._providers.stream(agent, messages, system=system),
        )

    def _answer_task(self, agent_id: str, history: list[dict]) -> StreamTask:
        agent = self._registry.find(agent_id)
        if agent is None:
            logger.warning("Agent details not found for ID: %s", agent_id)
            return StreamTask.failed(unknown_agent_key(agent_id), UNKNOWN_AGENT_ERROR)
        return self._task(agent, history)

    async def _run_stage(
        self,
        stage: str,
        tasks: list[StreamTask],
        accumulator: TranscriptAccumulator,
    ) -> AsyncIterator[StreamEvent]:
        logger.info("Stage %s started with %d stream(s)", stage, len(tasks), extra={"stage": stage})
        async with aclosing(self._multiplexer.run(tasks)) as events:
            async for event in events:
                accumulator.apply(event)
                yield event
        logger.info(
            "Stage %s complete: %d of %d succeeded",
            stage,
            len([t for t in tasks if accumulator.succeeded(t.key)]),
            len(tasks),
            extra={"stage": stage},
        )

    def generate(
        self, messages: list[Message], agent_id: str
    ) -> AsyncIterator[StreamEvent]:
        """Stream one agent's answer to the conversation."""
        return self.answer(messages, [agent_id])

    def answer(
        self,
        messages: list[Message],
        agent_ids: Sequence[str],
        accumulator: TranscriptAccumulator | None = None,
    ) -> AsyncIterator[StreamEvent]:
        """Stream every selected agent's answer (Phase A)."""
        if accumulator is None:
            accumulator = TranscriptAccumulator()
        history = to_provider_messages(messages)
        tasks = [self._answer_task(agent_id, history) for agent_id in dict.fromkeys(agent_ids)]
        return self._run_stage("answer", tasks, accumulator)

    def prepare_comparison(
        self, user_query: Message | None, responses: list[Message] | None
    ) -> ComparisonPlan:
        """Validate a comparison request.

        Raises:
            ComparisonError: If the query or responses are missing, no response
                names an agent, or fewer than two responses are usable.
        """
        if user_query is None or not responses:
            raise ComparisonError("Missing or invalid userQuery or assistantResponses")

        if not any(response.agent_id for response in responses):
            raise ComparisonError(
                "No valid agent IDs found in assistantResponses to perform comparison."
            )

        usable = [response for response in responses if response.is_usable_response]
        if len(usable) < 2:
            raise ComparisonError(
                "At least two arguments are needed from the last turn to compare."
            )

        agent_ids = list(dict.fromkeys(response.agent_id for response in usable))
        return ComparisonPlan(user_query=user_query, responses=usable, agent_ids=agent_ids)

    async def compare(
        self, plan: ComparisonPlan, accumulator: TranscriptAccumulator | None = None
    ) -> AsyncIterator[StreamEvent]:
        """Stream the analyses (Phase B) then the summary table (Phase C)."""
        if accumulator is None:
            accumulator = TranscriptAccumulator()

        tasks = []
        for agent_id in plan.agent_ids:
            agent = self._registry.find(agent_id)
            if agent is None:
                logger.warning("Agent details not found for ID: %s", agent_id)
                tasks.append(
                    StreamTask.failed(
                        unknown_agent_key(agent_id, ANALYSIS_SUFFIX), UNKNOWN_AGENT_ERROR
                    )
                )
                continue
            prompt = build_comparison_prompt(plan.user_query, plan.responses, agent)
            tasks.append(
                self._task(
                    agent,
                    prompt_messages(prompt),
                    system=COMPARISON_SYSTEM_PROMPT,
                    suffix=ANALYSIS_SUFFIX,
                )
            )

        async with aclosing(self._run_stage("comparison", tasks, accumulator)) as events:
            async for event in events:
                yield event

        summary_task = self._summary_task(plan, accumulator, [t.key for t in tasks])
        if summary_task is None:
            return
        async with aclosing(self._run_stage("summary", [summary_task], accumulator)) as events:
            async for event in events:
                yield event

    def _summary_task(
        self,
        plan: ComparisonPlan,
        accumulator: TranscriptAccumulator,
        analysis_keys: list[TranscriptKey],
    ) -> StreamTask | None:
        summarizer = self._registry.summarizer
        if summarizer is None:
            logger.warning("Summarizer agent not found, skipping summary")
            return None
        if not self._providers.supports(summarizer.producer):
            logger.warning(
                "Summarizer agent producer %s not implemented, skipping summary",
                summarizer.producer.value,
            )
            return None

        analyses = {
            key.agent_name: accumulator.text(key)
            for key in analysis_keys
            if accumulator.succeeded(key)
        }
        if not analyses:
            logger.warning("No analysis completed successfully, skipping summary")
            return None

        prompt = build_summary_prompt(plan.user_query, analyses)
        return self._task(
            summarizer,
            prompt_messages(prompt),
            system=SUMMARY_SYSTEM_PROMPT,
            suffix=TABLE_SUFFIX,
        )
