"""Tests for StageCoordinator."""

import pytest

from conftest import TEST_AGENTS, Script, collect
from multichat.errors import ComparisonError
from multichat.llm import ProviderSet
from multichat.models import EventType, Message, Producer, StreamEvent, TranscriptKey
from multichat.orchestration import (
    COMPARISON_SYSTEM_PROMPT,
    SUMMARY_SYSTEM_PROMPT,
    StageCoordinator,
    unknown_agent_key,
)
from multichat.registry import AgentRegistry
from multichat.streaming import TranscriptAccumulator

KEY_A = TranscriptKey("agent-a", "Agent A")
KEY_B = TranscriptKey("agent-b", "Agent B")
ANALYSIS_A = TranscriptKey("agent-a", "Agent A (Analysis)")
ANALYSIS_B = TranscriptKey("agent-b", "Agent B (Analysis)")
TABLE = TranscriptKey("summarizer", "Summary Agent (Table)")


@pytest.fixture
def user_query():
    return Message(role="user", content="What is the capital of France?")


@pytest.fixture
def responses():
    return [
        Message(role="assistant", content="Paris.", agent_id="agent-a", agent_name="Agent A"),
        Message(role="assistant", content="It is Paris.", agent_id="agent-b", agent_name="Agent B"),
    ]


def texts(events):
    accumulator = TranscriptAccumulator()
    for event in events:
        accumulator.apply(event)
    return accumulator


class TestAnswer:
    """Tests for the answer stage."""

    @pytest.mark.asyncio
    async def test_generate_streams_one_agent(self, coordinator, scripts, user_query):
        scripts["model-a"] = Script(["Par", "is"])

        events = await collect(coordinator.generate([user_query], "agent-a"))

        assert events == [
            StreamEvent.chunk(KEY_A, "Par"),
            StreamEvent.chunk(KEY_A, "is"),
            StreamEvent.end(KEY_A),
        ]

    @pytest.mark.asyncio
    async def test_unknown_agent_makes_no_provider_call(self, coordinator, fake_provider, user_query):
        events = await collect(coordinator.generate([user_query], "nope"))

        assert events == [
            StreamEvent.failure(unknown_agent_key("nope"), "Agent configuration not found.")
        ]
        assert events[0].agent_name == "Unknown Agent (nope)"
        assert fake_provider.calls == []

    @pytest.mark.asyncio
    async def test_answer_success_and_failure(self, coordinator, scripts, user_query):
        scripts["model-a"] = Script(["Paris", " is great"])
        scripts["model-b"] = Script(error="quota exceeded")

        accumulator = TranscriptAccumulator()
        events = await collect(
            coordinator.answer([user_query], ["agent-a", "agent-b"], accumulator)
        )

        assert accumulator.completed() == {KEY_A: "Paris is great"}
        assert StreamEvent.failure(KEY_B, "quota exceeded") in events
        assert [e for e in events if e.key == KEY_B] == [
            StreamEvent.failure(KEY_B, "quota exceeded")
        ]

    @pytest.mark.asyncio
    async def test_answer_deduplicates_agents(self, coordinator, fake_provider, user_query):
        await collect(coordinator.answer([user_query], ["agent-a", "agent-a"]))
        assert len(fake_provider.calls) == 1

    @pytest.mark.asyncio
    async def test_history_drops_separators(self, coordinator, fake_provider, user_query):
        history = [
            user_query,
            Message(role="assistant", content="Paris.", agent_id="agent-a", agent_name="Agent A"),
            Message(role="separator", content="-- Comparison Analysis --"),
            Message(role="user", content="And Germany?"),
        ]

        await collect(coordinator.generate(history, "agent-b"))

        call = fake_provider.calls[0]
        assert call["model"] == "model-b"
        assert call["system"] is None
        assert [m["role"] for m in call["messages"]] == ["user", "assistant", "user"]


class TestPrepareComparison:
    """Tests for comparison validation."""

    def test_missing_query(self, coordinator, responses):
        with pytest.raises(ComparisonError, match="Missing or invalid"):
            coordinator.prepare_comparison(None, responses)

    def test_missing_responses(self, coordinator, user_query):
        with pytest.raises(ComparisonError, match="Missing or invalid"):
            coordinator.prepare_comparison(user_query, [])

    def test_no_agent_ids(self, coordinator, user_query):
        responses = [Message(role="assistant", content="x"), Message(role="assistant", content="y")]
        with pytest.raises(ComparisonError, match="No valid agent IDs"):
            coordinator.prepare_comparison(user_query, responses)

    def test_fewer_than_two_usable(self, coordinator, user_query, responses):
        responses[1].agent_name = "Agent B (Error)"
        with pytest.raises(ComparisonError, match="At least two"):
            coordinator.prepare_comparison(user_query, responses)

    def test_plan_keeps_usable_responses(self, coordinator, user_query, responses):
        responses.append(
            Message(role="assistant", content="|a|", agent_id="summarizer",
                    agent_name="Summary Agent (Table)")
        )

        plan = coordinator.prepare_comparison(user_query, responses)

        assert plan.agent_ids == ["agent-a", "agent-b"]
        assert [r.content for r in plan.responses] == ["Paris.", "It is Paris."]


class TestCompare:
    """Tests for the analysis and summary stages."""

    @pytest.mark.asyncio
    async def test_full_comparison(self, coordinator, scripts, user_query, responses):
        scripts["model-a"] = Script(["A thinks ", "both agree."])
        scripts["model-b"] = Script(["B agrees."])
        scripts["model-summary"] = Script(["| Feature | Agent A | Agent B |\n", "|---|---|---|\n"])

        plan = coordinator.prepare_comparison(user_query, responses)
        events = await collect(coordinator.compare(plan))
        accumulator = texts(events)

        assert accumulator.text(ANALYSIS_A) == "A thinks both agree."
        assert accumulator.text(ANALYSIS_B) == "B agrees."
        assert accumulator.text(TABLE).startswith("|")
        assert events[-1] == StreamEvent.end(TABLE)

        # The summary starts only after every analysis is terminal
        first_table = next(i for i, e in enumerate(events) if e.key == TABLE)
        analysis_terminals = [
            i for i, e in enumerate(events) if e.key != TABLE and e.is_terminal
        ]
        assert len(analysis_terminals) == 2
        assert max(analysis_terminals) < first_table

    @pytest.mark.asyncio
    async def test_prompts(self, coordinator, fake_provider, scripts, user_query, responses):
        scripts["model-a"] = Script(["analysis from A"])

        plan = coordinator.prepare_comparison(user_query, responses)
        await collect(coordinator.compare(plan))

        calls = {call["model"]: call for call in fake_provider.calls}
        analysis = calls["model-a"]
        assert analysis["system"] == COMPARISON_SYSTEM_PROMPT
        prompt = analysis["messages"][0]["content"]
        assert "What is the capital of France?" in prompt
        assert "Agent A (your own response)" in prompt
        assert "It is Paris." in prompt

        summary = calls["model-summary"]
        assert summary["system"] == SUMMARY_SYSTEM_PROMPT
        summary_prompt = summary["messages"][0]["content"]
        assert "--- Analysis from Agent A (Analysis) ---" in summary_prompt
        assert "analysis from A" in summary_prompt

    @pytest.mark.asyncio
    async def test_failed_analysis_excluded_from_summary(
        self, coordinator, fake_provider, scripts, user_query, responses
    ):
        scripts["model-a"] = Script(["half an analysis"], error="connection reset")
        scripts["model-b"] = Script(["B analysis"])

        plan = coordinator.prepare_comparison(user_query, responses)
        events = await collect(coordinator.compare(plan))

        assert StreamEvent.failure(ANALYSIS_A, "connection reset") in events
        summary_prompt = next(
            call for call in fake_provider.calls if call["model"] == "model-summary"
        )["messages"][0]["content"]
        assert "half an analysis" not in summary_prompt
        assert "B analysis" in summary_prompt

    @pytest.mark.asyncio
    async def test_summary_skipped_when_every_analysis_fails(
        self, coordinator, fake_provider, scripts, user_query, responses
    ):
        scripts["model-a"] = Script(error="down")
        scripts["model-b"] = Script(error="down")

        plan = coordinator.prepare_comparison(user_query, responses)
        events = await collect(coordinator.compare(plan))

        assert [e.type for e in events] == [EventType.ERROR, EventType.ERROR]
        assert all(call["model"] != "model-summary" for call in fake_provider.calls)

    @pytest.mark.asyncio
    async def test_summary_skipped_without_summarizer(self, providers, user_query, responses):
        coordinator = StageCoordinator(AgentRegistry(TEST_AGENTS[:3]), providers)

        plan = coordinator.prepare_comparison(user_query, responses)
        events = await collect(coordinator.compare(plan))

        assert {e.key for e in events} == {ANALYSIS_A, ANALYSIS_B}

    @pytest.mark.asyncio
    async def test_summary_skipped_without_summarizer_adapter(
        self, registry, settings, fake_provider, user_query
    ):
        # The summarizer is an OpenAI agent; only Anthropic and Google are wired.
        providers = ProviderSet(
            settings,
            providers={Producer.ANTHROPIC: fake_provider, Producer.GOOGLE: fake_provider},
            factories={},
        )
        coordinator = StageCoordinator(registry, providers)
        responses = [
            Message(role="assistant", content="Paris.", agent_id="agent-b", agent_name="Agent B"),
            Message(role="assistant", content="Paris!", agent_id="agent-c", agent_name="Agent C"),
        ]

        plan = coordinator.prepare_comparison(user_query, responses)
        events = await collect(coordinator.compare(plan))

        analysis_c = TranscriptKey("agent-c", "Agent C (Analysis)")
        assert {e.key for e in events} == {ANALYSIS_B, analysis_c}
        assert {e.key for e in events if e.type == EventType.END} == {ANALYSIS_B, analysis_c}
        assert all(call["model"] != "model-summary" for call in fake_provider.calls)

    @pytest.mark.asyncio
    async def test_unknown_agent_in_comparison(self, coordinator, user_query, responses):
        responses.append(
            Message(role="assistant", content="?", agent_id="ghost", agent_name="Ghost")
        )

        plan = coordinator.prepare_comparison(user_query, responses)
        events = await collect(coordinator.compare(plan))

        assert (
            StreamEvent.failure(unknown_agent_key("ghost", " (Analysis)"),
                                "Agent configuration not found.")
            in events
        )
        assert events[-1] == StreamEvent.end(TABLE)
