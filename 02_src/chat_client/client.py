"""HTTP client for the Multichat API.

``ask`` issues one ``/api/chat`` request per selected agent and merges the
streams with the fragment multiplexer, so one slow or failing agent never
holds back the others. ``compare`` posts the last turn to ``/api/compare``.
Both update a ``Conversation`` as events arrive and yield the events.
"""

from collections.abc import AsyncIterator, Sequence
from contextlib import aclosing
from functools import partial

import httpx

from multichat.errors import ComparisonError, ProviderError
from multichat.logging_config import get_logger
from multichat.models import (
    ANALYSIS_SUFFIX,
    TABLE_SUFFIX,
    Message,
    StreamEvent,
    TranscriptKey,
    base_agent_name,
)
from multichat.registry import SUMMARIZER_AGENT_ID
from multichat.streaming import FragmentMultiplexer, StreamTask, decode_records

from .conversation import Conversation

logger = get_logger(__name__)


class ClientError(Exception):
    """The API rejected a request or broke off a stream."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


def _error_detail(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text or f"API request failed with status {response.status_code}"
    if isinstance(data, dict) and data.get("detail"):
        return str(data["detail"])
    return f"API request failed with status {response.status_code}"


class ChatClient:
    """Streaming client for the answer and compare endpoints."""

    def __init__(
        self,
        api_url: str = "http://localhost:8000",
        http_client: httpx.AsyncClient | None = None,
        summarizer_name: str | None = "Summary Agent",
    ):
        self._api_url = api_url.rstrip("/")
        self._client = http_client
        self._owns_client = http_client is None
        self._summarizer_name = summarizer_name
        self._agent_names: dict[str, str] = {}
        self._multiplexer = FragmentMultiplexer()

    async def __aenter__(self) -> "ChatClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            # Provider streams can stay silent for a long time while "thinking".
            self._client = httpx.AsyncClient(
                base_url=self._api_url, timeout=httpx.Timeout(30.0, read=None)
            )
        return self._client

    def _url(self, path: str) -> str:
        return f"{self._api_url}{path}"

    def agent_name(self, agent_id: str) -> str:
        return self._agent_names.get(agent_id, agent_id)

    async def list_agents(self) -> list[dict]:
        """Fetch selectable agents and remember their display names."""
        response = await self._http().get(self._url("/api/agents"))
        if response.status_code >= 400:
            raise ClientError(_error_detail(response), response.status_code)
        agents = response.json()
        self._agent_names.update({agent["id"]: agent["name"] for agent in agents})
        return agents

    async def _records(self, path: str, payload: dict) -> AsyncIterator[dict]:
        async with self._http().stream("POST", self._url(path), json=payload) as response:
            if response.status_code >= 400:
                await response.aread()
                raise ClientError(_error_detail(response), response.status_code)
            async for record in decode_records(response.aiter_bytes()):
                yield record

    async def _fragments(self, history: list[dict], agent_id: str) -> AsyncIterator[str]:
        """One agent's text fragments from ``/api/chat``."""
        payload = {"messages": history, "agentId": agent_id}
        async with aclosing(self._records("/api/chat", payload)) as records:
            async for record in records:
                record_type = record.get("type")
                if record_type == "chunk":
                    if record.get("content"):
                        yield record["content"]
                elif record_type == "error":
                    raise ProviderError(record.get("error") or "Unknown error during streaming.")
                elif record_type == "end":
                    return
        raise ClientError(f"Stream for {agent_id} closed before completion")

    async def ask(
        self,
        conversation: Conversation,
        text: str,
        agent_ids: Sequence[str],
    ) -> AsyncIterator[StreamEvent]:
        """Send ``text`` to every agent and stream their answers."""
        conversation.add_user_message(text)
        history = [message.to_wire() for message in conversation.history()]

        tasks = []
        for agent_id in dict.fromkeys(agent_ids):
            key = TranscriptKey(agent_id, self.agent_name(agent_id))
            conversation.add_placeholder(key.agent_id, key.agent_name)
            tasks.append(StreamTask(key, open=partial(self._fragments, history, agent_id)))

        async with aclosing(self._multiplexer.run(tasks)) as events:
            async for event in events:
                conversation.apply(event)
                yield event

    async def compare(self, conversation: Conversation) -> AsyncIterator[StreamEvent]:
        """Compare the last turn's answers and stream analyses and summary.

        Raises:
            ComparisonError: If the last turn cannot be compared; a notice is
                added to the conversation first.
            ClientError: If the request fails; pending placeholders are marked
                as failed first.
        """
        user_query = conversation.last_user_message()
        if user_query is None:
            notice = "Cannot perform comparison: Previous user query not found."
            conversation.add_notice("System Error", notice)
            raise ComparisonError(notice)

        responses = conversation.comparable_responses()
        if len(responses) < 2:
            notice = "At least two arguments are needed from the last turn to compare."
            conversation.add_notice("System", notice)
            raise ComparisonError(notice)

        conversation.add_separator()
        placeholders: list[Message] = []
        names = {}
        for response in responses:
            names.setdefault(response.agent_id, base_agent_name(response.agent_name or ""))
        for agent_id, name in names.items():
            name = name or self.agent_name(agent_id)
            placeholders.append(conversation.add_placeholder(agent_id, name + ANALYSIS_SUFFIX))
        if self._summarizer_name:
            placeholders.append(
                conversation.add_placeholder(
                    SUMMARIZER_AGENT_ID, self._summarizer_name + TABLE_SUFFIX
                )
            )

        payload = {
            "userQuery": user_query.to_wire(),
            "assistantResponses": [r.to_wire() for r in responses],
        }
        try:
            async with aclosing(self._records("/api/compare", payload)) as records:
                async for record in records:
                    try:
                        event = StreamEvent.from_record(record)
                    except (KeyError, ValueError) as e:
                        logger.warning("Dropping malformed compare record %r: %s", record, e)
                        continue
                    conversation.apply(event)
                    yield event
        except (ClientError, httpx.HTTPError) as e:
            logger.error("Failed to get or process comparison stream: %s", e)
            for message in placeholders:
                if message.is_loading:
                    conversation.fail(message, str(e))
            raise
        finally:
            # The summary may be skipped server-side; never leave it spinning.
            for message in placeholders:
                message.is_loading = False
