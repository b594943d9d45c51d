"""Request and response models for the HTTP API."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from ..models import Message


class MessagePayload(BaseModel):
    """A conversation message as sent by the client."""

    model_config = ConfigDict(populate_by_name=True)

    role: Literal["user", "assistant", "separator"]
    content: str = ""
    agent_id: str | None = Field(default=None, alias="agentId")
    agent_name: str | None = Field(default=None, alias="agentName")

    def to_message(self) -> Message:
        return Message(
            role=self.role,
            content=self.content,
            agent_id=self.agent_id,
            agent_name=self.agent_name,
        )


class GenerateRequest(BaseModel):
    """Body of POST /api/chat."""

    model_config = ConfigDict(populate_by_name=True)

    messages: list[MessagePayload] | None = None
    agent_id: str | None = Field(default=None, alias="agentId")


class AnswerRequest(BaseModel):
    """Body of POST /api/answer."""

    model_config = ConfigDict(populate_by_name=True)

    messages: list[MessagePayload] | None = None
    agent_ids: list[str] | None = Field(default=None, alias="agentIds")


class CompareRequest(BaseModel):
    """Body of POST /api/compare."""

    model_config = ConfigDict(populate_by_name=True)

    user_query: MessagePayload | None = Field(default=None, alias="userQuery")
    assistant_responses: list[MessagePayload] | None = Field(
        default=None, alias="assistantResponses"
    )


class AgentResponse(BaseModel):
    """An agent offered for selection."""

    id: str
    name: str
    producer: str
    model: str
    description: str
    image: str
