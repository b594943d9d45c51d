"""Answer generation routes."""

from fastapi import APIRouter, HTTPException
from fastapi.responses import StreamingResponse

from ...app import IApplication
from ...logging_config import get_logger
from ..schemas import AnswerRequest, GenerateRequest
from ..streaming import event_stream_response

logger = get_logger(__name__)


def create_chat_router(app: IApplication) -> APIRouter:
    """Create chat router."""
    router = APIRouter(prefix="/api", tags=["chat"])

    @router.post("/chat")
    async def generate(request: GenerateRequest) -> StreamingResponse:
        """Stream one agent's answer as ``{type, content, error}`` records."""
        if not request.messages or not request.agent_id:
            raise HTTPException(status_code=400, detail="Missing messages or agentId")

        if app.registry.find(request.agent_id) is None:
            raise HTTPException(
                status_code=404, detail=f"Agent with ID {request.agent_id} not found"
            )

        try:
            messages = [m.to_message() for m in request.messages]
            events = app.coordinator.generate(messages, request.agent_id)
        except Exception as e:
            logger.error("Error in POST /api/chat: %s", e, exc_info=True)
            raise HTTPException(status_code=500, detail=str(e))

        return event_stream_response(events, include_agent=False)

    @router.post("/answer")
    async def answer(request: AnswerRequest) -> StreamingResponse:
        """Stream several agents' answers as tagged records."""
        if not request.messages or not request.agent_ids:
            raise HTTPException(status_code=400, detail="Missing messages or agentIds")

        try:
            messages = [m.to_message() for m in request.messages]
            events = app.coordinator.answer(messages, request.agent_ids)
        except Exception as e:
            logger.error("Error in POST /api/answer: %s", e, exc_info=True)
            raise HTTPException(status_code=500, detail=str(e))

        return event_stream_response(events)

    return router
