"""Comparison route."""

from fastapi import APIRouter, HTTPException
from fastapi.responses import StreamingResponse

from ...app import IApplication
from ...errors import ComparisonError
from ...logging_config import get_logger
from ..schemas import CompareRequest
from ..streaming import event_stream_response

logger = get_logger(__name__)


def create_compare_router(app: IApplication) -> APIRouter:
    """Create compare router."""
    router = APIRouter(prefix="/api", tags=["compare"])

    @router.post("/compare")
    async def compare(request: CompareRequest) -> StreamingResponse:
        """Stream every agent's analysis, then the summary table."""
        user_query = request.user_query.to_message() if request.user_query else None
        responses = [m.to_message() for m in request.assistant_responses or []]

        try:
            plan = app.coordinator.prepare_comparison(user_query, responses)
        except ComparisonError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except Exception as e:
            logger.error("Error initializing comparison stream: %s", e, exc_info=True)
            raise HTTPException(status_code=500, detail=str(e))

        logger.info("Comparing %d responses from %s", len(plan.responses), plan.agent_ids)
        return event_stream_response(app.coordinator.compare(plan))

    return router
