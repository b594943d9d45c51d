"""Agent listing route."""

from fastapi import APIRouter

from ...app import IApplication
from ..schemas import AgentResponse


def create_agents_router(app: IApplication) -> APIRouter:
    """Create agents router."""
    router = APIRouter(prefix="/api", tags=["agents"])

    @router.get("/agents", response_model=list[AgentResponse])
    async def list_agents() -> list[dict]:
        """List agents that can answer a query."""
        return [agent.to_dict() for agent in app.registry.selectable()]

    return router
