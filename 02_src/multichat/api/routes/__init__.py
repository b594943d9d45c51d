"""API routers."""

from .agents import create_agents_router
from .chat import create_chat_router
from .compare import create_compare_router

__all__ = ["create_agents_router", "create_chat_router", "create_compare_router"]
