"""Streaming client for the Multichat API."""

from .client import ChatClient, ClientError
from .conversation import COMPARISON_SEPARATOR, Conversation

__all__ = ["ChatClient", "ClientError", "Conversation", "COMPARISON_SEPARATOR"]
