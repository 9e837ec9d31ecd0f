"""Chat history configuration."""

from pydantic import BaseModel


class ChatConfig(BaseModel, frozen=True):
    """Conversation history settings."""

    history_limit: int
