"""Chat session and history API schemas."""

from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, Field

from gemini_chat.schemas.response_schema import CamelModel


class SessionSummary(CamelModel):
    """Single session entry in the list response."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int
    title: str
    created_at: datetime
    updated_at: datetime
    message_count: int = 0


class SessionResponse(CamelModel):
    """A freshly created session."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int
    title: str
    created_at: datetime
    updated_at: datetime


class CreateSessionRequest(CamelModel):
    """Request to open a new session."""

    title: str | None = Field(default=None, max_length=255)


class UpdateTitleRequest(CamelModel):
    """Request to rename a session."""

    title: str = Field(default="", max_length=255)


class MessageResponse(CamelModel):
    """Single message within a session."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int
    role: Literal["user", "assistant"]
    content: str
    created_at: datetime
