"""Chat request and response schemas."""

from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, Field

from gemini_chat.schemas.response_schema import CamelModel, ResultResponse


class ChatRequest(CamelModel):
    """Chat API request schema."""

    message: str = Field(default="", max_length=32000)
    session_id: int | None = None


class ChatResponse(ResultResponse):
    """Chat API response schema."""

    response: str | None = None
    session_id: int | None = None


class HistoryMessage(CamelModel):
    """Message handed to the language gateway as context."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    role: str
    content: str


class HealthResponse(CamelModel):
    """Chat service liveness payload."""

    status: Literal["healthy"] = "healthy"
    timestamp: datetime
