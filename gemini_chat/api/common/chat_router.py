"""Chat and session API router."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from gemini_chat.dependencies import get_chat_service
from gemini_chat.models.user import utcnow
from gemini_chat.schemas.chat_schema import ChatRequest, ChatResponse, HealthResponse
from gemini_chat.schemas.conversation_schema import (
    CreateSessionRequest,
    MessageResponse,
    SessionResponse,
    SessionSummary,
    UpdateTitleRequest,
)
from gemini_chat.schemas.response_schema import ErrorResponse, ResultResponse
from gemini_chat.services.chat_service import ChatService

router = APIRouter(
    prefix="/api/chat",
    tags=["chat"],
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)

ChatServiceDep = Annotated[ChatService, Depends(get_chat_service)]


@router.post("", response_model=ChatResponse)
async def chat(
    body: ChatRequest,
    chat_service: ChatServiceDep,
) -> ChatResponse:
    """Send a message and receive the assistant's reply."""
    return await chat_service.converse(body)


@router.get("/sessions", response_model=list[SessionSummary])
async def list_sessions(chat_service: ChatServiceDep) -> list[SessionSummary]:
    """List the caller's sessions, most recently active first."""
    return await chat_service.list_sessions()


@router.post(
    "/sessions",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_session(
    chat_service: ChatServiceDep,
    body: CreateSessionRequest | None = None,
) -> SessionResponse:
    """Open a new, empty session."""
    return await chat_service.create_session(body.title if body else None)


@router.get("/sessions/{session_id}/messages", response_model=list[MessageResponse])
async def get_messages(
    session_id: int,
    chat_service: ChatServiceDep,
) -> list[MessageResponse]:
    """Full message history of one session."""
    return await chat_service.get_messages(session_id)


@router.put("/sessions/{session_id}", response_model=ResultResponse)
async def rename_session(
    session_id: int,
    body: UpdateTitleRequest,
    chat_service: ChatServiceDep,
) -> ResultResponse:
    """Rename a session."""
    await chat_service.rename_session(session_id, body.title)
    return ResultResponse(success=True)


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(
    session_id: int,
    chat_service: ChatServiceDep,
) -> Response:
    """Delete a session and its messages."""
    await chat_service.delete_session(session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Liveness probe for the chat service."""
    return HealthResponse(timestamp=utcnow())
