"""Chat orchestration: sessions, history window and the Gemini round trip."""

import structlog

from gemini_chat.core.config import settings
from gemini_chat.core.exceptions import (
    AppException,
    InternalServiceError,
    SessionNotFoundError,
    UpstreamServiceError,
    ValidationFailedError,
)
from gemini_chat.models.chat_message import ROLE_ASSISTANT, ROLE_USER
from gemini_chat.models.chat_session import DEFAULT_SESSION_TITLE, ChatSession
from gemini_chat.repositories.chat_repo import ChatRepository
from gemini_chat.schemas.chat_schema import ChatRequest, ChatResponse, HistoryMessage
from gemini_chat.schemas.conversation_schema import (
    MessageResponse,
    SessionResponse,
    SessionSummary,
)
from gemini_chat.services.gemini_service import GeminiService
from gemini_chat.services.title_service import derive_title

logger = structlog.get_logger()

MAX_TITLE_LENGTH = 255


class ChatService:
    """Chat operations for one authenticated user.

    The user id comes from the validated token and scopes every query, so a
    session id that belongs to someone else is indistinguishable from one
    that does not exist.
    """

    def __init__(
        self,
        chat_repo: ChatRepository,
        gemini: GeminiService,
        user_id: int,
        history_limit: int | None = None,
    ) -> None:
        self._chat_repo = chat_repo
        self._gemini = gemini
        self._user_id = user_id
        self._history_limit = (
            settings.chat.history_limit if history_limit is None else history_limit
        )

    async def converse(self, request: ChatRequest) -> ChatResponse:
        """Send a message, persist the exchange and return Gemini's reply.

        Raises ``UpstreamServiceError`` carrying the session id when Gemini
        fails, so the caller can keep using the same session.
        """
        if not request.message.strip():
            raise ValidationFailedError("Message cannot be empty")

        session_id: int | None = request.session_id
        try:
            session = await self._resolve_session(request.session_id)
            session_id = session.id

            history = await self._chat_repo.find_recent_messages(
                session.id, self._history_limit
            )
            await self._chat_repo.create_message(session.id, ROLE_USER, request.message)

            logger.info(
                "Received chat message",
                user_id=self._user_id,
                session_id=session.id,
                length=len(request.message),
                context_messages=len(history),
            )
            result = await self._gemini.send_message(
                request.message,
                [HistoryMessage.model_validate(m) for m in history],
            )
            if not result.success or result.text is None:
                # Keep the user turn even though the reply failed.
                await self._chat_repo.touch_session(session.id)
                await self._chat_repo.commit()
                raise UpstreamServiceError(
                    result.error or "Failed to get a response",
                    session_id=session.id,
                )

            await self._chat_repo.create_message(session.id, ROLE_ASSISTANT, result.text)

            new_title = None
            if session.title == DEFAULT_SESSION_TITLE:
                # Earlier turns may have been stored without a reply.
                first = await self._chat_repo.find_first_message(session.id, ROLE_USER)
                new_title = derive_title(first.content if first else request.message)
            await self._chat_repo.touch_session(session.id, title=new_title)
        except AppException:
            raise
        except Exception as exc:
            logger.exception(
                "Error processing chat message",
                user_id=self._user_id,
                session_id=session_id,
            )
            raise InternalServiceError(
                "An error occurred while processing your message"
            ) from exc

        return ChatResponse(success=True, response=result.text, session_id=session.id)

    async def list_sessions(self) -> list[SessionSummary]:
        """Sessions of the user, most recently updated first."""
        rows = await self._chat_repo.find_sessions_by_user(self._user_id)
        return [SessionSummary.model_validate(row) for row in rows]

    async def get_messages(self, session_id: int) -> list[MessageResponse]:
        """All messages of an owned session in creation order."""
        session = await self._chat_repo.find_session(session_id, self._user_id)
        if session is None:
            raise SessionNotFoundError
        messages = await self._chat_repo.find_messages_by_session_id(session.id)
        return [MessageResponse.model_validate(m) for m in messages]

    async def create_session(self, title: str | None = None) -> SessionResponse:
        """Open an empty session."""
        clean = title.strip() if title else None
        session = await self._chat_repo.create_session(self._user_id, clean or None)
        logger.info("Chat session created", user_id=self._user_id, session_id=session.id)
        return SessionResponse.model_validate(session)

    async def rename_session(self, session_id: int, title: str) -> None:
        """Rename an owned session."""
        clean = title.strip()
        if not clean:
            raise ValidationFailedError("Title cannot be empty")
        if len(clean) > MAX_TITLE_LENGTH:
            raise ValidationFailedError(
                f"Title must be at most {MAX_TITLE_LENGTH} characters"
            )
        if not await self._chat_repo.update_session_title(
            session_id, self._user_id, clean
        ):
            raise SessionNotFoundError

    async def delete_session(self, session_id: int) -> None:
        """Delete an owned session and every message in it."""
        if not await self._chat_repo.delete_session(session_id, self._user_id):
            raise SessionNotFoundError
        logger.info("Chat session deleted", user_id=self._user_id, session_id=session_id)

    async def _resolve_session(self, session_id: int | None) -> ChatSession:
        if session_id is None:
            return await self._chat_repo.create_session(self._user_id)
        session = await self._chat_repo.find_session(session_id, self._user_id)
        if session is None:
            raise SessionNotFoundError
        return session
