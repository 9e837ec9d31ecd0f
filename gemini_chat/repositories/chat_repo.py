"""Chat repository for session and message database operations."""

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import and_, delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from gemini_chat.models.chat_message import ChatMessage
from gemini_chat.models.chat_session import DEFAULT_SESSION_TITLE, ChatSession
from gemini_chat.models.user import utcnow


@dataclass(frozen=True)
class SessionWithCount:
    """Immutable result object for session list queries."""

    id: int
    title: str
    created_at: datetime
    updated_at: datetime
    message_count: int


class ChatRepository:
    """Encapsulates chat session and message database queries.

    Every session lookup takes the owning ``user_id`` so that a session id
    belonging to someone else behaves exactly like a missing one.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_session(self, session_id: int, user_id: int) -> ChatSession | None:
        """Find a chat session by id, restricted to its owner."""
        result = await self._session.execute(
            select(ChatSession).where(
                and_(ChatSession.id == session_id, ChatSession.user_id == user_id)
            )
        )
        return result.scalar_one_or_none()

    async def create_session(
        self,
        user_id: int,
        title: str | None = None,
    ) -> ChatSession:
        """Create a new chat session."""
        now = utcnow()
        session = ChatSession(
            user_id=user_id,
            title=title or DEFAULT_SESSION_TITLE,
            created_at=now,
            updated_at=now,
        )
        self._session.add(session)
        await self._session.flush()
        await self._session.refresh(session)
        return session

    async def find_sessions_by_user(self, user_id: int) -> list[SessionWithCount]:
        """Fetch user sessions, most recently updated first, with message counts."""
        count_subq = (
            select(func.count(ChatMessage.id))
            .where(ChatMessage.session_id == ChatSession.id)
            .correlate(ChatSession)
            .scalar_subquery()
        )

        stmt = (
            select(
                ChatSession.id,
                ChatSession.title,
                ChatSession.created_at,
                ChatSession.updated_at,
                count_subq.label("message_count"),
            )
            .where(ChatSession.user_id == user_id)
            .order_by(ChatSession.updated_at.desc(), ChatSession.id.desc())
        )

        result = await self._session.execute(stmt)
        return [
            SessionWithCount(
                id=row.id,
                title=row.title,
                created_at=row.created_at,
                updated_at=row.updated_at,
                message_count=row.message_count or 0,
            )
            for row in result
        ]

    async def find_messages_by_session_id(self, session_id: int) -> list[ChatMessage]:
        """Retrieve all messages for a session in creation order."""
        result = await self._session.execute(
            select(ChatMessage)
            .where(ChatMessage.session_id == session_id)
            .order_by(ChatMessage.created_at.asc(), ChatMessage.id.asc())
        )
        return list(result.scalars().all())

    async def find_recent_messages(
        self, session_id: int, limit: int
    ) -> list[ChatMessage]:
        """Return the newest ``limit`` messages of a session, oldest first."""
        if limit <= 0:
            return []
        result = await self._session.execute(
            select(ChatMessage)
            .where(ChatMessage.session_id == session_id)
            .order_by(ChatMessage.created_at.desc(), ChatMessage.id.desc())
            .limit(limit)
        )
        return list(reversed(result.scalars().all()))

    async def find_first_message(
        self, session_id: int, role: str
    ) -> ChatMessage | None:
        """Return the earliest message of one role within a session."""
        result = await self._session.execute(
            select(ChatMessage)
            .where(
                and_(ChatMessage.session_id == session_id, ChatMessage.role == role)
            )
            .order_by(ChatMessage.created_at.asc(), ChatMessage.id.asc())
            .limit(1)
        )
        return result.scalars().first()


    async def create_message(
        self,
        session_id: int,
        role: str,
        content: str,
    ) -> ChatMessage:
        """Create a single chat message."""
        message = ChatMessage(
            session_id=session_id,
            role=role,
            content=content,
            created_at=utcnow(),
        )
        self._session.add(message)
        await self._session.flush()
        await self._session.refresh(message)
        return message

    async def commit(self) -> None:
        """Commit the unit of work so far."""
        await self._session.commit()

    async def touch_session(self, session_id: int, title: str | None = None) -> None:
        """Bump ``updated_at`` and optionally replace the title."""
        values: dict[str, object] = {"updated_at": utcnow()}
        if title is not None:
            values["title"] = title
        await self._session.execute(
            update(ChatSession).where(ChatSession.id == session_id).values(**values)
        )

    async def update_session_title(
        self, session_id: int, user_id: int, title: str
    ) -> bool:
        """Rename an owned session. Returns False when nothing matched."""
        result = await self._session.execute(
            update(ChatSession)
            .where(and_(ChatSession.id == session_id, ChatSession.user_id == user_id))
            .values(title=title, updated_at=utcnow())
        )
        return bool(result.rowcount)

    async def delete_session(self, session_id: int, user_id: int) -> bool:
        """Delete an owned session together with its messages.

        Messages are removed first in the same transaction so no orphan can
        remain even where the engine does not enforce ON DELETE CASCADE.
        """
        session = await self.find_session(session_id, user_id)
        if session is None:
            return False
        await self._session.execute(
            delete(ChatMessage).where(ChatMessage.session_id == session_id)
        )
        await self._session.execute(
            delete(ChatSession).where(
                and_(ChatSession.id == session_id, ChatSession.user_id == user_id)
            )
        )
        await self._session.flush()
        return True
