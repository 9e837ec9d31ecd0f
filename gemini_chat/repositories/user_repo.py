"""User repository for database operations."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from gemini_chat.models.user import User


class UserRepository:
    """Encapsulates user-related database queries."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_by_email(self, email: str) -> User | None:
        """Find a user by email address, ignoring case."""
        result = await self._session.execute(
            select(User).where(func.lower(User.email) == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def find_by_id(self, user_id: int) -> User | None:
        """Find a user by primary key."""
        result = await self._session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def create(
        self,
        name: str,
        email: str,
        hashed_password: str | None = None,
        google_id: str | None = None,
        profile_picture: str | None = None,
    ) -> User:
        """Create a new user record with a normalized e-mail."""
        user = User(
            name=name,
            email=email.strip().lower(),
            hashed_password=hashed_password,
            google_id=google_id,
            profile_picture=profile_picture,
            is_active=True,
        )
        self._session.add(user)
        await self._session.flush()
        await self._session.refresh(user)
        return user

    async def exists_by_email(self, email: str) -> bool:
        """Check if a user with this email exists, ignoring case."""
        result = await self._session.execute(
            select(User.id).where(func.lower(User.email) == email.strip().lower())
        )
        return result.scalar_one_or_none() is not None
