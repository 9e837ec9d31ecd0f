"""Global dependencies for the application."""

from functools import lru_cache

from fastapi import Depends, Request
from fastapi.security import HTTPBearer
from pydantic import BaseModel, ConfigDict
from sqlalchemy.ext.asyncio import AsyncSession

from gemini_chat.core.database import get_async_session
from gemini_chat.core.exceptions import AuthenticationError
from gemini_chat.core.redis import get_redis
from gemini_chat.repositories.chat_repo import ChatRepository
from gemini_chat.repositories.user_repo import UserRepository
from gemini_chat.schemas.auth_schema import TokenPayload
from gemini_chat.services.auth_service import AuthService
from gemini_chat.services.chat_service import ChatService
from gemini_chat.services.gemini_service import GeminiService
from gemini_chat.services.google_auth_service import GoogleAuthService
from gemini_chat.services.token_service import TokenService

bearer_scheme = HTTPBearer(auto_error=False)


# --- Integrations ---


@lru_cache
def get_gemini_service() -> GeminiService:
    """Get the shared Gemini gateway."""
    return GeminiService()


@lru_cache
def get_google_auth_service() -> GoogleAuthService:
    """Get the shared Google ID token verifier."""
    return GoogleAuthService()


# --- Auth dependencies ---


class CurrentUser(BaseModel):
    """Authenticated user extracted from request state."""

    model_config = ConfigDict(frozen=True)

    id: int
    email: str
    name: str
    jti: str
    exp: int

    def to_token_payload(self) -> TokenPayload:
        return TokenPayload(
            sub=str(self.id),
            email=self.email,
            name=self.name,
            jti=self.jti,
            exp=self.exp,
        )


def get_token_service() -> TokenService:
    """Get TokenService backed by the active Redis client."""
    return TokenService(get_redis())


def get_user_repository(
    session: AsyncSession = Depends(get_async_session),
) -> UserRepository:
    """Get UserRepository bound to the current session."""
    return UserRepository(session)


def get_chat_repository(
    session: AsyncSession = Depends(get_async_session),
) -> ChatRepository:
    """Get ChatRepository bound to the current session."""
    return ChatRepository(session)


def get_auth_service(
    user_repo: UserRepository = Depends(get_user_repository),
    token_service: TokenService = Depends(get_token_service),
    session: AsyncSession = Depends(get_async_session),
    google_auth: GoogleAuthService = Depends(get_google_auth_service),
) -> AuthService:
    """Get AuthService with all dependencies."""
    return AuthService(
        user_repo=user_repo,
        token_service=token_service,
        session=session,
        google_auth=google_auth,
    )


def get_current_user(request: Request) -> CurrentUser:
    """Extract the authenticated user from middleware-populated state."""
    state = getattr(request, "state", None)
    user_id = getattr(state, "user_id", None) if state else None
    if user_id is None:
        raise AuthenticationError(message="Not authenticated")
    return CurrentUser(
        id=state.user_id,
        email=state.email,
        name=state.name,
        jti=state.jti,
        exp=state.exp,
    )


def get_chat_service(
    chat_repo: ChatRepository = Depends(get_chat_repository),
    gemini: GeminiService = Depends(get_gemini_service),
    current_user: CurrentUser = Depends(get_current_user),
) -> ChatService:
    """Get ChatService scoped to the authenticated user."""
    return ChatService(chat_repo=chat_repo, gemini=gemini, user_id=current_user.id)
