"""Authentication business logic."""

from collections.abc import Awaitable, Callable
from typing import TypeVar

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from gemini_chat.core.config import settings
from gemini_chat.core.exceptions import (
    AccountDisabledError,
    AccountLockedError,
    AppException,
    DomainNotAllowedError,
    InternalServiceError,
    InvalidCredentialsError,
    InvalidGoogleTokenError,
    UserAlreadyExistsError,
    ValidationFailedError,
)
from gemini_chat.core.security import hash_password, verify_password
from gemini_chat.models.user import User, utcnow
from gemini_chat.repositories.user_repo import UserRepository
from gemini_chat.schemas.auth_schema import (
    MIN_PASSWORD_LENGTH,
    AuthResponse,
    GoogleLoginRequest,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    TokenPayload,
    UserProfile,
)
from gemini_chat.services.google_auth_service import GoogleAuthService
from gemini_chat.services.token_service import TokenService

logger = structlog.get_logger()

T = TypeVar("T")


class AuthService:
    """Orchestrates registration, password login, Google login and validation.

    Business failures surface as ``AppException`` subclasses. Anything else
    is logged here and replaced by a generic ``InternalServiceError`` so raw
    driver or network errors never reach the client.
    """

    def __init__(
        self,
        user_repo: UserRepository,
        token_service: TokenService,
        session: AsyncSession,
        google_auth: GoogleAuthService | None = None,
    ) -> None:
        self._user_repo = user_repo
        self._token_service = token_service
        self._session = session
        self._google_auth = google_auth or GoogleAuthService()

    async def register(self, request: RegisterRequest) -> AuthResponse:
        """Register a new user and return a token."""
        return await self._guard(
            operation="registration",
            failure_message="An error occurred during registration",
            flow=lambda: self._register(request),
        )

    async def login(self, request: LoginRequest) -> AuthResponse:
        """Authenticate with e-mail and password."""
        return await self._guard(
            operation="login",
            failure_message="An error occurred during login",
            flow=lambda: self._login(request),
        )

    async def google_login(self, request: GoogleLoginRequest) -> AuthResponse:
        """Authenticate with a Google ID token, creating the user if needed."""
        return await self._guard(
            operation="google_login",
            failure_message="An error occurred during Google login",
            flow=lambda: self._google_login(request),
        )

    async def validate_token(self, token: str) -> User | None:
        """Return the token's user, or None if the token or user is not valid."""
        try:
            payload = self._token_service.decode_token(token)
            if await self._token_service.is_blacklisted(payload.jti):
                return None
            return await self._user_repo.find_by_id(payload.user_id)
        except AppException:
            return None
        except Exception:
            logger.exception("Token validation failed unexpectedly")
            return None

    async def logout(self, payload: TokenPayload) -> MessageResponse:
        """Revoke the caller's token for the rest of its lifetime."""
        await self._token_service.blacklist_token(payload.jti, payload.exp)
        logger.info("User logged out", user_id=payload.user_id)
        return MessageResponse(message="Successfully logged out")

    # --- flows ---

    async def _register(self, request: RegisterRequest) -> AuthResponse:
        if request.missing_fields:
            raise ValidationFailedError("Name, email, and password are required")
        if len(request.password) < MIN_PASSWORD_LENGTH:
            raise ValidationFailedError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )
        if not settings.auth.is_allowed_email(request.email):
            raise DomainNotAllowedError(
                f"Only {settings.auth.allowed_email_domain} employees "
                f"({settings.auth.email_suffix}) can register"
            )
        if await self._user_repo.exists_by_email(request.email):
            raise UserAlreadyExistsError

        hashed = await hash_password(request.password)
        user = await self._user_repo.create(
            name=request.name,
            email=request.email,
            hashed_password=hashed,
        )
        await self._session.commit()

        logger.info("User registered", email=user.email, user_id=user.id)
        return self._issue(user)

    async def _login(self, request: LoginRequest) -> AuthResponse:
        if not request.email or not request.password:
            raise ValidationFailedError("Email and password are required")

        attempts = await self._token_service.get_login_attempts(request.email)
        if attempts >= settings.auth.max_login_attempts:
            raise AccountLockedError

        user = await self._user_repo.find_by_email(request.email)
        hashed = user.hashed_password if user is not None else None
        if not await verify_password(request.password, hashed) or user is None:
            await self._token_service.record_failed_login(request.email)
            raise InvalidCredentialsError

        if not user.is_active:
            raise AccountDisabledError

        user.last_login_at = utcnow()
        await self._session.commit()
        await self._token_service.reset_login_attempts(request.email)

        logger.info("User logged in", email=user.email, user_id=user.id)
        return self._issue(user)

    async def _google_login(self, request: GoogleLoginRequest) -> AuthResponse:
        if not request.id_token.strip():
            raise ValidationFailedError("Google ID token is required")

        identity = await self._google_auth.verify(request.id_token)
        if identity is None:
            raise InvalidGoogleTokenError
        if not settings.auth.is_allowed_email(identity.email):
            raise DomainNotAllowedError(
                f"Only {settings.auth.allowed_email_domain} employees "
                f"({settings.auth.email_suffix}) can access this application",
                status_code=401,
            )

        user = await self._user_repo.find_by_email(identity.email)
        if user is None:
            user = await self._user_repo.create(
                name=identity.name or identity.email.split("@")[0],
                email=identity.email,
                google_id=identity.subject,
                profile_picture=identity.picture,
            )
            user.last_login_at = utcnow()
            logger.info(
                "New user created via Google login", email=user.email, user_id=user.id
            )
        else:
            if not user.google_id:
                user.google_id = identity.subject
            if not user.profile_picture:
                user.profile_picture = identity.picture
            user.last_login_at = utcnow()
        await self._session.commit()

        if not user.is_active:
            raise AccountDisabledError

        logger.info("User logged in with Google", email=user.email, user_id=user.id)
        return self._issue(user)

    # --- helpers ---

    def _issue(self, user: User) -> AuthResponse:
        """Build the token + profile response for a user."""
        token = self._token_service.create_access_token(user.id, user.email, user.name)
        return AuthResponse(
            success=True,
            token=token,
            user=UserProfile.model_validate(user),
        )

    async def _guard(
        self,
        operation: str,
        failure_message: str,
        flow: Callable[[], Awaitable[T]],
    ) -> T:
        try:
            return await flow()
        except AppException:
            raise
        except Exception as exc:
            logger.exception("Authentication flow failed", operation=operation)
            raise InternalServiceError(failure_message) from exc
