"""JWT token creation, validation, and revocation management."""

import uuid
from datetime import UTC, datetime, timedelta

import jwt
import redis.asyncio as redis

from gemini_chat.core.config import settings
from gemini_chat.core.exceptions import (
    InvalidTokenError,
    TokenExpiredError,
)
from gemini_chat.schemas.auth_schema import TokenPayload

BLACKLIST_NAMESPACE = "token_blacklist"
LOGIN_ATTEMPTS_NAMESPACE = "login_attempts"

REQUIRED_CLAIMS = ["exp", "iat", "sub", "jti", "iss", "aud"]


def decode_access_token(token: str) -> TokenPayload:
    """Decode and validate a signed access token.

    Checks signature, expiry, issuer and audience. Raises
    ``TokenExpiredError`` or ``InvalidTokenError``.
    """
    try:
        payload = jwt.decode(
            token,
            settings.auth.secret_key.get_secret_value(),
            algorithms=[settings.auth.algorithm],
            audience=settings.auth.audience,
            issuer=settings.auth.issuer,
            options={"require": REQUIRED_CLAIMS},
        )
    except jwt.ExpiredSignatureError as e:
        raise TokenExpiredError from e
    except jwt.InvalidTokenError as e:
        raise InvalidTokenError from e

    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError) as e:
        raise InvalidTokenError from e

    return TokenPayload(
        sub=str(user_id),
        email=payload.get("email", ""),
        name=payload.get("name", ""),
        jti=str(payload["jti"]),
        exp=int(payload["exp"]),
    )


def blacklist_key(jti: str) -> str:
    return settings.redis.key(BLACKLIST_NAMESPACE, jti)


class TokenService:
    """Manage JWT tokens and the Redis-backed revocation list."""

    def __init__(self, redis_client: redis.Redis) -> None:  # type: ignore[type-arg]
        self._redis = redis_client
        self._secret = settings.auth.secret_key.get_secret_value()
        self._algorithm = settings.auth.algorithm

    def create_access_token(self, user_id: int, email: str, name: str) -> str:
        """Create a signed JWT identifying the user."""
        now = datetime.now(UTC)
        expire = now + timedelta(days=settings.auth.access_token_expire_days)
        payload = {
            "sub": str(user_id),
            "email": email,
            "name": name,
            "jti": str(uuid.uuid4()),
            "iss": settings.auth.issuer,
            "aud": settings.auth.audience,
            "iat": now,
            "exp": expire,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def decode_token(self, token: str) -> TokenPayload:
        """Decode and validate a JWT token."""
        return decode_access_token(token)

    # --- Blacklist ---

    async def blacklist_token(self, jti: str, exp: int) -> None:
        """Revoke a token until it would have expired anyway."""
        ttl = exp - int(datetime.now(UTC).timestamp())
        if ttl > 0:
            await self._redis.setex(blacklist_key(jti), ttl, "1")

    async def is_blacklisted(self, jti: str) -> bool:
        """Check if a token is revoked."""
        result = await self._redis.get(blacklist_key(jti))
        return result is not None

    # --- Login attempts ---

    def _attempts_key(self, email: str) -> str:
        return settings.redis.key(LOGIN_ATTEMPTS_NAMESPACE, email.lower())

    async def record_failed_login(self, email: str) -> int:
        """Record a failed login attempt, return total count."""
        key = self._attempts_key(email)
        count = await self._redis.incr(key)
        if count == 1:
            await self._redis.expire(key, settings.auth.login_lockout_seconds)
        return int(count)

    async def reset_login_attempts(self, email: str) -> None:
        """Clear failed login attempts after successful login."""
        await self._redis.delete(self._attempts_key(email))

    async def get_login_attempts(self, email: str) -> int:
        """Get current failed login attempt count."""
        result = await self._redis.get(self._attempts_key(email))
        return int(result) if result else 0
