"""Google ID token verification against Google's published signing keys."""

import asyncio
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

import jwt
import structlog

from gemini_chat.core.config import settings

logger = structlog.get_logger()

GOOGLE_ISSUERS = ["accounts.google.com", "https://accounts.google.com"]


@dataclass(frozen=True)
class GoogleIdentity:
    """Verified claims taken from a Google ID token."""

    subject: str
    email: str
    name: str | None
    picture: str | None


@lru_cache
def get_jwks_client(certs_url: str) -> jwt.PyJWKClient:
    """Shared JWKS client; PyJWKClient caches the fetched keys."""
    return jwt.PyJWKClient(certs_url, cache_keys=True)


class GoogleAuthService:
    """Verifies Google Sign-In credentials for the configured OAuth client."""

    def __init__(
        self,
        client_id: str | None = None,
        jwks_client: jwt.PyJWKClient | None = None,
    ) -> None:
        self._client_id = (
            settings.google.client_id if client_id is None else client_id
        )
        self._jwks_client = jwks_client

    @property
    def client_id(self) -> str:
        return self._client_id

    def _jwks(self) -> jwt.PyJWKClient:
        if self._jwks_client is None:
            self._jwks_client = get_jwks_client(settings.google.certs_url)
        return self._jwks_client

    def _decode(self, id_token: str) -> dict[str, Any]:
        signing_key = self._jwks().get_signing_key_from_jwt(id_token)
        return jwt.decode(
            id_token,
            signing_key.key,
            algorithms=["RS256"],
            audience=self._client_id,
            issuer=GOOGLE_ISSUERS,
            options={"require": ["exp", "iat", "sub", "aud", "iss"]},
        )

    async def verify(self, id_token: str) -> GoogleIdentity | None:
        """Verify an ID token and return its identity, or None when invalid."""
        if not self._client_id:
            logger.error("Google client id is not configured")
            return None

        try:
            # Key fetch and RSA verification are blocking.
            claims = await asyncio.to_thread(self._decode, id_token)
        except jwt.PyJWKClientConnectionError:
            logger.exception("Could not load Google signing keys")
            return None
        except jwt.PyJWTError as exc:
            logger.warning("Invalid Google ID token", reason=str(exc))
            return None

        email = claims.get("email")
        if not email:
            logger.warning("Google ID token has no email claim", sub=claims.get("sub"))
            return None
        if claims.get("email_verified") is False:
            logger.warning("Google account email is not verified", sub=claims.get("sub"))
            return None

        return GoogleIdentity(
            subject=str(claims["sub"]),
            email=str(email).lower(),
            name=claims.get("name"),
            picture=claims.get("picture"),
        )
