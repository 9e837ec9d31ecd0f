"""Tests for TokenService."""

import time
from datetime import UTC, datetime, timedelta

import fakeredis.aioredis
import jwt
import pytest

from gemini_chat.core.config import settings
from gemini_chat.core.exceptions import InvalidTokenError, TokenExpiredError
from gemini_chat.services.token_service import TokenService, decode_access_token


def _encode(**claims: object) -> str:
    now = datetime.now(UTC)
    payload: dict[str, object] = {
        "sub": "1",
        "email": "a@amzur.com",
        "name": "A",
        "jti": "jti-1",
        "iss": settings.auth.issuer,
        "aud": settings.auth.audience,
        "iat": now,
        "exp": now + timedelta(days=1),
    }
    payload.update(claims)
    return jwt.encode(
        payload,
        settings.auth.secret_key.get_secret_value(),
        algorithm=settings.auth.algorithm,
    )


class TestAccessToken:
    """Tests for token creation and validation."""

    def test_round_trip(self, token_service: TokenService) -> None:
        token = token_service.create_access_token(5, "jane@amzur.com", "Jane")
        payload = token_service.decode_token(token)
        assert payload.user_id == 5
        assert payload.email == "jane@amzur.com"
        assert payload.name == "Jane"
        assert payload.jti

    def test_expires_after_seven_days(self, token_service: TokenService) -> None:
        token = token_service.create_access_token(1, "a@amzur.com", "A")
        payload = token_service.decode_token(token)
        expected = time.time() + 7 * 24 * 3600
        assert abs(payload.exp - expected) < 60

    def test_each_token_has_unique_jti(self, token_service: TokenService) -> None:
        first = token_service.decode_token(
            token_service.create_access_token(1, "a@amzur.com", "A")
        )
        second = token_service.decode_token(
            token_service.create_access_token(1, "a@amzur.com", "A")
        )
        assert first.jti != second.jti

    def test_expired_token(self) -> None:
        past = datetime.now(UTC) - timedelta(days=8)
        token = _encode(iat=past, exp=past + timedelta(days=7))
        with pytest.raises(TokenExpiredError):
            decode_access_token(token)

    def test_tampered_token(self, token_service: TokenService) -> None:
        token = token_service.create_access_token(1, "a@amzur.com", "A")
        with pytest.raises(InvalidTokenError):
            decode_access_token(token[:-2] + ("AA" if token[-2:] != "AA" else "BB"))

    def test_wrong_secret(self) -> None:
        token = jwt.encode(
            {"sub": "1", "exp": datetime.now(UTC) + timedelta(days=1)},
            "another-secret-that-is-long-enough-for-hs256",
            algorithm="HS256",
        )
        with pytest.raises(InvalidTokenError):
            decode_access_token(token)

    def test_wrong_audience(self) -> None:
        with pytest.raises(InvalidTokenError):
            decode_access_token(_encode(aud="someone-else"))

    def test_wrong_issuer(self) -> None:
        with pytest.raises(InvalidTokenError):
            decode_access_token(_encode(iss="someone-else"))

    def test_missing_jti(self) -> None:
        token = _encode()
        claims = jwt.decode(token, options={"verify_signature": False})
        claims.pop("jti")
        with pytest.raises(InvalidTokenError):
            decode_access_token(
                jwt.encode(
                    claims,
                    settings.auth.secret_key.get_secret_value(),
                    algorithm=settings.auth.algorithm,
                )
            )

    def test_non_numeric_subject(self) -> None:
        with pytest.raises(InvalidTokenError):
            decode_access_token(_encode(sub="abc"))

    def test_garbage(self) -> None:
        with pytest.raises(InvalidTokenError):
            decode_access_token("not-a-jwt")


class TestBlacklist:
    """Tests for token revocation."""

    async def test_blacklist_token(self, token_service: TokenService) -> None:
        exp = int(time.time()) + 3600
        await token_service.blacklist_token("jti-x", exp)
        assert await token_service.is_blacklisted("jti-x") is True
        assert await token_service.is_blacklisted("jti-y") is False

    async def test_blacklist_uses_remaining_lifetime(
        self,
        token_service: TokenService,
        fake_redis: fakeredis.aioredis.FakeRedis,
    ) -> None:
        await token_service.blacklist_token("jti-ttl", int(time.time()) + 120)
        ttl = await fake_redis.ttl(settings.redis.key("token_blacklist", "jti-ttl"))
        assert 0 < ttl <= 120

    async def test_expired_token_not_stored(self, token_service: TokenService) -> None:
        await token_service.blacklist_token("jti-old", int(time.time()) - 10)
        assert await token_service.is_blacklisted("jti-old") is False


class TestLoginAttempts:
    """Tests for failed login tracking."""

    async def test_record_and_reset(self, token_service: TokenService) -> None:
        assert await token_service.get_login_attempts("a@amzur.com") == 0
        assert await token_service.record_failed_login("a@amzur.com") == 1
        assert await token_service.record_failed_login("A@AMZUR.COM") == 2
        assert await token_service.get_login_attempts("a@amzur.com") == 2
        await token_service.reset_login_attempts("a@amzur.com")
        assert await token_service.get_login_attempts("a@amzur.com") == 0

    async def test_attempts_expire(
        self,
        token_service: TokenService,
        fake_redis: fakeredis.aioredis.FakeRedis,
    ) -> None:
        await token_service.record_failed_login("b@amzur.com")
        ttl = await fake_redis.ttl(settings.redis.key("login_attempts", "b@amzur.com"))
        assert 0 < ttl <= settings.auth.login_lockout_seconds
