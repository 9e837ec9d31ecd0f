"""Pytest configuration and fixtures."""

import os

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DEBUG", "false")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-that-is-long-enough-for-hs256")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("GOOGLE_CLIENT_ID", "test-client-id.apps.googleusercontent.com")
os.environ.setdefault("GEMINI_API_KEY", "test-gemini-key")

from collections.abc import AsyncGenerator  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import fakeredis.aioredis  # noqa: E402
import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from gemini_chat.core.database import Base, enable_sqlite_foreign_keys  # noqa: E402
from gemini_chat.core.security import hash_password  # noqa: E402
from gemini_chat.models.chat_message import ChatMessage  # noqa: E402, F401
from gemini_chat.models.chat_session import ChatSession  # noqa: E402, F401
from gemini_chat.models.user import User  # noqa: E402
from gemini_chat.services.gemini_service import (  # noqa: E402
    GeminiService,
    GenerationResult,
)
from gemini_chat.services.google_auth_service import (  # noqa: E402
    GoogleAuthService,
    GoogleIdentity,
)
from gemini_chat.services.token_service import TokenService  # noqa: E402

# --- Test DB (SQLite in-memory) ---

test_engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
enable_sqlite_foreign_keys(test_engine)
test_session_factory = async_sessionmaker(
    test_engine, class_=AsyncSession, expire_on_commit=False
)


@pytest.fixture(autouse=True)
async def setup_db() -> AsyncGenerator[None, None]:
    """Create all tables before each test, drop after."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def override_get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide a test database session."""
    async with test_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# --- Test Redis (fakeredis) ---


@pytest.fixture
def fake_redis() -> fakeredis.aioredis.FakeRedis:
    """Create a fresh fake Redis client."""
    return fakeredis.aioredis.FakeRedis(decode_responses=True)


@pytest.fixture(autouse=True)
def patch_redis(
    fake_redis: fakeredis.aioredis.FakeRedis, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Patch the global redis_client for middleware and get_redis()."""
    monkeypatch.setattr("gemini_chat.core.redis.redis_client", fake_redis)


# --- Token helpers ---


@pytest.fixture
def token_service(fake_redis: fakeredis.aioredis.FakeRedis) -> TokenService:
    """Create a TokenService backed by fake Redis."""
    return TokenService(fake_redis)


def make_auth_headers(
    fake_redis: fakeredis.aioredis.FakeRedis,
    user_id: int = 1,
    email: str = "test@amzur.com",
    name: str = "Test User",
) -> dict[str, str]:
    """Generate Authorization headers with a valid access token."""
    ts = TokenService(fake_redis)
    token = ts.create_access_token(user_id=user_id, email=email, name=name)
    return {"Authorization": f"Bearer {token}"}


async def create_user(
    email: str = "test@amzur.com",
    password: str | None = "password123",
    name: str = "Test User",
    is_active: bool = True,
) -> User:
    """Insert a user directly into the test database."""
    async with test_session_factory() as session:
        user = User(
            name=name,
            email=email,
            hashed_password=await hash_password(password) if password else None,
            is_active=is_active,
        )
        session.add(user)
        await session.commit()
        await session.refresh(user)
        return user


# --- Integration doubles ---


@pytest.fixture
def mock_gemini() -> MagicMock:
    """Gemini gateway double that answers every message with a fixed reply."""
    mock = MagicMock(spec=GeminiService)
    mock.send_message = AsyncMock(return_value=GenerationResult.ok("Test response"))
    return mock


@pytest.fixture
def mock_google_auth() -> MagicMock:
    """Google verifier double that accepts any token for an organization user."""
    mock = MagicMock(spec=GoogleAuthService)
    mock.client_id = "test-client-id.apps.googleusercontent.com"
    mock.verify = AsyncMock(
        return_value=GoogleIdentity(
            subject="google-sub-1",
            email="guser@amzur.com",
            name="Google User",
            picture="https://example.com/p.png",
        )
    )
    return mock


# --- App override & client fixtures ---


def _get_app(gemini=None, google_auth=None):  # type: ignore[no-untyped-def]
    """Import app lazily and apply overrides."""
    from gemini_chat.core.database import get_async_session as original_dep
    from gemini_chat.dependencies import get_gemini_service, get_google_auth_service
    from gemini_chat.main import app

    app.dependency_overrides.clear()
    app.dependency_overrides[original_dep] = override_get_async_session
    if gemini is not None:
        app.dependency_overrides[get_gemini_service] = lambda: gemini
    if google_auth is not None:
        app.dependency_overrides[get_google_auth_service] = lambda: google_auth
    return app


@pytest.fixture
async def async_client(
    fake_redis: fakeredis.aioredis.FakeRedis,
    mock_gemini: MagicMock,
    mock_google_auth: MagicMock,
) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client for async tests."""
    application = _get_app(gemini=mock_gemini, google_auth=mock_google_auth)
    transport = ASGITransport(app=application)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def test_user() -> User:
    """A persisted, active organization user."""
    return await create_user()


@pytest.fixture
async def authed_client(
    fake_redis: fakeredis.aioredis.FakeRedis,
    mock_gemini: MagicMock,
    mock_google_auth: MagicMock,
    test_user: User,
) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client with auth headers for ``test_user``."""
    application = _get_app(gemini=mock_gemini, google_auth=mock_google_auth)
    headers = make_auth_headers(
        fake_redis, user_id=test_user.id, email=test_user.email, name=test_user.name
    )
    transport = ASGITransport(app=application)
    async with AsyncClient(
        transport=transport, base_url="http://test", headers=headers
    ) as ac:
        yield ac


# --- DB session for tests ---


@pytest.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide a raw async session for repository tests."""
    async with test_session_factory() as session:
        yield session
