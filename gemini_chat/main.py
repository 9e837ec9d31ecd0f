"""FastAPI application entry point."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from gemini_chat.api.common.auth_router import router as auth_router
from gemini_chat.api.common.chat_router import router as chat_router
from gemini_chat.core.config import settings
from gemini_chat.core.database import Base, engine
from gemini_chat.core.exceptions import (
    AppException,
    app_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from gemini_chat.core.middleware import AuthMiddleware
from gemini_chat.core.rate_limit import limiter, rate_limit_exceeded_handler
from gemini_chat.core.redis import close_redis, init_redis
from gemini_chat.models.user import utcnow

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup and shutdown events."""
    logger.info(
        "Starting application",
        app_name=settings.app.name,
        environment=settings.app.env,
        gemini_model=settings.gemini.model,
        google_login_enabled=settings.google.is_configured,
    )
    await init_redis()
    if settings.app.is_development:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    yield
    await close_redis()
    await engine.dispose()
    logger.info("Shutting down application")


app = FastAPI(
    title=settings.app.name,
    description="Organization chat assistant backed by Google Gemini",
    version=settings.app.version,
    lifespan=lifespan,
    debug=settings.app.debug,
)

app.state.limiter = limiter

# Exception handlers
app.add_exception_handler(AppException, app_exception_handler)  # type: ignore[arg-type]
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)  # type: ignore[arg-type]
app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
app.add_exception_handler(Exception, unhandled_exception_handler)

# Middleware (registration order: inner→outer, execution order: outer→inner)
app.add_middleware(AuthMiddleware)
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=(
        ["*"] if settings.app.is_development else settings.server.cors_origins_list
    ),
    allow_credentials=not settings.app.is_development,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "healthy", "timestamp": utcnow().isoformat()}


@app.get("/")
async def root() -> dict:
    """Root endpoint."""
    return {
        "app": settings.app.name,
        "version": settings.app.version,
        "docs": "/docs",
    }


# Register routers
app.include_router(auth_router)
app.include_router(chat_router)


def run() -> None:
    """Serve the API with uvicorn using the configured host and port."""
    uvicorn.run(
        "gemini_chat.main:app",
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.app.is_development,
    )


if __name__ == "__main__":
    run()
