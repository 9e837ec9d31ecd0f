"""Per-client request rate limiting."""

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from gemini_chat.core.config import settings
from gemini_chat.core.exceptions import error_body

limiter = Limiter(
    key_func=get_remote_address,
    enabled=settings.rate_limit.enabled,
)


async def rate_limit_exceeded_handler(
    request: Request, exc: RateLimitExceeded
) -> JSONResponse:
    """Custom handler for rate limit exceeded errors."""
    return JSONResponse(
        status_code=429,
        content=error_body(
            "Too many requests. Please wait a moment and try again.",
            "RATE_LIMIT_EXCEEDED",
        ),
    )
