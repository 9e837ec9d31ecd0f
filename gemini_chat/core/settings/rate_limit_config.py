"""Rate limit configuration."""

from pydantic import BaseModel


class RateLimitConfig(BaseModel, frozen=True):
    """Per-endpoint rate limit settings."""

    enabled: bool
    login_limit: str
    register_limit: str
    google_limit: str
