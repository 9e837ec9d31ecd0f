"""Domain-specific configuration models."""

from gemini_chat.core.settings.app_config import AppConfig
from gemini_chat.core.settings.auth_config import AuthConfig
from gemini_chat.core.settings.chat_config import ChatConfig
from gemini_chat.core.settings.database_config import DatabaseConfig
from gemini_chat.core.settings.gemini_config import GeminiConfig
from gemini_chat.core.settings.google_config import GoogleConfig
from gemini_chat.core.settings.rate_limit_config import RateLimitConfig
from gemini_chat.core.settings.redis_config import RedisConfig
from gemini_chat.core.settings.server_config import ServerConfig

__all__ = [
    "AppConfig",
    "AuthConfig",
    "ChatConfig",
    "DatabaseConfig",
    "GeminiConfig",
    "GoogleConfig",
    "RateLimitConfig",
    "RedisConfig",
    "ServerConfig",
]
