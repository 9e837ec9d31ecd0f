"""Application configuration using Pydantic Settings V2."""

from functools import cached_property
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from gemini_chat.core.settings import (
    AppConfig,
    AuthConfig,
    ChatConfig,
    DatabaseConfig,
    GeminiConfig,
    GoogleConfig,
    RateLimitConfig,
    RedisConfig,
    ServerConfig,
)

APP_VERSION = "0.1.0"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Flat fields are loaded directly from environment variables.
    Domain properties provide grouped access (e.g. settings.gemini.model).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = Field(
        default="gemini-chat",
        description="Application name",
    )
    app_env: Literal["development", "test", "staging", "production"] = Field(
        default="development",
        description="Application environment",
    )
    debug: bool = Field(
        default=True,
        description="Debug mode",
    )

    # Server
    host: str = Field(
        default="0.0.0.0",
        description="Server host",
    )
    port: int = Field(
        default=5000,
        ge=1,
        le=65535,
        description="Server port",
    )
    cors_origins: str = Field(
        default="http://localhost:3000",
        description="Comma-separated list of allowed CORS origins outside development",
    )

    # JWT Auth
    jwt_secret_key: SecretStr = Field(
        description="JWT secret key for token signing",
    )
    jwt_algorithm: str = Field(
        default="HS256",
        description="JWT signing algorithm",
    )
    jwt_issuer: str = Field(
        default="gemini-chat",
        description="Issuer claim written into and required on tokens",
    )
    jwt_audience: str = Field(
        default="gemini-chat-users",
        description="Audience claim written into and required on tokens",
    )
    jwt_expire_days: int = Field(
        default=7,
        ge=1,
        le=90,
        description="Access token expiration in days",
    )
    allowed_email_domain: str = Field(
        default="amzur.com",
        description="Only e-mails of this domain may register or log in",
    )
    max_login_attempts: int = Field(
        default=5,
        ge=1,
        description="Failed password logins before an e-mail is locked out",
    )
    login_lockout_seconds: int = Field(
        default=300,
        ge=1,
        description="Window for counting failed logins, in seconds",
    )

    # Rate limits
    rate_limit_enabled: bool = Field(
        default=True,
        description="Enable per-IP rate limiting of auth endpoints",
    )
    login_rate_limit: str = Field(
        default="5/minute",
        description="Login endpoint rate limit",
    )
    register_rate_limit: str = Field(
        default="3/minute",
        description="Register endpoint rate limit",
    )
    google_login_rate_limit: str = Field(
        default="10/minute",
        description="Google login endpoint rate limit",
    )

    # Google Sign-In
    google_client_id: str = Field(
        default="",
        description="OAuth client id expected as the ID token audience",
    )
    google_certs_url: str = Field(
        default="https://www.googleapis.com/oauth2/v3/certs",
        description="JWKS endpoint with Google's signing keys",
    )

    # Gemini
    gemini_api_key: SecretStr = Field(
        default=SecretStr(""),
        description="Gemini API key",
    )
    gemini_model: str = Field(
        default="gemini-2.0-flash",
        description="Gemini model name",
    )
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Gemini REST API base URL",
    )
    gemini_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Timeout for a single Gemini request",
    )

    # Chat
    chat_history_limit: int = Field(
        default=10,
        ge=0,
        le=100,
        description="Number of recent messages sent to Gemini as context",
    )

    # Database
    database_url: SecretStr = Field(
        description="Async database URL (mysql+aiomysql://...)",
    )

    # Redis
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL",
    )
    redis_key_prefix: str = Field(
        default="gemini_chat",
        description="Prefix for all Redis keys",
    )

    # --- Domain properties ---

    @cached_property
    def app(self) -> AppConfig:
        """Application environment configuration."""
        return AppConfig(
            name=self.app_name,
            version=APP_VERSION,
            env=self.app_env,
            debug=self.debug,
        )

    @cached_property
    def server(self) -> ServerConfig:
        """Server configuration."""
        return ServerConfig(
            host=self.host,
            port=self.port,
            cors_origins=self.cors_origins,
        )

    @cached_property
    def auth(self) -> AuthConfig:
        """JWT authentication configuration."""
        return AuthConfig(
            secret_key=self.jwt_secret_key,
            algorithm=self.jwt_algorithm,
            issuer=self.jwt_issuer,
            audience=self.jwt_audience,
            access_token_expire_days=self.jwt_expire_days,
            allowed_email_domain=self.allowed_email_domain,
            max_login_attempts=self.max_login_attempts,
            login_lockout_seconds=self.login_lockout_seconds,
        )

    @cached_property
    def rate_limit(self) -> RateLimitConfig:
        """Rate limit configuration."""
        return RateLimitConfig(
            enabled=self.rate_limit_enabled,
            login_limit=self.login_rate_limit,
            register_limit=self.register_rate_limit,
            google_limit=self.google_login_rate_limit,
        )

    @cached_property
    def google(self) -> GoogleConfig:
        """Google Sign-In configuration."""
        return GoogleConfig(
            client_id=self.google_client_id,
            certs_url=self.google_certs_url,
        )

    @cached_property
    def gemini(self) -> GeminiConfig:
        """Gemini API configuration."""
        return GeminiConfig(
            api_key=self.gemini_api_key,
            model=self.gemini_model,
            base_url=self.gemini_base_url,
            timeout_seconds=self.gemini_timeout_seconds,
        )

    @cached_property
    def chat(self) -> ChatConfig:
        """Chat history configuration."""
        return ChatConfig(
            history_limit=self.chat_history_limit,
        )

    @cached_property
    def database(self) -> DatabaseConfig:
        """Database connection configuration."""
        return DatabaseConfig(url=self.database_url)

    @cached_property
    def redis(self) -> RedisConfig:
        """Redis connection configuration."""
        return RedisConfig(url=self.redis_url, key_prefix=self.redis_key_prefix)

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app.is_development


# Global settings instance
settings = Settings()
