"""Tests for domain-specific configuration."""

import pytest
from pydantic import BaseModel, SecretStr, ValidationError

from gemini_chat.core.config import Settings
from gemini_chat.core.settings import (
    AppConfig,
    ChatConfig,
    GeminiConfig,
    GoogleConfig,
    RateLimitConfig,
    ServerConfig,
)


class TestGeminiConfig:
    """GeminiConfig immutability and URL building."""

    def _config(self, **overrides: object) -> GeminiConfig:
        values: dict[str, object] = {
            "api_key": SecretStr("key"),
            "model": "gemini-2.0-flash",
            "base_url": "https://generativelanguage.googleapis.com/v1beta",
            "timeout_seconds": 30.0,
        }
        values.update(overrides)
        return GeminiConfig(**values)  # type: ignore[arg-type]

    def test_frozen_immutability(self) -> None:
        config = self._config()
        with pytest.raises(ValidationError):
            config.model = "other"  # type: ignore[misc]

    def test_generate_url(self) -> None:
        config = self._config(base_url="https://example.com/v1beta/")
        assert (
            config.generate_url
            == "https://example.com/v1beta/models/gemini-2.0-flash:generateContent"
        )


class TestAppConfig:
    """AppConfig frozen immutability and property tests."""

    def test_frozen_immutability(self) -> None:
        config = AppConfig(name="test", version="1", env="development", debug=True)
        with pytest.raises(ValidationError):
            config.name = "changed"  # type: ignore[misc]

    def test_is_development(self) -> None:
        config = AppConfig(name="app", version="1", env="development", debug=True)
        assert config.is_development is True
        assert config.is_production is False

    def test_is_production(self) -> None:
        config = AppConfig(name="app", version="1", env="production", debug=False)
        assert config.is_production is True
        assert config.is_development is False


class TestServerConfig:
    """ServerConfig tests."""

    def test_cors_origins_list(self) -> None:
        config = ServerConfig(
            host="0.0.0.0",
            port=5000,
            cors_origins="http://a.example, http://b.example,,",
        )
        assert config.cors_origins_list == ["http://a.example", "http://b.example"]


class TestGoogleConfig:
    """GoogleConfig tests."""

    def test_is_configured(self) -> None:
        assert GoogleConfig(client_id="abc", certs_url="u").is_configured is True
        assert GoogleConfig(client_id="", certs_url="u").is_configured is False


class TestSettingsDomainProperties:
    """Settings domain property access tests."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("GEMINI_MODEL", "CHAT_HISTORY_LIMIT", "JWT_EXPIRE_DAYS", "PORT"):
            monkeypatch.delenv(name, raising=False)
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.gemini.model == "gemini-2.0-flash"
        assert s.chat == ChatConfig(history_limit=10)
        assert s.auth.access_token_expire_days == 7
        assert s.auth.allowed_email_domain == "amzur.com"
        assert s.server.port == 5000

    def test_app_property(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_NAME", "my-app")
        monkeypatch.setenv("APP_ENV", "production")
        monkeypatch.setenv("DEBUG", "false")
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.app.name == "my-app"
        assert s.app.env == "production"
        assert s.app.debug is False
        assert s.app.is_production is True

    def test_gemini_property(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GEMINI_API_KEY", "gk")
        monkeypatch.setenv("GEMINI_MODEL", "gemini-1.5-pro")
        monkeypatch.setenv("GEMINI_TIMEOUT_SECONDS", "12.5")
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.gemini.api_key.get_secret_value() == "gk"
        assert s.gemini.model == "gemini-1.5-pro"
        assert s.gemini.timeout_seconds == 12.5

    def test_rate_limit_property(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RATE_LIMIT_ENABLED", "true")
        monkeypatch.setenv("LOGIN_RATE_LIMIT", "2/minute")
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.rate_limit == RateLimitConfig(
            enabled=True,
            login_limit="2/minute",
            register_limit="3/minute",
            google_limit="10/minute",
        )

    def test_rate_limit_fields_do_not_shadow_model_api(self) -> None:
        assert [f for f in RateLimitConfig.model_fields if hasattr(BaseModel, f)] == []

    def test_server_property(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HOST", "127.0.0.1")
        monkeypatch.setenv("PORT", "9000")
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.server.host == "127.0.0.1"
        assert s.server.port == 9000

    def test_secret_key_is_required(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("JWT_SECRET_KEY")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)  # type: ignore[call-arg]

    def test_history_limit_is_bounded(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CHAT_HISTORY_LIMIT", "-1")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)  # type: ignore[call-arg]
