"""Gemini API configuration."""

from pydantic import BaseModel, SecretStr


class GeminiConfig(BaseModel, frozen=True):
    """Gemini generative language API settings."""

    api_key: SecretStr
    model: str
    base_url: str
    timeout_seconds: float

    @property
    def generate_url(self) -> str:
        """Full URL of the generateContent endpoint."""
        return f"{self.base_url.rstrip('/')}/models/{self.model}:generateContent"
