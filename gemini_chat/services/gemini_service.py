"""Gateway to the Gemini generateContent REST API."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import httpx
import structlog

from gemini_chat.core.config import settings
from gemini_chat.core.settings import GeminiConfig
from gemini_chat.schemas.chat_schema import HistoryMessage

logger = structlog.get_logger()

RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please wait a moment and try again."
NOT_CONFIGURED_MESSAGE = "Gemini API key is not configured"
CONNECTION_ERROR_MESSAGE = "Unable to reach the Gemini API. Please try again later."
INVALID_RESPONSE_MESSAGE = "Invalid response received from Gemini"
NO_RESPONSE_MESSAGE = "No response received from Gemini"


@dataclass(frozen=True)
class GenerationResult:
    """Uniform outcome of one Gemini call."""

    success: bool
    text: str | None = None
    error: str | None = None

    @classmethod
    def ok(cls, text: str) -> "GenerationResult":
        return cls(success=True, text=text)

    @classmethod
    def fail(cls, error: str) -> "GenerationResult":
        return cls(success=False, error=error)


def to_gemini_role(role: str) -> str:
    """Map an internal role onto Gemini's ``user``/``model`` vocabulary."""
    return "user" if role == "user" else "model"


def build_contents(
    message: str, history: Sequence[HistoryMessage]
) -> list[dict[str, Any]]:
    """Build the ``contents`` list: history turns, then the new user turn."""
    contents = [
        {"role": to_gemini_role(item.role), "parts": [{"text": item.content}]}
        for item in history
    ]
    contents.append({"role": "user", "parts": [{"text": message}]})
    return contents


def extract_text(data: Any) -> str | None:
    """Return the first text part of the first candidate, if any."""
    if not isinstance(data, dict):
        return None
    candidates = data.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return None
    candidate = candidates[0]
    if not isinstance(candidate, dict):
        return None
    content = candidate.get("content")
    if not isinstance(content, dict):
        return None
    parts = content.get("parts")
    if not isinstance(parts, list) or not parts or not isinstance(parts[0], dict):
        return None
    text = parts[0].get("text")
    return text if isinstance(text, str) and text else None



class GeminiService:
    """Sends a conversation to Gemini and maps every failure to a result.

    Exactly one HTTP request is made per call; nothing is retried.
    """

    def __init__(self, config: GeminiConfig | None = None) -> None:
        self._config = config or settings.gemini

    async def send_message(
        self,
        message: str,
        history: Sequence[HistoryMessage] = (),
    ) -> GenerationResult:
        """Ask Gemini for a reply to ``message`` given the prior ``history``."""
        api_key = self._config.api_key.get_secret_value()
        if not api_key:
            logger.error("Gemini API key is not configured")
            return GenerationResult.fail(NOT_CONFIGURED_MESSAGE)

        body = {"contents": build_contents(message, history)}
        logger.info(
            "Sending request to Gemini",
            model=self._config.model,
            turns=len(body["contents"]),
        )

        try:
            async with httpx.AsyncClient(
                timeout=self._config.timeout_seconds
            ) as client:
                response = await client.post(
                    self._config.generate_url,
                    json=body,
                    headers={"x-goog-api-key": api_key},
                )
        except httpx.HTTPError as exc:
            logger.error(
                "Error communicating with Gemini API",
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return GenerationResult.fail(CONNECTION_ERROR_MESSAGE)

        if not response.is_success:
            logger.error(
                "Gemini API error",
                status_code=response.status_code,
                body=response.text[:2000],
            )
            if response.status_code == 429:
                return GenerationResult.fail(RATE_LIMIT_MESSAGE)
            return GenerationResult.fail(
                f"Gemini API error: {response.status_code}"
            )

        try:
            data = response.json()
        except ValueError:
            logger.error("Gemini returned invalid JSON", body=response.text[:2000])
            return GenerationResult.fail(INVALID_RESPONSE_MESSAGE)

        text = extract_text(data)
        if text is None:
            logger.warning(
                "Gemini response had no text",
                finish_reason=_finish_reason(data),
            )
            return GenerationResult.fail(NO_RESPONSE_MESSAGE)
        return GenerationResult.ok(text)


def _finish_reason(data: Any) -> str | None:
    try:
        return data["candidates"][0].get("finishReason")
    except (KeyError, IndexError, TypeError, AttributeError):
        return None
