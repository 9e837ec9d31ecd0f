"""Tests for the Gemini gateway."""

import json

import httpx
import pytest
from pydantic import SecretStr
from pytest_httpx import HTTPXMock

from gemini_chat.core.config import settings
from gemini_chat.schemas.chat_schema import HistoryMessage
from gemini_chat.services.gemini_service import (
    CONNECTION_ERROR_MESSAGE,
    INVALID_RESPONSE_MESSAGE,
    NO_RESPONSE_MESSAGE,
    NOT_CONFIGURED_MESSAGE,
    RATE_LIMIT_MESSAGE,
    GeminiService,
    build_contents,
    extract_text,
    to_gemini_role,
)

GENERATE_URL = settings.gemini.generate_url


def _reply(text: str) -> dict:
    return {
        "candidates": [
            {
                "content": {"role": "model", "parts": [{"text": text}]},
                "finishReason": "STOP",
            }
        ]
    }


@pytest.fixture
def service() -> GeminiService:
    return GeminiService()


class TestHelpers:
    """Tests for request building and response parsing."""

    def test_role_mapping(self) -> None:
        assert to_gemini_role("user") == "user"
        assert to_gemini_role("assistant") == "model"

    def test_build_contents_appends_new_message(self) -> None:
        history = [
            HistoryMessage(role="user", content="hi"),
            HistoryMessage(role="assistant", content="hello"),
        ]
        assert build_contents("how are you?", history) == [
            {"role": "user", "parts": [{"text": "hi"}]},
            {"role": "model", "parts": [{"text": "hello"}]},
            {"role": "user", "parts": [{"text": "how are you?"}]},
        ]

    def test_build_contents_without_history(self) -> None:
        assert build_contents("hi", []) == [{"role": "user", "parts": [{"text": "hi"}]}]

    @pytest.mark.parametrize(
        "data",
        [
            {},
            {"candidates": []},
            {"candidates": [{"content": {"parts": []}}]},
            {"candidates": [{"content": {"parts": [{"text": ""}]}}]},
            {"candidates": [{"finishReason": "SAFETY"}]},
            {"candidates": [{"content": "oops"}]},
            {"candidates": {"x": 1}},
            {"candidates": [{"content": {"parts": "text"}}]},
            [],
        ],
    )
    def test_extract_text_missing(self, data: object) -> None:
        assert extract_text(data) is None

    def test_extract_text(self) -> None:
        assert extract_text(_reply("Hello!")) == "Hello!"


class TestSendMessage:
    """Tests for GeminiService.send_message."""

    async def test_success(self, service: GeminiService, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(method="POST", url=GENERATE_URL, json=_reply("Hi there"))

        result = await service.send_message(
            "Hello", [HistoryMessage(role="assistant", content="Earlier")]
        )

        assert result.success is True
        assert result.text == "Hi there"
        assert result.error is None

        request = httpx_mock.get_request()
        assert request is not None
        assert request.headers["x-goog-api-key"] == "test-gemini-key"
        body = json.loads(request.content)
        assert body["contents"][0]["role"] == "model"
        assert body["contents"][-1] == {"role": "user", "parts": [{"text": "Hello"}]}

    async def test_rate_limited(
        self, service: GeminiService, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_response(method="POST", url=GENERATE_URL, status_code=429)

        result = await service.send_message("Hello")

        assert result.success is False
        assert result.error == RATE_LIMIT_MESSAGE

    async def test_server_error(
        self, service: GeminiService, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_response(
            method="POST",
            url=GENERATE_URL,
            status_code=503,
            json={"error": {"message": "overloaded"}},
        )

        result = await service.send_message("Hello")

        assert result.success is False
        assert result.error == "Gemini API error: 503"

    async def test_bad_request(
        self, service: GeminiService, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_response(method="POST", url=GENERATE_URL, status_code=400)

        result = await service.send_message("Hello")

        assert result.error == "Gemini API error: 400"

    async def test_transport_error(
        self, service: GeminiService, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_exception(httpx.ConnectError("connection refused"))

        result = await service.send_message("Hello")

        assert result.success is False
        assert result.error == CONNECTION_ERROR_MESSAGE

    async def test_no_candidates(
        self, service: GeminiService, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_response(method="POST", url=GENERATE_URL, json={"candidates": []})

        result = await service.send_message("Hello")

        assert result.success is False
        assert result.error == NO_RESPONSE_MESSAGE

    @pytest.mark.parametrize(
        "payload",
        [
            {"candidates": [{"content": "oops"}]},
            {"candidates": {"x": 1}},
        ],
    )
    async def test_malformed_candidates(
        self, service: GeminiService, httpx_mock: HTTPXMock, payload: dict
    ) -> None:
        httpx_mock.add_response(method="POST", url=GENERATE_URL, json=payload)

        result = await service.send_message("Hello")

        assert result.success is False
        assert result.error == NO_RESPONSE_MESSAGE

    async def test_invalid_json(
        self, service: GeminiService, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_response(method="POST", url=GENERATE_URL, text="<html>")

        result = await service.send_message("Hello")

        assert result.success is False
        assert result.error == INVALID_RESPONSE_MESSAGE

    async def test_makes_exactly_one_request(
        self, service: GeminiService, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_response(method="POST", url=GENERATE_URL, status_code=500)

        await service.send_message("Hello")

        assert len(httpx_mock.get_requests()) == 1

    async def test_missing_api_key(self) -> None:
        config = settings.gemini.model_copy(update={"api_key": SecretStr("")})

        result = await GeminiService(config).send_message("Hello")

        assert result.success is False
        assert result.error == NOT_CONFIGURED_MESSAGE
