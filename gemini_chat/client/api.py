"""Synchronous HTTP client for the chat API."""

from typing import Any

import httpx

from gemini_chat.client.exceptions import (
    APIError,
    AuthenticationError,
    NotFoundError,
    RateLimitError,
    ValidationError,
)
from gemini_chat.client.session import ClientSession

DEFAULT_BASE_URL = "http://localhost:5000"


class ChatApiClient:
    """Thin wrapper over the ``/api/auth`` and ``/api/chat`` endpoints.

    Successful calls return the decoded JSON body. Failures raise an
    ``APIError`` subclass carrying the server's ``error`` message. Any 401
    on a protected call clears the stored session, since the token can no
    longer be used.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        session: ClientSession | None = None,
        timeout: float = 60.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session or ClientSession()
        self.timeout = timeout
        self._http_client = httpx.Client(base_url=self.base_url, timeout=timeout)

    # --- Auth ---

    def register(self, name: str, email: str, password: str) -> dict[str, Any]:
        data = self._request(
            "POST",
            "/api/auth/register",
            json={"name": name, "email": email, "password": password},
        )
        self._adopt(data)
        return data

    def login(self, email: str, password: str) -> dict[str, Any]:
        data = self._request(
            "POST", "/api/auth/login", json={"email": email, "password": password}
        )
        self._adopt(data)
        return data

    def google_login(self, id_token: str) -> dict[str, Any]:
        data = self._request("POST", "/api/auth/google", json={"idToken": id_token})
        self._adopt(data)
        return data

    def google_client_id(self) -> str | None:
        """OAuth client id, or None when Google sign-in is not configured."""
        try:
            data = self._request("GET", "/api/auth/google/client-id")
        except NotFoundError:
            return None
        return data.get("clientId")

    def validate(self) -> dict[str, Any] | None:
        """Check the stored token; returns the profile, or None after clearing it."""
        if not self.session.is_authenticated:
            return None
        try:
            data = self._request("GET", "/api/auth/validate", auth=True)
        except AuthenticationError:
            return None
        user = data.get("user")
        if user and self.session.token:
            self.session.set(self.session.token, user)
        return user

    def logout(self) -> None:
        """Revoke the token server-side, then forget it locally."""
        try:
            if self.session.is_authenticated:
                self._request("POST", "/api/auth/logout", auth=True)
        finally:
            self.session.clear()

    # --- Chat ---

    def send_message(self, message: str, session_id: int | None = None) -> dict[str, Any]:
        body: dict[str, Any] = {"message": message}
        if session_id is not None:
            body["sessionId"] = session_id
        return self._request("POST", "/api/chat", json=body, auth=True)

    def list_sessions(self) -> list[dict[str, Any]]:
        return self._request("GET", "/api/chat/sessions", auth=True)

    def create_session(self, title: str | None = None) -> dict[str, Any]:
        body = {"title": title} if title else {}
        return self._request("POST", "/api/chat/sessions", json=body, auth=True)

    def get_messages(self, session_id: int) -> list[dict[str, Any]]:
        return self._request(
            "GET", f"/api/chat/sessions/{session_id}/messages", auth=True
        )

    def rename_session(self, session_id: int, title: str) -> None:
        self._request(
            "PUT", f"/api/chat/sessions/{session_id}", json={"title": title}, auth=True
        )

    def delete_session(self, session_id: int) -> None:
        self._request("DELETE", f"/api/chat/sessions/{session_id}", auth=True)

    def health(self) -> dict[str, Any]:
        return self._request("GET", "/api/chat/health")

    # --- Plumbing ---

    def _adopt(self, data: dict[str, Any]) -> None:
        token = data.get("token")
        if token:
            self.session.set(token, data.get("user"))

    def _request(
        self,
        method: str,
        path: str,
        json: Any = None,
        auth: bool = False,
    ) -> Any:
        headers = self.session.auth_headers() if auth else {}
        try:
            response = self._http_client.request(
                method, path, json=json, headers=headers
            )
        except httpx.HTTPError as exc:
            raise APIError(f"Could not reach the server: {exc}") from exc

        if not response.is_success:
            if auth and response.status_code == 401:
                self.session.clear()
            self._handle_error(response)
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    @staticmethod
    def _handle_error(response: httpx.Response) -> None:
        """Map an error response onto the exception hierarchy."""
        status_code = response.status_code
        session_id = None
        try:
            data = response.json()
            message = data.get("error") or data.get("detail") or response.text
            session_id = data.get("sessionId")
        except (ValueError, AttributeError):
            message = response.text or f"HTTP {status_code} error"

        if status_code == 401:
            raise AuthenticationError(message, status_code)
        if status_code == 404:
            raise NotFoundError(message, status_code)
        if status_code in (400, 422):
            raise ValidationError(message, status_code)
        if status_code == 429:
            raise RateLimitError(message, status_code)
        raise APIError(message, status_code, session_id=session_id)

    def close(self) -> None:
        self._http_client.close()

    def __enter__(self) -> "ChatApiClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
