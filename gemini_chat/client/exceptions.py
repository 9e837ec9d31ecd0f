"""Exceptions raised by the chat API client."""


class ChatClientError(Exception):
    """Base exception for client-side failures."""


class APIError(ChatClientError):
    """The server answered with an error, or could not be reached."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        session_id: int | None = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.session_id = session_id
        super().__init__(message)


class AuthenticationError(APIError):
    """401: missing, invalid, expired or revoked credentials."""


class NotFoundError(APIError):
    """404: the resource does not exist or belongs to someone else."""


class ValidationError(APIError):
    """400/422: the request was rejected as invalid."""


class RateLimitError(APIError):
    """429: too many requests or too many failed logins."""
