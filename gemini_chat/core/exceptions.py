"""Application exception classes and handlers."""

from typing import Any

import structlog
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = structlog.get_logger()


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        extra: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.code = code
        self.status_code = status_code
        self.extra = extra or {}
        super().__init__(message)


# --- Validation (400) ---


class ValidationFailedError(AppException):
    """Request data failed a business validation rule."""

    def __init__(self, message: str) -> None:
        super().__init__(message=message, code="VALIDATION_ERROR", status_code=400)


class DomainNotAllowedError(AppException):
    """E-mail is outside the sanctioned organization domain."""

    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(
            message=message, code="DOMAIN_NOT_ALLOWED", status_code=status_code
        )


# --- Authentication (401) ---


class AuthenticationError(AppException):
    """Base authentication error."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message=message, code="AUTHENTICATION_ERROR", status_code=401)


class TokenExpiredError(AppException):
    """Token has expired."""

    def __init__(self) -> None:
        super().__init__(
            message="Token has expired",
            code="TOKEN_EXPIRED",
            status_code=401,
        )


class TokenBlacklistedError(AppException):
    """Token has been revoked."""

    def __init__(self) -> None:
        super().__init__(
            message="Token has been revoked",
            code="TOKEN_BLACKLISTED",
            status_code=401,
        )


class InvalidTokenError(AppException):
    """Token is invalid."""

    def __init__(self, message: str = "Invalid token") -> None:
        super().__init__(
            message=message,
            code="INVALID_TOKEN",
            status_code=401,
        )


class InvalidCredentialsError(AppException):
    """Invalid email or password."""

    def __init__(self) -> None:
        super().__init__(
            message="Invalid email or password",
            code="INVALID_CREDENTIALS",
            status_code=401,
        )


class InvalidGoogleTokenError(AppException):
    """Google ID token could not be verified."""

    def __init__(self) -> None:
        super().__init__(
            message="Invalid Google token",
            code="INVALID_GOOGLE_TOKEN",
            status_code=401,
        )


class AccountDisabledError(AppException):
    """Account exists but has been deactivated."""

    def __init__(self) -> None:
        super().__init__(
            message="Account is deactivated",
            code="ACCOUNT_DISABLED",
            status_code=401,
        )


# --- Conflict (409) ---


class UserAlreadyExistsError(AppException):
    """User with this email already exists."""

    def __init__(self) -> None:
        super().__init__(
            message="User with this email already exists",
            code="USER_ALREADY_EXISTS",
            status_code=409,
        )


# --- Not Found (404) ---


class SessionNotFoundError(AppException):
    """Chat session is absent or owned by another user."""

    def __init__(self) -> None:
        super().__init__(
            message="Chat session not found",
            code="SESSION_NOT_FOUND",
            status_code=404,
        )


class NotConfiguredError(AppException):
    """Optional integration has not been configured."""

    def __init__(self, message: str) -> None:
        super().__init__(message=message, code="NOT_CONFIGURED", status_code=404)


# --- Rate Limit (429) ---


class AccountLockedError(AppException):
    """Too many failed login attempts."""

    def __init__(self) -> None:
        super().__init__(
            message="Too many failed login attempts. Please try again later.",
            code="ACCOUNT_LOCKED",
            status_code=429,
        )


# --- Server side (500) ---


class UpstreamServiceError(AppException):
    """The language API call did not produce a reply."""

    def __init__(self, message: str, session_id: int | None = None) -> None:
        extra = {"sessionId": session_id} if session_id is not None else None
        super().__init__(
            message=message,
            code="UPSTREAM_ERROR",
            status_code=500,
            extra=extra,
        )


class InternalServiceError(AppException):
    """Unexpected failure already logged at the service boundary."""

    def __init__(self, message: str = "An unexpected error occurred") -> None:
        super().__init__(message=message, code="INTERNAL_ERROR", status_code=500)


# --- Exception Handlers ---


def error_body(message: str, code: str, **extra: Any) -> dict[str, Any]:
    """Uniform failure payload."""
    return {"success": False, "error": message, "code": code, **extra}


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Central exception handler for AppException."""
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.message, exc.code, **exc.extra),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report the first request validation problem as a 400."""
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        message = str(errors[0].get("msg", message)).removeprefix("Value error, ")
    return JSONResponse(
        status_code=400,
        content=error_body(message, "VALIDATION_ERROR"),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler so raw tracebacks never reach the client."""
    logger.exception(
        "Unhandled exception",
        path=request.url.path,
        method=request.method,
    )
    return JSONResponse(
        status_code=500,
        content=error_body("An unexpected error occurred", "INTERNAL_ERROR"),
    )
