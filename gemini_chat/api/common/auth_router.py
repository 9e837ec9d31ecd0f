"""Authentication endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.security import HTTPAuthorizationCredentials

from gemini_chat.core.config import settings
from gemini_chat.core.exceptions import InvalidTokenError, NotConfiguredError
from gemini_chat.core.rate_limit import limiter
from gemini_chat.dependencies import (
    CurrentUser,
    bearer_scheme,
    get_auth_service,
    get_current_user,
    get_google_auth_service,
)
from gemini_chat.schemas.auth_schema import (
    AuthResponse,
    GoogleClientIdResponse,
    GoogleLoginRequest,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    UserProfile,
    ValidateResponse,
)
from gemini_chat.schemas.response_schema import ErrorResponse
from gemini_chat.services.auth_service import AuthService
from gemini_chat.services.google_auth_service import GoogleAuthService

router = APIRouter(
    prefix="/api/auth",
    tags=["auth"],
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
)

AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
GoogleAuthServiceDep = Annotated[GoogleAuthService, Depends(get_google_auth_service)]
CurrentUserDep = Annotated[CurrentUser, Depends(get_current_user)]


@router.post("/register", response_model=AuthResponse)
@limiter.limit(settings.rate_limit.register_limit)
async def register(
    request: Request,
    body: RegisterRequest,
    auth_service: AuthServiceDep,
) -> AuthResponse:
    """Register a new organization account."""
    return await auth_service.register(body)


@router.post("/login", response_model=AuthResponse)
@limiter.limit(settings.rate_limit.login_limit)
async def login(
    request: Request,
    body: LoginRequest,
    auth_service: AuthServiceDep,
) -> AuthResponse:
    """Authenticate with e-mail and password."""
    return await auth_service.login(body)


@router.post("/google", response_model=AuthResponse)
@limiter.limit(settings.rate_limit.google_limit)
async def google_login(
    request: Request,
    body: GoogleLoginRequest,
    auth_service: AuthServiceDep,
) -> AuthResponse:
    """Authenticate with a Google ID token."""
    return await auth_service.google_login(body)


@router.get("/google/client-id", response_model=GoogleClientIdResponse)
async def google_client_id(google_auth: GoogleAuthServiceDep) -> GoogleClientIdResponse:
    """Expose the OAuth client id for the sign-in button."""
    if not google_auth.client_id:
        raise NotConfiguredError("Google Client ID not configured")
    return GoogleClientIdResponse(client_id=google_auth.client_id)


@router.get("/validate", response_model=ValidateResponse)
async def validate(
    auth_service: AuthServiceDep,
    _current_user: CurrentUserDep,
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ],
) -> ValidateResponse:
    """Return the profile behind the caller's token."""
    user = None
    if credentials is not None:
        user = await auth_service.validate_token(credentials.credentials)
    if user is None:
        raise InvalidTokenError
    return ValidateResponse(success=True, user=UserProfile.model_validate(user))


@router.post("/logout", response_model=MessageResponse)
async def logout(
    auth_service: AuthServiceDep,
    current_user: CurrentUserDep,
) -> MessageResponse:
    """Revoke the current access token."""
    return await auth_service.logout(current_user.to_token_payload())
