"""Authentication request/response schemas."""

from pydantic import ConfigDict, Field, field_validator

from gemini_chat.schemas.response_schema import CamelModel, ResultResponse

MIN_PASSWORD_LENGTH = 6


class RegisterRequest(CamelModel):
    """User registration request."""

    name: str = Field(default="", max_length=100, description="Display name")
    email: str = Field(default="", max_length=255, description="Work e-mail")
    password: str = Field(default="", max_length=128, description="Password")

    @field_validator("name", "email")
    @classmethod
    def strip_value(cls, v: str) -> str:
        return v.strip()

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()

    @property
    def missing_fields(self) -> bool:
        """True when any of name, e-mail or password is blank."""
        return not (self.name and self.email and self.password.strip())


class LoginRequest(CamelModel):
    """User login request."""

    email: str = Field(default="", max_length=255, description="Work e-mail")
    password: str = Field(default="", max_length=128, description="Password")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower().strip()


class GoogleLoginRequest(CamelModel):
    """Google Sign-In request carrying the credential from the browser."""

    id_token: str = Field(default="", description="Google ID token")


class UserProfile(CamelModel):
    """Public user representation."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int
    name: str
    email: str
    profile_picture: str | None = None


class AuthResponse(ResultResponse):
    """Token and profile returned by every login path."""

    token: str | None = None
    user: UserProfile | None = None


class ValidateResponse(ResultResponse):
    """Result of validating the caller's token."""

    user: UserProfile | None = None


class GoogleClientIdResponse(CamelModel):
    """Public OAuth client id used by the browser sign-in button."""

    client_id: str


class MessageResponse(ResultResponse):
    """Simple message response."""

    message: str


class TokenPayload(CamelModel):
    """Decoded JWT payload."""

    model_config = ConfigDict(frozen=True)

    sub: str
    email: str
    name: str
    jti: str
    exp: int

    @property
    def user_id(self) -> int:
        return int(self.sub)
