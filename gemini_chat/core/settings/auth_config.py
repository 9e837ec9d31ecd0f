"""JWT authentication configuration."""

from pydantic import BaseModel, SecretStr


class AuthConfig(BaseModel, frozen=True):
    """JWT authentication settings."""

    secret_key: SecretStr
    algorithm: str
    issuer: str
    audience: str
    access_token_expire_days: int
    allowed_email_domain: str
    max_login_attempts: int
    login_lockout_seconds: int

    @property
    def email_suffix(self) -> str:
        """E-mail suffix accepted for registration and login."""
        return f"@{self.allowed_email_domain.lower().lstrip('@')}"

    def is_allowed_email(self, email: str) -> bool:
        """Check whether an e-mail belongs to the sanctioned domain."""
        return email.strip().lower().endswith(self.email_suffix)
