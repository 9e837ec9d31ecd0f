"""Google Sign-In configuration."""

from pydantic import BaseModel


class GoogleConfig(BaseModel, frozen=True):
    """Google OAuth client settings."""

    client_id: str
    certs_url: str

    @property
    def is_configured(self) -> bool:
        """Check if a Google client id is available."""
        return bool(self.client_id)
