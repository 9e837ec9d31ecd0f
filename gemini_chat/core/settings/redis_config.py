"""Redis connection configuration."""

from pydantic import BaseModel


class RedisConfig(BaseModel, frozen=True):
    """Redis connection settings."""

    url: str
    key_prefix: str

    def key(self, *parts: str) -> str:
        """Build a namespaced Redis key."""
        return ":".join((self.key_prefix, *parts))
