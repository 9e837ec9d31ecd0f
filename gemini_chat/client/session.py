"""Locally persisted login state for the terminal client."""

import json
from pathlib import Path
from typing import Any

import structlog

logger = structlog.get_logger()

DEFAULT_SESSION_PATH = Path.home() / ".gemini_chat" / "session.json"


class ClientSession:
    """Token and user profile of the signed-in account.

    Kept in memory and mirrored to a JSON file so the next start-up can
    resume without logging in again.
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or DEFAULT_SESSION_PATH
        self.token: str | None = None
        self.user: dict[str, Any] | None = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def auth_headers(self) -> dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    def set(self, token: str, user: dict[str, Any] | None) -> None:
        """Adopt a freshly issued token and persist it."""
        self.token = token
        self.user = user
        self.save()

    def load(self) -> bool:
        """Read the stored state. Returns True when a token was found."""
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return False
        except (OSError, ValueError):
            logger.warning("Ignoring unreadable session file", path=str(self.path))
            return False
        if not isinstance(data, dict):
            return False
        self.token = data.get("token") or None
        self.user = data.get("user") or None
        return self.is_authenticated

    def save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps({"token": self.token, "user": self.user}),
            encoding="utf-8",
        )
        self.path.chmod(0o600)

    def clear(self) -> None:
        """Forget the token in memory and on disk."""
        self.token = None
        self.user = None
        self.path.unlink(missing_ok=True)
