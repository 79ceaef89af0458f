"""Domain models for the identity session."""

from dataclasses import dataclass
from enum import StrEnum


@dataclass(frozen=True)
class SessionUser:
    """An authenticated user. Anonymous sessions are represented by None."""

    user_id: str
    email: str


class SessionMode(StrEnum):
    """Sync mode the application is currently running in."""

    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"
    OFFLINE = "offline"


@dataclass(frozen=True)
class SessionState:
    """Result of the latest session transition."""

    mode: SessionMode = SessionMode.ANONYMOUS
    user: SessionUser | None = None
    generation: int = 0
    error: str | None = None

    @property
    def is_synced(self) -> bool:
        """Return True when edits are written to the remote store."""
        return self.mode == SessionMode.AUTHENTICATED
