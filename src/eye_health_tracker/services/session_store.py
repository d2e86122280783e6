"""In-memory storage for screening sessions in progress."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol
from uuid import UUID

from eye_health_tracker.services.screening import ColorVisionSession


class SessionStore(Protocol):
    """Storage interface for per-user screening sessions."""

    def get(self, user_id: UUID) -> ColorVisionSession | None:
        """Return the user's session if present and not expired."""

    def put(self, user_id: UUID, session: ColorVisionSession, ttl_seconds: int) -> None:
        """Store a session, replacing any previous one for the user."""

    def discard(self, user_id: UUID) -> bool:
        """Drop the user's session and report whether one existed."""


@dataclass
class _StoreEntry:
    session: ColorVisionSession
    expires_at: datetime


@dataclass
class InMemorySessionStore(SessionStore):
    """Process-local session store; nothing persists until completion."""

    _entries: dict[UUID, _StoreEntry]

    def __init__(self) -> None:
        self._entries = {}

    def get(self, user_id: UUID) -> ColorVisionSession | None:
        """Return a session if it hasn't expired."""
        entry = self._entries.get(user_id)
        if entry is None:
            return None
        if datetime.now(tz=UTC) >= entry.expires_at:
            self._entries.pop(user_id, None)
            return None
        return entry.session

    def put(self, user_id: UUID, session: ColorVisionSession, ttl_seconds: int) -> None:
        """Store a session with a TTL."""
        expires_at = datetime.now(tz=UTC) + timedelta(seconds=ttl_seconds)
        self._entries[user_id] = _StoreEntry(session=session, expires_at=expires_at)

    def discard(self, user_id: UUID) -> bool:
        """Remove a session."""
        return self._entries.pop(user_id, None) is not None
