"""In-memory registry of active sessions."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol
from uuid import UUID, uuid4

from ozendate.services.state_machine import AppStateMachine


class SessionStore(Protocol):
    """Interface for looking up session controllers."""

    def create(self) -> tuple[UUID, AppStateMachine]:
        """Start a new session and return its id and controller."""

    def get(self, session_id: UUID) -> AppStateMachine | None:
        """Return the controller for ``session_id``, if present."""


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class _SessionEntry:
    machine: AppStateMachine
    expires_at: datetime


@dataclass
class InMemorySessionStore(SessionStore):
    """Session store that drops sessions left idle longer than the TTL.

    Every lookup extends the session's lifetime; creating a session purges
    expired ones so abandoned sessions do not accumulate.
    """

    factory: Callable[[], AppStateMachine]
    ttl_seconds: int = 3600
    clock: Callable[[], datetime] = _utc_now
    _entries: dict[UUID, _SessionEntry] = field(default_factory=dict)

    def create(self) -> tuple[UUID, AppStateMachine]:
        self._purge_expired()
        session_id = uuid4()
        machine = self.factory()
        self._entries[session_id] = _SessionEntry(machine, self._expiry())
        return session_id, machine

    def get(self, session_id: UUID) -> AppStateMachine | None:
        entry = self._entries.get(session_id)
        if entry is None:
            return None
        if self.clock() >= entry.expires_at:
            self._entries.pop(session_id, None)
            return None
        entry.expires_at = self._expiry()
        return entry.machine

    def _expiry(self) -> datetime:
        return self.clock() + timedelta(seconds=self.ttl_seconds)

    def _purge_expired(self) -> None:
        now = self.clock()
        expired = [
            key for key, entry in self._entries.items() if now >= entry.expires_at
        ]
        for key in expired:
            del self._entries[key]
