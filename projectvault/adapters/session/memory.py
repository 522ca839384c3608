"""
In-process session store - Implements SessionStore protocol.

Binds opaque handles to profile ids. Sessions have no expiry of their own;
they end on logout or when the process exits.
"""

import secrets
import threading
from uuid import UUID

from projectvault.domain.models import Session
from projectvault.domain.ports import Clock


class InMemorySessionStore:
    """Implements SessionStore protocol with a dict guarded by one lock."""

    def __init__(self, clock: Clock) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._sessions: dict[str, Session] = {}

    def create(self, profile_id: UUID, email: str) -> Session:
        session = Session(
            handle=secrets.token_urlsafe(32),
            profile_id=profile_id,
            email=email,
            created_at=self._clock.now(),
        )
        with self._lock:
            self._sessions[session.handle] = session
        return session

    def get(self, handle: str) -> Session | None:
        with self._lock:
            return self._sessions.get(handle)

    def destroy(self, handle: str) -> bool:
        with self._lock:
            return self._sessions.pop(handle, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
