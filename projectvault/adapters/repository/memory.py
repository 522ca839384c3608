"""
In-memory repository adapters - Process-local PasscodeRepository and ProfileRepository.

Used for development without PostgreSQL and by the test suite. A single
lock per repository gives the same single-use guarantee the SQL
adapter gets from row locks.
"""

import threading
import uuid
from dataclasses import replace
from datetime import datetime
from uuid import UUID

from projectvault.domain.models import Passcode, Profile
from projectvault.domain.ports import Clock


class InMemoryPasscodeRepository:
    """Implements PasscodeRepository protocol with a locked list."""

    def __init__(self, clock: Clock) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._rows: list[Passcode] = []

    def create(self, email: str, code: str, expires_at: datetime) -> Passcode:
        passcode = Passcode(
            id=uuid.uuid4(),
            email=email,
            code=code,
            created_at=self._clock.now(),
            expires_at=expires_at,
        )
        with self._lock:
            self._rows.append(passcode)
        return passcode

    def find_recent(self, email: str, since: datetime) -> list[Passcode]:
        with self._lock:
            rows = [p for p in self._rows if p.email == email and p.created_at >= since]
        return sorted(rows, key=lambda p: p.created_at, reverse=True)

    def verify_and_consume(self, email: str, code: str) -> Passcode | None:
        now = self._clock.now()
        with self._lock:
            candidates = [
                (i, p)
                for i, p in enumerate(self._rows)
                if p.email == email and p.code == code and not p.consumed and p.expires_at > now
            ]
            if not candidates:
                return None
            index, passcode = max(candidates, key=lambda item: item[1].created_at)
            consumed = replace(passcode, consumed=True)
            self._rows[index] = consumed
            return consumed

    def purge_expired_or_consumed(self) -> int:
        now = self._clock.now()
        with self._lock:
            kept = [p for p in self._rows if not p.consumed and p.expires_at > now]
            removed = len(self._rows) - len(kept)
            self._rows = kept
        return removed

    def all(self) -> list[Passcode]:
        """Snapshot of every stored row, oldest first."""
        with self._lock:
            return list(self._rows)

    def add(self, passcode: Passcode) -> None:
        """Store a fully-formed row as-is."""
        with self._lock:
            self._rows.append(passcode)


class InMemoryProfileRepository:
    """Implements ProfileRepository protocol with a locked dict keyed by email."""

    def __init__(self, clock: Clock) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._by_email: dict[str, Profile] = {}

    def get_by_id(self, profile_id: UUID) -> Profile | None:
        with self._lock:
            for profile in self._by_email.values():
                if profile.id == profile_id:
                    return profile
        return None

    def get_by_email(self, email: str) -> Profile | None:
        with self._lock:
            return self._by_email.get(email)

    def create(self, email: str, admission_year: int, student_sequence: int) -> Profile:
        now = self._clock.now()
        with self._lock:
            existing = self._by_email.get(email)
            if existing is not None:
                return existing
            profile = Profile(
                id=uuid.uuid4(),
                email=email,
                admission_year=admission_year,
                student_sequence=student_sequence,
                created_at=now,
                updated_at=now,
            )
            self._by_email[email] = profile
            return profile

    def delete(self, profile_id: UUID) -> bool:
        with self._lock:
            for email, profile in self._by_email.items():
                if profile.id == profile_id:
                    del self._by_email[email]
                    return True
        return False
