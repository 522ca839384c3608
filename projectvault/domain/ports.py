"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols.
"""

from datetime import datetime, timedelta
from typing import Protocol
from uuid import UUID

from .models import Passcode, Profile, Session


class Clock(Protocol):
    """Source of the current time."""

    def now(self) -> datetime:
        """Return the current timezone-aware UTC time."""
        ...


class PasscodeRepository(Protocol):
    """Port interface for passcode persistence."""

    def create(self, email: str, code: str, expires_at: datetime) -> Passcode:
        """
        Insert a new passcode row.

        Never deduplicates against existing rows for the same email.
        """
        ...

    def find_recent(self, email: str, since: datetime) -> list[Passcode]:
        """Return passcodes for email created at or after since, newest first."""
        ...

    def verify_and_consume(self, email: str, code: str) -> Passcode | None:
        """
        Atomically consume a matching unconsumed, unexpired passcode.

        Concurrent calls for the same (email, code) yield at most one
        returned row; every other caller gets None.

        Args:
            email: Canonical email address
            code: 6-digit passcode

        Returns:
            The consumed passcode, or None if nothing matched
        """
        ...

    def purge_expired_or_consumed(self) -> int:
        """Delete consumed or expired rows and return how many were removed."""
        ...


class ProfileRepository(Protocol):
    """Port interface for profile persistence."""

    def get_by_id(self, profile_id: UUID) -> Profile | None: ...

    def get_by_email(self, email: str) -> Profile | None: ...

    def create(self, email: str, admission_year: int, student_sequence: int) -> Profile:
        """
        Create a profile for email.

        If a concurrent request created it first, the existing row is returned.
        """
        ...


class RateLimiter(Protocol):
    """Port interface for per-identity request throttling."""

    def allow(self, key: str, max_attempts: int, window: timedelta) -> bool:
        """
        Count one attempt for key and report whether it is allowed.

        Denied attempts do not mutate the counter.
        """
        ...

    def retry_after(self, key: str) -> int:
        """Seconds until the current window for key resets (at least 1)."""
        ...


class SessionStore(Protocol):
    """Port interface for server-side session state."""

    def create(self, profile_id: UUID, email: str) -> Session: ...

    def get(self, handle: str) -> Session | None: ...

    def destroy(self, handle: str) -> bool:
        """Remove the session; return False if nothing was bound to handle."""
        ...


class EmailSender(Protocol):
    """Port interface for passcode delivery."""

    def send_passcode(self, email: str, code: str) -> bool:
        """
        Deliver a passcode to an email address.

        Args:
            email: Recipient email address
            code: 6-digit passcode

        Returns:
            True if the sink accepted the message
        """
        ...
