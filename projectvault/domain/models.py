"""
Domain models - Plain value objects shared by the domain and its adapters.

All timestamps are timezone-aware UTC datetimes.
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class Identity:
    """A validated institutional email and the attributes derived from it."""

    email: str
    admission_year: int
    student_sequence: int


@dataclass(frozen=True)
class Passcode:
    """One issued passcode row."""

    id: UUID
    email: str
    code: str
    created_at: datetime
    expires_at: datetime
    consumed: bool = False


@dataclass(frozen=True)
class Profile:
    """Durable student profile, created on first successful verification."""

    id: UUID
    email: str
    admission_year: int
    student_sequence: int
    created_at: datetime
    updated_at: datetime

    def public(self) -> "PublicProfile":
        return PublicProfile(
            id=self.id,
            email=self.email,
            admission_year=self.admission_year,
            student_sequence=self.student_sequence,
        )


@dataclass(frozen=True)
class PublicProfile:
    """Projection of a Profile that is safe to return to the caller."""

    id: UUID
    email: str
    admission_year: int
    student_sequence: int


@dataclass(frozen=True)
class Session:
    """Server-held proof of a completed login."""

    handle: str
    profile_id: UUID
    email: str
    created_at: datetime


@dataclass(frozen=True)
class IssuedPasscode:
    """Result of a successful send-code request."""

    email: str
    code: str
    expires_at: datetime


@dataclass(frozen=True)
class LoginResult:
    """Result of a successful verify-code request."""

    profile: PublicProfile
    session: Session
