"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- A controllable clock
- In-memory adapters wired into an AuthService
- A PostgreSQL connection pool (skipped when the database is unreachable)
"""

import threading
from collections.abc import Generator
from datetime import datetime, timedelta, timezone

import psycopg
import pytest
from psycopg_pool import ConnectionPool, PoolTimeout

from projectvault.adapters.ratelimit import InMemoryRateLimiter
from projectvault.adapters.repository import InMemoryPasscodeRepository, InMemoryProfileRepository
from projectvault.adapters.repository.postgres import run_migrations
from projectvault.adapters.session import InMemorySessionStore
from projectvault.config.settings import get_settings
from projectvault.domain.auth import AuthService
from projectvault.domain.email_policy import EmailPolicy

START = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Implements Clock protocol with a manually advanced time."""

    def __init__(self, start: datetime = START) -> None:
        self._now = start
        self._lock = threading.Lock()

    def now(self) -> datetime:
        with self._lock:
            return self._now

    def advance(self, **kwargs: float) -> None:
        with self._lock:
            self._now = self._now + timedelta(**kwargs)


class RecordingEmailSender:
    """Implements EmailSender protocol, remembering every passcode sent."""

    def __init__(self, delivered: bool = True) -> None:
        self.delivered = delivered
        self.sent: list[tuple[str, str]] = []

    def send_passcode(self, email: str, code: str) -> bool:
        self.sent.append((email, code))
        return self.delivered

    @property
    def last_code(self) -> str:
        return self.sent[-1][1]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def passcodes(clock: FakeClock) -> InMemoryPasscodeRepository:
    return InMemoryPasscodeRepository(clock)


@pytest.fixture
def profiles(clock: FakeClock) -> InMemoryProfileRepository:
    return InMemoryProfileRepository(clock)


@pytest.fixture
def rate_limiter(clock: FakeClock) -> InMemoryRateLimiter:
    return InMemoryRateLimiter(clock)


@pytest.fixture
def sessions(clock: FakeClock) -> InMemorySessionStore:
    return InMemorySessionStore(clock)


@pytest.fixture
def email_sender() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture
def auth_service(
    clock: FakeClock,
    passcodes: InMemoryPasscodeRepository,
    profiles: InMemoryProfileRepository,
    rate_limiter: InMemoryRateLimiter,
    sessions: InMemorySessionStore,
    email_sender: RecordingEmailSender,
) -> AuthService:
    """AuthService over in-memory adapters and a fake clock."""
    return AuthService(
        passcodes=passcodes,
        profiles=profiles,
        rate_limiter=rate_limiter,
        sessions=sessions,
        email_sender=email_sender,
        clock=clock,
        email_policy=EmailPolicy(tag="ORG", domain="example.edu"),
    )


@pytest.fixture(scope="module")
def pool() -> Generator[ConnectionPool, None, None]:
    """Create connection pool for database tests, with migrations applied."""
    settings = get_settings()
    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=1,
        max_size=10,
        open=False,
    )
    try:
        pool.open(wait=True, timeout=3)
    except (PoolTimeout, psycopg.OperationalError) as e:
        pool.close()
        pytest.skip(f"PostgreSQL not available: {e}")
    run_migrations(pool)
    yield pool
    pool.close()


@pytest.fixture
def clean_database(pool: ConnectionPool) -> Generator[None, None, None]:
    """Empty the auth tables before each test."""
    with pool.connection() as conn:
        conn.execute("DELETE FROM passcodes")
        conn.execute("DELETE FROM profiles")
        conn.commit()
    yield
