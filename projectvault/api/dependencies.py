"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
"""

from datetime import timedelta
from functools import lru_cache

from fastapi import Depends, Request
from psycopg_pool import ConnectionPool

from projectvault.adapters.clock import SystemClock
from projectvault.adapters.ratelimit import InMemoryRateLimiter, RedisRateLimiter
from projectvault.adapters.repository import (
    InMemoryPasscodeRepository,
    InMemoryProfileRepository,
    PostgresPasscodeRepository,
    PostgresProfileRepository,
)
from projectvault.adapters.session import InMemorySessionStore
from projectvault.adapters.smtp.console import ConsoleEmailSender
from projectvault.config.settings import Settings, get_settings
from projectvault.domain.auth import AuthPolicy, AuthService
from projectvault.domain.email_policy import EmailPolicy
from projectvault.domain.ports import (
    Clock,
    EmailSender,
    PasscodeRepository,
    ProfileRepository,
    RateLimiter,
    SessionStore,
)

# Module-level singletons - process-wide state shared by every request
_clock = SystemClock()
_email_sender = ConsoleEmailSender()
_session_store = InMemorySessionStore(_clock)
_memory_passcodes = InMemoryPasscodeRepository(_clock)
_memory_profiles = InMemoryProfileRepository(_clock)


def get_clock() -> Clock:
    return _clock


def get_email_sender() -> EmailSender:
    """Get console email sender (singleton)."""
    return _email_sender


def get_session_store() -> SessionStore:
    return _session_store


@lru_cache
def _rate_limiter_for(backend: str, redis_url: str) -> RateLimiter:
    if backend == "redis":
        return RedisRateLimiter.from_url(redis_url)
    return InMemoryRateLimiter(_clock)


def get_rate_limiter(settings: Settings = Depends(get_settings)) -> RateLimiter:
    """Get the process-wide rate limiter for the configured backend."""
    return _rate_limiter_for(settings.rate_limit_backend, settings.redis_url)


def get_pool(request: Request) -> ConnectionPool:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.pool


def build_passcode_repository(
    settings: Settings, pool: ConnectionPool | None, clock: Clock = _clock
) -> PasscodeRepository:
    """Passcode repository for the configured storage backend."""
    if settings.storage_backend == "memory":
        return _memory_passcodes
    return PostgresPasscodeRepository(pool, clock)


def build_profile_repository(settings: Settings, pool: ConnectionPool | None) -> ProfileRepository:
    """Profile repository for the configured storage backend."""
    if settings.storage_backend == "memory":
        return _memory_profiles
    return PostgresProfileRepository(pool)


def get_passcode_repository(
    request: Request,
    settings: Settings = Depends(get_settings),
    clock: Clock = Depends(get_clock),
) -> PasscodeRepository:
    pool = None if settings.storage_backend == "memory" else get_pool(request)
    return build_passcode_repository(settings, pool, clock)


def get_profile_repository(
    request: Request, settings: Settings = Depends(get_settings)
) -> ProfileRepository:
    pool = None if settings.storage_backend == "memory" else get_pool(request)
    return build_profile_repository(settings, pool)


def get_auth_service(
    settings: Settings = Depends(get_settings),
    passcodes: PasscodeRepository = Depends(get_passcode_repository),
    profiles: ProfileRepository = Depends(get_profile_repository),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
    sessions: SessionStore = Depends(get_session_store),
    email_sender: EmailSender = Depends(get_email_sender),
    clock: Clock = Depends(get_clock),
) -> AuthService:
    """
    Create auth service with injected dependencies.

    Wires together repositories, throttling, sessions and the email
    sender for the domain service.
    """
    return AuthService(
        passcodes=passcodes,
        profiles=profiles,
        rate_limiter=rate_limiter,
        sessions=sessions,
        email_sender=email_sender,
        clock=clock,
        email_policy=EmailPolicy(
            tag=settings.email_tag,
            domain=settings.email_domain,
            min_year=settings.min_admission_year,
        ),
        policy=AuthPolicy(
            passcode_ttl=timedelta(seconds=settings.passcode_ttl_seconds),
            cooldown=timedelta(seconds=settings.passcode_cooldown_seconds),
            max_attempts=settings.rate_limit_max_attempts,
            rate_limit_window=timedelta(seconds=settings.rate_limit_window_seconds),
        ),
    )


def get_session_handle(
    request: Request, settings: Settings = Depends(get_settings)
) -> str | None:
    """Read the session handle from the session cookie, if any."""
    return request.cookies.get(settings.session_cookie_name)
