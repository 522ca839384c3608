"""
Authentication domain service - Two-phase passcode login.

Login State Machine (per email)
===============================

States:
- NO_PENDING_CODE: No usable passcode has been issued
- CODE_ISSUED: A passcode was persisted and handed to the email sender
- VERIFIED: A passcode was consumed and a session established

Transitions:
    NO_PENDING_CODE -> CODE_ISSUED  (send_code passes format, rate limit and cooldown gates)
    CODE_ISSUED     -> VERIFIED     (verify_code consumes a matching passcode)
    VERIFIED        -> (logout)     (session destroyed)

Single use of a passcode is enforced by the repository's atomic
verify_and_consume, not by locking here. Earlier unconsumed passcodes
for the same email stay valid until they expire.
"""

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import timedelta
from typing import TypeVar

from .email_policy import EmailPolicy
from .exceptions import (
    CooldownError,
    DeliveryError,
    InvalidOrExpiredError,
    NoActiveSessionError,
    NotAuthenticatedError,
    ProfileNotFoundError,
    RateLimitError,
    StorageError,
)
from .models import Identity, IssuedPasscode, LoginResult, Profile, PublicProfile
from .passcodes import generate_passcode
from .ports import (
    Clock,
    EmailSender,
    PasscodeRepository,
    ProfileRepository,
    RateLimiter,
    SessionStore,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class AuthPolicy:
    """Timing and throttling parameters for the login flow."""

    passcode_ttl: timedelta = timedelta(minutes=10)
    cooldown: timedelta = timedelta(seconds=60)
    max_attempts: int = 5
    rate_limit_window: timedelta = timedelta(minutes=15)


@dataclass
class AuthService:
    """
    Domain service for passcode login.

    Orchestrates email validation, throttling, passcode issuance and
    consumption, profile resolution and session establishment.
    """

    passcodes: PasscodeRepository
    profiles: ProfileRepository
    rate_limiter: RateLimiter
    sessions: SessionStore
    email_sender: EmailSender
    clock: Clock
    email_policy: EmailPolicy = field(default_factory=EmailPolicy)
    policy: AuthPolicy = field(default_factory=AuthPolicy)
    generate_code: Callable[[], str] = generate_passcode

    def send_code(self, email: str) -> IssuedPasscode:
        """
        Issue a passcode for email and hand it to the email sender.

        Args:
            email: Candidate institutional email

        Returns:
            The issued passcode

        Raises:
            FormatError, RangeError: Email is not a valid institutional address
            RateLimitError: Too many requests in the current window
            CooldownError: A passcode was issued less than the cooldown ago
            DeliveryError: The sender failed; the stored passcode stays usable
            StorageError: Persistence failed
        """
        identity = self.validate_email(email)
        key = f"passcode:{identity.email}"

        if not self._storage(
            "rate limit check",
            identity.email,
            self.rate_limiter.allow,
            key,
            self.policy.max_attempts,
            self.policy.rate_limit_window,
        ):
            retry_after = self._storage(
                "rate limit lookup", identity.email, self.rate_limiter.retry_after, key
            )
            logger.info("Passcode request rate limited for %s", identity.email)
            raise RateLimitError(retry_after)

        now = self.clock.now()
        recent = self._storage(
            "recent passcode lookup",
            identity.email,
            self.passcodes.find_recent,
            identity.email,
            now - self.policy.cooldown,
        )
        if recent:
            elapsed = (now - recent[0].created_at).total_seconds()
            remaining = math.ceil(self.policy.cooldown.total_seconds() - elapsed)
            cooldown_seconds = int(self.policy.cooldown.total_seconds())
            raise CooldownError(min(max(remaining, 1), cooldown_seconds))

        code = self.generate_code()
        passcode = self._storage(
            "passcode insert",
            identity.email,
            self.passcodes.create,
            identity.email,
            code,
            now + self.policy.passcode_ttl,
        )

        try:
            delivered = self.email_sender.send_passcode(identity.email, code)
        except Exception as e:
            logger.exception("Passcode delivery raised for %s", identity.email)
            raise DeliveryError("Failed to send passcode") from e
        if not delivered:
            logger.error("Passcode delivery reported failure for %s", identity.email)
            raise DeliveryError("Failed to send passcode")

        logger.info("Passcode issued for %s", identity.email)
        return IssuedPasscode(email=identity.email, code=code, expires_at=passcode.expires_at)

    def verify_code(self, email: str, code: str) -> LoginResult:
        """
        Consume a passcode and establish a session.

        The profile is created on first successful verification, using the
        attributes derived from this request's email.

        Raises:
            FormatError, RangeError: Email is not a valid institutional address
            InvalidOrExpiredError: No usable passcode matched
            StorageError: Persistence failed
        """
        identity = self.validate_email(email)

        consumed = self._storage(
            "passcode consume",
            identity.email,
            self.passcodes.verify_and_consume,
            identity.email,
            code,
        )
        if consumed is None:
            raise InvalidOrExpiredError()

        profile = self._resolve_profile(identity)
        session = self._storage(
            "session create", identity.email, self.sessions.create, profile.id, profile.email
        )
        logger.info("Login verified for %s", identity.email)
        return LoginResult(profile=profile.public(), session=session)

    def current_profile(self, handle: str | None) -> PublicProfile:
        """
        Return the profile bound to a session handle.

        Raises:
            NotAuthenticatedError: No session for handle
            ProfileNotFoundError: Session outlived its profile
        """
        if not handle:
            raise NotAuthenticatedError("Not authenticated")
        session = self._storage("session lookup", None, self.sessions.get, handle)
        if session is None:
            raise NotAuthenticatedError("Not authenticated")

        profile = self._storage(
            "profile lookup", session.email, self.profiles.get_by_id, session.profile_id
        )
        if profile is None:
            raise ProfileNotFoundError("Profile not found")
        return profile.public()

    def logout(self, handle: str | None) -> None:
        """
        Destroy the session bound to handle.

        Raises:
            NoActiveSessionError: Nothing was bound to handle
        """
        if not handle:
            raise NoActiveSessionError("No active session")
        if not self._storage("session destroy", None, self.sessions.destroy, handle):
            raise NoActiveSessionError("No active session")

    def validate_email(self, email: str) -> Identity:
        return self.email_policy.require(email, self.clock.now().year)

    def _resolve_profile(self, identity: Identity) -> Profile:
        profile = self._storage(
            "profile lookup", identity.email, self.profiles.get_by_email, identity.email
        )
        if profile is not None:
            return profile
        logger.info("Creating profile for %s", identity.email)
        return self._storage(
            "profile create",
            identity.email,
            self.profiles.create,
            identity.email,
            identity.admission_year,
            identity.student_sequence,
        )

    def _storage(
        self, operation: str, email: str | None, fn: Callable[..., T], *args: object
    ) -> T:
        """Run a collaborator call, turning any failure into StorageError."""
        try:
            return fn(*args)
        except Exception as e:
            logger.exception("Storage failure during %s (email=%s)", operation, email)
            if isinstance(e, StorageError):
                raise
            raise StorageError("Internal server error") from e
