"""
Domain exceptions - Semantic error types for passcode authentication.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.
"""


class AuthError(Exception):
    """Base class for authentication domain errors."""

    pass


class FormatError(AuthError):
    """Email does not match the institutional address shape."""

    pass


class RangeError(AuthError):
    """Email matched structurally but an embedded attribute is out of range."""

    pass


class RateLimitError(AuthError):
    """Too many passcode requests for this identity in the current window."""

    def __init__(self, retry_after_seconds: int) -> None:
        super().__init__(
            f"Too many passcode requests. Please try again in {retry_after_seconds} seconds."
        )
        self.retry_after_seconds = retry_after_seconds


class CooldownError(AuthError):
    """A passcode was issued too recently for this identity."""

    def __init__(self, retry_after_seconds: int) -> None:
        super().__init__(
            f"Please wait {retry_after_seconds} seconds before requesting a new passcode"
        )
        self.retry_after_seconds = retry_after_seconds


class InvalidOrExpiredError(AuthError):
    """Passcode is wrong, expired, or already used (deliberately undifferentiated)."""

    def __init__(self) -> None:
        super().__init__("Invalid or expired passcode")


class DeliveryError(AuthError):
    """The notification sink failed to deliver the passcode."""

    pass


class StorageError(AuthError):
    """The persistence collaborator failed."""

    pass


class NotAuthenticatedError(AuthError):
    """No session is bound to the presented handle."""

    pass


class ProfileNotFoundError(AuthError):
    """Session refers to a profile that no longer exists."""

    pass


class NoActiveSessionError(AuthError):
    """Logout was requested without an active session."""

    pass
