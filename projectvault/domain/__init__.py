"""
Domain layer - Pure business logic with zero framework imports.

This package contains the core logic for passcode login to the project
vault. It defines its own port interfaces for infrastructure abstraction,
ensuring true hexagonal architecture decoupling.
"""

from .auth import AuthPolicy, AuthService
from .email_policy import EmailPolicy, EmailValidation
from .exceptions import (
    AuthError,
    CooldownError,
    DeliveryError,
    FormatError,
    InvalidOrExpiredError,
    NoActiveSessionError,
    NotAuthenticatedError,
    ProfileNotFoundError,
    RangeError,
    RateLimitError,
    StorageError,
)
from .janitor import PasscodeJanitor
from .models import Identity, IssuedPasscode, LoginResult, Passcode, Profile, PublicProfile, Session
from .passcodes import generate_passcode
from .ports import (
    Clock,
    EmailSender,
    PasscodeRepository,
    ProfileRepository,
    RateLimiter,
    SessionStore,
)

__all__ = [
    "AuthError",
    "AuthPolicy",
    "AuthService",
    "Clock",
    "CooldownError",
    "DeliveryError",
    "EmailPolicy",
    "EmailSender",
    "EmailValidation",
    "FormatError",
    "Identity",
    "InvalidOrExpiredError",
    "IssuedPasscode",
    "LoginResult",
    "NoActiveSessionError",
    "NotAuthenticatedError",
    "Passcode",
    "PasscodeJanitor",
    "PasscodeRepository",
    "Profile",
    "ProfileNotFoundError",
    "ProfileRepository",
    "PublicProfile",
    "RangeError",
    "RateLimitError",
    "RateLimiter",
    "Session",
    "SessionStore",
    "StorageError",
    "generate_passcode",
]
