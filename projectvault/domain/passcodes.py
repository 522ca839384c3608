"""Passcode generation."""

import secrets

PASSCODE_MIN = 100000
PASSCODE_MAX = 999999


def generate_passcode() -> str:
    """
    Generate a cryptographically secure 6-digit passcode.

    Uniform over [100000, 999999] via the secrets module, so the result
    always has six digits. Returned as a string since it is stored as text.
    """
    return str(PASSCODE_MIN + secrets.randbelow(PASSCODE_MAX - PASSCODE_MIN + 1))
