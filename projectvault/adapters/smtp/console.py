"""
Console email sender adapter - Implements EmailSender protocol.

This module provides a console-based implementation of the domain's
email sender port, logging passcodes for development and demo use.
"""

import logging

logger = logging.getLogger(__name__)


class ConsoleEmailSender:
    """
    Implements EmailSender protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def send_passcode(self, email: str, code: str) -> bool:
        """
        Log passcode to console (simulates email delivery).

        Args:
            email: Recipient email address (canonicalized by domain layer)
            code: 6-digit passcode

        Returns:
            Always True; logging cannot fail to deliver
        """
        logger.info("[PASSCODE] Email: %s Code: %s", email, code)
        return True
