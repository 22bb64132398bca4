"""
Console email sender adapter - Implements EmailSender protocol.

This module provides a console-based implementation of the domain's
email sender port, logging codes to stdout for development.
"""

import logging

logger = logging.getLogger(__name__)


class ConsoleEmailSender:
    """
    Implements EmailSender protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    For demo/development purposes - prints codes instead of mailing them.
    """

    def send_registration_code(self, email: str, code: str) -> None:
        """
        Log the registration code (simulates email delivery).

        The code is logged at INFO level to be visible in container logs.

        Args:
            email: Recipient email address (normalized by domain layer)
            code: 8-character registration code
        """
        logger.info("[REGISTRATION] Email: %s Code: %s", email, code)

    def send_reset_code(self, email: str, code: str, display_name: str) -> None:
        """Log the password reset code (simulates email delivery)."""
        logger.info("[RESET] Email: %s Name: %s Code: %s", email, display_name, code)
