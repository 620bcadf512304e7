"""
Console notifier adapter - Implements Notifier protocol.

This module provides a console-based implementation of the domain's
notifier port, logging verification links to stdout for demo purposes.
"""

import logging

from .links import build_verification_link

logger = logging.getLogger(__name__)


class ConsoleNotifier:
    """
    Implements Notifier protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    For demo/development purposes - prints verification links to stdout.
    """

    def send_verification(self, email: str, token: str, base_link: str) -> None:
        """
        Log verification link to console (simulates email delivery).

        In production, this is replaced with SmtpNotifier.
        The link is logged at INFO level to be visible in container logs.

        Args:
            email: Recipient email address (normalized by domain layer)
            token: Verification token
            base_link: URL of the verify-email endpoint
        """
        logger.info(
            "[VERIFICATION] Email: %s Link: %s", email, build_verification_link(base_link, token)
        )
