"""
Console OTP sender adapter - Implements OtpSender protocol.

This module provides a console-based implementation of the domain's
passcode delivery port, logging one-time passcodes to stdout for demo purposes.
"""

import logging

from src.domain.ports import IdentifierKind

logger = logging.getLogger(__name__)


class ConsoleOtpSender:
    """
    Implements OtpSender protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    For demo/development purposes - prints passcodes to stdout.
    """

    def send_otp(self, destination: str, kind: IdentifierKind, code: str) -> None:
        """
        Log passcode to console (simulates email or SMS delivery).

        In production, this would be replaced with an SMTP or SMS adapter.
        The code is logged at INFO level to be visible in docker-compose logs.

        Args:
            destination: Email address or phone number (normalized by domain layer)
            kind: Delivery channel
            code: Numeric one-time passcode
        """
        channel = "Email" if kind is IdentifierKind.EMAIL else "Phone"
        logger.info("[OTP] %s: %s Code: %s", channel, destination, code)
