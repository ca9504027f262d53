"""
Passthrough CAPTCHA verifier adapter - Implements CaptchaVerifier protocol.

Accepts every token. This is the default until a real verifier
(reCAPTCHA, hCaptcha, Turnstile) is plugged in behind the same port.
"""

import logging

from src.domain.ports import CaptchaResult

logger = logging.getLogger(__name__)


class PassthroughCaptchaVerifier:
    """Implements CaptchaVerifier protocol by verifying everything."""

    def verify(self, token: str | None) -> CaptchaResult:
        if not token:
            logger.debug("No CAPTCHA token supplied; accepting")
        return CaptchaResult.VERIFIED
