"""
Domain exceptions - Semantic error types for registration.

This module defines domain-specific exceptions that communicate
business rule violations and store faults without leaking
infrastructure details.
"""

from enum import Enum


class RegistrationError(Exception):
    """Base class for registration domain errors."""

    default_message = "Registration failed."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationReason(str, Enum):
    """Why a registration request was rejected before touching any store."""

    MISSING_FIELDS = "MissingFields"
    PASSWORD_TOO_SHORT = "PasswordTooShort"
    INVALID_IDENTIFIER_FORMAT = "InvalidIdentifierFormat"


_VALIDATION_MESSAGES = {
    ValidationReason.MISSING_FIELDS: "Missing required fields.",
    ValidationReason.PASSWORD_TOO_SHORT: "Password must be at least 8 characters long.",
    ValidationReason.INVALID_IDENTIFIER_FORMAT: "Invalid email or phone number format.",
}


class ValidationError(RegistrationError):
    """Request input is missing or malformed (client-fixable)."""

    def __init__(self, reason: ValidationReason) -> None:
        self.reason = reason
        super().__init__(_VALIDATION_MESSAGES[reason])


class CaptchaRejected(RegistrationError):
    """CAPTCHA token did not verify."""

    default_message = "CAPTCHA verification failed."


class CaptchaUnavailable(RegistrationError):
    """CAPTCHA verifier could not give an answer."""

    default_message = "CAPTCHA verification is unavailable."


class ConflictError(RegistrationError):
    """Username, email or phone already belongs to a profile."""

    default_message = "Username, email, or phone already exists."


class IdentityStoreError(RegistrationError):
    """Identity store refused an operation. The store's message is kept verbatim."""

    pass


class StoreError(RegistrationError):
    """Backend fault that the client cannot correct."""

    default_message = "Internal store error."


class ProfileStoreError(StoreError):
    """Profile store query or insert failed."""

    pass


class CompensationFailure(ProfileStoreError):
    """
    Profile insert failed and the compensating identity delete failed too.

    The identity record `identity_id` is orphaned and needs manual cleanup.
    """

    def __init__(self, identity_id: str, message: str | None = None) -> None:
        self.identity_id = identity_id
        super().__init__(message)
