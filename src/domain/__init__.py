"""
Domain layer - Pure business logic with zero framework imports.

This package contains the core business logic for account registration
across an identity store and a profile store. It defines its own port
interfaces for infrastructure abstraction, ensuring true hexagonal
architecture decoupling.
"""

from .exceptions import (
    CaptchaRejected,
    CaptchaUnavailable,
    CompensationFailure,
    ConflictError,
    IdentityStoreError,
    ProfileStoreError,
    RegistrationError,
    StoreError,
    ValidationError,
    ValidationReason,
)
from .ports import (
    CaptchaResult,
    CaptchaVerifier,
    Credential,
    IdentifierKind,
    IdentityRecord,
    IdentityStore,
    OtpSender,
    ProfileRecord,
    ProfileStore,
    RegistrationRequest,
    RegistrationState,
)
from .registration import RegistrationService
from .validation import classify_identifier, validate

__all__ = [
    "CaptchaRejected",
    "CaptchaResult",
    "CaptchaUnavailable",
    "CaptchaVerifier",
    "CompensationFailure",
    "ConflictError",
    "Credential",
    "IdentifierKind",
    "IdentityRecord",
    "IdentityStore",
    "IdentityStoreError",
    "OtpSender",
    "ProfileRecord",
    "ProfileStore",
    "ProfileStoreError",
    "RegistrationError",
    "RegistrationRequest",
    "RegistrationService",
    "RegistrationState",
    "StoreError",
    "ValidationError",
    "ValidationReason",
    "classify_identifier",
    "validate",
]
