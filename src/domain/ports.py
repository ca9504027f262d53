"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure, plus the value types that cross them.
Adapters implement these protocols.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Protocol


class IdentifierKind(str, Enum):
    """Contact identifier flavour, detected from its format."""

    EMAIL = "email"
    PHONE = "phone"


class RegistrationState(str, Enum):
    """
    States of a single registration attempt.

    Happy path:
        RECEIVED -> VALIDATED -> UNIQUENESS_CHECKED -> IDENTITY_CREATED -> PROFILE_INSERTED

    Failure exits:
        RECEIVED/VALIDATED/UNIQUENESS_CHECKED -> REJECTED
        IDENTITY_CREATED -> COMPENSATING -> COMPENSATED_FAILURE
        IDENTITY_CREATED -> COMPENSATING -> UNCOMPENSATED_FAILURE
        any store call -> STORE_ERROR

    PROFILE_INSERTED, REJECTED, COMPENSATED_FAILURE, UNCOMPENSATED_FAILURE and
    STORE_ERROR are terminal.
    """

    RECEIVED = "RECEIVED"
    VALIDATED = "VALIDATED"
    UNIQUENESS_CHECKED = "UNIQUENESS_CHECKED"
    IDENTITY_CREATED = "IDENTITY_CREATED"
    PROFILE_INSERTED = "PROFILE_INSERTED"
    REJECTED = "REJECTED"
    COMPENSATING = "COMPENSATING"
    COMPENSATED_FAILURE = "COMPENSATED_FAILURE"
    UNCOMPENSATED_FAILURE = "UNCOMPENSATED_FAILURE"
    STORE_ERROR = "STORE_ERROR"


class CaptchaResult(Enum):
    """Outcome of a CAPTCHA token check."""

    VERIFIED = "verified"
    REJECTED = "rejected"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class RegistrationRequest:
    """Raw registration input. Lives for the duration of one request."""

    username: str | None
    identifier: str | None
    password: str | None
    captcha_token: str | None = None


@dataclass(frozen=True)
class Credential:
    """Validated, normalized input for identity creation."""

    username: str
    identifier: str
    kind: IdentifierKind
    password: str

    def as_payload(self) -> dict[str, str]:
        """Identity store payload: {password, email} or {password, phone}."""
        return {"password": self.password, self.kind.value: self.identifier}


@dataclass(frozen=True)
class IdentityRecord:
    """Account as known to the identity store. Never carries password material."""

    id: str
    email: str | None = None
    phone: str | None = None


@dataclass(frozen=True)
class ProfileRecord:
    """Application profile row. `id` equals the matching IdentityRecord.id."""

    id: str
    username: str
    email: str | None = None
    phone: str | None = None


class IdentityStore(Protocol):
    """Port interface for the credential-owning identity store."""

    def create_account(self, credential: Credential) -> IdentityRecord:
        """
        Create an account keyed by email or phone.

        The store hashes the password and starts OTP verification.

        Raises:
            IdentityStoreError: If the store rejects the account
            StoreError: If the store failed or the outcome is unknown
        """
        ...

    def delete_account(self, identity_id: str) -> None:
        """
        Delete an account by id. Deleting an absent id is not an error.

        Raises:
            IdentityStoreError: If the store could not delete the account
        """
        ...


class ProfileStore(Protocol):
    """Port interface for application profile persistence."""

    def find_by_username_or_email_or_phone(
        self, username: str, identifier: str
    ) -> list[ProfileRecord]:
        """
        Return rows where username matches OR email matches OR phone matches.

        Raises:
            ProfileStoreError: If the query fails
        """
        ...

    def insert_profile(self, record: ProfileRecord) -> None:
        """
        Insert a profile row.

        Raises:
            ProfileStoreError: If the insert fails (including unique violations)
        """
        ...


class CaptchaVerifier(Protocol):
    """Port interface for CAPTCHA token verification."""

    def verify(self, token: str | None) -> CaptchaResult:
        """Check a client-supplied CAPTCHA token."""
        ...


class OtpSender(Protocol):
    """Port interface for one-time passcode delivery."""

    def send_otp(self, destination: str, kind: IdentifierKind, code: str) -> None:
        """
        Deliver a passcode to an email address or phone number.

        Args:
            destination: Normalized email address or phone number
            kind: Which channel the destination belongs to
            code: Numeric one-time passcode
        """
        ...
