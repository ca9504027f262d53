"""
Registration domain service - Two-store account creation with compensation.

An account is one logical aggregate split across two stores with no shared
transaction: the identity store owns credentials, the profile store owns the
username and contact columns. The service keeps them consistent by creating
in a fixed order and undoing the first step when the second one fails.

Registration State Machine
==========================

    RECEIVED -> VALIDATED -> UNIQUENESS_CHECKED -> IDENTITY_CREATED -> PROFILE_INSERTED

Failure exits:
    RECEIVED / VALIDATED     -> REJECTED (ValidationError, CaptchaRejected)
    UNIQUENESS_CHECKED       -> REJECTED (ConflictError)
    UNIQUENESS_CHECKED       -> REJECTED (IdentityStoreError on create)
    IDENTITY_CREATED         -> COMPENSATING -> COMPENSATED_FAILURE
                                             -> UNCOMPENSATED_FAILURE
    any store call           -> STORE_ERROR

The uniqueness pre-check only avoids wasted work. Concurrent requests can both
pass it; the stores' own UNIQUE constraints decide the winner, and the
compensation step keeps the loser from leaving an orphaned identity behind.

Forward steps are never retried: an insert that times out may have succeeded,
and retrying it could create a duplicate. Only the idempotent compensating
delete is retried, with bounded exponential backoff.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from .exceptions import (
    CaptchaRejected,
    CaptchaUnavailable,
    CompensationFailure,
    ConflictError,
    ProfileStoreError,
    RegistrationError,
    StoreError,
)
from .ports import (
    CaptchaResult,
    CaptchaVerifier,
    Credential,
    IdentifierKind,
    IdentityRecord,
    IdentityStore,
    ProfileRecord,
    ProfileStore,
    RegistrationRequest,
    RegistrationState,
)
from .validation import validate

logger = logging.getLogger(__name__)


def _describe(exc: Exception) -> str:
    if isinstance(exc, RegistrationError):
        return exc.message
    return f"{type(exc).__name__}: {exc}"


@dataclass
class RegistrationAttempt:
    """Mutable progress record for one registration."""

    username: str | None
    state: RegistrationState = RegistrationState.RECEIVED
    identity_id: str | None = None

    def advance(self, state: RegistrationState) -> None:
        logger.debug(
            "Registration %s: %s -> %s", self.username, self.state.value, state.value
        )
        self.state = state


@dataclass
class RegistrationService:
    """
    Domain service for account registration.

    Orchestrates validation, uniqueness arbitration, identity creation,
    profile insertion and compensation.
    """

    identity_store: IdentityStore
    profile_store: ProfileStore
    captcha_verifier: CaptchaVerifier | None = None
    captcha_enforced: bool = False
    compensation_max_attempts: int = 3
    compensation_backoff_seconds: float = 0.2
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False)

    def register(self, request: RegistrationRequest) -> IdentityRecord:
        """
        Register a new account.

        Args:
            request: Raw registration input

        Returns:
            IdentityRecord of the created account

        Raises:
            ValidationError: Input missing or malformed
            CaptchaRejected: CAPTCHA enforced and token rejected
            CaptchaUnavailable: CAPTCHA enforced and verifier unreachable
            ConflictError: Username or identifier already taken
            IdentityStoreError: Identity store refused the account
            StoreError: Backend fault; ProfileStoreError / CompensationFailure
                when the profile write failed
        """
        attempt = RegistrationAttempt(username=request.username)
        try:
            credential = validate(request)
            attempt.advance(RegistrationState.VALIDATED)
            self._check_captcha(request.captcha_token)

            self.ensure_unique(credential.username, credential.identifier)
            attempt.advance(RegistrationState.UNIQUENESS_CHECKED)

            identity = self._create_identity(credential)
            attempt.identity_id = identity.id
            attempt.advance(RegistrationState.IDENTITY_CREATED)

            self._insert_profile(attempt, credential, identity)
        except (StoreError, CaptchaUnavailable):
            if attempt.state not in (
                RegistrationState.COMPENSATED_FAILURE,
                RegistrationState.UNCOMPENSATED_FAILURE,
            ):
                attempt.advance(RegistrationState.STORE_ERROR)
            raise
        except RegistrationError as exc:
            attempt.advance(RegistrationState.REJECTED)
            logger.warning("Registration rejected for %r: %s", request.username, exc.message)
            raise

        attempt.advance(RegistrationState.PROFILE_INSERTED)
        logger.info("Registered account %s for username %r", identity.id, credential.username)
        return identity

    def ensure_unique(self, username: str, identifier: str) -> None:
        """
        Fail if any profile already uses the username, or the identifier as email or phone.

        Raises:
            ConflictError: One or more profiles match
            ProfileStoreError: The lookup itself failed
        """
        try:
            matches = self.profile_store.find_by_username_or_email_or_phone(username, identifier)
        except ProfileStoreError as exc:
            logger.error("Error checking for existing user: %s", exc.message)
            raise ProfileStoreError("Database error while checking user uniqueness.") from exc
        if matches:
            raise ConflictError()

    def _check_captcha(self, token: str | None) -> None:
        if not self.captcha_enforced or self.captcha_verifier is None:
            return
        result = self.captcha_verifier.verify(token)
        if result is CaptchaResult.REJECTED:
            raise CaptchaRejected()
        if result is CaptchaResult.UNAVAILABLE:
            logger.error("CAPTCHA verifier unavailable")
            raise CaptchaUnavailable()

    def _create_identity(self, credential: Credential) -> IdentityRecord:
        # IdentityStoreError propagates unchanged: nothing has been created yet
        identity = self.identity_store.create_account(credential)
        if not identity.id:
            logger.error("Identity store returned an account without an id")
            raise StoreError("Failed to create user.")
        return identity

    def _insert_profile(
        self, attempt: RegistrationAttempt, credential: Credential, identity: IdentityRecord
    ) -> None:
        record = ProfileRecord(
            id=identity.id,
            username=credential.username,
            email=credential.identifier if credential.kind is IdentifierKind.EMAIL else None,
            phone=credential.identifier if credential.kind is IdentifierKind.PHONE else None,
        )
        # once the identity exists, any fault here must end in compensation
        try:
            self.profile_store.insert_profile(record)
        except Exception as exc:
            logger.error("Error inserting profile for %s: %s", identity.id, _describe(exc))
            attempt.advance(RegistrationState.COMPENSATING)
            self._compensate(attempt, identity.id)
            raise ProfileStoreError("Failed to save user profile.") from exc

    def _compensate(self, attempt: RegistrationAttempt, identity_id: str) -> None:
        """
        Delete the identity created for a failed registration.

        Retries with exponential backoff. Raises CompensationFailure once every
        attempt has failed, leaving the identity orphaned.
        """
        attempts = max(1, self.compensation_max_attempts)
        for n in range(1, attempts + 1):
            try:
                self.identity_store.delete_account(identity_id)
            except Exception as exc:
                if n == attempts:
                    attempt.advance(RegistrationState.UNCOMPENSATED_FAILURE)
                    logger.critical(
                        "Compensation failed: identity %s is orphaned with no profile "
                        "after %d delete attempts (%s). Manual cleanup required.",
                        identity_id,
                        attempts,
                        _describe(exc),
                    )
                    raise CompensationFailure(identity_id, "Failed to save user profile.") from exc
                logger.warning(
                    "Compensating delete of identity %s failed (attempt %d/%d): %s",
                    identity_id,
                    n,
                    attempts,
                    _describe(exc),
                )
                self.sleep(self.compensation_backoff_seconds * 2 ** (n - 1))
            else:
                attempt.advance(RegistrationState.COMPENSATED_FAILURE)
                logger.error("Compensated failed registration: identity %s deleted", identity_id)
                return
