"""
PostgreSQL identity store adapter - Implements IdentityStore protocol.

A self-hosted identity store for deployments without a hosted auth provider.
It owns everything the domain treats as an identity store property:

- Password hashing: bcrypt with a configurable cost factor (>= 10)
- Uniqueness: UNIQUE constraints on identities.email and identities.phone
- Verification: a numeric one-time passcode is generated with the secrets
  module and handed to an OtpSender after the row is committed. Only its
  bcrypt hash is stored; a row whose passcode cannot be delivered is removed
"""

import logging
import secrets

import bcrypt
import psycopg
from psycopg_pool import ConnectionPool

from src.domain.exceptions import IdentityStoreError, StoreError
from src.domain.ports import Credential, IdentifierKind, IdentityRecord, OtpSender

logger = logging.getLogger(__name__)

_DUPLICATE_MESSAGES = {
    IdentifierKind.EMAIL: "A user with this email address has already been registered",
    IdentifierKind.PHONE: "A user with this phone number has already been registered",
}


def hash_password(password: str, cost: int = 10) -> str:
    """Hash a password with bcrypt."""
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=cost)).decode()


def generate_otp(length: int = 6) -> str:
    """
    Generate a cryptographically secure numeric passcode.

    Returns string to preserve leading zeros.
    """
    return "".join(secrets.choice("0123456789") for _ in range(length))


class PostgresIdentityStore:
    """
    Implements IdentityStore protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(
        self,
        pool: ConnectionPool,
        otp_sender: OtpSender,
        bcrypt_cost: int = 10,
        otp_length: int = 6,
    ) -> None:
        """
        Initialize identity store.

        Args:
            pool: psycopg3 ConnectionPool for database connections
            otp_sender: Delivery channel for verification passcodes
            bcrypt_cost: bcrypt work factor
            otp_length: Number of digits in each passcode
        """
        self._pool = pool
        self._otp_sender = otp_sender
        self._bcrypt_cost = bcrypt_cost
        self._otp_length = otp_length

    def create_account(self, credential: Credential) -> IdentityRecord:
        """
        Create an identity and send its verification passcode.

        Args:
            credential: Validated credential (email or phone plus password)

        Returns:
            IdentityRecord with the generated UUID

        Raises:
            IdentityStoreError: Identifier already registered
            StoreError: Database failure, or the passcode could not be delivered
        """
        password_hash = hash_password(credential.password, self._bcrypt_cost)
        code = generate_otp(self._otp_length)
        otp_hash = hash_password(code, self._bcrypt_cost)
        column = credential.kind.value  # "email" or "phone", never user input

        sql = f"""
            INSERT INTO identities ({column}, password_hash, otp_hash, created_at)
            VALUES (%s, %s, %s, NOW())
            RETURNING id
        """

        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, (credential.identifier, password_hash, otp_hash))
                row = cursor.fetchone()
                conn.commit()
        except psycopg.errors.UniqueViolation as e:
            raise IdentityStoreError(_DUPLICATE_MESSAGES[credential.kind]) from e
        except psycopg.Error as e:
            logger.error("Identity insert failed for %s: %s", credential.identifier, e)
            raise StoreError("Failed to create user.") from e

        identity_id = str(row[0])
        try:
            self._otp_sender.send_otp(credential.identifier, credential.kind, code)
        except Exception as e:
            logger.error("Passcode delivery failed for identity %s: %s", identity_id, e)
            self._discard(identity_id)
            raise StoreError("Failed to send verification code.") from e

        if credential.kind is IdentifierKind.EMAIL:
            return IdentityRecord(id=identity_id, email=credential.identifier)
        return IdentityRecord(id=identity_id, phone=credential.identifier)

    def delete_account(self, identity_id: str) -> None:
        """
        Delete an identity. A missing row is treated as already deleted.

        Raises:
            IdentityStoreError: On database failure
        """
        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute("DELETE FROM identities WHERE id = %s", (identity_id,))
                conn.commit()
                deleted = cursor.rowcount
        except psycopg.Error as e:
            logger.error("Identity delete failed for %s: %s", identity_id, e)
            raise IdentityStoreError("Failed to delete user.") from e

        if deleted == 0:
            logger.info("Identity %s already absent", identity_id)

    def _discard(self, identity_id: str) -> None:
        """Remove an identity that was committed but never handed to the caller."""
        try:
            self.delete_account(identity_id)
        except IdentityStoreError as e:
            logger.critical(
                "Identity %s is orphaned after failed passcode delivery (%s). "
                "Manual cleanup required.",
                identity_id,
                e.message,
            )
