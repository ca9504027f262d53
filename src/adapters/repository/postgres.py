"""
PostgreSQL repository adapter - Implements ProfileStore protocol.

This module provides the PostgreSQL implementation of the domain's
profile store port using psycopg3 with raw SQL.

Uniqueness Backstop:
--------------------
The domain checks uniqueness before creating anything, but that check and the
later insert are separate round-trips. The `profiles` table carries UNIQUE
constraints on username, email and phone so that two concurrent registrations
racing past the check cannot both insert. The loser's insert raises
UniqueViolation, which surfaces as ProfileStoreError and triggers
compensation in the domain service.
"""

import logging
from pathlib import Path

import psycopg
from psycopg_pool import ConnectionPool

from src.domain.exceptions import ProfileStoreError
from src.domain.ports import ProfileRecord

logger = logging.getLogger(__name__)


class PostgresProfileRepository:
    """
    Implements ProfileStore protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def find_by_username_or_email_or_phone(
        self, username: str, identifier: str
    ) -> list[ProfileRecord]:
        """
        Find profiles colliding with a prospective registration.

        Three independent equality predicates joined by OR: the username,
        or the identifier as an email, or the identifier as a phone.

        Args:
            username: Normalized username
            identifier: Normalized email address or phone number

        Returns:
            Matching profiles (empty when the registration is unique)
        """
        sql = """
            SELECT id, username, email, phone
            FROM profiles
            WHERE username = %s OR email = %s OR phone = %s
        """

        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, (username, identifier, identifier))
                rows = cursor.fetchall()
        except psycopg.Error as e:
            raise ProfileStoreError(f"Profile lookup failed: {e}") from e

        return [
            ProfileRecord(id=str(row[0]), username=row[1], email=row[2], phone=row[3])
            for row in rows
        ]

    def insert_profile(self, record: ProfileRecord) -> None:
        """
        Insert a profile row.

        Args:
            record: Profile whose id matches an existing identity

        Raises:
            ProfileStoreError: On any database error, unique violations included
        """
        sql = """
            INSERT INTO profiles (id, username, email, phone, created_at)
            VALUES (%s, %s, %s, %s, NOW())
        """

        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, (record.id, record.username, record.email, record.phone))
                conn.commit()
        except psycopg.errors.UniqueViolation as e:
            raise ProfileStoreError(f"Profile already exists: {e.diag.constraint_name}") from e
        except psycopg.Error as e:
            raise ProfileStoreError(f"Profile insert failed: {e}") from e


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning(f"Migrations directory not found: {migrations_dir}")
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info(f"Running {len(sql_files)} migration(s)")

    for sql_file in sql_files:
        logger.info(f"Executing migration: {sql_file.name}")
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info(f"Migration complete: {sql_file.name}")
        except Exception as e:
            logger.error(f"Migration failed: {sql_file.name} - {e}")
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
