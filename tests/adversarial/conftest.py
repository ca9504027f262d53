"""
Shared fixtures for adversarial tests.

Provides common test infrastructure for concurrent registration attacks
against the real PostgreSQL stores.
"""

from collections.abc import Generator

import pytest
from psycopg_pool import ConnectionPool, PoolTimeout

from src.adapters.identity.postgres import PostgresIdentityStore
from src.adapters.otp.console import ConsoleOtpSender
from src.adapters.repository.postgres import PostgresProfileRepository, run_migrations
from src.config.settings import get_settings
from src.domain.registration import RegistrationService


@pytest.fixture(scope="module")
def pool() -> Generator[ConnectionPool, None, None]:
    """Create connection pool for adversarial tests."""
    settings = get_settings()
    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=1,
        max_size=20,
        open=True,
    )
    try:
        pool.wait(timeout=3.0)
    except PoolTimeout:
        pool.close()
        pytest.skip(f"PostgreSQL not reachable at {settings.database_url}")
    run_migrations(pool)
    yield pool
    pool.close()


@pytest.fixture(autouse=True)
def clean_database(pool: ConnectionPool) -> Generator[None, None, None]:
    """Empty both stores before each test."""
    with pool.connection() as conn:
        conn.execute("DELETE FROM profiles")
        conn.execute("DELETE FROM identities")
        conn.commit()
    yield


@pytest.fixture
def service(pool: ConnectionPool) -> RegistrationService:
    """Registration service over the real stores, without backoff delays."""
    return RegistrationService(
        identity_store=PostgresIdentityStore(pool, ConsoleOtpSender()),
        profile_store=PostgresProfileRepository(pool),
        sleep=lambda _: None,
    )
