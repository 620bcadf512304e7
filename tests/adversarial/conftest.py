"""
Shared fixtures for adversarial tests.

Provides a PostgreSQL pool for race condition tests; skipped when the
configured database cannot be reached.
"""

from collections.abc import Callable, Generator
from datetime import datetime, timedelta, timezone

import pytest
from psycopg_pool import ConnectionPool, PoolTimeout

from src.adapters.repository.postgres import PostgresAccountRepository, run_migrations
from src.config.settings import get_settings
from src.domain.account import Account


@pytest.fixture(scope="module")
def pool() -> Generator[ConnectionPool, None, None]:
    """Create connection pool for adversarial tests."""
    settings = get_settings()
    pool = ConnectionPool(conninfo=settings.database_url, min_size=1, max_size=20, open=False)
    try:
        pool.open(wait=True, timeout=3.0)
    except PoolTimeout:
        pool.close()
        pytest.skip(f"PostgreSQL not reachable at {settings.database_url}")
    run_migrations(pool)
    yield pool
    pool.close()


@pytest.fixture
def repository(pool: ConnectionPool) -> PostgresAccountRepository:
    """Create repository instance for each test."""
    return PostgresAccountRepository(pool)


@pytest.fixture(autouse=True)
def clean_database(pool: ConnectionPool) -> Generator[None, None, None]:
    """Clean accounts table before each test."""
    with pool.connection() as conn:
        conn.execute("DELETE FROM accounts")
        conn.commit()
    yield


def _pending_account(email: str, token: str, credential_ref: str = "uid") -> Account:
    now = datetime.now(timezone.utc)
    return Account.pending(
        email=email,
        password_digest="$2b$10$attackhash",
        credential_ref=credential_ref,
        token=token,
        expires_at=now + timedelta(hours=24),
        issued_at=now,
    )


@pytest.fixture
def pending_account() -> Callable[..., Account]:
    """Factory for PENDING accounts with a token valid for 24 hours."""
    return _pending_account
