"""
PostgreSQL repository adapter - Implements AccountRepository protocol.

This module provides the PostgreSQL implementation of the domain's
record store port using psycopg3 with raw SQL.

Consistency Design:
-------------------
1. **Unique email index**: concurrent registrations for the same email race
   at the INSERT; exactly one commits, the others raise UniqueViolation,
   reported to the domain as DuplicateKey.

2. **Conditional verification update**: the PENDING -> VERIFIED write
   carries the presented token and expiry check in its WHERE clause, so
   only one of several concurrent redemptions can match the row.

3. **CHECK constraints** mirror the entity invariants (verified accounts
   carry no token; token and expiry are set together).

All psycopg errors are translated to RecordStoreError so the domain layer
never imports psycopg.
"""

import logging
from collections.abc import Mapping
from datetime import datetime
from pathlib import Path

import psycopg
from psycopg import errors, sql
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from src.domain.account import Account
from src.domain.exceptions import DuplicateKey, RecordStoreError, UpdateConflict
from src.domain.ports import UPDATABLE_FIELDS

logger = logging.getLogger(__name__)

_COLUMNS = (
    "id, email, password_digest, credential_ref, is_verified, "
    "verification_token, verification_token_expires_at, "
    "username, phone, display_name, created_at"
)

_EMAIL_CONSTRAINT = "accounts_email_key"

# src/adapters/repository/postgres.py -> <root>/migrations
MIGRATIONS_DIR = Path(__file__).resolve().parents[3] / "migrations"


class PostgresAccountRepository:
    """
    Implements AccountRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool, timeout: float | None = None) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
            timeout: Seconds to wait for a pooled connection
        """
        self._pool = pool
        self._timeout = timeout

    def create_account(self, account: Account) -> Account:
        """
        Insert a new account row.

        The UNIQUE index on email is the final authority for duplicates,
        even when the caller's pre-check passed.
        """
        insert_sql = f"""
            INSERT INTO accounts (
                email, password_digest, credential_ref, is_verified,
                verification_token, verification_token_expires_at,
                username, phone, display_name, created_at
            )
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, NOW())
            RETURNING {_COLUMNS}
        """
        params = (
            account.email,
            account.password_digest,
            account.credential_ref,
            account.is_verified,
            account.verification_token,
            account.verification_token_expires_at,
            account.username,
            account.phone,
            account.display_name,
        )

        try:
            with self._pool.connection(timeout=self._timeout) as conn, conn.cursor(
                row_factory=dict_row
            ) as cursor:
                cursor.execute(insert_sql, params)
                row = cursor.fetchone()
                conn.commit()
        except errors.UniqueViolation as e:
            if e.diag.constraint_name == _EMAIL_CONSTRAINT:
                raise DuplicateKey(account.email) from e
            raise RecordStoreError(f"Unique constraint violated: {e.diag.constraint_name}") from e
        except psycopg.Error as e:
            raise RecordStoreError(str(e)) from e

        return Account(**row)

    def find_by_email(self, email: str) -> Account | None:
        """Fetch account by normalized email."""
        return self._fetch_one(f"SELECT {_COLUMNS} FROM accounts WHERE email = %s", (email,))

    def find_by_token(self, token: str) -> Account | None:
        """Fetch account currently holding the verification token."""
        return self._fetch_one(
            f"SELECT {_COLUMNS} FROM accounts WHERE verification_token = %s", (token,)
        )

    def update_account(
        self,
        account_id: int,
        patch: Mapping[str, object],
        *,
        expected_token: str | None = None,
        valid_at: datetime | None = None,
    ) -> Account:
        """
        Apply patch in a single UPDATE.

        With expected_token the row must still hold that token with an
        expiry strictly after valid_at (database NOW() when valid_at is None).
        """
        unknown = set(patch) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update fields: {sorted(unknown)}")
        if not patch:
            raise ValueError("Empty patch")

        assignments = sql.SQL(", ").join(
            sql.SQL("{} = {}").format(sql.Identifier(name), sql.Placeholder())
            for name in patch
        )
        conditions = [sql.SQL("id = {}").format(sql.Placeholder())]
        params: list[object] = [*patch.values(), account_id]

        if expected_token is not None:
            conditions.append(sql.SQL("verification_token = {}").format(sql.Placeholder()))
            params.append(expected_token)
            if valid_at is None:
                conditions.append(sql.SQL("verification_token_expires_at > NOW()"))
            else:
                conditions.append(
                    sql.SQL("verification_token_expires_at > {}").format(sql.Placeholder())
                )
                params.append(valid_at)

        update_sql = sql.SQL("UPDATE accounts SET {} WHERE {} RETURNING {}").format(
            assignments,
            sql.SQL(" AND ").join(conditions),
            sql.SQL(_COLUMNS),
        )

        try:
            with self._pool.connection(timeout=self._timeout) as conn, conn.cursor(
                row_factory=dict_row
            ) as cursor:
                cursor.execute(update_sql, params)
                row = cursor.fetchone()
                conn.commit()
        except psycopg.Error as e:
            raise RecordStoreError(str(e)) from e

        if row is None:
            raise UpdateConflict(f"Account {account_id} did not match update conditions")
        return Account(**row)

    def _fetch_one(self, query: str, params: tuple) -> Account | None:
        try:
            with self._pool.connection(timeout=self._timeout) as conn, conn.cursor(
                row_factory=dict_row
            ) as cursor:
                cursor.execute(query, params)
                row = cursor.fetchone()
        except psycopg.Error as e:
            raise RecordStoreError(str(e)) from e
        return Account(**row) if row is not None else None


def run_migrations(pool: ConnectionPool, migrations_dir: Path = MIGRATIONS_DIR) -> None:
    """
    Apply every migrations/*.sql file in filename order.

    Files must be idempotent (IF NOT EXISTS); they run on every startup.
    """
    if not migrations_dir.is_dir():
        logger.warning("Migrations directory not found: %s", migrations_dir)
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))
    logger.info("Applying %d migration(s) from %s", len(sql_files), migrations_dir)

    for sql_file in sql_files:
        try:
            with pool.connection() as conn:
                conn.execute(sql_file.read_text())
        except (OSError, psycopg.Error) as e:
            logger.error("Migration %s failed: %s", sql_file.name, e)
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
        logger.info("Migration applied: %s", sql_file.name)
