"""
Integration tests for PostgresAccountRepository.

Tests repository operations against a real PostgreSQL database.
Skipped when PostgreSQL is not reachable.
"""

from datetime import datetime, timedelta, timezone

import pytest
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import PostgresAccountRepository
from src.domain.account import Account
from src.domain.exceptions import DuplicateKey, UpdateConflict

pytestmark = pytest.mark.integration


def pending(email: str = "test@example.com", token: str = "a" * 64, hours: int = 24) -> Account:
    now = datetime.now(timezone.utc)
    return Account.pending(
        email=email,
        password_digest="$2b$10$hashedpasswordvalue",
        credential_ref="uid-1",
        token=token,
        expires_at=now + timedelta(hours=hours),
        issued_at=now,
        username="tester",
    )


class TestCreateAccount:
    """Tests for create_account method."""

    def test_create_returns_stored_account(self, repository: PostgresAccountRepository) -> None:
        stored = repository.create_account(pending())
        assert stored.id is not None
        assert stored.created_at is not None
        assert stored.email == "test@example.com"
        assert stored.is_verified is False
        assert stored.username == "tester"

    def test_create_duplicate_raises_duplicate_key(self, repository: PostgresAccountRepository) -> None:
        repository.create_account(pending())
        with pytest.raises(DuplicateKey):
            repository.create_account(pending(token="b" * 64))

    def test_different_emails_both_succeed(self, repository: PostgresAccountRepository) -> None:
        first = repository.create_account(pending("user1@example.com", "1" * 64))
        second = repository.create_account(pending("user2@example.com", "2" * 64))
        assert first.id != second.id

    def test_row_persisted(self, repository: PostgresAccountRepository, pool: ConnectionPool) -> None:
        repository.create_account(pending())
        with pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(
                "SELECT is_verified, verification_token FROM accounts WHERE email = %s",
                ("test@example.com",),
            )
            row = cursor.fetchone()
        assert row == (False, "a" * 64)


class TestLookups:
    """Tests for point lookups."""

    def test_find_by_email(self, repository: PostgresAccountRepository) -> None:
        stored = repository.create_account(pending())
        assert repository.find_by_email("test@example.com") == stored
        assert repository.find_by_email("missing@example.com") is None

    def test_find_by_token(self, repository: PostgresAccountRepository) -> None:
        stored = repository.create_account(pending())
        assert repository.find_by_token("a" * 64) == stored
        assert repository.find_by_token("b" * 64) is None


class TestUpdateAccount:
    """Tests for update_account method."""

    def test_conditional_verify(self, repository: PostgresAccountRepository) -> None:
        stored = repository.create_account(pending())
        updated = repository.update_account(
            stored.id,
            stored.verification_patch(),
            expected_token="a" * 64,
            valid_at=datetime.now(timezone.utc),
        )
        assert updated.is_verified is True
        assert updated.verification_token is None
        assert updated.verification_token_expires_at is None

    def test_conditional_verify_twice_conflicts(self, repository: PostgresAccountRepository) -> None:
        stored = repository.create_account(pending())
        patch = stored.verification_patch()
        repository.update_account(stored.id, patch, expected_token="a" * 64)
        with pytest.raises(UpdateConflict):
            repository.update_account(stored.id, patch, expected_token="a" * 64)

    def test_conditional_verify_expired_conflicts(self, repository: PostgresAccountRepository) -> None:
        stored = repository.create_account(pending())
        with pytest.raises(UpdateConflict):
            repository.update_account(
                stored.id,
                stored.verification_patch(),
                expected_token="a" * 64,
                valid_at=datetime.now(timezone.utc) + timedelta(days=2),
            )

    def test_unconditional_profile_update(self, repository: PostgresAccountRepository) -> None:
        stored = repository.create_account(pending())
        updated = repository.update_account(stored.id, {"display_name": "Tess"})
        assert updated.display_name == "Tess"

    def test_unknown_field_rejected(self, repository: PostgresAccountRepository) -> None:
        stored = repository.create_account(pending())
        with pytest.raises(ValueError):
            repository.update_account(stored.id, {"email": "x@example.com"})

    def test_check_constraint_blocks_verified_with_token(
        self, repository: PostgresAccountRepository
    ) -> None:
        from src.domain.exceptions import RecordStoreError

        stored = repository.create_account(pending())
        with pytest.raises(RecordStoreError):
            repository.update_account(stored.id, {"is_verified": True})
