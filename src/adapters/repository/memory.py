"""
In-memory repository adapter - Implements AccountRepository protocol.

Process-local store for development runs without PostgreSQL. A single
lock gives the same guarantees the database provides through its unique
index and conditional UPDATE.
"""

import threading
from collections.abc import Mapping
from dataclasses import replace
from datetime import datetime, timezone
from itertools import count

from src.domain.account import Account
from src.domain.exceptions import DuplicateKey, UpdateConflict
from src.domain.ports import UPDATABLE_FIELDS


class InMemoryAccountRepository:
    """
    Implements AccountRepository protocol with a lock-guarded dict.

    Uses structural subtyping - no explicit inheritance from Protocol.
    Stored accounts are copied on the way in and out.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._by_id: dict[int, Account] = {}
        self._ids = count(1)

    def create_account(self, account: Account) -> Account:
        with self._lock:
            if any(existing.email == account.email for existing in self._by_id.values()):
                raise DuplicateKey(account.email)
            stored = replace(account, id=next(self._ids), created_at=datetime.now(timezone.utc))
            self._by_id[stored.id] = stored
            return replace(stored)

    def find_by_email(self, email: str) -> Account | None:
        with self._lock:
            for account in self._by_id.values():
                if account.email == email:
                    return replace(account)
        return None

    def find_by_token(self, token: str) -> Account | None:
        with self._lock:
            for account in self._by_id.values():
                if account.verification_token is not None and account.verification_token == token:
                    return replace(account)
        return None

    def update_account(
        self,
        account_id: int,
        patch: Mapping[str, object],
        *,
        expected_token: str | None = None,
        valid_at: datetime | None = None,
    ) -> Account:
        unknown = set(patch) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update fields: {sorted(unknown)}")

        with self._lock:
            current = self._by_id.get(account_id)
            if current is None:
                raise UpdateConflict(f"Account {account_id} not found")
            if expected_token is not None:
                now = valid_at or datetime.now(timezone.utc)
                if (
                    current.verification_token != expected_token
                    or current.verification_token_expires_at is None
                    or current.verification_token_expires_at <= now
                ):
                    raise UpdateConflict(f"Account {account_id} did not match update conditions")
            updated = replace(current, **patch)
            self._by_id[account_id] = updated
            return replace(updated)

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_id)
