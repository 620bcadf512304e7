"""
Verification token issuance and validation.

Tokens are 32 random bytes from the secrets module rendered as 64 hex
characters, valid for 24 hours by default. Validation never tells the
caller whether a token was unknown or expired.
"""

import re
import secrets
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from .account import Account
from .exceptions import ProviderFailure, RecordStoreError, TokenInvalid
from .ports import AccountRepository


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


@dataclass
class TokenIssuer:
    """Issues verification tokens and resolves them to pending accounts."""

    repository: AccountRepository
    ttl: timedelta = timedelta(hours=24)
    token_bytes: int = 32
    clock: Callable[[], datetime] = field(default=utcnow)

    def issue(self) -> tuple[str, datetime]:
        """Return a fresh (token, expires_at) pair."""
        return secrets.token_hex(self.token_bytes), self.clock() + self.ttl

    def validate(self, token: str) -> Account:
        """
        Resolve token to the account holding it.

        Raises:
            TokenInvalid: Malformed token, no account holds it, or it has expired
            ProviderFailure: The record store failed
        """
        if not self._well_formed(token):
            raise TokenInvalid("Invalid or expired verification token")

        try:
            account = self.repository.find_by_token(token)
        except RecordStoreError as e:
            raise ProviderFailure("Record store unavailable") from e

        if account is None or account.verification_token_expires_at is None:
            raise TokenInvalid("Invalid or expired verification token")
        if not secrets.compare_digest(account.verification_token or "", token):
            raise TokenInvalid("Invalid or expired verification token")
        if account.verification_token_expires_at <= self.clock():
            raise TokenInvalid("Invalid or expired verification token")
        return account

    def _well_formed(self, token: str) -> bool:
        # Malformed input never reaches the store.
        return re.fullmatch(rf"[0-9a-f]{{{2 * self.token_bytes}}}", token) is not None
