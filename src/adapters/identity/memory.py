"""
In-memory credential provider adapter - Implements CredentialProvider protocol.

For local development and tests: identities live in a dict, passwords are
bcrypt-hashed, and each successful authentication mints a random session
token.
"""

import secrets
import threading
import uuid

import bcrypt

from src.domain.account import password_too_long
from src.domain.exceptions import BadCredentials, IdentityAlreadyExists, IdentityProviderError
from src.domain.ports import ProviderSession

# Compared against when the email is unknown so both paths run bcrypt.
_DUMMY_BCRYPT_HASH = bcrypt.hashpw(b"dummy_password_for_timing_safety", bcrypt.gensalt(4))


class InMemoryCredentialProvider:
    """
    Implements CredentialProvider protocol with a lock-guarded dict.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, bcrypt_cost: int = 10) -> None:
        self._lock = threading.Lock()
        self._identities: dict[str, tuple[str, bytes]] = {}
        self._bcrypt_cost = bcrypt_cost

    def create(self, email: str, password: str) -> str:
        if password_too_long(password):
            raise IdentityProviderError("PASSWORD_TOO_LONG")
        password_hash = bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=self._bcrypt_cost))
        with self._lock:
            if email in self._identities:
                raise IdentityAlreadyExists(email)
            identity_ref = uuid.uuid4().hex
            self._identities[email] = (identity_ref, password_hash)
        return identity_ref

    def authenticate(self, email: str, password: str) -> ProviderSession:
        if password_too_long(password):
            raise BadCredentials("EMAIL_NOT_FOUND_OR_INVALID_PASSWORD")
        with self._lock:
            record = self._identities.get(email)

        stored_hash = record[1] if record is not None else _DUMMY_BCRYPT_HASH
        password_valid = bcrypt.checkpw(password.encode(), stored_hash)
        if record is None or not password_valid:
            raise BadCredentials("EMAIL_NOT_FOUND_OR_INVALID_PASSWORD")
        return ProviderSession(identity_ref=record[0], session_token=secrets.token_urlsafe(32))

    def __contains__(self, email: object) -> bool:
        with self._lock:
            return email in self._identities
