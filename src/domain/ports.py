"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols and report
failures through the PortError exceptions in .exceptions.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from .account import Account

# Columns a patch passed to AccountRepository.update_account may touch.
UPDATABLE_FIELDS = frozenset(
    {
        "is_verified",
        "verification_token",
        "verification_token_expires_at",
        "credential_ref",
        "username",
        "phone",
        "display_name",
    }
)


@dataclass(frozen=True)
class ProviderSession:
    """Result of a successful credential provider authentication."""

    identity_ref: str
    session_token: str


class CredentialProvider(Protocol):
    """Port interface for the external identity system of record."""

    def create(self, email: str, password: str) -> str:
        """
        Create an identity for email/password.

        Returns:
            Opaque identity reference

        Raises:
            IdentityAlreadyExists: If the email is already in use
            IdentityProviderError: For any other failure
        """
        ...

    def authenticate(self, email: str, password: str) -> ProviderSession:
        """
        Authenticate email/password.

        Raises:
            BadCredentials: Unknown email or wrong password
            IdentityProviderError: For any other failure
        """
        ...


class AccountRepository(Protocol):
    """Port interface for account persistence (the record store)."""

    def create_account(self, account: Account) -> Account:
        """
        Persist a new account and return it with its store-assigned id.

        The unique key on email is the single serialization point for
        concurrent registrations.

        Raises:
            DuplicateKey: If an account with this email already exists
            RecordStoreError: For any other failure
        """
        ...

    def find_by_email(self, email: str) -> Account | None:
        """Point lookup by normalized email."""
        ...

    def find_by_token(self, token: str) -> Account | None:
        """Point lookup by verification token."""
        ...

    def update_account(
        self,
        account_id: int,
        patch: Mapping[str, object],
        *,
        expected_token: str | None = None,
        valid_at: datetime | None = None,
    ) -> Account:
        """
        Apply patch to a single account record atomically.

        When expected_token is given the update only applies if the record
        still holds that token and its expiry is strictly after valid_at.

        Raises:
            UpdateConflict: If no record matched
            RecordStoreError: For any other failure
        """
        ...


class Notifier(Protocol):
    """Port interface for out-of-band delivery of verification links."""

    def send_verification(self, email: str, token: str, base_link: str) -> None:
        """
        Deliver a verification link built from base_link and token.

        Args:
            email: Recipient email address
            token: Verification token
            base_link: URL of the verify-email endpoint
        """
        ...
