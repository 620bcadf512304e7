"""
Registration domain service - dual-write account creation.

Registration writes to two systems that share no commit protocol: the
external credential provider and the record store. The flow is a saga
with one known gap:

    1. validate input
    2. pre-check record store for the email (best effort)
    3. create identity in the credential provider
    4. hash password (bcrypt)
    5. issue verification token
    6. persist PENDING account in the record store
    7. notify user (best effort, failures swallowed)

If step 6 fails after step 3 succeeded, the external identity is orphaned.
It is not rolled back; a [RECONCILE] log entry is emitted so an
out-of-band sweep can find and repair it.
"""

import logging
from dataclasses import dataclass

import bcrypt

from .account import MAX_PASSWORD_BYTES, Account, normalize_email, password_too_long
from .exceptions import (
    DuplicateAccount,
    DuplicateKey,
    IdentityAlreadyExists,
    MissingCredentials,
    PortError,
    ProviderFailure,
    RecordStoreError,
)
from .ports import AccountRepository, CredentialProvider, Notifier
from .tokens import TokenIssuer

logger = logging.getLogger(__name__)

PENDING_MESSAGE = "User registered successfully. Please check your email to verify your account."


@dataclass(frozen=True)
class ProfileFields:
    """Optional profile data captured at registration."""

    username: str | None = None
    phone: str | None = None
    display_name: str | None = None


@dataclass(frozen=True)
class RegistrationReceipt:
    """Pending-verification acknowledgment. Carries no secrets."""

    email: str
    message: str = PENDING_MESSAGE


@dataclass
class RegistrationCoordinator:
    """
    Domain service for user registration.

    Orchestrates credential provider -> record store -> token issuer ->
    notifier, in that order.
    """

    credential_provider: CredentialProvider
    repository: AccountRepository
    token_issuer: TokenIssuer
    notifier: Notifier
    bcrypt_cost: int = 10

    def register(
        self,
        email: str,
        password: str,
        profile: ProfileFields | None = None,
        *,
        base_link: str,
    ) -> RegistrationReceipt:
        """
        Register a new user in PENDING state and send the verification link.

        Args:
            email: User's email address (will be normalized)
            password: User's password (will be hashed)
            profile: Optional profile fields
            base_link: URL of the verify-email endpoint for the emailed link

        Returns:
            RegistrationReceipt for the normalized email

        Raises:
            MissingCredentials: If email or password is empty, or the password
                exceeds MAX_PASSWORD_BYTES
            DuplicateAccount: If the email is already registered
            ProviderFailure: If the credential provider or record store fails
        """
        if not email or not email.strip():
            raise MissingCredentials("Please add email")
        if not password:
            raise MissingCredentials("Please add password")
        if password_too_long(password):
            raise MissingCredentials(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")

        normalized_email = normalize_email(email)
        profile = profile or ProfileFields()

        try:
            existing = self.repository.find_by_email(normalized_email)
        except RecordStoreError as e:
            logger.error("Account lookup failed for %s: %s", normalized_email, e)
            raise ProviderFailure("Registration failed") from e
        if existing is not None:
            raise DuplicateAccount(normalized_email)

        try:
            credential_ref = self.credential_provider.create(normalized_email, password)
        except IdentityAlreadyExists as e:
            raise DuplicateAccount(normalized_email) from e
        except PortError as e:
            logger.error("Credential provider create failed for %s: %s", normalized_email, e)
            raise ProviderFailure("Registration failed") from e

        password_digest = self._hash_password(password)
        issued_at = self.token_issuer.clock()
        token, expires_at = self.token_issuer.issue()

        account = Account.pending(
            email=normalized_email,
            password_digest=password_digest,
            credential_ref=credential_ref,
            token=token,
            expires_at=expires_at,
            issued_at=issued_at,
            username=profile.username,
            phone=profile.phone,
            display_name=profile.display_name,
        )

        try:
            self.repository.create_account(account)
        except DuplicateKey as e:
            self._log_orphaned_identity(normalized_email, credential_ref, e)
            raise DuplicateAccount(normalized_email) from e
        except RecordStoreError as e:
            self._log_orphaned_identity(normalized_email, credential_ref, e)
            raise ProviderFailure("Registration failed") from e

        try:
            self.notifier.send_verification(normalized_email, token, base_link)
        except Exception:
            logger.exception("Verification email to %s failed; registration kept", normalized_email)

        return RegistrationReceipt(email=normalized_email)

    def _hash_password(self, password: str) -> str:
        """Hash password using bcrypt with the configured cost factor."""
        return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=self.bcrypt_cost)).decode()

    def _log_orphaned_identity(self, email: str, credential_ref: str, error: Exception) -> None:
        logger.error(
            "[RECONCILE] orphaned identity Email: %s CredentialRef: %s Reason: %s",
            email,
            credential_ref,
            error,
            extra={"reconcile_email": email, "reconcile_credential_ref": credential_ref},
        )
