"""
Login gate - verification-gated authentication.

Local state is checked before the credential provider is called, so no
provider-side signal is produced for accounts that do not exist locally
or are not yet verified. Unknown email and wrong password both surface as
AuthenticationFailed.
"""

import logging
from dataclasses import dataclass

from .account import normalize_email
from .exceptions import (
    AuthenticationFailed,
    BadCredentials,
    EmailNotVerified,
    MissingCredentials,
    PortError,
    ProviderFailure,
    RecordStoreError,
)
from .ports import AccountRepository, CredentialProvider

logger = logging.getLogger(__name__)

INVALID_LOGIN_MESSAGE = "Invalid email or password"
UNVERIFIED_MESSAGE = (
    "Please verify your email address before logging in. "
    "Check your inbox for the verification email."
)


@dataclass(frozen=True)
class LoginResult:
    """Account summary plus provider session token."""

    account_id: int
    identity_ref: str
    email: str
    display_name: str | None
    username: str | None
    session_token: str


@dataclass
class LoginGate:
    """Domain service enforcing email verification before authentication."""

    repository: AccountRepository
    credential_provider: CredentialProvider

    def login(self, email: str, password: str) -> LoginResult:
        """
        Authenticate a verified account.

        Raises:
            MissingCredentials: If email or password is empty
            AuthenticationFailed: Unknown email or wrong password
            EmailNotVerified: Account exists but is still PENDING
            ProviderFailure: Credential provider or record store failed
        """
        if not email or not email.strip() or not password:
            raise MissingCredentials("Email and password are required")

        normalized_email = normalize_email(email)

        try:
            account = self.repository.find_by_email(normalized_email)
        except RecordStoreError as e:
            logger.error("Account lookup failed during login: %s", e)
            raise ProviderFailure("Authentication failed") from e

        if account is None:
            raise AuthenticationFailed(INVALID_LOGIN_MESSAGE)
        if not account.is_verified:
            raise EmailNotVerified(UNVERIFIED_MESSAGE)

        try:
            session = self.credential_provider.authenticate(normalized_email, password)
        except BadCredentials as e:
            raise AuthenticationFailed(INVALID_LOGIN_MESSAGE) from e
        except PortError as e:
            logger.error("Credential provider authentication failed: %s", e)
            raise ProviderFailure("Authentication failed") from e

        return LoginResult(
            account_id=account.id,
            identity_ref=session.identity_ref,
            email=account.email,
            display_name=account.display_name,
            username=account.username,
            session_token=session.session_token,
        )
