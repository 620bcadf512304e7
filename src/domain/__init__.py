"""
Domain layer - Pure business logic with zero framework imports.

This package contains the account lifecycle: registration across the
credential provider and record store, email verification tokens, and the
verification-gated login. It defines its own port interfaces for
infrastructure abstraction.
"""

from .account import Account, InvalidTransition, VerificationState, normalize_email
from .exceptions import (
    AccountError,
    AuthenticationFailed,
    DuplicateAccount,
    EmailNotVerified,
    MissingCredentials,
    ProviderFailure,
    TokenInvalid,
)
from .login import LoginGate, LoginResult
from .ports import AccountRepository, CredentialProvider, Notifier, ProviderSession
from .registration import ProfileFields, RegistrationCoordinator, RegistrationReceipt
from .tokens import TokenIssuer
from .verification import VerificationHandler, VerificationOutcome

__all__ = [
    "Account",
    "AccountError",
    "AccountRepository",
    "AuthenticationFailed",
    "CredentialProvider",
    "DuplicateAccount",
    "EmailNotVerified",
    "InvalidTransition",
    "LoginGate",
    "LoginResult",
    "MissingCredentials",
    "Notifier",
    "ProfileFields",
    "ProviderFailure",
    "ProviderSession",
    "RegistrationCoordinator",
    "RegistrationReceipt",
    "TokenInvalid",
    "TokenIssuer",
    "VerificationHandler",
    "VerificationOutcome",
    "VerificationState",
    "normalize_email",
]
