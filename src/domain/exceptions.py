"""
Domain exceptions - Semantic error types for the account lifecycle.

This module defines two families of exceptions:

- AccountError: business outcomes surfaced to callers of the domain
  services (registration, verification, login).
- PortError: failures reported by infrastructure adapters through the
  port interfaces. Adapters translate library exceptions into these so
  the domain never sees psycopg, httpx or smtplib errors.
"""


class AccountError(Exception):
    """Base class for account lifecycle domain errors."""

    pass


class MissingCredentials(AccountError):
    """Email or password was empty."""

    pass


class DuplicateAccount(AccountError):
    """Email is already registered in the record store or the credential provider."""

    pass


class ProviderFailure(AccountError):
    """Unexpected failure from the credential provider or the record store."""

    pass


class TokenInvalid(AccountError):
    """Verification token unknown, already consumed, or expired."""

    pass


class EmailNotVerified(AccountError):
    """Account exists but its email address has not been confirmed."""

    pass


class AuthenticationFailed(AccountError):
    """Unknown account or wrong password (deliberately undistinguished)."""

    pass


class PortError(Exception):
    """Base class for failures reported by infrastructure adapters."""

    pass


class IdentityAlreadyExists(PortError):
    """Credential provider already holds an identity for this email."""

    pass


class BadCredentials(PortError):
    """Credential provider rejected the email/password pair."""

    pass


class IdentityProviderError(PortError):
    """Credential provider failed for any other reason."""

    pass


class DuplicateKey(PortError):
    """Record store unique-key constraint rejected a create."""

    pass


class UpdateConflict(PortError):
    """Record store conditional update matched no row."""

    pass


class RecordStoreError(PortError):
    """Record store failed for any other reason."""

    pass
