"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
Adapters are created once in the app lifespan and stored in app.state;
domain services are cheap dataclasses built per request.
"""

from datetime import timedelta

from fastapi import Depends, Request

from src.config.settings import Settings, get_settings
from src.domain.login import LoginGate
from src.domain.ports import AccountRepository, CredentialProvider, Notifier
from src.domain.registration import RegistrationCoordinator
from src.domain.tokens import TokenIssuer
from src.domain.verification import VerificationHandler


def get_repository(request: Request) -> AccountRepository:
    """Get record store adapter from app state."""
    return request.app.state.repository


def get_credential_provider(request: Request) -> CredentialProvider:
    """Get credential provider adapter from app state."""
    return request.app.state.credential_provider


def get_notifier(request: Request) -> Notifier:
    """Get notifier adapter from app state."""
    return request.app.state.notifier


def get_token_issuer(
    repository: AccountRepository = Depends(get_repository),
    settings: Settings = Depends(get_settings),
) -> TokenIssuer:
    """Create token issuer with configured TTL and entropy."""
    return TokenIssuer(
        repository=repository,
        ttl=timedelta(hours=settings.verification_token_ttl_hours),
        token_bytes=settings.verification_token_bytes,
    )


def get_registration_coordinator(
    repository: AccountRepository = Depends(get_repository),
    credential_provider: CredentialProvider = Depends(get_credential_provider),
    notifier: Notifier = Depends(get_notifier),
    token_issuer: TokenIssuer = Depends(get_token_issuer),
    settings: Settings = Depends(get_settings),
) -> RegistrationCoordinator:
    """
    Create registration coordinator with injected dependencies.

    Wires together provider, repository, token issuer and notifier.
    """
    return RegistrationCoordinator(
        credential_provider=credential_provider,
        repository=repository,
        token_issuer=token_issuer,
        notifier=notifier,
        bcrypt_cost=settings.bcrypt_cost,
    )


def get_verification_handler(
    repository: AccountRepository = Depends(get_repository),
    token_issuer: TokenIssuer = Depends(get_token_issuer),
) -> VerificationHandler:
    """Create verification handler."""
    return VerificationHandler(repository=repository, token_issuer=token_issuer)


def get_login_gate(
    repository: AccountRepository = Depends(get_repository),
    credential_provider: CredentialProvider = Depends(get_credential_provider),
) -> LoginGate:
    """Create login gate."""
    return LoginGate(repository=repository, credential_provider=credential_provider)


def get_verification_base_link(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> str:
    """
    Base URL for emailed verification links.

    Uses the configured public URL when set, otherwise this app's own
    verify-email route as seen by the incoming request.
    """
    if settings.verification_link_base:
        return settings.verification_link_base
    return str(request.url_for("verify_email"))
