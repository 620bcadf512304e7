"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- A controllable clock for token expiry
- In-memory record store and credential provider
- Domain services wired to them
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

import pytest

from src.adapters.identity.memory import InMemoryCredentialProvider
from src.adapters.repository.memory import InMemoryAccountRepository
from src.domain.login import LoginGate
from src.domain.registration import RegistrationCoordinator
from src.domain.tokens import TokenIssuer
from src.domain.verification import VerificationHandler

# Lowest bcrypt cost accepted by the library; keeps unit tests fast.
FAST_BCRYPT_COST = 4


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def repository() -> InMemoryAccountRepository:
    return InMemoryAccountRepository()


@pytest.fixture
def credential_provider() -> InMemoryCredentialProvider:
    return InMemoryCredentialProvider(bcrypt_cost=FAST_BCRYPT_COST)


@pytest.fixture
def notifier() -> Mock:
    return Mock()


@pytest.fixture
def token_issuer(repository: InMemoryAccountRepository, clock: FrozenClock) -> TokenIssuer:
    return TokenIssuer(repository=repository, clock=clock)


@pytest.fixture
def coordinator(
    credential_provider: InMemoryCredentialProvider,
    repository: InMemoryAccountRepository,
    token_issuer: TokenIssuer,
    notifier: Mock,
) -> RegistrationCoordinator:
    return RegistrationCoordinator(
        credential_provider=credential_provider,
        repository=repository,
        token_issuer=token_issuer,
        notifier=notifier,
        bcrypt_cost=FAST_BCRYPT_COST,
    )


@pytest.fixture
def verification_handler(
    repository: InMemoryAccountRepository, token_issuer: TokenIssuer
) -> VerificationHandler:
    return VerificationHandler(repository=repository, token_issuer=token_issuer)


@pytest.fixture
def login_gate(
    repository: InMemoryAccountRepository, credential_provider: InMemoryCredentialProvider
) -> LoginGate:
    return LoginGate(repository=repository, credential_provider=credential_provider)


@pytest.fixture
def base_link() -> str:
    return "http://testserver/v1/verify-email"
