"""
Verification domain service - redeems emailed tokens.

The PENDING -> VERIFIED transition is written as one conditional update
that only matches while the token is still present and unexpired, so two
concurrent redemptions of the same token cannot both succeed. Replaying a
consumed token is rejected as TokenInvalid.
"""

import logging
from dataclasses import dataclass

from .account import InvalidTransition, VerificationState
from .exceptions import ProviderFailure, RecordStoreError, TokenInvalid, UpdateConflict
from .ports import AccountRepository
from .tokens import TokenIssuer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerificationOutcome:
    """Verified acknowledgment."""

    email: str
    state: VerificationState = VerificationState.VERIFIED


@dataclass
class VerificationHandler:
    """Consumes verification tokens and marks accounts VERIFIED."""

    repository: AccountRepository
    token_issuer: TokenIssuer

    def verify(self, token: str) -> VerificationOutcome:
        """
        Redeem token and transition its account to VERIFIED.

        Raises:
            TokenInvalid: Token unknown, consumed, expired, or lost a race
            ProviderFailure: The record store failed
        """
        account = self.token_issuer.validate(token)

        try:
            patch = account.verification_patch()
        except InvalidTransition as e:
            raise TokenInvalid("Invalid or expired verification token") from e

        try:
            self.repository.update_account(
                account.id,
                patch,
                expected_token=token,
                valid_at=self.token_issuer.clock(),
            )
        except UpdateConflict as e:
            raise TokenInvalid("Invalid or expired verification token") from e
        except RecordStoreError as e:
            logger.error("Verification update failed for account %s: %s", account.id, e)
            raise ProviderFailure("Verification failed") from e

        logger.info("Account verified: %s", account.email)
        return VerificationOutcome(email=account.email)
