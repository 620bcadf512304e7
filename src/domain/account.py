"""
Account entity and verification state machine.

Verification State Machine
==========================

States:
- PENDING: Account created, waiting for the emailed token to be redeemed
- VERIFIED: Terminal state, email ownership proven

Valid Transitions:
    PENDING -> VERIFIED   (valid, unexpired token consumed)

Invalid Transitions:
    VERIFIED -> any       (VERIFIED is terminal)
    any -> PENDING        (no backward movement)

The state is derived from the stored fields rather than stored on its own:
an account is VERIFIED iff is_verified is set, in which case it carries no
verification token.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

# bcrypt only reads the first 72 bytes and bcrypt>=5 rejects longer input.
MAX_PASSWORD_BYTES = 72


class VerificationState(str, Enum):
    """Verification lifecycle states."""

    PENDING = "PENDING"
    VERIFIED = "VERIFIED"


_TRANSITIONS: dict[VerificationState, frozenset[VerificationState]] = {
    VerificationState.PENDING: frozenset({VerificationState.VERIFIED}),
    VerificationState.VERIFIED: frozenset(),
}


class InvalidTransition(Exception):
    """Requested state change is not allowed by the state machine."""

    pass


def normalize_email(email: str) -> str:
    """
    Normalize email address for consistent storage and lookup.

    Applies: strip whitespace + lowercase
    """
    return email.strip().lower()


def password_too_long(password: str) -> bool:
    """True when the UTF-8 encoded password exceeds MAX_PASSWORD_BYTES."""
    return len(password.encode()) > MAX_PASSWORD_BYTES


def can_transition(current: VerificationState, target: VerificationState) -> bool:
    """Return True if the state machine allows current -> target."""
    return target in _TRANSITIONS[current]


@dataclass
class Account:
    """
    The single core entity, keyed by normalized email.

    id is assigned by the record store and is None until persisted.
    """

    email: str
    password_digest: str
    credential_ref: str | None = None
    is_verified: bool = False
    verification_token: str | None = None
    verification_token_expires_at: datetime | None = None
    username: str | None = None
    phone: str | None = None
    display_name: str | None = None
    id: int | None = None
    created_at: datetime | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not self.email or not self.password_digest:
            raise ValueError("Account requires email and password_digest")
        if self.is_verified and (
            self.verification_token is not None
            or self.verification_token_expires_at is not None
        ):
            raise ValueError("Verified account cannot carry a verification token")
        if (self.verification_token is None) != (self.verification_token_expires_at is None):
            raise ValueError("verification_token and its expiry must be set together")

    @classmethod
    def pending(
        cls,
        *,
        email: str,
        password_digest: str,
        credential_ref: str,
        token: str,
        expires_at: datetime,
        issued_at: datetime,
        username: str | None = None,
        phone: str | None = None,
        display_name: str | None = None,
    ) -> "Account":
        """Build a new account in the PENDING state with a live token."""
        if expires_at <= issued_at:
            raise ValueError("Token expiry must be in the future at issuance")
        return cls(
            email=normalize_email(email),
            password_digest=password_digest,
            credential_ref=credential_ref,
            is_verified=False,
            verification_token=token,
            verification_token_expires_at=expires_at,
            username=username,
            phone=phone,
            display_name=display_name,
        )

    @property
    def state(self) -> VerificationState:
        """Current verification state derived from the stored fields."""
        if self.is_verified:
            return VerificationState.VERIFIED
        return VerificationState.PENDING

    def verification_patch(self) -> dict[str, object]:
        """
        Field changes for the PENDING -> VERIFIED transition.

        Raises:
            InvalidTransition: If the account is already VERIFIED
        """
        if not can_transition(self.state, VerificationState.VERIFIED):
            raise InvalidTransition(f"{self.state.value} -> {VerificationState.VERIFIED.value}")
        return {
            "is_verified": True,
            "verification_token": None,
            "verification_token_expires_at": None,
        }
