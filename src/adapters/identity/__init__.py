"""Identity adapters - Credential provider implementations."""

from .firebase import FirebaseCredentialProvider
from .memory import InMemoryCredentialProvider

__all__ = ["FirebaseCredentialProvider", "InMemoryCredentialProvider"]
