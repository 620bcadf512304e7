"""
Firebase credential provider adapter - Implements CredentialProvider protocol.

Talks to the Identity Toolkit REST API with httpx:

- POST accounts:signUp             -> create identity
- POST accounts:signInWithPassword -> authenticate, returns an ID token

Firebase reports failures as HTTP 400 with an error message code such as
"EMAIL_EXISTS" or "INVALID_PASSWORD : <detail>". Only the code before the
first space is used for classification.
"""

import logging

import httpx

from src.domain.exceptions import BadCredentials, IdentityAlreadyExists, IdentityProviderError
from src.domain.ports import ProviderSession

logger = logging.getLogger(__name__)

_ALREADY_EXISTS_CODES = frozenset({"EMAIL_EXISTS"})
_BAD_CREDENTIAL_CODES = frozenset(
    {"EMAIL_NOT_FOUND", "INVALID_PASSWORD", "INVALID_LOGIN_CREDENTIALS", "INVALID_EMAIL"}
)


class FirebaseCredentialProvider:
    """
    Implements CredentialProvider protocol via the Identity Toolkit REST API.

    Uses structural subtyping - no explicit inheritance from Protocol.
    The httpx.Client is owned by the caller (created in the app lifespan).
    """

    def __init__(self, client: httpx.Client, api_key: str, base_url: str) -> None:
        """
        Args:
            client: httpx client with a bounded timeout
            api_key: Firebase web API key
            base_url: Identity Toolkit base URL, e.g. https://identitytoolkit.googleapis.com/v1
        """
        self._client = client
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")

    def create(self, email: str, password: str) -> str:
        payload = self._post("accounts:signUp", email, password)
        code = self._error_code(payload)
        if code in _ALREADY_EXISTS_CODES:
            raise IdentityAlreadyExists(email)
        if code is not None:
            raise IdentityProviderError(f"signUp failed: {code}")

        local_id = payload.get("localId")
        if not local_id:
            raise IdentityProviderError("signUp response missing localId")
        logger.info("Firebase user created: %s", local_id)
        return local_id

    def authenticate(self, email: str, password: str) -> ProviderSession:
        payload = self._post("accounts:signInWithPassword", email, password)
        code = self._error_code(payload)
        if code in _BAD_CREDENTIAL_CODES:
            raise BadCredentials(code)
        if code is not None:
            raise IdentityProviderError(f"signInWithPassword failed: {code}")

        local_id = payload.get("localId")
        id_token = payload.get("idToken")
        if not local_id or not id_token:
            raise IdentityProviderError("signInWithPassword response missing localId or idToken")
        return ProviderSession(identity_ref=local_id, session_token=id_token)

    def _post(self, method: str, email: str, password: str) -> dict:
        url = f"{self._base_url}/{method}"
        body = {"email": email, "password": password, "returnSecureToken": True}
        try:
            response = self._client.post(url, params={"key": self._api_key}, json=body)
        except httpx.HTTPError as e:
            raise IdentityProviderError(f"{method} request failed: {e}") from e

        try:
            payload = response.json()
        except ValueError as e:
            raise IdentityProviderError(
                f"{method} returned non-JSON response ({response.status_code})"
            ) from e

        if response.status_code >= 400 and self._error_code(payload) is None:
            raise IdentityProviderError(f"{method} failed with status {response.status_code}")
        return payload

    @staticmethod
    def _error_code(payload: dict) -> str | None:
        error = payload.get("error")
        if not isinstance(error, dict):
            return None
        message = str(error.get("message") or error.get("status") or "UNKNOWN")
        return message.split(" ", 1)[0]
