"""
Unit tests for FirebaseCredentialProvider.

Uses httpx.MockTransport to stand in for the Identity Toolkit REST API.
"""

import json

import httpx
import pytest

from src.adapters.identity.firebase import FirebaseCredentialProvider
from src.domain.exceptions import BadCredentials, IdentityAlreadyExists, IdentityProviderError

BASE_URL = "https://identitytoolkit.test/v1"


def error_response(message: str, status_code: int = 400) -> httpx.Response:
    return httpx.Response(status_code, json={"error": {"code": status_code, "message": message}})


def make_provider(handler) -> FirebaseCredentialProvider:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return FirebaseCredentialProvider(client, api_key="test-key", base_url=BASE_URL + "/")


class TestCreate:
    """Tests for accounts:signUp."""

    def test_create_returns_local_id(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"localId": "uid-123", "idToken": "tok"})

        ref = make_provider(handler).create("user@example.com", "secret1")

        assert ref == "uid-123"
        request = seen[0]
        assert request.method == "POST"
        assert request.url.path == "/v1/accounts:signUp"
        assert request.url.params["key"] == "test-key"
        assert json.loads(request.content) == {
            "email": "user@example.com",
            "password": "secret1",
            "returnSecureToken": True,
        }

    def test_email_exists_maps_to_already_exists(self) -> None:
        provider = make_provider(lambda request: error_response("EMAIL_EXISTS"))
        with pytest.raises(IdentityAlreadyExists):
            provider.create("user@example.com", "secret1")

    def test_weak_password_is_provider_error(self) -> None:
        provider = make_provider(
            lambda request: error_response("WEAK_PASSWORD : Password should be at least 6 characters")
        )
        with pytest.raises(IdentityProviderError) as exc_info:
            provider.create("user@example.com", "abc")
        assert "WEAK_PASSWORD" in str(exc_info.value)

    def test_missing_local_id_is_provider_error(self) -> None:
        provider = make_provider(lambda request: httpx.Response(200, json={}))
        with pytest.raises(IdentityProviderError):
            provider.create("user@example.com", "secret1")


class TestAuthenticate:
    """Tests for accounts:signInWithPassword."""

    def test_authenticate_returns_session(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/v1/accounts:signInWithPassword"
            return httpx.Response(200, json={"localId": "uid-123", "idToken": "id-token"})

        session = make_provider(handler).authenticate("user@example.com", "secret1")

        assert session.identity_ref == "uid-123"
        assert session.session_token == "id-token"

    @pytest.mark.parametrize(
        "message",
        ["EMAIL_NOT_FOUND", "INVALID_PASSWORD", "INVALID_LOGIN_CREDENTIALS"],
    )
    def test_bad_credential_codes(self, message: str) -> None:
        provider = make_provider(lambda request: error_response(message))
        with pytest.raises(BadCredentials):
            provider.authenticate("user@example.com", "wrong")

    def test_user_disabled_is_provider_error(self) -> None:
        provider = make_provider(lambda request: error_response("USER_DISABLED"))
        with pytest.raises(IdentityProviderError):
            provider.authenticate("user@example.com", "secret1")

    def test_missing_id_token_is_provider_error(self) -> None:
        provider = make_provider(lambda request: httpx.Response(200, json={"localId": "uid"}))
        with pytest.raises(IdentityProviderError):
            provider.authenticate("user@example.com", "secret1")


class TestTransportFailures:
    """Tests for network and protocol failures."""

    def test_timeout_is_provider_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        with pytest.raises(IdentityProviderError):
            make_provider(handler).create("user@example.com", "secret1")

    def test_non_json_response_is_provider_error(self) -> None:
        provider = make_provider(lambda request: httpx.Response(502, text="<html>Bad Gateway</html>"))
        with pytest.raises(IdentityProviderError):
            provider.authenticate("user@example.com", "secret1")

    def test_server_error_without_code_is_provider_error(self) -> None:
        provider = make_provider(lambda request: httpx.Response(500, json={"unexpected": True}))
        with pytest.raises(IdentityProviderError):
            provider.create("user@example.com", "secret1")
