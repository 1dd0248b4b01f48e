"""Tests for Clerk JWT verification and the require/optional auth dependencies."""

import base64
import time
from dataclasses import dataclass
from unittest.mock import MagicMock, patch

import jwt as pyjwt
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from weekline.core.auth import (
    _extract_frontend_api_domain,
    decode_clerk_jwt,
    optional_auth,
    require_auth,
)

pytestmark = pytest.mark.unit

_private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
_public_key = _private_key.public_key()
_private_pem = _private_key.private_bytes(
    encoding=serialization.Encoding.PEM,
    format=serialization.PrivateFormat.PKCS8,
    encryption_algorithm=serialization.NoEncryption(),
)

_CLERK_DOMAIN = "weekline.clerk.accounts.dev"
_TEST_CLERK_PK = "pk_test_" + base64.b64encode(f"{_CLERK_DOMAIN}$".encode()).decode().rstrip("=")
_TEST_ISSUER = f"https://{_CLERK_DOMAIN}"


@dataclass
class _FakeSigningKey:
    key: object


def _mock_jwks_client():
    client = MagicMock()
    client.get_signing_key_from_jwt.return_value = _FakeSigningKey(key=_public_key)
    return client


def _mock_settings():
    s = MagicMock()
    s.clerk_publishable_key = _TEST_CLERK_PK
    s.clerk_allowed_origins = ["http://localhost:3000"]
    return s


def _token(**overrides) -> str:
    now = int(time.time())
    payload = {
        "sub": "user_xyz",
        "email": "xyz@example.com",
        "iat": now - 10,
        "exp": now + 300,
        "nbf": now - 10,
        "iss": _TEST_ISSUER,
        "azp": "http://localhost:3000",
    }
    payload.update(overrides)
    payload = {k: v for k, v in payload.items() if v is not None}
    return pyjwt.encode(payload, _private_pem, algorithm="RS256", headers={"kid": "test-kid"})


def _creds(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


@pytest.fixture
def clerk():
    with (
        patch("weekline.core.auth.get_jwks_client", _mock_jwks_client),
        patch("weekline.core.auth.get_settings", _mock_settings),
    ):
        yield


class TestExtractFrontendApiDomain:
    def test_round_trips_domain(self):
        assert _extract_frontend_api_domain(_TEST_CLERK_PK) == _CLERK_DOMAIN

    def test_invalid_key_raises(self):
        with pytest.raises(ValueError, match="Invalid Clerk publishable key"):
            _extract_frontend_api_domain("not-a-valid-key")


class TestDecodeClerkJwt:
    def test_valid_token_carries_email(self, clerk):
        user = decode_clerk_jwt(_token())

        assert user.user_id == "user_xyz"
        assert user.email == "xyz@example.com"

    def test_non_string_email_dropped(self, clerk):
        user = decode_clerk_jwt(_token(email=["a@b.c"]))
        assert user.email is None

    def test_expired_token(self, clerk):
        now = int(time.time())

        with pytest.raises(HTTPException) as exc_info:
            decode_clerk_jwt(_token(iat=now - 600, nbf=now - 600, exp=now - 300))

        assert exc_info.value.status_code == 401
        assert "expired" in exc_info.value.detail.lower()

    def test_missing_sub(self, clerk):
        with pytest.raises(HTTPException) as exc_info:
            decode_clerk_jwt(_token(sub=None))

        assert exc_info.value.status_code == 401
        assert "sub" in exc_info.value.detail.lower()


class TestRequireAuth:
    async def test_valid_token_sets_request_state(self, clerk):
        request = MagicMock()

        user = await require_auth(request=request, credentials=_creds(_token()))

        assert user.user_id == "user_xyz"
        assert request.state.user_id == "user_xyz"

    async def test_missing_credentials_is_401(self):
        with pytest.raises(HTTPException) as exc_info:
            await require_auth(request=MagicMock(), credentials=None)
        assert exc_info.value.status_code == 401

    async def test_garbage_token_is_401(self, clerk):
        with pytest.raises(HTTPException) as exc_info:
            await require_auth(request=MagicMock(), credentials=_creds("garbage.token.here"))
        assert exc_info.value.status_code == 401

    async def test_foreign_origin_is_401(self, clerk):
        with pytest.raises(HTTPException) as exc_info:
            await require_auth(request=MagicMock(), credentials=_creds(_token(azp="https://evil.example")))
        assert "origin" in exc_info.value.detail.lower()

    async def test_foreign_issuer_is_401(self, clerk):
        with pytest.raises(HTTPException) as exc_info:
            await require_auth(request=MagicMock(), credentials=_creds(_token(iss="https://evil.example")))
        assert "issuer" in exc_info.value.detail.lower()


class TestOptionalAuth:
    async def test_no_credentials_is_anonymous(self):
        assert await optional_auth(request=MagicMock(), credentials=None) is None

    async def test_bad_token_is_anonymous(self, clerk):
        assert await optional_auth(request=MagicMock(), credentials=_creds("garbage.token.here")) is None

    async def test_valid_token_returns_user(self, clerk):
        user = await optional_auth(request=MagicMock(), credentials=_creds(_token()))
        assert user is not None
        assert user.user_id == "user_xyz"
