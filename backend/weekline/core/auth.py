"""Clerk session tokens for the Weekline API.

Two dependencies sit on top of one verifier:

* ``require_auth`` for reads and exports, which answer 401 without an identity
* ``optional_auth`` for mutations, which treat a missing or bad token as an
  anonymous caller so the action degrades to a silent no-op
"""

import base64
import binascii
from dataclasses import dataclass, field
from functools import lru_cache

import jwt as pyjwt
from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jwt import PyJWKClient

from weekline.core.config import get_settings

_bearer_scheme = HTTPBearer(auto_error=False)

REQUIRED_CLAIMS = ["sub", "exp", "nbf", "iat"]
JWKS_CACHE_SECONDS = 300


@dataclass(frozen=True)
class CurrentUser:
    """Verified caller. ``user_id`` is the Clerk ``sub`` and scopes every row."""

    user_id: str
    email: str | None = None
    claims: dict = field(default_factory=dict)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=401, detail=detail)


def _extract_frontend_api_domain(pk: str) -> str:
    """Domain encoded in a ``pk_(test|live)_<base64("<domain>$")>`` publishable key."""
    prefix, _, rest = pk.partition("_")
    _env, _, encoded = rest.partition("_")
    if prefix != "pk" or not encoded:
        raise ValueError("Invalid Clerk publishable key format")

    try:
        domain = base64.b64decode(encoded + "==").decode("utf-8").rstrip("$")
    except (binascii.Error, UnicodeDecodeError) as exc:
        raise ValueError("Invalid Clerk publishable key: cannot decode") from exc

    if not domain:
        raise ValueError("Invalid Clerk publishable key: empty domain")
    return domain


@lru_cache
def get_jwks_client() -> PyJWKClient:
    domain = _extract_frontend_api_domain(get_settings().clerk_publishable_key)
    return PyJWKClient(
        f"https://{domain}/.well-known/jwks.json",
        cache_keys=True,
        lifespan=JWKS_CACHE_SECONDS,
    )


def decode_clerk_jwt(token: str) -> CurrentUser:
    """Check the RS256 signature and time claims; raise 401 on any failure."""
    try:
        signing_key = get_jwks_client().get_signing_key_from_jwt(token)
        payload = pyjwt.decode(
            token,
            signing_key.key,
            algorithms=["RS256"],
            options={"require": REQUIRED_CLAIMS},
        )
    except pyjwt.ExpiredSignatureError:
        raise _unauthorized("Token expired")
    except pyjwt.ImmatureSignatureError:
        raise _unauthorized("Token not yet valid (immature)")
    except pyjwt.MissingRequiredClaimError as exc:
        raise _unauthorized(f"Missing required claim: {exc}")
    except pyjwt.InvalidTokenError as exc:
        raise _unauthorized(f"Invalid token: {exc}")

    if not payload.get("sub"):
        raise _unauthorized("Token missing sub claim")

    email = payload.get("email")
    return CurrentUser(
        user_id=payload["sub"],
        email=email if isinstance(email, str) else None,
        claims=payload,
    )


def _verify_claims(user: CurrentUser) -> None:
    """Issuer must be our Clerk instance; ``azp`` must be an allowed origin."""
    settings = get_settings()

    try:
        expected_issuer = f"https://{_extract_frontend_api_domain(settings.clerk_publishable_key)}"
    except ValueError as exc:
        raise HTTPException(status_code=500, detail="Authentication is misconfigured") from exc

    if user.claims.get("iss") != expected_issuer:
        raise _unauthorized("Invalid issuer (iss mismatch)")

    azp = user.claims.get("azp")
    if not azp:
        raise _unauthorized("Missing azp claim")
    if azp not in settings.clerk_allowed_origins:
        raise _unauthorized("Unauthorized origin (azp mismatch)")


def _authenticate(request: Request, token: str) -> CurrentUser:
    user = decode_clerk_jwt(token)
    _verify_claims(user)
    # error handlers log this alongside the debug_id
    request.state.user_id = user.user_id
    return user


async def require_auth(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
) -> CurrentUser:
    """Dependency for reads and exports.

    Usage::

        @router.get("/week")
        async def get_week(user: CurrentUser = Depends(require_auth)):
            ...
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")
    return _authenticate(request, credentials.credentials)


async def optional_auth(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
) -> CurrentUser | None:
    """Dependency for mutations: ``None`` instead of 401."""
    if credentials is None:
        return None
    try:
        return _authenticate(request, credentials.credentials)
    except HTTPException:
        return None
