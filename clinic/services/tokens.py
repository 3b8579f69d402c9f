"""
Session token issue and verification.

Tokens are simplejwt access tokens carrying the identity id and the role
it had at issuance. They are stateless: nothing is persisted and there
is no revocation list, so a token stays valid until ``exp`` even if the
identity's role or password changes in the meantime.
"""
from __future__ import annotations

import time
from dataclasses import dataclass

import jwt
from rest_framework_simplejwt.exceptions import TokenError as SimpleJWTTokenError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import AccessToken

from clinic.models import Role

ROLE_CLAIM = "role"


class TokenError(Exception):
    """Base class for token verification failures."""


class TokenInvalid(TokenError):
    """Bad signature, malformed token or unusable claims."""


class TokenExpired(TokenError):
    """Signature is valid but the token is past its expiry."""


@dataclass(frozen=True)
class TokenClaims:
    identity_id: int
    role: Role


def issue(identity_id: int, role: Role | str) -> str:
    token = AccessToken()
    token[api_settings.USER_ID_CLAIM] = identity_id
    token[ROLE_CLAIM] = Role(role).value
    return str(token)


def lifetime_seconds() -> int:
    return int(api_settings.ACCESS_TOKEN_LIFETIME.total_seconds())


def _signature_ok_but_expired(raw: str) -> bool:
    try:
        payload = jwt.decode(
            raw,
            api_settings.SIGNING_KEY,
            algorithms=[api_settings.ALGORITHM],
            options={"verify_exp": False, "verify_aud": False},
        )
    except jwt.InvalidTokenError:
        return False
    exp = payload.get("exp")
    return isinstance(exp, (int, float)) and exp <= time.time()


def verify(raw: str) -> TokenClaims:
    """Return the claims of a valid token.

    Raises TokenExpired for a genuine token past its expiry and
    TokenInvalid for anything else that fails verification.
    """
    try:
        token = AccessToken(raw)
    except SimpleJWTTokenError as exc:
        if _signature_ok_but_expired(raw):
            raise TokenExpired("Token has expired") from exc
        raise TokenInvalid("Invalid token") from exc

    identity_id = token.get(api_settings.USER_ID_CLAIM)
    if identity_id is None:
        raise TokenInvalid("Token has no identity claim")
    try:
        role = Role(token.get(ROLE_CLAIM))
    except ValueError as exc:
        raise TokenInvalid("Token has no valid role claim") from exc
    return TokenClaims(identity_id=identity_id, role=role)
