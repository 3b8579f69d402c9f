"""
Bearer token authentication for the clinic API.

The token is verified on its own: the identity attached to the request
is rebuilt from the token claims and the database is not consulted.
Kept apart from the views so that DRF can import it from settings
without pulling in the URL configuration.
"""
from __future__ import annotations

from dataclasses import dataclass

from rest_framework import authentication

from clinic.exceptions import Unauthenticated
from clinic.models import Role
from clinic.services import tokens


@dataclass(frozen=True)
class Principal:
    """Authenticated caller as described by a verified token."""
    identity_id: int
    role: Role

    is_authenticated = True
    is_anonymous = False

    @property
    def pk(self) -> int:
        # Used by DRF's UserRateThrottle as the cache ident.
        return self.identity_id

    def __str__(self) -> str:
        return f"{self.role}:{self.identity_id}"


class BearerTokenAuthentication(authentication.BaseAuthentication):
    """``Authorization: Bearer <token>`` authentication.

    A request without the header (or with another scheme) is left
    anonymous, which the permission layer turns into a 401.
    """

    keyword = "Bearer"

    def authenticate(self, request):
        header = authentication.get_authorization_header(request).split()
        if not header or header[0].lower() != self.keyword.lower().encode():
            return None
        if len(header) != 2:
            raise Unauthenticated("Invalid token header")
        try:
            raw = header[1].decode()
        except UnicodeError:
            raise Unauthenticated("Invalid token header")

        try:
            claims = tokens.verify(raw)
        except tokens.TokenExpired:
            raise Unauthenticated("Token has expired")
        except tokens.TokenInvalid:
            raise Unauthenticated("Invalid token")
        return Principal(identity_id=claims.identity_id, role=claims.role), claims

    def authenticate_header(self, request) -> str:
        return f'{self.keyword} realm="api"'
