"""
Role based access control.

Routes declare the set of roles allowed to call them. Function views use
``allow_roles(...)`` inside ``@permission_classes``; class views built on
``RoleGatedAPIView`` map each HTTP method to its own role set.
"""
from __future__ import annotations

from typing import Iterable, Mapping

from rest_framework.permissions import BasePermission
from rest_framework.views import APIView

from clinic.exceptions import Forbidden
from clinic.models import Role

ADMIN_ONLY = frozenset({Role.ADMIN})
STAFF_ROLES = frozenset({Role.ADMIN, Role.DOCTOR})
ALL_ROLES = frozenset(Role)


def is_role_allowed(role, allowed_roles: Iterable) -> bool:
    try:
        return Role(role) in {Role(r) for r in allowed_roles}
    except ValueError:
        return False


def _principal_role(request):
    user = getattr(request, "user", None)
    if not (user and user.is_authenticated):
        return None
    return getattr(user, "role", None)


class HasRole(BasePermission):
    """Allow authenticated callers whose role is in ``allowed_roles``."""
    allowed_roles: frozenset = frozenset()
    message = Forbidden.default_detail

    def __init__(self, allowed_roles: Iterable | None = None):
        if allowed_roles is not None:
            self.allowed_roles = frozenset(allowed_roles)

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        role = _principal_role(request)
        return role is not None and is_role_allowed(role, self.allowed_roles)


def allow_roles(*roles) -> type[HasRole]:
    """Build a HasRole subclass for ``@permission_classes``."""
    names = "".join(Role(r).value for r in roles)
    return type(f"Allow{names}", (HasRole,), {"allowed_roles": frozenset(Role(r) for r in roles)})


class IsAuthenticatedPrincipal(BasePermission):
    """Any caller holding a valid token, whatever the role."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return _principal_role(request) is not None


class RoleGatedAPIView(APIView):
    """APIView whose ``allowed_roles`` maps HTTP methods to role sets.

    Methods missing from the mapping are refused for every role.
    """
    allowed_roles: Mapping[str, Iterable] = {}

    def get_permissions(self):
        method = self.request.method.upper()
        if method == "HEAD":
            method = "GET"
        return [HasRole(self.allowed_roles.get(method, ()))]
