"""
Error taxonomy and the unified API exception handler.

Every error leaving a view is rendered as
``{"ok": false, "code": <code>, "error": <message>}`` so that clients
can branch on ``code`` and show ``error`` to users.
"""
from __future__ import annotations

import logging
from typing import Iterable, Mapping

from rest_framework import exceptions as drf_exceptions
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response

logger = logging.getLogger(__name__)


class ApiError(APIException):
    """Base class for errors that carry their own HTTP status and code."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Request failed"
    default_code = "api_error"


class Unauthenticated(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Authentication required"
    default_code = "unauthenticated"


class TokenMissing(Unauthenticated):
    default_detail = "Access denied. No token provided."


class Forbidden(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Access denied. Insufficient permissions."
    default_code = "forbidden"


class ValidationError(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "All fields are required!"
    default_code = "validation_error"


class InvalidCredentials(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid email or password"
    default_code = "invalid_credentials"


class ConflictError(ApiError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Resource already exists"
    default_code = "conflict"


class NotFoundError(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"
    default_code = "not_found"


class InternalError(ApiError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal server error"
    default_code = "internal_error"


def require_fields(data: Mapping, fields: Iterable[str], message: str | None = None) -> None:
    """Raise ValidationError unless every field is present and non-empty."""
    if not isinstance(data, Mapping):
        raise ValidationError(message)
    for field in fields:
        value = data.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError(message)


# DRF's own exceptions mapped onto the clinic codes.
_DRF_CODES = (
    (drf_exceptions.NotAuthenticated, TokenMissing.default_code),
    (drf_exceptions.AuthenticationFailed, Unauthenticated.default_code),
    (drf_exceptions.PermissionDenied, Forbidden.default_code),
    (drf_exceptions.NotFound, NotFoundError.default_code),
    (drf_exceptions.ValidationError, ValidationError.default_code),
    (drf_exceptions.ParseError, ValidationError.default_code),
)


def _code_for(exc: Exception) -> str:
    if isinstance(exc, ApiError):
        return exc.default_code
    for exc_type, code in _DRF_CODES:
        if isinstance(exc, exc_type):
            return code
    return getattr(exc, "default_code", "api_error")


def api_exception_handler(exc, context):
    # rest_framework.views imports the authentication classes from settings,
    # which import this module; resolve it at call time.
    from rest_framework.views import exception_handler as drf_exception_handler

    resp = drf_exception_handler(exc, context)
    if resp is None:
        view = context.get("view")
        logger.exception("Unhandled error in %s", type(view).__name__ if view else "view", exc_info=exc)
        return Response(
            {"ok": False, "code": InternalError.default_code, "error": str(InternalError.default_detail)},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    # normalize response
    if isinstance(exc, drf_exceptions.NotAuthenticated):
        detail = str(TokenMissing.default_detail)
    elif isinstance(resp.data, dict) and set(resp.data) == {"detail"}:
        detail = resp.data["detail"]
    else:
        detail = resp.data
    resp.data = {"ok": False, "code": _code_for(exc), "error": detail}
    return resp
