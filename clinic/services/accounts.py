"""
Registration and login of identities.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from django.conf import settings
from django.db import IntegrityError, transaction

from clinic.exceptions import ConflictError, Forbidden, InvalidCredentials, ValidationError
from clinic.models import Role, User
from clinic.services import tokens
from clinic.services.passwords import HashingError, hash_secret, verify_secret

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginResult:
    token: str
    expires_in: int
    identity: User


_TIMING_HASH: str | None = None


def _timing_hash() -> str:
    global _TIMING_HASH
    if _TIMING_HASH is None:
        _TIMING_HASH = hash_secret("timing-equalizer")
    return _TIMING_HASH


def _requested_role(role) -> Role:
    if role in (None, ""):
        return Role.PATIENT
    try:
        requested = Role(role)
    except ValueError:
        raise ValidationError(f"Unknown role: {role}")
    if requested.value not in settings.SELF_REGISTRATION_ROLES:
        raise Forbidden(f"Self-registration as {requested.value} is not allowed")
    return requested


def register_identity(*, name: str, email: str, secret: str, role=None) -> User:
    """Create an identity with a hashed secret.

    Raises ConflictError when the email is already registered.
    """
    requested = _requested_role(role)
    email = email.strip()
    if User.objects.filter(email__iexact=email).exists():
        raise ConflictError("User already exists")

    identity = User(username=email, email=email, name=name.strip(), role=requested.value)
    try:
        identity.password = hash_secret(secret)
    except HashingError as exc:
        raise ValidationError(f"Password cannot be used: {exc}")
    try:
        with transaction.atomic():
            identity.save()
    except IntegrityError:
        # lost a race with a concurrent registration of the same email
        raise ConflictError("User already exists")
    logger.info("Registered identity %s as %s", identity.pk, identity.role)
    return identity


def authenticate_identity(*, email: str, secret: str) -> LoginResult:
    """Check the credentials and issue a session token.

    Unknown email, wrong secret and disabled identity all raise the same
    InvalidCredentials error.
    """
    identity = User.objects.filter(email__iexact=email.strip()).first()
    if identity is None:
        # Run the hasher once so unknown emails take as long as bad passwords.
        verify_secret(secret, _timing_hash())
        logger.info("Login failed: unknown email")
        raise InvalidCredentials()
    if not verify_secret(secret, identity.password) or not identity.is_active:
        logger.info("Login failed for identity %s", identity.pk)
        raise InvalidCredentials()

    token = tokens.issue(identity.pk, identity.role)
    logger.info("Identity %s logged in as %s", identity.pk, identity.role)
    return LoginResult(token=token, expires_in=tokens.lifetime_seconds(), identity=identity)
