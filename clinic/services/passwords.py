"""Salted one-way hashing of identity secrets."""
from __future__ import annotations

from django.contrib.auth.hashers import BCryptPasswordHasher, check_password, make_password


class HashingError(Exception):
    """The hashing primitive failed (bad input for bcrypt, missing library...)."""


class BCryptTenRoundsHasher(BCryptPasswordHasher):
    """bcrypt with the cost factor pinned to 10 rounds.

    Keeps the ``bcrypt`` algorithm name so hashes stay readable by any
    stock bcrypt verifier.
    """
    rounds = 10


# bcrypt only reads the first 72 bytes of a secret.
MAX_SECRET_BYTES = 72


def hash_secret(secret: str) -> str:
    if isinstance(secret, str) and len(secret.encode("utf-8")) > MAX_SECRET_BYTES:
        raise HashingError(f"secret is longer than {MAX_SECRET_BYTES} bytes")
    try:
        return make_password(secret)
    except (TypeError, ValueError) as exc:
        raise HashingError(str(exc)) from exc


def verify_secret(secret: str, hashed: str | None) -> bool:
    """Return True when ``secret`` matches ``hashed``; never raises on mismatch."""
    if not secret or not hashed:
        return False
    if isinstance(secret, str) and len(secret.encode("utf-8")) > MAX_SECRET_BYTES:
        return False
    try:
        return check_password(secret, hashed)
    except ValueError:
        # bcrypt 5 refuses secrets longer than 72 bytes; such a secret never matched
        return False
