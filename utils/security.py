"""
security helpers:
- Argon2 password hashing via argon2-cffi
- HS256 access token creation/validation via PyJWT
- opaque refresh token generation
"""
from __future__ import annotations

import secrets
import uuid
from datetime import datetime, timezone

import jwt
from jwt.utils import base64url_decode, base64url_encode
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

from utils.exceptions import (
    InvalidSignature,
    MalformedSubject,
    MissingClaim,
    TokenExpired,
    WrongIssuer,
)

ACCESS_ISSUER = "chirpy-access"
JWT_ALGORITHM = "HS256"
ACCESS_TOKEN_MAX_SECONDS = 3600
REQUIRED_CLAIMS = ["iss", "sub", "iat", "exp"]
REFRESH_TOKEN_BYTES = 32

# Fixed work factor; changing it only affects hashes created afterwards.
ph = PasswordHasher(time_cost=3, memory_cost=65536, parallelism=4)


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2 (fresh salt on every call)
    """
    return ph.hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    """Verify a plaintext password against a stored Argon2 hash.

    A wrong password and an unreadable stored hash are both just `False`.
    """
    try:
        return ph.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


def make_refresh_token() -> str:
    """64 hex chars from 32 random bytes."""
    return secrets.token_hex(REFRESH_TOKEN_BYTES)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def cap_ttl(requested: int | None, ceiling: int = ACCESS_TOKEN_MAX_SECONDS) -> int:
    """Clamp a caller supplied lifetime; unset, non-positive or too long means the ceiling."""
    if not requested or requested <= 0 or requested > ceiling:
        return ceiling
    return int(requested)


def create_access_token(user_id, secret: str, ttl_seconds: int | None = None,
                        max_ttl: int = ACCESS_TOKEN_MAX_SECONDS) -> str:
    """
    Sign a short lived access token for `user_id`.
    iat/exp keep microseconds so two tokens for the same user issued within
    one second still differ.
    """
    ttl = cap_ttl(ttl_seconds, max_ttl)
    issued_at = _now().timestamp()
    payload = {
        "iss": ACCESS_ISSUER,
        "sub": str(user_id),
        "iat": issued_at,
        "exp": issued_at + ttl,
    }
    return jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)


def _require_canonical_segments(token: str) -> None:
    """Each segment must be the exact base64url encoding of its bytes (no stray padding bits)."""
    for segment in token.split("."):
        try:
            canonical = base64url_encode(base64url_decode(segment)).decode("ascii")
        except ValueError as exc:
            raise InvalidSignature(detail="segment is not base64url") from exc
        if canonical != segment:
            raise InvalidSignature(detail="segment is not canonically encoded")


def validate_access_token(token: str, secret: str) -> uuid.UUID:
    """
    Validate an access token and return the user id it was issued for.
    Checks run in order: signature, claim presence, issuer, expiry, subject.
    """
    _require_canonical_segments(token)
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[JWT_ALGORITHM],
            options={"require": REQUIRED_CLAIMS, "verify_exp": False, "verify_sub": False},
        )
    except jwt.MissingRequiredClaimError as exc:
        raise MissingClaim(detail=str(exc)) from exc
    except jwt.InvalidTokenError as exc:
        raise InvalidSignature(detail=str(exc)) from exc

    if payload["iss"] != ACCESS_ISSUER:
        raise WrongIssuer(detail=f"issuer {payload['iss']!r}")

    exp = payload["exp"]
    if isinstance(exp, bool) or not isinstance(exp, (int, float)):
        raise MissingClaim(detail="exp is not a number")
    if _now().timestamp() >= exp:
        raise TokenExpired(detail="token expired")

    try:
        return uuid.UUID(str(payload["sub"]))
    except ValueError as exc:
        raise MalformedSubject(detail="subject is not a user id") from exc
