"""
Error taxonomy for the credential and session subsystem.

Every auth failure is an AuthError carrying the HTTP status and the stable
error code used in the JSON envelope (see api/errors.py). The message is the
public one; `detail` is for logs only and never leaves the server.
"""
from __future__ import annotations


class AuthError(Exception):
    status = 401
    code = "UNAUTHORIZED"
    message = "Unauthorized"

    def __init__(self, message: str | None = None, detail: str | None = None):
        if message is not None:
            self.message = message
        self.detail = detail
        super().__init__(self.message)


class InvalidCredentials(AuthError):
    code = "INVALID_CREDENTIALS"
    message = "Incorrect email or password"


class Unauthorized(AuthError):
    """Umbrella surfaced to clients for any token failure."""
    message = "Invalid or expired token"


class MissingHeader(Unauthorized):
    code = "MISSING_HEADER"
    message = "Missing credentials header"


class MalformedHeader(Unauthorized):
    code = "MALFORMED_HEADER"
    message = "Malformed Authorization header"


class AccessTokenError(Unauthorized):
    """Base for access token validation failures (internal distinctions)."""


class InvalidSignature(AccessTokenError):
    pass


class MissingClaim(AccessTokenError):
    pass


class WrongIssuer(AccessTokenError):
    pass


class TokenExpired(AccessTokenError):
    pass


class MalformedSubject(AccessTokenError):
    pass


class RefreshTokenNotFound(AuthError):
    status = 404
    code = "NOT_FOUND"
    message = "Refresh token not found"


class RefreshTokenRevokedOrExpired(AuthError):
    message = "Refresh token revoked or expired"


class Forbidden(AuthError):
    status = 403
    code = "FORBIDDEN"
    message = "Forbidden"


class StoreError(Exception):
    """Backing store failure. Not an authentication failure."""
