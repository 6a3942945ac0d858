"""
Session orchestration: login, authenticate, refresh and revoke.

The service holds no per-session state. An access token is Active until its
exp, a refresh token turns it Active again, and revoking the refresh token
terminates the session for good.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import timedelta

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from models.user import User
from services.refresh_tokens import REFRESH_TOKEN_EXPIRES, RefreshTokenStore
from utils.exceptions import (
    AccessTokenError,
    InvalidCredentials,
    RefreshTokenNotFound,
    RefreshTokenRevokedOrExpired,
    StoreError,
    Unauthorized,
)
from utils.headers import get_bearer_token
from utils.security import (
    ACCESS_TOKEN_MAX_SECONDS,
    cap_ttl,
    create_access_token,
    validate_access_token,
    verify_password,
)

logger = logging.getLogger(__name__)

EXTENSION_KEY = "session_service"


@dataclass(frozen=True)
class LoginResult:
    access_token: str
    refresh_token: str
    expires_in: int
    user: User


class SessionService:
    def __init__(
        self,
        storage,
        secret: str,
        access_ttl_ceiling: int = ACCESS_TOKEN_MAX_SECONDS,
        refresh_ttl: timedelta = REFRESH_TOKEN_EXPIRES,
        refreshed_access_ttl: int = ACCESS_TOKEN_MAX_SECONDS,
    ):
        if not secret:
            raise ValueError("a signing secret is required")
        self.storage = storage
        self.secret = secret
        self.access_ttl_ceiling = access_ttl_ceiling
        self.refreshed_access_ttl = refreshed_access_ttl
        self.refresh_tokens = RefreshTokenStore(storage, ttl=refresh_ttl)

    def login(self, email: str, password: str, requested_ttl_seconds: int | None = None) -> LoginResult:
        """
        Check email/password and open a session.
        Unknown email and wrong password raise the same InvalidCredentials.
        """
        try:
            user = self.storage.find_user_by_email(email)
        except SQLAlchemyError as exc:
            raise StoreError("could not look up user") from exc
        if user is None or not verify_password(user.password_hash, password):
            logger.info("login rejected")
            raise InvalidCredentials()

        ttl = cap_ttl(requested_ttl_seconds, self.access_ttl_ceiling)
        access_token = create_access_token(user.id, self.secret, ttl, max_ttl=self.access_ttl_ceiling)
        refresh_token = self.refresh_tokens.issue(user.id)
        logger.info("user %s logged in", user.id)
        return LoginResult(access_token, refresh_token, ttl, user)

    def authenticate(self, headers) -> uuid.UUID:
        token = get_bearer_token(headers)
        try:
            return validate_access_token(token, self.secret)
        except AccessTokenError as exc:
            logger.debug("access token rejected: %s (%s)", type(exc).__name__, exc.detail)
            raise Unauthorized() from exc

    def refresh(self, headers) -> str:
        """Mint a fresh access token from a refresh token. The refresh token is kept as is."""
        token = get_bearer_token(headers)
        try:
            user_id = self.refresh_tokens.resolve(token)
        except (RefreshTokenNotFound, RefreshTokenRevokedOrExpired) as exc:
            logger.debug("refresh rejected: %s", type(exc).__name__)
            raise Unauthorized("Couldn't get user for refresh token") from exc
        return create_access_token(
            user_id, self.secret, self.refreshed_access_ttl, max_ttl=self.refreshed_access_ttl
        )

    def revoke(self, headers) -> None:
        token = get_bearer_token(headers)
        self.refresh_tokens.revoke(token)


def get_session_service() -> SessionService:
    """The SessionService bound to the current Flask app by create_app()."""
    return current_app.extensions[EXTENSION_KEY]
