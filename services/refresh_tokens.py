"""
Refresh token persistence.

Tokens are opaque random strings stored one row per token. Revocation sets
revoked_at and keeps the row. Resolving a token never rotates it.
"""
from __future__ import annotations

import logging
import uuid
from datetime import timedelta

from sqlalchemy.exc import SQLAlchemyError

from models.base_model import utcnow
from models.refresh_token import RefreshToken
from utils.exceptions import RefreshTokenNotFound, RefreshTokenRevokedOrExpired, StoreError
from utils.security import make_refresh_token

logger = logging.getLogger(__name__)

REFRESH_TOKEN_EXPIRES = timedelta(days=60)


class RefreshTokenStore:
    def __init__(self, storage, ttl: timedelta = REFRESH_TOKEN_EXPIRES):
        self.storage = storage
        self.ttl = ttl

    def issue(self, user_id) -> str:
        token = make_refresh_token()
        now = utcnow()
        row = RefreshToken(
            token=token,
            user_id=str(user_id),
            created_at=now,
            updated_at=now,
            expires_at=now + self.ttl,
            revoked_at=None,
        )
        try:
            self.storage.new(row)
            self.storage.save()
        except SQLAlchemyError as exc:
            raise StoreError("could not persist refresh token") from exc
        logger.info("issued refresh token for user %s", user_id)
        return token

    def _find(self, token: str) -> RefreshToken:
        try:
            row = self.storage.get(RefreshToken, token)
        except SQLAlchemyError as exc:
            raise StoreError("could not read refresh token") from exc
        if row is None:
            raise RefreshTokenNotFound()
        return row

    def resolve(self, token: str) -> uuid.UUID:
        """Return the owner of a usable token."""
        row = self._find(token)
        if not row.is_usable(utcnow()):
            raise RefreshTokenRevokedOrExpired()
        user = row.user
        if user is None:
            raise RefreshTokenNotFound()
        return uuid.UUID(user.id)

    def revoke(self, token: str) -> None:
        """Mark the token revoked. Revoking an already revoked token is a no-op."""
        row = self._find(token)
        if row.revoked_at is not None:
            logger.debug("refresh token for user %s already revoked", row.user_id)
            return
        now = utcnow()
        row.revoked_at = now
        row.updated_at = now
        try:
            self.storage.new(row)
            self.storage.save()
        except SQLAlchemyError as exc:
            raise StoreError("could not revoke refresh token") from exc
        logger.info("revoked refresh token for user %s", row.user_id)
