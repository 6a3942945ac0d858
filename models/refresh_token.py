"""
RefreshToken model: opaque long lived tokens used to mint new access tokens.
Fields:
- token (primary key) - 64 hex chars
- user_id (String(36)) - FK to users.id
- created_at, updated_at, expires_at
- revoked_at - NULL while the token is active; rows are never deleted on revoke
"""
from datetime import datetime

from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from models.base_model import Base, TimestampMixin, as_naive_utc


class RefreshToken(TimestampMixin, Base):
    __tablename__ = "refresh_tokens"

    token = Column(String(64), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    revoked_at = Column(DateTime(timezone=True), nullable=True)

    user = relationship("User", back_populates="refresh_tokens")

    def is_usable(self, now: datetime) -> bool:
        """Usable iff never revoked and `now` is before expires_at (naive UTC)."""
        return self.revoked_at is None and now < as_naive_utc(self.expires_at)

    def __repr__(self):
        return f"<RefreshToken user={self.user_id} revoked={self.revoked_at is not None}>"
