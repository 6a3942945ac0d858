#!/usr/bin/env python3
"""
Shared SQLAlchemy base and mixins for the Chirpy API.

- TimestampMixin: created_at / updated_at and kwargs initialization
- BaseModel: adds a UUID String(36) primary key
- timestamps are naive UTC; utcnow() is the single source for "now"

Tables whose key is not a generated UUID (refresh_tokens) use TimestampMixin
directly instead of BaseModel.
"""

from __future__ import annotations

from datetime import datetime, timezone
import uuid

from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import declarative_base

# Declarative base for all models
Base = declarative_base()


def _uuid_str() -> str:
    """Return a canonical UUIDv4 string (36 chars, with hyphens)."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """Current time as naive UTC, the form stored in every DateTime column."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def as_naive_utc(value: datetime) -> datetime:
    """Normalize a value read back from the database (Postgres returns aware datetimes)."""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class TimestampMixin:
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    def __init__(self, *args, **kwargs):
        """Allow attribute initialization via kwargs without requiring a session here."""
        for key, value in kwargs.items():
            if key != "__class__":
                setattr(self, key, value)


class BaseModel(TimestampMixin):
    """Timestamped model with a UUID string primary key."""

    id = Column(String(36), primary_key=True, default=_uuid_str, nullable=False)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # Ensure an id exists if caller passed none
        if getattr(self, "id", None) is None:
            self.id = _uuid_str()

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.id}>"
