"""
SQLAlchemy declarative base and common mixins.

Provides base class for all ORM models and a reusable timestamp mixin.

Dependencies: sqlalchemy
System role: Foundation for all database models
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """
    SQLAlchemy declarative base for ORM model registration.

    All database models inherit from this class to ensure they're
    registered with the metadata and included in table creation.
    """

    pass


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TimestampMixin:
    """
    Mixin providing automatic timestamp tracking.

    Chunk rows are write-once, so updated_at equals created_at unless a
    reconciliation job touches the row.

    Attributes:
        created_at: Row creation timestamp (UTC, immutable)
        updated_at: Last modification timestamp (UTC, auto-updated)
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
        nullable=False,
    )
