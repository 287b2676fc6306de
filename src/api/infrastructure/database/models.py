"""SQLAlchemy declarative base and the timestamp mixin shared by all tables."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utc_now() -> datetime:
    """Timestamp default evaluated at INSERT/UPDATE time.

    A named function rather than a lambda so SQLAlchemy treats it as a
    context-free Python-side default.
    """
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Declarative base for the users, role assignment and reservation models."""


class TimestampMixin:
    """Adds timezone-aware ``created_at`` and ``updated_at`` columns.

    Callers may pass explicit values (the reservation store does, so the
    domain clock stays authoritative); otherwise UTC now is used.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        insert_default=_utc_now,
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        insert_default=_utc_now,
        onupdate=_utc_now,
        nullable=False,
    )
