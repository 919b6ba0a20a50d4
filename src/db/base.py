"""SQLAlchemy declarative base and shared column helpers."""

from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class CreatedAtMixin:
    """Mixin adding created_at (medications are listed in creation order)."""

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)
