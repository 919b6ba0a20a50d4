"""ORM models for the shared pharmacy: products and the refill audit log."""

from datetime import datetime
from typing import Optional

from sqlalchemy import Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.db.base import Base, CreatedAtMixin, utcnow


class Product(Base, CreatedAtMixin):
    """A physical stock pool; quantity may go negative."""

    __tablename__ = "inventory"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    quantity: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    threshold: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    pack_size: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    unit: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)


class InventoryLogRecord(Base):
    """Refill event. Insert-only."""

    __tablename__ = "inventory_logs"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    inventory_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    product_name: Mapped[str] = mapped_column(String(256), nullable=False)
    amount_added: Mapped[float] = mapped_column(Float, nullable=False)
    packs_added: Mapped[int] = mapped_column(Integer, nullable=False)
    date: Mapped[datetime] = mapped_column(nullable=False, default=utcnow, index=True)
