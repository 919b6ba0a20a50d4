"""ORM models for medications and dose logs."""

from datetime import date, datetime
from typing import Optional

from sqlalchemy import Boolean, Date, Float, String, Text, UniqueConstraint, false, true
from sqlalchemy.orm import Mapped, mapped_column

from src.db.base import Base, CreatedAtMixin, utcnow

# Columns every deployment has; the rest were added later and may be missing in older stores.
BASE_COLUMNS = ("id", "user_id", "name", "dosage", "timing", "frequency", "notes", "icon")
EXTENDED_COLUMNS = ("stock_quantity", "stock_threshold", "is_archived", "shared_id", "product_id")


class MedicationRecord(Base, CreatedAtMixin):
    """One medication row. product_id is a loose reference to inventory.id (no FK, products can be deleted)."""

    __tablename__ = "medications"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    dosage: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    timing: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    frequency: Mapped[str] = mapped_column(String(32), nullable=False, default="daily")
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    icon: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)

    # No python-side defaults below: reduced-column inserts must not mention these columns.
    stock_quantity: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    stock_threshold: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    is_archived: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=false())
    shared_id: Mapped[Optional[str]] = mapped_column(String(256), nullable=True, index=True)
    product_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)


class DoseLog(Base):
    """A dose taken on one calendar day. Unmarking deletes the row."""

    __tablename__ = "dose_logs"
    __table_args__ = (UniqueConstraint("date", "medication_id", name="uq_dose_logs_date_medication"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    day: Mapped[date] = mapped_column("date", Date, nullable=False, index=True)
    medication_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    taken: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=true())
    taken_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)
