"""Domain records: medications, inventory products, refill audit entries."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Literal, Optional

from pydantic import BaseModel, field_validator


class UserID(str, Enum):
    """The two household members sharing one data store."""

    PAOLO = "paolo"
    BARBARA = "barbara"


class Frequency(str, Enum):
    """DAILY, or one of the two complementary alternate-day shifts."""

    DAILY = "daily"
    ALTERNATE_A = "alternate_days"  # even days since the epoch
    ALTERNATE_B = "alternate_days_odd"  # odd days since the epoch


def coerce_number(value: Any, default: float = 0) -> float:
    """Turn form/store input into a number; anything non-numeric becomes `default`."""
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return value
    try:
        text = str(value).strip().replace(",", ".")
        number = float(text)
    except (TypeError, ValueError):
        return default
    if number != number or number in (float("inf"), float("-inf")):
        return default
    return int(number) if number.is_integer() else number


class Medication(BaseModel):
    """One prescribed item for one user.

    Stock linkage fields are checked in priority order by the inventory resolver:
    product_id, then shared_id, then a private stock_quantity. When the record is
    linked to a product, stock_quantity/stock_threshold are a display projection of
    the product and never written back as authoritative.
    """

    id: str
    user_id: UserID
    name: str
    dosage: str = ""
    timing: str = ""
    frequency: Frequency = Frequency.DAILY
    notes: Optional[str] = None
    icon: Literal["pill", "drop", "clock", "sachet"] = "pill"

    stock_quantity: Optional[float] = None
    stock_threshold: Optional[float] = None
    is_archived: bool = False
    shared_id: Optional[str] = None
    product_id: Optional[str] = None

    model_config = {"extra": "ignore"}

    @field_validator("frequency", mode="before")
    @classmethod
    def _unknown_frequency_is_daily(cls, value: Any) -> Any:
        if isinstance(value, Frequency):
            return value
        try:
            return Frequency(str(value))
        except ValueError:
            return Frequency.DAILY

    @field_validator("icon", mode="before")
    @classmethod
    def _default_icon(cls, value: Any) -> Any:
        return value if value in ("pill", "drop", "clock", "sachet") else "pill"

    @field_validator("is_archived", mode="before")
    @classmethod
    def _missing_archive_flag(cls, value: Any) -> Any:
        return bool(value) if value is not None else False

    @field_validator("stock_quantity", "stock_threshold", mode="before")
    @classmethod
    def _coerce_stock(cls, value: Any) -> Any:
        if value is None or value == "":
            return None
        return coerce_number(value)

    @field_validator("shared_id", "product_id", mode="before")
    @classmethod
    def _blank_link_is_none(cls, value: Any) -> Any:
        if value is None:
            return None
        text = str(value).strip()
        return text or None


class InventoryItem(BaseModel):
    """A physical stock pool (product) that medications can link to."""

    id: str
    name: str
    quantity: float = 0
    threshold: float = 0
    pack_size: Optional[int] = None
    unit: Optional[str] = None

    model_config = {"extra": "ignore"}

    @field_validator("quantity", "threshold", mode="before")
    @classmethod
    def _coerce_amounts(cls, value: Any) -> Any:
        return coerce_number(value)

    @field_validator("pack_size", mode="before")
    @classmethod
    def _coerce_pack_size(cls, value: Any) -> Any:
        if value is None or value == "":
            return None
        return int(coerce_number(value))


class InventoryLog(BaseModel):
    """Append-only refill audit entry."""

    id: Optional[int] = None
    inventory_id: str
    product_name: str
    amount_added: float
    packs_added: int
    date: datetime

    model_config = {"frozen": True, "extra": "ignore"}

    @field_validator("date", mode="after")
    @classmethod
    def _naive_is_utc(cls, value: datetime) -> datetime:
        # SQLite hands back naive timestamps; entries compare against aware clock times.
        return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)
