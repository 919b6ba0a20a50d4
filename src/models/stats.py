"""Read models produced by the engine: plans, adherence stats, stock views."""

from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, computed_field

from src.models.medication import Medication, UserID

DayStatus = Literal["empty", "pending", "complete", "partial", "missed", "today"]
EntryStatus = Literal["taken", "skipped", "to_take", "pending"]


class PlanEntry(BaseModel):
    """One row of a user's daily plan."""

    medication: Medication
    due: bool
    taken: bool = False
    priority: int


class StockLevel(BaseModel):
    """Current stock of the pool governing one medication."""

    quantity: float
    threshold: float

    @computed_field
    @property
    def is_low(self) -> bool:
        return self.quantity <= self.threshold

    @computed_field
    @property
    def is_out_of_stock(self) -> bool:
        return self.quantity <= 0


class DayStats(BaseModel):
    """Adherence for one calendar day."""

    day: date
    taken: int
    total: int
    percentage: int
    is_empty: bool
    is_future: bool = False
    is_today: bool = False

    @computed_field
    @property
    def is_complete(self) -> bool:
        return self.percentage == 100 and self.taken > 0 and self.total > 0

    @computed_field
    @property
    def status(self) -> DayStatus:
        """Neutral/pending states for empty and future days; a future day is never missed."""
        if self.is_empty:
            return "empty"
        if self.is_future:
            return "pending"
        if self.percentage == 100:
            return "complete"
        if self.percentage > 0:
            return "partial"
        return "today" if self.is_today else "missed"


class CalendarDay(BaseModel):
    """One cell of a Monday-first month grid."""

    stats: DayStats
    in_month: bool


class HistoryEntry(BaseModel):
    """One medication on a selected history day."""

    medication: Medication
    status: EntryStatus


class PeriodStats(BaseModel):
    """Totals over a date range (future days excluded)."""

    start: date
    end: date
    taken: int
    total: int
    percentage: Optional[int]
    complete_days: int
    scheduled_days: int


class ShoppingListItem(BaseModel):
    """One physical item to restock, deduplicated across shared records."""

    key: str
    name: str
    stock_quantity: float
    users: list[UserID]


class GroupEntry(BaseModel):
    medication_id: str
    user_id: UserID
    timing: str
    is_archived: bool


class InventoryGroup(BaseModel):
    """Medications that share one stock pool and one name, listed once."""

    key: str
    name: str
    stock: Optional[StockLevel] = None
    entries: list[GroupEntry]
