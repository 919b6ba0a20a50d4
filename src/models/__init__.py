"""Pydantic models for the adherence tracker."""

from src.models.medication import (
    Frequency,
    InventoryItem,
    InventoryLog,
    Medication,
    UserID,
    coerce_number,
)
from src.models.stats import (
    CalendarDay,
    DayStats,
    GroupEntry,
    HistoryEntry,
    InventoryGroup,
    PeriodStats,
    PlanEntry,
    ShoppingListItem,
    StockLevel,
)

__all__ = [
    "Frequency",
    "InventoryItem",
    "InventoryLog",
    "Medication",
    "UserID",
    "coerce_number",
    "CalendarDay",
    "DayStats",
    "GroupEntry",
    "HistoryEntry",
    "InventoryGroup",
    "PeriodStats",
    "PlanEntry",
    "ShoppingListItem",
    "StockLevel",
]
