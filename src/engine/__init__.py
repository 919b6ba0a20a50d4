"""Adherence engine: schedule, dose log, inventory, aggregation and the tracker over them."""

from src.engine.adherence import AdherenceAggregator, percent
from src.engine.clock import Clock, FixedClock, SystemClock, as_day
from src.engine.dose_log import DoseLogStore, log_key
from src.engine.errors import TrackerError, UnknownMedicationError, UnknownProductError
from src.engine.inventory import (
    InventoryResolver,
    LegacyShared,
    LinkedProduct,
    NoStock,
    PrivateStock,
    StockChange,
    linkage_of,
    shared_slug,
)
from src.engine.schedule import daily_plan, is_due, next_due_date, plan_for_day, timing_priority
from src.engine.tracker import DoseResult, PendingAdjustment, Tracker

__all__ = [
    "AdherenceAggregator",
    "percent",
    "Clock",
    "FixedClock",
    "SystemClock",
    "as_day",
    "DoseLogStore",
    "log_key",
    "TrackerError",
    "UnknownMedicationError",
    "UnknownProductError",
    "InventoryResolver",
    "LegacyShared",
    "LinkedProduct",
    "NoStock",
    "PrivateStock",
    "StockChange",
    "linkage_of",
    "shared_slug",
    "daily_plan",
    "is_due",
    "next_due_date",
    "plan_for_day",
    "timing_priority",
    "DoseResult",
    "PendingAdjustment",
    "Tracker",
]
