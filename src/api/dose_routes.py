"""Dose and adherence routes: today's plan, toggles, monthly history, one history day."""

import calendar
from datetime import date
from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from src.api.deps import get_tracker
from src.engine.tracker import DoseResult, Tracker
from src.models.medication import UserID

router = APIRouter(tags=["doses"])


@router.get("/users/{user}/today")
def today(user: UserID, day: date | None = None, tracker: Tracker = Depends(get_tracker)) -> dict[str, Any]:
    """The user's plan for today (or ?day=), with taken flags, stock and the day's stats."""
    plan = tracker.today_plan(user, day)
    entries = []
    for entry in plan:
        stock = tracker.current_stock(entry.medication.id)
        entries.append(
            {
                **entry.model_dump(mode="json"),
                "stock": stock.model_dump(mode="json") if stock is not None else None,
            }
        )
    return {
        "user": user.value,
        "stats": tracker.day_stats(user, day).model_dump(mode="json"),
        "entries": entries,
    }


@router.post("/doses/{day}/{medication_id}/toggle")
def toggle(day: date, medication_id: str, tracker: Tracker = Depends(get_tracker)) -> DoseResult:
    """Flip taken/not taken; stock moves with it and a low-stock alert may fire."""
    return tracker.toggle_dose(medication_id, day)


@router.get("/users/{user}/history/{year}/{month}")
def history(user: UserID, year: int, month: int, tracker: Tracker = Depends(get_tracker)) -> dict[str, Any]:
    """Monday-first month grid plus the month's totals."""
    if not 1 <= month <= 12:
        raise HTTPException(status_code=422, detail=f"Invalid month: {month}")
    try:
        last = calendar.monthrange(year, month)[1]
        days = tracker.month_grid(user, year, month)
        period = tracker.period_stats(user, date(year, month, 1), date(year, month, last))
    except (ValueError, OverflowError) as e:
        # The grid pads with days of the adjacent months, which may fall outside date's range.
        raise HTTPException(status_code=422, detail=f"Invalid year: {year}") from e
    return {
        "user": user.value,
        "year": year,
        "month": month,
        "days": [cell.model_dump(mode="json") for cell in days],
        "period": period.model_dump(mode="json"),
    }


@router.get("/users/{user}/days/{day}")
def history_day(user: UserID, day: date, tracker: Tracker = Depends(get_tracker)) -> dict[str, Any]:
    return {
        "user": user.value,
        "stats": tracker.day_stats(user, day).model_dump(mode="json"),
        "entries": [e.model_dump(mode="json") for e in tracker.day_entries(user, day)],
    }
