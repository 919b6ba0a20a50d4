"""Adherence aggregator: per-day and per-period completion over schedule + dose log."""

import calendar
import math
from datetime import date, datetime, timedelta
from typing import Iterable

from src.engine.clock import Clock, as_day
from src.engine.dose_log import DoseLogStore
from src.engine.schedule import is_due, plan_sort_key
from src.models.medication import Medication, UserID
from src.models.stats import CalendarDay, DayStats, HistoryEntry, PeriodStats


def percent(taken: int, total: int) -> int | None:
    """Whole-number percentage, halves rounded up; None when nothing was scheduled."""
    if not total:
        return None
    return math.floor(100 * taken / total + 0.5)


class AdherenceAggregator:
    """Stats for one set of medications (usually one user's, archived included).

    Archived medications count on a day only if they were logged as taken that
    day: past adherence survives archival, but a suspended therapy is never
    reported as missed.
    """

    def __init__(self, medications: Iterable[Medication], logs: DoseLogStore, clock: Clock):
        self._medications = list(medications)
        self._logs = logs
        self._clock = clock

    @classmethod
    def for_user(
        cls,
        medications: Iterable[Medication],
        user_id: UserID,
        logs: DoseLogStore,
        clock: Clock,
    ) -> "AdherenceAggregator":
        return cls([m for m in medications if m.user_id == user_id], logs, clock)

    def scheduled_meds(self, day: date | datetime) -> list[Medication]:
        day = as_day(day)
        return [
            m for m in self._medications
            if is_due(m, day) and (not m.is_archived or self._logs.is_taken(day, m.id))
        ]

    def day_stats(self, day: date | datetime) -> DayStats:
        day = as_day(day)
        today = self._clock.today()
        scheduled = self.scheduled_meds(day)
        total = len(scheduled)
        taken = sum(1 for m in scheduled if self._logs.is_taken(day, m.id))
        return DayStats(
            day=day,
            taken=taken,
            total=total,
            percentage=percent(taken, total) or 0,
            is_empty=total == 0,
            is_future=day > today,
            is_today=day == today,
        )

    def history_for_range(self, start: date | datetime, end: date | datetime) -> list[DayStats]:
        """Day stats for every day in [start, end], inclusive."""
        start, end = as_day(start), as_day(end)
        return [self.day_stats(start + timedelta(days=i)) for i in range((end - start).days + 1)]

    def period_stats(self, start: date | datetime, end: date | datetime) -> PeriodStats:
        """Totals over the range; days after today are left out."""
        days = [s for s in self.history_for_range(start, end) if not s.is_future]
        taken = sum(s.taken for s in days)
        total = sum(s.total for s in days)
        return PeriodStats(
            start=as_day(start),
            end=as_day(end),
            taken=taken,
            total=total,
            percentage=percent(taken, total),
            complete_days=sum(1 for s in days if s.is_complete),
            scheduled_days=sum(1 for s in days if not s.is_empty),
        )

    def month_grid(self, year: int, month: int) -> list[CalendarDay]:
        """Full Monday-first weeks covering the month, adjacent-month days included."""
        first = date(year, month, 1)
        last = date(year, month, calendar.monthrange(year, month)[1])
        start = first - timedelta(days=first.weekday())
        end = last + timedelta(days=6 - last.weekday())
        return [
            CalendarDay(stats=stats, in_month=stats.day.month == month)
            for stats in self.history_for_range(start, end)
        ]

    def day_entries(self, day: date | datetime) -> list[HistoryEntry]:
        """Per-medication rows for a history day: taken, skipped, to take (today) or pending (future)."""
        day = as_day(day)
        today = self._clock.today()
        entries = []
        for medication in sorted(self.scheduled_meds(day), key=plan_sort_key):
            if day > today:
                status = "pending"
            elif self._logs.is_taken(day, medication.id):
                status = "taken"
            elif day == today:
                status = "to_take"
            else:
                status = "skipped"
            entries.append(HistoryEntry(medication=medication, status=status))
        return entries
