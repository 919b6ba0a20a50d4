"""Date/locale collaborator: the engine asks for "today" instead of embedding a clock."""

from datetime import date, datetime, timezone
from typing import Protocol


class Clock(Protocol):
    def today(self) -> date:
        """Current local calendar day."""
        ...

    def now(self) -> datetime:
        """Current timestamp (used for audit entries)."""
        ...


class SystemClock:
    """Local wall clock."""

    def today(self) -> date:
        return date.today()

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """Clock pinned to a given day; tests and the CLI `--date` option use it."""

    def __init__(self, day: date, now: datetime | None = None):
        self._day = as_day(day)
        self._now = now or datetime(self._day.year, self._day.month, self._day.day, 12, tzinfo=timezone.utc)

    def today(self) -> date:
        return self._day

    def now(self) -> datetime:
        return self._now


def as_day(value: date | datetime | str) -> date:
    """Reduce a date, datetime or ISO string to its calendar day (time of day dropped)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip()[:10])
