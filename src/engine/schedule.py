"""Schedule evaluator: which medications are due on a calendar day, and in which order."""

from datetime import date, datetime, timedelta
from typing import Iterable

from src.engine.clock import as_day
from src.engine.dose_log import DoseLogStore
from src.models.medication import Frequency, Medication, UserID
from src.models.stats import PlanEntry

EPOCH = date(2024, 1, 1)

# Checked in this order; the first bucket whose keyword appears in the timing label wins.
TIMING_BUCKETS: tuple[tuple[str, ...], ...] = (
    ("colazione", "breakfast"),
    ("mattin", "morning"),
    ("pranzo", "lunch"),
    ("pomeriggio", "afternoon"),
    ("lontano dai pasti", "lontano pasti", "away from meals", "empty stomach"),
    ("17:00", "entro le 17", "before 5", "5 pm", "5pm"),
    ("cena", "sera", "dinner", "evening"),
    ("notte", "dormire", "coricarsi", "night", "bedtime"),
)
UNRECOGNIZED_PRIORITY = len(TIMING_BUCKETS)


def days_since_epoch(day: date | datetime) -> int:
    return (as_day(day) - EPOCH).days


def is_even_day(day: date | datetime) -> bool:
    """Global parity shared by every alternate-day medication."""
    return days_since_epoch(day) % 2 == 0


def is_due(medication: Medication, day: date | datetime) -> bool:
    if medication.frequency == Frequency.ALTERNATE_A:
        return is_even_day(day)
    if medication.frequency == Frequency.ALTERNATE_B:
        return not is_even_day(day)
    return True


def next_due_date(medication: Medication, day: date | datetime) -> date:
    """First day on or after `day` on which the medication is due."""
    start = as_day(day)
    return start if is_due(medication, start) else start + timedelta(days=1)


def timing_priority(timing: str | None) -> int:
    label = (timing or "").casefold()
    for priority, keywords in enumerate(TIMING_BUCKETS):
        if any(keyword in label for keyword in keywords):
            return priority
    return UNRECOGNIZED_PRIORITY


def plan_sort_key(medication: Medication) -> tuple[int, str]:
    return timing_priority(medication.timing), medication.name.casefold()


def active_medications(medications: Iterable[Medication], user_id: UserID) -> list[Medication]:
    """The user's non-archived medications in plan order, due or not."""
    own = [m for m in medications if m.user_id == user_id and not m.is_archived]
    return sorted(own, key=plan_sort_key)


def daily_plan(medications: Iterable[Medication], user_id: UserID, day: date | datetime) -> list[Medication]:
    """Non-archived medications of `user_id` due on `day`, ordered by timing bucket then name."""
    return [m for m in active_medications(medications, user_id) if is_due(m, day)]


def plan_for_day(
    medications: Iterable[Medication],
    user_id: UserID,
    day: date | datetime,
    logs: DoseLogStore | None = None,
) -> list[PlanEntry]:
    """Every active medication of the user, flagged due/taken, so not-due items can be shown greyed out."""
    day = as_day(day)
    return [
        PlanEntry(
            medication=m,
            due=is_due(m, day),
            taken=logs is not None and logs.is_taken(day, m.id),
            priority=timing_priority(m.timing),
        )
        for m in active_medications(medications, user_id)
    ]
