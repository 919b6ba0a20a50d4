"""Tests for the adherence aggregator: day stats, archival, month grid, periods."""

import sys
import unittest
from datetime import date
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from src.engine.adherence import AdherenceAggregator, percent
from src.engine.clock import FixedClock
from src.engine.dose_log import DoseLogStore
from src.models.medication import Frequency, Medication, UserID

TODAY = date(2024, 1, 10)


def med(id_, **kw):
    kw.setdefault("user_id", UserID.PAOLO)
    kw.setdefault("timing", "Mattina")
    return Medication(id=id_, name=kw.pop("name", id_), **kw)


class TestPercent(unittest.TestCase):
    def test_halves_round_up(self):
        self.assertEqual(percent(1, 8), 13)  # 12.5
        self.assertEqual(percent(5, 8), 63)  # 62.5
        self.assertEqual(percent(1, 3), 33)
        self.assertEqual(percent(2, 3), 67)
        self.assertIsNone(percent(0, 0))


class TestDayStats(unittest.TestCase):
    def setUp(self):
        self.meds = [
            med("daily"),
            med("alt", frequency=Frequency.ALTERNATE_A),
            med("archived", is_archived=True),
            med("hers", user_id=UserID.BARBARA),
        ]
        self.logs = DoseLogStore([
            (date(2024, 1, 8), "daily"),
            (date(2024, 1, 9), "archived"),
            (date(2024, 1, 9), "daily"),
            (date(2024, 1, 9), "alt"),
        ])
        self.agg = AdherenceAggregator.for_user(self.meds, UserID.PAOLO, self.logs, FixedClock(TODAY))

    def test_archived_counts_only_when_taken(self):
        with_archived = self.agg.day_stats(date(2024, 1, 9))
        self.assertEqual((with_archived.taken, with_archived.total), (3, 3))
        self.assertTrue(with_archived.is_complete)
        without = self.agg.day_stats(date(2024, 1, 8))
        self.assertEqual((without.taken, without.total), (1, 1))

    def test_missed_and_today(self):
        missed = self.agg.day_stats(date(2024, 1, 7))  # day 6: alt due, nothing taken
        self.assertEqual((missed.taken, missed.total, missed.percentage), (0, 2, 0))
        self.assertEqual(missed.status, "missed")
        today = self.agg.day_stats(TODAY)
        self.assertTrue(today.is_today)
        self.assertEqual(today.status, "today")

    def test_empty_day(self):
        agg = AdherenceAggregator([med("alt", frequency=Frequency.ALTERNATE_B)], self.logs, FixedClock(TODAY))
        stats = agg.day_stats(date(2024, 1, 1))
        self.assertTrue(stats.is_empty)
        self.assertEqual(stats.percentage, 0)
        self.assertFalse(stats.is_complete)
        self.assertEqual(stats.status, "empty")

    def test_future_day_is_never_missed(self):
        stats = self.agg.day_stats(date(2024, 1, 20))
        self.assertTrue(stats.is_future)
        self.assertEqual(stats.status, "pending")

    def test_day_entries(self):
        entries = {e.medication.id: e.status for e in self.agg.day_entries(date(2024, 1, 9))}
        self.assertEqual(entries, {"daily": "taken", "alt": "taken", "archived": "taken"})
        entries = {e.medication.id: e.status for e in self.agg.day_entries(date(2024, 1, 8))}
        self.assertEqual(entries, {"daily": "taken"})
        entries = {e.medication.id: e.status for e in self.agg.day_entries(date(2024, 1, 7))}
        self.assertEqual(entries, {"daily": "skipped", "alt": "skipped"})
        self.assertEqual([e.status for e in self.agg.day_entries(TODAY)], ["to_take"])
        self.assertEqual([e.status for e in self.agg.day_entries(date(2024, 1, 11))], ["pending", "pending"])


class TestRanges(unittest.TestCase):
    def setUp(self):
        self.logs = DoseLogStore([(date(2024, 1, d), "daily") for d in (1, 2, 3)])
        self.agg = AdherenceAggregator([med("daily")], self.logs, FixedClock(TODAY))

    def test_history_for_range_is_inclusive(self):
        days = self.agg.history_for_range(date(2024, 1, 1), date(2024, 1, 5))
        self.assertEqual([d.day.day for d in days], [1, 2, 3, 4, 5])

    def test_period_stats_excludes_future(self):
        period = self.agg.period_stats(date(2024, 1, 1), date(2024, 1, 31))
        self.assertEqual(period.total, 10)
        self.assertEqual(period.taken, 3)
        self.assertEqual(period.percentage, 30)
        self.assertEqual(period.complete_days, 3)
        self.assertEqual(period.scheduled_days, 10)

    def test_month_grid_is_monday_first_and_padded(self):
        grid = self.agg.month_grid(2024, 2)
        self.assertEqual(len(grid) % 7, 0)
        self.assertEqual(grid[0].stats.day, date(2024, 1, 29))
        self.assertFalse(grid[0].in_month)
        self.assertEqual(grid[-1].stats.day, date(2024, 3, 3))
        self.assertEqual(sum(1 for c in grid if c.in_month), 29)
        self.assertTrue(all(c.stats.day.weekday() == 0 for c in grid[::7]))

    def test_month_starting_on_monday_has_no_leading_padding(self):
        grid = self.agg.month_grid(2024, 1)
        self.assertEqual(grid[0].stats.day, date(2024, 1, 1))
        self.assertEqual(grid[-1].stats.day, date(2024, 2, 4))


if __name__ == "__main__":
    unittest.main()
