"""Tests for the schedule evaluator: alternate-day parity, timing order, plans."""

import sys
import unittest
from datetime import date, datetime, timedelta
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from src.engine.dose_log import DoseLogStore
from src.engine.schedule import (
    UNRECOGNIZED_PRIORITY,
    daily_plan,
    days_since_epoch,
    is_due,
    next_due_date,
    plan_for_day,
    timing_priority,
)
from src.models.medication import Frequency, Medication, UserID


def med(id_, frequency=Frequency.DAILY, timing="Mattina", name=None, user=UserID.PAOLO, **kw):
    return Medication(id=id_, user_id=user, name=name or id_.upper(), timing=timing, frequency=frequency, **kw)


class TestAlternateDays(unittest.TestCase):
    def test_epoch_parity(self):
        a = med("a", Frequency.ALTERNATE_A)
        b = med("b", Frequency.ALTERNATE_B)
        self.assertEqual(days_since_epoch(date(2024, 1, 1)), 0)
        self.assertTrue(is_due(a, date(2024, 1, 1)))
        self.assertFalse(is_due(b, date(2024, 1, 1)))
        self.assertTrue(is_due(b, date(2024, 1, 2)))
        self.assertFalse(is_due(a, date(2024, 1, 2)))
        self.assertTrue(is_due(a, date(2024, 1, 3)))

    def test_a_and_b_are_complementary_over_a_year(self):
        a = med("a", Frequency.ALTERNATE_A)
        b = med("b", Frequency.ALTERNATE_B)
        daily = med("d")
        day = date(2023, 11, 1)
        for _ in range(400):
            self.assertTrue(is_due(daily, day))
            self.assertNotEqual(is_due(a, day), is_due(b, day))
            if is_due(a, day):
                self.assertFalse(is_due(a, day + timedelta(days=1)))
                self.assertTrue(is_due(a, day + timedelta(days=2)))
            day += timedelta(days=1)

    def test_parity_continues_before_epoch(self):
        b = med("b", Frequency.ALTERNATE_B)
        self.assertTrue(is_due(b, date(2023, 12, 31)))
        self.assertFalse(is_due(b, date(2023, 12, 30)))

    def test_time_of_day_does_not_change_parity(self):
        a = med("a", Frequency.ALTERNATE_A)
        self.assertEqual(
            is_due(a, datetime(2024, 3, 10, 0, 1)),
            is_due(a, datetime(2024, 3, 10, 23, 58)),
        )

    def test_next_due_date(self):
        a = med("a", Frequency.ALTERNATE_A)
        self.assertEqual(next_due_date(a, date(2024, 1, 1)), date(2024, 1, 1))
        self.assertEqual(next_due_date(a, date(2024, 1, 2)), date(2024, 1, 3))
        self.assertEqual(next_due_date(med("d"), date(2024, 1, 2)), date(2024, 1, 2))


class TestTimingPriority(unittest.TestCase):
    def test_bucket_order(self):
        labels = [
            "Colazione",
            "Mattina",
            "Pranzo",
            "Pomeriggio",
            "Lontano dai pasti",
            "Entro le 17:00",
            "Cena",
            "Prima di dormire",
        ]
        self.assertEqual([timing_priority(label) for label in labels], list(range(8)))

    def test_english_keywords_and_case(self):
        self.assertEqual(timing_priority("AFTER BREAKFAST"), 0)
        self.assertEqual(timing_priority("afternoon"), 3)
        self.assertEqual(timing_priority("Bedtime"), 7)

    def test_unrecognized_sorts_last(self):
        self.assertEqual(timing_priority("whenever"), UNRECOGNIZED_PRIORITY)
        self.assertEqual(timing_priority(None), UNRECOGNIZED_PRIORITY)


class TestDailyPlan(unittest.TestCase):
    def setUp(self):
        self.meds = [
            med("night", timing="Sera"),
            med("zinc", timing="Mattina", name="Zinc"),
            med("aspirin", timing="Mattina", name="aspirin"),
            med("alt", Frequency.ALTERNATE_B, timing="Colazione"),
            med("old", timing="Colazione", is_archived=True),
            med("hers", timing="Colazione", user=UserID.BARBARA),
        ]

    def test_filters_and_orders(self):
        plan = daily_plan(self.meds, UserID.PAOLO, date(2024, 1, 1))
        self.assertEqual([m.id for m in plan], ["aspirin", "zinc", "night"])

    def test_alternate_day_included_on_its_day(self):
        plan = daily_plan(self.meds, UserID.PAOLO, date(2024, 1, 2))
        self.assertEqual([m.id for m in plan], ["alt", "aspirin", "zinc", "night"])

    def test_plan_for_day_flags_not_due_and_taken(self):
        logs = DoseLogStore([(date(2024, 1, 1), "zinc")])
        entries = plan_for_day(self.meds, UserID.PAOLO, date(2024, 1, 1), logs)
        by_id = {e.medication.id: e for e in entries}
        self.assertEqual(set(by_id), {"alt", "aspirin", "zinc", "night"})
        self.assertFalse(by_id["alt"].due)
        self.assertTrue(by_id["zinc"].taken)
        self.assertFalse(by_id["aspirin"].taken)
        self.assertEqual(entries[0].medication.id, "alt")


if __name__ == "__main__":
    unittest.main()
