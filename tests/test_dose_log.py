"""Tests for the sparse dose log."""

import sys
import unittest
from datetime import date, datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from src.engine.dose_log import DoseLogStore, log_key, split_key


class TestDoseLogStore(unittest.TestCase):
    def test_key_format(self):
        self.assertEqual(log_key(date(2024, 3, 5), "m1"), "2024-03-05|m1")
        self.assertEqual(log_key(datetime(2024, 3, 5, 23, 59), "m1"), "2024-03-05|m1")
        self.assertEqual(split_key("2024-03-05|a|b"), (date(2024, 3, 5), "a|b"))

    def test_set_taken_is_idempotent_both_ways(self):
        logs = DoseLogStore()
        self.assertTrue(logs.set_taken("2024-03-05", "m1", True))
        self.assertFalse(logs.set_taken("2024-03-05", "m1", True))
        self.assertEqual(len(logs), 1)
        self.assertTrue(logs.set_taken("2024-03-05", "m1", False))
        self.assertFalse(logs.set_taken("2024-03-05", "m1", False))
        self.assertEqual(len(logs), 0)

    def test_toggle_round_trip(self):
        logs = DoseLogStore([("2024-03-05", "m2")])
        before = logs.keys()
        self.assertTrue(logs.toggle(date(2024, 3, 5), "m1"))
        self.assertFalse(logs.toggle(date(2024, 3, 5), "m1"))
        self.assertEqual(logs.keys(), before)

    def test_taken_on_and_remove_medication(self):
        logs = DoseLogStore([
            (date(2024, 3, 5), "m1"),
            (date(2024, 3, 5), "m2"),
            (date(2024, 3, 6), "m1"),
        ])
        self.assertEqual(logs.taken_on("2024-03-05"), {"m1", "m2"})
        self.assertEqual(logs.remove_medication("m1"), 2)
        self.assertEqual(logs.entries(), [(date(2024, 3, 5), "m2")])
        self.assertIn("2024-03-05|m2", logs)

    def test_copy_is_independent(self):
        logs = DoseLogStore([(date(2024, 3, 5), "m1")])
        clone = logs.copy()
        clone.set_taken(date(2024, 3, 6), "m1", True)
        self.assertEqual(len(logs), 1)
        self.assertEqual(len(clone), 2)


if __name__ == "__main__":
    unittest.main()
