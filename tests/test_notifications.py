"""Tests for the collaborators: low-stock alerters and the change feed."""

import io
import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from rich.console import Console

from src.notifications.low_stock import ConsoleAlerter, LogAlerter, alert_text
from src.persistence.changes import ChangeFeed


class TestAlerts(unittest.TestCase):
    def test_alert_text(self):
        title, body = alert_text("Vitamin D", 4.0)
        self.assertEqual(title, "Low stock: Vitamin D")
        self.assertIn("Only 4 left", body)
        self.assertIn("Out of stock", alert_text("Vitamin D", 0)[1])

    def test_console_alerter_prints(self):
        buffer = io.StringIO()
        ConsoleAlerter(Console(file=buffer, force_terminal=False)).send("Zinc", 2)
        self.assertIn("Low stock: Zinc", buffer.getvalue())

    def test_log_alerter_does_not_raise(self):
        LogAlerter().send("Zinc", -1)


class TestChangeFeed(unittest.TestCase):
    def test_failing_listener_does_not_stop_others(self):
        feed = ChangeFeed()
        calls = []

        def broken():
            raise RuntimeError("boom")

        feed.subscribe(broken)
        feed.subscribe(lambda: calls.append("ok"))
        self.assertEqual(feed.publish("test"), 1)
        self.assertEqual(calls, ["ok"])

    def test_unsubscribe(self):
        feed = ChangeFeed()
        calls = []
        unsubscribe = feed.subscribe(lambda: calls.append(1))
        unsubscribe()
        unsubscribe()
        self.assertEqual(feed.publish(), 0)
        self.assertEqual(calls, [])


if __name__ == "__main__":
    unittest.main()
