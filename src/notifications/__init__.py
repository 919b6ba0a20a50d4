"""Notification collaborators."""

from src.notifications.low_stock import ConsoleAlerter, LogAlerter, LowStockAlerter, alert_text

__all__ = ["ConsoleAlerter", "LogAlerter", "LowStockAlerter", "alert_text"]
