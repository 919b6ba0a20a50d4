"""Persistence protocol: snapshot reads plus the row-level writes the tracker issues."""

from datetime import date
from typing import Protocol

from src.models.medication import InventoryItem, InventoryLog, Medication


class Persistence(Protocol):
    """Backing store shared by both users. Writes return False on failure instead of raising."""

    def load_medications(self) -> list[Medication]:
        """All medications; falls back to the built-in set when the store is unreachable."""
        ...

    def load_products(self) -> list[InventoryItem]:
        ...

    def load_dose_logs(self) -> list[tuple[date, str]]:
        """(day, medication_id) for every dose marked taken."""
        ...

    def load_inventory_logs(self) -> list[InventoryLog]:
        """Refill history, newest first."""
        ...

    def upsert_medication(self, medication: Medication) -> bool:
        ...

    def delete_medication(self, medication_id: str) -> bool:
        """Delete the medication and its dose logs."""
        ...

    def upsert_product(self, product: InventoryItem) -> bool:
        ...

    def delete_product(self, product_id: str) -> bool:
        ...

    def set_dose_log(self, day: date, medication_id: str, taken: bool) -> bool:
        ...

    def adjust_product_quantity(self, product_id: str, delta: float) -> bool:
        ...

    def adjust_medication_stock(self, medication_ids: list[str], delta: float) -> bool:
        """Legacy/private pools: move stock_quantity of every listed medication by delta."""
        ...

    def append_inventory_log(self, entry: InventoryLog) -> bool:
        ...
