"""Re-export all ORM models so Base.metadata has all tables."""

from src.db.models.inventory import InventoryLogRecord, Product
from src.db.models.medication import BASE_COLUMNS, EXTENDED_COLUMNS, DoseLog, MedicationRecord

__all__ = [
    "BASE_COLUMNS",
    "EXTENDED_COLUMNS",
    "DoseLog",
    "InventoryLogRecord",
    "MedicationRecord",
    "Product",
]
