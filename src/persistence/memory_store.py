"""In-memory store: same contract as the SQL store, no I/O. Used offline and in tests."""

from datetime import date
from typing import Iterable

from src.engine.clock import as_day
from src.models.medication import InventoryItem, InventoryLog, Medication
from src.utils.logger import get_logger

logger = get_logger("adherence.persistence.memory_store")


class InMemoryStore:
    """Dict-backed rows. Product quantities are stored on the product only, never on medications."""

    def __init__(
        self,
        medications: Iterable[Medication] = (),
        products: Iterable[InventoryItem] = (),
        dose_logs: Iterable[tuple[date | str, str]] = (),
        inventory_logs: Iterable[InventoryLog] = (),
    ):
        self.medications: dict[str, Medication] = {m.id: m for m in medications}
        self.products: dict[str, InventoryItem] = {p.id: p for p in products}
        self.dose_logs: set[tuple[date, str]] = {(as_day(d), m) for d, m in dose_logs}
        self.inventory_logs: list[InventoryLog] = list(inventory_logs)
        logger.debug(
            "memory_store.init",
            medications=len(self.medications),
            products=len(self.products),
            dose_logs=len(self.dose_logs),
        )

    def load_medications(self) -> list[Medication]:
        return [m.model_copy() for m in self.medications.values()]

    def load_products(self) -> list[InventoryItem]:
        return sorted(self.products.values(), key=lambda p: p.name.casefold())

    def load_dose_logs(self) -> list[tuple[date, str]]:
        return sorted(self.dose_logs)

    def load_inventory_logs(self) -> list[InventoryLog]:
        return sorted(self.inventory_logs, key=lambda e: e.date, reverse=True)

    def upsert_medication(self, medication: Medication) -> bool:
        if medication.product_id:
            # Hydrated stock is a projection of the product, not a medication column.
            medication = medication.model_copy(update={"stock_quantity": None, "stock_threshold": None})
        self.medications[medication.id] = medication
        return True

    def delete_medication(self, medication_id: str) -> bool:
        self.dose_logs = {(d, m) for d, m in self.dose_logs if m != medication_id}
        self.medications.pop(medication_id, None)
        return True

    def upsert_product(self, product: InventoryItem) -> bool:
        self.products[product.id] = product
        return True

    def delete_product(self, product_id: str) -> bool:
        self.products.pop(product_id, None)
        return True

    def set_dose_log(self, day: date, medication_id: str, taken: bool) -> bool:
        key = (as_day(day), medication_id)
        if taken:
            self.dose_logs.add(key)
        else:
            self.dose_logs.discard(key)
        return True

    def adjust_product_quantity(self, product_id: str, delta: float) -> bool:
        product = self.products.get(product_id)
        if product is None:
            logger.warning("memory_store.adjust_product_quantity.missing", product_id=product_id)
            return False
        self.products[product_id] = product.model_copy(update={"quantity": product.quantity + delta})
        return True

    def adjust_medication_stock(self, medication_ids: list[str], delta: float) -> bool:
        for medication_id in medication_ids:
            medication = self.medications.get(medication_id)
            if medication is None or medication.stock_quantity is None:
                continue
            self.medications[medication_id] = medication.model_copy(
                update={"stock_quantity": medication.stock_quantity + delta}
            )
        return True

    def append_inventory_log(self, entry: InventoryLog) -> bool:
        if entry.id is None:
            entry = entry.model_copy(update={"id": len(self.inventory_logs) + 1})
        self.inventory_logs.append(entry)
        return True
