"""Inventory resolver: which stock pool governs a medication, and how doses move it.

Three pools exist side by side:

* a product (``InventoryItem``) referenced by ``product_id``; one authoritative
  quantity, projected onto every referencing medication for display;
* a legacy shared group keyed by ``shared_id``; every medication in the group
  (both users) carries its own copy of the quantity and all copies move together;
* a private pool: the medication's own ``stock_quantity``.

Resolution is strict: product_id, then shared_id, then private stock, else none.
"""

import re
from datetime import datetime
from typing import Iterable, Literal, Optional, Union

from pydantic import BaseModel

from src.config import DEFAULT_STOCK_THRESHOLD
from src.engine.errors import UnknownMedicationError, UnknownProductError
from src.models.medication import InventoryItem, InventoryLog, Medication, coerce_number
from src.models.stats import GroupEntry, InventoryGroup, ShoppingListItem, StockLevel
from src.utils.logger import get_logger

logger = get_logger("adherence.engine.inventory")

_WHITESPACE = re.compile(r"\s+")


class NoStock(BaseModel):
    kind: Literal["none"] = "none"

    model_config = {"frozen": True}


class PrivateStock(BaseModel):
    kind: Literal["private"] = "private"
    medication_id: str

    model_config = {"frozen": True}


class LegacyShared(BaseModel):
    kind: Literal["legacy"] = "legacy"
    group_key: str

    model_config = {"frozen": True}


class LinkedProduct(BaseModel):
    kind: Literal["linked"] = "linked"
    product_id: str

    model_config = {"frozen": True}


Linkage = Union[NoStock, PrivateStock, LegacyShared, LinkedProduct]


class StockChange(BaseModel):
    """Outcome of one dose-driven adjustment."""

    linkage: Linkage
    delta: float
    quantity_before: float
    quantity_after: float
    threshold: float
    medication_ids: list[str]


def shared_slug(name: str) -> str:
    """Legacy group key: lowercase name with whitespace runs turned into hyphens."""
    return _WHITESPACE.sub("-", (name or "").strip().lower())


def linkage_of(medication: Medication) -> Linkage:
    if medication.product_id:
        return LinkedProduct(product_id=medication.product_id)
    if medication.shared_id:
        return LegacyShared(group_key=medication.shared_id)
    if medication.stock_quantity is not None:
        return PrivateStock(medication_id=medication.id)
    return NoStock()


def pool_key(medication: Medication) -> str:
    """Grouping key for read models: one key per physical pool."""
    linkage = linkage_of(medication)
    if isinstance(linkage, LinkedProduct):
        return f"prod_{linkage.product_id}"
    if isinstance(linkage, LegacyShared):
        return f"shared_{linkage.group_key}"
    return medication.id


class InventoryResolver:
    """Medication and product catalogs plus the stock operations over them."""

    def __init__(self, medications: Iterable[Medication] = (), products: Iterable[InventoryItem] = ()):
        self._products: dict[str, InventoryItem] = {p.id: p for p in products}
        self._medications: dict[str, Medication] = {}
        for medication in medications:
            self._medications[medication.id] = self._hydrated(medication)

    # --- catalogs ---

    def medications(self) -> list[Medication]:
        return list(self._medications.values())

    def products(self) -> list[InventoryItem]:
        return sorted(self._products.values(), key=lambda p: p.name.casefold())

    def get_medication(self, medication_id: str) -> Medication:
        try:
            return self._medications[medication_id]
        except KeyError:
            raise UnknownMedicationError(medication_id) from None

    def get_product(self, product_id: str) -> InventoryItem:
        try:
            return self._products[product_id]
        except KeyError:
            raise UnknownProductError(product_id) from None

    def put_medication(self, medication: Medication) -> Medication:
        hydrated = self._hydrated(medication)
        self._medications[medication.id] = hydrated
        return hydrated

    def remove_medication(self, medication_id: str) -> Optional[Medication]:
        return self._medications.pop(medication_id, None)

    def put_product(self, product: InventoryItem) -> InventoryItem:
        self._products[product.id] = product
        self._fan_out(product)
        return product

    def remove_product(self, product_id: str) -> Optional[InventoryItem]:
        """Drop the product; referencing medications keep the link but lose the projected stock."""
        product = self._products.pop(product_id, None)
        for medication in list(self._medications.values()):
            if medication.product_id == product_id:
                self._medications[medication.id] = medication.model_copy(
                    update={"stock_quantity": None, "stock_threshold": None}
                )
        return product

    def _hydrated(self, medication: Medication) -> Medication:
        """Project the linked product's quantity/threshold onto the medication (display only)."""
        if not medication.product_id:
            return medication
        product = self._products.get(medication.product_id)
        if product is None:
            return medication
        return medication.model_copy(
            update={"stock_quantity": product.quantity, "stock_threshold": product.threshold}
        )

    def hydrate(self) -> list[Medication]:
        """Re-project every product onto its referencing medications and return the catalog."""
        for medication_id, medication in list(self._medications.items()):
            self._medications[medication_id] = self._hydrated(medication)
        return self.medications()

    def _fan_out(self, product: InventoryItem) -> None:
        for medication in list(self._medications.values()):
            if medication.product_id == product.id:
                self._medications[medication.id] = self._hydrated(medication)

    # --- resolution ---

    def linkage_of(self, medication: Medication | str) -> Linkage:
        return linkage_of(self._resolve(medication))

    def _resolve(self, medication: Medication | str) -> Medication:
        if isinstance(medication, str):
            return self.get_medication(medication)
        return self._medications.get(medication.id, medication)

    def members(self, linkage: Linkage) -> list[Medication]:
        """Medications drawing from the pool described by `linkage`."""
        if isinstance(linkage, LinkedProduct):
            return [m for m in self._medications.values() if m.product_id == linkage.product_id]
        if isinstance(linkage, LegacyShared):
            return [
                m for m in self._medications.values()
                if not m.product_id and m.shared_id == linkage.group_key
            ]
        if isinstance(linkage, PrivateStock):
            medication = self._medications.get(linkage.medication_id)
            return [medication] if medication is not None else []
        return []

    def current_stock(self, medication: Medication | str) -> Optional[StockLevel]:
        medication = self._resolve(medication)
        linkage = linkage_of(medication)
        if isinstance(linkage, LinkedProduct):
            product = self._products.get(linkage.product_id)
            if product is None:
                return None
            return StockLevel(quantity=product.quantity, threshold=product.threshold)
        if isinstance(linkage, NoStock) or medication.stock_quantity is None:
            return None
        threshold = medication.stock_threshold
        return StockLevel(
            quantity=medication.stock_quantity,
            threshold=DEFAULT_STOCK_THRESHOLD if threshold is None else threshold,
        )

    def projected_quantity(self, medication: Medication | str, delta: float) -> Optional[float]:
        stock = self.current_stock(medication)
        return None if stock is None else stock.quantity + delta

    # --- mutation ---

    def apply_dose_change(self, medication: Medication | str, delta: float) -> Optional[StockChange]:
        """Move the governing pool by `delta` (-1 on take, +1 on untake). No clamping.

        Returns None when the medication has no stock tracking (or its product is gone).
        """
        medication = self._resolve(medication)
        linkage = linkage_of(medication)
        stock = self.current_stock(medication)
        if stock is None:
            if not isinstance(linkage, NoStock):
                logger.warning(
                    "inventory.apply_dose_change.no_pool",
                    medication_id=medication.id,
                    linkage=linkage.kind,
                )
            return None

        new_quantity = stock.quantity + delta
        if isinstance(linkage, LinkedProduct):
            product = self._products[linkage.product_id].model_copy(update={"quantity": new_quantity})
            self.put_product(product)
            affected = [m.id for m in self.members(linkage)]
        else:
            affected = []
            for member in self.members(linkage):
                if member.stock_quantity is None:
                    continue
                self._medications[member.id] = member.model_copy(
                    update={"stock_quantity": member.stock_quantity + delta}
                )
                affected.append(member.id)

        logger.debug(
            "inventory.apply_dose_change",
            medication_id=medication.id,
            linkage=linkage.kind,
            delta=delta,
            quantity_before=stock.quantity,
            quantity_after=new_quantity,
            affected=len(affected),
        )
        return StockChange(
            linkage=linkage,
            delta=delta,
            quantity_before=stock.quantity,
            quantity_after=new_quantity,
            threshold=stock.threshold,
            medication_ids=affected,
        )

    def refill(
        self,
        product_id: str,
        packs: int,
        units_per_pack: float,
        now: datetime,
    ) -> tuple[InventoryItem, InventoryLog]:
        """Add packs x units to the product and return the audit entry for it."""
        product = self.get_product(product_id)
        packs = int(coerce_number(packs))
        units_per_pack = coerce_number(units_per_pack)
        if packs < 1:
            raise ValueError(f"packs must be at least 1, got {packs}")
        if units_per_pack < 0:
            raise ValueError(f"units per pack cannot be negative, got {units_per_pack}")

        amount = packs * units_per_pack
        update = {"quantity": product.quantity + amount}
        if float(units_per_pack).is_integer():
            update["pack_size"] = int(units_per_pack)
        updated = product.model_copy(update=update)
        self.put_product(updated)
        entry = InventoryLog(
            inventory_id=product.id,
            product_name=product.name,
            amount_added=amount,
            packs_added=packs,
            date=now,
        )
        logger.info(
            "inventory.refill",
            product_id=product.id,
            packs=packs,
            amount_added=amount,
            quantity=updated.quantity,
        )
        return updated, entry

    # --- read models ---

    def low_stock_items(self) -> list[ShoppingListItem]:
        """Shopping list: low pools of non-archived medications, one row per physical pool."""
        grouped: dict[str, ShoppingListItem] = {}
        for medication in self._medications.values():
            if medication.is_archived:
                continue
            stock = self.current_stock(medication)
            if stock is None or not stock.is_low:
                continue
            key = pool_key(medication)
            item = grouped.get(key)
            if item is None:
                name = medication.name
                if medication.product_id and medication.product_id in self._products:
                    name = self._products[medication.product_id].name
                grouped[key] = ShoppingListItem(
                    key=key,
                    name=name,
                    stock_quantity=stock.quantity,
                    users=[medication.user_id],
                )
            elif medication.user_id not in item.users:
                item.users.append(medication.user_id)
        return list(grouped.values())

    def group_for_listing(self, medications: Iterable[Medication] | None = None) -> list[InventoryGroup]:
        """Collapse medications sharing one pool and one name into a single listing row."""
        source = list(self._medications.values()) if medications is None else [self._resolve(m) for m in medications]
        groups: dict[str, InventoryGroup] = {}
        for medication in source:
            key = pool_key(medication)
            if key != medication.id:
                key = f"{key}|{medication.name.casefold()}"
            group = groups.get(key)
            if group is None:
                group = InventoryGroup(
                    key=key,
                    name=medication.name,
                    stock=self.current_stock(medication),
                    entries=[],
                )
                groups[key] = group
            group.entries.append(
                GroupEntry(
                    medication_id=medication.id,
                    user_id=medication.user_id,
                    timing=medication.timing,
                    is_archived=medication.is_archived,
                )
            )
        return sorted(groups.values(), key=lambda g: g.name.casefold())

    # --- snapshot helpers ---

    def snapshot(self) -> "InventoryResolver":
        return InventoryResolver(self._medications.values(), self._products.values())
