"""Tracker: the in-memory snapshot both users work on, and the command flow over it.

Every command updates the snapshot first and then issues the store writes. A
failed write is logged and left for the next reload to correct, with two
exceptions for a dose toggle: a failed log write rolls the snapshot back at
once, and a failed stock write is journaled by (day, medication) and retried.
"""

import threading
from datetime import date, datetime
from typing import Iterable, Optional

from opentelemetry.trace import SpanKind
from pydantic import BaseModel

from src.config import DEFAULT_PACK_SIZE
from src.engine.adherence import AdherenceAggregator
from src.engine.clock import Clock, SystemClock, as_day
from src.engine.dose_log import DoseLogStore
from src.engine.errors import UnknownMedicationError
from src.engine.inventory import InventoryResolver, LegacyShared, Linkage, LinkedProduct, StockChange
from src.engine.schedule import daily_plan, plan_for_day
from src.models.medication import InventoryItem, InventoryLog, Medication, UserID
from src.models.stats import (
    CalendarDay,
    DayStats,
    HistoryEntry,
    InventoryGroup,
    PeriodStats,
    PlanEntry,
    ShoppingListItem,
    StockLevel,
)
from src.notifications.low_stock import LogAlerter, LowStockAlerter
from src.persistence.changes import ChangeFeed
from src.persistence.protocol import Persistence
from src.utils.logger import get_logger
from src.utils.tracing import get_tracer

logger = get_logger("adherence.engine.tracker")


class PendingAdjustment(BaseModel):
    """A stock write that failed after its dose log write succeeded."""

    day: date
    medication_id: str
    delta: float
    linkage: Linkage
    medication_ids: list[str]


class DoseResult(BaseModel):
    """Outcome of one dose command."""

    day: date
    medication_id: str
    taken: bool
    log_changed: bool
    stock: Optional[StockChange] = None
    alerted: bool = False
    persisted: bool = True
    pending: bool = False


class Tracker:
    """Snapshot of (medications, products, dose logs) plus the commands that mutate it."""

    def __init__(
        self,
        store: Persistence,
        clock: Clock | None = None,
        alerter: LowStockAlerter | None = None,
        feed: ChangeFeed | None = None,
    ):
        self.store = store
        self.clock = clock or SystemClock()
        self.alerter = alerter or LogAlerter()
        self._lock = threading.RLock()
        self._inventory = InventoryResolver()
        self._logs = DoseLogStore()
        self._inventory_logs: list[InventoryLog] = []
        self._pending: dict[tuple[date, str], PendingAdjustment] = {}
        self._unsubscribe = feed.subscribe(self.reload) if feed is not None else None
        self.reload()

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    # --- snapshot ---

    def reload(self) -> None:
        """Rebuild everything from the store, then re-apply adjustments still waiting to be written."""
        tracer = get_tracer()
        with tracer.start_as_current_span("tracker.reload", kind=SpanKind.INTERNAL) as span:
            medications = self.store.load_medications()
            products = self.store.load_products()
            dose_logs = self.store.load_dose_logs()
            inventory_logs = self.store.load_inventory_logs()
            with self._lock:
                self._inventory = InventoryResolver(medications, products)
                self._logs = DoseLogStore(dose_logs)
                self._inventory_logs = list(inventory_logs)
                for entry in self._pending.values():
                    self._reapply(entry)
                pending = len(self._pending)
            span.set_attribute("tracker.medications", len(medications))
            span.set_attribute("tracker.products", len(products))
            span.set_attribute("tracker.dose_logs", len(dose_logs))
            span.set_attribute("tracker.pending", pending)
        logger.info(
            "tracker.reload",
            medications=len(medications),
            products=len(products),
            dose_logs=len(dose_logs),
            pending=pending,
        )

    def _reapply(self, entry: PendingAdjustment) -> None:
        try:
            medication = self._inventory.get_medication(entry.medication_id)
        except UnknownMedicationError:
            return
        if self._inventory.linkage_of(medication) != entry.linkage:
            logger.warning(
                "tracker.pending.relinked",
                medication_id=entry.medication_id,
                day=entry.day.isoformat(),
            )
            return
        self._inventory.apply_dose_change(medication, entry.delta)

    @property
    def inventory(self) -> InventoryResolver:
        return self._inventory

    @property
    def logs(self) -> DoseLogStore:
        return self._logs

    @property
    def pending(self) -> list[PendingAdjustment]:
        return list(self._pending.values())

    def medications(self) -> list[Medication]:
        return self._inventory.medications()

    def products(self) -> list[InventoryItem]:
        return self._inventory.products()

    def get_medication(self, medication_id: str) -> Medication:
        return self._inventory.get_medication(medication_id)

    def _day(self, day: date | datetime | str | None) -> date:
        return self.clock.today() if day is None else as_day(day)

    # --- plans and stats ---

    def today_plan(self, user_id: UserID, day: date | datetime | str | None = None) -> list[PlanEntry]:
        """The user's active medications for the day, flagged due/taken, in plan order."""
        return plan_for_day(self.medications(), user_id, self._day(day), self._logs)

    def due_medications(self, user_id: UserID, day: date | datetime | str | None = None) -> list[Medication]:
        return daily_plan(self.medications(), user_id, self._day(day))

    def aggregator(self, user_id: UserID) -> AdherenceAggregator:
        return AdherenceAggregator.for_user(self.medications(), user_id, self._logs, self.clock)

    def day_stats(self, user_id: UserID, day: date | datetime | str | None = None) -> DayStats:
        return self.aggregator(user_id).day_stats(self._day(day))

    def month_grid(self, user_id: UserID, year: int, month: int) -> list[CalendarDay]:
        return self.aggregator(user_id).month_grid(year, month)

    def day_entries(self, user_id: UserID, day: date | datetime | str | None = None) -> list[HistoryEntry]:
        return self.aggregator(user_id).day_entries(self._day(day))

    def period_stats(self, user_id: UserID, start: date | str, end: date | str) -> PeriodStats:
        return self.aggregator(user_id).period_stats(as_day(start), as_day(end))

    # --- inventory reads ---

    def current_stock(self, medication_id: str) -> Optional[StockLevel]:
        return self._inventory.current_stock(medication_id)

    def shopping_list(self) -> list[ShoppingListItem]:
        return self._inventory.low_stock_items()

    def groups(self, user_id: UserID | None = None) -> list[InventoryGroup]:
        medications: Iterable[Medication] = self.medications()
        if user_id is not None:
            medications = [m for m in medications if m.user_id == user_id]
        return self._inventory.group_for_listing(medications)

    def inventory_logs(self, product_id: str | None = None) -> list[InventoryLog]:
        entries = sorted(self._inventory_logs, key=lambda e: e.date, reverse=True)
        if product_id:
            entries = [e for e in entries if e.inventory_id == product_id]
        return entries

    # --- dose commands ---

    def toggle_dose(self, medication_id: str, day: date | datetime | str | None = None) -> DoseResult:
        """Flip taken/not taken for the day (today by default)."""
        day = self._day(day)
        return self.set_dose(day, medication_id, not self._logs.is_taken(day, medication_id))

    def set_dose(self, day: date | datetime | str | None, medication_id: str, taken: bool) -> DoseResult:
        """Log write, then stock adjustment (-1 on take, +1 on untake), then the store writes.

        Marking an already-taken dose taken again leaves the log alone but still
        takes one unit; unmarking an absent dose does nothing.
        """
        day = self._day(day)
        tracer = get_tracer()
        attrs = {"dose.day": day.isoformat(), "dose.medication_id": medication_id, "dose.taken": taken}
        with tracer.start_as_current_span("tracker.toggle", kind=SpanKind.INTERNAL, attributes=attrs) as span:
            with self._lock:
                medication = self._inventory.get_medication(medication_id)
                changed = self._logs.set_taken(day, medication_id, taken)
                if not taken and not changed:
                    return DoseResult(day=day, medication_id=medication_id, taken=False, log_changed=False)
                change = self._inventory.apply_dose_change(medication, -1 if taken else 1)

                persisted = True
                if changed:
                    persisted = self.store.set_dose_log(day, medication_id, taken)
                if not persisted:
                    # Log write failed: the store holds neither half, so the snapshot drops both.
                    self._logs.set_taken(day, medication_id, not taken)
                    if change is not None:
                        self._inventory.apply_dose_change(medication, -change.delta)
                    logger.warning(
                        "tracker.dose_rolled_back",
                        medication_id=medication_id,
                        day=day.isoformat(),
                    )
                    taken = not taken
                    changed = False
                    change = None
                elif change is not None:
                    persisted = self._write_stock(day, medication_id, change)
                pending = (day, medication_id) in self._pending

            alerted = False
            if taken and change is not None and change.quantity_after <= change.threshold:
                alerted = self._alert(medication.name, change.quantity_after)

            span.set_attribute("dose.log_changed", changed)
            span.set_attribute("dose.persisted", persisted)
            span.set_attribute("dose.pending", pending)
            if change is not None:
                span.set_attribute("stock.linkage", change.linkage.kind)
                span.set_attribute("stock.quantity_after", change.quantity_after)

        logger.info(
            "tracker.toggle",
            medication_id=medication_id,
            day=day.isoformat(),
            taken=taken,
            log_changed=changed,
            linkage=change.linkage.kind if change else "none",
            quantity_after=change.quantity_after if change else None,
            persisted=persisted,
            pending=pending,
            alerted=alerted,
        )
        return DoseResult(
            day=day,
            medication_id=medication_id,
            taken=taken,
            log_changed=changed,
            stock=change,
            alerted=alerted,
            persisted=persisted,
            pending=pending,
        )

    def _persist_adjustment(self, linkage: Linkage, medication_ids: list[str], delta: float) -> bool:
        if isinstance(linkage, LinkedProduct):
            return self.store.adjust_product_quantity(linkage.product_id, delta)
        return self.store.adjust_medication_stock(medication_ids, delta)

    def _write_stock(self, day: date, medication_id: str, change: StockChange) -> bool:
        """Write the adjustment, or journal it. An opposite adjustment cancels a pending one."""
        key = (day, medication_id)
        pending = self._pending.get(key)
        if pending is not None and pending.delta + change.delta == 0:
            del self._pending[key]
            logger.info("tracker.pending.cancelled", medication_id=medication_id, day=day.isoformat())
            return True
        if self._persist_adjustment(change.linkage, change.medication_ids, change.delta):
            return True
        if pending is None:
            pending = PendingAdjustment(
                day=day,
                medication_id=medication_id,
                delta=change.delta,
                linkage=change.linkage,
                medication_ids=change.medication_ids,
            )
        else:
            pending = pending.model_copy(update={"delta": pending.delta + change.delta})
        self._pending[key] = pending
        logger.warning(
            "tracker.pending.journaled",
            medication_id=medication_id,
            day=day.isoformat(),
            delta=pending.delta,
            linkage=change.linkage.kind,
        )
        return False

    def retry_pending(self) -> int:
        """Reattempt every journaled stock write. Returns how many went through."""
        resolved = 0
        with self._lock:
            for key, entry in list(self._pending.items()):
                if self._persist_adjustment(entry.linkage, entry.medication_ids, entry.delta):
                    del self._pending[key]
                    resolved += 1
            remaining = len(self._pending)
        logger.info("tracker.retry_pending", resolved=resolved, remaining=remaining)
        return resolved

    def _alert(self, medication_name: str, projected_quantity: float) -> bool:
        try:
            self.alerter.send(medication_name, projected_quantity)
            return True
        except Exception:
            logger.exception("tracker.alert_failed", medication=medication_name)
            return False

    # --- catalog commands ---

    def save_medication(self, medication: Medication) -> Medication:
        """Create or edit a medication. A legacy group's quantity is copied onto the other members."""
        with self._lock:
            saved = self._inventory.put_medication(medication)
            if medication.shared_id and not medication.product_id and medication.stock_quantity is not None:
                for member in self._inventory.members(LegacyShared(group_key=medication.shared_id)):
                    if member.id != medication.id:
                        self._inventory.put_medication(
                            member.model_copy(update={"stock_quantity": medication.stock_quantity})
                        )
        ok = self.store.upsert_medication(medication)
        logger.info("tracker.save_medication", medication_id=medication.id, persisted=ok)
        return saved

    def delete_medication(self, medication_id: str) -> bool:
        """Delete the medication and its dose logs."""
        with self._lock:
            self._inventory.get_medication(medication_id)
            self._inventory.remove_medication(medication_id)
            removed_logs = self._logs.remove_medication(medication_id)
            for key in [k for k in self._pending if k[1] == medication_id]:
                del self._pending[key]
        ok = self.store.delete_medication(medication_id)
        logger.info(
            "tracker.delete_medication",
            medication_id=medication_id,
            removed_logs=removed_logs,
            persisted=ok,
        )
        return ok

    def save_product(self, product: InventoryItem) -> InventoryItem:
        with self._lock:
            saved = self._inventory.put_product(product)
        ok = self.store.upsert_product(product)
        logger.info("tracker.save_product", product_id=product.id, persisted=ok)
        return saved

    def delete_product(self, product_id: str) -> bool:
        with self._lock:
            self._inventory.get_product(product_id)
            self._inventory.remove_product(product_id)
        ok = self.store.delete_product(product_id)
        logger.info("tracker.delete_product", product_id=product_id, persisted=ok)
        return ok

    def refill(self, product_id: str, packs: int, units_per_pack: float | None = None) -> InventoryLog:
        """Add packs x units to the product and record one audit entry.

        units_per_pack defaults to the product's pack size.
        """
        with self._lock:
            product = self._inventory.get_product(product_id)
            if units_per_pack is None:
                units_per_pack = product.pack_size or DEFAULT_PACK_SIZE
            updated, entry = self._inventory.refill(product_id, packs, units_per_pack, self.clock.now())
            self._inventory_logs.insert(0, entry)
        saved = self.store.upsert_product(updated)
        logged = self.store.append_inventory_log(entry)
        if not (saved and logged):
            logger.error(
                "tracker.refill.persist_failed",
                product_id=product_id,
                product_saved=saved,
                log_saved=logged,
            )
        return entry
