"""SQLAlchemy-backed store. Failures never reach the engine: reads fall back, writes return False."""

from datetime import date

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from src.db import init_db
from src.db.repositories import dose_log_repo, inventory_log_repo, medication_repo, product_repo
from src.defaults import default_medications
from src.models.medication import InventoryItem, InventoryLog, Medication
from src.utils.logger import get_logger

logger = get_logger("adherence.persistence.sql_store")


class SqlStore:
    """Persistence over the tables created by init_db()."""

    def __init__(self, database_url: str | None = None, force: bool = False):
        self.database_url = database_url
        try:
            init_db(database_url, force=force or database_url is not None)
        except SQLAlchemyError as e:
            # Reads below retry init through get_session() and fall back if it still fails.
            logger.error("sql_store.init.failed", error=str(e))

    # --- reads ---

    def load_medications(self) -> list[Medication]:
        try:
            rows = medication_repo.fetch_all()
        except SQLAlchemyError as e:
            logger.warning("sql_store.load_medications.unavailable", error=str(e))
            return default_medications()
        medications = []
        for row in rows:
            try:
                medications.append(Medication.model_validate(row))
            except ValidationError as e:
                logger.warning("sql_store.load_medications.invalid_row", medication_id=row.get("id"), error=str(e))
        return medications

    def load_products(self) -> list[InventoryItem]:
        try:
            return [InventoryItem.model_validate(row) for row in product_repo.fetch_all()]
        except SQLAlchemyError as e:
            logger.warning("sql_store.load_products.unavailable", error=str(e))
            return []

    def load_dose_logs(self) -> list[tuple[date, str]]:
        try:
            return dose_log_repo.fetch_all()
        except SQLAlchemyError as e:
            logger.warning("sql_store.load_dose_logs.unavailable", error=str(e))
            return []

    def load_inventory_logs(self) -> list[InventoryLog]:
        try:
            return [InventoryLog.model_validate(row) for row in inventory_log_repo.fetch_all()]
        except SQLAlchemyError as e:
            logger.warning("sql_store.load_inventory_logs.unavailable", error=str(e))
            return []

    # --- writes ---

    def upsert_medication(self, medication: Medication) -> bool:
        values = medication.model_dump(mode="json")
        if medication.product_id:
            # The product owns the quantity; the medication row only carries the link.
            values["stock_quantity"] = None
            values["stock_threshold"] = None
        try:
            full = medication_repo.upsert(values)
            if full and medication.shared_id and not medication.product_id and medication.stock_quantity is not None:
                synced = medication_repo.sync_shared_stock(medication.shared_id, medication.stock_quantity, medication.id)
                logger.debug("sql_store.upsert_medication.shared_sync", shared_id=medication.shared_id, rows=synced)
            return True
        except SQLAlchemyError as e:
            logger.error("sql_store.upsert_medication.failed", medication_id=medication.id, error=str(e))
            return False

    def delete_medication(self, medication_id: str) -> bool:
        try:
            medication_repo.delete_with_logs(medication_id)
            return True
        except SQLAlchemyError as e:
            logger.error("sql_store.delete_medication.failed", medication_id=medication_id, error=str(e))
            return False

    def upsert_product(self, product: InventoryItem) -> bool:
        try:
            product_repo.upsert(product.model_dump())
            return True
        except SQLAlchemyError as e:
            logger.error("sql_store.upsert_product.failed", product_id=product.id, error=str(e))
            return False

    def delete_product(self, product_id: str) -> bool:
        try:
            product_repo.delete_product(product_id)
            return True
        except SQLAlchemyError as e:
            logger.error("sql_store.delete_product.failed", product_id=product_id, error=str(e))
            return False

    def set_dose_log(self, day: date, medication_id: str, taken: bool) -> bool:
        try:
            dose_log_repo.set_taken(day, medication_id, taken)
            return True
        except SQLAlchemyError as e:
            logger.error(
                "sql_store.set_dose_log.failed",
                day=str(day),
                medication_id=medication_id,
                taken=taken,
                error=str(e),
            )
            return False

    def adjust_product_quantity(self, product_id: str, delta: float) -> bool:
        try:
            found = product_repo.adjust_quantity(product_id, delta)
        except SQLAlchemyError as e:
            logger.error("sql_store.adjust_product_quantity.failed", product_id=product_id, error=str(e))
            return False
        if not found:
            logger.warning("sql_store.adjust_product_quantity.missing", product_id=product_id)
        return found

    def adjust_medication_stock(self, medication_ids: list[str], delta: float) -> bool:
        try:
            medication_repo.adjust_stock(medication_ids, delta)
            return True
        except SQLAlchemyError as e:
            logger.error("sql_store.adjust_medication_stock.failed", medication_ids=medication_ids, error=str(e))
            return False

    def append_inventory_log(self, entry: InventoryLog) -> bool:
        try:
            inventory_log_repo.append(entry.model_dump())
            return True
        except SQLAlchemyError as e:
            logger.error("sql_store.append_inventory_log.failed", inventory_id=entry.inventory_id, error=str(e))
            return False
