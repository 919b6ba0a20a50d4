"""Tests for the SQL store and repositories: round trips, legacy schema, unavailable database."""

import os
import sys
import tempfile
import unittest
from datetime import date, datetime, timezone
from pathlib import Path

# File DB: every session must see the same data (in-memory SQLite is per-connection).
_test_db_file = tempfile.NamedTemporaryFile(suffix=".sqlite", delete=False)
_test_db_file.close()
os.environ["DATABASE_URL"] = f"sqlite:///{_test_db_file.name}"
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import create_engine, text

from src.db.repositories import inventory_log_repo, medication_repo
from src.defaults import default_medications
from src.models.medication import InventoryItem, InventoryLog, Medication, UserID
from src.persistence.sql_store import SqlStore


def _fresh_url() -> str:
    handle = tempfile.NamedTemporaryFile(suffix=".sqlite", delete=False)
    handle.close()
    os.unlink(handle.name)
    return f"sqlite:///{handle.name}"


class TestSqlStoreRoundTrip(unittest.TestCase):
    def setUp(self):
        self.store = SqlStore(_fresh_url())
        self.store.upsert_product(InventoryItem(id="vitd", name="Vitamin D 1000", quantity=10, threshold=5, pack_size=30))
        for medication in (
            Medication(id="p-vitd", user_id=UserID.PAOLO, name="Vitamin D", product_id="vitd", stock_quantity=10),
            Medication(id="p-omega", user_id=UserID.PAOLO, name="Omega 3", shared_id="omega-3", stock_quantity=20),
            Medication(id="b-omega", user_id=UserID.BARBARA, name="Omega 3", shared_id="omega-3", stock_quantity=20),
            Medication(id="b-old", user_id=UserID.BARBARA, name="Old", is_archived=True),
        ):
            self.store.upsert_medication(medication)

    def test_medications_round_trip(self):
        meds = {m.id: m for m in self.store.load_medications()}
        self.assertEqual(set(meds), {"p-vitd", "p-omega", "b-omega", "b-old"})
        self.assertTrue(meds["b-old"].is_archived)
        self.assertEqual(meds["p-omega"].shared_id, "omega-3")
        self.assertEqual(meds["b-omega"].user_id, UserID.BARBARA)

    def test_linked_medication_does_not_store_stock(self):
        meds = {m.id: m for m in self.store.load_medications()}
        self.assertEqual(meds["p-vitd"].product_id, "vitd")
        self.assertIsNone(meds["p-vitd"].stock_quantity)

    def test_saving_legacy_member_syncs_group(self):
        self.store.upsert_medication(
            Medication(id="p-omega", user_id=UserID.PAOLO, name="Omega 3", shared_id="omega-3", stock_quantity=60)
        )
        meds = {m.id: m for m in self.store.load_medications()}
        self.assertEqual(meds["b-omega"].stock_quantity, 60)

    def test_dose_logs(self):
        self.assertTrue(self.store.set_dose_log(date(2024, 3, 4), "p-omega", True))
        self.assertTrue(self.store.set_dose_log(date(2024, 3, 4), "p-omega", True))
        self.assertTrue(self.store.set_dose_log(date(2024, 3, 5), "p-omega", True))
        self.assertEqual(len(self.store.load_dose_logs()), 2)
        self.store.set_dose_log(date(2024, 3, 5), "p-omega", False)
        self.assertEqual(self.store.load_dose_logs(), [(date(2024, 3, 4), "p-omega")])

    def test_delete_medication_removes_its_logs(self):
        self.store.set_dose_log(date(2024, 3, 4), "p-omega", True)
        self.store.set_dose_log(date(2024, 3, 4), "b-omega", True)
        self.assertTrue(self.store.delete_medication("p-omega"))
        self.assertEqual(self.store.load_dose_logs(), [(date(2024, 3, 4), "b-omega")])
        self.assertNotIn("p-omega", {m.id for m in self.store.load_medications()})

    def test_stock_adjustments(self):
        self.assertTrue(self.store.adjust_product_quantity("vitd", -1))
        self.assertEqual(self.store.load_products()[0].quantity, 9)
        self.assertFalse(self.store.adjust_product_quantity("missing", -1))
        self.assertTrue(self.store.adjust_medication_stock(["p-omega", "b-omega", "b-old"], -1))
        meds = {m.id: m for m in self.store.load_medications()}
        self.assertEqual(meds["p-omega"].stock_quantity, 19)
        self.assertEqual(meds["b-omega"].stock_quantity, 19)
        self.assertIsNone(meds["b-old"].stock_quantity)

    def test_inventory_logs_newest_first(self):
        older = InventoryLog(inventory_id="vitd", product_name="Vitamin D 1000", amount_added=30, packs_added=1,
                             date=datetime(2024, 3, 1, 8, 0, tzinfo=timezone.utc))
        newer = InventoryLog(inventory_id="vitd", product_name="Vitamin D 1000", amount_added=60, packs_added=2,
                             date=datetime(2024, 3, 2, 8, 0, tzinfo=timezone.utc))
        self.assertTrue(self.store.append_inventory_log(older))
        self.assertTrue(self.store.append_inventory_log(newer))
        logs = self.store.load_inventory_logs()
        self.assertEqual([e.amount_added for e in logs], [60, 30])
        self.assertEqual(logs[0].date, newer.date)
        self.assertIsNotNone(logs[0].id)
        self.assertEqual(len(inventory_log_repo.fetch_all(limit=1)), 1)

    def test_product_delete(self):
        self.assertTrue(self.store.delete_product("vitd"))
        self.assertEqual(self.store.load_products(), [])


class TestLegacySchema(unittest.TestCase):
    """A store created before the stock/archive/link columns existed."""

    def setUp(self):
        url = _fresh_url()
        engine = create_engine(url)
        with engine.begin() as conn:
            conn.execute(text(
                "CREATE TABLE medications ("
                "id VARCHAR(64) PRIMARY KEY, user_id VARCHAR(32) NOT NULL, name VARCHAR(256) NOT NULL, "
                "dosage VARCHAR(128), timing VARCHAR(128), frequency VARCHAR(32) NOT NULL, notes TEXT, "
                "icon VARCHAR(16), created_at DATETIME NOT NULL)"
            ))
            conn.execute(text(
                "INSERT INTO medications VALUES "
                "('p-old', 'paolo', 'Legacy', '1', 'Sera', 'alternate_days', NULL, 'drop', '2024-01-01 08:00:00')"
            ))
        engine.dispose()
        self.store = SqlStore(url)

    def test_read_falls_back_to_base_columns(self):
        meds = self.store.load_medications()
        self.assertEqual([m.id for m in meds], ["p-old"])
        self.assertFalse(meds[0].is_archived)
        self.assertIsNone(meds[0].stock_quantity)
        self.assertEqual(meds[0].icon, "drop")

    def test_write_degrades_to_base_columns(self):
        ok = self.store.upsert_medication(
            Medication(id="p-new", user_id=UserID.PAOLO, name="New", stock_quantity=12, shared_id="new")
        )
        self.assertTrue(ok)
        self.assertFalse(medication_repo.upsert({"id": "p-old", "user_id": "paolo", "name": "Renamed",
                                                 "frequency": "daily", "stock_quantity": 3}))
        meds = {m.id: m for m in self.store.load_medications()}
        self.assertEqual(meds["p-old"].name, "Renamed")
        self.assertIsNone(meds["p-new"].stock_quantity)

    def test_new_tables_are_created(self):
        self.assertEqual(self.store.load_products(), [])
        self.assertTrue(self.store.set_dose_log(date(2024, 1, 1), "p-old", True))


class TestUnavailableStore(unittest.TestCase):
    def setUp(self):
        self.store = SqlStore("sqlite:////nonexistent-dir/adherence/test.sqlite")

    def test_reads_fall_back(self):
        self.assertEqual(
            [m.id for m in self.store.load_medications()],
            [m.id for m in default_medications()],
        )
        self.assertEqual(self.store.load_products(), [])
        self.assertEqual(self.store.load_dose_logs(), [])
        self.assertEqual(self.store.load_inventory_logs(), [])

    def test_writes_return_false(self):
        self.assertFalse(self.store.set_dose_log(date(2024, 1, 1), "x", True))
        self.assertFalse(self.store.adjust_product_quantity("p", -1))
        self.assertFalse(self.store.upsert_product(InventoryItem(id="p", name="P")))


if __name__ == "__main__":
    unittest.main()
