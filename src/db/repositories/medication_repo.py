"""Medication repository: fetch, upsert, delete, legacy stock moves.

Older stores lack the stock/archive/link columns. Reads and writes that fail on a
missing column are retried with BASE_COLUMNS only.
"""

from typing import Any

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import OperationalError, ProgrammingError

from src.db import get_session
from src.db.models.medication import BASE_COLUMNS, EXTENDED_COLUMNS, DoseLog, MedicationRecord
from src.utils.logger import get_logger

logger = get_logger("adherence.db.medication_repo")

_table = MedicationRecord.__table__


def is_missing_column_error(exc: Exception) -> bool:
    """True when the driver complains about one of the later-added columns."""
    message = str(getattr(exc, "orig", None) or exc).lower()
    return any(column in message for column in EXTENDED_COLUMNS)


def _select(columns: tuple[str, ...]) -> list[dict[str, Any]]:
    with get_session() as session:
        q = select(*[_table.c[name] for name in columns]).order_by(_table.c.created_at, _table.c.id)
        return [dict(row) for row in session.execute(q).mappings().all()]


def fetch_all() -> list[dict[str, Any]]:
    """All medication rows in creation order, as plain dicts."""
    try:
        return _select(BASE_COLUMNS + EXTENDED_COLUMNS)
    except (OperationalError, ProgrammingError) as e:
        if not is_missing_column_error(e):
            raise
        logger.warning("medication_repo.fetch_all.schema_fallback", error=str(e))
        return _select(BASE_COLUMNS)


def _write(values: dict[str, Any]) -> None:
    medication_id = values["id"]
    with get_session() as session:
        exists = session.execute(select(_table.c.id).where(_table.c.id == medication_id)).first()
        if exists:
            session.execute(update(_table).where(_table.c.id == medication_id).values(**values))
        else:
            session.execute(insert(_table).values(**values))


def upsert(values: dict[str, Any]) -> bool:
    """Insert or update one medication. Returns False when only the base columns could be saved."""
    full = {k: v for k, v in values.items() if k in BASE_COLUMNS + EXTENDED_COLUMNS}
    try:
        _write(full)
        return True
    except (OperationalError, ProgrammingError) as e:
        if not is_missing_column_error(e):
            raise
        logger.warning("medication_repo.upsert.schema_fallback", medication_id=values.get("id"), error=str(e))
    _write({k: v for k, v in full.items() if k in BASE_COLUMNS})
    return False


def delete_with_logs(medication_id: str) -> None:
    """Delete the medication and every dose log that references it."""
    with get_session() as session:
        session.execute(delete(DoseLog).where(DoseLog.medication_id == medication_id))
        session.execute(delete(_table).where(_table.c.id == medication_id))


def adjust_stock(medication_ids: list[str], delta: float) -> int:
    """stock_quantity += delta for each listed medication that tracks stock. Returns rows touched."""
    if not medication_ids:
        return 0
    with get_session() as session:
        result = session.execute(
            update(_table)
            .where(_table.c.id.in_(medication_ids))
            .where(_table.c.stock_quantity.isnot(None))
            .values(stock_quantity=_table.c.stock_quantity + delta)
        )
        return result.rowcount or 0


def sync_shared_stock(shared_id: str, quantity: float, exclude_id: str) -> int:
    """Copy a legacy group's quantity onto the other members after one of them was edited."""
    with get_session() as session:
        result = session.execute(
            update(_table)
            .where(_table.c.shared_id == shared_id)
            .where(_table.c.id != exclude_id)
            .values(stock_quantity=quantity)
        )
        return result.rowcount or 0
