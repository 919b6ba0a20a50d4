"""Refill audit repository: append and list, never update."""

from typing import Any, Optional

from sqlalchemy import select

from src.db import get_session
from src.db.models.inventory import InventoryLogRecord


def append(values: dict[str, Any]) -> int:
    """Insert one refill entry and return its id."""
    with get_session() as session:
        row = InventoryLogRecord(
            inventory_id=values["inventory_id"],
            product_name=values["product_name"],
            amount_added=values["amount_added"],
            packs_added=values["packs_added"],
            date=values["date"],
        )
        session.add(row)
        session.flush()
        return row.id


def fetch_all(limit: Optional[int] = None, inventory_id: Optional[str] = None) -> list[dict[str, Any]]:
    """Entries newest first, optionally for one product."""
    with get_session() as session:
        q = select(InventoryLogRecord).order_by(InventoryLogRecord.date.desc(), InventoryLogRecord.id.desc())
        if inventory_id:
            q = q.where(InventoryLogRecord.inventory_id == inventory_id)
        if limit:
            q = q.limit(limit)
        return [
            {
                "id": r.id,
                "inventory_id": r.inventory_id,
                "product_name": r.product_name,
                "amount_added": r.amount_added,
                "packs_added": r.packs_added,
                "date": r.date,
            }
            for r in session.scalars(q).all()
        ]
