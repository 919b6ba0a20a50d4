"""Product (inventory) repository."""

from typing import Any

from sqlalchemy import delete, select, update

from src.db import get_session
from src.db.models.inventory import Product


def fetch_all() -> list[dict[str, Any]]:
    """All products ordered by name."""
    with get_session() as session:
        rows = list(session.scalars(select(Product).order_by(Product.name)).all())
        return [
            {
                "id": r.id,
                "name": r.name,
                "quantity": r.quantity,
                "threshold": r.threshold,
                "pack_size": r.pack_size,
                "unit": r.unit,
            }
            for r in rows
        ]


def upsert(values: dict[str, Any]) -> None:
    with get_session() as session:
        row = session.get(Product, values["id"])
        if row is None:
            row = Product(id=values["id"], name=values["name"])
            session.add(row)
        row.name = values["name"]
        row.quantity = values.get("quantity") or 0
        row.threshold = values.get("threshold") or 0
        row.pack_size = values.get("pack_size")
        row.unit = values.get("unit")


def delete_product(product_id: str) -> None:
    with get_session() as session:
        session.execute(delete(Product).where(Product.id == product_id))


def adjust_quantity(product_id: str, delta: float) -> bool:
    """quantity += delta in one UPDATE. Returns False when the product does not exist."""
    with get_session() as session:
        result = session.execute(
            update(Product).where(Product.id == product_id).values(quantity=Product.quantity + delta)
        )
        return bool(result.rowcount)
