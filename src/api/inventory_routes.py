"""Inventory routes: shopping list, grouped listing, refill, refill history."""

from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from src.api.deps import get_tracker
from src.engine.tracker import Tracker
from src.models.medication import UserID

router = APIRouter(prefix="/inventory", tags=["inventory"])


class RefillBody(BaseModel):
    packs: int = Field(1, ge=1)
    units_per_pack: Optional[float] = Field(None, ge=0)


@router.get("/shopping-list")
def shopping_list(tracker: Tracker = Depends(get_tracker)) -> dict[str, Any]:
    """Low-stock pools, one row per physical item."""
    return {"items": [item.model_dump(mode="json") for item in tracker.shopping_list()]}


@router.get("/groups")
def groups(user: Optional[UserID] = None, tracker: Tracker = Depends(get_tracker)) -> dict[str, Any]:
    return {"groups": [g.model_dump(mode="json") for g in tracker.groups(user)]}


@router.post("/{product_id}/refill")
def refill(product_id: str, body: RefillBody, tracker: Tracker = Depends(get_tracker)) -> dict[str, Any]:
    """Add packs x units to the product; units default to its pack size."""
    try:
        entry = tracker.refill(product_id, body.packs, body.units_per_pack)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    product = tracker.inventory.get_product(product_id)
    return {"product": product.model_dump(mode="json"), "log": entry.model_dump(mode="json")}


@router.get("/logs")
def inventory_logs(
    product_id: Optional[str] = None,
    limit: int = Query(50, ge=1, le=500),
    tracker: Tracker = Depends(get_tracker),
) -> dict[str, Any]:
    """Refill history, newest first."""
    entries = tracker.inventory_logs(product_id)[:limit]
    return {"logs": [e.model_dump(mode="json") for e in entries]}
