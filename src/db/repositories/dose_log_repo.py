"""Dose log repository: presence of a row means the dose was taken."""

from datetime import date

from sqlalchemy import delete, select

from src.db import get_session
from src.db.models.medication import DoseLog


def fetch_all() -> list[tuple[date, str]]:
    with get_session() as session:
        q = select(DoseLog.day, DoseLog.medication_id).where(DoseLog.taken.is_(True))
        return [(row.day, row.medication_id) for row in session.execute(q).all()]


def set_taken(day: date, medication_id: str, taken: bool) -> None:
    """Insert the row if absent (taken) or delete it (not taken)."""
    with get_session() as session:
        if taken:
            existing = session.scalars(
                select(DoseLog.id).where(DoseLog.day == day).where(DoseLog.medication_id == medication_id)
            ).first()
            if existing is None:
                session.add(DoseLog(day=day, medication_id=medication_id, taken=True))
        else:
            session.execute(
                delete(DoseLog).where(DoseLog.day == day).where(DoseLog.medication_id == medication_id)
            )
