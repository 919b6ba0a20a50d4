"""Dose mode: toggle one dose taken/not taken."""

from datetime import datetime
from typing import Optional

import typer

from src.engine.errors import TrackerError

from .shared import build_tracker, console, format_quantity, logger, start_command


def toggle(
    medication_id: str = typer.Argument(..., help="Medication id"),
    day: Optional[datetime] = typer.Option(None, "--date", "-d", formats=["%Y-%m-%d"], help="Day of the dose (default today)"),
    db: Optional[str] = typer.Option(None, "--db", help="Database URL (default DATABASE_URL)"),
    backend: Optional[str] = typer.Option(None, "--backend", "-b", help="sql or memory (default STORE_BACKEND)"),
) -> None:
    """Mark a dose taken, or unmark it; linked stock follows."""
    start_command("toggle", medication_id=medication_id)
    tracker = build_tracker(db, backend, day)
    try:
        result = tracker.toggle_dose(medication_id)
    except TrackerError as e:
        console.print(f"[red]{e}[/red]")
        logger.warning("toggle.unknown_medication")
        raise typer.Exit(1) from e

    medication = tracker.get_medication(medication_id)
    state = "[green]taken[/green]" if result.taken else "[yellow]not taken[/yellow]"
    console.print(f"{medication.name} on {result.day.isoformat()}: {state}")
    if result.stock is not None:
        console.print(
            f"[dim]Stock ({result.stock.linkage.kind}): "
            f"{format_quantity(result.stock.quantity_before)} -> {format_quantity(result.stock.quantity_after)}[/dim]"
        )
    if not result.persisted:
        console.print("[yellow]Store write failed; the change will be retried or corrected on next load.[/yellow]")
