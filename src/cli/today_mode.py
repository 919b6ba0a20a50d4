"""Today mode: the user's plan for a day, in timing order, with stock."""

from datetime import datetime
from typing import Optional

import typer
from rich.table import Table

from src.defaults import USER_NAMES
from src.engine.schedule import next_due_date
from src.models.medication import UserID

from .shared import build_tracker, console, format_stock, logger, start_command, styled


def today(
    user: UserID = typer.Argument(..., help="Whose plan to show"),
    day: Optional[datetime] = typer.Option(None, "--date", "-d", formats=["%Y-%m-%d"], help="Day to show (default today)"),
    db: Optional[str] = typer.Option(None, "--db", help="Database URL (default DATABASE_URL)"),
    backend: Optional[str] = typer.Option(None, "--backend", "-b", help="sql or memory (default STORE_BACKEND)"),
) -> None:
    """Show the daily plan: due medications first-to-last, not-due ones greyed out."""
    start_command("today", user=user.value)
    tracker = build_tracker(db, backend, day)
    target = tracker.clock.today()
    plan = tracker.today_plan(user, target)
    stats = tracker.day_stats(user, target)
    logger.info("today.show", day=target.isoformat(), entries=len(plan), taken=stats.taken, total=stats.total)

    table = Table(title=f"{USER_NAMES[user]} - {target.isoformat()}")
    table.add_column("", width=2)
    table.add_column("Medication")
    table.add_column("Dosage")
    table.add_column("When")
    table.add_column("Stock", justify="right")
    table.add_column("Id", style="dim")
    for entry in plan:
        medication = entry.medication
        if not entry.due:
            upcoming = next_due_date(medication, target)
            table.add_row(
                "",
                f"[dim]{medication.name}[/dim]",
                f"[dim]{medication.dosage}[/dim]",
                f"[dim]not today (next {upcoming.isoformat()})[/dim]",
                format_stock(tracker.current_stock(medication.id)),
                medication.id,
            )
            continue
        table.add_row(
            "[green]x[/green]" if entry.taken else "[ ]",
            medication.name,
            medication.dosage,
            medication.timing,
            format_stock(tracker.current_stock(medication.id)),
            medication.id,
        )
    console.print(table)
    console.print(f"{stats.taken}/{stats.total} taken ({stats.percentage}%) {styled(stats.status)}")
