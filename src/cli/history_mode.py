"""History mode: month calendar of adherence, or the detail of one day."""

import calendar
from datetime import date, datetime
from typing import Optional

import typer
from rich.table import Table

from src.defaults import USER_NAMES
from src.models.medication import UserID

from .shared import build_tracker, console, logger, start_command, styled


def history(
    user: UserID = typer.Argument(..., help="Whose history to show"),
    month: Optional[str] = typer.Option(None, "--month", "-m", help="YYYY-MM (default current month)"),
    day: Optional[datetime] = typer.Option(None, "--day", formats=["%Y-%m-%d"], help="Show one day in detail"),
    db: Optional[str] = typer.Option(None, "--db", help="Database URL (default DATABASE_URL)"),
    backend: Optional[str] = typer.Option(None, "--backend", "-b", help="sql or memory (default STORE_BACKEND)"),
) -> None:
    """Monday-first month grid with each day's percentage, or per-medication rows for --day."""
    start_command("history", user=user.value)
    tracker = build_tracker(db, backend)

    if day is not None:
        target = day.date()
        stats = tracker.day_stats(user, target)
        table = Table(title=f"{USER_NAMES[user]} - {target.isoformat()} ({stats.taken}/{stats.total})")
        table.add_column("Medication")
        table.add_column("When")
        table.add_column("Status")
        for entry in tracker.day_entries(user, target):
            table.add_row(entry.medication.name, entry.medication.timing, styled(entry.status))
        console.print(table)
        logger.info("history.day", day=target.isoformat(), percentage=stats.percentage)
        return

    today = tracker.clock.today()
    year, month_number = today.year, today.month
    if month:
        try:
            year, month_number = (int(part) for part in month.split("-", 1))
            date(year, month_number, 1)
        except ValueError as e:
            console.print(f"[red]Invalid --month {month!r}; expected YYYY-MM[/red]")
            raise typer.Exit(1) from e

    grid = tracker.month_grid(user, year, month_number)
    table = Table(title=f"{USER_NAMES[user]} - {calendar.month_name[month_number]} {year}")
    for name in ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"):
        table.add_column(name, justify="center")
    for week in range(0, len(grid), 7):
        cells = []
        for cell in grid[week:week + 7]:
            stats = cell.stats
            if not cell.in_month:
                cells.append(f"[dim]{stats.day.day}[/dim]")
            elif stats.is_empty or stats.is_future:
                cells.append(f"{stats.day.day}")
            else:
                cells.append(f"{stats.day.day}\n{styled(stats.status)} {stats.percentage}%")
        table.add_row(*cells)
    console.print(table)

    period = tracker.period_stats(user, date(year, month_number, 1), date(year, month_number, calendar.monthrange(year, month_number)[1]))
    if period.percentage is None:
        console.print("[dim]Nothing scheduled yet this month.[/dim]")
    else:
        console.print(
            f"{period.taken}/{period.total} doses ({period.percentage}%), "
            f"{period.complete_days}/{period.scheduled_days} complete days"
        )
    logger.info("history.month", year=year, month=month_number, percentage=period.percentage)
