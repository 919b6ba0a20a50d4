"""Shared CLI helpers: console, logger, tracker construction, stock formatting."""

from datetime import date, datetime

from rich.console import Console

from src.engine.clock import FixedClock, SystemClock
from src.engine.tracker import Tracker
from src.models.stats import StockLevel
from src.notifications.low_stock import ConsoleAlerter
from src.persistence.factory import build_store
from src.utils.logger import bind_context, clear_context, get_logger

console = Console()
logger = get_logger("adherence.cli")

STATUS_STYLES = {
    "complete": "green",
    "partial": "yellow",
    "missed": "red",
    "today": "cyan",
    "pending": "dim",
    "empty": "dim",
    "taken": "green",
    "skipped": "red",
    "to_take": "cyan",
}


def build_tracker(
    database_url: str | None = None,
    backend: str | None = None,
    day: date | datetime | None = None,
) -> Tracker:
    """Tracker over the configured store; `day` pins "today" (the --date option)."""
    clock = FixedClock(day) if day is not None else SystemClock()
    store = build_store(backend, database_url)
    return Tracker(store, clock=clock, alerter=ConsoleAlerter(console))


def format_quantity(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:g}"


def format_stock(stock: StockLevel | None) -> str:
    """Rich markup for a stock cell: red when out, yellow when low."""
    if stock is None:
        return "[dim]-[/dim]"
    text = format_quantity(stock.quantity)
    if stock.is_out_of_stock:
        return f"[bold red]{text}[/bold red]"
    if stock.is_low:
        return f"[yellow]{text}[/yellow]"
    return text


def styled(status: str) -> str:
    style = STATUS_STYLES.get(status, "white")
    return f"[{style}]{status.replace('_', ' ')}[/{style}]"


def start_command(command: str, **context) -> None:
    """Reset the log context and bind the command's identifiers to every entry it logs."""
    clear_context()
    bind_context(command=command, **context)
