"""CLI commands: one module per mode (today, dose, history, inventory, serve)."""

from typer import Typer

from src.cli import dose_mode, history_mode, inventory_mode, serve_mode, today_mode
from src.utils.tracing import init_tracing

init_tracing()

app = Typer(help="Household medication adherence tracker")


def register_commands() -> None:
    """Register all CLI commands on the global app."""
    app.command()(today_mode.today)
    app.command()(dose_mode.toggle)
    app.command()(history_mode.history)
    app.command(name="shopping-list")(inventory_mode.shopping_list)
    app.command()(inventory_mode.refill)
    app.command(name="inventory-log")(inventory_mode.inventory_log)
    app.command()(serve_mode.serve)


register_commands()
