"""Inventory mode: shopping list, refill a product, refill history."""

from typing import Optional

import typer
from rich.table import Table

from src.defaults import USER_NAMES
from src.engine.errors import TrackerError

from .shared import build_tracker, console, format_quantity, logger, start_command


def shopping_list(
    db: Optional[str] = typer.Option(None, "--db", help="Database URL (default DATABASE_URL)"),
    backend: Optional[str] = typer.Option(None, "--backend", "-b", help="sql or memory (default STORE_BACKEND)"),
) -> None:
    """List low-stock items once per physical pool, with who uses them."""
    start_command("shopping-list")
    tracker = build_tracker(db, backend)
    items = tracker.shopping_list()
    logger.info("shopping_list.show", items=len(items))
    if not items:
        console.print("[green]Nothing to buy.[/green]")
        return
    table = Table(title="Shopping list")
    table.add_column("Item")
    table.add_column("Left", justify="right")
    table.add_column("For")
    for item in items:
        left = format_quantity(item.stock_quantity)
        table.add_row(
            item.name,
            f"[bold red]{left}[/bold red]" if item.stock_quantity <= 0 else f"[yellow]{left}[/yellow]",
            ", ".join(USER_NAMES[u] for u in item.users),
        )
    console.print(table)


def refill(
    product_id: str = typer.Argument(..., help="Product id"),
    packs: int = typer.Option(1, "--packs", "-n", min=1, help="Packs bought"),
    units: Optional[float] = typer.Option(None, "--units", "-u", min=0, help="Units per pack (default the product's pack size)"),
    db: Optional[str] = typer.Option(None, "--db", help="Database URL (default DATABASE_URL)"),
    backend: Optional[str] = typer.Option(None, "--backend", "-b", help="sql or memory (default STORE_BACKEND)"),
) -> None:
    """Add packs x units to a product and record the refill."""
    start_command("refill", product_id=product_id)
    tracker = build_tracker(db, backend)
    try:
        entry = tracker.refill(product_id, packs, units)
    except (TrackerError, ValueError) as e:
        console.print(f"[red]{e}[/red]")
        logger.warning("refill.rejected", error=str(e))
        raise typer.Exit(1) from e
    product = tracker.inventory.get_product(product_id)
    console.print(
        f"[green]{product.name}: +{format_quantity(entry.amount_added)} "
        f"({entry.packs_added} pack(s)), now {format_quantity(product.quantity)}[/green]"
    )


def inventory_log(
    product_id: Optional[str] = typer.Option(None, "--product", "-p", help="Only this product"),
    limit: int = typer.Option(20, "--limit", "-l", min=1, help="Entries to show"),
    db: Optional[str] = typer.Option(None, "--db", help="Database URL (default DATABASE_URL)"),
    backend: Optional[str] = typer.Option(None, "--backend", "-b", help="sql or memory (default STORE_BACKEND)"),
) -> None:
    """Show refill history, newest first."""
    start_command("inventory-log", product_id=product_id)
    tracker = build_tracker(db, backend)
    entries = tracker.inventory_logs(product_id)[:limit]
    logger.info("inventory_log.show", entries=len(entries))
    if not entries:
        console.print("[dim]No refills recorded.[/dim]")
        return
    table = Table(title="Refills")
    table.add_column("When")
    table.add_column("Product")
    table.add_column("Packs", justify="right")
    table.add_column("Added", justify="right")
    for entry in entries:
        table.add_row(
            entry.date.strftime("%Y-%m-%d %H:%M"),
            entry.product_name,
            str(entry.packs_added),
            format_quantity(entry.amount_added),
        )
    console.print(table)
