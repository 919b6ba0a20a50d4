"""Low-stock alert collaborators: receive (medication name, projected quantity)."""

from typing import Protocol

from rich.console import Console

from src.utils.logger import get_logger

logger = get_logger("adherence.notifications.low_stock")


class LowStockAlerter(Protocol):
    def send(self, medication_name: str, projected_quantity: float) -> None:
        """Deliver the alert; must not raise into the caller."""
        ...


def alert_text(medication_name: str, projected_quantity: float) -> tuple[str, str]:
    """Title and body of the restock alert."""
    remaining = int(projected_quantity) if float(projected_quantity).is_integer() else projected_quantity
    title = f"Low stock: {medication_name}"
    if projected_quantity <= 0:
        return title, "Out of stock. Add it to the shopping list!"
    return title, f"Only {remaining} left. Add it to the shopping list!"


class LogAlerter:
    """Structured-log delivery (server mode)."""

    def send(self, medication_name: str, projected_quantity: float) -> None:
        title, body = alert_text(medication_name, projected_quantity)
        logger.warning(
            "low_stock.alert",
            medication=medication_name,
            projected_quantity=projected_quantity,
            title=title,
            body=body,
        )


class ConsoleAlerter:
    """Terminal delivery (CLI mode)."""

    def __init__(self, console: Console | None = None):
        self._console = console or Console()

    def send(self, medication_name: str, projected_quantity: float) -> None:
        title, body = alert_text(medication_name, projected_quantity)
        self._console.print(f"[bold yellow]{title}[/bold yellow] [yellow]{body}[/yellow]")
        logger.info("low_stock.alert_printed", medication=medication_name, projected_quantity=projected_quantity)
