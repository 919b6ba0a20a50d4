"""Serve mode: run the FastAPI server."""

import sys

import typer
import uvicorn

from src.api.server import create_app
from src.config import API_PORT

from .shared import console, logger, start_command


def serve(
    port: int = typer.Option(API_PORT, "--port", "-p", help="Port for the HTTP server"),
    host: str = typer.Option("127.0.0.1", "--host", "-h", help="Bind host"),
) -> None:
    """Start the HTTP API; POST /notifications makes it reload from the store."""
    start_command("serve", port=port)
    logger.info("serve.start", host=host)
    app = create_app()
    console.print(f"[green]Starting server on http://{host}:{port}[/green]")
    console.print("[dim]Endpoints: GET /health, GET /users/{user}/today, POST /notifications, ...[/dim]")
    try:
        uvicorn.run(app, host=host, port=port, log_level="info", timeout_graceful_shutdown=5)
    except KeyboardInterrupt:
        console.print("\n[dim]Shutting down...[/dim]")
        sys.exit(0)
