"""Utility modules."""

from src.utils.logger import bind_context, clear_context, get_logger
from src.utils.tracing import get_tracer, init_tracing, shutdown_tracing

__all__ = [
    "bind_context",
    "clear_context",
    "get_logger",
    "get_tracer",
    "init_tracing",
    "shutdown_tracing",
]
