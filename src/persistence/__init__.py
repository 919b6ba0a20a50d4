"""Persistence collaborators: store protocol, SQL and in-memory stores, change feed."""

from src.persistence.changes import ChangeFeed
from src.persistence.factory import build_store
from src.persistence.memory_store import InMemoryStore
from src.persistence.protocol import Persistence
from src.persistence.sql_store import SqlStore

__all__ = [
    "ChangeFeed",
    "InMemoryStore",
    "Persistence",
    "SqlStore",
    "build_store",
]
