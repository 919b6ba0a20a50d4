"""Pick the store from STORE_BACKEND (sql by default)."""

from src.config import DATABASE_URL, STORE_BACKEND
from src.defaults import default_medications
from src.persistence.memory_store import InMemoryStore
from src.persistence.protocol import Persistence
from src.persistence.sql_store import SqlStore
from src.utils.logger import get_logger

logger = get_logger("adherence.persistence.factory")


def build_store(backend: str | None = None, database_url: str | None = None) -> Persistence:
    """SqlStore for "sql"; InMemoryStore holding the built-in medications for "memory"."""
    backend = (backend or STORE_BACKEND).lower()
    if backend == "memory":
        logger.info("store.build", backend="memory")
        return InMemoryStore(medications=default_medications())
    if backend != "sql":
        raise ValueError(f"Unknown store backend: {backend!r} (expected 'sql' or 'memory')")
    url = database_url or DATABASE_URL
    logger.info("store.build", backend="sql", database_url=url)
    return SqlStore(url)
