"""Database package: engine, session factory, init_db(), get_session()."""

import threading
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.config import DATABASE_URL
from src.db.base import Base

# Import all models so Base.metadata has all tables
from src.db.models import (  # noqa: F401
    DoseLog,
    InventoryLogRecord,
    MedicationRecord,
    Product,
)

_init_lock = threading.Lock()
_engine = None
_SessionLocal: sessionmaker | None = None
_database_url: str | None = None


def _get_engine(url: str):
    """Create engine with check_same_thread=False for use from executor threads."""
    if url.startswith("sqlite"):
        if "?" in url:
            url += "&check_same_thread=False"
        else:
            url += "?check_same_thread=False"
    return create_engine(url, echo=False)


def init_db(database_url: str | None = None, force: bool = False) -> None:
    """Create engine and any missing tables. Existing tables are left as they are.

    force=True disposes the current engine and binds to database_url (tests, CLI --db).
    A later call without a URL reuses the last one requested, even if that init failed.
    """
    global _engine, _SessionLocal, _database_url
    with _init_lock:
        if _SessionLocal is not None and not force:
            return
        if database_url:
            _database_url = database_url
        if _engine is not None:
            _engine.dispose()
        _SessionLocal = None
        _engine = _get_engine(_database_url or DATABASE_URL)
        Base.metadata.create_all(bind=_engine)
        _SessionLocal = sessionmaker(bind=_engine, autocommit=False, autoflush=False)


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """Context manager yielding a DB session. Calls init_db() on first use."""
    init_db()
    session = _SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
