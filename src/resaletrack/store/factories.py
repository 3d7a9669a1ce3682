"""Store factory functions for creating document store instances."""

from typing import Optional

from resaletrack.config import resolve_database_path
from resaletrack.store.sqlalchemy_store import SQLAlchemyStore


def create_sqlite_store(database_path: Optional[str] = None) -> SQLAlchemyStore:
    """Create a SQLite-backed document store at the resolved database path."""
    return SQLAlchemyStore(f"sqlite:///{resolve_database_path(database_path)}")
