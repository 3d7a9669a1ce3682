"""Document store layer for resaletrack application."""

from resaletrack.store.base import Document, DocumentStore
from resaletrack.store.factories import create_sqlite_store

__all__ = ["Document", "DocumentStore", "create_sqlite_store"]
