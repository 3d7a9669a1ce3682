"""Abstract document store interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Optional

SnapshotCallback = Callable[[list["Document"]], None]
ErrorCallback = Callable[[Exception], None]
Unsubscribe = Callable[[], None]


@dataclass(frozen=True)
class Document:
    """A whole record held in a collection."""

    id: str
    collection: str
    data: dict[str, Any] = field(default_factory=dict)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class DocumentStore(ABC):
    """Abstract document store with full-collection subscriptions.

    Every backend failure is raised as ``StoreError``.
    """

    @abstractmethod
    def add(self, collection: str, data: dict[str, Any]) -> str:
        """Insert a new document. Returns the store-assigned ID."""
        pass

    @abstractmethod
    def set(
        self, collection: str, doc_id: str, data: dict[str, Any], merge: bool = False
    ) -> None:
        """Create or replace a document under a known ID.

        With ``merge`` the given fields are merged into an existing document.
        """
        pass

    @abstractmethod
    def update(self, collection: str, doc_id: str, data: dict[str, Any]) -> None:
        """Merge fields into an existing document.

        Raises:
            StoreError: If the document does not exist
        """
        pass

    @abstractmethod
    def delete(self, collection: str, doc_id: str) -> None:
        """Delete a document. Deleting an unknown ID is a no-op."""
        pass

    @abstractmethod
    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        """Get a document by ID."""
        pass

    @abstractmethod
    def list(self, collection: str) -> list[Document]:
        """List every document in a collection, oldest first."""
        pass

    @abstractmethod
    def subscribe(
        self,
        collection: str,
        on_snapshot: SnapshotCallback,
        on_error: Optional[ErrorCallback] = None,
    ) -> Unsubscribe:
        """Subscribe to a collection.

        ``on_snapshot`` receives the full current list of documents right
        away and again after every change. Fetch failures go to
        ``on_error``. Returns a callable that ends the subscription.
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Release connections and drop all subscriptions."""
        pass
