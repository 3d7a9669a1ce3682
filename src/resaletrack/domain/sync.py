"""Local mirrors of the store's collections, kept current by subscriptions."""

import itertools
import logging
import threading
from typing import Any, Callable, Iterable, Optional

from resaletrack.config import DEFAULT_EXCHANGE_RATE, EXCHANGE_RATE_KEY
from resaletrack.domain.currency import ExchangeRate, parse_rate
from resaletrack.domain.entities import Collection, HistoryEntry, Person, Transaction
from resaletrack.store.base import Document, DocumentStore, Unsubscribe
from resaletrack.store.mappers import (
    document_to_history_entry,
    document_to_person,
    document_to_transaction,
)

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[tuple[Any, ...]], None]
ErrorSink = Callable[[Exception], None]

_CONVERTERS: dict[str, Callable[[Document], Any]] = {
    Collection.TRANSACTIONS.value: document_to_transaction,
    Collection.SELLERS.value: document_to_person,
    Collection.DRIVERS.value: document_to_person,
    Collection.HISTORY.value: document_to_history_entry,
}


def log_error(error: Exception) -> None:
    """Default error sink."""
    logger.error("%s", error)


class SyncEngine:
    """Maintains one in-memory mirror per collection.

    Each store snapshot replaces the mirror wholesale, so repeated
    snapshots are harmless. Consumers registered with ``subscribe`` are
    told about every replacement.
    """

    def __init__(
        self,
        store: DocumentStore,
        exchange_rate: Optional[ExchangeRate] = None,
        error_sink: Optional[ErrorSink] = None,
    ):
        """Initialize sync engine.

        Args:
            store: Document store to mirror
            exchange_rate: Shared rate refreshed from the settings collection
            error_sink: Receives subscription and consumer errors
        """
        self.store = store
        self.exchange_rate = exchange_rate if exchange_rate is not None else ExchangeRate()
        self.error_sink = error_sink if error_sink is not None else log_error
        self._lock = threading.RLock()
        self._tokens = itertools.count(1)
        self._mirrors: dict[str, tuple[Any, ...]] = {}
        self._listeners: dict[str, dict[int, ChangeCallback]] = {}
        self._store_unsubscribes: dict[str, Optional[Unsubscribe]] = {}
        self._failed: set[str] = set()

    def start(self, collections: Optional[Iterable[str]] = None) -> None:
        """Open a store subscription for each collection (all by default)."""
        if collections is None:
            collections = [c.value for c in Collection]
        for collection in collections:
            self._open(str(collection))

    def stop(self) -> None:
        """Close every store subscription and drop all consumers."""
        with self._lock:
            unsubscribes = [u for u in self._store_unsubscribes.values() if u is not None]
            self._store_unsubscribes.clear()
            self._listeners.clear()
        for unsubscribe in unsubscribes:
            unsubscribe()

    def resubscribe(self, collection: str) -> None:
        """Re-open a subscription that failed."""
        with self._lock:
            self._failed.discard(collection)
            old = self._store_unsubscribes.pop(collection, None)
        if old is not None:
            old()
        self._open(collection)

    def is_failed(self, collection: str) -> bool:
        """Whether the collection's subscription failed and its mirror is frozen."""
        return collection in self._failed

    def subscribe(self, collection: str, on_change: ChangeCallback) -> Unsubscribe:
        """Register a consumer for mirror replacements.

        The consumer is called at once with the current mirror when one
        exists. The returned callable stops further callbacks immediately.
        """
        collection = str(getattr(collection, "value", collection))
        with self._lock:
            token = next(self._tokens)
            self._listeners.setdefault(collection, {})[token] = on_change
            current = self._mirrors.get(collection)
        self._open(collection)
        if current is not None:
            self._deliver(collection, token, on_change, current)

        def unsubscribe() -> None:
            with self._lock:
                self._listeners.get(collection, {}).pop(token, None)

        return unsubscribe

    def _open(self, collection: str) -> None:
        # Lock order is store lock, then self._lock (snapshot echoes arrive
        # holding the store lock), so the store is never called under self._lock.
        with self._lock:
            if collection in self._store_unsubscribes:
                return
            # Reserved until the store subscription is in place
            self._store_unsubscribes[collection] = None

        def on_snapshot(documents: list[Document]) -> None:
            self._replace(collection, documents)

        def on_error(error: Exception) -> None:
            self._fail(collection, error)

        unsubscribe = self.store.subscribe(collection, on_snapshot, on_error)
        with self._lock:
            keep = (
                collection not in self._failed
                and collection in self._store_unsubscribes
                and self._store_unsubscribes[collection] is None
            )
            if keep:
                self._store_unsubscribes[collection] = unsubscribe
        if not keep:
            unsubscribe()

    def _fail(self, collection: str, error: Exception) -> None:
        with self._lock:
            self._failed.add(collection)
            unsubscribe = self._store_unsubscribes.pop(collection, None)
        if unsubscribe is not None:
            unsubscribe()
        logger.error("Subscription to '%s' failed, mirror frozen: %s", collection, error)
        self.error_sink(error)

    def _replace(self, collection: str, documents: list[Document]) -> None:
        converter = _CONVERTERS.get(collection)
        records = tuple(converter(doc) if converter else doc for doc in documents)
        with self._lock:
            if collection in self._failed:
                return
            self._mirrors[collection] = records
            listeners = list(self._listeners.get(collection, {}).items())
        if collection == Collection.SETTINGS.value:
            self._apply_settings(records)
        logger.debug("Mirror '%s' replaced with %d records", collection, len(records))
        for token, callback in listeners:
            self._deliver(collection, token, callback, records)

    def _deliver(
        self, collection: str, token: int, callback: ChangeCallback, records: tuple[Any, ...]
    ) -> None:
        with self._lock:
            if token not in self._listeners.get(collection, {}):
                return
        try:
            callback(records)
        except Exception as e:
            logger.error("Consumer of '%s' raised: %s", collection, e)
            self.error_sink(e)

    def _apply_settings(self, documents: tuple[Document, ...]) -> None:
        setting = next((doc for doc in documents if doc.id == EXCHANGE_RATE_KEY), None)
        raw = setting.data.get("value") if setting is not None else None
        rate = parse_rate(raw, DEFAULT_EXCHANGE_RATE)
        self.exchange_rate.set(rate)

    # Mirror accessors
    def mirror(self, collection: str) -> tuple[Any, ...]:
        """Return the current mirror for a collection (empty if none yet)."""
        collection = str(getattr(collection, "value", collection))
        with self._lock:
            return self._mirrors.get(collection, ())

    def transactions(self) -> tuple[Transaction, ...]:
        """Mirrored transactions."""
        return self.mirror(Collection.TRANSACTIONS.value)

    def sellers(self) -> tuple[Person, ...]:
        """Mirrored sellers."""
        return self.mirror(Collection.SELLERS.value)

    def drivers(self) -> tuple[Person, ...]:
        """Mirrored drivers."""
        return self.mirror(Collection.DRIVERS.value)

    def history(self) -> tuple[HistoryEntry, ...]:
        """Mirrored history entries."""
        return self.mirror(Collection.HISTORY.value)

    def find_transaction(self, transaction_id: str) -> Optional[Transaction]:
        """Look up a transaction in the mirror."""
        for txn in self.transactions():
            if txn.id == transaction_id:
                return txn
        return None
