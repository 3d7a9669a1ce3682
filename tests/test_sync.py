"""Tests for the sync engine and its mirrors."""

import threading
from decimal import Decimal

import pytest

from resaletrack.domain.errors import StoreError
from resaletrack.domain.sync import SyncEngine
from resaletrack.store.sqlalchemy_store import SQLAlchemyStore


class FlakyStore(SQLAlchemyStore):
    """Store whose collection reads can be made to fail."""

    def __init__(self, database_url: str):
        super().__init__(database_url)
        self.broken: set[str] = set()

    def _fetch(self, collection):
        if collection in self.broken:
            raise StoreError(f"Simulated read failure on '{collection}'")
        return super()._fetch(collection)


class LockCheckingStore(SQLAlchemyStore):
    """Store that records whether the engine lock was free during subscribe."""

    def __init__(self, database_url: str):
        super().__init__(database_url)
        self.engine = None
        self.engine_lock_free: list[bool] = []

    def subscribe(self, collection, on_snapshot, on_error=None):
        if self.engine is not None:
            def try_engine_lock():
                acquired = self.engine._lock.acquire(timeout=1)
                if acquired:
                    self.engine._lock.release()
                self.engine_lock_free.append(acquired)

            worker = threading.Thread(target=try_engine_lock)
            worker.start()
            worker.join()
        return super().subscribe(collection, on_snapshot, on_error)


@pytest.fixture
def flaky_store(temp_db_path):
    store = FlakyStore(f"sqlite:///{temp_db_path}")
    yield store
    store.close()


def test_start_populates_mirrors(temp_store):
    temp_store.add("sellers", {"name": "Jana"})
    engine = SyncEngine(temp_store)
    engine.start()

    assert [s.name for s in engine.sellers()] == ["Jana"]
    assert engine.transactions() == ()
    engine.stop()


def test_one_store_subscription_per_collection(temp_store, sync):
    sync.start()
    sync.subscribe("sellers", lambda records: None)

    assert temp_store.subscriber_count("sellers") == 1


def test_writes_echo_into_mirror(temp_store, sync):
    temp_store.add("drivers", {"name": "Petr"})

    assert [d.name for d in sync.drivers()] == ["Petr"]


def test_subscribe_receives_current_then_changes(temp_store, sync):
    temp_store.add("sellers", {"name": "Jana"})
    received = []

    sync.subscribe("sellers", lambda records: received.append([p.name for p in records]))
    temp_store.add("sellers", {"name": "Karel"})

    assert received == [["Jana"], ["Jana", "Karel"]]


def test_unsubscribe_stops_callbacks_immediately(temp_store, sync):
    received = []
    unsubscribe = sync.subscribe("sellers", received.append)
    unsubscribe()
    temp_store.add("sellers", {"name": "Jana"})

    assert len(received) == 1
    # The mirror itself keeps following the store
    assert len(sync.sellers()) == 1


def test_duplicate_snapshots_replace_mirror(temp_store, sync):
    temp_store.add("sellers", {"name": "Jana"})
    snapshot = temp_store.list("sellers")

    sync._replace("sellers", snapshot)
    sync._replace("sellers", snapshot)

    assert [s.name for s in sync.sellers()] == ["Jana"]


def test_consumer_error_goes_to_sink_and_others_still_notified(temp_store):
    errors = []
    engine = SyncEngine(temp_store, error_sink=errors.append)
    engine.start()
    received = []

    def broken(records):
        raise RuntimeError("consumer bug")

    engine.subscribe("sellers", broken)
    engine.subscribe("sellers", received.append)
    temp_store.add("sellers", {"name": "Jana"})

    assert len(received) == 2
    assert any(isinstance(e, RuntimeError) for e in errors)
    engine.stop()


def test_subscription_error_freezes_mirror_until_resubscribed(flaky_store):
    errors = []
    engine = SyncEngine(flaky_store, error_sink=errors.append)
    engine.start()
    flaky_store.add("sellers", {"name": "Jana"})

    flaky_store.broken.add("sellers")
    flaky_store.add("sellers", {"name": "Karel"})

    assert len(errors) == 1
    assert isinstance(errors[0], StoreError)
    assert engine.is_failed("sellers")
    assert [s.name for s in engine.sellers()] == ["Jana"]

    # Other collections keep syncing
    flaky_store.add("drivers", {"name": "Petr"})
    assert [d.name for d in engine.drivers()] == ["Petr"]

    flaky_store.broken.clear()
    flaky_store.add("sellers", {"name": "Eva"})
    assert [s.name for s in engine.sellers()] == ["Jana"]

    engine.resubscribe("sellers")
    assert not engine.is_failed("sellers")
    assert [s.name for s in engine.sellers()] == ["Jana", "Karel", "Eva"]
    engine.stop()


def test_settings_snapshot_updates_rate(temp_store, sync):
    assert sync.exchange_rate.current() == Decimal("5.6")

    temp_store.set("settings", "exchangeRate", {"value": 5.8})

    assert sync.exchange_rate.current() == Decimal("5.8")


def test_malformed_setting_uses_default(temp_store, sync):
    temp_store.set("settings", "exchangeRate", {"value": 5.8})
    temp_store.set("settings", "exchangeRate", {"value": "not a number"})

    assert sync.exchange_rate.current() == Decimal("5.6")


def test_mirror_converts_transactions(temp_store, sync):
    temp_store.add(
        "transactions",
        {"itemName": "Sofa", "purchasePricePln": "1000", "sellingPriceCzk": 6000, "saleDate": "bad"},
    )

    (txn,) = sync.transactions()
    assert txn.item_name == "Sofa"
    assert txn.purchase_price_pln == Decimal("1000")
    assert txn.selling_price_czk == Decimal("6000")
    assert txn.net_profit_czk == Decimal("0")
    assert txn.sale_date is None
    assert sync.find_transaction(txn.id) == txn


def test_store_subscribe_runs_without_engine_lock(temp_db_path):
    """Store calls are made outside the engine lock, so writer threads can echo snapshots."""
    store = LockCheckingStore(f"sqlite:///{temp_db_path}")
    engine = SyncEngine(store)
    store.engine = engine
    try:
        engine.start()
        engine.resubscribe("sellers")

        assert store.engine_lock_free == [True] * 6
        assert store.subscriber_count("sellers") == 1
    finally:
        engine.stop()
        store.close()


def test_stop_releases_store_subscriptions(temp_store):
    engine = SyncEngine(temp_store)
    engine.start()

    engine.stop()

    assert all(temp_store.subscriber_count(c) == 0 for c in ("transactions", "sellers", "settings"))
