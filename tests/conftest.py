"""Shared pytest fixtures for resaletrack tests."""

import tempfile
import os
import pytest

from resaletrack.domain.aggregation import AggregationEngine
from resaletrack.domain.audit import AuditTrail
from resaletrack.domain.errors import StoreError
from resaletrack.domain.importer import ImportReconciler
from resaletrack.domain.ledger import LedgerService
from resaletrack.domain.personnel import PersonnelService
from resaletrack.domain.sync import SyncEngine
from resaletrack.store.factories import create_sqlite_store
from resaletrack.store.sqlalchemy_store import SQLAlchemyStore


class FailingStore(SQLAlchemyStore):
    """Store that fails writes to chosen collections after a number of successes.

    ``fail_after[collection] = n`` lets ``n`` adds succeed, then every
    further add to that collection raises StoreError.
    """

    def __init__(self, database_url: str):
        super().__init__(database_url)
        self.fail_after: dict[str, int] = {}
        self.fail_updates: set[str] = set()
        self.add_calls: dict[str, int] = {}

    def add(self, collection, data):
        with self._lock:
            calls = self.add_calls.get(collection, 0)
            self.add_calls[collection] = calls + 1
            limit = self.fail_after.get(collection)
        if limit is not None and calls >= limit:
            raise StoreError(f"Simulated failure writing to '{collection}'")
        return super().add(collection, data)

    def update(self, collection, doc_id, data):
        if collection in self.fail_updates:
            raise StoreError(f"Simulated failure updating '{collection}'")
        return super().update(collection, doc_id, data)


@pytest.fixture
def temp_db_path():
    """Create a temporary database file path."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    yield db_path
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def temp_store(temp_db_path):
    """Create a temporary document store for testing."""
    store = create_sqlite_store(database_path=temp_db_path)
    # Store the path for tests that need it
    store.database_path = temp_db_path
    yield store
    store.close()


@pytest.fixture
def failing_store(temp_db_path):
    """Create a temporary store with injectable write failures."""
    store = FailingStore(f"sqlite:///{temp_db_path}")
    store.database_path = temp_db_path
    yield store
    store.close()


@pytest.fixture
def sync(temp_store):
    """Create a started SyncEngine over the temporary store."""
    engine = SyncEngine(temp_store)
    engine.start()
    yield engine
    engine.stop()


@pytest.fixture
def failing_sync(failing_store):
    """Create a started SyncEngine over the failure-injecting store."""
    engine = SyncEngine(failing_store)
    engine.start()
    yield engine
    engine.stop()


@pytest.fixture
def ledger(sync):
    """Create a LedgerService over the started sync engine."""
    return LedgerService(sync)


@pytest.fixture
def personnel(sync):
    """Create a PersonnelService over the started sync engine."""
    return PersonnelService(sync)


@pytest.fixture
def audit(sync):
    """Create an AuditTrail over the started sync engine."""
    return AuditTrail(sync)


@pytest.fixture
def importer(ledger):
    """Create an ImportReconciler writing through the ledger."""
    return ImportReconciler(ledger)


@pytest.fixture
def aggregation():
    """Create an AggregationEngine."""
    return AggregationEngine()


@pytest.fixture
def sample_personnel(personnel):
    """Create two sellers and a driver."""
    return {
        "Jana": personnel.add_seller("Jana"),
        "Karel": personnel.add_seller("Karel"),
        "Petr": personnel.add_driver("Petr"),
    }


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
