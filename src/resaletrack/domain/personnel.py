"""Seller and driver domain service."""

import logging
from typing import Iterable

from resaletrack.domain.entities import Collection, Person, Transaction
from resaletrack.domain.errors import NotFoundError, ValidationError, person_not_found
from resaletrack.domain.sync import SyncEngine

logger = logging.getLogger(__name__)

SELLER = "seller"
DRIVER = "driver"

_COLLECTIONS = {
    SELLER: Collection.SELLERS.value,
    DRIVER: Collection.DRIVERS.value,
}


class PersonnelService:
    """Service for managing sellers and drivers.

    Transactions reference people by display name rather than ID, so
    renaming or deleting a person leaves existing transactions untouched.
    ``unknown_references`` reports the names that no longer resolve.
    """

    def __init__(self, sync: SyncEngine):
        """Initialize personnel service.

        Args:
            sync: Sync engine providing mirrors and the store
        """
        self.sync = sync
        self.store = sync.store

    def _clean_name(self, name: str) -> str:
        cleaned = (name or "").strip()
        if not cleaned:
            raise ValidationError("Name must not be empty")
        return cleaned

    def _require(self, kind: str, person_id: str) -> Person:
        for person in self.sync.mirror(_COLLECTIONS[kind]):
            if person.id == person_id:
                return person
        raise NotFoundError(person_not_found(kind, person_id))

    def _add(self, kind: str, name: str) -> str:
        cleaned = self._clean_name(name)
        person_id = self.store.add(_COLLECTIONS[kind], {"name": cleaned})
        logger.info("Added %s '%s' (%s)", kind, cleaned, person_id)
        return person_id

    def _rename(self, kind: str, person_id: str, name: str) -> None:
        cleaned = self._clean_name(name)
        self._require(kind, person_id)
        self.store.update(_COLLECTIONS[kind], person_id, {"name": cleaned})
        logger.info("Renamed %s %s to '%s'", kind, person_id, cleaned)

    def _delete(self, kind: str, person_id: str) -> None:
        self._require(kind, person_id)
        self.store.delete(_COLLECTIONS[kind], person_id)
        logger.info("Deleted %s %s", kind, person_id)

    def _list(self, kind: str) -> list[Person]:
        return sorted(self.sync.mirror(_COLLECTIONS[kind]), key=lambda p: p.name.casefold())

    def add_seller(self, name: str) -> str:
        """Add a seller. Returns the seller ID."""
        return self._add(SELLER, name)

    def rename_seller(self, seller_id: str, name: str) -> None:
        """Rename a seller."""
        self._rename(SELLER, seller_id, name)

    def delete_seller(self, seller_id: str) -> None:
        """Delete a seller."""
        self._delete(SELLER, seller_id)

    def list_sellers(self) -> list[Person]:
        """List sellers sorted by name."""
        return self._list(SELLER)

    def add_driver(self, name: str) -> str:
        """Add a driver. Returns the driver ID."""
        return self._add(DRIVER, name)

    def rename_driver(self, driver_id: str, name: str) -> None:
        """Rename a driver."""
        self._rename(DRIVER, driver_id, name)

    def delete_driver(self, driver_id: str) -> None:
        """Delete a driver."""
        self._delete(DRIVER, driver_id)

    def list_drivers(self) -> list[Person]:
        """List drivers sorted by name."""
        return self._list(DRIVER)

    def resolve(self, kind: str, person: str) -> Person:
        """Resolve a person by ID or exact name.

        Raises:
            NotFoundError: If nothing matches
        """
        people = self.sync.mirror(_COLLECTIONS[kind])
        for candidate in people:
            if candidate.id == person:
                return candidate
        for candidate in people:
            if candidate.name == person:
                return candidate
        raise NotFoundError(f"{kind.capitalize()} '{person}' not found")

    def known_names(self, kind: str) -> set[str]:
        """Names of every mirrored seller or driver."""
        return {p.name for p in self.sync.mirror(_COLLECTIONS[kind])}

    def unknown_references(
        self, transactions: Iterable[Transaction]
    ) -> list[tuple[Transaction, str, str]]:
        """Find seller/driver names that match no personnel record.

        Returns:
            ``(transaction, kind, name)`` tuples in transaction order
        """
        sellers = self.known_names(SELLER)
        drivers = self.known_names(DRIVER)
        problems = []
        for txn in transactions:
            if txn.seller and txn.seller not in sellers:
                problems.append((txn, SELLER, txn.seller))
            if txn.driver and txn.driver not in drivers:
                problems.append((txn, DRIVER, txn.driver))
        return problems
