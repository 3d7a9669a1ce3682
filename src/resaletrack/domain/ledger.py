"""Transaction ledger domain service."""

import logging
from datetime import date, datetime, UTC
from decimal import Decimal
from typing import Any, Callable, Iterable, Optional

from resaletrack.config import EXCHANGE_RATE_KEY
from resaletrack.domain.audit import AuditTrail
from resaletrack.domain.currency import net_profit
from resaletrack.domain.entities import (
    Collection,
    HistoryAction,
    Transaction,
    TransactionDraft,
    TransactionFilter,
)
from resaletrack.domain.errors import (
    NotFoundError,
    PartialCommitError,
    StoreError,
    ValidationError,
    audit_missing,
    transaction_not_found,
    unknown_person,
)
from resaletrack.domain.sync import ErrorSink, SyncEngine, log_error
from resaletrack.domain.week import in_week, shift_week, week_bounds, week_label
from resaletrack.store.mappers import transaction_to_document
from resaletrack.utils.amount_parser import parse_amount

logger = logging.getLogger(__name__)

TRANSACTIONS = Collection.TRANSACTIONS.value

# Fields searched by the free-text filter
SEARCH_FIELDS = ("item_name", "supplier", "customer_name", "brand", "model")

_OPTIONAL_TEXT_FIELDS = (
    "brand",
    "model",
    "supplier",
    "note",
    "driver",
    "destination",
    "customer_name",
    "customer_address",
    "customer_contact",
    "customer_phone2",
    "delivery_city",
)


def matches_filter(txn: Transaction, filters: TransactionFilter) -> bool:
    """Check a transaction against the text, seller and driver filters."""
    text = (filters.text or "").lower()
    if text:
        haystack = [(getattr(txn, name) or "").lower() for name in SEARCH_FIELDS]
        if not any(text in value for value in haystack):
            return False
    if filters.seller and txn.seller != filters.seller:
        return False
    if filters.driver and txn.driver != filters.driver:
        return False
    return True


def apply_filters(
    transactions: Iterable[Transaction], filters: Optional[TransactionFilter]
) -> list[Transaction]:
    """Narrow transactions by the active filters, preserving order."""
    if filters is None:
        return list(transactions)
    return [txn for txn in transactions if matches_filter(txn, filters)]


def _parse_price(value: Any, label: str) -> Decimal:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{label} is required")
    if isinstance(value, bool):
        raise ValidationError(f"{label} must be a number")
    if isinstance(value, Decimal):
        price = value
    elif isinstance(value, (int, float)):
        price = Decimal(str(value))
    else:
        try:
            price = parse_amount(str(value))
        except ValueError:
            raise ValidationError(f"{label} must be a number, got '{value}'")
    if not price.is_finite():
        raise ValidationError(f"{label} must be a number, got '{value}'")
    if price < 0:
        raise ValidationError(f"{label} must not be negative")
    return price


class LedgerService:
    """Service for mutating and querying the transaction ledger.

    Every mutation writes the record first and its history entry second.
    The two writes are independent: when the history write fails the
    record stays and ``PartialCommitError`` is raised.
    """

    def __init__(
        self,
        sync: SyncEngine,
        audit: Optional[AuditTrail] = None,
        error_sink: Optional[ErrorSink] = None,
    ):
        """Initialize ledger service.

        Args:
            sync: Sync engine providing mirrors, the store and the shared rate
            audit: Audit trail for history entries (created if omitted)
            error_sink: Receives store errors before they are raised
        """
        self.sync = sync
        self.store = sync.store
        self.exchange_rate = sync.exchange_rate
        self.audit = audit if audit is not None else AuditTrail(sync)
        self.error_sink = error_sink if error_sink is not None else log_error

    # Validation
    def _validated_values(self, draft: TransactionDraft) -> dict[str, Any]:
        """Validate a draft and return domain-named field values."""
        item_name = (draft.item_name or "").strip()
        if not item_name:
            raise ValidationError("Item name is required")
        seller = (draft.seller or "").strip()
        if not seller:
            raise ValidationError("Seller is required")
        purchase = _parse_price(draft.purchase_price_pln, "Purchase price (PLN)")
        selling = _parse_price(draft.selling_price_czk, "Selling price (CZK)")

        if seller not in {s.name for s in self.sync.sellers()}:
            raise ValidationError(unknown_person("seller", seller))
        driver = (draft.driver or "").strip() or None
        if driver is not None and driver not in {d.name for d in self.sync.drivers()}:
            raise ValidationError(unknown_person("driver", driver))

        values: dict[str, Any] = {
            "item_name": item_name,
            "seller": seller,
            "purchase_price_pln": purchase,
            "selling_price_czk": selling,
            "sale_date": draft.sale_date if draft.sale_date is not None else date.today(),
        }
        for name in _OPTIONAL_TEXT_FIELDS:
            value = getattr(draft, name)
            values[name] = value.strip() if isinstance(value, str) and value.strip() else None
        values["driver"] = driver
        return values

    # Write path
    def _report(self, error: Exception, message: str, *args: Any) -> None:
        logger.error(message, *args)
        self.error_sink(error)

    def _write(self, operation: str, write: Callable[[], Any]) -> Any:
        try:
            return write()
        except StoreError as e:
            self._report(e, "%s failed: %s", operation, e)
            raise

    def _audit(
        self, action: HistoryAction, details: str, transaction_id: Optional[str]
    ) -> None:
        try:
            self.audit.record(action, details, transaction_id)
        except StoreError as e:
            error = PartialCommitError(
                audit_missing(action.value, transaction_id),
                completed=1,
                transaction_id=transaction_id,
            )
            self._report(error, "History write after %s failed: %s", action.value, e)
            raise error from e

    def write_record(self, values: dict[str, Any]) -> str:
        """Insert a transaction document as given, without validation or history.

        Used by bulk import, which validates and audits on its own terms.

        Raises:
            StoreError: If the write fails
        """
        return self.store.add(TRANSACTIONS, transaction_to_document(values))

    # Mutations
    def create_transaction(self, draft: TransactionDraft) -> str:
        """Create a transaction.

        Args:
            draft: User input

        Returns:
            Transaction ID

        Raises:
            ValidationError: If required fields are missing or invalid
            StoreError: If the record write fails
            PartialCommitError: If the record was written but its history entry was not
        """
        values = self._validated_values(draft)
        rate = self.exchange_rate.current()
        values["net_profit_czk"] = net_profit(
            values["selling_price_czk"], values["purchase_price_pln"], rate
        )
        transaction_id = self._write(
            "Create transaction",
            lambda: self.store.add(TRANSACTIONS, transaction_to_document(values)),
        )
        logger.info(
            "Created transaction %s '%s' (profit %s CZK at rate %s)",
            transaction_id,
            values["item_name"],
            values["net_profit_czk"],
            rate,
        )
        self._audit(
            HistoryAction.ADDED,
            f"New item '{values['item_name']}' was added.",
            transaction_id,
        )
        return transaction_id

    def update_transaction(self, transaction_id: str, draft: TransactionDraft) -> None:
        """Update a transaction, re-snapshotting its profit at the current rate.

        Raises:
            ValidationError: If required fields are missing or invalid
            StoreError: If the record write fails
            PartialCommitError: If the record was written but its history entry was not
        """
        values = self._validated_values(draft)
        rate = self.exchange_rate.current()
        values["net_profit_czk"] = net_profit(
            values["selling_price_czk"], values["purchase_price_pln"], rate
        )
        self._write(
            "Update transaction",
            lambda: self.store.update(TRANSACTIONS, transaction_id, transaction_to_document(values)),
        )
        logger.info("Updated transaction %s", transaction_id)
        self._audit(
            HistoryAction.MODIFIED,
            f"Item '{values['item_name']}' was modified.",
            transaction_id,
        )

    def delete_transaction(self, transaction_id: str) -> None:
        """Delete a transaction.

        Unknown IDs are passed to the store unchanged.

        Raises:
            StoreError: If the delete fails
            PartialCommitError: If the record was deleted but its history entry was not
        """
        existing = self.sync.find_transaction(transaction_id)
        self._write("Delete transaction", lambda: self.store.delete(TRANSACTIONS, transaction_id))
        logger.info("Deleted transaction %s", transaction_id)
        if existing is not None:
            details = f"Item '{existing.item_name}' (ID: {transaction_id}) was deleted."
        else:
            details = f"Item (ID: {transaction_id}) was deleted."
        self._audit(HistoryAction.DELETED, details, transaction_id)

    def shift_to_next_week(self, transaction_id: str) -> date:
        """Move a transaction's sale date forward by exactly seven days.

        Returns:
            The new sale date

        Raises:
            NotFoundError: If the transaction is not in the mirror
            ValidationError: If the transaction has no sale date
            StoreError: If the record write fails
            PartialCommitError: If the record was written but its history entry was not
        """
        txn = self.sync.find_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        if txn.sale_date is None:
            raise ValidationError(f"Transaction {transaction_id} has no sale date")

        new_date = shift_week(txn.sale_date, 1)
        self._write(
            "Shift transaction",
            lambda: self.store.update(
                TRANSACTIONS, transaction_id, transaction_to_document({"sale_date": new_date})
            ),
        )
        logger.info("Shifted transaction %s to %s", transaction_id, new_date)
        self._audit(
            HistoryAction.WEEK_SHIFTED,
            f"Item '{txn.item_name}' moved to week {week_label(new_date)}.",
            transaction_id,
        )
        return new_date

    def set_exchange_rate(self, value: Decimal | str | float | int) -> Decimal:
        """Persist a new exchange rate and apply it to future computations.

        Stored profits of existing transactions are not touched.

        Raises:
            ValidationError: If the value is not a positive number
            StoreError: If the settings write fails
        """
        try:
            rate = _parse_price(value, "Exchange rate")
        except ValidationError:
            raise ValidationError(f"Exchange rate must be a positive number, got '{value}'")
        if rate <= 0:
            raise ValidationError("Exchange rate must be greater than zero")

        self._write(
            "Save exchange rate",
            lambda: self.store.set(
                Collection.SETTINGS.value,
                EXCHANGE_RATE_KEY,
                {"value": float(rate), "timestamp": datetime.now(UTC).isoformat()},
                merge=True,
            ),
        )
        self.exchange_rate.set(rate)
        logger.info("Exchange rate set to %s", rate)
        return rate

    # Queries
    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        """Get a transaction from the mirror."""
        return self.sync.find_transaction(transaction_id)

    def require_transaction(self, transaction_id: str) -> Transaction:
        """Get a transaction from the mirror or raise NotFoundError."""
        txn = self.get_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return txn

    def week_transactions(
        self, offset: int = 0, today: Optional[date] = None
    ) -> list[Transaction]:
        """Transactions whose sale date falls in the current week shifted by ``offset``."""
        start, _ = week_bounds(offset, today)
        return [txn for txn in self.sync.transactions() if in_week(txn.sale_date, start)]

    def filter_transactions(
        self,
        filters: Optional[TransactionFilter] = None,
        offset: int = 0,
        today: Optional[date] = None,
    ) -> list[Transaction]:
        """Week-partitioned transactions narrowed by filters, newest sale first."""
        result = apply_filters(self.week_transactions(offset, today), filters)
        return sorted(result, key=lambda txn: txn.sale_date, reverse=True)
