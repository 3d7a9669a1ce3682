"""Domain model entities for resaletrack.

These are pure data classes representing business concepts, independent of
how the document store lays out its records. Store documents are translated
into these entities by ``resaletrack.store.mappers``.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class Collection(str, Enum):
    """Named collections held by the document store."""

    TRANSACTIONS = "transactions"
    SELLERS = "sellers"
    DRIVERS = "drivers"
    HISTORY = "history"
    SETTINGS = "settings"


class HistoryAction(str, Enum):
    """Kinds of audit entries written after ledger mutations."""

    ADDED = "Added"
    MODIFIED = "Modified"
    DELETED = "Deleted"
    WEEK_SHIFTED = "WeekShifted"
    IMPORTED = "Imported"


@dataclass(frozen=True)
class Transaction:
    """Resale transaction domain entity."""

    id: str
    item_name: str
    purchase_price_pln: Decimal
    selling_price_czk: Decimal
    net_profit_czk: Decimal
    seller: str
    sale_date: Optional[date] = None
    brand: Optional[str] = None
    model: Optional[str] = None
    supplier: Optional[str] = None
    note: Optional[str] = None
    driver: Optional[str] = None
    destination: Optional[str] = None
    customer_name: Optional[str] = None
    customer_address: Optional[str] = None
    customer_contact: Optional[str] = None
    customer_phone2: Optional[str] = None
    delivery_city: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Person:
    """Seller or driver domain entity."""

    id: str
    name: str
    created_at: Optional[datetime] = None


Seller = Person
Driver = Person


@dataclass(frozen=True)
class HistoryEntry:
    """Immutable audit record."""

    id: str
    action: HistoryAction
    details: str
    transaction_id: Optional[str] = None
    timestamp: Optional[datetime] = None


@dataclass(frozen=True)
class TransactionDraft:
    """User input for creating or editing a transaction.

    Prices are kept as given so validation can tell a missing value from
    a zero.
    """

    item_name: str = ""
    seller: str = ""
    purchase_price_pln: Optional[Decimal | str | int | float] = None
    selling_price_czk: Optional[Decimal | str | int | float] = None
    sale_date: Optional[date] = None
    brand: Optional[str] = None
    model: Optional[str] = None
    supplier: Optional[str] = None
    note: Optional[str] = None
    driver: Optional[str] = None
    destination: Optional[str] = None
    customer_name: Optional[str] = None
    customer_address: Optional[str] = None
    customer_contact: Optional[str] = None
    customer_phone2: Optional[str] = None
    delivery_city: Optional[str] = None

    @classmethod
    def from_transaction(cls, txn: Transaction) -> "TransactionDraft":
        """Build an editable draft from a stored transaction."""
        return cls(
            item_name=txn.item_name,
            seller=txn.seller,
            purchase_price_pln=txn.purchase_price_pln,
            selling_price_czk=txn.selling_price_czk,
            sale_date=txn.sale_date,
            brand=txn.brand,
            model=txn.model,
            supplier=txn.supplier,
            note=txn.note,
            driver=txn.driver,
            destination=txn.destination,
            customer_name=txn.customer_name,
            customer_address=txn.customer_address,
            customer_contact=txn.customer_contact,
            customer_phone2=txn.customer_phone2,
            delivery_city=txn.delivery_city,
        )


@dataclass(frozen=True)
class TransactionFilter:
    """Filters applied on top of the week partition.

    Empty values are inactive. Active filters combine with logical AND.
    """

    text: str = ""
    seller: str = ""
    driver: str = ""


@dataclass(frozen=True)
class WeeklySummary:
    """Totals over one week of transactions."""

    purchase_total: Decimal
    sale_total: Decimal
    profit_total: Decimal
    count: int


@dataclass(frozen=True)
class SellerProfit:
    """Stored profit summed for one seller."""

    seller_name: str
    profit: Decimal


@dataclass(frozen=True)
class ImportResult:
    """Outcome of a completed spreadsheet import."""

    imported: int
    skipped: int
    batches: int
    skipped_rows: tuple[int, ...] = field(default_factory=tuple)
