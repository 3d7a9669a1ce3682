"""Mapper functions to convert between domain entities and store documents.

Documents are JSON: dates travel as ISO strings and amounts as decimal
strings. Reading is lenient because records may have been written by older
clients or imported from spreadsheets.
"""

import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from resaletrack.domain import entities as domain
from resaletrack.store.base import Document

logger = logging.getLogger(__name__)

# Domain attribute -> document field
TRANSACTION_FIELDS = {
    "item_name": "itemName",
    "brand": "brand",
    "model": "model",
    "purchase_price_pln": "purchasePricePln",
    "selling_price_czk": "sellingPriceCzk",
    "net_profit_czk": "netProfitCzk",
    "sale_date": "saleDate",
    "seller": "seller",
    "supplier": "supplier",
    "note": "note",
    "driver": "driver",
    "destination": "destination",
    "customer_name": "customerName",
    "customer_address": "customerAddress",
    "customer_contact": "customerContact",
    "customer_phone2": "customerPhone2",
    "delivery_city": "deliveryCity",
}

DECIMAL_FIELDS = {"purchase_price_pln", "selling_price_czk", "net_profit_czk"}


def to_decimal(value: Any) -> Decimal:
    """Read a stored amount, treating missing or malformed values as zero."""
    if value is None or value == "" or isinstance(value, bool):
        return Decimal("0")
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return Decimal("0")
    return result if result.is_finite() else Decimal("0")


def to_date(value: Any) -> Optional[date]:
    """Read a stored ISO date, returning None when absent or malformed."""
    if isinstance(value, date):
        return value
    if not value:
        return None
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        logger.warning("Ignoring malformed sale date %r", value)
        return None


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value)
    return text if text != "" else None


def transaction_to_document(values: dict[str, Any]) -> dict[str, Any]:
    """Convert domain-named transaction fields into a store document."""
    data: dict[str, Any] = {}
    for attr, value in values.items():
        if attr not in TRANSACTION_FIELDS:
            raise KeyError(f"Unknown transaction field '{attr}'")
        if attr in DECIMAL_FIELDS and value is not None:
            value = str(value)
        elif attr == "sale_date" and value is not None:
            value = value.isoformat()
        data[TRANSACTION_FIELDS[attr]] = value
    return data


def document_to_transaction(doc: Document) -> domain.Transaction:
    """Convert a transactions document into a Transaction entity."""
    data = doc.data
    return domain.Transaction(
        id=doc.id,
        item_name=str(data.get("itemName") or ""),
        purchase_price_pln=to_decimal(data.get("purchasePricePln")),
        selling_price_czk=to_decimal(data.get("sellingPriceCzk")),
        net_profit_czk=to_decimal(data.get("netProfitCzk")),
        seller=str(data.get("seller") or ""),
        sale_date=to_date(data.get("saleDate")),
        brand=_text(data.get("brand")),
        model=_text(data.get("model")),
        supplier=_text(data.get("supplier")),
        note=_text(data.get("note")),
        driver=_text(data.get("driver")),
        destination=_text(data.get("destination")),
        customer_name=_text(data.get("customerName")),
        customer_address=_text(data.get("customerAddress")),
        customer_contact=_text(data.get("customerContact")),
        customer_phone2=_text(data.get("customerPhone2")),
        delivery_city=_text(data.get("deliveryCity")),
        created_at=doc.created_at,
    )


def document_to_person(doc: Document) -> domain.Person:
    """Convert a sellers/drivers document into a Person entity."""
    return domain.Person(
        id=doc.id,
        name=str(doc.data.get("name") or ""),
        created_at=doc.created_at,
    )


def document_to_history_entry(doc: Document) -> domain.HistoryEntry:
    """Convert a history document into a HistoryEntry entity."""
    data = doc.data
    raw_action = data.get("action")
    try:
        action = domain.HistoryAction(raw_action)
    except ValueError:
        logger.warning("Unknown history action %r in entry %s", raw_action, doc.id)
        action = domain.HistoryAction.MODIFIED
    return domain.HistoryEntry(
        id=doc.id,
        action=action,
        details=str(data.get("details") or ""),
        transaction_id=data.get("docId"),
        timestamp=doc.created_at,
    )


def history_entry_to_document(
    action: domain.HistoryAction, details: str, transaction_id: Optional[str]
) -> dict[str, Any]:
    """Build the document for a new history entry."""
    data: dict[str, Any] = {"action": action.value, "details": details}
    if transaction_id is not None:
        data["docId"] = transaction_id
    return data
