"""Tests for store document mappers."""

import pytest
from datetime import date, datetime, UTC
from decimal import Decimal

from resaletrack.domain.entities import HistoryAction
from resaletrack.store.base import Document
from resaletrack.store.mappers import (
    document_to_history_entry,
    document_to_person,
    document_to_transaction,
    history_entry_to_document,
    to_date,
    to_decimal,
    transaction_to_document,
)


def _doc(collection, data, doc_id="d1"):
    return Document(
        id=doc_id,
        collection=collection,
        data=data,
        created_at=datetime(2025, 10, 14, 9, 30, tzinfo=UTC),
    )


class TestTransactionMapper:
    """Tests for transaction documents."""

    def test_transaction_to_document(self):
        """Test converting field values to a document."""
        data = transaction_to_document(
            {
                "item_name": "Sofa",
                "purchase_price_pln": Decimal("1000"),
                "net_profit_czk": Decimal("400.00"),
                "sale_date": date(2025, 10, 15),
                "customer_phone2": None,
            }
        )

        assert data == {
            "itemName": "Sofa",
            "purchasePricePln": "1000",
            "netProfitCzk": "400.00",
            "saleDate": "2025-10-15",
            "customerPhone2": None,
        }

    def test_unknown_field_rejected(self):
        """Test that unmapped attributes are not silently written."""
        with pytest.raises(KeyError):
            transaction_to_document({"colour": "red"})

    def test_document_to_transaction(self):
        """Test converting a document to a Transaction."""
        txn = document_to_transaction(
            _doc(
                "transactions",
                {
                    "itemName": "Sofa",
                    "purchasePricePln": "1000",
                    "sellingPriceCzk": 6000,
                    "netProfitCzk": "400.00",
                    "saleDate": "2025-10-15",
                    "seller": "Jana",
                    "driver": "",
                    "deliveryCity": "Brno",
                },
            )
        )

        assert txn.id == "d1"
        assert txn.purchase_price_pln == Decimal("1000")
        assert txn.selling_price_czk == Decimal("6000")
        assert txn.net_profit_czk == Decimal("400.00")
        assert txn.sale_date == date(2025, 10, 15)
        assert txn.driver is None
        assert txn.delivery_city == "Brno"
        assert txn.created_at.date() == date(2025, 10, 14)

    def test_document_with_missing_fields(self):
        """Test that sparse documents still map."""
        txn = document_to_transaction(_doc("transactions", {}))

        assert txn.item_name == ""
        assert txn.seller == ""
        assert txn.net_profit_czk == Decimal("0")
        assert txn.sale_date is None


class TestValueReaders:
    """Tests for lenient value readers."""

    @pytest.mark.parametrize("value", [None, "", "abc", True, "Infinity"])
    def test_to_decimal_defaults_to_zero(self, value):
        assert to_decimal(value) == Decimal("0")

    def test_to_decimal_reads_numbers(self):
        assert to_decimal(12.5) == Decimal("12.5")
        assert to_decimal("7") == Decimal("7")

    def test_to_date(self):
        assert to_date("2025-10-15") == date(2025, 10, 15)
        assert to_date("2025-10-15T08:00:00Z") == date(2025, 10, 15)
        assert to_date(date(2025, 1, 1)) == date(2025, 1, 1)
        assert to_date("15/10/2025") is None
        assert to_date(None) is None


class TestPersonAndHistoryMappers:
    """Tests for personnel and history documents."""

    def test_document_to_person(self):
        person = document_to_person(_doc("sellers", {"name": "Jana"}))
        assert person.id == "d1"
        assert person.name == "Jana"

    def test_history_round_trip_fields(self):
        data = history_entry_to_document(HistoryAction.WEEK_SHIFTED, "moved", "t1")
        assert data == {"action": "WeekShifted", "details": "moved", "docId": "t1"}

        entry = document_to_history_entry(_doc("history", data))
        assert entry.action == HistoryAction.WEEK_SHIFTED
        assert entry.transaction_id == "t1"
        assert entry.timestamp == datetime(2025, 10, 14, 9, 30, tzinfo=UTC)

    def test_history_without_transaction(self):
        data = history_entry_to_document(HistoryAction.IMPORTED, "Imported 3 records from spreadsheet.", None)
        assert "docId" not in data
        assert document_to_history_entry(_doc("history", data)).transaction_id is None

    def test_unknown_history_action(self):
        entry = document_to_history_entry(_doc("history", {"action": "Exploded"}))
        assert entry.action == HistoryAction.MODIFIED
