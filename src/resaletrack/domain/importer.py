"""Spreadsheet import domain service."""

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Iterable, Optional, Sequence

from resaletrack.config import IMPORT_BATCH_SIZE
from resaletrack.domain.entities import HistoryAction, ImportResult
from resaletrack.domain.errors import (
    PartialCommitError,
    StoreError,
    ValidationError,
    audit_missing,
)
from resaletrack.domain.ledger import LedgerService
from resaletrack.utils.amount_parser import parse_amount
from resaletrack.utils.date_parser import parse_date
from resaletrack.utils.spreadsheet import read_rows

logger = logging.getLogger(__name__)

# Zero-based column positions in the source sheet
COL_SALE_DATE = 0
COL_ITEM_NAME = 1
COL_NOTE = 6
COL_SELLER = 7
COL_PURCHASE_PRICE = 8
COL_SELLING_PRICE = 10
COL_NET_PROFIT = 11
COL_SUPPLIER = 12
COL_DRIVER = 14
COL_DESTINATION = 15
COL_CUSTOMER = 16
COL_CUSTOMER_CONTACT = 17

REQUIRED_COLUMNS = (COL_ITEM_NAME, COL_SELLER, COL_PURCHASE_PRICE, COL_SELLING_PRICE)


def _cell(row: Sequence[Any], index: int) -> Any:
    if index >= len(row):
        return None
    value = row[index]
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _text(row: Sequence[Any], index: int) -> Optional[str]:
    value = _cell(row, index)
    if value is None:
        return None
    return str(value).strip()


def _number(row: Sequence[Any], index: int) -> Decimal:
    """Read a numeric cell; anything unreadable counts as zero."""
    value = _cell(row, index)
    if value is None or isinstance(value, bool):
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    try:
        return parse_amount(str(value))
    except ValueError:
        return Decimal("0")


def _sale_date(row: Sequence[Any], today: date) -> date:
    value = _cell(row, COL_SALE_DATE)
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return parse_date(value)
        except ValueError:
            logger.warning("Unreadable sale date %r, using today", value)
    return today


def map_row(row: Sequence[Any], today: Optional[date] = None) -> Optional[dict[str, Any]]:
    """Map one positional sheet row to transaction field values.

    Returns:
        Domain-named field values, or None when a required column is empty.
        Net profit is copied from the sheet as-is.
    """
    if any(_cell(row, index) is None for index in REQUIRED_COLUMNS):
        return None
    if today is None:
        today = date.today()
    customer = _text(row, COL_CUSTOMER)
    return {
        "sale_date": _sale_date(row, today),
        "item_name": _text(row, COL_ITEM_NAME),
        "supplier": _text(row, COL_SUPPLIER),
        "note": _text(row, COL_NOTE),
        "destination": _text(row, COL_DESTINATION),
        "driver": _text(row, COL_DRIVER),
        "seller": _text(row, COL_SELLER),
        "purchase_price_pln": _number(row, COL_PURCHASE_PRICE),
        "selling_price_czk": _number(row, COL_SELLING_PRICE),
        "customer_name": customer,
        "customer_address": customer,
        "customer_contact": _text(row, COL_CUSTOMER_CONTACT),
        "net_profit_czk": _number(row, COL_NET_PROFIT),
    }


class ImportReconciler:
    """Service for importing spreadsheet rows into the ledger."""

    def __init__(self, ledger: LedgerService, batch_size: int = IMPORT_BATCH_SIZE):
        """Initialize import reconciler.

        Args:
            ledger: Ledger whose write path receives the records
            batch_size: Number of records written concurrently
        """
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.ledger = ledger
        self.audit = ledger.audit
        self.batch_size = batch_size

    def import_workbook(self, path: str | Path) -> ImportResult:
        """Import the first sheet of an ``.xlsx`` workbook.

        Raises:
            FileNotFoundError: If the workbook doesn't exist
            ValidationError: If the sheet has no data rows
            PartialCommitError: If the import stopped part-way
        """
        return self.import_rows(read_rows(path))

    def import_rows(
        self, rows: Iterable[Sequence[Any]], today: Optional[date] = None
    ) -> ImportResult:
        """Import rows; row 0 is the header and is skipped.

        Rows missing item name, seller or either price are skipped silently.
        Records are written in batches: concurrently within a batch,
        batches one after another. A failed write stops the import after
        its batch; records already written stay. One ``Imported`` history
        entry is written when every record is in.

        Returns:
            ImportResult with imported/skipped counts

        Raises:
            ValidationError: If there are no data rows
            PartialCommitError: If some records, or the history entry, were not written
        """
        rows = list(rows)
        if len(rows) < 2:
            raise ValidationError("The sheet does not contain enough data to import")

        records = []
        skipped_rows = []
        for row_num, row in enumerate(rows[1:], start=2):
            values = map_row(row, today)
            if values is None:
                skipped_rows.append(row_num)
                continue
            records.append(values)
        if skipped_rows:
            logger.warning("Skipping %d incomplete rows: %s", len(skipped_rows), skipped_rows)

        committed = 0
        batches = 0
        with ThreadPoolExecutor(max_workers=self.batch_size) as pool:
            for start in range(0, len(records), self.batch_size):
                batch = records[start : start + self.batch_size]
                batches += 1
                futures = [pool.submit(self.ledger.write_record, values) for values in batch]
                failures = []
                for future in futures:
                    try:
                        future.result()
                        committed += 1
                    except StoreError as e:
                        failures.append(e)
                if failures:
                    error = PartialCommitError(
                        f"Import stopped in batch {batches}: "
                        f"{committed} of {len(records)} records were saved ({failures[0]})",
                        completed=committed,
                    )
                    logger.error("%s", error)
                    self.ledger.error_sink(error)
                    raise error from failures[0]
                logger.info("Import batch %d committed (%d records)", batches, len(batch))

        try:
            self.audit.record(HistoryAction.IMPORTED, f"Imported {committed} records from spreadsheet.")
        except StoreError as e:
            error = PartialCommitError(audit_missing(HistoryAction.IMPORTED.value, None), completed=committed)
            logger.error("%s", error)
            self.ledger.error_sink(error)
            raise error from e

        return ImportResult(
            imported=committed,
            skipped=len(skipped_rows),
            batches=batches,
            skipped_rows=tuple(skipped_rows),
        )
