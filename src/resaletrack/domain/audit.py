"""Audit trail domain service."""

import logging
from typing import Optional

from resaletrack.domain.entities import Collection, HistoryAction, HistoryEntry
from resaletrack.domain.sync import SyncEngine
from resaletrack.store.mappers import history_entry_to_document

logger = logging.getLogger(__name__)


class AuditTrail:
    """Append-only history of ledger mutations."""

    def __init__(self, sync: SyncEngine):
        """Initialize audit trail.

        Args:
            sync: Sync engine whose store receives entries and whose
                history mirror is read back
        """
        self.sync = sync
        self.store = sync.store

    def record(
        self, action: HistoryAction, details: str, transaction_id: Optional[str] = None
    ) -> str:
        """Write a history entry.

        Returns:
            History entry ID

        Raises:
            StoreError: If the write fails
        """
        entry_id = self.store.add(
            Collection.HISTORY.value,
            history_entry_to_document(action, details, transaction_id),
        )
        logger.info("History %s: %s", action.value, details)
        return entry_id

    def list_entries(self, limit: Optional[int] = None) -> list[HistoryEntry]:
        """List history entries, newest first."""
        # Mirror order is insertion order, which breaks timestamp ties
        entries = list(enumerate(self.sync.history()))
        entries.sort(
            key=lambda pair: (pair[1].timestamp is not None, pair[1].timestamp, pair[0]),
            reverse=True,
        )
        result = [entry for _, entry in entries]
        if limit is not None:
            result = result[:limit]
        return result
