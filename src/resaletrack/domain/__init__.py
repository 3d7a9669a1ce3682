"""Domain layer for resaletrack application."""

from resaletrack.domain.sync import SyncEngine
from resaletrack.domain.audit import AuditTrail
from resaletrack.domain.ledger import LedgerService
from resaletrack.domain.personnel import PersonnelService
from resaletrack.domain.importer import ImportReconciler
from resaletrack.domain.aggregation import AggregationEngine

__all__ = [
    "SyncEngine",
    "AuditTrail",
    "LedgerService",
    "PersonnelService",
    "ImportReconciler",
    "AggregationEngine",
]
