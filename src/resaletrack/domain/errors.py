"""Shared domain error messages and error types."""

from typing import Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class StoreError(DomainError):
    """A read or write against the document store failed."""


class PartialCommitError(StoreError):
    """A multi-step operation committed some, but not all, of its steps.

    Attributes:
        completed: Number of steps (or rows) that were committed
        transaction_id: Transaction the operation was about, if any
    """

    def __init__(
        self,
        message: str,
        completed: int = 0,
        transaction_id: Optional[str] = None,
    ):
        super().__init__(message)
        self.completed = completed
        self.transaction_id = transaction_id


def transaction_not_found(transaction_id: str) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def person_not_found(kind: str, person_id: str) -> str:
    """Return message for missing seller or driver."""
    return f"{kind.capitalize()} {person_id} not found"


def unknown_person(kind: str, name: str) -> str:
    """Return message for a seller or driver name with no matching record."""
    return f"{kind.capitalize()} '{name}' does not exist"


def audit_missing(action: str, transaction_id: Optional[str]) -> str:
    """Return message when the record write succeeded but the audit write failed."""
    target = f"transaction {transaction_id}" if transaction_id else "import"
    return f"{action} of {target} was saved but its history entry could not be written"
