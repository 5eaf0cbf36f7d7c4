"""Shared domain error messages and error types."""

from typing import Iterable


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class FormatError(ValidationError):
    """Uploaded file cannot be read as a bank export."""


class MappingValidationError(ValidationError):
    """Column mapping is missing required fields."""

    def __init__(self, missing_fields: Iterable[str]):
        self.missing_fields = list(missing_fields)
        super().__init__(
            f"Column mapping is missing required fields: {', '.join(self.missing_fields)}"
        )


class InvalidTransitionError(DomainError):
    """Import step invoked from a state that does not allow it."""

    def __init__(self, action: str, current: str):
        self.action = action
        self.current = current
        super().__init__(f"Cannot {action} while import is in state '{current}'")


class CommitError(DomainError):
    """A single row could not be committed."""

    def __init__(self, row_index: int, message: str):
        self.row_index = row_index
        super().__init__(message)


class UndoError(DomainError):
    """Import batch cannot be undone."""


def ledger_account_not_found(account_id: int) -> str:
    """Return message for missing chart-of-accounts entry."""
    return f"Account {account_id} not found"


def project_not_found(project_id: int) -> str:
    """Return message for missing project."""
    return f"Project {project_id} not found"


def fund_source_not_found(fund_source_id: int) -> str:
    """Return message for missing fund source."""
    return f"Fund source {fund_source_id} not found"


def row_not_found(row_index: int) -> str:
    """Return message for a row index outside the classified set."""
    return f"Row {row_index} not found in classified transactions"


def batch_not_found(batch_id: str) -> str:
    """Return message for unknown import batch."""
    return f"Import batch '{batch_id}' not found"


def batch_already_undone(batch_id: str) -> str:
    """Return message for an import batch that was already undone."""
    return f"Import batch '{batch_id}' has already been undone"


def duplicate_ledger_account_code(code: str, tenant_id: str) -> str:
    """Return message for a duplicate account code within a tenant."""
    return f"Account with code '{code}' already exists for tenant '{tenant_id}'"
