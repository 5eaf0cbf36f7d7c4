"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional
from datetime import date, datetime
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from bankimport.domain.entities import (
    AccountType,
    FundSource,
    ImportBatch,
    LearnedClassification,
    LedgerAccount,
    Project,
    RowError,
    Transaction,
    TransactionType,
)


class Database(ABC):
    """Abstract database interface for bankimport."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Chart-of-accounts directory
    @abstractmethod
    def create_ledger_account(
        self, tenant_id: str, code: str, name: str, account_type: AccountType
    ) -> int:
        """Create a chart-of-accounts entry. Returns account ID."""
        pass

    @abstractmethod
    def get_ledger_account(self, tenant_id: str, account_id: int) -> Optional[LedgerAccount]:
        """Get a tenant's account by ID."""
        pass

    @abstractmethod
    def list_ledger_accounts(
        self, tenant_id: str, active_only: bool = True
    ) -> list[LedgerAccount]:
        """List a tenant's accounts ordered by type and code."""
        pass

    @abstractmethod
    def set_ledger_account_active(self, tenant_id: str, account_id: int, is_active: bool) -> None:
        """Activate or deactivate an account."""
        pass

    # Project and fund-source directories
    @abstractmethod
    def create_project(self, tenant_id: str, name: str) -> int:
        """Create a project. Returns project ID."""
        pass

    @abstractmethod
    def list_projects(self, tenant_id: str, active_only: bool = True) -> list[Project]:
        """List a tenant's projects ordered by name."""
        pass

    @abstractmethod
    def set_project_active(self, tenant_id: str, project_id: int, is_active: bool) -> None:
        """Activate or deactivate a project."""
        pass

    @abstractmethod
    def create_fund_source(self, tenant_id: str, name: str) -> int:
        """Create a fund source. Returns fund source ID."""
        pass

    @abstractmethod
    def list_fund_sources(self, tenant_id: str) -> list[FundSource]:
        """List a tenant's fund sources ordered by name."""
        pass

    # Transaction commit
    @abstractmethod
    def create_transaction(
        self,
        tenant_id: str,
        date: date,
        type: TransactionType,
        amount: Decimal,
        description: str,
        account_id: int,
        project_id: Optional[int] = None,
        fund_source_id: Optional[int] = None,
        batch_id: Optional[str] = None,
    ) -> int:
        """Create a transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, tenant_id: str, transaction_id: int) -> Optional[Transaction]:
        """Get a tenant's transaction by ID."""
        pass

    @abstractmethod
    def transaction_exists(
        self, tenant_id: str, date: date, amount: Decimal, description: str
    ) -> bool:
        """Check if a transaction with the same date, amount and description exists."""
        pass

    @abstractmethod
    def list_transactions(
        self, tenant_id: str, batch_id: Optional[str] = None
    ) -> list[Transaction]:
        """List a tenant's transactions, optionally restricted to one batch."""
        pass

    # Import batches
    @abstractmethod
    def create_import_batch(
        self,
        batch_id: str,
        tenant_id: str,
        filename: Optional[str],
        bank_type: Optional[str],
        total_count: int,
    ) -> None:
        """Create an import batch in PROCESSING status."""
        pass

    @abstractmethod
    def complete_import_batch(
        self,
        batch_id: str,
        success_count: int,
        duplicate_count: int,
        failed_count: int,
        transaction_ids: list[int],
        errors: list[RowError],
    ) -> None:
        """Record commit outcome and mark the batch COMPLETED."""
        pass

    @abstractmethod
    def get_import_batch(self, tenant_id: str, batch_id: str) -> Optional[ImportBatch]:
        """Get a tenant's import batch by ID."""
        pass

    @abstractmethod
    def list_import_batches(
        self, tenant_id: str, since: Optional[datetime] = None
    ) -> list[ImportBatch]:
        """List a tenant's import batches, newest first."""
        pass

    @abstractmethod
    def undo_import_batch(self, tenant_id: str, batch_id: str) -> int:
        """Delete the batch's recorded transactions and mark it UNDONE.

        Runs as one database transaction: either every recorded transaction is
        deleted and the batch is marked, or nothing changes. Returns the number
        of deleted transactions.
        """
        pass

    # Learned classifications
    @abstractmethod
    def upsert_learned_classification(
        self,
        tenant_id: str,
        description: str,
        account_id: int,
        project_id: Optional[int] = None,
        fund_source_id: Optional[int] = None,
    ) -> None:
        """Insert or overwrite the classification for (tenant, description) atomically."""
        pass

    @abstractmethod
    def get_learned_classification(
        self, tenant_id: str, description: str
    ) -> Optional[LearnedClassification]:
        """Get the classification stored for a normalized description."""
        pass

    @abstractmethod
    def list_learned_classifications(self, tenant_id: str) -> list[LearnedClassification]:
        """List a tenant's learned classifications."""
        pass
