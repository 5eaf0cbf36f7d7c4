"""Import batch commit and undo service."""

import logging
import uuid
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import Optional

from bankimport.database.base import Database
from bankimport.domain.directory import DirectoryService
from bankimport.domain.entities import (
    BatchStatus,
    ClassifiedTransaction,
    ImportBatch,
    RowError,
)
from bankimport.domain.errors import (
    CommitError,
    ConflictError,
    NotFoundError,
    UndoError,
    batch_already_undone,
    batch_not_found,
)
from bankimport.domain.learning import LearningService

logger = logging.getLogger(__name__)

DUPLICATE_ERROR = "Duplicate transaction (same date, amount and description)"
NO_ACCOUNT_ERROR = "No account assigned"

_CENTS = Decimal("0.01")


def generate_batch_id() -> str:
    return uuid.uuid4().hex


class ImportBatchService:
    """Service for committing classified transactions as an undoable batch."""

    def __init__(self, db: Database):
        """Initialize import batch service.

        Args:
            db: Database instance
        """
        self.db = db
        self.learning_service = LearningService(db)

    def _to_amount(self, txn: ClassifiedTransaction) -> Decimal:
        try:
            amount = Decimal(str(txn.amount)).quantize(_CENTS)
        except InvalidOperation:
            raise CommitError(txn.row_index, f"Invalid amount '{txn.amount}'")
        if amount <= 0:
            raise CommitError(txn.row_index, "Amount must be greater than zero")
        return amount

    def _to_date(self, txn: ClassifiedTransaction) -> date:
        try:
            return date.fromisoformat(txn.date)
        except ValueError:
            raise CommitError(txn.row_index, f"Invalid date '{txn.date}'")

    def _commit_row(
        self,
        directory: DirectoryService,
        batch_id: str,
        txn: ClassifiedTransaction,
    ) -> int:
        if txn.account_id is None:
            raise CommitError(txn.row_index, NO_ACCOUNT_ERROR)
        try:
            directory.get_account(txn.account_id)
            if txn.project_id is not None:
                directory.get_project(txn.project_id)
            if txn.fund_source_id is not None:
                directory.get_fund_source(txn.fund_source_id)
        except NotFoundError as e:
            raise CommitError(txn.row_index, str(e))

        return self.db.create_transaction(
            tenant_id=directory.tenant_id,
            date=self._to_date(txn),
            type=txn.type,
            amount=self._to_amount(txn),
            description=txn.description,
            account_id=txn.account_id,
            project_id=txn.project_id,
            fund_source_id=txn.fund_source_id,
            batch_id=batch_id,
        )

    def _is_duplicate(self, tenant_id: str, txn: ClassifiedTransaction) -> bool:
        try:
            return self.db.transaction_exists(
                tenant_id, date.fromisoformat(txn.date), self._to_amount(txn), txn.description
            )
        except (ValueError, CommitError):
            # Unparsable rows are reported by the commit step instead
            return False

    def commit(
        self,
        tenant_id: str,
        transactions: list[ClassifiedTransaction],
        filename: Optional[str] = None,
        bank_type: Optional[str] = None,
        save_classifications: bool = False,
    ) -> ImportBatch:
        """Commit transactions under one fresh batch ID.

        Rows already present (same date, amount and description) are counted
        as duplicates and skipped. Failures on one row are recorded in the
        batch's error list and never stop the remaining rows.

        Args:
            tenant_id: Tenant ID
            transactions: Final (possibly edited) classified transactions
            filename: Source file name, for the batch record
            bank_type: Detected template ID, for the batch record
            save_classifications: Also remember each committed row's account,
                project and fund source for its description

        Returns:
            The completed import batch
        """
        batch_id = generate_batch_id()
        self.db.create_import_batch(
            batch_id=batch_id,
            tenant_id=tenant_id,
            filename=filename,
            bank_type=bank_type,
            total_count=len(transactions),
        )

        # Duplicates are judged against what existed before this batch
        duplicates = {t.row_index for t in transactions if self._is_duplicate(tenant_id, t)}

        directory = DirectoryService(self.db, tenant_id)
        created_ids: list[int] = []
        errors: list[RowError] = []

        for txn in transactions:
            if txn.row_index in duplicates:
                errors.append(RowError(row_index=txn.row_index, error=DUPLICATE_ERROR))
                continue
            try:
                created_ids.append(self._commit_row(directory, batch_id, txn))
            except Exception as e:
                logger.warning("Row %d not committed: %s", txn.row_index, e)
                errors.append(RowError(row_index=txn.row_index, error=str(e)))

        self.db.complete_import_batch(
            batch_id=batch_id,
            success_count=len(created_ids),
            duplicate_count=len(duplicates),
            failed_count=len(errors) - len(duplicates),
            transaction_ids=created_ids,
            errors=errors,
        )
        logger.info(
            "Committed batch %s: %d created, %d duplicates, %d failed",
            batch_id,
            len(created_ids),
            len(duplicates),
            len(errors) - len(duplicates),
        )

        batch = self.get_batch(tenant_id, batch_id)
        if save_classifications:
            self.learn_from_batch(batch, transactions)
        return batch

    def learn_from_batch(
        self, batch: ImportBatch, transactions: list[ClassifiedTransaction]
    ) -> int:
        """Remember the classification of every row the batch committed.

        Rows the batch recorded as duplicates or failures are not learned.

        Returns:
            Number of learned classifications saved
        """
        skipped = {e.row_index for e in batch.errors}
        learned = 0
        for txn in transactions:
            if txn.row_index in skipped or not txn.description.strip():
                continue
            if self.learning_service.save(
                batch.tenant_id,
                txn.description,
                txn.account_id,
                txn.project_id,
                txn.fund_source_id,
            ):
                learned += 1
        logger.info("Saved %d learned classifications from batch %s", learned, batch.id)
        return learned

    def get_batch(self, tenant_id: str, batch_id: str) -> ImportBatch:
        """Get an import batch.

        Raises:
            NotFoundError: If the batch does not exist for the tenant
        """
        batch = self.db.get_import_batch(tenant_id, batch_id)
        if batch is None:
            raise NotFoundError(batch_not_found(batch_id))
        return batch

    def list_batches(self, tenant_id: str, since: Optional[date] = None) -> list[ImportBatch]:
        """List import batches, newest first, optionally created on or after a date."""
        since_dt = datetime.combine(since, time.min) if since is not None else None
        return self.db.list_import_batches(tenant_id, since=since_dt)

    def undo(self, tenant_id: str, batch_id: str) -> int:
        """Delete every transaction recorded for a batch.

        Args:
            tenant_id: Tenant ID
            batch_id: Batch to undo

        Returns:
            Number of deleted transactions

        Raises:
            UndoError: If the batch is unknown or was already undone
        """
        batch = self.db.get_import_batch(tenant_id, batch_id)
        if batch is None:
            raise UndoError(batch_not_found(batch_id))
        if batch.status == BatchStatus.UNDONE:
            raise UndoError(batch_already_undone(batch_id))

        try:
            deleted = self.db.undo_import_batch(tenant_id, batch_id)
        except (NotFoundError, ConflictError) as e:
            raise UndoError(str(e))

        logger.info("Undid batch %s: %d transactions deleted", batch_id, deleted)
        return deleted
