"""Import workflow: upload, mapping, classification, confirmation and undo."""

import dataclasses
import logging
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from bankimport.database.base import Database
from bankimport.domain.batch import ImportBatchService
from bankimport.domain.classifier import (
    ClassificationContext,
    classify_transactions,
    summarize,
)
from bankimport.domain.directory import DirectoryService
from bankimport.domain.entities import (
    MAPPING_FIELDS,
    ClassificationSummary,
    ClassifiedTransaction,
    ColumnMapping,
    ImportBatch,
    ParsedTransaction,
)
from bankimport.domain.errors import (
    InvalidTransitionError,
    MappingValidationError,
    NotFoundError,
    UndoError,
    ValidationError,
    batch_already_undone,
    row_not_found,
)
from bankimport.domain.learning import LearningService
from bankimport.domain.parser import extract_transactions, parse_rows, read_table
from bankimport.domain.templates import get_template

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("account_id", "project_id", "fund_source_id")


class ImportState(str, Enum):
    """Steps of the import workflow."""

    UPLOAD = "upload"
    MAPPING = "mapping"
    CLASSIFY = "classify"
    RESULT = "result"
    UNDONE = "undone"


class ImportSession:
    """One import of one bank export for one tenant.

    Transitions::

        UPLOAD --upload--> MAPPING --classify--> CLASSIFY --confirm--> RESULT --undo--> UNDONE

    ``upload`` may be repeated from MAPPING or CLASSIFY to start over,
    ``update_mapping`` moves CLASSIFY back to MAPPING, and ``classify`` may be
    repeated. Nothing is persisted before ``confirm``.
    """

    def __init__(self, db: Database, tenant_id: str):
        """Initialize import session.

        Args:
            db: Database instance
            tenant_id: Tenant the import belongs to
        """
        self.db = db
        self.tenant_id = tenant_id
        self.directory = DirectoryService(db, tenant_id)
        self.learning_service = LearningService(db)
        self.batch_service = ImportBatchService(db)

        self.state = ImportState.UPLOAD
        self.filename: Optional[str] = None
        self.bank_type: Optional[str] = None
        self.headers: list[str] = []
        self.rows: list[list[Any]] = []
        self.mapping = ColumnMapping()
        self.transactions: list[ParsedTransaction] = []
        self.classified: list[ClassifiedTransaction] = []
        self.summary: Optional[ClassificationSummary] = None
        self.selected: set[int] = set()
        self.overrides: dict[int, dict[str, Optional[int]]] = {}
        self.batch: Optional[ImportBatch] = None

    def _require(self, action: str, *allowed: ImportState) -> None:
        if self.state not in allowed:
            raise InvalidTransitionError(action, self.state.value)

    def _reset_classification(self) -> None:
        self.classified = []
        self.summary = None
        self.selected = set()
        self.overrides = {}

    @property
    def bank_name(self) -> Optional[str]:
        if self.bank_type is None:
            return None
        return get_template(self.bank_type).name_ko

    # Upload
    def upload(self, file_path: str) -> list[ParsedTransaction]:
        """Read a bank export and suggest a column mapping.

        Raises:
            FormatError: If the file cannot be used; the state is unchanged
        """
        self._require("upload", ImportState.UPLOAD, ImportState.MAPPING, ImportState.CLASSIFY)
        return self.upload_rows(read_table(file_path), filename=Path(file_path).name)

    def upload_rows(
        self, raw_rows: list[list[Any]], filename: Optional[str] = None
    ) -> list[ParsedTransaction]:
        """Same as ``upload`` for rows that were already read."""
        self._require("upload", ImportState.UPLOAD, ImportState.MAPPING, ImportState.CLASSIFY)
        result = parse_rows(raw_rows)

        self.filename = filename
        self.bank_type = result.bank_type
        self.headers = result.headers
        self.rows = result.rows
        self.mapping = result.suggested_mapping
        self.transactions = result.transactions
        self._reset_classification()
        self.state = ImportState.MAPPING

        logger.info(
            "Uploaded %s: template '%s', %d rows, %d transactions",
            filename or "<rows>",
            self.bank_type,
            len(self.rows),
            len(self.transactions),
        )
        return self.transactions

    # Mapping
    def update_mapping(self, **fields: Optional[str]) -> list[ParsedTransaction]:
        """Override mapped headers and re-extract the rows.

        Args:
            **fields: Canonical field names (date, description, deposit,
                withdrawal, balance) mapped to a header, or None to unmap

        Raises:
            ValidationError: If a field name is unknown or a header is not in the file
        """
        self._require("update mapping", ImportState.MAPPING, ImportState.CLASSIFY)
        for name, header in fields.items():
            if name not in MAPPING_FIELDS:
                raise ValidationError(
                    f"Unknown mapping field '{name}'. Must be one of: {', '.join(MAPPING_FIELDS)}"
                )
            if header is not None and header not in self.headers:
                raise ValidationError(f"Column '{header}' not found in file headers")

        self.mapping = dataclasses.replace(self.mapping, **fields)
        self.transactions = extract_transactions(self.rows, self.headers, self.mapping)
        self._reset_classification()
        self.state = ImportState.MAPPING
        return self.transactions

    # Classify
    def build_context(self) -> ClassificationContext:
        """Snapshot directories and learned classifications for the tenant."""
        return ClassificationContext(
            tenant_id=self.tenant_id,
            accounts=self.directory.list_accounts(),
            projects=self.directory.list_projects(),
            fund_sources=self.directory.list_fund_sources(),
            learned=self.learning_service.snapshot(self.tenant_id),
        )

    def classify(self) -> list[ClassifiedTransaction]:
        """Classify every parsed transaction and select all rows.

        Raises:
            MappingValidationError: If required columns are unmapped; the
                state is unchanged
        """
        self._require("classify", ImportState.MAPPING, ImportState.CLASSIFY)
        missing = self.mapping.missing_required_fields()
        if missing:
            raise MappingValidationError(missing)

        self._reset_classification()
        context = self.build_context()
        self.classified = classify_transactions(self.transactions, context)
        self.summary = summarize(self.classified)
        self.selected = {t.row_index for t in self.classified}
        self.state = ImportState.CLASSIFY

        logger.info(
            "Classified %d transactions (%d learned, %d low confidence)",
            self.summary.total_count,
            self.summary.learned_count,
            self.summary.low_confidence_count,
        )
        return self.classified

    def _suggestion(self, row_index: int) -> ClassifiedTransaction:
        for txn in self.classified:
            if txn.row_index == row_index:
                return txn
        raise NotFoundError(row_not_found(row_index))

    def select_row(self, row_index: int) -> None:
        self._require("select rows", ImportState.CLASSIFY)
        self._suggestion(row_index)
        self.selected.add(row_index)

    def deselect_row(self, row_index: int) -> None:
        self._require("deselect rows", ImportState.CLASSIFY)
        self._suggestion(row_index)
        self.selected.discard(row_index)

    def edit_row(self, row_index: int, **changes: Optional[int]) -> ClassifiedTransaction:
        """Override the account, project or fund source of one row.

        The classifier's suggestion is kept; the edit is layered on top and
        replaces any earlier edit of the same field.

        Args:
            row_index: Row to edit
            **changes: account_id, project_id and/or fund_source_id; project
                and fund source may be None to clear them

        Returns:
            The row's merged classification

        Raises:
            ValidationError: If a field is not editable or account_id is None
            NotFoundError: If the row or a referenced directory entry does not exist
        """
        self._require("edit rows", ImportState.CLASSIFY)
        self._suggestion(row_index)

        for name, value in changes.items():
            if name not in EDITABLE_FIELDS:
                raise ValidationError(
                    f"Cannot edit '{name}'. Editable fields: {', '.join(EDITABLE_FIELDS)}"
                )
            if name == "account_id":
                if value is None:
                    raise ValidationError("An account is required")
                self.directory.get_account(value)
            elif name == "project_id" and value is not None:
                self.directory.get_project(value)
            elif name == "fund_source_id" and value is not None:
                self.directory.get_fund_source(value)

        self.overrides.setdefault(row_index, {}).update(changes)
        return self.final_transaction(row_index)

    def final_transaction(self, row_index: int) -> ClassifiedTransaction:
        """Return the classifier suggestion for a row merged with its edits."""
        suggestion = self._suggestion(row_index)
        changes = self.overrides.get(row_index)
        if not changes:
            return suggestion

        merged: dict[str, Any] = {}
        if "account_id" in changes:
            account = self.directory.get_account(changes["account_id"])
            merged["account_id"] = account.id
            merged["account_name"] = account.display_name
        if "project_id" in changes:
            project_id = changes["project_id"]
            merged["project_id"] = project_id
            merged["project_name"] = (
                self.directory.get_project(project_id).name if project_id is not None else None
            )
        if "fund_source_id" in changes:
            fund_source_id = changes["fund_source_id"]
            merged["fund_source_id"] = fund_source_id
            merged["fund_source_name"] = (
                self.directory.get_fund_source(fund_source_id).name
                if fund_source_id is not None
                else None
            )
        return dataclasses.replace(suggestion, **merged)

    def final_transactions(self, selected_only: bool = True) -> list[ClassifiedTransaction]:
        """Return merged classifications in row order."""
        return [
            self.final_transaction(t.row_index)
            for t in self.classified
            if not selected_only or t.row_index in self.selected
        ]

    # Confirm
    def confirm(self, save_classifications: bool = False) -> ImportBatch:
        """Commit the selected rows as one import batch.

        Args:
            save_classifications: Remember each committed row's final
                classification for its description

        Raises:
            ValidationError: If no rows are selected
        """
        self._require("confirm", ImportState.CLASSIFY)
        transactions = self.final_transactions()
        if not transactions:
            raise ValidationError("No transactions selected for import")

        self.batch = self.batch_service.commit(
            tenant_id=self.tenant_id,
            transactions=transactions,
            filename=self.filename,
            bank_type=self.bank_type,
        )
        # The batch is committed; it stays undoable even if learning fails
        self.state = ImportState.RESULT
        if save_classifications:
            self.batch_service.learn_from_batch(self.batch, transactions)
        return self.batch

    # Result
    def undo(self) -> int:
        """Delete every transaction committed by this session's batch.

        Raises:
            UndoError: If the batch was already undone
        """
        if self.state == ImportState.UNDONE:
            raise UndoError(batch_already_undone(self.batch.id))
        self._require("undo", ImportState.RESULT)
        deleted = self.batch_service.undo(self.tenant_id, self.batch.id)
        self.state = ImportState.UNDONE
        return deleted
