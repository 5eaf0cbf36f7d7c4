"""Domain model entities for bankimport.

These are pure data classes representing business concepts, independent of
database schema. Import-session records (mappings, parsed and classified
transactions) are never persisted; the ORM layer only stores committed
transactions, import batches, learned classifications and the directories.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Any, Optional


class TransactionType(str, Enum):
    """Direction of a bank transaction."""

    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class AccountType(str, Enum):
    """Chart-of-accounts classification."""

    ASSET = "ASSET"
    LIABILITY = "LIABILITY"
    EQUITY = "EQUITY"
    REVENUE = "REVENUE"
    EXPENSE = "EXPENSE"

    @classmethod
    def for_transaction_type(cls, txn_type: TransactionType) -> "AccountType":
        """Return the account type that books a transaction of the given direction."""
        return cls.REVENUE if txn_type == TransactionType.INCOME else cls.EXPENSE


class Confidence(str, Enum):
    """How strongly a classification decision should be trusted."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def from_score(cls, score: float) -> "Confidence":
        if score >= 0.8:
            return cls.HIGH
        if score >= 0.5:
            return cls.MEDIUM
        return cls.LOW


class BatchStatus(str, Enum):
    """Lifecycle of a persisted import batch."""

    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    UNDONE = "UNDONE"


MAPPING_FIELDS = ("date", "description", "deposit", "withdrawal", "balance")


@dataclass(frozen=True)
class BankTemplate:
    """Header synonyms describing one bank's export layout."""

    id: str
    name: str
    name_ko: str
    columns: dict[str, tuple[str, ...]]
    date_formats: tuple[str, ...] = ()


@dataclass(frozen=True)
class ColumnMapping:
    """Resolved association of canonical fields to a file's header strings."""

    date: Optional[str] = None
    description: Optional[str] = None
    deposit: Optional[str] = None
    withdrawal: Optional[str] = None
    balance: Optional[str] = None

    def missing_required_fields(self) -> list[str]:
        """Return the required fields that are unresolved."""
        missing = []
        if not self.date:
            missing.append("date")
        if not self.description:
            missing.append("description")
        if not self.deposit and not self.withdrawal:
            missing.append("deposit/withdrawal")
        return missing

    @property
    def is_usable(self) -> bool:
        return not self.missing_required_fields()

    def as_dict(self) -> dict[str, Optional[str]]:
        return {name: getattr(self, name) for name in MAPPING_FIELDS}


@dataclass(frozen=True)
class ParsedTransaction:
    """Canonical row extracted from a bank export."""

    row_index: int
    date: str
    description: str
    deposit: float
    withdrawal: float
    balance: float
    raw_data: dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class ClassifiedTransaction:
    """Parsed transaction with an inferred direction and account assignment."""

    row_index: int
    date: str
    description: str
    deposit: float
    withdrawal: float
    balance: float
    type: TransactionType
    amount: float
    account_id: Optional[int]
    account_name: Optional[str]
    project_id: Optional[int]
    project_name: Optional[str]
    fund_source_id: Optional[int]
    fund_source_name: Optional[str]
    confidence: Confidence
    is_learned: bool
    raw_data: dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class ClassificationSummary:
    """Aggregate counts over one classification run."""

    total_count: int
    income_count: int
    expense_count: int
    high_confidence_count: int
    medium_confidence_count: int
    low_confidence_count: int
    learned_count: int
    total_income: float
    total_expense: float


@dataclass(frozen=True)
class ParseResult:
    """Outcome of reading and normalizing one uploaded file."""

    bank_type: str
    headers: list[str]
    rows: list[list[Any]]
    suggested_mapping: ColumnMapping
    transactions: list[ParsedTransaction]


@dataclass(frozen=True)
class LedgerAccount:
    """Chart-of-accounts entry."""

    id: int
    tenant_id: str
    code: str
    name: str
    account_type: AccountType
    is_active: bool
    created_at: datetime

    @property
    def display_name(self) -> str:
        return f"{self.code} {self.name}"


@dataclass(frozen=True)
class Project:
    """Project a transaction may be attributed to."""

    id: int
    tenant_id: str
    name: str
    is_active: bool
    created_at: datetime


@dataclass(frozen=True)
class FundSource:
    """Fund source a transaction may be attributed to."""

    id: int
    tenant_id: str
    name: str
    created_at: datetime


@dataclass(frozen=True)
class Transaction:
    """Committed transaction."""

    id: int
    tenant_id: str
    batch_id: Optional[str]
    date: date
    type: TransactionType
    amount: Decimal
    description: str
    account_id: int
    project_id: Optional[int]
    fund_source_id: Optional[int]
    created_at: datetime


@dataclass(frozen=True)
class LearnedClassification:
    """Previously confirmed account assignment for a normalized description."""

    id: int
    tenant_id: str
    description: str
    account_id: int
    project_id: Optional[int]
    fund_source_id: Optional[int]
    confidence: float
    usage_count: int
    updated_at: datetime


@dataclass(frozen=True)
class RowError:
    """Commit failure for one row."""

    row_index: int
    error: str


@dataclass(frozen=True)
class ImportBatch:
    """Set of transactions committed in one confirm step."""

    id: str
    tenant_id: str
    filename: Optional[str]
    bank_type: Optional[str]
    total_count: int
    success_count: int
    duplicate_count: int
    failed_count: int
    transaction_ids: list[int]
    errors: list[RowError]
    status: BatchStatus
    created_at: datetime
