"""Transaction classification.

Each parsed transaction is resolved in strict order:

1. a learned classification for the tenant and normalized description,
2. the first keyword pattern of the transaction's direction,
3. the tenant's default income or expense account.

Classification is a pure function of the transaction and a
``ClassificationContext`` snapshot; nothing here writes to the database.
"""

from dataclasses import dataclass, field
from typing import Optional

from bankimport.config import DEFAULT_EXPENSE_ACCOUNT_CODE, DEFAULT_INCOME_ACCOUNT_CODE
from bankimport.domain.entities import (
    AccountType,
    ClassificationSummary,
    ClassifiedTransaction,
    Confidence,
    FundSource,
    LearnedClassification,
    LedgerAccount,
    ParsedTransaction,
    Project,
    TransactionType,
)
from bankimport.domain.patterns import ClassificationPattern, patterns_for
from bankimport.utils.description import normalize_description


@dataclass(frozen=True)
class PatternMatch:
    """Keyword pattern that matched a description."""

    pattern: ClassificationPattern
    keyword: str
    confidence: Confidence


@dataclass(frozen=True)
class ClassificationContext:
    """Tenant directories and learned classifications at classification time."""

    tenant_id: str
    accounts: list[LedgerAccount] = field(default_factory=list)
    projects: list[Project] = field(default_factory=list)
    fund_sources: list[FundSource] = field(default_factory=list)
    learned: dict[str, LearnedClassification] = field(default_factory=dict)

    def account(self, account_id: Optional[int]) -> Optional[LedgerAccount]:
        return next((a for a in self.accounts if a.id == account_id), None)

    def project(self, project_id: Optional[int]) -> Optional[Project]:
        return next((p for p in self.projects if p.id == project_id), None)

    def fund_source(self, fund_source_id: Optional[int]) -> Optional[FundSource]:
        return next((f for f in self.fund_sources if f.id == fund_source_id), None)

    def account_by_code(self, code: str, account_type: AccountType) -> Optional[LedgerAccount]:
        return next(
            (a for a in self.accounts if a.code == code and a.account_type == account_type),
            None,
        )

    def account_by_name(self, name: str, account_type: AccountType) -> Optional[LedgerAccount]:
        needle = name.lower()
        return next(
            (
                a
                for a in self.accounts
                if a.account_type == account_type and needle in a.name.lower()
            ),
            None,
        )


def infer_type(transaction: ParsedTransaction) -> TransactionType:
    """Deposits are income; everything else is an expense."""
    return TransactionType.INCOME if transaction.deposit > 0 else TransactionType.EXPENSE


def find_matching_pattern(description: str, txn_type: TransactionType) -> Optional[PatternMatch]:
    """Find the first keyword pattern of the given direction matching a description.

    Args:
        description: Raw transaction description
        txn_type: Transaction direction; patterns of the other direction are ignored

    Returns:
        The match, or None if no keyword of this direction occurs in the description
    """
    normalized = normalize_description(description)
    original_lower = description.lower()

    for pattern in patterns_for(txn_type):
        for keyword in pattern.keywords:
            normalized_hit = normalize_description(keyword) in normalized
            if not normalized_hit and keyword.lower() not in original_lower:
                continue

            if original_lower == keyword.lower():
                confidence = Confidence.HIGH
            elif normalized_hit and len(keyword) >= 3:
                confidence = Confidence.MEDIUM
            else:
                confidence = Confidence.LOW
            return PatternMatch(pattern=pattern, keyword=keyword, confidence=confidence)

    return None


def classify_transaction(
    transaction: ParsedTransaction, context: ClassificationContext
) -> ClassifiedTransaction:
    """Assign a direction, account and confidence to one parsed transaction."""
    txn_type = infer_type(transaction)
    amount = transaction.deposit if txn_type == TransactionType.INCOME else transaction.withdrawal
    account_type = AccountType.for_transaction_type(txn_type)

    account: Optional[LedgerAccount] = None
    project: Optional[Project] = None
    fund_source: Optional[FundSource] = None
    confidence = Confidence.LOW
    is_learned = False

    learned = context.learned.get(normalize_description(transaction.description))
    if learned is not None:
        account = context.account(learned.account_id)
        if account is not None:
            confidence = Confidence.from_score(learned.confidence)
            is_learned = True
            # Stale project/fund source references are dropped silently
            if learned.project_id is not None:
                project = context.project(learned.project_id)
            if learned.fund_source_id is not None:
                fund_source = context.fund_source(learned.fund_source_id)

    if account is None:
        match = find_matching_pattern(transaction.description, txn_type)
        if match is not None:
            account = context.account_by_code(
                match.pattern.account_code, account_type
            ) or context.account_by_name(match.pattern.account_name, account_type)
            if account is not None:
                confidence = match.confidence

    if account is None:
        default_code = (
            DEFAULT_INCOME_ACCOUNT_CODE
            if txn_type == TransactionType.INCOME
            else DEFAULT_EXPENSE_ACCOUNT_CODE
        )
        account = context.account_by_code(default_code, account_type)
        confidence = Confidence.LOW

    return ClassifiedTransaction(
        row_index=transaction.row_index,
        date=transaction.date,
        description=transaction.description,
        deposit=transaction.deposit,
        withdrawal=transaction.withdrawal,
        balance=transaction.balance,
        type=txn_type,
        amount=amount,
        account_id=account.id if account else None,
        account_name=account.display_name if account else None,
        project_id=project.id if project else None,
        project_name=project.name if project else None,
        fund_source_id=fund_source.id if fund_source else None,
        fund_source_name=fund_source.name if fund_source else None,
        confidence=confidence,
        is_learned=is_learned,
        raw_data=transaction.raw_data,
    )


def classify_transactions(
    transactions: list[ParsedTransaction], context: ClassificationContext
) -> list[ClassifiedTransaction]:
    """Classify every transaction independently against one context snapshot."""
    return [classify_transaction(t, context) for t in transactions]


def summarize(transactions: list[ClassifiedTransaction]) -> ClassificationSummary:
    """Aggregate counts and totals over classified transactions."""
    income = [t for t in transactions if t.type == TransactionType.INCOME]
    expense = [t for t in transactions if t.type == TransactionType.EXPENSE]
    return ClassificationSummary(
        total_count=len(transactions),
        income_count=len(income),
        expense_count=len(expense),
        high_confidence_count=sum(1 for t in transactions if t.confidence == Confidence.HIGH),
        medium_confidence_count=sum(1 for t in transactions if t.confidence == Confidence.MEDIUM),
        low_confidence_count=sum(1 for t in transactions if t.confidence == Confidence.LOW),
        learned_count=sum(1 for t in transactions if t.is_learned),
        total_income=sum(t.amount for t in income),
        total_expense=sum(t.amount for t in expense),
    )
