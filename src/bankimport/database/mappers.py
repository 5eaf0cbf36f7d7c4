"""Mapper functions to convert between domain models and SQLAlchemy models."""

from bankimport.domain import entities as domain
from bankimport.database.models import (
    FundSource as ORMFundSource,
    ImportBatch as ORMImportBatch,
    LearnedClassification as ORMLearnedClassification,
    LedgerAccount as ORMLedgerAccount,
    Project as ORMProject,
    Transaction as ORMTransaction,
)


def ledger_account_to_domain(orm_account: ORMLedgerAccount) -> domain.LedgerAccount:
    """Convert SQLAlchemy LedgerAccount model to domain LedgerAccount entity."""
    return domain.LedgerAccount(
        id=orm_account.id,
        tenant_id=orm_account.tenant_id,
        code=orm_account.code,
        name=orm_account.name,
        account_type=domain.AccountType(orm_account.account_type),
        is_active=orm_account.is_active,
        created_at=orm_account.created_at,
    )


def project_to_domain(orm_project: ORMProject) -> domain.Project:
    """Convert SQLAlchemy Project model to domain Project entity."""
    return domain.Project(
        id=orm_project.id,
        tenant_id=orm_project.tenant_id,
        name=orm_project.name,
        is_active=orm_project.is_active,
        created_at=orm_project.created_at,
    )


def fund_source_to_domain(orm_fund_source: ORMFundSource) -> domain.FundSource:
    """Convert SQLAlchemy FundSource model to domain FundSource entity."""
    return domain.FundSource(
        id=orm_fund_source.id,
        tenant_id=orm_fund_source.tenant_id,
        name=orm_fund_source.name,
        created_at=orm_fund_source.created_at,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        tenant_id=orm_transaction.tenant_id,
        batch_id=orm_transaction.batch_id,
        date=orm_transaction.date,
        type=domain.TransactionType(orm_transaction.type),
        amount=orm_transaction.amount,
        description=orm_transaction.description,
        account_id=orm_transaction.account_id,
        project_id=orm_transaction.project_id,
        fund_source_id=orm_transaction.fund_source_id,
        created_at=orm_transaction.created_at,
    )


def learned_classification_to_domain(
    orm_learned: ORMLearnedClassification,
) -> domain.LearnedClassification:
    """Convert SQLAlchemy LearnedClassification model to domain entity."""
    return domain.LearnedClassification(
        id=orm_learned.id,
        tenant_id=orm_learned.tenant_id,
        description=orm_learned.description,
        account_id=orm_learned.account_id,
        project_id=orm_learned.project_id,
        fund_source_id=orm_learned.fund_source_id,
        confidence=orm_learned.confidence,
        usage_count=orm_learned.usage_count,
        updated_at=orm_learned.updated_at,
    )


def import_batch_to_domain(orm_batch: ORMImportBatch) -> domain.ImportBatch:
    """Convert SQLAlchemy ImportBatch model to domain ImportBatch entity."""
    return domain.ImportBatch(
        id=orm_batch.id,
        tenant_id=orm_batch.tenant_id,
        filename=orm_batch.filename,
        bank_type=orm_batch.bank_type,
        total_count=orm_batch.total_count,
        success_count=orm_batch.success_count,
        duplicate_count=orm_batch.duplicate_count,
        failed_count=orm_batch.failed_count,
        transaction_ids=list(orm_batch.transaction_ids or []),
        errors=[
            domain.RowError(row_index=e["row_index"], error=e["error"])
            for e in (orm_batch.errors or [])
        ],
        status=domain.BatchStatus(orm_batch.status),
        created_at=orm_batch.created_at,
    )
