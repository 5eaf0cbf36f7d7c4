"""Chart-of-accounts, project and fund-source directory service."""

import logging
from typing import Optional

from bankimport.database.base import Database
from bankimport.domain.entities import AccountType, FundSource, LedgerAccount, Project
from bankimport.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    duplicate_ledger_account_code,
    fund_source_not_found,
    ledger_account_not_found,
    project_not_found,
)
from bankimport.domain.patterns import CLASSIFICATION_PATTERNS

logger = logging.getLogger(__name__)


def _default_chart() -> list[tuple[str, str, AccountType]]:
    chart: dict[str, tuple[str, str, AccountType]] = {}
    for pattern in CLASSIFICATION_PATTERNS:
        chart.setdefault(
            pattern.account_code,
            (
                pattern.account_code,
                pattern.account_name,
                AccountType.for_transaction_type(pattern.transaction_type),
            ),
        )
    return list(chart.values())


# (code, name, type) for every account the keyword table can suggest,
# including the default income (401) and expense (501) accounts.
DEFAULT_CHART_OF_ACCOUNTS = _default_chart()


class DirectoryService:
    """Read access to a tenant's directories, plus seeding helpers."""

    def __init__(self, db: Database, tenant_id: str):
        """Initialize directory service.

        Args:
            db: Database instance
            tenant_id: Tenant whose directories are read
        """
        self.db = db
        self.tenant_id = tenant_id

    def list_accounts(self, active_only: bool = True) -> list[LedgerAccount]:
        return self.db.list_ledger_accounts(self.tenant_id, active_only=active_only)

    def list_projects(self, active_only: bool = True) -> list[Project]:
        return self.db.list_projects(self.tenant_id, active_only=active_only)

    def list_fund_sources(self) -> list[FundSource]:
        return self.db.list_fund_sources(self.tenant_id)

    def get_account(self, account_id: int) -> LedgerAccount:
        """Get an active account by ID.

        Raises:
            NotFoundError: If the account does not exist or is inactive
        """
        account = self.db.get_ledger_account(self.tenant_id, account_id)
        if account is None or not account.is_active:
            raise NotFoundError(ledger_account_not_found(account_id))
        return account

    def get_project(self, project_id: int) -> Project:
        """Get an active project by ID.

        Raises:
            NotFoundError: If the project does not exist or is inactive
        """
        for project in self.list_projects():
            if project.id == project_id:
                return project
        raise NotFoundError(project_not_found(project_id))

    def get_fund_source(self, fund_source_id: int) -> FundSource:
        """Get a fund source by ID.

        Raises:
            NotFoundError: If the fund source does not exist
        """
        for fund_source in self.list_fund_sources():
            if fund_source.id == fund_source_id:
                return fund_source
        raise NotFoundError(fund_source_not_found(fund_source_id))

    def find_account_by_code(self, code: str) -> Optional[LedgerAccount]:
        return next((a for a in self.list_accounts(active_only=False) if a.code == code), None)

    def create_account(self, code: str, name: str, account_type: AccountType) -> int:
        """Create a chart-of-accounts entry.

        Raises:
            ValidationError: If code or name is blank
            ConflictError: If the code already exists for the tenant
        """
        if not code.strip() or not name.strip():
            raise ValidationError("Account code and name are required")
        if self.find_account_by_code(code) is not None:
            raise ConflictError(duplicate_ledger_account_code(code, self.tenant_id))
        return self.db.create_ledger_account(self.tenant_id, code, name, account_type)

    def create_project(self, name: str) -> int:
        if not name.strip():
            raise ValidationError("Project name is required")
        return self.db.create_project(self.tenant_id, name.strip())

    def create_fund_source(self, name: str) -> int:
        if not name.strip():
            raise ValidationError("Fund source name is required")
        return self.db.create_fund_source(self.tenant_id, name.strip())

    def seed_default_accounts(self) -> tuple[int, int]:
        """Create the default chart of accounts, skipping codes that already exist.

        Returns:
            Tuple of (created, skipped)
        """
        existing = {a.code for a in self.list_accounts(active_only=False)}
        created = 0
        for code, name, account_type in DEFAULT_CHART_OF_ACCOUNTS:
            if code in existing:
                continue
            self.db.create_ledger_account(self.tenant_id, code, name, account_type)
            created += 1

        skipped = len(DEFAULT_CHART_OF_ACCOUNTS) - created
        logger.info(
            "Seeded %d default accounts for tenant '%s' (%d already present)",
            created,
            self.tenant_id,
            skipped,
        )
        return created, skipped
