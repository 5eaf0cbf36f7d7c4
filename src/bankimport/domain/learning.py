"""Per-tenant memory of confirmed description classifications."""

import logging
from typing import Optional

from bankimport.database.base import Database
from bankimport.domain.entities import LearnedClassification
from bankimport.utils.description import normalize_description

logger = logging.getLogger(__name__)


class LearningService:
    """Service for saving and looking up learned classifications."""

    def __init__(self, db: Database):
        """Initialize learning service.

        Args:
            db: Database instance
        """
        self.db = db

    def save(
        self,
        tenant_id: str,
        description: str,
        account_id: int,
        project_id: Optional[int] = None,
        fund_source_id: Optional[int] = None,
    ) -> bool:
        """Remember a confirmed classification for a description.

        The last confirmation wins: an existing entry has its account, project
        and fund source replaced, its confidence reset to 1.0 and its usage
        count incremented, in a single atomic upsert.

        Args:
            tenant_id: Tenant ID
            description: Raw transaction description
            account_id: Confirmed account ID
            project_id: Optional confirmed project ID
            fund_source_id: Optional confirmed fund source ID

        Returns:
            False if the description normalizes to nothing and was not stored
        """
        key = normalize_description(description)
        if not key:
            return False

        self.db.upsert_learned_classification(
            tenant_id=tenant_id,
            description=key,
            account_id=account_id,
            project_id=project_id,
            fund_source_id=fund_source_id,
        )
        logger.debug("Learned account %s for '%s' (tenant '%s')", account_id, key, tenant_id)
        return True

    def lookup(self, tenant_id: str, description: str) -> Optional[LearnedClassification]:
        """Get the learned classification for a raw description."""
        key = normalize_description(description)
        if not key:
            return None
        return self.db.get_learned_classification(tenant_id, key)

    def list_learned(self, tenant_id: str) -> list[LearnedClassification]:
        return self.db.list_learned_classifications(tenant_id)

    def snapshot(self, tenant_id: str) -> dict[str, LearnedClassification]:
        """Return the tenant's learned classifications keyed by normalized description."""
        return {c.description: c for c in self.db.list_learned_classifications(tenant_id)}
