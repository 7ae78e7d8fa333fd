"""Classification progress and account allocation reporting."""

from typing import Optional
from autobooks.database.base import Database
from autobooks.domain.entities import AccountAllocation, ClassificationSummary
from autobooks.domain.errors import NotFoundError, company_not_found


class SummaryService:
    """Service for classification summaries."""

    def __init__(self, db: Database):
        self.db = db

    def _require_company(self, company_id: int) -> None:
        if self.db.get_company(company_id) is None:
            raise NotFoundError(company_not_found(company_id))

    def get_classification_summary(
        self, company_id: int, fiscal_period_id: Optional[int] = None
    ) -> ClassificationSummary:
        """Count classified, posted and unclassified transactions.

        Raises:
            NotFoundError: If the company doesn't exist
        """
        self._require_company(company_id)
        return self.db.get_classification_summary(company_id, fiscal_period_id=fiscal_period_id)

    def get_account_allocations(
        self, company_id: int, fiscal_period_id: Optional[int] = None
    ) -> list[AccountAllocation]:
        """Return journal activity per ledger account, busiest account first.

        Raises:
            NotFoundError: If the company doesn't exist
        """
        self._require_company(company_id)
        return self.db.get_account_allocations(company_id, fiscal_period_id=fiscal_period_id)
