"""Chart of accounts domain service."""

from typing import Optional

import structlog

from autobooks.database.base import Database
from autobooks.domain.entities import LedgerAccount as LedgerAccountEntity
from autobooks.domain.errors import ConflictError, ValidationError
from autobooks.domain.knowledge_base import KnowledgeBase

logger = structlog.get_logger(__name__)


class LedgerAccountService:
    """Service for managing the chart of accounts."""

    def __init__(self, db: Database):
        """Initialize ledger account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(self, code: str, name: str, category: Optional[str] = None) -> int:
        """Create a ledger account.

        Args:
            code: Account code (e.g., "8800")
            name: Account name
            category: Optional category label

        Returns:
            Ledger account ID

        Raises:
            ValidationError: If code or name is blank
            ConflictError: If an account with this code already exists
        """
        code = code.strip()
        name = name.strip()
        if not code or not name:
            raise ValidationError("Account code and name cannot be empty")

        # Inactive accounts keep their code too
        for account in self.db.list_ledger_accounts():
            if account.code == code:
                raise ConflictError(f"Ledger account with code '{code}' already exists")

        return self.db.create_ledger_account(code=code, name=name, category=category)

    def list_accounts(self) -> list[LedgerAccountEntity]:
        """List the chart of accounts ordered by code."""
        return self.db.list_ledger_accounts()

    def initialize_from_knowledge_base(self, knowledge_base: KnowledgeBase) -> int:
        """Create the knowledge base's standard accounts.

        Codes that already exist are left untouched.

        Returns:
            Number of accounts created
        """
        existing = {account.code for account in self.db.list_ledger_accounts()}
        created = 0
        with self.db.atomic():
            for standard in knowledge_base.standard_accounts():
                if standard.code in existing:
                    continue
                self.db.create_ledger_account(
                    code=standard.code, name=standard.name, category=standard.category
                )
                existing.add(standard.code)
                created += 1

        logger.info("chart_of_accounts_initialized", created=created, total=len(existing))
        return created
