"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Optional, Sequence
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from autobooks.domain.entities import (
    AccountAllocation,
    ClassificationRule,
    ClassificationSummary,
    Company,
    FiscalPeriod,
    JournalEntry,
    JournalLineDraft,
    LedgerAccount,
    Transaction,
)


class Database(ABC):
    """Abstract database interface for autobooks."""

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

    @abstractmethod
    def atomic(self) -> AbstractContextManager[None]:
        """Open an atomic unit of work.

        Writes made inside the block are committed together when the
        outermost block exits normally and rolled back when it raises.
        Nested blocks join the enclosing unit.
        """
        pass

    # Company operations
    @abstractmethod
    def create_company(self, name: str) -> int:
        """Create a company. Returns company ID."""
        pass

    @abstractmethod
    def get_company(self, company_id: int) -> Optional[Company]:
        """Get company by ID."""
        pass

    @abstractmethod
    def get_company_by_name(self, name: str) -> Optional[Company]:
        """Get company by name."""
        pass

    @abstractmethod
    def list_companies(self) -> list[Company]:
        """List all companies."""
        pass

    # Fiscal period operations
    @abstractmethod
    def create_fiscal_period(
        self, company_id: int, name: str, start_date: date, end_date: date
    ) -> int:
        """Create a fiscal period. Returns fiscal period ID."""
        pass

    @abstractmethod
    def get_fiscal_period(self, fiscal_period_id: int) -> Optional[FiscalPeriod]:
        """Get fiscal period by ID."""
        pass

    @abstractmethod
    def list_fiscal_periods(self, company_id: int) -> list[FiscalPeriod]:
        """List fiscal periods of a company."""
        pass

    # Ledger account operations
    @abstractmethod
    def create_ledger_account(
        self, code: str, name: str, category: Optional[str] = None, is_active: bool = True
    ) -> int:
        """Create a ledger account. Returns ledger account ID."""
        pass

    @abstractmethod
    def get_ledger_account(self, account_id: int) -> Optional[LedgerAccount]:
        """Get ledger account by ID."""
        pass

    @abstractmethod
    def get_account_id_by_code(self, code: str) -> Optional[int]:
        """Get the ID of the active ledger account with this code."""
        pass

    @abstractmethod
    def get_account_id_by_name(self, name: str) -> Optional[int]:
        """Get the ID of the active ledger account with this name."""
        pass

    @abstractmethod
    def list_ledger_accounts(self) -> list[LedgerAccount]:
        """List the chart of accounts ordered by code."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        company_id: int,
        fiscal_period_id: int,
        date: date,
        description: str,
        debit_amount: Optional[Decimal] = None,
        credit_amount: Optional[Decimal] = None,
        reference: Optional[str] = None,
    ) -> int:
        """Create an unclassified transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        company_id: int,
        fiscal_period_id: Optional[int] = None,
        unclassified: bool = False,
        limit: Optional[int] = None,
    ) -> list[Transaction]:
        """List transactions of a company, newest first.

        Args:
            company_id: Company ID
            fiscal_period_id: Optional fiscal period filter
            unclassified: If True, only return transactions without an account
            limit: Optional maximum number of rows
        """
        pass

    @abstractmethod
    def find_similar_unclassified(
        self, company_id: int, pattern: str, limit: int
    ) -> list[Transaction]:
        """Find unclassified transactions whose description contains pattern (case-insensitive)."""
        pass

    @abstractmethod
    def mark_transactions_classified(
        self,
        transaction_ids: Sequence[int],
        account_code: str,
        account_name: str,
        classified_by: str,
    ) -> int:
        """Set the classification of unclassified transactions.

        Raises:
            NotFoundError: If a transaction does not exist
            ConflictError: If a transaction is already classified
        """
        pass

    @abstractmethod
    def list_classified_unposted(self, company_id: int) -> list[Transaction]:
        """List classified transactions with no journal line referencing them."""
        pass

    # Classification rule operations
    @abstractmethod
    def list_rules(self, company_id: Optional[int] = None) -> list[ClassificationRule]:
        """List rules ordered by usage count (descending), then ID."""
        pass

    @abstractmethod
    def get_rule(self, rule_id: int) -> Optional[ClassificationRule]:
        """Get rule by ID."""
        pass

    @abstractmethod
    def get_rule_by_signature(
        self, company_id: int, account_code: str, keywords: Sequence[str]
    ) -> Optional[ClassificationRule]:
        """Get the rule for (company, account code, keyword signature)."""
        pass

    @abstractmethod
    def create_rule(
        self,
        company_id: int,
        pattern: str,
        keywords: Sequence[str],
        account_code: str,
        account_name: str,
    ) -> int:
        """Create a rule with usage count 1. Returns rule ID."""
        pass

    @abstractmethod
    def record_rule_usage(self, rule_id: int, keywords: Optional[Sequence[str]] = None) -> None:
        """Increment usage count, refresh last_used and optionally the keywords."""
        pass

    @abstractmethod
    def search_rules(
        self, text: str, limit: int, company_id: Optional[int] = None
    ) -> list[ClassificationRule]:
        """Find rules whose pattern contains text (case-insensitive), most used first.

        When company_id is given only that company's rules are searched.
        """
        pass

    # Journal operations
    @abstractmethod
    def create_journal_entry(
        self,
        company_id: int,
        fiscal_period_id: int,
        transaction_date: date,
        description: Optional[str],
        reference: str,
        created_by: str,
        lines: Sequence[JournalLineDraft],
    ) -> int:
        """Create a journal entry header with its lines. Returns journal entry ID."""
        pass

    @abstractmethod
    def get_journal_entry(self, journal_entry_id: int) -> Optional[JournalEntry]:
        """Get journal entry (with lines) by ID."""
        pass

    @abstractmethod
    def get_journal_entry_for_transaction(self, transaction_id: int) -> Optional[JournalEntry]:
        """Get the journal entry whose lines reference a transaction."""
        pass

    @abstractmethod
    def count_journal_lines_for_transaction(self, transaction_id: int) -> int:
        """Count journal lines referencing a transaction."""
        pass

    # Reporting operations
    @abstractmethod
    def get_classification_summary(
        self, company_id: int, fiscal_period_id: Optional[int] = None
    ) -> ClassificationSummary:
        """Count total, classified, posted and unclassified transactions."""
        pass

    @abstractmethod
    def get_account_allocations(
        self, company_id: int, fiscal_period_id: Optional[int] = None
    ) -> list[AccountAllocation]:
        """Aggregate journal lines per ledger account, busiest first."""
        pass
