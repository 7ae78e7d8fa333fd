"""Domain model entities for autobooks.

These are pure data classes representing business concepts, independent of
database schema. Persisted entities mirror a table row; the remaining ones
(candidate matches, change records, suggestions) only live for the duration
of a classification run.
"""

from dataclasses import dataclass, field
from datetime import datetime, date, UTC
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class Company:
    """Company whose bank transactions are classified."""

    id: int
    name: str
    created_at: datetime


@dataclass(frozen=True)
class FiscalPeriod:
    """Fiscal period a transaction belongs to."""

    id: int
    company_id: int
    name: str
    start_date: date
    end_date: date
    created_at: datetime


@dataclass(frozen=True)
class LedgerAccount:
    """Chart of accounts entry."""

    id: int
    code: str
    name: str
    category: Optional[str]
    is_active: bool
    created_at: datetime


@dataclass(frozen=True)
class Transaction:
    """Bank transaction domain entity.

    Exactly one of debit_amount/credit_amount is set and positive. The
    transaction is UNCLASSIFIED while account_code is None.
    """

    id: int
    company_id: int
    fiscal_period_id: int
    date: date
    description: str
    debit_amount: Optional[Decimal]
    credit_amount: Optional[Decimal]
    reference: Optional[str]
    account_code: Optional[str]
    account_name: Optional[str]
    classified_at: Optional[datetime]
    classified_by: Optional[str]
    imported_at: datetime

    @property
    def is_classified(self) -> bool:
        return self.account_code is not None

    @property
    def is_debit(self) -> bool:
        return self.debit_amount is not None and self.debit_amount > 0

    @property
    def amount(self) -> Decimal:
        """Magnitude of the transaction on its natural side."""
        if self.is_debit:
            return self.debit_amount
        return self.credit_amount if self.credit_amount is not None else Decimal("0")


@dataclass(frozen=True)
class ClassificationRule:
    """Learned mapping from a description keyword set to a ledger account."""

    id: int
    company_id: int
    pattern: str
    keywords: tuple[str, ...]
    account_code: str
    account_name: str
    usage_count: int
    created_at: datetime
    last_used: datetime

    @property
    def signature(self) -> str:
        return ",".join(self.keywords)


@dataclass(frozen=True)
class CandidateMatch:
    """A rule together with its confidence for one transaction description."""

    rule: ClassificationRule
    confidence: float


@dataclass(frozen=True)
class JournalLine:
    """One side of a journal entry."""

    id: int
    journal_entry_id: int
    account_id: int
    line_number: int
    debit_amount: Optional[Decimal]
    credit_amount: Optional[Decimal]
    description: Optional[str]
    reference: Optional[str]
    source_transaction_id: Optional[int]


@dataclass(frozen=True)
class JournalEntry:
    """Journal entry header with its lines."""

    id: int
    company_id: int
    fiscal_period_id: int
    transaction_date: date
    description: Optional[str]
    reference: str
    created_by: str
    created_at: datetime
    lines: tuple[JournalLine, ...] = ()

    @property
    def total_debits(self) -> Decimal:
        return sum((line.debit_amount or Decimal("0") for line in self.lines), Decimal("0"))

    @property
    def total_credits(self) -> Decimal:
        return sum((line.credit_amount or Decimal("0") for line in self.lines), Decimal("0"))

    @property
    def is_balanced(self) -> bool:
        return self.total_debits == self.total_credits


@dataclass(frozen=True)
class JournalLineDraft:
    """Journal line values before they are persisted."""

    account_id: int
    line_number: int
    debit_amount: Optional[Decimal]
    credit_amount: Optional[Decimal]
    description: str
    reference: str
    source_transaction_id: int


@dataclass(frozen=True)
class ChangeRecord:
    """In-session audit record of one classification."""

    transaction_id: int
    transaction_date: date
    description: str
    amount: Decimal
    old_account: str
    new_account: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))


@dataclass(frozen=True)
class ClassificationResult:
    """Outcome of classifying a single transaction."""

    transaction_id: int
    account_code: str
    account_name: str
    confidence: Optional[float] = None
    auto_accepted: bool = False
    rule_id: Optional[int] = None
    journal_entry_id: Optional[int] = None


@dataclass(frozen=True)
class AccountSuggestion:
    """Suggested account for a description pattern."""

    account_name: str
    account_code: Optional[str] = None
    note: Optional[str] = None
    source: str = "learned"

    def __str__(self) -> str:
        label = self.account_name
        if self.account_code:
            label = f"{self.account_code} - {self.account_name}"
        if self.note:
            label = f"{label} - {self.note}"
        return label


@dataclass(frozen=True)
class StandardAccount:
    """Standard chart of accounts entry from the knowledge base."""

    code: str
    name: str
    category: str


@dataclass(frozen=True)
class StandardRule:
    """Standard match phrase pointing at a standard account."""

    match_phrase: str
    account_code: str
    category: str


@dataclass(frozen=True)
class ClassificationSummary:
    """Classification progress for a company and fiscal period."""

    total: int
    classified: int
    posted: int
    unclassified: int

    @property
    def percentage(self) -> float:
        if self.total == 0:
            return 0.0
        return self.classified * 100.0 / self.total


@dataclass(frozen=True)
class AccountAllocation:
    """Journal activity per ledger account."""

    account_code: str
    account_name: str
    category: Optional[str]
    line_count: int
    total_debits: Decimal
    total_credits: Decimal
