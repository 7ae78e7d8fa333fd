"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the ledger schema can evolve
without touching the classification services.
"""

from autobooks.domain import entities as domain
from autobooks.database.models import (
    Company as ORMCompany,
    FiscalPeriod as ORMFiscalPeriod,
    LedgerAccount as ORMLedgerAccount,
    BankTransaction as ORMBankTransaction,
    ClassificationRule as ORMClassificationRule,
    JournalEntry as ORMJournalEntry,
    JournalLine as ORMJournalLine,
)


def split_keywords(keywords: str) -> tuple[str, ...]:
    """Split a stored keyword signature into its keywords."""
    if not keywords:
        return ()
    return tuple(k for k in keywords.split(",") if k)


def company_to_domain(orm_company: ORMCompany) -> domain.Company:
    """Convert SQLAlchemy Company model to domain Company entity."""
    return domain.Company(
        id=orm_company.id,
        name=orm_company.name,
        created_at=orm_company.created_at,
    )


def fiscal_period_to_domain(orm_period: ORMFiscalPeriod) -> domain.FiscalPeriod:
    """Convert SQLAlchemy FiscalPeriod model to domain FiscalPeriod entity."""
    return domain.FiscalPeriod(
        id=orm_period.id,
        company_id=orm_period.company_id,
        name=orm_period.name,
        start_date=orm_period.start_date,
        end_date=orm_period.end_date,
        created_at=orm_period.created_at,
    )


def ledger_account_to_domain(orm_account: ORMLedgerAccount) -> domain.LedgerAccount:
    """Convert SQLAlchemy LedgerAccount model to domain LedgerAccount entity."""
    return domain.LedgerAccount(
        id=orm_account.id,
        code=orm_account.code,
        name=orm_account.name,
        category=orm_account.category,
        is_active=orm_account.is_active,
        created_at=orm_account.created_at,
    )


def transaction_to_domain(orm_transaction: ORMBankTransaction) -> domain.Transaction:
    """Convert SQLAlchemy BankTransaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        company_id=orm_transaction.company_id,
        fiscal_period_id=orm_transaction.fiscal_period_id,
        date=orm_transaction.transaction_date,
        description=orm_transaction.description,
        debit_amount=orm_transaction.debit_amount,
        credit_amount=orm_transaction.credit_amount,
        reference=orm_transaction.reference,
        account_code=orm_transaction.account_code,
        account_name=orm_transaction.account_name,
        classified_at=orm_transaction.classified_at,
        classified_by=orm_transaction.classified_by,
        imported_at=orm_transaction.imported_at,
    )


def rule_to_domain(orm_rule: ORMClassificationRule) -> domain.ClassificationRule:
    """Convert SQLAlchemy ClassificationRule model to domain ClassificationRule entity."""
    return domain.ClassificationRule(
        id=orm_rule.id,
        company_id=orm_rule.company_id,
        pattern=orm_rule.pattern,
        keywords=split_keywords(orm_rule.keywords),
        account_code=orm_rule.account_code,
        account_name=orm_rule.account_name,
        usage_count=orm_rule.usage_count,
        created_at=orm_rule.created_at,
        last_used=orm_rule.last_used,
    )


def journal_line_to_domain(orm_line: ORMJournalLine) -> domain.JournalLine:
    """Convert SQLAlchemy JournalLine model to domain JournalLine entity."""
    return domain.JournalLine(
        id=orm_line.id,
        journal_entry_id=orm_line.journal_entry_id,
        account_id=orm_line.account_id,
        line_number=orm_line.line_number,
        debit_amount=orm_line.debit_amount,
        credit_amount=orm_line.credit_amount,
        description=orm_line.description,
        reference=orm_line.reference,
        source_transaction_id=orm_line.source_transaction_id,
    )


def journal_entry_to_domain(orm_entry: ORMJournalEntry) -> domain.JournalEntry:
    """Convert SQLAlchemy JournalEntry model (with lines) to domain JournalEntry entity."""
    return domain.JournalEntry(
        id=orm_entry.id,
        company_id=orm_entry.company_id,
        fiscal_period_id=orm_entry.fiscal_period_id,
        transaction_date=orm_entry.transaction_date,
        description=orm_entry.description,
        reference=orm_entry.reference,
        created_by=orm_entry.created_by,
        created_at=orm_entry.created_at,
        lines=tuple(journal_line_to_domain(line) for line in orm_entry.lines),
    )
