"""Double-entry posting of classified transactions."""

from decimal import Decimal
from typing import Optional

import structlog

from autobooks.config import DEFAULT_BANK_ACCOUNT_CODE
from autobooks.database.base import Database
from autobooks.domain import errors
from autobooks.domain.entities import JournalLineDraft, Transaction

logger = structlog.get_logger(__name__)

POSTED_BY = "INTERACTIVE-CATEGORIZATION"
BANK_LINE_DESCRIPTION = "Bank Account"
TARGET_LINE_DESCRIPTION = "Categorized Account"


def posting_reference(transaction_id: int) -> str:
    return f"CAT-{transaction_id}"


def build_posting_lines(
    transaction: Transaction, bank_account_id: int, target_account_id: int
) -> list[JournalLineDraft]:
    """Build the bank line and the target line for a transaction.

    The target account is booked on the transaction's natural side and the
    bank account on the opposite side, for the same amount.

    Raises:
        ValidationError: If the transaction has no positive amount
    """
    amount = transaction.amount
    if amount is None or amount <= 0:
        raise errors.ValidationError(
            f"Transaction {transaction.id} has no positive debit or credit amount"
        )

    reference = posting_reference(transaction.id)
    if transaction.is_debit:
        bank_debit, bank_credit = None, amount
        target_debit, target_credit = amount, None
    else:
        bank_debit, bank_credit = amount, None
        target_debit, target_credit = None, amount

    return [
        JournalLineDraft(
            account_id=bank_account_id,
            line_number=1,
            debit_amount=bank_debit,
            credit_amount=bank_credit,
            description=BANK_LINE_DESCRIPTION,
            reference=f"{reference}-01",
            source_transaction_id=transaction.id,
        ),
        JournalLineDraft(
            account_id=target_account_id,
            line_number=2,
            debit_amount=target_debit,
            credit_amount=target_credit,
            description=TARGET_LINE_DESCRIPTION,
            reference=f"{reference}-02",
            source_transaction_id=transaction.id,
        ),
    ]


def _is_balanced(lines: list[JournalLineDraft]) -> bool:
    debits = sum((line.debit_amount or Decimal("0") for line in lines), Decimal("0"))
    credits = sum((line.credit_amount or Decimal("0") for line in lines), Decimal("0"))
    return len(lines) == 2 and debits == credits


class LedgerPoster:
    """Writes balanced journal entries for classified transactions."""

    def __init__(self, db: Database, bank_account_code: str = DEFAULT_BANK_ACCOUNT_CODE):
        """Initialize ledger poster.

        Args:
            db: Database instance
            bank_account_code: Ledger code of the bank account every posting
                is balanced against
        """
        self.db = db
        self.bank_account_code = bank_account_code

    def resolve_account_id(self, account_code: Optional[str], account_name: Optional[str]) -> Optional[int]:
        """Resolve a ledger account by code, or by name when no code is given.

        An unknown code does not fall back to the name, so the stored
        classification and the posted account always agree.
        """
        if account_code:
            return self.db.get_account_id_by_code(account_code)
        if account_name:
            return self.db.get_account_id_by_name(account_name)
        return None

    def _bank_account_id(self, transaction: Transaction, target_account_id: int) -> int:
        bank_account_id = self.db.get_account_id_by_code(self.bank_account_code)
        if bank_account_id is None:
            logger.warning(
                "bank_account_unresolved",
                bank_account_code=self.bank_account_code,
                transaction_id=transaction.id,
                fallback_account_id=target_account_id,
            )
            return target_account_id
        return bank_account_id

    def post(self, transaction: Transaction, account_id: int) -> Optional[int]:
        """Post a transaction against the given ledger account.

        Header and both lines are written in one atomic unit. A transaction
        that already has journal lines is left alone.

        Args:
            transaction: Classified transaction
            account_id: Ledger account ID of the classification target

        Returns:
            New journal entry ID, or None if the transaction was already posted

        Raises:
            PersistenceError: If the entry could not be written; nothing is kept
        """
        try:
            with self.db.atomic():
                if self.db.count_journal_lines_for_transaction(transaction.id) > 0:
                    logger.info("posting_skipped", transaction_id=transaction.id, reason="already_posted")
                    return None

                bank_account_id = self._bank_account_id(transaction, account_id)
                lines = build_posting_lines(transaction, bank_account_id, account_id)
                if not _is_balanced(lines):
                    raise errors.ValidationError(
                        f"Journal lines for transaction {transaction.id} do not balance"
                    )

                entry_id = self.db.create_journal_entry(
                    company_id=transaction.company_id,
                    fiscal_period_id=transaction.fiscal_period_id,
                    transaction_date=transaction.date,
                    description=transaction.description,
                    reference=posting_reference(transaction.id),
                    created_by=POSTED_BY,
                    lines=lines,
                )
        except errors.PersistenceError as e:
            logger.error("posting_failed", transaction_id=transaction.id, account_id=account_id, error=str(e))
            raise
        except errors.DomainError as e:
            logger.error("posting_failed", transaction_id=transaction.id, account_id=account_id, error=str(e))
            raise errors.PersistenceError(
                f"Posting of transaction {transaction.id} to account {account_id} failed: {e}"
            ) from e

        logger.info(
            "transaction_posted",
            transaction_id=transaction.id,
            journal_entry_id=entry_id,
            account_id=account_id,
        )
        return entry_id

    def recover_missing_postings(self, company_id: int) -> int:
        """Post every classified transaction of a company that has no journal lines.

        Transactions whose account cannot be resolved, or whose posting fails,
        are logged and skipped.

        Returns:
            Number of transactions posted
        """
        pending = self.db.list_classified_unposted(company_id)
        posted = 0
        for transaction in pending:
            account_id = self.resolve_account_id(transaction.account_code, transaction.account_name)
            if account_id is None:
                logger.warning(
                    "recovery_account_unresolved",
                    company_id=company_id,
                    transaction_id=transaction.id,
                    account_code=transaction.account_code,
                    account_name=transaction.account_name,
                )
                continue
            try:
                entry_id = self.post(transaction, account_id)
            except errors.PersistenceError as e:
                logger.error(
                    "recovery_posting_failed",
                    company_id=company_id,
                    transaction_id=transaction.id,
                    account_code=transaction.account_code,
                    error=str(e),
                )
                continue
            if entry_id is not None:
                posted += 1

        logger.info("recovery_completed", company_id=company_id, pending=len(pending), posted=posted)
        return posted
