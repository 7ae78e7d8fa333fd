"""Transaction domain service."""

from typing import Optional
from datetime import date
from decimal import Decimal
from autobooks.database.base import Database
from autobooks.domain.entities import Transaction as TransactionEntity
from autobooks.domain.errors import (
    NotFoundError,
    ValidationError,
    company_not_found,
    fiscal_period_not_found,
)


class TransactionService:
    """Service for entering and listing bank transactions."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

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
        """Create an unclassified transaction.

        Args:
            company_id: Company ID
            fiscal_period_id: Fiscal period ID
            date: Transaction date
            description: Bank statement description
            debit_amount: Money leaving the bank account
            credit_amount: Money entering the bank account
            reference: Optional bank reference

        Returns:
            Transaction ID

        Raises:
            NotFoundError: If the company or fiscal period doesn't exist
            ValidationError: If the description is blank or not exactly one
                positive amount is given
        """
        if self.db.get_company(company_id) is None:
            raise NotFoundError(company_not_found(company_id))

        period = self.db.get_fiscal_period(fiscal_period_id)
        if period is None or period.company_id != company_id:
            raise NotFoundError(fiscal_period_not_found(fiscal_period_id))

        if not description or not description.strip():
            raise ValidationError("Transaction description cannot be empty")

        if (debit_amount is None) == (credit_amount is None):
            raise ValidationError("Exactly one of debit amount and credit amount must be given")
        amount = debit_amount if debit_amount is not None else credit_amount
        if amount <= 0:
            raise ValidationError(f"Transaction amount must be positive, got {amount}")

        return self.db.create_transaction(
            company_id=company_id,
            fiscal_period_id=fiscal_period_id,
            date=date,
            description=description.strip(),
            debit_amount=debit_amount,
            credit_amount=credit_amount,
            reference=reference,
        )

    def get_transaction(self, transaction_id: int) -> Optional[TransactionEntity]:
        """Get transaction by ID."""
        return self.db.get_transaction(transaction_id)

    def list_transactions(
        self,
        company_id: int,
        fiscal_period_id: Optional[int] = None,
        unclassified: bool = False,
        limit: Optional[int] = None,
    ) -> list[TransactionEntity]:
        """List a company's transactions, newest first.

        Args:
            company_id: Company ID
            fiscal_period_id: Optional fiscal period filter
            unclassified: If True, only list transactions without an account
            limit: Optional maximum number of transactions

        Returns:
            List of transaction entities
        """
        return self.db.list_transactions(
            company_id=company_id,
            fiscal_period_id=fiscal_period_id,
            unclassified=unclassified,
            limit=limit,
        )
