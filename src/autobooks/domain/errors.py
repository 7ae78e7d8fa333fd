"""Shared domain error messages and error types."""

from typing import Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations or double classification."""


class PersistenceError(DomainError):
    """An atomic unit of work failed and was rolled back."""


class KnowledgeBaseUnavailableError(DomainError):
    """The standard classification catalogue could not be consulted."""


def company_not_found(company: int | str) -> str:
    """Return message for missing company."""
    if isinstance(company, int):
        return f"Company {company} not found"
    return f"Company '{company}' not found"


def fiscal_period_not_found(fiscal_period_id: int) -> str:
    """Return message for missing fiscal period."""
    return f"Fiscal period {fiscal_period_id} not found"


def transaction_not_found(transaction_id: int, company_id: Optional[int] = None) -> str:
    """Return message for missing transaction."""
    if company_id is None:
        return f"Transaction {transaction_id} not found"
    return f"Transaction {transaction_id} not found for company {company_id}"


def ledger_account_not_found(
    account_code: str,
    account_name: Optional[str] = None,
    transaction_id: Optional[int] = None,
    company_id: Optional[int] = None,
) -> str:
    """Return message when a target ledger account cannot be resolved."""
    label = f"'{account_code}'"
    if account_name:
        label = f"'{account_code} - {account_name}'"
    message = f"Ledger account {label} not found"
    context = []
    if transaction_id is not None:
        context.append(f"transaction {transaction_id}")
    if company_id is not None:
        context.append(f"company {company_id}")
    if context:
        message += f" (while classifying {', '.join(context)})"
    return message


def transaction_already_classified(transaction_id: int, account_code: str) -> str:
    """Return message for a transaction that already carries a classification."""
    return f"Transaction {transaction_id} is already classified as {account_code}"


def missing_classification_input() -> str:
    """Return message for blank manual classification input."""
    return "Both account code and account name are required"
