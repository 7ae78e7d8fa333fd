"""Shared pytest fixtures for autobooks tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest

from autobooks.database.factories import create_sqlite_database
from autobooks.domain.company import CompanyService
from autobooks.domain.engine import ClassificationEngine
from autobooks.domain.errors import KnowledgeBaseUnavailableError
from autobooks.domain.knowledge_base import KnowledgeBase, StandardKnowledgeBase
from autobooks.domain.ledger_account import LedgerAccountService
from autobooks.domain.prompts import Prompter
from autobooks.domain.summary import SummaryService
from autobooks.domain.transaction import TransactionService


class ScriptedPrompter(Prompter):
    """Prompter answering from pre-recorded decisions and recording every question."""

    def __init__(self):
        self.accounts = []
        self.match_answers = []
        self.propagation_answers = []
        self.match_prompts = []
        self.account_prompts = []
        self.propagation_prompts = []
        self.messages = []

    def confirm_match(self, transaction, candidate):
        self.match_prompts.append((transaction, candidate))
        return self.match_answers.pop(0) if self.match_answers else False

    def ask_account(self, transaction, suggestions):
        self.account_prompts.append((transaction, list(suggestions)))
        return self.accounts.pop(0) if self.accounts else None

    def confirm_propagation(self, pattern, transactions):
        self.propagation_prompts.append((pattern, list(transactions)))
        return self.propagation_answers.pop(0) if self.propagation_answers else False

    def notify(self, message):
        self.messages.append(message)


class UnavailableKnowledgeBase(KnowledgeBase):
    """Knowledge base whose backing catalogue cannot be reached."""

    def standard_accounts(self):
        raise KnowledgeBaseUnavailableError("catalogue offline")

    def standard_rules(self):
        raise KnowledgeBaseUnavailableError("catalogue offline")


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def company_service(temp_db):
    """Create a CompanyService with a temporary database."""
    return CompanyService(temp_db)


@pytest.fixture
def ledger_account_service(temp_db):
    """Create a LedgerAccountService with a temporary database."""
    return LedgerAccountService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def summary_service(temp_db):
    """Create a SummaryService with a temporary database."""
    return SummaryService(temp_db)


@pytest.fixture
def knowledge_base():
    """Return the standard knowledge base."""
    return StandardKnowledgeBase()


@pytest.fixture
def unavailable_knowledge_base():
    """Return a knowledge base that always fails."""
    return UnavailableKnowledgeBase()


@pytest.fixture
def chart(temp_db, ledger_account_service, knowledge_base):
    """Seed the standard chart of accounts and return accounts keyed by code."""
    ledger_account_service.initialize_from_knowledge_base(knowledge_base)
    return {account.code: account for account in temp_db.list_ledger_accounts()}


@pytest.fixture
def sample_company(company_service):
    """Create a sample company for testing."""
    company_id = company_service.create_company("Test Company")
    return company_service.get_company(company_id)


@pytest.fixture
def sample_period(company_service, sample_company):
    """Create a sample fiscal period for the sample company."""
    period_id = company_service.create_fiscal_period(
        sample_company.id, "FY2024", date(2024, 3, 1), date(2025, 2, 28)
    )
    return company_service.get_fiscal_period(period_id)


@pytest.fixture
def add_transaction(temp_db, transaction_service, sample_company, sample_period):
    """Return a helper creating unclassified transactions for the sample company."""

    def _add(description, debit=None, credit=None, txn_date=date(2024, 3, 15)):
        if debit is None and credit is None:
            debit = "100.00"
        transaction_id = transaction_service.create_transaction(
            company_id=sample_company.id,
            fiscal_period_id=sample_period.id,
            date=txn_date,
            description=description,
            debit_amount=Decimal(debit) if debit is not None else None,
            credit_amount=Decimal(credit) if credit is not None else None,
        )
        return temp_db.get_transaction(transaction_id)

    return _add


@pytest.fixture
def prompter():
    """Create a ScriptedPrompter with no answers queued."""
    return ScriptedPrompter()


@pytest.fixture
def engine(temp_db, chart, prompter):
    """Create a ClassificationEngine over the seeded chart of accounts."""
    return ClassificationEngine(temp_db, prompter=prompter)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
