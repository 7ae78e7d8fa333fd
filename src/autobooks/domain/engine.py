"""Classification engine facade."""

from typing import Optional, Sequence

import structlog

from autobooks.config import DEFAULT_BANK_ACCOUNT_CODE
from autobooks.database.base import Database
from autobooks.domain import errors
from autobooks.domain.classifier import Classifier
from autobooks.domain.entities import (
    AccountSuggestion,
    ChangeRecord,
    ClassificationResult,
    Company,
    Transaction,
)
from autobooks.domain.knowledge_base import KnowledgeBase, StandardKnowledgeBase
from autobooks.domain.matcher import Matcher
from autobooks.domain.posting import LedgerPoster
from autobooks.domain.prompts import Prompter
from autobooks.domain.propagation import Propagator
from autobooks.domain.rule_cache import RuleCache
from autobooks.domain.session import ClassificationSession

logger = structlog.get_logger(__name__)

MAX_UNCLASSIFIED = 100


class ClassificationEngine:
    """Wires the rule cache, matcher, classifier, propagator and poster over one database."""

    def __init__(
        self,
        db: Database,
        prompter: Optional[Prompter] = None,
        knowledge_base: Optional[KnowledgeBase] = None,
        bank_account_code: str = DEFAULT_BANK_ACCOUNT_CODE,
    ):
        """Initialize classification engine.

        Args:
            db: Database instance
            prompter: Operator interface for interactive decisions
            knowledge_base: Standard catalogue; StandardKnowledgeBase when omitted
            bank_account_code: Ledger code of the bank account used for postings
        """
        self.db = db
        self.knowledge_base = knowledge_base if knowledge_base is not None else StandardKnowledgeBase()
        self.session = ClassificationSession()
        self.rule_cache = RuleCache(db)
        self.rule_cache.load()
        self.matcher = Matcher(self.rule_cache, self.knowledge_base)
        self.poster = LedgerPoster(db, bank_account_code=bank_account_code)
        self.classifier = Classifier(
            db,
            self.rule_cache,
            self.matcher,
            self.poster,
            prompter=prompter,
            knowledge_base=self.knowledge_base,
            session=self.session,
        )
        self.propagator = Propagator(db, self.poster, prompter=prompter, session=self.session)

    def list_unclassified(
        self, company_id: int, fiscal_period_id: Optional[int] = None, limit: int = MAX_UNCLASSIFIED
    ) -> list[Transaction]:
        """List the company's unclassified transactions, newest first."""
        return self.db.list_transactions(
            company_id=company_id,
            fiscal_period_id=fiscal_period_id,
            unclassified=True,
            limit=limit,
        )

    def classify_one(
        self, transaction: Transaction, company: Company | int
    ) -> Optional[ClassificationResult]:
        """Classify one transaction, asking the operator when no rule is confident enough.

        Args:
            transaction: Unclassified transaction
            company: Company (or company ID) the transaction belongs to

        Returns:
            Classification result, or None if the operator skipped the transaction
        """
        return self.classifier.classify(transaction, company)

    def classify_batch(
        self,
        transaction_ids: Sequence[int],
        account_code: str,
        account_name: str,
        company_id: int,
    ) -> int:
        """Classify several transactions with one account, all or nothing.

        Args:
            transaction_ids: IDs of unclassified transactions of the company
            account_code: Ledger account code
            account_name: Ledger account name
            company_id: Company ID

        Returns:
            Number of transactions classified
        """
        return self.classifier.classify_batch(transaction_ids, account_code, account_name, company_id)

    def propagate(
        self, transaction: Transaction, account_code: str, account_name: str, company_id: int
    ) -> int:
        """Offer a classification to unclassified transactions similar to transaction.

        Args:
            transaction: Transaction that was just classified
            account_code: Ledger account code to apply
            account_name: Ledger account name to apply
            company_id: Company ID

        Returns:
            Number of transactions newly classified
        """
        return self.propagator.propagate(transaction, account_code, account_name, company_id)

    def recover_missing_postings(self, company_id: int) -> int:
        """Post classified transactions of a company that have no journal entry.

        Returns:
            Number of transactions posted
        """
        return self.poster.recover_missing_postings(company_id)

    def suggest(self, pattern_text: str, company_id: Optional[int] = None) -> list[AccountSuggestion]:
        """Suggest ledger accounts for a description pattern.

        Args:
            pattern_text: Description or fragment to look up
            company_id: Limit learned rules to this company; all companies when None

        Returns:
            Suggestions, most specific source first
        """
        return self.classifier.suggest(pattern_text, company_id=company_id)

    def refresh_rules(self, company_id: Optional[int] = None) -> None:
        """Reload the rule cache from the rule store."""
        self.rule_cache.refresh(company_id)

    def get_transaction(self, transaction_id: int, company_id: int) -> Transaction:
        """Get a transaction of a company.

        Raises:
            NotFoundError: If the transaction does not exist for the company
        """
        transaction = self.db.get_transaction(transaction_id)
        if transaction is None or transaction.company_id != company_id:
            raise errors.NotFoundError(errors.transaction_not_found(transaction_id, company_id))
        return transaction

    @property
    def changes(self) -> list[ChangeRecord]:
        """Change records of this session, oldest first."""
        return self.session.changes
