"""Transaction classification service."""

from typing import Optional, Sequence

import structlog

from autobooks.database.base import Database
from autobooks.domain import errors
from autobooks.domain.entities import (
    AccountSuggestion,
    CandidateMatch,
    ClassificationResult,
    ClassificationRule,
    Company,
    Transaction,
)
from autobooks.domain.keywords import extract_keywords
from autobooks.domain.knowledge_base import KnowledgeBase
from autobooks.domain.matcher import Matcher
from autobooks.domain.posting import LedgerPoster
from autobooks.domain.prompts import Prompter
from autobooks.domain.rule_cache import RuleCache
from autobooks.domain.session import ClassificationSession

logger = structlog.get_logger(__name__)

AUTO_ACCEPT_CONFIDENCE = 0.9
CONFIRM_CONFIDENCE = 0.6
MAX_SUGGESTIONS = 5

CLASSIFIED_BY_INTERACTIVE = "INTERACTIVE-CATEGORIZATION"
CLASSIFIED_BY_BATCH = "BATCH_CLASSIFICATION"

# (trigger words, account name, note)
GENERIC_GUESSES: tuple[tuple[tuple[str, ...], str, str], ...] = (
    (("fee", "charge", "commission"), "Bank Charges", "Financial expenses"),
    (("salary", "wage", "payroll"), "Employee Costs", "Personnel expenses"),
    (("insurance", "premium", "cover"), "Insurance", "Risk management expenses"),
    (("rent", "lease", "property"), "Rent Expense", "Property costs"),
    (("fuel", "petrol", "diesel"), "Travel & Entertainment", "Transportation costs"),
    (("electricity", "water", "utility"), "Utilities", "Operational expenses"),
    (("interest", "dividend"), "Other Income", "Financial income"),
)

FALLBACK_SUGGESTIONS: tuple[tuple[str, str], ...] = (
    ("Operating Expenses", "General business costs"),
    ("Other Income", "Miscellaneous revenue"),
    ("Administrative Expenses", "General overhead"),
)


def _company_id(company: Company | int) -> int:
    return company.id if isinstance(company, Company) else company


class Classifier:
    """Assigns ledger accounts to bank transactions and learns rules from the decisions."""

    def __init__(
        self,
        db: Database,
        rule_cache: RuleCache,
        matcher: Matcher,
        poster: LedgerPoster,
        prompter: Optional[Prompter] = None,
        knowledge_base: Optional[KnowledgeBase] = None,
        session: Optional[ClassificationSession] = None,
    ):
        """Initialize classifier.

        Args:
            db: Database instance
            rule_cache: Cache of learned rules, updated after every commit
            matcher: Matcher used to find a candidate rule
            poster: Ledger poster used once a transaction is classified
            prompter: Operator interface; only needed when a decision must be asked
            knowledge_base: Optional standard catalogue for keywords and suggestions
            session: Session collecting change records
        """
        self.db = db
        self.rule_cache = rule_cache
        self.matcher = matcher
        self.poster = poster
        self.prompter = prompter
        self.knowledge_base = knowledge_base
        self.session = session if session is not None else ClassificationSession()

    def _require_prompter(self, transaction: Transaction) -> Prompter:
        if self.prompter is None:
            raise errors.ValidationError(
                f"Transaction {transaction.id} needs an operator decision but no prompter is configured"
            )
        return self.prompter

    def _resolve_account(
        self, account_code: str, account_name: str, transaction_id: Optional[int], company_id: int
    ) -> int:
        account_id = self.poster.resolve_account_id(account_code, account_name)
        if account_id is None:
            raise errors.NotFoundError(
                errors.ledger_account_not_found(
                    account_code,
                    account_name,
                    transaction_id=transaction_id,
                    company_id=company_id,
                )
            )
        return account_id

    def _ask_account(self, transaction: Transaction) -> Optional[tuple[str, str]]:
        prompter = self._require_prompter(transaction)
        suggestions = self.suggest(transaction.description, company_id=transaction.company_id)
        while True:
            answer = prompter.ask_account(transaction, suggestions)
            if answer is None:
                return None
            account_code, account_name = ((part or "").strip() for part in answer)
            if account_code and account_name:
                return account_code, account_name
            prompter.notify(errors.missing_classification_input())

    def _upsert_rule(
        self, company_id: int, description: str, account_code: str, account_name: str
    ) -> int:
        """Record usage of the rule for this keyword signature, creating it if needed.

        Must run inside an atomic unit.
        """
        keywords = extract_keywords(description, self.knowledge_base)
        existing = self.db.get_rule_by_signature(company_id, account_code, keywords)
        if existing is not None:
            self.db.record_rule_usage(existing.id, keywords=keywords)
            logger.info("rule_used", rule_id=existing.id, company_id=company_id, account_code=account_code)
            return existing.id

        rule_id = self.db.create_rule(
            company_id=company_id,
            pattern=description,
            keywords=keywords,
            account_code=account_code,
            account_name=account_name,
        )
        logger.info(
            "rule_created",
            rule_id=rule_id,
            company_id=company_id,
            account_code=account_code,
            keywords=",".join(keywords),
        )
        return rule_id

    def _cache_rules(self, rule_ids: Sequence[int]) -> None:
        for rule_id in dict.fromkeys(rule_ids):
            rule = self.db.get_rule(rule_id)
            if rule is not None:
                self.rule_cache.put(rule)

    def _post_after_classification(self, transaction_id: int, account_id: int) -> Optional[int]:
        """Post a freshly classified transaction; failures are left to the recovery pass."""
        transaction = self.db.get_transaction(transaction_id)
        try:
            return self.poster.post(transaction, account_id)
        except errors.PersistenceError as e:
            logger.error(
                "posting_deferred_to_recovery",
                transaction_id=transaction_id,
                company_id=transaction.company_id,
                account_code=transaction.account_code,
                error=str(e),
            )
            return None

    def classify(
        self, transaction: Transaction, company: Company | int
    ) -> Optional[ClassificationResult]:
        """Classify one transaction.

        A candidate rule at or above the high threshold is applied without
        asking; one at or above the medium threshold is offered for
        confirmation; otherwise, or when the offer is rejected, the operator
        enters the account manually.

        Args:
            transaction: Unclassified transaction
            company: Company (or company ID) the transaction belongs to

        Returns:
            Classification result, or None if the operator skipped the transaction

        Raises:
            NotFoundError: If the transaction is not the company's or the
                account cannot be resolved; nothing is written
            ConflictError: If the transaction is already classified
            PersistenceError: If the classification could not be saved
        """
        company_id = _company_id(company)
        if transaction.company_id != company_id:
            raise errors.NotFoundError(errors.transaction_not_found(transaction.id, company_id))
        if transaction.is_classified:
            raise errors.ConflictError(
                errors.transaction_already_classified(transaction.id, transaction.account_code)
            )

        candidate: Optional[CandidateMatch] = self.matcher.match(transaction.description, company_id)
        matched_rule: Optional[ClassificationRule] = None
        auto_accepted = False

        if candidate is not None and candidate.confidence >= CONFIRM_CONFIDENCE:
            if candidate.confidence >= AUTO_ACCEPT_CONFIDENCE:
                matched_rule = candidate.rule
                auto_accepted = True
            elif self._require_prompter(transaction).confirm_match(transaction, candidate):
                matched_rule = candidate.rule

        if matched_rule is not None:
            account_code, account_name = matched_rule.account_code, matched_rule.account_name
        else:
            answer = self._ask_account(transaction)
            if answer is None:
                logger.info("transaction_skipped", transaction_id=transaction.id, company_id=company_id)
                return None
            account_code, account_name = answer

        account_id = self._resolve_account(account_code, account_name, transaction.id, company_id)

        with self.db.atomic():
            self.db.mark_transactions_classified(
                [transaction.id], account_code, account_name, CLASSIFIED_BY_INTERACTIVE
            )
            if matched_rule is not None:
                self.db.record_rule_usage(matched_rule.id)
                rule_id = matched_rule.id
            else:
                rule_id = self._upsert_rule(company_id, transaction.description, account_code, account_name)

        self._cache_rules([rule_id])
        self.session.record(transaction, account_code, account_name)
        logger.info(
            "transaction_classified",
            transaction_id=transaction.id,
            company_id=company_id,
            account_code=account_code,
            rule_id=rule_id,
            auto_accepted=auto_accepted,
        )

        journal_entry_id = self._post_after_classification(transaction.id, account_id)
        return ClassificationResult(
            transaction_id=transaction.id,
            account_code=account_code,
            account_name=account_name,
            confidence=candidate.confidence if matched_rule is not None else None,
            auto_accepted=auto_accepted,
            rule_id=rule_id,
            journal_entry_id=journal_entry_id,
        )

    def classify_batch(
        self,
        transaction_ids: Sequence[int],
        account_code: str,
        account_name: str,
        company_id: int,
    ) -> int:
        """Classify several transactions with the same account in one atomic unit.

        Every transaction is checked before anything is written, so either
        all of them are classified or none is.

        Returns:
            Number of transactions classified

        Raises:
            ValidationError: If the account code or name is blank
            NotFoundError: If the account or a transaction cannot be found
            ConflictError: If a transaction is already classified
        """
        account_code = (account_code or "").strip()
        account_name = (account_name or "").strip()
        if not account_code or not account_name:
            raise errors.ValidationError(errors.missing_classification_input())

        ids = list(dict.fromkeys(transaction_ids))
        if not ids:
            return 0

        account_id = self._resolve_account(account_code, account_name, None, company_id)

        transactions = []
        for transaction_id in ids:
            transaction = self.db.get_transaction(transaction_id)
            if transaction is None or transaction.company_id != company_id:
                raise errors.NotFoundError(errors.transaction_not_found(transaction_id, company_id))
            if transaction.is_classified:
                raise errors.ConflictError(
                    errors.transaction_already_classified(transaction_id, transaction.account_code)
                )
            transactions.append(transaction)

        with self.db.atomic():
            self.db.mark_transactions_classified(ids, account_code, account_name, CLASSIFIED_BY_BATCH)
            rule_ids = [
                self._upsert_rule(company_id, t.description, account_code, account_name)
                for t in transactions
            ]

        self._cache_rules(rule_ids)
        logger.info(
            "batch_classified",
            company_id=company_id,
            account_code=account_code,
            transactions=len(ids),
        )

        for transaction in transactions:
            self.session.record(transaction, account_code, account_name)
            self._post_after_classification(transaction.id, account_id)
        return len(ids)

    def _knowledge_base_suggestions(self, text: str) -> list[AccountSuggestion]:
        suggestions: list[AccountSuggestion] = []
        seen: set[str] = set()
        for rule in self.knowledge_base.matching_rules(text):
            if rule.account_code in seen:
                continue
            seen.add(rule.account_code)
            account = self.knowledge_base.account_for_code(rule.account_code)
            suggestions.append(
                AccountSuggestion(
                    account_name=account.name if account is not None else rule.match_phrase.title(),
                    account_code=rule.account_code,
                    note=rule.category,
                    source="knowledge_base",
                )
            )
            if len(suggestions) == MAX_SUGGESTIONS:
                break
        return suggestions

    def suggest(self, pattern_text: str, company_id: Optional[int] = None) -> list[AccountSuggestion]:
        """Suggest accounts for a description pattern.

        Learned rules come first, then knowledge base rules, then generic
        guesses from well-known words, then a fixed set of broad categories.
        Learned rules are limited to company_id when it is given.
        """
        text = (pattern_text or "").strip()
        if not text:
            return self._fallback_suggestions()

        suggestions: list[AccountSuggestion] = []
        seen: set[tuple[str, str]] = set()
        for rule in self.db.search_rules(text, MAX_SUGGESTIONS, company_id=company_id):
            key = (rule.account_code, rule.account_name)
            if key not in seen:
                seen.add(key)
                suggestions.append(
                    AccountSuggestion(
                        account_name=rule.account_name,
                        account_code=rule.account_code,
                        source="learned",
                    )
                )
        if suggestions:
            return suggestions

        if self.knowledge_base is not None:
            try:
                suggestions = self._knowledge_base_suggestions(text)
            except errors.KnowledgeBaseUnavailableError as e:
                logger.warning("knowledge_base_unavailable", operation="suggest", error=str(e))
                suggestions = []
            if suggestions:
                return suggestions

        lowered = text.lower()
        suggestions = [
            AccountSuggestion(account_name=name, note=note, source="generic")
            for words, name, note in GENERIC_GUESSES
            if any(word in lowered for word in words)
        ]
        return suggestions or self._fallback_suggestions()

    def _fallback_suggestions(self) -> list[AccountSuggestion]:
        return [
            AccountSuggestion(account_name=name, note=note, source="generic")
            for name, note in FALLBACK_SUGGESTIONS
        ]
