"""Propagation of a classification to similar unclassified transactions."""

import re
from typing import Optional

import structlog

from autobooks.database.base import Database
from autobooks.domain import errors
from autobooks.domain.entities import Transaction
from autobooks.domain.posting import LedgerPoster
from autobooks.domain.prompts import Prompter
from autobooks.domain.session import ClassificationSession

logger = structlog.get_logger(__name__)

MAX_BATCH_SIMILAR = 20
PARTIAL_PATTERN_WORDS = 3
CLASSIFIED_BY_PROPAGATION = "AUTO-PROPAGATION"


def search_patterns(description: str) -> list[str]:
    """Return the description, then a shorter prefix of its leading words.

    The prefix holds the first N-1 words of an N-word description, at most
    three. Both patterns keep the spacing of the stored description, since
    they are matched against it literally.
    """
    full = description.strip()
    if not full:
        return []
    patterns = [full]
    words = list(re.finditer(r"\S+", full))
    if len(words) > 1:
        last = words[min(len(words) - 1, PARTIAL_PATTERN_WORDS) - 1]
        prefix = full[: last.end()]
        if prefix not in patterns:
            patterns.append(prefix)
    return patterns


class Propagator:
    """Offers a classification decision to transactions with similar descriptions."""

    def __init__(
        self,
        db: Database,
        poster: LedgerPoster,
        prompter: Optional[Prompter] = None,
        session: Optional[ClassificationSession] = None,
    ):
        self.db = db
        self.poster = poster
        self.prompter = prompter
        self.session = session if session is not None else ClassificationSession()

    def find_similar(self, source: Transaction, pattern: str, company_id: int) -> list[Transaction]:
        """Find unclassified transactions of the company containing pattern, newest first."""
        found = self.db.find_similar_unclassified(company_id, pattern, MAX_BATCH_SIMILAR + 1)
        return [t for t in found if t.id != source.id][:MAX_BATCH_SIMILAR]

    def propagate(
        self,
        source: Transaction,
        account_code: str,
        account_name: str,
        company_id: int,
    ) -> int:
        """Classify transactions similar to source with the same account.

        Patterns are tried from the most to the least specific. The first one
        whose matches the operator accepts is applied and the search stops;
        a declined offer moves on to the next pattern.

        Returns:
            Number of transactions newly classified

        Raises:
            NotFoundError: If the account cannot be resolved
            PersistenceError: If the classification could not be saved
        """
        account_id = self.poster.resolve_account_id(account_code, account_name)
        if account_id is None:
            raise errors.NotFoundError(
                errors.ledger_account_not_found(
                    account_code, account_name, transaction_id=source.id, company_id=company_id
                )
            )

        for pattern in search_patterns(source.description):
            similar = self.find_similar(source, pattern, company_id)
            if not similar:
                continue
            if self.prompter is None or not self.prompter.confirm_propagation(pattern, similar):
                logger.info(
                    "propagation_declined",
                    source_transaction_id=source.id,
                    pattern=pattern,
                    candidates=len(similar),
                )
                continue

            ids = [t.id for t in similar]
            with self.db.atomic():
                self.db.mark_transactions_classified(
                    ids, account_code, account_name, CLASSIFIED_BY_PROPAGATION
                )

            for transaction in similar:
                self.session.record(transaction, account_code, account_name)
                classified = self.db.get_transaction(transaction.id)
                try:
                    self.poster.post(classified, account_id)
                except errors.PersistenceError as e:
                    logger.error(
                        "posting_deferred_to_recovery",
                        transaction_id=transaction.id,
                        company_id=company_id,
                        account_code=account_code,
                        error=str(e),
                    )

            logger.info(
                "classification_propagated",
                source_transaction_id=source.id,
                company_id=company_id,
                account_code=account_code,
                pattern=pattern,
                transactions=len(ids),
            )
            return len(ids)

        return 0
