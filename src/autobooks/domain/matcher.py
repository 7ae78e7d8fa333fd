"""Confidence scoring of transaction descriptions against learned rules."""

from typing import Optional

import structlog

from autobooks.domain.entities import CandidateMatch, ClassificationRule, StandardRule
from autobooks.domain.errors import KnowledgeBaseUnavailableError
from autobooks.domain.knowledge_base import KnowledgeBase
from autobooks.domain.rule_cache import RuleCache

logger = structlog.get_logger(__name__)

SIGNIFICANT_KEYWORD_LENGTH = 4
HIGH_WEIGHT = 1.0
LOW_WEIGHT = 0.5
PATTERN_BONUS = 0.8
SIGNIFICANT_BOOST = 1.2
SUPPLIER_BONUS = 0.9
MAX_CONFIDENCE = 1.0
MIN_CONFIDENCE = 0.5


class Matcher:
    """Finds the learned rule that best fits a transaction description.

    Matching has no side effects: it reads the rule cache snapshot for the
    company and the knowledge base match phrases, nothing else.
    """

    def __init__(self, rule_cache: RuleCache, knowledge_base: Optional[KnowledgeBase] = None):
        """Initialize matcher.

        Args:
            rule_cache: Cache holding the learned rules per company
            knowledge_base: Optional standard catalogue used for the pattern
                and supplier bonuses
        """
        self.rule_cache = rule_cache
        self.knowledge_base = knowledge_base

    def _phrases_in(self, description: str) -> Optional[list[StandardRule]]:
        """Return the knowledge base rules whose phrase occurs in the description.

        None means the knowledge base could not be consulted.
        """
        if self.knowledge_base is None:
            return None
        try:
            return self.knowledge_base.matching_rules(description)
        except KnowledgeBaseUnavailableError as e:
            logger.warning("knowledge_base_unavailable", operation="match", error=str(e))
            return None

    def score(
        self,
        description: str,
        rule: ClassificationRule,
        phrases: Optional[list[StandardRule]] = None,
    ) -> float:
        """Compute the confidence of a rule for a description.

        Args:
            description: Transaction description
            rule: Learned rule to score
            phrases: Knowledge base rules found in the description; looked up
                when not given

        Returns:
            Confidence in [0, 1]
        """
        if not rule.keywords:
            return 0.0
        if phrases is None:
            phrases = self._phrases_in(description) or []

        lowered = description.lower()
        lowered_phrases = [p.match_phrase.lower() for p in phrases]

        total = 0.0
        significant = False
        for keyword in rule.keywords:
            if keyword not in lowered:
                continue
            if len(keyword) > SIGNIFICANT_KEYWORD_LENGTH:
                total += HIGH_WEIGHT
                significant = True
            else:
                total += LOW_WEIGHT
            # Known phrasing variant of the keyword
            if any(keyword in phrase for phrase in lowered_phrases):
                total += PATTERN_BONUS
                significant = True

        if significant:
            total *= SIGNIFICANT_BOOST

        if any(p.account_code == rule.account_code for p in phrases):
            total += SUPPLIER_BONUS

        return min(total / len(rule.keywords), MAX_CONFIDENCE)

    def match(self, description: str, company_id: int) -> Optional[CandidateMatch]:
        """Return the best scoring rule of the company, if any reaches the floor.

        Ties keep the rule seen first in cache order.
        """
        rules = self.rule_cache.rules_for(company_id)
        if not rules or not description:
            return None

        phrases = self._phrases_in(description) or []

        best: Optional[CandidateMatch] = None
        highest = 0.0
        for rule in rules:
            confidence = self.score(description, rule, phrases)
            if confidence > highest and confidence >= MIN_CONFIDENCE:
                highest = confidence
                best = CandidateMatch(rule=rule, confidence=confidence)

        if best is not None:
            logger.debug(
                "rule_matched",
                company_id=company_id,
                rule_id=best.rule.id,
                account_code=best.rule.account_code,
                confidence=round(best.confidence, 3),
            )
        return best
