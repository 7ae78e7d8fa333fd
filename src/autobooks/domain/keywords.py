"""Keyword extraction for transaction descriptions."""

import re
from typing import Iterable, Optional

import structlog

from autobooks.domain.errors import KnowledgeBaseUnavailableError
from autobooks.domain.knowledge_base import KnowledgeBase

logger = structlog.get_logger(__name__)

MAX_KEYWORDS = 5
MIN_WORD_LENGTH = 3

STOP_WORDS = frozenset(
    {"the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by"}
)

_WORD_SPLIT = re.compile(r"\W+")


def _unique(values: Iterable[str], limit: int) -> list[str]:
    seen: list[str] = []
    for value in values:
        if value and value not in seen:
            seen.append(value)
            if len(seen) == limit:
                break
    return seen


def extract_keywords(
    description: str, knowledge_base: Optional[KnowledgeBase] = None
) -> list[str]:
    """Extract the significant keywords of a transaction description.

    Knowledge base match phrases found in the description win. When none are
    found, or the knowledge base cannot be consulted, the description's own
    words are used, minus stop words and words shorter than three characters.

    Args:
        description: Transaction description
        knowledge_base: Optional knowledge base to take match phrases from

    Returns:
        At most five lower-cased, deduplicated keywords
    """
    lowered = (description or "").lower()

    if knowledge_base is not None:
        try:
            phrases = [rule.match_phrase.lower() for rule in knowledge_base.standard_rules()]
        except KnowledgeBaseUnavailableError as e:
            logger.warning("knowledge_base_unavailable", operation="extract_keywords", error=str(e))
            phrases = []
        found = _unique((phrase for phrase in phrases if phrase in lowered), MAX_KEYWORDS)
        if found:
            return found

    words = (
        word
        for word in _WORD_SPLIT.split(lowered)
        if len(word) >= MIN_WORD_LENGTH and word not in STOP_WORDS
    )
    return _unique(words, MAX_KEYWORDS)


def keyword_signature(keywords: Iterable[str]) -> str:
    """Return the normalised, comma-joined form of a keyword set."""
    return ",".join(_unique((k.strip().lower() for k in keywords), MAX_KEYWORDS))
