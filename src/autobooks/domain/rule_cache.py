"""In-memory cache of learned classification rules."""

import threading
from types import MappingProxyType
from typing import Mapping, Optional

import structlog

from autobooks.database.base import Database
from autobooks.domain.entities import ClassificationRule

logger = structlog.get_logger(__name__)


class RuleCache:
    """Per-company snapshot of the rule store.

    Each company's rules live in an immutable mapping keyed by rule ID, in
    insertion order. Writers build a new mapping under a lock and swap it in,
    so a reader holding a snapshot never sees it change.
    """

    def __init__(self, db: Database):
        """Initialize rule cache.

        Args:
            db: Database instance the rules are loaded from
        """
        self.db = db
        self._lock = threading.Lock()
        self._snapshots: dict[int, Mapping[int, ClassificationRule]] = {}
        self._loaded = False

    def load(self) -> int:
        """Load every rule from the store, replacing the cache.

        Returns:
            Number of rules loaded
        """
        rules = self.db.list_rules()
        grouped: dict[int, dict[int, ClassificationRule]] = {}
        for rule in rules:
            grouped.setdefault(rule.company_id, {})[rule.id] = rule

        with self._lock:
            self._snapshots = {
                company_id: MappingProxyType(company_rules)
                for company_id, company_rules in grouped.items()
            }
            self._loaded = True

        logger.info("rule_cache_loaded", rules=len(rules), companies=len(grouped))
        return len(rules)

    def refresh(self, company_id: Optional[int] = None) -> None:
        """Reload all rules, or only the rules of one company."""
        if company_id is None:
            self.load()
            return

        company_rules = {rule.id: rule for rule in self.db.list_rules(company_id=company_id)}
        with self._lock:
            snapshots = dict(self._snapshots)
            snapshots[company_id] = MappingProxyType(company_rules)
            self._snapshots = snapshots
        logger.debug("rule_cache_refreshed", company_id=company_id, rules=len(company_rules))

    def invalidate(self, company_id: Optional[int] = None) -> None:
        """Drop cached rules so the next read reloads them from the store."""
        with self._lock:
            if company_id is None:
                self._snapshots = {}
                self._loaded = False
            else:
                snapshots = dict(self._snapshots)
                snapshots.pop(company_id, None)
                self._snapshots = snapshots

    def rules_for(self, company_id: int) -> list[ClassificationRule]:
        """Return the company's rules in cache order."""
        if not self._loaded:
            self.load()
        snapshot = self._snapshots.get(company_id)
        if snapshot is None:
            self.refresh(company_id)
            snapshot = self._snapshots.get(company_id, {})
        return list(snapshot.values())

    def put(self, rule: ClassificationRule) -> None:
        """Insert a new rule or replace an updated one, keeping its position."""
        with self._lock:
            current = self._snapshots.get(rule.company_id, {})
            company_rules = dict(current)
            company_rules[rule.id] = rule
            snapshots = dict(self._snapshots)
            snapshots[rule.company_id] = MappingProxyType(company_rules)
            self._snapshots = snapshots
