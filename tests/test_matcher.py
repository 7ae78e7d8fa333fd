"""Tests for rule scoring and matching."""

import pytest
from datetime import datetime, UTC

from autobooks.domain.entities import ClassificationRule
from autobooks.domain.matcher import Matcher, MIN_CONFIDENCE


class StaticRules:
    """Stands in for the rule cache with a fixed rule list."""

    def __init__(self, rules):
        self.rules = list(rules)

    def rules_for(self, company_id):
        return [rule for rule in self.rules if rule.company_id == company_id]


def make_rule(rule_id, keywords, account_code, account_name="Account", company_id=1):
    now = datetime.now(UTC)
    return ClassificationRule(
        id=rule_id,
        company_id=company_id,
        pattern=" ".join(keywords).upper(),
        keywords=tuple(keywords),
        account_code=account_code,
        account_name=account_name,
        usage_count=1,
        created_at=now,
        last_used=now,
    )


class TestScore:
    """Tests for Matcher.score."""

    def test_exact_keywords_with_supplier_bonus_reach_full_confidence(self, knowledge_base):
        """Test that a known supplier phrase scores the maximum confidence."""
        rule = make_rule(1, ["insurance", "premium"], "8800", "Insurance")
        matcher = Matcher(StaticRules([rule]), knowledge_base)

        assert matcher.score("INSURANCE PREMIUM SANTAM", rule) == 1.0

    def test_no_keyword_present_scores_zero(self, knowledge_base):
        """Test that a description sharing no keyword scores zero."""
        rule = make_rule(1, ["acme", "widgets"], "8710")
        matcher = Matcher(StaticRules([rule]), knowledge_base)

        assert matcher.score("SOMETHING ELSE ENTIRELY", rule) == 0.0

    def test_supplier_bonus_only_for_same_account_code(self, knowledge_base):
        """Test that the supplier bonus needs a phrase pointing at the rule's account."""
        same_account = make_rule(1, ["santam", "policy", "number"], "8800")
        other_account = make_rule(2, ["santam", "policy", "number"], "8710")
        matcher = Matcher(StaticRules([same_account, other_account]), knowledge_base)

        # santam: 1.0, boosted x1.2; +0.9 supplier for 8800; divided by 3 keywords
        assert matcher.score("SANTAM INSURANCE", same_account) == pytest.approx(0.7)
        assert matcher.score("SANTAM INSURANCE", other_account) == pytest.approx(0.4)

    def test_pattern_bonus_for_known_phrase(self, knowledge_base):
        """Test that a short keyword found in a knowledge base phrase earns the pattern bonus."""
        rule = make_rule(1, ["rent", "building"], "8710")

        with_kb = Matcher(StaticRules([rule]), knowledge_base)
        without_kb = Matcher(StaticRules([rule]), None)

        # (0.5 + 0.8) * 1.2 / 2
        assert with_kb.score("RENT DUE", rule) == pytest.approx(0.78)
        # 0.5 / 2, nothing significant
        assert without_kb.score("RENT DUE", rule) == pytest.approx(0.25)

    def test_unavailable_knowledge_base_skips_bonuses(self, unavailable_knowledge_base):
        """Test that scoring degrades to plain keyword weights."""
        rule = make_rule(1, ["rent", "building"], "8200")
        matcher = Matcher(StaticRules([rule]), unavailable_knowledge_base)

        assert matcher.score("RENT DUE", rule) == pytest.approx(0.25)

    def test_rule_without_keywords_scores_zero(self, knowledge_base):
        """Test that an empty keyword set never matches."""
        rule = make_rule(1, [], "8200")
        matcher = Matcher(StaticRules([rule]), knowledge_base)

        assert matcher.score("RENT DUE", rule) == 0.0

    @pytest.mark.parametrize(
        "description",
        [
            "INSURANCE PREMIUM SANTAM",
            "RENT RENT RENT",
            "FEE CHARGE SERVICE FEE",
            "",
            "acme",
            "SHELL ULTRA CITY FUEL PETROL ENGEN",
        ],
    )
    @pytest.mark.parametrize(
        "keywords,account_code",
        [
            (["insurance", "premium"], "8800"),
            (["rent"], "8200"),
            (["fee", "charge", "service fee"], "9600"),
            (["acme", "widgets", "supply", "order", "extra"], "8710"),
            (["shell", "fuel", "petrol", "engen"], "8600"),
        ],
    )
    def test_score_is_bounded(self, knowledge_base, description, keywords, account_code):
        """Test that confidence always lies in [0, 1]."""
        rule = make_rule(1, keywords, account_code)
        matcher = Matcher(StaticRules([rule]), knowledge_base)

        score = matcher.score(description, rule)
        assert 0.0 <= score <= 1.0


class TestMatch:
    """Tests for Matcher.match."""

    def test_no_rules_returns_none(self, knowledge_base):
        """Test that a company without rules has no candidate."""
        matcher = Matcher(StaticRules([]), knowledge_base)

        assert matcher.match("INSURANCE PREMIUM SANTAM", 1) is None

    def test_best_rule_wins(self, knowledge_base):
        """Test that the highest scoring rule is returned."""
        weak = make_rule(1, ["acme", "widgets", "supply", "order", "extra"], "8710")
        strong = make_rule(2, ["insurance", "premium"], "8800")
        matcher = Matcher(StaticRules([weak, strong]), knowledge_base)

        candidate = matcher.match("INSURANCE PREMIUM SANTAM", 1)

        assert candidate is not None
        assert candidate.rule.id == 2
        assert candidate.confidence == 1.0

    def test_score_below_floor_returns_none(self, knowledge_base):
        """Test that a weak match is not reported."""
        rule = make_rule(1, ["acme", "widgets", "supply", "order", "extra"], "8710")
        matcher = Matcher(StaticRules([rule]), knowledge_base)

        assert matcher.score("ACME", rule) < MIN_CONFIDENCE
        assert matcher.match("ACME", 1) is None

    def test_ties_keep_first_rule(self, knowledge_base):
        """Test that equal scores keep the rule seen first."""
        first = make_rule(1, ["acme", "widgets"], "8710")
        second = make_rule(2, ["acme", "widgets"], "8700")
        matcher = Matcher(StaticRules([first, second]), knowledge_base)

        candidate = matcher.match("ACME WIDGETS", 1)

        assert candidate.rule.id == 1

    def test_only_company_rules_are_considered(self, knowledge_base):
        """Test that another company's rules never match."""
        rule = make_rule(1, ["insurance", "premium"], "8800", company_id=2)
        matcher = Matcher(StaticRules([rule]), knowledge_base)

        assert matcher.match("INSURANCE PREMIUM SANTAM", 1) is None
