"""Tests for keyword extraction and the standard knowledge base."""

from autobooks.domain.keywords import MAX_KEYWORDS, extract_keywords, keyword_signature
from autobooks.domain.knowledge_base import category_from_code_prefix


class TestExtractKeywords:
    """Tests for extract_keywords."""

    def test_knowledge_base_phrases_win(self, knowledge_base):
        """Test that known phrases found in the description are used."""
        assert extract_keywords("INSURANCE PREMIUM SANTAM", knowledge_base) == ["insurance", "premium"]

    def test_falls_back_to_description_words(self, knowledge_base):
        """Test that descriptions without known phrases use their own words."""
        assert extract_keywords("ACME WIDGETS SUPPLY", knowledge_base) == ["acme", "widgets", "supply"]

    def test_drops_stop_words_and_short_words(self, knowledge_base):
        """Test that stop words and words under three characters are ignored."""
        assert extract_keywords("PAYMENT TO THE ACME OF ZA", knowledge_base) == ["payment", "acme"]

    def test_deduplicates_in_order(self):
        """Test that repeated words appear once, in first-seen order."""
        assert extract_keywords("ACME ACME WIDGETS acme") == ["acme", "widgets"]

    def test_limits_keyword_count(self, knowledge_base):
        """Test that at most five keywords are kept."""
        keywords = extract_keywords("ALPHA BRAVO CHARLIE DELTA ECHOS FOXTROT", knowledge_base)

        assert len(keywords) == MAX_KEYWORDS
        assert keywords == ["alpha", "bravo", "charlie", "delta", "echos"]

    def test_unavailable_knowledge_base_uses_words(self, unavailable_knowledge_base):
        """Test that extraction degrades to description words."""
        assert extract_keywords("INSURANCE PREMIUM SANTAM", unavailable_knowledge_base) == [
            "insurance",
            "premium",
            "santam",
        ]

    def test_empty_description(self, knowledge_base):
        """Test that an empty description has no keywords."""
        assert extract_keywords("", knowledge_base) == []


class TestKeywordSignature:
    """Tests for keyword_signature."""

    def test_signature_normalises_keywords(self):
        """Test that the signature is lower-cased, trimmed and deduplicated."""
        assert keyword_signature(["Rent", "rent", " Lease "]) == "rent,lease"

    def test_signature_of_nothing_is_empty(self):
        """Test that no keywords give an empty signature."""
        assert keyword_signature([]) == ""


class TestKnowledgeBase:
    """Tests for the standard knowledge base."""

    def test_standard_rules_reference_standard_accounts(self, knowledge_base):
        """Test that every match phrase points at a catalogue account."""
        codes = {account.code for account in knowledge_base.standard_accounts()}

        for rule in knowledge_base.standard_rules():
            assert rule.account_code in codes

    def test_matching_rules_is_case_insensitive(self, knowledge_base):
        """Test that phrases are found regardless of case."""
        phrases = [rule.match_phrase for rule in knowledge_base.matching_rules("monthly service fee")]

        assert "SERVICE FEE" in phrases
        assert "FEE" in phrases

    def test_category_for_known_code(self, knowledge_base):
        """Test that catalogue codes use their catalogue category."""
        assert knowledge_base.category_for_code("8800") == "Operating Expenses"
        assert knowledge_base.category_for_code("9600") == "Finance Costs"

    def test_category_for_unknown_code_uses_prefix(self, knowledge_base):
        """Test that unknown codes fall back to the code prefix."""
        assert knowledge_base.category_for_code("8999") == "Expenses"
        assert knowledge_base.category_for_code("1999") == "Assets"

    def test_category_from_code_prefix(self):
        """Test the prefix mapping, including unknown prefixes."""
        assert category_from_code_prefix("2500") == "Liabilities"
        assert category_from_code_prefix("3999") == "Equity"
        assert category_from_code_prefix("4100") == "Revenue"
        assert category_from_code_prefix("7300") == "Revenue"
        assert category_from_code_prefix("5900") == "Expenses"
        assert category_from_code_prefix("X100") == "Other"
        assert category_from_code_prefix("") == "Other"
