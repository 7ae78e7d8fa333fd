"""Tests for Database interface returning domain models."""

import pytest
from datetime import date, datetime
from decimal import Decimal

from autobooks.domain import entities
from autobooks.domain.entities import JournalLineDraft
from autobooks.domain.errors import ConflictError, NotFoundError, PersistenceError


class TestDatabaseInterface:
    """Tests to verify Database interface returns domain models."""

    def test_get_company_returns_domain_model(self, temp_db):
        """Test that get_company returns a domain Company entity."""
        company_id = temp_db.create_company(name="Acme Holdings")

        company = temp_db.get_company(company_id)

        assert isinstance(company, entities.Company)
        assert company.id == company_id
        assert company.name == "Acme Holdings"
        assert isinstance(company.created_at, datetime)

    def test_get_transaction_returns_domain_model(self, temp_db, add_transaction):
        """Test that get_transaction returns an unclassified domain Transaction."""
        txn = add_transaction("INSURANCE PREMIUM SANTAM", debit="850.00")

        assert isinstance(txn, entities.Transaction)
        assert txn.date == date(2024, 3, 15)
        assert txn.debit_amount == Decimal("850.00")
        assert txn.credit_amount is None
        assert txn.is_debit
        assert txn.amount == Decimal("850.00")
        assert not txn.is_classified
        assert txn.classified_at is None

    def test_list_transactions_filters_and_orders(self, temp_db, add_transaction, sample_company):
        """Test newest-first ordering, the unclassified filter and the limit."""
        old = add_transaction("OLD", txn_date=date(2024, 3, 1))
        new = add_transaction("NEW", txn_date=date(2024, 4, 1))
        classified = add_transaction("DONE", txn_date=date(2024, 5, 1))
        temp_db.mark_transactions_classified([classified.id], "8800", "Insurance", "TEST")

        all_txns = temp_db.list_transactions(sample_company.id)
        unclassified = temp_db.list_transactions(sample_company.id, unclassified=True)
        limited = temp_db.list_transactions(sample_company.id, unclassified=True, limit=1)

        assert [t.id for t in all_txns] == [classified.id, new.id, old.id]
        assert [t.id for t in unclassified] == [new.id, old.id]
        assert [t.id for t in limited] == [new.id]

    def test_find_similar_unclassified_is_case_insensitive(self, temp_db, add_transaction, sample_company):
        """Test that description search ignores case."""
        txn = add_transaction("Rent Payment Building X")

        found = temp_db.find_similar_unclassified(sample_company.id, "RENT PAYMENT", 20)

        assert [t.id for t in found] == [txn.id]

    def test_find_similar_unclassified_escapes_wildcards(self, temp_db, add_transaction, sample_company):
        """Test that % and _ in the pattern are matched literally."""
        literal = add_transaction("DISCOUNT 50% OFF")
        add_transaction("DISCOUNT 500 OFF")
        underscore = add_transaction("REF_1 PAYMENT")
        add_transaction("REFX1 PAYMENT")

        assert [t.id for t in temp_db.find_similar_unclassified(sample_company.id, "50%", 20)] == [literal.id]
        assert [t.id for t in temp_db.find_similar_unclassified(sample_company.id, "ref_1", 20)] == [
            underscore.id
        ]

    def test_find_similar_unclassified_respects_limit(self, temp_db, add_transaction, sample_company):
        """Test that the limit bounds the result."""
        for _ in range(5):
            add_transaction("RENT PAYMENT")

        assert len(temp_db.find_similar_unclassified(sample_company.id, "rent", 3)) == 3

    def test_mark_transactions_classified(self, temp_db, add_transaction):
        """Test that classification sets code, name, timestamp and origin."""
        txn = add_transaction("INSURANCE PREMIUM SANTAM")

        count = temp_db.mark_transactions_classified([txn.id], "8800", "Insurance", "TEST")
        updated = temp_db.get_transaction(txn.id)

        assert count == 1
        assert updated.account_code == "8800"
        assert updated.account_name == "Insurance"
        assert updated.classified_by == "TEST"
        assert updated.classified_at is not None

    def test_mark_transactions_classified_rejects_classified(self, temp_db, add_transaction):
        """Test that a classified transaction cannot be classified again."""
        txn = add_transaction("INSURANCE PREMIUM SANTAM")
        temp_db.mark_transactions_classified([txn.id], "8800", "Insurance", "TEST")

        with pytest.raises(ConflictError, match="already classified"):
            temp_db.mark_transactions_classified([txn.id], "9600", "Bank Charges", "TEST")

        assert temp_db.get_transaction(txn.id).account_code == "8800"

    def test_mark_transactions_classified_unknown_id(self, temp_db):
        """Test that an unknown transaction is reported."""
        with pytest.raises(NotFoundError, match="Transaction 999 not found"):
            temp_db.mark_transactions_classified([999], "8800", "Insurance", "TEST")

    def test_ledger_account_lookup_by_code_and_name(self, temp_db):
        """Test the account resolver lookups."""
        account_id = temp_db.create_ledger_account("8800", "Insurance", "Operating Expenses")
        inactive_id = temp_db.create_ledger_account("8810", "Old Insurance", is_active=False)

        assert temp_db.get_account_id_by_code("8800") == account_id
        assert temp_db.get_account_id_by_name("Insurance") == account_id
        assert temp_db.get_account_id_by_code("9999") is None
        assert temp_db.get_account_id_by_code("8810") is None
        assert temp_db.get_ledger_account(inactive_id).is_active is False


class TestRuleStore:
    """Tests for classification rule persistence."""

    def test_create_rule_starts_with_one_use(self, temp_db, sample_company):
        """Test that a new rule has usage count 1."""
        rule_id = temp_db.create_rule(
            sample_company.id, "INSURANCE PREMIUM SANTAM", ["insurance", "premium"], "8800", "Insurance"
        )

        rule = temp_db.get_rule(rule_id)
        assert isinstance(rule, entities.ClassificationRule)
        assert rule.usage_count == 1
        assert rule.keywords == ("insurance", "premium")
        assert rule.signature == "insurance,premium"

    def test_record_rule_usage_increments(self, temp_db, sample_company):
        """Test that usage only ever goes up."""
        rule_id = temp_db.create_rule(sample_company.id, "RENT", ["rent"], "8200", "Rent Expense")
        first = temp_db.get_rule(rule_id)

        temp_db.record_rule_usage(rule_id)
        temp_db.record_rule_usage(rule_id, keywords=["rent", "building"])
        rule = temp_db.get_rule(rule_id)

        assert rule.usage_count == 3
        assert rule.keywords == ("rent", "building")
        assert rule.last_used >= first.last_used

    def test_record_usage_of_unknown_rule(self, temp_db):
        """Test that recording usage of a missing rule fails."""
        with pytest.raises(NotFoundError):
            temp_db.record_rule_usage(42)

    def test_get_rule_by_signature(self, temp_db, sample_company):
        """Test lookup by company, account code and keyword signature."""
        rule_id = temp_db.create_rule(sample_company.id, "RENT", ["rent"], "8200", "Rent Expense")

        assert temp_db.get_rule_by_signature(sample_company.id, "8200", ["rent"]).id == rule_id
        assert temp_db.get_rule_by_signature(sample_company.id, "8300", ["rent"]) is None
        assert temp_db.get_rule_by_signature(sample_company.id, "8200", ["lease"]) is None

    def test_duplicate_signature_is_rejected(self, temp_db, sample_company):
        """Test that the rule uniqueness constraint surfaces as a persistence error."""
        temp_db.create_rule(sample_company.id, "RENT", ["rent"], "8200", "Rent Expense")

        with pytest.raises(PersistenceError):
            temp_db.create_rule(sample_company.id, "RENT AGAIN", ["rent"], "8200", "Rent Expense")

        assert len(temp_db.list_rules(company_id=sample_company.id)) == 1

    def test_list_rules_orders_by_usage(self, temp_db, sample_company):
        """Test that the most used rules come first."""
        rare = temp_db.create_rule(sample_company.id, "RENT", ["rent"], "8200", "Rent Expense")
        common = temp_db.create_rule(sample_company.id, "FEE", ["fee"], "9600", "Bank Charges")
        temp_db.record_rule_usage(common)

        assert [r.id for r in temp_db.list_rules(company_id=sample_company.id)] == [common, rare]

    def test_search_rules(self, temp_db, sample_company):
        """Test case-insensitive, literal pattern search with a limit."""
        temp_db.create_rule(sample_company.id, "FEE 50% OFF", ["fee"], "9600", "Bank Charges")
        temp_db.create_rule(sample_company.id, "FEE 500 X", ["fee", "500"], "9600", "Bank Charges")

        assert [r.pattern for r in temp_db.search_rules("50%", 5)] == ["FEE 50% OFF"]
        assert len(temp_db.search_rules("fee", 5)) == 2
        assert len(temp_db.search_rules("fee", 1)) == 1

    def test_search_rules_by_company(self, temp_db, company_service, sample_company):
        """Test that a company filter hides rules learned by other companies."""
        other_id = company_service.create_company("Other Company")
        temp_db.create_rule(sample_company.id, "RENT JAN", ["rent"], "8200", "Rent Expense")
        foreign = temp_db.create_rule(other_id, "RENT FEB", ["rent"], "8100", "Rent Paid")

        assert len(temp_db.search_rules("rent", 5)) == 2
        assert [r.id for r in temp_db.search_rules("rent", 5, company_id=other_id)] == [foreign]


class TestAtomic:
    """Tests for atomic units of work."""

    def test_commit_on_success(self, temp_db):
        """Test that writes in a unit are committed together."""
        with temp_db.atomic():
            temp_db.create_company("First")
            temp_db.create_company("Second")

        assert {c.name for c in temp_db.list_companies()} == {"First", "Second"}

    def test_rollback_on_error(self, temp_db):
        """Test that an exception discards every write of the unit."""
        with pytest.raises(RuntimeError):
            with temp_db.atomic():
                temp_db.create_company("Discarded")
                raise RuntimeError("boom")

        assert temp_db.get_company_by_name("Discarded") is None

    def test_database_error_becomes_persistence_error(self, temp_db, sample_company):
        """Test that a failing statement rolls back the whole unit."""
        temp_db.create_rule(sample_company.id, "RENT", ["rent"], "8200", "Rent Expense")

        with pytest.raises(PersistenceError):
            with temp_db.atomic():
                temp_db.create_company("Discarded")
                temp_db.create_rule(sample_company.id, "RENT", ["rent"], "8200", "Rent Expense")

        assert temp_db.get_company_by_name("Discarded") is None
        assert len(temp_db.list_rules()) == 1

    def test_nested_units_join_outer(self, temp_db):
        """Test that an inner unit is rolled back with its outer unit."""
        with pytest.raises(RuntimeError):
            with temp_db.atomic():
                with temp_db.atomic():
                    temp_db.create_company("Inner")
                raise RuntimeError("boom")

        assert temp_db.get_company_by_name("Inner") is None


class TestJournal:
    """Tests for journal persistence."""

    def test_create_journal_entry_with_lines(self, temp_db, chart, add_transaction, sample_company):
        """Test that an entry and its lines are stored and read back in order."""
        txn = add_transaction("RENT", debit="100.00")
        bank_id = chart["1000"].id
        rent_id = chart["8200"].id
        lines = [
            JournalLineDraft(bank_id, 1, None, Decimal("100.00"), "Bank Account", "CAT-1-01", txn.id),
            JournalLineDraft(rent_id, 2, Decimal("100.00"), None, "Categorized Account", "CAT-1-02", txn.id),
        ]

        entry_id = temp_db.create_journal_entry(
            company_id=sample_company.id,
            fiscal_period_id=txn.fiscal_period_id,
            transaction_date=txn.date,
            description=txn.description,
            reference="CAT-1",
            created_by="TEST",
            lines=lines,
        )

        entry = temp_db.get_journal_entry(entry_id)
        assert [line.line_number for line in entry.lines] == [1, 2]
        assert entry.is_balanced
        assert temp_db.count_journal_lines_for_transaction(txn.id) == 2
        assert temp_db.get_journal_entry_for_transaction(txn.id).id == entry_id

    def test_list_classified_unposted(self, temp_db, add_transaction, sample_company):
        """Test that only classified transactions without lines are listed."""
        unclassified = add_transaction("A")
        classified = add_transaction("B")
        temp_db.mark_transactions_classified([classified.id], "8800", "Insurance", "TEST")

        pending = temp_db.list_classified_unposted(sample_company.id)

        assert [t.id for t in pending] == [classified.id]
        assert unclassified.id not in [t.id for t in pending]
