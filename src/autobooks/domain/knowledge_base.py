"""Standard classification knowledge base.

The knowledge base is a read-only catalogue of standard ledger accounts and
the phrases that typically identify them in bank statement descriptions.
Classification consumes it only through the ``KnowledgeBase`` interface, so
any implementation may raise ``KnowledgeBaseUnavailableError`` and callers
are expected to degrade instead of failing.
"""

from abc import ABC, abstractmethod
from typing import Optional

from autobooks.domain.entities import StandardAccount, StandardRule

CURRENT_ASSETS = "Current Assets"
NON_CURRENT_ASSETS = "Non-Current Assets"
CURRENT_LIABILITIES = "Current Liabilities"
NON_CURRENT_LIABILITIES = "Non-Current Liabilities"
EQUITY = "Equity"
OPERATING_REVENUE = "Operating Revenue"
OTHER_INCOME = "Other Income"
OPERATING_EXPENSES = "Operating Expenses"
ADMINISTRATIVE_EXPENSES = "Administrative Expenses"
FINANCE_COSTS = "Finance Costs"

# Leading digit of an account code -> broad category
_PREFIX_CATEGORIES = {
    "1": "Assets",
    "2": "Liabilities",
    "3": "Equity",
    "4": "Revenue",
    "5": "Expenses",
    "6": "Revenue",
    "7": "Revenue",
    "8": "Expenses",
    "9": "Expenses",
}


def category_from_code_prefix(code: str) -> str:
    """Return the broad category implied by the first digit of an account code."""
    if not code:
        return "Other"
    return _PREFIX_CATEGORIES.get(code.strip()[:1], "Other")


class KnowledgeBase(ABC):
    """Read-only interface to the standard account catalogue."""

    @abstractmethod
    def standard_accounts(self) -> list[StandardAccount]:
        """Return the standard chart of accounts."""
        pass

    @abstractmethod
    def standard_rules(self) -> list[StandardRule]:
        """Return the standard match phrases in catalogue order."""
        pass

    def account_for_code(self, code: str) -> Optional[StandardAccount]:
        """Return the standard account with this code, if any."""
        for account in self.standard_accounts():
            if account.code == code:
                return account
        return None

    def category_for_code(self, code: str) -> str:
        """Return the category label for an account code.

        Uses the catalogue when it knows the code, otherwise the code prefix.
        """
        account = self.account_for_code(code)
        if account is not None:
            return account.category
        for rule in self.standard_rules():
            if rule.account_code == code:
                return rule.category
        return category_from_code_prefix(code)

    def matching_rules(self, text: str) -> list[StandardRule]:
        """Return the standard rules whose match phrase occurs in text (case-insensitive)."""
        haystack = text.lower()
        return [rule for rule in self.standard_rules() if rule.match_phrase.lower() in haystack]


class StandardKnowledgeBase(KnowledgeBase):
    """Static catalogue of standard South African small-business accounts."""

    ACCOUNTS: tuple[StandardAccount, ...] = (
        StandardAccount("1000", "Petty Cash", CURRENT_ASSETS),
        StandardAccount("1100", "Bank - Current Account", CURRENT_ASSETS),
        StandardAccount("1100-001", "Bank Transfers", CURRENT_ASSETS),
        StandardAccount("1101", "Bank - Savings Account", CURRENT_ASSETS),
        StandardAccount("1200", "Accounts Receivable", CURRENT_ASSETS),
        StandardAccount("1300", "Inventory", CURRENT_ASSETS),
        StandardAccount("1400", "Prepaid Expenses", CURRENT_ASSETS),
        StandardAccount("1500", "VAT Input", CURRENT_ASSETS),
        StandardAccount("2000", "Property, Plant & Equipment", NON_CURRENT_ASSETS),
        StandardAccount("2100", "Accumulated Depreciation", NON_CURRENT_ASSETS),
        StandardAccount("2200", "Investments", NON_CURRENT_ASSETS),
        StandardAccount("3000", "Accounts Payable", CURRENT_LIABILITIES),
        StandardAccount("3100", "VAT Output", CURRENT_LIABILITIES),
        StandardAccount("3200", "PAYE Payable", CURRENT_LIABILITIES),
        StandardAccount("3300", "UIF Payable", CURRENT_LIABILITIES),
        StandardAccount("3500", "Accrued Expenses", CURRENT_LIABILITIES),
        StandardAccount("4000", "Long-term Loans", NON_CURRENT_LIABILITIES),
        StandardAccount("5000", "Share Capital", EQUITY),
        StandardAccount("5100", "Retained Earnings", EQUITY),
        StandardAccount("5200", "Current Year Earnings", EQUITY),
        StandardAccount("6000", "Sales Revenue", OPERATING_REVENUE),
        StandardAccount("6100", "Service Revenue", OPERATING_REVENUE),
        StandardAccount("6200", "Other Operating Revenue", OPERATING_REVENUE),
        StandardAccount("7000", "Interest Income", OTHER_INCOME),
        StandardAccount("7100", "Dividend Income", OTHER_INCOME),
        StandardAccount("7200", "Gain on Asset Disposal", OTHER_INCOME),
        StandardAccount("8000", "Cost of Goods Sold", OPERATING_EXPENSES),
        StandardAccount("8100", "Employee Costs", OPERATING_EXPENSES),
        StandardAccount("8100-001", "Director Remuneration", OPERATING_EXPENSES),
        StandardAccount("8200", "Rent Expense", OPERATING_EXPENSES),
        StandardAccount("8300", "Utilities", OPERATING_EXPENSES),
        StandardAccount("8400", "Communication", OPERATING_EXPENSES),
        StandardAccount("8500", "Motor Vehicle Expenses", OPERATING_EXPENSES),
        StandardAccount("8600", "Travel & Entertainment", OPERATING_EXPENSES),
        StandardAccount("8700", "Professional Services", OPERATING_EXPENSES),
        StandardAccount("8710", "Suppliers Expense", OPERATING_EXPENSES),
        StandardAccount("8730", "Education & Training", OPERATING_EXPENSES),
        StandardAccount("8800", "Insurance", OPERATING_EXPENSES),
        StandardAccount("8900", "Repairs & Maintenance", OPERATING_EXPENSES),
        StandardAccount("9000", "Office Supplies", ADMINISTRATIVE_EXPENSES),
        StandardAccount("9100", "Computer Expenses", ADMINISTRATIVE_EXPENSES),
        StandardAccount("9200", "Marketing & Advertising", ADMINISTRATIVE_EXPENSES),
        StandardAccount("9300", "Training & Development", ADMINISTRATIVE_EXPENSES),
        StandardAccount("9400", "Depreciation", ADMINISTRATIVE_EXPENSES),
        StandardAccount("9500", "Interest Expense", FINANCE_COSTS),
        StandardAccount("9600", "Bank Charges", FINANCE_COSTS),
        StandardAccount("9700", "Foreign Exchange Loss", FINANCE_COSTS),
        StandardAccount("9800", "VAT Payments to SARS", FINANCE_COSTS),
        StandardAccount("9810", "Loan Repayments", FINANCE_COSTS),
        StandardAccount("9900", "Pension Expenses", FINANCE_COSTS),
    )

    # Specific phrases come before the generic ones they contain
    RULE_PHRASES: tuple[tuple[str, str], ...] = (
        ("EXCESS INTEREST", "9500"),
        ("STD BANK BOND", "4000"),
        ("CARTRACK", "8500"),
        ("NETSTAR", "8500"),
        ("PENSION FUND CONTRIBUTION", "9900"),
        ("PAYMENT TO SARS-VAT", "9800"),
        ("PAYE-PAY-AS-", "3200"),
        ("FEE IMMEDIATE PAYMENT", "9600"),
        ("TELEPHONE", "8400"),
        ("PRE-PAID PAYMENT TO MTN PREPAID", "8400"),
        ("PRE-PAID PAYMENT TO VOD PREPAID", "8400"),
        ("TRANSPORT", "8600"),
        ("SALARIES", "8100"),
        ("SALARY", "8100"),
        ("WAGES", "8100"),
        ("INSURANCE", "8800"),
        ("PREMIUM", "8800"),
        ("SERVICE FEE", "9600"),
        ("FEE", "9600"),
        ("CHARGE", "9600"),
        ("RENT", "8200"),
        ("FUEL", "8600"),
        ("PETROL", "8600"),
        ("ENGEN", "8600"),
        ("SHELL", "8600"),
        ("ELECTRICITY", "8300"),
        ("WATER", "8300"),
        ("INTEREST", "7000"),
        ("DIVIDEND", "7100"),
        ("LOAN", "4000"),
    )

    def __init__(self) -> None:
        categories = {account.code: account.category for account in self.ACCOUNTS}
        self._rules = [
            StandardRule(match_phrase=phrase, account_code=code, category=categories[code])
            for phrase, code in self.RULE_PHRASES
        ]

    def standard_accounts(self) -> list[StandardAccount]:
        return list(self.ACCOUNTS)

    def standard_rules(self) -> list[StandardRule]:
        return list(self._rules)
