"""Operator decision interface used by interactive classification."""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from autobooks.domain.entities import AccountSuggestion, CandidateMatch, Transaction


class Prompter(ABC):
    """Collects the operator's decisions during classification."""

    @abstractmethod
    def confirm_match(self, transaction: Transaction, candidate: CandidateMatch) -> bool:
        """Ask whether a suggested rule should be applied to a transaction."""
        pass

    @abstractmethod
    def ask_account(
        self, transaction: Transaction, suggestions: Sequence[AccountSuggestion]
    ) -> Optional[tuple[str, str]]:
        """Ask for an account code and name.

        Returns:
            (account_code, account_name), or None to skip the transaction
        """
        pass

    @abstractmethod
    def confirm_propagation(self, pattern: str, transactions: Sequence[Transaction]) -> bool:
        """Ask whether similar transactions should receive the same classification."""
        pass

    @abstractmethod
    def notify(self, message: str) -> None:
        """Show feedback to the operator."""
        pass
