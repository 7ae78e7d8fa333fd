"""Session-scoped audit trail of classifications."""

from autobooks.domain.entities import ChangeRecord, Transaction

UNCATEGORIZED = "UNCATEGORIZED"
LAST_CHANGES_COUNT = 5


def account_label(account_code: str, account_name: str) -> str:
    return f"{account_code} - {account_name}"


class ClassificationSession:
    """In-memory list of the changes made while the engine is running."""

    def __init__(self) -> None:
        self._changes: list[ChangeRecord] = []

    def record(self, transaction: Transaction, account_code: str, account_name: str) -> ChangeRecord:
        """Record the classification of a previously unclassified transaction."""
        change = ChangeRecord(
            transaction_id=transaction.id,
            transaction_date=transaction.date,
            description=transaction.description,
            amount=transaction.amount,
            old_account=UNCATEGORIZED,
            new_account=account_label(account_code, account_name),
        )
        self._changes.append(change)
        return change

    @property
    def changes(self) -> list[ChangeRecord]:
        return list(self._changes)

    def last(self, n: int = LAST_CHANGES_COUNT) -> list[ChangeRecord]:
        """Return the n most recent changes, oldest first."""
        if n <= 0:
            return []
        return list(self._changes[-n:])

    def __len__(self) -> int:
        return len(self._changes)
