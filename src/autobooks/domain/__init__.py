"""Domain layer for autobooks application."""

__all__ = [
    "CompanyService",
    "LedgerAccountService",
    "TransactionService",
    "SummaryService",
    "ClassificationEngine",
]

_SERVICES = {
    "CompanyService": "autobooks.domain.company",
    "LedgerAccountService": "autobooks.domain.ledger_account",
    "TransactionService": "autobooks.domain.transaction",
    "SummaryService": "autobooks.domain.summary",
    "ClassificationEngine": "autobooks.domain.engine",
}


# Services import the database layer, which imports entities from this
# package, so they are resolved lazily
def __getattr__(name):
    if name in _SERVICES:
        from importlib import import_module
        return getattr(import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
