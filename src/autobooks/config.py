"""Runtime settings resolved from environment variables."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_BANK_ACCOUNT_CODE = "1000"
DEFAULT_LOG_LEVEL = "WARNING"


def default_database_path() -> str:
    """Return ~/.autobooks/autobooks.db, creating the directory if needed."""
    db_dir = Path.home() / ".autobooks"
    db_dir.mkdir(exist_ok=True)
    return str(db_dir / "autobooks.db")


@dataclass(frozen=True)
class Settings:
    """Application settings.

    Attributes:
        database_path: SQLite database file, None to use the default location
        bank_account_code: Ledger code of the bank account used as the
            counter-side of every posting
        log_level: Logging level name
    """

    database_path: Optional[str] = None
    bank_account_code: str = DEFAULT_BANK_ACCOUNT_CODE
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, **overrides: Optional[str]) -> "Settings":
        """Build settings from AUTOBOOKS_* environment variables.

        Keyword overrides that are not None win over the environment.
        """
        values = {
            "database_path": os.environ.get("AUTOBOOKS_DB_PATH"),
            "bank_account_code": os.environ.get(
                "AUTOBOOKS_BANK_ACCOUNT_CODE", DEFAULT_BANK_ACCOUNT_CODE
            ),
            "log_level": os.environ.get("AUTOBOOKS_LOG_LEVEL", DEFAULT_LOG_LEVEL),
        }
        for key, value in overrides.items():
            if key not in values:
                raise TypeError(f"Unknown setting '{key}'")
            if value is not None:
                values[key] = value
        return cls(**values)
