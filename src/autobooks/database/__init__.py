"""Database layer for autobooks application."""

from autobooks.database.base import Database
from autobooks.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
