"""Database layer for pharmaledger."""

from pharmaledger.database.base import Database
from pharmaledger.database.factories import create_database, create_sqlite_database

__all__ = ["Database", "create_database", "create_sqlite_database"]
