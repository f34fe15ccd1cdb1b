"""Database factory functions.

The ledger file is chosen in this order: an explicit path, the
PHARMALEDGER_DB_PATH environment variable, ~/.pharmaledger/pharmaledger.db.
"""

import os
from pathlib import Path
from typing import Optional

from pharmaledger.database.sqlalchemy_db import SQLAlchemyDatabase

DB_PATH_ENV = "PHARMALEDGER_DB_PATH"
DEFAULT_DB_PATH = Path("~/.pharmaledger/pharmaledger.db")


def resolve_database_path(database_path: Optional[str] = None) -> Path:
    """Pick the SQLite file to use and make sure its directory exists."""
    chosen = database_path or os.environ.get(DB_PATH_ENV) or DEFAULT_DB_PATH
    path = Path(chosen).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def create_database(database_url: str) -> SQLAlchemyDatabase:
    """Create a ledger database for any SQLAlchemy URL (e.g. PostgreSQL)."""
    return SQLAlchemyDatabase(database_url)


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a ledger database stored in a SQLite file.

    Args:
        database_path: Path to the SQLite file, see module docstring for fallbacks

    Returns:
        SQLAlchemyDatabase bound to the file
    """
    return create_database(f"sqlite:///{resolve_database_path(database_path)}")
