"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from pocketledger.database.sqlalchemy_db import SQLAlchemyDatabase


def create_database(
    database_url: str, isolation_level: Optional[str] = None
) -> SQLAlchemyDatabase:
    """Create a database instance for any SQLAlchemy URL.

    Args:
        database_url: SQLAlchemy database URL
        isolation_level: Optional engine isolation level, e.g. "SERIALIZABLE"
            to rule out lost updates on concurrent wallet edits

    Returns:
        SQLAlchemyDatabase instance
    """
    return SQLAlchemyDatabase(database_url, isolation_level=isolation_level)


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks POCKETLEDGER_DB_PATH
            environment variable, then defaults to ~/.pocketledger/pocketledger.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        # Check environment variable
        database_path = os.environ.get("POCKETLEDGER_DB_PATH")

    if database_path is None:
        # Default to ~/.pocketledger/pocketledger.db
        home = Path.home()
        db_dir = home / ".pocketledger"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "pocketledger.db")

    database_url = f"sqlite:///{database_path}"
    return create_database(database_url)
