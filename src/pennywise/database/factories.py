"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from pennywise.database.sqlalchemy_db import SQLAlchemyDatabase

DB_PATH_ENV_VAR = "PENNYWISE_DB_PATH"


def default_database_path() -> Path:
    """Return ~/.pennywise/pennywise.db, creating the directory if needed."""
    db_dir = Path.home() / ".pennywise"
    db_dir.mkdir(exist_ok=True)
    return db_dir / "pennywise.db"


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks PENNYWISE_DB_PATH
            environment variable, then defaults to ~/.pennywise/pennywise.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        database_path = os.environ.get(DB_PATH_ENV_VAR)

    if database_path is None:
        database_path = str(default_database_path())

    db = SQLAlchemyDatabase(f"sqlite:///{database_path}")
    db.database_path = database_path
    return db
