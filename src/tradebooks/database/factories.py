"""Database factory functions."""

import logging
import os
from pathlib import Path
from typing import Optional

from tradebooks.database.sqlalchemy_db import SQLAlchemyDatabase

logger = logging.getLogger(__name__)

DB_PATH_ENV = "TRADEBOOKS_DB_PATH"
DEFAULT_DB_PATH = Path.home() / ".tradebooks" / "tradebooks.db"


def resolve_database_path(database_path: Optional[str] = None) -> Path:
    """Pick the books file: explicit path, then $TRADEBOOKS_DB_PATH, then the default."""
    raw = database_path or os.environ.get(DB_PATH_ENV)
    return Path(raw).expanduser() if raw else DEFAULT_DB_PATH


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLAlchemy database handle backed by a SQLite file.

    The parent directory is created when missing. Call ``connect()`` and
    ``initialize_schema()`` on the result before use.
    """
    path = resolve_database_path(database_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    logger.debug("Using books at %s", path)
    return SQLAlchemyDatabase(f"sqlite:///{path}")
