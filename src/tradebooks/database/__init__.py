"""Database layer for tradebooks application."""

from tradebooks.database.base import Database
from tradebooks.database.factories import create_sqlite_database
from tradebooks.database.sqlalchemy_db import SQLAlchemyDatabase

__all__ = ["Database", "SQLAlchemyDatabase", "create_sqlite_database"]
