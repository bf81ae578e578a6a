"""
Database module with abstraction layer.

This module provides:
- DatabaseAdapter interface: Abstract base class for database implementations
- SQLiteAdapter / PostgreSQLAdapter: dialect-specific implementations
- Database: engine and session factory owned by one app instance
"""

from shortener.db.interface import DatabaseAdapter
from shortener.db.session import Database, get_database_adapter

__all__ = [
    "DatabaseAdapter",
    "Database",
    "get_database_adapter",
]
