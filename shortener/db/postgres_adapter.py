"""
PostgreSQL Database Adapter

This module implements the DatabaseAdapter interface for PostgreSQL
through the asyncpg driver.

Key characteristics:
- Server-based, pooled connections shared by concurrent requests
- Optional TLS for hosted databases, where the provider's certificate
  chain is usually not verifiable from the app
"""

import ssl
from typing import Any, Optional

from sqlalchemy.pool import Pool

from shortener.db.interface import DatabaseAdapter


class PostgreSQLAdapter(DatabaseAdapter):
    """PostgreSQL database adapter implementation."""

    def __init__(self, use_ssl: bool = False, pool_size: int = 5, max_overflow: int = 10):
        self.use_ssl = use_ssl
        self.pool_size = pool_size
        self.max_overflow = max_overflow

    def get_pool_class(self) -> Optional[type[Pool]]:
        # Default async queue pool
        return None

    def get_connect_args(self) -> dict[str, Any]:
        if not self.use_ssl:
            return {}
        return {"ssl": self._build_ssl_context()}

    def get_engine_kwargs(self) -> dict[str, Any]:
        return {
            "echo": False,
            "pool_size": self.pool_size,
            "max_overflow": self.max_overflow,
            "pool_pre_ping": True,  # Drop connections the server closed while idle
        }

    def get_dialect_name(self) -> str:
        return "postgresql"

    @staticmethod
    def _build_ssl_context() -> ssl.SSLContext:
        # Encrypted transport without certificate verification
        context = ssl.create_default_context()
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
        return context
