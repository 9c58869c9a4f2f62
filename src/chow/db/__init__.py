# src/chow/db/__init__.py
"""Database configuration and utilities."""

from .session import (
    Base,
    Database,
    enable_sqlite_foreign_keys,
    enable_sqlite_immediate_transactions,
    get_db,
)

__all__ = [
    "Base",
    "Database",
    "enable_sqlite_foreign_keys",
    "enable_sqlite_immediate_transactions",
    "get_db",
]
