# =============================================================================
# DATABASE ADAPTERS INITIALIZATION
# =============================================================================
# File: db/adapters/__init__.py
# Description: Adapters module exports
# =============================================================================

from reelsocial.db.adapters.sqlite_adapter import SQLiteAdapter
from reelsocial.db.adapters.postgres_adapter import PostgresAdapter

__all__ = [
    "SQLiteAdapter",
    "PostgresAdapter",
]
