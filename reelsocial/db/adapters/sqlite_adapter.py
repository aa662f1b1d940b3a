# =============================================================================
# REELSOCIAL BACKEND - SQLITE ADAPTER
# =============================================================================
# File: db/adapters/sqlite_adapter.py
# Description: SQLite database adapter for development and testing
#              Uses aiosqlite for async operations with SQLAlchemy
# =============================================================================

from typing import Any
from pathlib import Path

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine

from reelsocial.db.base import BaseDBAdapter


class SQLiteAdapter(BaseDBAdapter):
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    SQLITE DATABASE ADAPTER                               │
    │  Async SQLite implementation for development and testing environments   │
    │  Uses aiosqlite driver with SQLAlchemy async ORM                        │
    └─────────────────────────────────────────────────────────────────────────┘

    Features:
        - Zero-configuration setup
        - File-based persistent storage
        - Auto-creation of database directory
        - Foreign keys and WAL enabled on every pooled connection
    """

    def __init__(self, database_url: str, echo: bool = False, **kwargs: Any):
        # Ensure database directory exists for file-based SQLite
        if ":memory:" not in database_url:
            db_path = database_url.split("///", 1)[-1]
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        default_options = {
            "echo": echo,
            "pool_pre_ping": True,
            "connect_args": {
                "check_same_thread": False,
                "timeout": 30,
            },
        }
        default_options.update(kwargs)

        super().__init__(database_url, **default_options)

    def _on_engine_created(self, engine: AsyncEngine) -> None:
        """
        Apply SQLite pragmas on each new DBAPI connection.

        PRAGMAs are per-connection, so they are set from a connect hook
        rather than once at startup.
        """

        @event.listens_for(engine.sync_engine, "connect")
        def _set_sqlite_pragmas(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA synchronous=NORMAL")
            cursor.execute("PRAGMA busy_timeout=30000")
            cursor.close()
