# =============================================================================
# REELSOCIAL BACKEND - POSTGRESQL ADAPTER
# =============================================================================
# File: db/adapters/postgres_adapter.py
# Description: PostgreSQL database adapter for production environments
#              Uses asyncpg for high-performance async operations
# =============================================================================

from typing import Any

from reelsocial.db.base import BaseDBAdapter


class PostgresAdapter(BaseDBAdapter):
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    POSTGRESQL DATABASE ADAPTER                           │
    │  Async PostgreSQL implementation for production                         │
    │  Uses asyncpg driver with SQLAlchemy async ORM                          │
    └─────────────────────────────────────────────────────────────────────────┘

    Connection Pool Configuration:
        - pool_size:     Initial connections (default: 5)
        - max_overflow:  Extra connections allowed (default: 10)
        - pool_timeout:  Wait time for connection (default: 30s)
        - pool_recycle:  Recycle connections after (default: 1800s)
    """

    def __init__(
        self,
        database_url: str,
        pool_size: int = 5,
        max_overflow: int = 10,
        pool_timeout: int = 30,
        echo: bool = False,
        **kwargs: Any
    ):
        default_options = {
            "pool_size": pool_size,
            "max_overflow": max_overflow,
            "pool_timeout": pool_timeout,
            "pool_recycle": 1800,
            "pool_pre_ping": True,
            "echo": echo,
        }
        default_options.update(kwargs)

        super().__init__(database_url, **default_options)
