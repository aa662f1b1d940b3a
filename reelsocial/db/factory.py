# =============================================================================
# REELSOCIAL BACKEND - DATABASE FACTORY
# =============================================================================
# File: db/factory.py
# Description: Factory for database adapter instantiation
#              Selects the backend from settings.db_type
# =============================================================================

from enum import Enum

from reelsocial.core.config import Settings
from reelsocial.db.base import BaseDBAdapter
from reelsocial.db.adapters.sqlite_adapter import SQLiteAdapter
from reelsocial.db.adapters.postgres_adapter import PostgresAdapter


class DatabaseType(str, Enum):
    """Supported database types."""
    SQLITE = "sqlite"
    POSTGRESQL = "postgresql"


def create_db_adapter(settings: Settings) -> BaseDBAdapter:
    """
    Build the database adapter selected by configuration.

    The adapter is not connected yet; ``AppContext.startup`` does that.

    Raises:
        ValueError: If unsupported database type specified

    Example:
        adapter = create_db_adapter(Settings(db_type="sqlite"))
        await adapter.connect()
    """
    url = settings.database_url
    echo = settings.debug and settings.is_development

    if url.startswith("sqlite"):
        return SQLiteAdapter(url, echo=echo)

    if url.startswith("postgresql"):
        return PostgresAdapter(
            url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_timeout=settings.db_pool_timeout,
            echo=echo,
        )

    raise ValueError(
        f"Unsupported database URL: {url}. "
        f"Supported types: {[t.value for t in DatabaseType]}"
    )
