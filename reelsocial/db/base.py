# =============================================================================
# REELSOCIAL BACKEND - DATABASE BASE MODULE
# =============================================================================
# File: db/base.py
# Description: Declarative base and the adapter every database backend extends
# =============================================================================

from typing import Any, Optional, AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy import MetaData, text
from sqlalchemy.ext.asyncio import (
    create_async_engine,
    AsyncSession,
    AsyncEngine,
    async_sessionmaker,
)
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase

from reelsocial.core.exceptions import DatabaseError


# =============================================================================
# SQLALCHEMY BASE CONFIGURATION
# =============================================================================

# Naming convention for constraints (important for migrations)
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s"
}

metadata = MetaData(naming_convention=NAMING_CONVENTION)


class Base(DeclarativeBase):
    """
    SQLAlchemy declarative base with custom metadata.
    All ORM models inherit from this base class.
    """
    metadata = metadata


# =============================================================================
# BASE ADAPTER IMPLEMENTATION
# =============================================================================

class BaseDBAdapter:
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    DATABASE ADAPTER                                      │
    │  Owns the async engine and hands out transactional sessions            │
    └─────────────────────────────────────────────────────────────────────────┘

    Concrete adapters (SQLite, PostgreSQL) only differ in engine options
    and connection setup.

    Methods:
        connect()       - Create engine and session factory
        disconnect()    - Dispose engine
        get_session()   - Transactional session (commit/rollback)
        create_tables() - Initialize database schema
        ping()          - Cheap connectivity probe
    """

    def __init__(self, database_url: str, **engine_options: Any):
        """
        Initialize base adapter with database URL.

        Args:
            database_url: Async-compatible database URL
            **engine_options: Additional SQLAlchemy engine options
        """
        self._database_url = database_url
        self._engine_options = engine_options
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    async def connect(self) -> None:
        """
        Create async engine and session factory.
        """
        if self._engine is not None:
            return

        self._engine = create_async_engine(
            self._database_url,
            **self._engine_options
        )
        self._on_engine_created(self._engine)

        self._session_factory = async_sessionmaker(
            bind=self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    def _on_engine_created(self, engine: AsyncEngine) -> None:
        """Hook for backend specific engine setup."""

    async def disconnect(self) -> None:
        """
        Dispose of engine and cleanup connections.
        """
        if self._engine:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Provide session with automatic commit/rollback handling.

        Commits on successful exit, rolls back on exception. Everything a
        request does through this session is therefore one transaction.
        """
        if not self._session_factory:
            await self.connect()

        session = self._session_factory()  # type: ignore
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def create_tables(self) -> None:
        """
        Create all tables defined in SQLAlchemy metadata.

        Raises:
            DatabaseError: If the schema cannot be created
        """
        if not self._engine:
            await self.connect()

        try:
            async with self._engine.begin() as conn:  # type: ignore
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            raise DatabaseError(
                message="Could not initialize database schema",
                details={"reason": str(e)},
            ) from e

    async def drop_tables(self) -> None:
        """Drop every table (test teardown)."""
        if not self._engine:
            return

        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def ping(self) -> bool:
        """Return True if a trivial query succeeds."""
        if not self._engine:
            return False
        async with self._engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True

    @property
    def engine(self) -> AsyncEngine:
        """Get the SQLAlchemy engine."""
        if not self._engine:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self._engine

    @property
    def is_connected(self) -> bool:
        """Check if database is connected."""
        return self._engine is not None
