"""Async database engine, session factory and transaction scopes."""
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from .base import TransactionalStore

logger = logging.getLogger(__name__)

SERIALIZABLE = "SERIALIZABLE"

# Execution option read by the SQLite begin listener: DEFERRED or IMMEDIATE
SQLITE_BEGIN_MODE = "sqlite_begin_mode"


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


class Database(TransactionalStore):
    """Owns the engine, the bounded connection pool and the session factory.

    On SQLite the driver's implicit transaction handling is switched off and
    every transaction is opened explicitly: reads with BEGIN DEFERRED, write
    transactions with BEGIN IMMEDIATE. A write transaction therefore holds
    the database write lock from its first statement, reads included, and
    concurrent writers queue behind it.

    Usage:
        db = Database("sqlite+aiosqlite:///./prreviewer.db")
        await db.create_tables()

        async with db.session() as session:
            ...  # plain reads, autobegin

        async with db.transaction(isolation_level=SERIALIZABLE) as session:
            ...  # commits on success, rolls back on any exception
    """

    def __init__(
        self,
        url: str,
        pool_size: int = 10,
        max_overflow: int = 15,
        pool_timeout: float = 30.0,
        echo: bool = False,
    ):
        self.url = url
        self.is_sqlite = url.startswith("sqlite")

        if self.is_sqlite:
            # SQLite doesn't support connection pooling in the traditional sense;
            # timeout is how long a writer waits for the file lock
            self.engine: AsyncEngine = create_async_engine(
                url,
                echo=echo,
                poolclass=NullPool,
                connect_args={"timeout": pool_timeout},
            )
        else:
            self.engine = create_async_engine(
                url,
                echo=echo,
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_timeout=pool_timeout,
                pool_pre_ping=True,
            )

        self._setup_engine_events()
        self._engines: dict[Optional[str], AsyncEngine] = {None: self.engine}
        self._session_factory = self._factory_for(self.engine)

    @property
    def dialect_name(self) -> str:
        return self.engine.dialect.name

    def _setup_engine_events(self) -> None:
        """Register connect and begin listeners on the sync engine."""
        sync_engine = self.engine.sync_engine
        is_sqlite = self.is_sqlite

        @event.listens_for(sync_engine, "connect")
        def on_connect(dbapi_connection, connection_record):
            logger.debug("Database connection established")

            if is_sqlite:
                # The begin listener emits BEGIN; stop the driver from deferring it
                dbapi_connection.isolation_level = None
                cursor = dbapi_connection.cursor()
                # Foreign keys (and therefore cascades) are off by default in SQLite
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.close()

        @event.listens_for(sync_engine, "begin")
        def on_begin(conn):
            if is_sqlite:
                mode = conn.get_execution_options().get(SQLITE_BEGIN_MODE, "DEFERRED")
                conn.exec_driver_sql(f"BEGIN {mode}")

    @staticmethod
    def _factory_for(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
        return async_sessionmaker(
            bind=engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    def _engine_for(self, isolation_level: Optional[str]) -> AsyncEngine:
        """Engine for write transactions at the given isolation level.

        SQLite has a single write lock and serializable transactions, so
        every level maps to BEGIN IMMEDIATE there.
        """
        key = "sqlite-write" if self.is_sqlite else isolation_level
        if key not in self._engines:
            # execution_options() returns a proxy engine sharing the same pool
            if self.is_sqlite:
                options = {SQLITE_BEGIN_MODE: "IMMEDIATE"}
            else:
                options = {"isolation_level": isolation_level}
            self._engines[key] = self.engine.execution_options(**options)
        return self._engines[key]

    async def create_tables(self) -> None:
        """Create all tables from the ORM metadata."""
        # Make sure every model is registered on Base.metadata
        from .. import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_tables(self) -> None:
        """Drop all tables."""
        from .. import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Open a session for reads; the connection is released on exit."""
        async with self._session_factory() as session:
            yield session

    @asynccontextmanager
    async def transaction(
        self, isolation_level: Optional[str] = None
    ) -> AsyncIterator[AsyncSession]:
        """Open a session and run the body inside one transaction.

        Commits when the body returns normally. Any exception, including
        task cancellation, rolls the transaction back before propagating,
        and the connection always goes back to the pool.

        Args:
            isolation_level: Optional isolation level, e.g. SERIALIZABLE.
                Ignored on SQLite, where every transaction opened here takes
                the write lock up front.
        """
        if isolation_level is None and not self.is_sqlite:
            factory = self._session_factory
        else:
            factory = self._factory_for(self._engine_for(isolation_level))

        async with factory() as session:
            try:
                async with session.begin():
                    yield session
            except BaseException:
                logger.debug("Transaction rolled back")
                raise

    async def close(self) -> None:
        """Dispose of the engine and every pooled connection."""
        await self.engine.dispose()
        logger.debug("Database engine disposed")


# Global database instance
_db: Optional[Database] = None


def init_db(url: str, **engine_kwargs) -> Database:
    """Initialize the global database.

    Args:
        url: Async database URL
        **engine_kwargs: Pool settings forwarded to Database

    Returns:
        Database instance
    """
    global _db
    _db = Database(url, **engine_kwargs)
    return _db


def get_db() -> Database:
    """Get the global database instance.

    Raises:
        RuntimeError: If the database has not been initialized
    """
    if _db is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    return _db
