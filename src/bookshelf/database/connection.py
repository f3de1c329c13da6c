"""
Database connection management
"""

import threading
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from ..config import get_async_database_url, settings
from ..dbmodels import Base
from ..logging import get_logger

logger = get_logger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    """Turn on FK enforcement; SQLite leaves it off per connection."""
    _ = connection_record
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Owns one async engine and its session factory.

    Lifecycle: construct, call ``initialize()`` once (or let the first
    ``session()`` do it), share the instance across operations, and call
    ``dispose()`` on shutdown.
    """

    def __init__(
        self,
        database_url: str | None = None,
        *,
        echo: bool | None = None,
        pool_size: int | None = None,
        max_overflow: int | None = None,
    ):
        self.url = get_async_database_url(database_url)
        self.echo = settings.sql_echo if echo is None else echo
        self.pool_size = pool_size or settings.database_pool_size
        self.max_overflow = max_overflow or settings.database_max_overflow
        self._engine: AsyncEngine | None = None
        self._session_local: async_sessionmaker[AsyncSession] | None = None
        self._init_lock = threading.Lock()

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    @property
    def is_initialized(self) -> bool:
        return self._engine is not None

    def initialize(self) -> None:
        """Create the engine and session factory.

        Thread-safe; repeated calls are no-ops.
        """
        if self._engine is not None:
            return

        with self._init_lock:
            if self._engine is not None:
                return

            engine_kwargs: dict[str, Any] = {"echo": self.echo}
            if self.is_sqlite:
                if ":memory:" in self.url or "mode=memory" in self.url:
                    # Every session must see the same in-memory database
                    engine_kwargs["poolclass"] = StaticPool
                    engine_kwargs["connect_args"] = {"check_same_thread": False}
            else:
                engine_kwargs["pool_size"] = self.pool_size
                engine_kwargs["max_overflow"] = self.max_overflow
                engine_kwargs["pool_pre_ping"] = True

            engine = create_async_engine(self.url, **engine_kwargs)
            if self.is_sqlite:
                event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

            self._session_local = async_sessionmaker(
                engine,
                class_=AsyncSession,
                autoflush=False,
                expire_on_commit=False,
            )
            self._engine = engine
            logger.info("Database initialized", database_url=engine.url.render_as_string())

    @property
    def engine(self) -> AsyncEngine:
        """Get the engine, initializing on first use."""
        if self._engine is None:
            self.initialize()
        if self._engine is None:
            raise RuntimeError("Database not initialized")
        return self._engine

    async def create_all(self) -> None:
        """Create all tables that do not exist yet."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created")

    async def drop_all(self) -> None:
        """Drop all bookshelf tables."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        logger.info("Database tables dropped")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Get a session that commits on success and rolls back on error."""
        if self._session_local is None:
            self.initialize()

        if self._session_local is None:
            raise RuntimeError("Database not initialized")

        async with self._session_local() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def test_connection(self) -> tuple[bool, str | None]:
        """
        Test the database connection and return helpful error messages.

        Returns:
            tuple: (success: bool, error_message: str | None)
        """
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
                return True, None
        except Exception as e:
            error_str = str(e)
            if "Connection refused" in error_str or "could not connect" in error_str:
                return False, (
                    f"Cannot connect to database server: {error_str}\n"
                    f"The database server appears to be down or unreachable."
                )
            if "password authentication failed" in error_str:
                return False, (
                    f"Database authentication failed: {error_str}\n"
                    f"Please check your database credentials."
                )
            return False, f"Database connection error ({type(e).__name__}): {error_str}"

    async def dispose(self) -> None:
        """Close every pooled connection and forget the engine."""
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._session_local = None
        logger.info("Database connections disposed")
