"""Database connection and session management."""

import logging
from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

logger = logging.getLogger(__name__)


def _enable_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ignores FOREIGN KEY clauses unless enabled per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Handle on the local SQLite store.

    Built by whoever owns the process (the app factory, a CLI command or a
    test fixture), opened at startup and closed at shutdown. Nothing is
    created at import time.
    """

    def __init__(self, url: str, *, echo: bool = False):
        self.url = url
        self.echo = echo
        self._engine: AsyncEngine | None = None
        self._session_maker: async_sessionmaker[AsyncSession] | None = None

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("Database is not open")
        return self._engine

    async def open(self) -> None:
        """Create the engine and session maker. Safe to call twice."""
        if self._engine is not None:
            return
        engine = create_async_engine(self.url, echo=self.echo)
        event.listen(engine.sync_engine, "connect", _enable_foreign_keys)
        self._engine = engine
        self._session_maker = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        logger.debug("Opened database %s", engine.url)

    async def create_all(self) -> None:
        """Create tables that do not exist yet."""
        from timeloop.models import Base

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        """Dispose of pooled connections."""
        if self._engine is not None:
            await self._engine.dispose()
            logger.debug("Closed database %s", self._engine.url)
            self._engine = None
            self._session_maker = None

    def session(self) -> AsyncSession:
        """Return a new session bound to this store."""
        if self._session_maker is None:
            raise RuntimeError("Database is not open")
        return self._session_maker()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession]:
        """Yield a session that commits on success and rolls back on error."""
        async with self.session() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting a transactional session for one request."""
    database: Database = request.app.state.database
    async with database.transaction() as session:
        yield session
