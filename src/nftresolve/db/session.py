"""Database session management."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from nftresolve.db.base import create_engine, create_session_factory


class DatabaseManager:
    """Manages database connections and sessions."""

    def __init__(
        self,
        database_url: str | None = None,
        echo: bool = False,
        *,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
    ) -> None:
        if database_url is None and session_factory is None:
            raise ValueError("Either database_url or session_factory is required")
        self._database_url = database_url
        self._echo = echo
        self._engine: AsyncEngine | None = None
        self._session_factory = session_factory

    @property
    def engine(self) -> AsyncEngine:
        """Get the database engine, creating it if necessary."""
        if self._engine is None:
            if self._database_url is None:
                raise RuntimeError("DatabaseManager was built from a session factory")
            self._engine = create_engine(self._database_url, self._echo)
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        """Get the session factory, creating it if necessary."""
        if self._session_factory is None:
            self._session_factory = create_session_factory(self.engine)
        return self._session_factory

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Session that commits on success and rolls back on error."""
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def ping(self) -> bool:
        """Run SELECT 1."""
        async with self.session_factory() as session:
            await session.execute(text("SELECT 1"))
        return True

    async def close(self) -> None:
        """Close the database engine."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None

    async def __aenter__(self) -> "DatabaseManager":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
