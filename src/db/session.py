"""Async database engine and session helpers."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from src.config import get_settings


class Database:
    """Engine and sessionmaker owned by one process.

    Built once at startup and handed to whatever needs a session; nothing
    in the package keeps a module-level engine.
    """

    def __init__(self, database_url: str, **engine_options: object) -> None:
        engine_options.setdefault("pool_pre_ping", True)
        self.engine: AsyncEngine = create_async_engine(database_url, **engine_options)
        self.sessionmaker: async_sessionmaker[AsyncSession] = async_sessionmaker(
            self.engine, expire_on_commit=False
        )

    @classmethod
    def from_settings(cls) -> "Database":
        return cls(get_settings().database_url)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Yield an async database session within a context manager."""

        session = self.sessionmaker()
        try:
            yield session
        finally:
            await session.close()

    async def dispose(self) -> None:
        await self.engine.dispose()


async def get_db_session(request: Request) -> AsyncIterator[AsyncSession]:
    """FastAPI dependency for async DB session injection."""

    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
