"""
Async SQLAlchemy engine and session factory.

One ``Database`` is built at startup and stored on ``app.state``; routes
get a per-request session through the ``db_session`` dependency.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from database.models import Base


def build_engine(database_url: str, *, echo: bool = False) -> AsyncEngine:
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in database_url or database_url.endswith("://"):
            # single shared connection, otherwise every checkout sees an empty DB
            kwargs["poolclass"] = StaticPool
        return create_async_engine(database_url, echo=echo, **kwargs)

    return create_async_engine(
        database_url,
        echo=echo,
        pool_size=10,
        max_overflow=20,
        pool_recycle=3600,
    )


class Database:
    def __init__(self, database_url: str, *, echo: bool = False):
        self.engine = build_engine(database_url, echo=echo)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def create_all(self) -> None:
        """Create missing tables (no-op for tables that already exist)."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()
