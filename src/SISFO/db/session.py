# src/SISFO/db/session.py
from __future__ import annotations

import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from SISFO.core.config import settings

# ---------------------------------------------------------------------------
# Engine configuration
# ---------------------------------------------------------------------------

DATABASE_URL: str = settings.DATABASE_URL

# NullPool in tests so no asyncpg connection is shared across event loops.
USE_NULLPOOL = os.getenv("SQLALCHEMY_NULLPOOL", "0") == "1" or bool(settings.TESTING)

_engine_kwargs: dict = {
    "echo": bool(settings.DB_ECHO),
    "pool_pre_ping": True,
}

if USE_NULLPOOL:
    _engine_kwargs["poolclass"] = NullPool

# Engine creation is lazy at the driver level; nothing connects until first use.
engine: AsyncEngine = create_async_engine(DATABASE_URL, **_engine_kwargs)

AsyncSessionLocal: async_sessionmaker[AsyncSession] = async_sessionmaker(
    bind=engine,
    expire_on_commit=False,
    class_=AsyncSession,
)


def get_engine() -> AsyncEngine:
    """Expose the engine (e.g., for readiness pings)."""
    return engine


def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    """Return the app-wide async sessionmaker (overridden in tests)."""
    return AsyncSessionLocal


# ---------------------------------------------------------------------------
# Session helpers
#   - get_session: async context manager (use with `async with`)
#   - transaction: commit on success, rollback on any error
# ---------------------------------------------------------------------------

@asynccontextmanager
async def get_session(
    maker: async_sessionmaker[AsyncSession] | None = None,
) -> AsyncIterator[AsyncSession]:
    async with (maker or AsyncSessionLocal)() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


@asynccontextmanager
async def transaction(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """
    Unit of work for one engine operation.

    Everything flushed inside the block is committed together; any exception
    (including cancellation on deadline expiry) rolls the whole block back.
    Rolling back after a successful commit is a no-op.
    """
    try:
        yield session
        await session.commit()
    except BaseException:
        await session.rollback()
        raise


async def db_session_dependency() -> AsyncGenerator[AsyncSession, None]:
    """Fallback FastAPI dependency bound to the module sessionmaker."""
    async with get_session() as session:
        yield session


__all__ = [
    "engine",
    "AsyncSessionLocal",
    "get_engine",
    "get_sessionmaker",
    "get_session",
    "transaction",
    "db_session_dependency",
]
