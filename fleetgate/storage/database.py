"""Async database engine construction and schema bootstrap."""

from __future__ import annotations

from functools import lru_cache

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlmodel import SQLModel

from fleetgate.config.settings import get_settings


def build_engine(database_url: str) -> AsyncEngine:
    """Create an engine for ``database_url``.

    SQLite (tests, local dev) gets the driver defaults; server databases get a
    bounded, pre-pinged pool. Owner lookups open their own short sessions, so
    the pool must allow one extra connection per in-flight request.
    """
    if database_url.startswith("sqlite"):
        return create_async_engine(database_url)
    return create_async_engine(
        database_url,
        pool_size=10,
        max_overflow=20,
        pool_pre_ping=True,
        pool_recycle=1800,
    )


@lru_cache
def get_engine() -> AsyncEngine:
    """Return the process-wide engine for the configured database."""
    return build_engine(get_settings().database_url)


async def init_db(engine: AsyncEngine) -> None:
    """Create all tables directly (dev/testing only; use Alembic in production)."""
    import fleetgate.models.database  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
