"""Shared test fixtures."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from fleetgate.config.settings import DEFAULT_TENANT_ID, Settings
from fleetgate.models.database import Tenant
from fleetgate.web.app import create_app
from fleetgate.web.dependencies import build_repositories
from tests.helpers import SESSION_SECRET, TENANT_A, TENANT_B

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI
    from sqlalchemy.ext.asyncio import AsyncEngine

    from fleetgate.web.dependencies import Repositories


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        auth_mode="jwt",
        session_secret=SESSION_SECRET,
        rate_limit_per_minute=1000,
        owner_lookup_timeout_seconds=2.0,
    )


@pytest.fixture()
async def async_engine() -> AsyncIterator[AsyncEngine]:
    """In-memory SQLite engine with all tables created + default, A and B tenants."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    async with AsyncSession(engine) as session:
        session.add(Tenant(id=DEFAULT_TENANT_ID, slug="default", name="Default Tenant"))
        session.add(Tenant(id=TENANT_A, slug="tenant-a", name="Tenant A"))
        session.add(Tenant(id=TENANT_B, slug="tenant-b", name="Tenant B"))
        await session.commit()

    yield engine
    await engine.dispose()


@pytest.fixture()
def repos(async_engine: AsyncEngine, settings: Settings) -> Repositories:
    return build_repositories(async_engine, settings)


@pytest.fixture()
def app(async_engine: AsyncEngine, settings: Settings) -> FastAPI:
    return create_app(settings=settings, engine=async_engine)


@pytest.fixture()
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
