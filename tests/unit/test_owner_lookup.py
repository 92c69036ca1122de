"""Unit tests for DatabaseOwnerLookup."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import pytest
from sqlalchemy.exc import OperationalError
from sqlmodel.ext.asyncio.session import AsyncSession

from fleetgate.access.owners import DatabaseOwnerLookup
from fleetgate.exceptions import OwnerLookupFailed
from fleetgate.models.database import Driver
from fleetgate.types import EntityKind
from tests.helpers import TENANT_A, TENANT_B

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine


async def _add_driver(engine: AsyncEngine, tenant_id: str) -> Driver:
    async with AsyncSession(engine) as session:
        driver = Driver(tenant_id=tenant_id, name="Lindiwe")
        session.add(driver)
        await session.commit()
        await session.refresh(driver)
        return driver


@pytest.mark.unit
class TestDatabaseOwnerLookup:
    async def test_returns_current_tenant(self, async_engine: AsyncEngine) -> None:
        driver = await _add_driver(async_engine, TENANT_A)
        lookup = DatabaseOwnerLookup(async_engine)
        assert await lookup.current_tenant(EntityKind.DRIVER, driver.id) == TENANT_A

    async def test_sees_reassignment_immediately(self, async_engine: AsyncEngine) -> None:
        driver = await _add_driver(async_engine, TENANT_A)
        lookup = DatabaseOwnerLookup(async_engine)
        assert await lookup.current_tenant(EntityKind.DRIVER, driver.id) == TENANT_A

        async with AsyncSession(async_engine) as session:
            row = await session.get(Driver, driver.id)
            assert row is not None
            row.tenant_id = TENANT_B
            session.add(row)
            await session.commit()

        assert await lookup.current_tenant(EntityKind.DRIVER, driver.id) == TENANT_B

    async def test_missing_owner_returns_none(self, async_engine: AsyncEngine) -> None:
        lookup = DatabaseOwnerLookup(async_engine)
        assert await lookup.current_tenant(EntityKind.VEHICLE, "no-such-vehicle") is None

    async def test_timeout_raises_lookup_failed(
        self, async_engine: AsyncEngine, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        lookup = DatabaseOwnerLookup(async_engine, timeout_seconds=0.01)

        async def slow_fetch(policy: object, owner_id: str) -> str:
            await asyncio.sleep(1)
            return TENANT_A

        monkeypatch.setattr(lookup, "_fetch", slow_fetch)
        with pytest.raises(OwnerLookupFailed, match="timed out"):
            await lookup.current_tenant(EntityKind.DRIVER, "driver-1")

    async def test_database_error_raises_lookup_failed(
        self, async_engine: AsyncEngine, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        lookup = DatabaseOwnerLookup(async_engine)

        async def broken_fetch(policy: object, owner_id: str) -> str:
            raise OperationalError("SELECT 1", {}, Exception("connection reset"))

        monkeypatch.setattr(lookup, "_fetch", broken_fetch)
        with pytest.raises(OwnerLookupFailed) as exc_info:
            await lookup.current_tenant(EntityKind.DRIVER, "driver-1")
        assert exc_info.value.owner_id == "driver-1"
        assert exc_info.value.owner_kind == "driver"
