"""Offense repository.

Offenses have no tenant of their own. They are listed and checked through
the current tenant of the driver and/or vehicle they reference, so a driver
moved to another tenant takes their offense history along.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from sqlalchemy import and_
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from fleetgate.exceptions import NotFoundError
from fleetgate.models.database import Driver, Offense, Vehicle
from fleetgate.storage.repositories.scoped import ScopedRepository
from fleetgate.types import EntityKind

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

    from fleetgate.access.principal import Principal
    from fleetgate.access.resolver import TenantScopeResolver
    from fleetgate.storage.repositories.drivers import DriverRepository, VehicleRepository

logger = structlog.get_logger(__name__)

OffenseRow = tuple[Offense, Driver | None, Vehicle | None]


class OffenseRepository(ScopedRepository[Offense]):
    def __init__(
        self,
        engine: AsyncEngine,
        resolver: TenantScopeResolver,
        drivers: DriverRepository,
        vehicles: VehicleRepository,
    ) -> None:
        super().__init__(engine, resolver, EntityKind.OFFENSE)
        self._drivers = drivers
        self._vehicles = vehicles

    async def _require_owners(
        self, principal: Principal, driver_id: str | None, vehicle_id: str | None
    ) -> None:
        if driver_id and await self._drivers.get(principal, driver_id) is None:
            raise NotFoundError("Driver not found or access denied")
        if vehicle_id and await self._vehicles.get(principal, vehicle_id) is None:
            raise NotFoundError("Vehicle not found or access denied")

    async def find(
        self,
        principal: Principal,
        driver_id: str | None = None,
        vehicle_id: str | None = None,
        severity: str | None = None,
    ) -> list[OffenseRow]:
        """List offenses with their owners, newest first.

        An owner the principal cannot see is returned as ``None`` even when the
        offense itself is visible through its other owner.
        """
        await self._require_owners(principal, driver_id, vehicle_id)

        criteria = self._criteria(
            col(Offense.driver_id) == driver_id if driver_id else None,
            col(Offense.vehicle_id) == vehicle_id if vehicle_id else None,
            col(Offense.severity) == severity if severity else None,
        )
        stmt = (
            select(Offense, Driver, Vehicle)
            .outerjoin(
                Driver,
                and_(
                    col(Offense.driver_id) == col(Driver.id),
                    self._resolver.build_filter(principal, EntityKind.DRIVER),
                ),
            )
            .outerjoin(
                Vehicle,
                and_(
                    col(Offense.vehicle_id) == col(Vehicle.id),
                    self._resolver.build_filter(principal, EntityKind.VEHICLE),
                ),
            )
            .where(self._scope(principal), *criteria)
            .order_by(col(Offense.created_at).desc())
        )
        async with AsyncSession(self._engine) as session:
            result = await session.execute(stmt)
            return [(o, d, v) for o, d, v in result.all()]

    async def record(
        self,
        principal: Principal,
        *,
        kind: str,
        severity: str,
        driver_id: str | None = None,
        vehicle_id: str | None = None,
        notes: str | None = None,
    ) -> Offense:
        """Create an offense against a driver and/or vehicle the principal can see."""
        if not driver_id and not vehicle_id:
            msg = "An offense needs a driver or a vehicle"
            raise ValueError(msg)
        await self._require_owners(principal, driver_id, vehicle_id)
        return await self.create(
            principal,
            driver_id=driver_id,
            vehicle_id=vehicle_id,
            kind=kind,
            severity=severity,
            notes=notes,
        )
