"""Driver and vehicle repositories."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from sqlalchemy import exists, func
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from fleetgate.models.database import Driver, Offense, Vehicle
from fleetgate.storage.repositories.scoped import ScopedRepository
from fleetgate.types import EntityKind, VehicleType

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

    from fleetgate.access.principal import Principal
    from fleetgate.access.resolver import TenantScopeResolver


class DriverRepository(ScopedRepository[Driver]):
    search_columns: ClassVar[tuple[str, ...]] = (
        "name",
        "contact_nr",
        "id_number",
        "country_of_origin",
    )

    def __init__(self, engine: AsyncEngine, resolver: TenantScopeResolver) -> None:
        super().__init__(engine, resolver, EntityKind.DRIVER)

    async def find(
        self,
        principal: Principal,
        search: str | None = None,
        country: str | None = None,
        active: bool | None = None,
    ) -> list[Driver]:
        return await self.list_all(
            principal,
            self.search_clause(search),
            col(Driver.country_of_origin) == country if country else None,
            col(Driver.active).is_(active) if active is not None else None,
        )

    async def list_by_country(self, principal: Principal, country: str) -> list[Driver]:
        return await self.list_all(
            principal,
            col(Driver.country_of_origin) == country,
            order_by=col(Driver.name).asc(),
        )

    async def stats(self, principal: Principal) -> dict[str, Any]:
        has_offense = exists().where(col(Offense.driver_id) == col(Driver.id))
        total = await self.count(principal)
        active = await self.count(principal, col(Driver.active).is_(True))
        with_offenses = await self.count(principal, has_offense)

        stmt = (
            select(Driver.country_of_origin, func.count())
            .where(self._scope(principal))
            .group_by(Driver.country_of_origin)
            .order_by(Driver.country_of_origin)
        )
        async with AsyncSession(self._engine) as session:
            result = await session.execute(stmt)
            countries = [{"country": c, "count": n} for c, n in result.all()]

        return {
            "total_drivers": total,
            "active_drivers": active,
            "drivers_with_offenses": with_offenses,
            "countries": countries,
        }


class VehicleRepository(ScopedRepository[Vehicle]):
    search_columns: ClassVar[tuple[str, ...]] = ("registration", "display_value")

    def __init__(self, engine: AsyncEngine, resolver: TenantScopeResolver) -> None:
        super().__init__(engine, resolver, EntityKind.VEHICLE)

    async def find(
        self,
        principal: Principal,
        search: str | None = None,
        vehicle_type: str | None = None,
        status: str | None = None,
    ) -> list[Vehicle]:
        type_clause = None
        if vehicle_type == "horses":
            type_clause = col(Vehicle.entity_type_description) == VehicleType.HORSE
        elif vehicle_type == "trailers":
            type_clause = col(Vehicle.entity_type_description) == VehicleType.TRAILER
        return await self.list_all(
            principal,
            self.search_clause(search),
            type_clause,
            col(Vehicle.status) == status if status else None,
        )

    async def stats(self, principal: Principal) -> dict[str, int]:
        return {
            "total_vehicles": await self.count(principal),
            "active_vehicles": await self.count(principal, col(Vehicle.status) == "Active"),
            "horses": await self.count(
                principal, col(Vehicle.entity_type_description) == VehicleType.HORSE
            ),
            "trailers": await self.count(
                principal, col(Vehicle.entity_type_description) == VehicleType.TRAILER
            ),
            "maintenance_vehicles": await self.count(
                principal, col(Vehicle.status) == "Maintenance"
            ),
        }
