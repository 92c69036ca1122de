"""Manifest and vehicle combination repositories."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from sqlmodel import col

from fleetgate.exceptions import NotFoundError
from fleetgate.models.database import Manifest, VehicleCombination
from fleetgate.storage.repositories.scoped import ScopedRepository
from fleetgate.types import EntityKind, ManifestStatus

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

    from fleetgate.access.principal import Principal
    from fleetgate.access.resolver import TenantScopeResolver
    from fleetgate.storage.repositories.drivers import VehicleRepository

_OPEN_STATUSES = (ManifestStatus.SCHEDULED, ManifestStatus.IN_PROGRESS)


class ManifestRepository(ScopedRepository[Manifest]):
    search_columns: ClassVar[tuple[str, ...]] = ("title", "tracking_id", "route")
    default_order: ClassVar[str] = "date_time_updated"

    def __init__(self, engine: AsyncEngine, resolver: TenantScopeResolver) -> None:
        super().__init__(engine, resolver, EntityKind.MANIFEST)

    async def find_page(
        self,
        principal: Principal,
        q: str | None = None,
        statuses: list[str] | None = None,
        active_only: bool = False,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Manifest], int]:
        active_clause = None
        if active_only:
            active_clause = col(Manifest.status).in_(_OPEN_STATUSES) & col(
                Manifest.date_time_ended
            ).is_(None)
        return await self.page(
            principal,
            self.search_clause(q),
            col(Manifest.status).in_(statuses) if statuses else None,
            active_clause,
            limit=limit,
            offset=offset,
        )


class VehicleCombinationRepository(ScopedRepository[VehicleCombination]):
    search_columns: ClassVar[tuple[str, ...]] = ("driver", "cargo", "route")

    def __init__(
        self,
        engine: AsyncEngine,
        resolver: TenantScopeResolver,
        vehicles: VehicleRepository,
    ) -> None:
        super().__init__(engine, resolver, EntityKind.VEHICLE_COMBINATION)
        self._vehicles = vehicles

    async def find(
        self, principal: Principal, status: str | None = None, driver: str | None = None
    ) -> list[VehicleCombination]:
        return await self.list_all(
            principal,
            col(VehicleCombination.status) == status if status else None,
            col(VehicleCombination.driver).ilike(f"%{driver}%") if driver else None,
        )

    async def create(self, principal: Principal, **fields: Any) -> VehicleCombination:
        horse = await self._vehicles.get(principal, fields["horse_id"])
        if horse is None:
            raise NotFoundError("Vehicle not found or access denied")
        return await super().create(principal, **fields)
