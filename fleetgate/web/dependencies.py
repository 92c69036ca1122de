"""FastAPI dependency injection and shared repositories."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from fastapi import Request

from fleetgate.access.owners import DatabaseOwnerLookup
from fleetgate.access.resolver import TenantScopeResolver
from fleetgate.storage.repositories.directory import (
    ClientRepository,
    ContactRepository,
    LocationRepository,
    LogisticsOfficerRepository,
)
from fleetgate.storage.repositories.drivers import DriverRepository, VehicleRepository
from fleetgate.storage.repositories.manifests import (
    ManifestRepository,
    VehicleCombinationRepository,
)
from fleetgate.storage.repositories.offenses import OffenseRepository
from fleetgate.storage.repositories.tenants import TenantRepository
from fleetgate.storage.repositories.users import DatabaseUserRepository

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

    from fleetgate.config.settings import Settings


@dataclass(frozen=True, slots=True)
class Repositories:
    resolver: TenantScopeResolver
    clients: ClientRepository
    drivers: DriverRepository
    vehicles: VehicleRepository
    locations: LocationRepository
    contacts: ContactRepository
    officers: LogisticsOfficerRepository
    manifests: ManifestRepository
    combinations: VehicleCombinationRepository
    offenses: OffenseRepository
    tenants: TenantRepository
    users: DatabaseUserRepository


def build_repositories(engine: AsyncEngine, settings: Settings) -> Repositories:
    """Wire one resolver and every repository against a single engine."""
    resolver = TenantScopeResolver(
        DatabaseOwnerLookup(engine, timeout_seconds=settings.owner_lookup_timeout_seconds)
    )
    drivers = DriverRepository(engine, resolver)
    vehicles = VehicleRepository(engine, resolver)
    return Repositories(
        resolver=resolver,
        clients=ClientRepository(engine, resolver),
        drivers=drivers,
        vehicles=vehicles,
        locations=LocationRepository(engine, resolver),
        contacts=ContactRepository(engine, resolver),
        officers=LogisticsOfficerRepository(engine, resolver),
        manifests=ManifestRepository(engine, resolver),
        combinations=VehicleCombinationRepository(engine, resolver, vehicles),
        offenses=OffenseRepository(engine, resolver, drivers, vehicles),
        tenants=TenantRepository(engine, resolver),
        users=DatabaseUserRepository(engine),
    )


def get_repos(request: Request) -> Repositories:
    """Return the repositories attached to the running app."""
    repos: Repositories = request.app.state.repos
    return repos
