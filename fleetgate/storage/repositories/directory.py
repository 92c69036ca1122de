"""Repositories for the simple tenant-scoped directories."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from sqlmodel import col

from fleetgate.models.database import Client, Contact, Location, LogisticsOfficer
from fleetgate.storage.repositories.scoped import ScopedRepository
from fleetgate.types import EntityKind

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

    from fleetgate.access.principal import Principal
    from fleetgate.access.resolver import TenantScopeResolver


class ClientRepository(ScopedRepository[Client]):
    search_columns: ClassVar[tuple[str, ...]] = ("name", "address", "display_value")

    def __init__(self, engine: AsyncEngine, resolver: TenantScopeResolver) -> None:
        super().__init__(engine, resolver, EntityKind.CLIENT)

    async def find(
        self, principal: Principal, search: str | None = None, client_type: str | None = None
    ) -> list[Client]:
        return await self.list_all(
            principal,
            self.search_clause(search),
            col(Client.entity_type_description) == client_type if client_type else None,
        )


class LocationRepository(ScopedRepository[Location]):
    search_columns: ClassVar[tuple[str, ...]] = ("name", "description", "address")
    default_order: ClassVar[str] = "updated_at"

    def __init__(self, engine: AsyncEngine, resolver: TenantScopeResolver) -> None:
        super().__init__(engine, resolver, EntityKind.LOCATION)


class ContactRepository(ScopedRepository[Contact]):
    search_columns: ClassVar[tuple[str, ...]] = ("name", "contact_nr", "id_number", "display_value")

    def __init__(self, engine: AsyncEngine, resolver: TenantScopeResolver) -> None:
        super().__init__(engine, resolver, EntityKind.CONTACT)


class LogisticsOfficerRepository(ScopedRepository[LogisticsOfficer]):
    search_columns: ClassVar[tuple[str, ...]] = ("name", "phone", "email")

    def __init__(self, engine: AsyncEngine, resolver: TenantScopeResolver) -> None:
        super().__init__(engine, resolver, EntityKind.LOGISTICS_OFFICER)

    async def find_page(
        self,
        principal: Principal,
        search: str | None = None,
        country: str | None = None,
        is_active: bool | None = None,
        limit: int = 24,
        offset: int = 0,
    ) -> tuple[list[LogisticsOfficer], int]:
        return await self.page(
            principal,
            self.search_clause(search),
            col(LogisticsOfficer.country_of_origin).ilike(f"%{country}%") if country else None,
            col(LogisticsOfficer.is_active).is_(is_active) if is_active is not None else None,
            limit=limit,
            offset=offset,
        )
