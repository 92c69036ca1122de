"""Tenant administration and cross-tenant reassignment."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy.exc import IntegrityError
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from fleetgate.config.settings import DEFAULT_TENANT_ID
from fleetgate.exceptions import DuplicateError, NotFoundError, TenantNotFoundError
from fleetgate.models.database import Tenant, _utc_now
from fleetgate.types import EntityKind

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

    from fleetgate.access.principal import Principal
    from fleetgate.access.resolver import TenantScopeResolver

logger = structlog.get_logger(__name__)

MOVABLE_KINDS = frozenset({EntityKind.DRIVER, EntityKind.VEHICLE})


class TenantRepository:
    """Unscoped tenant store; callers must restrict it to administrators."""

    def __init__(self, engine: AsyncEngine, resolver: TenantScopeResolver) -> None:
        self._engine = engine
        self._resolver = resolver

    async def list_all(self) -> list[Tenant]:
        async with AsyncSession(self._engine) as session:
            stmt = select(Tenant).order_by(col(Tenant.created_at).desc())
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def get(self, tenant_id: str) -> Tenant | None:
        async with AsyncSession(self._engine) as session:
            return await session.get(Tenant, tenant_id)

    async def get_by_slug(self, slug: str) -> Tenant | None:
        async with AsyncSession(self._engine) as session:
            stmt = select(Tenant).where(col(Tenant.slug) == slug)
            result = await session.execute(stmt)
            return result.scalars().first()

    async def create(
        self, name: str, slug: str, settings: dict[str, Any] | None = None
    ) -> Tenant:
        async with AsyncSession(self._engine) as session:
            tenant = Tenant(name=name, slug=slug, settings_json=json.dumps(settings or {}))
            session.add(tenant)
            try:
                await session.commit()
            except IntegrityError as exc:
                await session.rollback()
                msg = f"Tenant slug {slug!r} already exists"
                raise DuplicateError(msg) from exc
            await session.refresh(tenant)
        logger.info("tenant_created", tenant_id=tenant.id, slug=slug)
        return tenant

    async def update(self, tenant_id: str, **updates: Any) -> Tenant | None:
        async with AsyncSession(self._engine) as session:
            tenant = await session.get(Tenant, tenant_id)
            if tenant is None:
                return None
            if updates.get("name") is not None:
                tenant.name = updates["name"]
            if updates.get("slug") is not None:
                tenant.slug = updates["slug"]
            if updates.get("settings") is not None:
                tenant.settings_json = json.dumps(updates["settings"])
            tenant.updated_at = _utc_now()
            session.add(tenant)
            try:
                await session.commit()
            except IntegrityError as exc:
                await session.rollback()
                msg = f"Tenant slug {updates.get('slug')!r} already exists"
                raise DuplicateError(msg) from exc
            await session.refresh(tenant)
            return tenant

    async def reassign(
        self,
        principal: Principal,
        kind: EntityKind,
        entity_id: str,
        target_tenant_id: str,
    ) -> Any:
        """Move a driver or vehicle to another tenant.

        Only the owner row is written. Records that follow it (offenses) see
        the new tenant on their next read.
        """
        if kind not in MOVABLE_KINDS:
            msg = f"{kind} cannot be moved between tenants"
            raise ValueError(msg)
        policy = self._resolver.policy_for(kind)

        async with AsyncSession(self._engine) as session:
            if await session.get(Tenant, target_tenant_id) is None:
                raise TenantNotFoundError(f"Tenant {target_tenant_id} not found")
            entity = await session.get(policy.model, entity_id)
            if entity is None:
                raise NotFoundError(f"{kind} {entity_id} not found")
            previous = getattr(entity, policy.tenant_column)
            setattr(entity, policy.tenant_column, target_tenant_id)
            entity.updated_at = _utc_now()  # type: ignore[attr-defined]
            session.add(entity)
            await session.commit()
            await session.refresh(entity)

        logger.info(
            "tenant_reassigned",
            kind=str(kind),
            id=entity_id,
            from_tenant=previous,
            to_tenant=target_tenant_id,
            by=principal.user_id,
        )
        return entity

    async def ensure_default(self, slug: str = "default") -> Tenant:
        """Ensure the bootstrap tenant exists (single-tenant mode and first start)."""
        async with AsyncSession(self._engine) as session:
            tenant = await session.get(Tenant, DEFAULT_TENANT_ID)
            if tenant is None:
                tenant = Tenant(id=DEFAULT_TENANT_ID, slug=slug, name="Default Tenant")
                session.add(tenant)
                await session.commit()
                await session.refresh(tenant)
                logger.info("default_tenant_created", slug=slug)
            return tenant
