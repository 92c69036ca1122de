"""Tenant-scoped repository base shared by every directory and record type."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar, Generic, TypeVar

import structlog
from sqlalchemy import func, or_
from sqlmodel import SQLModel, col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from fleetgate.models.database import _utc_now

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine
    from sqlalchemy.sql.elements import ColumnElement

    from fleetgate.access.principal import Principal
    from fleetgate.access.resolver import TenantScopeResolver
    from fleetgate.types import EntityKind

logger = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=SQLModel)


class ScopedRepository(Generic[ModelT]):
    """All reads and writes for one entity kind, filtered by the caller's principal.

    List queries merge the resolver's filter into their WHERE clause.
    Primary-key fetches load the row first and then re-check it with
    ``is_visible``; a row the principal cannot see is reported as missing.
    """

    search_columns: ClassVar[tuple[str, ...]] = ()
    default_order: ClassVar[str] = "created_at"

    def __init__(
        self,
        engine: AsyncEngine,
        resolver: TenantScopeResolver,
        kind: EntityKind,
    ) -> None:
        self._engine = engine
        self._resolver = resolver
        self._policy = resolver.policy_for(kind)
        self.kind = self._policy.kind
        self.model: type[ModelT] = self._policy.model  # type: ignore[assignment]

    # -- query helpers ------------------------------------------------------

    def _scope(self, principal: Principal) -> ColumnElement[bool]:
        return self._resolver.build_filter(principal, self.kind)

    def _order(self, order_by: Any = None) -> Any:
        if order_by is not None:
            return order_by
        return col(getattr(self.model, self.default_order)).desc()

    def search_clause(self, term: str | None) -> ColumnElement[bool] | None:
        """Case-insensitive substring match over ``search_columns``."""
        if not term or not self.search_columns:
            return None
        pattern = f"%{term.strip()}%"
        return or_(*(col(getattr(self.model, c)).ilike(pattern) for c in self.search_columns))

    @staticmethod
    def _criteria(*criteria: ColumnElement[bool] | None) -> list[ColumnElement[bool]]:
        return [c for c in criteria if c is not None]

    # -- reads --------------------------------------------------------------

    async def list_all(
        self,
        principal: Principal,
        *criteria: ColumnElement[bool] | None,
        order_by: Any = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[ModelT]:
        stmt = (
            select(self.model)
            .where(self._scope(principal), *self._criteria(*criteria))
            .order_by(self._order(order_by))
            .offset(offset)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        async with AsyncSession(self._engine) as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def count(self, principal: Principal, *criteria: ColumnElement[bool] | None) -> int:
        stmt = (
            select(func.count())
            .select_from(self.model)
            .where(self._scope(principal), *self._criteria(*criteria))
        )
        async with AsyncSession(self._engine) as session:
            result = await session.execute(stmt)
            return int(result.scalar_one())

    async def page(
        self,
        principal: Principal,
        *criteria: ColumnElement[bool] | None,
        limit: int = 100,
        offset: int = 0,
        order_by: Any = None,
    ) -> tuple[list[ModelT], int]:
        """Return one page of rows plus the total matching count."""
        items = await self.list_all(
            principal, *criteria, order_by=order_by, limit=limit, offset=offset
        )
        total = await self.count(principal, *criteria)
        return items, total

    async def search(
        self,
        principal: Principal,
        term: str | None = None,
        *criteria: ColumnElement[bool] | None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[ModelT]:
        return await self.list_all(
            principal, self.search_clause(term), *criteria, limit=limit, offset=offset
        )

    async def get(self, principal: Principal, entity_id: str) -> ModelT | None:
        async with AsyncSession(self._engine) as session:
            entity = await session.get(self.model, entity_id)
        if entity is None:
            return None
        if not await self._resolver.is_visible(principal, entity):
            logger.info(
                "scoped_get_hidden",
                kind=str(self.kind),
                id=entity_id,
                user_id=principal.user_id,
            )
            return None
        return entity

    # -- writes -------------------------------------------------------------

    async def create(self, principal: Principal, **fields: Any) -> ModelT:
        """Insert a row; direct kinds are attributed to the principal's home tenant."""
        if not self._policy.follows_owner:
            fields[self._policy.tenant_column] = principal.tenant_id
        async with AsyncSession(self._engine) as session:
            entity = self.model(**fields)
            session.add(entity)
            await session.commit()
            await session.refresh(entity)
        logger.info(
            "entity_created",
            kind=str(self.kind),
            id=getattr(entity, "id", None),
            tenant_id=principal.tenant_id,
            user_id=principal.user_id,
        )
        return entity

    async def update(self, principal: Principal, entity_id: str, **fields: Any) -> ModelT | None:
        if self._policy.tenant_column in fields:
            msg = "tenant reassignment goes through the admin tenants API"
            raise ValueError(msg)
        if await self.get(principal, entity_id) is None:
            return None
        async with AsyncSession(self._engine) as session:
            entity = await session.get(self.model, entity_id)
            if entity is None:
                return None
            for key, value in fields.items():
                if value is not None:
                    setattr(entity, key, value)
            if "updated_at" in self.model.model_fields:
                entity.updated_at = _utc_now()  # type: ignore[attr-defined]
            session.add(entity)
            await session.commit()
            await session.refresh(entity)
        logger.info("entity_updated", kind=str(self.kind), id=entity_id, fields=sorted(fields))
        return entity

    async def delete(self, principal: Principal, entity_id: str) -> bool:
        if await self.get(principal, entity_id) is None:
            return False
        async with AsyncSession(self._engine) as session:
            entity = await session.get(self.model, entity_id)
            if entity is None:
                return False
            await session.delete(entity)
            await session.commit()
        logger.info("entity_deleted", kind=str(self.kind), id=entity_id, user_id=principal.user_id)
        return True
