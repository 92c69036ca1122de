"""Live lookup of an owner entity's current tenant."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Protocol

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from fleetgate.access.policy import POLICY_TABLE, lookup_policy
from fleetgate.exceptions import OwnerLookupFailed

if TYPE_CHECKING:
    from collections.abc import Mapping

    from sqlalchemy.ext.asyncio import AsyncEngine

    from fleetgate.access.policy import EntityPolicy
    from fleetgate.types import EntityKind

logger = structlog.get_logger(__name__)


class OwnerLookup(Protocol):
    async def current_tenant(self, kind: EntityKind, owner_id: str) -> str | None:
        """Return the owner's tenant id right now, or None if it does not exist.

        Raises OwnerLookupFailed when the store cannot answer.
        """
        ...


class DatabaseOwnerLookup:
    """Reads the owner's tenant column in a fresh session on every call. Nothing is cached."""

    def __init__(
        self,
        engine: AsyncEngine,
        timeout_seconds: float = 2.0,
        table: Mapping[EntityKind, EntityPolicy] = POLICY_TABLE,
    ) -> None:
        self._engine = engine
        self._timeout = timeout_seconds
        self._table = table

    async def current_tenant(self, kind: EntityKind, owner_id: str) -> str | None:
        policy = lookup_policy(kind, self._table)
        try:
            return await asyncio.wait_for(self._fetch(policy, owner_id), timeout=self._timeout)
        except TimeoutError as exc:
            logger.warning("owner_lookup_timeout", kind=str(kind), owner_id=owner_id)
            raise OwnerLookupFailed(str(kind), owner_id, "timed out") from exc
        except SQLAlchemyError as exc:
            logger.warning(
                "owner_lookup_db_error", kind=str(kind), owner_id=owner_id, error=str(exc)
            )
            raise OwnerLookupFailed(str(kind), owner_id, str(exc)) from exc

    async def _fetch(self, policy: EntityPolicy, owner_id: str) -> str | None:
        tenant_col = getattr(policy.model, policy.tenant_column)
        id_col = policy.model.id  # type: ignore[attr-defined]
        stmt = select(tenant_col).where(col(id_col) == owner_id)
        async with AsyncSession(self._engine) as session:
            result = await session.execute(stmt)
            return result.scalars().first()
