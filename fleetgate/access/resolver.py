"""Tenant scope resolution: list filters and single-row visibility checks.

``build_filter`` and ``is_visible`` must agree: a row is visible to a principal
exactly when a query filtered by ``build_filter`` would return it. Both go
through the same policy row and the same admin check.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from sqlalchemy import false, or_, true
from sqlmodel import col, select

from fleetgate.access.policy import POLICY_TABLE, lookup_policy
from fleetgate.exceptions import OwnerLookupFailed, UnknownEntityKind
from fleetgate.types import EntityKind, IsolationStrategy

if TYPE_CHECKING:
    from collections.abc import Mapping

    from sqlalchemy.sql.elements import ColumnElement
    from sqlmodel import SQLModel

    from fleetgate.access.owners import OwnerLookup
    from fleetgate.access.policy import EntityPolicy
    from fleetgate.access.principal import Principal

logger = structlog.get_logger(__name__)


class TenantScopeResolver:
    """Turns a principal and an entity kind into a tenant predicate.

    Holds no per-request state; one instance is shared by all requests.
    """

    def __init__(
        self,
        owner_lookup: OwnerLookup,
        table: Mapping[EntityKind, EntityPolicy] = POLICY_TABLE,
    ) -> None:
        self._owners = owner_lookup
        self._table = table
        self._kinds_by_model: dict[type[SQLModel], EntityKind] = {
            policy.model: kind for kind, policy in table.items()
        }

    def policy_for(self, kind: EntityKind | str) -> EntityPolicy:
        return lookup_policy(kind, self._table)

    def kind_of(self, entity: SQLModel | type[SQLModel]) -> EntityKind:
        """Return the entity kind registered for a row or model class."""
        model = entity if isinstance(entity, type) else type(entity)
        try:
            return self._kinds_by_model[model]
        except KeyError as exc:
            raise UnknownEntityKind(model.__name__) from exc

    def build_filter(self, principal: Principal, kind: EntityKind | str) -> ColumnElement[bool]:
        """Return the WHERE fragment a list query for ``kind`` must include."""
        policy = self.policy_for(kind)
        if principal.is_admin:
            return true()

        if policy.strategy == IsolationStrategy.DIRECT:
            return col(getattr(policy.model, policy.tenant_column)) == principal.tenant_id

        # Compare against the owner's tenant as stored right now, via subquery.
        clauses: list[ColumnElement[bool]] = []
        for link in policy.owners:
            owner = self.policy_for(link.kind)
            # Uncorrelated: list queries may also join the owner table
            owner_ids = (
                select(owner.model.id)  # type: ignore[attr-defined]
                .where(col(getattr(owner.model, owner.tenant_column)) == principal.tenant_id)
                .correlate(None)
            )
            clauses.append(col(getattr(policy.model, link.foreign_key)).in_(owner_ids))
        if not clauses:
            return false()
        return or_(*clauses)

    async def is_visible(self, principal: Principal, entity: SQLModel) -> bool:
        """Check one loaded row, e.g. after a primary-key fetch.

        Fails closed: if an owner's tenant cannot be read, the row is not visible.
        """
        policy = self.policy_for(self.kind_of(entity))
        if principal.is_admin:
            return True

        if policy.strategy == IsolationStrategy.DIRECT:
            return getattr(entity, policy.tenant_column) == principal.tenant_id

        visible = False
        for link in policy.owners:
            owner_id = link.owner_id(entity)
            if owner_id is None:
                continue
            try:
                owner_tenant = await self._owners.current_tenant(link.kind, owner_id)
            except OwnerLookupFailed as exc:
                logger.warning(
                    "owner_lookup_failed",
                    kind=str(policy.kind),
                    owner_kind=str(link.kind),
                    owner_id=owner_id,
                    user_id=principal.user_id,
                    error=str(exc),
                )
                return False
            if owner_tenant is not None and owner_tenant == principal.tenant_id:
                visible = True
        return visible
