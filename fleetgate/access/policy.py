"""Declarative tenant isolation policy per entity kind.

Every entity kind the API serves has exactly one row here. A DIRECT kind is
scoped by its own ``tenant_id`` column; a FOLLOWS_OWNER kind has no tenant
column and is scoped by the *current* tenant of the rows its foreign keys
point at. Adding a new kind means adding a row, not a new branch in a router.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

import structlog
from sqlmodel import SQLModel

from fleetgate.exceptions import PolicyConfigError, UnknownEntityKind
from fleetgate.models.database import (
    Client,
    Contact,
    Driver,
    Location,
    LogisticsOfficer,
    Manifest,
    Offense,
    Vehicle,
    VehicleCombination,
)
from fleetgate.types import EntityKind, IsolationStrategy

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class OwnerLink:
    """A foreign key from an owner-following row to its owner."""

    kind: EntityKind
    foreign_key: str

    def owner_id(self, entity: Any) -> str | None:
        return getattr(entity, self.foreign_key, None)


@dataclass(frozen=True, slots=True)
class EntityPolicy:
    kind: EntityKind
    model: type[SQLModel]
    strategy: IsolationStrategy
    tenant_column: str = "tenant_id"
    owners: tuple[OwnerLink, ...] = field(default_factory=tuple)

    @property
    def follows_owner(self) -> bool:
        return self.strategy == IsolationStrategy.FOLLOWS_OWNER


def _direct(kind: EntityKind, model: type[SQLModel]) -> EntityPolicy:
    return EntityPolicy(kind=kind, model=model, strategy=IsolationStrategy.DIRECT)


POLICY_TABLE: Mapping[EntityKind, EntityPolicy] = MappingProxyType(
    {
        EntityKind.CLIENT: _direct(EntityKind.CLIENT, Client),
        EntityKind.DRIVER: _direct(EntityKind.DRIVER, Driver),
        EntityKind.VEHICLE: _direct(EntityKind.VEHICLE, Vehicle),
        EntityKind.LOCATION: _direct(EntityKind.LOCATION, Location),
        EntityKind.CONTACT: _direct(EntityKind.CONTACT, Contact),
        EntityKind.LOGISTICS_OFFICER: _direct(EntityKind.LOGISTICS_OFFICER, LogisticsOfficer),
        EntityKind.MANIFEST: _direct(EntityKind.MANIFEST, Manifest),
        EntityKind.VEHICLE_COMBINATION: _direct(
            EntityKind.VEHICLE_COMBINATION, VehicleCombination
        ),
        EntityKind.OFFENSE: EntityPolicy(
            kind=EntityKind.OFFENSE,
            model=Offense,
            strategy=IsolationStrategy.FOLLOWS_OWNER,
            owners=(
                OwnerLink(kind=EntityKind.DRIVER, foreign_key="driver_id"),
                OwnerLink(kind=EntityKind.VEHICLE, foreign_key="vehicle_id"),
            ),
        ),
    }
)


def lookup_policy(
    kind: EntityKind | str, table: Mapping[EntityKind, EntityPolicy] = POLICY_TABLE
) -> EntityPolicy:
    """Return the policy row for ``kind`` or raise UnknownEntityKind."""
    try:
        return table[EntityKind(kind)]
    except (KeyError, ValueError) as exc:
        raise UnknownEntityKind(kind) from exc


def _has_column(model: type[SQLModel], name: str) -> bool:
    return name in model.model_fields


def validate_policy_table(table: Mapping[EntityKind, EntityPolicy] = POLICY_TABLE) -> None:
    """Check the table is complete and self-consistent; raise PolicyConfigError if not."""
    problems: list[str] = []

    for kind in EntityKind:
        if kind not in table:
            problems.append(f"{kind}: no policy entry")

    for key, policy in table.items():
        if key != policy.kind:
            problems.append(f"{key}: row describes {policy.kind}")

        if policy.strategy == IsolationStrategy.DIRECT:
            if not _has_column(policy.model, policy.tenant_column):
                problems.append(
                    f"{key}: {policy.model.__name__} has no column {policy.tenant_column!r}"
                )
            if policy.owners:
                problems.append(f"{key}: direct kinds cannot declare owners")
            continue

        if not policy.owners:
            problems.append(f"{key}: owner-following kind declares no owners")
        if _has_column(policy.model, policy.tenant_column):
            problems.append(
                f"{key}: owner-following model {policy.model.__name__} "
                f"carries its own {policy.tenant_column!r}"
            )
        for link in policy.owners:
            if not _has_column(policy.model, link.foreign_key):
                problems.append(
                    f"{key}: {policy.model.__name__} has no foreign key {link.foreign_key!r}"
                )
            owner = table.get(link.kind)
            if owner is None or owner.strategy != IsolationStrategy.DIRECT:
                problems.append(f"{key}: owner {link.kind} must be a direct kind")

    if problems:
        logger.error("policy_table_invalid", problems=problems)
        raise PolicyConfigError("; ".join(problems))

    logger.debug("policy_table_validated", kinds=len(table))
