"""The authenticated actor a request runs as."""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from fleetgate.config.settings import BOOTSTRAP_ADMIN_ID, DEFAULT_TENANT_ID
from fleetgate.types import Role

logger = structlog.get_logger(__name__)

# Legacy spellings of the admin role still issued by older sessions
ROLE_ALIASES: dict[str, Role] = {
    "ADMINISTRATOR": Role.ADMIN,
    "SUPER_ADMIN": Role.ADMIN,
}


def parse_role(raw: str | None) -> Role:
    """Normalise a role string from a session; unknown or missing roles become VIEWER."""
    if not raw:
        return Role.VIEWER
    name = raw.strip().upper()
    if name in ROLE_ALIASES:
        return ROLE_ALIASES[name]
    try:
        return Role(name)
    except ValueError:
        logger.warning("unknown_role_downgraded", role=raw)
        return Role.VIEWER


@dataclass(frozen=True, slots=True)
class Principal:
    """Immutable principal built once per request and passed explicitly."""

    user_id: str
    tenant_id: str
    role: Role
    email: str = ""
    tenant_slug: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def can_write(self) -> bool:
        return self.role != Role.VIEWER


def get_single_tenant_principal() -> Principal:
    """Return the bootstrap admin principal for single-tenant (self-hosted) mode."""
    return Principal(
        user_id=BOOTSTRAP_ADMIN_ID,
        tenant_id=DEFAULT_TENANT_ID,
        role=Role.ADMIN,
        email="admin@localhost",
    )
