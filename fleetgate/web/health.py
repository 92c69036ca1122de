"""Health check endpoint logic."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from fleetgate.access.policy import POLICY_TABLE
from fleetgate.config.settings import DEFAULT_TENANT_ID

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

    from fleetgate.config.settings import Settings

logger = structlog.get_logger(__name__)


async def check_health(engine: AsyncEngine, settings: Settings) -> dict[str, object]:
    """Probe the database and report whether tenant bootstrap has run.

    ``default_tenant`` is only meaningful in single-tenant mode, where every
    request is attributed to that tenant.
    """
    result: dict[str, object] = {
        "status": "healthy",
        "auth_mode": settings.auth_mode,
        "scoped_kinds": len(POLICY_TABLE),
        "database": "connected",
    }

    try:
        async with engine.connect() as conn:
            row = await conn.execute(
                text("SELECT 1 FROM tenants WHERE id = :id"), {"id": DEFAULT_TENANT_ID}
            )
            result["default_tenant"] = row.first() is not None
    except (SQLAlchemyError, OSError) as exc:
        logger.warning("health_check_db_failed", error=str(exc))
        result["database"] = "unavailable"
        result["status"] = "degraded"
        return result

    if settings.auth_mode == "single" and not result["default_tenant"]:
        result["status"] = "degraded"
    return result
