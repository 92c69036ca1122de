"""Principal resolution and role gates for API requests."""

from __future__ import annotations

import jwt
import structlog
from fastapi import Depends, HTTPException, Request

from fleetgate.access.principal import Principal, get_single_tenant_principal, parse_role
from fleetgate.config.settings import Settings
from fleetgate.web.auth.tokens import decode_session_token

logger = structlog.get_logger(__name__)


async def get_principal(request: Request) -> Principal:
    """Resolve the current principal from the request.

    In single-tenant mode, returns the bootstrap admin of the default tenant.
    In jwt mode, reads the Bearer session token.
    """
    settings: Settings = request.app.state.settings

    if settings.auth_mode == "single":
        principal = get_single_tenant_principal()
    else:
        principal = _resolve_token_principal(request, settings)

    structlog.contextvars.bind_contextvars(user_id=principal.user_id, tenant_id=principal.tenant_id)
    return principal


async def require_operator(
    principal: Principal = Depends(get_principal),
) -> Principal:
    """Require a role that may write (blocks viewers)."""
    if not principal.can_write:
        raise HTTPException(status_code=403, detail="Write access required")
    return principal


async def require_admin(
    principal: Principal = Depends(get_principal),
) -> Principal:
    """Require admin role."""
    if not principal.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return principal


def _resolve_token_principal(request: Request, settings: Settings) -> Principal:
    auth_header = request.headers.get("authorization", "")
    if not auth_header.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Missing Bearer token")

    token = auth_header[7:]
    try:
        claims = decode_session_token(
            token, settings.session_secret, algorithm=settings.session_algorithm
        )
    except jwt.PyJWTError as exc:
        logger.warning("session_token_invalid", error=str(exc))
        raise HTTPException(status_code=401, detail="Invalid token") from exc

    if not claims.tenant_id:
        raise HTTPException(status_code=401, detail="Tenant ID is required")

    principal = Principal(
        user_id=claims.sub,
        tenant_id=claims.tenant_id,
        role=parse_role(claims.role),
        email=claims.email,
        tenant_slug=claims.tenant_slug,
    )
    return principal
