"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import structlog
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from fleetgate.access.policy import validate_policy_table
from fleetgate.config.logging import setup_logging
from fleetgate.config.settings import Settings, get_settings
from fleetgate.exceptions import (
    ConfigError,
    DuplicateError,
    NotFoundError,
    OwnerLookupFailed,
)
from fleetgate.storage.database import get_engine, init_db
from fleetgate.web.auth.rbac import get_principal
from fleetgate.web.dependencies import build_repositories
from fleetgate.web.health import check_health
from fleetgate.web.middleware import RateLimitMiddleware, RequestIDMiddleware
from fleetgate.web.routes.admin import router as admin_router
from fleetgate.web.routes.clients import router as clients_router
from fleetgate.web.routes.directory import router as directory_router
from fleetgate.web.routes.drivers import router as drivers_router
from fleetgate.web.routes.manifests import router as manifests_router
from fleetgate.web.routes.offenses import router as offenses_router
from fleetgate.web.routes.vehicles import router as vehicles_router

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from sqlalchemy.ext.asyncio import AsyncEngine

logger = structlog.get_logger(__name__)


def create_app(settings: Settings | None = None, engine: AsyncEngine | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()
    setup_logging(
        log_level=settings.log_level, json_output=not settings.debug, sql_echo=settings.debug
    )

    # A missing or inconsistent policy row must stop the process, not a request
    validate_policy_table()

    engine = engine or get_engine()
    repos = build_repositories(engine, settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if settings.create_tables:
            await init_db(engine)
            await repos.tenants.ensure_default(settings.default_tenant_slug)
            if settings.auth_mode == "single":
                await repos.users.ensure_bootstrap_admin()
        logger.info("app_started", auth_mode=settings.auth_mode)
        yield
        await engine.dispose()

    app = FastAPI(
        title="FleetGate",
        description="Multi-tenant fleet management API",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.repos = repos

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(DuplicateError)
    async def duplicate_handler(request: Request, exc: DuplicateError) -> JSONResponse:
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(OwnerLookupFailed)
    async def owner_lookup_handler(request: Request, exc: OwnerLookupFailed) -> JSONResponse:
        logger.warning("owner_lookup_request_failed", path=request.url.path, error=str(exc))
        return JSONResponse(
            status_code=503, content={"detail": "Temporarily unable to verify access"}
        )

    @app.exception_handler(ConfigError)
    async def config_error_handler(request: Request, exc: ConfigError) -> JSONResponse:
        logger.error("tenant_policy_misconfigured", path=request.url.path, error=str(exc))
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    # Last added runs first
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
    )
    app.add_middleware(
        RateLimitMiddleware,
        max_requests=settings.rate_limit_per_minute,
        window_seconds=60,
        trusted_proxies=tuple(settings.trusted_proxies),
    )
    app.add_middleware(RequestIDMiddleware)

    # Health check (public)
    @app.get("/api/health")
    async def health_check() -> dict[str, object]:
        return await check_health(engine, settings)

    # Protected routes (every one resolves a principal)
    protected = [
        clients_router,
        drivers_router,
        vehicles_router,
        directory_router,
        manifests_router,
        offenses_router,
        admin_router,
    ]
    for router in protected:
        app.include_router(router, dependencies=[Depends(get_principal)])

    logger.info("app_created")
    return app
