"""Administrator routes: tenants and moving drivers or vehicles between them."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Literal

from fastapi import APIRouter, Depends, HTTPException

from fleetgate.access.principal import Principal
from fleetgate.models.api import (
    DriverResponse,
    ReassignTenantRequest,
    TenantCreate,
    TenantResponse,
    TenantUpdate,
    VehicleResponse,
)
from fleetgate.types import EntityKind
from fleetgate.web.auth.rbac import require_admin
from fleetgate.web.dependencies import Repositories, get_repos

if TYPE_CHECKING:
    from fleetgate.models.database import Tenant

router = APIRouter(prefix="/api/admin", tags=["admin"])

_MOVABLE = {"drivers": EntityKind.DRIVER, "vehicles": EntityKind.VEHICLE}


def _tenant_to_response(tenant: Tenant) -> TenantResponse:
    return TenantResponse(
        id=tenant.id,
        slug=tenant.slug,
        name=tenant.name,
        settings=json.loads(tenant.settings_json or "{}"),
        created_at=tenant.created_at,
    )


@router.get("/tenants", response_model=list[TenantResponse])
async def list_tenants(
    principal: Principal = Depends(require_admin),
    repos: Repositories = Depends(get_repos),
) -> list[TenantResponse]:
    return [_tenant_to_response(t) for t in await repos.tenants.list_all()]


@router.post("/tenants", status_code=201, response_model=TenantResponse)
async def create_tenant(
    body: TenantCreate,
    principal: Principal = Depends(require_admin),
    repos: Repositories = Depends(get_repos),
) -> TenantResponse:
    tenant = await repos.tenants.create(name=body.name, slug=body.slug, settings=body.settings)
    return _tenant_to_response(tenant)


@router.get("/tenants/{tenant_id}", response_model=TenantResponse)
async def get_tenant(
    tenant_id: str,
    principal: Principal = Depends(require_admin),
    repos: Repositories = Depends(get_repos),
) -> TenantResponse:
    tenant = await repos.tenants.get(tenant_id)
    if tenant is None:
        raise HTTPException(status_code=404, detail="Tenant not found")
    return _tenant_to_response(tenant)


@router.patch("/tenants/{tenant_id}", response_model=TenantResponse)
async def update_tenant(
    tenant_id: str,
    body: TenantUpdate,
    principal: Principal = Depends(require_admin),
    repos: Repositories = Depends(get_repos),
) -> TenantResponse:
    tenant = await repos.tenants.update(tenant_id, **body.model_dump(exclude_unset=True))
    if tenant is None:
        raise HTTPException(status_code=404, detail="Tenant not found")
    return _tenant_to_response(tenant)


@router.put(
    "/{collection}/{entity_id}/tenant",
    response_model=DriverResponse | VehicleResponse,
)
async def reassign_tenant(
    collection: Literal["drivers", "vehicles"],
    entity_id: str,
    body: ReassignTenantRequest,
    principal: Principal = Depends(require_admin),
    repos: Repositories = Depends(get_repos),
) -> Any:
    """Move a driver or vehicle (and everything that follows it) to another tenant."""
    return await repos.tenants.reassign(principal, _MOVABLE[collection], entity_id, body.tenant_id)
