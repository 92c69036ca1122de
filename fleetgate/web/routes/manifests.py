"""Manifest and vehicle combination routes."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query

from fleetgate.access.principal import Principal
from fleetgate.models.api import (
    ManifestPage,
    ManifestResponse,
    VehicleCombinationCreate,
    VehicleCombinationResponse,
)
from fleetgate.web.auth.rbac import get_principal, require_operator
from fleetgate.web.dependencies import Repositories, get_repos

router = APIRouter(prefix="/api", tags=["manifests"])


@router.get("/manifests", response_model=ManifestPage)
async def list_manifests(
    q: str | None = None,
    status: list[str] | None = Query(default=None),
    active_only: bool = False,
    limit: int = Query(default=20, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    principal: Principal = Depends(get_principal),
    repos: Repositories = Depends(get_repos),
) -> dict[str, Any]:
    items, total = await repos.manifests.find_page(
        principal,
        q=q,
        statuses=[s.upper() for s in status] if status else None,
        active_only=active_only,
        limit=limit,
        offset=offset,
    )
    return {"items": items, "total": total}


@router.get("/manifests/{manifest_id}", response_model=ManifestResponse)
async def get_manifest(
    manifest_id: str,
    principal: Principal = Depends(get_principal),
    repos: Repositories = Depends(get_repos),
) -> Any:
    manifest = await repos.manifests.get(principal, manifest_id)
    if manifest is None:
        raise HTTPException(status_code=404, detail="Manifest not found")
    return manifest


@router.get("/vehicle-combinations", response_model=list[VehicleCombinationResponse])
async def list_vehicle_combinations(
    status: str | None = None,
    driver: str | None = None,
    principal: Principal = Depends(get_principal),
    repos: Repositories = Depends(get_repos),
) -> list[Any]:
    return await repos.combinations.find(principal, status=status, driver=driver)


@router.post(
    "/vehicle-combinations", status_code=201, response_model=VehicleCombinationResponse
)
async def create_vehicle_combination(
    body: VehicleCombinationCreate,
    principal: Principal = Depends(require_operator),
    repos: Repositories = Depends(get_repos),
) -> Any:
    fields = body.model_dump()
    fields["start_date"] = body.start_date.replace(tzinfo=None)
    return await repos.combinations.create(principal, **fields)
