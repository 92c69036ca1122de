"""Vehicle API routes."""

from __future__ import annotations

from typing import Any, Literal

from fastapi import APIRouter, Depends, HTTPException

from fleetgate.access.principal import Principal
from fleetgate.models.api import VehicleCreate, VehicleResponse, VehicleStatsResponse
from fleetgate.web.auth.rbac import get_principal, require_operator
from fleetgate.web.dependencies import Repositories, get_repos

router = APIRouter(prefix="/api/vehicles", tags=["vehicles"])


@router.get("", response_model=list[VehicleResponse])
async def list_vehicles(
    search: str | None = None,
    type: Literal["horses", "trailers", "all"] = "all",  # noqa: A002
    status: str | None = None,
    principal: Principal = Depends(get_principal),
    repos: Repositories = Depends(get_repos),
) -> list[Any]:
    return await repos.vehicles.find(principal, search=search, vehicle_type=type, status=status)


@router.get("/stats", response_model=VehicleStatsResponse)
async def vehicle_stats(
    principal: Principal = Depends(get_principal),
    repos: Repositories = Depends(get_repos),
) -> dict[str, int]:
    return await repos.vehicles.stats(principal)


@router.get("/{vehicle_id}", response_model=VehicleResponse)
async def get_vehicle(
    vehicle_id: str,
    principal: Principal = Depends(get_principal),
    repos: Repositories = Depends(get_repos),
) -> Any:
    vehicle = await repos.vehicles.get(principal, vehicle_id)
    if vehicle is None:
        raise HTTPException(status_code=404, detail="Vehicle not found")
    return vehicle


@router.post("", status_code=201, response_model=VehicleResponse)
async def create_vehicle(
    body: VehicleCreate,
    principal: Principal = Depends(require_operator),
    repos: Repositories = Depends(get_repos),
) -> Any:
    fields = body.model_dump()
    fields["display_value"] = fields["display_value"] or fields["registration"]
    return await repos.vehicles.create(principal, **fields)
