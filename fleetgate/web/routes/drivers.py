"""Driver API routes, including offenses recorded against a driver."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from fleetgate.access.principal import Principal
from fleetgate.models.api import (
    DriverCreate,
    DriverOffenseCreate,
    DriverResponse,
    DriverStatsResponse,
    DriverUpdate,
    OffenseResponse,
)
from fleetgate.web.auth.rbac import get_principal, require_operator
from fleetgate.web.dependencies import Repositories, get_repos
from fleetgate.web.routes.offenses import offense_to_response

router = APIRouter(prefix="/api/drivers", tags=["drivers"])


@router.get("", response_model=list[DriverResponse])
async def list_drivers(
    search: str | None = None,
    country: str | None = None,
    active: bool | None = None,
    principal: Principal = Depends(get_principal),
    repos: Repositories = Depends(get_repos),
) -> list[Any]:
    return await repos.drivers.find(principal, search=search, country=country, active=active)


@router.get("/stats", response_model=DriverStatsResponse)
async def driver_stats(
    principal: Principal = Depends(get_principal),
    repos: Repositories = Depends(get_repos),
) -> dict[str, Any]:
    return await repos.drivers.stats(principal)


@router.get("/by-country/{country}", response_model=list[DriverResponse])
async def drivers_by_country(
    country: str,
    principal: Principal = Depends(get_principal),
    repos: Repositories = Depends(get_repos),
) -> list[Any]:
    return await repos.drivers.list_by_country(principal, country)


@router.get("/{driver_id}", response_model=DriverResponse)
async def get_driver(
    driver_id: str,
    principal: Principal = Depends(get_principal),
    repos: Repositories = Depends(get_repos),
) -> Any:
    driver = await repos.drivers.get(principal, driver_id)
    if driver is None:
        raise HTTPException(status_code=404, detail="Driver not found")
    return driver


@router.post("", status_code=201, response_model=DriverResponse)
async def create_driver(
    body: DriverCreate,
    principal: Principal = Depends(require_operator),
    repos: Repositories = Depends(get_repos),
) -> Any:
    fields = body.model_dump()
    fields["display_value"] = fields["display_value"] or fields["name"]
    return await repos.drivers.create(principal, **fields)


@router.patch("/{driver_id}", response_model=DriverResponse)
async def update_driver(
    driver_id: str,
    body: DriverUpdate,
    principal: Principal = Depends(require_operator),
    repos: Repositories = Depends(get_repos),
) -> Any:
    driver = await repos.drivers.update(principal, driver_id, **body.model_dump(exclude_unset=True))
    if driver is None:
        raise HTTPException(status_code=404, detail="Driver not found")
    return driver


@router.post("/{driver_id}/offenses", status_code=201, response_model=OffenseResponse)
async def add_driver_offense(
    driver_id: str,
    body: DriverOffenseCreate,
    principal: Principal = Depends(require_operator),
    repos: Repositories = Depends(get_repos),
) -> OffenseResponse:
    offense = await repos.offenses.record(
        principal,
        driver_id=driver_id,
        kind=body.kind,
        severity=body.severity,
        notes=body.notes,
    )
    return offense_to_response(offense)
