"""Offense API routes.

Offenses carry no tenant of their own; the repository scopes them through
the current tenant of their driver and vehicle.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from fleetgate.access.principal import Principal
from fleetgate.models.api import OffenseCreate, OffenseResponse, OwnerSummary
from fleetgate.models.database import Driver, Offense, Vehicle
from fleetgate.types import OffenseSeverity
from fleetgate.web.auth.rbac import get_principal, require_operator
from fleetgate.web.dependencies import Repositories, get_repos

router = APIRouter(prefix="/api/offenses", tags=["offenses"])


def offense_to_response(
    offense: Offense, driver: Driver | None = None, vehicle: Vehicle | None = None
) -> OffenseResponse:
    return OffenseResponse(
        id=offense.id,
        driver_id=offense.driver_id,
        vehicle_id=offense.vehicle_id,
        kind=offense.kind,
        severity=offense.severity,
        notes=offense.notes,
        created_at=offense.created_at,
        driver=(
            OwnerSummary(id=driver.id, tenant_id=driver.tenant_id, label=driver.name)
            if driver
            else None
        ),
        vehicle=(
            OwnerSummary(id=vehicle.id, tenant_id=vehicle.tenant_id, label=vehicle.registration)
            if vehicle
            else None
        ),
    )


@router.get("", response_model=list[OffenseResponse])
async def list_offenses(
    driver_id: str | None = None,
    vehicle_id: str | None = None,
    severity: OffenseSeverity | None = None,
    principal: Principal = Depends(get_principal),
    repos: Repositories = Depends(get_repos),
) -> list[OffenseResponse]:
    rows = await repos.offenses.find(
        principal,
        driver_id=driver_id,
        vehicle_id=vehicle_id,
        severity=str(severity) if severity else None,
    )
    return [offense_to_response(o, d, v) for o, d, v in rows]


@router.get("/{offense_id}", response_model=OffenseResponse)
async def get_offense(
    offense_id: str,
    principal: Principal = Depends(get_principal),
    repos: Repositories = Depends(get_repos),
) -> OffenseResponse:
    offense = await repos.offenses.get(principal, offense_id)
    if offense is None:
        raise HTTPException(status_code=404, detail="Offense not found")
    driver = await repos.drivers.get(principal, offense.driver_id) if offense.driver_id else None
    vehicle = (
        await repos.vehicles.get(principal, offense.vehicle_id) if offense.vehicle_id else None
    )
    return offense_to_response(offense, driver, vehicle)


@router.post("", status_code=201, response_model=OffenseResponse)
async def create_offense(
    body: OffenseCreate,
    principal: Principal = Depends(require_operator),
    repos: Repositories = Depends(get_repos),
) -> OffenseResponse:
    try:
        offense = await repos.offenses.record(
            principal,
            kind=body.kind,
            severity=body.severity,
            driver_id=body.driver_id,
            vehicle_id=body.vehicle_id,
            notes=body.notes,
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return offense_to_response(offense)
