"""Location, contact and logistics officer directory routes."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query

from fleetgate.access.principal import Principal
from fleetgate.models.api import (
    ContactPage,
    ContactResponse,
    LocationPage,
    LocationResponse,
    LogisticsOfficerPage,
    LogisticsOfficerResponse,
)
from fleetgate.web.auth.rbac import get_principal
from fleetgate.web.dependencies import Repositories, get_repos

router = APIRouter(prefix="/api", tags=["directory"])


@router.get("/locations", response_model=LocationPage)
async def list_locations(
    search: str | None = None,
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    principal: Principal = Depends(get_principal),
    repos: Repositories = Depends(get_repos),
) -> dict[str, Any]:
    items, total = await repos.locations.page(
        principal, repos.locations.search_clause(search), limit=limit, offset=offset
    )
    return {"items": items, "total": total}


@router.get("/locations/{location_id}", response_model=LocationResponse)
async def get_location(
    location_id: str,
    principal: Principal = Depends(get_principal),
    repos: Repositories = Depends(get_repos),
) -> Any:
    location = await repos.locations.get(principal, location_id)
    if location is None:
        raise HTTPException(status_code=404, detail="Location not found")
    return location


@router.get("/contacts", response_model=ContactPage)
async def list_contacts(
    search: str | None = None,
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    principal: Principal = Depends(get_principal),
    repos: Repositories = Depends(get_repos),
) -> dict[str, Any]:
    items, total = await repos.contacts.page(
        principal, repos.contacts.search_clause(search), limit=limit, offset=offset
    )
    return {"items": items, "total": total}


@router.get("/contacts/{contact_id}", response_model=ContactResponse)
async def get_contact(
    contact_id: str,
    principal: Principal = Depends(get_principal),
    repos: Repositories = Depends(get_repos),
) -> Any:
    contact = await repos.contacts.get(principal, contact_id)
    if contact is None:
        raise HTTPException(status_code=404, detail="Contact not found")
    return contact


@router.get("/logistics-officers", response_model=LogisticsOfficerPage)
async def list_logistics_officers(
    search: str | None = None,
    country: str | None = None,
    is_active: bool | None = None,
    limit: int = Query(default=24, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    principal: Principal = Depends(get_principal),
    repos: Repositories = Depends(get_repos),
) -> dict[str, Any]:
    officers, total = await repos.officers.find_page(
        principal,
        search=search,
        country=country,
        is_active=is_active,
        limit=limit,
        offset=offset,
    )
    return {"officers": officers, "total": total}


@router.get("/logistics-officers/{officer_id}", response_model=LogisticsOfficerResponse)
async def get_logistics_officer(
    officer_id: str,
    principal: Principal = Depends(get_principal),
    repos: Repositories = Depends(get_repos),
) -> Any:
    officer = await repos.officers.get(principal, officer_id)
    if officer is None:
        raise HTTPException(status_code=404, detail="Logistics officer not found")
    return officer
