"""Client directory API routes."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from fleetgate.access.principal import Principal
from fleetgate.models.api import ClientCreate, ClientResponse, ClientUpdate
from fleetgate.web.auth.rbac import get_principal, require_operator
from fleetgate.web.dependencies import Repositories, get_repos

router = APIRouter(prefix="/api/clients", tags=["clients"])


@router.get("", response_model=list[ClientResponse])
async def list_clients(
    search: str | None = None,
    type: str | None = None,  # noqa: A002
    principal: Principal = Depends(get_principal),
    repos: Repositories = Depends(get_repos),
) -> list[Any]:
    return await repos.clients.find(principal, search=search, client_type=type)


@router.get("/{client_id}", response_model=ClientResponse)
async def get_client(
    client_id: str,
    principal: Principal = Depends(get_principal),
    repos: Repositories = Depends(get_repos),
) -> Any:
    client = await repos.clients.get(principal, client_id)
    if client is None:
        raise HTTPException(status_code=404, detail="Client not found")
    return client


@router.post("", status_code=201, response_model=ClientResponse)
async def create_client(
    body: ClientCreate,
    principal: Principal = Depends(require_operator),
    repos: Repositories = Depends(get_repos),
) -> Any:
    return await repos.clients.create(principal, **body.model_dump())


@router.patch("/{client_id}", response_model=ClientResponse)
async def update_client(
    client_id: str,
    body: ClientUpdate,
    principal: Principal = Depends(require_operator),
    repos: Repositories = Depends(get_repos),
) -> Any:
    client = await repos.clients.update(principal, client_id, **body.model_dump(exclude_unset=True))
    if client is None:
        raise HTTPException(status_code=404, detail="Client not found")
    return client


@router.delete("/{client_id}")
async def delete_client(
    client_id: str,
    principal: Principal = Depends(require_operator),
    repos: Repositories = Depends(get_repos),
) -> Response:
    if not await repos.clients.delete(principal, client_id):
        raise HTTPException(status_code=404, detail="Client not found")
    return Response(status_code=204)
