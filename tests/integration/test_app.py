from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from httpx import ASGITransport, AsyncClient

from fleetgate.config.settings import Settings
from fleetgate.exceptions import OwnerLookupFailed, UnknownEntityKind
from fleetgate.web.app import create_app
from tests.helpers import auth

if TYPE_CHECKING:
    from fastapi import FastAPI
    from sqlalchemy.ext.asyncio import AsyncEngine


@pytest.mark.integration
class TestAppFactory:
    @pytest.mark.asyncio
    async def test_app_creates_successfully(self, app: FastAPI) -> None:
        assert app.title == "FleetGate"

    @pytest.mark.asyncio
    async def test_health_endpoint(self, client: AsyncClient) -> None:
        resp = await client.get("/api/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "healthy"
        assert data["auth_mode"] == "jwt"
        assert data["default_tenant"] is True

    @pytest.mark.asyncio
    async def test_request_id_header(self, client: AsyncClient) -> None:
        resp = await client.get("/api/health")
        assert "x-request-id" in resp.headers

    @pytest.mark.asyncio
    async def test_404_for_unknown_route(self, client: AsyncClient) -> None:
        resp = await client.get("/api/nonexistent", headers=auth())
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_owner_lookup_failure_maps_to_503(
        self, app: FastAPI, client: AsyncClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        async def failing_find(*args: object, **kwargs: object) -> list[object]:
            raise OwnerLookupFailed("driver", "d-1", "timed out")

        monkeypatch.setattr(app.state.repos.offenses, "find", failing_find)
        resp = await client.get("/api/offenses", headers=auth())
        assert resp.status_code == 503

    @pytest.mark.asyncio
    async def test_unknown_kind_maps_to_500(
        self, app: FastAPI, client: AsyncClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        async def broken_find(*args: object, **kwargs: object) -> list[object]:
            raise UnknownEntityKind("trailer_hitch")

        monkeypatch.setattr(app.state.repos.clients, "find", broken_find)
        resp = await client.get("/api/clients", headers=auth())
        assert resp.status_code == 500
        assert resp.json() == {"detail": "Internal server error"}


@pytest.mark.integration
class TestSingleTenantMode:
    @pytest.mark.asyncio
    async def test_requests_run_as_bootstrap_admin(self, async_engine: AsyncEngine) -> None:
        settings = Settings(database_url="sqlite+aiosqlite:///:memory:", auth_mode="single")
        app = create_app(settings=settings, engine=async_engine)
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            created = await client.post("/api/clients", json={"name": "Acme"})
            assert created.status_code == 201
            assert (await client.get("/api/admin/tenants")).status_code == 200
