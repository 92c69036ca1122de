"""Unit tests for the request-context and rate-limit middleware."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from fleetgate.web.middleware import RateLimitMiddleware, RequestIDMiddleware


def _make_app(
    max_requests: int = 5, window_seconds: int = 60, trusted_proxies: tuple[str, ...] = ()
) -> FastAPI:
    app = FastAPI()
    app.add_middleware(
        RateLimitMiddleware,
        max_requests=max_requests,
        window_seconds=window_seconds,
        trusted_proxies=trusted_proxies,
    )

    @app.get("/api/ping")
    async def api_ping() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/api/health")
    async def api_health() -> dict[str, str]:
        return {"status": "healthy"}

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "healthy"}

    return app


@pytest.mark.unit
class TestRateLimitMiddleware:
    def test_default_parameters(self) -> None:
        middleware = RateLimitMiddleware(FastAPI())
        assert middleware._max_requests == 120
        assert middleware._window == 60
        assert middleware._prefix == "/api/"

    @pytest.mark.asyncio
    async def test_request_exceeding_limit_returns_429(self) -> None:
        app = _make_app(max_requests=3, window_seconds=45)
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            for _ in range(3):
                assert (await client.get("/api/ping")).status_code == 200
            resp = await client.get("/api/ping")
        assert resp.status_code == 429
        assert resp.headers["retry-after"] == "45"
        assert "detail" in resp.json()

    @pytest.mark.asyncio
    async def test_paths_outside_prefix_and_health_not_limited(self) -> None:
        app = _make_app(max_requests=1)
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            for _ in range(5):
                assert (await client.get("/health")).status_code == 200
                assert (await client.get("/api/health")).status_code == 200

    @pytest.mark.asyncio
    async def test_spoofed_forwarded_header_is_ignored(self) -> None:
        app = _make_app(max_requests=2)
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            statuses = [
                (
                    await client.get("/api/ping", headers={"X-Forwarded-For": f"10.0.0.{i}"})
                ).status_code
                for i in range(5)
            ]
        assert statuses == [200, 200, 429, 429, 429]

    @pytest.mark.asyncio
    async def test_trusted_proxy_forwards_client_address(self) -> None:
        app = _make_app(max_requests=1, trusted_proxies=("127.0.0.1",))
        transport = ASGITransport(app=app, client=("127.0.0.1", 4000))
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            first = await client.get(
                "/api/ping", headers={"X-Forwarded-For": "10.0.0.1, 127.0.0.1"}
            )
            second = await client.get("/api/ping", headers={"X-Forwarded-For": "10.0.0.2"})
            again = await client.get(
                "/api/ping", headers={"X-Forwarded-For": "203.0.113.9, 10.0.0.1"}
            )
        assert (first.status_code, second.status_code, again.status_code) == (200, 200, 429)

    def test_idle_clients_are_swept(self) -> None:
        middleware = RateLimitMiddleware(FastAPI(), window_seconds=10)
        middleware._hits["10.0.0.1"].append(0.0)
        middleware._hits["10.0.0.2"].append(15.0)
        middleware._sweep(20.0)
        assert list(middleware._hits) == ["10.0.0.2"]

    @pytest.mark.asyncio
    async def test_expired_window_entries_are_pruned(self) -> None:
        app = _make_app(max_requests=2, window_seconds=1)
        transport = ASGITransport(app=app)
        with patch("fleetgate.web.middleware.time") as mock_time:
            mock_time.monotonic.side_effect = [0.0, 0.0, 2.0]
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                for _ in range(2):
                    await client.get("/api/ping")
                resp = await client.get("/api/ping")
        assert resp.status_code == 200


@pytest.mark.unit
class TestRequestIDMiddleware:
    def _app(self) -> FastAPI:
        app = FastAPI()
        app.add_middleware(RequestIDMiddleware)

        @app.get("/api/ping")
        async def api_ping() -> dict[str, str]:
            return {"status": "ok"}

        return app

    @pytest.mark.asyncio
    async def test_generates_request_id(self) -> None:
        transport = ASGITransport(app=self._app())
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            resp = await client.get("/api/ping")
        assert resp.headers["x-request-id"]

    @pytest.mark.asyncio
    async def test_echoes_incoming_request_id(self) -> None:
        transport = ASGITransport(app=self._app())
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            resp = await client.get("/api/ping", headers={"X-Request-ID": "req-42"})
        assert resp.headers["x-request-id"] == "req-42"

    @pytest.mark.asyncio
    async def test_rejected_request_keeps_header(self) -> None:
        transport = ASGITransport(app=self._app())
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            resp = await client.get("/api/missing")
        assert resp.status_code == 404
        assert "x-request-id" in resp.headers
