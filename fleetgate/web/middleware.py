"""FastAPI middleware: request context and rate limiting."""

from __future__ import annotations

import time
import uuid
from collections import defaultdict, deque
from typing import TYPE_CHECKING

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import JSONResponse

if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.responses import Response

logger = structlog.get_logger(__name__)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Binds a request id into the structlog context and echoes it as X-Request-ID.

    The context is cleared first so user and tenant ids bound by the previous
    request on this task never leak into the next one.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        started = time.perf_counter()
        response = await call_next(request)
        if request.url.path.startswith("/api/") and response.status_code >= 400:
            logger.info(
                "request_rejected",
                method=request.method,
                path=request.url.path,
                status=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 1),
            )
        response.headers["x-request-id"] = request_id
        return response


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Sliding-window limit per client address on paths under ``prefix``.

    The peer address is the key. ``X-Forwarded-For`` is read only when the
    peer is one of ``trusted_proxies``, and then the nearest hop that is not
    itself a trusted proxy is used. Paths in ``exempt`` (load-balancer health
    probes) are never counted.
    """

    def __init__(
        self,
        app: object,
        max_requests: int = 120,
        window_seconds: int = 60,
        prefix: str = "/api/",
        exempt: tuple[str, ...] = ("/api/health",),
        trusted_proxies: tuple[str, ...] = (),
    ) -> None:
        super().__init__(app)  # type: ignore[arg-type]
        self._max_requests = max_requests
        self._window = window_seconds
        self._prefix = prefix
        self._exempt = frozenset(exempt)
        self._trusted = frozenset(trusted_proxies)
        self._hits: dict[str, deque[float]] = defaultdict(deque)
        self._last_sweep = 0.0

    def _client_key(self, request: Request) -> str:
        peer = request.client.host if request.client else "unknown"
        forwarded = request.headers.get("x-forwarded-for")
        if peer not in self._trusted or not forwarded:
            return peer
        for hop in reversed([h.strip() for h in forwarded.split(",")]):
            if hop and hop not in self._trusted:
                return hop
        return peer

    def _sweep(self, now: float) -> None:
        """Drop clients with no hit inside the current window."""
        stale = [k for k, hits in self._hits.items() if not hits or now - hits[-1] >= self._window]
        for key in stale:
            del self._hits[key]
        self._last_sweep = now

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path
        if not path.startswith(self._prefix) or path in self._exempt:
            return await call_next(request)

        key = self._client_key(request)
        now = time.monotonic()
        if now - self._last_sweep >= self._window:
            self._sweep(now)
        hits = self._hits[key]
        while hits and now - hits[0] >= self._window:
            hits.popleft()

        if len(hits) >= self._max_requests:
            logger.warning("rate_limit_exceeded", client=key, path=path)
            return JSONResponse(
                {"detail": "Rate limit exceeded. Try again later."},
                status_code=429,
                headers={"Retry-After": str(self._window)},
            )

        hits.append(now)
        return await call_next(request)
