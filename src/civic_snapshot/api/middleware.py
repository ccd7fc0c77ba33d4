"""HTTP middleware for the civic API.

Three concerns live here:

* Read-only CORS for browser front ends.
* Response headers: content-type hardening plus a cache policy that lets
  clients reuse successful civic lookups for as long as the server-side
  cache would serve them.
* A per-client quota on the routes that reach Open States or Zippopotam.
  Cached-only routes (jurisdictions, cache stats) and ``/health`` are not
  counted, so monitoring never eats into a client's quota.
"""

import time
from collections import deque
from collections.abc import Callable, Iterable

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from civic_snapshot.core.config import Settings
from civic_snapshot.schemas.common import ErrorResponse

QUOTA_WINDOW_SECONDS = 60.0

# Civic routes whose handlers may call an upstream provider
UPSTREAM_ROUTES = (
    "/civic/snapshot",
    "/civic/geocode",
    "/civic/bills",
    "/civic/legislators",
)


def client_key(request: Request, proxy_headers: Iterable[str] = ()) -> str:
    """Identify the caller for quota accounting.

    The first configured proxy header that carries a value wins; for
    ``X-Forwarded-For`` only the leftmost (original client) address counts.
    Without a usable header the socket peer is used.
    """
    for header in proxy_headers:
        value = request.headers.get(header, "").strip()
        if value:
            return value.split(",")[0].strip() if header.lower() == "x-forwarded-for" else value
    return request.client.host if request.client else "unknown"


def setup_cors(app: FastAPI, settings: Settings) -> None:
    """Allow cross-origin GETs from the configured origins.

    The API is read-only and carries no cookies, so only GET is allowed and
    credentials are off.
    """
    origin_regex = settings.cors_origin_regex.strip() or None
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_origin_regex=origin_regex,
        allow_credentials=False,
        allow_methods=["GET"],
        allow_headers=["*"],
    )


class CivicResponseHeadersMiddleware(BaseHTTPMiddleware):
    """Harden responses and advertise how long civic data may be reused.

    Args:
        app: The wrapped ASGI app.
        civic_prefix: Path prefix of the civic routes, e.g. ``/api/v1/civic``.
        max_age: Seconds a successful civic GET may be cached by the client.
    """

    def __init__(self, app: ASGIApp, civic_prefix: str, max_age: int) -> None:
        super().__init__(app)
        self.civic_prefix = civic_prefix
        self.max_age = max_age

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"

        # Partial snapshots still answer 200; only cache fully successful ones
        cacheable = (
            request.method == "GET"
            and response.status_code == 200
            and request.url.path.startswith(self.civic_prefix)
            and response.headers.get("X-Snapshot-Complete", "true") == "true"
        )
        response.headers["Cache-Control"] = f"private, max-age={self.max_age}" if cacheable else "no-store"
        return response


class UpstreamQuotaMiddleware(BaseHTTPMiddleware):
    """Sliding one-minute request quota per client on upstream-backed routes.

    Every counted request may spend Open States quota that all clients share,
    so a single noisy caller is cut off with 429 before it gets there.

    Args:
        app: The wrapped ASGI app.
        api_prefix: API version prefix the civic routes are mounted under.
        requests_per_minute: Counted requests allowed per client per window.
        proxy_headers: Headers trusted to carry the real client address.
        clock: Monotonic time source in seconds.
    """

    def __init__(
        self,
        app: ASGIApp,
        api_prefix: str = "/api/v1",
        requests_per_minute: int = 60,
        proxy_headers: Iterable[str] = (),
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__(app)
        self.requests_per_minute = requests_per_minute
        self.proxy_headers = tuple(proxy_headers)
        self.counted_prefixes = tuple(f"{api_prefix}{route}" for route in UPSTREAM_ROUTES)
        self._clock = clock
        self._hits: dict[str, deque[float]] = {}

    def is_counted(self, path: str) -> bool:
        return path.startswith(self.counted_prefixes)

    @property
    def tracked_clients(self) -> int:
        return len(self._hits)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not self.is_counted(request.url.path):
            return await call_next(request)

        now = self._clock()
        self._evict(now - QUOTA_WINDOW_SECONDS)

        key = client_key(request, self.proxy_headers)
        hits = self._hits.setdefault(key, deque())
        if len(hits) >= self.requests_per_minute:
            retry_after = max(1, int(hits[0] + QUOTA_WINDOW_SECONDS - now) + 1)
            logger.warning("Upstream quota exhausted for {} on {}", key, request.url.path)
            body = ErrorResponse(detail="Rate limit exceeded", code="rate_limited")
            return JSONResponse(
                body.model_dump(),
                status_code=429,
                headers={"Retry-After": str(retry_after)},
            )

        hits.append(now)
        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(self.requests_per_minute)
        response.headers["X-RateLimit-Remaining"] = str(max(0, self.requests_per_minute - len(hits)))
        return response

    def _evict(self, window_start: float) -> None:
        """Drop timestamps older than the window and forget idle clients."""
        for key in list(self._hits):
            hits = self._hits[key]
            while hits and hits[0] <= window_start:
                hits.popleft()
            if not hits:
                del self._hits[key]
