"""Tests for CORS, civic response headers, and the upstream quota middleware."""

import pytest
from fastapi import FastAPI, Response
from fastapi.testclient import TestClient
from starlette.requests import Request

from civic_snapshot.api.middleware import (
    CivicResponseHeadersMiddleware,
    UpstreamQuotaMiddleware,
    client_key,
    setup_cors,
)
from civic_snapshot.core.config import Settings

SNAPSHOT = "/api/v1/civic/snapshot/02139"
BILLS = "/api/v1/civic/bills"


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def _create_test_app() -> FastAPI:
    """Minimal app exposing civic-shaped routes and a health check."""
    app = FastAPI()

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    @app.get("/api/v1/civic/snapshot/{zip_code}")
    async def snapshot(zip_code: str, response: Response, complete: bool = True) -> dict:
        response.headers["X-Snapshot-Complete"] = "true" if complete else "false"
        return {"zip_code": zip_code}

    @app.get("/api/v1/civic/bills")
    async def bills() -> dict:
        return {"items": []}

    @app.get("/api/v1/civic/jurisdictions/{state}")
    async def jurisdictions(state: str) -> dict:
        return {"state": state}

    @app.get("/api/v1/civic/geocode/{zip_code}")
    async def geocode(zip_code: str) -> Response:
        return Response(status_code=404)

    return app


def _make_request(headers: dict[str, str] | None = None, client_host: str | None = "127.0.0.1") -> Request:
    scope: dict = {
        "type": "http",
        "method": "GET",
        "path": SNAPSHOT,
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
    }
    if client_host is not None:
        scope["client"] = (client_host, 0)
    return Request(scope)


class TestCivicResponseHeaders:
    @pytest.fixture
    def client(self) -> TestClient:
        app = _create_test_app()
        app.add_middleware(CivicResponseHeadersMiddleware, civic_prefix="/api/v1/civic", max_age=600)
        return TestClient(app)

    def test_hardening_headers_on_every_response(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"

    def test_complete_snapshot_is_cacheable(self, client: TestClient) -> None:
        response = client.get(SNAPSHOT)
        assert response.headers["Cache-Control"] == "private, max-age=600"

    def test_partial_snapshot_is_not_cached(self, client: TestClient) -> None:
        response = client.get(SNAPSHOT, params={"complete": "false"})
        assert response.status_code == 200
        assert response.headers["Cache-Control"] == "no-store"

    def test_error_responses_are_not_cached(self, client: TestClient) -> None:
        response = client.get("/api/v1/civic/geocode/00000")
        assert response.status_code == 404
        assert response.headers["Cache-Control"] == "no-store"

    def test_health_is_not_cached(self, client: TestClient) -> None:
        assert client.get("/health").headers["Cache-Control"] == "no-store"


class TestCors:
    def test_configured_origin_allowed(self) -> None:
        app = _create_test_app()
        setup_cors(app, Settings(_env_file=None, cors_origins="https://civic.example.org"))  # type: ignore[call-arg]
        client = TestClient(app)

        response = client.get("/health", headers={"Origin": "https://civic.example.org"})

        assert response.headers["access-control-allow-origin"] == "https://civic.example.org"

    def test_unlisted_origin_not_allowed(self) -> None:
        app = _create_test_app()
        setup_cors(app, Settings(_env_file=None, cors_origins="https://civic.example.org"))  # type: ignore[call-arg]
        client = TestClient(app)

        response = client.get("/health", headers={"Origin": "https://evil.example.com"})

        assert "access-control-allow-origin" not in response.headers


class TestUpstreamQuota:
    @pytest.fixture
    def clock(self) -> FakeClock:
        return FakeClock()

    @pytest.fixture
    def middleware_app(self, clock: FakeClock) -> tuple[FastAPI, list[UpstreamQuotaMiddleware]]:
        """App whose quota middleware instance is captured once Starlette builds the stack."""
        app = _create_test_app()
        instances: list[UpstreamQuotaMiddleware] = []

        class CapturingQuota(UpstreamQuotaMiddleware):
            def __init__(self, *args: object, **kwargs: object) -> None:
                super().__init__(*args, **kwargs)  # type: ignore[arg-type]
                instances.append(self)

        app.add_middleware(
            CapturingQuota,
            requests_per_minute=2,
            proxy_headers=["X-Real-IP"],
            clock=clock,
        )
        return app, instances

    def test_requests_within_quota_report_remaining(self, middleware_app: tuple) -> None:
        app, _ = middleware_app
        client = TestClient(app)

        first = client.get(SNAPSHOT)
        second = client.get(BILLS)

        assert first.status_code == 200
        assert first.headers["X-RateLimit-Limit"] == "2"
        assert first.headers["X-RateLimit-Remaining"] == "1"
        assert second.headers["X-RateLimit-Remaining"] == "0"

    def test_request_over_quota_returns_429(self, middleware_app: tuple) -> None:
        app, _ = middleware_app
        client = TestClient(app)
        client.get(SNAPSHOT)
        client.get(SNAPSHOT)

        response = client.get(SNAPSHOT)

        assert response.status_code == 429
        assert response.json() == {"detail": "Rate limit exceeded", "code": "rate_limited"}
        assert response.headers["Retry-After"] == "61"

    def test_health_and_cached_routes_are_not_counted(self, middleware_app: tuple) -> None:
        app, _ = middleware_app
        client = TestClient(app)

        for _ in range(5):
            assert client.get("/health").status_code == 200
            assert client.get("/api/v1/civic/jurisdictions/MA").status_code == 200

        assert client.get(SNAPSHOT).status_code == 200
        assert "X-RateLimit-Limit" not in client.get("/health").headers

    def test_window_expires(self, middleware_app: tuple, clock: FakeClock) -> None:
        app, _ = middleware_app
        client = TestClient(app)
        client.get(SNAPSHOT)
        client.get(SNAPSHOT)
        assert client.get(SNAPSHOT).status_code == 429

        clock.now += 61

        assert client.get(SNAPSHOT).status_code == 200

    def test_clients_limited_separately(self, middleware_app: tuple) -> None:
        app, _ = middleware_app
        client = TestClient(app)

        for _ in range(2):
            client.get(SNAPSHOT, headers={"X-Real-IP": "203.0.113.1"})

        assert client.get(SNAPSHOT, headers={"X-Real-IP": "203.0.113.1"}).status_code == 429
        assert client.get(SNAPSHOT, headers={"X-Real-IP": "203.0.113.2"}).status_code == 200

    def test_idle_clients_are_forgotten(self, middleware_app: tuple, clock: FakeClock) -> None:
        app, instances = middleware_app
        client = TestClient(app)
        for i in range(20):
            client.get(SNAPSHOT, headers={"X-Real-IP": f"198.51.100.{i}"})
        assert instances[0].tracked_clients == 20

        clock.now += 61
        client.get(SNAPSHOT, headers={"X-Real-IP": "203.0.113.9"})

        assert instances[0].tracked_clients == 1


class TestClientKey:
    def test_first_configured_header_wins(self) -> None:
        request = _make_request(headers={"CF-Connecting-IP": "203.0.113.1", "X-Real-IP": "192.0.2.1"})
        assert client_key(request, ["X-Real-IP", "CF-Connecting-IP"]) == "192.0.2.1"

    def test_x_forwarded_for_uses_leftmost_ip(self) -> None:
        request = _make_request(headers={"X-Forwarded-For": "203.0.113.1, 10.0.0.1"})
        assert client_key(request, ["X-Forwarded-For"]) == "203.0.113.1"

    def test_headers_ignored_unless_trusted(self) -> None:
        request = _make_request(headers={"X-Real-IP": "192.0.2.1"}, client_host="10.0.0.9")
        assert client_key(request) == "10.0.0.9"

    def test_returns_unknown_when_no_client(self) -> None:
        assert client_key(_make_request(client_host=None)) == "unknown"
