"""Root API router with /api/v1 prefix and middleware registration."""

from fastapi import APIRouter, FastAPI

from civic_snapshot.api.middleware import CivicResponseHeadersMiddleware, UpstreamQuotaMiddleware, setup_cors
from civic_snapshot.core.config import Settings


def create_router(settings: Settings) -> APIRouter:
    """Create the root API router with all sub-routers included.

    Args:
        settings: Application settings.

    Returns:
        Configured API router.
    """
    from civic_snapshot.api.v1.civic import civic_router

    root_router = APIRouter(prefix=settings.api_v1_prefix)
    root_router.include_router(civic_router)
    return root_router


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Register all middleware on the FastAPI app.

    Client-side reuse of civic responses is capped at the shortest
    server-side TTL so a client never holds data the server would refetch.

    Args:
        app: The FastAPI application.
        settings: Application settings.
    """
    setup_cors(app, settings)
    app.add_middleware(
        CivicResponseHeadersMiddleware,
        civic_prefix=f"{settings.api_v1_prefix}/civic",
        max_age=int(min(settings.bills_cache_ttl, settings.legislators_cache_ttl, settings.geocode_cache_ttl)),
    )
    app.add_middleware(
        UpstreamQuotaMiddleware,
        api_prefix=settings.api_v1_prefix,
        requests_per_minute=settings.rate_limit_per_minute,
        proxy_headers=settings.trusted_proxy_header_list,
    )
