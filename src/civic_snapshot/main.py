"""FastAPI application factory.

Creates the FastAPI app with lifespan management, exception handlers,
and OpenAPI metadata.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger

from civic_snapshot.core.config import get_settings
from civic_snapshot.core.logging import setup_logging
from civic_snapshot.lib.upstream import ConfigError
from civic_snapshot.services.snapshot_service import build_snapshot_service


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifecycle: build the snapshot service on startup, close it on shutdown."""
    settings = get_settings()
    setup_logging(settings.log_level, log_dir=settings.log_dir, json_logs=settings.log_json)

    app.state.snapshot_service = None
    app.state.startup_error = None
    try:
        app.state.snapshot_service = build_snapshot_service(settings)
    except ConfigError as e:
        # /health still answers; civic routes return 503
        logger.error("Snapshot service disabled: {}", e)
        app.state.startup_error = str(e)

    yield

    if app.state.snapshot_service is not None:
        await app.state.snapshot_service.close()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="Civic Snapshot API",
        description="Bills, legislators and location for a US ZIP code, aggregated from public civic data APIs",
        version="0.1.0",
        lifespan=lifespan,
    )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"detail": str(exc)},
        )

    @app.exception_handler(ConfigError)
    async def config_error_handler(request: Request, exc: ConfigError) -> JSONResponse:
        return JSONResponse(
            status_code=503,
            content={"detail": str(exc), "code": exc.code.value},
        )

    @app.get("/health", tags=["health"])
    async def health(request: Request) -> dict[str, str]:
        configured = getattr(request.app.state, "snapshot_service", None) is not None
        return {
            "status": "ok" if configured else "degraded",
            "environment": settings.environment,
        }

    from civic_snapshot.api.router import create_router, setup_middleware

    setup_middleware(app, settings)
    app.include_router(create_router(settings))

    return app
