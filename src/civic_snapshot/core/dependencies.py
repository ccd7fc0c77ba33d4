"""FastAPI dependency injection for the snapshot service."""

from fastapi import HTTPException, Request, status

from civic_snapshot.services.snapshot_service import SnapshotService


def get_snapshot_service(request: Request) -> SnapshotService:
    """Return the SnapshotService built during application startup.

    Raises:
        HTTPException: 503 if the service could not be configured.
    """
    service: SnapshotService | None = getattr(request.app.state, "snapshot_service", None)
    if service is None:
        detail = getattr(request.app.state, "startup_error", None) or "Snapshot service is not configured"
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=detail)
    return service
