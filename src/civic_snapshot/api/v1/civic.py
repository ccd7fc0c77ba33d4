"""Civic data API endpoints: snapshot, geocode, bills, legislators, and cache stats."""

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Response, status

from civic_snapshot.core.dependencies import get_snapshot_service
from civic_snapshot.lib.jurisdiction import resolve_jurisdiction, resolve_state_code, state_name
from civic_snapshot.lib.legislation import BillCategory
from civic_snapshot.lib.upstream import CivicDataError, ErrorCode, RateLimitedError
from civic_snapshot.schemas.bill import BillListResponse
from civic_snapshot.schemas.common import PaginationMeta
from civic_snapshot.schemas.geocoding import GeocodeResponse, JurisdictionResponse
from civic_snapshot.schemas.legislator import LegislatorListResponse, LegislatorResponse
from civic_snapshot.schemas.snapshot import CacheStatsResponse, CivicSnapshotResponse
from civic_snapshot.services.snapshot_service import SnapshotService

civic_router = APIRouter(prefix="/civic", tags=["civic"])

ERROR_STATUS: dict[ErrorCode, int] = {
    ErrorCode.CONFIG_ERROR: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorCode.INVALID_STATE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.RATE_LIMITED: status.HTTP_429_TOO_MANY_REQUESTS,
    ErrorCode.UPSTREAM_ERROR: status.HTTP_502_BAD_GATEWAY,
    ErrorCode.DECODE_ERROR: status.HTTP_502_BAD_GATEWAY,
    ErrorCode.TRANSPORT_ERROR: status.HTTP_504_GATEWAY_TIMEOUT,
}


def _http_error(exc: CivicDataError | ValueError) -> HTTPException:
    """Translate a civic data or input error into an HTTPException."""
    if not isinstance(exc, CivicDataError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))

    headers = None
    if isinstance(exc, RateLimitedError) and exc.retry_after:
        headers = {"Retry-After": exc.retry_after}
    return HTTPException(
        status_code=ERROR_STATUS.get(exc.code, status.HTTP_500_INTERNAL_SERVER_ERROR),
        detail=str(exc),
        headers=headers,
    )


@civic_router.get(
    "/snapshot/{zip_code}",
    response_model=CivicSnapshotResponse,
)
async def get_snapshot(
    response: Response,
    zip_code: str = Path(..., description="Five-digit US ZIP code"),
    category: BillCategory | None = Query(None, description="Only include bills in this category"),
    service: SnapshotService = Depends(get_snapshot_service),  # noqa: B008
) -> CivicSnapshotResponse:
    """Aggregate location, bills and legislators for a ZIP code.

    Bills and legislators fail independently: a failed slot carries an
    error and an empty list while the other slot is still returned. The
    response status reflects the geocode stage only; ``X-Snapshot-Complete``
    tells whether every slot succeeded.
    """
    snapshot = await service.get_civic_snapshot(zip_code, category=category)
    response.headers["X-Snapshot-Complete"] = "true" if snapshot.complete else "false"
    geocode_error = snapshot.geocode.error
    if geocode_error is not None:
        response.status_code = ERROR_STATUS.get(geocode_error.code, status.HTTP_500_INTERNAL_SERVER_ERROR)
    return CivicSnapshotResponse.from_domain(snapshot)


@civic_router.get(
    "/geocode/{zip_code}",
    response_model=GeocodeResponse,
)
async def geocode_zip(
    zip_code: str = Path(..., description="Five-digit US ZIP code"),
    service: SnapshotService = Depends(get_snapshot_service),  # noqa: B008
) -> GeocodeResponse:
    """Resolve a ZIP code to coordinates, city and state."""
    try:
        result = await service.geocode_zip(zip_code)
    except (CivicDataError, ValueError) as e:
        raise _http_error(e) from e
    return GeocodeResponse.from_domain(result)


@civic_router.get(
    "/bills",
    response_model=BillListResponse,
)
async def search_bills(
    state: str = Query(..., min_length=2, description="State name or two-letter abbreviation"),
    session: str | None = Query(None, description="Legislative session identifier"),
    page: int = Query(1, ge=1, description="Page number"),
    per_page: int | None = Query(None, ge=1, le=100, description="Bills per page"),
    category: BillCategory | None = Query(None, description="Only include bills in this category"),
    service: SnapshotService = Depends(get_snapshot_service),  # noqa: B008
) -> BillListResponse:
    """Search a state's bills, categorized and sorted by impact."""
    try:
        bill_page = await service.search_bills(
            state,
            session=session,
            page=page,
            per_page=per_page,
            category=category,
        )
    except (CivicDataError, ValueError) as e:
        raise _http_error(e) from e
    return BillListResponse.from_domain(bill_page)


@civic_router.get(
    "/legislators/location",
    response_model=LegislatorListResponse,
)
async def legislators_by_location(
    lat: float = Query(..., ge=-90, le=90, description="Latitude (WGS84)"),
    lng: float = Query(..., ge=-180, le=180, description="Longitude (WGS84)"),
    service: SnapshotService = Depends(get_snapshot_service),  # noqa: B008
) -> LegislatorListResponse:
    """Legislators representing a point, senators first."""
    try:
        legislators = await service.find_legislators_by_location(lat, lng)
    except (CivicDataError, ValueError) as e:
        raise _http_error(e) from e
    return LegislatorListResponse(items=[LegislatorResponse.from_domain(p) for p in legislators])


@civic_router.get(
    "/legislators/state",
    response_model=LegislatorListResponse,
)
async def legislators_by_state(
    state: str = Query(..., min_length=2, description="State name or two-letter abbreviation"),
    page: int = Query(1, ge=1, description="Page number"),
    per_page: int = Query(20, ge=1, le=100, description="Legislators per page"),
    service: SnapshotService = Depends(get_snapshot_service),  # noqa: B008
) -> LegislatorListResponse:
    """One page of a state's current legislators, senators first."""
    try:
        people = await service.find_legislators_by_state(state, page=page, per_page=per_page)
    except (CivicDataError, ValueError) as e:
        raise _http_error(e) from e
    return LegislatorListResponse(
        items=[LegislatorResponse.from_domain(p) for p in people.results],
        pagination=PaginationMeta.from_domain(people.pagination),
    )


@civic_router.get(
    "/jurisdictions/{state}",
    response_model=JurisdictionResponse,
)
async def get_jurisdiction(
    state: str = Path(..., description="State name or two-letter abbreviation"),
) -> JurisdictionResponse:
    """Resolve a state input to its Open States jurisdiction ID."""
    try:
        return JurisdictionResponse(
            input=state,
            state_code=resolve_state_code(state),
            state_name=state_name(state),
            jurisdiction=resolve_jurisdiction(state),
        )
    except CivicDataError as e:
        raise _http_error(e) from e


@civic_router.get(
    "/cache/stats",
    response_model=CacheStatsResponse,
)
async def cache_stats(
    service: SnapshotService = Depends(get_snapshot_service),  # noqa: B008
) -> CacheStatsResponse:
    """Counters of the shared upstream response cache."""
    return CacheStatsResponse.from_domain(service.cache_stats())
