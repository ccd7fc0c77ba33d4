"""Pydantic v2 schemas for the aggregate civic snapshot."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from civic_snapshot.lib.cache import CacheStats
from civic_snapshot.schemas.bill import BillResponse
from civic_snapshot.schemas.common import ErrorDescriptorResponse
from civic_snapshot.schemas.geocoding import GeocodeResponse
from civic_snapshot.schemas.legislator import LegislatorResponse
from civic_snapshot.services.snapshot_service import CivicSnapshot


class GeocodeOutcomeResponse(BaseModel):
    """Geocode slot: the location, or the error that aborted the snapshot."""

    ok: bool
    data: GeocodeResponse | None = None
    error: ErrorDescriptorResponse | None = None


class BillsOutcomeResponse(BaseModel):
    """Bills slot: scored bills, or an empty list and an error."""

    ok: bool
    items: list[BillResponse] = Field(default_factory=list)
    error: ErrorDescriptorResponse | None = None


class LegislatorsOutcomeResponse(BaseModel):
    """Legislators slot: ranked legislators, or an empty list and an error."""

    ok: bool
    items: list[LegislatorResponse] = Field(default_factory=list)
    error: ErrorDescriptorResponse | None = None


class CivicSnapshotResponse(BaseModel):
    """Aggregate civic data for a ZIP code with independent outcome slots."""

    zip_code: str
    generated_at: datetime
    geocode: GeocodeOutcomeResponse
    bills: BillsOutcomeResponse
    legislators: LegislatorsOutcomeResponse

    @classmethod
    def from_domain(cls, snapshot: CivicSnapshot) -> CivicSnapshotResponse:
        geocode = snapshot.geocode
        bills = snapshot.bills
        legislators = snapshot.legislators
        return cls(
            zip_code=snapshot.zip_code,
            generated_at=snapshot.generated_at,
            geocode=GeocodeOutcomeResponse(
                ok=geocode.ok,
                data=GeocodeResponse.from_domain(geocode.value) if geocode.value is not None else None,
                error=ErrorDescriptorResponse.from_domain(geocode.error),
            ),
            bills=BillsOutcomeResponse(
                ok=bills.ok,
                items=[BillResponse.from_domain(b) for b in bills.value or []],
                error=ErrorDescriptorResponse.from_domain(bills.error),
            ),
            legislators=LegislatorsOutcomeResponse(
                ok=legislators.ok,
                items=[LegislatorResponse.from_domain(p) for p in legislators.value or []],
                error=ErrorDescriptorResponse.from_domain(legislators.error),
            ),
        )


class CacheStatsResponse(BaseModel):
    """Counters of the shared upstream cache."""

    hits: int
    misses: int
    coalesced: int
    expired: int
    failures: int
    entries: int
    in_flight: int

    @classmethod
    def from_domain(cls, stats: CacheStats) -> CacheStatsResponse:
        return cls(
            hits=stats.hits,
            misses=stats.misses,
            coalesced=stats.coalesced,
            expired=stats.expired,
            failures=stats.failures,
            entries=stats.entries,
            in_flight=stats.in_flight,
        )
