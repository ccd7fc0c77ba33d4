"""Civic snapshot service: geocode, fan out to bills and legislators, merge.

Stages per request:
    1. Geocode the ZIP (cached 1 hour). Failure aborts the aggregation.
    2. Fetch bills by state and legislators by coordinates concurrently,
       each behind its own cache entry and failure domain.
    3. Score/sort bills by impact and rank legislators.
    4. Assemble a CivicSnapshot with independent outcome slots.

Retries live inside ResilientAPIClient only; no stage retries another.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime

from loguru import logger

from civic_snapshot.core.config import Settings
from civic_snapshot.lib.cache import CacheStats, CoalescingCache
from civic_snapshot.lib.geocoder import GeocodeResult, ZippopotamGeocoder, normalize_zip_code
from civic_snapshot.lib.jurisdiction import resolve_jurisdiction
from civic_snapshot.lib.legislation import (
    BillCategory,
    OpenStatesBillsProvider,
    ScoredBill,
    ScoredBillPage,
    score_bills,
)
from civic_snapshot.lib.officials import Legislator, OpenStatesPeopleProvider, PeoplePage, rank_legislators
from civic_snapshot.lib.upstream import (
    ConfigError,
    ErrorCode,
    ErrorDescriptor,
    Outcome,
    ResilientAPIClient,
)

GEOCODE_TTL = 3600.0
BILLS_TTL = 600.0
LEGISLATORS_TTL = 600.0


@dataclass(frozen=True)
class CivicSnapshot:
    """Aggregate civic data for one ZIP code."""

    zip_code: str
    geocode: Outcome[GeocodeResult]
    bills: Outcome[list[ScoredBill]]
    legislators: Outcome[list[Legislator]]
    generated_at: datetime

    @property
    def complete(self) -> bool:
        """Whether every stage succeeded."""
        return self.geocode.ok and self.bills.ok and self.legislators.ok


class SnapshotService:
    """Aggregates geocode, bills and legislators behind a coalescing cache.

    Args:
        geocoder: ZIP code geocoder.
        bills_provider: Bill search provider.
        people_provider: Legislator lookup provider.
        cache: Shared coalescing cache. A private one is created if omitted.
        geocode_ttl: Seconds a geocode result stays fresh.
        bills_ttl: Seconds a bill page stays fresh.
        legislators_ttl: Seconds a legislator lookup stays fresh.
        bills_per_page: Bills fetched per state for a snapshot.
        bills_sort: Open States sort order for bill searches.
        now: Callable returning the current aware datetime; used for impact scoring.
        clients: HTTP clients closed by ``close()``.
    """

    def __init__(
        self,
        geocoder: ZippopotamGeocoder,
        bills_provider: OpenStatesBillsProvider,
        people_provider: OpenStatesPeopleProvider,
        *,
        cache: CoalescingCache | None = None,
        geocode_ttl: float = GEOCODE_TTL,
        bills_ttl: float = BILLS_TTL,
        legislators_ttl: float = LEGISLATORS_TTL,
        bills_per_page: int = 10,
        bills_sort: str = "updated_desc",
        now: Callable[[], datetime] | None = None,
        clients: Sequence[ResilientAPIClient] = (),
    ) -> None:
        self._geocoder = geocoder
        self._bills = bills_provider
        self._people = people_provider
        self._cache = cache or CoalescingCache()
        self._geocode_ttl = geocode_ttl
        self._bills_ttl = bills_ttl
        self._legislators_ttl = legislators_ttl
        self._bills_per_page = bills_per_page
        self._bills_sort = bills_sort
        self._now = now or (lambda: datetime.now(UTC))
        self._clients = tuple(clients)

    # ------------------------------------------------------------------
    # Individual lookups
    # ------------------------------------------------------------------

    async def geocode_zip(self, zip_code: str) -> GeocodeResult:
        """Resolve a ZIP code to a location, read through the cache.

        Raises:
            ValueError: If the ZIP code is malformed.
            CivicDataError: On upstream failure.
        """
        zip_code = normalize_zip_code(zip_code)
        result: GeocodeResult = await self._cache.get_or_fetch(
            ("geocode", zip_code),
            lambda: self._geocoder.geocode_zip(zip_code),
            self._geocode_ttl,
        )
        return result

    async def search_bills(
        self,
        state: str,
        *,
        session: str | None = None,
        page: int = 1,
        per_page: int | None = None,
        category: BillCategory | None = None,
    ) -> ScoredBillPage:
        """Fetch, score and sort one page of bills for a state.

        The raw page is cached; scoring always uses the current time.

        Args:
            state: State name or abbreviation.
            session: Optional legislative session identifier.
            page: 1-based page number.
            per_page: Page size. Defaults to the configured snapshot size.
            category: Optional category filter applied after scoring.

        Raises:
            InvalidStateError: If the state is not recognized.
            CivicDataError: On upstream failure.
        """
        jurisdiction = resolve_jurisdiction(state)
        per_page = per_page or self._bills_per_page
        key = ("bills", jurisdiction, session, page, per_page, self._bills_sort)

        bill_page = await self._cache.get_or_fetch(
            key,
            lambda: self._bills.search_bills(
                jurisdiction,
                session=session,
                page=page,
                per_page=per_page,
                sort=self._bills_sort,
            ),
            self._bills_ttl,
        )

        scored = score_bills(bill_page.results, self._now())
        if category is not None:
            scored = [b for b in scored if b.category == category]
        return ScoredBillPage(results=scored, pagination=bill_page.pagination)

    async def find_legislators_by_location(self, latitude: float, longitude: float) -> list[Legislator]:
        """Look up and rank the legislators representing a point.

        Raises:
            CivicDataError: On upstream failure.
        """
        people: PeoplePage = await self._cache.get_or_fetch(
            ("legislators.geo", latitude, longitude),
            lambda: self._people.find_by_location(latitude, longitude),
            self._legislators_ttl,
        )
        return rank_legislators(people.results)

    async def find_legislators_by_state(self, state: str, *, page: int = 1, per_page: int = 20) -> PeoplePage:
        """Look up one page of a state's legislators, ranked within the page.

        Raises:
            InvalidStateError: If the state is not recognized.
            CivicDataError: On upstream failure.
        """
        jurisdiction = resolve_jurisdiction(state)
        people: PeoplePage = await self._cache.get_or_fetch(
            ("legislators.state", jurisdiction, page, per_page),
            lambda: self._people.search_people(jurisdiction, page=page, per_page=per_page),
            self._legislators_ttl,
        )
        return PeoplePage(results=tuple(rank_legislators(people.results)), pagination=people.pagination)

    # ------------------------------------------------------------------
    # Aggregation
    # ------------------------------------------------------------------

    async def get_civic_snapshot(self, zip_code: str, *, category: BillCategory | None = None) -> CivicSnapshot:
        """Build the civic snapshot for a ZIP code.

        Never raises for upstream or input errors: every failure is recorded
        in the affected outcome slot. A geocode failure leaves the bills and
        legislators slots as ``not_attempted``.

        Args:
            zip_code: Five-digit US ZIP code.
            category: Optional bill category filter.

        Returns:
            CivicSnapshot with independent geocode, bills and legislators outcomes.
        """
        generated_at = self._now()
        zip_code = zip_code.strip()

        try:
            geocode = await self.geocode_zip(zip_code)
        except Exception as exc:
            error = self._describe_failure("geocode", zip_code, exc)
            skipped = ErrorDescriptor(
                code=ErrorCode.NOT_ATTEMPTED,
                message="Skipped because the ZIP code could not be geocoded",
            )
            return CivicSnapshot(
                zip_code=zip_code,
                geocode=Outcome.failure(error),
                bills=Outcome.failure(skipped, []),
                legislators=Outcome.failure(skipped, []),
                generated_at=generated_at,
            )

        bills, legislators = await asyncio.gather(
            self._bills_outcome(geocode, category),
            self._legislators_outcome(geocode),
        )
        logger.info(
            "Snapshot for {}: bills={} legislators={}",
            zip_code,
            _slot_status(bills),
            _slot_status(legislators),
        )
        return CivicSnapshot(
            zip_code=zip_code,
            geocode=Outcome.success(geocode),
            bills=bills,
            legislators=legislators,
            generated_at=generated_at,
        )

    def cache_stats(self) -> CacheStats:
        """Return the shared cache counters."""
        return self._cache.stats()

    async def close(self) -> None:
        """Close all HTTP clients owned by the service."""
        for client in self._clients:
            await client.close()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _bills_outcome(
        self, geocode: GeocodeResult, category: BillCategory | None
    ) -> Outcome[list[ScoredBill]]:
        state = geocode.state_abbreviation or geocode.state
        try:
            page = await self.search_bills(state, category=category)
        except Exception as exc:
            return Outcome.failure(self._describe_failure("bills", state, exc), [])
        return Outcome.success(page.results)

    async def _legislators_outcome(self, geocode: GeocodeResult) -> Outcome[list[Legislator]]:
        try:
            legislators = await self.find_legislators_by_location(geocode.latitude, geocode.longitude)
        except Exception as exc:
            key = f"{geocode.latitude},{geocode.longitude}"
            return Outcome.failure(self._describe_failure("legislators", key, exc), [])
        return Outcome.success(legislators)

    @staticmethod
    def _describe_failure(stage: str, key: str, exc: Exception) -> ErrorDescriptor:
        descriptor = ErrorDescriptor.from_exception(exc)
        if descriptor.code is ErrorCode.INTERNAL_ERROR:
            logger.opt(exception=exc).error("Unexpected error in {} stage for {}", stage, key)
        else:
            logger.warning("{} stage failed for {}: [{}] {}", stage, key, descriptor.code, descriptor.message)
        return descriptor


def _slot_status(outcome: Outcome) -> str:
    return "ok" if outcome.error is None else outcome.error.code.value


def build_snapshot_service(
    settings: Settings,
    *,
    cache: CoalescingCache | None = None,
) -> SnapshotService:
    """Wire a SnapshotService from application settings.

    Args:
        settings: Application settings.
        cache: Optional shared cache.

    Returns:
        A ready SnapshotService. Call ``close()`` when done.

    Raises:
        ConfigError: If the Open States API key is not configured.
    """
    if not settings.openstates_api_key:
        raise ConfigError("open_states", "OPENSTATES_API_KEY is not configured")

    open_states_client = ResilientAPIClient(
        "open_states",
        settings.openstates_base_url,
        api_key=settings.openstates_api_key,
        api_key_param="apikey",
        max_retries=settings.upstream_max_retries,
        backoff_base=settings.upstream_backoff_base,
        timeout=settings.upstream_timeout,
    )
    geocoder_client = ResilientAPIClient(
        "zippopotam",
        settings.geocoder_base_url,
        max_retries=settings.upstream_max_retries,
        backoff_base=settings.upstream_backoff_base,
        timeout=settings.upstream_timeout,
    )

    return SnapshotService(
        ZippopotamGeocoder(geocoder_client),
        OpenStatesBillsProvider(open_states_client),
        OpenStatesPeopleProvider(open_states_client),
        cache=cache,
        geocode_ttl=settings.geocode_cache_ttl,
        bills_ttl=settings.bills_cache_ttl,
        legislators_ttl=settings.legislators_cache_ttl,
        bills_per_page=settings.bills_per_page,
        bills_sort=settings.bills_sort,
        clients=(geocoder_client, open_states_client),
    )
