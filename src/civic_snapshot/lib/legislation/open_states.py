"""Open States API v3 provider for state legislative bills."""

from __future__ import annotations

from typing import Any

from loguru import logger

from civic_snapshot.lib.legislation.base import Bill, BillPage, Pagination
from civic_snapshot.lib.upstream.client import ResilientAPIClient

BILL_SORT_OPTIONS = frozenset(
    {
        "updated_asc",
        "updated_desc",
        "first_action_asc",
        "first_action_desc",
        "latest_action_asc",
        "latest_action_desc",
    }
)
DEFAULT_SORT = "updated_desc"
DEFAULT_PER_PAGE = 20


class OpenStatesBillsProvider:
    """Searches bills by jurisdiction through the Open States ``/bills`` endpoint.

    Args:
        client: Resilient client pointed at the Open States base URL.
    """

    def __init__(self, client: ResilientAPIClient) -> None:
        self._client = client

    @property
    def provider_name(self) -> str:
        return self._client.source_name

    async def search_bills(
        self,
        jurisdiction: str,
        *,
        session: str | None = None,
        updated_since: str | None = None,
        page: int = 1,
        per_page: int = DEFAULT_PER_PAGE,
        sort: str | None = DEFAULT_SORT,
    ) -> BillPage:
        """Fetch one page of bills for a jurisdiction.

        Args:
            jurisdiction: Open States jurisdiction ID.
            session: Optional legislative session identifier.
            updated_since: Optional ISO date lower bound on ``updated_at``.
            page: 1-based page number.
            per_page: Page size (1-100).
            sort: One of BILL_SORT_OPTIONS.

        Returns:
            BillPage with the parsed bills and pagination.
        """
        if sort is not None and sort not in BILL_SORT_OPTIONS:
            msg = f"Unsupported bill sort {sort!r}. Available: {sorted(BILL_SORT_OPTIONS)}"
            raise ValueError(msg)

        params: dict[str, str | int | None] = {
            "jurisdiction": jurisdiction,
            "session": session,
            "updated_since": updated_since,
            "per_page": per_page,
            "page": page,
            "sort": sort,
        }
        page_result: BillPage = await self._client.fetch("/bills", params, decode=self._parse_page)
        logger.debug("Fetched {} bills for {}", len(page_result.results), jurisdiction)
        return page_result

    def _parse_page(self, data: Any) -> BillPage:
        results = data["results"]
        if not isinstance(results, list):
            msg = f"'results' must be a list, got {type(results).__name__}"
            raise TypeError(msg)

        bills: list[Bill] = []
        for raw in results:
            bill = self._map_bill(raw)
            if bill is not None:
                bills.append(bill)

        pagination = data.get("pagination")
        return BillPage(
            results=tuple(bills),
            pagination=Pagination.from_api(pagination) if pagination else None,
        )

    def _map_bill(self, raw: Any) -> Bill | None:
        """Map an Open States bill, skipping records without a string id and title."""
        if not isinstance(raw, dict) or not _is_text(raw.get("id")) or not _is_text(raw.get("title")):
            logger.warning("Skipping Open States bill with missing id or title: {!r}", raw)
            return None
        return Bill.from_api(raw)


def _is_text(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())
