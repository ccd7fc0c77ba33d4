"""Open States API v3 provider for state legislators."""

from __future__ import annotations

from typing import Any

from loguru import logger

from civic_snapshot.lib.legislation.base import Pagination
from civic_snapshot.lib.officials.base import Legislator, PeoplePage
from civic_snapshot.lib.upstream.client import ResilientAPIClient

DEFAULT_PER_PAGE = 20


class OpenStatesPeopleProvider:
    """Looks up legislators through the Open States ``/people`` endpoints.

    Args:
        client: Resilient client pointed at the Open States base URL.
    """

    def __init__(self, client: ResilientAPIClient) -> None:
        self._client = client

    @property
    def provider_name(self) -> str:
        return self._client.source_name

    async def find_by_location(self, latitude: float, longitude: float) -> PeoplePage:
        """Fetch legislators representing a geographic point.

        Args:
            latitude: WGS84 latitude.
            longitude: WGS84 longitude.

        Returns:
            PeoplePage of the legislators for the point.
        """
        params = {"lat": latitude, "lng": longitude, "include": "offices"}
        return await self._client.fetch("/people.geo", params, decode=self._parse_page)

    async def search_people(
        self,
        jurisdiction: str,
        *,
        page: int = 1,
        per_page: int = DEFAULT_PER_PAGE,
    ) -> PeoplePage:
        """Fetch one page of current legislators for a jurisdiction.

        Args:
            jurisdiction: Open States jurisdiction ID.
            page: 1-based page number.
            per_page: Page size (1-100).

        Returns:
            PeoplePage with the parsed legislators and pagination.
        """
        params: dict[str, Any] = {
            "jurisdiction": jurisdiction,
            "per_page": per_page,
            "page": page,
            "include": "offices",
        }
        return await self._client.fetch("/people", params, decode=self._parse_page)

    def _parse_page(self, data: Any) -> PeoplePage:
        results = data["results"]
        if not isinstance(results, list):
            msg = f"'results' must be a list, got {type(results).__name__}"
            raise TypeError(msg)

        people = [p for raw in results if (p := self._map_person(raw)) is not None]
        pagination = data.get("pagination")
        return PeoplePage(
            results=tuple(people),
            pagination=Pagination.from_api(pagination) if pagination else None,
        )

    def _map_person(self, raw: Any) -> Legislator | None:
        """Map an Open States person, skipping records without a string id and name."""
        if not isinstance(raw, dict) or not _is_text(raw.get("id")) or not _is_text(raw.get("name")):
            logger.warning("Skipping Open States person with missing id or name: {!r}", raw)
            return None
        return Legislator.from_api(raw)


def _is_text(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())
