"""Zippopotam.us ZIP code geocoder.

Free, key-less API returning place name, state and coordinates for a
US ZIP code: ``GET /us/{zip}``.
"""

from __future__ import annotations

import math
from typing import Any

from loguru import logger

from civic_snapshot.lib.geocoder.base import GeocodeResult, normalize_zip_code
from civic_snapshot.lib.upstream.client import ResilientAPIClient
from civic_snapshot.lib.upstream.errors import DecodeError, NotFoundError, UpstreamError

DEFAULT_BASE_URL = "https://api.zippopotam.us"


class ZippopotamGeocoder:
    """Resolves ZIP codes to coordinates, city, state and county.

    Args:
        client: Resilient client pointed at the Zippopotam base URL.
    """

    def __init__(self, client: ResilientAPIClient) -> None:
        self._client = client

    @property
    def provider_name(self) -> str:
        return self._client.source_name

    async def geocode_zip(self, zip_code: str) -> GeocodeResult:
        """Geocode a five-digit US ZIP code.

        Args:
            zip_code: ZIP code, e.g. "02139".

        Returns:
            GeocodeResult for the first place listed for the ZIP.

        Raises:
            ValueError: If the ZIP code is malformed.
            NotFoundError: If the upstream has no place for the ZIP.
            DecodeError: If the place has no usable coordinates.
        """
        zip_code = normalize_zip_code(zip_code)
        try:
            data = await self._client.fetch(f"/us/{zip_code}")
        except UpstreamError as exc:
            # Unknown ZIPs answer 404; 5xx that outlived the retries stay upstream errors
            if exc.status_code < 500:
                raise NotFoundError(self.provider_name, f"ZIP code {zip_code} not found") from exc
            raise
        return self._parse_response(zip_code, data)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.close()

    def _parse_response(self, zip_code: str, data: Any) -> GeocodeResult:
        places = data.get("places") if isinstance(data, dict) else None
        if not places:
            raise NotFoundError(self.provider_name, f"No location data found for ZIP code {zip_code}")
        if not isinstance(places, list) or not isinstance(places[0], dict):
            logger.error("Unexpected places payload for ZIP code {}: {!r}", zip_code, places)
            raise DecodeError(self.provider_name, f"Malformed location data for ZIP code {zip_code}")

        place = places[0]
        try:
            lat = float(place["latitude"])
            lng = float(place["longitude"])
        except (KeyError, TypeError, ValueError) as exc:
            logger.error("Invalid coordinates for ZIP code {}: {!r}", zip_code, place)
            raise DecodeError(self.provider_name, f"Invalid coordinates for ZIP code {zip_code}") from exc
        if math.isnan(lat) or math.isnan(lng):
            raise DecodeError(self.provider_name, f"Invalid coordinates for ZIP code {zip_code}")

        try:
            return GeocodeResult(
                zip_code=zip_code,
                latitude=lat,
                longitude=lng,
                city=place.get("place name") or "",
                state=place.get("state") or "",
                state_abbreviation=place.get("state abbreviation") or None,
                county=place.get("county") or None,
            )
        except ValueError as exc:
            raise DecodeError(self.provider_name, str(exc)) from exc
