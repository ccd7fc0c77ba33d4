"""Pydantic v2 schemas for ZIP code geocoding."""

from __future__ import annotations

from pydantic import BaseModel, Field

from civic_snapshot.lib.geocoder import GeocodeResult


class GeocodeResponse(BaseModel):
    """Location resolved from a ZIP code."""

    zip_code: str
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    city: str
    state: str
    state_abbreviation: str | None = None
    county: str | None = None

    @classmethod
    def from_domain(cls, result: GeocodeResult) -> GeocodeResponse:
        return cls(
            zip_code=result.zip_code,
            latitude=result.latitude,
            longitude=result.longitude,
            city=result.city,
            state=result.state,
            state_abbreviation=result.state_abbreviation,
            county=result.county,
        )


class JurisdictionResponse(BaseModel):
    """Canonical identifiers for a state input."""

    input: str
    state_code: str
    state_name: str
    jurisdiction: str
