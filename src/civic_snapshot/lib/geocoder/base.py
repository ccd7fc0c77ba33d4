"""Geocoding result type and ZIP code validation."""

import re
from dataclasses import dataclass

_ZIP_RE = re.compile(r"^\d{5}$")


@dataclass(frozen=True)
class GeocodeResult:
    """Location resolved from a ZIP code."""

    zip_code: str
    latitude: float
    longitude: float
    city: str
    state: str
    state_abbreviation: str | None = None
    county: str | None = None

    def __post_init__(self) -> None:
        if not (-90 <= self.latitude <= 90):
            msg = f"latitude must be between -90 and 90, got {self.latitude}"
            raise ValueError(msg)
        if not (-180 <= self.longitude <= 180):
            msg = f"longitude must be between -180 and 180, got {self.longitude}"
            raise ValueError(msg)


def normalize_zip_code(zip_code: str) -> str:
    """Strip whitespace and validate a five-digit US ZIP code.

    Raises:
        ValueError: If the input is not exactly five digits.
    """
    normalized = zip_code.strip()
    if not _ZIP_RE.match(normalized):
        msg = f"ZIP code must be 5 digits, got {zip_code!r}"
        raise ValueError(msg)
    return normalized
