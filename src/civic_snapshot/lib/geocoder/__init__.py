"""Geocoder library — ZIP code to location resolution.

Public API:
    - GeocodeResult: Resolved location dataclass
    - ZippopotamGeocoder: Zippopotam.us provider
    - normalize_zip_code: Validate a five-digit ZIP code
"""

from civic_snapshot.lib.geocoder.base import GeocodeResult, normalize_zip_code
from civic_snapshot.lib.geocoder.zippopotam import ZippopotamGeocoder

__all__ = [
    "GeocodeResult",
    "ZippopotamGeocoder",
    "normalize_zip_code",
]
