"""
Airport Layer.

Modules:
- directory: airport coordinates and timezones
- intelligence: facility record normalization and derived facility scores
- layover: quality score and advice for one specific connection
"""

from .directory import AirportDirectory
from .intelligence import (
    FacilitiesSource,
    StaticFacilitiesSource,
    count_available_facilities,
    data_confidence,
    facilities_from_intelligence,
    normalize_intelligence,
    resolve_airport,
)
from .layover import connection_advice, layover_quality

__all__ = [
    "AirportDirectory",
    "FacilitiesSource",
    "StaticFacilitiesSource",
    "count_available_facilities",
    "connection_advice",
    "data_confidence",
    "facilities_from_intelligence",
    "layover_quality",
    "normalize_intelligence",
    "resolve_airport",
]
