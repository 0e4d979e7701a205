"""
Smart defaults for aircraft and airlines the enrichment layer did not know.

Equipment codes and carrier codes carry enough signal to beat a flat
"unknown" record: a 787 is next-generation whatever its operator, and
Gulf carriers run circadian cabin lighting.
"""

import logging

from ..types import Aircraft, Airline

logger = logging.getLogger(__name__)

NARROW_BODY_PATTERNS = ("73", "32", "21", "75", "22")
WIDE_BODY_PATTERNS = ("77", "78", "35", "33", "38", "74", "34")
NEXT_GEN_PATTERNS = ("78", "35", "22", "89")

MIDDLE_EAST_CARRIERS = frozenset({"EK", "QR", "EY", "WY", "GF"})
ASIAN_PREMIUM_CARRIERS = frozenset({"SQ", "NH", "JL", "CX", "TG", "KE"})
EUROPEAN_LEGACY_CARRIERS = frozenset({"BA", "AF", "LH", "KL", "AZ", "IB"})
US_MAJOR_CARRIERS = frozenset({"AA", "DL", "UA"})
BUDGET_CARRIERS = frozenset({"FR", "U2", "W6", "NK", "F9"})


def default_aircraft(type_code: str | None) -> Aircraft:
    """Infer cabin characteristics from an equipment code."""
    code = (type_code or "").upper()
    is_next_gen = any(p in code for p in NEXT_GEN_PATTERNS)
    is_wide_body = any(p in code for p in WIDE_BODY_PATTERNS)

    if is_next_gen:
        sleep_score = 8.0
    elif is_wide_body:
        sleep_score = 7.0
    else:
        sleep_score = 6.0

    return Aircraft(
        type_code=type_code or "Unknown",
        manufacturer="Other",
        sleep_score=sleep_score,
        generation="next-gen" if is_next_gen else "modern",
        cabin_pressure_ft=6000 if is_next_gen else 8000,
        cabin_humidity=16 if is_next_gen else 12,
        noise_level_db=65 if is_next_gen else 75,
        inferred=True,
    )


def default_airline(code: str | None) -> Airline:
    """Infer service characteristics from a carrier code."""
    if not code:
        logger.warning("Missing airline code, using generic defaults")
        return Airline(code="UNKNOWN", name="Unknown Airline", inferred=True)

    carrier = code.upper()
    if carrier in MIDDLE_EAST_CARRIERS or carrier in ASIAN_PREMIUM_CARRIERS:
        return Airline(
            code=code,
            name="Premium Carrier",
            service_quality=8.0,
            jetlag_optimization=7.0,
            lighting_protocol="circadian-optimized",
            inferred=True,
        )
    if carrier in EUROPEAN_LEGACY_CARRIERS or carrier in US_MAJOR_CARRIERS:
        return Airline(
            code=code,
            name="Legacy Carrier",
            service_quality=6.5,
            jetlag_optimization=5.5,
            lighting_protocol="manual-dimming",
            inferred=True,
        )
    if carrier in BUDGET_CARRIERS:
        return Airline(
            code=code,
            name="Budget Carrier",
            service_quality=4.5,
            jetlag_optimization=3.0,
            lighting_protocol="none",
            inferred=True,
        )
    return Airline(code=code, name="Regional Carrier", inferred=True)


def segment_aircraft(aircraft: Aircraft | None, type_code: str | None = None) -> Aircraft:
    return aircraft if aircraft is not None else default_aircraft(type_code)


def segment_airline(airline: Airline | None, flight_number: str = "") -> Airline:
    """Resolve a segment's airline, taking the carrier from the flight number if needed."""
    if airline is not None:
        return airline
    return default_airline(flight_number[:2] if len(flight_number) >= 2 else None)
