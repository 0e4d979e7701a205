"""
Builders for flights and scored flights used across the test modules.

Every timestamp is a timezone-aware instant; naive datetimes only appear
in tests that check the degraded fallback.
"""

import sys
from datetime import datetime, timedelta
from pathlib import Path

import pytz

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from jetlag_ranking.scoring.enrichment import default_aircraft
from jetlag_ranking.scoring.holistic_scorer import classify_recommendation
from jetlag_ranking.types import (
    Aircraft,
    FlightOption,
    HolisticScore,
    ScoredFlight,
    Segment,
)


def at(tz_name: str, year: int, month: int, day: int, hour: int, minute: int = 0) -> datetime:
    """Local wall-clock time in an IANA timezone, as an aware instant."""
    return pytz.timezone(tz_name).localize(datetime(year, month, day, hour, minute))


def segment(
    origin: str,
    destination: str,
    departure: datetime | None,
    arrival: datetime | None,
    flight_number: str = "BA112",
    aircraft: str | Aircraft | None = "789",
    cabin_class: str = "economy",
) -> Segment:
    if isinstance(aircraft, str):
        aircraft = default_aircraft(aircraft)
    return Segment(
        origin=origin,
        destination=destination,
        departure=departure,
        arrival=arrival,
        flight_number=flight_number,
        aircraft=aircraft,
        cabin_class=cabin_class,
    )


def flight(flight_id: str, segments: list[Segment], price: float | None = 600.0) -> FlightOption:
    """Itinerary over the given segments; duration comes from the timestamps."""
    return FlightOption(
        id=flight_id,
        origin=segments[0].origin if segments else "",
        destination=segments[-1].destination if segments else "",
        segments=tuple(segments),
        total_duration_minutes=None,
        stops=max(0, len(segments) - 1),
        price=price,
    )


# =============================================================================
# Reference itineraries
# =============================================================================


def jfk_lhr_direct(flight_id: str = "direct", price: float | None = 600.0) -> FlightOption:
    """JFK 18:00 EDT -> LHR 06:00 BST, 7h block time."""
    return flight(
        flight_id,
        [
            segment(
                "JFK",
                "LHR",
                at("America/New_York", 2025, 6, 10, 18),
                at("Europe/London", 2025, 6, 11, 6),
            )
        ],
        price,
    )


def jfk_lhr_two_stop(flight_id: str = "two-stop", price: float | None = 600.0) -> FlightOption:
    """JFK 06:00 EDT -> BOS -> KEF -> LHR 23:00 BST."""
    return flight(
        flight_id,
        [
            segment(
                "JFK",
                "BOS",
                at("America/New_York", 2025, 6, 10, 6),
                at("America/New_York", 2025, 6, 10, 7, 30),
                flight_number="B6101",
                aircraft="320",
            ),
            segment(
                "BOS",
                "KEF",
                at("America/New_York", 2025, 6, 10, 9),
                at("Atlantic/Reykjavik", 2025, 6, 10, 18),
                flight_number="FI630",
                aircraft="320",
            ),
            segment(
                "KEF",
                "LHR",
                at("Atlantic/Reykjavik", 2025, 6, 10, 20),
                at("Europe/London", 2025, 6, 10, 23),
                flight_number="FI450",
                aircraft="320",
            ),
        ],
        price,
    )


def lax_nrt(flight_id: str = "lax-nrt", month: int = 1) -> FlightOption:
    """LAX 11:00 -> NRT 15:00 next day (11h block time in winter)."""
    departure = at("America/Los_Angeles", 2025, month, 15, 11)
    return flight(
        flight_id,
        [segment("LAX", "NRT", departure, departure + timedelta(hours=11), flight_number="NH105")],
    )


def nrt_lax(flight_id: str = "nrt-lax") -> FlightOption:
    """NRT 17:00 -> LAX 10:00 the same calendar day."""
    return flight(
        flight_id,
        [
            segment(
                "NRT",
                "LAX",
                at("Asia/Tokyo", 2025, 1, 20, 17),
                at("America/Los_Angeles", 2025, 1, 20, 10),
                flight_number="NH106",
            )
        ],
    )


def lhr_sin_syd(flight_id: str = "kangaroo", price: float | None = 1400.0) -> FlightOption:
    """LHR 09:00 GMT -> SIN, 3h layover during London night -> SYD."""
    return flight(
        flight_id,
        [
            segment(
                "LHR",
                "SIN",
                at("Europe/London", 2025, 3, 10, 9),
                at("Asia/Singapore", 2025, 3, 11, 6),
                flight_number="SQ317",
                aircraft="A359",
            ),
            segment(
                "SIN",
                "SYD",
                at("Asia/Singapore", 2025, 3, 11, 9),
                at("Australia/Sydney", 2025, 3, 11, 20),
                flight_number="SQ221",
                aircraft="A359",
            ),
        ],
        price,
    )


SIN_RECORD = {
    "iata_code": "SIN",
    "tier": "tier_1",
    "data_quality": "verified",
    "lounges": {
        "overall_quality": 8.0,
        "has_premium_lounges": True,
        "notable_lounges": ["SilverKris Lounge"],
        "best_for_jetlag": "Use the rooftop pool",
        "confidence": "high",
    },
    "jetlag_recovery": {
        "sleep_pod_quality_score": 7,
        "sleep_pod_provider": "Aerotel",
        "shower_quality_score": 6,
        "has_shower_facilities": True,
        "has_healthy_food": True,
        "outdoor_access": True,
    },
    "navigation": {
        "complexity_score": 2,
        "minimum_connection_time": 45,
        "realistic_connection_time": 60,
        "has_fast_track": True,
        "tips": "Follow the purple transfer signs",
    },
}


# =============================================================================
# Scored flights with fixed scores, for tradeoff and filter tests
# =============================================================================

BASE_DEPARTURE = datetime(2025, 6, 10, 18, 0, tzinfo=pytz.utc)
LAYOVER_MINUTES = 90


def scored_flight(
    flight_id: str,
    price: float | None,
    jetlag: float,
    recovery_days: float = 0.0,
    stops: int = 0,
    duration_minutes: float = 480,
    airline: str = "BA",
    cabin_class: str = "economy",
    departure: datetime | None = None,
    aircraft: str | Aircraft | None = "789",
) -> ScoredFlight:
    """
    A ScoredFlight with every sub-score set to `jetlag`.

    Segments split the duration evenly around 90-minute layovers, so the
    flight has real segment gaps for the layover rule.
    """
    departure = departure or BASE_DEPARTURE
    legs = stops + 1
    block = (duration_minutes - LAYOVER_MINUTES * stops) / legs
    hubs = ["KEF", "DUB", "AMS", "CDG"]
    airports = ["JFK", *hubs[:stops], "LHR"]

    segments = []
    clock = departure
    for i in range(legs):
        arrival = clock + timedelta(minutes=block)
        segments.append(
            segment(
                airports[i],
                airports[i + 1],
                clock,
                arrival,
                flight_number=f"{airline}{100 + i}",
                aircraft=aircraft,
                cabin_class=cabin_class,
            )
        )
        clock = arrival + timedelta(minutes=LAYOVER_MINUTES)

    option = FlightOption(
        id=flight_id,
        origin="JFK",
        destination="LHR",
        segments=tuple(segments),
        total_duration_minutes=duration_minutes,
        stops=stops,
        price=price,
    )
    score = HolisticScore(
        flight_id=flight_id,
        overall_jetlag_score=jetlag,
        circadian_score=jetlag,
        comfort_score=jetlag,
        strategy_score=jetlag,
        efficiency_score=jetlag,
        recommendation=classify_recommendation(jetlag),
        estimated_recovery_days=recovery_days,
    )
    return ScoredFlight(flight=option, score=score)


def ids(flights: list[ScoredFlight]) -> list[str]:
    return [f.flight.id for f in flights]
