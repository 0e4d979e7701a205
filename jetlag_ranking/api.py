"""
Public entry points for the ranking engine.

Every call is synchronous and deterministic. The one write is
apply_filters pinning a price-percentile band on the FilterSpec it is
given. Callers that want caching wrap these functions; nothing is
memoized inside.
"""

from collections.abc import Sequence
from typing import Any

from . import filters as _filters
from . import tradeoff as _tradeoff
from .airports.directory import AirportDirectory
from .airports.intelligence import (
    FacilitiesSource,
    StaticFacilitiesSource,
    count_available_facilities,
    resolve_airport,
)
from .airports.layover import connection_advice, layover_quality
from .config import settings
from .formatting import describe_all
from .pipeline import rank_flights
from .science.circadian_model import build_profile
from .scoring.holistic_scorer import HolisticScorer
from .serialization import (
    filter_spec_from_dict,
    flight_from_dict,
    parse_instant,
    result_to_dict,
    to_dict,
)
from .types import (
    AirportLocation,
    FilterSpec,
    FilterStats,
    FilterSuggestions,
    FlightOption,
    HolisticScore,
    PriceAnalysis,
    ScoredFlight,
    SearchResultSet,
    SortKey,
)


def score(
    flight: FlightOption,
    candidate_set: Sequence[FlightOption] = (),
    directory: AirportDirectory | None = None,
    facilities: FacilitiesSource | None = None,
) -> HolisticScore:
    """Score one flight in the context of its search."""
    return HolisticScorer(directory, facilities).score(flight, candidate_set)


def analyze_tradeoffs(scored_set: Sequence[ScoredFlight]) -> PriceAnalysis:
    return _tradeoff.analyze_tradeoffs(scored_set)


def apply_filters(
    scored_set: Sequence[ScoredFlight], filter_spec: FilterSpec | None
) -> tuple[list[ScoredFlight], FilterStats]:
    return _filters.apply_filters(scored_set, filter_spec)


def sort(filtered: Sequence[ScoredFlight], sort_key: SortKey | None = None) -> list[ScoredFlight]:
    return _filters.sort_flights(filtered, sort_key)


def suggest_filters(
    scored_set: Sequence[ScoredFlight], filter_spec: FilterSpec | None = None
) -> FilterSuggestions:
    return _filters.suggest_filters(scored_set, filter_spec, limit=settings.suggestion_limit)


def rank(
    flights: Sequence[FlightOption],
    filter_spec: FilterSpec | None = None,
    sort_key: SortKey | None = None,
    directory: AirportDirectory | None = None,
    facilities: FacilitiesSource | None = None,
) -> SearchResultSet:
    """Score, categorize, filter and sort one search."""
    return rank_flights(
        flights,
        scorer=HolisticScorer(directory, facilities),
        filter_spec=filter_spec,
        sort_key=sort_key,
    )


# =============================================================================
# JSON tool router
# =============================================================================


def _context(arguments: dict[str, Any]) -> tuple[AirportDirectory, StaticFacilitiesSource]:
    directory = AirportDirectory.default()
    if arguments.get("airport_locations"):
        directory = directory.merged(AirportDirectory.from_records(arguments["airport_locations"]))
    return directory, StaticFacilitiesSource(arguments.get("airports") or {})


def rank_flights_tool(arguments: dict[str, Any]) -> dict[str, Any]:
    directory, facilities = _context(arguments)
    flights = [flight_from_dict(f) for f in arguments["flights"]]
    result = rank(
        flights,
        filter_spec=filter_spec_from_dict(arguments.get("filters")),
        sort_key=arguments.get("sort_by"),
        directory=directory,
        facilities=facilities,
    )
    return result_to_dict(result)


def score_flight_tool(arguments: dict[str, Any]) -> dict[str, Any]:
    directory, facilities = _context(arguments)
    flight = flight_from_dict(arguments["flight"])
    candidates = [flight_from_dict(f) for f in arguments.get("candidates", [])]
    result = score(flight, candidates, directory, facilities)
    return {
        **to_dict(result),
        "display_score": result.display_score,
        "text": {
            "strengths": describe_all(result.strengths),
            "weaknesses": describe_all(result.weaknesses),
            "recommendations": describe_all(result.recommendations),
            "critical_factors": describe_all(result.critical_factors),
        },
    }


def circadian_profile_tool(arguments: dict[str, Any]) -> dict[str, Any]:
    directory, _ = _context(arguments)
    origin = directory.get(arguments["origin"]) or AirportLocation(arguments["origin"])
    destination = directory.get(arguments["destination"]) or AirportLocation(arguments["destination"])
    profile = build_profile(
        origin,
        destination,
        parse_instant(arguments["departure"]),
        parse_instant(arguments["arrival"]),
    )
    return {**to_dict(profile), "adaptation": profile.adaptation}


def connection_advice_tool(arguments: dict[str, Any]) -> dict[str, Any]:
    _, facilities = _context(arguments)
    code = arguments["airport"]
    duration = arguments["duration_minutes"]
    intel, derived = resolve_airport(code, facilities)
    advice = connection_advice(intel, duration)
    return {
        "airport": intel.iata_code,
        "rating": advice.rating,
        "layover_quality": layover_quality(intel, duration, arguments.get("international", False)),
        "facilities": to_dict(derived),
        "facility_count": count_available_facilities(intel),
        "reasons": describe_all(advice.reasons),
        "tips": describe_all(advice.tips),
    }


def invoke_tool(tool_name: str, arguments: dict[str, Any]) -> dict[str, Any]:
    """Router function for CLI/subprocess invocation."""
    if tool_name == "rank_flights":
        return rank_flights_tool(arguments)
    elif tool_name == "score_flight":
        return score_flight_tool(arguments)
    elif tool_name == "circadian_profile":
        return circadian_profile_tool(arguments)
    elif tool_name == "connection_advice":
        return connection_advice_tool(arguments)
    else:
        raise ValueError(f"Unknown tool: {tool_name}")
