"""
JSON <-> dataclass conversion for the CLI and tool router.

Field names match the dataclasses (snake_case). Timestamps are ISO 8601
strings with an offset; a trailing "Z" is accepted.
"""

from dataclasses import asdict
from datetime import datetime
from typing import Any

from .formatting import describe_all, describe_category, describe_suggestion
from .types import (
    Aircraft,
    Airline,
    FilterSpec,
    FlightOption,
    Layover,
    SearchResultSet,
    Segment,
)


def parse_instant(value: str | None) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def to_dict(obj: object) -> object:
    """Convert dataclass instances to JSON-ready values recursively."""
    if hasattr(obj, "__dataclass_fields__"):
        return to_dict(asdict(obj))
    elif isinstance(obj, dict):
        return {k: to_dict(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [to_dict(item) for item in obj]
    elif isinstance(obj, datetime):
        return obj.isoformat()
    else:
        return obj


def aircraft_from_dict(data: dict[str, Any] | None) -> Aircraft | None:
    if not data:
        return None
    return Aircraft(
        type_code=data["type_code"],
        manufacturer=data.get("manufacturer", ""),
        sleep_score=data.get("sleep_score", 6.0),
        generation=data.get("generation", "modern"),
        cabin_pressure_ft=data.get("cabin_pressure_ft", 8000),
        cabin_humidity=data.get("cabin_humidity", 12),
        noise_level_db=data.get("noise_level_db"),
    )


def airline_from_dict(data: dict[str, Any] | None) -> Airline | None:
    if not data:
        return None
    return Airline(
        code=data["code"],
        name=data.get("name", ""),
        service_quality=data.get("service_quality", 6.0),
        jetlag_optimization=data.get("jetlag_optimization", 5.0),
        lighting_protocol=data.get("lighting_protocol"),
    )


def segment_from_dict(data: dict[str, Any]) -> Segment:
    aircraft = data.get("aircraft")
    aircraft_type = data.get("aircraft_type")
    if isinstance(aircraft, str):
        aircraft_type, aircraft = aircraft_type or aircraft, None
    elif aircraft and set(aircraft) == {"type_code"}:
        # A bare equipment code gets pattern-based defaults
        aircraft_type, aircraft = aircraft_type or aircraft["type_code"], None

    return Segment(
        origin=data["origin"],
        destination=data["destination"],
        departure=parse_instant(data.get("departure")),
        arrival=parse_instant(data.get("arrival")),
        flight_number=data.get("flight_number", ""),
        aircraft=aircraft_from_dict(aircraft),
        airline=airline_from_dict(data.get("airline")),
        cabin_class=data.get("cabin_class", "economy"),
        origin_tz=data.get("origin_tz"),
        dest_tz=data.get("dest_tz"),
        aircraft_type=aircraft_type,
    )


def layover_from_dict(data: dict[str, Any]) -> Layover:
    return Layover(
        airport=data["airport"],
        duration_minutes=data["duration_minutes"],
        arrival=parse_instant(data.get("arrival")),
        departure=parse_instant(data.get("departure")),
        international=data.get("international", False),
    )


def flight_from_dict(data: dict[str, Any]) -> FlightOption:
    segments = tuple(segment_from_dict(s) for s in data.get("segments", []))
    return FlightOption(
        id=str(data["id"]),
        origin=data.get("origin") or (segments[0].origin if segments else ""),
        destination=data.get("destination") or (segments[-1].destination if segments else ""),
        segments=segments,
        total_duration_minutes=data.get("total_duration_minutes"),
        stops=data.get("stops", max(0, len(segments) - 1)),
        price=data.get("price"),
        currency=data.get("currency", "USD"),
        layovers=tuple(layover_from_dict(l) for l in data.get("layovers", [])),
        booking_link=data.get("booking_link"),
    )


def _pair(value: list[str] | None) -> tuple[str, str] | None:
    return tuple(value) if value is not None else None


def _codes(value: list[str] | None) -> tuple[str, ...] | None:
    return tuple(value) if value is not None else None


def filter_spec_from_dict(data: dict[str, Any] | None) -> FilterSpec | None:
    if data is None:
        return None
    return FilterSpec(
        max_price=data.get("max_price"),
        min_price=data.get("min_price"),
        price_percentile=data.get("price_percentile", "all"),
        max_duration_minutes=data.get("max_duration_minutes"),
        max_stops=data.get("max_stops"),
        direct_only=data.get("direct_only", False),
        arrival_window=_pair(data.get("arrival_window")),
        departure_window=_pair(data.get("departure_window")),
        min_jetlag_score=data.get("min_jetlag_score"),
        max_recovery_days=data.get("max_recovery_days"),
        cabin_classes=_codes(data.get("cabin_classes")),
        preferred_airlines=_codes(data.get("preferred_airlines")),
        excluded_airlines=_codes(data.get("excluded_airlines")),
        modern_aircraft_only=data.get("modern_aircraft_only", False),
        min_layover_minutes=data.get("min_layover_minutes"),
        max_layover_minutes=data.get("max_layover_minutes"),
    )


def result_to_dict(result: SearchResultSet) -> dict[str, Any]:
    """Serialize a ranked result, adding display text next to every reason list."""
    flights = []
    for scored in result.flights:
        score = scored.score
        flights.append(
            {
                "flight": to_dict(scored.flight),
                "score": to_dict(score),
                "display_score": score.display_score,
                "value_score": scored.value_score,
                "categories": list(scored.categories),
                "text": {
                    "strengths": describe_all(score.strengths),
                    "weaknesses": describe_all(score.weaknesses),
                    "recommendations": describe_all(score.recommendations),
                    "critical_factors": describe_all(score.critical_factors),
                    "tradeoffs": describe_all(score.tradeoffs),
                },
            }
        )

    analysis = result.price_analysis
    currency = result.flights[0].flight.currency if result.flights else "USD"
    payload: dict[str, Any] = {
        "sort_key": result.sort_key,
        "flights": flights,
        "price_analysis": {
            "cheapest": analysis.cheapest.flight.id if analysis.cheapest else None,
            "best_jetlag": analysis.best_jetlag.flight.id if analysis.best_jetlag else None,
            "best_value": analysis.best_value.flight.id if analysis.best_value else None,
            "balanced": analysis.balanced.flight.id if analysis.balanced else None,
            "categories": {
                name: {**to_dict(category), "text": describe_category(category, currency)}
                for name, category in analysis.categories.items()
            },
            "value_scores": analysis.value_scores,
            "price_range": to_dict(analysis.price_range),
            "jetlag_range": to_dict(analysis.jetlag_range),
        },
        "filter_stats": {
            **to_dict(result.filter_stats),
            "removed_count": result.filter_stats.removed_count,
        },
        "suggestions": None,
    }

    if result.suggestions is not None:
        payload["suggestions"] = {
            **to_dict(result.suggestions),
            "text": [describe_suggestion(s, currency) for s in result.suggestions.relaxations],
        }
    return payload
