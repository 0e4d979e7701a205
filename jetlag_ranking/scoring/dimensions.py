"""
The four holistic sub-scores, each 0-100.

- circadian: departure/arrival timing, body clock shift, light exposure,
  airline lighting protocols
- comfort: aircraft, airline, seat and cabin environment, blended with the
  comfort of layover airports
- strategy: routing, layover quality, airport facilities, nap windows and
  connection phasing
- efficiency: duration and stops relative to the best itinerary on the same
  route in the candidate set
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta

import pytz

from ..airports.layover import layover_quality
from ..time_utils import is_known_timezone, local_hour
from ..types import CircadianProfile, FlightOption
from .itinerary import ResolvedItinerary, ResolvedLayover, ResolvedSegment, segment_gaps


@dataclass
class DimensionScore:
    score: float
    components: dict[str, float] = field(default_factory=dict)


# =============================================================================
# Circadian
# =============================================================================

CIRCADIAN_COMPONENT_WEIGHTS = {
    "departure_timing": 0.28,
    "arrival_timing": 0.28,
    "body_clock_alignment": 0.24,
    "light_exposure": 0.12,
    "airline_lighting": 0.08,
}

LIGHTING_PROTOCOL_SCORES = {
    "circadian-optimized": 95.0,
    "manual-dimming": 65.0,
    "none": 50.0,
}


def departure_timing_score(adaptation: str, departure_hour: float) -> float:
    """
    Eastward (advance) trips favor evening departures so the traveler
    sleeps on board; westward (delay) trips favor daytime departures.
    """
    hour = int(departure_hour)
    if adaptation == "advance":
        if 16 <= hour <= 23:
            return 95.0 - abs(hour - 18) * 5
        if 12 <= hour < 16:
            return 65.0
        if hour < 6:
            return 30.0
        return 40.0
    if adaptation == "delay":
        if 8 <= hour <= 16:
            return 95.0 - abs(hour - 12) * 5
        if 16 < hour < 20:
            return 55.0
        return 30.0
    return 50.0


def body_clock_alignment_score(timezones_crossed: float) -> float:
    return max(0.0, 100.0 - timezones_crossed * 6)


def light_exposure_score(adaptation: str, departure_hour: float, duration_hours: float) -> float:
    hour = int(departure_hour)
    if adaptation == "advance" and 18 <= hour <= 22:
        return 85.0
    if adaptation == "delay" and 8 <= hour <= 14:
        return 90.0
    if 6 <= hour <= 18:
        return 70.0
    if duration_hours > 8:
        return 40.0
    return 55.0


def layover_light_bonus(layover: ResolvedLayover, adaptation: str) -> float:
    """Up to 8 points for outdoor light at the right local time during a layover."""
    if not layover.facilities.outdoor_access or adaptation == "none":
        return 0.0
    midpoint = layover.midpoint
    if midpoint is None:
        return 0.0

    hour = local_hour(midpoint, layover.timezone)
    if adaptation == "advance":
        if 18 <= hour <= 21:
            return 8.0
        if 15 <= hour < 18:
            return 5.0
    elif adaptation == "delay":
        if 6 <= hour <= 9:
            return 8.0
        if 9 < hour < 12:
            return 5.0
    return 0.0


def circadian_dimension(profile: CircadianProfile, itinerary: ResolvedItinerary) -> DimensionScore:
    adaptation = profile.adaptation
    duration_minutes = itinerary.flight.elapsed_minutes or 0.0

    light = light_exposure_score(adaptation, profile.local_departure_hour, duration_minutes / 60)
    if itinerary.layovers:
        bonus = sum(layover_light_bonus(l, adaptation) for l in itinerary.layovers)
        if bonus > 0:
            light = min(100.0, light + bonus / len(itinerary.layovers))

    lighting = sum(
        LIGHTING_PROTOCOL_SCORES.get(s.airline.lighting_protocol or "none", 50.0)
        for s in itinerary.segments
    ) / len(itinerary.segments)

    components = {
        "departure_timing": departure_timing_score(adaptation, profile.local_departure_hour),
        "arrival_timing": profile.arrival_time_optimality * 10.0,
        "body_clock_alignment": body_clock_alignment_score(profile.timezones_crossed),
        "light_exposure": light,
        "airline_lighting": lighting,
    }
    return DimensionScore(_weighted(components, CIRCADIAN_COMPONENT_WEIGHTS), components)


# =============================================================================
# Comfort
# =============================================================================

CABIN_CLASS_MULTIPLIERS = {
    "economy": 1.0,
    "premium_economy": 1.20,
    "business": 1.45,
    "first": 1.65,
}

BASE_SEAT_COMFORT = 55.0
NEXT_GEN_AIRCRAFT_BONUS = 15.0
LAYOVER_COMFORT_SHARE = 0.2  # Share of comfort taken from layover airports

SEGMENT_COMFORT_WEIGHTS = {
    "aircraft_quality": 0.35,
    "airline_quality": 0.30,
    "seat_comfort": 0.20,
    "cabin_environment": 0.15,
}


def segment_comfort_components(segment: ResolvedSegment) -> dict[str, float]:
    aircraft = segment.aircraft
    airline = segment.airline

    aircraft_score = aircraft.sleep_score * 10
    if aircraft.generation == "next-gen":
        aircraft_score += NEXT_GEN_AIRCRAFT_BONUS

    airline_score = airline.service_quality * 10 * 0.6 + airline.jetlag_optimization * 10 * 0.4

    multiplier = CABIN_CLASS_MULTIPLIERS.get(segment.cabin_class, 1.0)
    seat_score = BASE_SEAT_COMFORT * multiplier

    pressure_score = max(0.0, 100 - (aircraft.cabin_pressure_ft - 6000) / 20)
    humidity_score = (aircraft.cabin_humidity / 20) * 100
    environment = min(100.0, pressure_score) * 0.6 + min(100.0, humidity_score) * 0.4

    return {
        "aircraft_quality": min(100.0, aircraft_score),
        "airline_quality": min(100.0, airline_score),
        "seat_comfort": min(100.0, seat_score),
        "cabin_environment": environment,
    }


def _segment_weights(segments: list[ResolvedSegment]) -> list[float]:
    """Block-time weights; equal weights when any duration is unknown."""
    durations = [s.duration_minutes for s in segments]
    if any(d is None or d <= 0 for d in durations):
        return [1.0] * len(segments)
    return durations


def comfort_dimension(itinerary: ResolvedItinerary) -> DimensionScore:
    weights = _segment_weights(itinerary.segments)
    total_weight = sum(weights)

    components = {name: 0.0 for name in SEGMENT_COMFORT_WEIGHTS}
    for segment, weight in zip(itinerary.segments, weights):
        for name, value in segment_comfort_components(segment).items():
            components[name] += value * weight / total_weight

    in_flight = _weighted(components, SEGMENT_COMFORT_WEIGHTS)

    if not itinerary.layovers:
        components["layover_comfort"] = in_flight
        return DimensionScore(in_flight, components)

    layover_comfort = sum(
        (l.facilities.comfort_score + l.facilities.jetlag_support_score) / 2 * 10
        for l in itinerary.layovers
    ) / len(itinerary.layovers)
    components["layover_comfort"] = layover_comfort

    score = in_flight * (1 - LAYOVER_COMFORT_SHARE) + layover_comfort * LAYOVER_COMFORT_SHARE
    return DimensionScore(score, components)


# =============================================================================
# Strategy
# =============================================================================

STRATEGY_COMPONENT_WEIGHTS = {
    "routing_logic": 0.35,
    "layover_quality": 0.30,
    "airport_facilities": 0.10,
    "nap_opportunity": 0.10,
    "phasing": 0.15,
}

DIRECT_ROUTING_SCORE = 98.0
DIRECT_LAYOVER_BASELINE = 75.0
NEUTRAL_NAP_SCORE = 70.0
NAP_WINDOW_SCORE = 95.0
SLEEPLESS_NIGHT_SCORE = 55.0
MIN_NAP_LAYOVER_MINUTES = 90
MIN_NIGHT_OVERLAP_MINUTES = 60

# Body-clock night: 23:00 to 05:00 at the origin
BODY_NIGHT_START_HOUR = 23
BODY_NIGHT_HOURS = 6


def routing_logic_score(stops: int) -> float:
    if stops == 0:
        return DIRECT_ROUTING_SCORE
    return max(40.0, 85.0 - stops * 20)


def body_night_overlap_minutes(
    start: datetime, end: datetime, body_clock_tz: str | None
) -> float:
    """
    Minutes of [start, end] that fall in the traveler's body-clock night.

    The body clock is still on origin time, so the window is evaluated in
    the origin timezone.
    """
    if body_clock_tz and is_known_timezone(body_clock_tz):
        tz = pytz.timezone(body_clock_tz)
        start, end = start.astimezone(tz), end.astimezone(tz)
    start_local = start.replace(tzinfo=None)
    end_local = end.replace(tzinfo=None)
    if end_local <= start_local:
        return 0.0

    overlap = 0.0
    day = start_local.date() - timedelta(days=1)
    while day <= end_local.date():
        night_start = datetime(day.year, day.month, day.day, BODY_NIGHT_START_HOUR)
        night_end = night_start + timedelta(hours=BODY_NIGHT_HOURS)
        lo = max(start_local, night_start)
        hi = min(end_local, night_end)
        if hi > lo:
            overlap += (hi - lo).total_seconds() / 60
        day += timedelta(days=1)
    return overlap


def can_nap(layover: ResolvedLayover) -> bool:
    facilities = layover.facilities
    return layover.duration_minutes >= MIN_NAP_LAYOVER_MINUTES and (
        facilities.sleep_pods or facilities.quiet_zones or facilities.lounge_access
    )


def nap_opportunity_score(layovers: list[ResolvedLayover], body_clock_tz: str | None) -> float:
    """
    Reward a layover that lands in the body-clock night at an airport where
    the traveler can actually sleep; penalize one spent awake in a terminal.
    """
    night_layovers = [
        l
        for l in layovers
        if l.arrival is not None
        and l.departure is not None
        and body_night_overlap_minutes(l.arrival, l.departure, body_clock_tz)
        >= MIN_NIGHT_OVERLAP_MINUTES
    ]
    if not night_layovers:
        return NEUTRAL_NAP_SCORE
    if any(can_nap(l) for l in night_layovers):
        return NAP_WINDOW_SCORE
    return SLEEPLESS_NIGHT_SCORE


def weighted_layover_quality(layovers: list[ResolvedLayover]) -> float:
    """Layover quality averaged by each connection's share of ground time."""
    qualities = [
        layover_quality(l.intelligence, l.duration_minutes, l.international) for l in layovers
    ]
    durations = [max(0.0, l.duration_minutes) for l in layovers]
    total = sum(durations)
    if total == 0:
        return sum(qualities) / len(qualities)
    return sum(q * d for q, d in zip(qualities, durations)) / total


def phasing_score(flight: FlightOption, layovers: list[ResolvedLayover]) -> float:
    if len(flight.segments) <= 1:
        return 80.0
    gaps = segment_gaps(flight)
    if any(g is None for g in gaps):
        gaps = [l.duration_minutes for l in layovers]
    if gaps and all(60 <= g <= 300 for g in gaps):
        return 90.0
    return 60.0


def strategy_dimension(itinerary: ResolvedItinerary) -> DimensionScore:
    flight = itinerary.flight
    layovers = itinerary.layovers

    if layovers:
        quality = weighted_layover_quality(layovers)
        facilities = sum(l.facilities.jetlag_support_score * 10 for l in layovers) / len(layovers)
    else:
        quality = DIRECT_LAYOVER_BASELINE
        facilities = DIRECT_LAYOVER_BASELINE

    components = {
        "routing_logic": routing_logic_score(flight.stops),
        "layover_quality": quality,
        "airport_facilities": facilities,
        "nap_opportunity": nap_opportunity_score(layovers, itinerary.origin.timezone),
        "phasing": phasing_score(flight, layovers),
    }
    return DimensionScore(_weighted(components, STRATEGY_COMPONENT_WEIGHTS), components)


# =============================================================================
# Efficiency
# =============================================================================

DURATION_SHARE = 0.6
STOPS_SHARE = 0.4
PENALTY_PER_EXTRA_STOP = 25.0
UNKNOWN_DURATION_SCORE = 50.0


@dataclass(frozen=True)
class RouteBenchmark:
    """Best duration and fewest stops for one (origin, destination) pair."""

    best_duration_minutes: float | None
    min_stops: int


def build_benchmarks(flights: list[FlightOption]) -> dict[tuple[str, str], RouteBenchmark]:
    durations: dict[tuple[str, str], list[float]] = {}
    stops: dict[tuple[str, str], list[int]] = {}
    for flight in flights:
        route = (flight.origin.upper(), flight.destination.upper())
        stops.setdefault(route, []).append(flight.stops)
        elapsed = flight.elapsed_minutes
        if elapsed is not None and elapsed > 0:
            durations.setdefault(route, []).append(elapsed)

    return {
        route: RouteBenchmark(
            best_duration_minutes=min(durations[route]) if route in durations else None,
            min_stops=min(route_stops),
        )
        for route, route_stops in stops.items()
    }


def efficiency_dimension(flight: FlightOption, benchmark: RouteBenchmark) -> DimensionScore:
    elapsed = flight.elapsed_minutes
    best = benchmark.best_duration_minutes
    if elapsed is None or elapsed <= 0 or not best:
        duration_score = UNKNOWN_DURATION_SCORE
    else:
        excess = (elapsed - best) / best
        duration_score = max(0.0, 100.0 - excess * 100)

    extra_stops = max(0, flight.stops - benchmark.min_stops)
    stops_score = max(0.0, 100.0 - extra_stops * PENALTY_PER_EXTRA_STOP)

    components = {"duration_efficiency": duration_score, "stop_efficiency": stops_score}
    return DimensionScore(duration_score * DURATION_SHARE + stops_score * STOPS_SHARE, components)


def _weighted(components: dict[str, float], weights: dict[str, float]) -> float:
    return sum(components[name] * weight for name, weight in weights.items())
