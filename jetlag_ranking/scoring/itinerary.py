"""
Resolution of a raw FlightOption into everything the dimension scores need.

Airports are placed through the AirportDirectory, layovers get facility
data from the FacilitiesSource, and segments get smart-default aircraft and
airlines. Anything that makes circadian scoring impossible raises
MalformedFlight.
"""

from dataclasses import dataclass, replace
from datetime import datetime

from ..airports.directory import AirportDirectory
from ..airports.intelligence import FacilitiesSource, facilities_from_intelligence, resolve_airport
from ..errors import MalformedFlight
from ..time_utils import is_aware, span_minutes
from ..types import (
    Aircraft,
    AirportFacilities,
    AirportIntelligence,
    AirportLocation,
    Airline,
    CabinClass,
    FlightOption,
    Layover,
)
from .enrichment import segment_aircraft, segment_airline


@dataclass(frozen=True)
class ResolvedSegment:
    aircraft: Aircraft
    airline: Airline
    cabin_class: CabinClass
    duration_minutes: float | None


@dataclass(frozen=True)
class ResolvedLayover:
    airport: str
    duration_minutes: float
    intelligence: AirportIntelligence
    facilities: AirportFacilities
    arrival: datetime | None
    departure: datetime | None
    international: bool
    timezone: str | None

    @property
    def midpoint(self) -> datetime | None:
        if self.arrival is None or self.departure is None:
            return None
        return self.arrival + (self.departure - self.arrival) / 2


@dataclass(frozen=True)
class ResolvedItinerary:
    flight: FlightOption
    origin: AirportLocation
    destination: AirportLocation
    segments: list[ResolvedSegment]
    layovers: list[ResolvedLayover]

    @property
    def departure(self) -> datetime:
        return self.flight.segments[0].departure

    @property
    def arrival(self) -> datetime:
        return self.flight.segments[-1].arrival


def segment_gaps(flight: FlightOption) -> list[float | None]:
    """Ground time between consecutive segments, None where a timestamp is missing or naive."""
    return [
        span_minutes(previous.arrival, following.departure)
        for previous, following in zip(flight.segments, flight.segments[1:])
    ]


def _location(
    code: str, tz_override: str | None, directory: AirportDirectory
) -> AirportLocation:
    location = directory.get(code)
    if location is None:
        location = AirportLocation(code=code.upper())
    if tz_override:
        location = replace(location, timezone=tz_override)
    return location


def _check_instants(flight: FlightOption) -> None:
    if not flight.segments:
        raise MalformedFlight(flight.id, "itinerary has no segments")
    first, last = flight.segments[0], flight.segments[-1]
    if first.departure is None or last.arrival is None:
        raise MalformedFlight(flight.id, "first departure and last arrival are required")
    for segment in flight.segments:
        for instant in (segment.departure, segment.arrival):
            if instant is not None and not is_aware(instant):
                raise MalformedFlight(
                    flight.id,
                    f"{segment.origin}-{segment.destination} timestamps must be timezone-aware instants",
                )
    for layover in flight.layovers:
        for instant in (layover.arrival, layover.departure):
            if instant is not None and not is_aware(instant):
                raise MalformedFlight(
                    flight.id, f"layover at {layover.airport} timestamps must be timezone-aware instants"
                )


def _resolve_layover(
    layover: Layover,
    arrival: datetime | None,
    departure: datetime | None,
    directory: AirportDirectory,
    source: FacilitiesSource | None,
) -> ResolvedLayover:
    if layover.intelligence is not None:
        intel = layover.intelligence
        facilities = layover.facilities or facilities_from_intelligence(intel)
    else:
        intel, derived = resolve_airport(layover.airport, source)
        facilities = layover.facilities or derived

    location = directory.get(layover.airport)
    return ResolvedLayover(
        airport=layover.airport.upper(),
        duration_minutes=layover.duration_minutes,
        intelligence=intel,
        facilities=facilities,
        arrival=layover.arrival or arrival,
        departure=layover.departure or departure,
        international=layover.international,
        timezone=location.timezone if location else None,
    )


def resolve_layovers(
    flight: FlightOption, directory: AirportDirectory, source: FacilitiesSource | None
) -> list[ResolvedLayover]:
    """
    Layovers with facility data attached.

    Explicit layovers win; otherwise they are derived from the gaps between
    segments.
    """
    segments = flight.segments
    boundaries = [
        (segments[i].arrival, segments[i + 1].departure) for i in range(len(segments) - 1)
    ]

    if flight.layovers:
        resolved = []
        for index, layover in enumerate(flight.layovers):
            arrival, departure = boundaries[index] if index < len(boundaries) else (None, None)
            resolved.append(_resolve_layover(layover, arrival, departure, directory, source))
        return resolved

    resolved = []
    for index, gap in enumerate(segment_gaps(flight)):
        if gap is None:
            continue
        arrival, departure = boundaries[index]
        layover = Layover(airport=segments[index].destination, duration_minutes=gap)
        resolved.append(_resolve_layover(layover, arrival, departure, directory, source))
    return resolved


def resolve_itinerary(
    flight: FlightOption, directory: AirportDirectory, source: FacilitiesSource | None
) -> ResolvedItinerary:
    """Resolve a flight. Raises MalformedFlight when it cannot be scored."""
    _check_instants(flight)
    first, last = flight.segments[0], flight.segments[-1]

    return ResolvedItinerary(
        flight=flight,
        origin=_location(first.origin, first.origin_tz, directory),
        destination=_location(last.destination, last.dest_tz, directory),
        segments=[
            ResolvedSegment(
                aircraft=segment_aircraft(segment.aircraft, segment.aircraft_type),
                airline=segment_airline(segment.airline, segment.flight_number),
                cabin_class=segment.cabin_class,
                duration_minutes=segment.duration_minutes,
            )
            for segment in flight.segments
        ],
        layovers=resolve_layovers(flight, directory, source),
    )
