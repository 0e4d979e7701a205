"""
Circadian impact of a trip.

Scientific basis:
- Natural circadian period is ~24.2h, so delays (westward) are easier than
  advances (eastward)
- Recovery: ~1.0 day per timezone eastbound, ~0.6 day per timezone westbound
- Shifts under 2h are absorbed within a normal night and need no recovery
- Morning arrival light anchors the new day; late-evening arrivals do not

Key principles:
- Timezone delta always takes the shorter way around the globe (0-12h)
- Direction is geometric: whichever of longitude or latitude moves more
- Nothing here reads the wall clock; only the flight's own instants matter
"""

from dataclasses import dataclass
from datetime import datetime

from ..errors import MalformedFlight
from ..time_utils import calculate_timezone_shift, is_known_timezone, local_hour
from ..types import AirportLocation, CircadianProfile, Direction


@dataclass(frozen=True)
class RecoveryRates:
    """Days of recovery per timezone crossed, by direction of clock change."""

    advance_days_per_hour: float  # Eastward
    delay_days_per_hour: float  # Westward


# Westward rate is the single canonical 0.6 (older tooling used 0.67)
RECOVERY_RATES = RecoveryRates(advance_days_per_hour=1.0, delay_days_per_hour=0.6)

MIN_SHIFT_FOR_RECOVERY_HOURS = 2.0
MAX_RECOVERY_PER_HOUR = 1.5  # Recovery never exceeds 1.5x the delta

# (start hour inclusive, end hour exclusive, score); anything else scores 1
ARRIVAL_OPTIMALITY_BUCKETS: list[tuple[int, int, int]] = [
    (6, 9, 10),
    (9, 12, 9),
    (12, 15, 7),
    (15, 18, 6),
    (18, 21, 4),
    (21, 23, 2),
]


def normalize_longitude_delta(delta: float) -> float:
    """Normalize a longitude difference into (-180, 180]."""
    normalized = delta % 360
    if normalized > 180:
        normalized -= 360
    return normalized


def classify_direction(origin: AirportLocation, destination: AirportLocation) -> Direction:
    """
    Geometric travel direction.

    Longitude wins when |d_lon| > |d_lat|, otherwise latitude decides.
    Returns "none" when the two points coincide.
    """
    if not (origin.has_coordinates and destination.has_coordinates):
        raise ValueError("coordinates required to classify direction")

    d_lon = normalize_longitude_delta(destination.longitude - origin.longitude)
    d_lat = destination.latitude - origin.latitude

    if d_lon == 0 and d_lat == 0:
        return "none"
    if abs(d_lon) > abs(d_lat):
        return "eastbound" if d_lon > 0 else "westbound"
    return "northbound" if d_lat > 0 else "southbound"


def signed_clock_shift(
    origin: AirportLocation, destination: AirportLocation, reference: datetime
) -> float:
    """
    Destination clock minus origin clock, shorter path, in hours.

    Uses IANA offsets at the reference instant when both timezones are
    known, otherwise whole hours of longitude (15 degrees per hour).
    """
    if is_known_timezone(origin.timezone) and is_known_timezone(destination.timezone):
        return calculate_timezone_shift(origin.timezone, destination.timezone, reference)

    if origin.has_coordinates and destination.has_coordinates:
        d_lon = normalize_longitude_delta(destination.longitude - origin.longitude)
        return float(round(d_lon / 15))

    raise ValueError("timezone or coordinates required for both airports")


def estimate_recovery_days(timezones_crossed: float, adaptation: str) -> float:
    """
    Estimate full recovery days for a shift.

    Args:
        timezones_crossed: Absolute shift in hours (0-12)
        adaptation: "advance" (eastward) or "delay" (westward)

    Returns:
        Recovery days as a float, 0 for shifts under 2h
    """
    if timezones_crossed < MIN_SHIFT_FOR_RECOVERY_HOURS:
        return 0.0

    if adaptation == "advance":
        rate = RECOVERY_RATES.advance_days_per_hour
    else:
        rate = RECOVERY_RATES.delay_days_per_hour

    days = timezones_crossed * rate
    return min(days, timezones_crossed * MAX_RECOVERY_PER_HOUR)


def arrival_time_optimality(hour: float) -> int:
    """Score a local arrival hour from 10 (early morning) down to 1 (night)."""
    for start, end, score in ARRIVAL_OPTIMALITY_BUCKETS:
        if start <= hour < end:
            return score
    return 1


def build_profile(
    origin: AirportLocation,
    destination: AirportLocation,
    departure: datetime | None,
    arrival: datetime | None,
    flight_id: str = "",
) -> CircadianProfile:
    """
    Compute the circadian profile for a trip.

    Raises:
        MalformedFlight: when timestamps are missing or neither timezones nor
            coordinates are available to place the two airports.
    """
    if departure is None or arrival is None:
        raise MalformedFlight(flight_id, "departure and arrival instants are required")

    try:
        clock_shift = signed_clock_shift(origin, destination, departure)
    except ValueError as e:
        raise MalformedFlight(flight_id, str(e)) from e

    timezones_crossed = abs(clock_shift)
    arrival_hour = local_hour(arrival, destination.timezone)
    departure_hour = local_hour(departure, origin.timezone)

    if timezones_crossed == 0:
        return CircadianProfile(
            timezones_crossed=0.0,
            direction="none",
            arrival_time_optimality=arrival_time_optimality(arrival_hour),
            estimated_recovery_days=0.0,
            clock_shift=0.0,
            local_departure_hour=departure_hour,
            local_arrival_hour=arrival_hour,
        )

    if origin.has_coordinates and destination.has_coordinates:
        direction = classify_direction(origin, destination)
    else:
        direction = "eastbound" if clock_shift > 0 else "westbound"

    if direction == "eastbound":
        adaptation = "advance"
    elif direction == "westbound":
        adaptation = "delay"
    else:
        # Mostly north/south trips still shift the clock one way or the other
        adaptation = "advance" if clock_shift > 0 else "delay"

    return CircadianProfile(
        timezones_crossed=timezones_crossed,
        direction=direction,
        arrival_time_optimality=arrival_time_optimality(arrival_hour),
        estimated_recovery_days=estimate_recovery_days(timezones_crossed, adaptation),
        clock_shift=clock_shift,
        local_departure_hour=departure_hour,
        local_arrival_hour=arrival_hour,
    )
