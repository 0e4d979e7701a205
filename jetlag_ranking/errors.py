"""Exceptions raised by the ranking engine."""

from collections.abc import Iterable


class InvalidFilterSpec(ValueError):
    """A filter value is outside its domain. Raised before any filtering runs."""

    def __init__(self, field_name: str, message: str):
        self.field_name = field_name
        super().__init__(f"Invalid filter '{field_name}': {message}")


class MalformedFlight(ValueError):
    """A flight lacks the geometry or timestamps needed for circadian scoring.

    The scorer catches this and falls back to a neutral score; it never
    escapes a scoring call.
    """

    def __init__(self, flight_id: str, message: str):
        self.flight_id = flight_id
        super().__init__(f"Flight {flight_id}: {message}")


class DuplicateFlightId(ValueError):
    """Two flights of one search share an id. Results are keyed by id."""

    def __init__(self, flight_id: str):
        self.flight_id = flight_id
        super().__init__(f"Duplicate flight id: {flight_id!r}")


def check_unique_ids(flight_ids: Iterable[str]) -> None:
    """Raise DuplicateFlightId for the first id seen twice."""
    seen: set[str] = set()
    for flight_id in flight_ids:
        if flight_id in seen:
            raise DuplicateFlightId(flight_id)
        seen.add(flight_id)
