"""
Tests for the circadian model.

These tests verify:
1. Recovery rates are direction-aware (eastward harder than westward)
2. Timezone deltas take the shorter path around the globe
3. Arrival optimality buckets
4. Profile construction for real routes, including the date line
"""

import sys
from datetime import timedelta
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from helpers import at

from jetlag_ranking.errors import MalformedFlight
from jetlag_ranking.science.circadian_model import (
    RECOVERY_RATES,
    arrival_time_optimality,
    build_profile,
    classify_direction,
    estimate_recovery_days,
    normalize_longitude_delta,
)
from jetlag_ranking.types import AirportLocation


class TestRecoveryRates:
    """Recovery is ~1.0 day per hour eastbound and 0.6 westbound."""

    def test_canonical_rates(self) -> None:
        """Eastward rate is 1.0 and the single westward rate is 0.6."""
        assert RECOVERY_RATES.advance_days_per_hour == 1.0
        assert RECOVERY_RATES.delay_days_per_hour == 0.6

    def test_small_shift_needs_no_recovery(self) -> None:
        """Shifts under 2 hours are absorbed overnight."""
        assert estimate_recovery_days(0, "advance") == 0
        assert estimate_recovery_days(1.5, "advance") == 0
        assert estimate_recovery_days(1.5, "delay") == 0

    def test_six_hour_advance(self) -> None:
        """6h eastward should take 6 days."""
        assert estimate_recovery_days(6, "advance") == pytest.approx(6.0)

    def test_six_hour_delay(self) -> None:
        """6h westward should take 3.6 days."""
        assert estimate_recovery_days(6, "delay") == pytest.approx(3.6)

    def test_westbound_faster_than_eastbound(self) -> None:
        """For every delta from 2 to 12 hours, westward recovery is shorter."""
        for hours in range(2, 13):
            west = estimate_recovery_days(hours, "delay")
            east = estimate_recovery_days(hours, "advance")
            assert west < east, f"{hours}h: westbound {west} should be < eastbound {east}"

    def test_recovery_never_exceeds_cap(self) -> None:
        """Recovery days stay within 1.5x the delta."""
        for hours in (2, 5, 8, 12):
            for adaptation in ("advance", "delay"):
                assert estimate_recovery_days(hours, adaptation) <= hours * 1.5


class TestArrivalOptimality:
    """Morning arrivals score best, late-night arrivals worst."""

    @pytest.mark.parametrize(
        "hour,expected",
        [
            (6, 10),
            (8.5, 10),
            (9, 9),
            (11.9, 9),
            (13, 7),
            (16, 6),
            (19, 4),
            (22, 2),
            (23, 1),
            (23.5, 1),
            (2, 1),
            (5.9, 1),
        ],
    )
    def test_buckets(self, hour: float, expected: int) -> None:
        """Each local hour maps to its bucket score."""
        assert arrival_time_optimality(hour) == expected


class TestDirection:
    """Direction is geometric, with longitude wrapped across the date line."""

    def test_longitude_wraps(self) -> None:
        """Deltas are normalized into (-180, 180]."""
        assert normalize_longitude_delta(-190) == pytest.approx(170)
        assert normalize_longitude_delta(258.8) == pytest.approx(-101.2)
        assert normalize_longitude_delta(180) == pytest.approx(180)

    def test_transatlantic_is_eastbound(self, directory) -> None:
        """JFK -> LHR moves mostly east."""
        assert classify_direction(directory.get("JFK"), directory.get("LHR")) == "eastbound"

    def test_transpacific_is_westbound(self, directory) -> None:
        """LAX -> NRT is shorter going west over the Pacific."""
        assert classify_direction(directory.get("LAX"), directory.get("NRT")) == "westbound"

    def test_london_johannesburg_is_southbound(self, directory) -> None:
        """Latitude dominates when the longitude delta is small."""
        assert classify_direction(directory.get("LHR"), directory.get("JNB")) == "southbound"

    def test_sydney_tokyo_is_northbound(self, directory) -> None:
        """SYD -> NRT is mostly north."""
        assert classify_direction(directory.get("SYD"), directory.get("NRT")) == "northbound"

    def test_missing_coordinates_raise(self) -> None:
        """Direction cannot be classified without coordinates."""
        with pytest.raises(ValueError):
            classify_direction(AirportLocation("AAA"), AirportLocation("BBB"))


class TestBuildProfile:
    """End-to-end circadian profiles for real routes."""

    def test_jfk_lhr_summer(self, directory) -> None:
        """EDT -> BST is a 5h advance with a 06:00 arrival."""
        profile = build_profile(
            directory.get("JFK"),
            directory.get("LHR"),
            at("America/New_York", 2025, 6, 10, 18),
            at("Europe/London", 2025, 6, 11, 6),
        )
        assert profile.timezones_crossed == 5
        assert profile.direction == "eastbound"
        assert profile.adaptation == "advance"
        assert profile.arrival_time_optimality == 10
        assert profile.estimated_recovery_days == pytest.approx(5.0)
        assert profile.local_departure_hour == 18
        assert profile.local_arrival_hour == 6

    def test_shift_takes_shorter_path(self, directory) -> None:
        """LAX -> NRT is 7h behind in winter, not 17h ahead."""
        departure = at("America/Los_Angeles", 2025, 1, 15, 11)
        profile = build_profile(
            directory.get("LAX"), directory.get("NRT"), departure, departure + timedelta(hours=11)
        )
        assert profile.clock_shift == -7
        assert profile.timezones_crossed == 7
        assert profile.adaptation == "delay"
        assert profile.estimated_recovery_days == pytest.approx(4.2)

    def test_dst_changes_shift(self, directory) -> None:
        """In July, PDT -> JST is an 8h delay."""
        departure = at("America/Los_Angeles", 2025, 7, 15, 11)
        profile = build_profile(
            directory.get("LAX"), directory.get("NRT"), departure, departure + timedelta(hours=11)
        )
        assert profile.timezones_crossed == 8
        assert profile.estimated_recovery_days == pytest.approx(4.8)

    def test_date_line_crossing(self, directory) -> None:
        """AKL -> HNL crosses the date line but is only a 1h clock change."""
        departure = at("Pacific/Auckland", 2025, 1, 10, 19)
        profile = build_profile(
            directory.get("AKL"), directory.get("HNL"), departure, departure + timedelta(hours=9)
        )
        assert profile.timezones_crossed == 1
        assert profile.direction == "eastbound"
        assert profile.estimated_recovery_days == 0

    def test_same_timezone(self, directory) -> None:
        """JFK -> BOS crosses no timezones."""
        departure = at("America/New_York", 2025, 6, 10, 8)
        profile = build_profile(
            directory.get("JFK"), directory.get("BOS"), departure, departure + timedelta(hours=1)
        )
        assert profile.timezones_crossed == 0
        assert profile.direction == "none"
        assert profile.adaptation == "none"
        assert profile.estimated_recovery_days == 0

    def test_coordinates_without_timezones(self) -> None:
        """Without IANA zones the shift falls back to 15 degrees per hour."""
        origin = AirportLocation("AAA", latitude=0.0, longitude=0.0)
        destination = AirportLocation("BBB", latitude=0.0, longitude=75.0)
        departure = at("UTC", 2025, 6, 10, 8)
        profile = build_profile(origin, destination, departure, departure + timedelta(hours=8))
        assert profile.clock_shift == 5
        assert profile.direction == "eastbound"
        assert profile.estimated_recovery_days == pytest.approx(5.0)

    def test_missing_timestamps_raise(self, directory) -> None:
        """A profile needs both instants."""
        with pytest.raises(MalformedFlight):
            build_profile(directory.get("JFK"), directory.get("LHR"), None, None, flight_id="x")

    def test_unplaceable_airports_raise(self) -> None:
        """Neither timezone nor coordinates: MalformedFlight, not a guess."""
        departure = at("UTC", 2025, 6, 10, 8)
        with pytest.raises(MalformedFlight) as exc_info:
            build_profile(
                AirportLocation("AAA"),
                AirportLocation("BBB"),
                departure,
                departure + timedelta(hours=2),
                flight_id="f1",
            )
        assert exc_info.value.flight_id == "f1"
