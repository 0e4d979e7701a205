"""
Tests for the end-to-end ranking pipeline.

These tests verify:
1. Parallel scoring gives exactly the sequential result
2. Invalid filters fail before any scoring
3. Degraded flights are ranked, not dropped
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from datetime import datetime

from helpers import (
    at,
    flight,
    ids,
    jfk_lhr_direct,
    jfk_lhr_two_stop,
    lax_nrt,
    lhr_sin_syd,
    nrt_lax,
    segment,
)

from jetlag_ranking.config import Settings
from jetlag_ranking.errors import DuplicateFlightId, InvalidFilterSpec
from jetlag_ranking.pipeline import rank_flights, score_all
from jetlag_ranking.scoring.holistic_scorer import HolisticScorer
from jetlag_ranking.types import FilterSpec, FlightOption


class RecordingScorer(HolisticScorer):
    """Scorer that remembers which flights it was asked to score."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.scored_ids: list[str] = []

    def score(self, flight, candidate_set=(), benchmarks=None):
        self.scored_ids.append(flight.id)
        return super().score(flight, candidate_set, benchmarks)


@pytest.fixture
def search():
    return [
        jfk_lhr_two_stop("two-stop", price=450.0),
        jfk_lhr_direct("direct", price=780.0),
        jfk_lhr_direct("direct-late", price=None),
        lhr_sin_syd("kangaroo"),
        lax_nrt("lax-nrt"),
        nrt_lax("nrt-lax"),
    ]


class TestScoreAll:
    """Per-flight scoring fan-out."""

    def test_parallel_matches_sequential(
        self, scorer, search, sequential_settings, parallel_settings
    ) -> None:
        """Thread pool output is identical, in input order."""
        sequential = score_all(search, scorer, sequential_settings)
        parallel = score_all(search, scorer, parallel_settings)
        assert ids(parallel) == ids(sequential) == [f.id for f in search]
        assert [f.score for f in parallel] == [f.score for f in sequential]

    def test_empty(self, scorer) -> None:
        """No flights, no work."""
        assert score_all([], scorer) == []

    def test_workers_bounded_by_flights(self) -> None:
        """Pool size never exceeds the number of flights."""
        settings = Settings(max_workers=8, parallel_threshold=4, suggestion_limit=5, log_level="INFO")
        assert settings.workers_for(3) == 3
        assert settings.workers_for(50) == 8
        assert settings.workers_for(0) == 1


class TestRankFlights:
    """Score, categorize, filter and sort in one call."""

    def test_default_sort(self, scorer, search, sequential_settings) -> None:
        """Results are ordered by best jet lag score."""
        result = rank_flights(search, scorer, config=sequential_settings)
        scores = [f.jetlag_score for f in result.flights]
        assert scores == sorted(scores, reverse=True)
        assert result.sort_key == "jetlag-best"
        assert result.filter_stats.original_count == len(search)

    def test_categories_attached(self, scorer, search, sequential_settings) -> None:
        """The cheapest flight is tagged and the analysis uses the whole set."""
        result = rank_flights(search, scorer, config=sequential_settings)
        assert result.price_analysis.cheapest.flight.id == "two-stop"
        cheapest = next(f for f in result.flights if f.flight.id == "two-stop")
        assert "cheapest" in cheapest.categories

    def test_filter_and_sort(self, scorer, search, sequential_settings) -> None:
        """Filters apply after categorization, then the sort key."""
        result = rank_flights(
            search,
            scorer,
            filter_spec=FilterSpec(direct_only=True),
            sort_key="price-low",
            config=sequential_settings,
        )
        assert "two-stop" not in ids(result.flights)
        assert "kangaroo" not in ids(result.flights)
        assert result.flights[-1].flight.id == "direct-late"
        assert result.filter_stats.removed_by == {"max_stops": 2}
        # Categories still describe the full search
        assert result.price_analysis.cheapest.flight.id == "two-stop"

    def test_invalid_filter_fails_before_scoring(self, directory, search) -> None:
        """No flight is scored when the filter spec is invalid."""
        scorer = RecordingScorer(directory)
        with pytest.raises(InvalidFilterSpec):
            rank_flights(search, scorer, filter_spec=FilterSpec(max_price=-1))
        assert scorer.scored_ids == []

    def test_invalid_sort_key_fails_before_scoring(self, directory, search) -> None:
        """Sort keys are validated up front too."""
        scorer = RecordingScorer(directory)
        with pytest.raises(InvalidFilterSpec):
            rank_flights(search, scorer, sort_key="random")
        assert scorer.scored_ids == []

    def test_degraded_flights_are_ranked(self, scorer, search, sequential_settings, caplog) -> None:
        """A malformed flight gets the neutral score and stays in the results."""
        broken = FlightOption(
            id="broken",
            origin="JFK",
            destination="LHR",
            segments=(),
            total_duration_minutes=None,
            stops=0,
            price=300.0,
        )
        result = rank_flights([*search, broken], scorer, config=sequential_settings)
        ranked = {f.flight.id: f for f in result.flights}
        assert ranked["broken"].score.degraded
        assert ranked["broken"].jetlag_score == 50
        assert "1 of 7 flights scored with degraded confidence" in caplog.text

    def test_naive_connection_does_not_abort_the_search(
        self, scorer, search, sequential_settings
    ) -> None:
        """A naive inner timestamp degrades that flight only; filters and sorts still run."""
        mixed = flight(
            "mixed",
            [
                segment("JFK", "BOS", at("America/New_York", 2025, 6, 10, 6), datetime(2025, 6, 10, 7, 30)),
                segment("BOS", "LHR", datetime(2025, 6, 10, 9), at("Europe/London", 2025, 6, 10, 21)),
            ],
        )
        result = rank_flights(
            [*search, mixed],
            scorer,
            filter_spec=FilterSpec(min_layover_minutes=30),
            sort_key="departure-early",
            config=sequential_settings,
        )
        ranked = {f.flight.id: f for f in result.flights}
        assert ranked["mixed"].score.degraded
        assert not ranked["direct"].score.degraded
        assert result.filter_stats.original_count == len(search) + 1

    def test_duplicate_ids_fail_before_scoring(self, directory) -> None:
        """Results are keyed by id, so a repeated id is rejected up front."""
        scorer = RecordingScorer(directory)
        with pytest.raises(DuplicateFlightId):
            rank_flights([jfk_lhr_direct("same"), jfk_lhr_two_stop("same")], scorer)
        assert scorer.scored_ids == []

    def test_suggestions_present(self, scorer, search, sequential_settings) -> None:
        """Every result carries suggestions for the whole search."""
        result = rank_flights(search, scorer, config=sequential_settings)
        assert result.suggestions is not None
        assert result.suggestions.popular_airlines
        assert result.suggestions.relaxations == []

    def test_empty_search(self, scorer) -> None:
        """An empty search gives an empty, well-formed result."""
        result = rank_flights([], scorer)
        assert result.flights == []
        assert result.price_analysis.is_empty
        assert result.filter_stats.original_count == 0
