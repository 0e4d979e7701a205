"""
End-to-end scenario regression tests.

Each scenario exercises the full stack: airport resolution, circadian
model, holistic scoring, tradeoff analysis, filtering and sorting.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from helpers import ids, jfk_lhr_direct, jfk_lhr_two_stop, lax_nrt, nrt_lax

from jetlag_ranking.pipeline import rank_flights
from jetlag_ranking.types import FilterSpec


class TestMorningArrivalBeatsLateConnection:
    """JFK -> LHR: direct 06:00 arrival vs two stops arriving 23:00, same price."""

    def test_direct_ranks_first(self, scorer, sequential_settings) -> None:
        """The direct flight outranks the two-stop on jet lag."""
        result = rank_flights(
            [jfk_lhr_two_stop(price=600), jfk_lhr_direct(price=600)],
            scorer,
            config=sequential_settings,
        )
        assert ids(result.flights) == ["direct", "two-stop"]
        direct, two_stop = result.flights
        assert direct.score.circadian_score > two_stop.score.circadian_score
        assert direct.score.overall_jetlag_score > two_stop.score.overall_jetlag_score
        assert direct.score.recommendation in ("optimal", "excellent")

    def test_equal_price_best_jetlag_is_direct(self, scorer, sequential_settings) -> None:
        """At equal price the direct flight is both cheapest and best for jet lag."""
        result = rank_flights(
            [jfk_lhr_two_stop(price=600), jfk_lhr_direct(price=600)],
            scorer,
            config=sequential_settings,
        )
        analysis = result.price_analysis
        assert analysis.best_jetlag.flight.id == "direct"
        assert analysis.cheapest.flight.id == "direct"
        assert analysis.categories["cheapest"].savings_from_best == 0


class TestTranspacificRecovery:
    """LAX -> NRT westbound vs NRT -> LAX eastbound."""

    def test_westbound_recovery(self, scorer) -> None:
        """A 7h delay recovers in 4.2 days."""
        score = scorer.score(lax_nrt())
        assert 4 <= score.estimated_recovery_days <= 5
        assert score.estimated_recovery_days == pytest.approx(4.2)

    def test_summer_westbound_recovery(self, scorer) -> None:
        """An 8h delay in PDT recovers in 4.8 days."""
        score = scorer.score(lax_nrt(month=7))
        assert score.estimated_recovery_days == pytest.approx(4.8)

    def test_eastbound_return_takes_longer(self, scorer) -> None:
        """The same delta eastbound takes at least as long."""
        outbound = scorer.score(lax_nrt())
        inbound = scorer.score(nrt_lax())
        assert inbound.estimated_recovery_days >= outbound.estimated_recovery_days
        assert inbound.estimated_recovery_days == pytest.approx(7.0)


class TestSingleFlightSearch:
    """One flight is every category at once."""

    def test_categories_coincide(self, scorer, sequential_settings) -> None:
        """cheapest == best_jetlag == best_value and no balanced pick."""
        result = rank_flights([jfk_lhr_direct(price=500)], scorer, config=sequential_settings)
        analysis = result.price_analysis
        assert analysis.cheapest.flight.id == "direct"
        assert analysis.best_jetlag.flight.id == "direct"
        assert analysis.best_value.flight.id == "direct"
        assert analysis.balanced is None
        assert result.flights[0].categories == ("cheapest", "best-jetlag", "best-value")


class TestOverTightPriceFilter:
    """A price cap below every fare hides everything and says how to fix it."""

    def test_zero_results_and_raise_suggestion(self, scorer, sequential_settings) -> None:
        """No results, all removals charged to max_price, and a raise-max-price hint."""
        flights = [jfk_lhr_direct(price=780), jfk_lhr_two_stop(price=450)]
        result = rank_flights(
            flights, scorer, filter_spec=FilterSpec(max_price=100), config=sequential_settings
        )
        assert result.flights == []
        assert result.filter_stats.removed_by == {"max_price": 2}
        relaxation = result.suggestions.relaxations[0]
        assert relaxation.action == "raise_max_price"
        assert relaxation.suggested_value == 780
        assert relaxation.unlocked_count == 2
