"""
Holistic jet lag scoring for one flight.

Combines four sub-scores with fixed product weights:
circadian 45%, strategy 25%, comfort 20%, efficiency 10%.

Scoring is pure. The candidate set is an explicit argument and is only
read for route benchmarks; no flight is ever mutated.
"""

import logging
from collections.abc import Sequence

from ..airports.directory import AirportDirectory
from ..airports.intelligence import FacilitiesSource
from ..errors import MalformedFlight
from ..science.circadian_model import build_profile
from ..types import FlightOption, HolisticScore, Reason, Recommendation
from .dimensions import (
    RouteBenchmark,
    build_benchmarks,
    circadian_dimension,
    comfort_dimension,
    efficiency_dimension,
    strategy_dimension,
)
from .insights import generate_insights, scenario_matches, tradeoff_notes
from .itinerary import resolve_itinerary

logger = logging.getLogger(__name__)

WEIGHTS: dict[str, float] = {
    "circadian": 0.45,
    "strategy": 0.25,
    "comfort": 0.20,
    "efficiency": 0.10,
}

# Lower bound of each tier, inclusive, highest first
RECOMMENDATION_TIERS: list[tuple[float, Recommendation]] = [
    (85.0, "optimal"),
    (70.0, "excellent"),
    (55.0, "good"),
    (40.0, "acceptable"),
]

NEUTRAL_SCORE = 50.0


def overall_score(sub_scores: dict[str, float]) -> float:
    return sum(sub_scores[name] * weight for name, weight in WEIGHTS.items())


def classify_recommendation(score: float) -> Recommendation:
    for threshold, tier in RECOMMENDATION_TIERS:
        if score >= threshold:
            return tier
    return "poor"


def neutral_score(flight_id: str, reason: str) -> HolisticScore:
    """Fallback for a flight that cannot be scored. Never raises."""
    return HolisticScore(
        flight_id=flight_id,
        overall_jetlag_score=NEUTRAL_SCORE,
        circadian_score=NEUTRAL_SCORE,
        comfort_score=NEUTRAL_SCORE,
        strategy_score=NEUTRAL_SCORE,
        efficiency_score=NEUTRAL_SCORE,
        recommendation=classify_recommendation(NEUTRAL_SCORE),
        estimated_recovery_days=0.0,
        critical_factors=[Reason("degraded_confidence", {"reason": reason})],
        degraded=True,
    )


class HolisticScorer:
    """
    Score flights against a candidate set.

    Airport geography and facility data are injected so the scorer works
    with any storage behind them.
    """

    def __init__(
        self,
        directory: AirportDirectory | None = None,
        facilities: FacilitiesSource | None = None,
    ):
        self.directory = directory if directory is not None else AirportDirectory.default()
        self.facilities = facilities

    def score(
        self,
        flight: FlightOption,
        candidate_set: Sequence[FlightOption] = (),
        benchmarks: dict[tuple[str, str], RouteBenchmark] | None = None,
    ) -> HolisticScore:
        """
        Score one flight.

        Args:
            flight: Itinerary to score
            candidate_set: All flights of the same search, for relative
                efficiency. The flight itself always counts.
            benchmarks: Precomputed route benchmarks for candidate_set, so
                batch callers do not rebuild them per flight

        Returns:
            HolisticScore; a neutral 50/acceptable score when the flight is
            missing timestamps or geometry
        """
        try:
            itinerary = resolve_itinerary(flight, self.directory, self.facilities)
            profile = build_profile(
                itinerary.origin,
                itinerary.destination,
                itinerary.departure,
                itinerary.arrival,
                flight_id=flight.id,
            )
        except MalformedFlight as e:
            logger.warning(f"Degraded scoring for flight {flight.id}: {e}")
            return neutral_score(flight.id, str(e))

        if benchmarks is None:
            benchmarks = build_benchmarks([*candidate_set, flight])
        route = (flight.origin.upper(), flight.destination.upper())
        benchmark = benchmarks.get(route) or build_benchmarks([flight])[route]

        dimensions = {
            "circadian": circadian_dimension(profile, itinerary),
            "strategy": strategy_dimension(itinerary),
            "comfort": comfort_dimension(itinerary),
            "efficiency": efficiency_dimension(flight, benchmark),
        }
        sub_scores = {name: dimension.score for name, dimension in dimensions.items()}
        overall = overall_score(sub_scores)

        components: dict[str, float] = {}
        for dimension in dimensions.values():
            components.update(dimension.components)

        insights = generate_insights(flight, profile, dimensions, itinerary.layovers)

        score = HolisticScore(
            flight_id=flight.id,
            overall_jetlag_score=overall,
            circadian_score=sub_scores["circadian"],
            comfort_score=sub_scores["comfort"],
            strategy_score=sub_scores["strategy"],
            efficiency_score=sub_scores["efficiency"],
            recommendation=classify_recommendation(overall),
            estimated_recovery_days=profile.estimated_recovery_days,
            strengths=insights.strengths,
            weaknesses=insights.weaknesses,
            recommendations=insights.recommendations,
            critical_factors=insights.critical_factors,
            scenario_matches=scenario_matches(sub_scores),
            tradeoffs=tradeoff_notes(flight, dimensions),
            components=components,
            local_departure_hour=profile.local_departure_hour,
            local_arrival_hour=profile.local_arrival_hour,
        )
        logger.debug(f"Scored {flight.id}: {overall:.2f} ({score.recommendation})")
        return score
