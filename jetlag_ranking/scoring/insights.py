"""
Rule-based annotations for a scored flight.

Rules run in a fixed order and append to lists, so identical inputs always
give identical reason lists. Only reason codes are produced here; see
formatting.py for display text.
"""

from dataclasses import dataclass, field

from ..airports.layover import classify_connection
from ..types import CircadianProfile, FlightOption, Reason
from .dimensions import NAP_WINDOW_SCORE, DimensionScore
from .itinerary import ResolvedLayover

STRONG_DIMENSION_THRESHOLD = 80.0
WEAK_DIMENSION_THRESHOLD = 40.0
DIMENSION_ORDER = ("circadian", "strategy", "comfort", "efficiency")

SHORT_TRIP_HOURS = 10
LONG_TRIP_HOURS = 16
LARGE_ADVANCE_HOURS = 8
LONG_RECOVERY_DAYS = 5


@dataclass
class Insights:
    strengths: list[Reason] = field(default_factory=list)
    weaknesses: list[Reason] = field(default_factory=list)
    recommendations: list[Reason] = field(default_factory=list)
    critical_factors: list[Reason] = field(default_factory=list)


def generate_insights(
    flight: FlightOption,
    profile: CircadianProfile,
    dimensions: dict[str, DimensionScore],
    layovers: list[ResolvedLayover],
) -> Insights:
    insights = Insights()

    # One reason per sub-score that clears or misses its threshold
    for name in DIMENSION_ORDER:
        score = dimensions[name].score
        if score >= STRONG_DIMENSION_THRESHOLD:
            insights.strengths.append(Reason(f"strong_{name}", {"score": round(score, 1)}))
        elif score < WEAK_DIMENSION_THRESHOLD:
            insights.weaknesses.append(Reason(f"weak_{name}", {"score": round(score, 1)}))

    circadian = dimensions["circadian"].components
    if circadian["departure_timing"] >= 80:
        insights.strengths.append(Reason("optimal_departure_timing"))
    elif circadian["departure_timing"] < 50:
        insights.weaknesses.append(Reason("suboptimal_departure_timing"))
        insights.recommendations.append(Reason("consider_other_departure_times"))

    if profile.arrival_time_optimality >= 9:
        insights.strengths.append(Reason("morning_arrival"))
    elif profile.arrival_time_optimality <= 2:
        insights.weaknesses.append(Reason("late_arrival"))
        insights.recommendations.append(Reason("prefer_morning_arrival"))

    if profile.adaptation == "advance" and profile.timezones_crossed >= LARGE_ADVANCE_HOURS:
        insights.critical_factors.append(
            Reason("large_eastward_shift", {"hours": profile.timezones_crossed})
        )
        insights.recommendations.append(Reason("shift_sleep_before_departure"))

    comfort = dimensions["comfort"].components
    if comfort["aircraft_quality"] >= 80:
        insights.strengths.append(Reason("excellent_aircraft"))
    if comfort["airline_quality"] < 60:
        insights.weaknesses.append(Reason("limited_inflight_service"))

    if flight.stops == 0:
        insights.strengths.append(Reason("direct_flight"))
    elif flight.stops > 1:
        insights.weaknesses.append(Reason("multiple_connections", {"stops": flight.stops}))
        insights.critical_factors.append(Reason("multiple_layovers_worsen_jetlag"))

    for layover in layovers:
        rating = classify_connection(layover.intelligence, layover.duration_minutes)
        if rating == "insufficient":
            insights.critical_factors.append(
                Reason("connection_below_minimum", {"airport": layover.airport})
            )
        elif rating == "risky":
            insights.weaknesses.append(Reason("tight_connection_at", {"airport": layover.airport}))
        if not layover.facilities.resolved:
            insights.critical_factors.append(
                Reason("unverified_airport_data", {"airport": layover.airport})
            )

    if dimensions["strategy"].components["nap_opportunity"] >= NAP_WINDOW_SCORE:
        insights.strengths.append(Reason("layover_nap_window"))

    elapsed = flight.elapsed_minutes
    if elapsed is not None:
        hours = elapsed / 60
        if hours < SHORT_TRIP_HOURS:
            insights.strengths.append(Reason("short_travel_time"))
        elif hours > LONG_TRIP_HOURS:
            insights.weaknesses.append(Reason("long_journey", {"hours": round(hours, 1)}))
            insights.recommendations.append(Reason("plan_extra_recovery"))

    if profile.estimated_recovery_days >= LONG_RECOVERY_DAYS:
        insights.recommendations.append(
            Reason("plan_recovery_days", {"days": round(profile.estimated_recovery_days, 1)})
        )

    return insights


def tradeoff_notes(flight: FlightOption, dimensions: dict[str, DimensionScore]) -> list[Reason]:
    comfort = dimensions["comfort"].score
    efficiency = dimensions["efficiency"].score

    notes: list[Reason] = []
    if comfort > 70 and efficiency < 60:
        notes.append(Reason("comfort_over_speed"))
    elif efficiency >= 80 and comfort < 50:
        notes.append(Reason("speed_over_comfort"))
    if flight.stops > 0:
        notes.append(Reason("layover_vs_direct", {"stops": flight.stops}))
    return notes


# =============================================================================
# Personas
# =============================================================================

PERSONA_WEIGHTS: dict[str, dict[str, float]] = {
    "Business Traveler": {"circadian": 0.45, "strategy": 0.15, "comfort": 0.20, "efficiency": 0.20},
    "Budget Traveler": {"circadian": 0.35, "strategy": 0.30, "comfort": 0.05, "efficiency": 0.30},
    "Comfort Seeker": {"circadian": 0.20, "strategy": 0.10, "comfort": 0.60, "efficiency": 0.10},
    "Time-Sensitive Traveler": {"circadian": 0.20, "strategy": 0.15, "comfort": 0.05, "efficiency": 0.60},
    "Jet-Lag Sensitive Traveler": {"circadian": 0.65, "strategy": 0.20, "comfort": 0.15, "efficiency": 0.0},
}

PERSONA_MATCH_THRESHOLD = 70.0


def persona_match(sub_scores: dict[str, float], weights: dict[str, float]) -> float:
    """Weighted dot product of sub-scores, normalized to 0-100."""
    total = sum(weights.values())
    return sum(sub_scores[name] * weight for name, weight in weights.items()) / total


def scenario_matches(sub_scores: dict[str, float]) -> dict[str, float]:
    """Personas this flight suits, in table order. Only matches >= 70 are kept."""
    matches: dict[str, float] = {}
    for persona, weights in PERSONA_WEIGHTS.items():
        match = persona_match(sub_scores, weights)
        if match >= PERSONA_MATCH_THRESHOLD:
            matches[persona] = match
    return matches
