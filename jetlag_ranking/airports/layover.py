"""
Scoring and advice for one specific connection.

Unlike the airport-level scores, these depend on how long the traveler is
actually on the ground.
"""

from ..types import AirportIntelligence, ConnectionAdvice, ConnectionRating, Reason

OPTIMAL_LAYOVER_MIN = 90  # minutes
OPTIMAL_LAYOVER_MAX = 180
TIGHT_CONNECTION_MINUTES = 120
LONG_CONNECTION_MINUTES = 240


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def realistic_connection_minutes(intel: AirportIntelligence) -> float:
    """Recommended connection time, defaulting to 1.2x the minimum."""
    if intel.realistic_connection_minutes:
        return intel.realistic_connection_minutes
    return intel.minimum_connection_minutes * 1.2


def duration_fit_points(intel: AirportIntelligence, duration_minutes: float) -> float:
    """
    Duration component, from -30 to +10.

    Short layovers lose up to 30 points; long ones lose up to 30 per extra
    two hours, softened by up to half when good lounges make waiting easy.
    """
    if duration_minutes < OPTIMAL_LAYOVER_MIN:
        return -((OPTIMAL_LAYOVER_MIN - duration_minutes) / OPTIMAL_LAYOVER_MIN) * 30
    if duration_minutes > OPTIMAL_LAYOVER_MAX:
        excess_hours = (duration_minutes - OPTIMAL_LAYOVER_MAX) / 120
        lounge_mitigation = 1 - (intel.lounge_quality / 10) * 0.5
        return -min(30.0, excess_hours * 30 * lounge_mitigation)
    return 10.0


def layover_quality(
    intel: AirportIntelligence, duration_minutes: float, international: bool = False
) -> float:
    """
    Score one layover from 0-100.

    Buckets: duration fit (-30..+10), lounge quality (0-25), connection ease
    (0-20), recovery facilities (0-15), stress penalties (down to -10).
    Falling short of the minimum connection time costs 5 points per 10
    minutes; meeting the realistic time earns 5.
    """
    score = 50.0
    score += duration_fit_points(intel, duration_minutes)
    score += (intel.lounge_quality / 10) * 25
    score += ((10 - intel.connection_complexity) / 10) * 20

    if intel.has_shower_facilities:
        score += 5
    if intel.has_sleep_seating:
        score += 5
    if intel.has_healthy_food:
        score += 3
    if intel.has_premium_lounges:
        score += 2

    if intel.requires_security_rescreen:
        score -= 5
        if duration_minutes < TIGHT_CONNECTION_MINUTES:
            score -= 3
    if international and not intel.has_fast_track:
        score -= 2

    if duration_minutes < intel.minimum_connection_minutes:
        deficit = intel.minimum_connection_minutes - duration_minutes
        score -= (deficit / 10) * 5
    elif duration_minutes >= realistic_connection_minutes(intel):
        score += 5

    return _clamp(score, 0.0, 100.0)


def classify_connection(intel: AirportIntelligence, duration_minutes: float) -> ConnectionRating:
    if duration_minutes < intel.minimum_connection_minutes:
        return "insufficient"
    if duration_minutes < realistic_connection_minutes(intel):
        return "risky"
    if duration_minutes < TIGHT_CONNECTION_MINUTES:
        return "marginal"
    if duration_minutes < LONG_CONNECTION_MINUTES:
        return "good"
    return "excellent"


def connection_advice(intel: AirportIntelligence, duration_minutes: float) -> ConnectionAdvice:
    """
    Classify a layover and collect tips.

    Tip order is fixed: general tips for the rating, then the airport's own
    connection tips, then the rescreening warning, then the best-for-jetlag
    note.
    """
    rating = classify_connection(intel, duration_minutes)
    reasons: list[Reason] = []
    tips: list[Reason] = []

    if rating == "insufficient":
        reasons.append(
            Reason("below_minimum_connection", {"minimum_minutes": intel.minimum_connection_minutes})
        )
        tips.append(Reason("tip_longer_layover"))
    elif rating == "risky":
        reasons.append(Reason("tight_connection"))
        if intel.has_fast_track:
            tips.append(Reason("tip_use_fast_track"))
    elif rating == "marginal":
        reasons.append(Reason("limited_facility_time"))
    elif rating == "good":
        reasons.append(Reason("balanced_connection"))
        if intel.lounge_quality >= 7:
            lounge = intel.notable_lounges[0] if intel.notable_lounges else None
            tips.append(Reason("tip_visit_lounge", {"lounge": lounge}))
    else:
        reasons.append(Reason("ample_rest_time"))
        if intel.has_shower_facilities:
            tips.append(Reason("tip_shower"))
        if intel.has_sleep_seating:
            tips.append(Reason("tip_nap"))

    if intel.connection_tips:
        tips.append(Reason("airport_tip", {"text": intel.connection_tips}))
    if intel.requires_security_rescreen:
        tips.append(Reason("warn_security_rescreen"))
    if intel.best_for_jetlag:
        tips.append(Reason("best_for_jetlag", {"text": intel.best_for_jetlag}))

    return ConnectionAdvice(rating=rating, reasons=reasons, tips=tips)
