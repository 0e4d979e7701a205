"""
Display text for reason codes.

The scoring core only emits Reason codes; this module is the single place
that turns them into English. Swap MESSAGES to localize.
"""

from typing import Any

from .types import FilterSuggestion, PriceCategory, Reason

MESSAGES: dict[str, str] = {
    # Sub-score tiers
    "strong_circadian": "Timing works with your body clock",
    "strong_strategy": "Well-planned routing and connections",
    "strong_comfort": "Comfortable aircraft and cabin",
    "strong_efficiency": "One of the fastest options on this route",
    "weak_circadian": "Timing works against your body clock",
    "weak_strategy": "Awkward routing or connections",
    "weak_comfort": "Limited on-board comfort",
    "weak_efficiency": "Much slower than the best option on this route",
    # Circadian
    "optimal_departure_timing": "Optimal departure time for timezone adjustment",
    "suboptimal_departure_timing": "Suboptimal departure timing",
    "consider_other_departure_times": "Consider flights departing at different times",
    "morning_arrival": "Morning arrival helps you reset to local time",
    "late_arrival": "Late-night arrival makes the first day harder",
    "prefer_morning_arrival": "Look for an arrival between 6am and noon",
    "large_eastward_shift": "Large eastward shift of {hours:g} hours",
    "shift_sleep_before_departure": "Start shifting your sleep earlier a few days before departure",
    "plan_recovery_days": "Plan about {days:g} days to fully adjust",
    # Comfort
    "excellent_aircraft": "Excellent aircraft for sleep and comfort",
    "limited_inflight_service": "Limited in-flight amenities",
    # Routing
    "direct_flight": "Direct flight minimizes travel stress",
    "multiple_connections": "{stops} connections increase complexity",
    "multiple_layovers_worsen_jetlag": "Multiple layovers can worsen jet lag",
    "connection_below_minimum": "Connection at {airport} is below the minimum connection time",
    "tight_connection_at": "Tight connection at {airport}",
    "unverified_airport_data": "Limited facility data for {airport}",
    "layover_nap_window": "Layover falls in your body-clock night at an airport where you can rest",
    "short_travel_time": "Short travel time",
    "long_journey": "Long journey ({hours:g} hours)",
    "plan_extra_recovery": "Plan for extra recovery time",
    "degraded_confidence": "Score is an estimate: flight data was incomplete",
    # Tradeoffs
    "comfort_over_speed": "Prioritizes comfort over speed",
    "speed_over_comfort": "Prioritizes speed over comfort",
    "layover_vs_direct": "{stops} stop(s) vs direct routing",
    # Connection advice
    "below_minimum_connection": "Below minimum connection time ({minimum_minutes}min)",
    "tip_longer_layover": "Consider a longer layover or different routing",
    "tight_connection": "Tight connection - delays could cause a missed flight",
    "tip_use_fast_track": "Use fast-track if eligible",
    "limited_facility_time": "Adequate time but limited facility access",
    "balanced_connection": "Good balance of connection time and facility access",
    "tip_visit_lounge": "Take advantage of {lounge}",
    "ample_rest_time": "Ample time to rest and recover",
    "tip_shower": "Freshen up with a shower",
    "tip_nap": "Take a nap in sleep pods or lounge",
    "airport_tip": "{text}",
    "warn_security_rescreen": "Allow extra time for security re-screening",
    "best_for_jetlag": "{text}",
}

DEFAULT_PARAMS: dict[str, dict[str, Any]] = {
    "tip_visit_lounge": {"lounge": "airport lounges"},
}

SUGGESTION_MESSAGES: dict[str, str] = {
    "raise_max_price": "Raising max price to {value} would show {count} more flights",
    "lower_min_price": "Lowering min price to {value} would show {count} more flights",
    "widen_price_percentile": "Showing all price ranges would show {count} more flights",
    "raise_max_duration": "Allowing trips up to {value} would show {count} more flights",
    "allow_more_stops": "Allowing {value} stop(s) would show {count} more flights",
    "widen_arrival_window": "Widening the arrival window would show {count} more flights",
    "widen_departure_window": "Widening the departure window would show {count} more flights",
    "lower_min_jetlag_score": "Lowering the minimum jet lag score to {value} would show {count} more flights",
    "raise_max_recovery_days": "Allowing {value} recovery days would show {count} more flights",
    "add_cabin_classes": "Including {value} would show {count} more flights",
    "add_preferred_airlines": "Including {value} would show {count} more flights",
    "remove_excluded_airlines": "Allowing {value} would show {count} more flights",
    "allow_older_aircraft": "Allowing older aircraft would show {count} more flights",
    "widen_layover_range": "Widening the layover range would show {count} more flights",
}

CATEGORY_LABELS = {
    "cheapest": "Cheapest",
    "best-jetlag": "Best for jet lag",
    "best-value": "Best value",
    "balanced": "Balanced",
}


def format_price(amount: float, currency: str = "USD") -> str:
    if currency == "USD":
        return f"${amount:,.0f}"
    return f"{amount:,.0f} {currency}"


def format_duration(minutes: float) -> str:
    hours, mins = divmod(int(round(minutes)), 60)
    return f"{hours}h {mins:02d}m"


def describe(reason: Reason) -> str:
    """Display text for one reason. Unknown codes fall back to the code itself."""
    template = MESSAGES.get(reason.code)
    if template is None:
        return reason.code
    params = dict(DEFAULT_PARAMS.get(reason.code, {}))
    params.update({k: v for k, v in reason.detail.items() if v is not None})
    return template.format(**params)


def describe_all(reasons: list[Reason]) -> list[str]:
    return [describe(reason) for reason in reasons]


def _suggestion_value(suggestion: FilterSuggestion, currency: str) -> str:
    value = suggestion.suggested_value
    if suggestion.action in ("raise_max_price", "lower_min_price"):
        return format_price(value, currency)
    if suggestion.action == "raise_max_duration":
        return format_duration(value)
    if isinstance(value, float):
        return f"{value:.1f}"
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    return str(value)


def describe_suggestion(suggestion: FilterSuggestion, currency: str = "USD") -> str:
    template = SUGGESTION_MESSAGES.get(suggestion.action, suggestion.action)
    return template.format(
        value=_suggestion_value(suggestion, currency), count=suggestion.unlocked_count
    )


def describe_category(category: PriceCategory, currency: str = "USD") -> str:
    label = CATEGORY_LABELS[category.category]
    if category.savings_from_best:
        return f"{label} - save {format_price(category.savings_from_best, currency)} vs best for jet lag"
    if category.extra_cost_for_best:
        return f"{label} - {format_price(category.extra_cost_for_best, currency)} more than cheapest"
    if category.category == "best-value":
        return f"{label} ({category.value_score:.0f}/100)"
    return label
