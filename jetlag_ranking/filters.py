"""
Result filtering, sorting and filter suggestions.

Filters are an ordered chain of independent predicates combined with AND.
Each flight is charged to the first rule that rejects it, so removal counts
never double count. Predicates compare against thresholds fixed before the
chain runs. The price percentile is resolved once against a reference set
and pinned on the spec, so re-applying a spec to its own output is a no-op.
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, get_args

from .errors import InvalidFilterSpec
from .scoring.enrichment import segment_aircraft
from .scoring.itinerary import segment_gaps
from .time_utils import in_time_window, is_aware, parse_time, time_to_minutes
from .types import (
    CabinClass,
    FilterSpec,
    FilterStats,
    FilterSuggestion,
    FilterSuggestions,
    FlightOption,
    PricePercentile,
    ScoredFlight,
    SortKey,
)

logger = logging.getLogger(__name__)

CABIN_ORDER: tuple[str, ...] = get_args(CabinClass)
SORT_KEYS: tuple[str, ...] = get_args(SortKey)
PRICE_PERCENTILES: tuple[str, ...] = get_args(PricePercentile)
DEFAULT_SORT: SortKey = "jetlag-best"
POPULAR_AIRLINE_LIMIT = 10
MODERN_GENERATIONS = ("modern", "next-gen")
MINUTES_PER_DAY = 24 * 60


@dataclass(frozen=True)
class FilterRule:
    name: str
    accepts: Callable[[ScoredFlight], bool]


# =============================================================================
# Validation
# =============================================================================


def _check_non_negative(spec: FilterSpec, name: str) -> None:
    value = getattr(spec, name)
    if value is not None and value < 0:
        raise InvalidFilterSpec(name, f"must be >= 0, got {value}")


def _check_window(spec: FilterSpec, name: str) -> None:
    window = getattr(spec, name)
    if window is None:
        return
    if len(window) != 2:
        raise InvalidFilterSpec(name, "expected a (start, end) pair of HH:MM times")
    for value in window:
        try:
            parse_time(value)
        except (ValueError, AttributeError) as e:
            raise InvalidFilterSpec(name, f"{value!r} is not a valid HH:MM time") from e


def validate_filter_spec(spec: FilterSpec) -> None:
    """
    Reject out-of-domain values before any filtering runs.

    Raises:
        InvalidFilterSpec: naming the offending field
    """
    for name in (
        "max_price",
        "min_price",
        "max_duration_minutes",
        "max_stops",
        "max_recovery_days",
        "min_layover_minutes",
        "max_layover_minutes",
    ):
        _check_non_negative(spec, name)

    if spec.min_price is not None and spec.max_price is not None and spec.min_price > spec.max_price:
        raise InvalidFilterSpec("min_price", "must not exceed max_price")
    if (
        spec.min_layover_minutes is not None
        and spec.max_layover_minutes is not None
        and spec.min_layover_minutes > spec.max_layover_minutes
    ):
        raise InvalidFilterSpec("min_layover_minutes", "must not exceed max_layover_minutes")
    if spec.max_duration_minutes == 0:
        raise InvalidFilterSpec("max_duration_minutes", "must be positive")
    if spec.price_percentile not in PRICE_PERCENTILES:
        raise InvalidFilterSpec(
            "price_percentile", f"must be one of {', '.join(PRICE_PERCENTILES)}"
        )
    if spec.min_jetlag_score is not None and not 0 <= spec.min_jetlag_score <= 100:
        raise InvalidFilterSpec("min_jetlag_score", "must be between 0 and 100")

    _check_window(spec, "arrival_window")
    _check_window(spec, "departure_window")

    if spec.cabin_classes is not None:
        unknown = [c for c in spec.cabin_classes if c not in CABIN_ORDER]
        if unknown:
            raise InvalidFilterSpec("cabin_classes", f"unknown cabin class {unknown[0]!r}")
    for name in ("preferred_airlines", "excluded_airlines"):
        codes = getattr(spec, name)
        if codes is not None and any(not code for code in codes):
            raise InvalidFilterSpec(name, "airline codes must be non-empty")


# =============================================================================
# Rules
# =============================================================================


def percentile_bounds(prices: list[float]) -> tuple[float, float]:
    """33rd and 67th percentile prices by index into the sorted list."""
    ordered = sorted(prices)
    p33 = ordered[int(len(ordered) * 0.33)]
    p67 = ordered[int(len(ordered) * 0.67)]
    return p33, p67


def price_band(
    spec: FilterSpec, reference: Sequence[ScoredFlight]
) -> tuple[float | None, float | None] | None:
    """
    Price band of the spec's percentile bucket, None for "all" or an unpriced set.

    A band already pinned on the spec wins over the reference set.
    """
    if spec.price_percentile == "all":
        return None
    if spec.price_bounds is not None:
        return spec.price_bounds
    prices = [f.price for f in reference if f.price is not None]
    if not prices:
        return None
    p33, p67 = percentile_bounds(prices)
    return {
        "cheap": (None, p33),
        "mid": (p33, p67),
        "expensive": (p67, None),
    }[spec.price_percentile]


def _layover_durations(flight: FlightOption) -> list[float]:
    if flight.layovers:
        return [l.duration_minutes for l in flight.layovers]
    return [g for g in segment_gaps(flight) if g is not None]


def _minute_of_day(scored: ScoredFlight, which: str) -> int | None:
    """
    Airport-local minute of day of the first departure or last arrival.

    Uses the local hour the circadian model resolved from the airport's
    timezone; degraded scores fall back to the instant's own offset.
    """
    if which == "arrival":
        hour, instant = scored.score.local_arrival_hour, scored.flight.arrival
    else:
        hour, instant = scored.score.local_departure_hour, scored.flight.departure
    if hour is not None:
        return int(round(hour * 60)) % MINUTES_PER_DAY
    if instant is None:
        return None
    return time_to_minutes(instant.time())


def _window_rule(name: str, window: tuple[str, str], which: str) -> FilterRule:
    start, end = parse_time(window[0]), parse_time(window[1])

    def accepts(f: ScoredFlight) -> bool:
        minute = _minute_of_day(f, which)
        return minute is None or in_time_window(minute, start, end)

    return FilterRule(name, accepts)


def build_rules(spec: FilterSpec, reference: Sequence[ScoredFlight]) -> list[FilterRule]:
    """
    The active rules of a spec, in chain order.

    Unpriced flights pass price rules and flights with unknown times or
    durations pass the rules that need them; only known values can violate
    a constraint. The price percentile is resolved against `reference`.
    """
    rules: list[FilterRule] = []

    if spec.max_price is not None:
        rules.append(FilterRule("max_price", lambda f: f.price is None or f.price <= spec.max_price))
    if spec.min_price is not None:
        rules.append(FilterRule("min_price", lambda f: f.price is None or f.price >= spec.min_price))

    bounds = price_band(spec, reference)
    if bounds is not None:

        def in_bucket(f: ScoredFlight, lo=bounds[0], hi=bounds[1]) -> bool:
            if f.price is None:
                return True
            return (lo is None or f.price >= lo) and (hi is None or f.price <= hi)

        rules.append(FilterRule("price_percentile", in_bucket))

    if spec.max_duration_minutes is not None:
        rules.append(
            FilterRule(
                "max_duration",
                lambda f: f.flight.elapsed_minutes is None
                or f.flight.elapsed_minutes <= spec.max_duration_minutes,
            )
        )

    max_stops = 0 if spec.direct_only else spec.max_stops
    if max_stops is not None:
        rules.append(FilterRule("max_stops", lambda f: f.flight.stops <= max_stops))

    if spec.arrival_window is not None:
        rules.append(_window_rule("arrival_window", spec.arrival_window, "arrival"))
    if spec.departure_window is not None:
        rules.append(_window_rule("departure_window", spec.departure_window, "departure"))

    if spec.min_jetlag_score is not None:
        rules.append(
            FilterRule("min_jetlag_score", lambda f: f.jetlag_score >= spec.min_jetlag_score)
        )
    if spec.max_recovery_days is not None:
        rules.append(
            FilterRule(
                "max_recovery_days",
                lambda f: f.score.estimated_recovery_days <= spec.max_recovery_days,
            )
        )

    if spec.cabin_classes:
        allowed = set(spec.cabin_classes)
        rules.append(
            FilterRule("cabin_class", lambda f: all(c in allowed for c in f.flight.cabin_classes))
        )
    if spec.preferred_airlines:
        preferred = {code.upper() for code in spec.preferred_airlines}
        rules.append(
            FilterRule(
                "preferred_airlines",
                lambda f: any(code.upper() in preferred for code in f.flight.airline_codes),
            )
        )
    if spec.excluded_airlines:
        excluded = {code.upper() for code in spec.excluded_airlines}
        rules.append(
            FilterRule(
                "excluded_airlines",
                lambda f: not any(code.upper() in excluded for code in f.flight.airline_codes),
            )
        )

    if spec.modern_aircraft_only:
        rules.append(
            FilterRule(
                "modern_aircraft",
                lambda f: all(
                    segment_aircraft(s.aircraft, s.aircraft_type).generation in MODERN_GENERATIONS
                    for s in f.flight.segments
                ),
            )
        )

    if spec.min_layover_minutes is not None or spec.max_layover_minutes is not None:
        lo = spec.min_layover_minutes
        hi = spec.max_layover_minutes

        def layovers_in_range(f: ScoredFlight) -> bool:
            return all(
                (lo is None or d >= lo) and (hi is None or d <= hi)
                for d in _layover_durations(f.flight)
            )

        rules.append(FilterRule("layover_duration", layovers_in_range))

    return rules


def _first_rejection(flight: ScoredFlight, rules: list[FilterRule]) -> str | None:
    for rule in rules:
        if not rule.accepts(flight):
            return rule.name
    return None


def apply_filters(
    scored: Sequence[ScoredFlight],
    spec: FilterSpec | None,
    reference: Sequence[ScoredFlight] | None = None,
) -> tuple[list[ScoredFlight], FilterStats]:
    """
    Filter a scored set.

    Args:
        scored: Flights to filter, order is preserved
        spec: Filters to apply; None keeps everything
        reference: Set the price percentile is computed over, defaults to
            `scored`. Ignored once the spec has a pinned price band.

    Returns:
        (kept flights, FilterStats with per-rule removal counts)

    Raises:
        InvalidFilterSpec: before anything is filtered
    """
    if spec is None:
        return list(scored), FilterStats(original_count=len(scored), filtered_count=len(scored))

    validate_filter_spec(spec)
    reference = reference if reference is not None else scored
    if spec.price_bounds is None:
        # Pin the band so re-filtering a narrower set keeps the same bucket
        spec.price_bounds = price_band(spec, reference)
    rules = build_rules(spec, reference)

    removed_by = {rule.name: 0 for rule in rules}
    kept: list[ScoredFlight] = []
    for flight in scored:
        rejected_by = _first_rejection(flight, rules)
        if rejected_by is None:
            kept.append(flight)
        else:
            removed_by[rejected_by] += 1

    stats = FilterStats(original_count=len(scored), filtered_count=len(kept), removed_by=removed_by)
    logger.debug(f"Filtered {stats.original_count} -> {stats.filtered_count}: {removed_by}")
    return kept, stats


# =============================================================================
# Sorting
# =============================================================================

_MISSING_LAST = float("inf")


def _or_last(value: float | None) -> float:
    return _MISSING_LAST if value is None else value


def _negated_or_last(value: float | None) -> float:
    return _MISSING_LAST if value is None else -value


def _timestamp(instant) -> float | None:
    return instant.timestamp() if is_aware(instant) else None


SORT_FUNCTIONS: dict[str, Callable[[ScoredFlight], float]] = {
    "jetlag-best": lambda f: -f.jetlag_score,
    "jetlag-worst": lambda f: f.jetlag_score,
    "price-low": lambda f: _or_last(f.price),
    "price-high": lambda f: _negated_or_last(f.price),
    "value-best": lambda f: _negated_or_last(f.value_score),
    "duration-short": lambda f: _or_last(f.flight.elapsed_minutes),
    "duration-long": lambda f: _negated_or_last(f.flight.elapsed_minutes),
    "recovery-fast": lambda f: f.score.estimated_recovery_days,
    "departure-early": lambda f: _or_last(_timestamp(f.flight.departure)),
    "arrival-early": lambda f: _or_last(_timestamp(f.flight.arrival)),
}


def sort_flights(flights: Sequence[ScoredFlight], sort_key: SortKey | None = None) -> list[ScoredFlight]:
    """
    Stable sort. Flights with equal keys keep their input order and
    missing values sort last.

    Raises:
        InvalidFilterSpec: for an unknown sort key
    """
    validate_sort_key(sort_key)
    return sorted(flights, key=SORT_FUNCTIONS[sort_key or DEFAULT_SORT])


def validate_sort_key(sort_key: str | None) -> None:
    if sort_key is not None and sort_key not in SORT_FUNCTIONS:
        raise InvalidFilterSpec("sort_by", f"must be one of {', '.join(SORT_KEYS)}")


# =============================================================================
# Suggestions
# =============================================================================


def _relaxed_value(rule: str, spec: FilterSpec, unlocked: list[ScoredFlight]) -> tuple[str, Any]:
    """Action code and the value that would admit every unlocked flight."""
    flights = [f.flight for f in unlocked]
    if rule == "max_price":
        return "raise_max_price", max(f.price for f in flights)
    if rule == "min_price":
        return "lower_min_price", min(f.price for f in flights)
    if rule == "price_percentile":
        return "widen_price_percentile", "all"
    if rule == "max_duration":
        return "raise_max_duration", max(f.elapsed_minutes for f in flights)
    if rule == "max_stops":
        return "allow_more_stops", max(f.stops for f in flights)
    if rule == "arrival_window":
        return "widen_arrival_window", None
    if rule == "departure_window":
        return "widen_departure_window", None
    if rule == "min_jetlag_score":
        return "lower_min_jetlag_score", min(f.jetlag_score for f in unlocked)
    if rule == "max_recovery_days":
        return "raise_max_recovery_days", max(f.score.estimated_recovery_days for f in unlocked)
    if rule == "cabin_class":
        cabins = {c for f in flights for c in f.cabin_classes}
        return "add_cabin_classes", [c for c in CABIN_ORDER if c in cabins]
    if rule == "preferred_airlines":
        codes = {code for f in flights for code in f.airline_codes}
        return "add_preferred_airlines", sorted(codes)
    if rule == "excluded_airlines":
        excluded = {code.upper() for code in spec.excluded_airlines or ()}
        codes = {code for f in flights for code in f.airline_codes if code.upper() in excluded}
        return "remove_excluded_airlines", sorted(codes)
    if rule == "modern_aircraft":
        return "allow_older_aircraft", False
    durations = [d for f in flights for d in _layover_durations(f)]
    return "widen_layover_range", (min(durations), max(durations)) if durations else None


def _relaxations(
    scored: Sequence[ScoredFlight], spec: FilterSpec, reference: Sequence[ScoredFlight]
) -> list[FilterSuggestion]:
    """
    Probe each active rule: flights that pass every other rule but fail
    this one are what relaxing it alone would admit.
    """
    rules = build_rules(spec, reference)
    suggestions: list[FilterSuggestion] = []
    for rule in rules:
        others = [r for r in rules if r is not rule]
        unlocked = [
            f for f in scored if not rule.accepts(f) and _first_rejection(f, others) is None
        ]
        if not unlocked:
            continue
        action, value = _relaxed_value(rule.name, spec, unlocked)
        suggestions.append(
            FilterSuggestion(
                rule=rule.name,
                action=action,
                suggested_value=value,
                unlocked_count=len(unlocked),
            )
        )
    # Largest unlock first; sorted() keeps chain order among equals
    return sorted(suggestions, key=lambda s: -s.unlocked_count)


def suggest_filters(
    scored: Sequence[ScoredFlight],
    spec: FilterSpec | None = None,
    limit: int | None = None,
) -> FilterSuggestions:
    """
    UX hints for a result set.

    Price buckets, popular airlines and available cabins describe the whole
    set; relaxations describe what the current spec is hiding.
    """
    suggestions = FilterSuggestions()
    if not scored:
        return suggestions

    prices = [f.price for f in scored if f.price is not None]
    if prices:
        p33, p67 = percentile_bounds(prices)
        suggestions.price_ranges = {
            "budget": (0.0, p33),
            "moderate": (p33, p67),
            "premium": (p67, max(prices)),
        }

    counts: dict[str, int] = {}
    for f in scored:
        for code in f.flight.airline_codes:
            counts[code] = counts.get(code, 0) + 1
    popular = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    suggestions.popular_airlines = popular[:POPULAR_AIRLINE_LIMIT]

    cabins = {c for f in scored for c in f.flight.cabin_classes}
    suggestions.cabin_classes = [c for c in CABIN_ORDER if c in cabins]

    if spec is not None:
        validate_filter_spec(spec)
        relaxations = _relaxations(scored, spec, scored)
        suggestions.relaxations = relaxations[:limit] if limit is not None else relaxations

    return suggestions
