"""
Price versus jet lag tradeoff analysis.

Runs over the whole scored set at once: categories depend on global
min/max, so this is the synchronization point after per-flight scoring.
Value scores are normalized within one search and are not comparable
across searches.
"""

import math
from collections.abc import Sequence
from dataclasses import replace

from .errors import check_unique_ids
from .types import PriceAnalysis, PriceCategory, PriceCategoryName, ScoredFlight, ValueRange

JETLAG_VALUE_WEIGHT = 0.6
PRICE_VALUE_WEIGHT = 0.4
DEGENERATE_NORMALIZED = 0.5  # Used when every flight shares the same value


def _value_range(values: list[float]) -> ValueRange | None:
    if not values:
        return None
    return ValueRange(minimum=min(values), maximum=max(values), average=sum(values) / len(values))


def _normalize(value: float, value_range: ValueRange) -> float:
    if value_range.span == 0:
        return DEGENERATE_NORMALIZED
    return (value - value_range.minimum) / value_range.span


def value_score(price: float, jetlag: float, price_range: ValueRange, jetlag_range: ValueRange) -> float:
    """
    Blend of cheapness and jet lag quality, 0-100.

    Both inputs are min-max normalized over this search only.
    """
    cheapness = 1 - _normalize(price, price_range)
    quality = _normalize(jetlag, jetlag_range)
    return 100 * (PRICE_VALUE_WEIGHT * cheapness + JETLAG_VALUE_WEIGHT * quality)


def _pick_cheapest(flights: list[ScoredFlight]) -> ScoredFlight:
    # min() keeps the first of equal keys, so input order breaks remaining ties
    return min(flights, key=lambda f: (f.price, -f.jetlag_score))


def _pick_best_jetlag(flights: list[ScoredFlight]) -> ScoredFlight:
    return min(
        flights,
        key=lambda f: (-f.jetlag_score, f.price if f.price is not None else math.inf),
    )


def _pick_balanced(
    flights: list[ScoredFlight], price_range: ValueRange, jetlag_range: ValueRange
) -> ScoredFlight:
    def distance(f: ScoredFlight) -> float:
        return math.hypot(
            _normalize(f.price, price_range) - 0.5,
            _normalize(f.jetlag_score, jetlag_range) - 0.5,
        )

    return min(flights, key=distance)


def analyze_tradeoffs(scored: Sequence[ScoredFlight]) -> PriceAnalysis:
    """
    Categorize a scored result set.

    Flights without a price are never categorized by price, though they
    still compete for best jet lag. An empty set gives an empty analysis.

    Raises:
        DuplicateFlightId: when two flights share an id
    """
    if not scored:
        return PriceAnalysis()

    check_unique_ids(f.flight.id for f in scored)

    priced = [f for f in scored if f.price is not None]
    price_range = _value_range([f.price for f in priced])
    jetlag_range = _value_range([f.jetlag_score for f in scored])
    priced_jetlag_range = _value_range([f.jetlag_score for f in priced])

    values: dict[str, float] = {}
    for f in priced:
        values[f.flight.id] = value_score(f.price, f.jetlag_score, price_range, priced_jetlag_range)

    chosen: dict[PriceCategoryName, ScoredFlight] = {}
    if priced:
        chosen["cheapest"] = _pick_cheapest(priced)
    chosen["best-jetlag"] = _pick_best_jetlag(list(scored))
    if priced:
        chosen["best-value"] = max(priced, key=lambda f: values[f.flight.id])
    if len(priced) > 1:
        chosen["balanced"] = _pick_balanced(priced, price_range, priced_jetlag_range)

    cheapest = chosen.get("cheapest")
    best_jetlag = chosen["best-jetlag"]
    price_gap = None
    if cheapest is not None and best_jetlag.price is not None:
        price_gap = best_jetlag.price - cheapest.price

    categories: dict[str, PriceCategory] = {}
    for name, f in chosen.items():
        per_point = None
        if f.price is not None and f.jetlag_score > 0:
            per_point = f.price / f.jetlag_score
        categories[name] = PriceCategory(
            category=name,
            flight_id=f.flight.id,
            value_score=values.get(f.flight.id, 0.0),
            savings_from_best=price_gap if name == "cheapest" else None,
            extra_cost_for_best=price_gap if name == "best-jetlag" else None,
            price_per_jetlag_point=per_point,
        )

    return PriceAnalysis(
        cheapest=cheapest,
        best_jetlag=best_jetlag,
        best_value=chosen.get("best-value"),
        balanced=chosen.get("balanced"),
        categories=categories,
        value_scores=values,
        price_range=price_range,
        jetlag_range=jetlag_range,
    )


def annotate(scored: Sequence[ScoredFlight], analysis: PriceAnalysis) -> list[ScoredFlight]:
    """Attach value scores and category tags, keeping input order."""
    tags: dict[str, list[PriceCategoryName]] = {}
    for name, category in analysis.categories.items():
        tags.setdefault(category.flight_id, []).append(name)

    return [
        replace(
            f,
            value_score=analysis.value_scores.get(f.flight.id),
            categories=tuple(tags.get(f.flight.id, ())),
        )
        for f in scored
    ]


def categorize(scored: Sequence[ScoredFlight]) -> tuple[PriceAnalysis, list[ScoredFlight]]:
    """
    Analyze and annotate in one step.

    The analysis points at the annotated flights, so its picks carry their
    value scores and category tags.
    """
    analysis = analyze_tradeoffs(scored)
    annotated = annotate(scored, analysis)
    by_id = {f.flight.id: f for f in annotated}

    def pick(flight: ScoredFlight | None) -> ScoredFlight | None:
        return by_id[flight.flight.id] if flight is not None else None

    analysis = replace(
        analysis,
        cheapest=pick(analysis.cheapest),
        best_jetlag=pick(analysis.best_jetlag),
        best_value=pick(analysis.best_value),
        balanced=pick(analysis.balanced),
    )
    return analysis, annotated
