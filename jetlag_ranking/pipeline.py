"""
End-to-end ranking for one search.

score (parallel, per flight) -> tradeoff analysis (barrier) -> filter -> sort

Scoring functions are pure, so per-flight work fans out over a thread pool
with no locking. map() returns results in input order, which keeps the
output identical to a sequential run.
"""

import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor

from .config import Settings, settings as default_settings
from .errors import check_unique_ids
from .filters import (
    apply_filters,
    sort_flights,
    suggest_filters,
    validate_filter_spec,
    validate_sort_key,
)
from .scoring.dimensions import build_benchmarks
from .scoring.holistic_scorer import HolisticScorer
from .tradeoff import categorize
from .types import FilterSpec, FlightOption, ScoredFlight, SearchResultSet, SortKey

logger = logging.getLogger(__name__)


def score_all(
    flights: Sequence[FlightOption],
    scorer: HolisticScorer,
    config: Settings | None = None,
) -> list[ScoredFlight]:
    """Score every flight against the whole set, preserving input order."""
    config = config or default_settings
    if not flights:
        return []

    candidates = list(flights)
    benchmarks = build_benchmarks(candidates)

    def score_one(flight: FlightOption) -> ScoredFlight:
        return ScoredFlight(flight=flight, score=scorer.score(flight, candidates, benchmarks))

    if len(candidates) < config.parallel_threshold:
        return [score_one(f) for f in candidates]

    workers = config.workers_for(len(candidates))
    with ThreadPoolExecutor(max_workers=workers) as executor:
        return list(executor.map(score_one, candidates))


def rank_flights(
    flights: Sequence[FlightOption],
    scorer: HolisticScorer | None = None,
    filter_spec: FilterSpec | None = None,
    sort_key: SortKey | None = None,
    config: Settings | None = None,
) -> SearchResultSet:
    """
    Rank one search's flights.

    The filter spec is validated before any scoring work starts, so an
    invalid spec fails fast with InvalidFilterSpec. Duplicate flight ids fail
    the same way with DuplicateFlightId.
    """
    config = config or default_settings
    scorer = scorer or HolisticScorer()
    if filter_spec is not None:
        validate_filter_spec(filter_spec)
    validate_sort_key(sort_key)
    check_unique_ids(f.id for f in flights)

    scored = score_all(flights, scorer, config)

    # Barrier: categories need the global min/max of the complete set
    analysis, annotated = categorize(scored)

    filtered, stats = apply_filters(annotated, filter_spec, reference=annotated)
    ordered = sort_flights(filtered, sort_key)

    suggestions = suggest_filters(annotated, filter_spec, limit=config.suggestion_limit)

    degraded = sum(1 for f in scored if f.score.degraded)
    if degraded:
        logger.warning(f"{degraded} of {len(scored)} flights scored with degraded confidence")
    logger.info(
        f"Ranked {len(scored)} flights, {stats.filtered_count} after filters, sorted by {sort_key or 'jetlag-best'}"
    )

    return SearchResultSet(
        flights=ordered,
        price_analysis=analysis,
        filter_stats=stats,
        suggestions=suggestions,
        sort_key=sort_key or "jetlag-best",
    )
