"""
Jet Lag Flight Ranking

Scores flight options for circadian impact, comfort, routing strategy and
efficiency, then layers price tradeoffs, filters and sorting on top.

Main entry points: rank() for a whole search, score() for one flight.
"""

from .api import (
    analyze_tradeoffs,
    apply_filters,
    invoke_tool,
    rank,
    score,
    sort,
    suggest_filters,
)
from .errors import DuplicateFlightId, InvalidFilterSpec, MalformedFlight
from .scoring import HolisticScorer
from .types import (
    Aircraft,
    Airline,
    AirportLocation,
    CircadianProfile,
    FilterSpec,
    FilterStats,
    FilterSuggestions,
    FlightOption,
    HolisticScore,
    Layover,
    PriceAnalysis,
    PriceCategory,
    Reason,
    ScoredFlight,
    SearchResultSet,
    Segment,
)

__all__ = [
    # Types
    "Aircraft",
    "Airline",
    "AirportLocation",
    "Segment",
    "Layover",
    "FlightOption",
    "CircadianProfile",
    "Reason",
    "HolisticScore",
    "ScoredFlight",
    "PriceCategory",
    "PriceAnalysis",
    "FilterSpec",
    "FilterStats",
    "FilterSuggestions",
    "SearchResultSet",
    # Errors
    "DuplicateFlightId",
    "InvalidFilterSpec",
    "MalformedFlight",
    # Scoring
    "HolisticScorer",
    # Operations
    "score",
    "analyze_tradeoffs",
    "apply_filters",
    "sort",
    "suggest_filters",
    "rank",
    "invoke_tool",
]
