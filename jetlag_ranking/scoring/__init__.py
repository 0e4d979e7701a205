"""
Scoring Layer.

Turns one resolved itinerary into a HolisticScore.

Modules:
- itinerary: airport, layover and equipment resolution for a flight
- enrichment: smart defaults for unknown aircraft and airlines
- dimensions: circadian, comfort, strategy and efficiency sub-scores
- insights: reason-code annotations, tradeoff notes and persona matches
- holistic_scorer: weighted combination and neutral fallback
"""

from .dimensions import RouteBenchmark, build_benchmarks
from .enrichment import default_aircraft, default_airline
from .holistic_scorer import (
    WEIGHTS,
    HolisticScorer,
    classify_recommendation,
    neutral_score,
    overall_score,
)
from .insights import PERSONA_WEIGHTS, scenario_matches

__all__ = [
    "HolisticScorer",
    "WEIGHTS",
    "PERSONA_WEIGHTS",
    "RouteBenchmark",
    "build_benchmarks",
    "classify_recommendation",
    "default_aircraft",
    "default_airline",
    "neutral_score",
    "overall_score",
    "scenario_matches",
]
