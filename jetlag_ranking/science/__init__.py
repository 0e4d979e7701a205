"""
Circadian Science Layer.

Pure circadian functions without pricing or airport awareness.

Modules:
- circadian_model: timezone delta, travel direction, arrival optimality and
  recovery-day estimates
"""

from .circadian_model import (
    RECOVERY_RATES,
    arrival_time_optimality,
    build_profile,
    classify_direction,
    estimate_recovery_days,
    normalize_longitude_delta,
)

__all__ = [
    "RECOVERY_RATES",
    "arrival_time_optimality",
    "build_profile",
    "classify_direction",
    "estimate_recovery_days",
    "normalize_longitude_delta",
]
