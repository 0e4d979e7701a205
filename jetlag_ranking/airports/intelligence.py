"""
Airport facility intelligence.

Normalizes raw per-airport facility records into AirportIntelligence and
derives the AirportFacilities view (comfort, stress and jet lag support
scores, each 0-10) used by the scorer.

Two raw shapes are accepted:
- nested sections: {"lounges": {...}, "jetlag_recovery": {...}, "navigation": {...}}
- flat facts: {"lounges.overall_quality": 8.5, "navigation.complexity_score": 3, ...}

Both produce the same record; the engine never sees the storage format.
"""

import logging
from collections.abc import Mapping
from typing import Any, Protocol

from ..types import AirportFacilities, AirportIntelligence, Confidence

logger = logging.getLogger(__name__)

SECTIONS = ("lounges", "jetlag_recovery", "navigation")

CONFIDENCE_LEVELS: tuple[Confidence, ...] = ("low", "medium", "high")


class FacilitiesSource(Protocol):
    """Anything that can hand back a raw facility record for an airport code."""

    def get(self, code: str) -> Mapping[str, Any] | None: ...


class StaticFacilitiesSource:
    """In-memory source over {code: raw record}."""

    def __init__(self, records: Mapping[str, Mapping[str, Any]] | None = None):
        self._records = {code.upper(): record for code, record in (records or {}).items()}

    def get(self, code: str) -> Mapping[str, Any] | None:
        return self._records.get(code.upper())

    def __len__(self) -> int:
        return len(self._records)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _sections(raw: Mapping[str, Any]) -> dict[str, dict[str, Any]]:
    """Split a raw record into its three sections, accepting either shape."""
    sections: dict[str, dict[str, Any]] = {name: {} for name in SECTIONS}
    for name in SECTIONS:
        nested = raw.get(name)
        if isinstance(nested, Mapping):
            sections[name].update(nested)
    for key, value in raw.items():
        if "." in key:
            section, _, field_name = key.partition(".")
            if section in sections:
                sections[section][field_name] = value
    return sections


def _number(value: Any, default: float) -> float:
    if value is None or isinstance(value, bool):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "1")
    return bool(value)


def _confidence(value: Any) -> Confidence:
    return value if value in CONFIDENCE_LEVELS else "low"


def _text(value: Any) -> str | None:
    if value is None or value == "" or value == "null":
        return None
    return str(value)


def normalize_intelligence(raw: Mapping[str, Any] | None, code: str) -> AirportIntelligence:
    """
    Map a raw facility record into AirportIntelligence.

    Missing fields default to neutral midpoints (5.0 on 0-10 scales, False
    for flags). A None record yields an unresolved default.
    """
    if raw is None:
        return default_intelligence(code)

    sections = _sections(raw)
    lounges = sections["lounges"]
    recovery = sections["jetlag_recovery"]
    nav = sections["navigation"]

    shower_count = int(_number(recovery.get("shower_count"), 0))
    realistic = nav.get("realistic_connection_time")
    tier = raw.get("tier")

    return AirportIntelligence(
        iata_code=str(raw.get("iata_code") or code).upper(),
        tier=tier if tier in ("tier_1", "tier_2", "tier_3") else "unknown",
        data_quality=raw.get("data_quality") if raw.get("data_quality") in ("verified", "partial", "minimal") else None,
        lounge_quality=_clamp(
            _number(recovery.get("lounge_quality_score"), _number(lounges.get("overall_quality"), 5.0)),
            0.0,
            10.0,
        ),
        has_premium_lounges=_flag(lounges.get("has_premium_lounges")),
        has_shower_facilities=(
            _flag(recovery.get("has_shower_facilities"))
            or _flag(lounges.get("has_showers"))
            or shower_count > 0
        ),
        has_sleep_seating=_flag(recovery.get("has_sleep_pods")) or _flag(recovery.get("has_sleep_seating")),
        has_healthy_food=_flag(recovery.get("has_healthy_food")),
        notable_lounges=tuple(lounges.get("notable_lounges") or ()),
        best_for_jetlag=_text(lounges.get("best_for_jetlag")) or _text(recovery.get("best_lounge")) or "",
        sleep_pod_quality=_clamp(_number(recovery.get("sleep_pod_quality_score"), 0.0), 0.0, 10.0),
        sleep_pod_provider=_text(recovery.get("sleep_pod_provider")),
        shower_quality=_clamp(_number(recovery.get("shower_quality_score"), 0.0), 0.0, 10.0),
        shower_count=shower_count,
        outdoor_access=_flag(recovery.get("outdoor_access")),
        connection_complexity=_clamp(_number(nav.get("complexity_score"), 5.0), 1.0, 10.0),
        minimum_connection_minutes=int(_number(nav.get("minimum_connection_time"), 60)),
        realistic_connection_minutes=int(_number(realistic, 0)) or None,
        requires_security_rescreen=_flag(nav.get("requires_security_rescreen")),
        requires_terminal_change=_flag(nav.get("requires_terminal_change")),
        terminal_change_method=_text(nav.get("terminal_change_method")),
        has_fast_track=_flag(nav.get("has_fast_track")),
        major_challenges=tuple(nav.get("challenges") or ()),
        connection_tips=_text(nav.get("tips")),
        lounge_confidence=_confidence(lounges.get("confidence")),
        connection_confidence=_confidence(nav.get("confidence")),
        sleep_pod_confidence=_confidence(recovery.get("sleep_pod_confidence")),
        shower_confidence=_confidence(recovery.get("shower_confidence")),
        resolved=True,
    )


def default_intelligence(code: str) -> AirportIntelligence:
    """Neutral record for an airport the data source does not know."""
    return AirportIntelligence(iata_code=code.upper(), resolved=False)


# =============================================================================
# Derived scores
# =============================================================================


def comfort_score(intel: AirportIntelligence) -> float:
    """General comfort for spending time at this airport (0-10)."""
    score = 5.0 + (intel.lounge_quality / 10) * 5
    if intel.has_premium_lounges:
        score += 1.0
    if intel.has_shower_facilities:
        score += 0.5
    if intel.has_sleep_seating:
        score += 0.5
    if intel.has_healthy_food:
        score += 0.3
    if intel.connection_complexity <= 3:
        score += 0.5
    return _clamp(score, 0.0, 10.0)


def stress_score(intel: AirportIntelligence) -> float:
    """Connection stress (0-10, higher is worse)."""
    score = intel.connection_complexity
    if intel.lounge_quality >= 7:
        score -= 1.0
    if intel.has_fast_track:
        score -= 0.5
    if intel.requires_security_rescreen:
        score += 1.0
    if len(intel.major_challenges) > 2:
        score += 0.5
    return _clamp(score, 0.0, 10.0)


def jetlag_support_score(intel: AirportIntelligence) -> float:
    """
    How well the airport supports jet lag recovery (0-10).

    Lounge quality 0-3, sleep 0-3, showers 0-2, healthy food 0-1,
    easy connection 0-1.
    """
    score = (intel.lounge_quality / 10) * 3

    if intel.sleep_pod_quality > 0:
        score += (intel.sleep_pod_quality / 10) * 3
    elif intel.has_sleep_seating:
        score += 1.5
    elif intel.has_premium_lounges:
        score += 0.5

    if intel.shower_quality > 0:
        score += (intel.shower_quality / 10) * 2
    elif intel.has_shower_facilities:
        score += 1.0

    if intel.has_healthy_food:
        score += 1.0
    if intel.connection_complexity <= 3:
        score += 1.0

    return _clamp(score, 0.0, 10.0)


def data_confidence(intel: AirportIntelligence) -> float:
    """Numeric confidence (0-1) in a record, from tier and data quality."""
    if not intel.resolved:
        return 0.3
    if intel.data_quality == "verified":
        return 0.95
    if intel.tier in ("tier_1", "tier_2"):
        return 0.75 if intel.data_quality == "partial" else 0.60
    return 0.50


def confidence_level(intel: AirportIntelligence) -> Confidence:
    value = data_confidence(intel)
    if value >= 0.9:
        return "high"
    if value >= 0.7:
        return "medium"
    return "low"


def count_available_facilities(intel: AirportIntelligence) -> int:
    return sum(
        [
            intel.has_sleep_pods,
            intel.has_shower_facilities,
            intel.has_premium_lounges,
            intel.has_sleep_seating,
            intel.has_healthy_food,
            intel.has_fast_track,
            intel.outdoor_access,
        ]
    )


def facilities_from_intelligence(intel: AirportIntelligence) -> AirportFacilities:
    """Derive the scorer's facility view from a normalized record."""
    return AirportFacilities(
        airport=intel.iata_code,
        sleep_pods=intel.has_sleep_pods,
        showers=intel.has_shower_facilities,
        lounge_access=intel.has_premium_lounges or bool(intel.notable_lounges),
        quiet_zones=intel.has_sleep_seating or intel.has_premium_lounges,
        healthy_food=intel.has_healthy_food,
        outdoor_access=intel.outdoor_access,
        lounge_quality=intel.lounge_quality,
        connection_complexity=intel.connection_complexity,
        comfort_score=comfort_score(intel),
        stress_score=stress_score(intel),
        jetlag_support_score=jetlag_support_score(intel),
        confidence=confidence_level(intel),
        resolved=intel.resolved,
    )


def resolve_airport(
    code: str, source: FacilitiesSource | None
) -> tuple[AirportIntelligence, AirportFacilities]:
    """
    Look up an airport and derive its facilities.

    Unknown codes get neutral defaults flagged resolved=False; this never
    raises for missing data.
    """
    raw = source.get(code) if source is not None else None
    if raw is None:
        logger.warning(f"No facility data for airport {code}, using neutral defaults")
        intel = default_intelligence(code)
    else:
        intel = normalize_intelligence(raw, code)
    return intel, facilities_from_intelligence(intel)
