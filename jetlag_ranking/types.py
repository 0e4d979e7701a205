"""
Data structures for flight ranking.

Inputs (flights, segments, aircraft, airlines, airport records) are frozen:
one search owns them and nothing in the engine mutates them. Outputs are
plain dataclasses built once per call.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

from .time_utils import span_minutes

# =============================================================================
# Enumerations
# =============================================================================

CabinClass = Literal["economy", "premium_economy", "business", "first"]

AircraftGeneration = Literal["legacy", "modern", "next-gen"]

LightingProtocol = Literal["none", "manual-dimming", "circadian-optimized"]

Direction = Literal[
    "eastbound",  # Longitude delta dominates, moving east
    "westbound",  # Longitude delta dominates, moving west
    "northbound",  # Latitude delta dominates, moving north
    "southbound",  # Latitude delta dominates, moving south
    "none",  # Same timezone at both ends
]

Recommendation = Literal["optimal", "excellent", "good", "acceptable", "poor"]

Confidence = Literal["low", "medium", "high"]

AirportTier = Literal["tier_1", "tier_2", "tier_3", "unknown"]

ConnectionRating = Literal["excellent", "good", "marginal", "risky", "insufficient"]

PriceCategoryName = Literal["cheapest", "best-jetlag", "best-value", "balanced"]

PricePercentile = Literal["cheap", "mid", "expensive", "all"]

SortKey = Literal[
    "jetlag-best",
    "jetlag-worst",
    "price-low",
    "price-high",
    "value-best",
    "duration-short",
    "duration-long",
    "recovery-fast",
    "departure-early",
    "arrival-early",
]


# =============================================================================
# Flight Inputs
# =============================================================================


@dataclass(frozen=True)
class Aircraft:
    """Aircraft type with the cabin characteristics that affect rest."""

    type_code: str  # IATA/ICAO equipment code (e.g., "789", "A359")
    manufacturer: str = ""
    sleep_score: float = 6.0  # 0-10
    generation: AircraftGeneration = "modern"
    cabin_pressure_ft: float = 8000  # Equivalent cabin altitude
    cabin_humidity: float = 12  # Percent
    noise_level_db: float | None = None
    inferred: bool = False  # True when filled from code-pattern defaults


@dataclass(frozen=True)
class Airline:
    """Operating carrier."""

    code: str
    name: str = ""
    service_quality: float = 6.0  # 0-10
    jetlag_optimization: float = 5.0  # 0-10, lighting and meal protocols
    lighting_protocol: LightingProtocol | None = None
    inferred: bool = False


@dataclass(frozen=True)
class Segment:
    """One operated leg. Timestamps are timezone-aware instants."""

    origin: str
    destination: str
    departure: datetime | None
    arrival: datetime | None
    flight_number: str = ""
    aircraft: Aircraft | None = None
    airline: Airline | None = None
    cabin_class: CabinClass = "economy"
    origin_tz: str | None = None  # IANA, overrides the airport directory
    dest_tz: str | None = None
    aircraft_type: str | None = None  # Equipment code when no Aircraft record is known

    @property
    def duration_minutes(self) -> float | None:
        """Block time in minutes, None unless both timestamps are aware instants."""
        return span_minutes(self.departure, self.arrival)


@dataclass(frozen=True)
class AirportLocation:
    """Geographic identity of an airport."""

    code: str
    name: str = ""
    latitude: float | None = None
    longitude: float | None = None
    timezone: str | None = None  # IANA timezone

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


@dataclass(frozen=True)
class AirportIntelligence:
    """
    Normalized per-airport facility record.

    Every field has a neutral default so a sparse or missing source record
    still produces a usable value.
    """

    iata_code: str
    tier: AirportTier = "unknown"
    data_quality: Literal["verified", "partial", "minimal"] | None = None

    # Lounges
    lounge_quality: float = 5.0  # 0-10
    has_premium_lounges: bool = False
    has_shower_facilities: bool = False
    has_sleep_seating: bool = False
    has_healthy_food: bool = False
    notable_lounges: tuple[str, ...] = ()
    best_for_jetlag: str = ""

    # Recovery facilities
    sleep_pod_quality: float = 0.0  # 0-10, 0 = none known
    sleep_pod_provider: str | None = None
    shower_quality: float = 0.0
    shower_count: int = 0
    outdoor_access: bool = False

    # Navigation
    connection_complexity: float = 5.0  # 1-10, lower is easier
    minimum_connection_minutes: int = 60
    realistic_connection_minutes: int | None = None
    requires_security_rescreen: bool = False
    requires_terminal_change: bool = False
    terminal_change_method: str | None = None
    has_fast_track: bool = False
    major_challenges: tuple[str, ...] = ()
    connection_tips: str | None = None

    # Per-section confidence tags
    lounge_confidence: Confidence = "low"
    connection_confidence: Confidence = "low"
    sleep_pod_confidence: Confidence = "low"
    shower_confidence: Confidence = "low"

    resolved: bool = True  # False when substituted for an unknown airport

    @property
    def has_sleep_pods(self) -> bool:
        return self.sleep_pod_quality > 0 or bool(self.sleep_pod_provider)


@dataclass(frozen=True)
class AirportFacilities:
    """Derived facility view used by the scorer. Scores are 0-10."""

    airport: str
    sleep_pods: bool
    showers: bool
    lounge_access: bool
    quiet_zones: bool
    healthy_food: bool
    outdoor_access: bool
    lounge_quality: float
    connection_complexity: float
    comfort_score: float
    stress_score: float
    jetlag_support_score: float
    confidence: Confidence = "low"
    resolved: bool = True


@dataclass(frozen=True)
class Layover:
    """A connection between two segments at one airport."""

    airport: str
    duration_minutes: float
    facilities: AirportFacilities | None = None
    intelligence: AirportIntelligence | None = None
    arrival: datetime | None = None
    departure: datetime | None = None
    international: bool = False


@dataclass(frozen=True)
class FlightOption:
    """One itinerary returned by the upstream search."""

    id: str
    origin: str
    destination: str
    segments: tuple[Segment, ...]
    total_duration_minutes: float | None
    stops: int
    price: float | None
    currency: str = "USD"
    layovers: tuple[Layover, ...] = ()
    booking_link: str | None = None

    @property
    def departure(self) -> datetime | None:
        return self.segments[0].departure if self.segments else None

    @property
    def arrival(self) -> datetime | None:
        return self.segments[-1].arrival if self.segments else None

    @property
    def is_direct(self) -> bool:
        return self.stops == 0

    @property
    def airline_codes(self) -> list[str]:
        """
        Operating carrier codes in segment order, without duplicates.

        Segments without an Airline fall back to the flight number prefix.
        """
        codes: list[str] = []
        for segment in self.segments:
            if segment.airline is not None:
                code = segment.airline.code
            elif len(segment.flight_number) >= 2:
                code = segment.flight_number[:2].upper()
            else:
                continue
            if code not in codes:
                codes.append(code)
        return codes

    @property
    def cabin_classes(self) -> list[str]:
        classes: list[str] = []
        for segment in self.segments:
            if segment.cabin_class not in classes:
                classes.append(segment.cabin_class)
        return classes

    @property
    def elapsed_minutes(self) -> float | None:
        """Total duration, falling back to first departure to last arrival."""
        if self.total_duration_minutes is not None:
            return self.total_duration_minutes
        return span_minutes(self.departure, self.arrival)


# =============================================================================
# Model Outputs
# =============================================================================


@dataclass(frozen=True)
class CircadianProfile:
    """Circadian impact of one origin/destination pair."""

    timezones_crossed: float  # Absolute hours, 0-12
    direction: Direction
    arrival_time_optimality: int  # 1-10
    estimated_recovery_days: float
    clock_shift: float = 0.0  # Signed, positive = advance (clock moves later)
    local_departure_hour: float | None = None
    local_arrival_hour: float | None = None

    @property
    def adaptation(self) -> Literal["advance", "delay", "none"]:
        """Which way the body clock has to move."""
        if self.timezones_crossed == 0:
            return "none"
        return "advance" if self.clock_shift > 0 else "delay"


@dataclass(frozen=True)
class Reason:
    """
    Tagged reason code emitted by the scoring core.

    Display text is produced by `formatting.describe`; the core never
    builds user-facing strings.
    """

    code: str
    detail: dict[str, Any] = field(default_factory=dict, compare=True, hash=False)


@dataclass(frozen=True)
class ConnectionAdvice:
    """Advisory classification of one layover."""

    rating: ConnectionRating
    reasons: list[Reason]
    tips: list[Reason]


@dataclass
class HolisticScore:
    """Per-flight scoring output. Scores are stored at full precision."""

    flight_id: str
    overall_jetlag_score: float
    circadian_score: float
    comfort_score: float
    strategy_score: float
    efficiency_score: float
    recommendation: Recommendation
    estimated_recovery_days: float
    strengths: list[Reason] = field(default_factory=list)
    weaknesses: list[Reason] = field(default_factory=list)
    recommendations: list[Reason] = field(default_factory=list)
    critical_factors: list[Reason] = field(default_factory=list)
    scenario_matches: dict[str, float] = field(default_factory=dict)
    tradeoffs: list[Reason] = field(default_factory=list)
    components: dict[str, float] = field(default_factory=dict)
    degraded: bool = False
    # Airport-local clock hours the circadian model used, None when degraded
    local_departure_hour: float | None = None
    local_arrival_hour: float | None = None

    @property
    def display_score(self) -> int:
        """Overall score rounded for display."""
        return int(round(self.overall_jetlag_score))


@dataclass(frozen=True)
class PriceCategory:
    """A flight singled out by the tradeoff optimizer."""

    category: PriceCategoryName
    flight_id: str
    value_score: float
    savings_from_best: float | None = None
    extra_cost_for_best: float | None = None
    price_per_jetlag_point: float | None = None


@dataclass(frozen=True)
class ScoredFlight:
    """A flight with its holistic score and, after tradeoff analysis, its value."""

    flight: FlightOption
    score: HolisticScore
    value_score: float | None = None
    categories: tuple[PriceCategoryName, ...] = ()

    @property
    def price(self) -> float | None:
        return self.flight.price

    @property
    def jetlag_score(self) -> float:
        return self.score.overall_jetlag_score


@dataclass(frozen=True)
class ValueRange:
    minimum: float
    maximum: float
    average: float

    @property
    def span(self) -> float:
        return self.maximum - self.minimum


@dataclass
class PriceAnalysis:
    """Whole-set price/jet lag tradeoff summary."""

    cheapest: ScoredFlight | None = None
    best_jetlag: ScoredFlight | None = None
    best_value: ScoredFlight | None = None
    balanced: ScoredFlight | None = None
    categories: dict[str, PriceCategory] = field(default_factory=dict)
    value_scores: dict[str, float] = field(default_factory=dict)
    price_range: ValueRange | None = None
    jetlag_range: ValueRange | None = None

    @property
    def is_empty(self) -> bool:
        return self.cheapest is None and self.best_jetlag is None


# =============================================================================
# Filtering
# =============================================================================


@dataclass
class FilterSpec:
    """
    Caller-supplied result filters. None means "no constraint".

    Time windows are airport-local "HH:MM" pairs and may wrap midnight
    (e.g., ("22:00", "02:00")).
    """

    max_price: float | None = None
    min_price: float | None = None
    price_percentile: PricePercentile = "all"
    max_duration_minutes: float | None = None
    max_stops: int | None = None
    direct_only: bool = False
    arrival_window: tuple[str, str] | None = None
    departure_window: tuple[str, str] | None = None
    min_jetlag_score: float | None = None
    max_recovery_days: float | None = None
    cabin_classes: tuple[CabinClass, ...] | None = None
    preferred_airlines: tuple[str, ...] | None = None
    excluded_airlines: tuple[str, ...] | None = None
    modern_aircraft_only: bool = False
    min_layover_minutes: float | None = None
    max_layover_minutes: float | None = None
    # Price band of price_percentile, fixed by the first apply_filters call
    price_bounds: tuple[float | None, float | None] | None = field(
        default=None, repr=False, compare=False
    )


@dataclass
class FilterStats:
    """Counts from one filter run. removed_by is keyed by rule name in chain order."""

    original_count: int
    filtered_count: int
    removed_by: dict[str, int] = field(default_factory=dict)

    @property
    def removed_count(self) -> int:
        return self.original_count - self.filtered_count


@dataclass(frozen=True)
class FilterSuggestion:
    """A what-if relaxation of one binding filter rule."""

    rule: str
    action: str  # Reason code, e.g. "raise_max_price"
    suggested_value: Any
    unlocked_count: int


@dataclass
class FilterSuggestions:
    relaxations: list[FilterSuggestion] = field(default_factory=list)
    price_ranges: dict[str, tuple[float, float]] = field(default_factory=dict)
    popular_airlines: list[tuple[str, int]] = field(default_factory=list)
    cabin_classes: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (
            self.relaxations
            or self.price_ranges
            or self.popular_airlines
            or self.cabin_classes
        )


@dataclass
class SearchResultSet:
    """Ranked output for one search. Never cached inside the engine."""

    flights: list[ScoredFlight]
    price_analysis: PriceAnalysis
    filter_stats: FilterStats
    suggestions: FilterSuggestions | None = None
    sort_key: SortKey = "jetlag-best"
