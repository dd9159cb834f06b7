"""Domain models for the hole planner."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from holeplan.geometry import GeoPoint

from .clubs import normalize_club_id


class PolygonType(str, Enum):
    FAIRWAY = "fairway"
    GREEN = "green"
    BUNKER = "bunker"
    WATER = "water"
    OB = "ob"
    PENALTY = "penalty"
    WASTE_AREA = "waste_area"
    TREES = "trees"
    OTHER = "other"


_POLYGON_TYPE_ALIASES = {
    "woods": "trees",
    "tree": "trees",
    "sand": "bunker",
    "lake": "water",
    "out_of_bounds": "ob",
    "waste": "waste_area",
}


class LieType(str, Enum):
    TEE = "tee"
    FAIRWAY = "fairway"
    ROUGH = "rough"
    HEAVY_ROUGH = "heavy_rough"
    BUNKER = "bunker"
    OTHER = "other"


class PlayerArea(str, Enum):
    DRIVER = "driver"
    LONG_IRONS = "long_irons"
    SHORT_IRONS = "short_irons"
    WEDGES = "wedges"
    CHIPPING = "chipping"
    PUTTING = "putting"


class DataLevel(str, Enum):
    NONE = "none"
    LIMITED = "limited"
    MODERATE = "moderate"
    STRONG = "strong"


class StrategyType(str, Enum):
    AGGRESSIVE = "aggressive"
    CONSERVATIVE = "conservative"
    SMART = "smart"


class PlanningStrategy(str, Enum):
    FORWARD = "forward"
    BACKWARD = "backward"


class ShotColor(str, Enum):
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"


class ShotConfidence(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class CoursePolygon(BaseModel):
    type: PolygonType
    coordinates: list[GeoPoint] = Field(default_factory=list)
    label: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("label", "name")
    )

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_validator("type", mode="before")
    @classmethod
    def _coerce_type(cls, value: Any) -> Any:
        if isinstance(value, PolygonType):
            return value
        if isinstance(value, str):
            key = value.strip().lower().replace(" ", "_").replace("-", "_")
            key = _POLYGON_TYPE_ALIASES.get(key, key)
            if key in PolygonType._value2member_map_:
                return key
            return PolygonType.OTHER.value
        return value

    @property
    def is_usable(self) -> bool:
        return len(self.coordinates) >= 3

    @property
    def display_name(self) -> str:
        if self.label:
            return self.label
        if self.type is PolygonType.OB:
            return "OB"
        return self.type.value.replace("_", " ")


class Hole(BaseModel):
    par: int = Field(..., ge=3, le=5)
    tee: Optional[GeoPoint] = None
    green: Optional[GeoPoint] = None
    yardage: Optional[float] = Field(default=None, gt=0)
    number: Optional[int] = Field(default=None, ge=1)
    polygons: list[CoursePolygon] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)

    def polygons_of(self, *types: PolygonType | str) -> list[CoursePolygon]:
        wanted = {PolygonType(t) for t in types}
        return [p for p in self.polygons if p.type in wanted and p.is_usable]


class MeasuredStats(BaseModel):
    total_shots: int = Field(default=0, ge=0, alias="totalShots")
    avg_distance: Optional[float] = Field(default=None, alias="avgDistance")
    avg_offline: float = Field(default=0.0, alias="avgOffline")
    miss_left_pct: float = Field(default=0.0, ge=0, le=100, alias="missLeftPct")
    miss_right_pct: float = Field(default=0.0, ge=0, le=100, alias="missRightPct")
    miss_short_pct: float = Field(default=0.0, ge=0, le=100, alias="missShortPct")
    miss_long_pct: float = Field(default=0.0, ge=0, le=100, alias="missLongPct")
    dispersion_radius: Optional[float] = Field(
        default=None, ge=0, alias="dispersionRadius"
    )
    lateral_dispersion: Optional[float] = Field(
        default=None, ge=0, alias="lateralDispersion"
    )
    distance_dispersion: Optional[float] = Field(
        default=None, ge=0, alias="distanceDispersion"
    )

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class PlayerProfile(BaseModel):
    club_distances: dict[str, float] = Field(
        ..., min_length=1, alias="clubDistances"
    )
    handicap: Optional[float] = Field(default=15.0, ge=0, le=54)
    lie_type: LieType = Field(default=LieType.TEE, alias="lieType")
    position: Optional[GeoPoint] = None
    measured_stats: dict[str, MeasuredStats] = Field(
        default_factory=dict, alias="measuredStats"
    )
    best_area: Optional[PlayerArea] = Field(default=None, alias="bestArea")
    worst_area: Optional[PlayerArea] = Field(default=None, alias="worstArea")
    data_level: DataLevel = Field(default=DataLevel.NONE, alias="dataLevel")
    shot_shape: Optional[str] = Field(default=None, alias="shotShape")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("club_distances")
    @classmethod
    def _normalize_clubs(cls, clubs: dict[str, float]) -> dict[str, float]:
        normalized: dict[str, float] = {}
        for club, distance in clubs.items():
            if distance <= 0:
                raise ValueError(f"club distance for {club!r} must be positive")
            normalized[normalize_club_id(club)] = float(distance)
        return normalized

    @field_validator("measured_stats")
    @classmethod
    def _normalize_stats(
        cls, stats: dict[str, MeasuredStats]
    ) -> dict[str, MeasuredStats]:
        return {normalize_club_id(club): value for club, value in stats.items()}

    @field_validator("lie_type", mode="before")
    @classmethod
    def _coerce_lie(cls, value: Any) -> Any:
        if isinstance(value, str):
            key = value.strip().lower().replace(" ", "_")
            if key in LieType._value2member_map_:
                return key
            return LieType.OTHER.value
        return value


class Weather(BaseModel):
    wind_speed: float = Field(default=0.0, ge=0, alias="windSpeed")
    wind_direction: Optional[str] = Field(default=None, alias="windDirection")
    temperature: Optional[float] = None
    course_elevation: float = Field(default=0.0, alias="courseElevation")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_validator("wind_direction", mode="before")
    @classmethod
    def _upper_direction(cls, value: Any) -> Any:
        if isinstance(value, str):
            cleaned = value.strip().upper()
            return cleaned or None
        return value


CALM = Weather()


class _OutputModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Adjustments(_OutputModel):
    wind: float = 0.0
    temperature: float = 0.0
    elevation: float = 0.0
    total: float = 0.0

    def rounded(self, digits: int = 1) -> "Adjustments":
        return Adjustments(
            wind=round(self.wind, digits),
            temperature=round(self.temperature, digits),
            elevation=round(self.elevation, digits),
            total=round(self.total, digits),
        )


ZERO_ADJUSTMENTS = Adjustments()


class WindAnalysis(_OutputModel):
    headwind: float = 0.0
    crosswind: float = 0.0
    aim_offset: float = Field(default=0.0, alias="aimOffset")
    aim_direction: Optional[str] = Field(default=None, alias="aimDirection")
    effect: str = "calm"
    description: str = "Minimal wind effect on this shot."


class PlaysLike(_OutputModel):
    base_distance: float = Field(..., alias="baseDistance")
    plays_like: float = Field(..., alias="playsLike")
    adjustments: Adjustments
    wind: WindAnalysis
    temperature_description: str = Field(..., alias="temperatureDescription")
    elevation_description: str = Field(..., alias="elevationDescription")
    summary: str


class LandingAdjustment(_OutputModel):
    kind: str
    amount: float
    direction: str


class LandingZone(_OutputModel):
    position: GeoPoint
    description: str
    is_optimal: bool = Field(default=True, alias="isOptimal")
    adjustment: Optional[LandingAdjustment] = None
    has_risk: bool = Field(default=False, alias="hasRisk")
    main_threat: Optional[str] = Field(default=None, alias="mainThreat")


class SafeZone(_OutputModel):
    position: GeoPoint
    direction: str
    offset: float = 0.0
    left_space: float = Field(default=50.0, alias="leftSpace")
    right_space: float = Field(default=50.0, alias="rightSpace")
    short_space: float = Field(default=50.0, alias="shortSpace")
    long_space: float = Field(default=50.0, alias="longSpace")
    description: str
    short_side_warning: Optional[str] = Field(default=None, alias="shortSideWarning")


class AvoidZone(_OutputModel):
    type: str
    name: str
    direction: str
    distance_to_edge: float = Field(..., alias="distanceToEdge")
    distance_from_player: float = Field(..., alias="distanceFromPlayer")
    lateral_offset: float = Field(..., alias="lateralOffset")


class ScoreItem(_OutputModel):
    type: str
    value: float
    reason: str


class ScoreBreakdown(_OutputModel):
    penalties: list[ScoreItem] = Field(default_factory=list)
    bonuses: list[ScoreItem] = Field(default_factory=list)


class RiskAssessment(_OutputModel):
    main_threat: str = Field(..., alias="mainThreat")
    worst_case: str = Field(..., alias="worstCase")
    bailout: str


class PlannedShot(_OutputModel):
    shot_number: int = Field(..., alias="shotNumber")
    club: str
    club_id: str = Field(..., alias="clubId")
    distance: float
    effective_distance: float = Field(..., alias="effectiveDistance")
    expected_distance: float = Field(..., alias="expectedDistance")
    landing_zone: GeoPoint = Field(..., alias="landingZone")
    target: str
    safe_zone: Optional[SafeZone] = Field(default=None, alias="safeZone")
    avoid_zones: list[AvoidZone] = Field(default_factory=list, alias="avoidZones")
    dispersion_radius: float = Field(..., alias="dispersionRadius")
    adjustments: Adjustments = ZERO_ADJUSTMENTS
    confidence: ShotConfidence
    reasoning: str
    next_shot_distance: Optional[float] = Field(
        default=None, alias="nextShotDistance"
    )
    score_breakdown: Optional[ScoreBreakdown] = Field(
        default=None, alias="scoreBreakdown"
    )
    awkward_warning: Optional[str] = Field(default=None, alias="awkwardWarning")


class AlternativeSequence(_OutputModel):
    shots: list[PlannedShot]
    score: float
    summary: str
    strategy_type: StrategyType = Field(..., alias="strategyType")


class PlanMetadata(_OutputModel):
    total_distance: float = Field(..., alias="totalDistance")
    shot_count: int = Field(..., alias="shotCount")
    strategy_score: float = Field(..., alias="strategyScore")
    success_probability: float = Field(..., alias="successProbability")
    planning_strategy: PlanningStrategy = Field(
        default=PlanningStrategy.FORWARD, alias="planningStrategy"
    )
    sequences_considered: int = Field(default=0, alias="sequencesConsidered")


class Plan(_OutputModel):
    shots: list[PlannedShot] = Field(default_factory=list)
    strategy: StrategyType = StrategyType.SMART
    target_score: int = Field(default=0, alias="targetScore")
    risk_assessment: RiskAssessment = Field(..., alias="riskAssessment")
    metadata: Optional[PlanMetadata] = None
    alternative_sequences: list[AlternativeSequence] = Field(
        default_factory=list, alias="alternativeSequences"
    )
    error: Optional[str] = None


class DragShot(BaseModel):
    """A planned shot as edited on the map; landing points are user-owned."""

    shot_number: int = Field(..., ge=1, alias="shotNumber")
    landing_zone: GeoPoint = Field(..., alias="landingZone")
    club: Optional[str] = None
    club_id: Optional[str] = Field(default=None, alias="clubId")
    club_distance: float = Field(default=0.0, alias="clubDistance")
    distance: float = 0.0
    effective_distance: float = Field(default=0.0, alias="effectiveDistance")
    distance_remaining: float = Field(default=0.0, alias="distanceRemaining")
    adjustments: Adjustments = ZERO_ADJUSTMENTS

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @classmethod
    def from_planned(cls, shot: PlannedShot) -> "DragShot":
        return cls(
            shot_number=shot.shot_number,
            landing_zone=shot.landing_zone,
            club=shot.club,
            club_id=shot.club_id,
            distance=shot.distance,
            effective_distance=shot.effective_distance,
            distance_remaining=shot.next_shot_distance or 0.0,
            adjustments=shot.adjustments,
        )


class DragFrameUpdate(_OutputModel):
    distance: float
    effective_distance: float = Field(..., alias="effectiveDistance")
    distance_to_green: float = Field(..., alias="distanceToGreen")
    club: Optional[str] = None
    club_distance: float = Field(default=0.0, alias="clubDistance")
    effective_reach: float = Field(default=0.0, alias="effectiveReach")
    display_name: str = Field(default="No club", alias="displayName")
    gap: float = 0.0


class FullShotUpdate(_OutputModel):
    updated_shots: list[DragShot] = Field(default_factory=list, alias="updatedShots")
    colors: list[ShotColor] = Field(default_factory=list)


class PlanRequest(BaseModel):
    hole: Hole
    player: PlayerProfile
    weather: Optional[Weather] = None
    strategy: Optional[PlanningStrategy] = None
    scoring: Optional[dict[str, Any]] = None

    model_config = ConfigDict(populate_by_name=True)


class PlanResponse(_OutputModel):
    plan: Plan
    telemetry_id: str = Field(..., alias="telemetryId")
    generated_at: datetime = Field(..., alias="generatedAt")


@dataclass(frozen=True, slots=True)
class EffectiveReach:
    club_id: str
    club_distance: float
    effective_reach: float
    adjustments: Adjustments = ZERO_ADJUSTMENTS


@dataclass(frozen=True, slots=True)
class Dispersion:
    radius: float
    lateral: float
    distance: float
    data_source: str = "formula"
    confidence: float = 0.5
    sample_size: int = 0
    handicap_factor: float = 1.0
    club_factor: float = 1.0


@dataclass(frozen=True, slots=True)
class MissPattern:
    lateral_bias: str
    distance_bias: str
    lateral_likelihood: float
    distance_likelihood: float
    magnitude: str
    primary_miss: str
    data_source: str


@dataclass(frozen=True, slots=True)
class HazardConflict:
    type: str
    hazard_type: str
    name: str
    severity: str
    distance_to_edge: float
    overlap_percentage: float


@dataclass(frozen=True, slots=True)
class HazardRange:
    type: str
    name: str
    front_distance: float
    back_distance: float
    is_penalty: bool
    severity: float


@dataclass(frozen=True, slots=True)
class ShotOption:
    shot_number: int
    club: str
    club_distance: float
    raw_distance: float
    target_distance: float
    distance_remaining: float
    start: GeoPoint
    landing_zone: GeoPoint
    dispersion_radius: float
    is_approach: bool
    hazard_conflicts: tuple[HazardConflict, ...] = ()
    avoid_zones: tuple[AvoidZone, ...] = ()
    safe_zone: Optional[SafeZone] = None
    adjustments: Adjustments = ZERO_ADJUSTMENTS
    expected_lie: Optional[LieType] = None
    fairway_width: Optional[float] = None
    hazard_ranges: tuple[HazardRange, ...] = ()
    next_shot_hazard_ranges: tuple[HazardRange, ...] = ()
    score: float = 0.0
    score_breakdown: ScoreBreakdown = field(default_factory=ScoreBreakdown)


@dataclass(frozen=True, slots=True)
class ShotSequence:
    shots: tuple[ShotOption, ...]
    strategy_type: StrategyType
    total_score: float = 0.0
    summary: str = ""
    sequence_id: str = ""

    @property
    def shot_count(self) -> int:
        return len(self.shots)

    @property
    def conflict_count(self) -> int:
        return sum(len(shot.hazard_conflicts) for shot in self.shots)


__all__ = [
    "Adjustments",
    "AlternativeSequence",
    "AvoidZone",
    "CALM",
    "CoursePolygon",
    "DataLevel",
    "Dispersion",
    "DragFrameUpdate",
    "DragShot",
    "EffectiveReach",
    "FullShotUpdate",
    "HazardConflict",
    "HazardRange",
    "Hole",
    "LandingAdjustment",
    "LandingZone",
    "LieType",
    "MeasuredStats",
    "MissPattern",
    "Plan",
    "PlanMetadata",
    "PlanRequest",
    "PlanResponse",
    "PlannedShot",
    "PlanningStrategy",
    "PlayerArea",
    "PlayerProfile",
    "PlaysLike",
    "PolygonType",
    "RiskAssessment",
    "SafeZone",
    "ScoreBreakdown",
    "ScoreItem",
    "ShotSequence",
    "ShotColor",
    "ShotConfidence",
    "ShotOption",
    "StrategyType",
    "Weather",
    "WindAnalysis",
    "ZERO_ADJUSTMENTS",
]
