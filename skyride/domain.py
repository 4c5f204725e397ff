"""Domain vocabulary and strict schemas for commute and flight assessments.

This module defines the stable contract between the deterministic scoring core
and any presentation layer: enums, ordinal levels and Pydantic models for the
payloads that flow out of the system. No scoring logic lives here.
"""

from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import Annotated, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _StrictBaseModel(BaseModel):
    """Immutable base model with strict extra handling."""

    model_config = ConfigDict(extra="forbid", frozen=True)


def parse_hhmm(value: str) -> int:
    """Convert a local wall-clock "HH:MM" string to minutes since midnight."""
    if not isinstance(value, str):
        raise ValueError(f"Expected 'HH:MM' string, got {value!r}")
    parts = value.strip().split(":")
    if len(parts) != 2 or not all(p.isdigit() for p in parts):
        raise ValueError(f"Malformed time of day {value!r}; expected 'HH:MM'")
    hours, minutes = int(parts[0]), int(parts[1])
    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        raise ValueError(f"Time of day out of range: {value!r}")
    return hours * 60 + minutes


# ---------------------------------------------------------------------------
# Commute
# ---------------------------------------------------------------------------

class RideLevel(str, Enum):
    """Rideability verdict, ordered GOOD < MODERATE < CRITICAL < BAD."""
    GOOD = "good"
    MODERATE = "moderate"
    CRITICAL = "critical"
    BAD = "bad"

    @property
    def severity(self) -> int:
        """0 for GOOD up to 3 for BAD."""
        return list(RideLevel).index(self)


class CommuteLeg(str, Enum):
    """Direction of travel within a shift."""
    OUTBOUND = "outbound"
    RETURN = "return"


class CommutePeriod(str, Enum):
    """Which calendar dates a commute report covers."""
    TODAY = "today"
    TOMORROW = "tomorrow"
    FIVE_DAYS = "5days"


class RideabilityVerdict(_StrictBaseModel):
    """CommuteScorer output for one sample."""
    level: RideLevel
    emoji: str
    label: str
    advice: str


class ShiftWindow(_StrictBaseModel):
    """Named pair of local time-of-day intervals for a work shift."""
    name: str
    outbound_start: str
    outbound_end: str
    return_start: str
    return_end: str

    @field_validator("outbound_start", "outbound_end", "return_start", "return_end")
    @classmethod
    def validate_hhmm(cls, v: str) -> str:
        """Reject anything that is not a valid 'HH:MM'."""
        parse_hhmm(v)
        return v.strip()

    @property
    def is_overnight(self) -> bool:
        """True when the return leg happens on the calendar day after the outbound leg."""
        return parse_hhmm(self.return_start) < parse_hhmm(self.outbound_start)


class SlotWeather(_StrictBaseModel):
    """Serializable view of the hourly sample picked for a commute leg."""
    datetime: dt.datetime
    temperature: float
    apparent_temperature: float
    precipitation_probability: float
    precipitation: float
    wind_speed: float
    wind_gust: Optional[float] = None
    wind_direction: float
    cloud_cover: float
    weather_code: int
    description: str
    icon: str


class CommuteLegReport(_StrictBaseModel):
    """Verdict for one leg of one shift on one date."""
    leg: CommuteLeg
    shift_name: str
    date: dt.date
    time: str
    weather: SlotWeather
    verdict: RideabilityVerdict
    clothing_advice: Optional[str] = None
    weather_emoji: str
    wind_label: str


class CommuteReport(_StrictBaseModel):
    """All legs found for a shift over a period, in date order."""
    shift: ShiftWindow
    period: CommutePeriod
    reference_date: dt.date
    legs: List[CommuteLegReport] = Field(default_factory=list)
    worst_level: Optional[RideLevel] = None


# ---------------------------------------------------------------------------
# Atmosphere
# ---------------------------------------------------------------------------

class CapeLevel(str, Enum):
    NONE = "none"
    WEAK = "weak"
    MODERATE = "moderate"
    STRONG = "strong"
    EXTREME = "extreme"


class CloudBaseClass(str, Enum):
    VERY_LOW = "very_low"
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    VERY_HIGH = "very_high"


class StabilityLevel(str, Enum):
    VERY_STABLE = "very_stable"
    STABLE = "stable"
    NEUTRAL = "neutral"
    UNSTABLE = "unstable"
    VERY_UNSTABLE = "very_unstable"


class ShearLevel(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    SEVERE = "severe"


class CAPEData(_StrictBaseModel):
    """Convective energy (J/kg) and its band."""
    value: float
    level: CapeLevel


class LCLData(_StrictBaseModel):
    """Cloud base: height m AGL, temperature °C and pressure hPa at the LCL."""
    height: int
    temperature: float
    pressure: float
    classification: CloudBaseClass


class LFCData(_StrictBaseModel):
    """Level of free convection (m AGL); height is 0 when it does not exist."""
    height: int
    exists: bool
    reachable: bool


class LiftedIndexData(_StrictBaseModel):
    value: float
    level: StabilityLevel


class MeasuredLayer(_StrictBaseModel):
    """Wind band read directly from the forecast."""
    source: Literal["measured"] = "measured"
    speed: float
    direction: float


class EstimatedLayer(_StrictBaseModel):
    """Wind band derived from another band; `basis` names the formula."""
    source: Literal["estimated"] = "estimated"
    speed: float
    direction: float
    basis: str


WindLayer = Annotated[Union[MeasuredLayer, EstimatedLayer], Field(discriminator="source")]


class WindProfile(_StrictBaseModel):
    """Wind (km/h, degrees) at surface, boundary (80 m), mid (120 m) and high (~3000 m) bands."""
    surface: WindLayer
    boundary: WindLayer
    mid: WindLayer
    high: WindLayer
    avg_speed: float
    avg_direction: int
    direction_change: int


class WindShearData(_StrictBaseModel):
    """Speed shear in m/s per km for each altitude band."""
    shear_0_1km: float
    shear_1_3km: float
    shear_3_6km: float
    level: ShearLevel
    turbulence_potential: int = Field(ge=0, le=10)


class ThermalData(_StrictBaseModel):
    strength: float  # m/s
    tops: int  # m AGL
    spacing: int  # m
    consistency: float = Field(ge=0.0, le=1.0)
    index: int = Field(ge=0, le=10)


class AtmosphericProfile(_StrictBaseModel):
    """Everything derived from one hour of atmospheric fields."""
    cape: CAPEData
    lcl: LCLData
    lfc: LFCData
    lifted_index: LiftedIndexData
    wind_shear: WindShearData
    thermal: ThermalData
    wind_profile: WindProfile
    dewpoint_spread: float
    boundary_layer_height: float


# ---------------------------------------------------------------------------
# Risk and flight analysis
# ---------------------------------------------------------------------------

class RiskLevel(str, Enum):
    MINIMAL = "minimal"
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    EXTREME = "extreme"


class FlightSuitability(str, Enum):
    OPTIMAL = "optimal"
    GOOD = "good"
    MARGINAL = "marginal"
    POOR = "poor"
    DANGEROUS = "dangerous"


class PilotLevel(str, Enum):
    NOVICE = "novice"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


class WingClass(str, Enum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"


class XCRating(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    UNSUITABLE = "unsuitable"


class WarningType(str, Enum):
    WIND = "wind"
    SHEAR = "shear"
    THERMAL = "thermal"
    WEATHER = "weather"
    TERRAIN = "terrain"


class WarningSeverity(str, Enum):
    INFO = "info"
    CAUTION = "caution"
    WARNING = "warning"
    DANGER = "danger"


class RiskCode(str, Enum):
    """Canonical codes for the flight hazards the detectors know about."""
    LEE_TURBULENCE = "lee_turbulence"
    GUSTS = "gusts"
    THERMAL_TURBULENCE = "thermal_turbulence"
    WIND_SHEAR = "wind_shear"


class RiskFactor(_StrictBaseModel):
    """One detected hazard; several may apply to the same hour."""
    code: RiskCode
    name: str
    level: RiskLevel
    score: int = Field(ge=0, le=100)
    description: str
    mitigation: Optional[str] = None


class FlightWarning(_StrictBaseModel):
    type: WarningType
    severity: WarningSeverity
    message: str
    icon: str


class RidgeSoaring(_StrictBaseModel):
    suitable: bool
    wind_angle: float
    lift_potential: int
    lee_side: bool
    conditions: str


class ThermalSoaring(_StrictBaseModel):
    suitable: bool
    strength: float
    tops: int
    consistency: float
    conditions: str


class WaveSoaring(_StrictBaseModel):
    possible: bool
    amplitude: int
    conditions: str


class SoaringAnalysis(_StrictBaseModel):
    ridge: RidgeSoaring
    thermal: ThermalSoaring
    wave: WaveSoaring


class XCDistance(_StrictBaseModel):
    potential: int  # km
    confidence: float = Field(ge=0.0, le=1.0)


class XCConditions(_StrictBaseModel):
    cloudbase: int
    thermal_strength: float
    wind_speed: float
    wind_direction: int


class XCAnalysis(_StrictBaseModel):
    score: int = Field(ge=0, le=100)
    distance: XCDistance
    conditions: XCConditions
    rating: XCRating
    recommendation: str


class Recommendation(_StrictBaseModel):
    summary: str
    pilot_level: PilotLevel
    wing_class: WingClass
    details: List[str] = Field(default_factory=list)


class LocationRef(_StrictBaseModel):
    latitude: float
    longitude: float
    name: str


class ParaglidingAnalysis(_StrictBaseModel):
    """Full flight assessment for one forecast hour."""
    timestamp: dt.datetime
    location: LocationRef
    launch_orientation: float
    suitability: FlightSuitability
    score: int = Field(ge=0, le=100)
    atmosphere: AtmosphericProfile
    soaring: SoaringAnalysis
    xc: XCAnalysis
    risks: List[RiskFactor] = Field(default_factory=list)
    warnings: List[FlightWarning] = Field(default_factory=list)
    recommendation: Recommendation


class ForecastProfileResult(_StrictBaseModel):
    """Best hour within one planning horizon and its analysis."""
    profile: str
    label: str
    description: str
    hours: int
    hour_index: int
    summary: str
    analysis: ParaglidingAnalysis


# ---------------------------------------------------------------------------
# Launch sites
# ---------------------------------------------------------------------------

class SiteDifficulty(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


class LaunchSiteFeatures(_StrictBaseModel):
    top_landing: bool = False
    bottom_landing: bool = True
    ridge_soaring: bool = False
    thermal_soaring: bool = False
    cross_country: bool = False


class LaunchSiteRestrictions(_StrictBaseModel):
    min_pilot_level: Optional[WingClass] = None
    max_wind: Optional[float] = None  # km/h
    time_restrictions: Optional[str] = None
    airspace: Optional[str] = None


class LaunchSite(_StrictBaseModel):
    """Static reference data for a launch; distance is never stored here."""
    name: str
    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)
    elevation: float  # m MSL
    orientation: float = Field(ge=0.0, lt=360.0)  # direction the launch faces
    suitable_wind_directions: Tuple[float, ...] = ()
    difficulty: SiteDifficulty = SiteDifficulty.INTERMEDIATE
    features: LaunchSiteFeatures = Field(default_factory=LaunchSiteFeatures)
    restrictions: Optional[LaunchSiteRestrictions] = None


class NearbySite(_StrictBaseModel):
    """A launch site paired with its distance and bearing from a query point."""
    site: LaunchSite
    distance_km: float
    bearing: float
    direction: str
