"""Best-hour search and the 3h / 12h / 24h planning profiles."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from skyride.domain import ForecastProfileResult, LocationRef, ParaglidingAnalysis
from skyride.paragliding import generate_paragliding_analysis
from skyride.samples import HourlySample, HourlySeries
from skyride.soaring import DEFAULT_LAUNCH_ORIENTATION
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="forecast_profiles")

FIRST_FLYING_HOUR = 9
LAST_FLYING_HOUR = 19


@dataclass(frozen=True)
class ForecastProfile:
    id: str
    label: str
    description: str
    hours: int
    focus: str
    summary_prefix: str


FORECAST_PROFILES: Dict[str, ForecastProfile] = {
    "3h": ForecastProfile(
        id="3h",
        label="3 hours",
        description="Launch window",
        hours=3,
        focus="Immediate flying conditions and safety",
        summary_prefix="Best window",
    ),
    "12h": ForecastProfile(
        id="12h",
        label="12 hours",
        description="Day planning",
        hours=12,
        focus="Best time window for longer flights",
        summary_prefix="Best time window today",
    ),
    "24h": ForecastProfile(
        id="24h",
        label="24 hours",
        description="XC planning",
        hours=24,
        focus="Cross-country and travel planning",
        summary_prefix="Best conditions",
    ),
}


def score_flight_hour(sample: HourlySample) -> Optional[int]:
    """
    Heuristic score for one hour, or None outside 09:00-19:59 local.

    Moderate CAPE beats excessive CAPE, 10-25 km/h wind is ideal and any
    rain costs 50 points.
    """
    hour = sample.time.hour
    if hour < FIRST_FLYING_HOUR or hour > LAST_FLYING_HOUR:
        return None

    cape = sample.cape or 0.0
    wind = sample.wind_speed
    gust = sample.wind_gust or 0.0

    score = 0
    if 500 < cape < 1500:
        score += 30
    elif 1500 <= cape < 2500:
        score += 20
    elif cape >= 2500:
        score += 5

    if 10 <= wind <= 25:
        score += 30
    elif 25 < wind <= 35:
        score += 10

    if gust < 35:
        score += 20
    elif gust < 45:
        score += 10

    if sample.temperature > 15:
        score += 10
    if sample.temperature > 20:
        score += 10

    if sample.precipitation > 0:
        score -= 50

    if 11 <= hour <= 16:
        score += 15
    return score


def find_best_window(series: HourlySeries, start_index: int, duration_hours: int) -> int:
    """
    Index of the best-scoring hour in [start_index, start_index + duration_hours).

    Ties keep the earliest hour. When no hour in range is a flying hour the
    start index is returned unchanged.
    """
    end = min(start_index + duration_hours, len(series))
    best_index = start_index
    best_score: Optional[int] = None
    for i in range(start_index, end):
        score = score_flight_hour(series[i])
        if score is None:
            continue
        if best_score is None or score > best_score:
            best_index, best_score = i, score
    return best_index


def profile_summary(profile_id: str, analysis: ParaglidingAnalysis) -> str:
    profile = FORECAST_PROFILES[profile_id]
    return f"{profile.summary_prefix}: {analysis.timestamp:%H:%M}"


def generate_profile_forecast(
    series: HourlySeries,
    profile_id: str,
    location: LocationRef,
    launch_orientation: float = DEFAULT_LAUNCH_ORIENTATION,
    start_index: int = 0,
) -> ForecastProfileResult:
    """Analyse the best hour of a single profile horizon."""
    profile = FORECAST_PROFILES[profile_id]
    index = find_best_window(series, start_index, profile.hours)
    analysis = generate_paragliding_analysis(series, index, location, launch_orientation)
    logger.debug("Selected profile hour", extra={"profile": profile_id, "index": index})
    return ForecastProfileResult(
        profile=profile.id,
        label=profile.label,
        description=profile.description,
        hours=profile.hours,
        hour_index=index,
        summary=profile_summary(profile.id, analysis),
        analysis=analysis,
    )


def generate_multi_profile_forecast(
    series: HourlySeries,
    location: LocationRef,
    launch_orientation: float = DEFAULT_LAUNCH_ORIENTATION,
    start_index: int = 0,
) -> Dict[str, ForecastProfileResult]:
    """All three horizons from the same start hour."""
    return {
        profile_id: generate_profile_forecast(series, profile_id, location, launch_orientation, start_index)
        for profile_id in FORECAST_PROFILES
    }
