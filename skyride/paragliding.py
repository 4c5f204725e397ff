"""Per-hour paragliding assessment.

Combines the atmospheric profile, soaring and XC analysis and the risk
detectors into one ParaglidingAnalysis, plus a short recommendation text.
"""

from __future__ import annotations

from typing import List

from skyride.atmosphere import build_atmospheric_profile
from skyride.domain import (
    AtmosphericProfile,
    FlightSuitability,
    LocationRef,
    ParaglidingAnalysis,
    Recommendation,
    SoaringAnalysis,
    XCAnalysis,
    XCRating,
)
from skyride.risk import collect_risks, evaluate_safety_level, generate_flight_warnings, recommend_pilot
from skyride.samples import ForecastDataError, HourlySeries
from skyride.soaring import DEFAULT_LAUNCH_ORIENTATION, analyze_soaring_conditions, analyze_xc_potential
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="paragliding")


def recommendation_summary(
    suitability: FlightSuitability,
    atmosphere: AtmosphericProfile,
    xc: XCAnalysis,
) -> str:
    if suitability == FlightSuitability.DANGEROUS:
        return "Do not fly! Dangerous conditions."
    if suitability == FlightSuitability.POOR:
        return "Only for very experienced pilots after careful assessment."
    if suitability == FlightSuitability.MARGINAL:
        if atmosphere.thermal.index > 5:
            return "Marginal conditions. Thermals present, but caution advised."
        return "Marginal conditions. Caution advised."
    if suitability == FlightSuitability.GOOD:
        hint = "XC possible." if xc.rating == XCRating.GOOD else "Soaring recommended."
        return f"Good flying conditions. {hint}"
    hint = "Excellent for XC flights." if xc.rating == XCRating.EXCELLENT else "Perfect for flying."
    return f"Optimal conditions! {hint}"


def recommendation_details(
    atmosphere: AtmosphericProfile,
    soaring: SoaringAnalysis,
    xc: XCAnalysis,
) -> List[str]:
    details: List[str] = []
    if atmosphere.thermal.index > 5:
        details.append(f"Thermals: {atmosphere.thermal.strength} m/s")
    if soaring.ridge.suitable:
        details.append("Ridge lift possible")
    if xc.rating in (XCRating.EXCELLENT, XCRating.GOOD):
        details.append(f"XC potential: {xc.distance.potential} km")
    return details


def generate_paragliding_analysis(
    series: HourlySeries,
    index: int,
    location: LocationRef,
    launch_orientation: float = DEFAULT_LAUNCH_ORIENTATION,
) -> ParaglidingAnalysis:
    """
    Assess the hour at `index` for a launch facing `launch_orientation` degrees.

    The gust detector compares the 10 m gust with the surface wind speed.
    """
    if not 0 <= index < len(series):
        raise ForecastDataError(f"hour index {index} outside forecast of {len(series)} hours")

    sample = series[index]
    atmosphere = build_atmospheric_profile(sample, series.elevation)
    soaring = analyze_soaring_conditions(atmosphere, launch_orientation)
    xc = analyze_xc_potential(atmosphere)

    risks = collect_risks(atmosphere, launch_orientation, sample.wind_gust)
    warnings = generate_flight_warnings(atmosphere, risks)
    suitability, score = evaluate_safety_level(risks, atmosphere)
    pilot_level, wing_class = recommend_pilot(score, risks, atmosphere.wind_shear.level)

    logger.debug(
        "Assessed flight hour",
        extra={"time": sample.time.isoformat(), "score": score, "risks": len(risks)},
    )
    return ParaglidingAnalysis(
        timestamp=sample.time,
        location=location,
        launch_orientation=launch_orientation,
        suitability=suitability,
        score=score,
        atmosphere=atmosphere,
        soaring=soaring,
        xc=xc,
        risks=risks,
        warnings=warnings,
        recommendation=Recommendation(
            summary=recommendation_summary(suitability, atmosphere, xc),
            pilot_level=pilot_level,
            wing_class=wing_class,
            details=recommendation_details(atmosphere, soaring, xc),
        ),
    )
