"""Ridge, thermal and wave soaring verdicts plus cross-country potential."""

from __future__ import annotations

from skyride.domain import (
    AtmosphericProfile,
    RidgeSoaring,
    SoaringAnalysis,
    ThermalSoaring,
    WaveSoaring,
    XCAnalysis,
    XCConditions,
    XCDistance,
    XCRating,
)
from skyride.numeric import clamp, round_half_up, round_int

DEFAULT_LAUNCH_ORIENTATION = 270.0
GLIDE_RATIO = 8

XC_RECOMMENDATIONS = {
    XCRating.EXCELLENT: "Excellent XC conditions! Long distances possible.",
    XCRating.GOOD: "Good XC conditions for experienced pilots.",
    XCRating.FAIR: "XC possible but demanding.",
    XCRating.POOR: "Not recommended for cross-country flights.",
    XCRating.UNSUITABLE: "Not recommended for cross-country flights.",
}


def angle_off_orientation(wind_direction: float, launch_orientation: float) -> float:
    """Angle between the wind and the direction the launch faces, folded into [0, 180]."""
    return abs(((wind_direction - launch_orientation + 180) % 360) - 180)


def analyze_ridge(atmosphere: AtmosphericProfile, launch_orientation: float) -> RidgeSoaring:
    surface = atmosphere.wind_profile.surface
    angle = angle_off_orientation(surface.direction, launch_orientation)
    suitable = angle < 45 and 10 < surface.speed < 35
    lift = min(10, round_int(surface.speed / 25 * 10)) if suitable else 0
    lee_side = angle > 90

    if suitable:
        conditions = f"Good ridge lift at {round_int(surface.speed)} km/h"
    elif lee_side:
        conditions = "Lee side, no ridge lift possible"
    else:
        conditions = "Wind too oblique or too weak for ridge lift"

    return RidgeSoaring(
        suitable=suitable,
        wind_angle=round_half_up(angle, 1),
        lift_potential=lift,
        lee_side=lee_side,
        conditions=conditions,
    )


def analyze_thermal_soaring(atmosphere: AtmosphericProfile) -> ThermalSoaring:
    thermal = atmosphere.thermal
    suitable = thermal.strength > 0.8 and thermal.index >= 5
    if suitable:
        conditions = f"Good thermals ({thermal.strength} m/s), base ~{round_int(thermal.tops / 100) * 100} m"
    elif thermal.index < 3:
        conditions = "Weak or no thermals"
    else:
        conditions = "Moderate, irregular thermals"
    return ThermalSoaring(
        suitable=suitable,
        strength=thermal.strength,
        tops=thermal.tops,
        consistency=thermal.consistency,
        conditions=conditions,
    )


def analyze_wave(atmosphere: AtmosphericProfile) -> WaveSoaring:
    profile = atmosphere.wind_profile
    possible = profile.avg_speed > 20 and profile.direction_change < 30
    return WaveSoaring(
        possible=possible,
        amplitude=round_int(profile.avg_speed * 30) if possible else 0,
        conditions="Lee waves possible, experienced pilots only" if possible else "No lee waves expected",
    )


def analyze_soaring_conditions(
    atmosphere: AtmosphericProfile,
    launch_orientation: float = DEFAULT_LAUNCH_ORIENTATION,
) -> SoaringAnalysis:
    return SoaringAnalysis(
        ridge=analyze_ridge(atmosphere, launch_orientation),
        thermal=analyze_thermal_soaring(atmosphere),
        wave=analyze_wave(atmosphere),
    )


def _xc_score(atmosphere: AtmosphericProfile) -> int:
    thermal = atmosphere.thermal
    cloudbase = atmosphere.lcl.height
    avg_speed = atmosphere.wind_profile.avg_speed

    score = 0
    if thermal.strength > 1.5:
        score += 30
    elif thermal.strength > 1.0:
        score += 20
    elif thermal.strength > 0.5:
        score += 10

    if cloudbase > 1800:
        score += 25
    elif cloudbase > 1400:
        score += 15
    elif cloudbase > 1000:
        score += 5

    if avg_speed < 25:
        score += 20
    elif avg_speed < 35:
        score += 10

    if thermal.consistency > 0.7:
        score += 25
    elif thermal.consistency > 0.5:
        score += 15
    return score


def xc_rating(score: int) -> XCRating:
    if score > 80:
        return XCRating.EXCELLENT
    if score > 60:
        return XCRating.GOOD
    if score > 40:
        return XCRating.FAIR
    if score > 20:
        return XCRating.POOR
    return XCRating.UNSUITABLE


def analyze_xc_potential(atmosphere: AtmosphericProfile) -> XCAnalysis:
    """
    Additive 0-100 cross-country score.

    Distance assumes a glide ratio of 8 from cloud base plus ten kilometres
    per m/s of climb; confidence blends thermal consistency with cloud base.
    """
    thermal = atmosphere.thermal
    cloudbase = atmosphere.lcl.height
    score = _xc_score(atmosphere)
    rating = xc_rating(score)

    distance = GLIDE_RATIO * cloudbase / 1000 + thermal.strength * 10
    confidence = 0.6 * thermal.consistency + 0.4 * min(cloudbase / 2000, 1)

    return XCAnalysis(
        score=score,
        distance=XCDistance(
            potential=max(0, round_int(distance)),
            confidence=clamp(round_half_up(confidence, 2), 0.0, 1.0),
        ),
        conditions=XCConditions(
            cloudbase=cloudbase,
            thermal_strength=thermal.strength,
            wind_speed=atmosphere.wind_profile.avg_speed,
            wind_direction=atmosphere.wind_profile.avg_direction,
        ),
        rating=rating,
        recommendation=XC_RECOMMENDATIONS[rating],
    )
