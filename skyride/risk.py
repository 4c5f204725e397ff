"""Flight hazard detectors, warnings and the overall safety verdict.

Each detector is independent and returns a RiskFactor or None. Several can
fire for the same hour and their deductions add up in the safety score.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from skyride.domain import (
    AtmosphericProfile,
    CapeLevel,
    CloudBaseClass,
    FlightSuitability,
    FlightWarning,
    PilotLevel,
    RiskCode,
    RiskFactor,
    RiskLevel,
    ShearLevel,
    ThermalData,
    WarningSeverity,
    WarningType,
    WindShearData,
    WingClass,
)
from skyride.numeric import clamp, round_int
from skyride.soaring import angle_off_orientation
from skyride.spots import compass_label_16

RISK_DEDUCTIONS = {
    RiskLevel.EXTREME: 50,
    RiskLevel.HIGH: 30,
    RiskLevel.MODERATE: 15,
    RiskLevel.LOW: 5,
}

WARNING_TYPES = {
    RiskCode.LEE_TURBULENCE: WarningType.TERRAIN,
    RiskCode.GUSTS: WarningType.WIND,
}


def detect_lee_risk(
    wind_speed: float,
    wind_direction: float,
    launch_orientation: float,
) -> Optional[RiskFactor]:
    """Wind from behind the launch (more than 90 degrees off) above 15 km/h."""
    angle = angle_off_orientation(wind_direction, launch_orientation)
    if not (angle > 90 and wind_speed > 15):
        return None

    if wind_speed > 30:
        level = RiskLevel.EXTREME
    elif wind_speed > 20:
        level = RiskLevel.HIGH
    else:
        level = RiskLevel.MODERATE

    return RiskFactor(
        code=RiskCode.LEE_TURBULENCE,
        name="Lee turbulence",
        level=level,
        score=min(100, round_int(wind_speed / 40 * 100)),
        description=f"Wind from {compass_label_16(wind_direction)}, lee side of the slope!",
        mitigation="Do not fly! Rotors can cause extreme turbulence.",
    )


def detect_gust_risk(avg_wind: float, gust_speed: Optional[float]) -> Optional[RiskFactor]:
    """Gust factor above 1.6 or gusts above 40 km/h; the divisor never drops below 1."""
    if gust_speed is None:
        return None
    gust_factor = gust_speed / max(avg_wind, 1)
    if not (gust_factor > 1.6 or gust_speed > 40):
        return None

    if gust_speed > 50:
        level = RiskLevel.EXTREME
    elif gust_speed > 40:
        level = RiskLevel.HIGH
    else:
        level = RiskLevel.MODERATE

    return RiskFactor(
        code=RiskCode.GUSTS,
        name="Strong gusts",
        level=level,
        score=min(100, round_int(gust_speed / 50 * 100)),
        description=f"Gusts up to {round_int(gust_speed)} km/h (factor {gust_factor:.1f})",
        mitigation="Very experienced pilots only. Active flying required.",
    )


def detect_thermal_turbulence(thermal: ThermalData, cape: float) -> Optional[RiskFactor]:
    """Lots of energy released irregularly: CAPE above 2000 J/kg with consistency below 0.5."""
    if not (cape > 2000 and thermal.consistency < 0.5):
        return None
    return RiskFactor(
        code=RiskCode.THERMAL_TURBULENCE,
        name="Thermal turbulence",
        level=RiskLevel.HIGH if cape > 3000 else RiskLevel.MODERATE,
        score=min(100, round_int(cape / 3000 * 80)),
        description=f"Strong, irregular thermals (CAPE {round_int(cape)} J/kg)",
        mitigation="Risk of overdevelopment and thunderstorms. Higher collapse risk.",
    )


def detect_wind_shear_risk(wind_shear: WindShearData) -> Optional[RiskFactor]:
    if wind_shear.level not in (ShearLevel.HIGH, ShearLevel.SEVERE):
        return None
    return RiskFactor(
        code=RiskCode.WIND_SHEAR,
        name="Wind shear",
        level=RiskLevel.HIGH if wind_shear.level == ShearLevel.SEVERE else RiskLevel.MODERATE,
        score=wind_shear.turbulence_potential * 10,
        description=f"Strong wind shear ({wind_shear.shear_0_1km:.1f} m/s/km)",
        mitigation="Turbulence at several altitudes. Keep active control of the wing.",
    )


def collect_risks(
    atmosphere: AtmosphericProfile,
    launch_orientation: float,
    gust_speed: Optional[float],
) -> List[RiskFactor]:
    """Run all four detectors against one hour; gusts are compared with the surface wind."""
    surface = atmosphere.wind_profile.surface
    found = (
        detect_lee_risk(surface.speed, surface.direction, launch_orientation),
        detect_gust_risk(surface.speed, gust_speed),
        detect_thermal_turbulence(atmosphere.thermal, atmosphere.cape.value),
        detect_wind_shear_risk(atmosphere.wind_shear),
    )
    return [risk for risk in found if risk is not None]


def generate_flight_warnings(
    atmosphere: AtmosphericProfile,
    risks: Iterable[RiskFactor],
) -> List[FlightWarning]:
    warnings: List[FlightWarning] = []
    for risk in risks:
        if risk.level not in (RiskLevel.EXTREME, RiskLevel.HIGH):
            continue
        warnings.append(
            FlightWarning(
                type=WARNING_TYPES.get(risk.code, WarningType.THERMAL),
                severity=WarningSeverity.DANGER if risk.level == RiskLevel.EXTREME else WarningSeverity.WARNING,
                message=risk.description,
                icon="⚠️",
            )
        )

    if atmosphere.cape.level == CapeLevel.EXTREME:
        warnings.append(
            FlightWarning(
                type=WarningType.WEATHER,
                severity=WarningSeverity.WARNING,
                message="Thunderstorm risk from very high CAPE!",
                icon="⛈️",
            )
        )

    if atmosphere.lcl.classification == CloudBaseClass.VERY_LOW:
        warnings.append(
            FlightWarning(
                type=WarningType.WEATHER,
                severity=WarningSeverity.CAUTION,
                message=f"Low cloud base ({atmosphere.lcl.height} m), limited flying height",
                icon="☁️",
            )
        )

    if atmosphere.wind_shear.turbulence_potential > 7:
        warnings.append(
            FlightWarning(
                type=WarningType.WIND,
                severity=WarningSeverity.WARNING,
                message="Strong wind shear, increased turbulence risk",
                icon="💨",
            )
        )
    return warnings


def suitability_for_score(score: int) -> FlightSuitability:
    if score >= 80:
        return FlightSuitability.OPTIMAL
    if score >= 60:
        return FlightSuitability.GOOD
    if score >= 40:
        return FlightSuitability.MARGINAL
    if score >= 20:
        return FlightSuitability.POOR
    return FlightSuitability.DANGEROUS


def evaluate_safety_level(
    risks: Sequence[RiskFactor],
    atmosphere: AtmosphericProfile,
) -> Tuple[FlightSuitability, int]:
    """
    Start at 100 and deduct per risk (50/30/15/5 by level).

    Strong thermals with low shear earn a 10 point bonus. The result is
    clamped to 0-100 before it is banded.
    """
    score = 100
    for risk in risks:
        score -= RISK_DEDUCTIONS.get(risk.level, 0)

    if atmosphere.thermal.index > 7 and atmosphere.wind_shear.level == ShearLevel.LOW:
        score += 10

    score = int(clamp(score, 0, 100))
    return suitability_for_score(score), score


def recommend_pilot(
    score: int,
    risks: Sequence[RiskFactor],
    shear_level: ShearLevel,
) -> Tuple[PilotLevel, WingClass]:
    """Lower scores call for more experienced pilots; this never blocks a flight."""
    if score < 40 or any(risk.level == RiskLevel.EXTREME for risk in risks):
        return PilotLevel.EXPERT, WingClass.D
    if score < 60 or shear_level == ShearLevel.HIGH:
        return PilotLevel.ADVANCED, WingClass.C
    if score < 75:
        return PilotLevel.INTERMEDIATE, WingClass.B
    return PilotLevel.NOVICE, WingClass.A
