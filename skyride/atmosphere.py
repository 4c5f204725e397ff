"""Closed-form atmospheric parameters for one forecast hour.

These are rules of thumb used by paraglider pilots, not a sounding model:
125 m of cloud base per °C of dewpoint spread, the dry adiabatic lapse rate,
the standard barometric formula and a CAPE-based climb-rate estimate. Every
function is pure and takes plain numbers or an HourlySample.
"""

from __future__ import annotations

import math

from skyride.domain import (
    AtmosphericProfile,
    CAPEData,
    CapeLevel,
    CloudBaseClass,
    EstimatedLayer,
    LCLData,
    LFCData,
    LiftedIndexData,
    MeasuredLayer,
    ShearLevel,
    StabilityLevel,
    ThermalData,
    WindProfile,
    WindShearData,
)
from skyride.numeric import round_half_up, round_int
from skyride.samples import ForecastDataError, HourlySample
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="atmosphere")

LCL_METERS_PER_DEGREE = 125.0
DRY_ADIABATIC_LAPSE_RATE = 9.8  # °C per km
SEA_LEVEL_PRESSURE = 1013.25  # hPa

MAGNUS_A = 17.27
MAGNUS_B = 237.7

DEFAULT_BOUNDARY_LAYER_HEIGHT = 1500.0
LFC_CAPE_THRESHOLD = 200.0
LFC_REACHABLE_BELOW = 1500

BOUNDARY_FALLBACK_FACTOR = 1.2
MID_FALLBACK_FACTOR = 1.4
HIGH_FACTOR = 1.8
HIGH_VEERING = 20.0

KMH_PER_MS = 3.6


def calculate_lcl(temperature: float, dewpoint: float, elevation: float = 0.0) -> LCLData:
    """Cloud base from the dewpoint spread; `elevation` (m MSL) only affects pressure."""
    height = (temperature - dewpoint) * LCL_METERS_PER_DEGREE

    if height < 800:
        classification = CloudBaseClass.VERY_LOW
    elif height < 1200:
        classification = CloudBaseClass.LOW
    elif height < 1800:
        classification = CloudBaseClass.MODERATE
    elif height < 2500:
        classification = CloudBaseClass.HIGH
    else:
        classification = CloudBaseClass.VERY_HIGH

    temp_at_lcl = temperature - (height / 1000) * DRY_ADIABATIC_LAPSE_RATE
    pressure = SEA_LEVEL_PRESSURE * (1 - (height + elevation) / 44330) ** 5.255

    return LCLData(
        height=round_int(height),
        temperature=round_half_up(temp_at_lcl, 1),
        pressure=round_half_up(pressure, 1),
        classification=classification,
    )


def analyze_cape(cape: float) -> CAPEData:
    """Bands are half-open: 1500 J/kg is already 'strong'."""
    if cape < 100:
        level = CapeLevel.NONE
    elif cape < 500:
        level = CapeLevel.WEAK
    elif cape < 1500:
        level = CapeLevel.MODERATE
    elif cape < 2500:
        level = CapeLevel.STRONG
    else:
        level = CapeLevel.EXTREME
    return CAPEData(value=cape, level=level)


def analyze_lifted_index(lifted_index: float) -> LiftedIndexData:
    if lifted_index > 2:
        level = StabilityLevel.VERY_STABLE
    elif lifted_index > 0:
        level = StabilityLevel.STABLE
    elif lifted_index > -2:
        level = StabilityLevel.NEUTRAL
    elif lifted_index > -6:
        level = StabilityLevel.UNSTABLE
    else:
        level = StabilityLevel.VERY_UNSTABLE
    return LiftedIndexData(value=lifted_index, level=level)


def calculate_lfc(cape: float, lcl_height: float, boundary_layer_height: float) -> LFCData:
    """Free convection starts 300 m above cloud base, capped by the boundary layer."""
    exists = cape > LFC_CAPE_THRESHOLD
    height = round_int(min(lcl_height + 300, boundary_layer_height)) if exists else 0
    return LFCData(height=height, exists=exists, reachable=exists and height < LFC_REACHABLE_BELOW)


def dewpoint_from_humidity(temperature: float, relative_humidity: float) -> float:
    """Magnus-Tetens dewpoint (°C) from temperature (°C) and relative humidity (%)."""
    if relative_humidity <= 0:
        raise ForecastDataError(f"relative humidity must be positive, got {relative_humidity!r}")
    alpha = (MAGNUS_A * temperature) / (MAGNUS_B + temperature) + math.log(relative_humidity / 100)
    return (MAGNUS_B * alpha) / (MAGNUS_A - alpha)


def _band(speed, direction, surface_speed, surface_direction, factor, label):
    if speed is None:
        return EstimatedLayer(
            speed=surface_speed * factor,
            direction=surface_direction if direction is None else direction,
            basis=f"{factor} x surface speed",
        )
    if direction is None:
        return EstimatedLayer(speed=speed, direction=surface_direction, basis=f"{label} speed, surface direction")
    return MeasuredLayer(speed=speed, direction=direction)


def _angle_between(a: float, b: float) -> float:
    return abs(((a - b + 180) % 360) - 180)


def build_wind_profile(sample: HourlySample) -> WindProfile:
    """
    Wind at 10 m, 80 m, 120 m and an estimated ~3000 m band.

    Missing 80 m and 120 m speeds fall back to 1.2x and 1.4x the surface
    speed; the high band is always 1.8x surface speed veered by 20 degrees.
    The average excludes the high band.
    """
    surface_speed = sample.wind_speed
    surface_direction = sample.wind_direction
    surface = MeasuredLayer(speed=surface_speed, direction=surface_direction)
    boundary = _band(
        sample.wind_speed_80m, sample.wind_direction_80m,
        surface_speed, surface_direction, BOUNDARY_FALLBACK_FACTOR, "80 m",
    )
    mid = _band(
        sample.wind_speed_120m, sample.wind_direction_120m,
        surface_speed, surface_direction, MID_FALLBACK_FACTOR, "120 m",
    )
    high = EstimatedLayer(
        speed=surface_speed * HIGH_FACTOR,
        direction=(surface_direction + HIGH_VEERING) % 360,
        basis=f"{HIGH_FACTOR} x surface speed, veered {HIGH_VEERING:g} degrees",
    )

    avg_speed = (surface.speed + boundary.speed + mid.speed) / 3
    avg_direction = (surface.direction + boundary.direction + mid.direction) / 3

    return WindProfile(
        surface=surface,
        boundary=boundary,
        mid=mid,
        high=high,
        avg_speed=round_half_up(avg_speed, 1),
        avg_direction=round_int(avg_direction),
        direction_change=round_int(_angle_between(high.direction, surface.direction)),
    )


def calculate_wind_shear(profile: WindProfile) -> WindShearData:
    """Speed shear in m/s per km; the level uses the larger of the two bands before rounding."""
    shear_low = abs(profile.boundary.speed - profile.surface.speed) / KMH_PER_MS
    shear_mid = abs(profile.high.speed - profile.mid.speed) / 2 / KMH_PER_MS
    shear_upper = 0.0

    max_shear = max(shear_low, shear_mid)
    if max_shear < 5:
        level = ShearLevel.LOW
    elif max_shear < 10:
        level = ShearLevel.MODERATE
    elif max_shear < 15:
        level = ShearLevel.HIGH
    else:
        level = ShearLevel.SEVERE

    return WindShearData(
        shear_0_1km=round_half_up(shear_low, 1),
        shear_1_3km=round_half_up(shear_mid, 1),
        shear_3_6km=round_half_up(shear_upper, 1),
        level=level,
        turbulence_potential=min(10, round_int(max_shear / 15 * 10)),
    )


def _time_of_day_factor(hour: int) -> float:
    if 10 <= hour <= 17:
        return math.sin((hour - 10) / 7 * math.pi)
    return 0.0


def _thermal_consistency(cape: float) -> float:
    # CAPE at or below 500 J/kg keeps the neutral default.
    if 500 < cape < 1500:
        return 0.8
    if 1500 < cape < 2500:
        return 0.6
    if cape > 2500:
        return 0.3
    return 0.5


def _thermal_index(strength: float, consistency: float) -> int:
    index = 0
    if strength > 0.5:
        index = 3
    if strength > 1.0:
        index = 5
    if strength > 1.5:
        index = 7
    if strength > 2.0:
        index = 9
    if strength > 2.5 and consistency > 0.5:
        index = 10
    return index


def analyze_thermal_conditions(
    cape: float,
    lcl_height: float,
    boundary_layer_height: float,
    hour: int,
    temperature: float,
) -> ThermalData:
    """Climb rate from CAPE shaped by time of day and warmth; tops at cloud base or BL top."""
    strength = math.sqrt(2 * max(cape, 0.0) / 1000) * _time_of_day_factor(hour)
    if temperature > 20:
        strength *= 1.1
    if temperature > 25:
        strength *= 1.2

    tops = min(lcl_height, boundary_layer_height)
    spacing = tops / 1000 * 1.5 * 1000
    consistency = _thermal_consistency(cape)

    return ThermalData(
        strength=round_half_up(strength, 1),
        tops=round_int(tops),
        spacing=round_int(spacing),
        consistency=round_half_up(consistency, 1),
        index=_thermal_index(strength, consistency),
    )


def resolve_dewpoint(sample: HourlySample) -> float:
    """Measured dewpoint, else Magnus from relative humidity."""
    if sample.dewpoint is not None:
        return sample.dewpoint
    if sample.relative_humidity is not None:
        return dewpoint_from_humidity(sample.temperature, sample.relative_humidity)
    raise ForecastDataError(
        f"sample at {sample.time.isoformat()} has neither dewpoint nor relative humidity"
    )


def build_atmospheric_profile(sample: HourlySample, elevation: float = 0.0) -> AtmosphericProfile:
    """
    Derive the full profile for one hour.

    Missing CAPE and lifted index read as 0 and a missing or zero
    boundary-layer height as 1500 m. The time-of-day factor uses the sample's local hour.
    """
    temperature = sample.temperature
    dewpoint = resolve_dewpoint(sample)
    cape = sample.cape if sample.cape is not None else 0.0
    lifted_index = sample.lifted_index if sample.lifted_index is not None else 0.0
    blh = sample.boundary_layer_height or DEFAULT_BOUNDARY_LAYER_HEIGHT

    lcl = calculate_lcl(temperature, dewpoint, elevation)
    wind_profile = build_wind_profile(sample)
    profile = AtmosphericProfile(
        cape=analyze_cape(cape),
        lcl=lcl,
        lfc=calculate_lfc(cape, lcl.height, blh),
        lifted_index=analyze_lifted_index(lifted_index),
        wind_shear=calculate_wind_shear(wind_profile),
        thermal=analyze_thermal_conditions(cape, lcl.height, blh, sample.time.hour, temperature),
        wind_profile=wind_profile,
        dewpoint_spread=round_half_up(temperature - dewpoint, 1),
        boundary_layer_height=blh,
    )
    logger.debug(
        "Built atmospheric profile",
        extra={"time": sample.time.isoformat(), "cape": cape, "lcl": lcl.height},
    )
    return profile
