"""Deterministic rideability verdicts for a single commute hour.

Thresholds form a priority cascade: levels are tried from most to least
severe and the first level with a matching condition wins. Within a level the
advice text comes from the first matching condition in declaration order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple

from skyride.domain import RideabilityVerdict, RideLevel
from skyride.samples import HourlySample

GUST_WEIGHT = 0.8

Predicate = Callable[["RideInputs"], bool]


@dataclass(frozen=True)
class RideInputs:
    """The four measures the cascade looks at, already normalized."""
    temperature: float
    pop_percent: float
    rain: float
    wind: float  # effective wind, km/h


@dataclass(frozen=True)
class RideRule:
    level: RideLevel
    emoji: str
    label: str
    conditions: Sequence[Tuple[Predicate, str]]


def effective_wind(wind_speed: float, wind_gust: Optional[float]) -> float:
    """Gusts count at 80% when they exceed the sustained wind; zero and missing gusts are ignored."""
    if wind_gust is not None and wind_gust > 0:
        return max(wind_speed, wind_gust * GUST_WEIGHT)
    return wind_speed


RIDE_RULES: Tuple[RideRule, ...] = (
    RideRule(
        RideLevel.BAD,
        "🔴",
        "not recommended",
        (
            (lambda r: r.pop_percent > 80, "Very high chance of rain"),
            (lambda r: r.rain > 5, "Heavy rain expected"),
            (lambda r: r.temperature <= -3, "Dangerously cold, risk of ice"),
            (lambda r: r.wind > 58, "Dangerous storm"),
        ),
    ),
    RideRule(
        RideLevel.CRITICAL,
        "🟠",
        "critical",
        (
            (lambda r: 60 <= r.pop_percent <= 80, "High chance of rain, rain gear recommended"),
            (lambda r: 2 <= r.rain <= 5, "Moderate rain expected, full rain gear recommended"),
            (lambda r: 43 <= r.wind <= 58, "Strong wind, watch out for crosswinds"),
            (lambda r: -3 < r.temperature <= 0, "Risk of frost, watch for slippery roads"),
        ),
    ),
    RideRule(
        RideLevel.MODERATE,
        "🟡",
        "ok with caution",
        (
            (lambda r: 20 <= r.pop_percent < 60, "Rain jacket recommended"),
            (lambda r: 0.5 <= r.rain < 2, "Light rain possible, bring rain protection"),
            (lambda r: 29 <= r.wind < 43, "Moderate wind, ride accordingly"),
        ),
    ),
)

GOOD_VERDICT = RideabilityVerdict(
    level=RideLevel.GOOD,
    emoji="🟢",
    label="good to ride",
    advice="Ideal conditions for cycling!",
)


def evaluate_conditions(
    *,
    temperature: float,
    pop: float,
    rain: float,
    wind_speed: float,
    wind_gust: Optional[float] = None,
) -> RideabilityVerdict:
    """Score raw measures; `pop` is a 0-1 probability."""
    inputs = RideInputs(
        temperature=temperature,
        pop_percent=pop * 100,
        rain=rain,
        wind=effective_wind(wind_speed, wind_gust),
    )
    for rule in RIDE_RULES:
        for predicate, advice in rule.conditions:
            if predicate(inputs):
                return RideabilityVerdict(level=rule.level, emoji=rule.emoji, label=rule.label, advice=advice)
    return GOOD_VERDICT


def evaluate_rideability(sample: HourlySample) -> RideabilityVerdict:
    """Verdict for one forecast hour."""
    return evaluate_conditions(
        temperature=sample.temperature,
        pop=sample.precipitation_probability,
        rain=sample.precipitation,
        wind_speed=sample.wind_speed,
        wind_gust=sample.wind_gust,
    )


def clothing_advice(temperature: float) -> Optional[str]:
    """Temperature-only clothing hint, independent of the verdict."""
    if temperature < 0:
        return "🧥 Winter jacket, gloves and hat recommended"
    if temperature < 5:
        return "🧤 Warm jacket and gloves recommended"
    if temperature > 25:
        return "👕 Light clothing, drink plenty!"
    return None
