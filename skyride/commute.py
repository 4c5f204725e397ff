"""Commute reports: one verdict per leg for a shift over a period."""

from __future__ import annotations

import datetime as dt
from typing import Optional

from skyride.domain import (
    CommutePeriod,
    CommuteLegReport,
    CommuteReport,
    ShiftWindow,
    SlotWeather,
)
from skyride.rideability import clothing_advice, evaluate_rideability
from skyride.samples import HourlySample, HourlySeries
from skyride.slot_logic import CommuteSlot, find_commute_slots
from skyride.weather_text import (
    describe_weather_code,
    is_daytime,
    weather_emoji,
    weather_icon,
    wind_direction_label,
)
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="commute")


def slot_weather(sample: HourlySample) -> SlotWeather:
    return SlotWeather(
        datetime=sample.time,
        temperature=sample.temperature,
        apparent_temperature=sample.apparent_temperature,
        precipitation_probability=sample.precipitation_probability,
        precipitation=sample.precipitation,
        wind_speed=sample.wind_speed,
        wind_gust=sample.wind_gust,
        wind_direction=sample.wind_direction,
        cloud_cover=sample.cloud_cover,
        weather_code=sample.weather_code,
        description=describe_weather_code(sample.weather_code),
        icon=weather_icon(sample.weather_code, is_daytime(sample.time.hour)),
    )


def leg_report(slot: CommuteSlot) -> CommuteLegReport:
    sample = slot.sample
    return CommuteLegReport(
        leg=slot.leg,
        shift_name=slot.shift_name,
        date=slot.date,
        time=slot.time_label,
        weather=slot_weather(sample),
        verdict=evaluate_rideability(sample),
        clothing_advice=clothing_advice(sample.temperature),
        weather_emoji=weather_emoji(sample.cloud_cover, sample.precipitation_probability, sample.precipitation),
        wind_label=wind_direction_label(sample.wind_direction),
    )


def build_commute_report(
    start: HourlySeries,
    destination: HourlySeries,
    shift: ShiftWindow,
    period: CommutePeriod,
    reference_date: dt.date,
) -> CommuteReport:
    """
    Score every leg of `shift` found in the forecasts.

    Legs without a forecast hour are left out; `worst_level` is the most
    severe verdict among the remaining legs, or None when there are none.
    """
    slots = find_commute_slots(start.samples, destination.samples, shift, period, reference_date)
    legs = [leg_report(slot) for slot in slots]

    worst: Optional[CommuteLegReport] = max(legs, key=lambda leg: leg.verdict.level.severity, default=None)
    logger.info(
        "Built commute report",
        extra={"shift": shift.name, "period": CommutePeriod(period).value, "legs": len(legs)},
    )
    return CommuteReport(
        shift=shift,
        period=period,
        reference_date=reference_date,
        legs=legs,
        worst_level=worst.verdict.level if worst else None,
    )
