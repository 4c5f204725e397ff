"""Fetch forecasts through a data source and run them through the scoring core."""
from __future__ import annotations

import datetime as dt
from typing import Dict, Optional
from zoneinfo import ZoneInfo

from skyride.commute import build_commute_report
from skyride.config import settings
from skyride.data_sources import ForecastDataSource, build_data_source
from skyride.domain import CommutePeriod, CommuteReport, ForecastProfileResult, LocationRef, ShiftWindow
from skyride.forecast_profiles import generate_multi_profile_forecast, generate_profile_forecast
from skyride.samples import ForecastDataError, HourlySeries
from skyride.weather_text import rain_outlook
from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="forecast_service")


def _current_hour(series: HourlySeries, now: Optional[dt.datetime]) -> int:
    """Index of the hour containing `now`; raises when the forecast has already ended."""
    tz = ZoneInfo(series.timezone)
    moment = (now or dt.datetime.now(tz)).astimezone(tz).replace(minute=0, second=0, microsecond=0)
    index = series.first_index_at_or_after(moment)
    if index >= len(series):
        raise ForecastDataError(f"forecast ends before {moment.isoformat()}")
    return index


def get_commute_report(
    start_latitude: float,
    start_longitude: float,
    destination_latitude: float,
    destination_longitude: float,
    shift: ShiftWindow,
    period: CommutePeriod,
    reference_date: dt.date,
    *,
    timezone: str | None = None,
    forecast_days: int | None = None,
    data_source: ForecastDataSource | None = None,
) -> CommuteReport:
    """
    Fetch start and destination forecasts and score the shift's legs.

    One fetch is made when both ends share coordinates. The `data_source`
    argument lets tests and alternate backends replace Open-Meteo.
    """
    ds = data_source or build_data_source(settings)
    timezone = timezone or settings.timezone

    logger.info(
        "Fetching commute forecasts",
        extra={
            "shift": shift.name,
            "period": CommutePeriod(period).value,
            "reference_date": reference_date.isoformat(),
        },
    )
    start = ds.fetch_commute_hours(start_latitude, start_longitude,
                                   timezone=timezone, forecast_days=forecast_days)
    if (start_latitude, start_longitude) == (destination_latitude, destination_longitude):
        destination = start
    else:
        destination = ds.fetch_commute_hours(destination_latitude, destination_longitude,
                                             timezone=timezone, forecast_days=forecast_days)
    return build_commute_report(start, destination, shift, period, reference_date)


def get_rain_outlook(
    latitude: float,
    longitude: float,
    *,
    now: dt.datetime | None = None,
    timezone: str | None = None,
    data_source: ForecastDataSource | None = None,
) -> str:
    """Short text on when rain starts or stops, from the current hour onwards."""
    ds = data_source or build_data_source(settings)
    series = ds.fetch_commute_hours(latitude, longitude, timezone=timezone or settings.timezone)
    index = _current_hour(series, now)
    moment = now or dt.datetime.now(ZoneInfo(series.timezone))
    return rain_outlook(series.samples[index:], moment)


def get_paragliding_forecast(
    latitude: float,
    longitude: float,
    *,
    name: str = "Current location",
    launch_orientation: float | None = None,
    profile: str | None = None,
    now: dt.datetime | None = None,
    timezone: str | None = None,
    data_source: ForecastDataSource | None = None,
) -> Dict[str, ForecastProfileResult]:
    """
    Best-hour analysis for one profile, or all three when `profile` is None.

    Profiles are searched from the hour containing `now` (defaults to the
    current time in the forecast's timezone).
    """
    ds = data_source or build_data_source(settings)
    orientation = settings.launch_orientation if launch_orientation is None else launch_orientation

    logger.info(
        "Fetching paragliding forecast",
        extra={"latitude": latitude, "longitude": longitude, "profile": profile or "all"},
    )
    series = ds.fetch_paragliding_hours(latitude, longitude, timezone=timezone or settings.timezone)
    start_index = _current_hour(series, now)
    location = LocationRef(latitude=latitude, longitude=longitude, name=name)

    if profile is None:
        return generate_multi_profile_forecast(series, location, orientation, start_index)
    return {profile: generate_profile_forecast(series, profile, location, orientation, start_index)}
