"""Helpers for fetching hourly commute and flight forecasts from the Open-Meteo APIs."""
from __future__ import annotations

from typing import Any, Mapping

import requests

from skyride.config import settings
from skyride.samples import ForecastDataError, HourlySeries, parse_hourly_batch
from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag='open_meteo_client')

try:
    import requests_cache
    from retry_requests import retry
    logger.info("Using requests_cache and retry_requests")
except ImportError:
    logger.warning("Failed to import requests_cache and retry_requests.  Proceeding without caching.")
    requests_cache = None
    retry = None

if requests_cache and retry:
    cache_session = requests_cache.CachedSession('.cache', expire_after=settings.cache_expire_seconds)
    session = retry(cache_session, retries=5, backoff_factor=0.2)
else:
    session = requests.Session()

COMMUTE_HOURLY_VARS = [
    "temperature_2m",
    "apparent_temperature",
    "precipitation_probability",
    "precipitation",
    "weather_code",
    "cloud_cover",
    "wind_speed_10m",
    "wind_direction_10m",
    "wind_gusts_10m",
]

PARAGLIDING_HOURLY_VARS = COMMUTE_HOURLY_VARS + [
    "relative_humidity_2m",
    "dew_point_2m",
    "cape",
    "lifted_index",
    "convective_inhibition",
    "boundary_layer_height",
    "wind_speed_80m",
    "wind_direction_80m",
    "wind_speed_120m",
    "wind_direction_120m",
    "cloud_cover_low",
    "cloud_cover_mid",
    "cloud_cover_high",
    "surface_pressure",
]

EXPECTED_UNITS = {
    "temperature_2m": "°C",
    "apparent_temperature": "°C",
    "dew_point_2m": "°C",
    "precipitation_probability": "%",
    "precipitation": "mm",
    "cloud_cover": "%",
    "wind_speed_10m": "km/h",
    "wind_gusts_10m": "km/h",
    "wind_speed_80m": "km/h",
    "wind_speed_120m": "km/h",
    "wind_direction_10m": "°",
    "cape": "J/kg",
    "boundary_layer_height": "m",
}

# Acceptable alternative units that should not trigger warnings (API/localized differences).
ALLOWED_UNIT_SYNONYMS = {
    "precipitation_probability": {"%", "percent"},
    "cloud_cover": {"%", "percent"},
    "wind_direction_10m": {"°", "deg", "degrees"},
    "cape": {"J/kg", "J kg-1"},
}


def _warn_on_unexpected_units(units: Mapping[str, Any] | None, *, context: str) -> None:
    """Log a warning if Open-Meteo returns units we did not request/expect."""
    if not units:
        return
    for field, expected in EXPECTED_UNITS.items():
        actual = units.get(field)
        if not actual or actual == expected:
            continue
        allowed = ALLOWED_UNIT_SYNONYMS.get(field, set())
        if actual not in allowed:
            logger.warning(
                "Unexpected Open-Meteo unit",
                extra={"context": context, "field": field, "unit": actual, "expected": expected},
            )


def _series_from_payload(data: Mapping[str, Any], *, latitude: float, longitude: float,
                         timezone: str, context: str) -> HourlySeries:
    """Validate the hourly block of an Open-Meteo response and convert it."""
    hourly = data.get("hourly")
    if not isinstance(hourly, Mapping):
        raise ForecastDataError(f"Open-Meteo {context} response has no hourly block")
    _warn_on_unexpected_units(data.get("hourly_units"), context=context)
    return parse_hourly_batch(
        hourly,
        timezone=data.get("timezone") or timezone,
        latitude=data.get("latitude", latitude),
        longitude=data.get("longitude", longitude),
        elevation=data.get("elevation"),
    )


def fetch_commute_hours(latitude: float,
                        longitude: float,
                        *,
                        timezone: str | None = None,
                        forecast_days: int | None = None,
                        model: str | None = None,
                        ) -> HourlySeries:
    """Fetch the DWD ICON hourly forecast used for commute slots."""
    timezone = timezone or settings.timezone
    params = {
        "latitude": latitude,
        "longitude": longitude,
        "hourly": ",".join(COMMUTE_HOURLY_VARS),
        "models": model or settings.commute_model,
        "timezone": timezone,
        "forecast_days": forecast_days or settings.forecast_days,
        "wind_speed_unit": "kmh",
    }

    logger.info("Fetching commute forecast", extra={"latitude": latitude, "longitude": longitude})
    resp = session.get(settings.open_meteo_commute_url, params=params, timeout=settings.request_timeout_seconds)
    resp.raise_for_status()
    return _series_from_payload(resp.json(), latitude=latitude, longitude=longitude,
                                timezone=timezone, context="commute_hourly")


def fetch_paragliding_hours(latitude: float,
                            longitude: float,
                            *,
                            timezone: str | None = None,
                            forecast_days: int | None = None,
                            ) -> HourlySeries:
    """Fetch the extended atmospheric forecast (CAPE, boundary layer, winds aloft)."""
    timezone = timezone or settings.timezone
    params = {
        "latitude": latitude,
        "longitude": longitude,
        "hourly": ",".join(PARAGLIDING_HOURLY_VARS),
        "timezone": timezone,
        "forecast_days": forecast_days or settings.forecast_days,
        "wind_speed_unit": "kmh",
    }

    logger.info("Fetching paragliding forecast", extra={"latitude": latitude, "longitude": longitude})
    resp = session.get(settings.open_meteo_forecast_url, params=params, timeout=settings.request_timeout_seconds)
    resp.raise_for_status()
    return _series_from_payload(resp.json(), latitude=latitude, longitude=longitude,
                                timezone=timezone, context="paragliding_hourly")
