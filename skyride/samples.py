"""Hourly forecast samples and strict parsing of Open-Meteo style hourly batches.

The scoring core never fetches anything; it is handed an HourlySeries that was
built here from a fully materialized batch of parallel arrays. Structural
problems in that batch (mismatched lengths, bad timestamps, unknown weather
codes, null or non-finite required values) are input-contract violations and raise
ForecastDataError naming the offending field and index.
"""

from __future__ import annotations

import datetime as dt
import math
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from skyride.weather_text import WMO_DESCRIPTIONS
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="samples")


class ForecastDataError(ValueError):
    """Raised when a forecast batch violates the input contract."""


@dataclass(frozen=True)
class HourlySample:
    """One timestamped forecast point. Units: °C, mm/h, km/h, degrees, %."""
    time: dt.datetime  # timezone-aware
    temperature: float
    apparent_temperature: float
    precipitation_probability: float  # 0-1
    precipitation: float
    wind_speed: float
    wind_direction: float
    cloud_cover: float
    weather_code: int
    wind_gust: Optional[float] = None
    dewpoint: Optional[float] = None
    relative_humidity: Optional[float] = None
    cape: Optional[float] = None
    lifted_index: Optional[float] = None
    boundary_layer_height: Optional[float] = None
    convective_inhibition: Optional[float] = None
    wind_speed_80m: Optional[float] = None
    wind_direction_80m: Optional[float] = None
    wind_speed_120m: Optional[float] = None
    wind_direction_120m: Optional[float] = None
    cloud_cover_low: Optional[float] = None
    cloud_cover_mid: Optional[float] = None
    cloud_cover_high: Optional[float] = None
    surface_pressure: Optional[float] = None

    @property
    def minute_of_day(self) -> int:
        """Local wall-clock minutes since midnight."""
        return self.time.hour * 60 + self.time.minute


@dataclass(frozen=True)
class HourlySeries:
    """Time-ordered samples for one location."""
    latitude: float
    longitude: float
    timezone: str
    samples: Tuple[HourlySample, ...] = field(default_factory=tuple)
    elevation: float = 0.0

    def __len__(self) -> int:
        return len(self.samples)

    def __getitem__(self, index: int) -> HourlySample:
        return self.samples[index]

    def first_index_at_or_after(self, moment: dt.datetime) -> int:
        """Index of the first sample not earlier than `moment` (0 if all are later, len if none)."""
        for i, sample in enumerate(self.samples):
            if sample.time >= moment:
                return i
        return len(self.samples)


# Open-Meteo hourly key -> (HourlySample attribute, scale)
REQUIRED_FIELDS: Mapping[str, Tuple[str, float]] = {
    "temperature_2m": ("temperature", 1.0),
    "apparent_temperature": ("apparent_temperature", 1.0),
    "precipitation_probability": ("precipitation_probability", 0.01),
    "precipitation": ("precipitation", 1.0),
    "wind_speed_10m": ("wind_speed", 1.0),
    "wind_direction_10m": ("wind_direction", 1.0),
    "cloud_cover": ("cloud_cover", 1.0),
}

OPTIONAL_FIELDS: Mapping[str, str] = {
    "wind_gusts_10m": "wind_gust",
    "dew_point_2m": "dewpoint",
    "dewpoint_2m": "dewpoint",
    "relative_humidity_2m": "relative_humidity",
    "cape": "cape",
    "lifted_index": "lifted_index",
    "boundary_layer_height": "boundary_layer_height",
    "convective_inhibition": "convective_inhibition",
    "wind_speed_80m": "wind_speed_80m",
    "wind_direction_80m": "wind_direction_80m",
    "wind_speed_120m": "wind_speed_120m",
    "wind_direction_120m": "wind_direction_120m",
    "cloud_cover_low": "cloud_cover_low",
    "cloud_cover_mid": "cloud_cover_mid",
    "cloud_cover_high": "cloud_cover_high",
    "surface_pressure": "surface_pressure",
}

# Providers return null precipitation values past their nowcast horizon; those
# elements read as "no precipitation signal" rather than a broken batch.
NULL_AS_ZERO = {"precipitation_probability", "precipitation"}


def parse_timestamp(value: Any, tz_name: str, *, index: int) -> dt.datetime:
    """Parse an ISO-8601 string; naive values are local time in `tz_name`."""
    if not isinstance(value, str):
        raise ForecastDataError(f"hourly.time[{index}] is not an ISO-8601 string: {value!r}")
    try:
        parsed = dt.datetime.fromisoformat(value)
    except ValueError as exc:
        raise ForecastDataError(f"hourly.time[{index}] is malformed: {value!r}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=ZoneInfo(tz_name))
    return parsed


def _validate_weather_code(value: Any, *, index: int) -> int:
    if value is None or isinstance(value, bool):
        raise ForecastDataError(f"hourly.weather_code[{index}] is missing")
    try:
        code = int(value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise ForecastDataError(f"hourly.weather_code[{index}] is not an integer: {value!r}") from exc
    if code != value or code not in WMO_DESCRIPTIONS:
        raise ForecastDataError(f"hourly.weather_code[{index}] is not a known WMO code: {value!r}")
    return code


def _to_float(raw: Any, key: str, index: int) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError) as exc:
        raise ForecastDataError(f"hourly.{key}[{index}] is not a number: {raw!r}") from exc
    if not math.isfinite(value):
        raise ForecastDataError(f"hourly.{key}[{index}] is not a number: {raw!r}")
    return value


def _optional_value(values: Optional[Sequence[Any]], key: str, index: int) -> Optional[float]:
    if values is None:
        return None
    raw = values[index]
    return None if raw is None else _to_float(raw, key, index)


def parse_hourly_batch(
    hourly: Mapping[str, Sequence[Any]],
    *,
    timezone: str,
    latitude: float,
    longitude: float,
    elevation: float | None = None,
) -> HourlySeries:
    """
    Convert parallel hourly arrays into an immutable HourlySeries.

    `precipitation_probability` arrives as 0-100 and is scaled to 0-1 here.
    Optional arrays may be absent entirely; when present they must have the
    same length as `time`.
    """
    try:
        ZoneInfo(timezone)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ForecastDataError(f"Unknown timezone: {timezone!r}") from exc

    times = hourly.get("time")
    if times is None:
        raise ForecastDataError("hourly.time is missing")
    n = len(times)

    for key in (*REQUIRED_FIELDS, "weather_code"):
        if key not in hourly or hourly[key] is None:
            raise ForecastDataError(f"hourly.{key} is missing")
    for key in (*REQUIRED_FIELDS, "weather_code", *OPTIONAL_FIELDS):
        values = hourly.get(key)
        if values is not None and len(values) != n:
            raise ForecastDataError(
                f"hourly.{key} has {len(values)} values but hourly.time has {n}"
            )

    samples: list[HourlySample] = []
    for i in range(n):
        kwargs: dict[str, Any] = {
            "time": parse_timestamp(times[i], timezone, index=i),
            "weather_code": _validate_weather_code(hourly["weather_code"][i], index=i),
        }
        for key, (attr, scale) in REQUIRED_FIELDS.items():
            raw = hourly[key][i]
            if raw is None:
                if attr not in NULL_AS_ZERO:
                    raise ForecastDataError(f"hourly.{key}[{i}] is null")
                raw = 0.0
            kwargs[attr] = _to_float(raw, key, i) * scale
        for key, attr in OPTIONAL_FIELDS.items():
            if attr in kwargs and kwargs[attr] is not None:
                continue
            kwargs[attr] = _optional_value(hourly.get(key), key, i)
        samples.append(HourlySample(**kwargs))

    logger.debug("Parsed hourly batch", extra={"hours": n, "timezone": timezone})
    return HourlySeries(
        latitude=latitude,
        longitude=longitude,
        timezone=timezone,
        samples=tuple(samples),
        elevation=elevation or 0.0,
    )
