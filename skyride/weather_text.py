"""Human-readable weather texts: WMO codes, icons, emoji and a rain outlook."""

from __future__ import annotations

import datetime as dt
from typing import TYPE_CHECKING, Dict, Sequence

from skyride.numeric import round_int

if TYPE_CHECKING:
    from skyride.samples import HourlySample


WMO_DESCRIPTIONS: Dict[int, str] = {
    0: "Clear sky",
    1: "Mainly clear",
    2: "Partly cloudy",
    3: "Overcast",
    45: "Fog",
    48: "Depositing rime fog",
    51: "Light drizzle",
    53: "Moderate drizzle",
    55: "Dense drizzle",
    56: "Light freezing drizzle",
    57: "Dense freezing drizzle",
    61: "Light rain",
    63: "Moderate rain",
    65: "Heavy rain",
    66: "Light freezing rain",
    67: "Heavy freezing rain",
    71: "Light snowfall",
    73: "Moderate snowfall",
    75: "Heavy snowfall",
    77: "Snow grains",
    80: "Light rain showers",
    81: "Moderate rain showers",
    82: "Violent rain showers",
    85: "Light snow showers",
    86: "Heavy snow showers",
    95: "Thunderstorm",
    96: "Thunderstorm with light hail",
    99: "Thunderstorm with heavy hail",
}

WIND_DIRECTIONS_8 = ("N", "NE", "E", "SE", "S", "SW", "W", "NW")


def describe_weather_code(code: int) -> str:
    """Return the WMO description; codes outside the table are a caller bug."""
    try:
        return WMO_DESCRIPTIONS[code]
    except KeyError:
        raise ValueError(f"Unknown WMO weather code: {code!r}") from None


def is_daytime(hour: int) -> bool:
    """Day/night split for icons: 06:00 up to 19:59 local time."""
    return 6 <= hour < 20


def weather_icon(code: int, is_day: bool = True) -> str:
    """Map a WMO code to an icon key used by the presentation layer."""
    if code == 0:
        return "sun" if is_day else "moon"
    if code <= 3:
        return "cloud-sun" if is_day else "cloud-moon"
    if code <= 48:
        return "cloud-fog"
    if code <= 57:
        return "cloud-drizzle"
    if code <= 67:
        return "cloud-rain"
    if code <= 77:
        return "cloud-snow"
    if code <= 82:
        return "cloud-rain"
    if code <= 86:
        return "cloud-snow"
    if code >= 95:
        return "cloud-lightning"
    return "cloud"


def weather_emoji(clouds: float, pop: float, rain: float) -> str:
    """Pick a single emoji from cloud cover (%), precipitation probability (0-1) and rain (mm)."""
    pop_percent = pop * 100
    if rain > 2 or pop_percent > 60:
        return "🌧️"
    if rain > 0 or pop_percent > 30:
        return "🌦️"
    if clouds > 80:
        return "☁️"
    if clouds > 50:
        return "🌥️"
    if clouds > 20:
        return "⛅"
    return "☀️"


def wind_direction_label(degrees: float) -> str:
    """8-point compass label, used for commute cards."""
    return WIND_DIRECTIONS_8[round_int(degrees / 45) % 8]


def _is_wet(sample: "HourlySample", pop_threshold: float) -> bool:
    return sample.precipitation > 0.1 or sample.precipitation_probability > pop_threshold


def _is_dry(sample: "HourlySample") -> bool:
    return sample.precipitation < 0.1 and sample.precipitation_probability < 0.3


def rain_outlook(hours: Sequence["HourlySample"], now: dt.datetime) -> str:
    """
    Summarize when rain starts or stops over the upcoming hours.

    `hours` must start at the current hour. The first three hours decide the
    short-term message; the full list is scanned for the first wet hour
    (rain > 0.1 mm or pop > 60%) and the first dry hour after it.
    """
    if not hours:
        return ""

    next_three = list(hours[:3])
    raining_soon = next((h for h in next_three if _is_wet(h, 0.5)), None)
    no_rain_soon = all(_is_dry(h) for h in next_three)

    rain_start: dt.datetime | None = None
    rain_end: dt.datetime | None = None
    for h in hours:
        if rain_start is None and _is_wet(h, 0.6):
            rain_start = h.time
        if rain_start is not None and rain_end is None and _is_dry(h):
            rain_end = h.time

    if hours[0].precipitation > 0.1:
        if rain_end is not None:
            minutes_until_dry = round_int((rain_end - now).total_seconds() / 60)
            if minutes_until_dry < 60:
                return f"Expected to be dry in about {minutes_until_dry} minutes."
            return f"Expected to be dry from about {rain_end:%H:%M}."
        return "Rain is expected to continue."

    if no_rain_soon:
        if rain_start is not None:
            minutes_until_rain = round_int((rain_start - now).total_seconds() / 60)
            if minutes_until_rain > 180:
                return f"Dry. Rain possible from about {rain_start:%H:%M}."
        return "Currently dry, no rain expected in the next 3 hours."

    if raining_soon is not None:
        minutes_until_rain = round_int((raining_soon.time - now).total_seconds() / 60)
        if minutes_until_rain <= 30:
            return "Rain likely within the next 30 minutes."
        if minutes_until_rain <= 60:
            return "Rain likely within the next hour."
        return f"Rain possible from about {raining_soon.time:%H:%M}."

    return "Changeable weather over the next few hours."
