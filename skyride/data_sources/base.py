"""Interfaces and helpers for forecast data sources."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Protocol

from skyride.samples import HourlySeries


class ForecastDataSource(Protocol):
    """Interface for anything that can provide hourly commute and flight forecasts."""

    def fetch_commute_hours(
        self,
        latitude: float,
        longitude: float,
        *,
        timezone: str | None = None,
        forecast_days: int | None = None,
    ) -> HourlySeries:
        """Return hourly surface weather for commute slots."""
        ...

    def fetch_paragliding_hours(
        self,
        latitude: float,
        longitude: float,
        *,
        timezone: str | None = None,
        forecast_days: int | None = None,
    ) -> HourlySeries:
        """Return hourly weather including the extended atmospheric fields."""
        ...


@dataclass
class CallableForecastDataSource(ForecastDataSource):
    """Wrap two callables so they can be swapped for different backends."""

    commute_hours: Callable[..., HourlySeries]
    paragliding_hours: Callable[..., HourlySeries]

    def fetch_commute_hours(self, *args, **kwargs) -> HourlySeries:
        """Delegate to the configured commute callable."""
        return self.commute_hours(*args, **kwargs)

    def fetch_paragliding_hours(self, *args, **kwargs) -> HourlySeries:
        """Delegate to the configured paragliding callable."""
        return self.paragliding_hours(*args, **kwargs)
