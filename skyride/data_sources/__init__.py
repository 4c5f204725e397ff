"""Data source factories for plugging different forecast backends."""

from .base import CallableForecastDataSource, ForecastDataSource
from .factory import build_data_source
from .open_meteo_client import fetch_commute_hours, fetch_paragliding_hours

__all__ = [
    "build_data_source",
    "ForecastDataSource",
    "CallableForecastDataSource",
    "fetch_commute_hours",
    "fetch_paragliding_hours",
]
