import unittest

from skyride.data_sources.factory import build_data_source, DEFAULT_SOURCE_NAME
from skyride.data_sources.base import CallableForecastDataSource
from skyride.data_sources import open_meteo_client


class DummySettings:
    def __init__(self, **kwargs):
        for k, v in kwargs.items():
            setattr(self, k, v)
        # provide defaults if not passed
        self.forecast_source = getattr(self, "forecast_source", DEFAULT_SOURCE_NAME)


class TestDataSourceFactory(unittest.TestCase):
    def test_build_open_meteo_default(self):
        settings = DummySettings(forecast_source="open_meteo")
        ds = build_data_source(settings)
        self.assertIsInstance(ds, CallableForecastDataSource)
        self.assertIs(ds.commute_hours, open_meteo_client.fetch_commute_hours)
        self.assertIs(ds.paragliding_hours, open_meteo_client.fetch_paragliding_hours)

    def test_source_name_is_case_insensitive(self):
        ds = build_data_source(DummySettings(forecast_source="Open_Meteo"))
        self.assertIsInstance(ds, CallableForecastDataSource)

    def test_empty_source_falls_back_to_default(self):
        ds = build_data_source(DummySettings(forecast_source=""))
        self.assertIsInstance(ds, CallableForecastDataSource)

    def test_unknown_source_raises(self):
        settings = DummySettings(forecast_source="unknown-source")
        with self.assertRaises(ValueError):
            build_data_source(settings)


if __name__ == "__main__":
    unittest.main()
