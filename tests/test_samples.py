import datetime as dt
import unittest
from zoneinfo import ZoneInfo

from skyride.samples import ForecastDataError, parse_hourly_batch


def _hourly(**overrides):
    hourly = {
        "time": ["2024-05-01T05:00", "2024-05-01T06:00"],
        "temperature_2m": [8.0, 9.5],
        "apparent_temperature": [6.0, 7.5],
        "precipitation_probability": [20, 55],
        "precipitation": [0.0, 0.4],
        "wind_speed_10m": [12.0, 14.0],
        "wind_direction_10m": [250, 260],
        "wind_gusts_10m": [20.0, 25.0],
        "cloud_cover": [40, 90],
        "weather_code": [2, 61],
    }
    hourly.update(overrides)
    return hourly


def _parse(hourly):
    return parse_hourly_batch(hourly, timezone="Europe/Berlin", latitude=51.9, longitude=8.4)


class TestParseHourlyBatch(unittest.TestCase):
    def test_parses_parallel_arrays(self):
        series = _parse(_hourly())
        self.assertEqual(len(series), 2)
        first = series[0]
        self.assertEqual(first.time, dt.datetime(2024, 5, 1, 5, 0, tzinfo=ZoneInfo("Europe/Berlin")))
        self.assertAlmostEqual(first.precipitation_probability, 0.2)
        self.assertEqual(first.wind_gust, 20.0)
        self.assertEqual(first.weather_code, 2)
        self.assertIsNone(first.cape)
        self.assertEqual(series.elevation, 0.0)

    def test_null_precipitation_reads_as_zero(self):
        series = _parse(_hourly(precipitation=[None, 0.4], precipitation_probability=[None, 10]))
        self.assertEqual(series[0].precipitation, 0.0)
        self.assertEqual(series[0].precipitation_probability, 0.0)

    def test_null_temperature_is_rejected(self):
        with self.assertRaises(ForecastDataError) as ctx:
            _parse(_hourly(temperature_2m=[8.0, None]))
        self.assertIn("temperature_2m[1]", str(ctx.exception))

    def test_non_numeric_value_names_the_field(self):
        with self.assertRaises(ForecastDataError) as ctx:
            _parse(_hourly(wind_speed_10m=["n/a", 14.0]))
        self.assertIn("wind_speed_10m[0] is not a number", str(ctx.exception))

    def test_nan_is_rejected(self):
        with self.assertRaises(ForecastDataError) as ctx:
            _parse(_hourly(temperature_2m=[float("nan"), 9.5]))
        self.assertIn("temperature_2m[0]", str(ctx.exception))

    def test_infinite_optional_value_is_rejected(self):
        with self.assertRaises(ForecastDataError) as ctx:
            _parse(_hourly(cape=[150.0, float("inf")]))
        self.assertIn("cape[1]", str(ctx.exception))

    def test_nan_weather_code_is_rejected(self):
        with self.assertRaises(ForecastDataError):
            _parse(_hourly(weather_code=[float("nan"), 61]))

    def test_length_mismatch_names_the_field(self):
        with self.assertRaises(ForecastDataError) as ctx:
            _parse(_hourly(wind_speed_10m=[12.0]))
        self.assertIn("wind_speed_10m has 1 values", str(ctx.exception))

    def test_optional_length_mismatch_is_rejected(self):
        with self.assertRaises(ForecastDataError):
            _parse(_hourly(cape=[100.0]))

    def test_missing_required_field(self):
        hourly = _hourly()
        del hourly["cloud_cover"]
        with self.assertRaises(ForecastDataError) as ctx:
            _parse(hourly)
        self.assertIn("cloud_cover is missing", str(ctx.exception))

    def test_malformed_timestamp(self):
        with self.assertRaises(ForecastDataError) as ctx:
            _parse(_hourly(time=["2024-05-01T05:00", "yesterday"]))
        self.assertIn("time[1]", str(ctx.exception))

    def test_unknown_weather_code(self):
        with self.assertRaises(ForecastDataError) as ctx:
            _parse(_hourly(weather_code=[42, 61]))
        self.assertIn("weather_code[0]", str(ctx.exception))

    def test_unknown_timezone(self):
        with self.assertRaises(ForecastDataError):
            parse_hourly_batch(_hourly(), timezone="Mars/Olympus", latitude=0, longitude=0)

    def test_dewpoint_alias(self):
        series = _parse(_hourly(dewpoint_2m=[3.0, 4.0]))
        self.assertEqual(series[1].dewpoint, 4.0)

    def test_first_index_at_or_after(self):
        series = _parse(_hourly())
        tz = ZoneInfo("Europe/Berlin")
        self.assertEqual(series.first_index_at_or_after(dt.datetime(2024, 5, 1, 4, 0, tzinfo=tz)), 0)
        self.assertEqual(series.first_index_at_or_after(dt.datetime(2024, 5, 1, 6, 0, tzinfo=tz)), 1)
        self.assertEqual(series.first_index_at_or_after(dt.datetime(2024, 5, 1, 7, 0, tzinfo=tz)), 2)


if __name__ == "__main__":
    unittest.main()
