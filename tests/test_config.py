import os
import unittest

from pydantic import ValidationError

from skyride.config import Settings


class TestConfig(unittest.TestCase):
    def test_settings_defaults(self):
        previous = os.environ.pop("SKYRIDE_TIMEZONE", None)
        try:
            s = Settings()
            self.assertEqual(s.timezone, "Europe/Berlin")
            self.assertEqual(s.forecast_days, 7)
            self.assertEqual(s.forecast_source, "open_meteo")
            self.assertEqual([shift.name for shift in s.shifts], ["early", "late", "middle", "night"])
        finally:
            if previous is not None:
                os.environ["SKYRIDE_TIMEZONE"] = previous

    def test_settings_env_override(self):
        previous = os.environ.get("SKYRIDE_OPEN_METEO_FORECAST_URL")
        try:
            os.environ["SKYRIDE_OPEN_METEO_FORECAST_URL"] = "http://example.com/v1/forecast/"
            s = Settings()
            self.assertEqual(s.open_meteo_forecast_url, "http://example.com/v1/forecast")
        finally:
            if previous is None:
                os.environ.pop("SKYRIDE_OPEN_METEO_FORECAST_URL", None)
            else:
                os.environ["SKYRIDE_OPEN_METEO_FORECAST_URL"] = previous

    def test_forecast_days_override(self):
        previous = os.environ.get("SKYRIDE_FORECAST_DAYS")
        try:
            os.environ["SKYRIDE_FORECAST_DAYS"] = "3"
            s = Settings()
            self.assertEqual(s.forecast_days, 3)
        finally:
            if previous is None:
                os.environ.pop("SKYRIDE_FORECAST_DAYS", None)
            else:
                os.environ["SKYRIDE_FORECAST_DAYS"] = previous

    def test_forecast_days_limit(self):
        with self.assertRaises(ValidationError):
            Settings(forecast_days=17)

    def test_shift_by_name(self):
        s = Settings()
        self.assertEqual(s.shift_by_name(" Night ").return_start, "06:00")
        self.assertIsNone(s.shift_by_name("weekend"))


if __name__ == "__main__":
    unittest.main()
