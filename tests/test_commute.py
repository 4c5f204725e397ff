import datetime as dt
import unittest
from zoneinfo import ZoneInfo

from skyride.commute import build_commute_report
from skyride.config import DEFAULT_SHIFTS
from skyride.domain import CommuteLeg, CommutePeriod, RideLevel
from skyride.samples import HourlySample, HourlySeries

TZ = ZoneInfo("Europe/Berlin")
DAY = dt.date(2024, 11, 12)


def _series(hours=48, rainy_hour=None):
    start = dt.datetime(DAY.year, DAY.month, DAY.day, tzinfo=TZ)
    samples = []
    for h in range(hours):
        when = start + dt.timedelta(hours=h)
        wet = when.hour == rainy_hour
        samples.append(
            HourlySample(
                time=when,
                temperature=3.0,
                apparent_temperature=0.5,
                precipitation_probability=0.9 if wet else 0.05,
                precipitation=3.0 if wet else 0.0,
                wind_speed=12.0,
                wind_direction=225.0,
                cloud_cover=85.0,
                weather_code=63 if wet else 3,
                wind_gust=20.0,
            )
        )
    return HourlySeries(latitude=51.9, longitude=8.4, timezone="Europe/Berlin", samples=tuple(samples))


def _shift(name):
    return next(s for s in DEFAULT_SHIFTS if s.name == name)


class TestCommuteReport(unittest.TestCase):
    def test_dry_early_shift(self):
        series = _series()
        report = build_commute_report(series, series, _shift("early"), CommutePeriod.TODAY, DAY)

        self.assertEqual([leg.leg for leg in report.legs], [CommuteLeg.OUTBOUND, CommuteLeg.RETURN])
        self.assertEqual([leg.time for leg in report.legs], ["05:00", "15:00"])
        self.assertEqual(report.worst_level, RideLevel.GOOD)

        leg = report.legs[0]
        self.assertEqual(leg.weather.description, "Overcast")
        self.assertEqual(leg.weather.icon, "cloud-moon")
        self.assertEqual(report.legs[1].weather.icon, "cloud-sun")
        self.assertEqual(leg.weather_emoji, "☁️")
        self.assertEqual(leg.wind_label, "SW")
        self.assertEqual(leg.clothing_advice, "🧤 Warm jacket and gloves recommended")

    def test_worst_level_follows_the_wettest_leg(self):
        series = _series(rainy_hour=15)
        report = build_commute_report(series, series, _shift("early"), CommutePeriod.TODAY, DAY)

        self.assertEqual(report.legs[0].verdict.level, RideLevel.GOOD)
        self.assertEqual(report.legs[1].verdict.level, RideLevel.BAD)
        self.assertEqual(report.legs[1].verdict.advice, "Very high chance of rain")
        self.assertEqual(report.legs[1].weather_emoji, "🌧️")
        self.assertEqual(report.worst_level, RideLevel.BAD)

    def test_night_shift_groups_return_under_outbound_date(self):
        series = _series()
        report = build_commute_report(series, series, _shift("night"), CommutePeriod.TODAY, DAY)
        back = report.legs[1]
        self.assertEqual(back.date, DAY)
        self.assertEqual(back.weather.datetime.date(), DAY + dt.timedelta(days=1))

    def test_missing_forecast_days_leave_no_legs(self):
        series = _series()
        report = build_commute_report(series, series, _shift("middle"), CommutePeriod.TOMORROW,
                                      DAY + dt.timedelta(days=3))
        self.assertEqual(report.legs, [])
        self.assertIsNone(report.worst_level)


if __name__ == "__main__":
    unittest.main()
