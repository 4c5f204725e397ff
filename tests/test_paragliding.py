import datetime as dt
import unittest
from zoneinfo import ZoneInfo

from skyride.domain import (
    FlightSuitability,
    LocationRef,
    PilotLevel,
    RiskCode,
    WarningSeverity,
    WarningType,
    WingClass,
)
from skyride.paragliding import generate_paragliding_analysis
from skyride.samples import ForecastDataError, HourlySample, HourlySeries

LOCATION = LocationRef(latitude=51.8833, longitude=8.9167, name="Ascheloh")


def _series(**overrides) -> HourlySeries:
    fields = dict(
        time=dt.datetime(2024, 7, 1, 13, 0, tzinfo=ZoneInfo("Europe/Berlin")),
        temperature=24.0,
        apparent_temperature=24.0,
        precipitation_probability=0.0,
        precipitation=0.0,
        wind_speed=10.0,
        wind_direction=270.0,
        cloud_cover=30.0,
        weather_code=1,
        wind_gust=15.0,
        dewpoint=8.0,
        cape=1000.0,
        boundary_layer_height=2500.0,
    )
    fields.update(overrides)
    return HourlySeries(latitude=LOCATION.latitude, longitude=LOCATION.longitude,
                        timezone="Europe/Berlin", samples=(HourlySample(**fields),), elevation=280.0)


class TestParaglidingAnalysis(unittest.TestCase):
    def test_good_thermal_day(self):
        analysis = generate_paragliding_analysis(_series(), 0, LOCATION, 270)

        self.assertEqual(analysis.location, LOCATION)
        self.assertEqual(analysis.launch_orientation, 270)
        self.assertEqual(analysis.score, 100)
        self.assertEqual(analysis.suitability, FlightSuitability.OPTIMAL)
        self.assertEqual(analysis.risks, [])
        self.assertEqual(analysis.warnings, [])
        self.assertEqual(analysis.atmosphere.lcl.height, 2000)
        self.assertEqual(analysis.xc.distance.potential, 31)

        rec = analysis.recommendation
        self.assertEqual(rec.summary, "Optimal conditions! Excellent for XC flights.")
        self.assertEqual((rec.pilot_level, rec.wing_class), (PilotLevel.NOVICE, WingClass.A))
        self.assertEqual(rec.details, ["Thermals: 1.5 m/s", "XC potential: 31 km"])

    def test_strong_wind_from_behind_the_launch(self):
        series = _series(wind_speed=35.0, wind_direction=90.0, wind_gust=None,
                         temperature=15.0, apparent_temperature=15.0, dewpoint=10.0, cape=0.0)
        analysis = generate_paragliding_analysis(series, 0, LOCATION, 270)

        self.assertEqual([r.code for r in analysis.risks], [RiskCode.LEE_TURBULENCE])
        self.assertEqual(analysis.score, 50)
        self.assertEqual(analysis.suitability, FlightSuitability.MARGINAL)
        self.assertEqual(analysis.recommendation.summary, "Marginal conditions. Caution advised.")
        self.assertEqual(analysis.recommendation.pilot_level, PilotLevel.EXPERT)
        self.assertTrue(analysis.soaring.ridge.lee_side)

        first = analysis.warnings[0]
        self.assertEqual((first.type, first.severity), (WarningType.TERRAIN, WarningSeverity.DANGER))
        self.assertEqual(analysis.warnings[-1].severity, WarningSeverity.CAUTION)

    def test_index_outside_forecast(self):
        with self.assertRaises(ForecastDataError):
            generate_paragliding_analysis(_series(), 1, LOCATION)
        with self.assertRaises(ForecastDataError):
            generate_paragliding_analysis(_series(), -1, LOCATION)

    def test_analysis_serializes_wind_layers(self):
        payload = generate_paragliding_analysis(_series(), 0, LOCATION).model_dump(mode="json")
        profile = payload["atmosphere"]["wind_profile"]
        self.assertEqual(profile["surface"]["source"], "measured")
        self.assertEqual(profile["boundary"]["source"], "estimated")
        self.assertIn("basis", profile["high"])


if __name__ == "__main__":
    unittest.main()
