import datetime as dt
import unittest
from zoneinfo import ZoneInfo

from skyride.atmosphere import build_atmospheric_profile
from skyride.domain import (
    FlightSuitability,
    PilotLevel,
    RiskCode,
    RiskLevel,
    ShearLevel,
    ThermalData,
    WarningSeverity,
    WarningType,
    WindShearData,
    WingClass,
)
from skyride.risk import (
    collect_risks,
    detect_gust_risk,
    detect_lee_risk,
    detect_thermal_turbulence,
    detect_wind_shear_risk,
    evaluate_safety_level,
    generate_flight_warnings,
    recommend_pilot,
    suitability_for_score,
)
from skyride.samples import HourlySample


def _atmosphere(wind_speed=10.0, wind_direction=270.0, dewpoint=8.0, cape=1000.0):
    sample = HourlySample(
        time=dt.datetime(2024, 7, 1, 13, 0, tzinfo=ZoneInfo("Europe/Berlin")),
        temperature=24.0,
        apparent_temperature=24.0,
        precipitation_probability=0.0,
        precipitation=0.0,
        wind_speed=wind_speed,
        wind_direction=wind_direction,
        cloud_cover=30.0,
        weather_code=1,
        dewpoint=dewpoint,
        cape=cape,
        boundary_layer_height=2500.0,
    )
    return build_atmospheric_profile(sample)


def _with_thermal_index(atmosphere, index):
    return atmosphere.model_copy(update={"thermal": atmosphere.thermal.model_copy(update={"index": index})})


def _thermal(consistency):
    return ThermalData(strength=2.0, tops=1500, spacing=2250, consistency=consistency, index=9)


def _shear(level, turbulence):
    return WindShearData(shear_0_1km=12.0, shear_1_3km=3.0, shear_3_6km=0.0,
                         level=level, turbulence_potential=turbulence)


class TestDetectors(unittest.TestCase):
    def test_gusts_in_calm_air(self):
        risk = detect_gust_risk(0, 45)
        self.assertEqual(risk.code, RiskCode.GUSTS)
        self.assertEqual(risk.level, RiskLevel.HIGH)
        self.assertEqual(risk.score, 90)
        self.assertIn("factor 45.0", risk.description)

    def test_gust_levels(self):
        self.assertIsNone(detect_gust_risk(20, 30))
        self.assertIsNone(detect_gust_risk(20, None))
        moderate = detect_gust_risk(10, 20)
        self.assertEqual(moderate.level, RiskLevel.MODERATE)
        self.assertEqual(moderate.score, 40)
        extreme = detect_gust_risk(10, 55)
        self.assertEqual(extreme.level, RiskLevel.EXTREME)
        self.assertEqual(extreme.score, 100)

    def test_lee_risk(self):
        high = detect_lee_risk(25, 90, 270)
        self.assertEqual(high.level, RiskLevel.HIGH)
        self.assertEqual(high.score, 63)
        self.assertIn("Wind from E", high.description)

        extreme = detect_lee_risk(35, 90, 270)
        self.assertEqual(extreme.level, RiskLevel.EXTREME)
        self.assertEqual(extreme.score, 88)

        self.assertIsNone(detect_lee_risk(15, 90, 270))
        self.assertIsNone(detect_lee_risk(25, 270, 270))

    def test_thermal_turbulence(self):
        high = detect_thermal_turbulence(_thermal(0.3), 3500)
        self.assertEqual(high.level, RiskLevel.HIGH)
        self.assertEqual(high.score, 93)
        moderate = detect_thermal_turbulence(_thermal(0.3), 2500)
        self.assertEqual(moderate.level, RiskLevel.MODERATE)
        self.assertEqual(moderate.score, 67)
        self.assertIsNone(detect_thermal_turbulence(_thermal(0.5), 3500))

    def test_wind_shear(self):
        severe = detect_wind_shear_risk(_shear(ShearLevel.SEVERE, 10))
        self.assertEqual(severe.level, RiskLevel.HIGH)
        self.assertEqual(severe.score, 100)
        self.assertEqual(detect_wind_shear_risk(_shear(ShearLevel.HIGH, 8)).level, RiskLevel.MODERATE)
        self.assertIsNone(detect_wind_shear_risk(_shear(ShearLevel.MODERATE, 5)))

    def test_collect_risks_combines_detectors(self):
        risks = collect_risks(_atmosphere(wind_speed=25, wind_direction=90), 270, gust_speed=45)
        self.assertEqual([r.code for r in risks], [RiskCode.LEE_TURBULENCE, RiskCode.GUSTS])


class TestSafety(unittest.TestCase):
    def test_no_risks_is_optimal(self):
        self.assertEqual(evaluate_safety_level([], _atmosphere()), (FlightSuitability.OPTIMAL, 100))

    def test_strong_thermals_earn_bonus(self):
        atmosphere = _with_thermal_index(_atmosphere(), 8)
        risks = [detect_gust_risk(0, 45)]
        self.assertEqual(evaluate_safety_level(risks, atmosphere), (FlightSuitability.OPTIMAL, 80))

    def test_score_is_clamped(self):
        risks = [detect_lee_risk(35, 90, 270), detect_gust_risk(10, 55), detect_gust_risk(0, 45)]
        self.assertEqual(evaluate_safety_level(risks, _atmosphere()), (FlightSuitability.DANGEROUS, 0))

    def test_suitability_boundaries(self):
        expected = {
            80: FlightSuitability.OPTIMAL,
            79: FlightSuitability.GOOD,
            60: FlightSuitability.GOOD,
            59: FlightSuitability.MARGINAL,
            40: FlightSuitability.MARGINAL,
            39: FlightSuitability.POOR,
            20: FlightSuitability.POOR,
            19: FlightSuitability.DANGEROUS,
        }
        for score, suitability in expected.items():
            self.assertEqual(suitability_for_score(score), suitability, score)

    def test_recommend_pilot(self):
        extreme = [detect_lee_risk(35, 90, 270)]
        self.assertEqual(recommend_pilot(39, [], ShearLevel.LOW), (PilotLevel.EXPERT, WingClass.D))
        self.assertEqual(recommend_pilot(90, extreme, ShearLevel.LOW), (PilotLevel.EXPERT, WingClass.D))
        self.assertEqual(recommend_pilot(59, [], ShearLevel.LOW), (PilotLevel.ADVANCED, WingClass.C))
        self.assertEqual(recommend_pilot(90, [], ShearLevel.HIGH), (PilotLevel.ADVANCED, WingClass.C))
        self.assertEqual(recommend_pilot(74, [], ShearLevel.LOW), (PilotLevel.INTERMEDIATE, WingClass.B))
        self.assertEqual(recommend_pilot(75, [], ShearLevel.LOW), (PilotLevel.NOVICE, WingClass.A))


class TestWarnings(unittest.TestCase):
    def test_lee_and_gust_warnings(self):
        risks = [detect_lee_risk(25, 90, 270), detect_gust_risk(10, 55), detect_gust_risk(10, 20)]
        warnings = generate_flight_warnings(_atmosphere(), risks)
        self.assertEqual(len(warnings), 2)
        self.assertEqual(warnings[0].type, WarningType.TERRAIN)
        self.assertEqual(warnings[0].severity, WarningSeverity.WARNING)
        self.assertEqual(warnings[1].type, WarningType.WIND)
        self.assertEqual(warnings[1].severity, WarningSeverity.DANGER)

    def test_low_cloud_base_warning(self):
        warnings = generate_flight_warnings(_atmosphere(dewpoint=19.0), [])
        self.assertEqual(len(warnings), 1)
        self.assertEqual(warnings[0].severity, WarningSeverity.CAUTION)
        self.assertIn("625 m", warnings[0].message)

    def test_thunderstorm_warning(self):
        warnings = generate_flight_warnings(_atmosphere(cape=3000.0), [])
        self.assertEqual([w.message for w in warnings], ["Thunderstorm risk from very high CAPE!"])


if __name__ == "__main__":
    unittest.main()
