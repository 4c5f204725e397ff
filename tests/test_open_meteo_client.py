import unittest

import requests

from skyride.config import settings
from skyride.data_sources import open_meteo_client
from skyride.samples import ForecastDataError


class DummyResp:
    def __init__(self, payload, status_error=None):
        self._payload = payload
        self._status_error = status_error

    def raise_for_status(self):
        if self._status_error:
            raise self._status_error

    def json(self):
        return self._payload


class RecordingSession:
    def __init__(self, resp):
        self.resp = resp
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        return self.resp


def _make_commute_payload():
    return {
        "latitude": 51.88,
        "longitude": 8.92,
        "timezone": "Europe/Berlin",
        "elevation": 280.0,
        "hourly": {
            "time": ["2024-01-01T12:00", "2024-01-01T13:00"],
            "temperature_2m": [10.0, 11.0],
            "apparent_temperature": [8.0, 9.0],
            "precipitation_probability": [20, 40],
            "precipitation": [0.0, None],
            "weather_code": [3, 61],
            "cloud_cover": [80, 95],
            "wind_speed_10m": [12.0, 14.0],
            "wind_direction_10m": [240, 250],
            "wind_gusts_10m": [22.0, 28.0],
        },
        "hourly_units": {
            "temperature_2m": "°C",
            "precipitation_probability": "%",
            "wind_speed_10m": "km/h",
        },
    }


def _make_paragliding_payload():
    payload = _make_commute_payload()
    payload["hourly"].update(
        {
            "relative_humidity_2m": [70, 65],
            "dew_point_2m": [5.0, 5.5],
            "cape": [120.0, 300.0],
            "lifted_index": [1.0, -0.5],
            "boundary_layer_height": [900.0, 1100.0],
            "wind_speed_80m": [None, 18.0],
            "wind_direction_80m": [None, 255],
        }
    )
    payload["hourly_units"]["wind_speed_10m"] = "mp/h"
    return payload


class TestOpenMeteoClient(unittest.TestCase):
    def setUp(self):
        self._orig_session = open_meteo_client.session

    def tearDown(self):
        open_meteo_client.session = self._orig_session

    def test_fetch_commute_hours(self):
        session = RecordingSession(DummyResp(_make_commute_payload()))
        open_meteo_client.session = session

        series = open_meteo_client.fetch_commute_hours(51.88, 8.92, timezone="Europe/Berlin")
        self.assertEqual(len(series), 2)
        self.assertEqual(series.elevation, 280.0)
        self.assertEqual(series[1].temperature, 11.0)
        self.assertEqual(series[1].precipitation, 0.0)
        self.assertAlmostEqual(series[1].precipitation_probability, 0.4)

        call = session.calls[0]
        self.assertEqual(call["url"], settings.open_meteo_commute_url)
        self.assertEqual(call["params"]["models"], settings.commute_model)
        self.assertIn("wind_gusts_10m", call["params"]["hourly"])
        self.assertEqual(call["timeout"], settings.request_timeout_seconds)

    def test_fetch_paragliding_hours(self):
        session = RecordingSession(DummyResp(_make_paragliding_payload()))
        open_meteo_client.session = session

        series = open_meteo_client.fetch_paragliding_hours(51.88, 8.92, forecast_days=2)
        self.assertEqual(series[0].cape, 120.0)
        self.assertIsNone(series[0].wind_speed_80m)
        self.assertEqual(series[1].wind_direction_80m, 255.0)
        self.assertEqual(session.calls[0]["url"], settings.open_meteo_forecast_url)
        self.assertEqual(session.calls[0]["params"]["forecast_days"], 2)
        self.assertNotIn("models", session.calls[0]["params"])

    def test_missing_hourly_block(self):
        open_meteo_client.session = RecordingSession(DummyResp({"latitude": 0, "longitude": 0}))
        with self.assertRaises(ForecastDataError):
            open_meteo_client.fetch_commute_hours(0, 0)

    def test_http_errors_propagate(self):
        error = requests.HTTPError("503 Service Unavailable")
        open_meteo_client.session = RecordingSession(DummyResp({}, status_error=error))
        with self.assertRaises(requests.HTTPError):
            open_meteo_client.fetch_paragliding_hours(0, 0)


if __name__ == "__main__":
    unittest.main()
