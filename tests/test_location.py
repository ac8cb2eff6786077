"""Tests for the location module."""

import json
import os
import shutil
import tempfile
import unittest
from unittest.mock import MagicMock, patch

import requests

import miqat.location as loc_mod
from miqat.location import (
    DEFAULT_LOCATION,
    clear_manual_location,
    get_location,
    load_manual_location,
    resolve_location,
    save_manual_location,
    to_coordinate,
)
from miqat.prayer_calc import MECCA, GeoCoordinate


class TestGetLocation(unittest.TestCase):
    @patch("miqat.location.requests.get")
    def test_returns_location_on_success(self, mock_get):
        mock_resp = MagicMock()
        mock_resp.json.return_value = {
            "status": "success",
            "city": "Cairo",
            "regionName": "Cairo Governorate",
            "country": "Egypt",
            "lat": 30.0444,
            "lon": 31.2357,
            "timezone": "Africa/Cairo",
        }
        mock_resp.raise_for_status = MagicMock()
        mock_get.return_value = mock_resp

        loc = get_location()
        self.assertEqual(loc["city"], "Cairo")
        self.assertAlmostEqual(loc["lat"], 30.0444)
        self.assertEqual(loc["timezone"], "Africa/Cairo")

    @patch("miqat.location.requests.get")
    def test_falls_back_on_failure(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("Network error")
        with self.assertLogs("miqat.location", level="WARNING"):
            loc = get_location()
        self.assertEqual(loc, DEFAULT_LOCATION)

    @patch("miqat.location.requests.get")
    def test_falls_back_on_api_error_status(self, mock_get):
        mock_resp = MagicMock()
        mock_resp.json.return_value = {"status": "fail", "message": "reserved range"}
        mock_resp.raise_for_status = MagicMock()
        mock_get.return_value = mock_resp

        loc = get_location()
        self.assertEqual(loc["city"], DEFAULT_LOCATION["city"])

    def test_default_is_mecca(self):
        self.assertEqual(to_coordinate(DEFAULT_LOCATION), MECCA)


class TestManualLocation(unittest.TestCase):
    def setUp(self):
        self._tmpdir = tempfile.mkdtemp()
        self._orig_config_dir = loc_mod.CONFIG_DIR
        self._orig_config_file = loc_mod.CONFIG_FILE
        loc_mod.CONFIG_DIR = self._tmpdir
        loc_mod.CONFIG_FILE = os.path.join(self._tmpdir, "location.json")

    def tearDown(self):
        loc_mod.CONFIG_DIR = self._orig_config_dir
        loc_mod.CONFIG_FILE = self._orig_config_file
        shutil.rmtree(self._tmpdir, ignore_errors=True)

    def test_save_and_load_manual_location(self):
        loc = {
            "city": "Istanbul",
            "region": "Istanbul",
            "country": "TR",
            "lat": 41.0082,
            "lon": 28.9784,
            "timezone": "Europe/Istanbul",
        }
        save_manual_location(loc)
        loaded = load_manual_location()
        self.assertIsNotNone(loaded)
        self.assertEqual(loaded["city"], "Istanbul")
        self.assertAlmostEqual(loaded["lat"], 41.0082)

    def test_load_returns_none_when_no_file(self):
        self.assertIsNone(load_manual_location())

    def test_clear_manual_location(self):
        loc = {
            "city": "Test", "region": "Test", "country": "SA",
            "lat": 0.0, "lon": 0.0, "timezone": "UTC",
        }
        save_manual_location(loc)
        self.assertIsNotNone(load_manual_location())
        clear_manual_location()
        self.assertIsNone(load_manual_location())

    def test_load_returns_none_for_invalid_json(self):
        with open(loc_mod.CONFIG_FILE, "w") as f:
            f.write("not valid json")
        self.assertIsNone(load_manual_location())

    def test_load_returns_none_for_missing_keys(self):
        with open(loc_mod.CONFIG_FILE, "w") as f:
            json.dump({"city": "Test"}, f)
        self.assertIsNone(load_manual_location())

    @patch("miqat.location.get_location")
    def test_resolve_prefers_saved_location(self, mock_get_location):
        loc = dict(DEFAULT_LOCATION, city="Medina", lat=24.4672, lon=39.6112)
        save_manual_location(loc)
        self.assertEqual(resolve_location()["city"], "Medina")
        mock_get_location.assert_not_called()

    @patch("miqat.location.get_location")
    def test_resolve_falls_back_to_ip_lookup(self, mock_get_location):
        mock_get_location.return_value = dict(DEFAULT_LOCATION)
        self.assertEqual(resolve_location(), DEFAULT_LOCATION)
        mock_get_location.assert_called_once_with()


class TestToCoordinate(unittest.TestCase):
    def test_converts_lat_lon(self):
        self.assertEqual(to_coordinate({"lat": "30.0444", "lon": 31.2357}), GeoCoordinate(30.0444, 31.2357))

    def test_rejects_invalid_latitude(self):
        with self.assertRaises(ValueError):
            to_coordinate({"lat": 95.0, "lon": 0.0})


if __name__ == "__main__":
    unittest.main()
