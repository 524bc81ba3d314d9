"""Tests for zone normalization, resolution and local-time conversion."""
from datetime import datetime
from unittest.mock import MagicMock

import pytest

from transactions_api.errors import ZoneResolutionError
from transactions_api.services.timezones import (
    GeoTimezoneLookup,
    convert_local_time,
    normalize_zone_id,
    resolve_zone,
)


@pytest.mark.parametrize("zone_id", ["America/New_York", "Europe/Kiev", "UTC", "Asia/Kolkata", "GMT"])
def test_normalize_leaves_regular_zones_unchanged(zone_id):
    assert normalize_zone_id(zone_id) == zone_id


def test_normalize_swaps_etc_gmt_signs():
    assert normalize_zone_id("Etc/GMT+5") == "Etc/GMT-5"
    assert normalize_zone_id("Etc/GMT-5") == "Etc/GMT+5"
    assert normalize_zone_id("Etc/GMT-14") == "Etc/GMT+14"


def test_normalize_etc_gmt_without_offset():
    assert normalize_zone_id("Etc/GMT") == "Etc/GMT"
    assert normalize_zone_id("Etc/GMT0") == "Etc/GMT0"


def test_normalize_twice_restores_input():
    """A single inversion per call: applying it again undoes it."""
    once = normalize_zone_id("Etc/GMT+3")
    assert once != "Etc/GMT+3"
    assert normalize_zone_id(once) == "Etc/GMT+3"


def test_normalized_etc_gmt_zone_offset():
    """Etc/GMT+5 normalizes to Etc/GMT-5, which zoneinfo reads as UTC+5."""
    zone = resolve_zone(normalize_zone_id("Etc/GMT+5"))
    assert zone.utcoffset(datetime(2024, 1, 1)).total_seconds() == 5 * 3600


def test_resolve_zone_known():
    assert resolve_zone("Europe/Kiev").key == "Europe/Kiev"


@pytest.mark.parametrize(
    "zone_id", [None, "", "   ", "Mars/Olympus_Mons", "/etc/passwd", "Etc/GMT+99", "America", "Etc"]
)
def test_resolve_zone_rejects_unknown(zone_id):
    with pytest.raises(ZoneResolutionError):
        resolve_zone(zone_id)


def test_convert_new_york_to_kiev_in_january():
    converted = convert_local_time(datetime(2024, 1, 1, 2, 0, 0), "America/New_York", "Europe/Kiev")
    assert converted == datetime(2024, 1, 1, 9, 0, 0)
    assert converted.tzinfo is None


def test_convert_uses_daylight_saving_rules():
    # July: New York is UTC-4.
    converted = convert_local_time(datetime(2024, 7, 1, 12, 0, 0), "America/New_York", "UTC")
    assert converted == datetime(2024, 7, 1, 16, 0, 0)


def test_convert_across_date_line():
    converted = convert_local_time(datetime(2024, 1, 1, 1, 0, 0), "Asia/Tokyo", "America/Los_Angeles")
    assert converted == datetime(2023, 12, 31, 8, 0, 0)


@pytest.mark.parametrize("zone_id", ["America/New_York", "Europe/Kiev", "Asia/Kolkata", "Etc/GMT-3"])
def test_convert_same_zone_is_identity(zone_id):
    timestamp = datetime(2024, 3, 15, 13, 45, 30)
    assert convert_local_time(timestamp, zone_id, zone_id) == timestamp


def test_convert_rejects_unknown_zones():
    with pytest.raises(ZoneResolutionError):
        convert_local_time(datetime(2024, 1, 1), "Nowhere/City", "UTC")
    with pytest.raises(ZoneResolutionError):
        convert_local_time(datetime(2024, 1, 1), "UTC", "Nowhere/City")


def test_geo_lookup_resolves_new_york():
    lookup = GeoTimezoneLookup()
    assert lookup.resolve(40.7128, -74.0060) == "America/New_York"


def test_geo_lookup_without_match_raises():
    lookup = GeoTimezoneLookup()
    finder = MagicMock()
    finder.timezone_at.return_value = None
    # Replace the lazily created finder.
    lookup.__dict__["_finder"] = finder

    with pytest.raises(ZoneResolutionError, match="No time zone found"):
        lookup.resolve(10.0, 20.0)
    finder.timezone_at.assert_called_once_with(lat=10.0, lng=20.0)
