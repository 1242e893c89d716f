"""Tests for sitrep.fusion.aircraft."""

import math

import pytest

from sitrep.fusion.aircraft import aircraft_arrow, classify_aircraft, is_us_military_hex


class TestMilitaryHex:

    @pytest.mark.parametrize("icao24,expected", [
        ("ae0000", True),
        ("AE7FFF", True),
        ("ae8000", False),
        ("a12345", False),
        ("zzzzzz", False),
        ("", False),
        (None, False),
    ])
    def test_block(self, icao24, expected):
        assert is_us_military_hex(icao24) is expected


class TestClassify:

    @pytest.mark.parametrize("callsign,country,icao24,expected", [
        ("SHELL71", "United States", "ae1234", "tanker"),
        ("IRON21", None, None, "tanker"),
        ("KC135X", "United States", "ae01ce", "tanker"),
        ("KC135X", "Germany", "3c1234", "civil"),
        ("SAM44", "United States", "ae0001", "government"),
        ("RCH871", "United States", "a00001", "military"),
        ("DUKE01", "United States", "ae4567", "military"),
        ("DUKE01", "Germany", "ae4567", "civil"),
        ("UAL123", "United States", "a8b2c3", "civil"),
        (None, None, None, "civil"),
    ])
    def test_classes(self, callsign, country, icao24, expected):
        assert classify_aircraft(callsign, country, icao24) == expected

    def test_callsign_is_trimmed_and_uppercased(self):
        assert classify_aircraft("  reach12 ") == "military"


class TestArrow:

    @pytest.mark.parametrize("heading,arrow", [
        (0, "↑"),
        (44, "↗"),
        (90, "→"),
        (180, "↓"),
        (270, "←"),
        (350, "↑"),
        (-90, "←"),
    ])
    def test_octants(self, heading, arrow):
        assert aircraft_arrow(heading) == arrow

    @pytest.mark.parametrize("heading", [None, "north", math.nan, math.inf])
    def test_missing_heading(self, heading):
        assert aircraft_arrow(heading) == "✈"
