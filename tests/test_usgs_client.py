"""Tests for the USGS earthquake client, with the HTTP layer patched out."""

from unittest.mock import MagicMock, patch

import requests

from sitrep.ingest.usgs_client import Earthquake, fetch_recent_earthquakes, parse_feature


def feature(eid, mag, t, lon=10.0, lat=20.0, depth=5.0):
    return {
        "id": eid,
        "properties": {"mag": mag, "time": t, "place": f"near {eid}", "magType": "ml",
                       "status": "reviewed", "url": f"https://usgs/{eid}"},
        "geometry": {"type": "Point", "coordinates": [lon, lat, depth]},
    }


def feed(*features):
    resp = MagicMock()
    resp.json.return_value = {"type": "FeatureCollection", "features": list(features)}
    return resp


class TestParseFeature:

    def test_full_feature(self):
        q = parse_feature(feature("us1", 4.5, 1700000000000, lon=-120.5, lat=37.2))
        assert q.event_id == "us1"
        assert (q.lon, q.lat, q.depth_km) == (-120.5, 37.2, 5.0)
        assert q.mag == 4.5
        assert q.time_utc == "2023-11-14T22:13:20Z"

    def test_null_magnitude_kept_as_none(self):
        assert parse_feature(feature("us2", None, 1)).mag is None

    def test_missing_geometry(self):
        assert parse_feature({"id": "x", "properties": {}}) is None

    def test_missing_depth_defaults_to_zero(self):
        feat = feature("us3", 2.0, 1)
        feat["geometry"]["coordinates"] = [1.0, 2.0]
        assert parse_feature(feat).depth_km == 0.0

    def test_payload_keys(self):
        q = Earthquake("us4", 0, 1.0, 2.0, 3.0, 4.4, mag_type="mw")
        assert q.as_payload() == {
            "id": "us4", "mag": 4.4, "magType": "mw", "place": "", "time": 0,
            "timeUtc": "1970-01-01T00:00:00Z", "lat": 1.0, "lon": 2.0,
            "depth": 3.0, "url": "",
        }


class TestFetch:

    def test_sorted_newest_first(self):
        resp = feed(feature("old", 3.0, 100), feature("new", 3.0, 300), feature("mid", 3.0, 200))
        with patch("sitrep.ingest.usgs_client.fetch_with_retry", return_value=resp):
            quakes = fetch_recent_earthquakes()
        assert [q.event_id for q in quakes] == ["new", "mid", "old"]

    def test_min_mag_keeps_null_magnitudes(self):
        resp = feed(feature("small", 1.0, 1), feature("null", None, 2), feature("big", 5.0, 3))
        with patch("sitrep.ingest.usgs_client.fetch_with_retry", return_value=resp):
            quakes = fetch_recent_earthquakes(min_mag=2.5)
        assert {q.event_id for q in quakes} == {"null", "big"}

    def test_bad_features_skipped(self):
        resp = feed(feature("ok", 3.0, 1), {"id": "broken"})
        with patch("sitrep.ingest.usgs_client.fetch_with_retry", return_value=resp):
            assert [q.event_id for q in fetch_recent_earthquakes()] == ["ok"]

    def test_network_failure_returns_empty(self):
        with patch("sitrep.ingest.usgs_client.fetch_with_retry",
                   side_effect=requests.ConnectionError("down")):
            assert fetch_recent_earthquakes() == []

    def test_unknown_period_uses_day_feed(self):
        with patch("sitrep.ingest.usgs_client.fetch_with_retry", return_value=feed()) as fetch:
            fetch_recent_earthquakes(period="decade")
        assert fetch.call_args.args[0].endswith("all_day.geojson")
