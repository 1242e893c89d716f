"""Tests for the CLI helpers in sitrep.main and the snapshot writer."""

import argparse
import json
from unittest.mock import patch

from sitrep import main as cli
from sitrep.logger import write_overlay_snapshot


def args(tmp_path, **overrides):
    values = dict(
        view="global", width=800.0, height=550.0, corpus=None, monitors=None,
        catalog=None, no_flights=True, no_basemap=True, output=tmp_path / "out.json",
        seed=3, watch=False, interval=300.0, verbose=False,
    )
    values.update(overrides)
    return argparse.Namespace(**values)


class TestLoadJsonRows:

    def test_list_and_items_object(self, tmp_path):
        a = tmp_path / "a.json"
        a.write_text(json.dumps([{"title": "x"}]), encoding="utf-8")
        b = tmp_path / "b.json"
        b.write_text(json.dumps({"items": [{"title": "y"}]}), encoding="utf-8")
        assert cli.load_json_rows(a) == [{"title": "x"}]
        assert cli.load_json_rows(b) == [{"title": "y"}]

    def test_missing_or_bad_file(self, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text("nope", encoding="utf-8")
        assert cli.load_json_rows(None) == []
        assert cli.load_json_rows(bad) == []
        assert cli.load_json_rows(tmp_path / "missing.json") == []


class TestRunOnce:

    def test_writes_overlays(self, tmp_path):
        corpus = tmp_path / "corpus.json"
        corpus.write_text(json.dumps([
            {"id": "1", "title": "Tehran protests escalate", "isAlert": True},
        ]), encoding="utf-8")
        ns = args(tmp_path, corpus=corpus)
        with patch.object(cli, "fetch_recent_earthquakes", return_value=[]) as quakes, \
                patch.object(cli, "fetch_flights") as flights, \
                patch.object(cli, "load_base_map") as base_map:
            assert cli.run_once(ns) == 0
        quakes.assert_called_once()
        flights.assert_not_called()
        base_map.assert_not_called()

        payload = json.loads(ns.output.read_text(encoding="utf-8"))
        tehran = next(d for d in payload if d["kind"] == "hotspot" and d["entityId"] == "tehran")
        assert tehran["visualClass"] == "elevated"
        assert tehran["payload"]["score"] == 4

    def test_regional_view(self, tmp_path):
        ns = args(tmp_path, view="ukraine")
        with patch.object(cli, "fetch_recent_earthquakes", return_value=[]):
            cli.run_once(ns)
        payload = json.loads(ns.output.read_text(encoding="utf-8"))
        assert payload[0]["payload"]["view"] == "ukraine"
        assert not any(d["kind"] == "hotspot" for d in payload)


def test_snapshot_written(tmp_path):
    path = write_overlay_snapshot([{"kind": "background"}], log_dir=tmp_path)
    assert path.parent == tmp_path
    assert json.loads(path.read_text(encoding="utf-8")) == [{"kind": "background"}]
