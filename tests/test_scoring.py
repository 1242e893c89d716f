"""
Tests for the keyword activity scorer (sitrep.fusion.scoring) and the
corpus builder (sitrep.fusion.corpus).

Run:
    pytest tests/test_scoring.py -v
"""

import pytest

from sitrep.fusion.corpus import TextItem, corpus_from_records
from sitrep.fusion.scoring import (
    matched_keywords,
    monitor_source,
    score,
    score_density,
    score_monitors,
)
from sitrep.geo.entities import (
    Chokepoint,
    CityMarker,
    CustomMonitor,
    Hotspot,
    MilitaryBase,
    NewsRegion,
    RegionalHotspot,
)


def tehran(keywords=("tehran",)):
    return Hotspot("tehran", "Tehran", 35.7, 51.4, keywords=keywords)


# ── matched_keywords ─────────────────────────────────────────────────────────

class TestMatchedKeywords:

    def test_case_insensitive_substring(self):
        assert matched_keywords(("tehran", "iran"), "TEHRAN talks with IRAN") == ["tehran", "iran"]

    def test_substring_inside_word(self):
        assert matched_keywords(("iran",), "Iranian navy drills") == ["iran"]

    def test_missing_title(self):
        assert matched_keywords(("iran",), None) == []


# ── Hotspot scoring ──────────────────────────────────────────────────────────

class TestHotspotScoring:

    def test_tehran_alert_scenario(self):
        """One alert headline, one keyword: 1 + 3 bonus = 4 -> elevated."""
        corpus = [TextItem("1", "Tehran protests escalate", is_alert=True)]
        result = score([tehran()], corpus)["tehran"]
        assert result.score == 4
        assert result.tier == "elevated"
        assert result.match_count == 1

    def test_nine_plain_matches_is_high(self, items):
        corpus = items([f"Tehran update {i}" for i in range(9)])
        result = score([tehran()], corpus)["tehran"]
        assert result.score == 9
        assert result.tier == "high"

    @pytest.mark.parametrize("n,tier", [
        (2, "low"),
        (3, "elevated"),
        (7, "elevated"),
        (8, "high"),
    ])
    def test_tier_boundaries(self, items, n, tier):
        corpus = items([f"Tehran item {i}" for i in range(n)])
        assert score([tehran()], corpus)["tehran"].tier == tier

    def test_each_matched_keyword_counts(self):
        corpus = [TextItem("1", "Tehran says Iran will respond")]
        result = score([tehran(("tehran", "iran"))], corpus)["tehran"]
        assert result.score == 2

    def test_matched_items_capped_in_corpus_order(self, items):
        corpus = items([f"Tehran {i}" for i in range(7)])
        result = score([tehran()], corpus)["tehran"]
        assert [m.id for m in result.matched_items] == ["n0", "n1", "n2", "n3", "n4"]
        assert result.match_count == 7

    def test_no_matches_is_low_zero(self, items):
        result = score([tehran()], items(["Markets rally"]))["tehran"]
        assert result.score == 0
        assert result.tier == "low"
        assert result.matched_items == ()

    def test_deterministic(self, items):
        corpus = items(["Tehran a", "Iran b", "Tehran c"], alert=True)
        spots = [tehran(("tehran", "iran"))]
        assert score(spots, corpus) == score(spots, corpus)

    def test_payload_headlines(self):
        corpus = [TextItem("1", "Tehran", source="Reuters", link="http://x", is_alert=True)]
        payload = score([tehran()], corpus)["tehran"].as_payload()
        assert payload["headlines"] == [
            {"title": "Tehran", "link": "http://x", "source": "Reuters", "isAlert": True},
        ]


# ── Other kinds ──────────────────────────────────────────────────────────────

class TestKindPolicies:

    def test_chokepoint_has_no_alert_bonus(self):
        cp = Chokepoint("hormuz", "Hormuz", 26.5, 56.5, keywords=("hormuz",))
        corpus = [TextItem("1", "Tanker seized near Hormuz", is_alert=True)]
        result = score([cp], corpus)["hormuz"]
        assert result.score == 1
        assert result.tier == "alert"

    def test_chokepoint_clear_without_matches(self, items):
        cp = Chokepoint("suez", "Suez", 30.0, 32.5, keywords=("suez",))
        assert score([cp], items(["Nothing here"]))["suez"].tier == "clear"

    @pytest.mark.parametrize("n,tier", [(4, "normal"), (5, "high-activity")])
    def test_city_activity_threshold(self, items, n, tier):
        city = CityMarker("kyiv", "Kyiv", 50.45, 30.52, keywords=("kyiv",), theater="ukraine")
        assert score([city], items([f"Kyiv {i}" for i in range(n)]))["kyiv"].tier == tier

    def test_city_cap_is_eight(self, items):
        city = CityMarker("kyiv", "Kyiv", 50.45, 30.52, keywords=("kyiv",))
        result = score([city], items([f"Kyiv {i}" for i in range(12)]))["kyiv"]
        assert len(result.matched_items) == 8
        assert result.match_count == 12

    def test_regional_hotspot_tier_is_static_level(self, items):
        spot = RegionalHotspot("ua-kursk", "Kursk", 51.7, 36.2, keywords=("kursk",), level="high")
        assert score([spot], items([]))["ua-kursk"].tier == "high"
        assert score([spot], items(["Kursk"] * 10))["ua-kursk"].tier == "high"

    def test_static_kinds_are_not_scored(self, items):
        base = MilitaryBase("guam", "Guam", 13.5, 144.8, keywords=("guam",))
        assert score([base], items(["Guam"])) == {}


# ── Density ──────────────────────────────────────────────────────────────────

class TestDensity:

    def region(self):
        return NewsRegion("middle-east", "Middle East", 30.0, 45.0, keywords=("iran", "israel"))

    def test_keyword_hits_and_alert_bonus(self):
        corpus = [
            TextItem("1", "Iran and Israel trade threats"),
            TextItem("2", "Unrelated alert", is_alert=True),
        ]
        result = score_density([self.region()], corpus)["middle-east"]
        assert result.score == 4      # 2 keyword hits + 2 for the alert
        assert result.tier == "low"

    @pytest.mark.parametrize("n,tier", [(4, "low"), (5, "medium"), (9, "medium"), (10, "high")])
    def test_tiers(self, items, n, tier):
        result = score_density([self.region()], items([f"Iran {i}" for i in range(n)]))
        assert result["middle-east"].tier == tier

    def test_empty_corpus_scores_zero(self):
        assert score_density([self.region()], [])["middle-east"].score == 0


# ── Custom monitors ──────────────────────────────────────────────────────────

class TestMonitors:

    def test_monitor_source_scores_independently(self, items):
        mon = CustomMonitor("m1", "Lithium", -23.0, -67.0, keywords=("lithium",))
        pairs = monitor_source([mon])(items(["Lithium prices", "Oil"]))
        assert len(pairs) == 1
        monitor, result = pairs[0]
        assert monitor.id == "m1"
        assert result.match_count == 1
        assert result.tier == "active"

    def test_monitor_without_keywords_skipped(self, items):
        mon = CustomMonitor("m2", "Empty", 0.0, 0.0)
        assert score_monitors([mon], items(["Anything"])) == []


# ── corpus_from_records ──────────────────────────────────────────────────────

class TestCorpusFromRecords:

    def test_accepts_both_alert_spellings(self):
        corpus = corpus_from_records([
            {"id": "a", "title": "One", "isAlert": True},
            {"id": "b", "title": "Two", "is_alert": True},
            {"id": "c", "title": "Three"},
        ])
        assert [i.is_alert for i in corpus] == [True, True, False]

    def test_skips_non_mappings_and_fills_title(self):
        corpus = corpus_from_records([None, "junk", {"link": "http://x"}])
        assert len(corpus) == 1
        assert corpus[0].title == ""
        assert corpus[0].id == "http://x"

    def test_none_title_becomes_empty(self):
        assert TextItem("x", None).title == ""
