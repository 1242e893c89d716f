"""Tests for popup dispatch (sitrep.view.popups)."""

import pytest

from sitrep.fusion.composer import OverlayDescriptor
from sitrep.view.popups import POPUP_CATEGORIES, ClickTarget, PopupDispatcher


@pytest.fixture()
def popups():
    return PopupDispatcher()


class TestOpenClose:

    def test_one_popup_per_category(self, popups):
        popups.open("hotspot", "tehran")
        popups.open("hotspot", "moscow")
        assert popups.get("hotspot").entity_id == "moscow"
        assert len(popups.open_popups()) == 1

    def test_categories_independent(self, popups):
        popups.open("hotspot", "tehran")
        popups.open("quake", "us1")
        assert [p.category for p in popups.open_popups()] == ["hotspot", "quake"]

    def test_close_and_close_all(self, popups):
        popups.open("city", "kyiv")
        popups.open("aircraft", "ae1234")
        popups.close("city")
        assert popups.get("city") is None
        popups.close("city")
        popups.close_all()
        assert popups.open_popups() == []

    @pytest.mark.parametrize("call", [
        lambda p: p.open("weather", "x"),
        lambda p: p.close("weather"),
        lambda p: p.get("weather"),
        lambda p: p.handle_outside_click({"weather"}),
    ])
    def test_unknown_category_raises(self, popups, call):
        with pytest.raises(KeyError):
            call(popups)

    def test_payload_copied(self, popups):
        payload = {"name": "Tehran"}
        popup = popups.open("hotspot", "tehran", payload)
        payload["name"] = "changed"
        assert popup.payload["name"] == "Tehran"

    def test_all_categories_openable(self, popups):
        for category in POPUP_CATEGORIES:
            popups.open(category, "x")
        assert len(popups.open_popups()) == len(POPUP_CATEGORIES)


class TestFromDescriptor:

    def test_cyber_zone_maps_to_cyber(self, popups):
        d = OverlayDescriptor("apt28", "cyber-zone", "cyber", 10.0, 10.0, payload={"group": "APT28"})
        popup = popups.open_from_descriptor(d)
        assert popup.category == "cyber"
        assert popup.payload["group"] == "APT28"

    def test_conflict_label_maps_to_conflict(self, popups):
        d = OverlayDescriptor("gaza", "conflict-label", "conflicts", 60.0, 40.0)
        assert popups.open_from_descriptor(d).category == "conflict"

    def test_non_clickable_kind(self, popups):
        d = OverlayDescriptor("background", "background", "background")
        assert popups.open_from_descriptor(d) is None
        assert popups.open_popups() == []


class TestOutsideClick:

    def test_closes_only_popups_outside(self, popups):
        popups.open("hotspot", "tehran")
        popups.open("chokepoint", "hormuz")
        popups.open("quake", "us1")
        closed = popups.handle_outside_click(ClickTarget(inside=frozenset({"chokepoint"})))
        assert sorted(closed) == ["hotspot", "quake"]
        assert [p.category for p in popups.open_popups()] == ["chokepoint"]

    def test_click_on_empty_map_closes_all(self, popups):
        popups.open("city", "kyiv")
        popups.open("regional-hotspot", "ua-kursk")
        assert sorted(popups.handle_outside_click(ClickTarget())) == ["city", "regional-hotspot"]
        assert popups.open_popups() == []

    def test_accepts_plain_iterable(self, popups):
        popups.open("aircraft", "ae1234")
        assert popups.handle_outside_click(["aircraft"]) == []
        assert popups.get("aircraft") is not None
