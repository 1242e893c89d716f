"""Tests for layer visibility and country shading (sitrep.fusion.layers)."""

import pytest

from sitrep.fusion.layers import (
    BASE_STYLE,
    LAYER_POLICY,
    SANCTION_FILLS,
    LayerToggleSet,
    country_style,
    country_tier,
    is_layer_visible,
    visible_layers,
)
from sitrep.geo.projection import REGIONAL_VIEWS, VIEW_MODES


# ── Toggles ──────────────────────────────────────────────────────────────────

class TestLayerToggleSet:

    def test_defaults(self):
        toggles = LayerToggleSet.defaults()
        assert toggles["conflicts"] is True
        assert toggles["flights"] is False
        assert toggles["satellite"] is False

    def test_toggle_flips_and_returns_state(self):
        toggles = LayerToggleSet.defaults()
        assert toggles.toggle("flights") is True
        assert toggles.toggle("flights") is False

    def test_unset_name_reads_false(self):
        assert LayerToggleSet()["bases"] is False

    def test_unknown_name_raises(self):
        toggles = LayerToggleSet()
        with pytest.raises(KeyError):
            toggles["weather"]
        with pytest.raises(KeyError):
            toggles["weather"] = True
        with pytest.raises(KeyError):
            LayerToggleSet({"weather": True})

    def test_equality_by_values(self):
        assert LayerToggleSet(cables=True) == LayerToggleSet({"cables": True})
        assert LayerToggleSet(cables=True) != LayerToggleSet()


# ── Visibility ───────────────────────────────────────────────────────────────

class TestVisibility:

    @pytest.mark.parametrize("view", sorted(REGIONAL_VIEWS))
    @pytest.mark.parametrize("layer", [
        "conflicts", "bases", "nuclear", "cables", "sanctions", "density",
        "hotspots", "chokepoints", "cyber", "grid_labels",
    ])
    def test_global_only_layers_suppressed_in_regional_views(self, view, layer):
        toggles = LayerToggleSet({name: True for name in LayerToggleSet()})
        assert not is_layer_visible(layer, view, toggles)

    @pytest.mark.parametrize("view", VIEW_MODES)
    def test_flights_follow_toggle_in_every_view(self, view):
        assert is_layer_visible("flights", view, LayerToggleSet(flights=True))
        assert not is_layer_visible("flights", view, LayerToggleSet(flights=False))

    def test_toggle_off_hides_global_layer(self):
        toggles = LayerToggleSet.defaults()
        assert is_layer_visible("bases", "global", toggles)
        toggles["bases"] = False
        assert not is_layer_visible("bases", "global", toggles)

    def test_untoggled_layers_always_on_in_their_views(self):
        toggles = LayerToggleSet()
        assert is_layer_visible("hotspots", "global", toggles)
        assert is_layer_visible("cities", "ukraine", toggles)
        assert not is_layer_visible("cities", "global", toggles)

    def test_states_only_in_us(self):
        toggles = LayerToggleSet()
        assert is_layer_visible("states", "us", toggles)
        assert not is_layer_visible("states", "mideast", toggles)

    def test_unknown_layer_or_view_raises(self):
        with pytest.raises(KeyError):
            is_layer_visible("weather", "global", LayerToggleSet())
        with pytest.raises(KeyError):
            is_layer_visible("bases", "arctic", LayerToggleSet())

    def test_visible_layers_keeps_policy_order(self):
        names = visible_layers("global", LayerToggleSet.defaults())
        assert list(names) == [n for n in LAYER_POLICY if n in names]
        assert "flights" not in names


# ── Country shading ──────────────────────────────────────────────────────────

class TestCountryStyle:

    @pytest.mark.parametrize("view", ["global", "us"])
    def test_base_style_outside_theaters(self, view):
        assert country_style(view, "FRA") == BASE_STYLE

    @pytest.mark.parametrize("view", ["mideast", "ukraine", "taiwan"])
    def test_widths_strictly_ordered(self, view):
        primary = {"mideast": "IRN", "ukraine": "UKR", "taiwan": "CHN"}[view]
        theater = {"mideast": "SAU", "ukraine": "POL", "taiwan": "JPN"}[view]
        p = country_style(view, primary)
        t = country_style(view, theater)
        o = country_style(view, "BRA")
        assert (p.tier, t.tier, o.tier) == ("primary", "theater", "other")
        assert p.width > t.width > o.width

    def test_ukraine_colours(self):
        style = country_style("ukraine", "UKR")
        assert style.fill == "#1a4030"
        assert style.stroke == "#3a9070"
        assert country_style("ukraine", "RUS").stroke == "#803030"

    def test_sanctions_fill_only_when_layer_on(self):
        on = country_style("global", "IRN", "severe", sanctions_on=True)
        off = country_style("global", "IRN", "severe", sanctions_on=False)
        assert on.fill == SANCTION_FILLS["severe"]
        assert on.tier == "sanction-severe"
        assert off == BASE_STYLE

    def test_sanctions_ignored_in_theater_views(self):
        style = country_style("mideast", "IRN", "severe", sanctions_on=True)
        assert style.tier == "primary"
        assert style.fill != SANCTION_FILLS["severe"]

    def test_country_tier(self):
        assert country_tier("global", "IRN") == "base"
        assert country_tier("taiwan", "TWN") == "primary"
        with pytest.raises(KeyError):
            country_tier("arctic", "NOR")
