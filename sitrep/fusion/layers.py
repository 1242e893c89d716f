"""
Layer visibility and country shading per view.

Visibility is a lookup in :data:`LAYER_POLICY`: a layer is drawn when the
current view is one of its views and, if it has a toggle, the toggle is
on.  Regional views therefore drop every global-only layer whatever the
toggles say, while ``flights`` and ``satellite`` follow their toggle in
any view.

Country shading is keyword-free.  ``global`` and ``us`` use the base
style (global swaps in the sanctions fill when that layer is visible);
each theater view sorts countries into primary, theater and other tiers
from fixed ISO3 lists.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, Iterator, Mapping, Optional, Tuple

from ..config import DEFAULT_LAYERS
from ..geo.projection import REGIONAL_VIEWS, VIEW_MODES

log = logging.getLogger(__name__)

TOGGLE_NAMES: Tuple[str, ...] = (
    "conflicts", "bases", "nuclear", "cables", "sanctions", "density", "flights", "satellite",
)


class LayerToggleSet:
    """User layer toggles.  Unknown names raise KeyError; unset names read False."""

    def __init__(self, values: Optional[Mapping[str, bool]] = None, **kwargs: bool):
        self._values: Dict[str, bool] = {}
        for name, on in {**dict(values or {}), **kwargs}.items():
            self[name] = on

    @classmethod
    def defaults(cls) -> "LayerToggleSet":
        return cls(DEFAULT_LAYERS)

    @staticmethod
    def _check(name: str) -> None:
        if name not in TOGGLE_NAMES:
            raise KeyError(f"Unknown layer toggle {name!r}")

    def __getitem__(self, name: str) -> bool:
        self._check(name)
        return self._values.get(name, False)

    def __setitem__(self, name: str, on: bool) -> None:
        self._check(name)
        self._values[name] = bool(on)

    def __iter__(self) -> Iterator[str]:
        return iter(TOGGLE_NAMES)

    def __eq__(self, other) -> bool:
        if not isinstance(other, LayerToggleSet):
            return NotImplemented
        return self.as_dict() == other.as_dict()

    def __repr__(self) -> str:
        on = [n for n in TOGGLE_NAMES if self._values.get(n)]
        return f"LayerToggleSet(on={on})"

    def toggle(self, name: str) -> bool:
        """Flip one layer and return its new state."""
        self[name] = not self[name]
        return self[name]

    def as_dict(self) -> Dict[str, bool]:
        return {name: self._values.get(name, False) for name in TOGGLE_NAMES}


@dataclass(frozen=True)
class LayerRule:
    toggle: Optional[str]        # None: always on within its views
    views: FrozenSet[str]


_GLOBAL = frozenset({"global"})
_REGIONAL = frozenset(REGIONAL_VIEWS)
_ALL = frozenset(VIEW_MODES)

LAYER_POLICY: Dict[str, LayerRule] = {
    # every view
    "background":       LayerRule(None, _ALL),
    "graticule":        LayerRule(None, _ALL),
    "countries":        LayerRule(None, _ALL),
    "quakes":           LayerRule(None, _ALL),
    "custom_monitors":  LayerRule(None, _ALL),
    "flights":          LayerRule("flights", _ALL),
    "satellite":        LayerRule("satellite", _ALL),
    # global only
    "grid_labels":      LayerRule(None, _GLOBAL),
    "sanctions":        LayerRule("sanctions", _GLOBAL),
    "cables":           LayerRule("cables", _GLOBAL),
    "density":          LayerRule("density", _GLOBAL),
    "conflicts":        LayerRule("conflicts", _GLOBAL),
    "bases":            LayerRule("bases", _GLOBAL),
    "nuclear":          LayerRule("nuclear", _GLOBAL),
    "cyber":            LayerRule(None, _GLOBAL),
    "chokepoints":      LayerRule(None, _GLOBAL),
    "hotspots":         LayerRule(None, _GLOBAL),
    # regional only
    "cities":           LayerRule(None, _REGIONAL),
    "regional_hotspots": LayerRule(None, _REGIONAL),
    "states":           LayerRule(None, frozenset({"us"})),
}


def is_layer_visible(layer: str, view_mode: str, toggles: LayerToggleSet) -> bool:
    """Whether *layer* is drawn in *view_mode* with the given toggles."""
    rule = LAYER_POLICY[layer]
    if view_mode not in VIEW_MODES:
        raise KeyError(f"Unknown view mode {view_mode!r}")
    if view_mode not in rule.views:
        return False
    return rule.toggle is None or toggles[rule.toggle]


def visible_layers(view_mode: str, toggles: LayerToggleSet) -> Tuple[str, ...]:
    return tuple(name for name in LAYER_POLICY if is_layer_visible(name, view_mode, toggles))


# ═══════════════════════════════════════════════════════════════════════
# COUNTRY SHADING
# ═══════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ShadeStyle:
    fill: str
    stroke: str
    width: float
    tier: str = "base"       # "base", "primary", "theater", "other"


BASE_STYLE = ShadeStyle("#0a2018", "#0f5040", 0.5, "base")

SANCTION_FILLS: Dict[str, str] = {
    "severe": "#660000",
    "high": "#442200",
    "moderate": "#333300",
    "low": "#223322",
}

US_STATE_STYLE = ShadeStyle("#0a2018", "none", 0.0, "base")
US_STATE_BORDER_STYLE = ShadeStyle("none", "#1a6050", 0.75, "base")
US_NATION_BORDER_STYLE = ShadeStyle("none", "#2a8070", 1.5, "base")


@dataclass(frozen=True)
class TheaterShading:
    """ISO3 membership and colours for one theater view."""
    theater: FrozenSet[str]
    primary: FrozenSet[str]
    theater_fill: str
    theater_stroke: str
    primary_stroke: str
    fill_overrides: Mapping[str, str]
    stroke_overrides: Mapping[str, str]
    other_fill: str = "#050f0c"
    other_stroke: str = "#0a2018"
    widths: Tuple[float, float, float] = (1.5, 1.0, 0.3)   # primary, theater, other

    def tier(self, iso3: str) -> str:
        if iso3 in self.primary:
            return "primary"
        if iso3 in self.theater:
            return "theater"
        return "other"

    def style(self, iso3: str) -> ShadeStyle:
        tier = self.tier(iso3)
        if tier == "other":
            return ShadeStyle(self.other_fill, self.other_stroke, self.widths[2], tier)
        fill = self.fill_overrides.get(iso3, self.theater_fill)
        if iso3 in self.stroke_overrides:
            stroke = self.stroke_overrides[iso3]
        elif tier == "primary":
            stroke = self.primary_stroke
        else:
            stroke = self.theater_stroke
        width = self.widths[0] if tier == "primary" else self.widths[1]
        return ShadeStyle(fill, stroke, width, tier)


def _isos(codes: Iterable[str]) -> FrozenSet[str]:
    return frozenset(codes)


THEATER_SHADING: Dict[str, TheaterShading] = {
    "mideast": TheaterShading(
        theater=_isos(("SAU", "ARE", "QAT", "KWT", "BHR", "OMN", "IRN", "IRQ", "SYR", "LBN",
                       "JOR", "ISR", "PSE", "YEM", "EGY", "TUR", "CYP", "AFG", "PAK")),
        primary=_isos(("IRN", "ISR", "PSE")),
        theater_fill="#0f3028",
        theater_stroke="#2a8070",
        primary_stroke="#806040",
        fill_overrides={},
        stroke_overrides={},
    ),
    "ukraine": TheaterShading(
        theater=_isos(("UKR", "RUS", "BLR", "POL", "ROU", "MDA", "HUN", "SVK", "LTU", "LVA",
                       "EST", "FIN")),
        primary=_isos(("UKR", "RUS", "BLR")),
        theater_fill="#0f2820",
        theater_stroke="#2a6050",
        primary_stroke="#806040",
        fill_overrides={"UKR": "#1a4030", "RUS": "#301818", "BLR": "#282818"},
        stroke_overrides={"UKR": "#3a9070", "RUS": "#803030"},
    ),
    "taiwan": TheaterShading(
        theater=_isos(("CHN", "TWN", "PHL", "JPN", "VNM", "MYS", "KOR", "IDN", "BRN")),
        primary=_isos(("CHN", "TWN", "PHL")),
        theater_fill="#0f2820",
        theater_stroke="#2a6050",
        primary_stroke="#806040",
        fill_overrides={"CHN": "#301818", "TWN": "#1a3040", "PHL": "#1a4030", "JPN": "#202840"},
        stroke_overrides={"CHN": "#803030", "TWN": "#3080a0", "PHL": "#3a9070"},
    ),
}


def country_tier(view: str, iso3: str) -> str:
    if view not in VIEW_MODES:
        raise KeyError(f"Unknown view mode {view!r}")
    shading = THEATER_SHADING.get(view)
    return shading.tier(iso3) if shading else "base"


def country_style(
    view: str,
    iso3: str,
    sanction_level: Optional[str] = None,
    sanctions_on: bool = False,
) -> ShadeStyle:
    """Fill, stroke and stroke width for one country in *view*."""
    if view not in VIEW_MODES:
        raise KeyError(f"Unknown view mode {view!r}")
    shading = THEATER_SHADING.get(view)
    if shading is not None:
        return shading.style(iso3)
    if view == "global" and sanctions_on and sanction_level in SANCTION_FILLS:
        return ShadeStyle(SANCTION_FILLS[sanction_level], BASE_STYLE.stroke, BASE_STYLE.width,
                          f"sanction-{sanction_level}")
    return BASE_STYLE
