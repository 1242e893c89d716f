"""
Overlay composer — one render pass of the activity map.

Takes the view, layer toggles, static catalogs, headline corpus and the
auxiliary feeds (earthquakes, flights, base map, custom monitors) and
returns a flat, z-ordered list of :class:`OverlayDescriptor`.  Nothing is
diffed or mutated between passes: every refresh builds a new list and the
caller swaps it in whole.

Pass order
──────────
  background / satellite / graticule / grid labels
    → countries (+ US states and borders)
    → cables, density blobs, conflict zones, bases, nuclear, cyber
    → chokepoints
    → earthquakes
    → hotspots (global) or city markers + regional hotspots (regional)
    → custom monitors
    → flights + flight-count badge

Anything whose projection fails is left out.  Shapes are clipped to the
canvas box in percent space with shapely.

Usage
-----
    from sitrep.fusion.composer import AuxData, compose
    overlays = compose(view, LayerToggleSet.defaults(), default_catalogs(),
                       corpus, AuxData(earthquakes=quakes), 800, 550)
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from shapely.geometry import LineString, MultiLineString, MultiPolygon, Polygon, box

from ..config import (
    MAJOR_QUAKE_MAG,
    MAX_FLIGHTS,
    MAX_QUAKES,
    SATELLITE_ATTRIBUTION,
    SATELLITE_TILES_URL,
)
from ..geo.catalogs import EntityCatalogs
from ..geo.entities import GeoEntity
from ..geo.projection import Box, Projector, basis_curve, graticule_lines, on_canvas
from ..ingest.basemap_client import BaseMap
from ..ingest.flights_client import Flight
from ..ingest.usgs_client import Earthquake
from .aircraft import aircraft_arrow, classify_aircraft
from .corpus import TextItem
from .layers import (
    US_NATION_BORDER_STYLE,
    US_STATE_BORDER_STYLE,
    US_STATE_STYLE,
    LayerToggleSet,
    country_style,
    is_layer_visible,
)
from .scoring import (
    CHOKEPOINT_POLICY,
    CITY_POLICY,
    HOTSPOT_POLICY,
    REGIONAL_HOTSPOT_POLICY,
    ActivityScore,
    MonitorSource,
    score_density,
    score_entity,
)

log = logging.getLogger(__name__)

Point = Tuple[float, float]
Path = Tuple[Tuple[Point, ...], ...]

CANVAS_BOX = box(0.0, 0.0, 100.0, 100.0)

# Draw order; every descriptor of a layer shares its z
Z_ORDER: Dict[str, int] = {
    "background": 0,
    "satellite": 1,
    "graticule": 2,
    "grid_labels": 3,
    "countries": 10,
    "states": 11,
    "state_borders": 12,
    "nation": 13,
    "cables": 20,
    "density": 21,
    "conflicts": 22,
    "conflict_labels": 23,
    "bases": 30,
    "nuclear": 31,
    "cyber": 32,
    "chokepoints": 40,
    "quakes": 50,
    "news_pulse": 59,
    "hotspots": 60,
    "cities": 60,
    "regional_hotspots": 61,
    "custom_monitors": 70,
    "flights": 80,
    "flight_count": 81,
}

VIEW_LABELS: Dict[str, Tuple[str, str]] = {
    "global": ("GLOBAL ACTIVITY MONITOR", "⚓ SHIP | ☢ NUKES | ▪ BASES | ═ CABLES"),
    "us": ("US DOMESTIC MONITOR", "★ CAPITAL | ● MAJOR | ○ REGIONAL"),
    "mideast": ("MIDDLE EAST MONITOR", "💥 CONFLICT | ☢ NUCLEAR | ⚠ CRISIS"),
    "ukraine": ("UKRAINE-RUSSIA THEATER", "⚔ FRONT | 🛡 DEFENSE | 🎯 STRIKE"),
    "taiwan": ("CHINA-TAIWAN THEATER", "⚡ FLASHPOINT | 🏝 DISPUTED | 🛡 DEFENSE"),
}

_DENSITY_SIZE = {"high": 1.5, "medium": 1.2, "low": 1.0}

_LAT_LABELS = (-60, -30, 0, 30, 60)
_LON_LABELS = (-120, -60, 0, 60, 120)


@dataclass(frozen=True)
class OverlayDescriptor:
    """One drawable overlay, positioned in canvas percent."""
    entity_id: str
    kind: str
    layer: str
    x: Optional[float] = None
    y: Optional[float] = None
    visual_class: str = ""
    payload: Mapping[str, Any] = field(default_factory=dict)
    z: int = 0
    rotation: float = 0.0
    path: Path = ()
    label: str = ""

    def as_dict(self) -> Dict[str, Any]:
        return {
            "entityId": self.entity_id,
            "kind": self.kind,
            "layer": self.layer,
            "x": self.x,
            "y": self.y,
            "visualClass": self.visual_class,
            "payload": dict(self.payload),
            "z": self.z,
            "rotation": self.rotation,
            "path": [[list(p) for p in ring] for ring in self.path],
            "label": self.label,
        }


@dataclass
class AuxData:
    """Per-cycle feeds the composer draws besides the corpus."""
    earthquakes: Sequence[Earthquake] = ()
    flights: Optional[Sequence[Flight]] = None      # None disables the layer
    base_map: Optional[BaseMap] = None
    monitor_source: Optional[MonitorSource] = None


# ── Geometry helpers ──────────────────────────────────────────────────

def _round_ring(coords: Iterable[Point]) -> Tuple[Point, ...]:
    return tuple((round(x, 3), round(y, 3)) for x, y in coords)


def clip_polygon(ring: Sequence[Point], bounds: Optional[Box] = None) -> List[Tuple[Point, ...]]:
    """Exterior rings of *ring* clipped to the canvas; empty when fully off.

    *bounds* narrows the clip to a sub-projection box inside the canvas.
    """
    if len(ring) < 3:
        return []
    poly = Polygon(ring)
    if not poly.is_valid:
        poly = poly.buffer(0)
    clip_box = CANVAS_BOX if bounds is None else CANVAS_BOX.intersection(box(*bounds))
    if clip_box.is_empty:
        return []
    clipped = poly.intersection(clip_box)
    if clipped.is_empty:
        return []
    if isinstance(clipped, Polygon):
        parts = [clipped]
    elif isinstance(clipped, MultiPolygon):
        parts = list(clipped.geoms)
    else:
        parts = [g for g in getattr(clipped, "geoms", []) if isinstance(g, Polygon)]
    return [_round_ring(p.exterior.coords) for p in parts if not p.is_empty]


def clip_polyline(points: Sequence[Point]) -> List[Tuple[Point, ...]]:
    if len(points) < 2:
        return []
    clipped = LineString(points).intersection(CANVAS_BOX)
    if clipped.is_empty:
        return []
    if isinstance(clipped, LineString):
        parts = [clipped]
    elif isinstance(clipped, MultiLineString):
        parts = list(clipped.geoms)
    else:
        parts = [g for g in getattr(clipped, "geoms", []) if isinstance(g, LineString)]
    return [_round_ring(p.coords) for p in parts if len(p.coords) >= 2]


def project_polygon(projector: Projector, ring: Sequence[Point]) -> List[Tuple[Point, ...]]:
    """Project and clip one polygon ring.

    Each sub-projection contributes its own clipped parts; vertices from
    different Albers USA insets never end up in the same ring.
    """
    out: List[Tuple[Point, ...]] = []
    for points, bounds in projector.project_ring_parts(ring):
        out.extend(clip_polygon(points, bounds))
    return out


def _project_segments(projector: Projector, coords: Sequence[Point]) -> List[List[Point]]:
    """Project a polyline, splitting it wherever a vertex fails."""
    segments: List[List[Point]] = []
    current: List[Point] = []
    for lon, lat in coords:
        pos = projector.project_unclipped(lon, lat)
        if pos is None:
            if len(current) >= 2:
                segments.append(current)
            current = []
            continue
        current.append(pos)
    if len(current) >= 2:
        segments.append(current)
    return segments


def _headline_payload(entity: GeoEntity, result: Optional[ActivityScore]) -> Dict[str, Any]:
    data = entity.as_payload()
    if result is not None:
        data.update(result.as_payload())
    return data


# ═══════════════════════════════════════════════════════════════════════
# COMPOSER
# ═══════════════════════════════════════════════════════════════════════

class OverlayComposer:
    """Builds the overlay list for one canvas size.

    *rng* drives the cyber-zone activity flag only; pass a seeded
    ``random.Random`` for reproducible output.
    """

    def __init__(self, width: float, height: float, rng: Optional[random.Random] = None):
        if width <= 0 or height <= 0:
            raise ValueError(f"Canvas size must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.rng = rng or random.Random()

    def compose(
        self,
        view_state,
        toggles: LayerToggleSet,
        catalogs: EntityCatalogs,
        corpus: Sequence[TextItem],
        aux: Optional[AuxData] = None,
    ) -> List[OverlayDescriptor]:
        view = getattr(view_state, "mode", view_state)
        aux = aux or AuxData()
        corpus = list(corpus)
        projector = Projector(view, self.width, self.height)

        def visible(layer: str) -> bool:
            return is_layer_visible(layer, view, toggles)

        out: List[OverlayDescriptor] = []

        out.extend(self._background(view, projector, visible))
        if aux.base_map is not None:
            out.extend(self._countries(view, projector, catalogs, aux.base_map, visible))
        else:
            log.debug("No base map, polygon layers skipped")
        if visible("cables"):
            out.extend(self._cables(projector, catalogs))
        if visible("density"):
            out.extend(self._density(projector, catalogs, corpus))
        if visible("conflicts"):
            out.extend(self._conflicts(projector, catalogs))
        if visible("bases"):
            out.extend(self._bases(projector, catalogs))
        if visible("nuclear"):
            out.extend(self._nuclear(projector, catalogs))
        if visible("cyber"):
            out.extend(self._cyber(projector, catalogs))
        if visible("chokepoints"):
            out.extend(self._chokepoints(projector, catalogs, corpus))
        if visible("quakes"):
            out.extend(self._quakes(projector, aux.earthquakes))
        if visible("hotspots"):
            out.extend(self._hotspots(projector, catalogs, corpus))
        if visible("cities") or visible("regional_hotspots"):
            out.extend(self._regional(view, projector, catalogs, corpus, visible))
        if visible("custom_monitors") and aux.monitor_source is not None:
            out.extend(self._monitors(projector, aux.monitor_source, corpus))
        if visible("flights") and aux.flights is not None:
            out.extend(self._flights(projector, aux.flights))

        log.info("Composed %d overlays for %s view (%sx%s)",
                 len(out), view, self.width, self.height)
        return out

    # ── 1. background ────────────────────────────────────────────────

    def _background(self, view, projector, visible) -> List[OverlayDescriptor]:
        title, legend = VIEW_LABELS[view]
        out = [OverlayDescriptor(
            entity_id="background", kind="background", layer="background",
            z=Z_ORDER["background"],
            payload={"view": view, "title": title, "legend": legend, "fill": "#020a08"},
        )]
        if visible("satellite"):
            out.append(OverlayDescriptor(
                entity_id="satellite", kind="satellite", layer="satellite",
                z=Z_ORDER["satellite"],
                payload={"tiles": SATELLITE_TILES_URL, "attribution": SATELLITE_ATTRIBUTION},
            ))

        rings: List[Tuple[Point, ...]] = []
        for line in graticule_lines(step=30.0):
            for segment in _project_segments(projector, line):
                rings.extend(clip_polyline(segment))
        out.append(OverlayDescriptor(
            entity_id="graticule", kind="graticule", layer="graticule",
            z=Z_ORDER["graticule"], path=tuple(rings),
            payload={"stroke": "#0f4035", "width": 0.5, "opacity": 0.5},
        ))

        if visible("grid_labels"):
            for lat in _LAT_LABELS:
                pos = projector.project(-175, lat)
                if pos is None:
                    continue
                label = "0°" if lat == 0 else (f"{lat}°N" if lat > 0 else f"{abs(lat)}°S")
                out.append(OverlayDescriptor(
                    entity_id=f"lat_{lat}", kind="coord-label", layer="grid_labels",
                    x=0.5, y=pos[1], visual_class="lat", z=Z_ORDER["grid_labels"],
                    label=label,
                ))
            for lon in _LON_LABELS:
                pos = projector.project(lon, -85)
                if pos is None:
                    continue
                label = "0°" if lon == 0 else (f"{lon}°E" if lon > 0 else f"{abs(lon)}°W")
                out.append(OverlayDescriptor(
                    entity_id=f"lon_{lon}", kind="coord-label", layer="grid_labels",
                    x=pos[0], y=99.0, visual_class="lon", z=Z_ORDER["grid_labels"],
                    label=label,
                ))
        return out

    # ── 2. countries ─────────────────────────────────────────────────

    def _countries(self, view, projector, catalogs, base_map, visible) -> List[OverlayDescriptor]:
        out: List[OverlayDescriptor] = []
        sanctions_on = visible("sanctions")

        for shape in base_map.countries:
            path: List[Tuple[Point, ...]] = []
            for ring in shape.rings:
                path.extend(project_polygon(projector, ring))
            if not path:
                continue
            level = catalogs.sanctioned_countries.get(shape.id)
            style = country_style(view, shape.iso3, level, sanctions_on)
            out.append(OverlayDescriptor(
                entity_id=shape.id, kind="country", layer="countries",
                visual_class=style.tier, z=Z_ORDER["countries"], path=tuple(path),
                label=shape.name,
                payload={"name": shape.name, "iso3": shape.iso3, "sanction": level,
                         "fill": style.fill, "fillRule": "evenodd",
                         "stroke": style.stroke, "width": style.width},
            ))

        if visible("states"):
            for shape in base_map.states:
                path = []
                for ring in shape.rings:
                    path.extend(project_polygon(projector, ring))
                if not path:
                    continue
                out.append(OverlayDescriptor(
                    entity_id=f"state_{shape.id}", kind="state", layer="states",
                    z=Z_ORDER["states"], path=tuple(path), label=shape.name,
                    payload={"name": shape.name, "fill": US_STATE_STYLE.fill, "fillRule": "evenodd",
                             "stroke": US_STATE_STYLE.stroke, "width": US_STATE_STYLE.width},
                ))
            for kind, lines, style in (
                ("state_borders", base_map.state_borders, US_STATE_BORDER_STYLE),
                ("nation", base_map.nation, US_NATION_BORDER_STYLE),
            ):
                path = []
                for line in lines:
                    for segment in _project_segments(projector, line):
                        path.extend(clip_polyline(segment))
                if path:
                    out.append(OverlayDescriptor(
                        entity_id=kind, kind=kind.replace("_", "-"), layer="states",
                        z=Z_ORDER[kind], path=tuple(path),
                        payload={"stroke": style.stroke, "width": style.width},
                    ))
        return out

    # ── 3. static infrastructure ─────────────────────────────────────

    def _cables(self, projector, catalogs) -> List[OverlayDescriptor]:
        out = []
        for cable in catalogs.cables:
            points = projector.project_path(cable.points)
            if len(points) < 2:
                continue
            path = clip_polyline(basis_curve(points))
            if not path:
                continue
            out.append(OverlayDescriptor(
                entity_id=cable.id, kind="cable", layer="cables",
                visual_class="major" if cable.major else "", z=Z_ORDER["cables"],
                path=tuple(path), label=cable.name, payload=cable.as_payload(),
            ))
        return out

    def _density(self, projector, catalogs, corpus) -> List[OverlayDescriptor]:
        out = []
        scores = score_density(catalogs.news_regions, corpus)
        for region in catalogs.news_regions:
            result = scores[region.id]
            if result.score <= 0:
                continue
            pos = projector.project(region.lon, region.lat)
            if pos is None:
                continue
            size = region.radius * _DENSITY_SIZE[result.tier]
            out.append(OverlayDescriptor(
                entity_id=region.id, kind="density-blob", layer="density",
                x=pos[0], y=pos[1], visual_class=result.tier, z=Z_ORDER["density"],
                payload={"name": region.name, "score": result.score, "level": result.tier,
                         "size": size},
            ))
        return out

    def _conflicts(self, projector, catalogs) -> List[OverlayDescriptor]:
        shapes: List[OverlayDescriptor] = []
        labels: List[OverlayDescriptor] = []
        for zone in catalogs.conflict_zones:
            points = [projector.project_unclipped(lon, lat) for lon, lat in zone.coords]
            if not points or any(p is None for p in points):
                log.debug("Conflict zone %s dropped: vertex off projection", zone.id)
                continue
            path = tuple(clip_polygon(points))
            if not path:
                continue
            high = "high-intensity" if zone.intensity == "high" else ""
            for part, cls in (("glow", ""), ("fill", high), ("outline", high)):
                shapes.append(OverlayDescriptor(
                    entity_id=zone.id, kind=f"conflict-{part}", layer="conflicts",
                    visual_class=cls, z=Z_ORDER["conflicts"], path=path,
                ))
            pos = projector.project(zone.lon, zone.lat)
            if pos is None:
                continue
            labels.append(OverlayDescriptor(
                entity_id=zone.id, kind="conflict-label", layer="conflicts",
                x=pos[0], y=pos[1], visual_class=high, z=Z_ORDER["conflict_labels"],
                label=zone.name, payload=zone.as_payload(),
            ))
        return shapes + labels

    def _points(self, projector, entities, kind, layer, cls_for) -> List[OverlayDescriptor]:
        out = []
        for entity in entities:
            pos = projector.project(entity.lon, entity.lat)
            if pos is None:
                continue
            out.append(OverlayDescriptor(
                entity_id=entity.id, kind=kind, layer=layer, x=pos[0], y=pos[1],
                visual_class=cls_for(entity), z=Z_ORDER[layer], label=entity.name,
                payload=entity.as_payload(),
            ))
        return out

    def _bases(self, projector, catalogs) -> List[OverlayDescriptor]:
        return self._points(projector, catalogs.military_bases, "military-base", "bases",
                            lambda b: b.base_type)

    def _nuclear(self, projector, catalogs) -> List[OverlayDescriptor]:
        return self._points(projector, catalogs.nuclear_facilities, "nuclear-facility", "nuclear",
                            lambda f: "weapons" if f.is_weapons else "")

    def _cyber(self, projector, catalogs) -> List[OverlayDescriptor]:
        out = []
        for region in catalogs.cyber_regions:
            pos = projector.project(region.lon, region.lat)
            if pos is None:
                continue
            active = self.rng.random() > 0.6
            payload = region.as_payload()
            payload["isActive"] = active
            out.append(OverlayDescriptor(
                entity_id=region.id, kind="cyber-zone", layer="cyber", x=pos[0], y=pos[1],
                visual_class="active" if active else "", z=Z_ORDER["cyber"],
                label=region.group, payload=payload,
            ))
        return out

    # ── 4. chokepoints ───────────────────────────────────────────────

    def _chokepoints(self, projector, catalogs, corpus) -> List[OverlayDescriptor]:
        out = []
        for cp in catalogs.chokepoints:
            pos = projector.project(cp.lon, cp.lat)
            if pos is None:
                continue
            result = score_entity(cp, corpus, CHOKEPOINT_POLICY)
            alert = result.tier == "alert"
            payload = _headline_payload(cp, result)
            payload["isAlert"] = alert
            out.append(OverlayDescriptor(
                entity_id=cp.id, kind="chokepoint", layer="chokepoints", x=pos[0], y=pos[1],
                visual_class="alert" if alert else "", z=Z_ORDER["chokepoints"],
                label=cp.name, payload=payload,
            ))
        return out

    # ── 5. earthquakes ───────────────────────────────────────────────

    def _quakes(self, projector, earthquakes) -> List[OverlayDescriptor]:
        out = []
        for index, quake in enumerate(list(earthquakes or ())[:MAX_QUAKES]):
            if quake is None or quake.mag is None:
                continue
            pos = projector.project(quake.lon, quake.lat)
            if pos is None:
                continue
            payload = quake.as_payload()
            payload["id"] = quake.event_id or f"eq_{index}"
            out.append(OverlayDescriptor(
                entity_id=payload["id"], kind="quake", layer="quakes", x=pos[0], y=pos[1],
                visual_class="major" if quake.mag >= MAJOR_QUAKE_MAG else "",
                z=Z_ORDER["quakes"], label=f"M{quake.mag:.1f}", payload=payload,
            ))
        return out

    # ── 6. hotspots / regional markers ───────────────────────────────

    def _hotspots(self, projector, catalogs, corpus) -> List[OverlayDescriptor]:
        pulses: List[OverlayDescriptor] = []
        spots: List[OverlayDescriptor] = []
        for spot in catalogs.hotspots:
            pos = projector.project(spot.lon, spot.lat)
            if pos is None:
                continue
            result = score_entity(spot, corpus, HOTSPOT_POLICY)
            if result.tier == "high" and result.matched_items:
                pulses.append(OverlayDescriptor(
                    entity_id=spot.id, kind="news-pulse", layer="hotspots",
                    x=pos[0], y=pos[1], z=Z_ORDER["news_pulse"], label="Breaking",
                ))
            payload = _headline_payload(spot, result)
            payload["level"] = result.tier
            spots.append(OverlayDescriptor(
                entity_id=spot.id, kind="hotspot", layer="hotspots", x=pos[0], y=pos[1],
                visual_class=result.tier, z=Z_ORDER["hotspots"], label=spot.name,
                payload=payload,
            ))
        return pulses + spots

    def _regional(self, view, projector, catalogs, corpus, visible) -> List[OverlayDescriptor]:
        cities, hotspots = catalogs.regional(view)
        out = []
        if visible("cities"):
            for city in cities:
                pos = projector.project(city.lon, city.lat)
                if pos is None:
                    continue
                result = score_entity(city, corpus, CITY_POLICY)
                classes = [c for c in (
                    city.city_type if city.city_type in ("capital", "major") else "",
                    result.tier if result.tier == "high-activity" else "",
                ) if c]
                label = city.name
                if result.match_count:
                    label = f"{city.name} ({result.match_count})"
                out.append(OverlayDescriptor(
                    entity_id=city.id, kind="city", layer="cities", x=pos[0], y=pos[1],
                    visual_class=" ".join(classes), z=Z_ORDER["cities"], label=label,
                    payload=_headline_payload(city, result),
                ))
        if visible("regional_hotspots"):
            for spot in hotspots:
                pos = projector.project(spot.lon, spot.lat)
                if pos is None:
                    continue
                result = score_entity(spot, corpus, REGIONAL_HOTSPOT_POLICY)
                out.append(OverlayDescriptor(
                    entity_id=spot.id, kind="regional-hotspot", layer="regional_hotspots",
                    x=pos[0], y=pos[1], visual_class=result.tier,
                    z=Z_ORDER["regional_hotspots"], label=spot.name,
                    payload=_headline_payload(spot, result),
                ))
        return out

    # ── 7. custom monitors ───────────────────────────────────────────

    def _monitors(self, projector, source, corpus) -> List[OverlayDescriptor]:
        out = []
        for monitor, result in source(corpus):
            pos = projector.project(monitor.lon, monitor.lat)
            if pos is None:
                continue
            label = monitor.name
            if result.match_count:
                label = f"{monitor.name} ({result.match_count})"
            out.append(OverlayDescriptor(
                entity_id=monitor.id, kind="custom-monitor", layer="custom_monitors",
                x=pos[0], y=pos[1], visual_class=result.tier, z=Z_ORDER["custom_monitors"],
                label=label,
                payload={
                    "id": monitor.id, "name": monitor.name, "color": monitor.color,
                    "keywords": list(monitor.keywords), "lat": monitor.lat, "lon": monitor.lon,
                    "matchCount": result.match_count,
                    "matches": [item.headline() for item in result.matched_items],
                },
            ))
        return out

    # ── 8. flights ───────────────────────────────────────────────────

    def _flights(self, projector, flights) -> List[OverlayDescriptor]:
        flights = list(flights)
        out = []
        for flight in flights[:MAX_FLIGHTS]:
            pos = projector.project_unclipped(flight.lon, flight.lat)
            if pos is None or not on_canvas(pos):
                continue
            aircraft_type = classify_aircraft(flight.callsign, flight.country, flight.icao24)
            payload = flight.as_payload()
            payload["type"] = aircraft_type
            payload["arrow"] = aircraft_arrow(flight.heading)
            out.append(OverlayDescriptor(
                entity_id=flight.icao24, kind="aircraft", layer="flights", x=pos[0], y=pos[1],
                visual_class=aircraft_type, z=Z_ORDER["flights"],
                rotation=float(flight.heading or 0.0),
                label=flight.callsign or flight.icao24, payload=payload,
            ))
        out.append(OverlayDescriptor(
            entity_id="flight-count", kind="flight-count", layer="flights",
            z=Z_ORDER["flight_count"], label=f"✈ {len(flights)} flights",
            payload={"count": len(flights), "shown": len(out)},
        ))
        return out


def compose(
    view_state,
    toggles: LayerToggleSet,
    catalogs: EntityCatalogs,
    corpus: Sequence[TextItem],
    aux: Optional[AuxData],
    width: float,
    height: float,
    rng: Optional[random.Random] = None,
) -> List[OverlayDescriptor]:
    """One render pass; see :class:`OverlayComposer`."""
    return OverlayComposer(width, height, rng).compose(view_state, toggles, catalogs, corpus, aux)
