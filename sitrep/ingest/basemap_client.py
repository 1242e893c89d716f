"""
Base-map topology loader (world-atlas countries, us-atlas states).

TopoJSON stores shared, quantised, delta-encoded arcs; geometries refer to
arcs by index (``~i`` means arc *i* reversed).  Decoding here is a numpy
cumulative sum followed by the topology transform, then ring assembly.

Downloads are cached in memory for the life of the process.  A failed
download is logged and returns None so the composer skips the polygon
layers; it is retried on the next call.

Usage
-----
    from sitrep.ingest.basemap_client import load_world_map, load_us_states
    world = load_world_map()          # BaseMap or None
    us = load_us_states()             # BaseMap with states and borders, or None
"""
from __future__ import annotations

import logging
import threading
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np
import requests

from ..config import US_ATLAS_URL, WORLD_ATLAS_URL
from ..geo.catalogs import iso3_for
from . import fetch_with_retry

log = logging.getLogger(__name__)

Ring = List[Tuple[float, float]]


@dataclass
class CountryShape:
    """One country (or US state) outline as (lon, lat) rings."""
    id: str
    name: str
    iso3: str = ""
    rings: List[Ring] = field(default_factory=list)


@dataclass
class BaseMap:
    countries: List[CountryShape] = field(default_factory=list)
    states: List[CountryShape] = field(default_factory=list)
    state_borders: List[Ring] = field(default_factory=list)   # interior state lines
    nation: List[Ring] = field(default_factory=list)          # US outline

    @property
    def empty(self) -> bool:
        return not (self.countries or self.states)


# ── TopoJSON decoding ─────────────────────────────────────────────────

def decode_arcs(topology: dict) -> List[np.ndarray]:
    """All arcs as absolute (lon, lat) arrays."""
    transform = topology.get("transform")
    if transform:
        scale = np.asarray(transform.get("scale", (1.0, 1.0)), dtype=float)
        translate = np.asarray(transform.get("translate", (0.0, 0.0)), dtype=float)
    arcs = []
    for arc in topology.get("arcs", []):
        pts = np.asarray(arc, dtype=float).reshape(len(arc), -1)[:, :2] if arc else np.zeros((0, 2))
        if transform:
            pts = np.cumsum(pts, axis=0) * scale + translate
        arcs.append(pts)
    return arcs


def _arc(arcs: List[np.ndarray], index: int) -> np.ndarray:
    return arcs[index] if index >= 0 else arcs[~index][::-1]


def _ring(arcs: List[np.ndarray], indexes: Iterable[int]) -> Ring:
    parts = []
    for n, idx in enumerate(indexes):
        pts = _arc(arcs, idx)
        parts.append(pts if n == 0 else pts[1:])
    if not parts:
        return []
    joined = np.vstack(parts)
    return [(float(x), float(y)) for x, y in joined]


def geometry_rings(geometry: dict, arcs: List[np.ndarray]) -> List[Ring]:
    """Rings of a Polygon or MultiPolygon geometry (holes included)."""
    gtype = geometry.get("type")
    if gtype == "Polygon":
        polygons = [geometry.get("arcs", [])]
    elif gtype == "MultiPolygon":
        polygons = geometry.get("arcs", [])
    else:
        return []
    rings = []
    for polygon in polygons:
        for ring_arcs in polygon:
            ring = _ring(arcs, ring_arcs)
            if len(ring) >= 4:
                rings.append(ring)
    return rings


def decode_shapes(topology: dict, object_name: str, with_iso3: bool = True) -> List[CountryShape]:
    """Decode one named object of *topology* into shapes.

    Geometries that fail to decode are skipped.
    """
    obj = topology.get("objects", {}).get(object_name)
    if not obj:
        log.warning("Topology has no object %r", object_name)
        return []
    arcs = decode_arcs(topology)
    shapes = []
    for geom in obj.get("geometries", []):
        try:
            rings = geometry_rings(geom, arcs)
        except (IndexError, TypeError, ValueError) as exc:
            log.debug("Skipping geometry %s: %s", geom.get("id"), exc)
            continue
        if not rings:
            continue
        gid = str(geom.get("id", ""))
        props = geom.get("properties") or {}
        shapes.append(CountryShape(
            id=gid,
            name=props.get("name", gid),
            iso3=iso3_for(gid) if with_iso3 else "",
            rings=rings,
        ))
    return shapes


def _polygon_arc_ids(geometry: dict) -> List[int]:
    gtype = geometry.get("type")
    if gtype not in ("Polygon", "MultiPolygon"):
        return []
    polygons = [geometry.get("arcs", [])] if gtype == "Polygon" else geometry.get("arcs", [])
    return [idx if idx >= 0 else ~idx for polygon in polygons for ring in polygon for idx in ring]


def interior_borders(topology: dict, object_name: str) -> List[Ring]:
    """Arcs shared by two geometries of *object_name* (internal borders)."""
    obj = topology.get("objects", {}).get(object_name) or {}
    counts: Counter = Counter()
    for geom in obj.get("geometries", []):
        counts.update(set(_polygon_arc_ids(geom)))
    arcs = decode_arcs(topology)
    return [
        [(float(x), float(y)) for x, y in arcs[i]]
        for i, n in sorted(counts.items()) if n > 1
    ]


# ── Download + cache ──────────────────────────────────────────────────

_cache: Dict[str, BaseMap] = {}
_cache_lock = threading.Lock()


def _fetch_topology(url: str) -> Optional[dict]:
    try:
        resp = fetch_with_retry(url, retries=1)
        data = resp.json()
    except (requests.RequestException, ValueError) as exc:
        log.warning("Base map fetch failed (%s): %s", url, exc)
        return None
    if not isinstance(data, dict) or data.get("type") != "Topology":
        log.warning("Base map at %s is not a TopoJSON topology", url)
        return None
    return data


def world_map_from_topology(topology: dict) -> BaseMap:
    return BaseMap(countries=decode_shapes(topology, "countries"))


def us_states_from_topology(topology: dict) -> BaseMap:
    nation = [ring for shape in decode_shapes(topology, "nation", with_iso3=False)
              for ring in shape.rings]
    return BaseMap(
        states=decode_shapes(topology, "states", with_iso3=False),
        state_borders=interior_borders(topology, "states"),
        nation=nation,
    )


def _load(key: str, url: str, build) -> Optional[BaseMap]:
    with _cache_lock:
        if key in _cache:
            return _cache[key]
    topology = _fetch_topology(url)
    if topology is None:
        return None
    base = build(topology)
    if base.empty:
        log.warning("Base map %s decoded to no shapes", key)
        return None
    with _cache_lock:
        _cache[key] = base
    log.info("Base map %s: %d countries, %d states", key, len(base.countries), len(base.states))
    return base


def load_world_map(url: str = WORLD_ATLAS_URL) -> Optional[BaseMap]:
    return _load("world", url, world_map_from_topology)


def load_us_states(url: str = US_ATLAS_URL) -> Optional[BaseMap]:
    return _load("us", url, us_states_from_topology)


def load_base_map(view: str) -> Optional[BaseMap]:
    """World countries, plus states and borders for the ``us`` view."""
    world = load_world_map()
    if world is None:
        return None
    if view != "us":
        return world
    us = load_us_states()
    if us is None:
        return world
    return BaseMap(
        countries=world.countries,
        states=us.states,
        state_borders=us.state_borders,
        nation=us.nation,
    )


def clear_cache() -> None:
    with _cache_lock:
        _cache.clear()
