"""
Named map projections into canvas-percent space.

Every view of the dashboard places overlays as percentages of the canvas
so the container can resize without recomputing entity data.  A view is
one of:

    global    equirectangular, centred on (0, 0), scale width / 2π
    us        Albers USA composite (lower 48 + Alaska + Hawaii insets),
              scale width * 1.3
    mideast   Mercator centred on (42, 28),   scale width * 1.5
    ukraine   Mercator centred on (35, 50),   scale width * 2.2
    taiwan    Mercator centred on (118, 23),  scale width * 1.8

The raw projections run through pyproj on a unit sphere; the scale,
translate and centre offset are then applied the same way the browser
map applies them, so a point lands on the same pixel in both.

Points that cannot be placed come back as ``None``: non-finite input,
coordinates outside the lon/lat domain, projection singularities, points
outside every Albers USA inset, and, for regional views, anything off
the [0, 100]% canvas.  Callers omit those overlays.

Usage
-----
    proj = Projector("mideast", 800, 550)
    pos = proj.project(51.39, 35.69)      # (x%, y%) or None
    project(-77.0, 38.9, "us", 800, 550)  # one-off helper
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from functools import lru_cache
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np
import pyproj

log = logging.getLogger(__name__)

LonLat = Tuple[float, float]
Percent = Tuple[float, float]
Box = Tuple[float, float, float, float]   # x0, y0, x1, y1

VIEW_MODES: Tuple[str, ...] = ("global", "us", "mideast", "ukraine", "taiwan")
REGIONAL_VIEWS = frozenset({"us", "mideast", "ukraine", "taiwan"})

# Unit-sphere geographic CRS: the projected CRSs below share its sphere so
# pyproj applies no datum shift between them.
_LONLAT_SPHERE = "+proj=longlat +R=1 +no_defs"

# view -> (centre lon, centre lat, scale as a multiple of canvas width)
_MERCATOR_VIEWS: Dict[str, Tuple[float, float, float]] = {
    "mideast": (42.0, 28.0, 1.5),
    "ukraine": (35.0, 50.0, 2.2),
    "taiwan": (118.0, 23.0, 1.8),
}

_US_SCALE = 1.3
_EPSILON = 1e-6


@lru_cache(maxsize=None)
def _transformer(proj4: str) -> Callable:
    src = pyproj.CRS.from_proj4(_LONLAT_SPHERE)
    dst = pyproj.CRS.from_proj4(proj4)
    return pyproj.Transformer.from_crs(src, dst, always_xy=True).transform


def _albers(lat_1: float, lat_2: float, lon_0: float) -> str:
    return (
        f"+proj=aea +lat_1={lat_1} +lat_2={lat_2} +lat_0=0 "
        f"+lon_0={lon_0} +R=1 +units=m +no_defs"
    )


@dataclass(frozen=True)
class _SubProjection:
    """One raw projection with its scale, translate, centre and clip box."""

    proj4: str
    scale: float
    tx: float
    ty: float
    center: LonLat
    extent: Optional[Box] = None
    lon_0: Optional[float] = None   # central meridian of a clipped conic

    def raw(self, lon: float, lat: float) -> Optional[Tuple[float, float]]:
        x, y = _transformer(self.proj4)(lon, lat)
        if not (math.isfinite(x) and math.isfinite(y)):
            return None
        return x, y

    def point(self, lon: float, lat: float, clip: bool = True) -> Optional[Tuple[float, float]]:
        """Project to canvas pixels, or None outside the clip extent."""
        r = self.raw(lon, lat)
        c = self.raw(*self.center)
        if r is None or c is None:
            return None
        px = self.tx + self.scale * (r[0] - c[0])
        py = self.ty - self.scale * (r[1] - c[1])
        if clip and self.extent is not None:
            x0, y0, x1, y1 = self.extent
            if not (x0 <= px <= x1 and y0 <= py <= y1):
                return None
        return px, py

    def crosses_seam(self, coords: Sequence[LonLat]) -> bool:
        """True when consecutive vertices straddle the antimeridian of lon_0."""
        if self.lon_0 is None:
            return False
        prev = None
        for lon, _ in coords:
            rel = (lon - self.lon_0 + 180.0) % 360.0 - 180.0
            if prev is not None and abs(rel - prev) > 180.0:
                return True
            prev = rel
        return False


def _build_subprojections(view: str, width: float, height: float) -> List[_SubProjection]:
    x, y = width / 2.0, height / 2.0

    if view == "global":
        return [_SubProjection(
            proj4="+proj=eqc +lat_ts=0 +lat_0=0 +lon_0=0 +R=1 +units=m +no_defs",
            scale=width / (2.0 * math.pi),
            tx=x, ty=y, center=(0.0, 0.0),
        )]

    if view == "us":
        # Albers USA: lower 48 first, then the Alaska and Hawaii insets.
        # Inset offsets and clip boxes are fractions of the lower-48 scale.
        k = width * _US_SCALE
        e = _EPSILON
        lower48 = _SubProjection(
            proj4=_albers(29.5, 45.5, -96.0),
            scale=k, tx=x, ty=y, center=(-96.6, 38.7),
            extent=(x - 0.455 * k, y - 0.238 * k, x + 0.455 * k, y + 0.238 * k),
            lon_0=-96.0,
        )
        alaska = _SubProjection(
            proj4=_albers(55.0, 65.0, -154.0),
            scale=k * 0.35, tx=x - 0.307 * k, ty=y + 0.201 * k,
            center=(-156.0, 58.5),
            extent=(x - 0.425 * k + e, y + 0.120 * k + e,
                    x - 0.214 * k - e, y + 0.234 * k - e),
            lon_0=-154.0,
        )
        hawaii = _SubProjection(
            proj4=_albers(8.0, 18.0, -157.0),
            scale=k, tx=x - 0.205 * k, ty=y + 0.212 * k,
            center=(-160.0, 19.9),
            extent=(x - 0.214 * k + e, y + 0.166 * k + e,
                    x - 0.115 * k - e, y + 0.234 * k - e),
            lon_0=-157.0,
        )
        return [lower48, alaska, hawaii]

    if view in _MERCATOR_VIEWS:
        clon, clat, factor = _MERCATOR_VIEWS[view]
        return [_SubProjection(
            proj4="+proj=merc +lon_0=0 +R=1 +units=m +no_defs",
            scale=width * factor, tx=x, ty=y, center=(clon, clat),
        )]

    raise ValueError(f"Unknown view mode {view!r} (expected one of {VIEW_MODES})")


def _valid_lonlat(lon, lat) -> bool:
    try:
        lon_f = float(lon)
        lat_f = float(lat)
    except (TypeError, ValueError):
        return False
    if not (math.isfinite(lon_f) and math.isfinite(lat_f)):
        return False
    return -180.0 <= lon_f <= 180.0 and -90.0 <= lat_f <= 90.0


class Projector:
    """Projection for one view and canvas size.

    Build a new Projector when the view changes; nothing is re-projected
    incrementally.
    """

    def __init__(self, view: str, width: float, height: float):
        if width <= 0 or height <= 0:
            raise ValueError(f"Canvas size must be positive, got {width}x{height}")
        self.view = view
        self.width = float(width)
        self.height = float(height)
        self.regional = view in REGIONAL_VIEWS
        self._subs = _build_subprojections(view, self.width, self.height)

    def pixels(self, lon: float, lat: float) -> Optional[Tuple[float, float]]:
        """Project to canvas pixels without the regional canvas bound."""
        if not _valid_lonlat(lon, lat):
            return None
        for sub in self._subs:
            p = sub.point(float(lon), float(lat))
            if p is not None:
                return p
        return None

    def project_unclipped(self, lon: float, lat: float) -> Optional[Percent]:
        p = self.pixels(lon, lat)
        if p is None:
            return None
        return self._percent(p)

    def project(self, lon: float, lat: float) -> Optional[Percent]:
        """Project to (x%, y%); None when the point cannot be placed."""
        pos = self.project_unclipped(lon, lat)
        if pos is None:
            return None
        if self.regional and not on_canvas(pos):
            return None
        return pos

    def project_path(self, coords: Sequence[LonLat]) -> List[Percent]:
        """Project a ring or polyline, dropping vertices that fail."""
        out: List[Percent] = []
        for lon, lat in coords:
            pos = self.project_unclipped(lon, lat)
            if pos is not None:
                out.append(pos)
        return out

    def project_ring_parts(self, coords: Sequence[LonLat]) -> List[Tuple[List[Percent], Optional[Box]]]:
        """Project a polygon ring once per sub-projection.

        Each part is the whole ring through one sub-projection, paired with
        that sub-projection's clip box in percent (None when unbounded).
        Callers clip every part to its own box, so the Albers USA insets
        never share a ring with the lower 48.  A ring that straddles a
        conic's seam is left out of that sub-projection.
        """
        coords = [(float(lon), float(lat)) for lon, lat in coords if _valid_lonlat(lon, lat)]
        parts: List[Tuple[List[Percent], Optional[Box]]] = []
        for sub in self._subs:
            if sub.crosses_seam(coords):
                continue
            ring: List[Percent] = []
            for lon, lat in coords:
                p = sub.point(lon, lat, clip=False)
                if p is not None:
                    ring.append(self._percent(p))
            if len(ring) < 3:
                continue
            bounds = None
            if sub.extent is not None:
                x0, y0 = self._percent(sub.extent[:2])
                x1, y1 = self._percent(sub.extent[2:])
                bounds = (x0, y0, x1, y1)
            parts.append((ring, bounds))
        return parts

    def _percent(self, p: Sequence[float]) -> Percent:
        return p[0] / self.width * 100.0, p[1] / self.height * 100.0


def on_canvas(pos: Percent) -> bool:
    return 0.0 <= pos[0] <= 100.0 and 0.0 <= pos[1] <= 100.0


@lru_cache(maxsize=32)
def _cached_projector(view: str, width: float, height: float) -> Projector:
    return Projector(view, width, height)


def project(
    lon: float,
    lat: float,
    view: str,
    width: float,
    height: float,
) -> Optional[Percent]:
    """One-off projection of (lon, lat) into (x%, y%) for *view*."""
    return _cached_projector(view, float(width), float(height)).project(lon, lat)


# ── Line geometry helpers ─────────────────────────────────────────────

def graticule_lines(step: float = 30.0, sample: float = 2.5) -> List[List[LonLat]]:
    """Meridians and parallels every *step* degrees, as lon/lat polylines.

    Meridians span ±80° latitude; parallels run the full longitude range.
    """
    lines: List[List[LonLat]] = []
    lats = np.arange(-80.0, 80.0 + sample / 2, sample)
    lons = np.arange(-180.0, 180.0 + sample / 2, sample)

    lon = -180.0
    while lon < 180.0:
        lines.append([(lon, float(la)) for la in lats])
        lon += step

    lat = math.ceil(-80.0 / step) * step
    while lat <= 80.0:
        lines.append([(float(lo), lat) for lo in lons])
        lat += step
    return lines


_BASIS = np.array([
    [-1.0, 3.0, -3.0, 1.0],
    [3.0, -6.0, 3.0, 0.0],
    [-3.0, 0.0, 3.0, 0.0],
    [1.0, 4.0, 1.0, 0.0],
]) / 6.0


def basis_curve(points: Sequence[Tuple[float, float]], samples: int = 8) -> List[Tuple[float, float]]:
    """Uniform cubic B-spline through *points*, clamped to both ends.

    Endpoints are tripled so the curve starts and ends exactly on the
    first and last control points.  Fewer than three points are returned
    unchanged.
    """
    pts = np.asarray(points, dtype=float)
    if len(pts) < 3:
        return [tuple(p) for p in pts.tolist()]

    padded = np.vstack([pts[:1], pts[:1], pts, pts[-1:], pts[-1:]])
    t = np.linspace(0.0, 1.0, samples, endpoint=False)
    powers = np.stack([t ** 3, t ** 2, t, np.ones_like(t)], axis=1)   # (samples, 4)
    weights = powers @ _BASIS                                          # (samples, 4)

    segments = []
    for i in range(len(padded) - 3):
        segments.append(weights @ padded[i:i + 4])
    curve = np.vstack(segments + [pts[-1:]])
    return [(float(x), float(y)) for x, y in curve]
