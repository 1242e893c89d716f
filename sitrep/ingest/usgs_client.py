"""
USGS earthquake feed client.

Reads the real-time GeoJSON summary feeds (updated every minute):
https://earthquake.usgs.gov/earthquakes/feed/v1.0/geojson.php

Magnitude is kept as reported; the feed sends ``null`` for some
automatic solutions and those events keep ``mag=None`` so the composer
can leave them off the map.

Usage
-----
    from sitrep.ingest.usgs_client import fetch_recent_earthquakes
    quakes = fetch_recent_earthquakes(period="day", min_mag=2.5)
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import requests

from . import fetch_with_retry

log = logging.getLogger(__name__)

_FEED_BASE = "https://earthquake.usgs.gov/earthquakes/feed/v1.0/summary"

_FEEDS = {
    "hour":  f"{_FEED_BASE}/all_hour.geojson",
    "day":   f"{_FEED_BASE}/all_day.geojson",
    "week":  f"{_FEED_BASE}/all_week.geojson",
    "month": f"{_FEED_BASE}/all_month.geojson",
}


@dataclass
class Earthquake:
    """One earthquake event."""
    event_id: str
    time_ms: int            # origin time (ms since epoch)
    lat: float
    lon: float
    depth_km: float
    mag: Optional[float]
    mag_type: str = ""      # e.g. "ml", "mw"
    place: str = ""
    status: str = ""        # "automatic" or "reviewed"
    url: str = ""

    @property
    def time_utc(self) -> str:
        return datetime.fromtimestamp(
            self.time_ms / 1000.0, tz=timezone.utc
        ).strftime("%Y-%m-%dT%H:%M:%SZ")

    def as_payload(self) -> Dict[str, Any]:
        return {
            "id": self.event_id,
            "mag": self.mag,
            "magType": self.mag_type,
            "place": self.place,
            "time": self.time_ms,
            "timeUtc": self.time_utc,
            "lat": self.lat,
            "lon": self.lon,
            "depth": self.depth_km,
            "url": self.url,
        }


def _as_float(value) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def parse_feature(feat: dict) -> Optional[Earthquake]:
    """Parse one GeoJSON feature; None when it has no usable coordinates."""
    try:
        props = feat.get("properties") or {}
        coords = feat["geometry"]["coordinates"]
        return Earthquake(
            event_id=str(feat.get("id", "") or ""),
            time_ms=int(props.get("time") or 0),
            lon=float(coords[0]),
            lat=float(coords[1]),
            depth_km=float(coords[2]) if len(coords) > 2 and coords[2] is not None else 0.0,
            mag=_as_float(props.get("mag")),
            mag_type=props.get("magType", "") or "",
            place=props.get("place", "") or "",
            status=props.get("status", "") or "",
            url=props.get("url", "") or "",
        )
    except (KeyError, IndexError, TypeError, ValueError) as exc:
        log.debug("Failed to parse earthquake feature: %s", exc)
        return None


def fetch_recent_earthquakes(
    period: str = "day",
    min_mag: float = 0.0,
    timeout: float = 15.0,
) -> List[Earthquake]:
    """Recent earthquakes, newest first; empty list on any fetch failure.

    Events with a null magnitude are kept regardless of *min_mag*.
    """
    url = _FEEDS.get(period, _FEEDS["day"])

    try:
        resp = fetch_with_retry(url, timeout=timeout, retries=2)
        data = resp.json()
    except (requests.RequestException, ValueError) as exc:
        log.warning("USGS feed fetch failed: %s", exc)
        return []

    quakes: List[Earthquake] = []
    for feat in data.get("features", []) or []:
        q = parse_feature(feat)
        if q is None:
            continue
        if q.mag is not None and q.mag < min_mag:
            continue
        quakes.append(q)

    quakes.sort(key=lambda q: q.time_ms, reverse=True)
    log.info("USGS %s feed: %d earthquakes (min_mag=%.1f)", period, len(quakes), min_mag)
    return quakes
