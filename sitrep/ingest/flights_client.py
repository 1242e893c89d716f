"""
OpenSky Network live aircraft positions.

``states/all`` returns one positional array per aircraft:

    0 icao24  1 callsign  2 origin_country  5 longitude  6 latitude
    7 baro_altitude  8 on_ground  9 velocity  10 true_track

Rows without a position are dropped.

Usage
-----
    from sitrep.ingest.flights_client import fetch_flights
    flights = fetch_flights(bbox=(25.0, 44.0, 40.0, 64.0))   # lamin, lomin, lamax, lomax
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

import requests

from ..config import OPENSKY_STATES_URL
from . import fetch_with_retry

log = logging.getLogger(__name__)


@dataclass
class Flight:
    icao24: str
    callsign: str
    country: str
    lon: float
    lat: float
    altitude_m: Optional[float] = None
    velocity_ms: Optional[float] = None
    heading: Optional[float] = None
    on_ground: bool = False

    def as_payload(self) -> Dict[str, Any]:
        return asdict(self)


def _opt_float(row: Sequence[Any], idx: int) -> Optional[float]:
    if len(row) <= idx or row[idx] is None:
        return None
    try:
        return float(row[idx])
    except (TypeError, ValueError):
        return None


def parse_state(row: Sequence[Any]) -> Optional[Flight]:
    """One ``states`` row to a Flight; None when it has no position."""
    if not isinstance(row, (list, tuple)) or len(row) < 7:
        return None
    lon = _opt_float(row, 5)
    lat = _opt_float(row, 6)
    if lon is None or lat is None:
        return None
    return Flight(
        icao24=str(row[0] or "").strip().lower(),
        callsign=str(row[1] or "").strip(),
        country=str(row[2] or ""),
        lon=lon,
        lat=lat,
        altitude_m=_opt_float(row, 7),
        velocity_ms=_opt_float(row, 9),
        heading=_opt_float(row, 10),
        on_ground=bool(row[8]) if len(row) > 8 else False,
    )


def fetch_flights(
    bbox: Optional[Tuple[float, float, float, float]] = None,
    timeout: float = 20.0,
) -> List[Flight]:
    """Current aircraft states; empty list on any fetch failure.

    *bbox* is (lamin, lomin, lamax, lomax) as OpenSky expects it.
    """
    params = None
    if bbox:
        lamin, lomin, lamax, lomax = bbox
        params = {"lamin": lamin, "lomin": lomin, "lamax": lamax, "lomax": lomax}

    try:
        resp = fetch_with_retry(OPENSKY_STATES_URL, params=params, timeout=timeout, retries=1)
        data = resp.json()
    except (requests.RequestException, ValueError) as exc:
        log.warning("OpenSky fetch failed: %s", exc)
        return []

    states = data.get("states") if isinstance(data, dict) else None
    flights: List[Flight] = []
    for row in states or []:
        flight = parse_state(row)
        if flight is not None:
            flights.append(flight)

    log.info("OpenSky: %d aircraft with position", len(flights))
    return flights
