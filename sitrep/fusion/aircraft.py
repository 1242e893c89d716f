"""
Aircraft classification for the flight layer.

Uses the US military ICAO24 block (AE0000-AE7FFF) plus callsign prefixes
common to USAF tanker and airlift traffic.  Heuristic only; an unknown
aircraft is ``civil``.
"""
from __future__ import annotations

import math
from typing import Optional

USAF_HEX_START = int("AE0000", 16)
USAF_HEX_END = int("AE7FFF", 16)

TANKER_PREFIXES = (
    "IRON", "SHELL", "TEXAN", "ETHYL", "PEARL", "ARCO", "ESSO",
    "MOBIL", "GULF", "TOPAZ", "PACK", "DOOM", "TREK",
)
AIRLIFT_PREFIXES = ("REACH", "RCH", "CNV", "PAT")
GOVERNMENT_PREFIXES = ("SAM", "EXEC", "AF1", "AF2")

# Heading arrows, clockwise from north in 45° steps
_ARROWS = ("↑", "↗", "→", "↘", "↓", "↙", "←", "↖")
_NO_HEADING = "✈"


def is_us_military_hex(icao24: Optional[str]) -> bool:
    try:
        value = int((icao24 or "").strip(), 16)
    except ValueError:
        return False
    return USAF_HEX_START <= value <= USAF_HEX_END


def classify_aircraft(callsign: Optional[str], country: Optional[str] = None,
                      icao24: Optional[str] = None) -> str:
    """One of ``tanker``, ``military``, ``government`` or ``civil``."""
    cs = (callsign or "").strip().upper()
    # OpenSky reports the registration country; the AE block is US-only
    military = is_us_military_hex(icao24) and country in (None, "", "United States")

    if cs.startswith(TANKER_PREFIXES) or "TANKER" in cs or (military and "KC" in cs):
        return "tanker"
    if cs.startswith(GOVERNMENT_PREFIXES):
        return "government"
    if military or cs.startswith(AIRLIFT_PREFIXES):
        return "military"
    return "civil"


def aircraft_arrow(heading: Optional[float]) -> str:
    if heading is None:
        return _NO_HEADING
    try:
        h = float(heading)
    except (TypeError, ValueError):
        return _NO_HEADING
    if not math.isfinite(h):
        return _NO_HEADING
    return _ARROWS[int(round(h / 45.0)) % 8]
