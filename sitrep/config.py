"""
Runtime configuration for the activity engine.

Values are module constants; a handful can be overridden from the
environment so a kiosk or test run can change them without code edits:

    SITREP_REFRESH_S       refresh cycle interval in seconds (default 300)
    SITREP_CANVAS_WIDTH    canvas width used by the CLI (default 800)
    SITREP_CANVAS_HEIGHT   canvas height used by the CLI (default 550)
    SITREP_CATALOG_FILE    JSON file overriding the embedded catalogs
    SITREP_HTTP_TIMEOUT    HTTP timeout for feed clients in seconds (default 20)
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, Optional

log = logging.getLogger(__name__)


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        log.warning("Ignoring %s=%r (not a number), using %s", name, raw, default)
        return default


def _env_path(name: str) -> Optional[Path]:
    raw = os.environ.get(name)
    return Path(raw) if raw else None


# ── Paths ─────────────────────────────────────────────────────────────

ROOT_DIR = Path(__file__).resolve().parent.parent
LOG_DIR = ROOT_DIR / "logs"
CATALOG_FILE: Optional[Path] = _env_path("SITREP_CATALOG_FILE")

# ── Refresh cycle ─────────────────────────────────────────────────────

REFRESH_INTERVAL_S = _env_float("SITREP_REFRESH_S", 300.0)  # 5 min
HTTP_TIMEOUT_S = _env_float("SITREP_HTTP_TIMEOUT", 20.0)

# ── Canvas (fallback when the container reports no size) ─────────────

CANVAS_WIDTH = int(_env_float("SITREP_CANVAS_WIDTH", 800))
CANVAS_HEIGHT = int(_env_float("SITREP_CANVAS_HEIGHT", 550))

# ── Composition caps ──────────────────────────────────────────────────

MAX_QUAKES = 10
MAJOR_QUAKE_MAG = 6.0
MAX_FLIGHTS = 200

# ── External data sources ─────────────────────────────────────────────

WORLD_ATLAS_URL = "https://cdn.jsdelivr.net/npm/world-atlas@2/countries-110m.json"
US_ATLAS_URL = "https://cdn.jsdelivr.net/npm/us-atlas@3/states-10m.json"
OPENSKY_STATES_URL = "https://opensky-network.org/api/states/all"
USGS_FEED_PERIOD = "day"
SATELLITE_TILES_URL = (
    "https://server.arcgisonline.com/ArcGIS/rest/services/"
    "World_Imagery/MapServer/tile/{z}/{y}/{x}"
)
SATELLITE_ATTRIBUTION = "Imagery: ESRI World Imagery"

# ── Layer toggles ─────────────────────────────────────────────────────

DEFAULT_LAYERS: Dict[str, bool] = {
    "conflicts": True,
    "bases": True,
    "nuclear": True,
    "cables": True,
    "sanctions": True,
    "density": True,
    "flights": False,
    "satellite": False,
}
