"""
Geographic entity data model.

Every point, zone or line the map can draw is a frozen dataclass derived
from :class:`GeoEntity`.  The variant is carried by the ``kind`` class
attribute, which the scorer and composer dispatch on instead of on type
names.

Example
-------
    spot = Hotspot(id="tehran", name="Tehran", lat=35.7, lon=51.4,
                   keywords=("tehran", "iran"))
    spot.kind            # EntityKind.HOTSPOT
    spot.as_payload()    # JSON-ready dict for popups
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, Tuple


class EntityKind(Enum):
    HOTSPOT = "hotspot"
    CONFLICT_ZONE = "conflict_zone"
    MILITARY_BASE = "military_base"
    NUCLEAR_FACILITY = "nuclear_facility"
    CHOKEPOINT = "chokepoint"
    CYBER_REGION = "cyber_region"
    CUSTOM_MONITOR = "custom_monitor"
    CITY = "city"
    REGIONAL_HOTSPOT = "regional_hotspot"
    NEWS_REGION = "news_region"
    CABLE = "cable"


THEATERS = ("global", "us", "mideast", "ukraine", "taiwan")


def normalize_keywords(keywords) -> Tuple[str, ...]:
    """Lowercase, strip and de-duplicate keywords, keeping first-seen order."""
    if isinstance(keywords, str):
        keywords = (keywords,)
    out = []
    for kw in keywords or ():
        kw = str(kw).strip().lower()
        if kw and kw not in out:
            out.append(kw)
    return tuple(out)


@dataclass(frozen=True)
class GeoEntity:
    """Fields shared by every map entity."""

    id: str
    name: str
    lat: float
    lon: float
    keywords: Tuple[str, ...] = ()
    theater: str = "global"     # "global" or one regional view

    kind: ClassVar[EntityKind]

    def __post_init__(self):
        object.__setattr__(self, "keywords", normalize_keywords(self.keywords))

    def as_payload(self) -> Dict[str, Any]:
        data = asdict(self)
        data["kind"] = self.kind.value
        return data


@dataclass(frozen=True)
class Hotspot(GeoEntity):
    """Global intel hotspot, scored against the news corpus."""
    subtext: str = ""
    description: str = ""
    agencies: Tuple[str, ...] = ()
    status: str = ""

    kind: ClassVar[EntityKind] = EntityKind.HOTSPOT


@dataclass(frozen=True)
class ConflictZone(GeoEntity):
    """Polygonal conflict area; ``lat``/``lon`` is the label position."""
    coords: Tuple[Tuple[float, float], ...] = ()   # (lon, lat) ring
    intensity: str = "medium"                      # "high", "medium", "low"
    parties: Tuple[str, ...] = ()
    started: str = ""
    description: str = ""

    kind: ClassVar[EntityKind] = EntityKind.CONFLICT_ZONE


@dataclass(frozen=True)
class MilitaryBase(GeoEntity):
    base_type: str = "usa"     # "usa", "nato", "china", "russia"

    kind: ClassVar[EntityKind] = EntityKind.MILITARY_BASE


@dataclass(frozen=True)
class NuclearFacility(GeoEntity):
    facility_type: str = "power"   # "power", "weapons", "enrichment", "research", "disaster"

    kind: ClassVar[EntityKind] = EntityKind.NUCLEAR_FACILITY

    @property
    def is_weapons(self) -> bool:
        return self.facility_type in ("weapons", "enrichment")


@dataclass(frozen=True)
class Chokepoint(GeoEntity):
    """Maritime transit point; only alert presence is scored."""
    description: str = ""
    traffic: str = ""

    kind: ClassVar[EntityKind] = EntityKind.CHOKEPOINT


@dataclass(frozen=True)
class CyberRegion(GeoEntity):
    group: str = ""
    aka: str = ""
    sponsor: str = ""
    description: str = ""
    targets: Tuple[str, ...] = ()

    kind: ClassVar[EntityKind] = EntityKind.CYBER_REGION


@dataclass(frozen=True)
class CustomMonitor(GeoEntity):
    """User-defined keyword monitor pinned to a location."""
    color: str = "#00ff88"

    kind: ClassVar[EntityKind] = EntityKind.CUSTOM_MONITOR


@dataclass(frozen=True)
class CityMarker(GeoEntity):
    city_type: str = "regional"    # "capital", "major", "regional"
    color: str = ""

    kind: ClassVar[EntityKind] = EntityKind.CITY


@dataclass(frozen=True)
class RegionalHotspot(GeoEntity):
    """Theater hotspot with a fixed severity level."""
    level: str = "low"             # "critical", "high", "elevated", "low"
    icon: str = ""
    category: str = ""
    description: str = ""

    kind: ClassVar[EntityKind] = EntityKind.REGIONAL_HOTSPOT


@dataclass(frozen=True)
class NewsRegion(GeoEntity):
    """Aggregate region for the news-density heat blobs."""
    radius: float = 60.0           # base blob size in pixels

    kind: ClassVar[EntityKind] = EntityKind.NEWS_REGION


@dataclass(frozen=True)
class UnderseaCable(GeoEntity):
    """Cable route; ``lat``/``lon`` is the first landing point."""
    points: Tuple[Tuple[float, float], ...] = ()   # (lon, lat) control points
    major: bool = False

    kind: ClassVar[EntityKind] = EntityKind.CABLE
