"""
Static entity catalogs for the activity map.

Hotspots, conflict zones, bases, nuclear sites, cables, chokepoints,
cyber regions, news-density regions and the per-theater city/hotspot
lists are embedded here as configuration data; nothing is fetched at
runtime.  A JSON file can replace any of the lists (see
:func:`load_catalogs`).

Usage
-----
    from sitrep.geo.catalogs import load_catalogs
    catalogs = load_catalogs()
    cities, hotspots = catalogs.regional("ukraine")
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple, Type

from .entities import (
    ConflictZone,
    CityMarker,
    Chokepoint,
    CustomMonitor,
    CyberRegion,
    GeoEntity,
    Hotspot,
    MilitaryBase,
    NewsRegion,
    NuclearFacility,
    RegionalHotspot,
    UnderseaCable,
)

log = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════
# GLOBAL CATALOGS
# ═══════════════════════════════════════════════════════════════════════

# ── Intel hotspots ───────────────────────────────────────────────────

INTEL_HOTSPOTS: Tuple[Hotspot, ...] = (
    Hotspot("dc", "DC", 38.9, -77.0,
            keywords=("pentagon", "white house", "washington", "congress", "biden", "trump"),
            subtext="Pentagon Pizza Index",
            description="US political center: White House, Pentagon, Capitol.",
            agencies=("Pentagon", "CIA", "NSA", "State Dept"),
            status="Monitoring"),
    Hotspot("moscow", "Moscow", 55.75, 37.6,
            keywords=("moscow", "kremlin", "putin", "russia"),
            subtext="Kremlin Activity",
            description="Kremlin, Russian military command, sanctions hub.",
            agencies=("FSB", "GRU", "SVR"),
            status="Elevated"),
    Hotspot("beijing", "Beijing", 39.9, 116.4,
            keywords=("beijing", "xi jinping", "china", "ccp", "pla"),
            subtext="PLA/MSS Activity",
            description="CCP headquarters, US-China tensions, tech rivalry.",
            agencies=("MSS", "PLA"),
            status="Elevated"),
    Hotspot("kyiv", "Kyiv", 50.45, 30.5,
            keywords=("kyiv", "kiev", "ukraine", "zelensky"),
            subtext="Conflict Zone",
            description="Active conflict zone, Russian invasion ongoing.",
            agencies=("SBU", "GUR"),
            status="High Activity"),
    Hotspot("taipei", "Taipei", 25.03, 121.5,
            keywords=("taipei", "taiwan", "tsmc"),
            subtext="Strait Watch",
            description="Taiwan Strait tensions, semiconductor supply chain.",
            agencies=("NSB",),
            status="Elevated"),
    Hotspot("tehran", "Tehran", 35.7, 51.4,
            keywords=("tehran", "iran", "khamenei", "irgc"),
            subtext="IRGC Activity",
            description="Protests, regime instability, nuclear program.",
            agencies=("IRGC", "MOIS"),
            status="High Activity"),
    Hotspot("telaviv", "Tel Aviv", 32.07, 34.78,
            keywords=("israel", "idf", "netanyahu", "tel aviv", "gaza"),
            subtext="Mossad/IDF",
            description="Israel-Gaza conflict, active military operations.",
            agencies=("Mossad", "IDF", "Shin Bet"),
            status="High Activity"),
    Hotspot("london", "London", 51.5, -0.12,
            keywords=("london", "uk", "britain", "starmer", "mi6"),
            subtext="GCHQ/MI6",
            description="Financial center, Five Eyes, NATO ally.",
            agencies=("MI6", "GCHQ"),
            status="Monitoring"),
    Hotspot("brussels", "Brussels", 50.85, 4.35,
            keywords=("nato", "brussels", "european union"),
            subtext="NATO HQ",
            description="EU/NATO headquarters, European policy.",
            agencies=("NATO",),
            status="Monitoring"),
    Hotspot("pyongyang", "Pyongyang", 39.03, 125.75,
            keywords=("north korea", "pyongyang", "kim jong"),
            subtext="Missile Tests",
            description="North Korea nuclear threat, missile tests.",
            agencies=("RGB",),
            status="Elevated"),
    Hotspot("riyadh", "Riyadh", 24.7, 46.7,
            keywords=("saudi", "riyadh", "mbs", "opec"),
            subtext="Gulf Watch",
            description="Saudi oil, OPEC+, Yemen conflict, regional power.",
            agencies=("GIP",),
            status="Monitoring"),
    Hotspot("delhi", "Delhi", 28.6, 77.2,
            keywords=("india", "delhi", "modi"),
            subtext="South Asia",
            description="Rising power, China border tensions.",
            agencies=("RAW",),
            status="Monitoring"),
    Hotspot("singapore", "Singapore", 1.35, 103.82,
            keywords=("singapore", "asean"),
            subtext="Shipping Hub",
            description="Shipping chokepoint, Asian finance hub.",
            status="Monitoring"),
    Hotspot("tokyo", "Tokyo", 35.68, 139.76,
            keywords=("japan", "tokyo", "ishiba"),
            subtext="Pacific Ally",
            description="US ally, regional security, economic power.",
            status="Monitoring"),
    Hotspot("caracas", "Caracas", 10.5, -66.9,
            keywords=("venezuela", "caracas", "maduro"),
            subtext="Venezuela Crisis",
            description="Maduro regime, US sanctions, humanitarian emergency.",
            agencies=("SEBIN",),
            status="High Activity"),
    Hotspot("nuuk", "Nuuk", 64.18, -51.72,
            keywords=("greenland", "nuuk", "arctic"),
            subtext="Arctic Dispute",
            description="US acquisition interest, Arctic strategy, Denmark tensions.",
            status="Elevated"),
)

# ── Conflict zones ───────────────────────────────────────────────────

CONFLICT_ZONES: Tuple[ConflictZone, ...] = (
    ConflictZone("ukraine", "Ukraine Conflict", 48.5, 35.0,
                 keywords=("ukraine", "donbas", "zaporizhzhia"),
                 coords=((30, 52), (40, 52), (40, 45), (30, 45), (30, 52)),
                 intensity="high", parties=("Russia", "Ukraine"), started="2022-02-24",
                 description="Full-scale Russian invasion and front-line fighting."),
    ConflictZone("gaza", "Gaza", 31.5, 34.4,
                 keywords=("gaza", "hamas", "rafah"),
                 coords=((34, 32), (35, 32), (35, 31), (34, 31), (34, 32)),
                 intensity="high", parties=("Israel", "Hamas"), started="2023-10-07",
                 description="Israeli military operations in the Gaza Strip."),
    ConflictZone("taiwan-strait", "Taiwan Strait", 25.0, 119.5,
                 keywords=("taiwan strait", "pla navy"),
                 coords=((117, 28), (122, 28), (122, 22), (117, 22), (117, 28)),
                 intensity="medium", parties=("China", "Taiwan"),
                 description="PLA exercises and gray-zone pressure."),
    ConflictZone("yemen", "Yemen / Red Sea", 15.5, 48.0,
                 keywords=("yemen", "houthi", "red sea"),
                 coords=((42, 19), (54, 19), (54, 12), (42, 12), (42, 19)),
                 intensity="high", parties=("Houthis", "Saudi coalition", "US/UK"),
                 started="2014-09-16",
                 description="Civil war and Houthi attacks on shipping."),
    ConflictZone("sudan", "Sudan Civil War", 15.5, 30.0,
                 keywords=("sudan", "khartoum", "rsf", "darfur"),
                 coords=((22, 23), (38, 23), (38, 8), (22, 8), (22, 23)),
                 intensity="high", parties=("SAF", "RSF"), started="2023-04-15",
                 description="War between the army and the Rapid Support Forces."),
    ConflictZone("myanmar", "Myanmar", 19.0, 96.5,
                 keywords=("myanmar", "burma", "junta"),
                 coords=((92, 28), (101, 28), (101, 10), (92, 10), (92, 28)),
                 intensity="medium", parties=("Junta", "Resistance forces"), started="2021-02-01",
                 description="Post-coup civil war."),
)

# ── Military bases (id, name, lat, lon, type) ────────────────────────

_MILITARY_BASES = [
    ("ramstein",     "Ramstein",      49.4,   7.6,  "usa"),
    ("diego-garcia", "Diego Garcia",  -7.3,  72.4,  "usa"),
    ("okinawa",      "Okinawa",       26.5, 127.9,  "usa"),
    ("guam",         "Guam",          13.5, 144.8,  "usa"),
    ("djibouti",     "Djibouti",      11.5,  43.1,  "usa"),
    ("al-udeid",     "Al Udeid",      25.1,  51.3,  "usa"),
    ("kaliningrad",  "Kaliningrad",   54.7,  20.5,  "russia"),
    ("sevastopol",   "Sevastopol",    44.6,  33.5,  "russia"),
    ("tartus",       "Tartus",        34.9,  35.9,  "russia"),
    ("hainan",       "Hainan",        18.2, 109.5,  "china"),
    ("djibouti-pla", "Doraleh (PLA)", 11.6,  43.0,  "china"),
    ("incirlik",     "Incirlik",      37.0,  35.4,  "nato"),
]

MILITARY_BASES: Tuple[MilitaryBase, ...] = tuple(
    MilitaryBase(bid, name, lat, lon, base_type=btype)
    for bid, name, lat, lon, btype in _MILITARY_BASES
)

# ── Nuclear facilities (id, name, lat, lon, type) ────────────────────

_NUCLEAR_FACILITIES = [
    ("natanz",       "Natanz",        33.7,  51.7,  "enrichment"),
    ("fordow",       "Fordow",        34.9,  51.0,  "enrichment"),
    ("yongbyon",     "Yongbyon",      39.8, 125.8,  "weapons"),
    ("dimona",       "Dimona",        31.0,  35.1,  "weapons"),
    ("bushehr",      "Bushehr",       28.8,  50.9,  "power"),
    ("zaporizhzhia", "Zaporizhzhia",  47.5,  34.6,  "power"),
    ("chernobyl",    "Chernobyl",     51.4,  30.1,  "disaster"),
    ("fukushima",    "Fukushima",     37.4, 141.0,  "disaster"),
]

NUCLEAR_FACILITIES: Tuple[NuclearFacility, ...] = tuple(
    NuclearFacility(fid, name, lat, lon, facility_type=ftype)
    for fid, name, lat, lon, ftype in _NUCLEAR_FACILITIES
)

# ── Undersea cables (control points as lon, lat) ─────────────────────

UNDERSEA_CABLES: Tuple[UnderseaCable, ...] = (
    UnderseaCable("transatlantic", "Transatlantic (MAREA)", 40.7, -74.0,
                  points=((-74.0, 40.7), (-50.0, 45.0), (-20.0, 47.0), (-5.5, 50.1)),
                  major=True),
    UnderseaCable("sea-me-we", "SEA-ME-WE 5", 43.3, 5.4,
                  points=((5.4, 43.3), (32.5, 31.0), (43.3, 12.5), (72.9, 19.1),
                          (80.0, 7.0), (103.8, 1.3)),
                  major=True),
    UnderseaCable("transpacific", "Trans-Pacific (FASTER)", 33.7, -118.2,
                  points=((-118.2, 33.7), (-150.0, 38.0), (170.0, 40.0), (139.8, 35.5)),
                  major=True),
    UnderseaCable("asia-pacific", "Asia-Pacific Gateway", 1.3, 103.8,
                  points=((103.8, 1.3), (114.2, 22.3), (121.5, 25.0), (139.8, 35.5))),
    UnderseaCable("australia", "Australia-Singapore", -33.9, 151.2,
                  points=((151.2, -33.9), (130.0, -20.0), (115.0, -10.0), (103.8, 1.3))),
    UnderseaCable("americas", "Americas II", 25.8, -80.2,
                  points=((-80.2, 25.8), (-66.0, 18.0), (-50.0, 5.0), (-38.5, -12.9))),
)

# ── Sanctioned countries (ISO numeric id -> severity) ────────────────

SANCTIONED_COUNTRIES: Dict[str, str] = {
    "364": "severe",     # Iran
    "408": "severe",     # North Korea
    "760": "severe",     # Syria
    "192": "severe",     # Cuba
    "643": "high",       # Russia
    "862": "high",       # Venezuela
    "112": "moderate",   # Belarus
    "104": "moderate",   # Myanmar
    "729": "moderate",   # Sudan
    "728": "low",        # South Sudan
}

# ── ISO 3166 numeric -> alpha-3 (world-atlas ids are numeric) ─────────

ISO_NUMERIC_TO_ISO3: Dict[str, str] = {
    # Middle East / South-West Asia
    "682": "SAU", "784": "ARE", "634": "QAT", "414": "KWT", "048": "BHR",
    "512": "OMN", "364": "IRN", "368": "IRQ", "760": "SYR", "422": "LBN",
    "400": "JOR", "376": "ISR", "275": "PSE", "887": "YEM", "818": "EGY",
    "792": "TUR", "196": "CYP", "004": "AFG", "586": "PAK",
    # Eastern Europe
    "804": "UKR", "643": "RUS", "112": "BLR", "616": "POL", "642": "ROU",
    "498": "MDA", "348": "HUN", "703": "SVK", "440": "LTU", "428": "LVA",
    "233": "EST", "246": "FIN",
    # East / South-East Asia
    "156": "CHN", "158": "TWN", "608": "PHL", "392": "JPN", "704": "VNM",
    "458": "MYS", "410": "KOR", "360": "IDN", "096": "BRN", "408": "PRK",
    "104": "MMR", "764": "THA", "116": "KHM", "418": "LAO", "496": "MNG",
    # Elsewhere
    "840": "USA", "124": "CAN", "484": "MEX", "192": "CUB", "862": "VEN",
    "729": "SDN", "728": "SSD", "356": "IND", "826": "GBR", "250": "FRA",
    "276": "DEU", "380": "ITA", "724": "ESP", "076": "BRA", "036": "AUS",
    "710": "ZAF", "566": "NGA", "231": "ETH", "180": "COD", "268": "GEO",
    "051": "ARM", "031": "AZE", "398": "KAZ", "795": "TKM", "860": "UZB",
    "304": "GRL", "578": "NOR", "752": "SWE", "300": "GRC", "100": "BGR",
}


def iso3_for(numeric_id) -> str:
    """Alpha-3 code for a world-atlas id, or "" when unknown."""
    if numeric_id is None:
        return ""
    key = str(numeric_id).strip()
    if key.isdigit():
        key = key.zfill(3)
    return ISO_NUMERIC_TO_ISO3.get(key, "")


# ── Shipping chokepoints ─────────────────────────────────────────────

SHIPPING_CHOKEPOINTS: Tuple[Chokepoint, ...] = (
    Chokepoint("suez", "Suez", 30.0, 32.5,
               keywords=("suez",),
               description="Suez Canal: Europe-Asia route.", traffic="12% of global trade"),
    Chokepoint("panama", "Panama", 9.1, -79.7,
               keywords=("panama canal",),
               description="Pacific-Atlantic link.", traffic="5% of global trade"),
    Chokepoint("hormuz", "Hormuz", 26.5, 56.5,
               keywords=("hormuz", "persian gulf"),
               description="Persian Gulf exit.", traffic="21% of global oil"),
    Chokepoint("malacca", "Malacca", 2.5, 101.0,
               keywords=("malacca",),
               description="China supply line.", traffic="25% of global trade"),
    Chokepoint("bab-el-mandeb", "Bab el-Mandeb", 12.5, 43.3,
               keywords=("bab el-mandeb", "red sea", "houthi"),
               description="Red Sea gateway, Houthi threat zone.", traffic="10% of global trade"),
    Chokepoint("gibraltar", "Gibraltar", 36.0, -5.5,
               keywords=("gibraltar",),
               description="Mediterranean access."),
    Chokepoint("bosporus", "Bosporus", 41.1, 29.0,
               keywords=("bosporus", "bosphorus", "black sea"),
               description="Black Sea access, Russian exports."),
)

# ── Cyber threat regions ─────────────────────────────────────────────

CYBER_REGIONS: Tuple[CyberRegion, ...] = (
    CyberRegion("cyber-russia", "Russia", 55.0, 45.0, group="APT28", aka="Fancy Bear",
                sponsor="GRU", description="Election interference, espionage against NATO.",
                targets=("Government", "Defense", "Elections")),
    CyberRegion("cyber-china", "China", 33.0, 110.0, group="APT41", aka="Double Dragon",
                sponsor="MSS", description="State espionage and financially motivated intrusions.",
                targets=("Telecom", "Healthcare", "Semiconductors")),
    CyberRegion("cyber-nk", "North Korea", 40.3, 127.5, group="Lazarus", aka="Hidden Cobra",
                sponsor="RGB", description="Cryptocurrency theft and destructive attacks.",
                targets=("Crypto exchanges", "Banks")),
    CyberRegion("cyber-iran", "Iran", 32.0, 53.0, group="APT33", aka="Elfin",
                sponsor="IRGC", description="Energy-sector intrusions and wipers.",
                targets=("Energy", "Aviation")),
)

# ── News density regions ─────────────────────────────────────────────

NEWS_REGIONS: Tuple[NewsRegion, ...] = (
    NewsRegion("us", "United States", 39.0, -98.0, radius=80,
               keywords=("us", "america", "washington", "trump", "congress")),
    NewsRegion("europe", "Europe", 50.0, 10.0, radius=70,
               keywords=("europe", "eu", "germany", "france", "uk", "nato")),
    NewsRegion("middle-east", "Middle East", 30.0, 45.0, radius=70,
               keywords=("israel", "iran", "gaza", "syria", "saudi", "yemen")),
    NewsRegion("russia", "Russia", 58.0, 60.0, radius=80,
               keywords=("russia", "putin", "moscow", "kremlin")),
    NewsRegion("china", "China", 35.0, 105.0, radius=75,
               keywords=("china", "beijing", "xi", "taiwan")),
    NewsRegion("africa", "Africa", 5.0, 20.0, radius=70,
               keywords=("africa", "sudan", "nigeria", "ethiopia", "congo")),
    NewsRegion("latam", "Latin America", -10.0, -60.0, radius=70,
               keywords=("venezuela", "brazil", "mexico", "argentina", "colombia")),
)


# ═══════════════════════════════════════════════════════════════════════
# REGIONAL CATALOGS: (id, name, lat, lon, type, keywords)
# ═══════════════════════════════════════════════════════════════════════

# ── US ───────────────────────────────────────────────────────────────

_US_CITIES = [
    ("washington",    "Washington DC", 38.9072,  -77.0369, "capital", ("washington", "white house", "capitol")),
    ("new-york",      "New York",      40.7128,  -74.0060, "major",   ("new york", "nyc", "wall street")),
    ("los-angeles",   "Los Angeles",   34.0522, -118.2437, "major",   ("los angeles", "la ")),
    ("chicago",       "Chicago",       41.8781,  -87.6298, "major",   ("chicago",)),
    ("houston",       "Houston",       29.7604,  -95.3698, "major",   ("houston",)),
    ("san-francisco", "San Francisco", 37.7749, -122.4194, "major",   ("san francisco", "silicon valley")),
    ("miami",         "Miami",         25.7617,  -80.1918, "regional", ("miami",)),
    ("seattle",       "Seattle",       47.6062, -122.3321, "regional", ("seattle",)),
    ("atlanta",       "Atlanta",       33.7490,  -84.3880, "regional", ("atlanta",)),
    ("anchorage",     "Anchorage",     61.2181, -149.9003, "regional", ("anchorage", "alaska")),
    ("honolulu",      "Honolulu",      21.3069, -157.8583, "regional", ("honolulu", "hawaii")),
]

US_HOTSPOTS: Tuple[RegionalHotspot, ...] = (
    RegionalHotspot("us-border", "Southern Border", 31.7, -106.4, theater="us",
                    keywords=("border", "migrant", "ice raid", "immigration"),
                    level="high", icon="⚠", category="Immigration",
                    description="Border enforcement and migration flows."),
    RegionalHotspot("us-capitol", "Capitol Hill", 38.89, -77.01, theater="us",
                    keywords=("shutdown", "congress", "senate", "house vote"),
                    level="elevated", icon="★", category="Politics",
                    description="Budget fights and legislative deadlines."),
    RegionalHotspot("us-wallst", "Wall Street", 40.706, -74.009, theater="us",
                    keywords=("wall street", "stocks", "fed", "recession"),
                    level="elevated", icon="$", category="Finance",
                    description="Market stress and monetary policy."),
    RegionalHotspot("us-gulf", "Gulf Coast", 29.3, -90.0, theater="us",
                    keywords=("hurricane", "gulf coast", "refinery"),
                    level="low", icon="🌀", category="Infrastructure",
                    description="Energy infrastructure and storm exposure."),
)

# ── Middle East ──────────────────────────────────────────────────────

_MIDEAST_CITIES = [
    ("riyadh",    "Riyadh",    24.7136, 46.6753, "capital", ("riyadh", "saudi")),
    ("tehran",    "Tehran",    35.6892, 51.3890, "capital", ("tehran", "iran")),
    ("cairo",     "Cairo",     30.0444, 31.2357, "capital", ("cairo", "egypt")),
    ("ankara",    "Ankara",    39.9334, 32.8597, "capital", ("ankara", "turkey")),
    ("baghdad",   "Baghdad",   33.3152, 44.3661, "capital", ("baghdad", "iraq")),
    ("damascus",  "Damascus",  33.5138, 36.2765, "capital", ("damascus", "syria")),
    ("jerusalem", "Jerusalem", 31.7683, 35.2137, "capital", ("jerusalem",)),
    ("tel-aviv",  "Tel Aviv",  32.0853, 34.7818, "major",   ("tel aviv", "israel")),
    ("dubai",     "Dubai",     25.2048, 55.2708, "major",   ("dubai", "uae")),
    ("doha",      "Doha",      25.2854, 51.5310, "capital", ("doha", "qatar")),
    ("sanaa",     "Sana'a",    15.3694, 44.1910, "capital", ("sanaa", "yemen")),
]

MIDEAST_HOTSPOTS: Tuple[RegionalHotspot, ...] = (
    RegionalHotspot("me-gaza", "Gaza Strip", 31.4, 34.4, theater="mideast",
                    keywords=("gaza", "hamas", "rafah"),
                    level="critical", icon="💥", category="Conflict",
                    description="Ongoing military operations."),
    RegionalHotspot("me-natanz", "Natanz", 33.72, 51.73, theater="mideast",
                    keywords=("natanz", "enrichment", "iaea"),
                    level="high", icon="☢", category="Nuclear",
                    description="Iranian enrichment site."),
    RegionalHotspot("me-lebanon", "South Lebanon", 33.27, 35.5, theater="mideast",
                    keywords=("hezbollah", "lebanon", "litani"),
                    level="high", icon="⚠", category="Conflict",
                    description="Israel-Hezbollah border front."),
    RegionalHotspot("me-redsea", "Red Sea Corridor", 14.5, 42.5, theater="mideast",
                    keywords=("red sea", "houthi", "shipping attack"),
                    level="high", icon="⚓", category="Maritime",
                    description="Houthi strikes on commercial shipping."),
    RegionalHotspot("me-hormuz", "Strait of Hormuz", 26.6, 56.3, theater="mideast",
                    keywords=("hormuz", "tanker seized"),
                    level="elevated", icon="⚓", category="Maritime",
                    description="Oil transit chokepoint."),
)

# ── Ukraine ──────────────────────────────────────────────────────────

_UKRAINE_CITIES = [
    ("kyiv",       "Kyiv",       50.4501, 30.5234, "capital", ("kyiv", "kiev")),
    ("kharkiv",    "Kharkiv",    49.9935, 36.2304, "major",   ("kharkiv", "kharkov")),
    ("odesa",      "Odesa",      46.4825, 30.7233, "major",   ("odesa", "odessa")),
    ("donetsk",    "Donetsk",    48.0159, 37.8029, "major",   ("donetsk", "donbas")),
    ("moscow",     "Moscow",     55.7558, 37.6173, "capital", ("moscow", "kremlin", "putin")),
    ("minsk",      "Minsk",      53.9045, 27.5615, "capital", ("minsk", "belarus")),
    ("sevastopol", "Sevastopol", 44.6167, 33.5254, "major",   ("sevastopol", "crimea")),
]

_UKRAINE_CITY_COLORS = {
    "moscow": "#ff6666",
    "minsk": "#ffaa44",
    "kyiv": "#44aaff", "kharkiv": "#44aaff", "odesa": "#44aaff",
    "donetsk": "#44aaff", "sevastopol": "#44aaff",
}

UKRAINE_HOTSPOTS: Tuple[RegionalHotspot, ...] = (
    RegionalHotspot("ua-pokrovsk", "Pokrovsk Front", 48.28, 37.18, theater="ukraine",
                    keywords=("pokrovsk", "avdiivka", "front line"),
                    level="critical", icon="⚔", category="Front",
                    description="Main axis of the Russian offensive."),
    RegionalHotspot("ua-zaporizhzhia", "Zaporizhzhia NPP", 47.51, 34.58, theater="ukraine",
                    keywords=("zaporizhzhia", "nuclear plant"),
                    level="high", icon="☢", category="Nuclear",
                    description="Occupied nuclear power plant."),
    RegionalHotspot("ua-kursk", "Kursk Incursion", 51.73, 36.19, theater="ukraine",
                    keywords=("kursk",),
                    level="high", icon="⚔", category="Front",
                    description="Cross-border fighting."),
    RegionalHotspot("ua-crimea-bridge", "Kerch Bridge", 45.31, 36.51, theater="ukraine",
                    keywords=("kerch", "crimea bridge"),
                    level="elevated", icon="🎯", category="Strike",
                    description="Strategic supply link to Crimea."),
    RegionalHotspot("ua-kyiv-ad", "Kyiv Air Defense", 50.45, 30.52, theater="ukraine",
                    keywords=("air defense", "drone attack", "missile strike"),
                    level="elevated", icon="🛡", category="Defense",
                    description="Capital air defense zone."),
)

# ── Taiwan ───────────────────────────────────────────────────────────

_TAIWAN_CITIES = [
    ("taipei",   "Taipei",   25.0330, 121.5654, "capital", ("taipei", "taiwan")),
    ("beijing",  "Beijing",  39.9042, 116.4074, "capital", ("beijing", "china", "xi jinping")),
    ("shanghai", "Shanghai", 31.2304, 121.4737, "major",   ("shanghai",)),
    ("manila",   "Manila",   14.5995, 120.9842, "capital", ("manila", "philippines")),
    ("tokyo",    "Tokyo",    35.6762, 139.6503, "capital", ("tokyo", "japan")),
    ("okinawa",  "Okinawa",  26.5013, 127.9454, "major",   ("okinawa", "kadena")),
]

_TAIWAN_CITY_COLORS = {
    "beijing": "#ff6666", "shanghai": "#ff6666",
    "taipei": "#44aaff",
    "tokyo": "#6688ff", "okinawa": "#6688ff",
}

TAIWAN_HOTSPOTS: Tuple[RegionalHotspot, ...] = (
    RegionalHotspot("tw-strait", "Taiwan Strait", 24.5, 119.8, theater="taiwan",
                    keywords=("taiwan strait", "pla exercise", "median line"),
                    level="high", icon="⚡", category="Flashpoint",
                    description="PLA air and naval incursions."),
    RegionalHotspot("tw-kinmen", "Kinmen", 24.44, 118.32, theater="taiwan",
                    keywords=("kinmen", "quemoy"),
                    level="elevated", icon="🏝", category="Disputed",
                    description="Taiwan-held islands off Xiamen."),
    RegionalHotspot("tw-scarborough", "Scarborough Shoal", 15.15, 117.76, theater="taiwan",
                    keywords=("scarborough", "south china sea", "second thomas"),
                    level="high", icon="🏝", category="Disputed",
                    description="China-Philippines maritime standoff."),
    RegionalHotspot("tw-bashi", "Bashi Channel", 21.0, 121.0, theater="taiwan",
                    keywords=("bashi channel", "luzon strait"),
                    level="elevated", icon="🛡", category="Defense",
                    description="Submarine transit route."),
)

_CITY_DEFAULT_COLORS = {"capital": "#ffcc00", "major": "#00ff88", "regional": "#00aaff"}


def _cities(theater: str, rows, colors: Optional[Dict[str, str]] = None) -> Tuple[CityMarker, ...]:
    out = []
    for cid, name, lat, lon, ctype, keywords in rows:
        if ctype == "capital":
            color = _CITY_DEFAULT_COLORS["capital"]
        else:
            color = (colors or {}).get(cid, _CITY_DEFAULT_COLORS.get(ctype, "#00ff88"))
        out.append(CityMarker(cid, name, lat, lon, keywords=keywords, theater=theater,
                              city_type=ctype, color=color))
    return tuple(out)


US_CITIES = _cities("us", _US_CITIES)
MIDEAST_CITIES = _cities("mideast", _MIDEAST_CITIES)
UKRAINE_CITIES = _cities("ukraine", _UKRAINE_CITIES, _UKRAINE_CITY_COLORS)
TAIWAN_CITIES = _cities("taiwan", _TAIWAN_CITIES, _TAIWAN_CITY_COLORS)


# ═══════════════════════════════════════════════════════════════════════
# PUBLIC API
# ═══════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class EntityCatalogs:
    """Every static catalog the composer draws from."""
    hotspots: Tuple[Hotspot, ...] = ()
    conflict_zones: Tuple[ConflictZone, ...] = ()
    military_bases: Tuple[MilitaryBase, ...] = ()
    nuclear_facilities: Tuple[NuclearFacility, ...] = ()
    cables: Tuple[UnderseaCable, ...] = ()
    chokepoints: Tuple[Chokepoint, ...] = ()
    cyber_regions: Tuple[CyberRegion, ...] = ()
    news_regions: Tuple[NewsRegion, ...] = ()
    sanctioned_countries: Dict[str, str] = field(default_factory=dict)
    regional_cities: Dict[str, Tuple[CityMarker, ...]] = field(default_factory=dict)
    regional_hotspots: Dict[str, Tuple[RegionalHotspot, ...]] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> "EntityCatalogs":
        return cls()

    def regional(self, view: str) -> Tuple[Tuple[CityMarker, ...], Tuple[RegionalHotspot, ...]]:
        """(cities, hotspots) for a regional view; empty for unknown views."""
        return (
            self.regional_cities.get(view, ()),
            self.regional_hotspots.get(view, ()),
        )


def default_catalogs() -> EntityCatalogs:
    return EntityCatalogs(
        hotspots=INTEL_HOTSPOTS,
        conflict_zones=CONFLICT_ZONES,
        military_bases=MILITARY_BASES,
        nuclear_facilities=NUCLEAR_FACILITIES,
        cables=UNDERSEA_CABLES,
        chokepoints=SHIPPING_CHOKEPOINTS,
        cyber_regions=CYBER_REGIONS,
        news_regions=NEWS_REGIONS,
        sanctioned_countries=dict(SANCTIONED_COUNTRIES),
        regional_cities={
            "us": US_CITIES,
            "mideast": MIDEAST_CITIES,
            "ukraine": UKRAINE_CITIES,
            "taiwan": TAIWAN_CITIES,
        },
        regional_hotspots={
            "us": US_HOTSPOTS,
            "mideast": MIDEAST_HOTSPOTS,
            "ukraine": UKRAINE_HOTSPOTS,
            "taiwan": TAIWAN_HOTSPOTS,
        },
    )


# JSON key -> (EntityCatalogs field, entity class)
_LIST_KEYS: Dict[str, Tuple[str, Type[GeoEntity]]] = {
    "hotspots": ("hotspots", Hotspot),
    "conflict_zones": ("conflict_zones", ConflictZone),
    "military_bases": ("military_bases", MilitaryBase),
    "nuclear_facilities": ("nuclear_facilities", NuclearFacility),
    "cables": ("cables", UnderseaCable),
    "chokepoints": ("chokepoints", Chokepoint),
    "cyber_regions": ("cyber_regions", CyberRegion),
    "news_regions": ("news_regions", NewsRegion),
}

_TUPLE_FIELDS = ("keywords", "agencies", "parties", "targets")
_POINT_FIELDS = ("coords", "points")


def _as_tuple(value) -> tuple:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(value)


def entity_from_row(cls: Type[GeoEntity], row: Mapping, theater: Optional[str] = None) -> GeoEntity:
    """Build one entity from a JSON row; unknown keys are ignored.

    Raises TypeError for a row that is not a JSON object.
    """
    if not isinstance(row, Mapping):
        raise TypeError(f"expected an object, got {type(row).__name__}")
    allowed = {f.name for f in fields(cls)}
    kwargs = {k: v for k, v in row.items() if k in allowed}
    for key in _TUPLE_FIELDS:
        if key in kwargs:
            kwargs[key] = _as_tuple(kwargs[key])
    for key in _POINT_FIELDS:
        if key in kwargs:
            kwargs[key] = tuple((float(p[0]), float(p[1])) for p in kwargs[key])
    if theater is not None:
        kwargs["theater"] = theater
    kwargs["id"] = str(row["id"])
    kwargs["name"] = str(row.get("name") or row["id"])
    kwargs["lat"] = float(row["lat"])
    kwargs["lon"] = float(row["lon"])
    return cls(**kwargs)


def _rows_to_entities(cls: Type[GeoEntity], rows, label: str,
                      theater: Optional[str] = None) -> Tuple[GeoEntity, ...]:
    if rows is None:
        return ()
    if not isinstance(rows, (list, tuple)):
        log.warning("Ignoring %s: expected a list, got %s", label, type(rows).__name__)
        return ()
    out = []
    for row in rows:
        try:
            out.append(entity_from_row(cls, row, theater))
        except (KeyError, TypeError, ValueError, IndexError) as exc:
            log.warning("Skipping invalid %s row %r: %s", label, row, exc)
    return tuple(out)


def _usable(value, kind, label: str) -> bool:
    """True for None or a value of *kind*; anything else is logged and ignored."""
    if value is None or isinstance(value, kind):
        return True
    log.warning("Ignoring %s: unexpected %s", label, type(value).__name__)
    return False


def catalogs_from_dict(payload: Mapping, base: Optional[EntityCatalogs] = None) -> EntityCatalogs:
    """Overlay the lists present in *payload* onto *base* (defaults if None).

    A key whose value has the wrong JSON type leaves *base* unchanged.
    """
    catalogs = base or default_catalogs()
    changes: Dict[str, object] = {}

    for key, (attr, cls) in _LIST_KEYS.items():
        if key in payload and _usable(payload[key], (list, tuple), key):
            changes[attr] = _rows_to_entities(cls, payload[key], key)

    sanctions = payload.get("sanctioned_countries")
    if "sanctioned_countries" in payload and _usable(sanctions, Mapping, "sanctioned_countries"):
        changes["sanctioned_countries"] = {str(k): str(v) for k, v in (sanctions or {}).items()}

    for key, attr, cls in (
        ("regional_cities", "regional_cities", CityMarker),
        ("regional_hotspots", "regional_hotspots", RegionalHotspot),
    ):
        if key in payload and _usable(payload[key], Mapping, key):
            merged = dict(getattr(catalogs, attr))
            for view, rows in (payload[key] or {}).items():
                merged[view] = _rows_to_entities(cls, rows, f"{key}.{view}", theater=str(view))
            changes[attr] = merged

    return replace(catalogs, **changes)


def load_catalogs(path: Optional[Path] = None) -> EntityCatalogs:
    """Embedded catalogs, optionally overridden by a JSON file.

    A missing or unreadable file is logged and the embedded defaults are
    used unchanged.
    """
    catalogs = default_catalogs()
    if path is None:
        return catalogs

    try:
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        log.error("Failed to load catalog file %s: %s", path, exc)
        return catalogs
    if not isinstance(payload, Mapping):
        log.error("Catalog file %s is not a JSON object; using defaults", path)
        return catalogs

    catalogs = catalogs_from_dict(payload, catalogs)
    log.info(
        "Catalogs: %d hotspots, %d zones, %d bases, %d nuclear, %d cables, "
        "%d chokepoints, %d cyber, %d density regions",
        len(catalogs.hotspots), len(catalogs.conflict_zones),
        len(catalogs.military_bases), len(catalogs.nuclear_facilities),
        len(catalogs.cables), len(catalogs.chokepoints),
        len(catalogs.cyber_regions), len(catalogs.news_regions),
    )
    return catalogs


def monitors_from_rows(rows) -> List[CustomMonitor]:
    """Custom monitors from stored JSON rows (storage itself is external)."""
    return list(_rows_to_entities(CustomMonitor, rows, "monitor"))
