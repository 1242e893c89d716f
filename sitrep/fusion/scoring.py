"""
Keyword activity scoring — headline corpus to per-entity scores.

Every scored entity kind has a :class:`ScoringPolicy` record holding its
weighting, alert bonus, tier thresholds and matched-item cap.  The scorer
dispatches on ``entity.kind`` through :data:`SCORING_POLICIES`; kinds
without a policy (bases, nuclear sites, cables, zones, cyber regions) are
static and are not scored.

Matching rule
─────────────
A keyword matches an item when it is a substring of the item's lowercased
title.  For keyword-weighted policies each matching item adds the number
of keywords it matched, plus the alert bonus when the item is an alert.
Presence-weighted policies add one per matching item.  Matched items are
kept in corpus order and truncated to the policy cap.

Density blobs aggregate differently (see :func:`score_density`).

Usage
-----
    from sitrep.fusion.scoring import score
    scores = score(catalogs.hotspots, corpus)
    scores["tehran"].tier      # "elevated"
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from ..geo.entities import CustomMonitor, EntityKind, GeoEntity, NewsRegion
from .corpus import TextItem

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActivityScore:
    """Score of one entity for one corpus."""
    entity_id: str
    score: int
    tier: str
    matched_items: Tuple[TextItem, ...] = ()
    match_count: int = 0

    def as_payload(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "tier": self.tier,
            "matchCount": self.match_count,
            "headlines": [item.headline() for item in self.matched_items],
        }


@dataclass(frozen=True)
class ScoringPolicy:
    """How one entity kind turns keyword matches into a score and tier."""
    kind: EntityKind
    cap: int
    thresholds: Tuple[Tuple[int, str], ...] = ()   # (minimum score, tier), highest first
    base_tier: str = "low"
    weight_by_keywords: bool = False
    alert_bonus: int = 0
    static_tier: bool = False                      # tier is the entity's own level

    def tier_for(self, value: int, entity: Optional[GeoEntity] = None) -> str:
        if self.static_tier and entity is not None:
            return getattr(entity, "level", self.base_tier) or self.base_tier
        for minimum, tier in self.thresholds:
            if value >= minimum:
                return tier
        return self.base_tier


HOTSPOT_POLICY = ScoringPolicy(
    kind=EntityKind.HOTSPOT,
    cap=5,
    thresholds=((8, "high"), (3, "elevated")),
    base_tier="low",
    weight_by_keywords=True,
    alert_bonus=3,
)

CHOKEPOINT_POLICY = ScoringPolicy(
    kind=EntityKind.CHOKEPOINT,
    cap=5,
    thresholds=((1, "alert"),),
    base_tier="clear",
)

CITY_POLICY = ScoringPolicy(
    kind=EntityKind.CITY,
    cap=8,
    thresholds=((5, "high-activity"),),
    base_tier="normal",
)

REGIONAL_HOTSPOT_POLICY = ScoringPolicy(
    kind=EntityKind.REGIONAL_HOTSPOT,
    cap=8,
    base_tier="low",
    static_tier=True,
)

CUSTOM_MONITOR_POLICY = ScoringPolicy(
    kind=EntityKind.CUSTOM_MONITOR,
    cap=5,
    thresholds=((1, "active"),),
    base_tier="idle",
)

SCORING_POLICIES: Dict[EntityKind, ScoringPolicy] = {
    p.kind: p for p in (
        HOTSPOT_POLICY,
        CHOKEPOINT_POLICY,
        CITY_POLICY,
        REGIONAL_HOTSPOT_POLICY,
        CUSTOM_MONITOR_POLICY,
    )
}

# Density blobs: +1 per keyword hit, +2 per alert item anywhere in the window
DENSITY_THRESHOLDS: Tuple[Tuple[int, str], ...] = ((10, "high"), (5, "medium"))
DENSITY_ALERT_BONUS = 2
DENSITY_CAP = 5


def matched_keywords(keywords: Iterable[str], title: Optional[str]) -> List[str]:
    """Keywords that occur in the lowercased *title*."""
    text = (title or "").lower()
    return [kw for kw in keywords if kw and kw in text]


def score_entity(entity: GeoEntity, corpus: Sequence[TextItem],
                 policy: Optional[ScoringPolicy] = None) -> Optional[ActivityScore]:
    """Score one entity; None when its kind has no policy."""
    policy = policy or SCORING_POLICIES.get(entity.kind)
    if policy is None:
        return None

    value = 0
    count = 0
    matched: List[TextItem] = []
    for item in corpus:
        hits = matched_keywords(entity.keywords, item.title)
        if not hits:
            continue
        count += 1
        if policy.weight_by_keywords:
            value += len(hits)
            if item.is_alert:
                value += policy.alert_bonus
        else:
            value += 1
        if len(matched) < policy.cap:
            matched.append(item)

    return ActivityScore(
        entity_id=entity.id,
        score=value,
        tier=policy.tier_for(value, entity),
        matched_items=tuple(matched),
        match_count=count,
    )


def score(entities: Iterable[GeoEntity], corpus: Sequence[TextItem]) -> Dict[str, ActivityScore]:
    """Score every entity that has a policy for its kind.

    Pure function of its inputs: the same entities and corpus always give
    the same result.
    """
    corpus = list(corpus)
    results: Dict[str, ActivityScore] = {}
    for entity in entities:
        result = score_entity(entity, corpus)
        if result is not None:
            results[entity.id] = result
    return results


def score_density(regions: Iterable[NewsRegion], corpus: Sequence[TextItem]) -> Dict[str, ActivityScore]:
    """Aggregate news density per region.

    Every keyword occurrence adds one; every alert item in the corpus adds
    two to every region whether or not it matched.
    """
    corpus = list(corpus)
    alerts = sum(1 for item in corpus if item.is_alert)
    results: Dict[str, ActivityScore] = {}
    for region in regions:
        value = DENSITY_ALERT_BONUS * alerts
        count = 0
        matched: List[TextItem] = []
        for item in corpus:
            hits = matched_keywords(region.keywords, item.title)
            if not hits:
                continue
            value += len(hits)
            count += 1
            if len(matched) < DENSITY_CAP:
                matched.append(item)
        tier = "low"
        for minimum, name in DENSITY_THRESHOLDS:
            if value >= minimum:
                tier = name
                break
        results[region.id] = ActivityScore(region.id, value, tier, tuple(matched), count)
    return results


# ── Custom monitors ──────────────────────────────────────────────────

MonitorSource = Callable[[Sequence[TextItem]], List[Tuple[CustomMonitor, ActivityScore]]]


def score_monitors(monitors: Iterable[CustomMonitor],
                   corpus: Sequence[TextItem]) -> List[Tuple[CustomMonitor, ActivityScore]]:
    """Score user monitors independently of the static catalogs."""
    corpus = list(corpus)
    out = []
    for monitor in monitors:
        if not monitor.keywords:
            log.debug("Monitor %s has no keywords, skipped", monitor.id)
            continue
        out.append((monitor, score_entity(monitor, corpus, CUSTOM_MONITOR_POLICY)))
    return out


def monitor_source(monitors: Iterable[CustomMonitor]) -> MonitorSource:
    """Callable giving (monitor, score) pairs for a corpus."""
    frozen = tuple(monitors)

    def _source(corpus: Sequence[TextItem]) -> List[Tuple[CustomMonitor, ActivityScore]]:
        return score_monitors(frozen, corpus)

    return _source
