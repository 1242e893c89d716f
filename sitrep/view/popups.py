"""
Popup dispatch — at most one open popup per category.

Clicking a marker opens its category's popup (replacing whatever that
category showed).  A click anywhere else closes every open popup whose
trigger and popup element both lie outside the click.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Mapping, Optional

log = logging.getLogger(__name__)

POPUP_CATEGORIES = (
    "hotspot",
    "chokepoint",
    "quake",
    "cyber",
    "custom-monitor",
    "city",
    "regional-hotspot",
    "aircraft",
    "conflict",
)

# descriptor kind -> popup category
KIND_TO_CATEGORY: Dict[str, str] = {
    "hotspot": "hotspot",
    "chokepoint": "chokepoint",
    "quake": "quake",
    "cyber-zone": "cyber",
    "custom-monitor": "custom-monitor",
    "city": "city",
    "regional-hotspot": "regional-hotspot",
    "aircraft": "aircraft",
    "conflict-label": "conflict",
}


@dataclass(frozen=True)
class OpenPopup:
    category: str
    entity_id: str
    payload: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ClickTarget:
    """Categories whose trigger or popup element contains the click."""
    inside: FrozenSet[str] = frozenset()


def _check(category: str) -> None:
    if category not in POPUP_CATEGORIES:
        raise KeyError(f"Unknown popup category {category!r}")


class PopupDispatcher:
    """Open popups keyed by category; opening one replaces its predecessor.

    The refresh scheduler owns one next to its view controller and clears
    it on a view switch.  Unknown categories raise ``KeyError``.
    """

    def __init__(self):
        self._open: Dict[str, OpenPopup] = {}

    def open(self, category: str, entity_id: str, payload: Optional[Mapping[str, Any]] = None) -> OpenPopup:
        _check(category)
        popup = OpenPopup(category, entity_id, dict(payload or {}))
        self._open[category] = popup
        log.debug("Popup %s opened for %s", category, entity_id)
        return popup

    def open_from_descriptor(self, descriptor) -> Optional[OpenPopup]:
        """Open the popup for a clicked overlay; None for non-clickable kinds."""
        category = KIND_TO_CATEGORY.get(descriptor.kind)
        if category is None:
            return None
        return self.open(category, descriptor.entity_id, descriptor.payload)

    def close(self, category: str) -> None:
        _check(category)
        self._open.pop(category, None)

    def close_all(self) -> None:
        self._open.clear()

    def get(self, category: str) -> Optional[OpenPopup]:
        _check(category)
        return self._open.get(category)

    def open_popups(self) -> List[OpenPopup]:
        return [self._open[c] for c in POPUP_CATEGORIES if c in self._open]

    def handle_outside_click(self, target) -> List[str]:
        """Close popups the click landed outside of; returns closed categories.

        *target* is a :class:`ClickTarget` or any iterable of categories.
        """
        inside = frozenset(getattr(target, "inside", target))
        for category in inside:
            _check(category)
        closed = [c for c in list(self._open) if c not in inside]
        for category in closed:
            del self._open[category]
        return closed
