"""
View, zoom and pan state for the activity map.

Zoom and pan are a pure display transform applied on top of a composed
overlay set, so they never ask for recomposition.  Only a view change
does: :meth:`ViewController.set_view` returns True when the caller must
compose again.

Invariant: pan is (0, 0) whenever zoom is 1.

Usage
-----
    ctl = ViewController()
    if ctl.set_view("ukraine"):
        recompose()
    ctl.zoom_in()
    scale, tx, ty = ctl.transform()
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from ..geo.projection import VIEW_MODES

log = logging.getLogger(__name__)

MIN_ZOOM = 1.0
MAX_ZOOM = 4.0
ZOOM_STEP = 0.5
PAN_PER_ZOOM = 200.0     # pan limit in px per zoom level above 1


@dataclass(frozen=True)
class ViewState:
    mode: str = "global"
    zoom: float = 1.0
    pan: Tuple[float, float] = (0.0, 0.0)


class ViewController:
    """Owns the ViewState; the only thing that mutates it."""

    def __init__(self, mode: str = "global"):
        if mode not in VIEW_MODES:
            raise ValueError(f"Unknown view mode {mode!r}")
        self._state = ViewState(mode=mode)
        self._pan_start: Optional[Tuple[float, float]] = None

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def mode(self) -> str:
        return self._state.mode

    @property
    def zoom(self) -> float:
        return self._state.zoom

    @property
    def pan(self) -> Tuple[float, float]:
        return self._state.pan

    @property
    def panning(self) -> bool:
        return self._pan_start is not None

    # ── view ─────────────────────────────────────────────────────────

    def set_view(self, mode: str) -> bool:
        """Switch view; True when the overlays must be recomposed."""
        if mode not in VIEW_MODES:
            raise ValueError(f"Unknown view mode {mode!r}")
        if mode == self._state.mode:
            return False
        log.info("View %s -> %s", self._state.mode, mode)
        self._state = ViewState(mode=mode)
        self._pan_start = None
        return True

    # ── zoom ─────────────────────────────────────────────────────────

    def _set_zoom(self, zoom: float) -> None:
        zoom = max(MIN_ZOOM, min(MAX_ZOOM, zoom))
        pan = self._state.pan
        if zoom <= MIN_ZOOM:
            pan = (0.0, 0.0)
            self._pan_start = None
        else:
            limit = (zoom - 1.0) * PAN_PER_ZOOM
            pan = (_clamp(pan[0], limit), _clamp(pan[1], limit))
        self._state = ViewState(self._state.mode, zoom, pan)

    def zoom_in(self) -> float:
        self._set_zoom(self._state.zoom + ZOOM_STEP)
        return self._state.zoom

    def zoom_out(self) -> float:
        self._set_zoom(self._state.zoom - ZOOM_STEP)
        return self._state.zoom

    def reset(self) -> None:
        self._state = ViewState(self._state.mode)
        self._pan_start = None

    def wheel(self, delta_y: float) -> float:
        """Mouse wheel: scrolling up (negative delta) zooms in."""
        return self.zoom_in() if delta_y < 0 else self.zoom_out()

    # ── pan ──────────────────────────────────────────────────────────

    def begin_pan(self, x: float, y: float) -> bool:
        """Start a drag at client (x, y); refused at zoom 1."""
        if self._state.zoom <= MIN_ZOOM:
            return False
        zoom = self._state.zoom
        px, py = self._state.pan
        self._pan_start = (x - px * zoom, y - py * zoom)
        return True

    def drag_to(self, x: float, y: float) -> Tuple[float, float]:
        if self._pan_start is None:
            return self._state.pan
        zoom = self._state.zoom
        limit = (zoom - 1.0) * PAN_PER_ZOOM
        sx, sy = self._pan_start
        pan = (_clamp((x - sx) / zoom, limit), _clamp((y - sy) / zoom, limit))
        self._state = ViewState(self._state.mode, zoom, pan)
        return pan

    def end_pan(self) -> None:
        self._pan_start = None

    # ── display ──────────────────────────────────────────────────────

    def transform(self) -> Tuple[float, float, float]:
        """(scale, translate x, translate y) for the overlay container."""
        return self._state.zoom, self._state.pan[0], self._state.pan[1]

    @property
    def zoom_label(self) -> str:
        return f"{self._state.zoom:.1f}x"

    @property
    def pan_hint_visible(self) -> bool:
        return self._state.zoom > MIN_ZOOM


def _clamp(value: float, limit: float) -> float:
    return max(-limit, min(limit, value))
