"""
Refresh scheduler — periodic recomposition of the activity map.

Runs on the Qt event loop using QTimer.  Each cycle takes a new
generation token, fetches the corpus and auxiliary feeds on a daemon
thread and posts the result back to the Qt thread, where the overlays are
composed and swapped in whole.

Data flow
─────────
  QTimer tick / set_view / toggle_layer
    → refresh()                 new generation token
    → _fetch(token, view)       background thread: corpus, quakes,
                                flights, base map
    → _apply(token, result)     Qt thread: drop if token is stale,
                                compose, replace overlays
    → emit overlays_updated / status_message

A view switch while a fetch for the old view is still in flight bumps the
generation, so the late result is discarded instead of overwriting the
newer composition.  A timer tick that arrives while the current
generation is still fetching is skipped.

Usage
-----
    scheduler = RefreshScheduler(corpus_source, load_catalogs())
    scheduler.overlays_updated.connect(my_handler)
    scheduler.start()
"""
from __future__ import annotations

import logging
import random
import threading
from typing import Callable, List, Optional, Sequence, Set

from PyQt5 import QtCore

from ..config import CANVAS_HEIGHT, CANVAS_WIDTH, REFRESH_INTERVAL_S, USGS_FEED_PERIOD
from ..fusion.composer import AuxData, OverlayComposer, OverlayDescriptor
from ..fusion.corpus import TextItem
from ..fusion.layers import LayerToggleSet
from ..fusion.scoring import MonitorSource
from ..geo.catalogs import EntityCatalogs
from ..view.controller import ViewController
from ..view.popups import PopupDispatcher
from .basemap_client import load_base_map
from .flights_client import fetch_flights
from .usgs_client import fetch_recent_earthquakes

log = logging.getLogger(__name__)

CorpusSource = Callable[[], Sequence[TextItem]]


class GenerationCounter:
    """Monotonic token; only results carrying the current token are applied."""

    def __init__(self):
        self._current = 0
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            self._current += 1
            return self._current

    @property
    def current(self) -> int:
        with self._lock:
            return self._current

    def is_current(self, token: int) -> bool:
        return token == self.current


def _default_quakes():
    return fetch_recent_earthquakes(period=USGS_FEED_PERIOD)


class RefreshScheduler(QtCore.QObject):
    """Periodic corpus + feed refresh driving the overlay composer.

    Signals
    -------
    overlays_updated(list)
        Emitted with the new list[OverlayDescriptor] after each applied cycle.
    status_message(str)
        Informational messages for the status bar.
    """

    overlays_updated = QtCore.pyqtSignal(object)   # list[OverlayDescriptor]
    status_message = QtCore.pyqtSignal(str)

    def __init__(
        self,
        corpus_source: CorpusSource,
        catalogs: EntityCatalogs,
        toggles: Optional[LayerToggleSet] = None,
        view: Optional[ViewController] = None,
        popups: Optional[PopupDispatcher] = None,
        monitor_source: Optional[MonitorSource] = None,
        width: float = CANVAS_WIDTH,
        height: float = CANVAS_HEIGHT,
        interval_s: float = REFRESH_INTERVAL_S,
        fetch_quakes: Callable[[], list] = _default_quakes,
        fetch_flights: Optional[Callable[[], list]] = fetch_flights,
        load_base_map: Optional[Callable[[str], object]] = load_base_map,
        rng: Optional[random.Random] = None,
        parent: Optional[QtCore.QObject] = None,
    ):
        super().__init__(parent)
        self._corpus_source = corpus_source
        self._catalogs = catalogs
        self.toggles = toggles or LayerToggleSet.defaults()
        self.view = view or ViewController()
        self.popups = popups or PopupDispatcher()
        self._monitor_source = monitor_source
        self._composer = OverlayComposer(width, height, rng)
        self._fetch_quakes = fetch_quakes
        self._fetch_flights = fetch_flights
        self._load_base_map = load_base_map

        self.generations = GenerationCounter()
        self._overlays: List[OverlayDescriptor] = []
        self._inflight: Set[int] = set()
        self._inflight_lock = threading.Lock()

        self._timer = QtCore.QTimer(self)
        self._timer.setInterval(int(interval_s * 1000))
        self._timer.timeout.connect(self._tick)
        self._running = False

    # ── Control ───────────────────────────────────────────────────────

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        self.refresh()
        self._timer.start()
        log.info("RefreshScheduler started (every %ds)", self._timer.interval() // 1000)

    def stop(self) -> None:
        self._running = False
        self._timer.stop()
        log.info("RefreshScheduler stopped")

    @property
    def overlays(self) -> List[OverlayDescriptor]:
        return self._overlays

    def set_view(self, mode: str) -> bool:
        """Forward to the view controller; starts a new cycle on change.

        Open popups belong to the old view and are closed.
        """
        changed = self.view.set_view(mode)
        if changed:
            self.popups.close_all()
            self.refresh()
        return changed

    def toggle_layer(self, name: str) -> bool:
        on = self.toggles.toggle(name)
        self.refresh()
        return on

    # ── Cycle ─────────────────────────────────────────────────────────

    @property
    def fetch_in_flight(self) -> bool:
        """True while the current generation is still fetching."""
        with self._inflight_lock:
            return self.generations.current in self._inflight

    def _tick(self) -> None:
        if self.fetch_in_flight:
            log.info("Refresh %d still fetching; skipping timer tick",
                     self.generations.current)
            return
        self.refresh()

    def refresh(self) -> int:
        """Start a new generation and fetch its inputs in the background.

        Always supersedes a fetch in flight; only timer ticks wait for it.
        """
        token = self.generations.next()
        mode = self.view.mode
        flights_on = self.toggles["flights"]
        with self._inflight_lock:
            self._inflight.add(token)
        threading.Thread(
            target=self._fetch, args=(token, mode, flights_on),
            daemon=True, name=f"refresh-{token}",
        ).start()
        return token

    def _fetch(self, token: int, mode: str, flights_on: bool) -> None:
        """Gather one cycle's inputs (background thread)."""
        try:
            corpus = list(self._corpus_source())
            quakes = self._fetch_quakes() if self._fetch_quakes else []
            flights = None
            if flights_on and self._fetch_flights is not None:
                flights = self._fetch_flights()
            base_map = self._load_base_map(mode) if self._load_base_map else None

            QtCore.QMetaObject.invokeMethod(
                self, "_apply",
                QtCore.Qt.QueuedConnection,
                QtCore.Q_ARG(object, token),
                QtCore.Q_ARG(object, {
                    "mode": mode,
                    "corpus": corpus,
                    "aux": AuxData(
                        earthquakes=quakes,
                        flights=flights,
                        base_map=base_map,
                        monitor_source=self._monitor_source,
                    ),
                }),
            )
        except Exception as exc:
            log.error("Refresh %d fetch error: %s", token, exc)
            QtCore.QMetaObject.invokeMethod(
                self, "_emit_status",
                QtCore.Qt.QueuedConnection,
                QtCore.Q_ARG(str, f"Refresh error: {exc}"),
            )
        finally:
            with self._inflight_lock:
                self._inflight.discard(token)

    @QtCore.pyqtSlot(object, object)
    def _apply(self, token: int, result: dict) -> None:
        if not self.generations.is_current(token):
            log.warning("Discarding stale refresh %d (current %d)",
                        token, self.generations.current)
            return
        if result["mode"] != self.view.mode:
            log.warning("Discarding refresh %d for %s view (now %s)",
                        token, result["mode"], self.view.mode)
            return

        overlays = self._composer.compose(
            self.view.state, self.toggles, self._catalogs, result["corpus"], result["aux"],
        )
        self._overlays = overlays
        self.overlays_updated.emit(overlays)
        self.status_message.emit(
            f"Map: {len(overlays)} overlays ({result['mode']}, "
            f"{len(result['corpus'])} headlines)"
        )

    @QtCore.pyqtSlot(str)
    def _emit_status(self, msg: str) -> None:
        self.status_message.emit(msg)
