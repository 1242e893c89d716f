from __future__ import annotations

import argparse
import json
import logging
import random
import sys
from pathlib import Path
from typing import List, Optional

from .config import CANVAS_HEIGHT, CANVAS_WIDTH, CATALOG_FILE, REFRESH_INTERVAL_S, USGS_FEED_PERIOD
from .fusion.composer import AuxData, compose
from .fusion.corpus import TextItem, corpus_from_records
from .fusion.layers import LayerToggleSet
from .fusion.scoring import monitor_source
from .geo.catalogs import load_catalogs, monitors_from_rows
from .geo.projection import VIEW_MODES
from .ingest.basemap_client import load_base_map
from .ingest.flights_client import fetch_flights
from .ingest.usgs_client import fetch_recent_earthquakes
from .logger import setup_logging, write_overlay_snapshot
from .view.controller import ViewController

log = logging.getLogger(__name__)


def load_json_rows(path: Optional[Path]) -> list:
    """JSON list from *path* (or an ``items`` list inside an object)."""
    if path is None:
        return []
    try:
        with Path(path).open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as exc:
        log.error("Failed to read %s: %s", path, exc)
        return []
    if isinstance(data, dict):
        data = data.get("items", [])
    return data if isinstance(data, list) else []


def load_corpus(path: Optional[Path]) -> List[TextItem]:
    return corpus_from_records(load_json_rows(path))


def run_once(args: argparse.Namespace) -> int:
    catalogs = load_catalogs(args.catalog)
    corpus = load_corpus(args.corpus)
    toggles = LayerToggleSet.defaults()
    if not args.no_flights:
        toggles["flights"] = True
    view = ViewController()
    view.set_view(args.view)

    aux = AuxData(
        earthquakes=fetch_recent_earthquakes(period=USGS_FEED_PERIOD),
        flights=None if args.no_flights else fetch_flights(),
        base_map=None if args.no_basemap else load_base_map(args.view),
        monitor_source=monitor_source(monitors_from_rows(load_json_rows(args.monitors))),
    )
    rng = random.Random(args.seed) if args.seed is not None else None
    overlays = compose(view.state, toggles, catalogs, corpus, aux, args.width, args.height, rng)
    payload = [d.as_dict() for d in overlays]

    if args.output:
        with Path(args.output).open("w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)
        log.info("Wrote %d overlays to %s", len(payload), args.output)
    else:
        path = write_overlay_snapshot(payload)
        log.info("Wrote %d overlays to %s", len(payload), path)
    return 0


def run_watch(args: argparse.Namespace) -> int:
    from PyQt5 import QtCore

    from .ingest.refresh_scheduler import RefreshScheduler

    app = QtCore.QCoreApplication.instance() or QtCore.QCoreApplication(sys.argv)
    catalogs = load_catalogs(args.catalog)
    toggles = LayerToggleSet.defaults()
    toggles["flights"] = not args.no_flights
    view = ViewController()
    view.set_view(args.view)

    scheduler = RefreshScheduler(
        corpus_source=lambda: load_corpus(args.corpus),
        catalogs=catalogs,
        toggles=toggles,
        view=view,
        monitor_source=monitor_source(monitors_from_rows(load_json_rows(args.monitors))),
        width=args.width,
        height=args.height,
        interval_s=args.interval,
        load_base_map=None if args.no_basemap else load_base_map,
    )

    def _on_overlays(overlays) -> None:
        payload = [d.as_dict() for d in overlays]
        if args.output:
            with Path(args.output).open("w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2)
        else:
            write_overlay_snapshot(payload)

    scheduler.overlays_updated.connect(_on_overlays)
    scheduler.status_message.connect(lambda msg: log.info("%s", msg))
    scheduler.start()
    return app.exec_()


def main() -> None:
    parser = argparse.ArgumentParser(
        description=(
            "Geospatial activity engine.\n"
            "Scores a headline corpus against the map catalogs, composes the\n"
            "overlay set for one view and writes it as JSON."
        )
    )
    parser.add_argument(
        "--view",
        choices=list(VIEW_MODES),
        default="global",
        help="Map view to compose.",
    )
    parser.add_argument("--width", type=float, default=CANVAS_WIDTH, help="Canvas width in px.")
    parser.add_argument("--height", type=float, default=CANVAS_HEIGHT, help="Canvas height in px.")
    parser.add_argument(
        "--corpus",
        type=Path,
        default=None,
        help="JSON file of headlines ({title, link, source, isAlert, ...}).",
    )
    parser.add_argument(
        "--monitors",
        type=Path,
        default=None,
        help="JSON file of custom monitors ({id, name, lat, lon, keywords, color}).",
    )
    parser.add_argument(
        "--catalog",
        type=Path,
        default=CATALOG_FILE,
        help="JSON file overriding the embedded entity catalogs.",
    )
    parser.add_argument("--no-flights", action="store_true", help="Skip the OpenSky flight layer.")
    parser.add_argument("--no-basemap", action="store_true", help="Skip country/state polygons.")
    parser.add_argument("--output", type=Path, default=None, help="Write overlays to this file.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the cyber-zone flags.")
    parser.add_argument(
        "--watch",
        action="store_true",
        help="Keep running and recompose on the refresh interval (Qt event loop).",
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=REFRESH_INTERVAL_S,
        help="Refresh interval in seconds for --watch.",
    )
    parser.add_argument("--verbose", action="store_true", help="Debug logging.")
    args = parser.parse_args()

    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    if args.watch:
        sys.exit(run_watch(args))
    sys.exit(run_once(args))


if __name__ == "__main__":
    main()
