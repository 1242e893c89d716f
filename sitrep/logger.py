from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import LOG_DIR


def setup_logging(level: int = logging.INFO, log_dir: Optional[Path] = None) -> None:
    log_dir = log_dir or LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)
    logfile = log_dir / "sitrep.log"
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.FileHandler(logfile),
            logging.StreamHandler(),
        ],
    )


def write_overlay_snapshot(
    descriptors: List[Dict[str, Any]],
    log_dir: Optional[Path] = None,
) -> Path:
    log_dir = log_dir or LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)
    ts = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S_%f")
    path = log_dir / f"overlays_{ts}.json"
    with path.open("w", encoding="utf-8") as f:
        json.dump(descriptors, f, indent=2)
    return path
