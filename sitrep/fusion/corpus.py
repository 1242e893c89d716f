"""Text items scored against map entities."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class TextItem:
    """One headline from the news/alert feeds."""
    id: str
    title: str = ""
    source: str = ""
    link: str = ""
    timestamp: Optional[float] = None
    is_alert: bool = False

    def __post_init__(self):
        if self.title is None:
            object.__setattr__(self, "title", "")

    def headline(self) -> Dict[str, Any]:
        """Popup headline dict."""
        return {
            "title": self.title,
            "link": self.link,
            "source": self.source,
            "isAlert": self.is_alert,
        }


def _as_timestamp(value) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def corpus_from_records(rows: Iterable[Any]) -> List[TextItem]:
    """Build a corpus from JSON-like dicts, keeping input order.

    Accepts both ``isAlert`` and ``is_alert``.  Rows that are not mappings
    are skipped.
    """
    corpus: List[TextItem] = []
    for i, row in enumerate(rows or []):
        if not isinstance(row, Mapping):
            log.debug("Skipping non-mapping corpus row %d: %r", i, row)
            continue
        alert = row.get("isAlert", row.get("is_alert", False))
        corpus.append(TextItem(
            id=str(row.get("id") or row.get("link") or f"item_{i}"),
            title=str(row.get("title") or ""),
            source=str(row.get("source") or ""),
            link=str(row.get("link") or ""),
            timestamp=_as_timestamp(row.get("timestamp", row.get("pubDate"))),
            is_alert=bool(alert),
        ))
    return corpus
