"""Feed clients (earthquakes, flights, base maps) and the refresh scheduler."""
from __future__ import annotations

import logging
import time
from typing import Optional

import requests

from ..config import HTTP_TIMEOUT_S

log = logging.getLogger(__name__)

USER_AGENT = "sitrep/0.1 (activity map)"

# 429 comes from OpenSky's anonymous rate limit
_RETRY_STATUS = frozenset({429, 500, 502, 503, 504})
_MAX_RETRY_AFTER_S = 30.0


def _retry_delay(resp: Optional[requests.Response], attempt: int, backoff: float) -> float:
    """Seconds to wait before the next attempt; honours Retry-After when sent."""
    if resp is not None:
        raw = resp.headers.get("Retry-After")
        if raw:
            try:
                return min(float(raw), _MAX_RETRY_AFTER_S)
            except ValueError:
                pass
    return backoff * attempt


def fetch_with_retry(
    url: str,
    *,
    params: Optional[dict] = None,
    timeout: float = HTTP_TIMEOUT_S,
    retries: int = 2,
    backoff: float = 2.0,
) -> requests.Response:
    """GET *url*, retrying connection errors, timeouts, 429 and 5xx.

    Other 4xx responses raise ``requests.HTTPError`` at once.  When every
    attempt fails the last error is raised.
    """
    attempts = retries + 1
    last_exc: Optional[Exception] = None
    for attempt in range(1, attempts + 1):
        resp: Optional[requests.Response] = None
        try:
            resp = requests.get(url, params=params, timeout=timeout,
                                headers={"User-Agent": USER_AGENT})
        except (requests.ConnectionError, requests.Timeout) as exc:
            last_exc = exc
            log.warning("Network error on %s (attempt %d/%d): %s",
                        url[:80], attempt, attempts, exc)
        else:
            if resp.status_code not in _RETRY_STATUS:
                resp.raise_for_status()
                return resp
            last_exc = requests.HTTPError(f"HTTP {resp.status_code} from {url}", response=resp)
            log.warning("HTTP %d from %s (attempt %d/%d)",
                        resp.status_code, url[:80], attempt, attempts)

        if attempt < attempts:
            time.sleep(_retry_delay(resp, attempt, backoff))

    raise last_exc or requests.ConnectionError(f"Failed after {attempts} attempts")
