"""
gridreport/client.py

HTTP fetching for Taipower's generation and load/reserve feeds.

Responsibilities
---------------
- Perform single HTTP GETs with a bounded timeout and a browser User-Agent
  (some Taipower hosts reject default agents), translating `requests`
  failures into `NetworkFailure` / `StatusFailure`.
- Walk the ordered generation endpoints until one returns a body the schema
  resolver accepts, then analyse it. Per-endpoint failures are logged and
  skipped; only `ExhaustedEndpoints` reaches the caller.
- Fetch the load/reserve feed once, with no fallback. Any failure propagates
  so the caller can report "load data unavailable".

Environment Variables
---------------------
TAIPOWER_GENERATION_URLS
    Comma-separated generation endpoints, tried in order. Defaults to the
    three public Taipower feeds below.
TAIPOWER_LOAD_URL
    Load/reserve endpoint.
"""

from __future__ import annotations

import os

import requests
from dotenv import load_dotenv
from loguru import logger

from .analyze import analyze
from .errors import ExhaustedEndpoints, NetworkFailure, ParseFailure, StatusFailure
from .models import LoadSummary, PowerAnalysis
from .transform import normalize_load
from .validate import resolve_load, resolve_units

load_dotenv()

DEFAULT_GENERATION_URLS = (
    "https://www.taipower.com.tw/d006/loadGraph/loadGraph/data/genloadareaperc.json",
    "https://service.taipower.com.tw/data/opendata/apply/file/d006001/001.json",
    "https://www.taipower.com.tw/d006/loadGraph/loadGraph/data/genary.json",
)
DEFAULT_LOAD_URL = "https://service.taipower.com.tw/data/opendata/apply/file/d006020/001.json"

GENERATION_URLS = tuple(
    u.strip()
    for u in os.getenv("TAIPOWER_GENERATION_URLS", ",".join(DEFAULT_GENERATION_URLS)).split(",")
    if u.strip()
)
LOAD_URL = os.getenv("TAIPOWER_LOAD_URL", DEFAULT_LOAD_URL)

# HTTP client settings.
HTTP_TIMEOUT = 30  # seconds
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)
PREVIEW_CHARS = 200


def fetch_text(url: str) -> str:
    """GET ``url`` once and return the decoded body.

    Args:
        url: Endpoint to fetch.

    Returns:
        str: Response body text.

    Raises:
        NetworkFailure: On connection errors, timeouts or body read errors.
        StatusFailure: If the status code is outside 2xx.
    """
    headers = {"User-Agent": USER_AGENT}
    try:
        r = requests.get(url, headers=headers, timeout=HTTP_TIMEOUT)
        if not 200 <= r.status_code < 300:
            raise StatusFailure(url, r.status_code)
        # Bodies are UTF-8 JSON; requests falls back to latin-1 for text/* without a charset.
        if r.encoding is None or r.encoding.lower() == "iso-8859-1":
            r.encoding = "utf-8"
        text = r.text.lstrip("\ufeff")
    except requests.RequestException as exc:
        raise NetworkFailure(f"failed to fetch {url}: {exc}") from exc

    logger.debug("Response length: {} characters", len(text))
    logger.debug("First {} chars: {}", PREVIEW_CHARS, text[:PREVIEW_CHARS])
    return text


def fetch_generation_analysis(urls=None) -> PowerAnalysis:
    """Analyse the first generation endpoint that yields a resolvable body.

    Args:
        urls: Optional ordered endpoints; defaults to `GENERATION_URLS`.

    Returns:
        PowerAnalysis: Analysis of the first body that matched a known shape.
        Later endpoints are not contacted.

    Raises:
        ExhaustedEndpoints: If every endpoint failed to fetch or to parse.
    """
    urls = GENERATION_URLS if urls is None else urls

    for i, url in enumerate(urls, start=1):
        logger.info("Trying URL {}: {}", i, url)
        try:
            text = fetch_text(url)
        except (NetworkFailure, StatusFailure) as exc:
            logger.warning("URL {} unavailable: {}", i, exc)
            continue

        try:
            resolved = resolve_units(text)
        except ParseFailure as exc:
            logger.warning("Failed to parse JSON from URL {}: {}", i, exc)
            continue

        logger.info("URL {} matched the {} shape with {} rows", i, resolved.shape, len(resolved.units))
        return analyze(resolved.units, resolved.update_time)

    raise ExhaustedEndpoints(f"all {len(urls)} generation endpoints failed")


def fetch_load_summary(url: str | None = None) -> LoadSummary:
    """Fetch and normalize the load/reserve feed with a single attempt.

    Raises:
        NetworkFailure, StatusFailure, ParseFailure: Propagated unchanged.
    """
    url = url or LOAD_URL
    logger.info("Fetching load data from: {}", url)
    return normalize_load(resolve_load(fetch_text(url)))
