"""
gridreport/errors.py

Exception hierarchy shared by the fetch, parse and delivery stages.

Propagation
-----------
- `NetworkFailure`, `StatusFailure` and `ParseFailure` are raised per
  endpoint. The generation fetch swallows them (after logging) and moves on
  to the next URL; the load fetch lets them reach the caller.
- `ExhaustedEndpoints` is the only generation error that reaches the
  pipeline, where it becomes a short user-visible notice.
"""

from __future__ import annotations


class GridReportError(Exception):
    """Base class for every pipeline failure."""


class NetworkFailure(GridReportError):
    """Transport-level failure (DNS, connection, timeout, body read)."""


class StatusFailure(GridReportError):
    """The server answered with a non-2xx status."""

    def __init__(self, url: str, status_code: int):
        super().__init__(f"HTTP error {status_code} from {url}")
        self.url = url
        self.status_code = status_code


class ParseFailure(GridReportError):
    """The body does not match any known schema."""


class ExhaustedEndpoints(GridReportError):
    """Every generation endpoint failed to produce a resolvable body."""
