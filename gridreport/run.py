"""
gridreport/run.py

Pipeline entry point and fixed-cadence scheduler.

Responsibilities
----------------
- `build_report`: fetch generation data (with endpoint fallback) and load
  data, and render either the combined report or a short error notice.
- `run_once`: one non-reentrant tick; a tick that starts while another is
  still running is skipped.
- `serve`: invoke `run_once` every `interval` seconds, starting immediately.
- Expose a CLI for one-off runs, dry runs and the long-running service.

Conventions
-----------
- A generation failure replaces the whole report with an error notice and
  skips the load fetch.
- A load failure only drops the load section from the report.
- Delivery failures are logged, never retried.
"""

from __future__ import annotations

import argparse
import os
import sys
import threading
import time

from dotenv import load_dotenv
from loguru import logger

from .client import fetch_generation_analysis, fetch_load_summary
from .errors import ExhaustedEndpoints, GridReportError
from .models import CombinedReport
from .notify import get_channel
from .report import render, render_error

load_dotenv()

DEFAULT_INTERVAL_SECONDS = 600
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Held for the duration of a tick; never waited on.
_run_lock = threading.Lock()


def build_report() -> str:
    """Run the fetch/analyse/render pipeline and return the message text."""
    try:
        analysis = fetch_generation_analysis()
    except ExhaustedEndpoints as exc:
        logger.error("Error fetching power data: {}", exc)
        return render_error(exc)

    try:
        load = fetch_load_summary()
    except GridReportError as exc:
        logger.warning("Load data unavailable: {}", exc)
        load = None

    return render(CombinedReport(analysis=analysis, load=load))


def run_once(channel) -> bool | None:
    """Build one report and hand it to ``channel``.

    Args:
        channel: Anything with a ``send(text) -> bool`` method.

    Returns:
        bool | None: The delivery result, or None if the tick was skipped
        because a previous run is still in progress.
    """
    if not _run_lock.acquire(blocking=False):
        logger.warning("Previous run still in progress; skipping this tick")
        return None
    try:
        message = build_report()
        delivered = channel.send(message)
        if not delivered:
            logger.error("Report was not delivered")
        return delivered
    finally:
        _run_lock.release()


def serve(channel, interval: int = DEFAULT_INTERVAL_SECONDS, max_ticks: int | None = None) -> None:
    """Call `run_once` every ``interval`` seconds, first tick immediately.

    An exception escaping one tick is logged and the schedule carries on.

    Args:
        channel: Delivery target passed through to `run_once`.
        interval: Seconds between tick starts.
        max_ticks: Stop after this many ticks; run forever if None.
    """
    ticks = 0
    while max_ticks is None or ticks < max_ticks:
        started = time.monotonic()
        try:
            run_once(channel)
        except KeyboardInterrupt:
            raise
        except Exception:
            logger.exception("Unhandled error in report tick")
        ticks += 1
        if max_ticks is not None and ticks >= max_ticks:
            break
        # Sleep for what is left of the interval so ticks keep a fixed cadence.
        time.sleep(max(0.0, interval - (time.monotonic() - started)))


def positive_int(value: str) -> int:
    """argparse type for a strictly positive integer."""
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}") from None
    if n <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {n}")
    return n


def get_interval() -> int:
    """Read ``REPORT_INTERVAL_SECONDS`` (default 600).

    Side Effects:
        Exits the process with status 2 if the value is not a positive
        integer.
    """
    raw = os.environ.get("REPORT_INTERVAL_SECONDS", str(DEFAULT_INTERVAL_SECONDS))
    try:
        return positive_int(raw)
    except argparse.ArgumentTypeError as exc:
        print(f"ERROR: REPORT_INTERVAL_SECONDS is invalid: {exc}", file=sys.stderr)
        sys.exit(2)


class StdoutChannel:
    """Delivery target for ``--dry-run``: prints instead of posting."""

    def send(self, text: str) -> bool:
        print(text)
        return True


def main(argv=None):
    """CLI entry point.

    Args:
        argv: Optional list of CLI arguments (useful for testing).

    Returns:
        int: Exit code (0 on success, 1 if a ``--once`` delivery failed).
    """
    parser = argparse.ArgumentParser(description="Post Taipower grid reports to Discord")
    parser.add_argument("--once", action="store_true", help="Run a single report and exit")
    parser.add_argument("--dry-run", action="store_true", help="Print the report instead of posting it")
    parser.add_argument("--interval", type=positive_int, help="Seconds between reports")
    args = parser.parse_args(argv)

    logger.remove()
    logger.add(sys.stderr, level=LOG_LEVEL)

    channel = StdoutChannel() if args.dry_run else get_channel()

    if args.once:
        return 0 if run_once(channel) else 1

    interval = args.interval or get_interval()
    logger.info("Posting reports every {} seconds", interval)
    serve(channel, interval=interval)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
