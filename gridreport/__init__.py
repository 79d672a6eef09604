"""Taipower grid report pipeline: fetch, analyse, render and deliver."""

from . import analyze, client, errors, models, notify, report, run, transform, validate, values

__all__ = [
    "analyze",
    "client",
    "errors",
    "models",
    "notify",
    "report",
    "run",
    "transform",
    "validate",
    "values",
]
