"""
gridreport/analyze.py

Aggregation of generation-unit rows into a `PowerAnalysis`.

One pass over the rows accumulates totals, per-type, per-plant and per-unit
generation, remark status counts and the renewable/private numerators.
Three reductions follow: top plant, top unit and the two ratios.

Conventions
-----------
- Rows named exactly "小計" (subtotals) are skipped entirely.
- Per-unit generation is last-write-wins for duplicate unit names.
- Top plant/unit ties go to the first name seen.
"""

from __future__ import annotations

from collections.abc import Iterable

from .models import PowerAnalysis
from .transform import (
    SUBTOTAL_MARKER,
    classify_remark,
    extract_plant_name,
    is_private,
    is_renewable,
    normalize_type,
)
from .validate import GenerationUnit
from .values import parse_numeric

# Reported when no plant or unit qualified.
UNKNOWN_NAME = "未知"


def top_entry(totals: dict[str, float]) -> tuple[str, float]:
    """Return the (name, value) pair with the largest value.

    `max` keeps the first of several equal maxima, so ties resolve to the
    earliest inserted key. An empty mapping yields (UNKNOWN_NAME, 0.0).
    """
    if not totals:
        return (UNKNOWN_NAME, 0.0)
    return max(totals.items(), key=lambda item: item[1])


def share(part: float, total: float) -> float:
    """Return ``part`` as a percentage of ``total``; 0.0 unless total > 0."""
    if total <= 0.0:
        return 0.0
    return part / total * 100.0


def analyze(units: Iterable[GenerationUnit], update_time: str) -> PowerAnalysis:
    """Build a `PowerAnalysis` from decoded unit rows.

    Args:
        units: Rows from `validate.resolve_units`.
        update_time: Timestamp label carried into the result.

    Returns:
        PowerAnalysis: Totals, breakdowns, top performers, status counts
        and ratios for the snapshot.
    """
    total_generation = 0.0
    total_capacity = 0.0
    by_type: dict[str, float] = {}
    by_plant: dict[str, float] = {}
    by_unit: dict[str, float] = {}
    counts = {"restriction": 0, "maintenance": 0, "fault": 0}
    renewable = 0.0
    private = 0.0

    for unit in units:
        if unit.unit_name == SUBTOTAL_MARKER:
            continue

        capacity = parse_numeric(unit.capacity)
        generation = parse_numeric(unit.generation)
        total_generation += generation
        total_capacity += capacity

        energy_type = normalize_type(unit.unit_type)
        by_type[energy_type] = by_type.get(energy_type, 0.0) + generation

        if is_renewable(energy_type):
            renewable += generation
        if is_private(unit.unit_type):
            private += generation

        plant = extract_plant_name(unit.unit_name)
        if plant is not None:
            by_plant[plant] = by_plant.get(plant, 0.0) + generation

        if generation > 0.0 and SUBTOTAL_MARKER not in unit.unit_name:
            by_unit[unit.unit_name] = generation

        status = classify_remark(unit.remark)
        if status is not None:
            counts[status] += 1

    return PowerAnalysis(
        update_time=update_time,
        total_generation=total_generation,
        total_capacity=total_capacity,
        generation_by_type=by_type,
        top_plant=top_entry(by_plant),
        top_unit=top_entry(by_unit),
        restriction_count=counts["restriction"],
        maintenance_count=counts["maintenance"],
        fault_count=counts["fault"],
        renewable_ratio=share(renewable, total_generation),
        private_ratio=share(private, total_generation),
    )
