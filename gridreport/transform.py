"""
gridreport/transform.py

Label rules and field mapping tables for Taipower data.

Responsibilities
----------------
- Hold the upstream label markers (subtotal rows, private plants, renewable
  types, remark phrases, plant-name delimiters) as module-level tables so a
  change in Taipower's wording is a table edit, not an algorithm change.
- Provide the small rule functions the analysis pass applies per row.
- Define `LOAD_KEYS` and `normalize_load`, mapping upstream load/reserve
  field names to `LoadSummary` fields.
"""

from __future__ import annotations

import re

from .models import LoadSummary
from .validate import LoadRecord
from .values import parse_numeric

# Unit name used by upstream for aggregate rows.
SUBTOTAL_MARKER = "小計"

# Unit-type marker for privately owned plants and purchased power.
PRIVATE_MARKER = "民營電廠"

# Substring rewrites applied to private-plant type labels.
PRIVATE_REWRITES = {"民營電廠-": "民營"}

# Type labels that absorb any label containing them.
COLLAPSED_TYPES = ("其它再生能源",)

# Normalized type labels counted as renewable.
RENEWABLE_TYPES = {"風力", "太陽能", "水力", "其它再生能源"}

# Remark classification, checked in order; first matching status wins.
REMARK_STATUS = (
    ("restriction", ("環保限制", "運轉限制")),
    ("maintenance", ("歲修", "檢修")),
    ("fault", ("故障",)),
)

# Unit-index marker separating plant name from unit number ("台中#1").
UNIT_INDEX_MARKER = "#"

# Characters that end the plant part of a unit name without an index marker.
PLANT_DELIMITERS = re.compile(r"[(\[#]")


def normalize_type(unit_type: str) -> str:
    """Return the energy-type label used as the aggregation key."""
    if PRIVATE_MARKER in unit_type:
        for src, dst in PRIVATE_REWRITES.items():
            unit_type = unit_type.replace(src, dst)
        return unit_type
    for label in COLLAPSED_TYPES:
        if label in unit_type:
            return label
    return unit_type


def is_renewable(energy_type: str) -> bool:
    """Whether a *normalized* type label counts as renewable."""
    return energy_type in RENEWABLE_TYPES


def is_private(unit_type: str) -> bool:
    """Whether a *raw* type label denotes private generation."""
    return PRIVATE_MARKER in unit_type


def classify_remark(remark: str) -> str | None:
    """Map a remark to "restriction", "maintenance", "fault" or None."""
    for status, phrases in REMARK_STATUS:
        if any(p in remark for p in phrases):
            return status
    return None


def extract_plant_name(unit_name: str) -> str | None:
    """Return the plant a unit belongs to, or None for subtotal-like names.

    Examples:
        >>> extract_plant_name("台中#1")
        '台中'
        >>> extract_plant_name("大潭 (CC)")
        '大潭'
    """
    pos = unit_name.find(UNIT_INDEX_MARKER)
    if pos >= 0:
        return unit_name[:pos]
    if SUBTOTAL_MARKER in unit_name:
        return None
    return PLANT_DELIMITERS.split(unit_name, maxsplit=1)[0].strip()


# Mapping from upstream load/reserve keys to LoadSummary fields.
LOAD_KEYS = {
    "curr_load": "current_load",
    "curr_util_rate": "current_util_rate",
    "fore_maxi_sply_capacity": "forecast_max_supply_capacity",
    "fore_peak_dema_load": "forecast_peak_demand_load",
    "fore_peak_resv_capacity": "forecast_peak_reserve_capacity",
    "fore_peak_resv_rate": "forecast_peak_reserve_rate",
    "fore_peak_resv_indicator": "forecast_peak_reserve_indicator",
    "fore_peak_hour_range": "forecast_peak_hour_range",
    "publish_time": "publish_time",
    "yday_maxi_sply_capacity": "yesterday_max_supply_capacity",
    "yday_peak_dema_load": "yesterday_peak_demand_load",
    "yday_peak_resv_capacity": "yesterday_peak_reserve_capacity",
    "yday_peak_resv_rate": "yesterday_peak_reserve_rate",
    "yday_peak_resv_indicator": "yesterday_peak_reserve_indicator",
    "real_hr_maxi_sply_capacity": "real_hour_max_supply_capacity",
    "real_hr_peak_time": "real_hour_peak_time",
}

# Upstream load keys passed through as text rather than parsed.
TEXT_LOAD_KEYS = {
    "fore_peak_resv_indicator",
    "fore_peak_hour_range",
    "publish_time",
    "yday_peak_resv_indicator",
    "real_hr_peak_time",
}


def normalize_load(record: LoadRecord) -> LoadSummary:
    """Coerce every optional load field into a concrete value.

    Numeric fields go through `parse_numeric`; text fields pass through.
    Absent fields become 0.0 or "". Fields are independent of each other.
    """
    out = {}
    for src, dst in LOAD_KEYS.items():
        value = getattr(record, src)
        if src in TEXT_LOAD_KEYS:
            out[dst] = value or ""
        else:
            out[dst] = parse_numeric(value)
    return LoadSummary(**out)
