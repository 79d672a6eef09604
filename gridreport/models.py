"""
gridreport/models.py

Result models produced by the analysis and normalization stages.

Conventions
-----------
- Generation and capacity figures are MW; load figures are in units of
  10 MW (萬瓩) exactly as published.
- Ratios are percentages in [0, 100] and are 0.0 when the denominator is 0.
- Models are frozen once built; mappings are stored read-only.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, field_validator


class PowerAnalysis(BaseModel):
    """Aggregate statistics derived from one snapshot of generation units.

    Attributes:
        update_time: Snapshot timestamp (upstream or synthesized).
        total_generation: Net generation summed over non-subtotal rows (MW).
        total_capacity: Installed capacity summed over the same rows (MW).
        generation_by_type: Normalized energy-type label -> generation (MW).
        top_plant: (plant name, generation) of the largest plant.
        top_unit: (unit name, generation) of the largest single unit.
        restriction_count: Units under environmental/operating restriction.
        maintenance_count: Units under maintenance or overhaul.
        fault_count: Faulted units.
        renewable_ratio: Renewable share of total generation (%).
        private_ratio: Private-plant share of total generation (%).
    """

    model_config = ConfigDict(frozen=True)

    update_time: str
    total_generation: float
    total_capacity: float
    generation_by_type: Mapping[str, float]
    top_plant: tuple[str, float]
    top_unit: tuple[str, float]
    restriction_count: int
    maintenance_count: int
    fault_count: int
    renewable_ratio: float
    private_ratio: float

    @field_validator("generation_by_type", mode="after")
    @classmethod
    def freeze_mapping(cls, v):
        """Store the breakdown as a read-only view of a private copy."""
        return MappingProxyType(dict(v))


class LoadSummary(BaseModel):
    """Load/reserve figures with every field defaulted to 0.0 or ""."""

    model_config = ConfigDict(frozen=True)

    current_load: float = 0.0
    current_util_rate: float = 0.0
    forecast_max_supply_capacity: float = 0.0
    forecast_peak_demand_load: float = 0.0
    forecast_peak_reserve_capacity: float = 0.0
    forecast_peak_reserve_rate: float = 0.0
    forecast_peak_reserve_indicator: str = ""
    forecast_peak_hour_range: str = ""
    publish_time: str = ""
    yesterday_max_supply_capacity: float = 0.0
    yesterday_peak_demand_load: float = 0.0
    yesterday_peak_reserve_capacity: float = 0.0
    yesterday_peak_reserve_rate: float = 0.0
    yesterday_peak_reserve_indicator: str = ""
    real_hour_max_supply_capacity: float = 0.0
    real_hour_peak_time: str = ""


class CombinedReport(BaseModel):
    """Everything one report needs. `load` is None when load data failed."""

    model_config = ConfigDict(frozen=True)

    analysis: PowerAnalysis
    load: LoadSummary | None = None
