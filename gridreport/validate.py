"""
gridreport/validate.py

Schema resolution for raw Taipower JSON bodies.

Responsibilities
----------------
- Define pydantic models for one generation-unit row and for the load/reserve
  envelope, keyed by the upstream field names.
- Provide `resolve_units` to decode a generation body that may arrive in any
  of three known shapes:
  * "standard":    {"DateTime": "...", "aaData": [row, ...]}
  * "alternative": {"datas": [row, ...]}
  * "bare":        [row, ...]
  The shapes are tried in that order and the first structural match wins.
  The last two carry no timestamp, so one is synthesized from UTC "now".
- Provide `resolve_load` to decode the load/reserve envelope and merge its
  records into a single `LoadRecord`.

Conventions
-----------
- Every generation row must carry all six upstream keys as strings; a row
  that does not makes the whole shape fail to match.
- Unknown keys are ignored everywhere.
- Decoding problems are reported as `ParseFailure`, never as pydantic or
  JSON errors.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import NamedTuple

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from .errors import ParseFailure

# Format used for timestamps synthesized at parse time.
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class GenerationUnit(BaseModel):
    """One generator row as published by Taipower.

    Attributes:
        unit_type: Category label, e.g. "燃煤" or "民營電廠-燃煤".
        unit_name: Unit label, e.g. "台中#1"; "小計" marks subtotal rows.
        capacity: Installed capacity in MW, as text.
        generation: Net generation in MW, as text.
        ratio: Generation/capacity percentage, as text (not used downstream).
        remark: Free-text status annotation.
    """

    unit_type: str = Field(alias="機組類型")
    unit_name: str = Field(alias="機組名稱")
    capacity: str = Field(alias="裝置容量(MW)")
    generation: str = Field(alias="淨發電量(MW)")
    ratio: str = Field(alias="淨發電量/裝置容量比(%)")
    remark: str = Field(alias="備註")


class StandardPayload(BaseModel):
    date_time: str = Field(alias="DateTime")
    units: list[GenerationUnit] = Field(alias="aaData")


class AlternativePayload(BaseModel):
    units: list[GenerationUnit] = Field(alias="datas")


BareUnits = TypeAdapter(list[GenerationUnit])


class ResolvedUnits(NamedTuple):
    """Outcome of `resolve_units`: which shape matched and what it held."""

    shape: str
    update_time: str
    units: list[GenerationUnit]


class LoadRecord(BaseModel):
    """One row of the load/reserve dataset. Every field is optional."""

    curr_load: str | None = None
    curr_util_rate: str | None = None
    fore_maxi_sply_capacity: str | None = None
    fore_peak_dema_load: str | None = None
    fore_peak_resv_capacity: str | None = None
    fore_peak_resv_rate: str | None = None
    fore_peak_resv_indicator: str | None = None
    fore_peak_hour_range: str | None = None
    publish_time: str | None = None
    yday_date: str | None = None
    yday_maxi_sply_capacity: str | None = None
    yday_peak_dema_load: str | None = None
    yday_peak_resv_capacity: str | None = None
    yday_peak_resv_rate: str | None = None
    yday_peak_resv_indicator: str | None = None
    real_hr_maxi_sply_capacity: str | None = None
    real_hr_peak_time: str | None = None


class LoadResult(BaseModel):
    resource_id: str


class LoadEnvelope(BaseModel):
    success: str
    result: LoadResult
    records: list[LoadRecord]


def utc_stamp() -> str:
    """Return the current UTC time formatted as ``YYYY-MM-DD HH:MM:SS``."""
    return datetime.now(timezone.utc).strftime(TIMESTAMP_FORMAT)


def resolve_units(text: str) -> ResolvedUnits:
    """Decode a generation body into a uniform list of unit rows.

    Args:
        text: Raw response body.

    Returns:
        ResolvedUnits: The matched shape name, the update timestamp (taken
        from the body for the standard shape, synthesized otherwise) and the
        decoded rows.

    Raises:
        ParseFailure: If the body matches none of the three shapes.
    """
    try:
        standard = StandardPayload.model_validate_json(text)
    except ValidationError:
        pass
    else:
        return ResolvedUnits("standard", standard.date_time, standard.units)

    try:
        alternative = AlternativePayload.model_validate_json(text)
    except ValidationError:
        pass
    else:
        return ResolvedUnits("alternative", utc_stamp(), alternative.units)

    try:
        units = BareUnits.validate_json(text)
    except ValidationError:
        pass
    else:
        return ResolvedUnits("bare", utc_stamp(), units)

    raise ParseFailure("body matches no known generation schema")


def resolve_load(text: str) -> LoadRecord:
    """Decode the load/reserve envelope into a single merged record.

    Records are merged in order; for each field the last record that carries
    a value wins. An empty ``records`` list yields an all-empty record.

    Raises:
        ParseFailure: If the envelope is missing or malformed.
    """
    try:
        envelope = LoadEnvelope.model_validate_json(text)
    except ValidationError as exc:
        raise ParseFailure(f"malformed load envelope: {exc.error_count()} error(s)") from exc

    merged: dict[str, str] = {}
    for record in envelope.records:
        merged.update(record.model_dump(exclude_none=True))
    return LoadRecord(**merged)
