"""Tests for generation-schema resolution and load envelope decoding."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest

from gridreport import validate
from gridreport.errors import ParseFailure


class FixedDateTime(datetime):
    """Helper to patch `datetime.now` deterministically in tests."""

    @classmethod
    def now(cls, tz=None):  # pragma: no cover - trivial
        return cls(2024, 7, 1, 13, 5, 9, tzinfo=timezone.utc)


def dumps(obj) -> str:
    return json.dumps(obj, ensure_ascii=False)


def test_resolve_standard_shape_keeps_upstream_timestamp(make_row):
    """The DateTime/aaData shape wins and keeps its own timestamp."""

    body = dumps({"DateTime": "2024-07-01 21:00", "aaData": [make_row()]})

    resolved = validate.resolve_units(body)

    assert resolved.shape == "standard"
    assert resolved.update_time == "2024-07-01 21:00"
    assert [u.unit_name for u in resolved.units] == ["台中#1"]


def test_resolve_standard_does_not_fall_through(make_row):
    """A body valid for the standard shape is not reinterpreted as another."""

    body = dumps(
        {
            "DateTime": "2024-07-01 21:00",
            "aaData": [make_row(unit_name="A#1")],
            "datas": [make_row(unit_name="B#1")],
        }
    )

    resolved = validate.resolve_units(body)

    assert resolved.shape == "standard"
    assert [u.unit_name for u in resolved.units] == ["A#1"]


def test_resolve_alternative_shape_synthesizes_timestamp(monkeypatch, make_row):
    """The `datas` shape has no timestamp, so UTC now is used."""

    monkeypatch.setattr(validate, "datetime", FixedDateTime)
    body = dumps({"datas": [make_row(), make_row(unit_name="台中#2")]})

    resolved = validate.resolve_units(body)

    assert resolved.shape == "alternative"
    assert resolved.update_time == "2024-07-01 13:05:09"
    assert len(resolved.units) == 2


def test_resolve_bare_list(monkeypatch, make_row):
    """A bare array of rows is still accepted as a last resort."""

    monkeypatch.setattr(validate, "datetime", FixedDateTime)

    resolved = validate.resolve_units(dumps([make_row()]))

    assert resolved.shape == "bare"
    assert resolved.update_time == "2024-07-01 13:05:09"
    assert resolved.units[0].generation == "500.0"


def test_resolve_standard_with_bad_row_falls_through_to_failure(make_row):
    """A row missing a required key invalidates the shape it sits in."""

    row = make_row()
    del row["備註"]

    with pytest.raises(ParseFailure):
        validate.resolve_units(dumps({"DateTime": "x", "aaData": [row]}))


@pytest.mark.parametrize("body", ["", "{not json", "null", '{"records": []}', "[1, 2]", "<html></html>"])
def test_resolve_units_rejects_unknown_bodies(body):
    """Bodies matching none of the shapes raise ParseFailure."""

    with pytest.raises(ParseFailure):
        validate.resolve_units(body)


def test_generation_unit_ignores_unknown_keys(make_row):
    """Extra upstream keys are ignored."""

    row = make_row()
    row["extra"] = 1

    unit = validate.GenerationUnit.model_validate(row)

    assert unit.unit_type == "燃煤"
    assert unit.remark == ""


def test_resolve_load_merges_records_last_value_wins():
    """Later records override earlier ones only for fields they carry."""

    body = dumps(
        {
            "success": "true",
            "result": {"resource_id": "abc"},
            "records": [
                {"curr_load": "3000.5", "fore_peak_resv_indicator": "G"},
                {"curr_load": "3100.0", "publish_time": "114.07.01(一)21:00"},
                {"real_hr_peak_time": None},
            ],
        }
    )

    record = validate.resolve_load(body)

    assert record.curr_load == "3100.0"
    assert record.fore_peak_resv_indicator == "G"
    assert record.publish_time == "114.07.01(一)21:00"
    assert record.real_hr_peak_time is None


def test_resolve_load_empty_records():
    """An envelope with no records yields an all-absent record."""

    body = dumps({"success": "true", "result": {"resource_id": "abc"}, "records": []})

    record = validate.resolve_load(body)

    assert record == validate.LoadRecord()


@pytest.mark.parametrize(
    "body",
    [
        "{broken",
        dumps({"records": []}),
        dumps({"success": "true", "result": {}, "records": []}),
        dumps([{"curr_load": "1"}]),
    ],
)
def test_resolve_load_rejects_malformed_envelope(body):
    """A missing or malformed envelope is a hard failure."""

    with pytest.raises(ParseFailure):
        validate.resolve_load(body)
