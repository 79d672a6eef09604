"""Pytest configuration shared across the test suite."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure the project root is on sys.path so ``import gridreport`` works when
# running the test suite without installing the package.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture
def make_row():
    """Factory for raw generation rows keyed by the upstream field names."""

    def _make(unit_type="燃煤", unit_name="台中#1", capacity="550.0", generation="500.0", remark=""):
        return {
            "機組類型": unit_type,
            "機組名稱": unit_name,
            "裝置容量(MW)": capacity,
            "淨發電量(MW)": generation,
            "淨發電量/裝置容量比(%)": "0.0%",
            "備註": remark,
        }

    return _make


@pytest.fixture
def make_unit(make_row):
    """Factory for validated `GenerationUnit` models."""
    from gridreport.validate import GenerationUnit

    def _make(**kwargs):
        return GenerationUnit.model_validate(make_row(**kwargs))

    return _make
