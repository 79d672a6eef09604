"""
gridreport/values.py

Total numeric coercion for Taipower's textual MW / percent fields.

Upstream values look like "1,234.5", "52.1(68.3%)", "-", "N/A" or "". The
parser never raises: anything that cannot be read as a finite number is 0.0,
so a garbled row shrinks a total instead of failing the whole report.
"""

from __future__ import annotations

import math
import re

# Tokens the utility uses for "no reading".
PLACEHOLDERS = {"-", "N/A", ""}

# Plain ASCII decimal or exponent notation; rejects "1_000" and full-width digits.
NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


def parse_numeric(text: str | None) -> float:
    """Parse an upstream numeric field into a finite float.

    Steps:
      - Drop everything from the first "(" onwards (parenthetical notes).
      - Remove thousands separators.
      - Map placeholder tokens to 0.0.
      - Fall back to 0.0 for anything that is not a plain ASCII number, or
        whose value is not finite.

    Examples:
        >>> parse_numeric("1,234")
        1234.0
        >>> parse_numeric("5(note)")
        5.0
        >>> parse_numeric("N/A")
        0.0
    """
    if text is None:
        return 0.0
    cleaned = text.split("(", 1)[0].replace(",", "").strip()
    if cleaned in PLACEHOLDERS:
        return 0.0
    if not NUMBER.fullmatch(cleaned):
        return 0.0
    value = float(cleaned)
    return value if math.isfinite(value) else 0.0
