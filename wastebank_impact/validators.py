"""
validators.py – Defensive numeric coercion for raw record fields.

Records arrive from the data layer as loosely-typed dicts: weights may be
strings, ``None``, negative, or NaN.  Accounting must degrade gracefully
rather than abort a whole report, so nothing here raises.
"""
from __future__ import annotations

import math
import re
from typing import Any

_NUMERIC_NOISE = re.compile(r"(?i)rp|[,$€£¥\s]")
# Rupiah amounts group thousands with dots: "Rp 50.000"
_RUPIAH_PREFIX = re.compile(r"(?i)^\s*rp\.?")


def to_float(value: Any) -> float | None:
    """
    Try to convert *value* to float.

    Strips commas, spaces, and common currency prefixes before conversion.
    Amounts written with an ``Rp`` prefix use dots as thousands separators
    (``"Rp 50.000"`` → 50000.0); other strings must use a plain decimal
    point.  Returns None on failure.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        text = value
        rupiah = _RUPIAH_PREFIX.match(text)
        if rupiah:
            text = text[rupiah.end():].replace(".", "")
        cleaned = _NUMERIC_NOISE.sub("", text)
        try:
            return float(cleaned)
        except ValueError:
            return None
    return None


def coerce_weight(value: Any) -> float:
    """
    Return *value* as a finite, non-negative float.

    ``None``, NaN, infinities, negatives, and non-numeric values all become 0.0.
    """
    number = to_float(value)
    if number is None or not math.isfinite(number) or number < 0:
        return 0.0
    return number
