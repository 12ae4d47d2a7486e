"""
Per-cell coercion for raw patient rows.

Each coercer returns the cleaned value, or None when the cell is missing
or cannot be interpreted. None means the row is dropped; nothing is imputed.
"""

from __future__ import annotations

import math
from typing import Any

from cnasurv.core.validation import is_missing


_TRUE_STRINGS = frozenset({"1", "true", "yes"})
_FALSE_STRINGS = frozenset({"0", "false", "no"})


def _to_float(value: Any) -> float | None:
    if is_missing(value) or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result):
        return None
    return result


def coerce_marker(value: Any, categorical: bool = False) -> float | str | None:
    """Numeric marker value, or a stripped label when categorical."""
    if categorical:
        if is_missing(value):
            return None
        return value.strip() if isinstance(value, str) else value
    result = _to_float(value)
    if result is None or math.isinf(result):
        return None
    return result


def coerce_time(value: Any) -> float | None:
    """Finite, non-negative survival time."""
    result = _to_float(value)
    if result is None or not math.isfinite(result) or result < 0:
        return None
    return result


def coerce_event(value: Any) -> bool | None:
    """Event indicator from bool, 0/1 numbers or 0/1/true/false strings."""
    if isinstance(value, bool):
        return value
    if is_missing(value):
        return None
    if isinstance(value, str):
        label = value.strip().lower()
        if label in _TRUE_STRINGS:
            return True
        if label in _FALSE_STRINGS:
            return False
    result = _to_float(value)
    if result == 1.0:
        return True
    if result == 0.0:
        return False
    return None
