"""
Input validation utilities for cnasurv.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about caller intent.

Design principles:
    - No silent type coercion (except np.asarray on array-likes)
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

import numbers

import numpy as np
import pandas as pd
from numpy.typing import ArrayLike, NDArray
from typing import Any

from cnasurv.core.exceptions import ValidationError, DimensionError


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.floating[Any]]:
    """
    Validate and convert input to a 1D float64 array.

    Args:
        array: Input to validate
        name: Parameter name for error messages

    Returns:
        numpy.ndarray of dtype float64

    Raises:
        ValidationError: If input cannot be converted to a numeric array
        DimensionError: If input is not one-dimensional
    """
    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    if result.dtype == bool:
        result = result.astype(np.float64)

    if result.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating mixed types or non-numeric data"
        )

    if not np.issubdtype(result.dtype, np.number):
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected numeric data"
        )

    if result.ndim != 1:
        raise DimensionError(
            f"{name}: expected 1D array, got {result.ndim}D with shape {result.shape}"
        )

    return result.astype(np.float64, copy=False)


def check_finite(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array contains no NaN or Inf values.

    Raises:
        ValidationError: If array contains non-finite values
    """
    if not np.all(np.isfinite(array)):
        n_nan = int(np.sum(np.isnan(array)))
        n_inf = int(np.sum(np.isinf(array)))
        raise ValidationError(
            f"{name}: contains non-finite values ({n_nan} NaN, {n_inf} Inf)"
        )


def check_consistent_length(
    *arrays: Any,
    names: tuple[str, ...]
) -> None:
    """
    Verify all arrays have the same length.

    Raises:
        ValueError: If number of names doesn't match number of arrays
        DimensionError: If arrays have inconsistent lengths
    """
    if len(arrays) != len(names):
        raise ValueError(
            f"Number of arrays ({len(arrays)}) must match number of names ({len(names)})"
        )

    if len(arrays) < 2:
        return

    lengths = [len(arr) for arr in arrays]
    if len(set(lengths)) > 1:
        details = ", ".join(f"{name}={length}" for name, length in zip(names, lengths))
        raise DimensionError(f"Inconsistent lengths: {details}")


def check_positive_int(value: Any, name: str) -> int:
    """
    Verify value is a positive integer (bools rejected).

    Returns:
        The value as a plain int

    Raises:
        ValidationError: If value is not an integer >= 1
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ValidationError(
            f"{name}: expected a positive integer, got {type(value).__name__} {value!r}"
        )
    if value < 1:
        raise ValidationError(f"{name}: must be >= 1, got {value}")
    return int(value)


def check_probability(value: float, name: str) -> None:
    """
    Verify value lies strictly inside (0, 1).

    Raises:
        ValidationError: If value is outside the open unit interval
    """
    if not 0.0 < value < 1.0:
        raise ValidationError(f"{name}: must be in (0, 1), got {value}")


def is_missing(value: Any) -> bool:
    """
    True for None, NaN, pandas NA/NaT and blank strings.

    Non-scalar values are never considered missing here; coercion
    rejects them separately.
    """
    if isinstance(value, str):
        return not value.strip()
    if not pd.api.types.is_scalar(value):
        return False
    return bool(pd.isna(value))
