"""
Core infrastructure for cnasurv.

This module provides shared abstractions and utilities used by the
cohort, survival and batch subpackages.

Key components:
    datasource: PatientTable, the in-memory patient x marker table
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    compute: Timing
"""

from cnasurv.core.datasource import PatientTable, event_from_vital_status
from cnasurv.core.result import Result
from cnasurv.core.exceptions import (
    CnaSurvError,
    ValidationError,
    DimensionError,
    InvalidMarkerError,
    NumericalError,
    NotComputableError,
)

__all__ = [
    # Data
    "PatientTable",
    "event_from_vital_status",
    # Result
    "Result",
    # Exceptions
    "CnaSurvError",
    "ValidationError",
    "DimensionError",
    "InvalidMarkerError",
    "NumericalError",
    "NotComputableError",
]
