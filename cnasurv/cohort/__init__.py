"""
Cohort builder.

Public API:
    build_cohorts(table, marker, predicate=is_gain) -> CohortSplit
    is_gain(value) -> bool
"""

from cnasurv.cohort._common import (
    GAIN_LABEL,
    NO_GAIN_LABEL,
    Cohort,
    CohortSplit,
    PatientRecord,
)
from cnasurv.cohort.solvers import build_cohorts, is_gain

__all__ = [
    "build_cohorts",
    "is_gain",
    "Cohort",
    "CohortSplit",
    "PatientRecord",
    "GAIN_LABEL",
    "NO_GAIN_LABEL",
]
