"""
cnasurv: survival comparison of copy-number gain vs. no-gain cohorts.

For each gene marker in a subtype-restricted patient table, split patients
by copy-number gain, estimate both Kaplan-Meier curves and test their
difference with the log-rank test.

Submodules:
    cohort: Gain / no-gain cohort construction
    survival: Kaplan-Meier estimator and two-group log-rank test
    batch: Per-marker runner with minimum group size gate
"""

__version__ = "0.1.0"

from cnasurv.core import (
    PatientTable,
    event_from_vital_status,
    CnaSurvError,
    ValidationError,
    InvalidMarkerError,
    NotComputableError,
)
from cnasurv import cohort
from cnasurv import survival
from cnasurv import batch
from cnasurv.cohort import build_cohorts, is_gain
from cnasurv.survival import kaplan_meier, estimate, survdiff, compare
from cnasurv.batch import run_batch

__all__ = [
    "__version__",
    "cohort",
    "survival",
    "batch",
    "PatientTable",
    "event_from_vital_status",
    "build_cohorts",
    "is_gain",
    "kaplan_meier",
    "estimate",
    "survdiff",
    "compare",
    "run_batch",
    "CnaSurvError",
    "ValidationError",
    "InvalidMarkerError",
    "NotComputableError",
]
