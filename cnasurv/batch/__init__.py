"""
Batch runner: gain vs. no-gain survival comparison across markers.

Public API:
    run_batch(table, markers, min_group_size=5) -> BatchSolution
"""

from cnasurv.batch._common import (
    ALL_STATUSES,
    REASON_INSUFFICIENT_SAMPLE,
    REASON_MARKER_NOT_FOUND,
    REASON_ZERO_VARIANCE,
    STATUS_EVALUATED,
    STATUS_INVALID,
    STATUS_NOT_COMPUTABLE,
    STATUS_SKIPPED,
    MarkerOutcome,
)
from cnasurv.batch.design import DEFAULT_MIN_GROUP_SIZE, BatchDesign
from cnasurv.batch.solution import BatchSolution
from cnasurv.batch.solvers import run_batch

__all__ = [
    "run_batch",
    "BatchDesign",
    "BatchSolution",
    "MarkerOutcome",
    "DEFAULT_MIN_GROUP_SIZE",
    "STATUS_EVALUATED",
    "STATUS_SKIPPED",
    "STATUS_NOT_COMPUTABLE",
    "STATUS_INVALID",
    "ALL_STATUSES",
    "REASON_INSUFFICIENT_SAMPLE",
    "REASON_ZERO_VARIANCE",
    "REASON_MARKER_NOT_FOUND",
]
