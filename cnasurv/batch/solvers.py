"""
Public API for the batch runner.

    run_batch(table, markers, min_group_size=5) -> BatchSolution

For every marker: build gain / no-gain cohorts, gate on cohort size,
fit both Kaplan-Meier curves and run the log-rank test. Each marker is
reported exactly once, in the requested order, whatever happens to the
others.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable

from cnasurv.cohort.solvers import build_cohorts, is_gain
from cnasurv.core.compute.timing import Timer
from cnasurv.core.datasource import PatientTable
from cnasurv.core.exceptions import (
    InvalidMarkerError,
    NotComputableError,
    ValidationError,
)
from cnasurv.core.result import Result
from cnasurv.survival.solvers import DEFAULT_CONF_LEVEL, compare, estimate
from cnasurv.batch._common import (
    REASON_INSUFFICIENT_SAMPLE,
    REASON_MARKER_NOT_FOUND,
    REASON_ZERO_VARIANCE,
    STATUS_EVALUATED,
    STATUS_INVALID,
    STATUS_NOT_COMPUTABLE,
    STATUS_SKIPPED,
    BatchParams,
    MarkerOutcome,
)
from cnasurv.batch.design import DEFAULT_MIN_GROUP_SIZE, BatchDesign
from cnasurv.batch.solution import BatchSolution

logger = logging.getLogger(__name__)


def _evaluate_marker(
    table: PatientTable,
    marker: str,
    design: BatchDesign,
) -> MarkerOutcome:
    """Run one marker end to end. Only reads ``table``."""
    try:
        split = build_cohorts(
            table, marker, design.predicate, categorical=design.categorical,
        )
    except InvalidMarkerError:
        return MarkerOutcome(
            marker=marker, status=STATUS_INVALID, reason=REASON_MARKER_NOT_FOUND,
        )
    except ValidationError as e:
        return MarkerOutcome(marker=marker, status=STATUS_INVALID, reason=str(e))

    n_gain, n_no_gain = split.sizes
    counts = dict(n_gain=n_gain, n_no_gain=n_no_gain, n_dropped=split.n_dropped)

    if min(n_gain, n_no_gain) < design.min_group_size:
        return MarkerOutcome(
            marker=marker,
            status=STATUS_SKIPPED,
            reason=REASON_INSUFFICIENT_SAMPLE,
            **counts,
        )

    curve_gain = estimate(split.gain, conf_level=design.conf_level)
    curve_no_gain = estimate(split.no_gain, conf_level=design.conf_level)

    try:
        test = compare(curve_gain, curve_no_gain)
    except NotComputableError:
        return MarkerOutcome(
            marker=marker,
            status=STATUS_NOT_COMPUTABLE,
            reason=REASON_ZERO_VARIANCE,
            **counts,
        )

    return MarkerOutcome(
        marker=marker,
        status=STATUS_EVALUATED,
        statistic=test.statistic,
        p_value=test.p_value,
        df=test.df,
        curve_gain=curve_gain,
        curve_no_gain=curve_no_gain,
        test=test,
        **counts,
    )


def run_batch(
    table: PatientTable,
    markers,
    min_group_size: int = DEFAULT_MIN_GROUP_SIZE,
    *,
    predicate: Callable[[Any], bool] = is_gain,
    categorical: bool = False,
    conf_level: float = DEFAULT_CONF_LEVEL,
    workers: int = 1,
) -> BatchSolution:
    """Gain vs. no-gain survival comparison for each marker.

    Parameters
    ----------
    table : PatientTable
        Patients restricted to one disease subtype.
    markers : sequence of str
        Marker columns to evaluate. Must be non-empty and unique.
    min_group_size : int
        Markers with either cohort smaller than this are skipped
        (default 5).
    predicate : callable
        ``predicate(marker_value) -> bool`` selecting the gain cohort.
        Defaults to value > 0.
    categorical : bool
        Keep marker values as labels instead of coercing to float.
    conf_level : float
        Confidence level of the Kaplan-Meier bands.
    workers : int
        Threads to evaluate markers on. Results keep the requested order.

    Returns
    -------
    BatchSolution

    Raises
    ------
    ValidationError
        For malformed invocations only (bad table, markers or thresholds).
        Problems with individual markers become outcomes.
    """
    if not isinstance(table, PatientTable):
        raise ValidationError(
            f"table must be a PatientTable, got {type(table).__name__}"
        )

    design = BatchDesign.for_batch(
        markers,
        min_group_size,
        predicate=predicate,
        categorical=categorical,
        conf_level=conf_level,
        workers=workers,
    )

    logger.info(
        "running %d marker(s) over %d patient(s), min_group_size=%d, workers=%d",
        design.n_markers, table.n_observations, design.min_group_size, design.workers,
    )

    timer = Timer()
    timer.start()

    with timer.section('markers'):
        if design.workers == 1:
            outcomes = [_evaluate_marker(table, m, design) for m in design.markers]
        else:
            with ThreadPoolExecutor(max_workers=design.workers) as pool:
                outcomes = list(pool.map(
                    lambda m: _evaluate_marker(table, m, design), design.markers,
                ))

    timer.stop()

    for outcome in outcomes:
        if outcome.is_evaluated:
            logger.debug(
                "%s: chisq=%.4f p=%.4g (gain=%d, no gain=%d)",
                outcome.marker, outcome.statistic, outcome.p_value,
                outcome.n_gain, outcome.n_no_gain,
            )
        else:
            logger.debug(
                "%s: %s (%s; gain=%s, no gain=%s)",
                outcome.marker, outcome.status, outcome.reason,
                outcome.n_gain, outcome.n_no_gain,
            )

    warnings_list = []
    for status in (STATUS_SKIPPED, STATUS_NOT_COMPUTABLE, STATUS_INVALID):
        names = [o.marker for o in outcomes if o.status == status]
        if names:
            warnings_list.append(f"{len(names)} marker(s) {status}: {names}")

    n_evaluated = sum(1 for o in outcomes if o.is_evaluated)
    logger.info(
        "batch finished: %d of %d marker(s) evaluated",
        n_evaluated, design.n_markers,
    )

    result = Result(
        params=BatchParams(
            outcomes=tuple(outcomes),
            min_group_size=design.min_group_size,
            n_patients=table.n_observations,
        ),
        info={
            "method": "Kaplan-Meier + log-rank per marker",
            "n_markers": design.n_markers,
            "n_evaluated": n_evaluated,
            "workers": design.workers,
        },
        timing=timer.result(),
        backend_name="cpu_batch",
        warnings=tuple(warnings_list),
    )

    return BatchSolution(_result=result)
