"""
Public API for the cohort builder.

    build_cohorts(table, marker) -> CohortSplit
    is_gain(value) -> bool

Splits a subtype-restricted patient table into "Gain" and "No Gain" cohorts
for one marker, dropping rows whose marker, time or event is missing.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from cnasurv.core.datasource import PatientTable
from cnasurv.core.exceptions import ValidationError
from cnasurv.cohort._coerce import coerce_event, coerce_marker, coerce_time
from cnasurv.cohort._common import (
    DROP_MISSING_EVENT,
    DROP_MISSING_MARKER,
    DROP_MISSING_TIME,
    GAIN_LABEL,
    NO_GAIN_LABEL,
    Cohort,
    CohortSplit,
    PatientRecord,
)

logger = logging.getLogger(__name__)


def is_gain(value: Any) -> bool:
    """Copy-number gain: category strictly above zero."""
    return value > 0


def build_cohorts(
    table: PatientTable,
    marker: str,
    predicate: Callable[[Any], bool] = is_gain,
    *,
    categorical: bool = False,
) -> CohortSplit:
    """Split patients into gain / no-gain cohorts for one marker.

    Parameters
    ----------
    table : PatientTable
        Patients already restricted to one disease subtype.
    marker : str
        Marker column to classify on.
    predicate : callable
        ``predicate(marker_value) -> bool``; True assigns the patient to
        the gain cohort. Defaults to :func:`is_gain` (value > 0).
    categorical : bool
        Keep marker values as labels instead of coercing them to float.

    Returns
    -------
    CohortSplit
        Both cohorts plus per-reason drop counts. Either cohort may be
        empty; size gating is left to the caller.

    Raises
    ------
    InvalidMarkerError
        If the table has no column named ``marker``.
    ValidationError
        If ``predicate`` is not callable, or raises on a marker value.
    """
    if not callable(predicate):
        raise ValidationError(
            f"predicate must be callable, got {type(predicate).__name__}"
        )

    values = table.column(marker)

    gain: list[PatientRecord] = []
    no_gain: list[PatientRecord] = []
    dropped = {
        DROP_MISSING_MARKER: 0,
        DROP_MISSING_TIME: 0,
        DROP_MISSING_EVENT: 0,
    }

    for pid, raw_marker, raw_time, raw_event in zip(
        table.patient_id, values, table.time, table.event,
    ):
        marker_value = coerce_marker(raw_marker, categorical=categorical)
        if marker_value is None:
            dropped[DROP_MISSING_MARKER] += 1
            continue
        time = coerce_time(raw_time)
        if time is None:
            dropped[DROP_MISSING_TIME] += 1
            continue
        event = coerce_event(raw_event)
        if event is None:
            dropped[DROP_MISSING_EVENT] += 1
            continue

        record = PatientRecord(
            patient_id=pid, time=time, event=event, marker=marker_value,
        )
        try:
            in_gain = bool(predicate(marker_value))
        except Exception as e:
            raise ValidationError(
                f"predicate failed on marker '{marker}' value {marker_value!r} "
                f"(patient {pid!r}): {e}"
            ) from e

        if in_gain:
            gain.append(record)
        else:
            no_gain.append(record)

    split = CohortSplit(
        marker=marker,
        gain=Cohort.from_records(GAIN_LABEL, gain),
        no_gain=Cohort.from_records(NO_GAIN_LABEL, no_gain),
        n_input=table.n_observations,
        dropped_by_reason=dropped,
    )

    logger.debug(
        "marker %s: %d gain, %d no gain, %d dropped %s",
        marker, split.gain.n, split.no_gain.n, split.n_dropped, dropped,
    )
    return split
