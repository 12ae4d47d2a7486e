"""
Payloads for the batch runner.

Status strings are defined here and nowhere else. Import the constants,
never compare against raw strings.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cnasurv.survival.solution import KMSolution, LogRankSolution


# Both cohorts large enough and the log-rank statistic is defined
STATUS_EVALUATED = 'evaluated'

# A cohort fell below min_group_size; no curve or test computed
STATUS_SKIPPED = 'skipped'

# Log-rank variance was zero; there is no p-value
STATUS_NOT_COMPUTABLE = 'not_computable'

# Marker missing from the table, or its values broke the predicate
STATUS_INVALID = 'invalid'

ALL_STATUSES = frozenset({
    STATUS_EVALUATED,
    STATUS_SKIPPED,
    STATUS_NOT_COMPUTABLE,
    STATUS_INVALID,
})

REASON_INSUFFICIENT_SAMPLE = 'insufficient sample size'
REASON_ZERO_VARIANCE = 'zero log-rank variance'
REASON_MARKER_NOT_FOUND = 'marker not found'


@dataclass(frozen=True)
class MarkerOutcome:
    """Outcome of one marker in a batch run.

    statistic, p_value, df, the two curves and the test are set only when
    status is STATUS_EVALUATED. Cohort sizes are set for every status
    except STATUS_INVALID.
    """

    marker: str
    status: str
    reason: str | None = None
    n_gain: int | None = None
    n_no_gain: int | None = None
    n_dropped: int | None = None
    statistic: float | None = None
    p_value: float | None = None
    df: int | None = None
    curve_gain: KMSolution | None = None
    curve_no_gain: KMSolution | None = None
    test: LogRankSolution | None = None

    @property
    def is_evaluated(self) -> bool:
        return self.status == STATUS_EVALUATED


@dataclass(frozen=True)
class BatchParams:
    """All marker outcomes of one run, in requested order."""

    outcomes: tuple[MarkerOutcome, ...]
    min_group_size: int
    n_patients: int
