"""
Solution wrapper for batch runs.

BatchSolution is a read-only, ordered mapping from marker name to its
MarkerOutcome, plus reporting helpers.
"""

from __future__ import annotations

from typing import Iterator, TYPE_CHECKING

from cnasurv.core.result import Result
from cnasurv.batch._common import (
    STATUS_EVALUATED,
    STATUS_INVALID,
    STATUS_NOT_COMPUTABLE,
    STATUS_SKIPPED,
    BatchParams,
    MarkerOutcome,
)

if TYPE_CHECKING:
    import pandas as pd


class BatchSolution:
    """Per-marker outcomes of run_batch(), in requested order."""

    __slots__ = ('_result', '_by_marker')

    def __init__(self, _result: Result[BatchParams]) -> None:
        self._result = _result
        self._by_marker = {o.marker: o for o in _result.params.outcomes}

    # -- Mapping access --

    def __getitem__(self, marker: str) -> MarkerOutcome:
        return self._by_marker[marker]

    def __contains__(self, marker: object) -> bool:
        return marker in self._by_marker

    def __iter__(self) -> Iterator[str]:
        return iter(self._by_marker)

    def __len__(self) -> int:
        return len(self._by_marker)

    @property
    def outcomes(self) -> dict[str, MarkerOutcome]:
        """marker -> MarkerOutcome, in requested order."""
        return dict(self._by_marker)

    @property
    def p_values(self) -> dict[str, float]:
        """marker -> p-value for evaluated markers only."""
        return {
            m: o.p_value for m, o in self._by_marker.items() if o.is_evaluated
        }

    def _with_status(self, status: str) -> list[MarkerOutcome]:
        return [o for o in self._result.params.outcomes if o.status == status]

    def evaluated(self) -> list[MarkerOutcome]:
        return self._with_status(STATUS_EVALUATED)

    def skipped(self) -> list[MarkerOutcome]:
        return self._with_status(STATUS_SKIPPED)

    def not_computable(self) -> list[MarkerOutcome]:
        return self._with_status(STATUS_NOT_COMPUTABLE)

    def invalid(self) -> list[MarkerOutcome]:
        return self._with_status(STATUS_INVALID)

    # -- Run metadata --

    @property
    def min_group_size(self) -> int:
        return self._result.params.min_group_size

    @property
    def n_patients(self) -> int:
        return self._result.params.n_patients

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def timing(self):
        return self._result.timing

    # -- Reporting --

    def to_frame(self) -> 'pd.DataFrame':
        """One row per marker, without the curve and test objects."""
        import pandas as pd

        rows = [
            {
                'marker': o.marker,
                'status': o.status,
                'reason': o.reason,
                'n_gain': o.n_gain,
                'n_no_gain': o.n_no_gain,
                'n_dropped': o.n_dropped,
                'statistic': o.statistic,
                'p_value': o.p_value,
            }
            for o in self._result.params.outcomes
        ]
        return pd.DataFrame(
            rows,
            columns=[
                'marker', 'status', 'reason', 'n_gain', 'n_no_gain',
                'n_dropped', 'statistic', 'p_value',
            ],
        )

    def summary(self) -> str:
        """Tabular summary of every marker."""
        lines = []
        lines.append("Call: run_batch()")
        lines.append("")
        lines.append(
            f"  patients={self.n_patients}, markers={len(self)}, "
            f"evaluated={len(self.evaluated())}, "
            f"min_group_size={self.min_group_size}"
        )
        lines.append("")
        lines.append(
            f"  {'marker':>12s}  {'gain':>6s}  {'no gain':>7s}  "
            f"{'chisq':>10s}  {'p':>10s}  status"
        )
        for o in self._result.params.outcomes:
            n_gain = f"{o.n_gain:6d}" if o.n_gain is not None else f"{'NA':>6s}"
            n_no = f"{o.n_no_gain:7d}" if o.n_no_gain is not None else f"{'NA':>7s}"
            if o.is_evaluated:
                stat = f"{o.statistic:10.4f}"
                p = f"{o.p_value:10.4g}"
                status = o.status
            else:
                stat = p = f"{'NA':>10s}"
                status = f"{o.status} ({o.reason})"
            lines.append(
                f"  {o.marker:>12s}  {n_gain}  {n_no}  {stat}  {p}  {status}"
            )
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"BatchSolution(markers={len(self)}, "
            f"evaluated={len(self.evaluated())}, "
            f"skipped={len(self.skipped())}, "
            f"not_computable={len(self.not_computable())}, "
            f"invalid={len(self.invalid())})"
        )
