"""
Solution wrappers for survival analysis results.

Each Solution wraps a Result[Params] and exposes user-friendly properties
with R-style summary() methods.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike, NDArray

from cnasurv.core.result import Result
from cnasurv.survival._common import KMParams, LogRankParams
from cnasurv.survival.design import SurvivalDesign


class KMSolution:
    """Kaplan-Meier survival curve solution.

    Keeps the SurvivalDesign it was estimated from so the curve can be
    passed straight to compare().
    """

    __slots__ = ('_result', '_design')

    def __init__(self, _result: Result[KMParams], _design: SurvivalDesign) -> None:
        self._result = _result
        self._design = _design

    # -- Properties delegating to KMParams --

    @property
    def time(self):
        """Distinct event times."""
        return self._result.params.time

    @property
    def survival(self):
        """S(t) at each event time."""
        return self._result.params.survival

    @property
    def n_risk(self):
        """Number at risk at each event time."""
        return self._result.params.n_risk

    @property
    def n_events(self):
        """Number of events at each event time."""
        return self._result.params.n_events

    @property
    def n_censored(self):
        """Number censored from each event time up to the next."""
        return self._result.params.n_censored

    @property
    def se(self):
        """Greenwood standard error of S(t)."""
        return self._result.params.se

    @property
    def ci_lower(self):
        return self._result.params.ci_lower

    @property
    def ci_upper(self):
        return self._result.params.ci_upper

    @property
    def conf_level(self) -> float:
        return self._result.params.conf_level

    @property
    def conf_type(self) -> str:
        return self._result.params.conf_type

    @property
    def max_time(self) -> float:
        """Largest observed time; the curve is defined up to here."""
        return self._result.params.max_time

    @property
    def n_observations(self) -> int:
        return self._result.params.n_observations

    @property
    def n_events_total(self) -> int:
        return self._result.params.n_events_total

    @property
    def label(self) -> str | None:
        """Cohort name, when estimated from a Cohort."""
        return self._result.info.get('label')

    @property
    def design(self) -> SurvivalDesign:
        """The time/event data behind this curve."""
        return self._design

    @property
    def median_survival(self) -> float | None:
        """Median survival time (smallest t where S(t) <= 0.5)."""
        if len(self.survival) == 0:
            return None
        idx = self.survival <= 0.5
        if not idx.any():
            return None
        return float(self.time[idx][0])

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def timing(self):
        return self._result.timing

    def survival_at(self, t: ArrayLike) -> NDArray | float:
        """Evaluate the right-continuous step function S(t).

        S is 1 before the first event time and holds its last value up to
        max_time. Beyond max_time there is no follow-up and NaN is
        returned, as it is for NaN input. Scalars in, scalar out.
        """
        t_arr = np.asarray(t, dtype=np.float64)
        idx = np.searchsorted(self.time, t_arr, side='right') - 1
        steps = np.concatenate(([1.0], self.survival))
        values = steps[idx + 1]
        values = np.where(np.isnan(t_arr) | (t_arr > self.max_time), np.nan, values)
        if values.ndim == 0:
            return float(values)
        return values

    def step_points(self) -> tuple[NDArray, NDArray]:
        """(x, y) vertices of the curve for step plotting.

        Starts at (0, 1), one vertex per event time, and ends at
        (max_time, last S) to show the censored tail.
        """
        x = np.concatenate(([0.0], self.time, [self.max_time]))
        last = self.survival[-1] if len(self.survival) else 1.0
        y = np.concatenate(([1.0], self.survival, [last]))
        return x, y

    def summary(self) -> str:
        """R-style summary of Kaplan-Meier fit."""
        lines = []
        title = f"kaplan_meier(): {self.label}" if self.label else "kaplan_meier()"
        lines.append(f"Call: {title}")
        lines.append("")
        lines.append(
            f"  n={self.n_observations}, "
            f"events={self.n_events_total}"
        )
        lines.append("")

        median = self.median_survival
        median_str = f"{median:.4g}" if median is not None else "NA"
        lines.append(f"  median survival = {median_str}")
        lines.append("")

        ci_pct = int(round(self.conf_level * 100))
        lines.append(
            f"  {'time':>8s}  {'n.risk':>8s}  {'n.event':>8s}  "
            f"{'survival':>10s}  {'se':>10s}  "
            f"{f'lower {ci_pct}%':>10s}  {f'upper {ci_pct}%':>10s}"
        )

        m = len(self.time)
        show = min(m, 20)
        for i in range(show):
            lines.append(
                f"  {self.time[i]:8.4g}  {self.n_risk[i]:8.0f}  "
                f"{self.n_events[i]:8.0f}  "
                f"{self.survival[i]:10.6f}  {self.se[i]:10.6f}  "
                f"{self.ci_lower[i]:10.6f}  {self.ci_upper[i]:10.6f}"
            )
        if m > 20:
            lines.append(f"  ... ({m - 20} more rows)")

        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"KMSolution(n={self.n_observations}, "
            f"events={self.n_events_total}, "
            f"median={self.median_survival})"
        )


class LogRankSolution:
    """Two-group log-rank test solution.

    Properties mirror R's survdiff() output.
    """

    __slots__ = ('_result',)

    def __init__(self, _result: Result[LogRankParams]) -> None:
        self._result = _result

    @property
    def statistic(self) -> float:
        return self._result.params.statistic

    @property
    def df(self) -> int:
        return self._result.params.df

    @property
    def p_value(self) -> float:
        return self._result.params.p_value

    @property
    def variance(self) -> float:
        return self._result.params.variance

    @property
    def observed(self):
        return self._result.params.observed

    @property
    def expected(self):
        return self._result.params.expected

    @property
    def n_per_group(self):
        return self._result.params.n_per_group

    @property
    def group_labels(self) -> tuple:
        return self._result.params.group_labels

    @property
    def n_event_times(self) -> int:
        return self._result.params.n_event_times

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def timing(self):
        return self._result.timing

    def summary(self) -> str:
        """R-style summary of log-rank test."""
        lines = []
        lines.append("Call: survdiff()")
        lines.append("")

        lines.append(
            f"  {'':>12s}  {'N':>6s}  {'Observed':>10s}  "
            f"{'Expected':>10s}  {'(O-E)^2/E':>10s}"
        )
        for i, label in enumerate(self.group_labels):
            o, e = self.observed[i], self.expected[i]
            oe = (o - e) ** 2 / e if e > 0 else 0.0
            lines.append(
                f"  {str(label):>12s}  {self.n_per_group[i]:6.0f}  "
                f"{o:10.1f}  {e:10.1f}  {oe:10.3f}"
            )

        lines.append("")
        lines.append(
            f"  Chisq= {self.statistic:.4f} on {self.df} degrees of freedom, "
            f"p= {self.p_value:.4g}"
        )

        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"LogRankSolution(chisq={self.statistic:.4f}, "
            f"df={self.df}, p={self.p_value:.4g})"
        )
