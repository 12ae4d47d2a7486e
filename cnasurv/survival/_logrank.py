"""
Two-group log-rank test.

Matches R's survival::survdiff(Surv(time, event) ~ group) for two groups:

    At each distinct event time t_i pooled over both groups:
        n_i = n_Ai + n_Bi           subjects at risk (time >= t_i)
        d_i = d_Ai + d_Bi           events at t_i
        e_Ai = d_i * n_Ai / n_i     expected events in A under H0
        v_i  = d_i (n_Ai/n_i)(1 - n_Ai/n_i)(n_i - d_i)/(n_i - 1)
                                    hypergeometric variance, 0 if n_i <= 1

    chisq = (sum d_Ai - sum e_Ai)^2 / sum v_i   on 1 df
    p     = P(chi2_1 > chisq), evaluated with the survival function

The statistic is undefined when the variance is zero; that case raises
NotComputableError instead of returning a p-value.

References:
    Mantel, N. (1966). Evaluation of survival data and two new rank order
        statistics arising in its consideration. Cancer Chemother Rep, 50.
    Peto, R. & Peto, J. (1972). Asymptotically efficient rank invariant
        test procedures. JRSS A, 135(2), 185-207.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray
from scipy import stats

from cnasurv.core.exceptions import NotComputableError
from cnasurv.survival._common import LogRankParams


def _at_risk(sorted_time: NDArray, at: NDArray) -> NDArray:
    """Count of sorted_time >= each value of ``at``."""
    return (len(sorted_time) - np.searchsorted(sorted_time, at, side="left")).astype(
        np.float64
    )


def _events_at(sorted_event_time: NDArray, at: NDArray) -> NDArray:
    """Count of sorted_event_time == each value of ``at``."""
    hi = np.searchsorted(sorted_event_time, at, side="right")
    lo = np.searchsorted(sorted_event_time, at, side="left")
    return (hi - lo).astype(np.float64)


def logrank_test(
    time: NDArray,
    event: NDArray,
    in_a: NDArray,
    labels: tuple,
) -> LogRankParams:
    """Compute the two-group log-rank test.

    Parameters
    ----------
    time : NDArray
        (n,) time to event or censoring.
    event : NDArray
        (n,) event indicator (1=event, 0=censored).
    in_a : NDArray
        (n,) boolean membership of the reference group A.
    labels : tuple
        (label_A, label_B) for reporting.

    Returns
    -------
    LogRankParams

    Raises
    ------
    NotComputableError
        If the variance of O_A - E_A is zero.
    """
    is_event = event == 1
    in_b = ~in_a

    event_times = np.unique(time[is_event])

    n_a = _at_risk(np.sort(time[in_a]), event_times)
    n_b = _at_risk(np.sort(time[in_b]), event_times)
    d_a = _events_at(np.sort(time[in_a & is_event]), event_times)
    d_b = _events_at(np.sort(time[in_b & is_event]), event_times)

    n = n_a + n_b
    d = d_a + d_b

    # n >= d >= 1 at every pooled event time, so n > 0
    frac_a = n_a / n
    expected_a = d * frac_a
    expected_b = d * (n_b / n)

    informative = n > 1
    dof_denom = np.where(informative, n - 1.0, 1.0)
    var_terms = np.where(
        informative,
        d * frac_a * (1.0 - frac_a) * (n - d) / dof_denom,
        0.0,
    )

    observed = np.array([d_a.sum(), d_b.sum()], dtype=np.float64)
    expected = np.array([expected_a.sum(), expected_b.sum()], dtype=np.float64)
    variance = float(var_terms.sum())

    if not variance > 0:
        raise NotComputableError(
            f"log-rank variance is zero over {len(event_times)} pooled event "
            f"time(s); groups {labels[0]!r} vs {labels[1]!r} cannot be compared",
            observed=tuple(observed.tolist()),
            expected=tuple(expected.tolist()),
            variance=variance,
        )

    df = 1
    statistic = float((observed[0] - expected[0]) ** 2 / variance)
    p_value = float(stats.chi2.sf(statistic, df))

    return LogRankParams(
        statistic=statistic,
        df=df,
        p_value=p_value,
        variance=variance,
        observed=observed,
        expected=expected,
        n_per_group=np.array([np.sum(in_a), np.sum(in_b)], dtype=np.float64),
        group_labels=tuple(labels),
        n_event_times=len(event_times),
    )
