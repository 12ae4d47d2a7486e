"""
Kaplan-Meier product-limit estimator.

Matches R's survival::survfit(Surv(time, event) ~ 1):
- Product-limit survival estimate: S(t_i) = S(t_{i-1}) * (1 - d_i / n_i)
- Greenwood variance: Var(S(t)) = S(t)^2 * sum(d_j / (n_j * (n_j - d_j)))
- Confidence intervals via log, plain, or log-log transformation

Ties are aggregated: all rows sharing an event time form one step, and a
row censored exactly at an event time is still at risk at that time.

References:
    Kaplan, E. L., & Meier, P. (1958). Nonparametric estimation from
        incomplete observations. JASA, 53(282), 457-481.
    Greenwood, M. (1926). The natural duration of cancer. Reports on
        Public Health and Medical Subjects, 33.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray
from scipy import stats

from cnasurv.survival._common import KMParams


def kaplan_meier_fit(
    time: NDArray,
    event: NDArray,
    conf_level: float,
    conf_type: str,
) -> KMParams:
    """Compute Kaplan-Meier survival curve.

    Parameters
    ----------
    time : NDArray
        (n,) time to event or censoring.
    event : NDArray
        (n,) event indicator (1=event, 0=censored).
    conf_level : float
        Confidence level for CI (e.g. 0.95).
    conf_type : str
        CI type: "log" (default, matches R), "plain", "log-log".

    Returns
    -------
    KMParams
    """
    n_total = len(time)
    is_event = event == 1
    max_time = float(time.max()) if n_total else 0.0

    # d_i: unique() groups tied event times into a single step
    event_times, n_events = np.unique(time[is_event], return_counts=True)
    n_events = n_events.astype(np.float64)

    if len(event_times) == 0:
        empty = np.array([], dtype=np.float64)
        return KMParams(
            time=empty,
            survival=empty,
            n_risk=empty,
            n_events=empty,
            n_censored=empty,
            se=empty,
            ci_lower=empty,
            ci_upper=empty,
            conf_level=conf_level,
            conf_type=conf_type,
            max_time=max_time,
            n_observations=n_total,
            n_events_total=0,
        )

    # n_i: rows with time >= t_i
    sorted_time = np.sort(time)
    n_risk = (n_total - np.searchsorted(sorted_time, event_times, side="left")).astype(
        np.float64
    )

    # Censored rows leaving the risk set between consecutive steps
    censored_time = np.sort(time[~is_event])
    bounds = np.append(event_times, np.inf)
    cum_censored = np.searchsorted(censored_time, bounds, side="left")
    n_censored = np.diff(cum_censored).astype(np.float64)

    survival = np.cumprod(1.0 - n_events / n_risk)

    # Greenwood sum; a step where everyone at risk fails adds nothing
    # (S is 0 from there on)
    denom = n_risk * (n_risk - n_events)
    terms = np.divide(n_events, denom, out=np.zeros_like(denom), where=denom > 0)
    greenwood = np.cumsum(terms)
    se = survival * np.sqrt(greenwood)

    z = stats.norm.ppf((1.0 + conf_level) / 2.0)
    ci_lower, ci_upper = _confidence_band(survival, greenwood, z, conf_type)

    return KMParams(
        time=event_times,
        survival=survival,
        n_risk=n_risk,
        n_events=n_events,
        n_censored=n_censored,
        se=se,
        ci_lower=ci_lower,
        ci_upper=ci_upper,
        conf_level=conf_level,
        conf_type=conf_type,
        max_time=max_time,
        n_observations=n_total,
        n_events_total=int(n_events.sum()),
    )


def _confidence_band(
    survival: NDArray,
    greenwood: NDArray,
    z: float,
    conf_type: str,
) -> tuple[NDArray, NDArray]:
    """Pointwise CI for S(t).

    ``greenwood`` is the cumulative Greenwood sum, i.e. Var(log S(t)).
    Where the transformation is undefined (S = 0 for "log", S in {0, 1}
    for "log-log") the band is [0, 1].

    Returns
    -------
    (ci_lower, ci_upper) clipped to [0, 1]
    """
    sd_log = np.sqrt(greenwood)

    if conf_type == "plain":
        se = survival * sd_log
        lower = survival - z * se
        upper = survival + z * se
        defined = np.ones_like(survival, dtype=bool)

    elif conf_type == "log":
        defined = survival > 0
        lower = survival * np.exp(-z * sd_log)
        upper = survival * np.exp(z * sd_log)

    elif conf_type == "log-log":
        defined = (survival > 0) & (survival < 1)
        with np.errstate(divide="ignore", invalid="ignore"):
            log_s = np.log(survival)
            sd_loglog = sd_log / np.abs(log_s)
            lower = survival ** np.exp(z * sd_loglog)
            upper = survival ** np.exp(-z * sd_loglog)

    else:
        raise ValueError(
            f"Unknown conf_type '{conf_type}'. "
            f"Choose from 'log', 'plain', 'log-log'."
        )

    lower = np.where(defined, np.clip(lower, 0.0, 1.0), 0.0)
    upper = np.where(defined, np.clip(upper, 0.0, 1.0), 1.0)
    return lower, upper
