"""
Parameter payloads for survival analysis results.

Each dataclass is a frozen payload carried inside a Result[P] envelope.
"""

from __future__ import annotations

from dataclasses import dataclass

from numpy.typing import NDArray


@dataclass(frozen=True)
class KMParams:
    """Kaplan-Meier survival curve parameters.

    One entry per distinct event time. An all-censored (or empty) sample
    has empty arrays and S(t) = 1 everywhere.
    """

    time: NDArray                # (m,) distinct event times, ascending
    survival: NDArray            # (m,) S(t) at each event time
    n_risk: NDArray              # (m,) number with time >= t
    n_events: NDArray            # (m,) events at t
    n_censored: NDArray          # (m,) censored in [t_i, t_{i+1})
    se: NDArray                  # (m,) Greenwood standard error
    ci_lower: NDArray            # (m,) lower CI for S(t)
    ci_upper: NDArray            # (m,) upper CI for S(t)
    conf_level: float
    conf_type: str               # "log", "plain" or "log-log"
    max_time: float              # largest observed time, events or censored
    n_observations: int
    n_events_total: int


@dataclass(frozen=True)
class LogRankParams:
    """Two-group log-rank test parameters.

    observed/expected are ordered like group_labels; group_labels[0] is
    the reference group whose O - E enters the statistic.
    """

    statistic: float             # (O_A - E_A)^2 / V
    df: int                      # n_groups - 1
    p_value: float               # chi-square upper tail
    variance: float              # V, variance of O_A - E_A
    observed: NDArray            # (2,) observed events per group
    expected: NDArray            # (2,) expected events per group
    n_per_group: NDArray         # (2,) subjects per group
    group_labels: tuple          # (label_A, label_B)
    n_event_times: int           # pooled distinct event times
