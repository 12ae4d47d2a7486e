"""
Public API for survival analysis.

    kaplan_meier(time, event) -> KMSolution
    estimate(cohort) -> KMSolution
    survdiff(time, event, group) -> LogRankSolution
    compare(a, b) -> LogRankSolution

Each function validates inputs, creates a SurvivalDesign, runs the
estimator, and wraps the Result in a Solution.
"""

from __future__ import annotations

from typing import Literal, Union

import numpy as np
from numpy.typing import NDArray

from cnasurv.cohort._common import Cohort
from cnasurv.core.compute.timing import Timer
from cnasurv.core.exceptions import ValidationError
from cnasurv.core.result import Result
from cnasurv.core.validation import check_probability
from cnasurv.survival._km import kaplan_meier_fit
from cnasurv.survival._logrank import logrank_test
from cnasurv.survival.design import SurvivalDesign
from cnasurv.survival.solution import KMSolution, LogRankSolution


DEFAULT_CONF_LEVEL = 0.95

ConfType = Literal["log", "plain", "log-log"]
SurvivalInput = Union[Cohort, KMSolution]


def _fit(
    design: SurvivalDesign,
    conf_level: float,
    conf_type: str,
    label: str | None,
) -> KMSolution:
    check_probability(conf_level, "conf_level")

    if conf_type not in ("log", "plain", "log-log"):
        raise ValidationError(
            f"conf_type must be 'log', 'plain', or 'log-log', "
            f"got '{conf_type}'"
        )

    timer = Timer()
    timer.start()

    params = kaplan_meier_fit(
        design.time, design.event,
        conf_level=conf_level,
        conf_type=conf_type,
    )

    timer.stop()

    warnings_list = []
    if params.n_observations == 0:
        warnings_list.append("no observations: survival is 1 everywhere")
    elif params.n_events_total == 0:
        warnings_list.append("no events: survival is 1 everywhere")

    info = {"method": "Kaplan-Meier"}
    if label is not None:
        info["label"] = label

    result = Result(
        params=params,
        info=info,
        timing=timer.result(),
        backend_name="cpu_km",
        warnings=tuple(warnings_list),
    )

    return KMSolution(_result=result, _design=design)


def kaplan_meier(
    time,
    event,
    *,
    conf_level: float = DEFAULT_CONF_LEVEL,
    conf_type: ConfType = "log",
    label: str | None = None,
) -> KMSolution:
    """Kaplan-Meier survival curve estimation.

    Matches R's survival::survfit(Surv(time, event) ~ 1).

    Parameters
    ----------
    time : array-like
        Time to event or censoring.
    event : array-like
        Event indicator (1=event, 0=censored).
    conf_level : float
        Confidence level for CI (default 0.95).
    conf_type : str
        CI transformation: "log" (R default), "plain", "log-log".
    label : str or None
        Name carried into summaries and log-rank group labels.

    Returns
    -------
    KMSolution
    """
    design = SurvivalDesign.for_survival(time, event)
    return _fit(design, conf_level, conf_type, label)


def estimate(
    cohort: Cohort,
    *,
    conf_level: float = DEFAULT_CONF_LEVEL,
    conf_type: ConfType = "log",
) -> KMSolution:
    """Kaplan-Meier curve of one cohort, labelled with the cohort name.

    An empty or all-censored cohort yields an empty curve (S = 1).
    """
    if not isinstance(cohort, Cohort):
        raise ValidationError(
            f"estimate() expects a Cohort, got {type(cohort).__name__}"
        )
    design = SurvivalDesign.for_survival(cohort.time, cohort.event)
    return _fit(design, conf_level, conf_type, cohort.name)


def _run_logrank(
    time: NDArray,
    event: NDArray,
    in_a: NDArray,
    labels: tuple,
    method: str,
) -> LogRankSolution:
    timer = Timer()
    timer.start()

    params = logrank_test(time, event, in_a, labels)

    timer.stop()

    result = Result(
        params=params,
        info={"method": method},
        timing=timer.result(),
        backend_name="cpu_logrank",
        warnings=(),
    )

    return LogRankSolution(_result=result)


def survdiff(time, event, group) -> LogRankSolution:
    """Two-group log-rank test.

    Matches R's survival::survdiff(Surv(time, event) ~ group) when group
    has two levels. Groups are ordered by sorted label; the first label
    is the reference group A.

    Parameters
    ----------
    time : array-like
        Time to event or censoring.
    event : array-like
        Event indicator (1=event, 0=censored).
    group : array-like
        Group labels; exactly two distinct values.

    Returns
    -------
    LogRankSolution

    Raises
    ------
    ValidationError
        If group does not have exactly two levels or its length differs.
    NotComputableError
        If the log-rank variance is zero.
    """
    design = SurvivalDesign.for_survival(time, event)
    group = np.asarray(group).ravel()

    if len(group) != design.n:
        raise ValidationError(
            f"group must have {design.n} elements to match time, "
            f"got {len(group)}"
        )

    labels = np.unique(group)
    if len(labels) != 2:
        raise ValidationError(
            f"log-rank test needs exactly 2 groups, got {len(labels)}: "
            f"{labels.tolist()}"
        )

    return _run_logrank(
        design.time, design.event,
        in_a=group == labels[0],
        labels=tuple(labels.tolist()),
        method="Log-rank test",
    )


def _as_design(obj: SurvivalInput, name: str) -> tuple[SurvivalDesign, str | None]:
    if isinstance(obj, KMSolution):
        return obj.design, obj.label
    if isinstance(obj, Cohort):
        return SurvivalDesign.for_survival(obj.time, obj.event), obj.name
    raise ValidationError(
        f"{name}: expected a Cohort or KMSolution, got {type(obj).__name__}"
    )


def compare(a: SurvivalInput, b: SurvivalInput) -> LogRankSolution:
    """Log-rank comparison of two cohorts (or two fitted curves).

    ``a`` is the reference group. Swapping the arguments gives the same
    statistic and p-value.

    Raises
    ------
    NotComputableError
        If the log-rank variance is zero, e.g. neither group has events.
    """
    design_a, label_a = _as_design(a, "a")
    design_b, label_b = _as_design(b, "b")

    if label_a is None or label_b is None or label_a == label_b:
        label_a, label_b = "A", "B"

    time = np.concatenate((design_a.time, design_b.time))
    event = np.concatenate((design_a.event, design_b.event))
    in_a = np.zeros(len(time), dtype=bool)
    in_a[:design_a.n] = True

    return _run_logrank(
        time, event, in_a,
        labels=(label_a, label_b),
        method="Log-rank test",
    )
