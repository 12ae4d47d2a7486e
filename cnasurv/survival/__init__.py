"""
Survival analysis.

Public API:
    kaplan_meier(time, event) -> KMSolution
    estimate(cohort) -> KMSolution
    survdiff(time, event, group) -> LogRankSolution
    compare(a, b) -> LogRankSolution
"""

from cnasurv.survival.solvers import (
    DEFAULT_CONF_LEVEL,
    compare,
    estimate,
    kaplan_meier,
    survdiff,
)
from cnasurv.survival.solution import KMSolution, LogRankSolution
from cnasurv.survival.design import SurvivalDesign

__all__ = [
    "kaplan_meier",
    "estimate",
    "survdiff",
    "compare",
    "KMSolution",
    "LogRankSolution",
    "SurvivalDesign",
    "DEFAULT_CONF_LEVEL",
]
