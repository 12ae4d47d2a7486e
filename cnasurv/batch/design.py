"""
BatchDesign: immutable, validated configuration of one batch run.

Caller mistakes (empty or duplicated marker list, bad thresholds) are
rejected here, before any marker is processed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from cnasurv.cohort.solvers import is_gain
from cnasurv.core.exceptions import ValidationError
from cnasurv.core.validation import check_positive_int, check_probability
from cnasurv.survival.solvers import DEFAULT_CONF_LEVEL


DEFAULT_MIN_GROUP_SIZE = 5


@dataclass(frozen=True)
class BatchDesign:
    """Batch run configuration.

    Parameters
    ----------
    markers : tuple of str
        Markers to evaluate, in reporting order.
    min_group_size : int
        Smallest cohort size (per group) that is tested.
    predicate : callable
        Gain classifier passed to build_cohorts.
    categorical : bool
        Keep marker values as labels instead of floats.
    conf_level : float
        Confidence level of the Kaplan-Meier bands.
    workers : int
        Threads used to evaluate markers; 1 runs inline.
    """

    markers: tuple[str, ...]
    min_group_size: int
    predicate: Callable[[Any], bool]
    categorical: bool
    conf_level: float
    workers: int

    @classmethod
    def for_batch(
        cls,
        markers,
        min_group_size: int = DEFAULT_MIN_GROUP_SIZE,
        *,
        predicate: Callable[[Any], bool] = is_gain,
        categorical: bool = False,
        conf_level: float = DEFAULT_CONF_LEVEL,
        workers: int = 1,
    ) -> BatchDesign:
        """Create and validate a batch configuration.

        Raises
        ------
        ValidationError
            If markers is empty, a string, contains duplicates or
            non-string names, or any threshold is out of range.
        """
        if isinstance(markers, str):
            raise ValidationError(
                f"markers must be a sequence of names, got the string {markers!r}"
            )
        markers = tuple(markers)

        if len(markers) == 0:
            raise ValidationError("markers must contain at least one marker")

        non_str = [m for m in markers if not isinstance(m, str)]
        if non_str:
            raise ValidationError(f"markers must be strings, got {non_str[:5]}")

        seen: set[str] = set()
        duplicates = []
        for m in markers:
            if m in seen:
                duplicates.append(m)
            seen.add(m)
        if duplicates:
            raise ValidationError(f"markers contains duplicates: {duplicates}")

        min_group_size = check_positive_int(min_group_size, "min_group_size")
        workers = check_positive_int(workers, "workers")
        check_probability(conf_level, "conf_level")

        if not callable(predicate):
            raise ValidationError(
                f"predicate must be callable, got {type(predicate).__name__}"
            )

        return cls(
            markers=markers,
            min_group_size=min_group_size,
            predicate=predicate,
            categorical=bool(categorical),
            conf_level=float(conf_level),
            workers=workers,
        )

    @property
    def n_markers(self) -> int:
        return len(self.markers)
