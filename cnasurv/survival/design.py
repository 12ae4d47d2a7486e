"""
SurvivalDesign: immutable container for time-to-event data.

Wraps time and event indicator. Validates inputs at construction time;
all downstream code trusts clean data.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from cnasurv.core.exceptions import ValidationError
from cnasurv.core.validation import (
    check_array,
    check_consistent_length,
    check_finite,
)


@dataclass(frozen=True)
class SurvivalDesign:
    """Immutable survival data container.

    Parameters
    ----------
    time : NDArray
        Time to event or censoring. Non-negative and finite.
    event : NDArray
        Event indicator: 1 = event observed, 0 = censored.
    """

    time: NDArray
    event: NDArray

    @classmethod
    def for_survival(cls, time, event) -> SurvivalDesign:
        """Create and validate survival data.

        An empty sample is allowed; it describes an empty cohort.

        Raises
        ------
        ValidationError
            If lengths differ, times are negative or non-finite, or
            events are not 0/1.
        """
        time = check_array(time, "time").copy()
        event = check_array(event, "event").copy()

        check_consistent_length(time, event, names=("time", "event"))
        check_finite(time, "time")

        if np.any(time < 0):
            raise ValidationError(
                f"time: must be non-negative, got minimum {time.min()}"
            )

        bad = ~np.isin(event, [0.0, 1.0])
        if np.any(bad):
            raise ValidationError(
                f"event: must contain only 0 and 1, "
                f"got unique values: {np.unique(event[bad])}"
            )

        time.flags.writeable = False
        event.flags.writeable = False
        return cls(time=time, event=event)

    @property
    def n(self) -> int:
        """Number of observations."""
        return len(self.time)

    @property
    def n_events(self) -> int:
        """Number of observed events."""
        return int(np.sum(self.event))
