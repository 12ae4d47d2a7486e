"""
Payloads for the cohort builder.

PatientRecord and Cohort are frozen so a cohort cannot change between the
Kaplan-Meier fit and the log-rank test that consume it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import numpy as np
from numpy.typing import NDArray


GAIN_LABEL = "Gain"
NO_GAIN_LABEL = "No Gain"

# Drop reasons, checked in this order for each row
DROP_MISSING_MARKER = "missing_marker"
DROP_MISSING_TIME = "missing_time"
DROP_MISSING_EVENT = "missing_event"


@dataclass(frozen=True)
class PatientRecord:
    """One patient with a defined time, event and marker value."""

    patient_id: Any
    time: float
    event: bool
    marker: float | str


@dataclass(frozen=True)
class Cohort:
    """Named group of patient records, ordered by time ascending."""

    name: str
    records: tuple[PatientRecord, ...] = ()

    @classmethod
    def from_records(cls, name: str, records) -> Cohort:
        """Build a cohort, sorting records by time (stable)."""
        return cls(name=name, records=tuple(sorted(records, key=lambda r: r.time)))

    @property
    def n(self) -> int:
        return len(self.records)

    @property
    def n_events(self) -> int:
        return sum(1 for r in self.records if r.event)

    @property
    def time(self) -> NDArray:
        """(n,) survival times."""
        return np.array([r.time for r in self.records], dtype=np.float64)

    @property
    def event(self) -> NDArray:
        """(n,) event indicators as 0.0/1.0."""
        return np.array([1.0 if r.event else 0.0 for r in self.records], dtype=np.float64)

    @property
    def patient_ids(self) -> tuple[Any, ...]:
        return tuple(r.patient_id for r in self.records)

    def __len__(self) -> int:
        return len(self.records)

    def __repr__(self) -> str:
        return f"Cohort(name={self.name!r}, n={self.n}, events={self.n_events})"


@dataclass(frozen=True)
class CohortSplit:
    """Both cohorts for one marker, with drop diagnostics."""

    marker: str
    gain: Cohort
    no_gain: Cohort
    n_input: int
    dropped_by_reason: dict[str, int] = field(default_factory=dict)

    @property
    def n_dropped(self) -> int:
        return sum(self.dropped_by_reason.values())

    @property
    def sizes(self) -> tuple[int, int]:
        """(n_gain, n_no_gain)."""
        return self.gain.n, self.no_gain.n
